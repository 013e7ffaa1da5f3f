# trucks/models/__init__.py

from .truck import COMMITTED_STATUSES, Truck, TruckStatus

__all__ = ["Truck", "TruckStatus", "COMMITTED_STATUSES"]
