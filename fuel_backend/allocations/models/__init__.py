# allocations/models/__init__.py

from .allocation import Allocation, ProductCategory

__all__ = ["Allocation", "ProductCategory"]
