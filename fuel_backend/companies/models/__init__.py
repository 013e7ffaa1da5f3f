# companies/models/__init__.py

from .company import Company

__all__ = ["Company"]
