# allocations/services/categories.py

"""
PRODUCT CATEGORY RESOLUTION

A truck carries a free-text product ("Diesel", "AGO", "Gasoline", ...).
Allocations are tracked per coarse category, so every product is folded
into exactly one of AGO / PMS. The mapping is total: it never fails.
"""

from __future__ import annotations

from allocations.models import ProductCategory
from common.exceptions import InvalidInputError

AGO_PRODUCTS = frozenset({"AGO", "DIESEL"})


def resolve_category(product) -> str:
    """
    >>> resolve_category("diesel")
    'AGO'
    >>> resolve_category("Gasoline")
    'PMS'
    """
    normalized = str(product or "").strip().upper()
    if normalized in AGO_PRODUCTS:
        return ProductCategory.AGO.value
    return ProductCategory.PMS.value


def normalize_category(value) -> str:
    """
    Strict parser for callers that name a category directly (allocation targets).
    Unlike resolve_category, unknown values are rejected.
    """
    normalized = str(value or "").strip().upper()
    if normalized not in ProductCategory.values:
        raise InvalidInputError(
            f"product_type must be one of {', '.join(ProductCategory.values)}"
        )
    return normalized
