# trucks/services/stats_service.py

"""
DASHBOARD STATISTICS (READ-ONLY)

Recomputed on demand from Truck + Allocation state; never cached.

- counts: total / generated (GENERATED + LOADED) / loaded / pending / cancelled
- committed volume per category (GENERATED + LOADED trucks)
- allocation balance per category with a low-balance flag
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.db.models import Count, Q, Sum
from django.db.models.functions import Trim, Upper

from allocations.models import Allocation, ProductCategory
from allocations.services.categories import AGO_PRODUCTS
from trucks.models import COMMITTED_STATUSES, Truck, TruckStatus

ZERO = Decimal("0.00")
TWOPLACES = Decimal("0.01")


def _volume(value) -> Decimal:
    # SQLite sums DecimalField as REAL
    return Decimal(value or ZERO).quantize(TWOPLACES)


def _low_ratio() -> Decimal:
    return Decimal(str(getattr(settings, "FUEL_LOW_ALLOCATION_RATIO", "0.2")))


def _allocation_summary(company_id=None) -> dict:
    qs = Allocation.objects.all()
    if company_id is not None:
        qs = qs.filter(company_id=company_id)

    rows = {
        row["product_type"]: row
        for row in qs.values("product_type").annotate(
            initial=Sum("initial_volume"),
            remaining=Sum("remaining_volume"),
        )
    }

    ratio = _low_ratio()
    summary = {}
    for category in ProductCategory.values:
        row = rows.get(category) or {}
        initial = _volume(row.get("initial"))
        remaining = _volume(row.get("remaining"))
        summary[category] = {
            "initial_volume": initial,
            "remaining_volume": remaining,
            "low": initial > ZERO and (remaining / initial) <= ratio,
        }
    return summary


def compute_truck_stats(*, company_id=None) -> dict:
    qs = Truck.objects.all()
    if company_id is not None:
        qs = qs.filter(company_id=company_id)

    committed = Q(status__in=COMMITTED_STATUSES)
    is_ago = Q(product_key__in=AGO_PRODUCTS)

    agg = qs.annotate(product_key=Upper(Trim("product"))).aggregate(
        total=Count("id"),
        generated=Count("id", filter=committed),
        loaded=Count("id", filter=Q(status=TruckStatus.LOADED)),
        pending=Count("id", filter=Q(status=TruckStatus.PENDING)),
        cancelled=Count("id", filter=Q(status=TruckStatus.CANCELLED)),
        committed_volume=Sum("quantity", filter=committed),
        ago_volume=Sum("quantity", filter=committed & is_ago),
    )

    committed_volume = _volume(agg["committed_volume"])
    ago_generated = _volume(agg["ago_volume"])

    return {
        "total": agg["total"],
        "generated": agg["generated"],
        "loaded": agg["loaded"],
        "pending": agg["pending"],
        "cancelled": agg["cancelled"],
        "ago_generated": ago_generated,
        "pms_generated": committed_volume - ago_generated,
        "allocations": _allocation_summary(company_id),
    }
