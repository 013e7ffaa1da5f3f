# trucks/services/truck_service.py

"""
TRUCK RECORD STORE (APPLICATION SERVICE)

Purpose:
- CRUD for truck records, scoped by company.
- Bulk replace-all import (destructive, all-or-nothing).
- Duplicate trailer detection for import tooling.

Quantity unit inference:
- Imported spreadsheets mix liters and thousands of liters. Any supplied
  quantity below FUEL_QUANTITY_THOUSANDS_BELOW (default 100) is read as
  thousands and multiplied by 1000. Applies to insert and import only;
  edits and backup restores store the value as given.

Ledger note:
- update_truck() applies the patch directly. Changing quantity or status of a
  committed truck does NOT reconcile the allocation ledger.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from decimal import Decimal

from django.conf import settings
from django.db import transaction
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from allocations.services.ledger import to_volume
from audit.services.recorder import record_audit
from common.exceptions import InvalidInputError, NotFoundError
from companies.services.registry import get_company, resolve_company
from trucks.models import Truck, TruckStatus

logger = logging.getLogger(__name__)

THOUSAND = Decimal("1000")

TEXT_FIELDS = (
    "truck_trailer",
    "product",
    "transporter",
    "driver_name",
    "id_number",
    "phone_number",
    "destination",
    "loading_point",
)

REQUIRED_TEXT_FIELDS = ("truck_trailer", "product")

EDITABLE_FIELDS = frozenset(
    TEXT_FIELDS
    + (
        "quantity",
        "status",
        "permit_no",
        "permit_date",
        "at20",
        "lo_company",
        "loading_date",
        "bol_no",
    )
)


# ============================================================
# NORMALIZERS
# ============================================================


def _thousands_below() -> Decimal:
    return Decimal(str(getattr(settings, "FUEL_QUANTITY_THOUSANDS_BELOW", 100)))


def normalize_quantity(value, *, infer_units: bool = True) -> Decimal:
    """
    Parse a quantity in liters. Must be > 0.

    >>> normalize_quantity("36")
    Decimal('36000.00')
    """
    qty = to_volume(value, field="quantity")
    if qty <= 0:
        raise InvalidInputError("quantity must be greater than zero")

    if infer_units and qty < _thousands_below():
        qty = qty * THOUSAND
    return qty


def parse_permit_date(value):
    """Accept datetime, 'YYYY-MM-DD HH:MM:SS' or 'YYYY-MM-DD'. None -> None."""
    if value is None or value == "":
        return None

    if hasattr(value, "hour"):
        dt = value
    elif hasattr(value, "year"):
        dt = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        try:
            dt = parse_datetime(text)
            d = parse_date(text) if dt is None else None
        except ValueError as exc:
            raise InvalidInputError("permit_date is not a valid date") from exc
        if dt is None:
            if d is None:
                raise InvalidInputError("permit_date must be a date or datetime")
            dt = datetime(d.year, d.month, d.day)

    if settings.USE_TZ and timezone.is_naive(dt):
        dt = timezone.make_aware(dt)
    return dt


def parse_loading_date(value):
    if value is None or value == "":
        return None

    if hasattr(value, "year"):
        return value.date() if hasattr(value, "hour") else value

    try:
        d = parse_date(str(value).strip())
    except ValueError as exc:
        raise InvalidInputError("loading_date is not a valid date") from exc
    if d is None:
        raise InvalidInputError("loading_date must be a date (YYYY-MM-DD)")
    return d


def _clean_row(data: dict, *, row: int | None = None) -> dict:
    prefix = f"Row {row}: " if row is not None else ""

    if not isinstance(data, dict):
        raise InvalidInputError(f"{prefix}truck must be an object")

    cleaned = {}
    for field in TEXT_FIELDS:
        cleaned[field] = str(data.get(field) or "").strip()

    missing = [f for f in REQUIRED_TEXT_FIELDS if not cleaned[f]]
    if missing:
        raise InvalidInputError(f"{prefix}missing required field(s): {', '.join(missing)}")

    try:
        cleaned["quantity"] = normalize_quantity(data.get("quantity"))
    except InvalidInputError as exc:
        raise InvalidInputError(f"{prefix}{exc.message}") from exc

    return cleaned


# ============================================================
# READS
# ============================================================


def list_trucks(*, company_id=None, status=None):
    qs = Truck.objects.all()
    if company_id is not None:
        qs = qs.filter(company_id=company_id)
    if status is not None:
        qs = qs.filter(status=status)
    return qs.order_by("id")


def get_truck(truck_id) -> Truck:
    try:
        return Truck.objects.get(pk=truck_id)
    except (Truck.DoesNotExist, ValueError, TypeError) as exc:
        raise NotFoundError(f"Truck {truck_id} not found") from exc


def lock_truck(truck_id) -> Truck:
    """Row-lock a truck for the rest of the current transaction."""
    try:
        return Truck.objects.select_for_update().get(pk=truck_id)
    except (Truck.DoesNotExist, ValueError, TypeError) as exc:
        raise NotFoundError(f"Truck {truck_id} not found") from exc


def find_duplicate_trailers(*, company_id, trailers) -> list[str]:
    wanted = {str(t).strip() for t in (trailers or []) if str(t or "").strip()}
    if not wanted:
        return []

    return sorted(
        set(
            Truck.objects.filter(
                company_id=company_id,
                truck_trailer__in=wanted,
            ).values_list("truck_trailer", flat=True)
        )
    )


# ============================================================
# WRITES
# ============================================================


@transaction.atomic
def insert_truck(*, data: dict, company_id=None) -> Truck:
    company = resolve_company(company_id)
    cleaned = _clean_row(data)

    truck = Truck.objects.create(company=company, **cleaned)

    logger.info(
        "Truck created",
        extra={"truck_id": truck.id, "company_id": company.id},
    )

    record_audit(
        action="CREATE",
        entity_type="truck",
        entity_id=truck.id,
        details=f"Added {truck.truck_trailer} ({truck.product} {truck.quantity}L)",
        company_id=company.id,
    )
    return truck


@transaction.atomic
def bulk_replace_trucks(*, rows, company_id=None) -> list[Truck]:
    """
    Replace ALL trucks of a company with `rows`.

    Every row is validated before anything is deleted; one invalid row aborts
    the whole import and the previous records stay untouched.
    The allocation ledger is not touched.
    """
    company = resolve_company(company_id)

    if not isinstance(rows, (list, tuple)):
        raise InvalidInputError("trucks must be a list")

    cleaned_rows = [_clean_row(row, row=index + 1) for index, row in enumerate(rows)]

    replaced, _ = Truck.objects.filter(company=company).delete()

    now = timezone.now()
    trucks = Truck.objects.bulk_create(
        [
            Truck(company=company, created_at=now, updated_at=now, **cleaned)
            for cleaned in cleaned_rows
        ]
    )

    logger.info(
        "Trucks imported",
        extra={
            "company_id": company.id,
            "imported": len(trucks),
            "replaced": replaced,
        },
    )

    record_audit(
        action="IMPORT",
        entity_type="truck",
        details=f"Imported {len(trucks)} trucks",
        company_id=company.id,
    )
    return trucks


def _clean_patch(patch: dict) -> dict:
    if not isinstance(patch, dict) or not patch:
        raise InvalidInputError("Nothing to update")

    unknown = sorted(set(patch) - EDITABLE_FIELDS)
    if unknown:
        raise InvalidInputError(f"Unknown or read-only field(s): {', '.join(unknown)}")

    cleaned = {}
    for field, value in patch.items():
        if field in TEXT_FIELDS or field in ("permit_no", "lo_company", "bol_no"):
            cleaned[field] = str(value or "").strip()
            if field in REQUIRED_TEXT_FIELDS and not cleaned[field]:
                raise InvalidInputError(f"{field} cannot be blank")
        elif field == "quantity":
            cleaned[field] = normalize_quantity(value, infer_units=False)
        elif field == "status":
            status = str(value or "").strip().upper()
            if status == "PENDING":
                status = TruckStatus.PENDING
            if status not in TruckStatus.values:
                raise InvalidInputError(f"Unknown status '{value}'")
            cleaned[field] = status
        elif field == "at20":
            cleaned[field] = None if value in (None, "") else to_volume(value, field="at20")
        elif field == "permit_date":
            cleaned[field] = parse_permit_date(value)
        elif field == "loading_date":
            cleaned[field] = parse_loading_date(value)

    return cleaned


@transaction.atomic
def update_truck(*, truck_id, patch: dict) -> Truck:
    truck = lock_truck(truck_id)
    cleaned = _clean_patch(patch)

    for field, value in cleaned.items():
        setattr(truck, field, value)
    truck.save(update_fields=list(cleaned))

    record_audit(
        action="UPDATE",
        entity_type="truck",
        entity_id=truck.id,
        details=f"Updated: {json.dumps(cleaned, default=str, sort_keys=True)}",
        company_id=truck.company_id,
    )
    return truck


@transaction.atomic
def delete_truck(*, truck_id) -> None:
    truck = lock_truck(truck_id)
    company_id = truck.company_id
    truck_pk = truck.pk

    truck.delete()

    record_audit(
        action="DELETE",
        entity_type="truck",
        entity_id=truck_pk,
        details="Truck deleted",
        company_id=company_id,
    )


@transaction.atomic
def clear_trucks(*, company_id=None) -> int:
    """
    Hard-delete every truck of a company, or of ALL companies when no company is given.
    """
    qs = Truck.objects.all()
    if company_id is not None:
        company = get_company(company_id)
        qs = qs.filter(company=company)

    deleted, _ = qs.delete()

    logger.info(
        "Trucks cleared",
        extra={"company_id": company_id, "deleted": deleted},
    )

    record_audit(
        action="CLEAR_ALL",
        entity_type="truck",
        details=f"All trucks cleared ({deleted})",
        company_id=company_id,
    )
    return deleted
