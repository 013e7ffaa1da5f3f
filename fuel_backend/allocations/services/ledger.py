# allocations/services/ledger.py

"""
ALLOCATION LEDGER

Purpose:
- Hold the running balance per (company, category).
- Deduct on permit generation, return on cancellation, re-deduct on restore.

Concurrency rules:
- deduct() locks the allocation row (select_for_update), compares and subtracts
  in Decimal, then saves. Two concurrent permits serialize on the row lock and
  can never both pass a separate availability check and oversubscribe the balance.
- Arithmetic stays in Python: SQLite keeps DecimalField columns as REAL, so an
  in-database F() decrement would drift.
- check_available() is advisory only (display / pre-flight). Callers that
  consume volume MUST use deduct() and inspect its result.

Reset vs adjust:
- reset_allocation() is a FULL reset: initial and remaining both become the new
  target and any previously consumed volume is dropped from tracking.
- adjust_allocation() changes the target while keeping consumed volume.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from django.db import transaction

from allocations.models import Allocation
from allocations.services.categories import normalize_category
from audit.services.recorder import record_audit
from common.exceptions import ConflictError, InvalidInputError, NotFoundError
from companies.models import Company

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")


@dataclass(frozen=True)
class Availability:
    available: bool
    remaining: Decimal


def to_volume(value, *, field: str = "volume") -> Decimal:
    """
    Volume normalizer (liters, two decimal places).
    Rejects booleans, blanks, garbage and negative values.
    """
    if value is None or value == "":
        raise InvalidInputError(f"{field} is required")

    if isinstance(value, bool):
        raise InvalidInputError(f"{field} must be a number")

    try:
        vol = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise InvalidInputError(f"{field} must be a number") from exc

    if not vol.is_finite():
        raise InvalidInputError(f"{field} must be a finite number")

    if vol < ZERO:
        raise InvalidInputError(f"{field} cannot be negative")

    return vol.quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _require_company(company_id) -> Company:
    try:
        return Company.objects.get(pk=company_id)
    except (Company.DoesNotExist, ValueError, TypeError) as exc:
        raise NotFoundError(f"Company {company_id} not found") from exc


def list_allocations(*, company_id=None):
    qs = Allocation.objects.all()
    if company_id is not None:
        qs = qs.filter(company_id=company_id)
    return qs


def get_allocation(*, company_id, category) -> Allocation | None:
    return Allocation.objects.filter(
        company_id=company_id,
        product_type=normalize_category(category),
    ).first()


@transaction.atomic
def reset_allocation(*, company_id, category, initial_volume) -> Allocation:
    """
    Upsert the (company, category) row and set initial == remaining == initial_volume.
    """
    company = _require_company(company_id)
    product_type = normalize_category(category)
    volume = to_volume(initial_volume, field="initial_volume")

    allocation, created = Allocation.objects.update_or_create(
        company=company,
        product_type=product_type,
        defaults={
            "initial_volume": volume,
            "remaining_volume": volume,
        },
    )

    logger.info(
        "Allocation reset",
        extra={
            "company_id": company.id,
            "product_type": product_type,
            "initial_volume": str(volume),
            "created": created,
        },
    )

    record_audit(
        action="ALLOCATION",
        entity_type="allocation",
        entity_id=allocation.id,
        details=f"Set {product_type} to {volume}L",
        company_id=company.id,
    )
    return allocation


@transaction.atomic
def adjust_allocation(*, company_id, category, initial_volume) -> Allocation:
    """
    Change the target volume while preserving what has already been consumed.

    remaining = new_initial - (old_initial - old_remaining)
    """
    company = _require_company(company_id)
    product_type = normalize_category(category)
    volume = to_volume(initial_volume, field="initial_volume")

    allocation = (
        Allocation.objects.select_for_update()
        .filter(company=company, product_type=product_type)
        .first()
    )
    if allocation is None:
        return reset_allocation(
            company_id=company.id,
            category=product_type,
            initial_volume=volume,
        )

    consumed = allocation.consumed_volume
    if volume < consumed:
        raise ConflictError(
            f"Cannot set {product_type} allocation to {volume}L: "
            f"{consumed}L is already committed to permits"
        )

    allocation.initial_volume = volume
    allocation.remaining_volume = volume - consumed
    allocation.save(update_fields=["initial_volume", "remaining_volume", "updated_at"])

    logger.info(
        "Allocation adjusted",
        extra={
            "company_id": company.id,
            "product_type": product_type,
            "initial_volume": str(volume),
            "consumed_volume": str(consumed),
        },
    )

    record_audit(
        action="ALLOCATION",
        entity_type="allocation",
        entity_id=allocation.id,
        details=f"Adjusted {product_type} to {volume}L (consumed {consumed}L kept)",
        company_id=company.id,
    )
    return allocation


def check_available(*, company_id, category, volume) -> Availability:
    """
    Advisory availability check. A missing row counts as zero remaining.
    """
    vol = to_volume(volume)
    allocation = get_allocation(company_id=company_id, category=category)
    if allocation is None:
        return Availability(available=False, remaining=ZERO)

    remaining = Decimal(allocation.remaining_volume)
    return Availability(available=remaining >= vol, remaining=remaining)


def _locked_allocation(*, company_id, product_type) -> Allocation | None:
    return (
        Allocation.objects.select_for_update()
        .filter(company_id=company_id, product_type=product_type)
        .first()
    )


@transaction.atomic
def deduct(*, company_id, category, volume) -> bool:
    """
    Consume `volume` from the locked balance.

    Returns False (and changes nothing) when the row is missing or the balance
    cannot cover the volume.
    """
    vol = to_volume(volume)
    allocation = _locked_allocation(
        company_id=company_id, product_type=normalize_category(category)
    )
    if allocation is None or allocation.remaining_volume < vol:
        return False

    allocation.remaining_volume -= vol
    allocation.save(update_fields=["remaining_volume", "updated_at"])
    return True


@transaction.atomic
def return_volume(*, company_id, category, volume) -> bool:
    """
    Give `volume` back to the balance (cancellation). False if no row exists.
    """
    vol = to_volume(volume)
    allocation = _locked_allocation(
        company_id=company_id, product_type=normalize_category(category)
    )
    if allocation is None:
        return False

    allocation.remaining_volume += vol
    allocation.save(update_fields=["remaining_volume", "updated_at"])
    return True
