# trucks/services/permit_service.py

"""
PERMIT LIFECYCLE (APPLICATION SERVICE)

Purpose:
- Commit a truck's volume against its category allocation (generate permit).
- Record loading confirmation.
- Cancel (returning committed volume) and restore (re-committing it).

Guarantees:
- Every operation runs in ONE transaction with the truck row locked
  (select_for_update), so transitions on the same truck are serialized.
- Volume is consumed through ledger.deduct(), a locked decrement; the
  balance can never be oversubscribed by concurrent permits.
- Conservation: remaining == initial - sum(quantity of GENERATED/LOADED trucks)
  holds after every operation in this module.
"""

from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from allocations.services import ledger
from allocations.services.ledger import to_volume
from audit.services.recorder import record_audit
from common.exceptions import (
    ConflictError,
    InsufficientAllocationError,
    InvalidInputError,
    NotFoundError,
)
from trucks.models import Truck, TruckStatus
from trucks.services.lifecycle import (
    EVENT_CANCEL,
    EVENT_GENERATE_PERMIT,
    EVENT_MARK_LOADED,
    EVENT_RESTORE,
    validate_event,
)
from trucks.services.truck_service import lock_truck, parse_loading_date, parse_permit_date

logger = logging.getLogger(__name__)


def _consume_or_raise(*, truck: Truck, category: str) -> None:
    if ledger.deduct(
        company_id=truck.company_id,
        category=category,
        volume=truck.quantity,
    ):
        return

    availability = ledger.check_available(
        company_id=truck.company_id,
        category=category,
        volume=truck.quantity,
    )
    logger.warning(
        "Insufficient allocation",
        extra={
            "truck_id": truck.id,
            "company_id": truck.company_id,
            "category": category,
            "remaining": str(availability.remaining),
            "required": str(truck.quantity),
        },
    )
    raise InsufficientAllocationError(
        category=category,
        remaining=availability.remaining,
        required=truck.quantity,
    )


# ============================================================
# GENERATE PERMIT
# ============================================================


@transaction.atomic
def generate_permit(
    *,
    truck_id,
    permit_no: str = "",
    permit_date=None,
    company_id=None,
) -> Truck:
    """
    PENDING/CANCELLED -> GENERATED, deducting quantity from the category balance.

    company_id, when given, must be the truck's own company.
    """
    truck = lock_truck(truck_id)

    if company_id not in (None, "") and str(truck.company_id) != str(company_id):
        raise NotFoundError(f"Truck {truck_id} not found for company {company_id}")

    try:
        new_status = validate_event(truck=truck, event=EVENT_GENERATE_PERMIT)
    except ConflictError:
        logger.warning(
            "Permit generation rejected",
            extra={"truck_id": truck.id, "status": truck.status},
        )
        raise

    final_date = parse_permit_date(permit_date) or timezone.now()
    category = truck.category

    _consume_or_raise(truck=truck, category=category)

    truck.status = new_status
    truck.permit_no = (permit_no or "").strip()
    truck.permit_date = final_date
    truck.save(update_fields=["status", "permit_no", "permit_date"])

    logger.info(
        "Permit generated",
        extra={
            "truck_id": truck.id,
            "company_id": truck.company_id,
            "category": category,
            "quantity": str(truck.quantity),
        },
    )

    record_audit(
        action="GENERATE_PERMIT",
        entity_type="truck",
        entity_id=truck.id,
        details=f"Permit: {truck.permit_no or 'auto'}, Volume: {truck.quantity}L {category}",
        company_id=truck.company_id,
    )
    return truck


# ============================================================
# LOADING
# ============================================================


@transaction.atomic
def mark_loaded(
    *,
    truck_id,
    at20,
    lo_company: str,
    loading_date,
    bol_no: str,
) -> Truck:
    """
    GENERATED -> LOADED. No ledger effect (volume was committed at permit time).
    """
    truck = lock_truck(truck_id)
    new_status = validate_event(truck=truck, event=EVENT_MARK_LOADED)

    at20_value = to_volume(at20, field="at20")
    lo_company = (lo_company or "").strip()
    bol_no = (bol_no or "").strip()
    parsed_date = parse_loading_date(loading_date)

    missing = [
        name
        for name, value in (
            ("lo_company", lo_company),
            ("loading_date", parsed_date),
            ("bol_no", bol_no),
        )
        if not value
    ]
    if missing:
        raise InvalidInputError(f"missing required field(s): {', '.join(missing)}")

    truck.status = new_status
    truck.at20 = at20_value
    truck.lo_company = lo_company
    truck.loading_date = parsed_date
    truck.bol_no = bol_no
    truck.save(update_fields=["status", "at20", "lo_company", "loading_date", "bol_no"])

    logger.info(
        "Truck loaded",
        extra={"truck_id": truck.id, "company_id": truck.company_id, "bol_no": bol_no},
    )

    record_audit(
        action="LOADING",
        entity_type="truck",
        entity_id=truck.id,
        details=f"BOL: {bol_no}, AT20: {at20_value}L",
        company_id=truck.company_id,
    )
    return truck


# ============================================================
# CANCEL / RESTORE
# ============================================================


@transaction.atomic
def cancel_truck(*, truck_id) -> Truck:
    """
    PENDING/GENERATED -> CANCELLED. A GENERATED truck returns its volume.
    """
    truck = lock_truck(truck_id)
    previous_status = truck.status
    new_status = validate_event(truck=truck, event=EVENT_CANCEL)

    returned = False
    if previous_status == TruckStatus.GENERATED:
        returned = ledger.return_volume(
            company_id=truck.company_id,
            category=truck.category,
            volume=truck.quantity,
        )
        if not returned:
            logger.warning(
                "No allocation row to return volume to",
                extra={"truck_id": truck.id, "category": truck.category},
            )

    truck.status = new_status
    truck.save(update_fields=["status"])

    logger.info(
        "Truck cancelled",
        extra={
            "truck_id": truck.id,
            "company_id": truck.company_id,
            "volume_returned": returned,
        },
    )

    record_audit(
        action="CANCEL",
        entity_type="truck",
        entity_id=truck.id,
        details=(
            f"Truck cancelled, {truck.quantity}L {truck.category} returned"
            if returned
            else "Truck cancelled"
        ),
        company_id=truck.company_id,
    )
    return truck


@transaction.atomic
def restore_truck(*, truck_id) -> Truck:
    """
    CANCELLED -> GENERATED, re-consuming the allocation.
    Raises InsufficientAllocationError (truck stays CANCELLED) if the balance is short.
    """
    truck = lock_truck(truck_id)
    new_status = validate_event(truck=truck, event=EVENT_RESTORE)
    category = truck.category

    _consume_or_raise(truck=truck, category=category)

    truck.status = new_status
    truck.save(update_fields=["status"])

    logger.info(
        "Truck restored",
        extra={"truck_id": truck.id, "company_id": truck.company_id},
    )

    record_audit(
        action="RESTORE",
        entity_type="truck",
        entity_id=truck.id,
        details=f"Cancelled truck restored, {truck.quantity}L {category} deducted",
        company_id=truck.company_id,
    )
    return truck
