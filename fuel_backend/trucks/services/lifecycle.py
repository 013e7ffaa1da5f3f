# trucks/services/lifecycle.py

"""
TRUCK LIFECYCLE DOMAIN RULES

This module defines the ONLY allowed lifecycle events for Truck entities.

DESIGN PRINCIPLES:
- No database writes
- No ledger mutation
- Single source of truth for which status may take which event

    event            allowed from              to
    ---------------  ------------------------  ----------
    generate_permit  PENDING, CANCELLED        GENERATED
    mark_loaded      GENERATED                 LOADED
    cancel           PENDING, GENERATED        CANCELLED
    restore          CANCELLED                 GENERATED
"""

from __future__ import annotations

from common.exceptions import ConflictError
from trucks.models import Truck, TruckStatus

EVENT_GENERATE_PERMIT = "generate_permit"
EVENT_MARK_LOADED = "mark_loaded"
EVENT_CANCEL = "cancel"
EVENT_RESTORE = "restore"

ALLOWED_EVENTS = {
    EVENT_GENERATE_PERMIT: (
        {TruckStatus.PENDING, TruckStatus.CANCELLED},
        TruckStatus.GENERATED,
    ),
    EVENT_MARK_LOADED: (
        {TruckStatus.GENERATED},
        TruckStatus.LOADED,
    ),
    EVENT_CANCEL: (
        {TruckStatus.PENDING, TruckStatus.GENERATED},
        TruckStatus.CANCELLED,
    ),
    EVENT_RESTORE: (
        {TruckStatus.CANCELLED},
        TruckStatus.GENERATED,
    ),
}


def can_apply(*, status: str, event: str) -> bool:
    allowed_from, _ = ALLOWED_EVENTS[event]
    return (status or TruckStatus.PENDING) in allowed_from


def target_status(event: str) -> str:
    return ALLOWED_EVENTS[event][1]


def _conflict_message(truck: Truck, event: str) -> str:
    status = truck.status or TruckStatus.PENDING

    if event == EVENT_GENERATE_PERMIT:
        return f"Permit already generated for truck {truck.id}"

    if event == EVENT_MARK_LOADED:
        if status == TruckStatus.LOADED:
            return f"Truck {truck.id} already marked as loaded"
        return f"Truck {truck.id} has no generated permit to load against"

    if event == EVENT_CANCEL:
        if status == TruckStatus.LOADED:
            return f"Truck {truck.id} is already loaded and cannot be cancelled"
        return f"Truck {truck.id} is already cancelled"

    return f"Truck {truck.id} is not cancelled and cannot be restored"


def validate_event(*, truck: Truck, event: str) -> str:
    """
    Raise ConflictError if `event` is not allowed from the truck's status.
    Returns the status the truck moves to.
    """
    if not can_apply(status=truck.status, event=event):
        raise ConflictError(_conflict_message(truck, event))
    return target_status(event)
