# common/exceptions.py

"""
FUEL TRACKER DOMAIN ERRORS

Centralized error taxonomy shared by every service:
- NotFound: an id or slug does not resolve
- Conflict: the requested transition is not allowed from the current state
- InsufficientAllocation: the ledger balance cannot cover the requested volume
- InvalidInput: required fields missing or malformed

Each error carries a stable `code` and the HTTP status the API layer maps it to.
"""

from __future__ import annotations

from decimal import Decimal


class FuelTrackerError(Exception):
    """Base exception for all fuel tracker service failures."""

    code = "ERROR"
    http_status = 400

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message

    def as_payload(self) -> dict:
        return {"code": self.code, "message": self.message}


class NotFoundError(FuelTrackerError):
    code = "NOT_FOUND"
    http_status = 404


class ConflictError(FuelTrackerError):
    code = "CONFLICT"
    http_status = 409


class InvalidInputError(FuelTrackerError):
    code = "INVALID_INPUT"
    http_status = 400


class InsufficientAllocationError(FuelTrackerError):
    """Raised when a deduction would take a category balance below zero."""

    code = "INSUFFICIENT_ALLOCATION"
    http_status = 400

    def __init__(self, *, category: str, remaining, required):
        self.category = category
        self.remaining = Decimal(remaining or 0)
        self.required = Decimal(required or 0)
        super().__init__(
            f"Insufficient {category} allocation. "
            f"Available: {self.remaining:,.2f}L, Required: {self.required:,.2f}L"
        )

    def as_payload(self) -> dict:
        payload = super().as_payload()
        payload.update(
            {
                "category": self.category,
                "remaining": str(self.remaining),
                "required": str(self.required),
            }
        )
        return payload
