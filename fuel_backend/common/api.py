# common/api.py

"""
API ERROR NORMALIZATION

Canonical error envelope for every fuel tracker endpoint:
    {"error": {"code": "...", "message": "..."}}
"""

from __future__ import annotations

from rest_framework.response import Response

from common.exceptions import FuelTrackerError, InvalidInputError


def domain_error_response(exc: FuelTrackerError):
    """Map a domain error raised by a service onto the canonical envelope."""
    return Response({"error": exc.as_payload()}, status=exc.http_status)


def parse_company_param(request, name: str = "company"):
    """
    Read an optional integer company id from the query string.
    Returns None when absent; raises InvalidInputError when malformed.
    """
    raw = (request.query_params.get(name) or "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise InvalidInputError(f"{name} must be an integer id") from exc
