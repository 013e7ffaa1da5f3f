# audit/services/recorder.py

"""
AUDIT RECORDER

Best-effort, append-only observability.

Rules:
- record_audit() must NEVER fail the business operation that triggered it.
  The insert runs in its own savepoint so a failed write cannot poison the
  caller's transaction; the failure is logged and swallowed.
- list_audit_logs(company_id) is inclusive: it returns the company's own
  entries AND global (company = NULL) entries, most recent first.
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.db import DatabaseError, transaction
from django.db.models import Q

from audit.models import AuditLog
from common.exceptions import InvalidInputError

logger = logging.getLogger(__name__)


def _default_limit() -> int:
    return int(getattr(settings, "FUEL_AUDIT_DEFAULT_LIMIT", 100))


def record_audit(
    *,
    action: str,
    entity_type: str,
    entity_id=None,
    details: str = "",
    company_id=None,
) -> AuditLog | None:
    try:
        with transaction.atomic():
            return AuditLog.objects.create(
                company_id=company_id,
                action=action,
                entity_type=entity_type,
                entity_id=entity_id,
                details=details or "",
            )
    except (DatabaseError, ValueError, TypeError):
        logger.exception(
            "Audit write failed (ignored)",
            extra={
                "action": action,
                "entity_type": entity_type,
                "entity_id": entity_id,
                "company_id": company_id,
            },
        )
        return None


def list_audit_logs(*, company_id=None, limit=None):
    if limit is None or limit == "":
        limit = _default_limit()

    try:
        limit = int(limit)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError("limit must be an integer") from exc

    if limit <= 0:
        raise InvalidInputError("limit must be greater than zero")

    qs = AuditLog.objects.all()
    if company_id is not None:
        qs = qs.filter(Q(company_id=company_id) | Q(company__isnull=True))

    return list(qs.order_by("-id")[:limit])
