# backups/services/coordinator.py

"""
BACKUP / RESTORE COORDINATOR

Snapshot payload (JSON-ready):
    {
        "trucks":      [...],   # TruckSerializer rows
        "allocations": [...],   # AllocationSerializer rows
        "audit_logs":  [...],   # most recent first, capped by FUEL_BACKUP_AUDIT_LIMIT
    }

Rules:
- snapshot() is a best-effort read (no isolation from concurrent writes).
- restore() is atomic: the company's trucks are replaced by the snapshot's rows
  VERBATIM (status, permit and loading fields, timestamps) and each matching
  (company, category) allocation row gets the snapshot's initial/remaining
  volumes and updated_at. Categories without a destination row are skipped.
- Audit entries in the payload are informational and never restored.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.conf import settings
from django.db import transaction
from django.utils import timezone
from rest_framework import serializers

from allocations.models import Allocation
from allocations.serializers import AllocationSerializer, AllocationSnapshotSerializer
from allocations.services.categories import normalize_category
from allocations.services.ledger import list_allocations, to_volume
from audit.serializers import AuditLogSerializer
from audit.services.recorder import list_audit_logs, record_audit
from common.exceptions import InvalidInputError
from companies.services.registry import get_company
from trucks.models import Truck, TruckStatus
from trucks.serializers import TruckSerializer, TruckSnapshotSerializer
from trucks.services.truck_service import list_trucks

logger = logging.getLogger(__name__)


def _audit_limit() -> int:
    return int(getattr(settings, "FUEL_BACKUP_AUDIT_LIMIT", 1000))


def snapshot(*, company_id=None) -> dict:
    if company_id is not None:
        get_company(company_id)

    data = {
        "trucks": TruckSerializer(list_trucks(company_id=company_id), many=True).data,
        "allocations": AllocationSerializer(
            list_allocations(company_id=company_id), many=True
        ).data,
        "audit_logs": AuditLogSerializer(
            list_audit_logs(company_id=company_id, limit=_audit_limit()), many=True
        ).data,
    }

    record_audit(
        action="BACKUP",
        entity_type="system",
        details="Database backup created",
        company_id=company_id,
    )
    return data


def _first_error(detail) -> str:
    """Flatten DRF error detail to one readable message."""
    if isinstance(detail, dict):
        field, value = next(iter(detail.items()))
        # ListSerializer errors may come keyed by 0-based row index
        if isinstance(field, int):
            return f"row {field + 1}, {_first_error(value)}"
        return f"{field}: {_first_error(value)}"
    if isinstance(detail, list):
        for index, value in enumerate(detail):
            if not value:
                continue
            if isinstance(value, dict):
                return f"row {index + 1}, {_first_error(value)}"
            return _first_error(value)
    return str(detail)


def _parse_trucks(rows) -> list[dict]:
    parsed = TruckSnapshotSerializer(data=rows, many=True)
    try:
        parsed.is_valid(raise_exception=True)
    except serializers.ValidationError as exc:
        raise InvalidInputError(f"Invalid truck in backup: {_first_error(exc.detail)}") from exc
    return parsed.validated_data


def _parse_allocations(rows) -> list[dict]:
    parsed = AllocationSnapshotSerializer(data=rows, many=True)
    try:
        parsed.is_valid(raise_exception=True)
    except serializers.ValidationError as exc:
        raise InvalidInputError(f"Invalid allocation in backup: {_first_error(exc.detail)}") from exc

    return [
        {
            "product_type": normalize_category(row["product_type"]),
            "initial_volume": to_volume(row["initial_volume"], field="initial_volume"),
            "remaining_volume": to_volume(row["remaining_volume"], field="remaining_volume"),
            "updated_at": row.get("updated_at"),
        }
        for row in parsed.validated_data
    ]


def _build_truck(company, row: dict, now) -> Truck:
    text = {
        key: (row.get(key) or "")
        for key in (
            "transporter",
            "driver_name",
            "id_number",
            "phone_number",
            "destination",
            "loading_point",
            "permit_no",
            "lo_company",
            "bol_no",
        )
    }
    return Truck(
        company=company,
        truck_trailer=row["truck_trailer"],
        product=row["product"],
        quantity=Decimal(row["quantity"]),
        status=row.get("status") or TruckStatus.PENDING,
        permit_date=row.get("permit_date"),
        at20=row.get("at20"),
        loading_date=row.get("loading_date"),
        created_at=row.get("created_at") or now,
        updated_at=row.get("updated_at") or now,
        **text,
    )


@transaction.atomic
def restore(*, company_id, data) -> dict:
    company = get_company(company_id)

    if not isinstance(data, dict):
        raise InvalidInputError("Invalid backup format")

    truck_rows = data.get("trucks")
    allocation_rows = data.get("allocations")
    if not isinstance(truck_rows, list) or not isinstance(allocation_rows, list):
        raise InvalidInputError("Invalid backup format: trucks and allocations are required")

    # never restored; "auditLogs" is accepted as an alias
    audit_rows = data.get("audit_logs", data.get("auditLogs", []))
    if not isinstance(audit_rows, list):
        raise InvalidInputError("Invalid backup format: audit_logs must be a list")

    trucks = _parse_trucks(truck_rows)
    allocations = _parse_allocations(allocation_rows)

    replaced, _ = Truck.objects.filter(company=company).delete()

    now = timezone.now()
    restored = Truck.objects.bulk_create([_build_truck(company, row, now) for row in trucks])

    allocations_restored = 0
    for row in allocations:
        allocations_restored += Allocation.objects.filter(
            company=company,
            product_type=row["product_type"],
        ).update(
            initial_volume=row["initial_volume"],
            remaining_volume=row["remaining_volume"],
            updated_at=row["updated_at"] or now,
        )

    logger.info(
        "Backup restored",
        extra={
            "company_id": company.id,
            "trucks_restored": len(restored),
            "trucks_replaced": replaced,
            "allocations_restored": allocations_restored,
        },
    )

    record_audit(
        action="RESTORE_BACKUP",
        entity_type="system",
        details=f"Restored {len(restored)} trucks",
        company_id=company.id,
    )
    return {
        "trucks_restored": len(restored),
        "allocations_restored": allocations_restored,
    }
