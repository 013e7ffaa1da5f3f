# backups/tests/test_backup.py

import json
import tempfile
from datetime import timedelta
from decimal import Decimal
from io import StringIO
from pathlib import Path

from django.core.management import call_command
from django.test import SimpleTestCase, TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework.utils.encoders import JSONEncoder

from allocations.models import Allocation
from allocations.services.ledger import reset_allocation
from audit.models import AuditLog
from backups.services.coordinator import _first_error, restore, snapshot
from common.exceptions import InvalidInputError, NotFoundError
from companies.models import Company
from companies.services.registry import create_company
from trucks.models import Truck, TruckStatus
from trucks.services.permit_service import generate_permit, mark_loaded
from trucks.services.truck_service import bulk_replace_trucks, insert_truck

TRUCK_FIELDS = (
    "truck_trailer",
    "product",
    "quantity",
    "status",
    "permit_no",
    "permit_date",
    "at20",
    "lo_company",
    "loading_date",
    "bol_no",
    "created_at",
    "updated_at",
)


def _as_json(payload):
    """Snapshot exactly as a client would receive and send it back."""
    return json.loads(json.dumps(payload, cls=JSONEncoder))


class BackupRestoreTests(TestCase):
    """
    GUARANTEES:
    - restore(snapshot) reproduces truck rows and allocation volumes
    - restore is atomic and rejects malformed payloads
    """

    def setUp(self):
        self.company = create_company(name="Northwind", slug="northwind")
        reset_allocation(company_id=self.company.id, category="AGO", initial_volume="1000")
        reset_allocation(company_id=self.company.id, category="PMS", initial_volume="2000")

        pending = insert_truck(
            data={"truck_trailer": "T-1", "product": "AGO", "quantity": "300", "driver_name": "Ada"},
            company_id=self.company.id,
        )
        loaded = insert_truck(
            data={"truck_trailer": "T-2", "product": "PMS", "quantity": "500"},
            company_id=self.company.id,
        )
        generate_permit(truck_id=loaded.id, permit_no="P-9", permit_date="2026-03-01 08:30:00")
        mark_loaded(
            truck_id=loaded.id,
            at20="498.25",
            lo_company="Depot",
            loading_date="2026-03-02",
            bol_no="BOL-9",
        )
        self.pending_id = pending.id

    def _truck_state(self):
        return sorted(
            tuple(getattr(t, f) for f in TRUCK_FIELDS)
            for t in Truck.objects.filter(company=self.company)
        )

    def _allocation_state(self):
        return sorted(
            Allocation.objects.filter(company=self.company).values_list(
                "product_type", "initial_volume", "remaining_volume"
            )
        )

    def test_snapshot_shape(self):
        data = snapshot(company_id=self.company.id)

        self.assertEqual(set(data), {"trucks", "allocations", "audit_logs"})
        self.assertEqual(len(data["trucks"]), 2)
        self.assertEqual(len(data["allocations"]), 2)
        self.assertTrue(data["audit_logs"])
        self.assertTrue(
            AuditLog.objects.filter(action="BACKUP", company=self.company).exists()
        )

    def test_snapshot_unknown_company(self):
        with self.assertRaises(NotFoundError):
            snapshot(company_id=999999)

    def test_round_trip(self):
        trucks_before = self._truck_state()
        allocations_before = self._allocation_state()
        data = _as_json(snapshot(company_id=self.company.id))

        bulk_replace_trucks(
            rows=[{"truck_trailer": "X", "product": "AGO", "quantity": "1000"}],
            company_id=self.company.id,
        )
        reset_allocation(company_id=self.company.id, category="PMS", initial_volume="5")

        result = restore(company_id=self.company.id, data=data)

        self.assertEqual(result, {"trucks_restored": 2, "allocations_restored": 2})
        self.assertEqual(self._truck_state(), trucks_before)
        self.assertEqual(self._allocation_state(), allocations_before)

        loaded = Truck.objects.get(company=self.company, truck_trailer="T-2")
        self.assertEqual(loaded.status, TruckStatus.LOADED)
        self.assertTrue(loaded.loaded)
        self.assertTrue(
            AuditLog.objects.filter(action="RESTORE_BACKUP", company=self.company).exists()
        )

    def test_restore_into_another_company(self):
        other = create_company(name="Other", slug="other")
        data = _as_json(snapshot(company_id=self.company.id))

        restore(company_id=other.id, data=data)

        self.assertEqual(Truck.objects.filter(company=other).count(), 2)
        self.assertEqual(Truck.objects.filter(company=self.company).count(), 2)
        self.assertEqual(
            Allocation.objects.get(company=other, product_type="PMS").remaining_volume,
            Decimal("1500.00"),
        )

    def test_restore_keeps_quantities_verbatim(self):
        data = _as_json(snapshot(company_id=self.company.id))
        data["trucks"][0]["quantity"] = "36.00"

        restore(company_id=self.company.id, data=data)

        self.assertTrue(
            Truck.objects.filter(company=self.company, quantity=Decimal("36.00")).exists()
        )

    def test_restore_keeps_timestamps(self):
        stamp = timezone.now() - timedelta(days=30)
        Truck.objects.filter(pk=self.pending_id).update(created_at=stamp, updated_at=stamp)
        data = _as_json(snapshot(company_id=self.company.id))

        restore(company_id=self.company.id, data=data)

        truck = Truck.objects.get(company=self.company, truck_trailer="T-1")
        self.assertEqual(truck.created_at, stamp)
        self.assertEqual(truck.updated_at, stamp)

    def test_restore_skips_missing_allocation_rows(self):
        data = _as_json(snapshot(company_id=self.company.id))
        bare = Company.objects.create(name="Bare", slug="bare")

        result = restore(company_id=bare.id, data=data)

        self.assertEqual(result["allocations_restored"], 0)
        self.assertFalse(Allocation.objects.filter(company=bare).exists())

    def test_restore_rejects_missing_sections(self):
        with self.assertRaises(InvalidInputError):
            restore(company_id=self.company.id, data={"trucks": []})
        with self.assertRaises(InvalidInputError):
            restore(company_id=self.company.id, data={"allocations": []})

        self.assertEqual(Truck.objects.filter(company=self.company).count(), 2)

    def test_restore_rejects_negative_volumes(self):
        data = _as_json(snapshot(company_id=self.company.id))
        data["allocations"][0]["remaining_volume"] = "-1"

        with self.assertRaises(InvalidInputError):
            restore(company_id=self.company.id, data=data)

        self.assertEqual(Truck.objects.filter(company=self.company).count(), 2)

    def test_restore_rejects_bad_truck_rows(self):
        data = _as_json(snapshot(company_id=self.company.id))
        data["trucks"][1]["status"] = "SHIPPED"

        with self.assertRaises(InvalidInputError) as ctx:
            restore(company_id=self.company.id, data=data)

        self.assertIn("row 2", ctx.exception.message)

    def test_restore_accepts_camel_case_audit_key(self):
        data = _as_json(snapshot(company_id=self.company.id))
        data["auditLogs"] = data.pop("audit_logs")

        result = restore(company_id=self.company.id, data=data)

        self.assertEqual(result["trucks_restored"], 2)

    def test_restore_rejects_malformed_audit_section(self):
        data = _as_json(snapshot(company_id=self.company.id))
        data.pop("audit_logs")
        data["auditLogs"] = "not-a-list"

        with self.assertRaises(InvalidInputError):
            restore(company_id=self.company.id, data=data)

        self.assertEqual(Truck.objects.filter(company=self.company).count(), 2)

    def test_restore_unknown_company(self):
        with self.assertRaises(NotFoundError):
            restore(company_id=999999, data={"trucks": [], "allocations": []})


class BackupApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.company = create_company(name="Northwind", slug="northwind")
        insert_truck(
            data={"truck_trailer": "T-1", "product": "AGO", "quantity": "300"},
            company_id=self.company.id,
        )

    def test_snapshot_and_restore(self):
        res = self.client.get(f"/api/backup/?company={self.company.id}")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        payload = json.loads(res.content)
        self.assertEqual(len(payload["trucks"]), 1)

        res = self.client.post(
            "/api/backup/restore/",
            {"company": self.company.id, "data": payload},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["trucks_restored"], 1)

    def test_restore_invalid_payload(self):
        res = self.client.post(
            "/api/backup/restore/",
            {"company": self.company.id, "data": {"trucks": []}},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["code"], "INVALID_INPUT")


class BackupCommandTests(TestCase):
    def test_backup_then_restore_from_file(self):
        company = create_company(name="Northwind", slug="northwind")
        insert_truck(
            data={"truck_trailer": "T-1", "product": "AGO", "quantity": "300"},
            company_id=company.id,
        )

        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "northwind.json"
            call_command("backup_company", company=company.id, output=str(path), stdout=StringIO())

            Truck.objects.filter(company=company).delete()

            out = StringIO()
            call_command("restore_company", str(path), company=company.id, stdout=out)

        self.assertIn("Restored 1 trucks", out.getvalue())
        self.assertEqual(Truck.objects.filter(company=company).count(), 1)


class ErrorFlatteningTests(SimpleTestCase):
    def test_list_shaped_row_errors(self):
        detail = [{}, {"status": ["bad choice"]}]

        self.assertEqual(_first_error(detail), "row 2, status: bad choice")

    def test_index_keyed_row_errors(self):
        detail = {1: {"status": ["bad choice"]}}

        self.assertEqual(_first_error(detail), "row 2, status: bad choice")

    def test_field_errors(self):
        self.assertEqual(_first_error({"quantity": ["required"]}), "quantity: required")
