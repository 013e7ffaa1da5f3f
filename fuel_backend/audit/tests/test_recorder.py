# audit/tests/test_recorder.py

from unittest import mock

from django.db import DatabaseError
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from audit.models import AuditLog
from audit.services.recorder import list_audit_logs, record_audit
from common.exceptions import InvalidInputError
from companies.services.registry import create_company


class AuditRecorderTests(TestCase):
    """
    GUARANTEES:
    - a failed audit write never propagates
    - scoped lists include global entries, most recent first
    - entries are immutable
    """

    def setUp(self):
        self.alpha = create_company(name="Alpha", slug="alpha")
        self.beta = create_company(name="Beta", slug="beta")
        AuditLog.objects.all().delete()

        self.global_entry = record_audit(action="BACKUP", entity_type="system")
        self.alpha_entry = record_audit(
            action="CREATE",
            entity_type="truck",
            entity_id=1,
            details="Added T-1",
            company_id=self.alpha.id,
        )
        self.beta_entry = record_audit(
            action="CREATE",
            entity_type="truck",
            entity_id=2,
            company_id=self.beta.id,
        )

    def test_scoped_list_includes_global_entries(self):
        ids = [e.id for e in list_audit_logs(company_id=self.alpha.id)]

        self.assertEqual(ids, [self.alpha_entry.id, self.global_entry.id])

    def test_unscoped_list_is_most_recent_first(self):
        ids = [e.id for e in list_audit_logs()]

        self.assertEqual(ids, [self.beta_entry.id, self.alpha_entry.id, self.global_entry.id])

    def test_limit(self):
        self.assertEqual(len(list_audit_logs(limit=2)), 2)
        self.assertEqual(len(list_audit_logs(limit="1")), 1)

        for bad in (0, -1, "ten"):
            with self.subTest(limit=bad):
                with self.assertRaises(InvalidInputError):
                    list_audit_logs(limit=bad)

    def test_failed_write_is_swallowed(self):
        with mock.patch.object(AuditLog.objects, "create", side_effect=DatabaseError("disk full")):
            result = record_audit(action="CREATE", entity_type="truck", company_id=self.alpha.id)

        self.assertIsNone(result)
        self.assertEqual(AuditLog.objects.count(), 3)

    def test_entries_are_immutable(self):
        self.alpha_entry.details = "rewritten"

        with self.assertRaises(RuntimeError):
            self.alpha_entry.save()
        with self.assertRaises(RuntimeError):
            self.alpha_entry.delete()


class AuditApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.company = create_company(name="Alpha", slug="alpha")

    def test_list_scoped(self):
        record_audit(action="CREATE", entity_type="truck", company_id=self.company.id)

        res = self.client.get(f"/api/audit/?company={self.company.id}&limit=5")

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        actions = [row["action"] for row in res.data]
        self.assertEqual(actions, ["CREATE", "CREATE_COMPANY"])

    def test_bad_limit(self):
        res = self.client.get("/api/audit/?limit=0")

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["code"], "INVALID_INPUT")
