# companies/tests/test_api.py

from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from companies.services.registry import get_admin_company


class CompanyApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_create_and_fetch_by_slug(self):
        res = self.client.post(
            "/api/companies/",
            {"name": "Northwind", "slug": "northwind"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertFalse(res.data["is_admin"])

        res = self.client.get("/api/companies/by-slug/northwind/")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["name"], "Northwind")

    def test_duplicate_slug_returns_conflict_envelope(self):
        self.client.post("/api/companies/", {"name": "A", "slug": "dup"}, format="json")
        res = self.client.post("/api/companies/", {"name": "B", "slug": "dup"}, format="json")

        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(res.data["error"]["code"], "CONFLICT")

    def test_unknown_company_is_404(self):
        res = self.client.get("/api/companies/999999/")

        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(res.data["error"]["code"], "NOT_FOUND")

    def test_deleting_admin_reports_false(self):
        admin = get_admin_company()

        res = self.client.delete(f"/api/companies/{admin.id}/")

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data, {"deleted": False})

    def test_partial_update_renames(self):
        res = self.client.post("/api/companies/", {"name": "Old", "slug": "old"}, format="json")
        company_id = res.data["id"]

        res = self.client.patch(f"/api/companies/{company_id}/", {"name": "New"}, format="json")

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["name"], "New")
        self.assertEqual(res.data["slug"], "old")
