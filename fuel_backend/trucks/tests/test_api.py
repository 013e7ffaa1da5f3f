# trucks/tests/test_api.py

from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from allocations.services.ledger import reset_allocation
from companies.services.registry import create_company
from trucks.models import Truck, TruckStatus


class TruckApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.company = create_company(name="Northwind", slug="northwind")
        reset_allocation(company_id=self.company.id, category="AGO", initial_volume="1000")

    def _create(self, quantity="600", trailer="T-1", product="AGO"):
        res = self.client.post(
            "/api/trucks/",
            {
                "company": self.company.id,
                "truck_trailer": trailer,
                "product": product,
                "quantity": quantity,
            },
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        return res.data

    def test_create_and_list_by_status(self):
        truck = self._create()
        self.assertEqual(truck["status"], "")
        self.assertEqual(truck["category"], "AGO")
        self.assertFalse(truck["loaded"])

        res = self.client.get(f"/api/trucks/?company={self.company.id}&status=PENDING")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual([t["id"] for t in res.data], [truck["id"]])

        res = self.client.get(f"/api/trucks/?company={self.company.id}&status=GENERATED")
        self.assertEqual(res.data, [])

    def test_create_missing_trailer_is_invalid_input(self):
        res = self.client.post(
            "/api/trucks/",
            {"company": self.company.id, "product": "AGO", "quantity": "600"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["code"], "INVALID_INPUT")

    def test_permit_lifecycle_over_http(self):
        truck = self._create()
        url = f"/api/trucks/{truck['id']}"

        res = self.client.post(f"{url}/generate-permit/", {"permit_no": "P-1"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["status"], TruckStatus.GENERATED)

        res = self.client.post(f"{url}/generate-permit/", {}, format="json")
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(res.data["error"]["code"], "CONFLICT")

        res = self.client.post(
            f"{url}/loading/",
            {"at20": "599", "lo_company": "Depot", "loading_date": "2026-03-02", "bol_no": "BOL-1"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertTrue(res.data["loaded"])

        res = self.client.post(f"{url}/cancel/")
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)

    def test_insufficient_allocation_envelope(self):
        truck = self._create(quantity="1500")

        res = self.client.post(f"/api/trucks/{truck['id']}/generate-permit/", {}, format="json")

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        error = res.data["error"]
        self.assertEqual(error["code"], "INSUFFICIENT_ALLOCATION")
        self.assertEqual(error["category"], "AGO")
        self.assertEqual(error["remaining"], "1000.00")
        self.assertEqual(error["required"], "1500.00")

    def test_cancel_and_restore(self):
        truck = self._create()
        url = f"/api/trucks/{truck['id']}"
        self.client.post(f"{url}/generate-permit/", {}, format="json")

        res = self.client.post(f"{url}/cancel/")
        self.assertEqual(res.data["status"], TruckStatus.CANCELLED)

        res = self.client.post(f"{url}/restore/")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["status"], TruckStatus.GENERATED)

    def test_import_clear_and_duplicates(self):
        res = self.client.post(
            "/api/trucks/import/",
            {
                "company": self.company.id,
                "trucks": [
                    {"truck_trailer": "A", "product": "AGO", "quantity": 50},
                    {"truck_trailer": "B", "product": "PMS", "quantity": 36000},
                ],
            },
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data, {"count": 2})

        res = self.client.post(
            "/api/trucks/duplicates/",
            {"company": self.company.id, "trailers": ["A", "Z"]},
            format="json",
        )
        self.assertEqual(res.data, {"duplicates": ["A"]})

        res = self.client.post("/api/trucks/clear/", {"company": self.company.id}, format="json")
        self.assertEqual(res.data, {"deleted": 2})
        self.assertFalse(Truck.objects.filter(company=self.company).exists())

    def test_patch_ignores_read_model_keys(self):
        truck = self._create()

        res = self.client.patch(
            f"/api/trucks/{truck['id']}/",
            {"id": 999, "loaded": True, "destination": "Kano"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["id"], truck["id"])
        self.assertEqual(res.data["destination"], "Kano")
        self.assertFalse(res.data["loaded"])

    def test_patch_with_array_body_is_invalid_input(self):
        truck = self._create()

        res = self.client.patch(f"/api/trucks/{truck['id']}/", [1, 2], format="json")

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["code"], "INVALID_INPUT")

    def test_delete(self):
        truck = self._create()

        res = self.client.delete(f"/api/trucks/{truck['id']}/")
        self.assertEqual(res.status_code, status.HTTP_204_NO_CONTENT)

        res = self.client.delete(f"/api/trucks/{truck['id']}/")
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_stats(self):
        truck = self._create()
        self.client.post(f"/api/trucks/{truck['id']}/generate-permit/", {}, format="json")

        res = self.client.get(f"/api/trucks/stats/?company={self.company.id}")

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["generated"], 1)
        self.assertEqual(res.data["allocations"]["AGO"]["remaining_volume"], 400)
