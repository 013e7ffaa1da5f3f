# companies/tests/test_registry.py

from decimal import Decimal

from django.test import TestCase

from allocations.models import Allocation
from allocations.services.ledger import reset_allocation
from audit.models import AuditLog
from common.exceptions import ConflictError, InvalidInputError, NotFoundError
from companies.models import Company
from companies.services.registry import (
    create_company,
    delete_company,
    get_admin_company,
    get_company_by_slug,
    list_companies,
    resolve_company,
    update_company,
)
from trucks.models import Truck
from trucks.services.truck_service import insert_truck


class CompanyRegistryTests(TestCase):
    """
    GUARANTEES:
    - exactly one admin company exists (seeded) and it cannot be deleted
    - new companies get zeroed AGO/PMS allocations
    - deleting a company removes everything it owns
    """

    def test_admin_company_is_seeded(self):
        admin = get_admin_company()

        self.assertTrue(admin.is_admin)
        self.assertEqual(admin.slug, "admin")
        self.assertEqual(
            set(admin.allocations.values_list("product_type", flat=True)),
            {"AGO", "PMS"},
        )

    def test_create_provisions_zeroed_allocations(self):
        company = create_company(name="Northwind Energy", slug="northwind")

        rows = Allocation.objects.filter(company=company).order_by("product_type")
        self.assertEqual([r.product_type for r in rows], ["AGO", "PMS"])
        for row in rows:
            self.assertEqual(row.initial_volume, Decimal("0.00"))
            self.assertEqual(row.remaining_volume, Decimal("0.00"))

        self.assertTrue(
            AuditLog.objects.filter(
                action="CREATE_COMPANY",
                entity_id=company.id,
                company__isnull=True,
            ).exists()
        )

    def test_duplicate_slug_is_conflict(self):
        create_company(name="Northwind", slug="northwind")

        with self.assertRaises(ConflictError):
            create_company(name="Other Northwind", slug="northwind")

        self.assertEqual(Company.objects.filter(slug="northwind").count(), 1)

    def test_slug_must_be_url_safe(self):
        with self.assertRaises(InvalidInputError):
            create_company(name="Bad", slug="bad slug!")

    def test_name_is_required(self):
        with self.assertRaises(InvalidInputError):
            create_company(name="  ", slug="blank-name")

    def test_list_is_admin_first_then_alphabetical(self):
        create_company(name="Zulu Oil", slug="zulu")
        create_company(name="Alpha Petroleum", slug="alpha")

        names = [c.name for c in list_companies()]
        self.assertEqual(names, ["Admin", "Alpha Petroleum", "Zulu Oil"])

    def test_lookup_by_slug(self):
        company = create_company(name="Northwind", slug="northwind")

        self.assertEqual(get_company_by_slug("northwind").id, company.id)
        with self.assertRaises(NotFoundError):
            get_company_by_slug("missing")

    def test_update_rejects_taken_slug(self):
        create_company(name="Alpha", slug="alpha")
        beta = create_company(name="Beta", slug="beta")

        with self.assertRaises(ConflictError):
            update_company(company_id=beta.id, slug="alpha")

        updated = update_company(company_id=beta.id, name="Beta Fuels")
        self.assertEqual(updated.name, "Beta Fuels")
        self.assertEqual(updated.slug, "beta")

    def test_resolve_company_defaults_to_admin(self):
        self.assertEqual(resolve_company(None).id, get_admin_company().id)

        with self.assertRaises(NotFoundError):
            resolve_company(999999)

    def test_admin_company_cannot_be_deleted(self):
        admin = get_admin_company()

        self.assertFalse(delete_company(company_id=admin.id))
        self.assertTrue(Company.objects.filter(pk=admin.id).exists())

    def test_delete_unknown_company_is_not_found(self):
        with self.assertRaises(NotFoundError):
            delete_company(company_id=999999)

    def test_delete_cascades_trucks_allocations_and_audit(self):
        company = create_company(name="Northwind", slug="northwind")
        reset_allocation(company_id=company.id, category="AGO", initial_volume="5000")
        insert_truck(
            data={"truck_trailer": "T-100", "product": "AGO", "quantity": "1000"},
            company_id=company.id,
        )
        self.assertTrue(AuditLog.objects.filter(company=company).exists())

        self.assertTrue(delete_company(company_id=company.id))

        self.assertFalse(Company.objects.filter(pk=company.id).exists())
        self.assertFalse(Truck.objects.filter(company_id=company.id).exists())
        self.assertFalse(Allocation.objects.filter(company_id=company.id).exists())
        self.assertFalse(AuditLog.objects.filter(company_id=company.id).exists())

        self.assertTrue(
            AuditLog.objects.filter(
                action="DELETE_COMPANY",
                entity_id=company.id,
                company__isnull=True,
            ).exists()
        )
