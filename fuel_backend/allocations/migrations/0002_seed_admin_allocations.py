# allocations/migrations/0002_seed_admin_allocations.py

"""
Provision zeroed AGO/PMS rows for the admin tenant, matching what the
registry does for every company it creates.
"""

from decimal import Decimal

from django.db import migrations

CATEGORIES = ("AGO", "PMS")


def seed_admin_allocations(apps, schema_editor):
    Company = apps.get_model("companies", "Company")
    Allocation = apps.get_model("allocations", "Allocation")

    admin = Company.objects.filter(is_admin=True).first()
    if admin is None:
        return

    for category in CATEGORIES:
        Allocation.objects.get_or_create(
            company=admin,
            product_type=category,
            defaults={
                "initial_volume": Decimal("0.00"),
                "remaining_volume": Decimal("0.00"),
            },
        )


class Migration(migrations.Migration):
    dependencies = [
        ("allocations", "0001_initial"),
        ("companies", "0002_seed_admin_company"),
    ]

    operations = [
        migrations.RunPython(seed_admin_allocations, migrations.RunPython.noop),
    ]
