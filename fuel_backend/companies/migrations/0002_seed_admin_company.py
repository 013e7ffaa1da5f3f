# companies/migrations/0002_seed_admin_company.py

"""
Seed the admin/default tenant.

The admin company is the fallback scope for writes that do not name a company
and can never be deleted.
"""

from django.db import migrations


def seed_admin_company(apps, schema_editor):
    Company = apps.get_model("companies", "Company")
    if Company.objects.filter(is_admin=True).exists():
        return
    Company.objects.get_or_create(
        slug="admin",
        defaults={"name": "Admin", "is_admin": True},
    )


def unseed_admin_company(apps, schema_editor):
    Company = apps.get_model("companies", "Company")
    Company.objects.filter(is_admin=True, slug="admin").delete()


class Migration(migrations.Migration):
    dependencies = [
        ("companies", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(seed_admin_company, unseed_admin_company),
    ]
