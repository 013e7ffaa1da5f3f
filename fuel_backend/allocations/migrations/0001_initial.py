# allocations/migrations/0001_initial.py

from decimal import Decimal

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("companies", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Allocation",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "product_type",
                    models.CharField(
                        choices=[("AGO", "AGO (Diesel)"), ("PMS", "PMS (Gasoline)")],
                        max_length=8,
                    ),
                ),
                (
                    "initial_volume",
                    models.DecimalField(
                        decimal_places=2, default=Decimal("0.00"), max_digits=14
                    ),
                ),
                (
                    "remaining_volume",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Remaining liters (ledger-managed only)",
                        max_digits=14,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "company",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="allocations",
                        to="companies.company",
                    ),
                ),
            ],
            options={
                "ordering": ["company__id", "product_type"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("company", "product_type"),
                        name="uniq_allocation_per_company_category",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("initial_volume__gte", 0)),
                        name="chk_allocation_initial_gte_zero",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("remaining_volume__gte", 0)),
                        name="chk_allocation_remaining_gte_zero",
                    ),
                ],
            },
        ),
    ]
