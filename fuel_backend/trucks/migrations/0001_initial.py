# trucks/migrations/0001_initial.py

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("companies", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Truck",
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
                    "truck_trailer",
                    models.CharField(
                        help_text="Vehicle identifier (truck / trailer plates)",
                        max_length=128,
                    ),
                ),
                ("product", models.CharField(max_length=64)),
                ("transporter", models.CharField(blank=True, default="", max_length=255)),
                (
                    "quantity",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Requested volume in liters",
                        max_digits=14,
                    ),
                ),
                ("driver_name", models.CharField(blank=True, default="", max_length=255)),
                ("id_number", models.CharField(blank=True, default="", max_length=64)),
                ("phone_number", models.CharField(blank=True, default="", max_length=64)),
                ("destination", models.CharField(blank=True, default="", max_length=255)),
                ("loading_point", models.CharField(blank=True, default="", max_length=255)),
                (
                    "status",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("", "Pending"),
                            ("GENERATED", "Generated"),
                            ("LOADED", "Loaded"),
                            ("CANCELLED", "Cancelled"),
                        ],
                        db_index=True,
                        default="",
                        max_length=16,
                    ),
                ),
                ("permit_no", models.CharField(blank=True, default="", max_length=64)),
                ("permit_date", models.DateTimeField(blank=True, null=True)),
                (
                    "at20",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Volume corrected to 20°C",
                        max_digits=14,
                        null=True,
                    ),
                ),
                ("lo_company", models.CharField(blank=True, default="", max_length=255)),
                ("loading_date", models.DateField(blank=True, null=True)),
                ("bol_no", models.CharField(blank=True, default="", max_length=64)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("updated_at", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "company",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="trucks",
                        to="companies.company",
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
                "indexes": [
                    models.Index(
                        fields=["company", "status"], name="truck_company_status_idx"
                    ),
                    models.Index(
                        fields=["company", "truck_trailer"],
                        name="truck_company_trailer_idx",
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("quantity__gt", 0)),
                        name="chk_truck_quantity_gt_zero",
                    )
                ],
            },
        ),
    ]
