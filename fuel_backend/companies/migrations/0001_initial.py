# companies/migrations/0001_initial.py

from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Company",
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
                ("name", models.CharField(max_length=255)),
                (
                    "slug",
                    models.SlugField(
                        help_text="URL-safe tenant identifier (unique, case-sensitive).",
                        max_length=100,
                        unique=True,
                    ),
                ),
                ("is_admin", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name_plural": "companies",
                "ordering": ["-is_admin", "name"],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("is_admin", True)),
                        fields=("is_admin",),
                        name="uniq_single_admin_company",
                    )
                ],
            },
        ),
    ]
