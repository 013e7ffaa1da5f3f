# companies/models/company.py

"""
COMPANY (TENANT)

Every allocation, truck and audit entry belongs to exactly one company,
except global audit entries (company = NULL).

Rules:
- slug is unique and URL-safe (used in /c/<slug> routes by the UI)
- exactly one company is the admin/default tenant (is_admin=True)
- the admin company is never deletable (enforced by the registry service)
"""

from django.db import models
from django.db.models import Q


class Company(models.Model):
    name = models.CharField(max_length=255)

    slug = models.SlugField(
        max_length=100,
        unique=True,
        help_text="URL-safe tenant identifier (unique, case-sensitive).",
    )

    is_admin = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-is_admin", "name"]
        verbose_name_plural = "companies"
        constraints = [
            models.UniqueConstraint(
                fields=["is_admin"],
                condition=Q(is_admin=True),
                name="uniq_single_admin_company",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.slug})"
