# allocations/models/allocation.py

"""
ALLOCATION (PER-COMPANY, PER-CATEGORY FUEL BUDGET)

CANONICAL MODEL:
- one row per (company, product_type)
- initial_volume is the budget target; it only changes through a reset/adjust
- remaining_volume is mutated ONLY via the ledger service
- remaining_volume never goes below zero (locked decrement in the ledger)

Conservation:
    remaining = initial - sum(quantity of GENERATED/LOADED trucks in the category)
"""

from decimal import Decimal

from django.db import models
from django.db.models import Q

from companies.models import Company


class ProductCategory(models.TextChoices):
    AGO = "AGO", "AGO (Diesel)"
    PMS = "PMS", "PMS (Gasoline)"


class Allocation(models.Model):
    company = models.ForeignKey(
        Company,
        on_delete=models.CASCADE,
        related_name="allocations",
    )

    product_type = models.CharField(
        max_length=8,
        choices=ProductCategory.choices,
    )

    initial_volume = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
    )

    remaining_volume = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Remaining liters (ledger-managed only)",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["company__id", "product_type"]
        constraints = [
            models.UniqueConstraint(
                fields=["company", "product_type"],
                name="uniq_allocation_per_company_category",
            ),
            models.CheckConstraint(
                condition=Q(initial_volume__gte=0),
                name="chk_allocation_initial_gte_zero",
            ),
            models.CheckConstraint(
                condition=Q(remaining_volume__gte=0),
                name="chk_allocation_remaining_gte_zero",
            ),
        ]

    @property
    def consumed_volume(self) -> Decimal:
        return Decimal(self.initial_volume or 0) - Decimal(self.remaining_volume or 0)

    def __str__(self):
        return f"{self.company_id}:{self.product_type} {self.remaining_volume}/{self.initial_volume}"
