# trucks/models/truck.py

"""
TRUCK (SHIPMENT / PERMIT / LOADING RECORD)

Lifecycle (status is the ONLY source of truth):

    PENDING ("") --generate--> GENERATED --load--> LOADED
        |                        |
        +------cancel------------+--> CANCELLED --restore--> GENERATED

- `loaded` is derived from status == LOADED (never stored).
- quantity is liters, always > 0.
- Status transitions are performed ONLY by the permit service, which keeps the
  allocation ledger consistent. Direct edits do not reconcile the ledger.

Timestamps:
- created_at / updated_at use defaults (not auto_now) so backup restores can
  bring back the stored values verbatim through bulk_create.
- save() always touches updated_at.
"""

from decimal import Decimal

from django.db import models
from django.db.models import Q
from django.utils import timezone

from allocations.services.categories import resolve_category
from companies.models import Company


class TruckStatus(models.TextChoices):
    PENDING = "", "Pending"
    GENERATED = "GENERATED", "Generated"
    LOADED = "LOADED", "Loaded"
    CANCELLED = "CANCELLED", "Cancelled"


# Statuses whose quantity is committed against the allocation ledger
COMMITTED_STATUSES = (TruckStatus.GENERATED, TruckStatus.LOADED)


class Truck(models.Model):
    company = models.ForeignKey(
        Company,
        on_delete=models.CASCADE,
        related_name="trucks",
    )

    truck_trailer = models.CharField(
        max_length=128,
        help_text="Vehicle identifier (truck / trailer plates)",
    )
    product = models.CharField(max_length=64)
    transporter = models.CharField(max_length=255, blank=True, default="")

    quantity = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        help_text="Requested volume in liters",
    )

    driver_name = models.CharField(max_length=255, blank=True, default="")
    id_number = models.CharField(max_length=64, blank=True, default="")
    phone_number = models.CharField(max_length=64, blank=True, default="")
    destination = models.CharField(max_length=255, blank=True, default="")
    loading_point = models.CharField(max_length=255, blank=True, default="")

    # Permit
    status = models.CharField(
        max_length=16,
        choices=TruckStatus.choices,
        default=TruckStatus.PENDING,
        blank=True,
        db_index=True,
    )
    permit_no = models.CharField(max_length=64, blank=True, default="")
    permit_date = models.DateTimeField(null=True, blank=True)

    # Loading
    at20 = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Volume corrected to 20°C",
    )
    lo_company = models.CharField(max_length=255, blank=True, default="")
    loading_date = models.DateField(null=True, blank=True)
    bol_no = models.CharField(max_length=64, blank=True, default="")

    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["id"]
        indexes = [
            models.Index(fields=["company", "status"], name="truck_company_status_idx"),
            models.Index(fields=["company", "truck_trailer"], name="truck_company_trailer_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gt=0),
                name="chk_truck_quantity_gt_zero",
            ),
        ]

    # -------------------------------------------------
    # DERIVED STATE
    # -------------------------------------------------

    @property
    def loaded(self) -> bool:
        return self.status == TruckStatus.LOADED

    @property
    def is_committed(self) -> bool:
        return self.status in COMMITTED_STATUSES

    @property
    def category(self) -> str:
        return resolve_category(self.product)

    def save(self, *args, **kwargs):
        self.updated_at = timezone.now()
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "updated_at" not in update_fields:
            kwargs["update_fields"] = [*update_fields, "updated_at"]
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.truck_trailer} | {self.product} {Decimal(self.quantity or 0)}L [{self.status or 'PENDING'}]"
