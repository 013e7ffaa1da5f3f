# trucks/admin.py

from django.contrib import admin

from trucks.models import Truck


@admin.register(Truck)
class TruckAdmin(admin.ModelAdmin):
    list_display = (
        "truck_trailer",
        "company",
        "product",
        "quantity",
        "status",
        "permit_no",
        "bol_no",
    )
    list_filter = ("status", "company")
    search_fields = ("truck_trailer", "permit_no", "bol_no", "driver_name")
    # status changes must go through the permit service (ledger consistency)
    readonly_fields = ("status", "created_at", "updated_at")
