# allocations/admin.py

from django.contrib import admin

from allocations.models import Allocation


@admin.register(Allocation)
class AllocationAdmin(admin.ModelAdmin):
    list_display = ("company", "product_type", "initial_volume", "remaining_volume", "updated_at")
    list_filter = ("product_type",)
    search_fields = ("company__name", "company__slug")
    # remaining_volume is ledger-managed only
    readonly_fields = ("remaining_volume", "created_at", "updated_at")
