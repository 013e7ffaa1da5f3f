# companies/admin.py

from django.contrib import admin

from companies.models import Company


@admin.register(Company)
class CompanyAdmin(admin.ModelAdmin):
    list_display = ("name", "slug", "is_admin", "created_at")
    list_filter = ("is_admin",)
    search_fields = ("name", "slug")
    readonly_fields = ("is_admin", "created_at", "updated_at")
