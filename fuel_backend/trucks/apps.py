# trucks/apps.py

from django.apps import AppConfig


class TrucksConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "trucks"
    verbose_name = "Trucks & Permits"
