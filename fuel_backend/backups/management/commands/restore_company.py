# backups/management/commands/restore_company.py

from __future__ import annotations

import json

from django.core.management.base import BaseCommand, CommandError

from backups.services.coordinator import restore
from common.exceptions import FuelTrackerError


class Command(BaseCommand):
    help = "Restore a company's trucks and allocations from a JSON backup file."

    def add_arguments(self, parser):
        parser.add_argument("path", help="Backup file produced by backup_company.")
        parser.add_argument("--company", type=int, required=True, help="Destination company id.")

    def handle(self, *args, **options):
        path = options["path"]

        try:
            with open(path, encoding="utf-8") as fh:
                data = json.load(fh)
        except OSError as exc:
            raise CommandError(f"Cannot read {path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise CommandError(f"{path} is not valid JSON: {exc}") from exc

        try:
            result = restore(company_id=options["company"], data=data)
        except FuelTrackerError as exc:
            raise CommandError(exc.message) from exc

        self.stdout.write(
            self.style.SUCCESS(
                f"Restored {result['trucks_restored']} trucks, "
                f"{result['allocations_restored']} allocations"
            )
        )
