# backups/management/commands/backup_company.py

from __future__ import annotations

import json

from django.core.management.base import BaseCommand, CommandError
from rest_framework.utils.encoders import JSONEncoder

from backups.services.coordinator import snapshot
from common.exceptions import FuelTrackerError


class Command(BaseCommand):
    help = "Write a JSON backup of one company (or the whole system) to a file or stdout."

    def add_arguments(self, parser):
        parser.add_argument(
            "--company",
            type=int,
            default=None,
            help="Company id. Omit for a system-wide snapshot.",
        )
        parser.add_argument(
            "--output",
            default="",
            help="Target file. Defaults to stdout.",
        )

    def handle(self, *args, **options):
        company_id = options.get("company")
        output = (options.get("output") or "").strip()

        try:
            payload = snapshot(company_id=company_id)
        except FuelTrackerError as exc:
            raise CommandError(exc.message) from exc

        text = json.dumps(payload, cls=JSONEncoder, indent=2)

        if not output:
            self.stdout.write(text)
            return

        with open(output, "w", encoding="utf-8") as fh:
            fh.write(text)

        self.stdout.write(
            self.style.SUCCESS(
                f"Backup written to {output}: "
                f"{len(payload['trucks'])} trucks, {len(payload['allocations'])} allocations"
            )
        )
