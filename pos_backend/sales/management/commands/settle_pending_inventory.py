# sales/management/commands/settle_pending_inventory.py

from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from sales.services.inventory_settlement import retry_pending_settlements


class Command(BaseCommand):
    help = "Retry stock decrement for sales recorded with inventory pending."

    def add_arguments(self, parser):
        parser.add_argument(
            "--business",
            dest="business_id",
            help="Only retry sales of this business (UUID).",
        )
        parser.add_argument(
            "--limit",
            type=int,
            default=None,
            help="Maximum number of sales to retry.",
        )
        parser.add_argument(
            "--strict",
            action="store_true",
            help="Fail (non-zero exit) if any sale could not be settled.",
        )

    def handle(self, *args, **options):
        result = retry_pending_settlements(
            business_id=options.get("business_id"),
            limit=options.get("limit"),
        )

        self.stdout.write(
            f"Settled: {result['settled']}  Failed: {result['failed']}"
        )

        if result["failed"] and options.get("strict"):
            raise CommandError(f"{result['failed']} sale(s) still pending inventory.")

        if not result["failed"]:
            self.stdout.write(self.style.SUCCESS("No pending inventory left."))
