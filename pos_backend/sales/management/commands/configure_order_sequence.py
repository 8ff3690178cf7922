# sales/management/commands/configure_order_sequence.py

from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from businesses.models import Business
from sales.services.order_numbering import configure_order_sequence, format_order_number


class Command(BaseCommand):
    help = "Create or adjust a business' order number sequence (never moves it backwards)."

    def add_arguments(self, parser):
        parser.add_argument("business_id", help="Business UUID")
        parser.add_argument("--prefix", default=None, help="Order number prefix, e.g. 'A-'.")
        parser.add_argument(
            "--start-at",
            dest="start_at",
            type=int,
            default=None,
            help="Last issued number; the next order gets start_at + 1.",
        )

    def handle(self, *args, **options):
        try:
            business = Business.objects.get(pk=options["business_id"])
        except Business.DoesNotExist:
            raise CommandError(f"Business {options['business_id']} not found")

        try:
            seq = configure_order_sequence(
                business=business,
                prefix=options.get("prefix"),
                start_at=options.get("start_at"),
            )
        except ValueError as exc:
            raise CommandError(str(exc)) from exc

        self.stdout.write(
            self.style.SUCCESS(
                f"{business.name}: next order number "
                f"{format_order_number(seq.prefix, seq.current_number + 1)}"
            )
        )
