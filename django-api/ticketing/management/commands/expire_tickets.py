"""Expire active tickets whose event has ended, freeing their capacity slots.

Usage:
    python manage.py expire_tickets
    python manage.py expire_tickets --dry-run
"""

from django.core.management.base import BaseCommand

from ticketing.services import TicketService
from ticketing.stores import DjangoTicketStore


class Command(BaseCommand):
    help = "Expire active tickets of events that have ended"

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show how many tickets would expire without changing them",
        )

    def handle(self, *args, **options):
        service = TicketService(DjangoTicketStore())
        count = service.expire_elapsed(dry_run=options["dry_run"])

        if options["dry_run"]:
            self.stdout.write(self.style.WARNING(f"DRY RUN: {count} tickets would expire"))
        else:
            self.stdout.write(self.style.SUCCESS(f"Expired {count} tickets"))
