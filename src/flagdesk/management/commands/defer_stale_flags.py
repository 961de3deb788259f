from django.conf import settings
from django.core.management.base import BaseCommand

from flagdesk.tasks.tasks import auto_defer_stale_flags_task


class Command(BaseCommand):
    help = "Defers pending flags older than the given number of days"

    def add_arguments(self, parser):
        parser.add_argument(
            "--days",
            type=int,
            default=getattr(settings, "AUTO_DEFER_FLAGS_DAYS", 30),
            help="Age in days after which a pending flag is deferred",
        )

    def handle(self, *args, **options):
        result = auto_defer_stale_flags_task(days=options["days"])
        self.stdout.write(
            self.style.SUCCESS(f"Deferred {result['deferred']} stale flag(s)")
        )
