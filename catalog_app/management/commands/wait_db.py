import time

from django.core.management.base import BaseCommand
from django.db import connection
from django.db.utils import OperationalError


class Command(BaseCommand):
    help = "Block until the catalog database accepts connections"

    def add_arguments(self, parser):
        parser.add_argument(
            "--timeout",
            type=int,
            default=60,
            help="Give up after this many seconds (default: 60)",
        )
        parser.add_argument(
            "--interval",
            type=float,
            default=1.0,
            help="Seconds between attempts (default: 1.0)",
        )

    def handle(self, *args, **options):
        timeout = options["timeout"]
        interval = options["interval"]
        alias = connection.alias

        self.stdout.write(f"Waiting for database '{alias}'...")

        deadline = time.monotonic() + timeout
        attempt = 0
        while True:
            attempt += 1
            try:
                connection.ensure_connection()
            except OperationalError as exc:
                if time.monotonic() >= deadline:
                    self.stderr.write(self.style.ERROR(f"Database '{alias}' still unavailable after {timeout}s"))
                    raise SystemExit(1)
                self.stdout.write(f"Attempt {attempt} failed: {exc}")
                time.sleep(interval)
                continue

            self.stdout.write(self.style.SUCCESS(f"Database '{alias}' is available (attempt {attempt})"))
            return
