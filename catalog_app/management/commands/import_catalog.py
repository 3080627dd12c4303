import json
from pathlib import Path

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from core.enums import ImportType
from core.exceptions import SpreadsheetDecodeError
from core.logging import configure_logger

from ...services.listing import CatalogListingService
from ...services.reconciler import ImportReconciler
from ...services.spreadsheets import decode_rows


class Command(BaseCommand):
    help = "Import a products or channels workbook into a user's catalog"

    def add_arguments(self, parser):
        parser.add_argument("--user", required=True, help="Username that owns the imported rows")
        parser.add_argument(
            "--type",
            dest="import_type",
            default=ImportType.PRODUCTS.value,
            choices=[item.value for item in ImportType],
        )
        parser.add_argument("--file", required=True, help="Path to the .xlsx workbook")
        parser.add_argument(
            "--auto-update",
            action="store_true",
            help="Update matching products instead of reporting conflicts",
        )
        parser.add_argument("--dry-run", action="store_true", help="Classify rows without writing anything")

    def handle(self, *args, **options):
        logger = configure_logger("catalog_app.import", verbosity=options["verbosity"])

        user_model = get_user_model()
        try:
            user = user_model.objects.get(**{user_model.USERNAME_FIELD: options["user"]})
        except user_model.DoesNotExist:
            raise CommandError(f"User '{options['user']}' does not exist.")

        path = Path(options["file"])
        if not path.is_file():
            raise CommandError(f"File not found: {path}")

        try:
            rows = decode_rows(path.read_bytes())
        except SpreadsheetDecodeError as exc:
            raise CommandError(str(exc))

        import_type = ImportType.from_string(options["import_type"])
        dry_run = options["dry_run"]
        reconciler = ImportReconciler()
        logger.info("Importing %s rows of %s for %s", len(rows), import_type.value, user)

        if import_type is ImportType.PRODUCTS:
            result = reconciler.import_products(rows, user.pk, auto_update=options["auto_update"], dry_run=dry_run)
        else:
            result = reconciler.import_channels(rows, user.pk, dry_run=dry_run)

        if not dry_run:
            CatalogListingService().invalidate(user.pk)

        for conflict in result.conflicts:
            self.stdout.write(self.style.WARNING(json.dumps(conflict.to_dict(), ensure_ascii=False)))
        for issue in result.errors:
            self.stdout.write(self.style.ERROR(json.dumps(issue.to_dict(), ensure_ascii=False, default=str)))

        summary = result.commit_summary()
        summary["conflicts"] = len(result.conflicts)
        summary["dry_run"] = dry_run
        self.stdout.write(self.style.SUCCESS(json.dumps(summary)))
