from pathlib import Path

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from core.enums import ImportType

from ...services.spreadsheets import export_workbook
from ...store import ProductStore


class Command(BaseCommand):
    help = "Write a user's products or channels (or a blank template) to an .xlsx file"

    def add_arguments(self, parser):
        parser.add_argument("--user", help="Username whose catalog is exported")
        parser.add_argument(
            "--type",
            dest="import_type",
            default=ImportType.PRODUCTS.value,
            choices=[item.value for item in ImportType],
        )
        parser.add_argument("--output", required=True, help="Destination .xlsx path")
        parser.add_argument("--template", action="store_true", help="Write the example rows instead of data")

    def handle(self, *args, **options):
        import_type = ImportType.from_string(options["import_type"])
        include_data = not options["template"]

        products = []
        if include_data:
            if not options.get("user"):
                raise CommandError("--user is required unless --template is given.")
            user_model = get_user_model()
            try:
                user = user_model.objects.get(**{user_model.USERNAME_FIELD: options["user"]})
            except user_model.DoesNotExist:
                raise CommandError(f"User '{options['user']}' does not exist.")
            products = ProductStore().get_products(user.pk)

        output = Path(options["output"])
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(export_workbook(import_type, products, include_data))
        self.stdout.write(self.style.SUCCESS(f"Wrote {len(products)} products to {output}"))
