from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=255)),
                ("sku", models.CharField(blank=True, default="", max_length=100)),
                ("supplier_code", models.CharField(blank=True, max_length=100, null=True)),
                ("internal_code", models.CharField(blank=True, max_length=100, null=True)),
                ("ean", models.CharField(blank=True, max_length=32, null=True)),
                ("brand", models.CharField(blank=True, max_length=200, null=True)),
                ("category", models.CharField(blank=True, max_length=200, null=True)),
                ("supplier_id", models.PositiveIntegerField(blank=True, null=True)),
                ("ncm", models.CharField(blank=True, max_length=16, null=True)),
                ("dimensions", models.JSONField(blank=True, null=True)),
                ("weight", models.DecimalField(decimal_places=3, default=0, max_digits=10)),
                ("cost_item", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("pack_cost", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("tax_percent", models.DecimalField(decimal_places=2, default=0, max_digits=5)),
                ("observations", models.TextField(blank=True, null=True)),
                ("description", models.TextField(blank=True, null=True)),
                ("bullet_points", models.JSONField(blank=True, default=list)),
                ("photo", models.CharField(blank=True, max_length=500, null=True)),
                ("active", models.BooleanField(default=True)),
                ("channels", models.JSONField(blank=True, default=list)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="products",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "products",
                "ordering": ["-created_at"],
                "abstract": False,
            },
        ),
        migrations.AddIndex(
            model_name="product",
            index=models.Index(fields=["user", "sku"], name="products_user_sku_idx"),
        ),
        migrations.AddIndex(
            model_name="product",
            index=models.Index(fields=["user", "name"], name="products_user_name_idx"),
        ),
    ]
