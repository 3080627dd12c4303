from django.conf import settings
from django.db import models

from core.models import TimeStampedModel


class Product(TimeStampedModel):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="products",
    )

    name = models.CharField(max_length=255)
    sku = models.CharField(max_length=100, blank=True, default="")
    supplier_code = models.CharField(max_length=100, null=True, blank=True)
    internal_code = models.CharField(max_length=100, null=True, blank=True)
    ean = models.CharField(max_length=32, null=True, blank=True)
    brand = models.CharField(max_length=200, null=True, blank=True)
    category = models.CharField(max_length=200, null=True, blank=True)
    supplier_id = models.PositiveIntegerField(null=True, blank=True)
    ncm = models.CharField(max_length=16, null=True, blank=True)

    # {"length": .., "width": .., "height": ..}
    dimensions = models.JSONField(null=True, blank=True)
    weight = models.DecimalField(max_digits=10, decimal_places=3, default=0)

    cost_item = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    pack_cost = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    tax_percent = models.DecimalField(max_digits=5, decimal_places=2, default=0)

    observations = models.TextField(null=True, blank=True)
    description = models.TextField(null=True, blank=True)
    bullet_points = models.JSONField(default=list, blank=True)

    photo = models.CharField(max_length=500, null=True, blank=True)
    active = models.BooleanField(default=True)
    channels = models.JSONField(default=list, blank=True)

    class Meta(TimeStampedModel.Meta):
        db_table = "products"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "sku"], name="products_user_sku_idx"),
            models.Index(fields=["user", "name"], name="products_user_name_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.sku or 'no sku'})"
