import json
import os

from django.conf import settings
from rest_framework import serializers

from core.enums import ConflictAction, SortField, SortOrder
from core.schemas import PageRequest
from core.serializers import BaseModelSerializer
from .models import Product


class AmazonListingSerializer(serializers.Serializer):
    asin = serializers.CharField(required=False, allow_blank=True, default="")
    category = serializers.CharField(required=False, allow_blank=True, default="")


class MercadoLivreListingSerializer(serializers.Serializer):
    id = serializers.CharField(required=False, allow_blank=True, default="")
    category = serializers.CharField(required=False, allow_blank=True, default="")


class ShopifyListingSerializer(serializers.Serializer):
    handle = serializers.CharField(required=False, allow_blank=True, default="")


class MagentoListingSerializer(serializers.Serializer):
    sku = serializers.CharField(required=False, allow_blank=True, default="")


class ChannelSerializer(serializers.Serializer):
    """One sales-channel configuration embedded in ``Product.channels``."""

    name = serializers.CharField(max_length=100)
    active = serializers.BooleanField(default=True)
    price = serializers.DecimalField(max_digits=12, decimal_places=2, coerce_to_string=True)
    stock = serializers.IntegerField(min_value=0, default=0)
    title = serializers.CharField(required=False, allow_blank=True, default="")
    description = serializers.CharField(required=False, allow_blank=True, default="")
    categories = serializers.ListField(child=serializers.CharField(), required=False, default=list)
    keywords = serializers.ListField(child=serializers.CharField(), required=False, default=list)
    amazon = AmazonListingSerializer(required=False)
    mercadolivre = MercadoLivreListingSerializer(required=False)
    shopify = ShopifyListingSerializer(required=False)
    magento = MagentoListingSerializer(required=False)

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        # Stored as JSON, so keep the decimal as its exact text.
        value["price"] = str(value["price"])
        for nested in ("amazon", "mercadolivre", "shopify", "magento"):
            if nested in value:
                value[nested] = dict(value[nested])
        return dict(value)


class ProductSerializer(BaseModelSerializer):
    user_id = serializers.IntegerField(read_only=True)
    channels = serializers.ListField(child=ChannelSerializer(), required=False)

    class Meta(BaseModelSerializer.Meta):
        model = Product
        fields = [
            "id",
            "user_id",
            "name",
            "sku",
            "supplier_code",
            "internal_code",
            "ean",
            "brand",
            "category",
            "supplier_id",
            "ncm",
            "dimensions",
            "weight",
            "cost_item",
            "pack_cost",
            "tax_percent",
            "observations",
            "description",
            "bullet_points",
            "photo",
            "active",
            "channels",
            "created_at",
            "updated_at",
        ]
        extra_kwargs = {
            **getattr(BaseModelSerializer.Meta, "extra_kwargs", {}),
            "sku": {"required": False, "allow_blank": True},
            "supplier_code": {"required": False, "allow_null": True, "allow_blank": True},
            "internal_code": {"required": False, "allow_null": True, "allow_blank": True},
            "ean": {"required": False, "allow_null": True, "allow_blank": True},
            "brand": {"required": False, "allow_null": True, "allow_blank": True},
            "category": {"required": False, "allow_null": True, "allow_blank": True},
            "supplier_id": {"required": False, "allow_null": True},
            "ncm": {"required": False, "allow_null": True, "allow_blank": True},
            "dimensions": {"required": False, "allow_null": True},
            "observations": {"required": False, "allow_null": True, "allow_blank": True},
            "description": {"required": False, "allow_null": True, "allow_blank": True},
            "bullet_points": {"required": False},
            "photo": {"required": False, "allow_null": True, "allow_blank": True},
        }

    def validate_dimensions(self, value):
        if value is None:
            return value
        if not isinstance(value, dict):
            raise serializers.ValidationError("Dimensions must be an object with length, width and height.")
        unknown = set(value) - {"length", "width", "height"}
        if unknown:
            raise serializers.ValidationError(f"Unknown dimension keys: {', '.join(sorted(unknown))}.")
        for key, number in value.items():
            if not isinstance(number, (int, float)) or isinstance(number, bool) or number < 0:
                raise serializers.ValidationError(f"Dimension '{key}' must be a non-negative number.")
        return value

    def validate_bullet_points(self, value):
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise serializers.ValidationError("Bullet points must be a list of strings.")
        return value


class ListingQuerySerializer(serializers.Serializer):
    """Pagination and sorting query parameters for the product listing."""

    page = serializers.IntegerField(min_value=1, default=1)
    limit = serializers.IntegerField(min_value=10, max_value=100, default=20)
    sort_by = serializers.ChoiceField(choices=[item.value for item in SortField], required=False)
    sort_order = serializers.ChoiceField(choices=[item.value for item in SortOrder], default=SortOrder.ASC.value)

    def to_page_request(self) -> PageRequest:
        data = self.validated_data
        sort_by = data.get("sort_by")
        return PageRequest(
            page=data["page"],
            limit=data["limit"],
            sort_by=SortField(sort_by) if sort_by else None,
            sort_order=SortOrder(data["sort_order"]),
        )


class SearchQuerySerializer(serializers.Serializer):
    q = serializers.CharField(allow_blank=True, trim_whitespace=True)
    limit = serializers.IntegerField(min_value=1, max_value=100, default=20)


class ReplaceChannelsSerializer(serializers.Serializer):
    channels = ChannelSerializer(many=True)


class BulkUpdateItemSerializer(serializers.Serializer):
    id = serializers.IntegerField(min_value=1)
    data = serializers.DictField()

    def validate_data(self, value):
        serializer = ProductSerializer(data=value, partial=True)
        serializer.is_valid(raise_exception=True)
        return dict(serializer.validated_data)


class BulkUpdateSerializer(serializers.Serializer):
    updates = BulkUpdateItemSerializer(many=True, allow_empty=False)


class ImportUploadSerializer(serializers.Serializer):
    """Spreadsheet upload shared by the preview, confirm and direct import endpoints."""

    ALLOWED_EXTENSIONS = (".xlsx", ".xls")

    file = serializers.FileField()
    autoUpdate = serializers.BooleanField(required=False, default=False)

    def validate_file(self, value):
        max_bytes = getattr(settings, "CATALOG_IMPORT_MAX_UPLOAD_BYTES", 10 * 1024 * 1024)
        if value.size > max_bytes:
            raise serializers.ValidationError(f"File too large; the limit is {max_bytes} bytes.")
        extension = os.path.splitext(value.name or "")[1].lower()
        if extension not in self.ALLOWED_EXTENSIONS:
            raise serializers.ValidationError("Only Excel files (.xlsx, .xls) are accepted.")
        return value


class ConflictDecisionSerializer(serializers.Serializer):
    row = serializers.IntegerField(min_value=2)
    action = serializers.ChoiceField(choices=[item.value for item in ConflictAction])


class ImportConfirmSerializer(ImportUploadSerializer):
    """Upload plus the per-row decisions the user took on the preview conflicts.

    ``decisions`` arrives as a JSON string inside the multipart form.
    """

    decisions = serializers.CharField(required=False, allow_blank=True, default="[]")

    def validate_decisions(self, value):
        try:
            payload = json.loads(value or "[]")
        except ValueError:
            raise serializers.ValidationError("Decisions must be a JSON list.")
        if isinstance(payload, dict):
            payload = payload.get("conflicts", [])
        serializer = ConflictDecisionSerializer(data=payload, many=True)
        serializer.is_valid(raise_exception=True)
        return {item["row"]: ConflictAction(item["action"]) for item in serializer.validated_data}
