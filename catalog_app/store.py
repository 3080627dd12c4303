"""ORM-backed catalog store.

Every catalog read and write used by the listing service, the import
reconciler and the views goes through :class:`ProductStore`, so a different
persistence layer only has to provide the same methods.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from django.db import transaction

from core.exceptions import ProductNotFoundError, ProductOwnershipError

from .models import Product

_READ_ONLY_FIELDS = frozenset({"id", "created_at", "updated_at"})


def _writable_field_names() -> frozenset:
    names = set()
    for model_field in Product._meta.concrete_fields:
        names.add(model_field.name)
        names.add(model_field.attname)
    return frozenset(names - _READ_ONLY_FIELDS)


class ProductStore:
    def __init__(self) -> None:
        self._writable = _writable_field_names()

    def get_products(self, user_id: Optional[int] = None) -> List[Product]:
        queryset = Product.objects.all()
        if user_id is not None:
            queryset = queryset.filter(user_id=user_id)
        return list(queryset.order_by("id"))

    def get_product(self, product_id: int) -> Optional[Product]:
        return Product.objects.filter(pk=product_id).first()

    def get_owned_product(self, product_id: int, user_id: int) -> Product:
        product = self.get_product(product_id)
        if product is None:
            raise ProductNotFoundError(f"Product {product_id} not found.")
        if product.user_id != user_id:
            raise ProductOwnershipError(product_id, user_id)
        return product

    def create_product(self, data: Mapping[str, Any]) -> Product:
        return Product.objects.create(**self._clean(data))

    def update_product(self, product_id: int, partial: Mapping[str, Any]) -> Product:
        product = self.get_product(product_id)
        if product is None:
            raise ProductNotFoundError(f"Product {product_id} not found.")
        payload = self._clean(partial)
        for key, value in payload.items():
            setattr(product, key, value)
        product.save()
        return product

    def delete_product(self, product_id: int) -> None:
        deleted, _ = Product.objects.filter(pk=product_id).delete()
        if not deleted:
            raise ProductNotFoundError(f"Product {product_id} not found.")

    def replace_channels(self, product_id: int, channels: Sequence[Mapping[str, Any]]) -> Product:
        """Overwrite the whole channel list of a product; no per-channel merge."""
        return self.update_product(product_id, {"channels": [dict(channel) for channel in channels]})

    def bulk_update(self, user_id: int, updates: Iterable[Mapping[str, Any]]) -> List[Product]:
        """Apply ``[{"id": .., "data": {..}}, ..]`` atomically.

        Any foreign or missing id rolls back the whole batch.
        """
        updated: List[Product] = []
        with transaction.atomic():
            for update in updates:
                product = self.get_owned_product(update["id"], user_id)
                updated.append(self.update_product(product.pk, update.get("data") or {}))
        return updated

    def _clean(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        payload = {key: value for key, value in data.items() if key not in _READ_ONLY_FIELDS}
        unknown = sorted(set(payload) - self._writable)
        if unknown:
            raise ValueError(f"Unknown product fields: {', '.join(unknown)}")
        return payload
