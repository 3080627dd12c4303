"""Merge decoded spreadsheet rows into a user's catalog.

Rows are handled one at a time and a failing row never aborts the batch: it
is recorded as an :class:`~core.schemas.ImportIssue` and the next row is
processed. Rows that collide with an existing product are reported as
conflicts unless the caller opted into automatic updates or sent an explicit
decision for that row.
"""

import logging
from collections import OrderedDict
from types import SimpleNamespace
from typing import Any, Dict, List, Mapping, Optional, Sequence

from django.conf import settings

from core.enums import ConflictAction, ConflictType
from core.exceptions import ProductNotFoundError, ProductOwnershipError
from core.schemas import ImportConflict, ImportIssue, ImportResult, ImportRow

from ..store import ProductStore
from .spreadsheets import CellValueError, is_channel_placeholder, row_to_channel, row_to_product

logger = logging.getLogger(__name__)


class _CatalogIndex:
    """Lookup tables over the caller's products, kept current while importing."""

    def __init__(self, products: Sequence[Any]) -> None:
        self.by_sku: Dict[str, Any] = {}
        self.by_name: Dict[str, Any] = {}
        self.by_supplier_code: Dict[str, Any] = {}
        for product in products:
            self.add(product)

    def add(self, product: Any) -> None:
        # First product wins when the stored catalog already holds duplicates.
        if product.sku:
            self.by_sku.setdefault(product.sku, product)
        if product.name:
            self.by_name.setdefault(product.name, product)
        if product.supplier_code:
            self.by_supplier_code.setdefault(product.supplier_code, product)

    def replace(self, previous: Any, product: Any) -> None:
        for table, attr in (
            (self.by_sku, "sku"),
            (self.by_name, "name"),
            (self.by_supplier_code, "supplier_code"),
        ):
            old_value = getattr(previous, attr)
            if old_value and table.get(old_value) is previous:
                del table[old_value]
        self.add(product)


class ImportReconciler:
    def __init__(
        self,
        store: Optional[ProductStore] = None,
        *,
        match_by_name: Optional[bool] = None,
        match_by_supplier_code: Optional[bool] = None,
    ) -> None:
        self.store = store or ProductStore()
        if match_by_name is None:
            match_by_name = getattr(settings, "CATALOG_IMPORT_MATCH_BY_NAME", True)
        if match_by_supplier_code is None:
            match_by_supplier_code = getattr(settings, "CATALOG_IMPORT_MATCH_BY_SUPPLIER_CODE", False)
        self.match_by_name = match_by_name
        self.match_by_supplier_code = match_by_supplier_code

    # -- products -----------------------------------------------------------

    def find_match(self, index: _CatalogIndex, data: Mapping[str, Any]):
        """Return ``(product, conflict_type)`` or ``(None, None)``."""
        sku = data.get("sku")
        if sku and sku in index.by_sku:
            return index.by_sku[sku], ConflictType.SKU
        name = data.get("name")
        if self.match_by_name and name and name in index.by_name:
            return index.by_name[name], ConflictType.NAME
        supplier_code = data.get("supplier_code")
        if self.match_by_supplier_code and supplier_code and supplier_code in index.by_supplier_code:
            return index.by_supplier_code[supplier_code], ConflictType.SUPPLIER_CODE
        return None, None

    def import_products(
        self,
        rows: Sequence[ImportRow],
        user_id: int,
        auto_update: bool = False,
        decisions: Optional[Mapping[int, ConflictAction]] = None,
        dry_run: bool = False,
    ) -> ImportResult:
        result = ImportResult(dry_run=dry_run)
        decisions = decisions or {}
        index = _CatalogIndex(self.store.get_products(user_id))

        for row in rows:
            name = row.get("nome")
            sku = row.get("sku")
            if _blank(name) or _blank(sku):
                result.errors.append(
                    ImportIssue(
                        row=row.number,
                        field="nome/sku",
                        message="Nome e SKU são obrigatórios",
                        value={"nome": name, "sku": sku},
                    )
                )
                continue

            try:
                self._import_product_row(row, user_id, auto_update, decisions, dry_run, index, result)
            except CellValueError as exc:
                result.errors.append(ImportIssue(row=row.number, field=exc.column, message=str(exc), value=exc.value))
            except Exception as exc:
                logger.warning("Row %s failed during product import: %s", row.number, exc)
                result.errors.append(
                    ImportIssue(row=row.number, field="general", message=str(exc), value=dict(row.values))
                )

        logger.info(
            "Product import for user=%s: new=%s updated=%s skipped=%s conflicts=%s errors=%s dry_run=%s",
            user_id,
            result.new_products,
            result.updated_products,
            result.skipped,
            len(result.conflicts),
            len(result.errors),
            dry_run,
        )
        return result

    def _import_product_row(
        self,
        row: ImportRow,
        user_id: int,
        auto_update: bool,
        decisions: Mapping[int, ConflictAction],
        dry_run: bool,
        index: _CatalogIndex,
        result: ImportResult,
    ) -> None:
        data = row_to_product(row, user_id)
        existing, conflict_type = self.find_match(index, data)

        action = decisions.get(row.number)
        if existing is not None and action is None:
            if not auto_update:
                result.conflicts.append(
                    ImportConflict(row=row.number, existing_product=existing, new_data=data, conflict_type=conflict_type)
                )
                return
            action = ConflictAction.UPDATE
        if existing is None and action is not ConflictAction.SKIP:
            action = ConflictAction.CREATE_NEW

        if action is ConflictAction.SKIP:
            result.skipped += 1
            return

        if action is ConflictAction.UPDATE:
            if dry_run:
                updated = _pending_product(data, existing)
            else:
                updated = self.store.update_product(existing.pk, data)
            index.replace(existing, updated)
            result.updated_products += 1
        else:
            index.add(_pending_product(data) if dry_run else self.store.create_product(data))
            result.new_products += 1
        result.total_processed += 1

    # -- channels -----------------------------------------------------------

    def import_channels(self, rows: Sequence[ImportRow], user_id: int, dry_run: bool = False) -> ImportResult:
        result = ImportResult(dry_run=dry_run)
        groups: "OrderedDict[int, List[tuple]]" = OrderedDict()
        invalid_groups = set()

        for row in rows:
            raw_product_id = row.get("produto_id")
            if _blank(raw_product_id) or is_channel_placeholder(row):
                continue
            try:
                product_id = int(float(str(raw_product_id).strip()))
            except ValueError:
                result.errors.append(
                    ImportIssue(
                        row=row.number,
                        field="produto_id",
                        message="ID do produto inválido",
                        value=raw_product_id,
                    )
                )
                continue

            group = groups.setdefault(product_id, [])
            if _blank(row.get("canal")) or _blank(row.get("preco")):
                invalid_groups.add(product_id)
                result.errors.append(
                    ImportIssue(
                        row=row.number,
                        field="canal/preco",
                        message="Canal e preço são obrigatórios",
                        value={"canal": row.get("canal"), "preco": row.get("preco")},
                    )
                )
                continue
            try:
                group.append((row, row_to_channel(row)))
            except CellValueError as exc:
                invalid_groups.add(product_id)
                result.errors.append(ImportIssue(row=row.number, field=exc.column, message=str(exc), value=exc.value))

        for product_id, entries in groups.items():
            if product_id in invalid_groups or not entries:
                continue
            first_row = entries[0][0]
            try:
                self.store.get_owned_product(product_id, user_id)
            except (ProductNotFoundError, ProductOwnershipError):
                result.errors.append(
                    ImportIssue(
                        row=first_row.number,
                        field="produto_id",
                        message="Produto não encontrado ou não pertence ao usuário",
                        value=product_id,
                    )
                )
                continue

            try:
                if not dry_run:
                    self.store.replace_channels(product_id, [channel for _, channel in entries])
            except Exception as exc:
                logger.warning("Channel update for product %s failed: %s", product_id, exc)
                result.errors.append(
                    ImportIssue(row=first_row.number, field="general", message=str(exc), value=dict(first_row.values))
                )
                continue
            result.updated_products += 1
            result.total_processed += 1

        logger.info(
            "Channel import for user=%s: products=%s errors=%s dry_run=%s",
            user_id,
            result.updated_products,
            len(result.errors),
            dry_run,
        )
        return result


def _blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and value != value:
        return True
    return isinstance(value, str) and not value.strip()


def _pending_product(data: Mapping[str, Any], existing: Any = None) -> SimpleNamespace:
    """Stand-in for a row a dry run would have written, so later rows match against it."""
    fields = {"id": None, "name": None, "sku": None, "supplier_code": None}
    if existing is not None:
        fields.update(id=existing.pk, name=existing.name, sku=existing.sku, supplier_code=existing.supplier_code)
    fields.update(data)
    fields["pk"] = fields["id"]
    return SimpleNamespace(**fields)
