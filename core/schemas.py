from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Optional

from .enums import ConflictType, SortField, SortOrder


@dataclass(slots=True)
class ProductFilters:
    """Conjunctive listing predicates; ``None`` means "not filtered"."""

    search: Optional[str] = None
    brand: Optional[str] = None
    category: Optional[str] = None
    supplier_id: Optional[int] = None
    active: Optional[bool] = None
    has_photo: Optional[bool] = None
    min_cost: Optional[Decimal] = None
    max_cost: Optional[Decimal] = None

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "ProductFilters":
        supplier_id = payload.get("supplier_id")
        return cls(
            search=payload.get("search") or None,
            brand=payload.get("brand") or None,
            category=payload.get("category") or None,
            supplier_id=int(supplier_id) if supplier_id not in (None, "") else None,
            active=payload.get("active"),
            has_photo=payload.get("has_photo"),
            min_cost=_coerce_decimal(payload.get("min_cost")),
            max_cost=_coerce_decimal(payload.get("max_cost")),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Only the predicates that are set, with JSON-friendly values."""
        payload = {
            "search": self.search,
            "brand": self.brand,
            "category": self.category,
            "supplier_id": self.supplier_id,
            "active": self.active,
            "has_photo": self.has_photo,
            "min_cost": str(self.min_cost) if self.min_cost is not None else None,
            "max_cost": str(self.max_cost) if self.max_cost is not None else None,
        }
        return {key: value for key, value in payload.items() if value is not None}


@dataclass(slots=True)
class PageRequest:
    page: int = 1
    limit: int = 20
    sort_by: Optional[SortField] = None
    sort_order: SortOrder = SortOrder.ASC

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError("page must be >= 1")
        if self.limit < 1:
            raise ValueError("limit must be >= 1")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def to_dict(self) -> Dict[str, Any]:
        return {
            "page": self.page,
            "limit": self.limit,
            "sort_by": self.sort_by.value if self.sort_by else None,
            "sort_order": self.sort_order.value,
        }


@dataclass(slots=True)
class ListingPage:
    items: List[Any]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return -(-self.total // self.limit) if self.total else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    def pagination_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "page": self.page,
            "limit": self.limit,
            "total_pages": self.total_pages,
            "has_next": self.has_next,
            "has_prev": self.has_prev,
        }


@dataclass(slots=True)
class ImportRow:
    """One decoded sheet row; ``number`` is the 1-based sheet row (header is row 1)."""

    number: int
    values: Dict[str, Any]

    def get(self, column: str, default: Any = None) -> Any:
        return self.values.get(column, default)


@dataclass(slots=True)
class ImportIssue:
    """Row-level failure collected during an import."""

    row: int
    field: str
    message: str
    value: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {"row": self.row, "field": self.field, "message": self.message, "value": self.value}


@dataclass(slots=True)
class ImportConflict:
    row: int
    existing_product: Any
    new_data: Dict[str, Any]
    conflict_type: ConflictType

    def to_dict(self) -> Dict[str, Any]:
        existing = self.existing_product
        return {
            "row": self.row,
            "type": self.conflict_type.value,
            "existing": {"id": existing.id, "name": existing.name, "sku": existing.sku},
            "new": {"name": self.new_data.get("name"), "sku": self.new_data.get("sku")},
        }


@dataclass(slots=True)
class ImportResult:
    new_products: int = 0
    updated_products: int = 0
    total_processed: int = 0
    skipped: int = 0
    dry_run: bool = False
    errors: List[ImportIssue] = field(default_factory=list)
    conflicts: List[ImportConflict] = field(default_factory=list)

    @property
    def total_rows(self) -> int:
        return self.total_processed + self.skipped + len(self.errors) + len(self.conflicts)

    def preview_summary(self) -> Dict[str, Any]:
        return {
            "total_rows": self.total_rows,
            "new_items": self.new_products,
            "updated_items": self.updated_products,
            "conflicts": len(self.conflicts),
            "errors": len(self.errors),
        }

    def commit_summary(self) -> Dict[str, Any]:
        return {
            "new_items": self.new_products,
            "updated_items": self.updated_products,
            "total_processed": self.total_processed,
            "skipped": self.skipped,
            "errors": len(self.errors),
        }


def _coerce_decimal(value: Any) -> Optional[Decimal]:
    if value in (None, ""):
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return None
