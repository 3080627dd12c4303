from enum import Enum


class ImportType(Enum):
    """Spreadsheet kinds supported by the import/export endpoints."""

    PRODUCTS = "products"
    CHANNELS = "channels"

    @classmethod
    def from_string(cls, value: str) -> "ImportType":
        try:
            return cls(value.lower())
        except ValueError as exc:
            allowed = ", ".join(member.value for member in cls)
            raise ValueError(f"Unknown import type '{value}'. Allowed values: {allowed}.") from exc


class ConflictType(Enum):
    SKU = "sku"
    NAME = "name"
    SUPPLIER_CODE = "supplierCode"


class ConflictAction(Enum):
    """Per-row decision sent back on import confirmation."""

    SKIP = "skip"
    UPDATE = "update"
    CREATE_NEW = "create_new"


class SortField(Enum):
    NAME = "name"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
    COST_ITEM = "cost_item"


class SortOrder(Enum):
    ASC = "asc"
    DESC = "desc"


class EvictionPolicy(Enum):
    """How the result cache picks a victim once it is full.

    ``FIFO`` drops the oldest inserted entry; ``LRU`` additionally moves an
    entry to the back of the queue every time it is read.
    """

    FIFO = "fifo"
    LRU = "lru"
