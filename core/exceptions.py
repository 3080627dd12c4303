class CatalogError(RuntimeError):
    """Base exception for all catalog-related errors."""


class ProductNotFoundError(CatalogError):
    """Raised when a product id does not exist."""


class ProductOwnershipError(CatalogError):
    """Raised when a user targets a product owned by somebody else."""

    def __init__(self, product_id: int, user_id: int) -> None:
        super().__init__(f"Product {product_id} does not belong to user {user_id}.")
        self.product_id = product_id
        self.user_id = user_id


class SpreadsheetDecodeError(CatalogError):
    """Raised when an uploaded workbook cannot be read."""


class CacheBackendError(CatalogError):
    """Raised by result cache backends when the underlying store fails."""
