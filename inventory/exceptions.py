from typing import Iterable, Optional


class InventoryError(Exception):
    """Base class for errors raised by the inventory service."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(InventoryError):
    """Exception raised when request data is malformed or out of range."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class NotFoundError(InventoryError):
    """Exception raised when a referenced record doesn't exist."""
    pass


class ProductNotFoundError(NotFoundError):
    """Exception raised when the requested product doesn't exist."""

    def __init__(self, product_id: int):
        super().__init__(f"Product with ID {product_id} not found.")
        self.product_id = product_id


class CategoryNotFoundError(NotFoundError):
    """Exception raised when one or more referenced categories don't exist."""

    def __init__(self, category_ids: Iterable[int]):
        self.category_ids = sorted(category_ids)
        if len(self.category_ids) == 1:
            message = f"Category with ID {self.category_ids[0]} not found."
        else:
            message = f"Invalid CategoryId(s): {', '.join(str(i) for i in self.category_ids)}"
        super().__init__(message)


class ConflictError(InventoryError):
    """
    Exception raised when a request clashes with the current stored state.

    retryable is set when repeating the same request may succeed, e.g. after
    a concurrent insert claimed the same product identifier.
    """

    def __init__(self, message: str, retryable: bool = False):
        super().__init__(message)
        self.retryable = retryable


class InsufficientStockError(ConflictError):
    """Exception raised when there's not enough stock to fulfill a decrement."""

    def __init__(self, product_id: int, available: int, requested: int):
        if available == 0:
            message = f"No stock available for the product with ID {product_id}."
        else:
            message = (
                f"Stock available ({available}) is less than requested "
                f"quantity ({requested}) for product ID {product_id}."
            )
        super().__init__(message)
        self.product_id = product_id
        self.available = available
        self.requested = requested
