from decimal import Decimal
from typing import Optional

from inventory.exceptions import ValidationError
from inventory.models.product import (
    DESCRIPTION_MAX_LENGTH,
    NAME_MAX_LENGTH,
    PRICE_PRECISION,
    PRICE_SCALE,
    STOCK_STORAGE_MAX,
)
from inventory.schemas.product import ProductRequest

PRICE_STEP = Decimal(1).scaleb(-PRICE_SCALE)
PRICE_LIMIT = Decimal(10) ** (PRICE_PRECISION - PRICE_SCALE)


def stock_ceiling(max_stock: Optional[int] = None) -> int:
    """Highest stock level allowed, the configured limit or the column's range."""
    if max_stock is None:
        return STOCK_STORAGE_MAX
    return min(max_stock, STOCK_STORAGE_MAX)


def validate_product_fields(fields: ProductRequest, max_stock: Optional[int] = None) -> None:
    """
    Check the fields of a proposed product.

    Rules are checked in a fixed order and the first failure is raised.
    Whether the category actually exists is not checked here since that
    needs a database lookup. Prices must be stored exactly, so values with
    more than two decimal places are rejected instead of rounded.

    Args:
        fields: Proposed product fields
        max_stock: Optional stock ceiling

    Raises:
        ValidationError: If any rule fails; ``field`` names the offending field
    """
    name = fields.name
    if name is None or not name.strip():
        raise ValidationError("Product name is required.", field="name")

    if len(name) > NAME_MAX_LENGTH:
        raise ValidationError(
            f"Product name cannot exceed {NAME_MAX_LENGTH} characters.", field="name"
        )

    if fields.description and len(fields.description) > DESCRIPTION_MAX_LENGTH:
        raise ValidationError(
            f"Description cannot exceed {DESCRIPTION_MAX_LENGTH} characters.", field="description"
        )

    if fields.category_id <= 0:
        raise ValidationError("CategoryId must be valid.", field="categoryId")

    if fields.stock < 0:
        raise ValidationError("Stock cannot be negative.", field="stock")

    ceiling = stock_ceiling(max_stock)
    if fields.stock > ceiling:
        raise ValidationError(f"Stock cannot exceed {ceiling}.", field="stock")

    price = fields.price
    if not price.is_finite() or price <= 0:
        raise ValidationError("Price must be greater than 0.", field="price")

    if price >= PRICE_LIMIT:
        raise ValidationError(f"Price must be less than {PRICE_LIMIT}.", field="price")

    if price != price.quantize(PRICE_STEP):
        raise ValidationError(
            f"Price cannot have more than {PRICE_SCALE} decimal places.", field="price"
        )
