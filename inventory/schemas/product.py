from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema that reads and writes camel-cased JSON field names."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProductRequest(CamelModel):
    """
    Schema for the fields of a product to add or update.

    Field rules (lengths, positivity) are enforced by the validation module
    so that they surface as 400 responses naming the offending field.
    """
    name: Optional[str] = Field(None, description="Product name, at most 100 characters")
    description: Optional[str] = Field(None, description="Optional description, at most 500 characters")
    category_id: int = Field(0, description="ID of an existing category")
    stock: int = Field(0, description="Available stock (must be non-negative)")
    price: Decimal = Field(Decimal("0"), description="Unit price (must be positive)")


class ProductResponse(CamelModel):
    """Schema for product response, joined with the category name."""
    id: int
    name: str
    description: Optional[str] = None
    category_id: int
    category: Optional[str] = Field(None, description="Category name")
    stock: int
    price: Decimal
    created_by: str
    created_date: datetime
    modified_by: Optional[str] = None
    modified_date: Optional[datetime] = None

    @field_serializer("price")
    def serialize_price(self, price: Decimal) -> str:
        return str(price.quantize(Decimal("0.01")))

    @classmethod
    def from_product(cls, product) -> "ProductResponse":
        """Build the response projection from a Product instance."""
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            category_id=product.category_id,
            category=product.category.name if product.category is not None else None,
            stock=product.stock,
            price=product.price,
            created_by=product.created_by,
            created_date=product.created_date,
            modified_by=product.modified_by,
            modified_date=product.modified_date,
        )
