from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from inventory.database import Base
from inventory.models.category import Category

PRODUCT_ID_MIN = 100000
PRODUCT_ID_MAX = 999999
NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500
PRICE_PRECISION = 18
PRICE_SCALE = 2
# Largest value the 32-bit stock column holds on every backend
STOCK_STORAGE_MAX = 2**31 - 1


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, the way it is stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Product(Base):
    """
    Product model representing a catalog item and its stock level.

    Attributes:
        id: Six-digit identifier allocated by the service, never by the database
        name: Product name
        description: Optional free text description
        category_id: Reference to the owning category
        stock: Available quantity (must be non-negative)
        price: Unit price (must be positive)
        created_by: Actor that added the product
        created_date: Timestamp when product was added
        modified_by: Actor of the last mutation, None until the first one
        modified_date: Timestamp of the last mutation, None until the first one
    """
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(NAME_MAX_LENGTH), nullable=False, index=True)
    description = Column(String(DESCRIPTION_MAX_LENGTH), nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    stock = Column(Integer, nullable=False, default=0)
    price = Column(Numeric(PRICE_PRECISION, PRICE_SCALE), nullable=False)
    created_by = Column(String(100), nullable=False)
    created_date = Column(DateTime, nullable=False, default=utcnow)
    modified_by = Column(String(100), nullable=True)
    modified_date = Column(DateTime, nullable=True)

    # Display-only link; categories keep no collection of their products
    category = relationship(Category, lazy="joined", innerjoin=True)

    # Database-level constraints to ensure data integrity
    __table_args__ = (
        CheckConstraint('price > 0', name='check_price_positive'),
        CheckConstraint('stock >= 0', name='check_stock_non_negative'),
        CheckConstraint(
            f'id BETWEEN {PRODUCT_ID_MIN} AND {PRODUCT_ID_MAX}',
            name='check_id_six_digits'
        ),
    )

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', stock={self.stock})>"
