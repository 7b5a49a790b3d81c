from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from inventory.config import get_settings
from inventory.database import get_db
from inventory.schemas.product import ProductRequest, ProductResponse
from inventory.services.inventory_service import InventoryService

router = APIRouter(prefix="/products", tags=["Products"])


def get_actor() -> str:
    """Principal recorded on writes; requests act as the configured system identity."""
    return get_settings().SYSTEM_ACTOR


@router.get(
    "/",
    response_model=List[ProductResponse],
    summary="List all products",
    description="Get every product together with its category name."
)
async def list_products(db: AsyncSession = Depends(get_db)):
    """Get all products."""
    service = InventoryService(db)
    return await service.get_all()


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Get product by ID",
    description="Get detailed information about a specific product. Results are cached in Redis."
)
async def get_product(product_id: int, db: AsyncSession = Depends(get_db)):
    """
    Get a product by ID.

    Cache TTL is 5 minutes by default.
    """
    service = InventoryService(db)
    return await service.get_by_id(product_id)


@router.post(
    "/",
    response_model=List[ProductResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Add products",
    description="Add one or more products in a single all-or-nothing batch."
)
async def create_products(
    products: List[ProductRequest],
    db: AsyncSession = Depends(get_db),
    actor: str = Depends(get_actor)
):
    """
    Add a batch of products. Each item takes:

    - **name**: Product name, at most 100 characters (required)
    - **description**: Up to 500 characters (optional)
    - **categoryId**: ID of an existing category (required)
    - **stock**: Initial stock quantity, must be non-negative
    - **price**: Unit price, must be positive

    Product IDs are allocated by the service.
    """
    service = InventoryService(db)
    return await service.add(products, actor=actor)


@router.put(
    "/decrement-stock/{product_id}/{quantity}",
    response_model=ProductResponse,
    summary="Decrement product stock",
    description="Take stock out for a product. Fails if not enough stock is available."
)
async def decrement_stock(
    product_id: int,
    quantity: int,
    db: AsyncSession = Depends(get_db),
    actor: str = Depends(get_actor)
):
    """Decrement product stock by quantity."""
    service = InventoryService(db)
    return await service.decrement_stock(product_id, quantity, actor=actor)


@router.put(
    "/add-to-stock/{product_id}/{quantity}",
    response_model=ProductResponse,
    summary="Add to product stock",
    description="Increment product stock by quantity."
)
async def increment_stock(
    product_id: int,
    quantity: int,
    db: AsyncSession = Depends(get_db),
    actor: str = Depends(get_actor)
):
    """Increment product stock by quantity."""
    service = InventoryService(db)
    return await service.increment_stock(product_id, quantity, actor=actor)


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Update a product",
    description="Replace the name, description, category, stock and price of a product."
)
async def update_product(
    product_id: int,
    product_data: ProductRequest,
    db: AsyncSession = Depends(get_db),
    actor: str = Depends(get_actor)
):
    """
    Update a product.

    All editable fields are replaced. Cache is invalidated after update.
    """
    service = InventoryService(db)
    return await service.update(product_id, product_data, actor=actor)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a product",
    description="Delete a product by ID. Associated cache is also cleared."
)
async def delete_product(product_id: int, db: AsyncSession = Depends(get_db)):
    """Delete a product."""
    service = InventoryService(db)
    await service.delete(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
