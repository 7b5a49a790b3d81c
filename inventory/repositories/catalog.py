from typing import Dict, Iterable, List, Optional, Set

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from inventory.models.category import Category
from inventory.models.product import Product


class CatalogRepository:
    """
    Persistence collaborator for products and categories.

    All writes are staged in the session's transaction and only become
    durable on commit(); rollback() discards everything staged since the
    last commit.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_product_by_id(self, product_id: int, for_update: bool = False) -> Optional[Product]:
        """
        Get a product by ID with its category joined.

        With for_update the product row is locked until the transaction
        ends (on backends that support row locks).
        """
        query = select(Product).where(Product.id == product_id)
        if for_update:
            query = query.with_for_update(of=Product)
        result = await self.db.execute(query)
        return result.scalars().first()

    async def find_all_products(self) -> List[Product]:
        result = await self.db.execute(select(Product).order_by(Product.id))
        return list(result.scalars().all())

    async def product_exists(self, product_id: int) -> bool:
        result = await self.db.execute(select(exists().where(Product.id == product_id)))
        return bool(result.scalar())

    async def find_category_by_id(self, category_id: int) -> Optional[Category]:
        return await self.db.get(Category, category_id)

    async def category_exists(self, category_id: int) -> bool:
        return await self.find_category_by_id(category_id) is not None

    async def categories_existing(self, category_ids: Iterable[int]) -> Set[int]:
        """Return the subset of the given category IDs that exist."""
        ids = set(category_ids)
        if not ids:
            return set()
        result = await self.db.execute(select(Category.id).where(Category.id.in_(ids)))
        return set(result.scalars().all())

    async def find_categories(self, category_ids: Iterable[int]) -> Dict[int, Category]:
        ids = set(category_ids)
        if not ids:
            return {}
        result = await self.db.execute(select(Category).where(Category.id.in_(ids)))
        return {category.id: category for category in result.scalars().all()}

    async def insert_products(self, products: List[Product]) -> None:
        """Stage a batch of new products and flush them in one go."""
        self.db.add_all(products)
        await self.db.flush()

    async def update_product(self, product: Product) -> None:
        self.db.add(product)
        await self.db.flush()

    async def delete_product(self, product: Product) -> None:
        await self.db.delete(product)
        await self.db.flush()

    async def commit(self) -> None:
        await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()
