import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from inventory.config import Settings, get_settings
from inventory.exceptions import (
    CategoryNotFoundError,
    ConflictError,
    InsufficientStockError,
    InventoryError,
    ProductNotFoundError,
    ValidationError,
)
from inventory.models.product import Product, utcnow
from inventory.repositories.catalog import CatalogRepository
from inventory.schemas.product import ProductRequest, ProductResponse
from inventory.services.id_allocator import IdAllocator
from inventory.services.validation import stock_ceiling, validate_product_fields
from inventory.utils.cache import CacheService, cache_service

logger = logging.getLogger(__name__)


class InventoryService:
    """
    Service class for catalog CRUD and stock mutation.

    Every operation runs in the session's single transaction and commits
    once at the end; on any failure (including task cancellation while
    awaiting the database) nothing is committed.

    STOCK CONSISTENCY:
    ==================
    Stock mutations read the product with SELECT ... FOR UPDATE, so on
    PostgreSQL concurrent decrements of the same product are serialized
    and the second one sees the reduced stock. Backends without row locks
    (SQLite) still cannot end up with negative stock: the check constraint
    rejects the write and the caller gets a ConflictError.
    """

    CACHE_PREFIX = "product"

    def __init__(
        self,
        db: AsyncSession,
        repository: Optional[CatalogRepository] = None,
        id_allocator: Optional[IdAllocator] = None,
        cache: Optional[CacheService] = None,
        settings: Optional[Settings] = None,
    ):
        self.db = db
        self.repository = repository or CatalogRepository(db)
        self.id_allocator = id_allocator or IdAllocator(self.repository)
        self.cache = cache or cache_service
        self.settings = settings or get_settings()

    async def get_all(self) -> List[ProductResponse]:
        """Get all products with their category names, ordered by ID."""
        products = await self.repository.find_all_products()
        return [ProductResponse.from_product(p) for p in products]

    async def get_by_id(self, product_id: int) -> ProductResponse:
        """
        Get a product by ID with caching.

        Writers evict the entry after they commit. A read that loaded the
        row just before a concurrent commit can still store the older
        projection after that eviction, so a cached entry may lag the
        database by at most CACHE_TTL.

        Raises:
            ProductNotFoundError: If product doesn't exist
        """
        cached = await self.cache.get(self.CACHE_PREFIX, str(product_id))
        if cached:
            return ProductResponse.model_validate(cached)

        product = await self.repository.find_product_by_id(product_id)
        if not product:
            raise ProductNotFoundError(product_id)

        response = ProductResponse.from_product(product)
        await self.cache.set(self.CACHE_PREFIX, str(product_id), response.model_dump(mode="json"))
        return response

    async def add(self, items: List[ProductRequest], actor: str) -> List[ProductResponse]:
        """
        Add a batch of products.

        The batch is all-or-nothing: every category must exist and every
        item must pass validation before anything is written.

        Args:
            items: Fields of the products to add
            actor: Principal recorded as creator

        Returns:
            The added products, with their allocated IDs

        Raises:
            ValidationError: If the batch is empty, too large, or an item is invalid
            CategoryNotFoundError: If any referenced category doesn't exist
            ConflictError: If an allocated ID was claimed concurrently (retryable)
        """
        if not items:
            raise ValidationError("Product list cannot be empty.", field="items")

        max_batch = self.settings.MAX_ADD_BATCH_SIZE
        if max_batch is not None and len(items) > max_batch:
            raise ValidationError(
                f"Cannot add more than {max_batch} products at once (got {len(items)}).",
                field="items"
            )

        allocated = set()

        try:
            category_ids = {item.category_id for item in items}
            categories = await self.repository.find_categories(category_ids)
            missing = category_ids - set(categories)
            if missing:
                raise CategoryNotFoundError(missing)

            products = []
            now = utcnow()
            for item in items:
                validate_product_fields(item, max_stock=self.settings.MAX_STOCK)

                product_id = await self.id_allocator.allocate(reserved=allocated)
                allocated.add(product_id)

                products.append(Product(
                    id=product_id,
                    name=item.name,
                    description=item.description,
                    category_id=item.category_id,
                    category=categories[item.category_id],
                    stock=item.stock,
                    price=item.price,
                    created_by=actor,
                    created_date=now,
                ))

            await self.repository.insert_products(products)
            await self.repository.commit()

            logger.info(f"Added {len(products)} product(s): {sorted(allocated)}")
            return [ProductResponse.from_product(p) for p in products]

        except InventoryError:
            await self.repository.rollback()
            raise
        except IntegrityError as e:
            await self.repository.rollback()
            logger.error(f"Integrity error adding products: {e}")
            claimed = await self._find_claimed_ids(allocated)
            if claimed:
                raise ConflictError(
                    f"Product ID(s) {', '.join(map(str, claimed))} were taken by a concurrent "
                    f"insert, retry the request.",
                    retryable=True
                ) from e
            raise ConflictError("Product constraint violated, the products were not added.") from e
        except Exception as e:
            await self.repository.rollback()
            logger.error(f"Error adding products: {e}")
            raise

    async def update(self, product_id: int, product_data: ProductRequest, actor: str) -> ProductResponse:
        """
        Replace the editable fields of a product.

        Raises:
            ValidationError: If the ID is not positive or the fields are invalid
            ProductNotFoundError: If product doesn't exist
            CategoryNotFoundError: If the new category doesn't exist
        """
        if product_id <= 0:
            raise ValidationError("Product ID must be greater than zero.", field="id")
        if product_data is None:
            raise ValidationError("Product details are required.")

        try:
            product = await self.repository.find_product_by_id(product_id, for_update=True)
            if not product:
                raise ProductNotFoundError(product_id)

            category = await self.repository.find_category_by_id(product_data.category_id)
            if category is None:
                raise CategoryNotFoundError([product_data.category_id])

            validate_product_fields(product_data, max_stock=self.settings.MAX_STOCK)

            product.name = product_data.name
            product.description = product_data.description
            product.category_id = category.id
            product.category = category
            product.stock = product_data.stock
            product.price = product_data.price
            self._stamp(product, actor)

            await self.repository.update_product(product)
            await self.repository.commit()

        except InventoryError:
            await self.repository.rollback()
            raise
        except IntegrityError as e:
            await self.repository.rollback()
            logger.error(f"Integrity error updating product {product_id}: {e}")
            raise ConflictError("Product constraint violated - concurrent modification detected") from e
        except Exception as e:
            await self.repository.rollback()
            logger.error(f"Error updating product {product_id}: {e}")
            raise

        await self._invalidate_cache(product_id)
        logger.info(f"Product {product_id} updated by {actor}")
        return ProductResponse.from_product(product)

    async def decrement_stock(self, product_id: int, quantity: int, actor: str) -> ProductResponse:
        """
        Take quantity units out of stock.

        Raises:
            ValidationError: If the ID or quantity is not positive
            ProductNotFoundError: If product doesn't exist
            InsufficientStockError: If stock is empty or smaller than quantity
        """
        self._check_stock_request(product_id, quantity)

        try:
            product = await self.repository.find_product_by_id(product_id, for_update=True)
            if not product:
                raise ProductNotFoundError(product_id)

            # Check stock availability (inside the lock)
            if product.stock == 0 or product.stock - quantity < 0:
                raise InsufficientStockError(product_id, product.stock, quantity)

            product.stock -= quantity
            self._stamp(product, actor)

            await self.repository.update_product(product)
            await self.repository.commit()

        except InventoryError:
            await self.repository.rollback()
            raise
        except IntegrityError as e:
            # Stock check constraint tripped by a concurrent decrement
            await self.repository.rollback()
            logger.error(f"Integrity error decrementing stock for product {product_id}: {e}")
            raise ConflictError("Stock constraint violated - concurrent modification detected") from e
        except Exception as e:
            await self.repository.rollback()
            logger.error(f"Error decrementing stock for product {product_id}: {e}")
            raise

        await self._invalidate_cache(product_id)
        logger.info(
            f"Stock decremented by {quantity} for product {product_id}. New stock: {product.stock}"
        )
        return ProductResponse.from_product(product)

    async def increment_stock(self, product_id: int, quantity: int, actor: str) -> ProductResponse:
        """
        Put quantity units back into stock.

        Raises:
            ValidationError: If the ID or quantity is not positive
            ProductNotFoundError: If product doesn't exist
            ConflictError: If MAX_STOCK, or the stock column's range, would be exceeded
        """
        self._check_stock_request(product_id, quantity)

        try:
            product = await self.repository.find_product_by_id(product_id, for_update=True)
            if not product:
                raise ProductNotFoundError(product_id)

            ceiling = stock_ceiling(self.settings.MAX_STOCK)
            if product.stock + quantity > ceiling:
                raise ConflictError(
                    f"Adding {quantity} to stock ({product.stock}) of product ID {product_id} "
                    f"would exceed the maximum of {ceiling}."
                )

            product.stock += quantity
            self._stamp(product, actor)

            await self.repository.update_product(product)
            await self.repository.commit()

        except InventoryError:
            await self.repository.rollback()
            raise
        except Exception as e:
            await self.repository.rollback()
            logger.error(f"Error incrementing stock for product {product_id}: {e}")
            raise

        await self._invalidate_cache(product_id)
        logger.info(
            f"Stock incremented by {quantity} for product {product_id}. New stock: {product.stock}"
        )
        return ProductResponse.from_product(product)

    async def delete(self, product_id: int) -> bool:
        """
        Delete a product.

        Returns:
            True once deleted

        Raises:
            ValidationError: If the ID is not positive
            ProductNotFoundError: If product doesn't exist
        """
        if product_id <= 0:
            raise ValidationError("Product ID must be greater than zero.", field="id")

        try:
            product = await self.repository.find_product_by_id(product_id)
            if not product:
                raise ProductNotFoundError(product_id)

            await self.repository.delete_product(product)
            await self.repository.commit()

        except InventoryError:
            await self.repository.rollback()
            raise
        except Exception as e:
            await self.repository.rollback()
            logger.error(f"Error deleting product {product_id}: {e}")
            raise

        await self._invalidate_cache(product_id)
        logger.info(f"Product {product_id} deleted successfully")
        return True

    @staticmethod
    def _check_stock_request(product_id: int, quantity: int) -> None:
        if product_id <= 0:
            raise ValidationError("Product ID must be greater than zero.", field="id")
        if quantity <= 0:
            raise ValidationError("Quantity must be greater than zero.", field="quantity")

    @staticmethod
    def _stamp(product: Product, actor: str) -> None:
        """Record who changed the product and when."""
        product.modified_by = actor
        product.modified_date = utcnow()

    async def _find_claimed_ids(self, product_ids) -> List[int]:
        """IDs of the rolled back batch that another transaction has since stored."""
        claimed = []
        for product_id in sorted(product_ids):
            if await self.repository.product_exists(product_id):
                claimed.append(product_id)
        return claimed

    async def _invalidate_cache(self, product_id: int) -> None:
        """Invalidate cache for a product."""
        await self.cache.delete(self.CACHE_PREFIX, str(product_id))
