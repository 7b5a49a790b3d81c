import logging
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from inventory.models.category import Category
from inventory.models.product import Product, utcnow

logger = logging.getLogger(__name__)

SEED_ACTOR = "Seeder"

CATEGORIES = [
    {"id": 1, "name": "Kitchenware",
     "description": "Utensils, cookware, and tools used for cooking and food preparation."},
    {"id": 2, "name": "Clothing",
     "description": "Apparel and garments for men, women, and children."},
    {"id": 3, "name": "Books",
     "description": "Printed and digital books across genres such as fiction, non-fiction, and academic."},
    {"id": 4, "name": "Home Appliances",
     "description": "Electrical devices and machines for household tasks and convenience."},
    {"id": 5, "name": "Electronics",
     "description": "Consumer electronic devices including phones, laptops, and accessories."},
]

PRODUCTS = [
    {"id": 100001, "name": "Non-stick Frying Pan", "category_id": 1, "stock": 50,
     "price": Decimal("1200.00"),
     "description": "Durable non-stick pan suitable for everyday cooking."},
    {"id": 100002, "name": "Men's Cotton T-Shirt", "category_id": 2, "stock": 200,
     "price": Decimal("499.00"),
     "description": "100% cotton round-neck T-shirt, breathable and comfortable."},
    {"id": 100003, "name": "Python Programming Guide", "category_id": 3, "stock": 30,
     "price": Decimal("899.00"),
     "description": "Comprehensive guide to mastering Python development."},
    {"id": 100004, "name": "Microwave Oven", "category_id": 4, "stock": 15,
     "price": Decimal("7500.00"),
     "description": "800W compact microwave oven with multiple cooking modes."},
    {"id": 100005, "name": "Smartphone", "category_id": 5, "stock": 25,
     "price": Decimal("29999.00"),
     "description": "Latest Android smartphone with 128GB storage and 5G support."},
]


async def seed_catalog(db: AsyncSession) -> None:
    """
    Insert the reference categories and demo products.

    Records that already exist (by ID) are left untouched, so seeding is
    safe to run on every startup.
    """
    for data in CATEGORIES:
        if await db.get(Category, data["id"]) is None:
            db.add(Category(**data))
            logger.info(f"Seeded Category: {data['name']}")
    await db.commit()

    now = utcnow()
    for data in PRODUCTS:
        if await db.get(Product, data["id"]) is None:
            db.add(Product(**data, created_by=SEED_ACTOR, created_date=now))
            logger.info(f"Seeded Product: {data['name']}")
    await db.commit()

    logger.info("Database seeding completed")
