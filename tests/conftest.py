import os

# Settings are read once on import, so point them at test values first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CACHE_ENABLED"] = "false"
os.environ["SEED_ON_STARTUP"] = "false"

from datetime import datetime
from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from inventory.main import app
from inventory.database import Base, get_db
from inventory.models.category import Category
from inventory.models.product import Product


# Create test database (SQLite in-memory for testing)
SQLALCHEMY_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

SEEDED_CREATED_DATE = datetime(2024, 1, 1, 12, 0, 0)


@pytest.fixture
async def engine():
    """Fresh in-memory database for each test."""
    test_engine = create_async_engine(
        SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
async def seeded(session_factory):
    """Categories 1 and 2, and product 100001 with 50 units in stock."""
    async with session_factory() as session:
        session.add_all([
            Category(id=1, name="Kitchenware", description="Cookware and utensils"),
            Category(id=2, name="Books"),
        ])
        session.add(Product(
            id=100001,
            name="Non-stick Frying Pan",
            description="Durable non-stick pan",
            category_id=1,
            stock=50,
            price=Decimal("1200.00"),
            created_by="Seeder",
            created_date=SEEDED_CREATED_DATE,
        ))
        await session.commit()


@pytest.fixture
async def db_session(session_factory):
    """Create database session for direct database access in tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    """Create test client wired to the per-test database."""
    async def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            await db.close()

    # Override the dependency
    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client

    app.dependency_overrides.clear()


class ScriptedRandom:
    """Stand-in for random.Random that returns a fixed sequence of candidates."""

    def __init__(self, values):
        self.values = iter(values)
        self.calls = []

    def randint(self, low, high):
        self.calls.append((low, high))
        return next(self.values)


@pytest.fixture
def scripted_random():
    return ScriptedRandom
