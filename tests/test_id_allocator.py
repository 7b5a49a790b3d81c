"""Tests for product identifier allocation."""
from decimal import Decimal

from inventory.models.product import PRODUCT_ID_MAX, PRODUCT_ID_MIN, Product
from inventory.repositories.catalog import CatalogRepository
from inventory.services.id_allocator import IdAllocator


class FakeRepository:
    def __init__(self, existing=()):
        self.existing = set(existing)
        self.lookups = []

    async def product_exists(self, product_id):
        self.lookups.append(product_id)
        return product_id in self.existing


async def test_allocate_returns_free_candidate(scripted_random):
    repository = FakeRepository()
    allocator = IdAllocator(repository, rng=scripted_random([123456]))

    assert await allocator.allocate() == 123456
    assert repository.lookups == [123456]


async def test_allocate_draws_from_six_digit_range(scripted_random):
    rng = scripted_random([500000])
    allocator = IdAllocator(FakeRepository(), rng=rng)

    await allocator.allocate()

    assert rng.calls == [(PRODUCT_ID_MIN, PRODUCT_ID_MAX)]


async def test_allocate_retries_on_collision(scripted_random):
    repository = FakeRepository(existing={100001, 100002})
    allocator = IdAllocator(repository, rng=scripted_random([100001, 100002, 100003]))

    assert await allocator.allocate() == 100003
    assert repository.lookups == [100001, 100002, 100003]


async def test_allocate_skips_reserved_ids_without_lookup(scripted_random):
    repository = FakeRepository()
    allocator = IdAllocator(repository, rng=scripted_random([200000, 200001]))

    assert await allocator.allocate(reserved={200000}) == 200001
    assert repository.lookups == [200001]


async def test_sequential_allocations_differ_once_persisted(db_session, scripted_random):
    """An ID stored after the first allocation is never handed out again."""
    repository = CatalogRepository(db_session)
    allocator = IdAllocator(repository, rng=scripted_random([345678, 345678, 456789]))

    first = await allocator.allocate()
    db_session.add(Product(
        id=first,
        name="Stored",
        category_id=1,
        stock=1,
        price=Decimal("1.00"),
        created_by="tester",
    ))
    await db_session.commit()

    second = await allocator.allocate()

    assert first == 345678
    assert second == 456789
