import logging
import random
from typing import Collection, Optional

from inventory.models.product import PRODUCT_ID_MAX, PRODUCT_ID_MIN
from inventory.repositories.catalog import CatalogRepository

logger = logging.getLogger(__name__)


class IdAllocator:
    """
    Allocates six-digit product identifiers.

    A candidate is drawn at random and checked against the database;
    on collision a new candidate is drawn until a free one is found.
    The check and the later insert are not atomic: two concurrent
    allocations may pick the same free id, in which case the primary key
    rejects the second insert and the service reports a retryable conflict.
    """

    def __init__(self, repository: CatalogRepository, rng: Optional[random.Random] = None):
        self.repository = repository
        self.rng = rng or random.SystemRandom()

    async def allocate(self, reserved: Collection[int] = ()) -> int:
        """
        Return an identifier not used by any stored product.

        Args:
            reserved: IDs already handed out but not yet persisted
                (e.g. earlier items of the same batch)

        Returns:
            A free product ID in [PRODUCT_ID_MIN, PRODUCT_ID_MAX]
        """
        while True:
            candidate = self.rng.randint(PRODUCT_ID_MIN, PRODUCT_ID_MAX)
            if candidate in reserved:
                continue
            if not await self.repository.product_exists(candidate):
                return candidate
            logger.debug(f"Product ID {candidate} already taken, drawing another")
