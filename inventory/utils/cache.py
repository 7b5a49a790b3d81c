import json
from typing import Any, Optional

import redis
import redis.asyncio as aioredis

from inventory.config import get_settings

settings = get_settings()

# Create Redis client (connections are opened lazily on first command)
redis_client = aioredis.from_url(settings.REDIS_URL, decode_responses=True)


class CacheService:
    """
    Redis cache service for product details.

    Every failure talking to Redis is treated as a cache miss, so the
    service keeps working from the database when Redis is down. With
    caching disabled all operations are no-ops.
    """

    def __init__(self, client: aioredis.Redis = None, ttl: int = None, enabled: bool = None):
        self.client = client or redis_client
        self.ttl = ttl or settings.CACHE_TTL
        self.enabled = settings.CACHE_ENABLED if enabled is None else enabled

    def _make_key(self, prefix: str, key: str) -> str:
        """Create a namespaced cache key."""
        return f"{prefix}:{key}"

    async def get(self, prefix: str, key: str) -> Optional[Any]:
        """
        Get a value from cache.

        Args:
            prefix: Cache key prefix (e.g., 'product')
            key: Unique identifier

        Returns:
            Cached value or None if not found
        """
        if not self.enabled:
            return None
        cache_key = self._make_key(prefix, key)
        try:
            value = await self.client.get(cache_key)
            if value:
                return json.loads(value)
            return None
        except (redis.RedisError, json.JSONDecodeError):
            return None

    async def set(self, prefix: str, key: str, value: Any, ttl: int = None) -> bool:
        """
        Set a value in cache with TTL.

        Args:
            prefix: Cache key prefix
            key: Unique identifier
            value: Value to cache (will be JSON serialized)
            ttl: Time to live in seconds (optional, uses default if not provided)

        Returns:
            True if successful, False otherwise
        """
        if not self.enabled:
            return False
        cache_key = self._make_key(prefix, key)
        ttl = ttl or self.ttl
        try:
            serialized = json.dumps(value, default=str)
            await self.client.setex(cache_key, ttl, serialized)
            return True
        except (redis.RedisError, TypeError):
            return False

    async def delete(self, prefix: str, key: str) -> bool:
        """Delete a value from cache. Returns True if the delete was sent."""
        if not self.enabled:
            return False
        cache_key = self._make_key(prefix, key)
        try:
            await self.client.delete(cache_key)
            return True
        except redis.RedisError:
            return False


# Singleton cache service instance
cache_service = CacheService()
