"""Redis store for caching.

Handles:
- Caching with TTL (SETEX)
- Connection lifecycle

Errors are returned as CacheResult (see stores/cache.py), never raised.
"""

import logging

import redis.asyncio as redis

from user_lookup.settings import Settings
from user_lookup.stores.cache import CacheResult

logger = logging.getLogger("uvicorn.error")


def create_redis(settings: Settings) -> redis.Redis:
    """Create a Redis client from REDIS_URL (connections are pooled lazily)."""
    return redis.from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=5,
        socket_timeout=5,
    )


class RedisCache:
    """Key/value cache with expiry backed by Redis."""

    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    async def get(self, key: str) -> CacheResult:
        """Get value from cache.

        Args:
            key: Cache key.

        Returns:
            CacheResult with the value, an empty result on miss, or the error.
        """
        try:
            value = await self._client.get(key)
        except Exception as e:
            return CacheResult(error=e)
        if isinstance(value, bytes):
            value = value.decode("utf-8", errors="replace")
        return CacheResult(value=value)

    async def set(self, key: str, value: str, ttl: int) -> CacheResult:
        """Set value in cache with TTL.

        Args:
            key: Cache key.
            value: Value to cache.
            ttl: Time-to-live in seconds.
        """
        try:
            await self._client.setex(key, ttl, value)
        except Exception as e:
            return CacheResult(error=e)
        return CacheResult()

    async def ping(self) -> None:
        """Validate connectivity early (especially for `rediss://` in production)."""
        await self._client.ping()
        logger.info("Redis connected")

    async def close(self) -> None:
        """Close Redis connection."""
        await self._client.aclose()
