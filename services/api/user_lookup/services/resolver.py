"""Read-through user lookup (cache-aside).

Flow:
1. Look up the cache for the user's key
2. On a decodable hit -> return it, the store is not touched
3. On miss / cache error / undecodable entry -> fetch from the store
4. Found -> write back with TTL (failures ignored), return
5. Not found -> return None, nothing cached

The cache only ever degrades latency: cache faults are logged and absorbed.
Store faults surface as StoreError. A missed deadline surfaces as
ResolveTimeoutError; task cancellation propagates unchanged.

No single-flight: concurrent misses for one key may each read the store and
each write the cache (last writer wins).
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
from typing import Literal, Protocol

from opentelemetry import trace

from user_lookup.errors import DecodeError, ResolveTimeoutError, StoreError
from user_lookup.schemas import UserRecord
from user_lookup.services.codec import cache_key, decode_user, encode_user
from user_lookup.stores.cache import CacheResult, UserCache

logger = logging.getLogger("uvicorn.error")

DEFAULT_TTL_SECONDS = 10


class UserStore(Protocol):
    async def fetch_by_id(self, user_id: int) -> UserRecord | None: ...


@dataclass(frozen=True)
class Resolution:
    """Outcome of a lookup.

    `source` is where the user came from ("none" when absent).
    `cache_degraded` is informational: some cache step failed and was skipped.
    """

    user: UserRecord | None
    source: Literal["cache", "store", "none"]
    cache_degraded: bool = False


class UserResolver:
    """Resolves user ids through the cache, falling back to the store."""

    def __init__(
        self,
        store: UserStore,
        cache: UserCache,
        *,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        key_prefix: str = "",
        tracer: trace.Tracer | None = None,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        self.store = store
        self.cache = cache
        self.ttl_seconds = ttl_seconds
        self.key_prefix = key_prefix
        self.tracer = tracer or trace.get_tracer(__name__)

    async def resolve(self, user_id: int, *, timeout: float | None = None) -> UserRecord | None:
        """Get a user by id, or None if the store has no such user.

        Args:
            user_id: User identifier.
            timeout: Deadline in seconds for the whole lookup (None = no deadline).

        Raises:
            StoreError: If the store fails for a reason other than not-found.
            ResolveTimeoutError: If the deadline expires.
        """
        resolution = await self.resolve_detailed(user_id, timeout=timeout)
        return resolution.user

    async def resolve_detailed(self, user_id: int, *, timeout: float | None = None) -> Resolution:
        """Same as `resolve`, also reporting where the result came from."""
        if timeout is not None and timeout <= 0:
            raise ResolveTimeoutError(f"deadline already expired for user {user_id}")

        with self.tracer.start_as_current_span("get_user_by_id") as span:
            span.set_attribute("user.id", user_id)
            try:
                async with asyncio.timeout(timeout):
                    resolution = await self._resolve(user_id)
            except TimeoutError as e:
                span.set_attribute("lookup.timeout", True)
                raise ResolveTimeoutError(f"lookup for user {user_id} exceeded {timeout}s") from e

            span.set_attribute("lookup.source", resolution.source)
            span.set_attribute("cache.degraded", resolution.cache_degraded)
            return resolution

    async def _resolve(self, user_id: int) -> Resolution:
        key = cache_key(user_id, self.key_prefix)

        cached, degraded = await self._read_cache(key, user_id)
        if cached is not None:
            logger.debug(f"User cache hit: {key}")
            return Resolution(user=cached, source="cache", cache_degraded=degraded)

        logger.debug(f"User cache miss: {key}, querying store")
        user = await self._fetch_from_store(user_id)
        if user is None:
            return Resolution(user=None, source="none", cache_degraded=degraded)

        try:
            written = await self.cache.set(key, encode_user(user), self.ttl_seconds)
        except Exception as e:
            written = CacheResult(error=e)
        if not written.ok:
            # Fire-and-forget: a failed write-back never fails the lookup.
            logger.warning(f"User cache write failed for {key}: {written.error!r}")
            degraded = True

        return Resolution(user=user, source="store", cache_degraded=degraded)

    async def _read_cache(self, key: str, user_id: int) -> tuple[UserRecord | None, bool]:
        """Return (cached user or None, degraded)."""
        try:
            result = await self.cache.get(key)
        except Exception as e:
            result = CacheResult(error=e)
        if not result.ok:
            logger.warning(f"User cache read failed for {key}: {result.error!r}")
            return None, True
        if result.value is None:
            return None, False

        try:
            user = decode_user(result.value)
        except DecodeError as e:
            logger.warning(f"Discarding undecodable cache entry {key}: {e}")
            return None, True

        if user.id != user_id:
            logger.warning(f"Discarding cache entry {key}: holds user {user.id}")
            return None, True
        return user, False

    async def _fetch_from_store(self, user_id: int) -> UserRecord | None:
        try:
            return await self.store.fetch_by_id(user_id)
        except StoreError:
            raise
        except Exception as e:
            raise StoreError(f"store lookup failed for user {user_id}: {e}", cause=e) from e
