"""In-process TTL cache.

Same contract as RedisCache, for local runs without Redis and for tests.
An entry written at t0 with ttl seconds is gone for reads at or after t0 + ttl.
Expired entries are dropped when their key is read and on every write.
"""

from collections.abc import Callable
import time

from user_lookup.stores.cache import CacheResult


class MemoryCache:
    """Dict-backed cache with per-entry expiry."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[str, float]] = {}

    async def get(self, key: str) -> CacheResult:
        entry = self._entries.get(key)
        if entry is None:
            return CacheResult()

        value, expires_at = entry
        if self._clock() >= expires_at:
            self._entries.pop(key, None)
            return CacheResult()
        return CacheResult(value=value)

    async def set(self, key: str, value: str, ttl: int) -> CacheResult:
        if ttl <= 0:
            return CacheResult(error=ValueError(f"ttl must be positive, got {ttl}"))
        now = self._clock()
        self._evict_expired(now)
        self._entries[key] = (value, now + ttl)
        return CacheResult()

    def _evict_expired(self, now: float) -> None:
        expired = [k for k, (_, expires_at) in self._entries.items() if now >= expires_at]
        for k in expired:
            del self._entries[k]

    async def ping(self) -> None:
        return None

    async def close(self) -> None:
        self._entries.clear()

    def __contains__(self, key: str) -> bool:
        # Presence ignoring expiry.
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
