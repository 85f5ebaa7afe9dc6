"""Cache contract shared by every cache backend.

Every cache call returns a CacheResult instead of raising: the cache is an
accelerator, so callers decide what a failure means (the resolver ignores it).
Task cancellation is never captured.
"""

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class CacheResult:
    """Outcome of a cache operation.

    `value` is the cached text for a hit, None for a miss or a write.
    `error` is set when the operation itself failed.
    """

    value: str | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def hit(self) -> bool:
        return self.error is None and self.value is not None


class UserCache(Protocol):
    async def get(self, key: str) -> CacheResult: ...

    async def set(self, key: str, value: str, ttl: int) -> CacheResult: ...
