"""Shared fakes for lookup tests (no Postgres / Redis needed)."""

import asyncio

import pytest

from user_lookup.schemas import UserRecord
from user_lookup.stores.cache import CacheResult
from user_lookup.stores.memory import MemoryCache

ALICE = UserRecord(id=1, name="Alice", age=30)


class FakeStore:
    """In-memory user store recording every fetch."""

    def __init__(self, users: list[UserRecord] | None = None, error: Exception | None = None, delay: float = 0.0):
        self.users = {u.id: u for u in users or []}
        self.error = error
        self.delay = delay
        self.calls: list[int] = []

    async def fetch_by_id(self, user_id: int) -> UserRecord | None:
        self.calls.append(user_id)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.users.get(user_id)


class FailingCache:
    """Cache whose every operation reports an error."""

    def __init__(self) -> None:
        self.gets = 0
        self.sets = 0

    async def get(self, key: str) -> CacheResult:
        self.gets += 1
        return CacheResult(error=ConnectionError("cache unreachable"))

    async def set(self, key: str, value: str, ttl: int) -> CacheResult:
        self.sets += 1
        return CacheResult(error=ConnectionError("cache unreachable"))


class RaisingCache:
    """Cache that breaks its contract and raises."""

    async def get(self, key: str) -> CacheResult:
        raise RuntimeError("boom")

    async def set(self, key: str, value: str, ttl: int) -> CacheResult:
        raise RuntimeError("boom")


class FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(1000.0)


@pytest.fixture
def cache(clock: FakeClock) -> MemoryCache:
    return MemoryCache(clock=clock)


@pytest.fixture
def store() -> FakeStore:
    return FakeStore([ALICE])
