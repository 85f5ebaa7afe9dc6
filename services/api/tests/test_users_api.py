"""Tests for GET /user with the resolver swapped for fakes."""

import pytest
from httpx import ASGITransport, AsyncClient

from conftest import ALICE, FailingCache, FakeStore
from user_lookup.errors import StoreError
from user_lookup.main import app
from user_lookup.routes.users import get_resolver
from user_lookup.services.resolver import UserResolver
from user_lookup.settings import Settings, get_settings
from user_lookup.stores.memory import MemoryCache


@pytest.fixture
async def make_client():
    """Build a test client around a resolver (no lifespan, no Postgres/Redis)."""
    clients: list[AsyncClient] = []

    async def _make(resolver: UserResolver, settings: Settings | None = None) -> AsyncClient:
        app.dependency_overrides[get_resolver] = lambda: resolver
        if settings is not None:
            app.dependency_overrides[get_settings] = lambda: settings
        ac = AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
        clients.append(ac)
        return ac

    yield _make

    for ac in clients:
        await ac.aclose()
    app.dependency_overrides.clear()


@pytest.mark.asyncio
async def test_get_user_miss_then_hit(make_client):
    store = FakeStore([ALICE])
    client = await make_client(UserResolver(store=store, cache=MemoryCache()))

    first = await client.get("/user", params={"id": 1})
    second = await client.get("/user", params={"id": 1})

    assert first.status_code == 200
    assert first.json() == {"id": 1, "name": "Alice", "age": 30}
    assert first.headers["X-Cache"] == "MISS"
    assert second.json() == first.json()
    assert second.headers["X-Cache"] == "HIT"
    assert store.calls == [1]


@pytest.mark.asyncio
async def test_get_user_not_found(make_client):
    client = await make_client(UserResolver(store=FakeStore([]), cache=MemoryCache()))

    response = await client.get("/user", params={"id": 2})

    assert response.status_code == 404
    assert response.json() == {
        "error": {"code": "USER_NOT_FOUND", "message": "User 2 not found", "detail": {"id": 2}}
    }


@pytest.mark.asyncio
async def test_get_user_with_cache_down_still_served(make_client):
    client = await make_client(UserResolver(store=FakeStore([ALICE]), cache=FailingCache()))

    response = await client.get("/user", params={"id": 1})

    assert response.status_code == 200
    assert response.headers["X-Cache"] == "MISS"
    assert response.headers["X-Cache-Degraded"] == "1"


@pytest.mark.asyncio
async def test_get_user_store_error_is_500(make_client):
    client = await make_client(UserResolver(store=FakeStore(error=StoreError("db down")), cache=MemoryCache()))

    response = await client.get("/user", params={"id": 1})

    assert response.status_code == 500
    assert response.json()["error"]["code"] == "STORE_ERROR"


@pytest.mark.asyncio
async def test_get_user_timeout_is_504(make_client):
    resolver = UserResolver(store=FakeStore([ALICE], delay=5.0), cache=MemoryCache())
    client = await make_client(resolver, Settings(_env_file=None, resolve_timeout_seconds=0.05))

    response = await client.get("/user", params={"id": 1})

    assert response.status_code == 504
    assert response.json()["error"]["code"] == "LOOKUP_TIMEOUT"


@pytest.mark.asyncio
@pytest.mark.parametrize("params", [{}, {"id": "abc"}, {"id": 0}, {"id": -3}])
async def test_get_user_rejects_bad_ids(make_client, params: dict):
    store = FakeStore([ALICE])
    client = await make_client(UserResolver(store=store, cache=MemoryCache()))

    response = await client.get("/user", params=params)

    assert response.status_code == 422
    assert store.calls == []
