"""FastAPI application entry point.

User Lookup API - read-through cached user records.
"""

from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from user_lookup.errors import ResolveTimeoutError, StoreError
from user_lookup.routes import api_router
from user_lookup.schemas import ErrorResponse
from user_lookup.services.resolver import UserResolver
from user_lookup.settings import Settings, get_settings
from user_lookup.stores.memory import MemoryCache
from user_lookup.stores.postgres import close_db, create_engine, create_session_factory, ping_db
from user_lookup.stores.redis import RedisCache, create_redis
from user_lookup.stores.user_repository import PostgresUserStore
from user_lookup.telemetry import install_export_pipeline, instrument_clients

logger = logging.getLogger("uvicorn.error")


def _build_cache(settings: Settings) -> RedisCache | MemoryCache:
    if settings.cache_backend == "memory":
        logger.info("Using in-process user cache")
        return MemoryCache()
    return RedisCache(create_redis(settings))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Builds the store, cache and resolver on startup and releases them on shutdown.
    """
    # Startup
    settings = get_settings()

    shutdown_tracing = install_export_pipeline(settings) if settings.otel_enabled else None

    engine = create_engine(settings)
    uninstrument_clients = instrument_clients(engine) if settings.otel_enabled else None
    try:
        await ping_db(engine)
        logger.info("Postgres connected")
    except Exception:
        # Lookups will fail with StoreError until the database is reachable.
        logger.exception("Postgres ping failed")

    cache = _build_cache(settings)
    try:
        await cache.ping()
    except Exception:
        # A cache outage only costs latency; lookups fall back to Postgres.
        logger.exception("Cache ping failed")

    app.state.resolver = UserResolver(
        store=PostgresUserStore(create_session_factory(engine)),
        cache=cache,
        ttl_seconds=settings.user_cache_ttl_seconds,
        key_prefix=settings.user_cache_key_prefix,
    )

    yield

    # Shutdown
    app.state.resolver = None
    await cache.close()
    await close_db(engine)
    if uninstrument_clients is not None:
        uninstrument_clients()
    if shutdown_tracing is not None:
        shutdown_tracing()


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="User records served through a short-TTL read-through cache",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
        """Store failures are internal errors."""
        logger.error(f"Store error on {request.url.path}: {exc}")
        body = ErrorResponse.build(
            code="STORE_ERROR",
            message=str(exc) if settings.debug else "Failed to fetch user",
        )
        return JSONResponse(status_code=500, content=body.model_dump())

    @app.exception_handler(ResolveTimeoutError)
    async def timeout_error_handler(request: Request, exc: ResolveTimeoutError) -> JSONResponse:
        """Lookups that miss their deadline."""
        logger.warning(f"Lookup timeout on {request.url.path}: {exc}")
        body = ErrorResponse.build(code="LOOKUP_TIMEOUT", message="User lookup timed out")
        return JSONResponse(status_code=504, content=body.model_dump())

    # Exception handler for structured error format
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Global exception handler returning structured error format."""
        body = ErrorResponse.build(
            code="INTERNAL_ERROR",
            message=str(exc) if settings.debug else "Internal server error",
        )
        return JSONResponse(status_code=500, content=body.model_dump())

    # Health check endpoint
    @app.get("/health", tags=["health"])
    async def health_check() -> dict[str, bool]:
        """Health check endpoint."""
        return {"ok": True}

    app.include_router(api_router)

    return app


# Application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "user_lookup.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
