"""User lookup endpoint.

GET /user?id=1 -> user JSON

Status mapping (all errors use the ErrorResponse envelope):
- found -> 200 (X-Cache: HIT|MISS)
- absent -> 404 USER_NOT_FOUND
- StoreError -> 500 STORE_ERROR (see main.py handlers)
- ResolveTimeoutError -> 504 LOOKUP_TIMEOUT (see main.py handlers)

Routers are thin: the resolver owns the lookup policy.
"""

from fastapi import APIRouter, Depends, Query, Request, Response
from fastapi.responses import JSONResponse
from opentelemetry import trace

from user_lookup.schemas import ErrorResponse, UserRecord
from user_lookup.services.resolver import UserResolver
from user_lookup.settings import Settings, get_settings

router = APIRouter()


def get_resolver(request: Request) -> UserResolver:
    """Resolver built at startup (see lifespan in main.py)."""
    resolver = getattr(request.app.state, "resolver", None)
    if resolver is None:
        raise RuntimeError("Resolver not initialized. Is the application lifespan running?")
    return resolver


def get_tracer() -> trace.Tracer:
    """Tracer for handler spans (global provider)."""
    return trace.get_tracer(__name__)


@router.get(
    "/user",
    response_model=UserRecord,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}, 504: {"model": ErrorResponse}},
)
async def get_user(
    response: Response,
    user_id: int = Query(
        alias="id",
        ge=1,
        description="User identifier",
        examples=[1],
    ),
    resolver: UserResolver = Depends(get_resolver),
    settings: Settings = Depends(get_settings),
    tracer: trace.Tracer = Depends(get_tracer),
) -> UserRecord | JSONResponse:
    """Get a user by id, served from cache when possible.

    Returns:
        The user, or a 404 ErrorResponse if no user has this id.
    """
    with tracer.start_as_current_span("user_handler") as span:
        span.set_attribute("user.id", user_id)
        resolution = await resolver.resolve_detailed(user_id, timeout=settings.resolve_timeout_seconds)

    if resolution.user is None:
        body = ErrorResponse.build(
            code="USER_NOT_FOUND",
            message=f"User {user_id} not found",
            detail={"id": user_id},
        )
        return JSONResponse(status_code=404, content=body.model_dump())

    response.headers["X-Cache"] = "HIT" if resolution.source == "cache" else "MISS"
    if resolution.cache_degraded:
        response.headers["X-Cache-Degraded"] = "1"
    return resolution.user
