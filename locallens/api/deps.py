"""Shared FastAPI dependencies: repositories, gateway, storage, rate limiting."""

import logging
from functools import lru_cache
from typing import Annotated

import redis
from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from locallens.api.auth import get_current_context
from locallens.config import get_settings
from locallens.db.context import RequestContext
from locallens.db.engine import get_session
from locallens.db.inmemory import InMemoryRateLimiter
from locallens.db.repositories import (
    BookingRepository,
    GuideRepository,
    ItineraryRepository,
    MessageRepository,
    ProfileRepository,
    RateLimiter,
)
from locallens.db.sql_repositories import (
    SqlBookingRepository,
    SqlGuideRepository,
    SqlItineraryRepository,
    SqlMessageRepository,
    SqlProfileRepository,
)
from locallens.errors import (
    GatewayError,
    LocalLensError,
    NotFoundError,
    PermissionDenied,
    StaleEditError,
    ValidationFailure,
)
from locallens.middleware.ratelimit import RateLimitMiddleware, create_default_bucket_map
from locallens.ratelimit import RedisRateLimiter
from locallens.storage.objects import LocalObjectStore, ObjectStore

logger = logging.getLogger(__name__)


def get_itinerary_repository(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ItineraryRepository:
    return SqlItineraryRepository(session)


def get_profile_repository(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ProfileRepository:
    return SqlProfileRepository(session)


def get_guide_repository(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> GuideRepository:
    return SqlGuideRepository(session)


def get_booking_repository(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> BookingRepository:
    return SqlBookingRepository(session)


def get_message_repository(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> MessageRepository:
    return SqlMessageRepository(session)


@lru_cache
def get_object_store() -> ObjectStore:
    """Filesystem object store rooted at ``settings.storage_root``."""
    settings = get_settings()
    return LocalObjectStore(settings.storage_root, settings.storage_public_base_url)


@lru_cache
def get_rate_limit_middleware() -> RateLimitMiddleware:
    """Per-bucket limiters, Redis-backed when ``redis_url`` is configured."""
    settings = get_settings()
    limits = {
        "planning": settings.planning_calls_per_min,
        "crud": settings.crud_ops_per_min,
    }

    limiters: dict[str, RateLimiter]
    if settings.redis_url:
        client = redis.from_url(settings.redis_url)  # type: ignore[no-untyped-call]
        limiters = {b: RedisRateLimiter(client, max_requests=n) for b, n in limits.items()}
    else:
        limiters = {b: InMemoryRateLimiter(max_requests=n) for b, n in limits.items()}

    return RateLimitMiddleware(limiters, create_default_bucket_map())


async def enforce_rate_limit(
    request: Request,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    middleware: Annotated[RateLimitMiddleware, Depends(get_rate_limit_middleware)],
) -> None:
    """Reject the request with 429 once the user's bucket is exhausted."""
    allowed, retry_after = middleware.check_rate_limit(request.url.path, ctx)
    if not allowed:
        logger.warning(f"[ratelimit] {ctx.user_id} throttled on {request.url.path}")
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Rate limit exceeded",
            headers={"Retry-After": str(retry_after)},
        )


def http_error(error: LocalLensError) -> HTTPException:
    """Translate a domain error into an HTTP error with a readable detail."""
    if isinstance(error, StaleEditError):
        code = status.HTTP_409_CONFLICT
    elif isinstance(error, ValidationFailure):
        code = status.HTTP_400_BAD_REQUEST
    elif isinstance(error, PermissionDenied):
        code = status.HTTP_403_FORBIDDEN
    elif isinstance(error, NotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(error, GatewayError):
        code = status.HTTP_502_BAD_GATEWAY
    else:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return HTTPException(status_code=code, detail=str(error))
