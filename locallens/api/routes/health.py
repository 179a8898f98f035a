"""Liveness and readiness endpoints.

Readiness depends on the database and, when configured, Redis. The AI gateway
is reported but never fails the check: without a key the stub serves requests.
"""

import logging
from typing import Any

import redis
from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text

from locallens.config import Settings, get_settings
from locallens.db.engine import get_async_engine

router = APIRouter()
logger = logging.getLogger(__name__)

ComponentStatus = tuple[bool, str]


async def check_db(settings: Settings) -> ComponentStatus:
    """Round-trip ``SELECT 1`` on the app's async engine."""
    try:
        async with get_async_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning(f"[healthz] database check failed: {e}")
        return (False, f"error: {type(e).__name__}")

    return (True, "ok")


async def check_redis(settings: Settings) -> ComponentStatus:
    """Ping Redis. Without ``redis_url`` rate limits are in memory and this passes."""
    if not settings.redis_url:
        return (True, "not_configured")

    try:
        client = redis.from_url(settings.redis_url, socket_timeout=2)  # type: ignore[no-untyped-call]
        client.ping()
    except redis.RedisError as e:
        logger.warning(f"[healthz] redis check failed: {e}")
        return (False, f"error: {type(e).__name__}")

    return (True, "ok")


async def check_gateway(settings: Settings) -> ComponentStatus:
    """Report which gateway serves requests: ``disabled``, ``stub`` or ``configured``."""
    if not settings.enable_outbound_healthcheck:
        return (True, "disabled")

    key = settings.openai_api_key
    if key is None or not key.get_secret_value():
        return (True, "stub")

    return (True, "configured")


@router.get("/health")
async def health() -> dict[str, str]:
    """Liveness: 200 whenever the process is serving."""
    return {"status": "ok"}


@router.get("/healthz", response_model=None)
async def healthz() -> dict[str, Any] | JSONResponse:
    """Readiness with per-component detail; 503 if the database or Redis is down."""
    settings = get_settings()

    db_ok, db_status = await check_db(settings)
    redis_ok, redis_status = await check_redis(settings)
    _, gateway_status = await check_gateway(settings)

    ready = db_ok and redis_ok
    body = {
        "status": "ok" if ready else "degraded",
        "components": {"db": db_status, "redis": redis_status, "gateway": gateway_status},
    }

    if not ready:
        return JSONResponse(content=body, status_code=503)

    return body
