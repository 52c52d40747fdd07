"""Health check route.

``GET /api/health`` verifies the process can reach the database
(``SELECT 1``) and Redis (``PING``).  Always returns HTTP 200; the
``status`` field distinguishes ``"ok"`` from ``"degraded"``.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime

import redis.asyncio as aioredis
import sqlalchemy as sa
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from news_desk import __version__
from news_desk.config.settings import get_settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["system"])


async def _check_database() -> str:
    from news_desk.core.database import AsyncSessionLocal  # noqa: PLC0415

    try:
        async with AsyncSessionLocal() as session:
            await session.execute(sa.text("SELECT 1"))
        return "ok"
    except Exception:
        logger.exception("Health check: database unreachable")
        return "error"


async def _check_redis() -> str:
    settings = get_settings()
    try:
        client: aioredis.Redis = aioredis.from_url(
            settings.redis_url,
            socket_connect_timeout=2,
            socket_timeout=2,
        )
        try:
            await client.ping()
        finally:
            await client.aclose()
        return "ok"
    except Exception:
        logger.exception("Health check: Redis unreachable")
        return "error"


@router.get("/api/health")
async def system_health() -> JSONResponse:
    """Return database and Redis reachability.

    Returns:
        JSON with keys ``status``, ``version``, ``database``, ``redis``,
        ``timestamp``.
    """
    db_status, redis_status = await asyncio.gather(_check_database(), _check_redis())
    overall = "ok" if db_status == "ok" and redis_status == "ok" else "degraded"
    payload = {
        "status": overall,
        "version": __version__,
        "database": db_status,
        "redis": redis_status,
        "timestamp": datetime.now(UTC).isoformat(),
    }
    logger.info("system health: %s", overall)
    return JSONResponse(payload)
