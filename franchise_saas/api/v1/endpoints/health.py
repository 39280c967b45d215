"""
Liveness and readiness probes (public).
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from franchise_saas.api.v1.deps import get_db
from franchise_saas.schemas.common import HealthResponse, ReadinessResponse

router = APIRouter(tags=["health"])
logger = logging.getLogger(__name__)


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    """Liveness only; never touches the database."""
    settings = request.app.state.settings
    return HealthResponse(
        status="OK",
        service=settings.PROJECT_NAME,
        version=settings.VERSION,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness(request: Request, db: AsyncSession = Depends(get_db)) -> ReadinessResponse:
    """DB and Redis connectivity."""
    result = ReadinessResponse(db=False, redis=False)

    try:
        await db.execute(select(1))
        result.db = True
    except Exception as e:
        logger.error("Readiness check DB failure: %s", e)

    try:
        import redis.asyncio as aioredis

        async with aioredis.from_url(
            request.app.state.settings.REDIS_URL, socket_connect_timeout=1
        ) as r:
            await r.ping()
        result.redis = True
    except Exception as e:
        logger.error("Readiness check Redis failure: %s", e)

    return result
