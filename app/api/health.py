"""
Health check endpoints for monitoring and container orchestration.
"""
import logging
import time

import redis.asyncio as redis
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.config import settings
from app.api.errors import ErrorCode, build_error_payload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["health"])


async def _check_database(session: AsyncSession) -> dict:
    start = time.perf_counter()
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check DB error: {e}")
        return {"status": "unhealthy", "latency_ms": 0, "detail": str(e)}
    return {"status": "healthy", "latency_ms": round((time.perf_counter() - start) * 1000, 2)}


async def _check_redis() -> dict:
    # Redis only backs the score cache, so an outage degrades but never fails the app
    start = time.perf_counter()
    client = redis.from_url(settings.REDIS_URL, socket_connect_timeout=1)
    try:
        await client.ping()
    except (redis.RedisError, OSError) as e:
        logger.warning(f"Health check Redis error: {e}")
        return {"status": "degraded", "latency_ms": 0, "detail": str(e)}
    finally:
        await client.aclose()
    return {"status": "healthy", "latency_ms": round((time.perf_counter() - start) * 1000, 2)}


@router.get("/health")
async def health_check(session: AsyncSession = Depends(get_db)):
    """Health of every component the gateway talks to."""
    start_time = time.perf_counter()

    # OpenAI: config only, no real request to save cost
    openai_status = "healthy" if settings.OPENAI_API_KEY else "unconfigured"

    components = {
        "database": await _check_database(session),
        "redis": await _check_redis(),
        "openai": {"status": openai_status},
    }

    is_healthy = all(c["status"] in ("healthy", "unconfigured") for c in components.values())

    return {
        "status": "healthy" if is_healthy else "degraded",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "components": components,
        "total_latency_ms": round((time.perf_counter() - start_time) * 1000, 2),
    }


@router.get("/health/ready")
async def readiness_check(db: AsyncSession = Depends(get_db)):
    """
    Readiness check - verifies database connection.
    Used by Kubernetes for pod readiness.
    """
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Readiness check failed: {e}")
        raise HTTPException(
            status_code=503,
            detail=build_error_payload(
                code=ErrorCode.READINESS_FAILED,
                message="Database unavailable",
                detail=str(e),
            ),
        )
    return {"status": "ready", "database": "connected"}


@router.get("/health/live")
async def liveness_check():
    """Liveness check - the process is up."""
    return {"status": "alive"}
