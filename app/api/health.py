"""
Health check endpoints for monitoring and container orchestration.
"""
import time

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text

from app.core.database import get_db
from app.core.config import settings
from app.core.logging import get_logger
from app.api.errors import build_error_payload

logger = get_logger(__name__)

router = APIRouter(prefix="", tags=["health"])


@router.get("/health")
async def health_check(session: AsyncSession = Depends(get_db)):
    """Health of the record store plus app metadata."""
    start_time = time.perf_counter()

    db_status = "healthy"
    db_latency = 0
    try:
        db_start = time.perf_counter()
        await session.execute(text("SELECT 1"))
        db_latency = round((time.perf_counter() - db_start) * 1000, 2)
    except Exception as e:
        logger.error("health_check_db_error", error=str(e))
        db_status = "unhealthy"

    components = {
        "database": {"status": db_status, "latency_ms": db_latency},
    }

    is_healthy = all(c["status"] == "healthy" for c in components.values())

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
        return {
            "status": "ready",
            "database": "connected",
        }
    except Exception as e:
        logger.error("readiness_check_failed", error=str(e))
        raise HTTPException(
            status_code=503,
            detail=build_error_payload(
                code="readiness_failed",
                message="Database unavailable",
                detail=str(e),
            ),
        )


@router.get("/health/live")
async def liveness_check():
    """
    Liveness check - simple check that app is running.
    Used by Kubernetes for pod liveness.
    """
    return {"status": "alive"}
