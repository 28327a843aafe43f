"""Health check endpoints."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, status

from folio.core.config import settings
from folio.core.logging import get_logger
from folio.database.connection import db_ping
from folio.jobs import get_scheduler
from folio.schemas.common import HealthResponse


router = APIRouter(prefix="/health")

logger = get_logger("health")


@router.get(
    "",
    response_model=HealthResponse,
    summary="Health check",
    description="Check the health status of the API and its dependencies.",
)
async def health_check() -> HealthResponse:
    """
    Perform health check on API and dependencies.

    The database is required; a stopped scheduler only degrades the service
    (prices stop refreshing but the dashboard still works).
    """
    scheduler = get_scheduler()
    checks = {
        "database": await db_ping(),
        "scheduler": bool(scheduler and scheduler.running) or not settings.scheduler_enabled,
    }

    if all(checks.values()):
        status_text = "healthy"
    elif checks["database"]:
        status_text = "degraded"
    else:
        status_text = "unhealthy"

    return HealthResponse(
        status=status_text,
        version=settings.app_version,
        timestamp=datetime.now(timezone.utc),
        checks=checks,
    )


@router.get(
    "/ready",
    summary="Readiness check",
    description="Check if the API is ready to accept traffic.",
)
async def readiness_check() -> dict:
    """Readiness probe: 503 until the database answers."""
    if not await db_ping():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database not ready",
        )
    return {"status": "ready"}


@router.get(
    "/live",
    summary="Liveness check",
    description="Check if the API process is alive.",
)
async def liveness_check() -> dict:
    return {"status": "alive"}
