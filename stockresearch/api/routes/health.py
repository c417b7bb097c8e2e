"""Health check endpoints."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Request

from stockresearch.core.config import settings
from stockresearch.core.logging import get_logger
from stockresearch.schemas.common import HealthResponse


router = APIRouter(prefix="/health")

logger = get_logger("health")


@router.get(
    "",
    response_model=HealthResponse,
    summary="Health check",
    description="Check the health status of the API and its store.",
)
async def health_check(request: Request) -> HealthResponse:
    checks = {"store": await request.app.state.store.healthcheck()}
    status = "healthy" if all(checks.values()) else "unhealthy"
    if status != "healthy":
        logger.warning(f"Health check failed: {checks}")

    return HealthResponse(
        status=status,
        version=settings.app_version,
        timestamp=datetime.now(timezone.utc),
        checks=checks,
    )


@router.get(
    "/live",
    summary="Liveness check",
)
async def liveness_check() -> dict:
    """Returns 200 as long as the process is serving requests."""
    return {"status": "alive"}
