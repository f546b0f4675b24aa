# backend/roombook/routes/v1/health.py
"""
Health check endpoint for monitoring and load balancer health checks.
"""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter

from ...core.constants import API_VERSION, SERVICE_NAME
from ...schemas.health import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness only; does not touch the database."""
    return HealthResponse(
        status="healthy",
        service=SERVICE_NAME,
        version=API_VERSION,
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    )
