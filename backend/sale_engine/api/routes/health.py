"""Health & Readiness Probes - liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 if the sale configuration cannot be loaded
"""

import logging
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from sale_engine.api.dependencies import get_engine
from sale_engine.core.errors import ConfigurationError

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "sale-schedule-engine",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check():
    """Readiness probe - the sale configuration must load and validate."""
    try:
        engine = get_engine()
    except ConfigurationError as exc:
        logger.error(f"Sale configuration unavailable: {exc.message}", extra=exc.log_extra())
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "sale_configuration_invalid",
            },
        )
    return {
        "status": "ready",
        "checks": {"sale_configuration": "healthy"},
        "network": engine.network,
    }
