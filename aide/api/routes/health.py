"""
Health Check Routes - System health and monitoring endpoints.

These endpoints are used for:
1. Load balancer health checks
2. Liveness and readiness checks
3. Quick system status verification
"""
from datetime import datetime

from fastapi import APIRouter, Depends

from aide import __version__
from aide.capabilities import CapabilityRegistry, get_registry
from aide.core.config import get_settings
from aide.core.logging_config import get_logger
from aide.models.chat import HealthResponse

logger = get_logger(__name__)

router = APIRouter(
    prefix="/health",
    tags=["Health"],
)


@router.get(
    "",
    response_model=HealthResponse,
    summary="Health check endpoint",
    description="Returns 200 OK while the API process is up."
)
async def health_check(registry: CapabilityRegistry = Depends(get_registry)) -> HealthResponse:
    """
    Perform a basic health check.

    Does not contact the language model provider.
    """
    logger.debug("Health check requested")

    return HealthResponse(
        status="healthy",
        version=__version__,
        capabilities=registry.count,
        timestamp=datetime.utcnow()
    )


@router.get(
    "/ready",
    response_model=HealthResponse,
    summary="Readiness check endpoint",
    description="Reports 'ready' once an API key is configured, 'degraded' otherwise."
)
async def readiness_check(registry: CapabilityRegistry = Depends(get_registry)) -> HealthResponse:
    """
    Perform a readiness check.

    Chat requests need a provider API key; without one the service can
    still list and execute capabilities directly.
    """
    logger.debug("Readiness check requested")

    settings = get_settings()
    status = "ready" if settings.groq_api_key.strip() else "degraded"

    return HealthResponse(
        status=status,
        version=__version__,
        capabilities=registry.count,
        timestamp=datetime.utcnow()
    )
