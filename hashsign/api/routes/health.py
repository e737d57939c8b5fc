"""Health check endpoint."""

from fastapi import APIRouter, Depends

from hashsign.api.dependencies.document import get_hashsign_config
from hashsign.api.models.health import HealthResponse
from hashsign.config import HashSignConfig

router = APIRouter(prefix="/v1", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(
    config: HashSignConfig = Depends(get_hashsign_config),
) -> HealthResponse:
    """Return health status.

    Returns:
        Health status with 200 OK.
    """
    return HealthResponse(status="healthy", backend=config.backend)
