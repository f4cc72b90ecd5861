"""Health check endpoint for the collaboration API."""

from fastapi import APIRouter

from src import __version__
from src.api.models.health import HealthResponse
from src.config.storage_config import StorageConfig

router = APIRouter(prefix="/v1", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Return health status with the configured storage backend."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        storage_backend=StorageConfig.from_environment().backend,
    )
