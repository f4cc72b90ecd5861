"""Health check response models."""

from pydantic import BaseModel, Field

from src.config.storage_config import StorageBackend


class HealthResponse(BaseModel):
    """Liveness of the collaboration API.

    Attributes:
        status: ``healthy`` whenever the process can serve requests.
        version: Package version.
        storage_backend: Backend the workflows persist to.
    """

    status: str
    version: str
    storage_backend: StorageBackend = Field(
        ..., description="memory (stubs) or postgres"
    )
