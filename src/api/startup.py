"""Startup and shutdown hooks for the collaboration API.

Startup:
1. Configure structured logging from ENVIRONMENT
2. Build the service container (memory or postgres backend)
3. Create the PostgreSQL schema when the postgres backend is selected

Shutdown:
1. Wait for background portfolio creation to finish
2. Dispose of the database engine

Usage in FastAPI:
    @asynccontextmanager
    async def lifespan(app):
        await on_startup()
        yield
        await on_shutdown()
"""

import os

from structlog import get_logger

from src.bootstrap.container import get_container
from src.config.storage_config import StorageBackend, StorageConfig
from src.infrastructure.observability import configure_structlog

logger = get_logger(__name__)


def configure_logging() -> None:
    """Configure structlog from the ENVIRONMENT variable.

    ``production`` (default) renders JSON; ``development`` and ``test``
    render to the console.
    """
    environment = os.environ.get("ENVIRONMENT", "production")
    configure_structlog(environment=environment)
    logger.info("structured_logging_configured", environment=environment)


async def on_startup() -> None:
    configure_logging()
    container = get_container()

    storage = StorageConfig.from_environment()
    if storage.backend == StorageBackend.POSTGRES:
        from src.bootstrap.database import ensure_schema

        await ensure_schema(storage.database_url)

    logger.info(
        "collaboration_api_started",
        backend=storage.backend.value,
        default_supervisor_capacity=container.config.default_supervisor_capacity,
    )


async def on_shutdown() -> None:
    await get_container().portfolio.drain()

    from src.bootstrap.database import close_database_engine

    await close_database_engine()
    logger.info("collaboration_api_stopped")
