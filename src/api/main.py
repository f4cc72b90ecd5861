"""FastAPI application entry point for the collaboration engine."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src import __version__
from src.api.errors import register_error_handlers
from src.api.middleware.logging_middleware import LoggingMiddleware
from src.api.routes.applications import router as applications_router
from src.api.routes.capacity import router as capacity_router
from src.api.routes.disputes import router as disputes_router
from src.api.routes.health import router as health_router
from src.api.routes.milestones import router as milestones_router
from src.api.routes.portfolio import router as portfolio_router
from src.api.routes.reference import router as reference_router
from src.api.routes.supervisor_requests import router as supervisor_requests_router
from src.api.startup import on_shutdown, on_startup


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    await on_startup()
    yield
    await on_shutdown()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Collaboration Lifecycle API",
        description="Applications, milestone escrow, disputes and portfolios",
        version=__version__,
        lifespan=lifespan,
    )
    app.add_middleware(LoggingMiddleware)
    register_error_handlers(app)

    app.include_router(health_router)
    app.include_router(reference_router)
    app.include_router(applications_router)
    app.include_router(supervisor_requests_router)
    app.include_router(capacity_router)
    app.include_router(milestones_router)
    app.include_router(disputes_router)
    app.include_router(portfolio_router)
    return app


app = create_app()
