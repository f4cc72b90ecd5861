"""
Integration test configuration with testcontainers.

This module provides fixtures for running the workflows against a real
PostgreSQL 16 container:
- ``postgres_container`` is started once per session
- ``postgres_url`` is its asyncpg connection URL
- ``pg_repositories`` builds the PostgreSQL adapters on a fresh engine,
  creates the schema and truncates every table afterwards
- ``pg_container`` wires every service on top of those adapters

Tests that use these fixtures should be marked ``@pytest.mark.integration``.
When Docker is not reachable the PostgreSQL fixtures skip instead of
failing.
"""

from collections.abc import AsyncGenerator, Generator

import pytest
from testcontainers.postgres import PostgresContainer

from src.bootstrap.container import (
    CollaborationContainer,
    Repositories,
    postgres_repositories,
    wire_services,
)
from src.bootstrap.database import (
    close_database_engine,
    get_engine,
    reset_database_bootstrap,
    to_async_url,
)
from src.config.workflow_config import TEST_WORKFLOW_CONFIG
from src.infrastructure.adapters.persistence.schema import create_schema, truncate_all
from src.infrastructure.stubs.notification_dispatcher_stub import (
    NotificationDispatcherStub,
)
from tests.helpers import FakeTimeAuthority


@pytest.fixture(scope="session")
def postgres_container() -> Generator[PostgresContainer, None, None]:
    """Session-scoped PostgreSQL 16 container."""
    container = PostgresContainer("postgres:16-alpine")
    try:
        container.start()
    except Exception as e:
        pytest.skip(f"Docker is not available for PostgreSQL tests: {e}")
    try:
        yield container
    finally:
        container.stop()


@pytest.fixture(scope="session")
def postgres_url(postgres_container: PostgresContainer) -> str:
    """asyncpg URL of the session container."""
    return to_async_url(postgres_container.get_connection_url())


@pytest.fixture
async def pg_repositories(postgres_url: str) -> AsyncGenerator[Repositories, None]:
    """PostgreSQL adapters on an engine bound to this test's event loop."""
    reset_database_bootstrap()
    engine = get_engine(postgres_url)
    await create_schema(engine)
    repositories = postgres_repositories(postgres_url)

    yield repositories

    await truncate_all(engine)
    await close_database_engine()


@pytest.fixture
def pg_container(
    pg_repositories: Repositories,
    fake_time: FakeTimeAuthority,
    dispatcher: NotificationDispatcherStub,
) -> CollaborationContainer:
    return wire_services(
        pg_repositories,
        TEST_WORKFLOW_CONFIG,
        time_authority=fake_time,
        dispatcher=dispatcher,
    )
