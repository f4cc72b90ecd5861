"""
Pytest configuration and shared fixtures for the collaboration engine tests.

Testing Standards:
- Async tests run under pytest-asyncio (auto mode enabled in pyproject.toml)
- Services are wired against in-memory stubs with a frozen clock
- Unit tests go in tests/unit/
- Integration tests go in tests/integration/
"""

from uuid import UUID, uuid4

import pytest

from src.bootstrap.container import (
    CollaborationContainer,
    Repositories,
    memory_repositories,
    wire_services,
)
from src.config.workflow_config import TEST_WORKFLOW_CONFIG
from src.domain.models.application import Application
from src.domain.models.project import Project
from src.infrastructure.stubs.notification_dispatcher_stub import (
    NotificationDispatcherStub,
)
from tests.helpers import FakeTimeAuthority
from tests.helpers.collaboration_scenario import assigned_application, register_project


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from src import __version__

    return __version__


@pytest.fixture
def fake_time() -> FakeTimeAuthority:
    """Clock frozen at 2026-01-01T00:00:00 UTC."""
    return FakeTimeAuthority()


@pytest.fixture
def dispatcher() -> NotificationDispatcherStub:
    return NotificationDispatcherStub()


@pytest.fixture
def repositories() -> Repositories:
    return memory_repositories()


@pytest.fixture
def container(
    repositories: Repositories,
    fake_time: FakeTimeAuthority,
    dispatcher: NotificationDispatcherStub,
) -> CollaborationContainer:
    """Every service wired against fresh stubs, TEST_WORKFLOW_CONFIG limits."""
    return wire_services(
        repositories,
        TEST_WORKFLOW_CONFIG,
        time_authority=fake_time,
        dispatcher=dispatcher,
    )


@pytest.fixture
def supervisor_id() -> UUID:
    return uuid4()


@pytest.fixture
def student_id() -> UUID:
    return uuid4()


@pytest.fixture
async def project(container: CollaborationContainer) -> Project:
    """PUBLISHED project with no supervisor."""
    return await register_project(container)


@pytest.fixture
async def supervised_project(
    container: CollaborationContainer, supervisor_id: UUID
) -> Project:
    """PUBLISHED project bound to ``supervisor_id``."""
    return await register_project(container, supervisor_id)


@pytest.fixture
async def assignment(
    container: CollaborationContainer, project: Project, student_id: UUID
) -> Application:
    """ASSIGNED application of ``student_id`` on ``project``."""
    return await assigned_application(container, project.id, student_id)
