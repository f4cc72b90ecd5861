"""Unit tests for the in-memory repository stubs.

The stubs stand in for the PostgreSQL adapters in every service test,
so their compare-and-swap behaviour has to match.
"""

from __future__ import annotations

import asyncio
from dataclasses import replace
from uuid import uuid4

import pytest

from src.domain.errors.concurrent_modification import ConcurrentModificationError
from src.domain.errors.entity import AlreadyExistsError, EntityNotFoundError
from src.domain.models.dispute import Dispute, DisputeStatus, DisputeSubjectType
from src.domain.models.portfolio import PortfolioEntry
from src.domain.models.project import Project
from src.infrastructure.stubs.dispute_repository_stub import DisputeRepositoryStub
from src.infrastructure.stubs.portfolio_repository_stub import PortfolioRepositoryStub
from src.infrastructure.stubs.project_repository_stub import ProjectRepositoryStub
from src.infrastructure.stubs.supervisor_capacity_store_stub import (
    SupervisorCapacityStoreStub,
)


@pytest.fixture
def projects() -> ProjectRepositoryStub:
    return ProjectRepositoryStub()


@pytest.fixture
async def project(projects: ProjectRepositoryStub) -> Project:
    project = Project(id=uuid4(), partner_id=uuid4(), title="Warehouse scanner app")
    await projects.save(project)
    return project


class TestVersionedStore:
    async def test_update_bumps_version(
        self, projects: ProjectRepositoryStub, project: Project
    ) -> None:
        stored = await projects.update(replace(project, title="Renamed"), project.version)

        assert stored.version == project.version + 1
        assert (await projects.get(project.id)) == stored

    async def test_stale_version_loses(
        self, projects: ProjectRepositoryStub, project: Project
    ) -> None:
        await projects.update(replace(project, title="First"), project.version)

        with pytest.raises(ConcurrentModificationError) as exc_info:
            await projects.update(replace(project, title="Second"), project.version)

        assert exc_info.value.actual_version == project.version + 1
        assert (await projects.get(project.id)).title == "First"

    async def test_concurrent_updates_have_one_winner(
        self, projects: ProjectRepositoryStub, project: Project
    ) -> None:
        results = await asyncio.gather(
            *(
                projects.update(replace(project, title=f"Writer {i}"), project.version)
                for i in range(5)
            ),
            return_exceptions=True,
        )

        winners = [r for r in results if isinstance(r, Project)]
        losers = [r for r in results if isinstance(r, ConcurrentModificationError)]
        assert len(winners) == 1
        assert len(losers) == 4

    async def test_duplicate_save_refused(
        self, projects: ProjectRepositoryStub, project: Project
    ) -> None:
        with pytest.raises(AlreadyExistsError):
            await projects.save(project)

    async def test_update_of_missing_record(self, projects: ProjectRepositoryStub) -> None:
        ghost = Project(id=uuid4(), partner_id=uuid4(), title="Ghost")

        with pytest.raises(EntityNotFoundError):
            await projects.update(ghost, 1)

    async def test_delete_checks_version(
        self, projects: ProjectRepositoryStub, project: Project
    ) -> None:
        with pytest.raises(ConcurrentModificationError):
            await projects.delete(project.id, project.version + 1)

        await projects.delete(project.id, project.version)

        assert await projects.get(project.id) is None


class TestCapacityStore:
    async def test_concurrent_reserves_never_exceed_limit(self) -> None:
        store = SupervisorCapacityStoreStub()
        supervisor = uuid4()

        results = await asyncio.gather(*(store.reserve(supervisor, 3) for _ in range(10)))

        assert sum(r is not None for r in results) == 3
        assert (await store.get(supervisor, 3)).current_active == 3

    async def test_stored_limit_overrides_default(self) -> None:
        store = SupervisorCapacityStoreStub()
        supervisor = uuid4()
        await store.set_max_active(supervisor, 1)

        await store.reserve(supervisor, 10)

        assert await store.reserve(supervisor, 10) is None


class TestPortfolioStore:
    async def test_add_if_absent_is_keyed_by_student_and_milestone(self) -> None:
        store = PortfolioRepositoryStub()
        student, milestone = uuid4(), uuid4()
        first = PortfolioEntry(
            id=uuid4(), student_id=student, milestone_id=milestone, project_id=uuid4()
        )

        assert await store.add_if_absent(first) is True
        assert await store.add_if_absent(replace(first, id=uuid4())) is False
        assert await store.get(student, milestone) == first
        assert store.insert_calls == 2


class TestDisputeStore:
    async def test_find_open_ignores_closed_disputes(self) -> None:
        store = DisputeRepositoryStub()
        subject = uuid4()
        closed = Dispute(
            id=uuid4(),
            subject_type=DisputeSubjectType.PROJECT,
            subject_id=subject,
            reason="Late payment",
            description="Partner has not funded the second milestone.",
            raised_by=uuid4(),
            status=DisputeStatus.REJECTED,
        )
        await store.save(closed)

        assert await store.find_open_for_subject(DisputeSubjectType.PROJECT, subject) is None
