"""Workflow tests against a real PostgreSQL instance.

These run the same services as the unit suite, but every write goes
through the PostgreSQL adapters, so concurrent callers really do race
on row locks and version checks.
"""

from __future__ import annotations

import asyncio
from dataclasses import replace
from decimal import Decimal
from uuid import UUID, uuid4

import pytest

from src.bootstrap.container import CollaborationContainer, Repositories
from src.domain.errors.capacity import CapacityExceededError
from src.domain.errors.concurrent_modification import ConcurrentModificationError
from src.domain.errors.entity import AlreadyExistsError
from src.domain.errors.state_transition import InvalidTransitionError
from src.domain.models.application import ApplicantType, Application, ApplicationStatus
from src.domain.models.dispute import Dispute, DisputeLevel, DisputeSubjectType
from src.domain.models.milestone import EscrowStatus, Milestone, MilestoneStatus
from src.domain.models.portfolio import PortfolioEntry
from src.domain.models.project import Project
from src.domain.models.supervisor_request import SupervisorRequest
from tests.helpers import FakeTimeAuthority
from tests.helpers.collaboration_scenario import (
    STATEMENT,
    assigned_application,
    milestone_at,
    offered_application,
    register_project,
    submit,
)

pytestmark = pytest.mark.integration


async def test_happy_path_to_portfolio(pg_container: CollaborationContainer) -> None:
    project = await register_project(pg_container)
    student = uuid4()
    application = await assigned_application(pg_container, project.id, student)

    released = await milestone_at(
        pg_container, project.id, student, MilestoneStatus.RELEASED, Decimal("6000")
    )

    assert application.status == ApplicationStatus.ASSIGNED
    assert released.escrow_status == EscrowStatus.RELEASED
    [entry] = await pg_container.portfolio.list_student_portfolio(student)
    assert entry.milestone_id == released.id
    assert entry.amount_delivered == Decimal("6000.00")


async def test_documents_round_trip(pg_repositories: Repositories) -> None:
    project = Project(id=uuid4(), partner_id=uuid4(), title="Route planner")
    await pg_repositories.projects.save(project)

    loaded = await pg_repositories.projects.get(project.id)

    assert loaded == project
    with pytest.raises(AlreadyExistsError):
        await pg_repositories.projects.save(project)


async def test_stale_update_is_rejected(pg_repositories: Repositories) -> None:
    project = Project(id=uuid4(), partner_id=uuid4(), title="Route planner")
    await pg_repositories.projects.save(project)
    await pg_repositories.projects.update(replace(project, title="First"), project.version)

    with pytest.raises(ConcurrentModificationError):
        await pg_repositories.projects.update(
            replace(project, title="Second"), project.version
        )

    assert (await pg_repositories.projects.get(project.id)).title == "First"


async def test_concurrent_reserves_respect_limit(
    pg_container: CollaborationContainer,
) -> None:
    supervisor = uuid4()

    results = await asyncio.gather(
        *(pg_container.capacity.reserve(supervisor) for _ in range(10)),
        return_exceptions=True,
    )

    refused = [r for r in results if isinstance(r, CapacityExceededError)]
    assert len(refused) == 8
    assert (await pg_container.capacity.query(supervisor)).current_active == 2


async def test_concurrent_accepts_respect_capacity(
    pg_container: CollaborationContainer,
) -> None:
    supervisor = uuid4()
    project = await register_project(pg_container, supervisor)
    offers = [await offered_application(pg_container, project.id) for _ in range(4)]

    results = await asyncio.gather(
        *(pg_container.applications.accept_offer(o.id) for o in offers),
        return_exceptions=True,
    )

    assert sum(isinstance(r, CapacityExceededError) for r in results) == 2
    stored = await pg_container.applications.list_project_applications(project.id)
    assert sum(a.status == ApplicationStatus.ASSIGNED for a in stored) == 2
    assert (await pg_container.capacity.query(supervisor)).current_active == 2


async def test_concurrent_release_has_one_winner(
    pg_container: CollaborationContainer,
) -> None:
    project = await register_project(pg_container)
    student = uuid4()
    await assigned_application(pg_container, project.id, student)
    milestone = await milestone_at(
        pg_container, project.id, student, MilestoneStatus.PARTNER_REVIEW
    )

    results = await asyncio.gather(
        *(pg_container.milestones.approve_and_release(milestone.id) for _ in range(3)),
        return_exceptions=True,
    )
    await pg_container.portfolio.drain()

    winners = [r for r in results if isinstance(r, Milestone)]
    assert len(winners) == 1
    assert all(
        isinstance(r, ConcurrentModificationError | InvalidTransitionError)
        for r in results
        if not isinstance(r, Milestone)
    )
    assert len(await pg_container.portfolio.list_student_portfolio(student)) == 1


async def test_portfolio_insert_is_idempotent(pg_repositories: Repositories) -> None:
    entry = PortfolioEntry(
        id=uuid4(), student_id=uuid4(), milestone_id=uuid4(), project_id=uuid4()
    )

    outcomes = await asyncio.gather(
        *(pg_repositories.portfolio.add_if_absent(replace(entry, id=uuid4())) for _ in range(4))
    )

    assert outcomes.count(True) == 1
    assert len(await pg_repositories.portfolio.list_by_milestone(entry.milestone_id)) == 1


async def test_open_dispute_lookup(pg_container: CollaborationContainer) -> None:
    project = await register_project(pg_container)
    raised_by: UUID = uuid4()

    dispute = await pg_container.disputes.create_dispute(
        subject_type=DisputeSubjectType.PROJECT,
        subject_id=project.id,
        reason="Unpaid work",
        description="The partner has stopped answering messages for three weeks.",
        raised_by=raised_by,
    )
    escalated = await pg_container.disputes.escalate(dispute.id)

    found = await pg_container.repositories.disputes.find_open_for_subject(
        DisputeSubjectType.PROJECT, project.id
    )
    assert found == escalated
    assert found.level == DisputeLevel.UNIVERSITY_ADMIN


async def test_concurrent_disputes_leave_one_unresolved(
    pg_container: CollaborationContainer,
) -> None:
    project = await register_project(pg_container)

    results = await asyncio.gather(
        *(
            pg_container.disputes.create_dispute(
                subject_type=DisputeSubjectType.PROJECT,
                subject_id=project.id,
                reason="Unpaid work",
                description="The partner has stopped answering messages for three weeks.",
                raised_by=uuid4(),
            )
            for _ in range(4)
        ),
        return_exceptions=True,
    )

    assert sum(isinstance(r, Dispute) for r in results) == 1
    assert sum(isinstance(r, AlreadyExistsError) for r in results) == 3
    stored = await pg_container.repositories.disputes.list_by_subject(
        DisputeSubjectType.PROJECT, project.id
    )
    assert len(stored) == 1


async def test_concurrent_supervisor_requests_leave_one_pending(
    pg_container: CollaborationContainer,
) -> None:
    project = await register_project(pg_container)
    supervisor = uuid4()

    results = await asyncio.gather(
        *(
            pg_container.supervisor_requests.create_request(
                project.id, supervisor, requested_by=uuid4()
            )
            for _ in range(4)
        ),
        return_exceptions=True,
    )

    assert sum(isinstance(r, SupervisorRequest) for r in results) == 1
    assert sum(isinstance(r, AlreadyExistsError) for r in results) == 3
    assert len(await pg_container.supervisor_requests.list_for_supervisor(supervisor)) == 1


async def test_concurrent_submissions_leave_one_application(
    pg_container: CollaborationContainer,
) -> None:
    project = await register_project(pg_container)
    student = uuid4()

    results = await asyncio.gather(
        *(submit(pg_container, project.id, student) for _ in range(4)),
        return_exceptions=True,
    )

    assert sum(isinstance(r, Application) for r in results) == 1
    assert sum(isinstance(r, AlreadyExistsError) for r in results) == 3
    assert len(await pg_container.applications.list_project_applications(project.id)) == 1


async def test_closed_application_releases_its_students(
    pg_repositories: Repositories, fake_time: FakeTimeAuthority
) -> None:
    project_id, student = uuid4(), uuid4()
    now = fake_time.utcnow()

    def application_for(*student_ids: UUID) -> Application:
        return Application(
            id=uuid4(),
            project_id=project_id,
            applicant_type=ApplicantType.INDIVIDUAL,
            student_ids=student_ids,
            statement=STATEMENT,
            created_at=now,
            updated_at=now,
        )

    first = application_for(student)
    await pg_repositories.applications.save(first)

    with pytest.raises(AlreadyExistsError):
        await pg_repositories.applications.save(application_for(uuid4(), student))

    await pg_repositories.applications.update(first.rejected(now), first.version)
    second = application_for(uuid4(), student)
    await pg_repositories.applications.save(second)

    with pytest.raises(AlreadyExistsError):
        await pg_repositories.applications.update(
            replace(first, version=2), expected_version=2
        )
    assert (await pg_repositories.applications.get(first.id)).status == (
        ApplicationStatus.REJECTED
    )


async def test_second_pending_supervisor_request_refused_by_index(
    pg_repositories: Repositories,
) -> None:
    project_id, supervisor = uuid4(), uuid4()
    first = SupervisorRequest(
        id=uuid4(), project_id=project_id, supervisor_id=supervisor, requested_by=uuid4()
    )
    await pg_repositories.supervisor_requests.save(first)

    with pytest.raises(AlreadyExistsError):
        await pg_repositories.supervisor_requests.save(replace(first, id=uuid4()))

    await pg_repositories.supervisor_requests.update(
        first.denied(first.created_at), first.version
    )
    await pg_repositories.supervisor_requests.save(replace(first, id=uuid4()))
