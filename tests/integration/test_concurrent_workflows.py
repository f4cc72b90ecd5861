"""Concurrency tests for the workflows on the in-memory stubs.

Every write goes through a compare-and-swap, so racing callers either
win or get a recoverable error; the invariants hold whichever wins.
"""

from __future__ import annotations

import asyncio
from uuid import UUID, uuid4

from src.bootstrap.container import CollaborationContainer
from src.domain.errors.capacity import CapacityExceededError
from src.domain.errors.concurrent_modification import ConcurrentModificationError
from src.domain.errors.state_transition import InvalidStateError, InvalidTransitionError
from src.domain.models.application import Application, ApplicationStatus
from src.domain.models.milestone import Milestone, MilestoneStatus
from src.domain.models.project import Project
from tests.helpers.collaboration_scenario import milestone_at, offered_application

RACE_LOSERS = (ConcurrentModificationError, InvalidStateError, InvalidTransitionError)


async def test_accepts_never_exceed_supervisor_capacity(
    container: CollaborationContainer,
    supervised_project: Project,
    supervisor_id: UUID,
) -> None:
    offers = [
        await offered_application(container, supervised_project.id) for _ in range(5)
    ]

    results = await asyncio.gather(
        *(container.applications.accept_offer(o.id) for o in offers),
        return_exceptions=True,
    )

    assigned = [r for r in results if isinstance(r, Application)]
    refused = [r for r in results if isinstance(r, CapacityExceededError)]
    assert len(assigned) == 2
    assert len(refused) == 3
    assert all(a.status == ApplicationStatus.ASSIGNED for a in assigned)
    assert (await container.capacity.query(supervisor_id)).current_active == 2


async def test_concurrent_reserves_respect_limit(container: CollaborationContainer) -> None:
    supervisor = uuid4()

    results = await asyncio.gather(
        *(container.capacity.reserve(supervisor) for _ in range(8)),
        return_exceptions=True,
    )

    assert sum(not isinstance(r, Exception) for r in results) == 2
    capacity = await container.capacity.query(supervisor)
    assert capacity.current_active == capacity.max_active == 2


async def test_double_release_has_one_winner(
    container: CollaborationContainer,
    project: Project,
    assignment: Application,
    student_id: UUID,
) -> None:
    milestone = await milestone_at(
        container, project.id, student_id, MilestoneStatus.PARTNER_REVIEW
    )

    results = await asyncio.gather(
        container.milestones.approve_and_release(milestone.id),
        container.milestones.approve_and_release(milestone.id),
        return_exceptions=True,
    )
    await container.portfolio.drain()

    winners = [r for r in results if isinstance(r, Milestone)]
    assert len(winners) == 1
    assert all(isinstance(r, RACE_LOSERS) for r in results if r not in winners)
    assert len(await container.portfolio.list_student_portfolio(student_id)) == 1


async def test_release_racing_change_request(
    container: CollaborationContainer,
    project: Project,
    assignment: Application,
    student_id: UUID,
) -> None:
    milestone = await milestone_at(
        container, project.id, student_id, MilestoneStatus.PARTNER_REVIEW
    )

    results = await asyncio.gather(
        container.milestones.approve_and_release(milestone.id),
        container.milestones.request_changes(milestone.id, "Charts do not match the data"),
        return_exceptions=True,
    )
    await container.portfolio.drain()

    assert sum(isinstance(r, Milestone) for r in results) == 1
    stored = await container.milestones.get_milestone(milestone.id)
    assert stored.status in (MilestoneStatus.RELEASED, MilestoneStatus.CHANGES_REQUESTED)
    portfolio = await container.portfolio.list_student_portfolio(student_id)
    assert len(portfolio) == (1 if stored.status == MilestoneStatus.RELEASED else 0)


async def test_repeated_portfolio_triggers_create_one_entry(
    container: CollaborationContainer,
    project: Project,
    assignment: Application,
    student_id: UUID,
) -> None:
    milestone = await milestone_at(
        container, project.id, student_id, MilestoneStatus.RELEASED
    )

    created = await asyncio.gather(
        *(container.portfolio.trigger(milestone.id) for _ in range(5))
    )

    assert sum(created) == 0
    assert len(await container.portfolio.list_student_portfolio(student_id)) == 1
