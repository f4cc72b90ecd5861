"""Portfolio auto-creation service.

When a milestone is released (or marked complete) every student assigned
to its project is credited with a portfolio entry. The side effect is:

- idempotent: at most one entry per (student, milestone), however often
  it fires, enforced by the store's ``add_if_absent``
- best-effort: ``trigger`` logs and swallows every failure so the
  milestone transition that fired it never fails
- asynchronous: ``schedule`` runs ``trigger`` as a background task;
  ``drain`` waits for outstanding tasks (shutdown, tests)

The service reads milestones and applications but never writes to them.
"""

from __future__ import annotations

import asyncio
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from structlog import get_logger

from src.config.workflow_config import DEFAULT_WORKFLOW_CONFIG, WorkflowConfig
from src.domain.errors.entity import EntityNotFoundError
from src.domain.models.application import ASSIGNED_APPLICATION_STATES
from src.domain.models.milestone import DELIVERED_STATES
from src.domain.models.portfolio import Complexity, PortfolioEntry

if TYPE_CHECKING:
    from src.application.ports.application_repository import (
        ApplicationRepositoryProtocol,
    )
    from src.application.ports.milestone_repository import MilestoneRepositoryProtocol
    from src.application.ports.portfolio_repository import PortfolioRepositoryProtocol
    from src.application.ports.time_authority import TimeAuthorityProtocol

logger = get_logger(__name__)

_CENTS = Decimal("0.01")


class PortfolioAutoCreationService:
    """Creates portfolio entries for delivered milestones."""

    def __init__(
        self,
        portfolio_repo: PortfolioRepositoryProtocol,
        milestone_repo: MilestoneRepositoryProtocol,
        application_repo: ApplicationRepositoryProtocol,
        time_authority: TimeAuthorityProtocol,
        config: WorkflowConfig = DEFAULT_WORKFLOW_CONFIG,
    ) -> None:
        self._portfolio = portfolio_repo
        self._milestones = milestone_repo
        self._applications = application_repo
        self._time = time_authority
        self._role = config.portfolio_default_role
        self._pending: set[asyncio.Task[int]] = set()

    async def on_milestone_completion(self, milestone_id: UUID) -> list[PortfolioEntry]:
        """Create missing entries for every assigned student.

        Existing entries are left untouched. Milestones that are not
        RELEASED or COMPLETED produce nothing.

        Returns:
            The entries created by this call.

        Raises:
            EntityNotFoundError: If the milestone does not exist.
        """
        log = logger.bind(milestone_id=str(milestone_id))

        milestone = await self._milestones.get(milestone_id)
        if milestone is None:
            raise EntityNotFoundError("milestone", milestone_id)
        if milestone.status not in DELIVERED_STATES:
            log.info("portfolio_skipped_undelivered", status=milestone.status.value)
            return []

        student_ids = await self._assigned_students(milestone.project_id)
        if not student_ids:
            log.info("portfolio_skipped_no_students")
            return []

        share = (milestone.amount / len(student_ids)).quantize(
            _CENTS, rounding=ROUND_HALF_UP
        )
        complexity = Complexity.for_amount(milestone.amount)
        on_time = milestone.is_on_time()
        now = self._time.utcnow()

        created: list[PortfolioEntry] = []
        for student_id in student_ids:
            entry = PortfolioEntry(
                id=uuid4(),
                student_id=student_id,
                milestone_id=milestone.id,
                project_id=milestone.project_id,
                role=self._role,
                scope=milestone.scope or milestone.title,
                complexity=complexity,
                amount_delivered=share,
                currency=milestone.currency,
                on_time=on_time,
                verified_at=now,
            )
            if await self._portfolio.add_if_absent(entry):
                created.append(entry)

        log.info(
            "portfolio_entries_created",
            created=len(created),
            already_present=len(student_ids) - len(created),
        )
        return created

    async def trigger(self, milestone_id: UUID) -> int:
        """Best-effort wrapper around ``on_milestone_completion``.

        Returns:
            Number of entries created, 0 on failure.
        """
        try:
            created = await self.on_milestone_completion(milestone_id)
        except Exception as e:
            logger.warning(
                "portfolio_creation_failed",
                milestone_id=str(milestone_id),
                error=str(e),
                error_type=type(e).__name__,
            )
            return 0
        return len(created)

    def schedule(self, milestone_id: UUID) -> asyncio.Task[int]:
        """Run ``trigger`` in the background and keep a handle on it."""
        task = asyncio.create_task(self.trigger(milestone_id))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def drain(self) -> None:
        """Wait for every scheduled creation to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    async def list_student_portfolio(self, student_id: UUID) -> list[PortfolioEntry]:
        return await self._portfolio.list_by_student(student_id)

    async def _assigned_students(self, project_id: UUID) -> list[UUID]:
        seen: dict[UUID, None] = {}
        for application in await self._applications.list_by_project(project_id):
            if application.status in ASSIGNED_APPLICATION_STATES:
                for student_id in application.student_ids:
                    seen.setdefault(student_id, None)
        return list(seen)
