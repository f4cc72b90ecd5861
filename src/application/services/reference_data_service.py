"""Registration of projects and student groups.

Projects and groups are owned by other parts of the platform. This
service lets them be seeded into whichever backend the engine runs on.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from structlog import get_logger

from src.domain.errors.entity import EntityNotFoundError
from src.domain.errors.validation import ValidationError
from src.domain.models.group import StudentGroup
from src.domain.models.project import Project, ProjectStatus

if TYPE_CHECKING:
    from src.application.ports.group_directory import GroupDirectoryProtocol
    from src.application.ports.project_repository import ProjectRepositoryProtocol
    from src.application.ports.time_authority import TimeAuthorityProtocol

logger = get_logger(__name__)


class ReferenceDataService:
    def __init__(
        self,
        project_repo: ProjectRepositoryProtocol,
        group_directory: GroupDirectoryProtocol,
        time_authority: TimeAuthorityProtocol,
    ) -> None:
        self._projects = project_repo
        self._groups = group_directory
        self._time = time_authority

    async def register_project(
        self,
        partner_id: UUID,
        title: str,
        status: ProjectStatus = ProjectStatus.PUBLISHED,
        university_id: UUID | None = None,
        budget: Decimal | None = None,
        currency: str = "USD",
    ) -> Project:
        """Store a new project with no supervisor bound.

        Raises:
            ValidationError: If the title is blank or the budget negative.
        """
        if not title.strip():
            raise ValidationError("title", "Project title must not be blank")
        if budget is not None and budget < 0:
            raise ValidationError("budget", "Project budget must not be negative")

        now = self._time.utcnow()
        project = Project(
            id=uuid4(),
            partner_id=partner_id,
            title=title.strip(),
            status=status,
            university_id=university_id,
            budget=budget,
            currency=currency,
            created_at=now,
            updated_at=now,
        )
        await self._projects.save(project)
        logger.info("project_registered", project_id=str(project.id), status=status.value)
        return project

    async def get_project(self, project_id: UUID) -> Project:
        project = await self._projects.get(project_id)
        if project is None:
            raise EntityNotFoundError("project", project_id)
        return project

    async def register_group(
        self,
        name: str,
        member_ids: list[UUID],
        leader_id: UUID | None = None,
    ) -> StudentGroup:
        """Store a group. Duplicate member ids are collapsed.

        Raises:
            ValidationError: If there are no members or the leader is not one.
        """
        members = tuple(dict.fromkeys(member_ids))
        if not members:
            raise ValidationError("member_ids", "A group needs at least one member")
        if leader_id is not None and leader_id not in members:
            raise ValidationError("leader_id", "Group leader must be a member")

        group = StudentGroup(id=uuid4(), name=name.strip(), member_ids=members, leader_id=leader_id)
        await self._groups.add_group(group)
        logger.info("group_registered", group_id=str(group.id), members=len(members))
        return group

    async def get_group(self, group_id: UUID) -> StudentGroup:
        group = await self._groups.get_group(group_id)
        if group is None:
            raise EntityNotFoundError("group", group_id)
        return group
