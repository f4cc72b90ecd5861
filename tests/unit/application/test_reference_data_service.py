"""Unit tests for ReferenceDataService."""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest

from src.application.services.reference_data_service import ReferenceDataService
from src.bootstrap.container import CollaborationContainer
from src.domain.errors.entity import EntityNotFoundError
from src.domain.errors.validation import ValidationError
from src.domain.models.project import ProjectStatus


@pytest.fixture
def service(container: CollaborationContainer) -> ReferenceDataService:
    return container.reference_data


class TestProjects:
    async def test_register_and_get(self, service: ReferenceDataService) -> None:
        partner = uuid4()

        project = await service.register_project(
            partner, "  Route planner  ", budget=Decimal("12000"), currency="EUR"
        )

        stored = await service.get_project(project.id)
        assert stored.title == "Route planner"
        assert stored.partner_id == partner
        assert stored.status == ProjectStatus.PUBLISHED
        assert stored.supervisor_id is None
        assert stored.currency == "EUR"

    @pytest.mark.parametrize(
        ("title", "budget", "field"),
        [("   ", None, "title"), ("Route planner", Decimal("-1"), "budget")],
    )
    async def test_invalid_input(
        self,
        service: ReferenceDataService,
        title: str,
        budget: Decimal | None,
        field: str,
    ) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await service.register_project(uuid4(), title, budget=budget)

        assert exc_info.value.field == field

    async def test_unknown_project(self, service: ReferenceDataService) -> None:
        with pytest.raises(EntityNotFoundError):
            await service.get_project(uuid4())


class TestGroups:
    async def test_duplicate_members_collapsed(self, service: ReferenceDataService) -> None:
        lead, other = uuid4(), uuid4()

        group = await service.register_group("Team Turnip", [lead, other, lead], leader_id=lead)

        stored = await service.get_group(group.id)
        assert stored.member_ids == (lead, other)
        assert stored.leader_id == lead

    async def test_empty_group_refused(self, service: ReferenceDataService) -> None:
        with pytest.raises(ValidationError):
            await service.register_group("Nobody", [])

    async def test_leader_must_be_member(self, service: ReferenceDataService) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await service.register_group("Team Kale", [uuid4()], leader_id=uuid4())

        assert exc_info.value.field == "leader_id"

    async def test_unknown_group(self, service: ReferenceDataService) -> None:
        with pytest.raises(EntityNotFoundError):
            await service.get_group(uuid4())
