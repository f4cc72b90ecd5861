"""In-memory student group directory stub."""

from __future__ import annotations

from uuid import UUID

from src.application.ports.group_directory import GroupDirectoryProtocol
from src.domain.models.group import StudentGroup


class GroupDirectoryStub(GroupDirectoryProtocol):
    def __init__(self) -> None:
        self._groups: dict[UUID, StudentGroup] = {}

    async def add_group(self, group: StudentGroup) -> None:
        """Register or replace a group (for testing and seeding)."""
        self._groups[group.id] = group

    async def get_group(self, group_id: UUID) -> StudentGroup | None:
        return self._groups.get(group_id)

    def clear(self) -> None:
        self._groups.clear()
