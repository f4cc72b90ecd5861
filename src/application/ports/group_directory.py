"""Student group directory port.

Groups are managed outside the collaboration engine. The application
workflow only needs to read a group's membership at submission time;
``add_group`` exists so the directory can be seeded.
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from src.domain.models.group import StudentGroup


class GroupDirectoryProtocol(Protocol):
    async def add_group(self, group: StudentGroup) -> None:
        """Register or replace a group."""
        ...

    async def get_group(self, group_id: UUID) -> StudentGroup | None:
        """Return the group with its current membership, None if unknown."""
        ...
