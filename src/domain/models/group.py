"""Student group model used by GROUP applications."""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID


@dataclass(frozen=True, eq=True)
class StudentGroup:
    """A named set of students applying together.

    Membership here is live. Applications copy it at submission time
    and never look back.
    """

    id: UUID
    name: str
    member_ids: tuple[UUID, ...]
    leader_id: UUID | None = field(default=None)

    def __post_init__(self) -> None:
        if not self.member_ids:
            raise ValueError("A student group needs at least one member")
        if self.leader_id is not None and self.leader_id not in self.member_ids:
            raise ValueError("Group leader must be a member of the group")
