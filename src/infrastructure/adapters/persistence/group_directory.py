"""PostgreSQL student group directory."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.application.ports.group_directory import GroupDirectoryProtocol
from src.domain.models.group import StudentGroup


class PostgresGroupDirectory(GroupDirectoryProtocol):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def add_group(self, group: StudentGroup) -> None:
        async with self._session_factory() as session, session.begin():
            await session.execute(
                text("""
                    INSERT INTO collab_student_groups (id, name, member_ids, leader_id)
                    VALUES (:id, :name, :member_ids, :leader_id)
                    ON CONFLICT (id) DO UPDATE
                    SET name = EXCLUDED.name,
                        member_ids = EXCLUDED.member_ids,
                        leader_id = EXCLUDED.leader_id
                """),
                {
                    "id": group.id,
                    "name": group.name,
                    "member_ids": list(group.member_ids),
                    "leader_id": group.leader_id,
                },
            )

    async def get_group(self, group_id: UUID) -> StudentGroup | None:
        async with self._session_factory() as session:
            result = await session.execute(
                text("""
                    SELECT id, name, member_ids, leader_id
                    FROM collab_student_groups
                    WHERE id = :id
                """),
                {"id": group_id},
            )
            row = result.fetchone()
        if row is None:
            return None
        return StudentGroup(
            id=row.id,
            name=row.name,
            member_ids=tuple(row.member_ids),
            leader_id=row.leader_id,
        )
