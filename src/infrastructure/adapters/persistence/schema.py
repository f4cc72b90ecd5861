"""DDL for the PostgreSQL persistence adapters.

Versioned workflow records (applications, projects, milestones,
disputes, supervisor requests, submissions) share one document table
keyed by (entity_type, id). Partial unique indexes on that table keep at
most one unresolved dispute per subject and one pending supervisor
request per project and supervisor. Application claims hold one row per
student of an active application, so two active applications can never
cover the same student on a project.

Portfolio entries, capacity counters and student groups get their own
tables because their writes are conditional on columns, not on a
version.
"""

from __future__ import annotations

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine
from structlog import get_logger

logger = get_logger(__name__)

SCHEMA_STATEMENTS: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS collab_documents (
        entity_type TEXT NOT NULL,
        id UUID NOT NULL,
        version INTEGER NOT NULL CHECK (version >= 1),
        document JSONB NOT NULL,
        created_at TIMESTAMPTZ NOT NULL,
        PRIMARY KEY (entity_type, id)
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_collab_documents_project
        ON collab_documents (entity_type, (document->>'project_id'))
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_collab_documents_status
        ON collab_documents (entity_type, (document->>'status'))
    """,
    """
    CREATE UNIQUE INDEX IF NOT EXISTS uq_collab_documents_unresolved_dispute
        ON collab_documents ((document->>'subject_type'), (document->>'subject_id'))
        WHERE entity_type = 'dispute'
          AND document->>'status' IN ('OPEN', 'UNDER_REVIEW')
    """,
    """
    CREATE UNIQUE INDEX IF NOT EXISTS uq_collab_documents_pending_supervisor_request
        ON collab_documents ((document->>'project_id'), (document->>'supervisor_id'))
        WHERE entity_type = 'supervisor_request'
          AND document->>'status' = 'PENDING'
    """,
    """
    CREATE TABLE IF NOT EXISTS collab_application_claims (
        project_id UUID NOT NULL,
        student_id UUID NOT NULL,
        application_id UUID NOT NULL,
        PRIMARY KEY (project_id, student_id)
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_collab_application_claims_application
        ON collab_application_claims (application_id)
    """,
    """
    CREATE TABLE IF NOT EXISTS collab_portfolio_entries (
        student_id UUID NOT NULL,
        milestone_id UUID NOT NULL,
        document JSONB NOT NULL,
        verified_at TIMESTAMPTZ NOT NULL,
        PRIMARY KEY (student_id, milestone_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS collab_student_groups (
        id UUID PRIMARY KEY,
        name TEXT NOT NULL,
        member_ids UUID[] NOT NULL,
        leader_id UUID
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS collab_supervisor_capacity (
        supervisor_id UUID PRIMARY KEY,
        current_active INTEGER NOT NULL DEFAULT 0,
        max_active INTEGER NOT NULL,
        CONSTRAINT capacity_within_bounds
            CHECK (current_active >= 0 AND current_active <= max_active)
    )
    """,
)


async def create_schema(engine: AsyncEngine) -> None:
    """Create every table and index if missing. Safe to run repeatedly."""
    async with engine.begin() as connection:
        for statement in SCHEMA_STATEMENTS:
            await connection.execute(text(statement))
    logger.info("collaboration_schema_ready", statements=len(SCHEMA_STATEMENTS))


async def truncate_all(engine: AsyncEngine) -> None:
    """Remove all rows (for integration tests)."""
    async with engine.begin() as connection:
        await connection.execute(
            text(
                "TRUNCATE collab_documents, collab_application_claims, "
                "collab_portfolio_entries, "
                "collab_supervisor_capacity, collab_student_groups"
            )
        )
