"""Unit tests for SubmissionService."""

from __future__ import annotations

from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest

from src.bootstrap.container import CollaborationContainer
from src.domain.errors.state_transition import InvalidTransitionError
from src.domain.errors.validation import ValidationError
from src.domain.events.collaboration import MILESTONE_SUBMITTED_EVENT_TYPE
from src.domain.models.application import Application
from src.domain.models.milestone import MilestoneStatus
from src.domain.models.project import Project
from src.domain.models.submission import SubmittedFile
from src.infrastructure.stubs.notification_dispatcher_stub import (
    NotificationDispatcherStub,
)
from tests.helpers import FakeTimeAuthority
from tests.helpers.collaboration_scenario import FILES, NOTES, milestone_at


class TestSubmitWork:
    async def test_submission_moves_milestone_to_submitted(
        self,
        container: CollaborationContainer,
        project: Project,
        assignment: Application,
        student_id: UUID,
        dispatcher: NotificationDispatcherStub,
    ) -> None:
        milestone = await milestone_at(
            container, project.id, student_id, MilestoneStatus.IN_PROGRESS
        )

        submission = await container.submissions.submit_work(
            milestone.id, student_id, FILES, NOTES
        )

        stored = await container.milestones.get_milestone(milestone.id)
        assert stored.status == MilestoneStatus.SUBMITTED
        assert submission.files == tuple(FILES)
        assert dispatcher.event_types()[-1] == MILESTONE_SUBMITTED_EVENT_TYPE

    async def test_unassigned_student_refused(
        self,
        container: CollaborationContainer,
        project: Project,
        assignment: Application,
        student_id: UUID,
    ) -> None:
        milestone = await milestone_at(
            container, project.id, student_id, MilestoneStatus.IN_PROGRESS
        )

        with pytest.raises(ValidationError) as exc_info:
            await container.submissions.submit_work(milestone.id, uuid4(), FILES, NOTES)

        assert exc_info.value.field == "student_id"

    async def test_submission_requires_in_progress(
        self,
        container: CollaborationContainer,
        project: Project,
        assignment: Application,
        student_id: UUID,
    ) -> None:
        milestone = await milestone_at(
            container, project.id, student_id, MilestoneStatus.FINALIZED
        )

        with pytest.raises(InvalidTransitionError):
            await container.submissions.submit_work(milestone.id, student_id, FILES, NOTES)

        assert await container.submissions.list_submissions(milestone.id) == []

    @pytest.mark.parametrize(
        ("files", "notes", "field"),
        [
            ([], NOTES, "files"),
            ([SubmittedFile(name="a.zip", url="https://files.example.org/a.zip")], "short", "notes"),
        ],
    )
    async def test_input_validation(
        self,
        container: CollaborationContainer,
        project: Project,
        assignment: Application,
        student_id: UUID,
        files: list[SubmittedFile],
        notes: str,
        field: str,
    ) -> None:
        milestone = await milestone_at(
            container, project.id, student_id, MilestoneStatus.IN_PROGRESS
        )

        with pytest.raises(ValidationError) as exc_info:
            await container.submissions.submit_work(milestone.id, student_id, files, notes)

        assert exc_info.value.field == field

    async def test_each_change_round_adds_a_submission(
        self,
        container: CollaborationContainer,
        project: Project,
        assignment: Application,
        student_id: UUID,
        fake_time: FakeTimeAuthority,
    ) -> None:
        milestone = await milestone_at(
            container, project.id, student_id, MilestoneStatus.SUPERVISOR_REVIEW
        )
        await container.milestones.request_changes(
            milestone.id, "Missing error handling for empty files"
        )
        await container.milestones.update_status(milestone.id, MilestoneStatus.IN_PROGRESS)
        fake_time.advance(seconds=60)

        await container.submissions.submit_work(
            milestone.id, student_id, FILES, "Second round with the fixes applied"
        )

        submissions = await container.submissions.list_submissions(milestone.id)
        assert [s.notes for s in submissions] == [
            NOTES,
            "Second round with the fixes applied",
        ]

    async def test_failed_append_returns_milestone_to_in_progress(
        self,
        container: CollaborationContainer,
        project: Project,
        assignment: Application,
        student_id: UUID,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        milestone = await milestone_at(
            container, project.id, student_id, MilestoneStatus.IN_PROGRESS
        )
        monkeypatch.setattr(
            container.repositories.submissions,
            "save",
            AsyncMock(side_effect=ConnectionError("submission store unavailable")),
        )

        with pytest.raises(ConnectionError):
            await container.submissions.submit_work(milestone.id, student_id, FILES, NOTES)

        stored = await container.milestones.get_milestone(milestone.id)
        assert stored.status == MilestoneStatus.IN_PROGRESS
        assert await container.submissions.list_submissions(milestone.id) == []

        monkeypatch.undo()
        submission = await container.submissions.submit_work(
            milestone.id, student_id, FILES, NOTES
        )
        assert submission.milestone_id == milestone.id
