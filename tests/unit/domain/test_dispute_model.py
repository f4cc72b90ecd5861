"""Unit tests for the Dispute escalation ladder."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

import pytest

from src.domain.errors.dispute import InvalidEscalationError
from src.domain.models.dispute import (
    Dispute,
    DisputeLevel,
    DisputeStatus,
    DisputeSubjectType,
)

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


def make_dispute() -> Dispute:
    return Dispute(
        id=uuid4(),
        subject_type=DisputeSubjectType.MILESTONE,
        subject_id=uuid4(),
        reason="Scope creep",
        description="Partner added two features after finalization",
        raised_by=uuid4(),
        created_at=NOW,
        updated_at=NOW,
    )


class TestDisputeLevel:
    def test_ladder_order(self) -> None:
        assert DisputeLevel.SUPERVISOR.next_level() == DisputeLevel.UNIVERSITY_ADMIN
        assert DisputeLevel.UNIVERSITY_ADMIN.next_level() == DisputeLevel.SUPER_ADMIN
        assert DisputeLevel.SUPER_ADMIN.next_level() is None

    def test_only_super_admin_is_final(self) -> None:
        assert [level.is_final() for level in DisputeLevel] == [False, False, True]

    def test_rank_is_monotonic(self) -> None:
        ranks = [level.rank for level in DisputeLevel]
        assert ranks == sorted(ranks)


class TestEscalation:
    def test_new_dispute_is_open_at_supervisor(self) -> None:
        dispute = make_dispute()

        assert dispute.level == DisputeLevel.SUPERVISOR
        assert dispute.status == DisputeStatus.OPEN
        assert dispute.is_open

    def test_escalate_twice_reaches_super_admin(self) -> None:
        dispute = make_dispute().escalated(NOW).escalated(NOW)

        assert dispute.level == DisputeLevel.SUPER_ADMIN
        assert dispute.status == DisputeStatus.OPEN

    def test_third_escalation_refused(self) -> None:
        top = make_dispute().escalated(NOW).escalated(NOW)

        with pytest.raises(InvalidEscalationError, match="final level"):
            top.escalated(NOW)

    def test_escalation_reopens_reviewed_dispute(self) -> None:
        reviewed = make_dispute().review_started(NOW)

        escalated = reviewed.escalated(NOW)

        assert escalated.status == DisputeStatus.OPEN
        assert escalated.level == DisputeLevel.UNIVERSITY_ADMIN

    def test_review_only_from_open(self) -> None:
        reviewed = make_dispute().review_started(NOW)

        with pytest.raises(InvalidEscalationError):
            reviewed.review_started(NOW)


class TestClosing:
    @pytest.mark.parametrize("escalations", [0, 1, 2])
    def test_resolve_at_any_level(self, escalations: int) -> None:
        dispute = make_dispute()
        for _ in range(escalations):
            dispute = dispute.escalated(NOW)

        resolved = dispute.resolved("Partner agreed to a follow-up milestone", NOW)

        assert resolved.status == DisputeStatus.RESOLVED
        assert resolved.resolved_at == NOW
        assert not resolved.is_open

    def test_rejected_records_close_time(self) -> None:
        rejected = make_dispute().rejected(NOW)

        assert rejected.status == DisputeStatus.REJECTED
        assert rejected.resolution is None
        assert rejected.resolved_at == NOW

    @pytest.mark.parametrize(
        "operation",
        [
            lambda d: d.escalated(NOW),
            lambda d: d.resolved("again", NOW),
            lambda d: d.rejected(NOW),
            lambda d: d.review_started(NOW),
        ],
        ids=["escalate", "resolve", "reject", "review"],
    )
    def test_closed_dispute_is_final(self, operation) -> None:  # type: ignore[no-untyped-def]
        closed = make_dispute().rejected(NOW)

        with pytest.raises(InvalidEscalationError):
            operation(closed)
