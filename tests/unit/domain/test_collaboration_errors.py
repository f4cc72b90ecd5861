"""Unit tests for domain error kinds and their wire representation."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from uuid import uuid4

import pytest

from src.domain.errors import (
    AlreadyExistsError,
    CapacityExceededError,
    ConcurrentModificationError,
    EntityNotFoundError,
    EscrowNotFundedError,
    InvalidEscalationError,
    InvalidStateError,
    InvalidTransitionError,
    IrreversibleStateError,
    OfferExpiredError,
    SubjectNotActiveError,
    SubjectUnderDisputeError,
    ValidationError,
)
from src.domain.exceptions import CollaborationError
from src.domain.models.application import ApplicationStatus
from src.domain.models.dispute import DisputeSubjectType
from src.domain.models.milestone import EscrowStatus, MilestoneStatus


def all_errors() -> list[CollaborationError]:
    record = uuid4()
    return [
        EntityNotFoundError("milestone", record),
        AlreadyExistsError("dispute", "one at a time", existing_id=record),
        CapacityExceededError(record, current_active=2, max_active=2),
        ConcurrentModificationError("application", record, expected_version=1, actual_version=2),
        EscrowNotFundedError(record, EscrowStatus.UNFUNDED),
        InvalidEscalationError(record, "already final"),
        InvalidStateError("milestone", record, "release requires PARTNER_REVIEW"),
        InvalidTransitionError(
            "application",
            record,
            ApplicationStatus.SUBMITTED,
            ApplicationStatus.OFFERED,
            allowed_transitions=[ApplicationStatus.SHORTLISTED],
        ),
        IrreversibleStateError("milestone", record, MilestoneStatus.IN_PROGRESS),
        OfferExpiredError(record, datetime(2026, 1, 2, tzinfo=timezone.utc)),
        SubjectNotActiveError(DisputeSubjectType.MILESTONE, record, "PROPOSED"),
        SubjectUnderDisputeError(DisputeSubjectType.APPLICATION, record, uuid4()),
        ValidationError("statement", "too short"),
    ]


class TestErrorKinds:
    def test_kinds_are_distinct_except_subject_not_active(self) -> None:
        kinds = [type(e).kind for e in all_errors() if not isinstance(e, SubjectNotActiveError)]

        assert len(kinds) == len(set(kinds))

    def test_subject_not_active_is_an_escalation_error(self) -> None:
        error = SubjectNotActiveError(DisputeSubjectType.PROJECT, uuid4(), "COMPLETED")

        assert isinstance(error, InvalidEscalationError)
        assert error.kind == "INVALID_ESCALATION"

    @pytest.mark.parametrize("error", all_errors(), ids=lambda e: type(e).__name__)
    def test_to_dict_is_json_safe(self, error: CollaborationError) -> None:
        payload = error.to_dict()

        assert set(payload) == {"kind", "message", "details"}
        assert payload["kind"] == error.kind
        json.dumps(payload)

    def test_enum_details_are_rendered_as_values(self) -> None:
        record = uuid4()
        error = InvalidTransitionError(
            "application",
            record,
            ApplicationStatus.WAITLIST,
            "shortlist",
            allowed_transitions=[ApplicationStatus.DECLINED],
        )

        details = error.to_dict()["details"]

        assert details["from_state"] == "WAITLIST"
        assert details["to_state"] == "shortlist"
        assert details["allowed_transitions"] == ["DECLINED"]
        assert details["entity_id"] == str(record)
