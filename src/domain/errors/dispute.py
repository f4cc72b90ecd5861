"""Dispute escalation errors.

This module defines errors raised by the dispute escalation ladder and by
workflows whose subject is suspended behind an unresolved dispute.

Developer Golden Rules:
1. MONOTONIC - Levels only ever move up, there is no de-escalation
2. TERMINAL IS FINAL - RESOLVED and REJECTED disputes never change again
3. ACTIVE SUBJECTS ONLY - Disputes attach to in-flight records
"""

from __future__ import annotations

from enum import Enum
from uuid import UUID

from src.domain.exceptions import CollaborationError


class InvalidEscalationError(CollaborationError):
    """Raised when a dispute operation is not legal for its level/status.

    Attributes:
        dispute_id: The dispute being operated on (None during creation).
        reason: Why the operation was refused.
    """

    kind = "INVALID_ESCALATION"

    def __init__(self, dispute_id: UUID | None, reason: str, **details: object) -> None:
        self.dispute_id = dispute_id
        self.reason = reason
        subject = f"dispute {dispute_id}" if dispute_id else "dispute"
        super().__init__(
            f"Invalid escalation for {subject}: {reason}",
            details={"dispute_id": dispute_id, **details},
        )


class SubjectNotActiveError(InvalidEscalationError):
    """Raised when a dispute is opened against a subject that is not in flight."""

    def __init__(self, subject_type: Enum, subject_id: UUID, subject_state: str) -> None:
        self.subject_type = subject_type
        self.subject_id = subject_id
        self.subject_state = subject_state
        super().__init__(
            None,
            f"{subject_type.value} {subject_id} is not in an active lifecycle state "
            f"(current: {subject_state})",
            subject_type=subject_type,
            subject_id=subject_id,
            subject_state=subject_state,
        )


class SubjectUnderDisputeError(CollaborationError):
    """Raised when a workflow transition is attempted on a disputed subject.

    Transitions on an Application or Milestone are suspended while a
    dispute on it is OPEN or UNDER_REVIEW.

    Attributes:
        subject_type: Type of the suspended record.
        subject_id: UUID of the suspended record.
        dispute_id: The unresolved dispute holding the suspension.
    """

    kind = "SUBJECT_UNDER_DISPUTE"

    def __init__(self, subject_type: Enum, subject_id: UUID, dispute_id: UUID) -> None:
        self.subject_type = subject_type
        self.subject_id = subject_id
        self.dispute_id = dispute_id
        super().__init__(
            f"{subject_type.value} {subject_id} is suspended by unresolved dispute "
            f"{dispute_id}",
            details={
                "subject_type": subject_type,
                "subject_id": subject_id,
                "dispute_id": dispute_id,
            },
        )
