"""State transition errors shared by every lifecycle state machine.

This module defines errors raised when a workflow operation is not legal
for the current state of an Application, Milestone or SupervisorRequest.

Error kinds:
- INVALID_TRANSITION: attempted move is not in the transition matrix
- INVALID_STATE: joint guard failed (e.g. escrow/status combination)
- IRREVERSIBLE_STATE: delete/mutate attempted past the point of no return
"""

from __future__ import annotations

from enum import Enum
from typing import Any
from uuid import UUID

from src.domain.exceptions import CollaborationError


class InvalidTransitionError(CollaborationError):
    """Raised when a transition is not permitted from the current state.

    Attributes:
        entity_type: Kind of record (``application``, ``milestone``...).
        entity_id: UUID of the record.
        from_state: Current state of the record.
        to_state: Attempted target state (or operation name).
        allowed_transitions: Valid target states from the current state.
    """

    kind = "INVALID_TRANSITION"

    def __init__(
        self,
        entity_type: str,
        entity_id: UUID,
        from_state: Enum,
        to_state: Enum | str,
        allowed_transitions: list[Any] | None = None,
    ) -> None:
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.from_state = from_state
        self.to_state = to_state
        self.allowed_transitions = allowed_transitions or []

        target = to_state.value if isinstance(to_state, Enum) else to_state
        allowed_str = (
            f" Valid transitions: {sorted(s.value for s in self.allowed_transitions)}"
            if self.allowed_transitions
            else ""
        )
        super().__init__(
            f"Invalid {entity_type} transition for {entity_id}: "
            f"{from_state.value} -> {target}.{allowed_str}",
            details={
                "entity_type": entity_type,
                "entity_id": entity_id,
                "from_state": from_state,
                "to_state": target,
                "allowed_transitions": self.allowed_transitions,
            },
        )


class InvalidStateError(CollaborationError):
    """Raised when a guard over several fields of a record fails.

    Used where the status alone is not enough to decide, for example
    funding escrow on a milestone that is already funded.
    """

    kind = "INVALID_STATE"

    def __init__(
        self,
        entity_type: str,
        entity_id: UUID,
        reason: str,
        **details: Any,
    ) -> None:
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.reason = reason
        super().__init__(
            f"Invalid state for {entity_type} {entity_id}: {reason}",
            details={"entity_type": entity_type, "entity_id": entity_id, **details},
        )


class IrreversibleStateError(CollaborationError):
    """Raised when deleting a record that escrow or work has already touched."""

    kind = "IRREVERSIBLE_STATE"

    def __init__(self, entity_type: str, entity_id: UUID, current_state: Enum) -> None:
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.current_state = current_state
        super().__init__(
            f"Cannot delete {entity_type} {entity_id} in state {current_state.value}: "
            "the record is past the point of no return",
            details={
                "entity_type": entity_type,
                "entity_id": entity_id,
                "current_state": current_state,
            },
        )
