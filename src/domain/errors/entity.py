"""Record lookup and uniqueness errors."""

from __future__ import annotations

from uuid import UUID

from src.domain.exceptions import CollaborationError


class EntityNotFoundError(CollaborationError):
    """Raised when a record cannot be found by id."""

    kind = "NOT_FOUND"

    def __init__(self, entity_type: str, entity_id: UUID) -> None:
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(
            f"{entity_type} not found: {entity_id}",
            details={"entity_type": entity_type, "entity_id": entity_id},
        )


class AlreadyExistsError(CollaborationError):
    """Raised when creating a record that would duplicate an active one."""

    kind = "ALREADY_EXISTS"

    def __init__(self, entity_type: str, reason: str, existing_id: UUID | None = None) -> None:
        self.entity_type = entity_type
        self.existing_id = existing_id
        super().__init__(
            f"{entity_type} already exists: {reason}",
            details={"entity_type": entity_type, "existing_id": existing_id},
        )
