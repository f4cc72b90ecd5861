"""Capacity gate service - supervisor admission control.

This module implements the capacity gate consulted whenever a workflow
would hand a supervisor another active assignment: accepting an offer
on a supervised application and approving a supervisor request.

Developer Golden Rules:
1. ATOMIC - The check and the increment are one store operation
2. NEVER OVERBOOK - current_active never exceeds max_active
3. RELEASE NEVER FAILS - Decrements are floored at zero
"""

from __future__ import annotations

from uuid import UUID

from structlog import get_logger

from src.application.ports.supervisor_capacity_store import (
    SupervisorCapacityStoreProtocol,
)
from src.config.workflow_config import DEFAULT_WORKFLOW_CONFIG, WorkflowConfig
from src.domain.errors.capacity import CapacityExceededError
from src.domain.models.supervisor_capacity import SupervisorCapacity

logger = get_logger(__name__)


class CapacityGateService:
    """Per-supervisor active-assignment counter with a hard ceiling.

    Supervisors without a stored limit get
    ``WorkflowConfig.default_supervisor_capacity`` slots.

    Example:
        >>> gate = CapacityGateService(store=SupervisorCapacityStoreStub())
        >>> await gate.reserve(supervisor_id)
        >>> capacity = await gate.query(supervisor_id)
        >>> capacity.current_active
        1
    """

    def __init__(
        self,
        store: SupervisorCapacityStoreProtocol,
        config: WorkflowConfig = DEFAULT_WORKFLOW_CONFIG,
    ) -> None:
        self._store = store
        self._default_max = config.default_supervisor_capacity

    async def query(self, supervisor_id: UUID) -> SupervisorCapacity:
        """Return ``{current, max}`` for a supervisor. Never fails."""
        return await self._store.get(supervisor_id, self._default_max)

    async def reserve(self, supervisor_id: UUID) -> SupervisorCapacity:
        """Take one assignment slot.

        Raises:
            CapacityExceededError: If the supervisor is at max_active.
        """
        log = logger.bind(supervisor_id=str(supervisor_id))

        reserved = await self._store.reserve(supervisor_id, self._default_max)
        if reserved is None:
            current = await self._store.get(supervisor_id, self._default_max)
            log.warning(
                "capacity_reservation_denied",
                current_active=current.current_active,
                max_active=current.max_active,
            )
            raise CapacityExceededError(
                supervisor_id=supervisor_id,
                current_active=current.current_active,
                max_active=current.max_active,
            )

        log.info(
            "capacity_reserved",
            current_active=reserved.current_active,
            max_active=reserved.max_active,
        )
        return reserved

    async def release(self, supervisor_id: UUID) -> SupervisorCapacity:
        """Give back one assignment slot, floored at zero."""
        released = await self._store.release(supervisor_id, self._default_max)
        logger.info(
            "capacity_released",
            supervisor_id=str(supervisor_id),
            current_active=released.current_active,
            max_active=released.max_active,
        )
        return released

    async def set_max_active(
        self, supervisor_id: UUID, max_active: int
    ) -> SupervisorCapacity:
        """Change a supervisor's ceiling.

        Raises:
            ValidationError: If the new ceiling is negative or below the
                supervisor's current active count.
        """
        from src.domain.errors.validation import ValidationError

        if max_active < 0:
            raise ValidationError("max_active", "max_active must be non-negative")
        try:
            updated = await self._store.set_max_active(supervisor_id, max_active)
        except ValueError as e:
            raise ValidationError("max_active", str(e)) from e

        logger.info(
            "capacity_limit_changed",
            supervisor_id=str(supervisor_id),
            max_active=max_active,
        )
        return updated
