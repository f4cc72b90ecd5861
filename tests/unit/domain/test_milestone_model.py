"""Unit tests for the Milestone status/escrow state machine.

Tests cover:
- Construction invariants tying status to escrow
- Funding, holding and releasing escrow
- The supervisor gate on release
- Revert and completion toggles
- Deletability over every (status, escrow) pair
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from itertools import product
from uuid import uuid4

import pytest

from src.domain.errors.escrow import EscrowNotFundedError
from src.domain.errors.state_transition import (
    InvalidStateError,
    InvalidTransitionError,
    IrreversibleStateError,
)
from src.domain.models.milestone import (
    MILESTONE_TRANSITION_MATRIX,
    EscrowStatus,
    Milestone,
    MilestoneStatus,
)

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


def make_milestone(**overrides: object) -> Milestone:
    fields: dict[str, object] = {
        "id": uuid4(),
        "project_id": uuid4(),
        "title": "Data ingestion MVP",
        "amount": Decimal("2500"),
        "created_at": NOW,
        "updated_at": NOW,
    }
    fields.update(overrides)
    return Milestone(**fields)  # type: ignore[arg-type]


def in_partner_review(escrow: EscrowStatus = EscrowStatus.FUNDED) -> Milestone:
    return make_milestone(
        status=MilestoneStatus.PARTNER_REVIEW,
        escrow_status=escrow,
        supervisor_gate=True,
    )


def _constructible(status: MilestoneStatus, escrow: EscrowStatus) -> Milestone | None:
    try:
        return make_milestone(
            status=status,
            escrow_status=escrow,
            supervisor_gate=status in {MilestoneStatus.RELEASED, MilestoneStatus.COMPLETED},
        )
    except ValueError:
        return None


class TestMilestoneInvariants:
    def test_amount_must_be_positive(self) -> None:
        with pytest.raises(ValueError, match="positive"):
            make_milestone(amount=Decimal("0"))

    def test_in_progress_requires_funded_escrow(self) -> None:
        with pytest.raises(ValueError, match="FUNDED"):
            make_milestone(status=MilestoneStatus.IN_PROGRESS)

    def test_released_requires_supervisor_gate(self) -> None:
        with pytest.raises(ValueError, match="supervisor gate"):
            make_milestone(
                status=MilestoneStatus.RELEASED, escrow_status=EscrowStatus.RELEASED
            )

    @pytest.mark.parametrize(
        "status",
        [
            MilestoneStatus.SUBMITTED,
            MilestoneStatus.SUPERVISOR_REVIEW,
            MilestoneStatus.PARTNER_REVIEW,
            MilestoneStatus.CHANGES_REQUESTED,
            MilestoneStatus.COMPLETED,
        ],
    )
    def test_work_states_cannot_be_unfunded(self, status: MilestoneStatus) -> None:
        with pytest.raises(ValueError, match="UNFUNDED"):
            make_milestone(status=status, supervisor_gate=True)

    def test_every_status_has_a_matrix_entry(self) -> None:
        assert set(MILESTONE_TRANSITION_MATRIX) == set(MilestoneStatus)


class TestEscrowFunding:
    def test_fund_finalized_milestone(self) -> None:
        funded = make_milestone().finalized(NOW).funded(NOW)

        assert funded.escrow_status == EscrowStatus.FUNDED
        assert funded.status == MilestoneStatus.FINALIZED

    def test_fund_proposed_milestone_refused(self) -> None:
        with pytest.raises(InvalidStateError):
            make_milestone().funded(NOW)

    def test_fund_twice_refused(self) -> None:
        funded = make_milestone().finalized(NOW).funded(NOW)

        with pytest.raises(InvalidStateError):
            funded.funded(NOW)

    def test_start_requires_funding(self) -> None:
        finalized = make_milestone().finalized(NOW)

        with pytest.raises(EscrowNotFundedError) as exc_info:
            finalized.started(NOW)

        assert exc_info.value.escrow_status == EscrowStatus.UNFUNDED

    def test_start_from_proposed_is_a_transition_error(self) -> None:
        with pytest.raises(InvalidTransitionError):
            make_milestone().started(NOW)

    def test_hold_only_under_review(self) -> None:
        in_progress = make_milestone(
            status=MilestoneStatus.IN_PROGRESS, escrow_status=EscrowStatus.FUNDED
        )

        with pytest.raises(InvalidStateError):
            in_progress.escrow_held(NOW)

        reviewing = in_progress.submitted(NOW).review_started(NOW)
        assert reviewing.escrow_held(NOW).escrow_status == EscrowStatus.HELD

    def test_change_request_returns_held_escrow_to_funded(self) -> None:
        held = in_partner_review(EscrowStatus.HELD)

        changed = held.changes_requested("Charts are missing axis labels", NOW)

        assert changed.status == MilestoneStatus.CHANGES_REQUESTED
        assert changed.escrow_status == EscrowStatus.FUNDED
        assert changed.started(NOW).status == MilestoneStatus.IN_PROGRESS


class TestRelease:
    @pytest.mark.parametrize("escrow", [EscrowStatus.FUNDED, EscrowStatus.HELD])
    def test_release_from_partner_review(self, escrow: EscrowStatus) -> None:
        released = in_partner_review(escrow).released(NOW)

        assert released.status == MilestoneStatus.RELEASED
        assert released.escrow_status == EscrowStatus.RELEASED

    def test_release_without_gate_refused(self) -> None:
        milestone = replace(in_partner_review(), supervisor_gate=False)

        with pytest.raises(InvalidStateError, match="supervisor approval"):
            milestone.released(NOW)

    def test_release_from_finalized_refused(self) -> None:
        funded = make_milestone().finalized(NOW).funded(NOW)

        with pytest.raises(InvalidStateError, match="PARTNER_REVIEW"):
            funded.released(NOW)

    def test_supervisor_approval_opens_gate(self) -> None:
        reviewing = make_milestone(
            status=MilestoneStatus.SUPERVISOR_REVIEW, escrow_status=EscrowStatus.FUNDED
        )

        assert reviewing.approved_for_partner(NOW).supervisor_gate is True


class TestRevertAndCompletion:
    def test_revert_keeps_escrow_released(self) -> None:
        reverted = in_partner_review().released(NOW).reverted(NOW)

        assert reverted.status == MilestoneStatus.PARTNER_REVIEW
        assert reverted.escrow_status == EscrowStatus.RELEASED

    def test_second_release_after_revert_refused(self) -> None:
        reverted = in_partner_review().released(NOW).reverted(NOW)

        with pytest.raises(InvalidStateError, match="FUNDED or HELD"):
            reverted.released(NOW)

    def test_revert_requires_released(self) -> None:
        with pytest.raises(InvalidTransitionError):
            in_partner_review().reverted(NOW)

    def test_complete_and_uncomplete_round_trip(self) -> None:
        released = in_partner_review().released(NOW)

        completed = released.completed(NOW)
        assert completed.status == MilestoneStatus.COMPLETED
        assert completed.uncompleted(NOW).status == MilestoneStatus.RELEASED

    def test_uncomplete_requires_completed(self) -> None:
        with pytest.raises(InvalidTransitionError):
            in_partner_review().released(NOW).uncompleted(NOW)

    def test_on_time_compares_last_change_with_due_date(self) -> None:
        due = NOW + timedelta(days=3)

        assert make_milestone(due_date=due).is_on_time()
        assert not make_milestone(due_date=due, updated_at=due + timedelta(seconds=1)).is_on_time()
        assert make_milestone().is_on_time()


class TestDeletability:
    @pytest.mark.parametrize(
        ("status", "escrow"),
        list(product(MilestoneStatus, EscrowStatus)),
        ids=lambda v: v.value,
    )
    def test_deletable_only_before_escrow_and_work(
        self, status: MilestoneStatus, escrow: EscrowStatus
    ) -> None:
        milestone = _constructible(status, escrow)
        if milestone is None:
            pytest.skip("combination violates construction invariants")

        expected = (
            status in {MilestoneStatus.PROPOSED, MilestoneStatus.FINALIZED}
            and escrow == EscrowStatus.UNFUNDED
        )
        assert milestone.is_deletable is expected

        if expected:
            milestone.ensure_deletable()
        else:
            with pytest.raises(IrreversibleStateError):
                milestone.ensure_deletable()

    def test_funded_finalized_reports_escrow_state(self) -> None:
        funded = make_milestone().finalized(NOW).funded(NOW)

        with pytest.raises(IrreversibleStateError) as exc_info:
            funded.ensure_deletable()

        assert exc_info.value.current_state == EscrowStatus.FUNDED
