"""Tests for the assignment lifecycle state machine."""

import random
from datetime import date, datetime

import pytest

from assignment_transfer.core.types import ActualDateField, AssignmentStatus
from assignment_transfer.domain import lifecycle
from assignment_transfer.domain.assignment import Assignment
from assignment_transfer.exceptions import InvalidTransitionError

TODAY = date(2025, 3, 14)


@pytest.fixture(name="created")
def created_fixture() -> Assignment:
    """An assignment freshly created."""
    return Assignment(
        assignment_id="a-1",
        project_id="p-1",
        from_section_id="s-1",
        to_section_id="s-2",
        title="Review drawings",
        status=AssignmentStatus.CREATED,
        created_at=datetime(2025, 3, 1, 9, 30),
        updated_at=datetime(2025, 3, 1, 9, 30),
        planned_duration=10,
    )


def _advance_to(assignment: Assignment, status: AssignmentStatus) -> Assignment:
    while assignment.status != status:
        assignment = lifecycle.advance(assignment, TODAY)
    return assignment


class TestTransitionTables:
    """Tests for the forward and backward transition tables."""

    def test_forward_chain(self) -> None:
        """Advancing walks the statuses in declaration order."""
        chain = [AssignmentStatus.CREATED]
        while (following := lifecycle.next_status(chain[-1])) is not None:
            chain.append(following)
        assert chain == list(AssignmentStatus)

    def test_backward_is_inverse(self) -> None:
        """Reverting undoes advancing for every non-terminal status."""
        for status in AssignmentStatus:
            if (following := lifecycle.next_status(status)) is not None:
                assert lifecycle.previous_status(following) is status

    def test_terminal_and_initial(self) -> None:
        """AGREED has no successor and CREATED no predecessor."""
        assert lifecycle.next_status(AssignmentStatus.AGREED) is None
        assert lifecycle.previous_status(AssignmentStatus.CREATED) is None

    def test_every_status_has_a_field(self) -> None:
        """Every status past CREATED owns a distinct actual-date field."""
        fields = [t.field for t in lifecycle.FORWARD.values()]
        assert sorted(fields) == sorted(ActualDateField)


class TestAdvance:
    """Tests for advance()."""

    @pytest.mark.parametrize(
        "target,field",
        [
            (AssignmentStatus.TRANSFERRED, ActualDateField.TRANSMITTED),
            (AssignmentStatus.ACCEPTED, ActualDateField.ACCEPTED),
            (AssignmentStatus.COMPLETED, ActualDateField.WORKED_OUT),
            (AssignmentStatus.AGREED, ActualDateField.AGREED),
        ],
        ids=["transferred", "accepted", "completed", "agreed"],
    )
    def test_sets_date_of_destination(
        self, created: Assignment, target: AssignmentStatus, field: ActualDateField
    ) -> None:
        """Entering a status stamps its own actual-date field with today."""
        previous = lifecycle.previous_status(target)
        assert previous is not None
        advanced = lifecycle.advance(_advance_to(created, previous), TODAY)

        assert advanced.status is target
        assert advanced.actual_date(field) == TODAY

    def test_duration_applied_on_accept(self, created: Assignment) -> None:
        """A duration supplied when accepting replaces the planned one."""
        transferred = _advance_to(created, AssignmentStatus.TRANSFERRED)
        accepted = lifecycle.advance(transferred, TODAY, duration=21)
        assert accepted.planned_duration == 21

    def test_duration_ignored_elsewhere(self, created: Assignment) -> None:
        """A duration supplied on another transition is ignored."""
        transferred = lifecycle.advance(created, TODAY, duration=21)
        assert transferred.planned_duration == 10

    def test_accept_without_duration_keeps_planned(self, created: Assignment) -> None:
        """Accepting without a duration keeps the planned one."""
        accepted = _advance_to(created, AssignmentStatus.ACCEPTED)
        assert accepted.planned_duration == 10

    def test_advance_from_agreed_fails(self, created: Assignment) -> None:
        """AGREED is terminal; the record is untouched."""
        agreed = _advance_to(created, AssignmentStatus.AGREED)
        snapshot = tuple(agreed)

        with pytest.raises(InvalidTransitionError, match="Согласовано") as exc_info:
            lifecycle.advance(agreed, TODAY)

        assert exc_info.value.status is AssignmentStatus.AGREED
        assert exc_info.value.action == lifecycle.ADVANCE
        assert tuple(agreed) == snapshot


class TestRevert:
    """Tests for revert()."""

    def test_clears_date_of_left_status(self, created: Assignment) -> None:
        """Leaving a status clears its own actual-date field only."""
        completed = _advance_to(created, AssignmentStatus.COMPLETED)
        reverted = lifecycle.revert(completed)

        assert reverted.status is AssignmentStatus.ACCEPTED
        assert reverted.actual_worked_out_date is None
        assert reverted.actual_accepted_date == TODAY
        assert reverted.actual_transmitted_date == TODAY

    def test_revert_from_created_fails(self, created: Assignment) -> None:
        """CREATED is initial; the record is untouched."""
        snapshot = tuple(created)

        with pytest.raises(InvalidTransitionError) as exc_info:
            lifecycle.revert(created)

        assert exc_info.value.action == lifecycle.REVERT
        assert tuple(created) == snapshot

    @pytest.mark.parametrize(
        "status",
        [
            AssignmentStatus.TRANSFERRED,
            AssignmentStatus.ACCEPTED,
            AssignmentStatus.COMPLETED,
        ],
        ids=["transferred", "accepted", "completed"],
    )
    def test_advance_then_revert_round_trip(
        self, created: Assignment, status: AssignmentStatus
    ) -> None:
        """Advance then revert restores the record exactly."""
        original = _advance_to(created, status)
        restored = lifecycle.revert(lifecycle.advance(original, date(2025, 4, 1)))
        assert restored == original


class TestDateConsistency:
    """Tests for the populated-dates invariant."""

    def test_holds_along_the_lifecycle(self, created: Assignment) -> None:
        """Every status reached by advancing has consistent dates."""
        assignment = created
        assert lifecycle.has_consistent_dates(assignment)
        for _ in range(len(AssignmentStatus) - 1):
            assignment = lifecycle.advance(assignment, TODAY)
            assert lifecycle.has_consistent_dates(assignment)
            assert len(assignment.populated_actual_dates) == assignment.status.rank

    def test_holds_after_random_sequences(self, created: Assignment) -> None:
        """Any sequence of legal advances and reverts keeps the invariant."""
        rng = random.Random(1234)
        assignment = created
        for day in range(1, 201):
            try:
                if rng.random() < 0.6:
                    assignment = lifecycle.advance(assignment, date(2025, 1, 1 + day % 28))
                else:
                    assignment = lifecycle.revert(assignment)
            except InvalidTransitionError:
                pass
            assert lifecycle.has_consistent_dates(assignment)

    def test_detects_gap(self, created: Assignment) -> None:
        """A later date without an earlier one is inconsistent."""
        broken = created._replace(
            status=AssignmentStatus.ACCEPTED, actual_accepted_date=TODAY
        )
        assert not lifecycle.has_consistent_dates(broken)

    def test_detects_date_beyond_status(self, created: Assignment) -> None:
        """A date owned by a later status is inconsistent."""
        broken = created._replace(actual_transmitted_date=TODAY)
        assert not lifecycle.has_consistent_dates(broken)
