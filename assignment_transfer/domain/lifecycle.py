"""Lifecycle state machine of an assignment.

States, in order: CREATED -> TRANSFERRED -> ACCEPTED -> COMPLETED -> AGREED.
Each state past CREATED owns one actual-timestamp field, set when the state
is entered and cleared when it is left backwards. This module is the only
code allowed to touch those fields; the invariant it maintains is that the
populated actual dates are exactly the ones owned by the statuses up to the
current one.

Both functions are pure: they return a new record and never mutate or
persist anything.
"""

from datetime import date
from typing import NamedTuple

from assignment_transfer.core.types import ActualDateField, AssignmentStatus
from assignment_transfer.domain.assignment import Assignment
from assignment_transfer.exceptions import InvalidTransitionError

ADVANCE = "advance"
REVERT = "revert"

# Actual-timestamp field owned by each status (set on entering it).
ENTERED_FIELD: dict[AssignmentStatus, ActualDateField | None] = {
    AssignmentStatus.CREATED: None,
    AssignmentStatus.TRANSFERRED: ActualDateField.TRANSMITTED,
    AssignmentStatus.ACCEPTED: ActualDateField.ACCEPTED,
    AssignmentStatus.COMPLETED: ActualDateField.WORKED_OUT,
    AssignmentStatus.AGREED: ActualDateField.AGREED,
}

# Status whose entry may override the planned duration.
DURATION_STATUS = AssignmentStatus.ACCEPTED


class Transition(NamedTuple):
    """One edge of the lifecycle graph."""

    target: AssignmentStatus
    field: ActualDateField


def _build_tables() -> tuple[
    dict[AssignmentStatus, Transition], dict[AssignmentStatus, Transition]
]:
    """Build the forward and backward transition tables from ENTERED_FIELD."""
    if missing := set(AssignmentStatus) - set(ENTERED_FIELD):
        raise RuntimeError(f"No actual-date field declared for {sorted(missing)}")

    ordered = list(AssignmentStatus)
    forward: dict[AssignmentStatus, Transition] = {}
    backward: dict[AssignmentStatus, Transition] = {}
    for current, following in zip(ordered, ordered[1:]):
        if (field := ENTERED_FIELD[following]) is None:
            raise RuntimeError(f"Status {following.name} must own an actual-date field")
        forward[current] = Transition(following, field)
        backward[following] = Transition(current, field)
    return forward, backward


FORWARD, BACKWARD = _build_tables()


def next_status(status: AssignmentStatus) -> AssignmentStatus | None:
    """Return the status reached by advancing, or None from the terminal state."""
    return transition.target if (transition := FORWARD.get(status)) else None


def previous_status(status: AssignmentStatus) -> AssignmentStatus | None:
    """Return the status reached by reverting, or None from the initial state."""
    return transition.target if (transition := BACKWARD.get(status)) else None


def advance(
    assignment: Assignment, today: date, duration: int | None = None
) -> Assignment:
    """Move an assignment one step forward.

    Args:
        assignment: The record to advance.
        today: Date stamped on the actual-timestamp field of the new status.
        duration: Planned duration (days) replacing the current one when the
            assignment is accepted; ignored on other transitions.

    Returns:
        The advanced record.

    Raises:
        InvalidTransitionError: If the assignment is already AGREED.
    """
    if (transition := FORWARD.get(assignment.status)) is None:
        raise InvalidTransitionError(assignment.status, ADVANCE, "terminal status")

    changes: dict[str, object] = {
        "status": transition.target,
        transition.field.value: today,
    }
    if transition.target is DURATION_STATUS and duration is not None:
        changes["planned_duration"] = duration
    return assignment._replace(**changes)


def revert(assignment: Assignment) -> Assignment:
    """Move an assignment one step backward, clearing the date of the left status.

    Raises:
        InvalidTransitionError: If the assignment is still CREATED.
    """
    if (transition := BACKWARD.get(assignment.status)) is None:
        raise InvalidTransitionError(assignment.status, REVERT, "initial status")

    return assignment._replace(
        **{"status": transition.target, transition.field.value: None}
    )


def has_consistent_dates(assignment: Assignment) -> bool:
    """Check the actual dates against the status.

    The populated fields must form a prefix (possibly empty) of the fields
    owned by the statuses up to the current one: nothing later than the
    status, and no later date without all the earlier ones.
    """
    allowed = [
        field
        for status, field in ENTERED_FIELD.items()
        if field is not None and status.rank <= assignment.status.rank
    ]
    populated = list(assignment.populated_actual_dates)
    return populated == allowed[: len(populated)]
