"""Module containing custom types for the assignment_transfer package."""
import enum
from typing import NamedTuple

from assignment_transfer.i18n import _

AssignmentId = str
"""Unique identifier for an assignment."""

AuditId = str
"""Unique identifier for an audit record."""

ProjectId = str
"""Unique identifier for a project."""

StageId = str
"""Unique identifier for a stage (child of a project)."""

ObjectId = str
"""Unique identifier for an object (child of a stage)."""

SectionId = str
"""Unique identifier for a section (child of an object)."""

DepartmentId = str
"""Unique identifier for a department."""

TeamId = str
"""Unique identifier for a team (child of a department)."""

UserId = str
"""Unique identifier for a user (creator, editor, specialist)."""


class AssignmentStatus(enum.StrEnum):
    """Lifecycle status of an assignment.

    The enum *value* is the literal persisted vocabulary and must round-trip
    unchanged through the store. Members are declared in lifecycle order.
    Use :attr:`display_name` for the user-facing translated label.
    """

    CREATED = "Создано"
    TRANSFERRED = "Передано"
    ACCEPTED = "Принято"
    COMPLETED = "Выполнено"
    AGREED = "Согласовано"

    @property
    def rank(self) -> int:
        """Position of the status in the lifecycle order (0 for CREATED)."""
        return list(AssignmentStatus).index(self)

    @property
    def display_name(self) -> str:
        """Return the translated display name for this status."""
        return _(self.name.title())


class ActualDateField(enum.StrEnum):
    """Actual-timestamp field paired with the status that sets it."""

    TRANSMITTED = "actual_transmitted_date"
    ACCEPTED = "actual_accepted_date"
    WORKED_OUT = "actual_worked_out_date"
    AGREED = "actual_agreed_date"


class TrackedField(enum.StrEnum):
    """Assignment fields whose edits are recorded in the audit trail."""

    TITLE = "title"
    DESCRIPTION = "description"
    DUE_DATE = "due_date"
    PLANNED_DURATION = "planned_duration"
    LINK = "link"

    @property
    def display_name(self) -> str:
        """Return the translated display name for this field."""
        return _(self.name.replace("_", " ").capitalize())


class AuditOperation(enum.StrEnum):
    """Kind of change recorded by an audit record."""

    UPDATE = "UPDATE"


class Direction(enum.StrEnum):
    """Direction of an assignment relative to a given section."""

    OUTGOING = enum.auto()
    INCOMING = enum.auto()
    ALL = enum.auto()


class OperationWarning(enum.StrEnum):
    """Non-fatal outcome of a successful mutation."""

    AUDIT_WRITE_FAILED = enum.auto()
    """The edit was committed but its audit records could not be written."""

    ACTOR_UNRESOLVED = enum.auto()
    """The edit was committed without audit records: no current user."""


class DurationLimits(NamedTuple):
    """Inclusive range of accepted planned durations, in days."""

    minimum: int = 1
    maximum: int = 365

    def accepts(self, value: int) -> bool:
        """Check whether a duration lies within the range."""
        return self.minimum <= value <= self.maximum
