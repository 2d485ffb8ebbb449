"""Assignment records and the data used to create or edit them."""

from datetime import date, datetime
from typing import Any, NamedTuple

from assignment_transfer.core.types import (
    ActualDateField,
    AssignmentId,
    AssignmentStatus,
    DurationLimits,
    ProjectId,
    SectionId,
    TrackedField,
    UserId,
)
from assignment_transfer.exceptions import ValidationError


class Assignment(NamedTuple):
    """A unit of work handed from a source section to a destination section.

    Attributes:
        assignment_id: Unique identifier.
        project_id: Project the assignment belongs to.
        from_section_id: Section handing the work over.
        to_section_id: Section receiving the work.
        title: Non-empty title.
        status: Current lifecycle status.
        created_at: Creation time, set by the store.
        updated_at: Last update time, set by the store.
        planned_transmitted_date: User-planned transmission date.
        planned_duration: User-planned duration, in days.
        actual_transmitted_date: Set on entering TRANSFERRED.
        actual_accepted_date: Set on entering ACCEPTED.
        actual_worked_out_date: Set on entering COMPLETED.
        actual_agreed_date: Set on entering AGREED.
    """

    assignment_id: AssignmentId
    project_id: ProjectId
    from_section_id: SectionId
    to_section_id: SectionId
    title: str
    status: AssignmentStatus
    created_at: datetime
    updated_at: datetime
    description: str | None = None
    due_date: date | None = None
    link: str | None = None
    created_by: UserId | None = None
    updated_by: UserId | None = None
    planned_transmitted_date: date | None = None
    planned_duration: int | None = None
    actual_transmitted_date: date | None = None
    actual_accepted_date: date | None = None
    actual_worked_out_date: date | None = None
    actual_agreed_date: date | None = None

    def actual_date(self, field: ActualDateField) -> date | None:
        """Return the value of an actual-timestamp field."""
        value: date | None = getattr(self, field.value)
        return value

    @property
    def populated_actual_dates(self) -> tuple[ActualDateField, ...]:
        """The actual-timestamp fields that currently hold a value."""
        return tuple(f for f in ActualDateField if self.actual_date(f) is not None)

    def tracked_snapshot(self) -> dict[TrackedField, Any]:
        """Return the current values of the audited fields."""
        return {field: getattr(self, field.value) for field in TrackedField}

    def involves_section(self, section_id: SectionId) -> bool:
        """True if the section is the source or the destination."""
        return section_id in (self.from_section_id, self.to_section_id)


def _check_duration(duration: int | None, limits: DurationLimits) -> None:
    if duration is not None and not limits.accepts(duration):
        raise ValidationError(
            TrackedField.PLANNED_DURATION,
            f"must be between {limits.minimum} and {limits.maximum} days, "
            f"got {duration}",
        )


class AssignmentDraft(NamedTuple):
    """User-supplied data for a new assignment."""

    project_id: ProjectId
    from_section_id: SectionId
    to_section_id: SectionId
    title: str
    description: str | None = None
    due_date: date | None = None
    link: str | None = None
    planned_transmitted_date: date | None = None
    planned_duration: int | None = None

    def validated(self, limits: DurationLimits = DurationLimits()) -> "AssignmentDraft":
        """Return a normalized copy of the draft.

        Raises:
            ValidationError: If a required field is blank or the duration is
                out of range.
        """
        for field in ("project_id", "from_section_id", "to_section_id"):
            if not getattr(self, field):
                raise ValidationError(field, "is required")
        if not self.title.strip():
            raise ValidationError(TrackedField.TITLE, "must not be empty")
        _check_duration(self.planned_duration, limits)
        return self._replace(
            title=self.title.strip(),
            description=_blank_to_none(self.description),
            link=_blank_to_none(self.link),
        )


class AssignmentUpdate(NamedTuple):
    """Edit of an assignment's content fields.

    A field left to None is not part of the edit and keeps its value.
    """

    title: str | None = None
    description: str | None = None
    due_date: date | None = None
    planned_duration: int | None = None
    link: str | None = None
    planned_transmitted_date: date | None = None

    def validated(self, limits: DurationLimits = DurationLimits()) -> "AssignmentUpdate":
        """Return a normalized copy of the edit.

        Raises:
            ValidationError: If the title is blank or the duration is out of
                range.
        """
        if self.title is not None and not self.title.strip():
            raise ValidationError(TrackedField.TITLE, "must not be empty")
        _check_duration(self.planned_duration, limits)
        return self._replace(
            title=self.title.strip() if self.title is not None else None,
            description=_blank_to_none(self.description),
            link=_blank_to_none(self.link),
        )

    def changes(self) -> dict[str, Any]:
        """Return the fields present in the edit, keyed by field name."""
        return {name: value for name, value in self._asdict().items() if value is not None}

    def tracked_snapshot(self) -> dict[TrackedField, Any]:
        """Return the audited fields of the edit (None when absent)."""
        return {field: getattr(self, field.value) for field in TrackedField}


def _blank_to_none(value: str | None) -> str | None:
    if value is None or not (stripped := value.strip()):
        return None
    return stripped


class AssignmentView(NamedTuple):
    """An assignment enriched with human-readable names."""

    assignment: Assignment
    project_name: str
    from_section_name: str
    to_section_name: str
    created_by_name: str | None = None
    updated_by_name: str | None = None
