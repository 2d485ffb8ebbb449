"""Data model for the field-level audit trail of assignment edits."""

from datetime import datetime
from typing import NamedTuple

from assignment_transfer.core.types import (
    AssignmentId,
    AuditId,
    AuditOperation,
    TrackedField,
    UserId,
)


class AuditRecord(NamedTuple):
    """Immutable record of one field changed by one edit.

    Attributes:
        assignment_id: The edited assignment.
        field_name: The changed field (always a tracked field).
        old_value: Previous value, stringified (None if it was absent).
        new_value: New value, stringified.
        changed_by: User who made the edit.
        changed_at: Time of the edit.
        operation_type: Kind of change.
        audit_id: Store-assigned identifier (None until persisted).
    """

    assignment_id: AssignmentId
    field_name: TrackedField
    old_value: str | None
    new_value: str | None
    changed_by: UserId
    changed_at: datetime
    operation_type: AuditOperation = AuditOperation.UPDATE
    audit_id: AuditId | None = None


class AuditEntry(NamedTuple):
    """An audit record enriched with the actor's display name."""

    record: AuditRecord
    changed_by_name: str
