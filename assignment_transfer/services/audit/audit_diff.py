"""Field-level diff of assignment edits.

Compares the audited fields of a record before and after an edit and emits
one audit record per field that actually changed.
"""

import logging
from datetime import date, datetime
from typing import Any, Mapping

from assignment_transfer.core.types import AssignmentId, TrackedField, UserId
from assignment_transfer.domain.audit_record import AuditRecord

logger = logging.getLogger(__name__)


def stringify(value: Any) -> str | None:
    """Render a field value the way it is stored in the audit trail."""
    if value is None:
        return None
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def diff_snapshots(
    assignment_id: AssignmentId,
    old_snapshot: Mapping[TrackedField, Any],
    new_snapshot: Mapping[TrackedField, Any],
    actor_id: UserId,
    changed_at: datetime,
) -> list[AuditRecord]:
    """Compute the audit records for an edit.

    A field produces a record only if its new value is present and differs
    by value from the old one. Keys outside the tracked fields are ignored.

    Args:
        assignment_id: The edited assignment.
        old_snapshot: Values before the edit.
        new_snapshot: Values carried by the edit (None means "not edited").
        actor_id: User who made the edit.
        changed_at: Time of the edit.

    Returns:
        The audit records, in tracked-field order. Empty if nothing changed.
    """
    records: list[AuditRecord] = []
    for field in TrackedField:
        new_value = new_snapshot.get(field)
        old_value = old_snapshot.get(field)
        if new_value is None or new_value == old_value:
            logger.debug("Field %s of %s unchanged", field, assignment_id)
            continue

        logger.debug(
            "Field %s of %s changed: %r -> %r",
            field,
            assignment_id,
            old_value,
            new_value,
        )
        records.append(
            AuditRecord(
                assignment_id=assignment_id,
                field_name=field,
                old_value=stringify(old_value),
                new_value=stringify(new_value),
                changed_by=actor_id,
                changed_at=changed_at,
            )
        )
    return records
