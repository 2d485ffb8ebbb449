"""Service persisting and reading the audit trail of assignment edits."""

import logging
from datetime import datetime
from typing import Callable

from assignment_transfer.core.types import AssignmentId, UserId
from assignment_transfer.domain.assignment import Assignment, AssignmentUpdate
from assignment_transfer.domain.audit_record import AuditEntry, AuditRecord
from assignment_transfer.i18n import _
from assignment_transfer.infrastructure.persistence.repository_interface import (
    AuditRepositoryInterface,
)
from assignment_transfer.services.audit.audit_diff import diff_snapshots

logger = logging.getLogger(__name__)


class AuditService:
    """Record field changes of edits and read them back."""

    def __init__(self, repository: AuditRepositoryInterface) -> None:
        self._repository = repository

    def record_changes(
        self,
        before: Assignment,
        update: AssignmentUpdate,
        actor_id: UserId,
        changed_at: datetime,
    ) -> tuple[AuditRecord, ...]:
        """Persist one audit record per tracked field changed by an edit.

        Args:
            before: The assignment as stored before the edit.
            update: The applied edit.
            actor_id: User who made the edit.
            changed_at: Time of the edit.

        Returns:
            The persisted records. Empty, with no write, if nothing changed.

        Raises:
            StoreError: If the records cannot be written.
        """
        records = diff_snapshots(
            before.assignment_id,
            before.tracked_snapshot(),
            update.tracked_snapshot(),
            actor_id,
            changed_at,
        )
        if not records:
            logger.debug("No tracked field changed on %s", before.assignment_id)
            return ()

        stored = self._repository.insert_audit_records(records)
        logger.info(
            "Recorded %d field change(s) on %s", len(stored), before.assignment_id
        )
        return stored

    def get_history(
        self,
        assignment_id: AssignmentId,
        user_name: Callable[[UserId], str | None],
    ) -> list[AuditEntry]:
        """Get the audit trail of an assignment, newest first.

        Args:
            assignment_id: The assignment.
            user_name: Resolves an actor ID to a display name.
        """
        return [
            AuditEntry(record, user_name(record.changed_by) or _("Unknown user"))
            for record in self._repository.get_audit_records(assignment_id)
        ]

    def clear_history(self, assignment_id: AssignmentId) -> int:
        """Delete the audit trail of an assignment.

        Returns:
            The number of deleted records.
        """
        deleted = self._repository.delete_audit_records(assignment_id)
        logger.info("Cleared %d audit record(s) of %s", deleted, assignment_id)
        return deleted
