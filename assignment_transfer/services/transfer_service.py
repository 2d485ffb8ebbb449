"""Public entry point of the assignment transfer engine.

The TransferService is what presentation layers talk to. It coordinates
the record store, the lifecycle state machine, the audit trail and the
filter engine:

- mutations (create, edit, advance, revert, clear history) return an
  :class:`OperationResult` and never raise;
- reads (fetch, history, grouping) return plain lists and degrade to an
  empty list when the store fails;
- every successful mutation invalidates the assignment snapshot used by
  the reads.
"""

import logging
import uuid
from datetime import datetime
from typing import Any, Callable, NamedTuple

from assignment_transfer.core.types import (
    AssignmentId,
    AssignmentStatus,
    DurationLimits,
    OperationWarning,
    SectionId,
    TrackedField,
)
from assignment_transfer.domain import lifecycle
from assignment_transfer.domain.assignment import (
    Assignment,
    AssignmentDraft,
    AssignmentUpdate,
    AssignmentView,
)
from assignment_transfer.domain.audit_record import AuditEntry
from assignment_transfer.exceptions import (
    InvalidTransitionError,
    NotFoundError,
    SectionNotFoundError,
    ValidationError,
)
from assignment_transfer.i18n import _
from assignment_transfer.infrastructure.identity import ActorIdentityProvider
from assignment_transfer.infrastructure.persistence.repository_interface import (
    RepositoryInterface,
)
from assignment_transfer.infrastructure.telemetry import TelemetrySink
from assignment_transfer.services.assignment_cache import AssignmentCache
from assignment_transfer.services.audit.audit_service import AuditService
from assignment_transfer.services.filtering.assignment_filter import (
    FilterCriteria,
    FilterResolver,
)
from assignment_transfer.services.filtering.section_grouping import (
    SectionGroup,
    group_by_section,
)
from assignment_transfer.services.reference_directory import ReferenceDirectory

logger = logging.getLogger(__name__)

# Errors describing a rejected request rather than a malfunction.
_REJECTIONS = (InvalidTransitionError, NotFoundError, ValidationError)


class OperationResult(NamedTuple):
    """Result of a mutation."""

    success: bool
    assignment: Assignment | None = None
    """The assignment as stored after the mutation (None on failure)."""
    error: Exception | None = None
    warnings: tuple[OperationWarning, ...] = ()

    @property
    def error_message(self) -> str | None:
        """Human-readable error, if the operation failed."""
        return str(self.error) if self.error is not None else None


class TransferService:  # pylint: disable=too-many-instance-attributes
    """Create, edit, move and query assignments."""

    def __init__(  # pylint: disable=too-many-arguments
        self,
        repository: RepositoryInterface,
        identity: ActorIdentityProvider,
        telemetry: TelemetrySink,
        *,
        clock: Callable[[], datetime] = datetime.now,
        duration_limits: DurationLimits = DurationLimits(),
        directory: ReferenceDirectory | None = None,
    ) -> None:
        """Initialize the transfer service.

        Args:
            repository: The record store.
            identity: Provider of the user performing the operations.
            telemetry: Sink for non-fatal failures and lookup misses.
            clock: Source of the current time.
            duration_limits: Accepted range of planned durations.
            directory: Reference data; loaded from the store when omitted.
        """
        self._repository = repository
        self._identity = identity
        self._telemetry = telemetry
        self._clock = clock
        self._duration_limits = duration_limits
        self._directory = directory
        self._cache = AssignmentCache(repository)
        self._audit_service = AuditService(repository)

    # -------------------------------------------------------------------------
    # Reference data
    # -------------------------------------------------------------------------

    @property
    def directory(self) -> ReferenceDirectory:
        """The reference directory, loaded on first access."""
        if self._directory is None:
            self._directory = ReferenceDirectory.load(self._repository, self._repository)
        return self._directory

    @property
    def cache(self) -> AssignmentCache:
        """The assignment snapshot used by the reads."""
        return self._cache

    def refresh_reference_data(self) -> None:
        """Drop the reference directory; the next access reloads it."""
        self._directory = None

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def fetch_assignments(
        self, criteria: FilterCriteria | None = None
    ) -> list[AssignmentView]:
        """Get the assignments matching the criteria, enriched with names.

        Returns:
            Matching assignments, newest first. Empty if the store failed.
        """
        try:
            return [self._enrich(a) for a in self._filtered(criteria)]
        except Exception as e:  # pylint: disable=broad-except
            logger.exception("Fetching assignments failed")
            self._telemetry.report("fetch_assignments_failed", e)
            return []

    def fetch_assignment_history(self, assignment_id: AssignmentId) -> list[AuditEntry]:
        """Get the audit trail of an assignment, newest first.

        Returns:
            The audit entries. Empty if the store failed.
        """
        try:
            return self._audit_service.get_history(assignment_id, self._user_name)
        except Exception as e:  # pylint: disable=broad-except
            logger.exception("Fetching history of %s failed", assignment_id)
            self._telemetry.report(
                "fetch_history_failed", e, assignment_id=assignment_id
            )
            return []

    def group_by_section(
        self, criteria: FilterCriteria | None = None
    ) -> list[SectionGroup]:
        """Get the matching assignments grouped by source and destination section."""
        try:
            return group_by_section(self._filtered(criteria), self.directory)
        except Exception as e:  # pylint: disable=broad-except
            logger.exception("Grouping assignments failed")
            self._telemetry.report("group_by_section_failed", e)
            return []

    def _filtered(self, criteria: FilterCriteria | None) -> list[Assignment]:
        assignments = self._cache.get_assignments()
        if criteria is None or criteria.is_empty:
            return list(assignments)

        outcome = FilterResolver(self.directory).resolve_detailed(assignments, criteria)
        for issue in outcome.issues:
            self._telemetry.report(
                "filter_reference_unresolved",
                dimension=str(issue.dimension),
                reason=str(issue.reason),
                reference=issue.reference,
            )
        return list(outcome.assignments)

    def _enrich(self, assignment: Assignment) -> AssignmentView:
        directory = self.directory
        unknown_section = _("Unknown section")
        return AssignmentView(
            assignment=assignment,
            project_name=self._lookup(
                "project", assignment.project_id, directory.project_name
            )
            or _("Unknown project"),
            from_section_name=self._lookup(
                "section", assignment.from_section_id, directory.section_name
            )
            or unknown_section,
            to_section_name=self._lookup(
                "section", assignment.to_section_id, directory.section_name
            )
            or unknown_section,
            created_by_name=self._user_label(assignment.created_by),
            updated_by_name=self._user_label(assignment.updated_by),
        )

    def _user_label(self, user_id: str | None) -> str | None:
        if user_id is None:
            return None
        return self._user_name(user_id) or _("Unknown user")

    def _user_name(self, user_id: str) -> str | None:
        return self._lookup("user", user_id, self.directory.user_name)

    def _lookup(
        self, kind: str, entity_id: str, resolve: Callable[[str], str | None]
    ) -> str | None:
        """Resolve an ID to a name, reporting the IDs the directory does not know."""
        if (name := resolve(entity_id)) is None:
            logger.debug("No %s with ID %r in the reference data", kind, entity_id)
            self._telemetry.report(
                "reference_lookup_missed", kind=kind, entity_id=entity_id
            )
        return name

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def create_assignment(self, draft: AssignmentDraft) -> OperationResult:
        """Create an assignment in the CREATED status."""

        def create() -> OperationResult:
            data = draft.validated(self._duration_limits)
            self._check_section(data.from_section_id)
            self._check_section(data.to_section_id)

            actor_id = self._identity.current_user_id()
            now = self._clock()
            assignment = Assignment(
                assignment_id=str(uuid.uuid4()),
                project_id=data.project_id,
                from_section_id=data.from_section_id,
                to_section_id=data.to_section_id,
                title=data.title,
                status=AssignmentStatus.CREATED,
                created_at=now,
                updated_at=now,
                description=data.description,
                due_date=data.due_date,
                link=data.link,
                created_by=actor_id,
                updated_by=actor_id,
                planned_transmitted_date=data.planned_transmitted_date,
                planned_duration=data.planned_duration,
            )
            self._repository.insert_assignment(assignment)
            self._cache.invalidate()
            logger.info("Created assignment %s (%r)", assignment.assignment_id, data.title)
            return OperationResult(success=True, assignment=assignment)

        return self._execute("create_assignment", create)

    def update_assignment(
        self, assignment_id: AssignmentId, update: AssignmentUpdate
    ) -> OperationResult:
        """Edit the content fields of an assignment and audit the changes.

        The edit is committed before its audit records are written: a failure
        to write them, or an unknown current user, is returned as a warning
        on a successful result.
        """

        def edit() -> OperationResult:
            changes = update.validated(self._duration_limits)
            before = self._repository.get_assignment_by_id(assignment_id)
            actor_id = self._identity.current_user_id()
            now = self._clock()

            after = before._replace(
                **changes.changes(),
                updated_at=now,
                updated_by=actor_id or before.updated_by,
            )
            self._repository.update_assignment(after)
            self._cache.invalidate()
            logger.info("Updated assignment %s", assignment_id)

            warnings: list[OperationWarning] = []
            if actor_id is None:
                logger.warning("No current user: edit of %s is not audited", assignment_id)
                self._telemetry.report(
                    OperationWarning.ACTOR_UNRESOLVED.value, assignment_id=assignment_id
                )
                warnings.append(OperationWarning.ACTOR_UNRESOLVED)
            elif not self._audit(before, changes, actor_id, now):
                warnings.append(OperationWarning.AUDIT_WRITE_FAILED)

            return OperationResult(
                success=True, assignment=after, warnings=tuple(warnings)
            )

        return self._execute("update_assignment", edit, assignment_id=assignment_id)

    def _audit(
        self,
        before: Assignment,
        update: AssignmentUpdate,
        actor_id: str,
        changed_at: datetime,
    ) -> bool:
        """Write the audit records of a committed edit. Return False on failure."""
        try:
            self._audit_service.record_changes(before, update, actor_id, changed_at)
        except Exception as e:  # pylint: disable=broad-except
            logger.warning(
                "Audit records of %s could not be written: %s", before.assignment_id, e
            )
            self._telemetry.report(
                OperationWarning.AUDIT_WRITE_FAILED.value,
                e,
                assignment_id=before.assignment_id,
            )
            return False
        return True

    def advance_status(
        self,
        assignment_id: AssignmentId,
        current_status: AssignmentStatus,
        duration: int | None = None,
    ) -> OperationResult:
        """Move an assignment one step forward in its lifecycle.

        Args:
            assignment_id: The assignment to advance.
            current_status: The status the caller believes the assignment has.
                The call fails if the stored status differs.
            duration: Planned duration (days) set when the assignment is
                accepted; ignored on other transitions.
        """

        def advance() -> OperationResult:
            stored = self._get_in_status(assignment_id, current_status, lifecycle.ADVANCE)
            if (
                duration is not None
                and lifecycle.next_status(stored.status) is lifecycle.DURATION_STATUS
                and not self._duration_limits.accepts(duration)
            ):
                raise ValidationError(
                    TrackedField.PLANNED_DURATION,
                    f"must be between {self._duration_limits.minimum} and "
                    f"{self._duration_limits.maximum} days, got {duration}",
                )
            now = self._clock()
            advanced = lifecycle.advance(stored, now.date(), duration)._replace(
                updated_at=now
            )
            return self._save_transition(stored, advanced)

        return self._execute("advance_status", advance, assignment_id=assignment_id)

    def revert_status(
        self, assignment_id: AssignmentId, current_status: AssignmentStatus
    ) -> OperationResult:
        """Move an assignment one step backward in its lifecycle."""

        def revert() -> OperationResult:
            stored = self._get_in_status(assignment_id, current_status, lifecycle.REVERT)
            reverted = lifecycle.revert(stored)._replace(updated_at=self._clock())
            return self._save_transition(stored, reverted)

        return self._execute("revert_status", revert, assignment_id=assignment_id)

    def clear_assignment_history(self, assignment_id: AssignmentId) -> OperationResult:
        """Delete the whole audit trail of an assignment."""

        def clear() -> OperationResult:
            assignment = self._repository.get_assignment_by_id(assignment_id)
            self._audit_service.clear_history(assignment_id)
            return OperationResult(success=True, assignment=assignment)

        return self._execute(
            "clear_assignment_history", clear, assignment_id=assignment_id
        )

    def _get_in_status(
        self,
        assignment_id: AssignmentId,
        expected: AssignmentStatus,
        action: str,
    ) -> Assignment:
        stored = self._repository.get_assignment_by_id(assignment_id)
        if stored.status != expected:
            logger.warning(
                "Stale %s of %s: expected %r, stored %r",
                action,
                assignment_id,
                expected.value,
                stored.status.value,
            )
            raise InvalidTransitionError(
                stored.status, action, f"expected status {expected.value!r}"
            )
        return stored

    def _save_transition(self, before: Assignment, after: Assignment) -> OperationResult:
        self._repository.update_assignment(after)
        self._cache.invalidate()
        logger.info(
            "Assignment %s moved from %r to %r",
            after.assignment_id,
            before.status.value,
            after.status.value,
        )
        return OperationResult(success=True, assignment=after)

    def _check_section(self, section_id: SectionId) -> None:
        """Reject a section unknown to a populated hierarchy."""
        directory = self.directory
        if directory.hierarchy and directory.hierarchy_entry(section_id) is None:
            raise SectionNotFoundError(section_id)

    def _execute(
        self, operation: str, action: Callable[[], OperationResult], **context: Any
    ) -> OperationResult:
        """Run a mutation, converting every exception to a failure result."""
        try:
            return action()
        except _REJECTIONS as e:
            logger.warning("%s rejected: %s", operation, e)
            return OperationResult(success=False, error=e)
        except Exception as e:  # pylint: disable=broad-except
            logger.exception("%s failed", operation)
            self._telemetry.report(f"{operation}_failed", e, **context)
            return OperationResult(success=False, error=e)
