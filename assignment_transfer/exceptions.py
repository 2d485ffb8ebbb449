"""Custom exception hierarchy for the assignment transfer engine."""

from assignment_transfer.core.types import AssignmentId, AssignmentStatus, SectionId


class TransferEngineError(Exception):
    """Base exception for all assignment transfer errors."""


class InvalidTransitionError(TransferEngineError):
    """A status change was requested outside the legal lifecycle range."""

    def __init__(self, status: AssignmentStatus, action: str, reason: str = "") -> None:
        message = f"Cannot {action} assignment from status {status.value!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.status = status
        self.action = action


class NotFoundError(TransferEngineError):
    """A referenced entity does not exist."""


class AssignmentNotFoundError(NotFoundError):
    """No assignment with the given ID exists."""

    def __init__(self, assignment_id: AssignmentId) -> None:
        super().__init__(f"Assignment not found: {assignment_id}")
        self.assignment_id = assignment_id


class SectionNotFoundError(NotFoundError):
    """No section with the given ID exists in the hierarchy."""

    def __init__(self, section_id: SectionId) -> None:
        super().__init__(f"Section not found: {section_id}")
        self.section_id = section_id


class StoreError(TransferEngineError):
    """A record store operation failed unexpectedly."""


class ValidationError(TransferEngineError):
    """Assignment data does not satisfy the business rules."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
