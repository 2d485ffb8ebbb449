"""Services layer for the assignment transfer engine.

This module provides the business logic that presentation layers (CLI,
dashboards) call into. Services encapsulate operations on the domain model
and never let store failures escape as exceptions.
"""

from assignment_transfer.services.assignment_cache import AssignmentCache
from assignment_transfer.services.audit.audit_service import AuditService
from assignment_transfer.services.filtering.assignment_filter import (
    FilterCriteria,
    FilterDimension,
    FilterOutcome,
    FilterResolver,
    ResolutionIssue,
)
from assignment_transfer.services.filtering.section_grouping import SectionGroup
from assignment_transfer.services.reference_directory import ReferenceDirectory
from assignment_transfer.services.schedule.schedule_report import ScheduleReport
from assignment_transfer.services.transfer_service import (
    OperationResult,
    TransferService,
)

__all__ = [
    "AssignmentCache",
    "AuditService",
    "FilterCriteria",
    "FilterDimension",
    "FilterOutcome",
    "FilterResolver",
    "OperationResult",
    "ReferenceDirectory",
    "ResolutionIssue",
    "ScheduleReport",
    "SectionGroup",
    "TransferService",
]
