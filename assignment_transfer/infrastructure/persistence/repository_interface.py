"""Abstract interfaces for the record store.

This module defines separate interfaces for each collection following the
Interface Segregation Principle (ISP), plus a facade interface that
combines them all. Every method may raise StoreError when the underlying
storage fails.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Self

from assignment_transfer.core.types import AssignmentId, AssignmentStatus, ProjectId
from assignment_transfer.domain.assignment import Assignment
from assignment_transfer.domain.audit_record import AuditRecord
from assignment_transfer.domain.organization import (
    EmployeeEntry,
    OrganizationalEntry,
    SectionHierarchyEntry,
)


class AssignmentRepositoryInterface(ABC):
    """Interface for Assignment persistence operations."""

    @abstractmethod
    def query_assignments(
        self,
        project_id: ProjectId | None = None,
        status: AssignmentStatus | None = None,
    ) -> tuple[Assignment, ...]:
        """Get assignments, optionally narrowed by project and status.

        Returns:
            Matching assignments, newest first.
        """

    @abstractmethod
    def get_assignment_by_id(self, assignment_id: AssignmentId) -> Assignment:
        """Get an assignment by its ID.

        Raises:
            AssignmentNotFoundError: If no assignment with the given ID exists.
        """

    @abstractmethod
    def insert_assignment(self, assignment: Assignment) -> None:
        """Insert a new assignment.

        Args:
            assignment: The assignment to insert, with its ID already set.
        """

    @abstractmethod
    def update_assignment(self, assignment: Assignment) -> None:
        """Overwrite a stored assignment with the given record.

        Raises:
            AssignmentNotFoundError: If no assignment with the given ID exists.
        """


class AuditRepositoryInterface(ABC):
    """Interface for AuditRecord persistence operations."""

    @abstractmethod
    def insert_audit_records(
        self, records: Iterable[AuditRecord]
    ) -> tuple[AuditRecord, ...]:
        """Insert audit records.

        Returns:
            The inserted records, with their store-assigned IDs.
        """

    @abstractmethod
    def get_audit_records(self, assignment_id: AssignmentId) -> tuple[AuditRecord, ...]:
        """Get the audit trail of an assignment, newest first."""

    @abstractmethod
    def delete_audit_records(self, assignment_id: AssignmentId) -> int:
        """Delete the whole audit trail of an assignment.

        Returns:
            The number of deleted records.
        """


class HierarchyRepositoryInterface(ABC):
    """Interface for the project/stage/object/section join view."""

    @abstractmethod
    def get_section_hierarchy(self) -> tuple[SectionHierarchyEntry, ...]:
        """Get all hierarchy rows, ordered by project, stage, object, section."""


class OrganizationRepositoryInterface(ABC):
    """Interface for the department/team join view and the employee roster."""

    @abstractmethod
    def get_organizational_structure(self) -> tuple[OrganizationalEntry, ...]:
        """Get all department/team rows, ordered by department and team name."""

    @abstractmethod
    def get_employees(self) -> tuple[EmployeeEntry, ...]:
        """Get the employee roster, ordered by full name."""


class RepositoryInterface(
    AssignmentRepositoryInterface,
    AuditRepositoryInterface,
    HierarchyRepositoryInterface,
    OrganizationRepositoryInterface,
    ABC,
):
    """Facade interface combining all record store operations.

    This interface aggregates all collection-specific interfaces and adds
    lifecycle methods for store initialization and cleanup.
    """

    @abstractmethod
    def initialize(self) -> None:
        """Initialize the store.

        This method should be called before any other operations.
        """

    @abstractmethod
    def close(self) -> None:
        """Close the store and release resources."""

    @abstractmethod
    def __enter__(self) -> Self:
        """Enter the context manager.

        Initializes the store and returns it.
        """

    @abstractmethod
    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Exit the context manager.

        Closes the store.
        """
