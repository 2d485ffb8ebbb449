"""SQLite record store for assignments, their audit trail and reference views."""

# pylint: disable=too-many-public-methods

import logging
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import date, datetime
from pathlib import Path
from typing import Iterable, Iterator, Self

from assignment_transfer.core.types import (
    AssignmentId,
    AssignmentStatus,
    AuditOperation,
    ProjectId,
    TrackedField,
)
from assignment_transfer.domain.assignment import Assignment
from assignment_transfer.domain.audit_record import AuditRecord
from assignment_transfer.domain.organization import (
    EmployeeEntry,
    OrganizationalEntry,
    SectionHierarchyEntry,
)
from assignment_transfer.exceptions import AssignmentNotFoundError, StoreError
from assignment_transfer.infrastructure.persistence.repository_interface import (
    RepositoryInterface,
)

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS assignments (
    assignment_id TEXT PRIMARY KEY,
    project_id TEXT NOT NULL,
    from_section_id TEXT NOT NULL,
    to_section_id TEXT NOT NULL,
    title TEXT NOT NULL,
    description TEXT,
    status TEXT NOT NULL,
    created_at TIMESTAMP NOT NULL,
    updated_at TIMESTAMP NOT NULL,
    due_date TIMESTAMP,
    link TEXT,
    created_by TEXT,
    updated_by TEXT,
    planned_transmitted_date TIMESTAMP,
    planned_duration INTEGER,
    actual_transmitted_date TIMESTAMP,
    actual_accepted_date TIMESTAMP,
    actual_worked_out_date TIMESTAMP,
    actual_agreed_date TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_assignments_project ON assignments(project_id);
CREATE INDEX IF NOT EXISTS idx_assignments_status ON assignments(status);

CREATE TABLE IF NOT EXISTS assignment_audit (
    audit_id TEXT PRIMARY KEY,
    assignment_id TEXT NOT NULL,
    changed_by TEXT NOT NULL,
    changed_at TIMESTAMP NOT NULL,
    operation_type TEXT NOT NULL,
    field_name TEXT NOT NULL,
    old_value TEXT,
    new_value TEXT
);

CREATE INDEX IF NOT EXISTS idx_audit_assignment ON assignment_audit(assignment_id);

CREATE TABLE IF NOT EXISTS section_hierarchy (
    section_id TEXT PRIMARY KEY,
    section_name TEXT NOT NULL,
    project_id TEXT NOT NULL,
    project_name TEXT NOT NULL,
    stage_id TEXT,
    stage_name TEXT,
    object_id TEXT,
    object_name TEXT,
    responsible_department_id TEXT,
    responsible_department_name TEXT,
    responsible_team_name TEXT,
    section_responsible_name TEXT
);

CREATE TABLE IF NOT EXISTS organizational_structure (
    department_id TEXT NOT NULL,
    department_name TEXT NOT NULL,
    team_id TEXT,
    team_name TEXT
);

CREATE TABLE IF NOT EXISTS employees (
    user_id TEXT NOT NULL,
    full_name TEXT NOT NULL,
    team_id TEXT,
    department_id TEXT,
    position TEXT
);
"""

_ASSIGNMENT_COLUMNS = Assignment._fields
_DATE_COLUMNS = frozenset(
    {
        "due_date",
        "planned_transmitted_date",
        "actual_transmitted_date",
        "actual_accepted_date",
        "actual_worked_out_date",
        "actual_agreed_date",
    }
)
_DATETIME_COLUMNS = frozenset({"created_at", "updated_at"})


def _to_db(value: object) -> object:
    """Convert a Python value to its stored representation."""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, AssignmentStatus):
        return value.value
    return value


class SqliteRepository(RepositoryInterface):
    """Record store persisting every collection in a single SQLite file."""

    def __init__(self, db_path: Path) -> None:
        self._db_path = db_path
        self._connection: sqlite3.Connection | None = None

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create a database connection."""
        if self._connection is None:
            self._connection = sqlite3.connect(self._db_path)
            self._connection.row_factory = sqlite3.Row
        return self._connection

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        """Run statements atomically, translating driver errors to StoreError."""
        conn = self._get_connection()
        try:
            with conn:
                yield conn
        except sqlite3.Error as e:
            raise StoreError(f"SQLite operation failed: {e}") from e

    def initialize(self) -> None:
        """Create the tables if they do not exist yet."""
        with self._transaction() as conn:
            conn.executescript(SCHEMA)
        logger.info("Record store initialized at %s", self._db_path)

    def close(self) -> None:
        """Close the database connection."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None

    def __enter__(self) -> Self:
        """Enter the context manager."""
        self.initialize()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Exit the context manager."""
        self.close()

    # Assignment methods

    @staticmethod
    def _row_to_assignment(row: sqlite3.Row) -> Assignment:
        """Convert a database row to an Assignment."""
        values: dict[str, object] = {}
        for column in _ASSIGNMENT_COLUMNS:
            raw = row[column]
            if raw is None:
                values[column] = None
            elif column in _DATE_COLUMNS:
                values[column] = date.fromisoformat(raw)
            elif column in _DATETIME_COLUMNS:
                values[column] = datetime.fromisoformat(raw)
            elif column == "status":
                values[column] = AssignmentStatus(raw)
            else:
                values[column] = raw
        return Assignment(**values)  # type: ignore[arg-type]

    def query_assignments(
        self,
        project_id: ProjectId | None = None,
        status: AssignmentStatus | None = None,
    ) -> tuple[Assignment, ...]:
        """Get assignments, optionally narrowed by project and status."""
        clauses: list[str] = []
        params: list[object] = []
        if project_id is not None:
            clauses.append("project_id = ?")
            params.append(project_id)
        if status is not None:
            clauses.append("status = ?")
            params.append(status.value)
        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""

        with self._transaction() as conn:
            cursor = conn.execute(
                f"SELECT {', '.join(_ASSIGNMENT_COLUMNS)} FROM assignments{where}"
                " ORDER BY created_at DESC, rowid DESC",
                params,
            )
            return tuple(self._row_to_assignment(row) for row in cursor.fetchall())

    def get_assignment_by_id(self, assignment_id: AssignmentId) -> Assignment:
        """Get an assignment by id."""
        with self._transaction() as conn:
            cursor = conn.execute(
                f"SELECT {', '.join(_ASSIGNMENT_COLUMNS)} FROM assignments"
                " WHERE assignment_id = ?",
                (assignment_id,),
            )
            row = cursor.fetchone()
        if row is None:
            raise AssignmentNotFoundError(assignment_id)
        return self._row_to_assignment(row)

    def insert_assignment(self, assignment: Assignment) -> None:
        """Insert a new assignment."""
        placeholders = ", ".join("?" for _ in _ASSIGNMENT_COLUMNS)
        with self._transaction() as conn:
            conn.execute(
                f"INSERT INTO assignments ({', '.join(_ASSIGNMENT_COLUMNS)})"
                f" VALUES ({placeholders})",
                tuple(_to_db(value) for value in assignment),
            )

    def update_assignment(self, assignment: Assignment) -> None:
        """Overwrite a stored assignment."""
        columns = [c for c in _ASSIGNMENT_COLUMNS if c != "assignment_id"]
        assignments = ", ".join(f"{column} = ?" for column in columns)
        with self._transaction() as conn:
            cursor = conn.execute(
                f"UPDATE assignments SET {assignments} WHERE assignment_id = ?",
                (
                    *(_to_db(getattr(assignment, column)) for column in columns),
                    assignment.assignment_id,
                ),
            )
            if cursor.rowcount == 0:
                raise AssignmentNotFoundError(assignment.assignment_id)

    # Audit methods

    def insert_audit_records(
        self, records: Iterable[AuditRecord]
    ) -> tuple[AuditRecord, ...]:
        """Insert audit records, assigning their IDs."""
        stored = tuple(
            record._replace(audit_id=record.audit_id or str(uuid.uuid4()))
            for record in records
        )
        with self._transaction() as conn:
            conn.executemany(
                """INSERT INTO assignment_audit
                   (audit_id, assignment_id, changed_by, changed_at, operation_type,
                    field_name, old_value, new_value)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
                [
                    (
                        record.audit_id,
                        record.assignment_id,
                        record.changed_by,
                        record.changed_at.isoformat(),
                        record.operation_type.value,
                        record.field_name.value,
                        record.old_value,
                        record.new_value,
                    )
                    for record in stored
                ],
            )
        return stored

    def get_audit_records(self, assignment_id: AssignmentId) -> tuple[AuditRecord, ...]:
        """Get the audit trail of an assignment, newest first."""
        with self._transaction() as conn:
            cursor = conn.execute(
                """SELECT audit_id, assignment_id, changed_by, changed_at,
                   operation_type, field_name, old_value, new_value
                   FROM assignment_audit WHERE assignment_id = ?
                   ORDER BY changed_at DESC, rowid""",
                (assignment_id,),
            )
            return tuple(
                AuditRecord(
                    assignment_id=row["assignment_id"],
                    field_name=TrackedField(row["field_name"]),
                    old_value=row["old_value"],
                    new_value=row["new_value"],
                    changed_by=row["changed_by"],
                    changed_at=datetime.fromisoformat(row["changed_at"]),
                    operation_type=AuditOperation(row["operation_type"]),
                    audit_id=row["audit_id"],
                )
                for row in cursor.fetchall()
            )

    def delete_audit_records(self, assignment_id: AssignmentId) -> int:
        """Delete the audit trail of an assignment."""
        with self._transaction() as conn:
            cursor = conn.execute(
                "DELETE FROM assignment_audit WHERE assignment_id = ?",
                (assignment_id,),
            )
            return cursor.rowcount

    # Reference views

    def get_section_hierarchy(self) -> tuple[SectionHierarchyEntry, ...]:
        """Get all hierarchy rows."""
        with self._transaction() as conn:
            cursor = conn.execute(
                f"SELECT {', '.join(SectionHierarchyEntry._fields)}"
                " FROM section_hierarchy"
                " ORDER BY project_name, stage_name, object_name, section_name"
            )
            return tuple(
                SectionHierarchyEntry(*tuple(row)) for row in cursor.fetchall()
            )

    def get_organizational_structure(self) -> tuple[OrganizationalEntry, ...]:
        """Get all department/team rows."""
        with self._transaction() as conn:
            cursor = conn.execute(
                """SELECT department_id, department_name, team_id, team_name
                   FROM organizational_structure
                   ORDER BY department_name, team_name"""
            )
            return tuple(OrganizationalEntry(*tuple(row)) for row in cursor.fetchall())

    def get_employees(self) -> tuple[EmployeeEntry, ...]:
        """Get the employee roster."""
        with self._transaction() as conn:
            cursor = conn.execute(
                """SELECT user_id, full_name, team_id, department_id, position
                   FROM employees ORDER BY full_name, rowid"""
            )
            return tuple(EmployeeEntry(*tuple(row)) for row in cursor.fetchall())

    def replace_section_hierarchy(self, entries: Iterable[SectionHierarchyEntry]) -> None:
        """Replace the content of the hierarchy view."""
        self._replace_rows("section_hierarchy", SectionHierarchyEntry._fields, entries)

    def replace_organizational_structure(
        self, entries: Iterable[OrganizationalEntry]
    ) -> None:
        """Replace the content of the organizational view."""
        self._replace_rows(
            "organizational_structure", OrganizationalEntry._fields, entries
        )

    def replace_employees(self, entries: Iterable[EmployeeEntry]) -> None:
        """Replace the employee roster."""
        self._replace_rows("employees", EmployeeEntry._fields, entries)

    def _replace_rows(
        self, table: str, columns: tuple[str, ...], rows: Iterable[tuple]
    ) -> None:
        """Delete all rows of a reference table and insert the given ones."""
        placeholders = ", ".join("?" for _ in columns)
        with self._transaction() as conn:
            conn.execute(f"DELETE FROM {table}")
            conn.executemany(
                f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})",
                [tuple(row) for row in rows],
            )
        logger.debug("Replaced content of %s", table)
