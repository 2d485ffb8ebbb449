"""Shared organizational data and assignments for the tests."""

from datetime import datetime

import pytest

from assignment_transfer.core.types import AssignmentStatus
from assignment_transfer.domain.assignment import Assignment
from assignment_transfer.domain.organization import (
    EmployeeEntry,
    OrganizationalEntry,
    SectionHierarchyEntry,
)
from assignment_transfer.services.reference_directory import ReferenceDirectory


@pytest.fixture(name="hierarchy")
def hierarchy_fixture() -> list[SectionHierarchyEntry]:
    """Two projects, four sections."""
    return [
        SectionHierarchyEntry(
            section_id="s-arch",
            section_name="Architecture",
            project_id="p-1",
            project_name="Tower A",
            stage_id="st-1",
            stage_name="Design",
            object_id="o-1",
            object_name="Main building",
            responsible_department_id="d-1",
            responsible_department_name="Design Dept",
            responsible_team_name="Architects",
            section_responsible_name="Ivan Petrov",
        ),
        SectionHierarchyEntry(
            section_id="s-struct",
            section_name="Structures",
            project_id="p-1",
            project_name="Tower A",
            stage_id="st-1",
            stage_name="Design",
            object_id="o-1",
            object_name="Main building",
            responsible_department_id="d-2",
            responsible_department_name="Engineering",
            responsible_team_name="Structural",
            section_responsible_name="Anna Smirnova",
        ),
        SectionHierarchyEntry(
            section_id="s-hvac",
            section_name="HVAC",
            project_id="p-1",
            project_name="Tower A",
            stage_id="st-2",
            stage_name="Construction",
            object_id="o-2",
            object_name="Parking",
            responsible_department_id="d-2",
            responsible_department_name="Engineering",
            responsible_team_name="Mechanical",
            section_responsible_name="Oleg Ivanov",
        ),
        SectionHierarchyEntry(
            section_id="s-deck",
            section_name="Deck",
            project_id="p-2",
            project_name="Bridge",
            stage_id="st-3",
            stage_name="Survey",
            object_id="o-3",
            object_name="Span",
            responsible_department_id="d-1",
            responsible_department_name="Design Dept",
            responsible_team_name="Architects",
            section_responsible_name="Maria Orlova",
        ),
    ]


@pytest.fixture(name="organization")
def organization_fixture() -> list[OrganizationalEntry]:
    """Three departments, three teams."""
    return [
        OrganizationalEntry("d-1", "Design Dept", "t-arch", "Architects"),
        OrganizationalEntry("d-2", "Engineering", "t-struct", "Structural"),
        OrganizationalEntry("d-2", "Engineering", "t-mech", "Mechanical"),
        OrganizationalEntry("d-3", "Procurement"),
    ]


@pytest.fixture(name="employees")
def employees_fixture() -> list[EmployeeEntry]:
    """Five employees, one of them listed twice."""
    return [
        EmployeeEntry("u-anna", "Anna Smirnova", "t-struct", "d-2", "Lead engineer"),
        EmployeeEntry("u-ivan", "Ivan Petrov", "t-arch", "d-1", "Architect"),
        EmployeeEntry("u-ivan", "Ivan Petrov", "t-arch", "d-1", "Reviewer"),
        EmployeeEntry("u-kate", "Kate Lee", "t-struct", "d-2", "Engineer"),
        EmployeeEntry("u-maria", "Maria Orlova", "t-arch", "d-1", "Architect"),
        EmployeeEntry("u-oleg", "Oleg Ivanov", "t-mech", "d-2", "Engineer"),
    ]


@pytest.fixture(name="directory")
def directory_fixture(
    hierarchy: list[SectionHierarchyEntry],
    organization: list[OrganizationalEntry],
    employees: list[EmployeeEntry],
) -> ReferenceDirectory:
    """The reference directory built from the shared data."""
    return ReferenceDirectory(hierarchy, organization, employees)


@pytest.fixture(name="assignments")
def assignments_fixture() -> dict[str, Assignment]:
    """Five assignments between the shared sections, keyed by ID."""

    def make(  # pylint: disable=too-many-arguments
        assignment_id: str,
        project_id: str,
        from_section_id: str,
        to_section_id: str,
        status: AssignmentStatus,
        day: int,
        created_by: str | None = None,
        updated_by: str | None = None,
    ) -> Assignment:
        return Assignment(
            assignment_id=assignment_id,
            project_id=project_id,
            from_section_id=from_section_id,
            to_section_id=to_section_id,
            title=f"Task {assignment_id}",
            status=status,
            created_at=datetime(2025, 3, day, 9, 0),
            updated_at=datetime(2025, 3, day, 9, 0),
            created_by=created_by,
            updated_by=updated_by or created_by,
        )

    return {
        a.assignment_id: a
        for a in (
            make("a1", "p-1", "s-arch", "s-struct", AssignmentStatus.CREATED, 5, "u-kate"),
            make("a2", "p-1", "s-struct", "s-hvac", AssignmentStatus.TRANSFERRED, 4, "u-ivan"),
            make("a3", "p-1", "s-hvac", "s-arch", AssignmentStatus.ACCEPTED, 3),
            make("a4", "p-2", "s-deck", "s-deck", AssignmentStatus.CREATED, 2),
            make(
                "a5",
                "p-1",
                "s-arch",
                "s-hvac",
                AssignmentStatus.TRANSFERRED,
                1,
                updated_by="u-kate",
            ),
        )
    }
