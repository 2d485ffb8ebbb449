"""Read-only organizational reference data.

Rows come from two join views and a roster:

- the section hierarchy view: one row per section with its object, stage
  and project, plus who is responsible for it (department by id, team and
  person by name only);
- the organizational structure view: one row per department/team pair;
- the employee roster: one row per employee placement.
"""

from typing import NamedTuple

from assignment_transfer.core.name_key import NameKey
from assignment_transfer.core.types import (
    DepartmentId,
    ObjectId,
    ProjectId,
    SectionId,
    StageId,
    TeamId,
    UserId,
)


class SectionHierarchyEntry(NamedTuple):
    """Denormalized join row describing one section."""

    section_id: SectionId
    section_name: str
    project_id: ProjectId
    project_name: str
    stage_id: StageId | None = None
    stage_name: str | None = None
    object_id: ObjectId | None = None
    object_name: str | None = None
    responsible_department_id: DepartmentId | None = None
    responsible_department_name: str | None = None
    responsible_team_name: str | None = None
    section_responsible_name: str | None = None

    @property
    def responsible_team_key(self) -> NameKey | None:
        """Name key of the responsible team."""
        return NameKey.of(self.responsible_team_name)

    @property
    def responsible_person_key(self) -> NameKey | None:
        """Name key of the responsible person."""
        return NameKey.of(self.section_responsible_name)


class OrganizationalEntry(NamedTuple):
    """Join row of the department/team structure."""

    department_id: DepartmentId
    department_name: str
    team_id: TeamId | None = None
    team_name: str | None = None


class EmployeeEntry(NamedTuple):
    """Roster row for an employee."""

    user_id: UserId
    full_name: str
    team_id: TeamId | None = None
    department_id: DepartmentId | None = None
    position: str | None = None


class Project(NamedTuple):
    """A project."""

    id: ProjectId
    name: str


class Stage(NamedTuple):
    """A stage of a project."""

    id: StageId
    project_id: ProjectId
    name: str


class ProjectObject(NamedTuple):
    """An object of a stage."""

    id: ObjectId
    stage_id: StageId
    name: str


class Section(NamedTuple):
    """A section, the unit that hands over and receives assignments."""

    id: SectionId
    name: str
    project_id: ProjectId
    object_id: ObjectId | None = None


class Department(NamedTuple):
    """A department."""

    id: DepartmentId
    name: str


class Team(NamedTuple):
    """A team of a department."""

    id: TeamId
    department_id: DepartmentId
    name: str

    @property
    def name_key(self) -> NameKey | None:
        """Key joining this team to hierarchy rows."""
        return NameKey.of(self.name)


class Specialist(NamedTuple):
    """An employee who can be responsible for sections."""

    id: UserId
    name: str
    team_id: TeamId | None = None
    department_id: DepartmentId | None = None
    position: str | None = None

    @property
    def name_key(self) -> NameKey | None:
        """Key joining this specialist to hierarchy rows."""
        return NameKey.of(self.name)
