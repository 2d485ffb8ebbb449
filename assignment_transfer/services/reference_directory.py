"""Read-only directory of the organizational reference data.

The directory is materialized once per session from the section hierarchy
view, the organizational structure view and the employee roster. It
resolves IDs to names, answers parent/child membership queries used by the
filters, and resolves the name-keyed joins of the hierarchy view.
"""

import logging
from typing import Callable, Iterable

from assignment_transfer.core.name_key import NameKey, NameResolution
from assignment_transfer.core.types import (
    DepartmentId,
    ObjectId,
    ProjectId,
    SectionId,
    StageId,
    TeamId,
    UserId,
)
from assignment_transfer.domain.organization import (
    Department,
    EmployeeEntry,
    OrganizationalEntry,
    Project,
    ProjectObject,
    Section,
    SectionHierarchyEntry,
    Specialist,
    Stage,
    Team,
)
from assignment_transfer.infrastructure.persistence.repository_interface import (
    HierarchyRepositoryInterface,
    OrganizationRepositoryInterface,
)

logger = logging.getLogger(__name__)


class ReferenceDirectory:  # pylint: disable=too-many-instance-attributes
    """Lookup tables over projects, sections and the organization."""

    def __init__(
        self,
        hierarchy: Iterable[SectionHierarchyEntry],
        organization: Iterable[OrganizationalEntry],
        employees: Iterable[EmployeeEntry],
    ) -> None:
        self._hierarchy: dict[SectionId, SectionHierarchyEntry] = {}
        self._projects: dict[ProjectId, Project] = {}
        self._stages: dict[StageId, Stage] = {}
        self._objects: dict[ObjectId, ProjectObject] = {}
        self._departments: dict[DepartmentId, Department] = {}
        self._teams: dict[TeamId, Team] = {}
        self._specialists: dict[UserId, Specialist] = {}
        self._user_names: dict[UserId, str] = {}
        self._specialists_by_name: dict[NameKey, tuple[Specialist, ...]] = {}
        self._teams_by_name: dict[NameKey, tuple[Team, ...]] = {}

        self._index_hierarchy(hierarchy)
        self._index_organization(organization)
        self._index_employees(employees)

        logger.debug(
            "Reference directory built: %d projects, %d stages, %d objects, "
            "%d sections, %d departments, %d teams, %d specialists",
            len(self._projects),
            len(self._stages),
            len(self._objects),
            len(self._hierarchy),
            len(self._departments),
            len(self._teams),
            len(self._specialists),
        )

    @classmethod
    def load(
        cls,
        hierarchy_repository: HierarchyRepositoryInterface,
        organization_repository: OrganizationRepositoryInterface,
    ) -> "ReferenceDirectory":
        """Materialize the directory from the store's views."""
        return cls(
            hierarchy_repository.get_section_hierarchy(),
            organization_repository.get_organizational_structure(),
            organization_repository.get_employees(),
        )

    def _index_hierarchy(self, hierarchy: Iterable[SectionHierarchyEntry]) -> None:
        for entry in hierarchy:
            self._hierarchy.setdefault(entry.section_id, entry)
            self._projects.setdefault(
                entry.project_id, Project(entry.project_id, entry.project_name)
            )
            if entry.stage_id:
                self._stages.setdefault(
                    entry.stage_id,
                    Stage(entry.stage_id, entry.project_id, entry.stage_name or ""),
                )
            if entry.object_id:
                self._objects.setdefault(
                    entry.object_id,
                    ProjectObject(
                        entry.object_id, entry.stage_id or "", entry.object_name or ""
                    ),
                )
            if entry.responsible_department_id and entry.responsible_department_name:
                self._departments.setdefault(
                    entry.responsible_department_id,
                    Department(
                        entry.responsible_department_id,
                        entry.responsible_department_name,
                    ),
                )

    def _index_organization(self, organization: Iterable[OrganizationalEntry]) -> None:
        by_name: dict[NameKey, list[Team]] = {}
        for entry in organization:
            self._departments[entry.department_id] = Department(
                entry.department_id, entry.department_name
            )
            if entry.team_id and entry.team_id not in self._teams:
                team = Team(entry.team_id, entry.department_id, entry.team_name or "")
                self._teams[team.id] = team
                if (key := team.name_key) is not None:
                    by_name.setdefault(key, []).append(team)
        self._teams_by_name = {key: tuple(teams) for key, teams in by_name.items()}

    def _index_employees(self, employees: Iterable[EmployeeEntry]) -> None:
        # Deduplicated on the full name, which is how the hierarchy view refers
        # to people. Distinct users sharing a name are all kept and the name is
        # flagged as ambiguous.
        by_name: dict[NameKey, list[Specialist]] = {}
        for row in employees:
            self._user_names.setdefault(row.user_id, row.full_name)
            if (key := NameKey.of(row.full_name)) is None:
                continue
            same_name = by_name.setdefault(key, [])
            if any(s.id == row.user_id for s in same_name):
                continue
            specialist = Specialist(
                id=row.user_id,
                name=key.name,
                team_id=row.team_id,
                department_id=row.department_id,
                position=row.position,
            )
            same_name.append(specialist)
            self._specialists.setdefault(specialist.id, specialist)

        self._specialists_by_name = {
            key: tuple(specialists) for key, specialists in by_name.items()
        }
        for key in self.ambiguous_specialist_names:
            logger.warning(
                "Specialist name %r is shared by %d users",
                key.name,
                len(self._specialists_by_name[key]),
            )

    # -------------------------------------------------------------------------
    # Collections
    # -------------------------------------------------------------------------

    @property
    def projects(self) -> tuple[Project, ...]:
        """All projects."""
        return tuple(self._projects.values())

    @property
    def sections(self) -> tuple[Section, ...]:
        """All sections of the hierarchy."""
        return tuple(
            Section(e.section_id, e.section_name, e.project_id, e.object_id)
            for e in self._hierarchy.values()
        )

    @property
    def departments(self) -> tuple[Department, ...]:
        """All departments."""
        return tuple(self._departments.values())

    @property
    def specialists(self) -> tuple[Specialist, ...]:
        """All specialists."""
        return tuple(self._specialists.values())

    @property
    def hierarchy(self) -> tuple[SectionHierarchyEntry, ...]:
        """All hierarchy rows."""
        return tuple(self._hierarchy.values())

    @property
    def ambiguous_specialist_names(self) -> tuple[NameKey, ...]:
        """Names carried by more than one specialist."""
        return tuple(
            key for key, found in self._specialists_by_name.items() if len(found) > 1
        )

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def project(self, project_id: ProjectId) -> Project | None:
        """Return a project by ID."""
        return self._projects.get(project_id)

    def stage(self, stage_id: StageId) -> Stage | None:
        """Return a stage by ID."""
        return self._stages.get(stage_id)

    def project_object(self, object_id: ObjectId) -> ProjectObject | None:
        """Return an object by ID."""
        return self._objects.get(object_id)

    def department(self, department_id: DepartmentId) -> Department | None:
        """Return a department by ID."""
        return self._departments.get(department_id)

    def team(self, team_id: TeamId) -> Team | None:
        """Return a team by ID."""
        return self._teams.get(team_id)

    def specialist(self, user_id: UserId) -> Specialist | None:
        """Return a specialist by user ID."""
        return self._specialists.get(user_id)

    def hierarchy_entry(self, section_id: SectionId) -> SectionHierarchyEntry | None:
        """Return the hierarchy row of a section."""
        return self._hierarchy.get(section_id)

    def section_name(self, section_id: SectionId) -> str | None:
        """Return a section name by ID."""
        entry = self._hierarchy.get(section_id)
        return entry.section_name if entry else None

    def project_name(self, project_id: ProjectId) -> str | None:
        """Return a project name by ID."""
        project = self._projects.get(project_id)
        return project.name if project else None

    def user_name(self, user_id: UserId | None) -> str | None:
        """Return a user's full name by ID."""
        return self._user_names.get(user_id) if user_id else None

    # -------------------------------------------------------------------------
    # Membership queries
    # -------------------------------------------------------------------------

    def stages_of(self, project_id: ProjectId | None) -> tuple[Stage, ...]:
        """Stages of a project (none without a project)."""
        if not project_id:
            return ()
        return tuple(s for s in self._stages.values() if s.project_id == project_id)

    def objects_of(self, stage_id: StageId | None) -> tuple[ProjectObject, ...]:
        """Objects of a stage (none without a stage)."""
        if not stage_id:
            return ()
        return tuple(o for o in self._objects.values() if o.stage_id == stage_id)

    def teams_of(self, department_id: DepartmentId | None) -> tuple[Team, ...]:
        """Teams of a department (every team without a department)."""
        if not department_id:
            return tuple(self._teams.values())
        return tuple(t for t in self._teams.values() if t.department_id == department_id)

    def specialists_of(self, team_id: TeamId | None) -> tuple[Specialist, ...]:
        """Specialists of a team (none without a team)."""
        if not team_id:
            return ()
        return tuple(s for s in self._specialists.values() if s.team_id == team_id)

    def sections_where(
        self, predicate: Callable[[SectionHierarchyEntry], bool]
    ) -> frozenset[SectionId]:
        """IDs of the sections whose hierarchy row satisfies the predicate."""
        return frozenset(
            entry.section_id for entry in self._hierarchy.values() if predicate(entry)
        )

    # -------------------------------------------------------------------------
    # Name-keyed joins
    # -------------------------------------------------------------------------

    def resolve_team_name(self, key: NameKey) -> NameResolution[Team]:
        """Find the teams carrying a name."""
        return NameResolution(key, self._teams_by_name.get(key, ()))

    def resolve_specialist_name(self, key: NameKey) -> NameResolution[Specialist]:
        """Find the specialists carrying a name."""
        return NameResolution(key, self._specialists_by_name.get(key, ()))
