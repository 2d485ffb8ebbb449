"""Multi-dimensional filtering of assignments.

Assignments only carry their project and their two section IDs. Every other
dimension (stage, object, department, team, specialist) is resolved through
the section hierarchy: the criterion is translated to a set of section IDs
and an assignment matches when its source or destination section belongs
to that set.

Filtering is a sequence of independent narrowing passes, one per
dimension. Each pass is a plain predicate over the surviving assignments,
so the order of the passes does not change the result. Filtering never
fails: a reference that cannot be resolved makes its pass match nothing
and is reported as a :class:`ResolutionIssue`.
"""

import dataclasses
import enum
import logging
from dataclasses import dataclass
from typing import Callable, Iterable, NamedTuple

from assignment_transfer.core.name_key import NameKey
from assignment_transfer.core.types import (
    AssignmentStatus,
    DepartmentId,
    Direction,
    ObjectId,
    ProjectId,
    SectionId,
    StageId,
    TeamId,
    UserId,
)
from assignment_transfer.domain.assignment import Assignment
from assignment_transfer.services.reference_directory import ReferenceDirectory

logger = logging.getLogger(__name__)

AssignmentPredicate = Callable[[Assignment], bool]


class FilterDimension(enum.StrEnum):
    """A dimension assignments can be filtered on."""

    PROJECT = enum.auto()
    STATUS = enum.auto()
    STAGE = enum.auto()
    OBJECT = enum.auto()
    DEPARTMENT = enum.auto()
    TEAM = enum.auto()
    SPECIALIST = enum.auto()
    SECTION = enum.auto()


# Selections cleared when a parent selection changes.
_DEPENDENT_SELECTIONS: dict[FilterDimension, tuple[str, ...]] = {
    FilterDimension.PROJECT: ("stage_id", "object_id"),
    FilterDimension.STAGE: ("object_id",),
    FilterDimension.DEPARTMENT: ("team_id", "specialist_id"),
    FilterDimension.TEAM: ("specialist_id",),
}

_CRITERION_FIELD: dict[FilterDimension, str] = {
    FilterDimension.PROJECT: "project_id",
    FilterDimension.STATUS: "status",
    FilterDimension.STAGE: "stage_id",
    FilterDimension.OBJECT: "object_id",
    FilterDimension.DEPARTMENT: "department_id",
    FilterDimension.TEAM: "team_id",
    FilterDimension.SPECIALIST: "specialist_id",
    FilterDimension.SECTION: "section_id",
}


@dataclass(frozen=True)
class FilterCriteria:  # pylint: disable=too-many-instance-attributes
    """Filter criteria for assignments. A None criterion is not applied."""

    project_id: ProjectId | None = None
    status: AssignmentStatus | None = None
    stage_id: StageId | None = None
    object_id: ObjectId | None = None
    department_id: DepartmentId | None = None
    team_id: TeamId | None = None
    specialist_id: UserId | None = None
    section_id: SectionId | None = None
    direction: Direction = Direction.ALL

    def with_selection(
        self, dimension: FilterDimension, value: object | None
    ) -> "FilterCriteria":
        """Return criteria with one selection changed.

        Selecting a project clears the stage and object, selecting a stage
        clears the object, changing the department clears the team and
        specialist, and changing the team clears the specialist.
        """
        changes: dict[str, object | None] = {_CRITERION_FIELD[dimension]: value}
        clears_on_any_value = dimension in (FilterDimension.DEPARTMENT, FilterDimension.TEAM)
        if value is not None or clears_on_any_value:
            for dependent in _DEPENDENT_SELECTIONS.get(dimension, ()):
                changes[dependent] = None
        return dataclasses.replace(self, **changes)  # type: ignore[arg-type]

    @property
    def is_empty(self) -> bool:
        """True if no criterion is set."""
        return all(
            getattr(self, field) is None for field in _CRITERION_FIELD.values()
        )


class IssueReason(enum.StrEnum):
    """Why a filter reference could not be resolved."""

    NOT_FOUND = enum.auto()
    AMBIGUOUS_NAME = enum.auto()


class ResolutionIssue(NamedTuple):
    """A filter reference that degraded to "no match"."""

    dimension: FilterDimension
    reason: IssueReason
    reference: str


class FilterOutcome(NamedTuple):
    """Filtered assignments together with the unresolved references."""

    assignments: tuple[Assignment, ...]
    issues: tuple[ResolutionIssue, ...]


def _match_nothing(_: Assignment) -> bool:
    return False


def _touches(sections: frozenset[SectionId]) -> AssignmentPredicate:
    """Predicate: the source or destination section is in the set."""

    def predicate(assignment: Assignment) -> bool:
        return (
            assignment.from_section_id in sections
            or assignment.to_section_id in sections
        )

    return predicate


class FilterResolver:
    """Resolve filter criteria against the organizational hierarchy."""

    def __init__(self, directory: ReferenceDirectory) -> None:
        self._directory = directory

    def resolve(
        self, assignments: Iterable[Assignment], criteria: FilterCriteria
    ) -> list[Assignment]:
        """Return the assignments matching every criterion."""
        return list(self.resolve_detailed(assignments, criteria).assignments)

    def resolve_detailed(
        self, assignments: Iterable[Assignment], criteria: FilterCriteria
    ) -> FilterOutcome:
        """Filter assignments and report the references that did not resolve."""
        issues: list[ResolutionIssue] = []
        passes = [
            *self._direct_passes(criteria),
            *self._hierarchy_passes(criteria, issues),
            *self._organization_passes(criteria, issues),
            *self._direction_passes(criteria),
        ]

        survivors = tuple(assignments)
        for predicate in passes:
            survivors = tuple(a for a in survivors if predicate(a))

        for issue in issues:
            logger.warning(
                "Unresolved %s filter %r: %s",
                issue.dimension,
                issue.reference,
                issue.reason,
            )
        return FilterOutcome(survivors, tuple(issues))

    # -------------------------------------------------------------------------
    # Passes
    # -------------------------------------------------------------------------

    @staticmethod
    def _direct_passes(criteria: FilterCriteria) -> list[AssignmentPredicate]:
        passes: list[AssignmentPredicate] = []
        if (project_id := criteria.project_id) is not None:
            passes.append(lambda a: a.project_id == project_id)
        if (status := criteria.status) is not None:
            passes.append(lambda a: a.status == status)
        return passes

    def _hierarchy_passes(
        self, criteria: FilterCriteria, issues: list[ResolutionIssue]
    ) -> list[AssignmentPredicate]:
        passes: list[AssignmentPredicate] = []
        if (stage_id := criteria.stage_id) is not None:
            if self._directory.stage(stage_id) is None:
                issues.append(
                    ResolutionIssue(FilterDimension.STAGE, IssueReason.NOT_FOUND, stage_id)
                )
            passes.append(
                _touches(self._directory.sections_where(lambda e: e.stage_id == stage_id))
            )
        if (object_id := criteria.object_id) is not None:
            if self._directory.project_object(object_id) is None:
                issues.append(
                    ResolutionIssue(
                        FilterDimension.OBJECT, IssueReason.NOT_FOUND, object_id
                    )
                )
            passes.append(
                _touches(
                    self._directory.sections_where(lambda e: e.object_id == object_id)
                )
            )
        return passes

    def _organization_passes(
        self, criteria: FilterCriteria, issues: list[ResolutionIssue]
    ) -> list[AssignmentPredicate]:
        # Specificity: specialist over team over department.
        if criteria.specialist_id is not None:
            return [self._specialist_pass(criteria.specialist_id, issues)]
        if criteria.team_id is not None:
            return [self._team_pass(criteria.team_id, issues)]
        if criteria.department_id is not None:
            return [self._department_pass(criteria.department_id, issues)]
        return []

    def _department_pass(
        self, department_id: DepartmentId, issues: list[ResolutionIssue]
    ) -> AssignmentPredicate:
        if self._directory.department(department_id) is None:
            issues.append(
                ResolutionIssue(
                    FilterDimension.DEPARTMENT, IssueReason.NOT_FOUND, department_id
                )
            )
        return _touches(
            self._directory.sections_where(
                lambda e: e.responsible_department_id == department_id
            )
        )

    def _team_pass(
        self, team_id: TeamId, issues: list[ResolutionIssue]
    ) -> AssignmentPredicate:
        if (team := self._directory.team(team_id)) is None or (
            key := team.name_key
        ) is None:
            issues.append(
                ResolutionIssue(FilterDimension.TEAM, IssueReason.NOT_FOUND, team_id)
            )
            return _match_nothing

        if self._directory.resolve_team_name(key).is_ambiguous:
            issues.append(
                ResolutionIssue(FilterDimension.TEAM, IssueReason.AMBIGUOUS_NAME, key.name)
            )
            return _match_nothing

        return _touches(self._sections_responsible_team(key))

    def _specialist_pass(
        self, specialist_id: UserId, issues: list[ResolutionIssue]
    ) -> AssignmentPredicate:
        if (specialist := self._directory.specialist(specialist_id)) is None:
            issues.append(
                ResolutionIssue(
                    FilterDimension.SPECIALIST, IssueReason.NOT_FOUND, specialist_id
                )
            )
            return _match_nothing

        responsible_for: frozenset[SectionId] = frozenset()
        if (key := specialist.name_key) is not None:
            if self._directory.resolve_specialist_name(key).is_ambiguous:
                # The name join cannot tell the homonyms apart: only the
                # id-based attribution is kept.
                issues.append(
                    ResolutionIssue(
                        FilterDimension.SPECIALIST, IssueReason.AMBIGUOUS_NAME, key.name
                    )
                )
            else:
                responsible_for = self._sections_responsible_person(key)

        def predicate(assignment: Assignment) -> bool:
            return (
                assignment.created_by == specialist_id
                or assignment.updated_by == specialist_id
                or assignment.from_section_id in responsible_for
                or assignment.to_section_id in responsible_for
            )

        return predicate

    @staticmethod
    def _direction_passes(criteria: FilterCriteria) -> list[AssignmentPredicate]:
        if (section_id := criteria.section_id) is None:
            return []
        match criteria.direction:
            case Direction.OUTGOING:
                return [lambda a: a.from_section_id == section_id]
            case Direction.INCOMING:
                return [lambda a: a.to_section_id == section_id]
            case _:
                return [lambda a: a.involves_section(section_id)]

    # -------------------------------------------------------------------------
    # Name-keyed section lookups
    # -------------------------------------------------------------------------

    def _sections_responsible_team(self, key: NameKey) -> frozenset[SectionId]:
        return self._directory.sections_where(lambda e: e.responsible_team_key == key)

    def _sections_responsible_person(self, key: NameKey) -> frozenset[SectionId]:
        return self._directory.sections_where(
            lambda e: e.responsible_person_key == key
        )
