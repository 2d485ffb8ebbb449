"""Per-section view of assignments: what each section sends and receives."""

from typing import Iterable, NamedTuple

from assignment_transfer.core.types import SectionId
from assignment_transfer.domain.assignment import Assignment
from assignment_transfer.services.reference_directory import ReferenceDirectory


class SectionGroup(NamedTuple):
    """A section with its hierarchy context and the assignments touching it."""

    section_id: SectionId
    section_name: str
    project_name: str
    stage_name: str | None
    object_name: str | None
    responsible_department_name: str | None
    responsible_team_name: str | None
    responsible_name: str | None
    outgoing: tuple[Assignment, ...]
    incoming: tuple[Assignment, ...]


def group_by_section(
    assignments: Iterable[Assignment], directory: ReferenceDirectory
) -> list[SectionGroup]:
    """Group assignments by the sections they leave from and arrive at.

    Sections are listed in hierarchy order. A section with neither outgoing
    nor incoming assignments is omitted, as are sections unknown to the
    directory. An assignment between two sections appears in both groups.
    """
    assignments = tuple(assignments)
    groups: list[SectionGroup] = []
    for entry in directory.hierarchy:
        outgoing = tuple(a for a in assignments if a.from_section_id == entry.section_id)
        incoming = tuple(a for a in assignments if a.to_section_id == entry.section_id)
        if not outgoing and not incoming:
            continue
        groups.append(
            SectionGroup(
                section_id=entry.section_id,
                section_name=entry.section_name,
                project_name=entry.project_name,
                stage_name=entry.stage_name,
                object_name=entry.object_name,
                responsible_department_name=entry.responsible_department_name,
                responsible_team_name=entry.responsible_team_name,
                responsible_name=entry.section_responsible_name,
                outgoing=outgoing,
                incoming=incoming,
            )
        )
    return groups
