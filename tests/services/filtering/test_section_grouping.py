"""Tests for grouping assignments by section."""

from assignment_transfer.domain.assignment import Assignment
from assignment_transfer.services.filtering.section_grouping import group_by_section
from assignment_transfer.services.reference_directory import ReferenceDirectory


class TestGroupBySection:
    """Tests for group_by_section()."""

    def test_groups_in_hierarchy_order(
        self, directory: ReferenceDirectory, assignments: dict[str, Assignment]
    ) -> None:
        """Every touched section gets a group, in hierarchy order."""
        groups = group_by_section(assignments.values(), directory)
        assert [g.section_id for g in groups] == ["s-arch", "s-struct", "s-hvac", "s-deck"]

    def test_outgoing_and_incoming(
        self, directory: ReferenceDirectory, assignments: dict[str, Assignment]
    ) -> None:
        """A group splits what the section sends from what it receives."""
        groups = {g.section_id: g for g in group_by_section(assignments.values(), directory)}

        architecture = groups["s-arch"]
        assert [a.assignment_id for a in architecture.outgoing] == ["a1", "a5"]
        assert [a.assignment_id for a in architecture.incoming] == ["a3"]
        assert architecture.project_name == "Tower A"
        assert architecture.stage_name == "Design"
        assert architecture.responsible_team_name == "Architects"
        assert architecture.responsible_name == "Ivan Petrov"

    def test_self_transfer_in_both_lists(
        self, directory: ReferenceDirectory, assignments: dict[str, Assignment]
    ) -> None:
        """An assignment within one section is outgoing and incoming."""
        groups = {g.section_id: g for g in group_by_section(assignments.values(), directory)}
        deck = groups["s-deck"]
        assert deck.outgoing == deck.incoming == (assignments["a4"],)

    def test_untouched_sections_omitted(
        self, directory: ReferenceDirectory, assignments: dict[str, Assignment]
    ) -> None:
        """Sections without assignments are left out."""
        groups = group_by_section([assignments["a4"]], directory)
        assert [g.section_id for g in groups] == ["s-deck"]

    def test_unknown_sections_omitted(
        self, directory: ReferenceDirectory, assignments: dict[str, Assignment]
    ) -> None:
        """Assignments between unknown sections form no group."""
        orphan = assignments["a1"]._replace(from_section_id="s-x", to_section_id="s-y")
        assert not group_by_section([orphan], directory)
