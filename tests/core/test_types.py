"""Tests for the core types."""

import pytest

from assignment_transfer.core.types import (
    AssignmentStatus,
    DurationLimits,
    TrackedField,
)


class TestAssignmentStatus:
    """Tests for the AssignmentStatus enum."""

    @pytest.mark.parametrize(
        "status,literal",
        [
            (AssignmentStatus.CREATED, "Создано"),
            (AssignmentStatus.TRANSFERRED, "Передано"),
            (AssignmentStatus.ACCEPTED, "Принято"),
            (AssignmentStatus.COMPLETED, "Выполнено"),
            (AssignmentStatus.AGREED, "Согласовано"),
        ],
        ids=["created", "transferred", "accepted", "completed", "agreed"],
    )
    def test_persisted_literal(self, status: AssignmentStatus, literal: str) -> None:
        """The value is the persisted vocabulary and round-trips."""
        assert status.value == literal
        assert AssignmentStatus(literal) is status

    def test_rank_follows_lifecycle_order(self) -> None:
        """Ranks increase along the lifecycle."""
        assert [s.rank for s in AssignmentStatus] == [0, 1, 2, 3, 4]
        assert AssignmentStatus.CREATED.rank < AssignmentStatus.AGREED.rank

    def test_display_name_is_english(self) -> None:
        """Display names are readable English labels."""
        assert AssignmentStatus.TRANSFERRED.display_name == "Transferred"


class TestTrackedField:
    """Tests for the TrackedField enum."""

    def test_whitelist(self) -> None:
        """Exactly the five editable content fields are tracked."""
        assert {f.value for f in TrackedField} == {
            "title",
            "description",
            "due_date",
            "planned_duration",
            "link",
        }

    def test_display_name(self) -> None:
        """Display names are derived from the field names."""
        assert TrackedField.PLANNED_DURATION.display_name == "Planned duration"


class TestDurationLimits:
    """Tests for DurationLimits."""

    @pytest.mark.parametrize(
        "value,accepted",
        [(0, False), (1, True), (30, True), (365, True), (366, False), (-5, False)],
        ids=["zero", "min", "inside", "max", "above", "negative"],
    )
    def test_default_range(self, value: int, accepted: bool) -> None:
        """The default range is 1 to 365 days, inclusive."""
        assert DurationLimits().accepts(value) is accepted

    def test_custom_range(self) -> None:
        """A custom range is honored."""
        limits = DurationLimits(minimum=5, maximum=10)
        assert not limits.accepts(4)
        assert limits.accepts(10)
