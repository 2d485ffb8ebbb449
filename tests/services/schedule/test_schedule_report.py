"""Module to test the ScheduleReport class."""
from datetime import date, datetime

import pandas as pd
import pytest

from assignment_transfer.core.types import AssignmentStatus
from assignment_transfer.domain.assignment import Assignment
from assignment_transfer.services.schedule.schedule_report import (
    ScheduleReport,
    is_overdue,
    planned_end,
    planned_start,
)


def _assignment(assignment_id: str, **kwargs: object) -> Assignment:
    defaults: dict[str, object] = {
        "assignment_id": assignment_id,
        "project_id": "p-1",
        "from_section_id": "s-arch",
        "to_section_id": "s-struct",
        "title": f"Task {assignment_id}",
        "status": AssignmentStatus.CREATED,
        "created_at": datetime(2025, 3, 1, 9, 0),
        "updated_at": datetime(2025, 3, 1, 9, 0),
    }
    defaults.update(kwargs)
    return Assignment(**defaults)  # type: ignore[arg-type]


@pytest.fixture
def completed() -> Assignment:
    """Return an assignment that went through three transitions."""
    return _assignment(
        "done",
        status=AssignmentStatus.COMPLETED,
        planned_duration=10,
        actual_transmitted_date=date(2025, 3, 3),
        actual_accepted_date=date(2025, 3, 5),
        actual_worked_out_date=date(2025, 3, 12),
    )


@pytest.fixture
def late() -> Assignment:
    """Return an accepted assignment past its planned end."""
    return _assignment(
        "late",
        status=AssignmentStatus.ACCEPTED,
        planned_duration=5,
        actual_transmitted_date=date(2025, 3, 2),
        actual_accepted_date=date(2025, 3, 4),
    )


@pytest.fixture
def fresh() -> Assignment:
    """Return a created assignment without a duration."""
    return _assignment("fresh", created_at=datetime(2025, 4, 20, 15, 0))


class TestPlannedDates:
    """Tests for the planned start and end."""

    def test_start_is_transmission(self, completed: Assignment) -> None:
        """The actual transmission date starts the plan."""
        assert planned_start(completed) == date(2025, 3, 3)

    def test_start_before_transmission(self, fresh: Assignment) -> None:
        """Before transmission the plan starts at creation."""
        assert planned_start(fresh) == date(2025, 4, 20)

    def test_end(self, completed: Assignment, fresh: Assignment) -> None:
        """The plan ends after the planned duration, if any."""
        assert planned_end(completed) == date(2025, 3, 13)
        assert planned_end(fresh) is None

    @pytest.mark.parametrize(
        "today,expected",
        [(date(2025, 3, 7), False), (date(2025, 3, 8), True)],
        ids=["on_planned_end", "after_planned_end"],
    )
    def test_overdue(self, late: Assignment, today: date, expected: bool) -> None:
        """An assignment is overdue once its planned end has passed."""
        assert is_overdue(late, today) is expected

    def test_completed_never_overdue(self, completed: Assignment) -> None:
        """Completed work is not overdue."""
        assert not is_overdue(completed, date(2026, 1, 1))


class TestScheduleReport:
    """Tests for the ScheduleReport class."""

    def test_compute(
        self, completed: Assignment, late: Assignment, fresh: Assignment
    ) -> None:
        """One row per assignment with dates and days per status."""
        df = ScheduleReport((completed, late, fresh)).compute(date(2025, 3, 20))

        assert list(df.index) == ["done", "late", "fresh"]
        assert df.index.name == "Id"

        row = df.loc["done"]
        assert row["Title"] == "Task done"
        assert row["Status"] == AssignmentStatus.COMPLETED.value
        assert row["Planned end"] == date(2025, 3, 13)
        assert row["Days created"] == 2
        assert row["Days transferred"] == 2
        assert row["Days accepted"] == 7
        assert pd.isna(row["Days completed"])
        assert pd.isna(row["Agreed"])

        assert list(df["Overdue"]) == [False, True, False]

    def test_compute_empty(self) -> None:
        """No assignment gives an empty table with the full set of columns."""
        df = ScheduleReport(()).compute(date(2025, 3, 20))
        assert df.empty
        assert "Overdue" in df.columns
        assert "Days created" in df.columns

    def test_compute_month(
        self, completed: Assignment, late: Assignment, fresh: Assignment
    ) -> None:
        """Only assignments active during the month are listed."""
        report = ScheduleReport((completed, late, fresh))

        assert list(report.compute_month(date(2025, 3, 15), date(2025, 3, 20)).index) == [
            "done",
            "late",
        ]
        assert list(report.compute_month(date(2025, 4, 1), date(2025, 4, 25)).index) == [
            "fresh"
        ]

    def test_compute_month_due_date(self) -> None:
        """A due date within the month makes an assignment active."""
        due_later = _assignment(
            "due",
            created_at=datetime(2025, 6, 1, 9, 0),
            due_date=date(2025, 5, 30),
        )
        df = ScheduleReport((due_later,)).compute_month(date(2025, 5, 1), date(2025, 5, 2))
        assert list(df.index) == ["due"]
