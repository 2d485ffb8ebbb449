"""Planned versus actual schedule of assignments."""
from datetime import date, timedelta
from typing import Iterable

import pandas as pd
from dateutil.relativedelta import relativedelta

from assignment_transfer.core.types import ActualDateField, AssignmentStatus
from assignment_transfer.domain.assignment import Assignment

# Days spent in a status: from the date it was entered to the date it was left.
_STATE_SPANS: dict[str, tuple[ActualDateField | None, ActualDateField]] = {
    "Days created": (None, ActualDateField.TRANSMITTED),
    "Days transferred": (ActualDateField.TRANSMITTED, ActualDateField.ACCEPTED),
    "Days accepted": (ActualDateField.ACCEPTED, ActualDateField.WORKED_OUT),
    "Days completed": (ActualDateField.WORKED_OUT, ActualDateField.AGREED),
}

_ACTUAL_COLUMNS: dict[str, ActualDateField] = {
    "Transmitted": ActualDateField.TRANSMITTED,
    "Accepted": ActualDateField.ACCEPTED,
    "Worked out": ActualDateField.WORKED_OUT,
    "Agreed": ActualDateField.AGREED,
}


def planned_start(assignment: Assignment) -> date:
    """The actual transmission date, or the creation date before transmission."""
    return assignment.actual_transmitted_date or assignment.created_at.date()


def planned_end(assignment: Assignment) -> date | None:
    """The planned start plus the planned duration, if a duration is set."""
    if assignment.planned_duration is None:
        return None
    return planned_start(assignment) + relativedelta(days=assignment.planned_duration)


def is_overdue(assignment: Assignment, today: date) -> bool:
    """True if the planned end has passed and the work is not completed yet."""
    end = planned_end(assignment)
    return (
        end is not None
        and end < today
        and assignment.status.rank < AssignmentStatus.COMPLETED.rank
    )


class ScheduleReport:
    """Tabulate the planned and actual dates of assignments."""

    def __init__(self, assignments: Iterable[Assignment]) -> None:
        self._assignments = tuple(assignments)

    def compute(self, today: date) -> pd.DataFrame:
        """Compute one row per assignment, indexed by assignment ID.

        Columns: title, status, planned start and end, the four actual
        dates, the days spent in each status already left, and whether the
        assignment is overdue at ``today``.
        """
        rows: dict[str, list] = {
            "Id": [],
            "Title": [],
            "Status": [],
            "Planned start": [],
            "Planned end": [],
            **{column: [] for column in _ACTUAL_COLUMNS},
            **{column: [] for column in _STATE_SPANS},
            "Overdue": [],
        }
        for assignment in self._assignments:
            rows["Id"].append(assignment.assignment_id)
            rows["Title"].append(assignment.title)
            rows["Status"].append(assignment.status.value)
            rows["Planned start"].append(planned_start(assignment))
            rows["Planned end"].append(planned_end(assignment))
            for column, field in _ACTUAL_COLUMNS.items():
                rows[column].append(assignment.actual_date(field))
            for column, (entered, left) in _STATE_SPANS.items():
                rows[column].append(self._days_between(assignment, entered, left))
            rows["Overdue"].append(is_overdue(assignment, today))

        df = pd.DataFrame(rows)
        for column in _STATE_SPANS:
            df[column] = df[column].astype("Int64")
        df["Overdue"] = df["Overdue"].astype(bool)
        df.set_index("Id", inplace=True)
        return df

    def compute_month(self, month: date, today: date) -> pd.DataFrame:
        """Compute the rows of the assignments active during a month.

        An assignment is active if it was created before the end of the month
        and its planned end (if any) is not before the month starts, or if
        its due date falls within the month.
        """
        month_start = month.replace(day=1)
        month_end = month_start + relativedelta(months=1) - timedelta(days=1)

        def active(assignment: Assignment) -> bool:
            end = planned_end(assignment)
            if assignment.created_at.date() <= month_end and (
                end is None or end >= month_start
            ):
                return True
            due = assignment.due_date
            return due is not None and month_start <= due <= month_end

        return ScheduleReport(a for a in self._assignments if active(a)).compute(today)

    @staticmethod
    def _days_between(
        assignment: Assignment,
        entered: ActualDateField | None,
        left: ActualDateField,
    ) -> int | None:
        start = (
            assignment.actual_date(entered)
            if entered is not None
            else assignment.created_at.date()
        )
        end = assignment.actual_date(left)
        if start is None or end is None:
            return None
        return (end - start).days
