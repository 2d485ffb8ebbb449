"""Main module for the Assignment Transfer command line."""
import argparse
import sys
from datetime import date
from pathlib import Path
from typing import Any, Sequence

import yaml

from assignment_transfer.core.types import AssignmentStatus, Direction, TrackedField
from assignment_transfer.domain import lifecycle
from assignment_transfer.domain.assignment import (
    AssignmentDraft,
    AssignmentUpdate,
    AssignmentView,
)
from assignment_transfer.domain.organization import (
    EmployeeEntry,
    OrganizationalEntry,
    SectionHierarchyEntry,
)
from assignment_transfer.exceptions import TransferEngineError
from assignment_transfer.i18n import _, setup_i18n
from assignment_transfer.infrastructure.config import Config
from assignment_transfer.infrastructure.identity import StaticIdentityProvider
from assignment_transfer.infrastructure.persistence.sqlite_repository import (
    SqliteRepository,
)
from assignment_transfer.infrastructure.telemetry import LoggingTelemetrySink
from assignment_transfer.services.filtering.assignment_filter import FilterCriteria
from assignment_transfer.services.schedule.schedule_report import ScheduleReport
from assignment_transfer.services.transfer_service import (
    OperationResult,
    TransferService,
)


def parse_status(value: str) -> AssignmentStatus:
    """Parse a status given by member name (``accepted``) or persisted literal."""
    try:
        return AssignmentStatus[value.upper()]
    except KeyError:
        pass
    try:
        return AssignmentStatus(value)
    except ValueError as e:
        choices = ", ".join(s.name.lower() for s in AssignmentStatus)
        raise argparse.ArgumentTypeError(
            f"invalid status {value!r} (choose from {choices})"
        ) from e


def parse_month(value: str) -> date:
    """Parse a ``YYYY-MM`` month into its first day."""
    return date.fromisoformat(f"{value}-01")


def _add_filter_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--project", help="Project ID")
    parser.add_argument("--status", type=parse_status, help="Assignment status")
    parser.add_argument("--stage", help="Stage ID")
    parser.add_argument("--object", help="Object ID")
    parser.add_argument("--department", help="Responsible department ID")
    parser.add_argument("--team", help="Responsible team ID")
    parser.add_argument("--specialist", help="Specialist user ID")
    parser.add_argument("--section", help="Section ID for the direction view")
    parser.add_argument(
        "--direction",
        type=Direction,
        choices=list(Direction),
        default=Direction.ALL,
        help="Direction relative to --section",
    )


def _add_content_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--description", help="Description")
    parser.add_argument("--due-date", type=date.fromisoformat, help="Due date")
    parser.add_argument("--link", help="External link")
    parser.add_argument(
        "--planned-date",
        type=date.fromisoformat,
        help="Planned transmission date",
    )
    parser.add_argument("--duration", type=int, help="Planned duration in days")


def create_parser() -> argparse.ArgumentParser:
    """
    Create the argument parser for the CLI.
    """
    parser = argparse.ArgumentParser(description="Assignment Transfer")
    parser.add_argument(
        "-c",
        "--config",
        help="Configuration file",
        type=Path,
    )
    sub_parser = parser.add_subparsers(dest="command")

    reference_parser = sub_parser.add_parser(
        "load-reference", help="Replace the organizational reference data"
    )
    reference_parser.add_argument(
        "reference_file", type=Path, help="YAML file with the reference views"
    )

    list_parser = sub_parser.add_parser("list", help="List assignments")
    _add_filter_arguments(list_parser)

    sections_parser = sub_parser.add_parser(
        "sections", help="List assignments grouped by section"
    )
    _add_filter_arguments(sections_parser)

    create_parser_ = sub_parser.add_parser("create", help="Create an assignment")
    create_parser_.add_argument("--project", required=True, help="Project ID")
    create_parser_.add_argument(
        "--from", dest="from_section", required=True, help="Source section ID"
    )
    create_parser_.add_argument(
        "--to", dest="to_section", required=True, help="Destination section ID"
    )
    create_parser_.add_argument("--title", required=True, help="Title")
    _add_content_arguments(create_parser_)

    edit_parser = sub_parser.add_parser("edit", help="Edit an assignment")
    edit_parser.add_argument("assignment_id", help="Assignment ID")
    edit_parser.add_argument("--title", help="Title")
    _add_content_arguments(edit_parser)

    advance_parser = sub_parser.add_parser(
        "advance", help="Move an assignment to its next status"
    )
    advance_parser.add_argument("assignment_id", help="Assignment ID")
    advance_parser.add_argument(
        "--duration",
        type=int,
        help="Planned duration in days, set when the assignment is accepted",
    )

    revert_parser = sub_parser.add_parser(
        "revert", help="Move an assignment back to its previous status"
    )
    revert_parser.add_argument("assignment_id", help="Assignment ID")

    history_parser = sub_parser.add_parser("history", help="Show the edit history")
    history_parser.add_argument("assignment_id", help="Assignment ID")

    clear_parser = sub_parser.add_parser(
        "clear-history", help="Delete the edit history of an assignment"
    )
    clear_parser.add_argument("assignment_id", help="Assignment ID")

    schedule_parser = sub_parser.add_parser(
        "schedule", help="Show planned and actual dates"
    )
    schedule_parser.add_argument(
        "--month", type=parse_month, help="Restrict to a month (YYYY-MM)"
    )
    _add_filter_arguments(schedule_parser)
    return parser


def criteria_from_args(args: argparse.Namespace) -> FilterCriteria:
    """Build filter criteria from the parsed filter options."""
    return FilterCriteria(
        project_id=args.project,
        status=args.status,
        stage_id=args.stage,
        object_id=args.object,
        department_id=args.department,
        team_id=args.team,
        specialist_id=args.specialist,
        section_id=args.section,
        direction=args.direction,
    )


def load_reference(path: Path, repository: SqliteRepository) -> None:
    """
    Replace the reference views of the store with the content of a YAML file.
    The file holds three lists of mappings: ``section_hierarchy``,
    ``organizational_structure`` and ``employees``.
    """
    with open(path, encoding="utf-8") as file:
        content: dict[str, Any] = yaml.safe_load(file) or {}

    hierarchy = [
        SectionHierarchyEntry(**row) for row in content.get("section_hierarchy", [])
    ]
    organization = [
        OrganizationalEntry(**row) for row in content.get("organizational_structure", [])
    ]
    employees = [EmployeeEntry(**row) for row in content.get("employees", [])]

    repository.replace_section_hierarchy(hierarchy)
    repository.replace_organizational_structure(organization)
    repository.replace_employees(employees)
    print(
        f"Loaded {len(hierarchy)} sections, {len(organization)} organizational rows "
        f"and {len(employees)} employees from {path}"
    )


def format_view(view: AssignmentView) -> str:
    """Format an assignment on one line."""
    assignment = view.assignment
    return (
        f"{assignment.assignment_id}  [{assignment.status.display_name}]  "
        f"{assignment.title}  ({view.project_name}: "
        f"{view.from_section_name} -> {view.to_section_name})"
    )


def report_result(result: OperationResult) -> None:
    """Print the outcome of a mutation and exit accordingly."""
    if not result.success:
        print(f"Error: {result.error_message}")
        sys.exit(1)

    assert result.assignment is not None
    print(
        f"{result.assignment.assignment_id}: "
        f"{result.assignment.status.display_name}"
    )
    for warning in result.warnings:
        print(f"Warning: {warning}")
    sys.exit(0)


def handle_list_command(service: TransferService, criteria: FilterCriteria) -> None:
    """Handle the list command."""
    views = service.fetch_assignments(criteria)
    for view in views:
        print(format_view(view))
    print(f"{len(views)} assignment(s)")
    sys.exit(0)


def handle_sections_command(
    service: TransferService, criteria: FilterCriteria
) -> None:
    """Handle the sections command."""
    for group in service.group_by_section(criteria):
        print(f"{group.section_name} ({group.project_name})")
        for assignment in group.outgoing:
            print(f"  -> {assignment.title} [{assignment.status.display_name}]")
        for assignment in group.incoming:
            print(f"  <- {assignment.title} [{assignment.status.display_name}]")
    sys.exit(0)


def handle_advance_command(
    service: TransferService,
    repository: SqliteRepository,
    config: Config,
    assignment_id: str,
    duration: int | None,
) -> None:
    """Handle the advance command."""
    try:
        stored = repository.get_assignment_by_id(assignment_id)
    except TransferEngineError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if (
        duration is None
        and lifecycle.next_status(stored.status) is lifecycle.DURATION_STATUS
    ):
        duration = config.default_accept_duration
    report_result(service.advance_status(assignment_id, stored.status, duration))


def handle_revert_command(
    service: TransferService, repository: SqliteRepository, assignment_id: str
) -> None:
    """Handle the revert command."""
    try:
        stored = repository.get_assignment_by_id(assignment_id)
    except TransferEngineError as e:
        print(f"Error: {e}")
        sys.exit(1)

    report_result(service.revert_status(assignment_id, stored.status))


def handle_history_command(service: TransferService, assignment_id: str) -> None:
    """Handle the history command."""
    entries = service.fetch_assignment_history(assignment_id)
    if not entries:
        print(_("No changes recorded"))
    for entry in entries:
        record = entry.record
        print(
            f"{record.changed_at:%Y-%m-%d %H:%M}  {entry.changed_by_name}  "
            f"{TrackedField(record.field_name).display_name}: "
            f"{record.old_value or '-'} -> {record.new_value or '-'}"
        )
    sys.exit(0)


def handle_schedule_command(
    service: TransferService, criteria: FilterCriteria, month: date | None
) -> None:
    """Handle the schedule command."""
    report = ScheduleReport(view.assignment for view in service.fetch_assignments(criteria))
    today = date.today()
    df = report.compute_month(month, today) if month else report.compute(today)
    print(df.to_string())
    sys.exit(0)


def main(argv: Sequence[str] | None = None) -> None:
    """
    Command Line Interface for the Assignment Transfer engine.
    Several commands are available:
    - load-reference: Replace the organizational reference data
    - list / sections: Query assignments
    - create / edit: Create or edit an assignment
    - advance / revert: Move an assignment through its lifecycle
    - history / clear-history: Read or clear the edit history
    - schedule: Show planned and actual dates
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    config = Config()
    if args.config is not None:
        config.parse(Path(args.config))
    config.setup_logging()
    setup_i18n(config.language)

    with SqliteRepository(config.database_path) as repository:
        service = TransferService(
            repository,
            StaticIdentityProvider(config.current_user_id),
            LoggingTelemetrySink(),
            duration_limits=config.duration_limits,
        )

        match args.command:
            case "load-reference":
                load_reference(args.reference_file, repository)
                sys.exit(0)

            case "list":
                handle_list_command(service, criteria_from_args(args))

            case "sections":
                handle_sections_command(service, criteria_from_args(args))

            case "create":
                report_result(
                    service.create_assignment(
                        AssignmentDraft(
                            project_id=args.project,
                            from_section_id=args.from_section,
                            to_section_id=args.to_section,
                            title=args.title,
                            description=args.description,
                            due_date=args.due_date,
                            link=args.link,
                            planned_transmitted_date=args.planned_date,
                            planned_duration=args.duration,
                        )
                    )
                )

            case "edit":
                report_result(
                    service.update_assignment(
                        args.assignment_id,
                        AssignmentUpdate(
                            title=args.title,
                            description=args.description,
                            due_date=args.due_date,
                            planned_duration=args.duration,
                            link=args.link,
                            planned_transmitted_date=args.planned_date,
                        ),
                    )
                )

            case "advance":
                handle_advance_command(
                    service, repository, config, args.assignment_id, args.duration
                )

            case "revert":
                handle_revert_command(service, repository, args.assignment_id)

            case "history":
                handle_history_command(service, args.assignment_id)

            case "clear-history":
                report_result(service.clear_assignment_history(args.assignment_id))

            case "schedule":
                handle_schedule_command(service, criteria_from_args(args), args.month)

            case _:
                parser.print_help()
                sys.exit(1)


if __name__ == "__main__":
    main()
