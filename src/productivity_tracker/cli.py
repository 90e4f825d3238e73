"""CLI commands for productivity-tracker."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from productivity_tracker.clock import Clock, SystemClock
from productivity_tracker.config import get_db_path, get_setting, set_default_owner
from productivity_tracker.db import Database
from productivity_tracker.display import (
    console,
    print_consistency,
    print_dashboard,
    print_error,
    print_heatmap,
    print_import_result,
    print_insights,
    print_monthly,
    print_no_data_message,
    print_patterns,
    print_streak,
    print_summary,
    print_weekly,
)
from productivity_tracker.errors import InvalidArgument
from productivity_tracker.models import ActivityRecord, Priority, TaskStatus
from productivity_tracker.service import AnalyticsService

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    parser = argparse.ArgumentParser(
        prog="productivity-tracker",
        description="Streaks, consistency and insights from your tasks, goals, skills and reflections",
    )
    parser.add_argument("--owner", "-u", default=None, help="Owner whose records to analyse")
    parser.add_argument("--db", default=None, help="Path to the SQLite database")
    parser.add_argument("--json", action="store_true", help="Print raw JSON instead of tables")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("dashboard", help="Today's stats, active goals/skills and streak")
    subparsers.add_parser("streak", help="Current and longest completion streak")
    consistency_p = subparsers.add_parser("consistency", help="Consistency score over the last N days")
    consistency_p.add_argument("--days", type=_positive_int, default=None)
    subparsers.add_parser("weekly", help="Current week rollup")
    subparsers.add_parser("monthly", help="Current month rollup")
    heatmap_p = subparsers.add_parser("heatmap", help="Activity calendar")
    heatmap_p.add_argument("--days", type=_positive_int, default=None)
    insights_p = subparsers.add_parser("insights", help="Rule-based insights")
    insights_p.add_argument("--days", type=_positive_int, default=None)
    patterns_p = subparsers.add_parser("patterns", help="Day-of-week and priority patterns")
    patterns_p.add_argument("--days", type=_positive_int, default=None)
    daily_p = subparsers.add_parser("daily", help="Priority-weighted score for a day")
    daily_p.add_argument("--date", default=None, help="YYYY-MM-DD (default: today)")
    subparsers.add_parser("goals", help="Goal statistics")
    subparsers.add_parser("skills", help="Skill statistics")
    subparsers.add_parser("reflections", help="Reflection statistics")
    import_p = subparsers.add_parser("import", help="Load records from a JSON export")
    import_p.add_argument("file", help="JSON file with tasks/goals/skills/reflections lists")
    add_p = subparsers.add_parser("add-task", help="Add a task created now")
    add_p.add_argument("title")
    add_p.add_argument("--priority", choices=[p.value for p in Priority], default=Priority.MEDIUM.value)
    add_p.add_argument("--status", choices=[s.value for s in TaskStatus], default=TaskStatus.PENDING.value)
    complete_p = subparsers.add_parser("complete", help="Mark a task completed")
    complete_p.add_argument("task_id")
    config_p = subparsers.add_parser("config", help="Persist settings")
    config_p.add_argument("--default-owner", required=True, help="Owner used when --owner is omitted")
    return parser


def _emit(data, as_json: bool, printer) -> None:
    if as_json:
        console.print_json(json.dumps(data))
    else:
        printer(data)


def do_dashboard(service: AnalyticsService, owner: str, as_json: bool = False) -> dict:
    """Show today's stats, active goal/skill counts and the streak.

    With no task history and nothing active, prints the no-data hint instead.
    """
    data = service.dashboard(owner)
    empty = data["streak"]["lastActivityDate"] is None and not any(data["active"].values())
    if empty and not as_json:
        print_no_data_message()
    else:
        _emit(data, as_json, print_dashboard)
    return data


def do_streak(service: AnalyticsService, owner: str, as_json: bool = False) -> dict:
    data = service.streak(owner)
    _emit(data, as_json, print_streak)
    return data


def do_consistency(service: AnalyticsService, owner: str, days: int, as_json: bool = False) -> dict:
    data = service.consistency(owner, days)
    _emit(data, as_json, print_consistency)
    return data


def do_weekly(service: AnalyticsService, owner: str, as_json: bool = False) -> dict:
    data = service.weekly(owner)
    _emit(data, as_json, print_weekly)
    return data


def do_monthly(service: AnalyticsService, owner: str, as_json: bool = False) -> dict:
    data = service.monthly(owner)
    _emit(data, as_json, print_monthly)
    return data


def do_heatmap(service: AnalyticsService, owner: str, days: int, as_json: bool = False) -> dict:
    data = service.heatmap(owner, days)
    _emit(data, as_json, print_heatmap)
    return data


def do_insights(service: AnalyticsService, owner: str, days: int, as_json: bool = False) -> list[dict]:
    data = service.insights(owner, days)
    _emit(data, as_json, print_insights)
    return data


def do_patterns(service: AnalyticsService, owner: str, days: int, as_json: bool = False) -> dict:
    data = service.patterns(owner, days)
    _emit(data, as_json, print_patterns)
    return data


def do_daily(service: AnalyticsService, owner: str, day: str | None = None, as_json: bool = False) -> dict:
    data = service.daily_score(owner, day)
    _emit(data, as_json, lambda d: print_summary(f"Daily score {d['date']}", d))
    return data


def do_import(db: Database, owner: str, file: str) -> dict[str, int]:
    """Load a JSON export into the database for one owner."""
    path = Path(file)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise InvalidArgument(f"{path} is not valid JSON: {exc}") from exc
    counts = db.import_records(owner, payload)
    print_import_result(counts)
    return counts


def do_add_task(
    db: Database,
    owner: str,
    title: str,
    priority: str = Priority.MEDIUM.value,
    status: str = TaskStatus.PENDING.value,
    clock: Clock | None = None,
) -> ActivityRecord:
    task = db.add_task(
        ActivityRecord(
            id="",
            owner_id=owner,
            created_at=(clock or SystemClock()).now(),
            status=status,
            priority=priority,
            title=title,
        )
    )
    console.print(f"[green]Added[/] task {task.id}: {title}")
    return task


def do_complete(db: Database, owner: str, task_id: str) -> bool:
    updated = db.update_task_status(owner, task_id, TaskStatus.COMPLETED.value)
    if updated:
        console.print(f"[green]Completed[/] task {task_id}")
    else:
        console.print(f"[red]No task {task_id} for {owner}[/]")
    return updated


def run_command(args: argparse.Namespace, db: Database, clock: Clock | None = None) -> None:
    """Dispatch a parsed command against an open database."""
    command = args.command or "dashboard"
    owner = args.owner or get_setting("default_owner")
    as_json = args.json
    service = AnalyticsService(db, clock)
    logger.debug("Running %s for owner %s", command, owner)

    if command == "import":
        do_import(db, owner, args.file)
    elif command == "add-task":
        do_add_task(db, owner, args.title, priority=args.priority, status=args.status, clock=clock)
    elif command == "complete":
        do_complete(db, owner, args.task_id)
    elif command == "config":
        set_default_owner(args.default_owner)
        console.print(f"Default owner set to [bold]{args.default_owner}[/]")
    elif command == "dashboard":
        do_dashboard(service, owner, as_json)
    elif command == "streak":
        do_streak(service, owner, as_json)
    elif command == "consistency":
        do_consistency(service, owner, args.days or get_setting("consistency_days"), as_json)
    elif command == "weekly":
        do_weekly(service, owner, as_json)
    elif command == "monthly":
        do_monthly(service, owner, as_json)
    elif command == "heatmap":
        do_heatmap(service, owner, args.days or get_setting("heatmap_days"), as_json)
    elif command == "insights":
        do_insights(service, owner, args.days or get_setting("insight_days"), as_json)
    elif command == "patterns":
        do_patterns(service, owner, args.days or get_setting("insight_days"), as_json)
    elif command == "daily":
        do_daily(service, owner, args.date, as_json)
    elif command == "goals":
        _emit(service.goal_stats(owner), as_json, lambda d: print_summary("Goals", d))
    elif command == "skills":
        _emit(service.skill_stats(owner), as_json, lambda d: print_summary("Skills", d))
    elif command == "reflections":
        _emit(service.reflection_stats(owner), as_json, lambda d: print_summary("Reflections", d))


def main() -> None:
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args()
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    db_path = Path(args.db).expanduser() if args.db else get_db_path()
    db = Database(db_path=db_path)

    try:
        run_command(args, db)
    except (InvalidArgument, FileNotFoundError) as exc:
        print_error(str(exc))
        sys.exit(2)
    finally:
        db.close()


if __name__ == "__main__":
    main()
