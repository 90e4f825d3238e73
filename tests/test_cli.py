"""Tests for CLI commands and display helpers."""

from __future__ import annotations

import json
from datetime import datetime
from unittest.mock import patch

import pytest

from productivity_tracker.cli import (
    build_parser,
    do_add_task,
    do_complete,
    do_consistency,
    do_import,
    main,
    run_command,
)
from productivity_tracker.clock import FixedClock
from productivity_tracker.db import Database
from productivity_tracker.display import format_number, print_heatmap, print_patterns
from productivity_tracker.errors import InvalidArgument
from productivity_tracker.models import ActivityRecord, GoalRecord
from productivity_tracker.service import AnalyticsService

CLOCK = FixedClock("2024-01-10T12:00:00")


@pytest.fixture
def db(tmp_path):
    """Create a temporary database for testing."""
    db_path = tmp_path / "test.db"
    database = Database(db_path=db_path)
    yield database
    database.close()


def _seed(db: Database, owner: str = "u1") -> None:
    for ts, status, priority in [
        ("2024-01-08T09:00:00", "completed", "high"),
        ("2024-01-09T09:00:00", "completed", "medium"),
        ("2024-01-10T09:00:00", "completed", "low"),
        ("2024-01-10T10:00:00", "pending", "high"),
    ]:
        db.add_task(ActivityRecord(
            id="", owner_id=owner, created_at=datetime.fromisoformat(ts), status=status, priority=priority
        ))


# ── Argument Parsing ──────────────────────────────────────────────────────────


class TestArgumentParsing:
    def test_no_args_defaults_to_none_command(self):
        args = build_parser().parse_args([])
        assert args.command is None
        assert args.json is False

    @pytest.mark.parametrize("command", [
        "dashboard", "streak", "consistency", "weekly", "monthly", "heatmap",
        "insights", "patterns", "daily", "goals", "skills", "reflections",
    ])
    def test_report_commands(self, command):
        assert build_parser().parse_args([command]).command == command

    def test_global_options(self):
        args = build_parser().parse_args(["--owner", "alice", "--json", "--db", "/tmp/x.db", "streak"])
        assert args.owner == "alice"
        assert args.json is True
        assert args.db == "/tmp/x.db"

    def test_days_option(self):
        assert build_parser().parse_args(["heatmap", "--days", "90"]).days == 90

    @pytest.mark.parametrize("value", ["0", "-1", "ten"])
    def test_days_must_be_positive(self, value):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["consistency", "--days", value])

    def test_add_task_options(self):
        args = build_parser().parse_args(["add-task", "Write report", "--priority", "high"])
        assert args.title == "Write report"
        assert args.priority == "high"
        assert args.status == "pending"

    def test_add_task_rejects_unknown_priority(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["add-task", "x", "--priority", "urgent"])

    def test_import_requires_file(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["import"])

    def test_config_default_owner(self):
        args = build_parser().parse_args(["config", "--default-owner", "alice"])
        assert args.default_owner == "alice"


# ── Commands ──────────────────────────────────────────────────────────────────


class TestDoImport:
    def test_imports_file(self, db, tmp_path):
        path = tmp_path / "export.json"
        path.write_text(json.dumps({
            "tasks": [{"createdAt": "2024-01-10T09:00:00Z", "status": "completed"}],
            "goals": [{"title": "Run"}],
        }), encoding="utf-8")
        counts = do_import(db, "u1", str(path))
        assert counts["tasks"] == 1
        assert counts["goals"] == 1
        assert len(db.find_tasks("u1")) == 1

    def test_invalid_json(self, db, tmp_path):
        path = tmp_path / "export.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(InvalidArgument):
            do_import(db, "u1", str(path))

    def test_missing_file(self, db, tmp_path):
        with pytest.raises(FileNotFoundError):
            do_import(db, "u1", str(tmp_path / "missing.json"))


class TestDoAddTaskAndComplete:
    def test_add_then_complete(self, db):
        task = do_add_task(db, "u1", "Write report", priority="high", clock=CLOCK)
        stored = db.find_tasks("u1")[0]
        assert stored.id == task.id
        assert stored.created_at == datetime(2024, 1, 10, 12, 0)
        assert stored.status == "pending"

        assert do_complete(db, "u1", task.id) is True
        assert db.find_tasks("u1")[0].status == "completed"

    def test_complete_unknown_task(self, db, capsys):
        assert do_complete(db, "u1", "missing") is False
        assert "No task missing" in capsys.readouterr().out


class TestDoConsistency:
    def test_returns_score(self, db):
        _seed(db)
        data = do_consistency(AnalyticsService(db, CLOCK), "u1", 3)
        assert data["metrics"]["daysWithCompletedTasks"] == 3
        assert data["consistencyScore"] == 93


class TestRunCommand:
    def _run(self, db, *argv):
        args = build_parser().parse_args(["--owner", "u1", *argv])
        run_command(args, db, clock=CLOCK)

    def test_empty_dashboard_shows_no_data(self, db, capsys):
        self._run(db)
        assert "No records yet" in capsys.readouterr().out

    def test_dashboard(self, db, capsys):
        _seed(db)
        self._run(db, "dashboard")
        out = capsys.readouterr().out
        assert "2024-01-10" in out
        assert "Streak: 3 days" in out

    def test_streak_json(self, db, capsys):
        _seed(db)
        self._run(db, "--json", "streak")
        assert json.loads(capsys.readouterr().out) == {
            "currentStreak": 3,
            "longestStreak": 3,
            "lastActivityDate": "2024-01-10",
            "streakActive": True,
        }

    @pytest.mark.parametrize("argv", [
        ["weekly"], ["monthly"], ["heatmap", "--days", "30"], ["insights", "--days", "30"],
        ["patterns", "--days", "30"], ["consistency", "--days", "7"], ["daily", "--date", "2024-01-10"],
        ["goals"], ["skills"], ["reflections"],
    ])
    def test_reports_render(self, db, argv):
        _seed(db)
        self._run(db, *argv)

    def test_other_owner_sees_no_data(self, db, capsys):
        _seed(db, owner="u1")
        args = build_parser().parse_args(["--owner", "u2", "dashboard"])
        run_command(args, db, clock=CLOCK)
        assert "No records yet" in capsys.readouterr().out

    def test_dashboard_with_only_goals_renders(self, db, capsys):
        db.add_goal(GoalRecord(id="", owner_id="u1", title="Read 12 books"))
        self._run(db, "dashboard")
        out = capsys.readouterr().out
        assert "No records yet" not in out
        assert "Active goals: 1" in out

    def test_add_task_command(self, db):
        self._run(db, "add-task", "Plan week", "--status", "completed")
        task = db.find_tasks("u1")[0]
        assert task.title == "Plan week"
        assert task.status == "completed"

    def test_config_command(self, db):
        with patch("productivity_tracker.cli.set_default_owner") as mock_set:
            self._run(db, "config", "--default-owner", "alice")
        mock_set.assert_called_once_with("alice")


class TestMain:
    def test_invalid_date_exits_with_error(self, tmp_path, capsys):
        argv = ["productivity-tracker", "--db", str(tmp_path / "t.db"), "--owner", "u1", "daily", "--date", "soon"]
        with patch("sys.argv", argv), pytest.raises(SystemExit) as exc:
            main()
        assert exc.value.code == 2
        assert "Error:" in capsys.readouterr().out

    def test_oversized_day_count_exits_with_error(self, tmp_path, capsys):
        argv = ["productivity-tracker", "--db", str(tmp_path / "t.db"), "--owner", "u1", "heatmap", "--days", "1000000"]
        with patch("sys.argv", argv), pytest.raises(SystemExit) as exc:
            main()
        assert exc.value.code == 2
        assert "Error:" in capsys.readouterr().out

    def test_date_with_trailing_text_exits_with_error(self, tmp_path):
        argv = ["productivity-tracker", "--db", str(tmp_path / "t.db"), "--owner", "u1",
                "daily", "--date", "2024-01-10junk"]
        with patch("sys.argv", argv), pytest.raises(SystemExit) as exc:
            main()
        assert exc.value.code == 2

    def test_duplicate_import_exits_with_error(self, tmp_path):
        path = tmp_path / "export.json"
        path.write_text(json.dumps({"tasks": [{"id": "t1", "createdAt": "2024-01-10T09:00:00Z"}]}), encoding="utf-8")
        argv = ["productivity-tracker", "--db", str(tmp_path / "t.db"), "--owner", "u1", "import", str(path)]
        with patch("sys.argv", argv):
            main()
        with patch("sys.argv", argv), pytest.raises(SystemExit) as exc:
            main()
        assert exc.value.code == 2

    def test_missing_import_file(self, tmp_path):
        argv = ["productivity-tracker", "--db", str(tmp_path / "t.db"), "--owner", "u1",
                "import", str(tmp_path / "missing.json")]
        with patch("sys.argv", argv), pytest.raises(SystemExit) as exc:
            main()
        assert exc.value.code == 2


# ── Display ───────────────────────────────────────────────────────────────────


class TestDisplay:
    def test_format_number(self):
        assert format_number(999) == "999"
        assert format_number(1200) == "1,200"
        assert format_number(421543) == "421.5K"
        assert format_number(1234567) == "1.2M"

    def test_heatmap_with_no_cells(self):
        print_heatmap({
            "heatmap": [],
            "summary": {
                "totalDays": 0, "activeDays": 0, "totalCompleted": 0, "activityRate": 0,
                "bestDay": {"date": "2024-01-10", "completed": 0},
            },
        })

    def test_patterns_message(self, capsys):
        print_patterns({"message": "Not enough data yet."})
        assert "Not enough data yet." in capsys.readouterr().out
