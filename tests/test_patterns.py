"""Tests for day-of-week and priority patterns."""

from datetime import datetime

from productivity_tracker.clock import FixedClock
from productivity_tracker.dates import last_n_days_window
from productivity_tracker.models import ActivityRecord
from productivity_tracker.patterns import NOT_ENOUGH_DATA, productivity_patterns

WINDOW = last_n_days_window(30, FixedClock("2024-01-10T12:00:00"))


def _task(ts: str, status: str = "completed", priority: str = "medium") -> ActivityRecord:
    return ActivityRecord(
        id=ts, owner_id="u1", created_at=datetime.fromisoformat(ts), status=status, priority=priority
    )


def _sample() -> list[ActivityRecord]:
    return [
        # Tuesday
        _task("2024-01-02T09:00:00", "completed", "high"),
        _task("2024-01-02T10:00:00", "completed", "high"),
        # Thursday
        _task("2024-01-04T09:00:00", "completed", "low"),
        _task("2024-01-04T10:00:00", "pending", "low"),
        # Saturday
        _task("2024-01-06T09:00:00", "pending", "urgent"),
    ]


class TestProductivityPatterns:
    def test_no_tasks(self):
        assert productivity_patterns(WINDOW, []) == {"message": NOT_ENOUGH_DATA}

    def test_tasks_outside_window_only(self):
        result = productivity_patterns(WINDOW, [_task("2023-06-01T09:00:00")])
        assert result == {"message": NOT_ENOUGH_DATA}

    def test_day_of_week_analysis(self):
        day_of_week = productivity_patterns(WINDOW, _sample())["dayOfWeek"]
        analysis = day_of_week["analysis"]
        assert list(analysis)[0] == "Sunday"
        assert analysis["Tuesday"] == {"total": 2, "completed": 2, "completionRate": 100}
        assert analysis["Thursday"]["completionRate"] == 50
        assert analysis["Monday"] == {"total": 0, "completed": 0, "completionRate": 0}
        assert day_of_week["bestDay"] == {"name": "Tuesday", "rate": 100}
        assert day_of_week["worstDay"] == {"name": "Saturday", "rate": 0}

    def test_priority_skips_unknown(self):
        priority = productivity_patterns(WINDOW, _sample())["priority"]
        assert priority == {
            "high": {"total": 2, "completed": 2, "completionRate": 100},
            "medium": {"total": 0, "completed": 0, "completionRate": 0},
            "low": {"total": 2, "completed": 1, "completionRate": 50},
        }

    def test_weekly_averages(self):
        averages = productivity_patterns(WINDOW, _sample())["weeklyAverages"]
        assert averages == {"tasksPerWeek": 1, "completedPerWeek": 1}

    def test_recommendations(self):
        recommendations = productivity_patterns(WINDOW, _sample())["recommendations"]
        assert [r["type"] for r in recommendations] == ["optimize", "improve"]
        assert "Tuesdays" in recommendations[0]["message"]
        assert "Saturdays" in recommendations[1]["message"]

    def test_all_perfect_has_no_worst_day(self):
        result = productivity_patterns(WINDOW, [_task("2024-01-02T09:00:00")])
        assert result["dayOfWeek"]["worstDay"] is None
        assert [r["type"] for r in result["recommendations"]] == ["optimize"]

    def test_nothing_completed_has_no_best_day(self):
        result = productivity_patterns(WINDOW, [_task("2024-01-02T09:00:00", "pending")])
        assert result["dayOfWeek"]["bestDay"] is None
        assert result["dayOfWeek"]["worstDay"] == {"name": "Tuesday", "rate": 0}
