"""Tests for percentages and the consistency score."""

from datetime import datetime

from productivity_tracker.clock import FixedClock
from productivity_tracker.dates import group_by_day, last_n_days_window
from productivity_tracker.metrics import consistency_score, percentage, round_half_up
from productivity_tracker.models import ActivityRecord

CLOCK = FixedClock("2024-01-10T12:00:00")


def _task(ts: str, status: str = "completed") -> ActivityRecord:
    return ActivityRecord(id=ts, owner_id="u1", created_at=datetime.fromisoformat(ts), status=status)


class TestPercentage:
    def test_zero_total(self):
        assert percentage(0, 0) == 0
        assert percentage(3, 0) == 0

    def test_thirds(self):
        assert percentage(1, 3) == 33
        assert percentage(2, 3) == 67

    def test_rounds_half_up(self):
        assert percentage(1, 8) == 13
        assert percentage(5, 8) == 63

    def test_whole(self):
        assert percentage(4, 4) == 100

    def test_float_parts(self):
        assert percentage(1.5, 3) == 50


class TestRoundHalfUp:
    def test_half(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(0.5) == 1

    def test_below_half(self):
        assert round_half_up(2.49) == 2


class TestConsistencyScore:
    def test_empty_window(self):
        result = consistency_score(last_n_days_window(10, CLOCK), [])
        assert result["consistencyScore"] == 0
        assert result["period"] == "10 days"
        assert result["metrics"]["totalDays"] == 10

    def test_every_day_completed(self):
        tasks = [_task(f"2024-01-{d:02d}T09:00:00") for d in range(1, 11)]
        result = consistency_score(last_n_days_window(10, CLOCK), tasks)
        assert result["consistencyScore"] == 100
        assert result["metrics"]["daysWithActivity"] == 10

    def test_weighted_mix(self):
        # 10-day window: activity on 5 days, completions on 3 days, 3 of 6 tasks done
        tasks = [
            _task("2024-01-01T09:00:00", "completed"),
            _task("2024-01-01T10:00:00", "pending"),
            _task("2024-01-02T09:00:00", "pending"),
            _task("2024-01-03T09:00:00", "in-progress"),
            _task("2024-01-04T09:00:00", "completed"),
            _task("2024-01-05T09:00:00", "completed"),
        ]
        result = consistency_score(last_n_days_window(10, CLOCK), tasks)
        metrics = result["metrics"]
        assert metrics["daysWithActivity"] == 5
        assert metrics["daysWithCompletedTasks"] == 3
        assert metrics["activityRate"] == 50
        assert metrics["completionRate"] == 30
        assert metrics["taskCompletionRate"] == 50
        # 0.3*50 + 0.4*30 + 0.3*50 = 42
        assert result["consistencyScore"] == 42

    def test_ignores_tasks_outside_window(self):
        tasks = [_task("2023-12-01T09:00:00"), _task("2024-01-10T09:00:00")]
        result = consistency_score(last_n_days_window(1, CLOCK), tasks)
        assert result["metrics"]["taskCompletionRate"] == 100
        assert result["consistencyScore"] == 100

    def test_idempotent(self):
        tasks = (
            _task("2024-01-03T09:00:00", "completed"),
            _task("2024-01-04T09:00:00", "pending"),
            _task("2024-01-07T09:00:00", "completed"),
        )
        window = last_n_days_window(30, CLOCK)
        assert consistency_score(window, tasks) == consistency_score(window, tasks)


class TestBucketInvariant:
    def test_completed_never_exceeds_total(self):
        tasks = [
            _task("2024-01-01T09:00:00", "completed"),
            _task("2024-01-01T10:00:00", "cancelled"),
            _task("2024-01-02T09:00:00", "pending"),
            _task("2024-01-02T10:00:00", "completed"),
        ]
        buckets = group_by_day(tasks).values()
        assert sum(b.completed for b in buckets) <= sum(b.total for b in buckets)
        for b in buckets:
            assert b.completed + b.pending + b.in_progress <= b.total
