"""Tests for the streak calculator."""

from datetime import date

from productivity_tracker.models import DayBucket
from productivity_tracker.streaks import calculate_streak, get_streak_from_date, longest_streak


def _completed(*dates: str) -> dict[str, DayBucket]:
    return {d: DayBucket(total=1, completed=1) for d in dates}


class TestGetStreakFromDate:
    def test_consecutive_five_days(self):
        buckets = _completed("2026-01-01", "2026-01-02", "2026-01-03", "2026-01-04", "2026-01-05")
        assert get_streak_from_date(buckets, "2026-01-05") == 5

    def test_reference_without_completion(self):
        assert get_streak_from_date(_completed("2026-01-01"), "2026-01-05") == 0

    def test_gap_breaks_streak(self):
        buckets = _completed("2026-01-01", "2026-01-02", "2026-01-04", "2026-01-05")
        assert get_streak_from_date(buckets, "2026-01-05") == 2

    def test_day_without_completions_breaks_streak(self):
        buckets = _completed("2026-01-01", "2026-01-03")
        buckets["2026-01-02"] = DayBucket(total=2, pending=2)
        assert get_streak_from_date(buckets, "2026-01-03") == 1


class TestLongestStreak:
    def test_gap_splits_runs(self):
        buckets = _completed("2024-01-01", "2024-01-02", "2024-01-03", "2024-01-05", "2024-01-06")
        assert longest_streak(buckets) == 3

    def test_isolated_days(self):
        assert longest_streak(_completed("2024-01-01", "2024-01-05")) == 1

    def test_ignores_days_without_completions(self):
        buckets = _completed("2024-01-01", "2024-01-03")
        buckets["2024-01-02"] = DayBucket(total=1, pending=1)
        assert longest_streak(buckets) == 1

    def test_across_month_boundary(self):
        assert longest_streak(_completed("2024-02-28", "2024-02-29", "2024-03-01")) == 3

    def test_unsorted_input(self):
        buckets = _completed("2024-01-03", "2024-01-01", "2024-01-02")
        assert longest_streak(buckets) == 3


class TestCalculateStreak:
    def test_three_days_ending_today(self):
        result = calculate_streak(_completed("2024-01-01", "2024-01-02", "2024-01-03"), today="2024-01-03")
        assert result.current_streak == 3
        assert result.streak_active is True
        assert result.longest_streak == 3

    def test_counts_from_yesterday_when_today_empty(self):
        result = calculate_streak(_completed("2024-01-01", "2024-01-02", "2024-01-03"), today="2024-01-04")
        assert result.current_streak == 3
        assert result.streak_active is True

    def test_today_with_only_pending_counts_from_yesterday(self):
        buckets = _completed("2024-01-02", "2024-01-03")
        buckets["2024-01-04"] = DayBucket(total=1, pending=1)
        result = calculate_streak(buckets, today=date(2024, 1, 4))
        assert result.current_streak == 2
        assert result.last_activity_date == "2024-01-04"

    def test_broken_streak(self):
        result = calculate_streak(_completed("2024-01-01", "2024-01-02"), today="2024-01-05")
        assert result.current_streak == 0
        assert result.streak_active is False
        assert result.longest_streak == 2

    def test_longest_with_gap(self):
        result = calculate_streak(_completed("2024-01-01", "2024-01-05"), today="2024-01-05")
        assert result.longest_streak == 1
        assert result.current_streak == 1

    def test_empty(self):
        result = calculate_streak({}, today="2024-01-05")
        assert result.to_dict() == {
            "currentStreak": 0,
            "longestStreak": 0,
            "lastActivityDate": None,
            "streakActive": False,
        }

    def test_last_activity_ignores_completion_status(self):
        buckets = _completed("2024-01-01")
        buckets["2024-01-09"] = DayBucket(total=1, pending=1)
        result = calculate_streak(buckets, today="2024-01-20")
        assert result.last_activity_date == "2024-01-09"

    def test_longest_over_full_history(self):
        buckets = _completed(
            "2026-01-01", "2026-01-02", "2026-01-03", "2026-01-04",
            "2026-01-10", "2026-01-11",
        )
        result = calculate_streak(buckets, today="2026-01-11")
        assert result.current_streak == 2
        assert result.longest_streak == 4
