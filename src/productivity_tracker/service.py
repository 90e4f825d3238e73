"""Analytics service: fetches one owner's records and runs the pure engine.

The service holds its storage and clock explicitly; nothing is kept between
calls. Storage errors propagate to the caller.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Protocol, TypeVar

from productivity_tracker.clock import Clock, SystemClock
from productivity_tracker.dates import (
    END_OF_DAY,
    START_OF_DAY,
    current_month_window,
    current_week_window,
    group_by_day,
    last_n_days_window,
    parse_date,
)
from productivity_tracker.heatmap import build_heatmap
from productivity_tracker.insights import InsightInputs, generate_insights
from productivity_tracker.metrics import consistency_score
from productivity_tracker.models import (
    ActivityRecord,
    GoalRecord,
    ReflectionRecord,
    SkillRecord,
)
from productivity_tracker.patterns import productivity_patterns
from productivity_tracker.rollups import monthly_rollup, weekly_rollup
from productivity_tracker.streaks import calculate_streak
from productivity_tracker.summaries import (
    daily_score,
    dashboard_overview,
    goal_stats,
    reflection_stats,
    skill_stats,
)

logger = logging.getLogger(__name__)

R = TypeVar("R", ActivityRecord, GoalRecord, SkillRecord, ReflectionRecord)


class Storage(Protocol):
    def find_tasks(
        self, owner_id: str, start: datetime | None = None, end: datetime | None = None
    ) -> list[ActivityRecord]: ...

    def find_goals(self, owner_id: str, status: str | None = None) -> list[GoalRecord]: ...

    def find_skills(self, owner_id: str, active: bool | None = None) -> list[SkillRecord]: ...

    def find_reflections(
        self, owner_id: str, start: datetime | None = None, end: datetime | None = None
    ) -> list[ReflectionRecord]: ...


def _owned(owner_id: str, records: list[R]) -> list[R]:
    """Drop records that belong to another owner."""
    owned = [r for r in records if r.owner_id == owner_id]
    if len(owned) != len(records):
        logger.warning(
            "Storage returned %d record(s) not owned by %s; ignoring them",
            len(records) - len(owned), owner_id,
        )
    return owned


class AnalyticsService:
    def __init__(self, storage: Storage, clock: Clock | None = None) -> None:
        self.storage = storage
        self.clock = clock or SystemClock()

    def today(self) -> date:
        return self.clock.now().date()

    def _tasks(self, owner_id: str, start: datetime | None = None, end: datetime | None = None):
        return _owned(owner_id, self.storage.find_tasks(owner_id, start, end))

    def _goals(self, owner_id: str, status: str | None = None):
        return _owned(owner_id, self.storage.find_goals(owner_id, status))

    def _skills(self, owner_id: str, active: bool | None = None):
        return _owned(owner_id, self.storage.find_skills(owner_id, active))

    def _reflections(self, owner_id: str, start: datetime | None = None, end: datetime | None = None):
        return _owned(owner_id, self.storage.find_reflections(owner_id, start, end))

    def streak(self, owner_id: str) -> dict:
        """Current and longest streak over the owner's entire history."""
        buckets = group_by_day(self._tasks(owner_id))
        return calculate_streak(buckets, self.today()).to_dict()

    def consistency(self, owner_id: str, days: int = 30) -> dict:
        window = last_n_days_window(days, self.clock)
        return consistency_score(window, self._tasks(owner_id, *window))

    def weekly(self, owner_id: str) -> dict:
        window = current_week_window(self.clock)
        return weekly_rollup(
            window,
            self._tasks(owner_id, *window),
            self._goals(owner_id),
            self._skills(owner_id),
            self._reflections(owner_id, *window),
        )

    def monthly(self, owner_id: str) -> dict:
        window = current_month_window(self.clock)
        return monthly_rollup(
            window,
            self._tasks(owner_id, *window),
            self._goals(owner_id),
            self._skills(owner_id),
            self._reflections(owner_id, *window),
        )

    def dashboard(self, owner_id: str) -> dict:
        return dashboard_overview(
            self.today(),
            self._tasks(owner_id),
            self._goals(owner_id, status="active"),
            self._skills(owner_id, active=True),
        )

    def heatmap(self, owner_id: str, days: int = 365) -> dict:
        window = last_n_days_window(days, self.clock)
        return build_heatmap(window, group_by_day(self._tasks(owner_id, *window)))

    def insights(self, owner_id: str, days: int = 30) -> list[dict]:
        window = last_n_days_window(days, self.clock)
        all_tasks = self._tasks(owner_id)
        inputs = InsightInputs(
            tasks=[t for t in all_tasks if window.contains(t.created_at)],
            streak=calculate_streak(group_by_day(all_tasks), self.today()),
            goals=self._goals(owner_id),
            skills=self._skills(owner_id),
            reflections=self._reflections(owner_id),
            days=days,
        )
        insights = generate_insights(inputs)
        logger.debug("Generated %d insight(s) for %s", len(insights), owner_id)
        return [i.to_dict() for i in insights]

    def patterns(self, owner_id: str, days: int = 30) -> dict:
        window = last_n_days_window(days, self.clock)
        return productivity_patterns(window, self._tasks(owner_id, *window))

    def daily_score(self, owner_id: str, day: date | str | None = None) -> dict:
        target = parse_date(day) if day is not None else self.today()
        start = datetime.combine(target, START_OF_DAY)
        end = datetime.combine(target, END_OF_DAY)
        return daily_score(target, self._tasks(owner_id, start, end))

    def goal_stats(self, owner_id: str) -> dict:
        return goal_stats(self._goals(owner_id))

    def skill_stats(self, owner_id: str) -> dict:
        return skill_stats(self._skills(owner_id))

    def reflection_stats(self, owner_id: str) -> dict:
        return reflection_stats(self._reflections(owner_id))
