"""Rule-based insights for productivity-tracker.

Every rule in ``RULES`` runs on every call, in order, and contributes at most
one insight. Results are neither sorted nor de-duplicated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from productivity_tracker.dates import group_by_day, parse_date
from productivity_tracker.metrics import count_status, percentage
from productivity_tracker.models import (
    ActivityRecord,
    GoalRecord,
    GoalStatus,
    Insight,
    InsightType,
    Priority,
    ReflectionRecord,
    SkillRecord,
    StreakResult,
    TaskStatus,
)
from productivity_tracker.rollups import DAY_NAMES, day_name

HIGH_RATE = 80
LOW_RATE = 50
STREAK_TARGET = 7
NEAR_COMPLETE_PROGRESS = 80
DEDICATED_HOURS = 20
REFLECTION_HABIT = 4


@dataclass
class InsightInputs:
    tasks: list[ActivityRecord]  # tasks of the analysed window
    streak: StreakResult  # computed over the full history
    goals: list[GoalRecord] = field(default_factory=list)
    skills: list[SkillRecord] = field(default_factory=list)
    reflections: list[ReflectionRecord] = field(default_factory=list)
    days: int = 30  # length of the analysed window


def completion_rate_rule(inputs: InsightInputs) -> Insight | None:
    rate = percentage(count_status(inputs.tasks, TaskStatus.COMPLETED), len(inputs.tasks))
    if rate >= HIGH_RATE:
        return Insight(
            type=InsightType.POSITIVE,
            category="productivity",
            title="Excellent Task Completion",
            message=(
                f"You're crushing it! {rate}% completion rate in the last {inputs.days} days. "
                "Keep up the amazing work!"
            ),
            icon="\U0001f3af",
        )
    if rate < LOW_RATE:
        return Insight(
            type=InsightType.IMPROVEMENT,
            category="productivity",
            title="Room for Improvement",
            message=(
                f"Your completion rate is {rate}%. Try breaking tasks into smaller chunks "
                "or setting realistic daily goals."
            ),
            icon="\U0001f4a1",
        )
    return None


def best_weekday(tasks: list[ActivityRecord]) -> tuple[str | None, int]:
    """Weekday with the most completions.

    Days are scanned Sunday to Saturday with a strict ``>``, so the earliest
    day in that order wins a tie. Returns (None, 0) with no completions.
    """
    completed_by_day = {name: 0 for name in DAY_NAMES}
    for day, bucket in group_by_day(tasks).items():
        completed_by_day[day_name(parse_date(day))] += bucket.completed

    best: str | None = None
    most = 0
    for name in DAY_NAMES:
        if completed_by_day[name] > most:
            best = name
            most = completed_by_day[name]
    return best, most


def best_weekday_rule(inputs: InsightInputs) -> Insight | None:
    day, completed = best_weekday(inputs.tasks)
    if day is None:
        return None
    return Insight(
        type=InsightType.INFO,
        category="patterns",
        title="Your Most Productive Day",
        message=(
            f"{day} is your power day! You completed {completed} tasks on {day}s. "
            f"Schedule important work for {day}s."
        ),
        icon="\U0001f4ca",
    )


def streak_rule(inputs: InsightInputs) -> Insight | None:
    current = inputs.streak.current_streak
    if current >= STREAK_TARGET:
        return Insight(
            type=InsightType.POSITIVE,
            category="consistency",
            title="Amazing Streak!",
            message=f"{current} days streak! You're building powerful habits. Don't break the chain!",
            icon="\U0001f525",
        )
    if current == 0:
        return Insight(
            type=InsightType.MOTIVATION,
            category="consistency",
            title="Start Fresh",
            message="No active streak. Complete just one task today to start building momentum!",
            icon="\U0001f680",
        )
    return None


def near_complete_goal_rule(inputs: InsightInputs) -> Insight | None:
    close = [
        g for g in inputs.goals
        if g.status == GoalStatus.ACTIVE.value and g.progress >= NEAR_COMPLETE_PROGRESS
    ]
    if not close:
        return None
    return Insight(
        type=InsightType.MOTIVATION,
        category="goals",
        title="Almost There!",
        message=(
            f"You're 80%+ done with {len(close)} goal(s). "
            "A final push will get you across the finish line!"
        ),
        icon="\U0001f389",
    )


def practice_rule(inputs: InsightInputs) -> Insight | None:
    practiced = [s for s in inputs.skills if s.practice_log_count > 0]
    if not practiced:
        return Insight(
            type=InsightType.SUGGESTION,
            category="learning",
            title="Start Learning",
            message=(
                "Add a skill you want to learn and start tracking your practice. "
                "Small daily steps lead to mastery!"
            ),
            icon="\U0001f393",
        )
    hours = sum(s.total_hours for s in practiced)
    if hours >= DEDICATED_HOURS:
        return Insight(
            type=InsightType.POSITIVE,
            category="learning",
            title="Dedicated Learner",
            message=f"{round(hours)} hours of practice logged! You're investing in your growth consistently.",
            icon="\U0001f4da",
        )
    return None


def reflection_rule(inputs: InsightInputs) -> Insight | None:
    count = len(inputs.reflections)
    if count >= REFLECTION_HABIT:
        return Insight(
            type=InsightType.POSITIVE,
            category="reflection",
            title="Self-Aware Growth",
            message=f"You've completed {count} weekly reflections. This self-awareness accelerates your growth!",
            icon="\U0001f9e0",
        )
    if count == 0:
        return Insight(
            type=InsightType.SUGGESTION,
            category="reflection",
            title="Try Weekly Reflections",
            message="Weekly reflections help you learn from wins and challenges. Start this Sunday!",
            icon="✍️",
        )
    return None


def high_priority_rule(inputs: InsightInputs) -> Insight | None:
    high = [t for t in inputs.tasks if t.priority == Priority.HIGH.value]
    if not high:
        return None
    rate = percentage(count_status(high, TaskStatus.COMPLETED), len(high))
    if rate >= HIGH_RATE:
        return Insight(
            type=InsightType.POSITIVE,
            category="priorities",
            title="Focused Execution",
            message=f"{rate}% of high-priority tasks completed. You're excellent at focusing on what matters most!",
            icon="\U0001f3af",
        )
    if rate < LOW_RATE:
        return Insight(
            type=InsightType.IMPROVEMENT,
            category="priorities",
            title="Focus on High-Priority",
            message=f"Only {rate}% of high-priority tasks done. Try tackling your most important task first each day.",
            icon="⚡",
        )
    return None


RULES: list[Callable[[InsightInputs], Insight | None]] = [
    completion_rate_rule,
    best_weekday_rule,
    streak_rule,
    near_complete_goal_rule,
    practice_rule,
    reflection_rule,
    high_priority_rule,
]


def generate_insights(inputs: InsightInputs) -> list[Insight]:
    """Run every rule in order and collect the insights they emit."""
    results: list[Insight] = []
    for rule in RULES:
        insight = rule(inputs)
        if insight is not None:
            results.append(insight)
    return results
