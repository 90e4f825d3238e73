"""Per-resource summary statistics and the dashboard overview."""

from __future__ import annotations

from datetime import date
from typing import Iterable

from productivity_tracker.dates import format_date, group_by_day
from productivity_tracker.metrics import count_status, percentage, round_half_up
from productivity_tracker.models import (
    SKILL_CATEGORIES,
    SKILL_LEVELS,
    ActivityRecord,
    GoalRecord,
    GoalStatus,
    Mood,
    Period,
    Priority,
    ReflectionRecord,
    SkillRecord,
    TaskStatus,
)
from productivity_tracker.streaks import calculate_streak

PRIORITY_POINTS: dict[str, int] = {"low": 1, "medium": 2, "high": 3}
RECENT_REFLECTIONS = 4


def _tasks_on(day: date, tasks: Iterable[ActivityRecord]) -> list[ActivityRecord]:
    return [t for t in tasks if t.created_at.date() == day]


def _average(values: list[float], digits: int = 1) -> float:
    if not values:
        return 0
    return round(sum(values) / len(values), digits)


def daily_score(day: date, tasks: Iterable[ActivityRecord]) -> dict:
    """Status counts and a priority-weighted score for one day.

    Completed tasks score low=1, medium=2, high=3 (unknown priority 1);
    maxScore is what the day's tasks would score if all were completed.
    """
    day_tasks = _tasks_on(day, tasks)
    completed = [t for t in day_tasks if t.status == TaskStatus.COMPLETED.value]
    return {
        "date": day.isoformat(),
        "totalTasks": len(day_tasks),
        "completedTasks": len(completed),
        "pendingTasks": count_status(day_tasks, TaskStatus.PENDING),
        "inProgressTasks": count_status(day_tasks, TaskStatus.IN_PROGRESS),
        "completionRate": percentage(len(completed), len(day_tasks)),
        "score": sum(PRIORITY_POINTS.get(t.priority, 1) for t in completed),
        "maxScore": sum(PRIORITY_POINTS.get(t.priority, 1) for t in day_tasks),
        "breakdown": {
            p.value: sum(1 for t in day_tasks if t.priority == p.value)
            for p in (Priority.HIGH, Priority.MEDIUM, Priority.LOW)
        },
    }


def goal_stats(goals: Iterable[GoalRecord]) -> dict:
    goals = list(goals)
    completed = sum(1 for g in goals if g.status == GoalStatus.COMPLETED.value)
    return {
        "totalGoals": len(goals),
        "activeGoals": sum(1 for g in goals if g.status == GoalStatus.ACTIVE.value),
        "completedGoals": completed,
        "failedGoals": sum(1 for g in goals if g.status == GoalStatus.FAILED.value),
        "averageProgress": round_half_up(sum(g.progress for g in goals) / len(goals)) if goals else 0,
        "completionRate": percentage(completed, len(goals)),
        "breakdown": {p.value: sum(1 for g in goals if g.period == p.value) for p in Period},
    }


def skill_stats(skills: Iterable[SkillRecord]) -> dict:
    skills = list(skills)
    return {
        "totalSkills": len(skills),
        "activeSkills": sum(1 for s in skills if s.is_active),
        "totalHours": round(sum(s.total_hours for s in skills), 1),
        "totalSessions": sum(s.practice_log_count for s in skills),
        "averageProgress": round_half_up(sum(s.progress for s in skills) / len(skills)) if skills else 0,
        "levelBreakdown": {lvl: sum(1 for s in skills if s.level == lvl) for lvl in SKILL_LEVELS},
        "categoryBreakdown": {c: sum(1 for s in skills if s.category == c) for c in SKILL_CATEGORIES},
    }


def reflection_stats(reflections: Iterable[ReflectionRecord]) -> dict:
    reflections = list(reflections)
    recent = sorted(reflections, key=lambda r: r.week_start_date, reverse=True)[:RECENT_REFLECTIONS]
    return {
        "totalReflections": len(reflections),
        "completedReflections": sum(1 for r in reflections if r.is_complete),
        "averageRating": _average([r.week_rating for r in reflections]),
        "averageProductivity": _average([r.productivity_rating or 0 for r in reflections]),
        "averageHealth": _average([r.health_rating or 0 for r in reflections]),
        "moodBreakdown": {m.value: sum(1 for r in reflections if r.mood == m.value) for m in Mood},
        "insights": {
            "totalWins": sum(len(r.wins) for r in reflections),
            "totalChallenges": sum(len(r.challenges) for r in reflections),
            "totalLessons": sum(len(r.lessons) for r in reflections),
        },
        "recentTrend": [
            {
                "weekStartDate": format_date(r.week_start_date),
                "weekRating": r.week_rating,
                "mood": r.mood,
            }
            for r in recent
        ],
    }


def dashboard_overview(
    today: date,
    tasks: Iterable[ActivityRecord],
    goals: Iterable[GoalRecord] = (),
    skills: Iterable[SkillRecord] = (),
) -> dict:
    """Today's task stats, active goal/skill counts and the streak.

    ``tasks`` is the owner's full history; it feeds both today's stats and
    the streak so storage is queried once.
    """
    tasks = list(tasks)
    today_tasks = _tasks_on(today, tasks)
    completed = count_status(today_tasks, TaskStatus.COMPLETED)
    streak = calculate_streak(group_by_day(tasks), today)
    return {
        "today": {
            "date": today.isoformat(),
            "tasks": {
                "total": len(today_tasks),
                "completed": completed,
                "pending": count_status(today_tasks, TaskStatus.PENDING),
                "completionRate": percentage(completed, len(today_tasks)),
            },
        },
        "active": {
            "goals": sum(1 for g in goals if g.status == GoalStatus.ACTIVE.value),
            "skills": sum(1 for s in skills if s.is_active),
        },
        "streak": streak.to_dict(),
    }
