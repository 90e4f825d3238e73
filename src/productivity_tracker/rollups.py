"""Weekly and monthly rollups.

Pure functions that aggregate one owner's records over a window into the
summary dicts served to the dashboard. No side effects, no DB access.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable

from productivity_tracker.dates import Window, date_range, format_date, group_by_day
from productivity_tracker.metrics import count_status, in_window, percentage
from productivity_tracker.models import (
    ActivityRecord,
    GoalRecord,
    GoalStatus,
    Priority,
    ReflectionRecord,
    SkillRecord,
    TaskStatus,
)

# Display order for day-of-week breakdowns; Sunday first regardless of the
# Monday-first week window.
DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")
MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def day_name(value: date | datetime) -> str:
    """Sunday-first day name of a date."""
    return DAY_NAMES[value.isoweekday() % 7]


def goals_in_window(window: Window, goals: Iterable[GoalRecord]) -> list[GoalRecord]:
    """Goals whose [start_date, end_date] overlaps the window."""
    return [g for g in goals if window.overlaps(g.start_date, g.end_date)]


def reflections_in_window(window: Window, reflections: Iterable[ReflectionRecord]) -> list[ReflectionRecord]:
    return [r for r in reflections if window.contains(r.week_start_date)]


def _by_priority(tasks: list[ActivityRecord]) -> dict[str, int]:
    return {p.value: sum(1 for t in tasks if t.priority == p.value) for p in (Priority.HIGH, Priority.MEDIUM, Priority.LOW)}


def _by_day(tasks: list[ActivityRecord]) -> dict[str, int]:
    # Keys Monday..Sunday; names come from the Sunday-first table.
    counts = {name: 0 for name in DAY_NAMES[1:] + DAY_NAMES[:1]}
    for task in tasks:
        counts[day_name(task.created_at)] += 1
    return counts


def _skill_hours(skills: list[SkillRecord]) -> float:
    return round(sum(s.total_hours for s in skills), 1)


def weekly_rollup(
    window: Window,
    tasks: Iterable[ActivityRecord],
    goals: Iterable[GoalRecord] = (),
    skills: Iterable[SkillRecord] = (),
    reflections: Iterable[ReflectionRecord] = (),
) -> dict:
    """Aggregate a week of records into the weekly summary dict."""
    week_tasks = in_window(window, tasks)
    week_goals = goals_in_window(window, goals)
    skills = list(skills)
    week_reflections = reflections_in_window(window, reflections)

    completed = count_status(week_tasks, TaskStatus.COMPLETED)

    return {
        "weekPeriod": {
            "start": format_date(window.start),
            "end": format_date(window.end),
        },
        "tasks": {
            "total": len(week_tasks),
            "completed": completed,
            "pending": count_status(week_tasks, TaskStatus.PENDING),
            "inProgress": count_status(week_tasks, TaskStatus.IN_PROGRESS),
            "completionRate": percentage(completed, len(week_tasks)),
            "byDay": _by_day(week_tasks),
            "byPriority": _by_priority(week_tasks),
        },
        "goals": {
            "active": sum(1 for g in week_goals if g.status == GoalStatus.ACTIVE.value),
            "completed": sum(1 for g in week_goals if g.status == GoalStatus.COMPLETED.value),
            "total": len(week_goals),
        },
        "skills": {
            "active": sum(1 for s in skills if s.is_active),
            "totalHours": _skill_hours(skills),
        },
        "reflections": {
            "total": len(week_reflections),
            "completed": sum(1 for r in week_reflections if r.is_complete),
        },
    }


def weekly_progress(window: Window, tasks: Iterable[ActivityRecord]) -> list[dict]:
    """Split the window into 7-day chunks from its first day; the last may be shorter."""
    by_day = group_by_day(in_window(window, tasks))
    first = window.start.date()
    last = window.end.date()

    chunks: list[dict] = []
    chunk_start = first
    while chunk_start <= last:
        chunk_end = min(chunk_start + timedelta(days=6), last)
        total = 0
        completed = 0
        for day in date_range(chunk_start, chunk_end):
            bucket = by_day.get(day)
            if bucket:
                total += bucket.total
                completed += bucket.completed
        chunks.append({
            "weekStart": chunk_start.isoformat(),
            "weekEnd": chunk_end.isoformat(),
            "totalTasks": total,
            "completedTasks": completed,
            "completionRate": percentage(completed, total),
        })
        chunk_start += timedelta(days=7)
    return chunks


def monthly_rollup(
    window: Window,
    tasks: Iterable[ActivityRecord],
    goals: Iterable[GoalRecord] = (),
    skills: Iterable[SkillRecord] = (),
    reflections: Iterable[ReflectionRecord] = (),
) -> dict:
    """Aggregate a month of records into the monthly summary dict."""
    tasks = list(tasks)
    month_tasks = in_window(window, tasks)
    month_goals = goals_in_window(window, goals)
    skills = list(skills)
    month_reflections = reflections_in_window(window, reflections)

    completed = count_status(month_tasks, TaskStatus.COMPLETED)
    completed_goals = sum(1 for g in month_goals if g.status == GoalStatus.COMPLETED.value)

    return {
        "monthPeriod": {
            "start": format_date(window.start),
            "end": format_date(window.end),
            "month": MONTH_NAMES[window.start.month - 1],
            "year": window.start.year,
        },
        "tasks": {
            "total": len(month_tasks),
            "completed": completed,
            "completionRate": percentage(completed, len(month_tasks)),
            "byPriority": _by_priority(month_tasks),
        },
        "goals": {
            "total": len(month_goals),
            "completed": completed_goals,
            "completionRate": percentage(completed_goals, len(month_goals)),
        },
        "skills": {
            "totalHours": _skill_hours(skills),
            "totalSessions": sum(s.practice_log_count for s in skills),
            "activeSkills": sum(1 for s in skills if s.is_active),
        },
        "reflections": {
            "total": len(month_reflections),
            "completed": sum(1 for r in month_reflections if r.is_complete),
        },
        "weeklyProgress": weekly_progress(window, tasks),
    }
