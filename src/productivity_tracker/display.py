"""Rich terminal display for productivity-tracker."""

from __future__ import annotations

from datetime import date

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

console = Console()

# Heatmap intensity 0..4 -> Rich colour
_INTENSITY_COLORS: dict[int, str] = {
    0: "grey23",
    1: "dark_green",
    2: "green4",
    3: "green3",
    4: "bright_green",
}

_INSIGHT_STYLES: dict[str, str] = {
    "positive": "green",
    "improvement": "yellow",
    "info": "cyan",
    "motivation": "magenta",
    "suggestion": "blue",
}


def format_number(n: int) -> str:
    """Format large numbers: 421543 -> '421.5K', 1200 -> '1,200', 1234567 -> '1.2M'."""
    if n >= 1_000_000:
        return f"{n / 1_000_000:.1f}M"
    if n >= 10_000:
        return f"{n / 1_000:.1f}K"
    return f"{n:,}"


def _progress_bar(percent: int, width: int = 20) -> str:
    """Render a percentage as text: [████████░░░░░░░░░░░░]."""
    ratio = max(0, min(percent, 100)) / 100
    filled = int(ratio * width)
    return "[" + "█" * filled + "░" * (width - filled) + "]"


def _rate_color(rate: int) -> str:
    if rate >= 80:
        return "green"
    if rate >= 50:
        return "yellow"
    return "red"


def print_no_data_message() -> None:
    console.print(
        "[yellow]No records yet.[/] Import an export with "
        "[bold]productivity-tracker import FILE[/] or add a task with "
        "[bold]productivity-tracker add-task TITLE[/]."
    )


def print_error(message: str) -> None:
    console.print(f"[red]Error:[/] {message}")


def print_dashboard(data: dict) -> None:
    """Print today's stats, active counts and the streak."""
    today = data["today"]
    tasks = today["tasks"]
    streak = data["streak"]
    rate = tasks["completionRate"]

    lines = [
        "",
        f"  [bold]{today['date']}[/]",
        f"  {_progress_bar(rate)} [{_rate_color(rate)}]{rate}%[/] of today's tasks done",
        f"  ✅ {tasks['completed']} completed  |  ⏳ {tasks['pending']} pending  |  {tasks['total']} total",
        "",
        f"  \U0001f525 Streak: {streak['currentStreak']} days  |  Longest: {streak['longestStreak']} days",
        f"  \U0001f3af Active goals: {data['active']['goals']}  |  \U0001f4da Active skills: {data['active']['skills']}",
        "",
    ]
    console.print(Panel("\n".join(lines), title="[bold]PRODUCTIVITY[/]", box=box.ROUNDED, width=60))


def print_streak(data: dict) -> None:
    status = "[green]active[/]" if data["streakActive"] else "[dim]inactive[/]"
    console.print(
        Panel(
            f"  \U0001f525 Current: [bold]{data['currentStreak']}[/] days ({status})\n"
            f"  \U0001f3c6 Longest: [bold]{data['longestStreak']}[/] days\n"
            f"  Last activity: {data['lastActivityDate'] or 'never'}",
            title="[bold]Streak[/]",
            box=box.ROUNDED,
            width=50,
        )
    )


def print_consistency(data: dict) -> None:
    metrics = data["metrics"]
    score = data["consistencyScore"]
    table = Table(title=f"Consistency ({data['period']})", box=box.ROUNDED, header_style="bold")
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Score", f"[{_rate_color(score)}]{score}[/]")
    table.add_row("Days with activity", f"{metrics['daysWithActivity']}/{metrics['totalDays']}")
    table.add_row("Days with completions", f"{metrics['daysWithCompletedTasks']}/{metrics['totalDays']}")
    table.add_row("Activity rate", f"{metrics['activityRate']}%")
    table.add_row("Completion rate", f"{metrics['completionRate']}%")
    table.add_row("Task completion rate", f"{metrics['taskCompletionRate']}%")
    console.print(table)


def _counts_table(title: str, counts: dict[str, int]) -> Table:
    table = Table(title=title, box=box.SIMPLE, show_header=False)
    table.add_column("Key", style="bold")
    table.add_column("Count", justify="right")
    for key, value in counts.items():
        table.add_row(key, str(value))
    return table


def print_weekly(data: dict) -> None:
    tasks = data["tasks"]
    period = data["weekPeriod"]
    console.print(f"[bold]Week {period['start']} → {period['end']}[/]")
    console.print(
        f"  Tasks: {tasks['total']} total, {tasks['completed']} completed, "
        f"{tasks['pending']} pending, {tasks['inProgress']} in progress "
        f"([{_rate_color(tasks['completionRate'])}]{tasks['completionRate']}%[/])"
    )
    console.print(
        f"  Goals: {data['goals']['active']} active, {data['goals']['completed']} completed "
        f"of {data['goals']['total']}"
    )
    console.print(
        f"  Skills: {data['skills']['active']} active, {data['skills']['totalHours']}h logged  |  "
        f"Reflections: {data['reflections']['completed']}/{data['reflections']['total']} complete"
    )
    console.print(_counts_table("By day", tasks["byDay"]))
    console.print(_counts_table("By priority", tasks["byPriority"]))


def print_monthly(data: dict) -> None:
    period = data["monthPeriod"]
    tasks = data["tasks"]
    console.print(f"[bold]{period['month']} {period['year']}[/] ({period['start']} → {period['end']})")
    console.print(
        f"  Tasks: {tasks['completed']}/{tasks['total']} completed "
        f"([{_rate_color(tasks['completionRate'])}]{tasks['completionRate']}%[/])"
    )
    console.print(
        f"  Goals: {data['goals']['completed']}/{data['goals']['total']} completed "
        f"({data['goals']['completionRate']}%)"
    )
    skills = data["skills"]
    console.print(
        f"  Skills: {skills['totalHours']}h over {skills['totalSessions']} sessions, "
        f"{skills['activeSkills']} active"
    )
    console.print(
        f"  Reflections: {data['reflections']['completed']}/{data['reflections']['total']} complete"
    )

    table = Table(title="Weekly progress", box=box.ROUNDED, header_style="bold")
    table.add_column("Week")
    table.add_column("Tasks", justify="right")
    table.add_column("Completed", justify="right")
    table.add_column("Rate", justify="right")
    for week in data["weeklyProgress"]:
        rate = week["completionRate"]
        table.add_row(
            f"{week['weekStart']} → {week['weekEnd']}",
            str(week["totalTasks"]),
            str(week["completedTasks"]),
            f"[{_rate_color(rate)}]{rate}%[/]",
        )
    console.print(table)


def print_heatmap(data: dict) -> None:
    """Print a calendar grid: one column per week, one row per weekday."""
    cells = data["heatmap"]
    rows: list[Text] = [Text() for _ in range(7)]
    # Pad the first column so rows line up with Sunday-first weekdays.
    first = date.fromisoformat(cells[0]["date"]) if cells else None
    offset = first.isoweekday() % 7 if first else 0
    for i in range(offset):
        rows[i].append("  ")
    for index, cell in enumerate(cells):
        row = (offset + index) % 7
        rows[row].append("■ ", style=_INTENSITY_COLORS[cell["intensity"]])

    labels = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
    for label, row in zip(labels, rows):
        console.print(Text(f"{label} ") + row)

    summary = data["summary"]
    best = summary["bestDay"]
    console.print(
        f"\n  {summary['activeDays']}/{summary['totalDays']} active days "
        f"({summary['activityRate']}%), {format_number(summary['totalCompleted'])} tasks completed"
    )
    console.print(f"  Best day: {best['date']} ({best['completed']} completed)")


def print_insights(insights: list[dict]) -> None:
    if not insights:
        console.print("[dim]No insights yet.[/]")
        return
    for insight in insights:
        style = _INSIGHT_STYLES.get(insight["type"], "white")
        console.print(
            Panel(
                insight["message"],
                title=f"{insight['icon']} [bold]{insight['title']}[/]",
                subtitle=insight["category"],
                border_style=style,
                box=box.ROUNDED,
                width=70,
            )
        )


def print_patterns(data: dict) -> None:
    if "message" in data:
        console.print(f"[yellow]{data['message']}[/]")
        return
    table = Table(title="Day of week", box=box.ROUNDED, header_style="bold")
    table.add_column("Day", style="bold")
    table.add_column("Tasks", justify="right")
    table.add_column("Completed", justify="right")
    table.add_column("Rate", justify="right")
    for day, stats in data["dayOfWeek"]["analysis"].items():
        rate = stats["completionRate"]
        table.add_row(day, str(stats["total"]), str(stats["completed"]), f"[{_rate_color(rate)}]{rate}%[/]")
    console.print(table)

    averages = data["weeklyAverages"]
    console.print(
        f"  ~{averages['tasksPerWeek']} tasks/week, ~{averages['completedPerWeek']} completed/week"
    )
    for rec in data["recommendations"]:
        marker = "⭐" if rec["type"] == "optimize" else "⚠️"
        console.print(f"  {marker} {rec['message']}")


def print_summary(title: str, data: dict) -> None:
    """Print a flat or one-level nested stats dict as a table."""
    table = Table(title=title, box=box.ROUNDED, header_style="bold")
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    for key, value in data.items():
        if isinstance(value, dict):
            table.add_section()
            table.add_row(f"[bold]{key}[/]", "")
            for sub_key, sub_value in value.items():
                table.add_row(f"  {sub_key}", str(sub_value))
        elif isinstance(value, list):
            table.add_row(key, str(len(value)))
        else:
            table.add_row(key, str(value))
    console.print(table)


def print_import_result(counts: dict[str, int]) -> None:
    parts = ", ".join(f"{n} {kind}" for kind, n in counts.items())
    console.print(f"[green]Imported[/] {parts}")
