"""MCP server for productivity-tracker.

Exposes the analytics reports as MCP tools so an assistant can query them
mid-conversation.
Run via: python3 -m productivity_tracker.mcp_server
"""
from __future__ import annotations

import logging
from typing import Any, Callable

from mcp.server.fastmcp import FastMCP

from productivity_tracker.errors import InvalidArgument

logger = logging.getLogger(__name__)

mcp = FastMCP(name="productivity-tracker")


def _get_db():
    from productivity_tracker.config import get_db_path
    from productivity_tracker.db import Database
    return Database(db_path=get_db_path())


def _owner(owner: str) -> str:
    from productivity_tracker.config import get_setting
    return owner or get_setting("default_owner")


def _run(report: Callable[[Any], Any]) -> Any:
    """Open the DB, run report(service), map InvalidArgument to an error payload."""
    from productivity_tracker.service import AnalyticsService

    db = _get_db()
    try:
        return report(AnalyticsService(db))
    except InvalidArgument as exc:
        logger.info("Rejected MCP request: %s", exc)
        return {"error": str(exc)}
    finally:
        db.close()


@mcp.tool()
def get_streak(owner: str = "") -> dict[str, Any]:
    """Get current and longest completion streak."""
    return _run(lambda s: s.streak(_owner(owner)))


@mcp.tool()
def get_consistency(days: int = 30, owner: str = "") -> dict[str, Any]:
    """Get the 0-100 consistency score over the last N days."""
    return _run(lambda s: s.consistency(_owner(owner), days))


@mcp.tool()
def get_weekly(owner: str = "") -> dict[str, Any]:
    """Get this week's task, goal, skill and reflection rollup."""
    return _run(lambda s: s.weekly(_owner(owner)))


@mcp.tool()
def get_monthly(owner: str = "") -> dict[str, Any]:
    """Get this month's rollup with week-by-week progress."""
    return _run(lambda s: s.monthly(_owner(owner)))


@mcp.tool()
def get_heatmap(days: int = 365, owner: str = "") -> dict[str, Any]:
    """Get per-day activity intensity for the last N days."""
    return _run(lambda s: s.heatmap(_owner(owner), days))


@mcp.tool()
def get_insights(days: int = 30, owner: str = "") -> dict[str, Any]:
    """Get rule-based insights about recent productivity."""
    def report(service):
        insights = service.insights(_owner(owner), days)
        return {"count": len(insights), "insights": insights}
    return _run(report)


@mcp.tool()
def get_patterns(days: int = 30, owner: str = "") -> dict[str, Any]:
    """Get day-of-week and priority completion patterns with recommendations."""
    return _run(lambda s: s.patterns(_owner(owner), days))


@mcp.tool()
def get_dashboard(owner: str = "") -> dict[str, Any]:
    """Get today's stats, active goals/skills and the streak."""
    return _run(lambda s: s.dashboard(_owner(owner)))


def main() -> None:
    mcp.run()


if __name__ == "__main__":
    main()
