"""Tracked app usage against daily goals."""

from __future__ import annotations

from collections import defaultdict
from typing import Optional

from worklog_engine.distribution import round_half_up
from worklog_engine.schema import AppUsage, Session, TrackedApp


def find_app(tracked_apps: list[TrackedApp], app_id: Optional[str]) -> Optional[TrackedApp]:
    if not app_id:
        return None
    return next((app for app in tracked_apps if app.id == app_id), None)


def resolve_app_name(tracked_apps: list[TrackedApp], app_id: Optional[str]) -> Optional[str]:
    app = find_app(tracked_apps, app_id)
    return app.name if app else None


def _progress(total_minutes: int, goal_minutes: int) -> int:
    if goal_minutes <= 0:
        return 0
    return min(100, round_half_up(total_minutes / goal_minutes * 100))


def compute_app_usage(sessions: list[Session], tracked_apps: list[TrackedApp]) -> list[AppUsage]:
    """Minutes spent per tracked app and progress towards its daily goal.

    Unlike task and tag totals, raw minutes are summed first and rounded once.
    Every tracked app gets a row; sessions pointing at unknown apps are ignored.
    """

    raw_minutes: dict[str, float] = defaultdict(float)
    for session in sessions:
        if session.app_id:
            raw_minutes[session.app_id] += session.duration_ms / 60_000

    usage = []
    for app in tracked_apps:
        total = round_half_up(raw_minutes.get(app.id, 0.0))
        usage.append(
            AppUsage(
                app=app,
                total_minutes=total,
                progress_percent=_progress(total, app.daily_goal_minutes),
            )
        )
    return sorted(usage, key=lambda row: row.total_minutes, reverse=True)


def progress_level(progress_percent: float) -> str:
    """Band used for progress bars: ``over``, ``warning`` or ``ok``."""

    if progress_percent >= 100:
        return "over"
    if progress_percent > 75:
        return "warning"
    return "ok"
