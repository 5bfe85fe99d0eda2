"""Productivity report assembled from one session snapshot."""

from __future__ import annotations

from dataclasses import asdict
from datetime import tzinfo

from worklog_engine.app_usage import compute_app_usage, progress_level
from worklog_engine.distribution import aggregate_duration_by_tag, aggregate_duration_by_task
from worklog_engine.metrics import (
    compute_average_session_length,
    compute_total_work_time,
    find_peak_productivity_hour,
)
from worklog_engine.schema import Session, TrackedApp


def build_report(sessions: list[Session], tracked_apps: list[TrackedApp], tz: tzinfo | None = None) -> dict:
    """Run every aggregation over the snapshot and return a JSON-friendly payload."""

    total = compute_total_work_time(sessions)
    app_usage = compute_app_usage(sessions, tracked_apps)

    return {
        "total_sessions": len(sessions),
        "total_work_time": asdict(total),
        "total_work_time_display": f"{total.hours}h {total.minutes}m {total.seconds}s",
        "average_session_length": compute_average_session_length(sessions),
        "peak_productivity_hour": find_peak_productivity_hour(sessions, tz),
        "by_task": [asdict(share) for share in aggregate_duration_by_task(sessions)],
        "by_tag": [asdict(share) for share in aggregate_duration_by_tag(sessions)],
        "app_usage": [
            {
                "app_id": row.app.id,
                "app_name": row.app.name,
                "daily_goal_minutes": row.app.daily_goal_minutes,
                "total_minutes": row.total_minutes,
                "progress_percent": row.progress_percent,
                "level": progress_level(row.progress_percent),
            }
            for row in app_usage
        ],
        "show_app_usage": bool(tracked_apps) and any(session.app_id for session in sessions),
    }
