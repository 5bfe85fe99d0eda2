"""Scalar session metrics: totals, averages and peak hour."""

from __future__ import annotations

from datetime import datetime, tzinfo

import numpy as np

from worklog_engine.schema import Session, WorkTime


def compute_total_work_time(sessions: list[Session]) -> WorkTime:
    """Sum session durations and split the whole seconds into h/m/s."""

    total_ms = sum(session.duration_ms for session in sessions)
    total_seconds = total_ms // 1000
    return WorkTime(
        hours=total_seconds // 3600,
        minutes=(total_seconds % 3600) // 60,
        seconds=total_seconds % 60,
    )


def compute_average_session_length(sessions: list[Session]) -> str:
    """Return mean session length as ``"Xm Ys"``."""

    if not sessions:
        return "0m 0s"

    total_ms = sum(session.duration_ms for session in sessions)
    total_seconds = int(total_ms / len(sessions) // 1000)
    return f"{total_seconds // 60}m {total_seconds % 60}s"


def _start_hour(session: Session, tz: tzinfo | None) -> int:
    return datetime.fromtimestamp(session.start_time / 1000, tz=tz).hour


def count_sessions_by_hour(sessions: list[Session], tz: tzinfo | None = None) -> np.ndarray:
    """Histogram of session starts per hour of day (local time unless ``tz``)."""

    hours = [_start_hour(session, tz) for session in sessions]
    return np.bincount(np.asarray(hours, dtype=int), minlength=24)


def format_hour(hour: int) -> str:
    suffix = "PM" if hour >= 12 else "AM"
    return f"{hour % 12 or 12} {suffix}"


def find_peak_productivity_hour(sessions: list[Session], tz: tzinfo | None = None) -> str:
    """Hour of day with the most session starts, e.g. ``"9 AM"``.

    Hours are scanned 0-23 and the first hour reaching the maximum count wins,
    so ties go to the earliest hour.
    """

    if not sessions:
        return "N/A"

    counts = count_sessions_by_hour(sessions, tz)
    return format_hour(int(np.argmax(counts)))
