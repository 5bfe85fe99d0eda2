"""Per-task and per-tag time distributions."""

from __future__ import annotations

import math
from collections import defaultdict

from worklog_engine.schema import DurationShare, Session

_MS_PER_MINUTE = 60_000


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""

    return math.floor(value + 0.5)


def session_minutes(session: Session) -> int:
    """Rounded minutes a single session contributes to task/tag totals."""

    return round_half_up(session.duration_ms / _MS_PER_MINUTE)


def _ranked(totals: dict[str, int]) -> list[DurationShare]:
    # sorted() is stable, so equal totals keep first-seen order
    shares = [DurationShare(name=name, duration_minutes=minutes) for name, minutes in totals.items()]
    return sorted(shares, key=lambda share: share.duration_minutes, reverse=True)


def aggregate_duration_by_task(sessions: list[Session]) -> list[DurationShare]:
    """Total minutes per task name, largest first.

    Each session is rounded to whole minutes before it is added, so the task
    totals can drift from the rounded grand total.
    """

    totals: dict[str, int] = defaultdict(int)
    for session in sessions:
        totals[session.task_name] += session_minutes(session)
    return _ranked(totals)


def aggregate_duration_by_tag(sessions: list[Session]) -> list[DurationShare]:
    """Total minutes per tag, largest first.

    A session counts in full towards every tag it carries.
    """

    totals: dict[str, int] = defaultdict(int)
    for session in sessions:
        if not session.tags:
            continue
        minutes = session_minutes(session)
        for tag in session.tags:
            totals[tag] += minutes
    return _ranked(totals)
