"""Session history helpers."""

from __future__ import annotations

from typing import Optional

from worklog_engine.schema import Session


def format_duration(ms: int) -> str:
    """Compact duration such as ``"1h 2m 3s"``; zero hours/minutes are dropped."""

    total_seconds = max(0, ms) // 1000
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60

    parts = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    parts.append(f"{seconds}s")
    return " ".join(parts)


def sort_sessions_newest_first(sessions: list[Session]) -> list[Session]:
    return sorted(sessions, key=lambda s: s.start_time, reverse=True)


def filter_sessions_by_tag(sessions: list[Session], tag: Optional[str] = None) -> list[Session]:
    """Newest-first sessions, restricted to those carrying ``tag`` when given."""

    ordered = sort_sessions_newest_first(sessions)
    if not tag:
        return ordered
    return [session for session in ordered if tag in session.tags]


def collect_tags(sessions: list[Session]) -> list[str]:
    return sorted({tag.strip() for session in sessions for tag in session.tags if tag.strip()})
