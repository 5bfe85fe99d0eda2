"""JSON adapter for session and tracked-app snapshots."""

from __future__ import annotations

import json
import logging
from datetime import datetime

from worklog_engine.schema import Session, TrackedApp

logger = logging.getLogger(__name__)

_REQUIRED_SESSION_FIELDS = ("id", "startTime", "endTime")
_REQUIRED_APP_FIELDS = ("id", "name")
DEFAULT_TASK_NAME = "Untitled Task"


def parse_timestamp(value, label: str) -> int:
    """Epoch milliseconds from an int/float or an ISO-8601 string."""

    if isinstance(value, bool):
        raise ValueError(f"{label}: malformed timestamp")
    try:
        if isinstance(value, (int, float)):
            # inf and nan fail here
            return int(value)
        text = str(value).strip()
        if text.lstrip("-").isdigit():
            return int(text)
        return int(datetime.fromisoformat(text.replace("Z", "+00:00")).timestamp() * 1000)
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"{label}: malformed timestamp") from exc


def _parse_tags(raw, label: str) -> tuple[str, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise ValueError(f"{label}: tags must be a list")
    return tuple(str(tag).strip() for tag in raw if str(tag).strip())


def _parse_session(item: dict, index: int) -> Session:
    label = f"Session {index}"
    if not isinstance(item, dict):
        raise ValueError(f"{label}: expected an object")

    missing = [name for name in _REQUIRED_SESSION_FIELDS if item.get(name) in (None, "")]
    if missing:
        raise ValueError(f"{label}: missing required fields {missing}")

    start_time = parse_timestamp(item["startTime"], label)
    end_time = parse_timestamp(item["endTime"], label)
    if end_time < start_time:
        logger.warning("%s ends before it starts; its duration counts as zero", label)

    task_name = str(item.get("taskName") or "").strip() or DEFAULT_TASK_NAME
    app_raw = item.get("appId")
    notes_raw = item.get("notes")

    return Session(
        id=str(item["id"]).strip(),
        task_name=task_name,
        start_time=start_time,
        end_time=end_time,
        tags=_parse_tags(item.get("tags"), label),
        app_id=str(app_raw).strip() if app_raw else None,
        notes=str(notes_raw) if notes_raw else None,
    )


def _parse_app(item: dict, index: int) -> TrackedApp:
    label = f"App {index}"
    if not isinstance(item, dict):
        raise ValueError(f"{label}: expected an object")

    missing = [name for name in _REQUIRED_APP_FIELDS if not item.get(name)]
    if missing:
        raise ValueError(f"{label}: missing required fields {missing}")

    goal_raw = item.get("dailyGoalMinutes", 0)
    try:
        goal = int(goal_raw or 0)
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"{label}: invalid dailyGoalMinutes") from exc
    if goal < 0:
        raise ValueError(f"{label}: dailyGoalMinutes must be non-negative")

    return TrackedApp(id=str(item["id"]).strip(), name=str(item["name"]).strip(), daily_goal_minutes=goal)


def parse_sessions(items: list) -> list[Session]:
    return [_parse_session(item, i) for i, item in enumerate(items, start=1)]


def parse_tracked_apps(items: list) -> list[TrackedApp]:
    return [_parse_app(item, i) for i, item in enumerate(items, start=1)]


def parse_tracked_apps_file(file_path: str) -> list[TrackedApp]:
    """Parse tracked apps from a bare list or a snapshot's ``trackedApps``."""

    with open(file_path, encoding="utf-8") as handle:
        payload = json.load(handle)

    if isinstance(payload, dict):
        payload = payload.get("trackedApps", [])
    if not isinstance(payload, list):
        raise ValueError("Tracked apps must be a list or an object with a 'trackedApps' list")
    return parse_tracked_apps(payload)


def parse(file_path: str) -> tuple[list[Session], list[TrackedApp]]:
    """Parse a JSON snapshot into sessions and tracked apps.

    Accepts a bare list of sessions or ``{"workSessions": [...], "trackedApps": [...]}``.
    """

    with open(file_path, encoding="utf-8") as handle:
        payload = json.load(handle)

    if isinstance(payload, list):
        return parse_sessions(payload), []

    if not isinstance(payload, dict):
        raise ValueError("JSON payload must be a list of sessions or a snapshot object")

    sessions_raw = payload.get("workSessions", [])
    apps_raw = payload.get("trackedApps", [])
    if not isinstance(sessions_raw, list) or not isinstance(apps_raw, list):
        raise ValueError("'workSessions' and 'trackedApps' must be lists")

    sessions = parse_sessions(sessions_raw)
    apps = parse_tracked_apps(apps_raw)
    logger.debug("Loaded %d sessions and %d tracked apps from %s", len(sessions), len(apps), file_path)
    return sessions, apps
