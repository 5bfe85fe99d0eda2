"""CSV adapter for sessions and tracked apps."""

from __future__ import annotations

import csv
import logging

from worklog_engine.adapters.json_adapter import DEFAULT_TASK_NAME, parse_timestamp
from worklog_engine.schema import Session, TrackedApp

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = {"id", "start_time", "end_time"}
_TAG_SEPARATOR = ";"


def _parse_row(row: dict, row_number: int) -> Session:
    missing = sorted(field for field in _REQUIRED_FIELDS if not row.get(field))
    if missing:
        raise ValueError(f"Row {row_number}: missing required fields {missing}")

    label = f"Row {row_number}"
    start_time = parse_timestamp(row["start_time"], label)
    end_time = parse_timestamp(row["end_time"], label)
    if end_time < start_time:
        logger.warning("%s ends before it starts; its duration counts as zero", label)

    tags_raw = row.get("tags") or ""
    tags = tuple(tag.strip() for tag in tags_raw.split(_TAG_SEPARATOR) if tag.strip())

    app_raw = row.get("app_id")
    notes_raw = row.get("notes")

    return Session(
        id=row["id"].strip(),
        task_name=(row.get("task_name") or "").strip() or DEFAULT_TASK_NAME,
        start_time=start_time,
        end_time=end_time,
        tags=tags,
        app_id=app_raw.strip() if app_raw and app_raw.strip() else None,
        notes=notes_raw if notes_raw else None,
    )


def _parse_app_row(row: dict, row_number: int) -> TrackedApp:
    missing = sorted(field for field in ("id", "name") if not row.get(field))
    if missing:
        raise ValueError(f"Row {row_number}: missing required fields {missing}")

    goal_raw = row.get("daily_goal_minutes")
    goal = 0
    if goal_raw not in (None, ""):
        try:
            goal = int(goal_raw)
        except Exception as exc:  # noqa: BLE001
            raise ValueError(f"Row {row_number}: invalid daily_goal_minutes") from exc
    if goal < 0:
        raise ValueError(f"Row {row_number}: daily_goal_minutes must be non-negative")

    return TrackedApp(id=row["id"].strip(), name=row["name"].strip(), daily_goal_minutes=goal)


def parse(file_path: str) -> list[Session]:
    """Parse CSV file into a list of sessions."""

    with open(file_path, newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            return []

        sessions: list[Session] = []
        for row_number, row in enumerate(reader, start=2):
            sessions.append(_parse_row(row, row_number))
        return sessions


def parse_tracked_apps(file_path: str) -> list[TrackedApp]:
    """Parse CSV file into a list of tracked apps."""

    with open(file_path, newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            return []
        return [_parse_app_row(row, row_number) for row_number, row in enumerate(reader, start=2)]
