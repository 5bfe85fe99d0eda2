import json
from datetime import timezone

from worklog_engine.report import build_report
from worklog_engine.schema import Session, TrackedApp

MINUTE = 60_000


def sample_snapshot():
    sessions = [
        Session("1", "Write", 9 * 3_600_000, 9 * 3_600_000 + 10 * MINUTE, ("deep-work",), app_id="a1"),
        Session("2", "Write", 9 * 3_600_000, 9 * 3_600_000 + 5 * MINUTE),
        Session("3", "Email", 13 * 3_600_000, 13 * 3_600_000 + 2 * MINUTE, ("admin",), app_id="gone"),
    ]
    apps = [TrackedApp("a1", "Docs", 8), TrackedApp("a2", "Figma", 0)]
    return sessions, apps


def test_build_report_contents():
    sessions, apps = sample_snapshot()
    report = build_report(sessions, apps, tz=timezone.utc)

    assert report["total_sessions"] == 3
    assert report["total_work_time"] == {"hours": 0, "minutes": 17, "seconds": 0}
    assert report["total_work_time_display"] == "0h 17m 0s"
    assert report["average_session_length"] == "5m 40s"
    assert report["peak_productivity_hour"] == "9 AM"
    assert report["by_task"] == [
        {"name": "Write", "duration_minutes": 15},
        {"name": "Email", "duration_minutes": 2},
    ]
    assert report["by_tag"][0] == {"name": "deep-work", "duration_minutes": 10}
    assert report["app_usage"][0] == {
        "app_id": "a1",
        "app_name": "Docs",
        "daily_goal_minutes": 8,
        "total_minutes": 10,
        "progress_percent": 100,
        "level": "over",
    }
    assert report["app_usage"][1]["progress_percent"] == 0
    assert report["show_app_usage"] is True


def test_build_report_is_json_serializable_and_idempotent():
    sessions, apps = sample_snapshot()
    first = build_report(sessions, apps)
    assert json.loads(json.dumps(first)) == first
    assert build_report(sessions, apps) == first


def test_build_report_empty_snapshot():
    report = build_report([], [])
    assert report["total_sessions"] == 0
    assert report["average_session_length"] == "0m 0s"
    assert report["peak_productivity_hour"] == "N/A"
    assert report["by_task"] == []
    assert report["app_usage"] == []
    assert report["show_app_usage"] is False
