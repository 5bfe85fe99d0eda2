"""Demo script for worklog-engine."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from worklog_engine.adapters.json_adapter import parse
from worklog_engine.history import filter_sessions_by_tag, format_duration
from worklog_engine.report import build_report


def main() -> None:
    sessions, apps = parse("examples/sample_sessions.json")
    report = build_report(sessions, apps)
    print("Total:", report["total_work_time_display"])
    print("Average:", report["average_session_length"])
    print("Peak hour:", report["peak_productivity_hour"])
    print("By task:", report["by_task"])
    print("By tag:", report["by_tag"])
    print("Apps:", report["app_usage"])
    for session in filter_sessions_by_tag(sessions, "deep-work"):
        print(" ", session.task_name, format_duration(session.duration_ms))


if __name__ == "__main__":
    main()
