"""Streamlit dashboard for worklog-engine."""

from __future__ import annotations

import json
import tempfile
from pathlib import Path
from typing import Any

from worklog_engine.adapters import csv_adapter, json_adapter
from worklog_engine.app_usage import resolve_app_name
from worklog_engine.history import collect_tags, filter_sessions_by_tag, format_duration
from worklog_engine.insights import InsightClient, request_insights
from worklog_engine.report import build_report

DEMO_DATASET = "examples/sample_sessions.json"
_LEVEL_COLORS = {"over": "red", "warning": "orange", "ok": "blue"}


def _parse_snapshot_from_path(file_path: str) -> tuple[list, list]:
    suffix = Path(file_path).suffix.lower()
    if suffix == ".csv":
        return csv_adapter.parse(file_path), []
    if suffix == ".json":
        return json_adapter.parse(file_path)
    raise ValueError("Unsupported file type. Please use .csv or .json")


def _parse_uploaded(uploaded_file) -> tuple[list, list]:
    suffix = Path(uploaded_file.name).suffix.lower()
    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as handle:
        handle.write(uploaded_file.getbuffer())
        temp_path = handle.name
    return _parse_snapshot_from_path(temp_path)


def _history_rows(sessions: list, apps: list, tag: str | None) -> list[dict[str, Any]]:
    return [
        {
            "task": session.task_name,
            "duration": format_duration(session.duration_ms),
            "tags": ", ".join(session.tags),
            "app": resolve_app_name(apps, session.app_id) or "",
            "notes": session.notes or "",
        }
        for session in filter_sessions_by_tag(sessions, tag)
    ]


def main() -> None:
    import streamlit as st

    st.set_page_config(page_title="Productivity Time Tracker", layout="wide")
    st.title("Productivity Time Tracker")

    with st.sidebar:
        st.header("Data")
        uploaded = st.file_uploader("Upload session snapshot", type=["csv", "json"])
        use_demo = st.checkbox("Load demo dataset", value=True)

    try:
        if use_demo:
            sessions, apps = json_adapter.parse(DEMO_DATASET)
        elif uploaded is not None:
            sessions, apps = _parse_uploaded(uploaded)
        else:
            st.info("Upload a CSV/JSON snapshot or enable 'Load demo dataset'.")
            return
    except ValueError as exc:
        st.error(f"Input error: {exc}")
        return

    if not sessions:
        st.info("Your productivity report will be generated here. Complete a work session to see your stats.")
        return

    report = build_report(sessions, apps)

    st.subheader("Productivity Report")
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Total Work Time", report["total_work_time_display"])
    c2.metric("Total Sessions", report["total_sessions"])
    c3.metric("Avg. Session", report["average_session_length"])
    c4.metric("Peak Hours", report["peak_productivity_hour"])

    left, right = st.columns(2)
    left.write("**Time per task (minutes)**")
    left.bar_chart({row["name"]: row["duration_minutes"] for row in report["by_task"]})
    right.write("**Time per tag (minutes)**")
    if report["by_tag"]:
        right.bar_chart({row["name"]: row["duration_minutes"] for row in report["by_tag"]})
    else:
        right.write("No tagged sessions.")

    if report["show_app_usage"]:
        st.subheader("App Time Allocation")
        for row in report["app_usage"]:
            color = _LEVEL_COLORS[row["level"]]
            st.markdown(
                f"**{row['app_name']}** :{color}[{row['total_minutes']} / {row['daily_goal_minutes']} min]"
            )
            st.progress(row["progress_percent"] / 100)

    st.subheader("Session History")
    tag = st.selectbox("Filter by tag", options=["All", *collect_tags(sessions)])
    st.table(_history_rows(sessions, apps, None if tag == "All" else tag))

    if st.button("Get AI Insights", type="primary"):
        with st.spinner("Analyzing your productivity..."):
            outcome = request_insights(InsightClient(), sessions, apps)
        if not outcome.available:
            st.error(outcome.error)
        else:
            insight = outcome.result.insight
            st.subheader("AI-Powered Insights")
            st.write("**Summary**", insight.summary)
            st.write("**Peak Productivity**", insight.peak_productivity)
            st.write("**Suggestions**")
            for suggestion in insight.suggestions:
                st.markdown(f"- {suggestion}")
            st.markdown(f"> _{insight.motivation}_")
            if outcome.result.sources:
                st.write("**Sources for AI Suggestions**")
                for source in outcome.result.sources:
                    st.markdown(f"1. [{source.title or source.uri}]({source.uri})")

    with st.expander("Raw report JSON"):
        st.code(json.dumps(report, indent=2), language="json")


if __name__ == "__main__":
    main()
