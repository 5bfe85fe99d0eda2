"""Build a productivity report from a JSON/CSV session snapshot."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from worklog_engine.adapters import csv_adapter, json_adapter
from worklog_engine.insights import InsightClient, request_insights
from worklog_engine.report import build_report


def _load_snapshot(path: Path, apps_path: Path | None):
    suffix = path.suffix.lower()
    if suffix == ".csv":
        sessions, apps = csv_adapter.parse(str(path)), []
    elif suffix == ".json":
        sessions, apps = json_adapter.parse(str(path))
    else:
        raise ValueError("Unsupported input format, expected .csv or .json")

    if apps_path is not None:
        if apps_path.suffix.lower() == ".csv":
            apps = csv_adapter.parse_tracked_apps(str(apps_path))
        else:
            apps = json_adapter.parse_tracked_apps_file(str(apps_path))
    return sessions, apps


def main() -> None:
    parser = argparse.ArgumentParser(description="Summarize tracked work sessions")
    parser.add_argument("--data", required=True, help="Path to CSV/JSON sessions file")
    parser.add_argument("--apps", help="Optional CSV/JSON tracked apps file")
    parser.add_argument("--insights", action="store_true", help="Request AI insights for the report")
    parser.add_argument("--out", default="outputs/report.json", help="Where to save the report")
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    sessions, apps = _load_snapshot(Path(args.data), Path(args.apps) if args.apps else None)
    report = build_report(sessions, apps)

    if args.insights:
        outcome = request_insights(InsightClient(), sessions, apps)
        if outcome.available:
            report["insights"] = {
                "summary": outcome.result.insight.summary,
                "peak_productivity": outcome.result.insight.peak_productivity,
                "suggestions": outcome.result.insight.suggestions,
                "motivation": outcome.result.insight.motivation,
                "sources": [{"uri": s.uri, "title": s.title} for s in outcome.result.sources],
            }
        else:
            report["insights_error"] = outcome.error

    print(json.dumps(report, indent=2))

    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(json.dumps(report, indent=2), encoding="utf-8")
    print(f"Saved report to {out_path}")


if __name__ == "__main__":
    main()
