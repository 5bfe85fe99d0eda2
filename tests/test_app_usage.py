from worklog_engine.app_usage import compute_app_usage, find_app, progress_level, resolve_app_name
from worklog_engine.schema import AppUsage, Session, TrackedApp

MINUTE = 60_000


def test_progress_is_clamped_at_100():
    figma = TrackedApp("a1", "Figma", 60)
    sessions = [Session("1", "Design", 0, 90 * MINUTE, app_id="a1")]
    assert compute_app_usage(sessions, [figma]) == [AppUsage(figma, 90, 100)]


def test_zero_goal_means_zero_progress():
    app = TrackedApp("a1", "Notes", 0)
    usage = compute_app_usage([Session("1", "Write", 0, 30 * MINUTE, app_id="a1")], [app])
    assert usage[0].total_minutes == 30
    assert usage[0].progress_percent == 0


def test_raw_minutes_summed_then_rounded_once():
    app = TrackedApp("a1", "Docs", 100)
    # 3 x 0.4 min = 1.2 min; per-session rounding would give 0
    sessions = [Session(str(i), "Write", 0, 24_000, app_id="a1") for i in range(3)]
    usage = compute_app_usage(sessions, [app])
    assert usage[0].total_minutes == 1
    assert usage[0].progress_percent == 1


def test_dangling_app_reference_is_ignored():
    app = TrackedApp("a1", "Docs", 60)
    sessions = [
        Session("1", "Write", 0, 30 * MINUTE, app_id="missing"),
        Session("2", "Write", 0, 15 * MINUTE, app_id="a1"),
        Session("3", "Write", 0, 15 * MINUTE),
    ]
    assert compute_app_usage(sessions, [app]) == [AppUsage(app, 15, 25)]


def test_unused_apps_listed_last_in_stable_order():
    docs = TrackedApp("a1", "Docs", 60)
    figma = TrackedApp("a2", "Figma", 60)
    slack = TrackedApp("a3", "Slack", 30)
    sessions = [Session("1", "Design", 0, 45 * MINUTE, app_id="a2")]
    usage = compute_app_usage(sessions, [docs, figma, slack])
    assert [row.app.name for row in usage] == ["Figma", "Docs", "Slack"]
    assert [row.total_minutes for row in usage] == [45, 0, 0]
    assert all(0 <= row.progress_percent <= 100 for row in usage)


def test_empty_app_list():
    assert compute_app_usage([Session("1", "Write", 0, MINUTE, app_id="a1")], []) == []


def test_progress_rounds_to_whole_percent():
    app = TrackedApp("a1", "Docs", 3)
    usage = compute_app_usage([Session("1", "Write", 0, 2 * MINUTE, app_id="a1")], [app])
    assert usage[0].progress_percent == 67


def test_app_lookup_returns_none_when_absent():
    apps = [TrackedApp("a1", "Docs", 60)]
    assert find_app(apps, "a1") == apps[0]
    assert find_app(apps, "zzz") is None
    assert find_app(apps, None) is None
    assert resolve_app_name(apps, "a1") == "Docs"
    assert resolve_app_name(apps, "zzz") is None


def test_progress_level_bands():
    assert progress_level(100) == "over"
    assert progress_level(76) == "warning"
    assert progress_level(75) == "ok"
    assert progress_level(0) == "ok"
