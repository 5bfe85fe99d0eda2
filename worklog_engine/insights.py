"""AI productivity insights: prompt formatting, Gemini call and response parsing.

The statistics in :mod:`worklog_engine.report` never depend on this module.
Any failure here surfaces as :class:`InsightsUnavailableError`, or as an
``InsightOutcome`` carrying an error message, so the report still renders.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

import requests

from worklog_engine.app_usage import find_app
from worklog_engine.config import InsightSettings
from worklog_engine.distribution import session_minutes
from worklog_engine.schema import Session, TrackedApp

logger = logging.getLogger(__name__)

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]+")
_JSON_BLOCK = re.compile(r"```json\s*([\s\S]*?)\s*```")
_FORMAT_ERROR = "The AI response was not in the expected format. Please try again."


class InsightsUnavailableError(RuntimeError):
    """Insights could not be produced; local statistics are unaffected."""


@dataclass
class Insight:
    summary: str
    peak_productivity: str
    suggestions: list[str]
    motivation: str


@dataclass
class Source:
    uri: str
    title: str = ""


@dataclass
class InsightResult:
    insight: Insight
    sources: list[Source] = field(default_factory=list)


@dataclass
class InsightOutcome:
    result: Optional[InsightResult] = None
    error: Optional[str] = None

    @property
    def available(self) -> bool:
        return self.result is not None


def _clean(text: str) -> str:
    return _CONTROL_CHARS.sub(" ", text).strip()


def _iso(epoch_ms: int) -> str:
    moment = datetime.fromtimestamp(epoch_ms / 1000, tz=timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_sessions_for_prompt(sessions: list[Session], tracked_apps: list[TrackedApp]) -> str:
    lines = []
    for session in sessions:
        tags = f"Tags: [{', '.join(_clean(t) for t in session.tags)}]" if session.tags else "Tags: None"
        if session.app_id:
            app = find_app(tracked_apps, session.app_id)
            app_name = f"App: {_clean(app.name) if app else 'Unknown App'}"
        else:
            app_name = "App: None"
        notes = f'Notes: "{_clean(session.notes)}"' if session.notes else "Notes: None"
        lines.append(
            f'- Task: "{_clean(session.task_name)}", Start: {_iso(session.start_time)}, '
            f"End: {_iso(session.end_time)}, Duration: {session_minutes(session)} minutes, "
            f"{tags}, {app_name}, {notes}"
        )
    return "\n".join(lines)


def format_app_goals_for_prompt(tracked_apps: list[TrackedApp]) -> str:
    if not tracked_apps:
        return "No specific app time goals have been set."
    goals = "\n".join(f"- {_clean(app.name)}: {app.daily_goal_minutes} minutes per day" for app in tracked_apps)
    return "Here are my daily time goals for specific apps:\n" + goals


def build_insight_prompt(sessions: list[Session], tracked_apps: list[TrackedApp]) -> str:
    return f"""You are a friendly and encouraging productivity coach. I am providing you with a list of my recent work sessions (including my personal notes) and my daily time goals for specific applications. Please analyze them and provide a concise, actionable report.
Use your knowledge and search the web for the latest, most effective productivity strategies to inform your suggestions.

Here is my work session data:
{format_sessions_for_prompt(sessions, tracked_apps)}

{format_app_goals_for_prompt(tracked_apps)}

Based on all this data (including my notes), provide a report as a JSON object inside a markdown code block. The JSON object should have the following properties:
- "summary": A brief, one-paragraph overview of my work habits, considering the distribution of time across tasks, tags, notes, AND my performance against app time goals.
- "peak_productivity": A single sentence identifying my most productive time of day or day of the week, based on when I start the most sessions.
- "suggestions": An array of 2-3 actionable, personalized tips to improve my productivity, considering my app usage against my goals.
- "motivation": A short, encouraging, and inspiring message.

Do not include any text outside of the JSON markdown block itself.
"""


def parse_insight_response(text: str) -> Insight:
    """Extract and validate the fenced JSON insight object from a model reply."""

    match = _JSON_BLOCK.search(text.strip())
    if not match or not match.group(1):
        logger.error("No JSON block found in insight response: %r", text[:500])
        raise InsightsUnavailableError(_FORMAT_ERROR)

    try:
        payload = json.loads(match.group(1))
    except json.JSONDecodeError as exc:
        logger.error("Malformed JSON in insight response: %s", exc)
        raise InsightsUnavailableError(_FORMAT_ERROR) from exc

    if not (
        isinstance(payload, dict)
        and payload.get("summary")
        and payload.get("peak_productivity")
        and isinstance(payload.get("suggestions"), list)
        and payload.get("motivation")
    ):
        logger.error("Insight JSON is missing required fields: %s", sorted(payload) if isinstance(payload, dict) else payload)
        raise InsightsUnavailableError(_FORMAT_ERROR)

    return Insight(
        summary=str(payload["summary"]),
        peak_productivity=str(payload["peak_productivity"]),
        suggestions=[str(item) for item in payload["suggestions"]],
        motivation=str(payload["motivation"]),
    )


def _first_candidate(body) -> dict:
    candidates = body.get("candidates") if isinstance(body, dict) else None
    if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
        logger.error("Insight response had no usable candidate: %r", body if not isinstance(body, dict) else candidates)
        raise InsightsUnavailableError(_FORMAT_ERROR)
    return candidates[0]


def _candidate_text(candidate: dict) -> str:
    content = candidate.get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        logger.error("Insight candidate has no content parts")
        raise InsightsUnavailableError(_FORMAT_ERROR)
    return "".join(str(part.get("text") or "") for part in parts if isinstance(part, dict))


def _extract_sources(candidate: dict) -> list[Source]:
    metadata = candidate.get("groundingMetadata")
    chunks = metadata.get("groundingChunks") if isinstance(metadata, dict) else None
    sources = []
    for chunk in chunks if isinstance(chunks, list) else []:
        web = chunk.get("web") if isinstance(chunk, dict) else None
        if isinstance(web, dict) and web.get("uri"):
            sources.append(Source(uri=str(web["uri"]), title=str(web.get("title") or "")))
    return sources


class InsightClient:
    """Thin Gemini ``generateContent`` client."""

    def __init__(self, settings: InsightSettings | None = None):
        self.settings = settings or InsightSettings.from_env()

    def _payload(self, prompt: str) -> dict:
        data = {"contents": [{"parts": [{"text": prompt}]}]}
        if self.settings.search_grounding:
            data["tools"] = [{"google_search": {}}]
        return data

    def get_insights(self, sessions: list[Session], tracked_apps: list[TrackedApp]) -> InsightResult:
        if not self.settings.api_key:
            raise InsightsUnavailableError("API key not configured (set WORKLOG_API_KEY)")

        prompt = build_insight_prompt(sessions, tracked_apps)
        try:
            response = requests.post(
                self.settings.endpoint,
                headers={"Content-Type": "application/json", "x-goog-api-key": self.settings.api_key},
                json=self._payload(prompt),
                timeout=self.settings.timeout_seconds,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            logger.warning("Insight request failed: %s", exc)
            raise InsightsUnavailableError("Failed to reach the insight service.") from exc

        try:
            body = response.json()
        except ValueError as exc:
            logger.error("Insight service returned non-JSON body")
            raise InsightsUnavailableError(_FORMAT_ERROR) from exc

        candidate = _first_candidate(body)
        insight = parse_insight_response(_candidate_text(candidate))
        return InsightResult(insight=insight, sources=_extract_sources(candidate))


def request_insights(client: InsightClient, sessions: list[Session], tracked_apps: list[TrackedApp]) -> InsightOutcome:
    """Fetch insights without raising; failures become ``InsightOutcome.error``."""

    if not sessions:
        return InsightOutcome(error="No sessions available to analyze. Please complete a work session first.")

    try:
        return InsightOutcome(result=client.get_insights(sessions, tracked_apps))
    except InsightsUnavailableError as exc:
        logger.info("Insights unavailable: %s", exc)
        return InsightOutcome(error=f"Failed to get productivity insights. {exc}")
