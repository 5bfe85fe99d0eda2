"""Environment-driven settings for the insight client."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_TIMEOUT_SECONDS = 30.0

_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class InsightSettings:
    api_key: str = ""
    model: str = DEFAULT_MODEL
    api_base: str = DEFAULT_API_BASE
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    search_grounding: bool = True

    @property
    def endpoint(self) -> str:
        return f"{self.api_base.rstrip('/')}/models/{self.model}:generateContent"

    @classmethod
    def from_env(cls, environ: dict | None = None) -> "InsightSettings":
        """Read ``WORKLOG_*`` variables, falling back to ``API_KEY`` for the key."""

        env = os.environ if environ is None else environ

        timeout_raw = env.get("WORKLOG_TIMEOUT")
        timeout = DEFAULT_TIMEOUT_SECONDS
        if timeout_raw not in (None, ""):
            try:
                timeout = float(timeout_raw)
            except ValueError as exc:
                raise ValueError(f"WORKLOG_TIMEOUT must be a number, got '{timeout_raw}'") from exc
            if timeout <= 0:
                raise ValueError("WORKLOG_TIMEOUT must be positive")

        grounding_raw = env.get("WORKLOG_SEARCH_GROUNDING", "")
        return cls(
            api_key=env.get("WORKLOG_API_KEY") or env.get("API_KEY") or "",
            model=env.get("WORKLOG_MODEL") or DEFAULT_MODEL,
            api_base=env.get("WORKLOG_API_BASE") or DEFAULT_API_BASE,
            timeout_seconds=timeout,
            search_grounding=grounding_raw.strip().lower() not in _FALSE_VALUES,
        )
