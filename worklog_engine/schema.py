"""Core data schema for work sessions and tracked apps."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Session:
    """Completed block of tracked work, timestamps in epoch milliseconds."""

    id: str
    task_name: str
    start_time: int
    end_time: int
    tags: tuple[str, ...] = field(default_factory=tuple)
    app_id: Optional[str] = None
    notes: Optional[str] = None

    @property
    def duration_ms(self) -> int:
        # end before start counts as an empty session
        return max(0, self.end_time - self.start_time)


@dataclass(frozen=True)
class TrackedApp:
    """Application or site with a daily time budget; 0 means no goal."""

    id: str
    name: str
    daily_goal_minutes: int = 0


@dataclass(frozen=True)
class WorkTime:
    hours: int
    minutes: int
    seconds: int


@dataclass(frozen=True)
class DurationShare:
    name: str
    duration_minutes: int


@dataclass(frozen=True)
class AppUsage:
    app: TrackedApp
    total_minutes: int
    progress_percent: int
