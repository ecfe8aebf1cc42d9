# wrm/model.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

MIN_MS = 60_000
HOUR_MS = 60 * MIN_MS
DAY_MS = 24 * HOUR_MS

VIEW_DAILY = "daily"
VIEW_WEEKLY = "weekly"
VIEW_MONTHLY = "monthly"

TIMELINE_VIEWS = (VIEW_DAILY, VIEW_WEEKLY, VIEW_MONTHLY)


def normalize_view(view: str) -> str:
    s = str(view or "").strip().lower()
    if s not in TIMELINE_VIEWS:
        raise ValueError(f"Unknown timeline view: {view!r} (expected one of {', '.join(TIMELINE_VIEWS)})")
    return s


@dataclass(frozen=True)
class DateWindow:
    """Half-open [start_ms, end_ms) range rendered on the timeline."""

    start_ms: int
    end_ms: int

    @property
    def span_ms(self) -> int:
        return self.end_ms - self.start_ms

    def contains(self, ms: int) -> bool:
        return self.start_ms <= ms < self.end_ms


@dataclass(frozen=True)
class Ticket:
    id: str
    start_ms: int
    end_ms: int
    lane: int = 0

    title: str = ""
    created_at_ms: Optional[int] = None
    last_interaction_ms: Optional[int] = None

    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def duration_ms(self) -> int:
        return self.end_ms - self.start_ms


@dataclass(frozen=True)
class TicketWithPosition:
    ticket: Ticket
    start_x: float
    end_x: float
    width: float
    lane: int


@dataclass(frozen=True)
class TimeMarker:
    time_ms: int
    label: str
    x: float
    kind: str  # "major" | "minor" | "now"


__all__ = [
    "MIN_MS",
    "HOUR_MS",
    "DAY_MS",
    "VIEW_DAILY",
    "VIEW_WEEKLY",
    "VIEW_MONTHLY",
    "TIMELINE_VIEWS",
    "normalize_view",
    "DateWindow",
    "Ticket",
    "TicketWithPosition",
    "TimeMarker",
]
