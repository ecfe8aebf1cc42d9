# wrm/heatmap.py
"""Activity data for the heat-map navigator.

Each ticket contributes once, on the local day of its activity instant
(last interaction, else end). Past tickets that were edited after creation
(CONFIRMED) count as completed. Productivity is the completion rate bucketed
into low / medium / high.
"""

from __future__ import annotations

import datetime as dt
import logging
import time
from dataclasses import dataclass
from typing import Dict, Hashable, Iterable, List, Mapping, Optional, Tuple

from .model import DateWindow, Ticket
from .state import TimelineState
from .ticket_state import CONFIRMED, calculate_ticket_state
from .util.tz import local_date, midnight_epoch_ms, now_ms as _now_ms, resolve_tz

logger = logging.getLogger(__name__)

PRODUCTIVITY_LOW = "low"
PRODUCTIVITY_MEDIUM = "medium"
PRODUCTIVITY_HIGH = "high"

DEFAULT_THRESHOLDS: Dict[str, float] = {"high": 0.8, "medium": 0.5}

GRANULARITY_DAILY = "daily"
GRANULARITY_WEEKLY = "weekly"


@dataclass(frozen=True)
class ActivityData:
    date: dt.date
    start_ms: int
    completion_count: int
    total_tickets: int
    productivity: str

    @property
    def completion_rate(self) -> float:
        if self.total_tickets == 0:
            return 0.0
        return self.completion_count / self.total_tickets


def productivity_level(rate: float, thresholds: Optional[Mapping[str, float]] = None) -> str:
    th = thresholds or DEFAULT_THRESHOLDS
    if rate >= float(th.get("high", DEFAULT_THRESHOLDS["high"])):
        return PRODUCTIVITY_HIGH
    if rate >= float(th.get("medium", DEFAULT_THRESHOLDS["medium"])):
        return PRODUCTIVITY_MEDIUM
    return PRODUCTIVITY_LOW


def ticket_activity_ms(ticket: Ticket) -> int:
    if ticket.last_interaction_ms is not None:
        return ticket.last_interaction_ms
    return ticket.end_ms


def is_ticket_completed(ticket: Ticket, now_ms: Optional[int] = None) -> bool:
    return calculate_ticket_state(ticket, now_ms) == CONFIRMED


def _bucket(date: dt.date, start_ms: int, done: int, total: int, thresholds: Optional[Mapping[str, float]]) -> ActivityData:
    level = productivity_level(done / total, thresholds) if total else PRODUCTIVITY_LOW
    return ActivityData(date=date, start_ms=start_ms, completion_count=done, total_tickets=total, productivity=level)


def calculate_daily_activity(
    tickets: Iterable[Ticket],
    start_ms: int,
    end_ms: int,
    *,
    tz: Optional[str] = "local",
    thresholds: Optional[Mapping[str, float]] = None,
    now_ms: Optional[int] = None,
) -> List[ActivityData]:
    """One entry per local day from start_ms to end_ms (both inclusive), oldest first.

    Days without tickets are present with zero counts and "low" productivity.
    """
    tzinfo = resolve_tz(tz)
    now = _now_ms() if now_ms is None else int(now_ms)

    counts: Dict[dt.date, List[int]] = {}
    d = local_date(start_ms, tzinfo)
    last = local_date(end_ms, tzinfo)
    while d <= last:
        counts[d] = [0, 0]
        d = d + dt.timedelta(days=1)

    for t in tickets:
        at = ticket_activity_ms(t)
        if not (start_ms <= at <= end_ms):
            continue
        c = counts.get(local_date(at, tzinfo))
        if c is None:
            continue
        c[1] += 1
        if is_ticket_completed(t, now):
            c[0] += 1

    return [_bucket(day, midnight_epoch_ms(day, tzinfo), done, total, thresholds) for day, (done, total) in counts.items()]


def _monday_on_or_before(d: dt.date) -> dt.date:
    return d - dt.timedelta(days=d.weekday())


def calculate_weekly_activity(
    tickets: Iterable[Ticket],
    start_ms: int,
    end_ms: int,
    *,
    tz: Optional[str] = "local",
    thresholds: Optional[Mapping[str, float]] = None,
    now_ms: Optional[int] = None,
) -> List[ActivityData]:
    """Daily activity rolled up into Monday-based weeks, productivity recomputed per week."""
    tzinfo = resolve_tz(tz)
    daily = calculate_daily_activity(tickets, start_ms, end_ms, tz=tz, thresholds=thresholds, now_ms=now_ms)

    weeks: Dict[dt.date, List[int]] = {}
    for day in daily:
        c = weeks.setdefault(_monday_on_or_before(day.date), [0, 0])
        c[0] += day.completion_count
        c[1] += day.total_tickets

    return [_bucket(monday, midnight_epoch_ms(monday, tzinfo), done, total, thresholds) for monday, (done, total) in weeks.items()]


def _ticket_key(t: Ticket) -> Tuple[Hashable, ...]:
    return (t.id, t.start_ms, t.end_ms, t.created_at_ms, t.last_interaction_ms)


class ActivityCache:
    """Memoizes activity per (cache version, window, tz, granularity, now, tickets).

    Bumping TimelineState.activity_cache_version (invalidate_activity_cache)
    forces a recompute even when the tickets look unchanged.
    """

    def __init__(self, thresholds: Optional[Mapping[str, float]] = None) -> None:
        self._thresholds = dict(thresholds) if thresholds else None
        self._key: Optional[Tuple[Hashable, ...]] = None
        self._value: List[ActivityData] = []

    def activity_for_state(
        self,
        state: TimelineState,
        granularity: str = GRANULARITY_DAILY,
        *,
        window: Optional[DateWindow] = None,
        now_ms: Optional[int] = None,
    ) -> List[ActivityData]:
        """Activity over `window` (default: the state's window); empty when the heat map is off."""
        if not state.heat_map_enabled or not state.tickets:
            return []
        if granularity not in (GRANULARITY_DAILY, GRANULARITY_WEEKLY):
            raise ValueError(f"Unknown activity granularity: {granularity!r}")

        w = window or state.window
        key = (
            state.activity_cache_version,
            w.start_ms,
            w.end_ms,
            state.tz,
            granularity,
            now_ms,
            tuple(_ticket_key(t) for t in state.tickets),
        )
        if key == self._key:
            return list(self._value)

        fn = calculate_weekly_activity if granularity == GRANULARITY_WEEKLY else calculate_daily_activity
        started = time.perf_counter()
        value = fn(state.tickets, w.start_ms, w.end_ms - 1, tz=state.tz, thresholds=self._thresholds, now_ms=now_ms)
        logger.debug(
            "activity calculation took %.1fms for %d tickets (version %d)",
            (time.perf_counter() - started) * 1000.0,
            len(state.tickets),
            state.activity_cache_version,
        )
        self._key = key
        self._value = value
        return list(value)


__all__ = [
    "ActivityCache",
    "ActivityData",
    "DEFAULT_THRESHOLDS",
    "calculate_daily_activity",
    "calculate_weekly_activity",
    "is_ticket_completed",
    "productivity_level",
    "ticket_activity_ms",
]
