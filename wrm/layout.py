# wrm/layout.py
from __future__ import annotations

import datetime as dt
from typing import Callable, Iterable, List, Optional, Tuple

from .config import MIN_TICKET_WIDTH_PX
from .model import (
    HOUR_MS,
    VIEW_DAILY,
    VIEW_WEEKLY,
    Ticket,
    TicketWithPosition,
    TimeMarker,
    normalize_view,
)
from .pixels import time_ranges_overlap, time_to_pixels
from .util.tz import from_epoch_ms, local_date, midnight_epoch_ms, resolve_tz


def calculate_ticket_positions(
    tickets: Iterable[Ticket],
    window_start_ms: int,
    px_per_min: float,
    *,
    assign_lanes: bool = False,
    min_width_px: float = MIN_TICKET_WIDTH_PX,
) -> List[TicketWithPosition]:
    """Pixel extents for each ticket, ordered by start time.

    With assign_lanes=True stored lanes are ignored and each ticket takes the
    lowest lane that has no overlapping ticket placed before it.
    """
    ordered = sorted(tickets, key=lambda t: (t.start_ms, t.end_ms, t.id))
    placed: List[TicketWithPosition] = []

    for t in ordered:
        start_x = time_to_pixels(t.start_ms, window_start_ms, px_per_min)
        end_x = time_to_pixels(t.end_ms, window_start_ms, px_per_min)
        width = max(end_x - start_x, float(min_width_px))

        lane = max(0, t.lane)
        if assign_lanes:
            lane = 0
            while any(
                p.lane == lane and time_ranges_overlap(t.start_ms, t.end_ms, p.ticket.start_ms, p.ticket.end_ms)
                for p in placed
            ):
                lane += 1

        placed.append(TicketWithPosition(ticket=t, start_x=start_x, end_x=end_x, width=width, lane=lane))

    return placed


def _day_boundaries(start_ms: int, end_ms: int, tzinfo: dt.tzinfo, step_days: int = 1,
                    first: Optional[dt.date] = None) -> List[int]:
    out: List[int] = []
    d = first or local_date(start_ms, tzinfo)
    while True:
        ms = midnight_epoch_ms(d, tzinfo)
        if ms > end_ms:
            break
        if ms >= start_ms:
            out.append(ms)
        d = d + dt.timedelta(days=step_days)
    return out


def _hour_boundaries(start_ms: int, end_ms: int, tzinfo: dt.tzinfo) -> List[int]:
    floor = from_epoch_ms(start_ms, tzinfo).replace(minute=0, second=0, microsecond=0)
    first = int(floor.timestamp() * 1000)
    if first < start_ms:
        first += HOUR_MS
    return list(range(first, end_ms + 1, HOUR_MS))


def _sundays(start_ms: int, end_ms: int, tzinfo: dt.tzinfo) -> List[int]:
    d = local_date(start_ms, tzinfo)
    d = d - dt.timedelta(days=(d.weekday() + 1) % 7)
    return _day_boundaries(start_ms, end_ms, tzinfo, step_days=7, first=d)


def _month_starts(start_ms: int, end_ms: int, tzinfo: dt.tzinfo) -> List[int]:
    out: List[int] = []
    d = local_date(start_ms, tzinfo).replace(day=1)
    while True:
        ms = midnight_epoch_ms(d, tzinfo)
        if ms > end_ms:
            break
        if ms >= start_ms:
            out.append(ms)
        d = (d + dt.timedelta(days=32)).replace(day=1)
    return out


Formatter = Callable[[dt.datetime], str]


def _scale_rules(view: str, tzinfo: dt.tzinfo, start_ms: int, end_ms: int, px_per_min: float
                 ) -> Tuple[List[int], Formatter, List[int], Formatter, str]:
    if view == VIEW_DAILY:
        minors = _hour_boundaries(start_ms, end_ms, tzinfo) if px_per_min >= 0.5 else []
        return (
            _day_boundaries(start_ms, end_ms, tzinfo),
            lambda d: d.strftime("%a %d"),
            minors,
            lambda d: d.strftime("%Hh"),
            "Now (%H:%M)",
        )
    if view == VIEW_WEEKLY:
        minors = _day_boundaries(start_ms, end_ms, tzinfo) if px_per_min >= 0.1 else []
        return (
            _sundays(start_ms, end_ms, tzinfo),
            lambda d: d.strftime("Week of %b %d"),
            minors,
            lambda d: d.strftime("%a %d"),
            "Now (%a %H:%M)",
        )
    minors = _sundays(start_ms, end_ms, tzinfo) if px_per_min >= 0.01 else []
    return (
        _month_starts(start_ms, end_ms, tzinfo),
        lambda d: d.strftime("%B %Y"),
        minors,
        lambda d: d.strftime("%b %d"),
        "Now (%b %d)",
    )


def generate_time_markers(
    start_ms: int,
    end_ms: int,
    view: str,
    px_per_min: float,
    *,
    now_ms: Optional[int] = None,
    tz: Optional[str] = "local",
) -> List[TimeMarker]:
    """Axis markers for [start_ms, end_ms], sorted by time.

    Minor markers that coincide with a major marker are dropped.
    """
    v = normalize_view(view)
    tzinfo = resolve_tz(tz)
    majors, major_fmt, minors, minor_fmt, now_fmt = _scale_rules(v, tzinfo, start_ms, end_ms, px_per_min)

    def _marker(ms: int, label: str, kind: str) -> TimeMarker:
        return TimeMarker(time_ms=ms, label=label, x=time_to_pixels(ms, start_ms, px_per_min), kind=kind)

    markers = [_marker(ms, major_fmt(from_epoch_ms(ms, tzinfo)), "major") for ms in majors]
    major_set = set(majors)
    markers.extend(
        _marker(ms, minor_fmt(from_epoch_ms(ms, tzinfo)), "minor") for ms in minors if ms not in major_set
    )

    if now_ms is not None and start_ms <= now_ms <= end_ms:
        markers.append(_marker(int(now_ms), from_epoch_ms(now_ms, tzinfo).strftime(now_fmt), "now"))

    markers.sort(key=lambda m: (m.time_ms, m.kind))
    return markers


__all__ = ["calculate_ticket_positions", "generate_time_markers"]
