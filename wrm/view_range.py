# wrm/view_range.py
"""View-window calculation.

Window rules (evaluated in the configured timezone):
  - daily:   [midnight - 12h, midnight + 36h)  (12h yesterday + today + 12h tomorrow)
  - weekly:  [most recent Sunday 00:00, +7x24h)
  - monthly: [midnight - 90x24h, midnight + 90x24h)

Quick ranges follow calendar days instead of fixed spans, so "this-month"
always ends on the first of the next month.
"""

from __future__ import annotations

import datetime as dt
from typing import Optional

from .model import DAY_MS, HOUR_MS, VIEW_DAILY, VIEW_MONTHLY, VIEW_WEEKLY, DateWindow, normalize_view
from .util.tz import Instant, local_date, midnight_epoch_ms, resolve_tz, to_epoch_ms

DAILY_LEAD_MS = 12 * HOUR_MS
DAILY_TRAIL_MS = 36 * HOUR_MS
WEEK_MS = 7 * DAY_MS
MONTHLY_HALF_SPAN_MS = 90 * DAY_MS

QUICK_RANGES = (
    "today",
    "this-week",
    "this-month",
    "last-7-days",
    "last-30-days",
    "next-7-days",
    "next-30-days",
)


def local_midnight_ms(anchor: Instant, tz: Optional[str] = "local") -> int:
    tzinfo = resolve_tz(tz)
    ms = to_epoch_ms(anchor, tzinfo)
    return midnight_epoch_ms(local_date(ms, tzinfo), tzinfo)


def _sunday_on_or_before(d: dt.date) -> dt.date:
    # date.weekday(): Monday=0 .. Sunday=6
    return d - dt.timedelta(days=(d.weekday() + 1) % 7)


def week_start_ms(anchor: Instant, tz: Optional[str] = "local") -> int:
    """Midnight of the most recent Sunday (the anchor's own day if it is a Sunday)."""
    tzinfo = resolve_tz(tz)
    ms = to_epoch_ms(anchor, tzinfo)
    return midnight_epoch_ms(_sunday_on_or_before(local_date(ms, tzinfo)), tzinfo)


def compute_range(view: str, anchor: Instant, *, tz: Optional[str] = "local") -> DateWindow:
    """Map a view mode and anchor instant to the window it renders."""
    v = normalize_view(view)

    if v == VIEW_DAILY:
        midnight = local_midnight_ms(anchor, tz)
        return DateWindow(start_ms=midnight - DAILY_LEAD_MS, end_ms=midnight + DAILY_TRAIL_MS)

    if v == VIEW_WEEKLY:
        start = week_start_ms(anchor, tz)
        return DateWindow(start_ms=start, end_ms=start + WEEK_MS)

    if v == VIEW_MONTHLY:
        midnight = local_midnight_ms(anchor, tz)
        return DateWindow(start_ms=midnight - MONTHLY_HALF_SPAN_MS, end_ms=midnight + MONTHLY_HALF_SPAN_MS)

    raise AssertionError(f"unhandled view {v!r}")  # pragma: no cover


def shift_window(window: DateWindow, steps: int) -> DateWindow:
    """Move a window by whole multiples of its own span (negative = back)."""
    delta = window.span_ms * int(steps)
    return DateWindow(start_ms=window.start_ms + delta, end_ms=window.end_ms + delta)


def quick_range(name: str, now: Instant, *, tz: Optional[str] = "local") -> DateWindow:
    key = str(name or "").strip().lower()
    if key not in QUICK_RANGES:
        raise ValueError(f"Unknown quick range: {name!r} (expected one of {', '.join(QUICK_RANGES)})")

    tzinfo = resolve_tz(tz)
    today = local_date(to_epoch_ms(now, tzinfo), tzinfo)

    def _midnight(days: int = 0, base: Optional[dt.date] = None) -> int:
        d = (base or today) + dt.timedelta(days=days)
        return midnight_epoch_ms(d, tzinfo)

    if key == "today":
        return DateWindow(_midnight(0), _midnight(1))
    if key == "this-week":
        sunday = _sunday_on_or_before(today)
        return DateWindow(_midnight(0, sunday), _midnight(7, sunday))
    if key == "this-month":
        first = today.replace(day=1)
        nxt = (first + dt.timedelta(days=32)).replace(day=1)
        return DateWindow(midnight_epoch_ms(first, tzinfo), midnight_epoch_ms(nxt, tzinfo))
    if key == "last-7-days":
        return DateWindow(_midnight(-7), _midnight(0))
    if key == "last-30-days":
        return DateWindow(_midnight(-30), _midnight(0))
    if key == "next-7-days":
        return DateWindow(_midnight(0), _midnight(7))
    # next-30-days
    return DateWindow(_midnight(0), _midnight(30))
