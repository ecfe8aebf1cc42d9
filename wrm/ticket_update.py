# wrm/ticket_update.py
from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass
from typing import Optional

from .config import MIN_DURATION_MIN, SNAP_MIN
from .model import MIN_MS, Ticket


@dataclass(frozen=True)
class TicketUpdate:
    """Partial update produced by a gesture; None fields keep the ticket's value."""

    new_start_ms: Optional[int] = None
    new_end_ms: Optional[int] = None
    new_lane: Optional[int] = None


def snap_ms(ms: float, snap_min: int = SNAP_MIN) -> int:
    """Round to the nearest snap_min grid point; ties go to the later point.

    snap_min <= 0 disables the grid and only rounds to whole milliseconds.
    """
    if snap_min <= 0:
        return int(math.floor(ms + 0.5))
    snap = int(snap_min) * MIN_MS
    return int(math.floor(ms / snap + 0.5)) * snap


def apply_update(
    ticket: Ticket,
    update: Optional[TicketUpdate] = None,
    *,
    snap_min: int = SNAP_MIN,
    min_duration_min: int = MIN_DURATION_MIN,
) -> Ticket:
    """Apply a partial time/lane update and coerce the result into a valid range.

    Order: merge fields, enforce the minimum duration, snap start and end
    independently, then re-extend the end if snapping collapsed the range.
    Never raises for out-of-range input; the returned ticket always satisfies
    end - start >= min_duration.
    """
    upd = update or TicketUpdate()
    min_dur = max(1, int(min_duration_min)) * MIN_MS

    start = ticket.start_ms if upd.new_start_ms is None else upd.new_start_ms
    end = ticket.end_ms if upd.new_end_ms is None else upd.new_end_ms
    lane = max(0, int(ticket.lane if upd.new_lane is None else upd.new_lane))

    if end - start < min_dur:
        end = start + min_dur

    snapped_start = snap_ms(start, snap_min)
    snapped_end = snap_ms(end, snap_min)

    if snapped_end - snapped_start < min_dur:
        snapped_end = snapped_start + min_dur

    return dataclasses.replace(ticket, start_ms=snapped_start, end_ms=snapped_end, lane=lane)


def snap_ticket(ticket: Ticket, *, snap_min: int = SNAP_MIN, min_duration_min: int = MIN_DURATION_MIN) -> Ticket:
    """Equivalent to apply_update with no changes."""
    return apply_update(ticket, None, snap_min=snap_min, min_duration_min=min_duration_min)
