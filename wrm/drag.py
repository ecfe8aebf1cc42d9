# wrm/drag.py
from __future__ import annotations

from dataclasses import dataclass

from .config import HEADER_HEIGHT, LANE_HEIGHT, MIN_DURATION_MIN, RESIZE_HANDLE_PX, SNAP_MIN
from .model import MIN_MS, Ticket
from .pixels import pixels_to_time, time_to_pixels, y_to_lane
from .ticket_update import TicketUpdate, apply_update

DRAG_MOVE = "move"
DRAG_RESIZE_START = "resize-start"
DRAG_RESIZE_END = "resize-end"


@dataclass(frozen=True)
class DragState:
    """Snapshot taken at pointer-down; coordinates are canvas (content) pixels."""

    ticket_id: str
    drag_type: str  # "move" | "resize-start" | "resize-end"
    start_x: float
    start_y: float
    start_time_ms: float
    original_start_ms: int
    original_end_ms: int
    original_lane: int


def detect_drag_type(
    content_x: float,
    ticket_start_x: float,
    ticket_end_x: float,
    handle_px: float = RESIZE_HANDLE_PX,
) -> str:
    rel = content_x - ticket_start_x
    width = ticket_end_x - ticket_start_x
    if rel <= handle_px:
        return DRAG_RESIZE_START
    if rel >= width - handle_px:
        return DRAG_RESIZE_END
    return DRAG_MOVE


def begin_drag(
    ticket: Ticket,
    content_x: float,
    content_y: float,
    *,
    window_start_ms: int,
    px_per_min: float,
    handle_px: float = RESIZE_HANDLE_PX,
) -> DragState:
    start_x = time_to_pixels(ticket.start_ms, window_start_ms, px_per_min)
    end_x = time_to_pixels(ticket.end_ms, window_start_ms, px_per_min)
    return DragState(
        ticket_id=ticket.id,
        drag_type=detect_drag_type(content_x, start_x, end_x, handle_px),
        start_x=content_x,
        start_y=content_y,
        start_time_ms=pixels_to_time(content_x, window_start_ms, px_per_min),
        original_start_ms=ticket.start_ms,
        original_end_ms=ticket.end_ms,
        original_lane=ticket.lane,
    )


def drag_to(
    drag: DragState,
    ticket: Ticket,
    content_x: float,
    content_y: float,
    *,
    window_start_ms: int,
    px_per_min: float,
    header_height: float = HEADER_HEIGHT,
    lane_height: float = LANE_HEIGHT,
    snap_min: int = SNAP_MIN,
    min_duration_min: int = MIN_DURATION_MIN,
) -> Ticket:
    """Ticket as it should look with the pointer at (content_x, content_y).

    The delta is always measured against the bounds captured by begin_drag, so
    repeated calls during one gesture do not accumulate rounding.
    """
    if drag.ticket_id != ticket.id:
        raise ValueError(f"drag state belongs to {drag.ticket_id!r}, not {ticket.id!r}")

    delta = pixels_to_time(content_x, window_start_ms, px_per_min) - drag.start_time_ms
    min_dur = int(min_duration_min) * MIN_MS
    lane = drag.original_lane

    if drag.drag_type == DRAG_MOVE:
        new_start = drag.original_start_ms + delta
        new_end = drag.original_end_ms + delta
        lane = y_to_lane(content_y, header_height, lane_height)
    elif drag.drag_type == DRAG_RESIZE_START:
        new_start = min(drag.original_start_ms + delta, drag.original_end_ms - min_dur)
        new_end = drag.original_end_ms
    elif drag.drag_type == DRAG_RESIZE_END:
        new_start = drag.original_start_ms
        new_end = max(drag.original_end_ms + delta, drag.original_start_ms + min_dur)
    else:
        raise ValueError(f"Unknown drag type: {drag.drag_type!r}")

    return apply_update(
        ticket,
        TicketUpdate(new_start_ms=new_start, new_end_ms=new_end, new_lane=lane),
        snap_min=snap_min,
        min_duration_min=min_duration_min,
    )
