"""wrm.api

Stable *library* entrypoint for the WRM timeline core.

Policy:
  - Only names listed in __all__ are considered public API.
  - Everything else is internal and may change without notice.
"""

from __future__ import annotations

from wrm.config import DEFAULT_CONFIG, load_config
from wrm.drag import begin_drag, detect_drag_type, drag_to, DragState
from wrm.heatmap import ActivityCache, ActivityData, calculate_daily_activity, calculate_weekly_activity
from wrm.layout import calculate_ticket_positions, generate_time_markers
from wrm.model import (
    DateWindow,
    Ticket,
    TicketWithPosition,
    TimeMarker,
    TIMELINE_VIEWS,
    VIEW_DAILY,
    VIEW_MONTHLY,
    VIEW_WEEKLY,
    normalize_view,
)
from wrm.pixels import lane_to_y, pixels_to_time, pointer_to_content_x, time_to_pixels, y_to_lane
from wrm.prefetch import adjacent_ranges, is_range_loaded, prefetch_plan, run_prefetch
from wrm.snapshot import SnapshotError, dumps, loads, state_from_dict, state_to_dict
from wrm.state import TimelineState, TimelineStore, initial_state
from wrm.ticket_state import calculate_ticket_state, ticket_state_info
from wrm.ticket_update import TicketUpdate, apply_update, snap_ms
from wrm.validate import TimelineStateError, assert_valid_state, validate_state
from wrm.view_range import compute_range, quick_range, shift_window


# --- Public API exports (locked by contract tests) ------------------------
# Keep changes intentional and reviewable.
_PUBLIC_EXPORTS = (
    "ActivityCache",
    "ActivityData",
    "DEFAULT_CONFIG",
    "DateWindow",
    "DragState",
    "SnapshotError",
    "TIMELINE_VIEWS",
    "Ticket",
    "TicketUpdate",
    "TicketWithPosition",
    "TimeMarker",
    "TimelineState",
    "TimelineStateError",
    "TimelineStore",
    "VIEW_DAILY",
    "VIEW_MONTHLY",
    "VIEW_WEEKLY",
    "adjacent_ranges",
    "apply_update",
    "assert_valid_state",
    "begin_drag",
    "calculate_daily_activity",
    "calculate_ticket_positions",
    "calculate_ticket_state",
    "calculate_weekly_activity",
    "compute_range",
    "detect_drag_type",
    "drag_to",
    "dumps",
    "generate_time_markers",
    "initial_state",
    "is_range_loaded",
    "lane_to_y",
    "load_config",
    "loads",
    "normalize_view",
    "pixels_to_time",
    "pointer_to_content_x",
    "prefetch_plan",
    "quick_range",
    "run_prefetch",
    "shift_window",
    "snap_ms",
    "state_from_dict",
    "state_to_dict",
    "ticket_state_info",
    "time_to_pixels",
    "validate_state",
    "y_to_lane",
)

__all__ = [n for n in _PUBLIC_EXPORTS if n in globals()]
# --- /Public API exports --------------------------------------------------
