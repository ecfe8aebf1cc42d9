"""State validation helpers (library-facing)."""

from __future__ import annotations

from typing import List

from .config import MIN_DURATION_MIN
from .model import MIN_MS, TIMELINE_VIEWS, DateWindow, Ticket
from .state import TimelineState
from .util.tz import resolve_tz


class TimelineStateError(ValueError):
    """Raised when a timeline state fails validation."""


def _require(cond: bool, msg: str, errs: List[str]) -> None:
    if not cond:
        errs.append(msg)


def _validate_window(window: object, label: str, errs: List[str]) -> None:
    if not isinstance(window, DateWindow):
        errs.append(f"{label} must be DateWindow")
        return
    _require(isinstance(window.start_ms, int), f"{label}.start_ms must be int", errs)
    _require(isinstance(window.end_ms, int), f"{label}.end_ms must be int", errs)
    _require(window.end_ms > window.start_ms, f"{label} must have end_ms > start_ms", errs)


def validate_ticket(ticket: object, *, min_duration_min: int = MIN_DURATION_MIN, label: str = "ticket") -> List[str]:
    errs: List[str] = []
    if not isinstance(ticket, Ticket):
        return [f"{label} must be Ticket"]

    _require(isinstance(ticket.id, str) and bool(ticket.id.strip()), f"{label}.id must be non-empty string", errs)
    _require(isinstance(ticket.lane, int) and ticket.lane >= 0, f"{label}.lane must be int >= 0", errs)
    if ticket.end_ms - ticket.start_ms < int(min_duration_min) * MIN_MS:
        errs.append(f"{label} must last at least {min_duration_min} minutes")
    return errs


def validate_state(state: object, *, min_duration_min: int = MIN_DURATION_MIN) -> List[str]:
    """Return a list of invariant violations (empty when valid)."""
    if not isinstance(state, TimelineState):
        return ["state must be TimelineState"]

    errs: List[str] = []
    _require(state.current_view in TIMELINE_VIEWS, f"current_view must be one of {TIMELINE_VIEWS}", errs)
    _validate_window(state.window, "window", errs)

    try:
        resolve_tz(state.tz)
    except ValueError as e:
        errs.append(f"tz: {e}")

    for i, r in enumerate(state.loaded_ranges):
        _validate_window(r, f"loaded_ranges[{i}]", errs)

    _require(state.activity_cache_version >= 0, "activity_cache_version must be >= 0", errs)

    seen: set[str] = set()
    for i, t in enumerate(state.tickets):
        errs.extend(validate_ticket(t, min_duration_min=min_duration_min, label=f"tickets[{i}]"))
        if isinstance(t, Ticket):
            if t.id in seen:
                errs.append(f"tickets[{i}].id duplicated: {t.id}")
            seen.add(t.id)

    if state.selected_ticket_id is not None:
        _require(state.selected_ticket_id in seen, f"selected_ticket_id not in tickets: {state.selected_ticket_id}", errs)

    return errs


def assert_valid_state(state: object, *, min_duration_min: int = MIN_DURATION_MIN) -> None:
    errs = validate_state(state, min_duration_min=min_duration_min)
    if errs:
        raise TimelineStateError("Invalid timeline state:\n- " + "\n- ".join(errs))
