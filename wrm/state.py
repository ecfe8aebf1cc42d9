# wrm/state.py
"""Timeline state container.

TimelineState is immutable; every reducer below takes a state and returns a
new one. TimelineStore is the single mutable holder that consumers share:
it applies reducers via dispatch() and notifies subscribers afterwards.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Tuple

from .config import MIN_DURATION_MIN, SNAP_MIN
from .model import VIEW_DAILY, DateWindow, Ticket, normalize_view
from .ticket_update import TicketUpdate, apply_update
from .util.tz import Instant, normalize_tz_name, now_ms, resolve_tz, to_epoch_ms
from .view_range import compute_range, quick_range, shift_window

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimelineState:
    current_view: str
    window: DateWindow
    tz: str = "local"

    selective_loading_enabled: bool = True
    prefetch_enabled: bool = True
    loaded_ranges: Tuple[DateWindow, ...] = ()

    heat_map_enabled: bool = True
    selected_date_ms: Optional[int] = None
    activity_cache_version: int = 0

    tickets: Tuple[Ticket, ...] = ()
    selected_ticket_id: Optional[str] = None

    def ticket(self, ticket_id: str) -> Optional[Ticket]:
        for t in self.tickets:
            if t.id == ticket_id:
                return t
        return None


def _anchor_ms(anchor: Optional[Instant], tz: str) -> int:
    if anchor is None:
        return now_ms()
    return to_epoch_ms(anchor, resolve_tz(tz))


def initial_state(
    anchor: Optional[Instant] = None,
    *,
    view: str = VIEW_DAILY,
    tz: Optional[str] = "local",
) -> TimelineState:
    tz_name = normalize_tz_name(tz)
    v = normalize_view(view)
    window = compute_range(v, _anchor_ms(anchor, tz_name), tz=tz_name)
    return TimelineState(current_view=v, window=window, tz=tz_name)


# --- view / window -----------------------------------------------------------


def set_view(state: TimelineState, view: str, anchor: Optional[Instant] = None) -> TimelineState:
    """Switch view and recompute the window around anchor (default: now)."""
    v = normalize_view(view)
    window = compute_range(v, _anchor_ms(anchor, state.tz), tz=state.tz)
    return dataclasses.replace(state, current_view=v, window=window)


def set_date_range(state: TimelineState, start_ms: int, end_ms: int) -> TimelineState:
    # Manual override: stored verbatim, no calculator involved.
    return dataclasses.replace(state, window=DateWindow(start_ms=int(start_ms), end_ms=int(end_ms)))


def navigate_previous(state: TimelineState) -> TimelineState:
    return dataclasses.replace(state, window=shift_window(state.window, -1))


def navigate_next(state: TimelineState) -> TimelineState:
    return dataclasses.replace(state, window=shift_window(state.window, +1))


def set_quick_range(state: TimelineState, name: str, now: Optional[Instant] = None) -> TimelineState:
    window = quick_range(name, _anchor_ms(now, state.tz), tz=state.tz)
    return dataclasses.replace(state, window=window)


# --- heat map ----------------------------------------------------------------


def set_heat_map_enabled(state: TimelineState, enabled: bool) -> TimelineState:
    return dataclasses.replace(state, heat_map_enabled=bool(enabled))


def navigate_to_date(state: TimelineState, target: Instant) -> TimelineState:
    """Select a date (heat map click) and re-center the current view on it."""
    target_ms = to_epoch_ms(target, resolve_tz(state.tz))
    window = compute_range(state.current_view, target_ms, tz=state.tz)
    return dataclasses.replace(state, selected_date_ms=target_ms, window=window)


def clear_date_selection(state: TimelineState) -> TimelineState:
    return dataclasses.replace(state, selected_date_ms=None)


def invalidate_activity_cache(state: TimelineState) -> TimelineState:
    return dataclasses.replace(state, activity_cache_version=state.activity_cache_version + 1)


# --- selective loading -------------------------------------------------------


def set_selective_loading_enabled(state: TimelineState, enabled: bool) -> TimelineState:
    return dataclasses.replace(state, selective_loading_enabled=bool(enabled))


def set_prefetch_enabled(state: TimelineState, enabled: bool) -> TimelineState:
    return dataclasses.replace(state, prefetch_enabled=bool(enabled))


def add_loaded_range(state: TimelineState, window: DateWindow) -> TimelineState:
    return dataclasses.replace(state, loaded_ranges=state.loaded_ranges + (window,))


def clear_loaded_ranges(state: TimelineState) -> TimelineState:
    return dataclasses.replace(state, loaded_ranges=())


# --- tickets -----------------------------------------------------------------


def set_tickets(state: TimelineState, tickets: Iterable[Ticket]) -> TimelineState:
    return dataclasses.replace(state, tickets=tuple(tickets))


def add_ticket(state: TimelineState, ticket: Ticket) -> TimelineState:
    """Append a ticket; an existing ticket with the same id is replaced in place."""
    if state.ticket(ticket.id) is not None:
        return dataclasses.replace(
            state, tickets=tuple(ticket if t.id == ticket.id else t for t in state.tickets)
        )
    return dataclasses.replace(state, tickets=state.tickets + (ticket,))


def update_ticket(
    state: TimelineState,
    ticket_id: str,
    update: Optional[TicketUpdate] = None,
    *,
    snap_min: int = SNAP_MIN,
    min_duration_min: int = MIN_DURATION_MIN,
) -> TimelineState:
    """Route a time/lane update through apply_update. Unknown ids are a no-op."""
    current = state.ticket(ticket_id)
    if current is None:
        logger.debug("update_ticket: unknown ticket %s", ticket_id)
        return state
    updated = apply_update(current, update, snap_min=snap_min, min_duration_min=min_duration_min)
    return dataclasses.replace(
        state, tickets=tuple(updated if t.id == ticket_id else t for t in state.tickets)
    )


def delete_ticket(state: TimelineState, ticket_id: str) -> TimelineState:
    tickets = tuple(t for t in state.tickets if t.id != ticket_id)
    selected = None if state.selected_ticket_id == ticket_id else state.selected_ticket_id
    return dataclasses.replace(state, tickets=tickets, selected_ticket_id=selected)


def select_ticket(state: TimelineState, ticket_id: Optional[str]) -> TimelineState:
    return dataclasses.replace(state, selected_ticket_id=ticket_id)


# --- store -------------------------------------------------------------------

Reducer = Callable[..., TimelineState]
Listener = Callable[[TimelineState], None]


class TimelineStore:
    """Holds the current TimelineState and serializes updates to it."""

    def __init__(self, state: TimelineState) -> None:
        self._state = state
        self._listeners: List[Listener] = []

    @property
    def state(self) -> TimelineState:
        return self._state

    def dispatch(self, reducer: Reducer, *args: Any, **kwargs: Any) -> TimelineState:
        new_state = reducer(self._state, *args, **kwargs)
        if not isinstance(new_state, TimelineState):
            raise TypeError(
                f"reducer {getattr(reducer, '__name__', reducer)!r} returned {type(new_state).__name__}, "
                "expected TimelineState"
            )
        name = getattr(reducer, "__name__", repr(reducer))
        if new_state is self._state:
            logger.debug("dispatch %s: no change", name)
            return new_state

        self._state = new_state
        logger.debug(
            "dispatch %s: view=%s window=[%d, %d) tickets=%d",
            name,
            new_state.current_view,
            new_state.window.start_ms,
            new_state.window.end_ms,
            len(new_state.tickets),
        )
        for listener in list(self._listeners):
            listener(new_state)
        return new_state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe
