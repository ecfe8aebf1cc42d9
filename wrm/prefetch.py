# wrm/prefetch.py
from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Tuple

from .model import DateWindow
from .state import TimelineState, TimelineStore, add_loaded_range
from .view_range import shift_window

logger = logging.getLogger(__name__)

Loader = Callable[[DateWindow], None]


def adjacent_ranges(window: DateWindow) -> Tuple[DateWindow, DateWindow]:
    """(previous, next) windows of the same span."""
    return shift_window(window, -1), shift_window(window, +1)


def is_range_loaded(loaded: Iterable[DateWindow], window: DateWindow) -> bool:
    # A range counts as loaded only when a single loaded range covers it.
    return any(r.start_ms <= window.start_ms and r.end_ms >= window.end_ms for r in loaded)


def prefetch_plan(state: TimelineState) -> List[DateWindow]:
    if not state.prefetch_enabled:
        return []
    return [r for r in adjacent_ranges(state.window) if not is_range_loaded(state.loaded_ranges, r)]


def run_prefetch(store: TimelineStore, loader: Loader) -> List[DateWindow]:
    """Load every planned range and record it; returns the ranges loaded.

    A failing loader is logged and skipped so the other side still loads.
    """
    done: List[DateWindow] = []
    for window in prefetch_plan(store.state):
        try:
            loader(window)
        except Exception as ex:
            logger.warning("prefetch of [%d, %d) failed: %s", window.start_ms, window.end_ms, ex)
            continue
        store.dispatch(add_loaded_range, window)
        done.append(window)
    return done
