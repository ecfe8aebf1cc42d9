# wrm/snapshot.py
"""JSON snapshots of TimelineState for the external store.

Shape (schema_version 1):
  {
    "schema_version": 1,
    "current_view": "daily",
    "window": {"start_ms": ..., "end_ms": ...},
    "tz": "UTC",
    "selective_loading_enabled": true,
    "prefetch_enabled": true,
    "loaded_ranges": [{"start_ms": ..., "end_ms": ...}, ...],
    "heat_map_enabled": true,
    "selected_date_ms": null,
    "activity_cache_version": 0,
    "tickets": [{"id": ..., "start_ms": ..., "end_ms": ..., "lane": 0, ...}, ...],
    "selected_ticket_id": null
  }
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from .model import DateWindow, Ticket, normalize_view
from .state import TimelineState
from .util.tz import normalize_tz_name

try:
    import orjson  # type: ignore
except ImportError:  # pragma: no cover
    orjson = None  # type: ignore

SNAPSHOT_SCHEMA_VERSION = 1

JsonDict = Dict[str, Any]


class SnapshotError(ValueError):
    """Raised when a snapshot cannot be turned back into a TimelineState."""


def _window_to_dict(w: DateWindow) -> JsonDict:
    return {"start_ms": w.start_ms, "end_ms": w.end_ms}


def ticket_to_dict(t: Ticket) -> JsonDict:
    return {
        "id": t.id,
        "start_ms": t.start_ms,
        "end_ms": t.end_ms,
        "lane": t.lane,
        "title": t.title,
        "created_at_ms": t.created_at_ms,
        "last_interaction_ms": t.last_interaction_ms,
        "raw": dict(t.raw),
    }


def state_to_dict(state: TimelineState) -> JsonDict:
    return {
        "schema_version": SNAPSHOT_SCHEMA_VERSION,
        "current_view": state.current_view,
        "window": _window_to_dict(state.window),
        "tz": state.tz,
        "selective_loading_enabled": state.selective_loading_enabled,
        "prefetch_enabled": state.prefetch_enabled,
        "loaded_ranges": [_window_to_dict(r) for r in state.loaded_ranges],
        "heat_map_enabled": state.heat_map_enabled,
        "selected_date_ms": state.selected_date_ms,
        "activity_cache_version": state.activity_cache_version,
        "tickets": [ticket_to_dict(t) for t in state.tickets],
        "selected_ticket_id": state.selected_ticket_id,
    }


def _req_int(d: JsonDict, key: str, label: str) -> int:
    v = d.get(key)
    if isinstance(v, bool) or not isinstance(v, int):
        raise SnapshotError(f"{label}.{key} must be int")
    return v


def _opt_int(d: JsonDict, key: str, label: str) -> Optional[int]:
    if d.get(key) is None:
        return None
    return _req_int(d, key, label)


def _window_from_dict(d: Any, label: str) -> DateWindow:
    if not isinstance(d, dict):
        raise SnapshotError(f"{label} must be object")
    return DateWindow(start_ms=_req_int(d, "start_ms", label), end_ms=_req_int(d, "end_ms", label))


def ticket_from_dict(d: Any, label: str = "ticket") -> Ticket:
    if not isinstance(d, dict):
        raise SnapshotError(f"{label} must be object")
    tid = d.get("id")
    if not isinstance(tid, str) or not tid:
        raise SnapshotError(f"{label}.id must be non-empty string")
    raw = d.get("raw") or {}
    if not isinstance(raw, dict):
        raise SnapshotError(f"{label}.raw must be object")
    return Ticket(
        id=tid,
        start_ms=_req_int(d, "start_ms", label),
        end_ms=_req_int(d, "end_ms", label),
        lane=_opt_int(d, "lane", label) or 0,
        title=str(d.get("title") or ""),
        created_at_ms=_opt_int(d, "created_at_ms", label),
        last_interaction_ms=_opt_int(d, "last_interaction_ms", label),
        raw=dict(raw),
    )


def state_from_dict(d: Any) -> TimelineState:
    if not isinstance(d, dict):
        raise SnapshotError(f"snapshot must be object, got {type(d).__name__}")

    ver = d.get("schema_version")
    if ver != SNAPSHOT_SCHEMA_VERSION:
        raise SnapshotError(f"Unsupported snapshot schema_version: {ver!r} (expected {SNAPSHOT_SCHEMA_VERSION})")

    try:
        view = normalize_view(d.get("current_view"))
    except ValueError as ex:
        raise SnapshotError(str(ex)) from ex

    ranges = d.get("loaded_ranges") or []
    tickets = d.get("tickets") or []
    if not isinstance(ranges, list):
        raise SnapshotError("loaded_ranges must be list")
    if not isinstance(tickets, list):
        raise SnapshotError("tickets must be list")

    selected = d.get("selected_ticket_id")
    if selected is not None and not isinstance(selected, str):
        raise SnapshotError("selected_ticket_id must be string or null")

    return TimelineState(
        current_view=view,
        window=_window_from_dict(d.get("window"), "window"),
        tz=normalize_tz_name(d.get("tz")),
        selective_loading_enabled=bool(d.get("selective_loading_enabled", True)),
        prefetch_enabled=bool(d.get("prefetch_enabled", True)),
        loaded_ranges=tuple(_window_from_dict(r, f"loaded_ranges[{i}]") for i, r in enumerate(ranges)),
        heat_map_enabled=bool(d.get("heat_map_enabled", True)),
        selected_date_ms=_opt_int(d, "selected_date_ms", "snapshot"),
        activity_cache_version=_opt_int(d, "activity_cache_version", "snapshot") or 0,
        tickets=tuple(ticket_from_dict(t, f"tickets[{i}]") for i, t in enumerate(tickets)),
        selected_ticket_id=selected,
    )


def dumps(state: TimelineState) -> str:
    data = state_to_dict(state)
    if orjson is not None:
        return orjson.dumps(data).decode("utf-8")
    return json.dumps(data, ensure_ascii=False, separators=(",", ":"))


def loads(text: str) -> TimelineState:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as ex:
        raise SnapshotError(f"snapshot is not valid JSON: {ex}") from ex
    return state_from_dict(data)
