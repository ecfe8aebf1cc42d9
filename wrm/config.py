# wrm/config.py
from __future__ import annotations

import math
import os
from typing import Any, Dict, Mapping, Optional

from .util.tz import normalize_tz_name, resolve_tz

TimelineConfig = Dict[str, Any]

SNAP_MIN = 15
MIN_DURATION_MIN = 15

TICKET_HEIGHT = 48
LANE_HEIGHT = 56  # ticket height + 8px margin
HEADER_HEIGHT = 60
MIN_TICKET_WIDTH_PX = 20
RESIZE_HANDLE_PX = 12
DEFAULT_PX_PER_MIN = 2.0

DEFAULT_CONFIG: TimelineConfig = {
    "tz": "local",
    "snap_min": SNAP_MIN,
    "min_duration_min": MIN_DURATION_MIN,
    "px_per_min": DEFAULT_PX_PER_MIN,
    "lane_height": LANE_HEIGHT,
    "header_height": HEADER_HEIGHT,
    "ticket_height": TICKET_HEIGHT,
    "min_ticket_width_px": MIN_TICKET_WIDTH_PX,
    "resize_handle_px": RESIZE_HANDLE_PX,
}

_INT_KEYS = (
    "snap_min",
    "min_duration_min",
    "lane_height",
    "header_height",
    "ticket_height",
    "min_ticket_width_px",
    "resize_handle_px",
)

_ENV_KEYS = {
    "WRM_TZ": "tz",
    "WRM_SNAP_MIN": "snap_min",
    "WRM_PX_PER_MIN": "px_per_min",
}


def _positive_int(key: str, value: Any) -> int:
    try:
        n = int(value)
    except (TypeError, ValueError) as ex:
        raise ValueError(f"config {key} must be an integer, got {value!r}") from ex
    if n <= 0:
        raise ValueError(f"config {key} must be > 0, got {n}")
    return n


def _positive_float(key: str, value: Any) -> float:
    try:
        f = float(value)
    except (TypeError, ValueError) as ex:
        raise ValueError(f"config {key} must be a number, got {value!r}") from ex
    if not math.isfinite(f) or f <= 0:
        raise ValueError(f"config {key} must be a finite number > 0, got {value!r}")
    return f


def load_config(
    cfg: Optional[Mapping[str, Any]] = None,
    env: Optional[Mapping[str, str]] = None,
) -> TimelineConfig:
    """Merge defaults, environment overrides (WRM_*) and explicit cfg.

    Precedence: cfg > env > defaults. Unknown keys in cfg are kept as-is.
    Raises ValueError for non-positive or non-numeric values and for
    unresolvable timezones.
    """
    out: TimelineConfig = dict(DEFAULT_CONFIG)

    env_map = os.environ if env is None else env
    for env_key, cfg_key in _ENV_KEYS.items():
        v = env_map.get(env_key)
        if v is not None and str(v).strip():
            out[cfg_key] = str(v).strip()

    if cfg:
        for k, v in cfg.items():
            if v is not None:
                out[k] = v

    for k in _INT_KEYS:
        out[k] = _positive_int(k, out[k])
    out["px_per_min"] = _positive_float("px_per_min", out["px_per_min"])

    out["tz"] = normalize_tz_name(out.get("tz"))
    resolve_tz(out["tz"])
    return out
