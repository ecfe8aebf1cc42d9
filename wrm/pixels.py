# wrm/pixels.py
from __future__ import annotations

import math

from .config import HEADER_HEIGHT, LANE_HEIGHT
from .model import MIN_MS


def _check_scale(px_per_min: float) -> float:
    scale = float(px_per_min)
    if not scale > 0 or math.isinf(scale):
        raise ValueError(f"px_per_min must be a finite number > 0, got {px_per_min!r}")
    return scale


def time_to_pixels(time_ms: float, start_ms: float, px_per_min: float) -> float:
    """Horizontal offset of `time_ms` from the window start."""
    scale = _check_scale(px_per_min)
    return ((time_ms - start_ms) / MIN_MS) * scale


def pixels_to_time(pixels: float, start_ms: float, px_per_min: float) -> float:
    """Inverse of time_to_pixels (epoch ms, not rounded)."""
    scale = _check_scale(px_per_min)
    return start_ms + (pixels / scale) * MIN_MS


def pointer_to_content_x(client_x: float, container_left: float, scroll_left: float) -> float:
    """Viewport pointer x -> x within the scrollable canvas."""
    return client_x - container_left + scroll_left


def y_to_lane(y: float, header_height: float = HEADER_HEIGHT, lane_height: float = LANE_HEIGHT) -> int:
    if lane_height <= 0:
        raise ValueError(f"lane_height must be > 0, got {lane_height!r}")
    return max(0, math.floor((y - header_height) / lane_height))


def lane_to_y(lane: int, header_height: float = HEADER_HEIGHT, lane_height: float = LANE_HEIGHT) -> float:
    return header_height + lane * lane_height


def time_ranges_overlap(start1: int, end1: int, start2: int, end2: int) -> bool:
    # half-open: touching ranges do not overlap
    return start1 < end2 and start2 < end1
