# wrm/util/duration.py
from __future__ import annotations

from typing import Dict, List, Union

MIN_MS = 60_000


def format_duration(duration_ms: int) -> str:
    """Compact form: 45m, 2h, 1h 30m."""
    total_min = max(0, int(duration_ms)) // MIN_MS
    hours, minutes = divmod(total_min, 60)
    if hours == 0:
        return f"{minutes}m"
    if minutes == 0:
        return f"{hours}h"
    return f"{hours}h {minutes}m"


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}" if n == 1 else f"{n} {unit}s"


def format_detailed_duration(duration_ms: int) -> str:
    total_min = max(0, int(duration_ms)) // MIN_MS
    total_hours, minutes = divmod(total_min, 60)
    days, hours = divmod(total_hours, 24)

    parts: List[str] = []
    if days > 0:
        parts.append(_plural(days, "day"))
    if hours > 0:
        parts.append(_plural(hours, "hour"))
    if minutes > 0:
        parts.append(_plural(minutes, "minute"))

    if not parts:
        return "0 minutes"
    return ", ".join(parts)


def describe_span(start_ms: int, end_ms: int) -> Dict[str, Union[int, str]]:
    span = int(end_ms) - int(start_ms)
    return {
        "milliseconds": span,
        "formatted": format_duration(span),
        "detailed": format_detailed_duration(span),
    }
