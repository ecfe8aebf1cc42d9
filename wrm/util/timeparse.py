# wrm/util/timeparse.py
from __future__ import annotations

import datetime as dt
import re
from typing import Optional

from .tz import resolve_tz, to_epoch_ms

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_date_yyyy_mm_dd(s: str) -> dt.date:
    return dt.datetime.strptime(s.strip(), "%Y-%m-%d").date()


def parse_instant_ms(s: str, tz: Optional[str] = "local") -> int:
    """Parse a CLI instant into epoch ms.

    Accepted forms:
      - integer epoch milliseconds ("1735689600000")
      - YYYY-MM-DD (midnight in `tz`)
      - ISO-8601 datetime, with or without offset ("2025-01-01T10:00",
        "2025-01-01T10:00:00Z", "2025-01-01T10:00+02:00"); naive values are
        wall-clock time in `tz`
    """
    raw = str(s).strip()
    if not raw:
        raise ValueError("empty timestamp")

    if raw.lstrip("-").isdigit():
        return int(raw)

    tzinfo = resolve_tz(tz)
    if _DATE_RE.match(raw):
        d = parse_date_yyyy_mm_dd(raw)
        return to_epoch_ms(dt.datetime(d.year, d.month, d.day), tzinfo)

    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"
    try:
        value = dt.datetime.fromisoformat(raw)
    except ValueError as ex:
        raise ValueError(f"Invalid timestamp: {s!r}") from ex
    return to_epoch_ms(value, tzinfo)


def format_ms(ms: int, tz: Optional[str] = "local") -> str:
    """ISO-8601 rendering of epoch ms in `tz` (minute precision)."""
    tzinfo = resolve_tz(tz)
    return dt.datetime.fromtimestamp(int(ms) / 1000.0, tz=tzinfo).isoformat(timespec="minutes")
