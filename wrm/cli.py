from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from .config import load_config
from .layout import generate_time_markers
from .model import TIMELINE_VIEWS, DateWindow, Ticket
from .ticket_update import TicketUpdate, apply_update
from .util.duration import describe_span, format_duration
from .util.timeparse import format_ms, parse_instant_ms
from .util.tz import now_ms
from .view_range import QUICK_RANGES, compute_range, quick_range, shift_window

logger = logging.getLogger(__name__)


def _window_json(w: DateWindow, tz: str) -> Dict[str, Any]:
    return {
        "start_ms": w.start_ms,
        "end_ms": w.end_ms,
        "start": format_ms(w.start_ms, tz),
        "end": format_ms(w.end_ms, tz),
        "span": format_duration(w.span_ms),
    }


def _anchor(raw: Optional[str], tz: str) -> int:
    return parse_instant_ms(raw, tz) if raw else now_ms()


def _cmd_range(args: argparse.Namespace, cfg: Dict[str, Any]) -> Dict[str, Any]:
    tz = cfg["tz"]
    window = shift_window(compute_range(args.view, _anchor(args.anchor, tz), tz=tz), args.shift)
    return {"view": args.view, "tz": tz, "window": _window_json(window, tz)}


def _cmd_quick(args: argparse.Namespace, cfg: Dict[str, Any]) -> Dict[str, Any]:
    tz = cfg["tz"]
    window = quick_range(args.name, _anchor(args.now, tz), tz=tz)
    return {"range": args.name, "tz": tz, "window": _window_json(window, tz)}


def _cmd_snap(args: argparse.Namespace, cfg: Dict[str, Any]) -> Dict[str, Any]:
    tz = cfg["tz"]
    start = parse_instant_ms(args.start, tz)
    end = parse_instant_ms(args.end, tz)
    ticket = Ticket(id="cli", start_ms=start, end_ms=end, lane=max(0, args.lane))
    out = apply_update(
        ticket,
        TicketUpdate(),
        snap_min=cfg["snap_min"],
        min_duration_min=cfg["min_duration_min"],
    )
    return {
        "tz": tz,
        "input": _window_json(DateWindow(start, end), tz) if end > start else {"start_ms": start, "end_ms": end},
        "ticket": {"lane": out.lane, **_window_json(DateWindow(out.start_ms, out.end_ms), tz)},
        "duration": describe_span(out.start_ms, out.end_ms),
    }


def _cmd_markers(args: argparse.Namespace, cfg: Dict[str, Any]) -> Dict[str, Any]:
    tz = cfg["tz"]
    window = compute_range(args.view, _anchor(args.anchor, tz), tz=tz)
    now = parse_instant_ms(args.now, tz) if args.now else None
    markers = generate_time_markers(window.start_ms, window.end_ms, args.view, cfg["px_per_min"], now_ms=now, tz=tz)
    return {
        "view": args.view,
        "tz": tz,
        "window": _window_json(window, tz),
        "markers": [{"time_ms": m.time_ms, "label": m.label, "x": round(m.x, 3), "kind": m.kind} for m in markers],
    }


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="wrm", description="Timeline window, snapping and marker calculations.")
    ap.add_argument("--tz", default=None, help="Timezone for calendar rules (default: env WRM_TZ or 'local')")
    ap.add_argument("--snap", type=int, default=None, help="Snap grid in minutes (default: env WRM_SNAP_MIN or 15)")
    ap.add_argument("--min-duration", type=int, default=None, help="Minimum ticket duration in minutes (default: 15)")
    ap.add_argument("--px-per-min", type=float, default=None, help="Horizontal scale (default: env WRM_PX_PER_MIN or 2.0)")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")

    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("range", help="Window for a view around an anchor")
    p.add_argument("view", choices=TIMELINE_VIEWS)
    p.add_argument("--anchor", default=None, help="Epoch ms, YYYY-MM-DD or ISO datetime (default: now)")
    p.add_argument("--shift", type=int, default=0, help="Move the window by N spans (negative = back)")
    p.set_defaults(func=_cmd_range)

    p = sub.add_parser("quick", help="Named quick range")
    p.add_argument("name", choices=QUICK_RANGES)
    p.add_argument("--now", default=None, help="Reference instant (default: now)")
    p.set_defaults(func=_cmd_quick)

    p = sub.add_parser("snap", help="Apply duration floor and grid snapping to a ticket range")
    p.add_argument("start")
    p.add_argument("end")
    p.add_argument("--lane", type=int, default=0)
    p.set_defaults(func=_cmd_snap)

    p = sub.add_parser("markers", help="Time-axis markers for a view window")
    p.add_argument("view", choices=TIMELINE_VIEWS)
    p.add_argument("--anchor", default=None)
    p.add_argument("--now", default=None, help="Instant for the 'now' marker (default: none)")
    p.set_defaults(func=_cmd_markers)

    return ap


def main(argv: List[str] | None = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )

    try:
        cfg = load_config(
            {
                "tz": args.tz,
                "snap_min": args.snap,
                "min_duration_min": args.min_duration,
                "px_per_min": args.px_per_min,
            }
        )
        logger.debug("config: %s", cfg)
        result = args.func(args, cfg)
    except ValueError as e:
        raise SystemExit(f"wrm {args.command}: {e}")

    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
