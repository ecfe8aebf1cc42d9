import unittest

from wrm.drag import (
    DRAG_MOVE,
    DRAG_RESIZE_END,
    DRAG_RESIZE_START,
    begin_drag,
    detect_drag_type,
    drag_to,
)
from wrm.model import Ticket

BASE = 1704067200000  # 2024-01-01T00:00:00Z
M = 60000
H = 60 * M
PX = 2.0  # ticket 10:00-12:00 sits at x=1200..1440


def _ticket() -> Ticket:
    return Ticket(id="ticket-1", start_ms=BASE + 10 * H, end_ms=BASE + 12 * H, lane=0, title="Test Ticket 1")


class TestDragTypeContract(unittest.TestCase):
    def test_handles_and_body(self) -> None:
        self.assertEqual(detect_drag_type(1205, 1200, 1440), DRAG_RESIZE_START)
        self.assertEqual(detect_drag_type(1435, 1200, 1440), DRAG_RESIZE_END)
        self.assertEqual(detect_drag_type(1220, 1200, 1440), DRAG_MOVE)

    def test_begin_drag_captures_original_bounds(self) -> None:
        t = _ticket()
        d = begin_drag(t, 1220, 100, window_start_ms=BASE, px_per_min=PX)
        self.assertEqual(d.ticket_id, "ticket-1")
        self.assertEqual(d.drag_type, DRAG_MOVE)
        self.assertEqual(d.original_start_ms, t.start_ms)
        self.assertEqual(d.original_end_ms, t.end_ms)
        self.assertEqual(d.start_time_ms, BASE + 610 * M)


class TestDragToContract(unittest.TestCase):
    def test_move_shifts_both_bounds_and_changes_lane(self) -> None:
        t = _ticket()
        d = begin_drag(t, 1220, 100, window_start_ms=BASE, px_per_min=PX)
        out = drag_to(d, t, 1320, 150, window_start_ms=BASE, px_per_min=PX)
        # +100px = +50min, snapped to the 15-minute grid
        self.assertEqual(out.start_ms, BASE + 10 * H + 45 * M)
        self.assertEqual(out.end_ms, BASE + 12 * H + 45 * M)
        self.assertEqual(out.lane, 1)

    def test_resize_start_keeps_end_and_lane(self) -> None:
        t = _ticket()
        d = begin_drag(t, 1205, 100, window_start_ms=BASE, px_per_min=PX)
        out = drag_to(d, t, 1305, 400, window_start_ms=BASE, px_per_min=PX)
        self.assertEqual(out.start_ms, BASE + 10 * H + 45 * M)
        self.assertEqual(out.end_ms, t.end_ms)
        self.assertEqual(out.lane, 0)

    def test_resize_start_cannot_cross_the_end(self) -> None:
        t = _ticket()
        d = begin_drag(t, 1205, 100, window_start_ms=BASE, px_per_min=PX)
        out = drag_to(d, t, 1205 + 2000, 100, window_start_ms=BASE, px_per_min=PX)
        self.assertEqual(out.start_ms, BASE + 11 * H + 45 * M)
        self.assertEqual(out.end_ms, t.end_ms)

    def test_resize_end_is_clamped_to_minimum_duration(self) -> None:
        t = _ticket()
        d = begin_drag(t, 1435, 100, window_start_ms=BASE, px_per_min=PX)
        out = drag_to(d, t, 1035, 100, window_start_ms=BASE, px_per_min=PX)
        self.assertEqual(out.start_ms, t.start_ms)
        self.assertEqual(out.end_ms, t.start_ms + 15 * M)

    def test_repeated_moves_measure_from_origin(self) -> None:
        t = _ticket()
        d = begin_drag(t, 1220, 100, window_start_ms=BASE, px_per_min=PX)
        first = drag_to(d, t, 1320, 100, window_start_ms=BASE, px_per_min=PX)
        second = drag_to(d, first, 1320, 100, window_start_ms=BASE, px_per_min=PX)
        self.assertEqual(first, second)

    def test_drag_state_must_match_ticket(self) -> None:
        t = _ticket()
        d = begin_drag(t, 1220, 100, window_start_ms=BASE, px_per_min=PX)
        other = Ticket(id="ticket-2", start_ms=BASE, end_ms=BASE + H)
        with self.assertRaises(ValueError):
            drag_to(d, other, 1300, 100, window_start_ms=BASE, px_per_min=PX)


if __name__ == "__main__":
    unittest.main(verbosity=2)
