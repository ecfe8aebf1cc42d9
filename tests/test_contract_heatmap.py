from __future__ import annotations

import datetime as dt
import unittest
from unittest import mock

from wrm import heatmap
from wrm.heatmap import (
    ActivityCache,
    calculate_daily_activity,
    calculate_weekly_activity,
    productivity_level,
    ticket_activity_ms,
)
from wrm.model import Ticket
from wrm.state import initial_state, invalidate_activity_cache, set_heat_map_enabled, set_tickets


def _ms(*args: int) -> int:
    return int(dt.datetime(*args, tzinfo=dt.timezone.utc).timestamp() * 1000)


NOW = _ms(2025, 1, 10, 12, 0)
CREATED = _ms(2025, 1, 1)


def _tickets():
    return [
        # confirmed on its own day
        Ticket(id="a", start_ms=_ms(2025, 1, 6, 9), end_ms=_ms(2025, 1, 6, 10),
               created_at_ms=CREATED, last_interaction_ms=_ms(2025, 1, 6, 10, 30)),
        # untouched, counted on its end day
        Ticket(id="b", start_ms=_ms(2025, 1, 6, 11), end_ms=_ms(2025, 1, 6, 12), created_at_ms=CREATED),
        Ticket(id="c", start_ms=_ms(2025, 1, 7, 9), end_ms=_ms(2025, 1, 7, 10),
               created_at_ms=CREATED, last_interaction_ms=_ms(2025, 1, 7, 12)),
        # edited the next day: counted on the interaction day
        Ticket(id="f", start_ms=_ms(2025, 1, 8, 9), end_ms=_ms(2025, 1, 8, 10),
               created_at_ms=CREATED, last_interaction_ms=_ms(2025, 1, 9, 8)),
        # future
        Ticket(id="d", start_ms=_ms(2025, 1, 12, 9), end_ms=_ms(2025, 1, 12, 10), created_at_ms=CREATED),
        Ticket(id="e", start_ms=_ms(2025, 1, 1, 9), end_ms=_ms(2025, 1, 1, 10),
               created_at_ms=_ms(2024, 12, 31), last_interaction_ms=_ms(2025, 1, 2, 9)),
    ]


class TestProductivityContract(unittest.TestCase):
    def test_default_thresholds(self) -> None:
        self.assertEqual(productivity_level(0.8), "high")
        self.assertEqual(productivity_level(0.79), "medium")
        self.assertEqual(productivity_level(0.5), "medium")
        self.assertEqual(productivity_level(0.49), "low")

    def test_custom_thresholds(self) -> None:
        self.assertEqual(productivity_level(0.6, {"high": 0.6, "medium": 0.3}), "high")
        self.assertEqual(productivity_level(0.3, {"high": 0.6, "medium": 0.3}), "medium")

    def test_activity_instant(self) -> None:
        t = _tickets()
        self.assertEqual(ticket_activity_ms(t[0]), _ms(2025, 1, 6, 10, 30))
        self.assertEqual(ticket_activity_ms(t[1]), _ms(2025, 1, 6, 12))


class TestDailyActivityContract(unittest.TestCase):
    def test_counts_per_day(self) -> None:
        out = calculate_daily_activity(_tickets(), _ms(2025, 1, 6), _ms(2025, 1, 13) - 1, tz="UTC", now_ms=NOW)
        self.assertEqual([a.date for a in out], [dt.date(2025, 1, 6) + dt.timedelta(days=i) for i in range(7)])
        by_day = {a.date.day: (a.completion_count, a.total_tickets, a.productivity) for a in out}
        self.assertEqual(by_day[6], (1, 2, "medium"))
        self.assertEqual(by_day[7], (1, 1, "high"))
        self.assertEqual(by_day[8], (0, 0, "low"))
        self.assertEqual(by_day[9], (1, 1, "high"))
        self.assertEqual(by_day[12], (0, 1, "low"))
        self.assertEqual(out[0].start_ms, _ms(2025, 1, 6))

    def test_days_follow_timezone(self) -> None:
        # 2025-01-06T10:30Z is still Jan 6 at -05:00, 12:00Z too.
        out = calculate_daily_activity(_tickets()[:2], _ms(2025, 1, 6, 5), _ms(2025, 1, 7, 5) - 1, tz="-05:00", now_ms=NOW)
        self.assertEqual([a.date for a in out], [dt.date(2025, 1, 6)])
        self.assertEqual(out[0].total_tickets, 2)

    def test_empty_range_days_are_zero(self) -> None:
        out = calculate_daily_activity([], _ms(2025, 1, 1), _ms(2025, 1, 3), tz="UTC", now_ms=NOW)
        self.assertEqual(len(out), 3)
        self.assertTrue(all(a.total_tickets == 0 and a.productivity == "low" for a in out))


class TestWeeklyActivityContract(unittest.TestCase):
    def test_rolls_up_into_monday_weeks(self) -> None:
        out = calculate_weekly_activity(_tickets(), _ms(2025, 1, 1), _ms(2025, 1, 13) - 1, tz="UTC", now_ms=NOW)
        self.assertEqual([a.date for a in out], [dt.date(2024, 12, 30), dt.date(2025, 1, 6)])
        self.assertEqual(out[0].start_ms, _ms(2024, 12, 30))
        self.assertEqual((out[0].completion_count, out[0].total_tickets, out[0].productivity), (1, 1, "high"))
        self.assertEqual((out[1].completion_count, out[1].total_tickets, out[1].productivity), (3, 5, "medium"))
        self.assertAlmostEqual(out[1].completion_rate, 0.6)

    def test_thresholds_apply_to_weeks(self) -> None:
        out = calculate_weekly_activity(
            _tickets(), _ms(2025, 1, 6), _ms(2025, 1, 13) - 1, tz="UTC", now_ms=NOW,
            thresholds={"high": 0.6, "medium": 0.3},
        )
        self.assertEqual(out[-1].productivity, "high")


class TestActivityCacheContract(unittest.TestCase):
    def setUp(self) -> None:
        self.state = set_tickets(initial_state(NOW, view="weekly", tz="UTC"), _tickets())

    def test_uses_state_window(self) -> None:
        out = ActivityCache().activity_for_state(self.state, now_ms=NOW)
        self.assertEqual(len(out), 7)
        self.assertEqual(out[0].date, dt.date(2025, 1, 5))

    def test_recomputes_only_when_key_changes(self) -> None:
        cache = ActivityCache()
        with mock.patch.object(heatmap, "calculate_daily_activity", wraps=heatmap.calculate_daily_activity) as calc:
            first = cache.activity_for_state(self.state, now_ms=NOW)
            self.assertEqual(cache.activity_for_state(self.state, now_ms=NOW), first)
            self.assertEqual(calc.call_count, 1)

            cache.activity_for_state(invalidate_activity_cache(self.state), now_ms=NOW)
            self.assertEqual(calc.call_count, 2)

    def test_disabled_heat_map_or_no_tickets(self) -> None:
        cache = ActivityCache()
        self.assertEqual(cache.activity_for_state(set_heat_map_enabled(self.state, False), now_ms=NOW), [])
        self.assertEqual(cache.activity_for_state(set_tickets(self.state, []), now_ms=NOW), [])

    def test_unknown_granularity(self) -> None:
        with self.assertRaises(ValueError):
            ActivityCache().activity_for_state(self.state, "hourly", now_ms=NOW)


if __name__ == "__main__":
    unittest.main(verbosity=2)
