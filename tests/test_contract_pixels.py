import math
import random
import unittest

from wrm.pixels import (
    lane_to_y,
    pixels_to_time,
    pointer_to_content_x,
    time_ranges_overlap,
    time_to_pixels,
    y_to_lane,
)

BASE = 1704067200000  # 2024-01-01T00:00:00Z
H = 60 * 60000


class TestPixelTimeMappingContract(unittest.TestCase):
    def test_known_points(self) -> None:
        self.assertEqual(time_to_pixels(BASE + 10 * H, BASE, 2), 1200)
        self.assertEqual(pixels_to_time(1200, BASE, 2), BASE + 10 * H)
        self.assertEqual(time_to_pixels(BASE - H, BASE, 0.5), -30)

    def test_mutual_inverses(self) -> None:
        rng = random.Random(7)
        for _ in range(300):
            scale = rng.choice([0.01, 0.1, 0.5, 1.0, 2.0, 7.25])
            px = rng.uniform(-50_000, 50_000)
            back = time_to_pixels(pixels_to_time(px, BASE, scale), BASE, scale)
            self.assertTrue(math.isclose(back, px, rel_tol=1e-9, abs_tol=1e-3), (px, back, scale))

            t = BASE + rng.randrange(-30 * 24 * H, 30 * 24 * H)
            t_back = pixels_to_time(time_to_pixels(t, BASE, scale), BASE, scale)
            self.assertTrue(math.isclose(t_back, t, rel_tol=0, abs_tol=1.0), (t, t_back, scale))

    def test_scale_must_be_positive(self) -> None:
        for bad in (0, -1, float("nan"), float("inf")):
            with self.subTest(scale=bad):
                with self.assertRaises(ValueError):
                    pixels_to_time(10, BASE, bad)
                with self.assertRaises(ValueError):
                    time_to_pixels(BASE, BASE, bad)


class TestLaneAndPointerContract(unittest.TestCase):
    def test_y_to_lane(self) -> None:
        self.assertEqual(y_to_lane(100), 0)
        self.assertEqual(y_to_lane(150), 1)
        self.assertEqual(y_to_lane(10), 0)  # inside the header
        self.assertEqual(y_to_lane(60 + 56 * 3), 3)

    def test_lane_to_y(self) -> None:
        self.assertEqual(lane_to_y(0), 60)
        self.assertEqual(lane_to_y(2), 172)
        self.assertEqual(y_to_lane(lane_to_y(4)), 4)

    def test_lane_height_must_be_positive(self) -> None:
        with self.assertRaises(ValueError):
            y_to_lane(100, 60, 0)

    def test_pointer_to_content_x(self) -> None:
        self.assertEqual(pointer_to_content_x(120, 20, 300), 400)

    def test_overlap_is_half_open(self) -> None:
        self.assertFalse(time_ranges_overlap(0, 10, 10, 20))
        self.assertTrue(time_ranges_overlap(0, 10, 5, 15))
        self.assertTrue(time_ranges_overlap(5, 6, 0, 10))


if __name__ == "__main__":
    unittest.main(verbosity=2)
