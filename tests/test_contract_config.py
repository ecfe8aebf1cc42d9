import unittest

from wrm.config import DEFAULT_CONFIG, load_config


class TestLoadConfigContract(unittest.TestCase):
    def test_defaults(self) -> None:
        cfg = load_config(env={})
        self.assertEqual(cfg["snap_min"], 15)
        self.assertEqual(cfg["min_duration_min"], 15)
        self.assertEqual(cfg["px_per_min"], 2.0)
        self.assertEqual(cfg["lane_height"], 56)
        self.assertEqual(cfg["header_height"], 60)
        self.assertEqual(cfg["tz"], "local")
        self.assertEqual(DEFAULT_CONFIG["snap_min"], 15)

    def test_env_overrides_defaults(self) -> None:
        cfg = load_config(env={"WRM_TZ": "utc", "WRM_SNAP_MIN": "30", "WRM_PX_PER_MIN": "0.5"})
        self.assertEqual(cfg["tz"], "UTC")
        self.assertEqual(cfg["snap_min"], 30)
        self.assertEqual(cfg["px_per_min"], 0.5)

    def test_cfg_beats_env_and_none_is_ignored(self) -> None:
        cfg = load_config({"snap_min": 5, "tz": None}, env={"WRM_SNAP_MIN": "30", "WRM_TZ": "UTC"})
        self.assertEqual(cfg["snap_min"], 5)
        self.assertEqual(cfg["tz"], "UTC")

    def test_invalid_values_raise(self) -> None:
        for bad in ({"snap_min": 0}, {"snap_min": "x"}, {"px_per_min": -1}, {"px_per_min": float("nan")}, {"tz": "Nope/Zone"}):
            with self.subTest(cfg=bad):
                with self.assertRaises(ValueError):
                    load_config(bad, env={})


if __name__ == "__main__":
    unittest.main(verbosity=2)
