from __future__ import annotations

import os
import unittest
from unittest import mock

from graphel.config import SurfaceConfig


class SurfaceConfigTests(unittest.TestCase):
    def test_defaults(self) -> None:
        cfg = SurfaceConfig()
        self.assertEqual(cfg.default_offset, 0.0)
        self.assertEqual(cfg.default_scale, 20.0)
        self.assertEqual(cfg.pixel_bias, 0.5)
        self.assertEqual(cfg.variable, "x")

    def test_rejects_invalid_values(self) -> None:
        with self.assertRaises(ValueError):
            SurfaceConfig(default_scale=0.0)
        with self.assertRaises(ValueError):
            SurfaceConfig(default_offset=float("inf"))
        with self.assertRaises(ValueError):
            SurfaceConfig(variable="2x")

    def test_from_env_reads_overrides(self) -> None:
        env = {"GRAPHEL_DEFAULT_OFFSET": "40", "GRAPHEL_DEFAULT_SCALE": "12.5", "GRAPHEL_PIXEL_BIAS": "0"}
        with mock.patch.dict(os.environ, env):
            cfg = SurfaceConfig.from_env()
        self.assertEqual((cfg.default_offset, cfg.default_scale, cfg.pixel_bias), (40.0, 12.5, 0.0))

    def test_from_env_ignores_bad_values_with_warning(self) -> None:
        env = {"GRAPHEL_DEFAULT_OFFSET": "left", "GRAPHEL_DEFAULT_SCALE": "-3", "GRAPHEL_PIXEL_BIAS": ""}
        with mock.patch.dict(os.environ, env):
            with self.assertLogs("graphel.config", level="WARNING") as logs:
                cfg = SurfaceConfig.from_env()
        self.assertEqual(cfg, SurfaceConfig())
        self.assertEqual(len(logs.output), 2)
        self.assertIn("GRAPHEL_DEFAULT_SCALE", logs.output[1])


if __name__ == "__main__":
    unittest.main()
