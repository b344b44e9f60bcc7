from __future__ import annotations

import itertools
import math
import unittest

import numpy as np

from graphel.transform import (
    ViewParameters,
    panned,
    resized,
    viewport_to_world,
    visible_world_bounds,
    world_to_viewport,
    zoomed_about,
)


class CoordinateTransformTests(unittest.TestCase):
    def test_world_viewport_round_trip_is_exact_inverse(self) -> None:
        offsets = (-250.5, 0.5, 60.5, 1024.0)
        scales = (0.25, 1.0, 20.0, 333.3)
        points = (-1000.0, -3.75, 0.0, 0.1, 42.0, 999.5)
        for (ox, oy), (sx, sy) in itertools.product(
            itertools.product(offsets, repeat=2),
            itertools.product(scales, repeat=2),
        ):
            params = ViewParameters(offset_x=ox, offset_y=oy, scale_x=sx, scale_y=sy, width=640, height=480)
            for wx, wy in itertools.product(points, repeat=2):
                vx, vy = world_to_viewport(params, wx, wy)
                bx, by = viewport_to_world(params, vx, vy)
                self.assertTrue(math.isclose(bx, wx, rel_tol=1e-9, abs_tol=1e-9), (params, wx, bx))
                self.assertTrue(math.isclose(by, wy, rel_tol=1e-9, abs_tol=1e-9), (params, wy, by))

    def test_origin_maps_to_offset_exactly(self) -> None:
        params = ViewParameters(offset_x=60.5, offset_y=59.5, scale_x=20.0, scale_y=20.0, width=400, height=300)
        self.assertEqual(world_to_viewport(params, 0.0, 0.0), (60.5, 240.5))
        self.assertEqual(params.world_to_viewport(0.0, 0.0), (params.offset_x, params.height - params.offset_y))

    def test_viewport_y_grows_down_world_y_grows_up(self) -> None:
        params = ViewParameters(offset_x=0.0, offset_y=0.0, scale_x=10.0, scale_y=10.0, width=100, height=100)
        _, top = viewport_to_world(params, 0.0, 0.0)
        _, bottom = viewport_to_world(params, 0.0, 100.0)
        self.assertEqual(top, 10.0)
        self.assertEqual(bottom, 0.0)

    def test_transforms_accept_arrays(self) -> None:
        params = ViewParameters(offset_x=10.0, offset_y=5.0, scale_x=2.0, scale_y=4.0, width=50, height=40)
        columns = np.arange(5, dtype=np.float64)
        wx, _ = viewport_to_world(params, columns, 0.0)
        np.testing.assert_allclose(wx, (columns - 10.0) / 2.0)
        _, vy = world_to_viewport(params, 0.0, np.asarray([0.0, 1.0, -1.0]))
        np.testing.assert_allclose(vy, [35.0, 31.0, 39.0])

    def test_non_finite_inputs_propagate(self) -> None:
        params = ViewParameters(offset_x=1.0, offset_y=1.0, scale_x=1.0, scale_y=1.0, width=10, height=10)
        vx, vy = world_to_viewport(params, math.nan, math.inf)
        self.assertTrue(math.isnan(vx))
        self.assertEqual(vy, -math.inf)

    def test_visible_world_bounds_uses_extreme_corners(self) -> None:
        params = ViewParameters(offset_x=50.0, offset_y=25.0, scale_x=10.0, scale_y=5.0, width=100, height=50)
        lower, upper = visible_world_bounds(params)
        self.assertEqual(lower, (-5.0, -5.0))
        self.assertEqual(upper, (5.0, 5.0))

    def test_is_out_of_bounds_treats_nan_as_outside(self) -> None:
        params = ViewParameters(width=10, height=20)
        self.assertFalse(params.is_out_of_bounds(0.0))
        self.assertFalse(params.is_out_of_bounds(20.0))
        self.assertTrue(params.is_out_of_bounds(-0.1))
        self.assertTrue(params.is_out_of_bounds(20.5))
        self.assertTrue(params.is_out_of_bounds(math.nan))


class PanZoomTests(unittest.TestCase):
    def test_panned_moves_origin(self) -> None:
        params = ViewParameters(offset_x=10.0, offset_y=20.0, width=100, height=100)
        moved = panned(params, 5.0, -3.0)
        self.assertEqual((moved.offset_x, moved.offset_y), (15.0, 17.0))
        self.assertEqual(moved.scale_x, params.scale_x)

    def test_zoom_keeps_anchor_point_fixed(self) -> None:
        params = ViewParameters(offset_x=60.5, offset_y=59.5, scale_x=20.0, scale_y=20.0, width=400, height=300)
        anchor = (123.0, 77.0)
        before = viewport_to_world(params, *anchor)
        zoomed = zoomed_about(params, anchor[0], anchor[1], 2.5)
        after = viewport_to_world(zoomed, *anchor)
        self.assertAlmostEqual(before[0], after[0], places=9)
        self.assertAlmostEqual(before[1], after[1], places=9)
        self.assertEqual(zoomed.scale_x, 50.0)
        self.assertEqual(zoomed.scale_y, 50.0)

    def test_zoom_rejects_non_positive_factor(self) -> None:
        params = ViewParameters(width=10, height=10)
        with self.assertRaises(ValueError):
            zoomed_about(params, 0.0, 0.0, 0.0)
        with self.assertRaises(ValueError):
            zoomed_about(params, 0.0, 0.0, math.nan)

    def test_resized_rejects_negative_size(self) -> None:
        params = ViewParameters(width=10, height=10)
        self.assertEqual(resized(params, 30, 40).width, 30)
        with self.assertRaises(ValueError):
            resized(params, -1, 10)


if __name__ == "__main__":
    unittest.main()
