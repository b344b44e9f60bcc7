from __future__ import annotations

import numpy as np

from graphel.config import AXIS_COLOR
from graphel.raster.canvas import RGBA, blend_mask, mark_hline, mark_vline, new_mask
from graphel.transform import ViewParameters, world_to_viewport


def axis_center(params: ViewParameters) -> tuple[float, float]:
    return world_to_viewport(params, 0.0, 0.0)


def draw_axes(canvas: np.ndarray, params: ViewParameters, color: RGBA = AXIS_COLOR) -> np.ndarray:
    cx, cy = axis_center(params)
    mask = new_mask(canvas)
    mark_hline(mask, cy)
    mark_vline(mask, cx)
    blend_mask(canvas, mask, color)
    return mask
