from __future__ import annotations

from dataclasses import dataclass
import math

import numpy as np

from graphel.config import GRID_FULL_OPACITY_SCALE, GRID_MAX_OPACITY, GRID_MIN_OPACITY, GRID_RGB
from graphel.raster.canvas import RGBA, blend_mask, mark_hline, mark_vline, new_mask
from graphel.transform import ViewParameters, visible_world_bounds, world_to_viewport


@dataclass(frozen=True)
class GridLines:
    rows: tuple[float, ...]
    columns: tuple[float, ...]


def lerp(a: float, b: float, t: float) -> float:
    t = 1.0 if t > 1.0 else 0.0 if t < 0.0 else t
    return (1.0 - t) * a + b * t


def grid_opacity(scale_x: float) -> float:
    # Fainter when zoomed out, otherwise the grid turns into visual noise.
    if math.isnan(scale_x):
        return GRID_MIN_OPACITY
    return lerp(GRID_MIN_OPACITY, GRID_MAX_OPACITY, scale_x / GRID_FULL_OPACITY_SCALE)


def grid_color(scale_x: float) -> RGBA:
    alpha = int(round(grid_opacity(scale_x) * 255.0))
    return (GRID_RGB[0], GRID_RGB[1], GRID_RGB[2], alpha)


def grid_lines(params: ViewParameters) -> GridLines:
    """Viewport positions of every visible integer world line.

    Lines that land exactly on viewport ``0`` are left out; the axes cover
    that case more prominently.
    """
    lower, upper = visible_world_bounds(params)
    rows = [
        world_to_viewport(params, 0.0, float(wy))[1]
        for wy in _integer_range(lower[1], upper[1], span_px=params.height)
    ]
    columns = [
        world_to_viewport(params, float(wx), 0.0)[0]
        for wx in _integer_range(lower[0], upper[0], span_px=params.width)
    ]
    return GridLines(
        rows=tuple(v for v in rows if v != 0),
        columns=tuple(v for v in columns if v != 0),
    )


def draw_grid(canvas: np.ndarray, params: ViewParameters) -> np.ndarray:
    lines = grid_lines(params)
    mask = new_mask(canvas)
    for vy in lines.rows:
        mark_hline(mask, vy)
    for vx in lines.columns:
        mark_vline(mask, vx)
    blend_mask(canvas, mask, grid_color(params.scale_x))
    return mask


def _integer_range(lo: float, hi: float, *, span_px: int) -> range:
    if not (math.isfinite(lo) and math.isfinite(hi)):
        return range(0)
    if lo > hi:
        lo, hi = hi, lo
    start = math.floor(lo)
    stop = math.ceil(hi)
    # Never emit more lines than there are pixels to put them on.
    budget = max(1, int(span_px) + 1)
    count = stop - start + 1
    stride = 1 if count <= budget else -(-count // budget)
    first = (start // stride) * stride
    return range(first, stop + 1, stride)
