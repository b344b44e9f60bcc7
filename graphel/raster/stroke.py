from __future__ import annotations

import math

import numpy as np

from graphel.path import Path, Point
from graphel.raster.canvas import RGBA, blend_mask, new_mask


def stroke_path(dst: np.ndarray, path: Path, color: RGBA, width: int = 1) -> np.ndarray:
    """Rasterize every segment of ``path`` and composite it once onto ``dst``.

    Returns the coverage mask so callers can inspect what was drawn.
    """
    mask = new_mask(dst)
    if mask.size == 0:
        return mask
    height, width_px = mask.shape
    # One pixel of slack keeps segments that end just past an edge intact.
    bounds = (-1.0, -1.0, float(width_px) + 1.0, float(height) + 1.0)
    for start, end in path.segments():
        clipped = clip_segment(start, end, bounds)
        if clipped is None:
            continue
        (x0, y0), (x1, y1) = clipped
        _mark_line_segment(
            mask,
            math.floor(x0),
            math.floor(y0),
            math.floor(x1),
            math.floor(y1),
            width=width,
        )
    blend_mask(dst, mask, color)
    return mask


def clip_segment(
    start: Point,
    end: Point,
    bounds: tuple[float, float, float, float],
) -> tuple[Point, Point] | None:
    """Liang-Barsky clip of one segment against ``(xmin, ymin, xmax, ymax)``."""
    x0, y0 = start
    x1, y1 = end
    if not all(math.isfinite(v) for v in (x0, y0, x1, y1)):
        return None
    xmin, ymin, xmax, ymax = bounds
    dx = x1 - x0
    dy = y1 - y0
    t0 = 0.0
    t1 = 1.0
    for p, q in ((-dx, x0 - xmin), (dx, xmax - x0), (-dy, y0 - ymin), (dy, ymax - y0)):
        if p == 0.0:
            if q < 0.0:
                return None
            continue
        r = q / p
        if p < 0.0:
            if r > t1:
                return None
            t0 = max(t0, r)
        else:
            if r < t0:
                return None
            t1 = min(t1, r)
    return (x0 + t0 * dx, y0 + t0 * dy), (x0 + t1 * dx, y0 + t1 * dy)


def _mark_line_segment(mask: np.ndarray, x0: int, y0: int, x1: int, y1: int, width: int) -> None:
    dx = abs(x1 - x0)
    sx = 1 if x0 < x1 else -1
    dy = -abs(y1 - y0)
    sy = 1 if y0 < y1 else -1
    err = dx + dy

    while True:
        _mark_square_brush(mask, x0, y0, width=width)
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy


def _mark_square_brush(mask: np.ndarray, x: int, y: int, width: int) -> None:
    radius = max(0, width // 2)
    ya = max(0, y - radius)
    yb = min(mask.shape[0], y + radius + 1)
    xa = max(0, x - radius)
    xb = min(mask.shape[1], x + radius + 1)
    if ya >= yb or xa >= xb:
        return
    mask[ya:yb, xa:xb] = True
