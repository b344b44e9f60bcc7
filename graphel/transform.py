from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TypeVar

import numpy as np


# Scalars stay scalars and arrays stay arrays through the transforms.
Coord = TypeVar("Coord", float, np.ndarray)


@dataclass(frozen=True)
class ViewParameters:
    """Snapshot of the pan/zoom/size state one redraw is computed from.

    ``offset_x``/``offset_y`` locate the world origin in pixels, with
    ``offset_y`` counted upward from the bottom edge. ``scale_x``/``scale_y``
    are pixels per world unit.
    """

    offset_x: float = 0.0
    offset_y: float = 0.0
    scale_x: float = 20.0
    scale_y: float = 20.0
    width: int = 0
    height: int = 0

    def viewport_to_world(self, vx: Coord, vy: Coord) -> tuple[Coord, Coord]:
        return viewport_to_world(self, vx, vy)

    def world_to_viewport(self, wx: Coord, wy: Coord) -> tuple[Coord, Coord]:
        return world_to_viewport(self, wx, wy)

    def is_out_of_bounds(self, vy: float) -> bool:
        # NaN compares false everywhere, so it lands out of bounds too.
        return not (0.0 <= vy <= self.height)


def viewport_to_world(params: ViewParameters, vx: Coord, vy: Coord) -> tuple[Coord, Coord]:
    wx = (vx - params.offset_x) / params.scale_x
    wy = (params.height - vy - params.offset_y) / params.scale_y
    return wx, wy


def world_to_viewport(params: ViewParameters, wx: Coord, wy: Coord) -> tuple[Coord, Coord]:
    vx = wx * params.scale_x + params.offset_x
    vy = params.height - (wy * params.scale_y + params.offset_y)
    return vx, vy


def visible_world_bounds(params: ViewParameters) -> tuple[tuple[float, float], tuple[float, float]]:
    """Return ``(lower, upper)`` world corners of the viewport."""
    lower = viewport_to_world(params, 0.0, float(params.height))
    upper = viewport_to_world(params, float(params.width), 0.0)
    return lower, upper


def panned(params: ViewParameters, dx: float, dy: float) -> ViewParameters:
    """Move the world origin ``dx`` pixels right and ``dy`` pixels up."""
    return replace(params, offset_x=params.offset_x + dx, offset_y=params.offset_y + dy)


def zoomed_about(params: ViewParameters, vx: float, vy: float, factor: float) -> ViewParameters:
    """Scale by ``factor`` while keeping the world point under ``(vx, vy)`` fixed."""
    if not np.isfinite(factor) or factor <= 0:
        raise ValueError("zoom factor must be > 0")
    wx, wy = viewport_to_world(params, vx, vy)
    scale_x = params.scale_x * factor
    scale_y = params.scale_y * factor
    return replace(
        params,
        scale_x=scale_x,
        scale_y=scale_y,
        offset_x=vx - wx * scale_x,
        offset_y=params.height - vy - wy * scale_y,
    )


def resized(params: ViewParameters, width: int, height: int) -> ViewParameters:
    if width < 0 or height < 0:
        raise ValueError("width and height must be >= 0")
    return replace(params, width=int(width), height=int(height))
