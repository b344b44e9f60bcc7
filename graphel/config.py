from __future__ import annotations

from dataclasses import dataclass
import logging
import math
import os

from graphel.raster.canvas import RGBA


LOGGER = logging.getLogger(__name__)

# Equivalent to tailwind's text-blue-500 / text-green-500.
PRIMARY_COLOR: RGBA = (66, 153, 225, 255)
SECONDARY_COLOR: RGBA = (72, 187, 120, 255)
AXIS_COLOR: RGBA = (187, 187, 187, 255)
GRID_RGB: tuple[int, int, int] = (0, 0, 0)

GRID_MIN_OPACITY = 0.01
GRID_MAX_OPACITY = 0.1
GRID_FULL_OPACITY_SCALE = 100.0


@dataclass(frozen=True)
class SurfaceConfig:
    default_offset: float = 0.0
    default_scale: float = 20.0
    pixel_bias: float = 0.5
    background: RGBA = (255, 255, 255, 255)
    variable: str = "x"

    def __post_init__(self) -> None:
        if not math.isfinite(self.default_offset):
            raise ValueError("default_offset must be finite")
        if not math.isfinite(self.default_scale) or self.default_scale <= 0:
            raise ValueError("default_scale must be > 0")
        if not math.isfinite(self.pixel_bias):
            raise ValueError("pixel_bias must be finite")
        if not self.variable.isidentifier():
            raise ValueError("variable must be an identifier")

    @classmethod
    def from_env(
        cls,
        *,
        offset_env_var: str = "GRAPHEL_DEFAULT_OFFSET",
        scale_env_var: str = "GRAPHEL_DEFAULT_SCALE",
        bias_env_var: str = "GRAPHEL_PIXEL_BIAS",
    ) -> "SurfaceConfig":
        defaults = cls()
        offset = _parse_env_float(offset_env_var, defaults.default_offset)
        scale = _parse_env_float(scale_env_var, defaults.default_scale, positive=True)
        bias = _parse_env_float(bias_env_var, defaults.pixel_bias)
        return cls(default_offset=offset, default_scale=scale, pixel_bias=bias)


def _parse_env_float(env_var: str, default: float, *, positive: bool = False) -> float:
    raw = os.getenv(env_var, "").strip()
    if raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        LOGGER.warning("ignoring %s=%r: not a number", env_var, raw)
        return default
    if not math.isfinite(value) or (positive and value <= 0):
        LOGGER.warning("ignoring %s=%r: out of range", env_var, raw)
        return default
    return value
