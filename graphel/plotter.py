from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Callable, Union

import numpy as np

from graphel.errors import CompilationError
from graphel.expr import CompiledFunction, compile_expression
from graphel.path import Path
from graphel.raster.canvas import RGBA
from graphel.raster.stroke import stroke_path
from graphel.transform import ViewParameters, viewport_to_world, world_to_viewport


LOGGER = logging.getLogger(__name__)

PlotFunction = Union[CompiledFunction, Callable[[float], float]]
Compiler = Callable[[str, str], Union[CompiledFunction, CompilationError]]


@dataclass(frozen=True)
class PlotResult:
    path: Path
    gap_columns: int
    mask: np.ndarray | None = None


class FunctionPlotter:
    """Samples one expression per pixel column and strokes it as a polyline."""

    def __init__(self, compiler: Compiler = compile_expression, *, variable: str = "x", line_width: int = 1) -> None:
        if line_width <= 0:
            raise ValueError("line_width must be > 0")
        self._compiler = compiler
        self._variable = variable
        self._line_width = line_width

    def resolve(self, expression: str | PlotFunction) -> PlotFunction | CompilationError:
        if not isinstance(expression, str):
            return expression
        try:
            return self._compiler(expression, self._variable)
        except Exception as exc:
            # A broken compiler leaves this slot blank; it must not abort the redraw.
            LOGGER.debug("compiler failed on %r", expression, exc_info=True)
            return CompilationError(text=expression, message=str(exc) or type(exc).__name__)

    def plot(
        self,
        canvas: np.ndarray,
        params: ViewParameters,
        expression: str | PlotFunction,
        color: RGBA,
    ) -> PlotResult | CompilationError:
        fn = self.resolve(expression)
        if isinstance(fn, CompilationError):
            LOGGER.debug("slot not drawn: %s", fn)
            return fn
        result = self.sample_path(params, fn)
        mask = stroke_path(canvas, result.path, color, width=self._line_width)
        LOGGER.debug(
            "plotted %r: subpaths=%d gaps=%d",
            getattr(fn, "text", fn),
            len(result.path.subpaths),
            result.gap_columns,
        )
        return PlotResult(path=result.path, gap_columns=result.gap_columns, mask=mask)

    def sample_path(self, params: ViewParameters, fn: PlotFunction) -> PlotResult:
        viewport_ys = sample_viewport_ys(params, fn)
        path = Path()
        gaps = 0
        last_vy = 0.0
        for vx, vy in enumerate(viewport_ys.tolist()):
            if math.isnan(vy):
                gaps += 1
                last_vy = vy
                continue
            # Both ends off-screen means a jump we should not connect, e.g. an asymptote.
            if vx == 0 or math.isnan(last_vy) or (params.is_out_of_bounds(last_vy) and params.is_out_of_bounds(vy)):
                path.move_to(vx, vy)
            else:
                path.line_to(vx, vy)
            last_vy = vy
        return PlotResult(path=path, gap_columns=gaps)


def sample_viewport_ys(params: ViewParameters, fn: PlotFunction) -> np.ndarray:
    """Evaluate ``fn`` once per pixel column; gaps come back as ``nan``."""
    width = max(0, int(params.width))
    columns = np.arange(width, dtype=np.float64)
    world_xs, _ = viewport_to_world(params, columns, 0.0)
    world_ys = _evaluate_columns(fn, world_xs)
    with np.errstate(all="ignore"):
        _, viewport_ys = world_to_viewport(params, 0.0, world_ys)
    viewport_ys = np.asarray(viewport_ys, dtype=np.float64)
    viewport_ys[~np.isfinite(viewport_ys)] = np.nan
    return viewport_ys


def _evaluate_columns(fn: PlotFunction, world_xs: np.ndarray) -> np.ndarray:
    evaluate = getattr(fn, "evaluate", None)
    if evaluate is not None:
        try:
            world_ys = np.asarray(evaluate(world_xs), dtype=np.float64)
        except Exception:
            LOGGER.debug("vectorized evaluation failed; sampling column by column", exc_info=True)
        else:
            if world_ys.shape == world_xs.shape:
                return world_ys
    count = int(world_xs.shape[0])
    return np.fromiter((_evaluate_point(fn, x) for x in world_xs.tolist()), dtype=np.float64, count=count)


def _evaluate_point(fn: Callable[[float], float], x: float) -> float:
    # Any fault at a single point is a gap in the curve.
    try:
        return float(fn(x))
    except Exception:
        return math.nan
