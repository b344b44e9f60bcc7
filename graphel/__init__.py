from graphel.axis import draw_axes
from graphel.config import SurfaceConfig
from graphel.errors import CompilationError, ExpressionSyntaxError, GraphelError, ViewParameterError
from graphel.expr import CompiledFunction, compile_expression, parse_expression
from graphel.grid import draw_grid, grid_lines, grid_opacity
from graphel.path import Path
from graphel.plotter import FunctionPlotter, PlotResult
from graphel.present import FrameMatrix, WriteBatch
from graphel.surface import DrawingSurface, RedrawReport, SlotId, SurfaceState, ViewSurface
from graphel.transform import ViewParameters, panned, viewport_to_world, world_to_viewport, zoomed_about

__all__ = [
    "CompilationError",
    "CompiledFunction",
    "DrawingSurface",
    "ExpressionSyntaxError",
    "FrameMatrix",
    "FunctionPlotter",
    "GraphelError",
    "Path",
    "PlotResult",
    "RedrawReport",
    "SlotId",
    "SurfaceConfig",
    "SurfaceState",
    "ViewParameterError",
    "ViewParameters",
    "ViewSurface",
    "WriteBatch",
    "compile_expression",
    "draw_axes",
    "draw_grid",
    "grid_lines",
    "grid_opacity",
    "panned",
    "parse_expression",
    "viewport_to_world",
    "world_to_viewport",
    "zoomed_about",
]
