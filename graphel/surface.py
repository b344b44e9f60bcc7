from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
import logging
import math
from pathlib import Path as FilePath
import time
from typing import Any, Literal, Mapping, Protocol

import numpy as np
from PIL import Image

from graphel.axis import draw_axes
from graphel.config import PRIMARY_COLOR, SECONDARY_COLOR, SurfaceConfig
from graphel.errors import CompilationError, ViewParameterError
from graphel.expr import compile_expression
from graphel.grid import draw_grid
from graphel.plotter import Compiler, FunctionPlotter
from graphel.present import WriteBatch, compile_full_rewrite_batch
from graphel.raster.canvas import RGBA, fill, new_canvas
from graphel.transform import ViewParameters, panned, zoomed_about


LOGGER = logging.getLogger(__name__)

ATTRIBUTE_NAMES = (
    "first-function",
    "second-function",
    "width",
    "height",
    "offset-x",
    "offset-y",
    "scale-x",
    "scale-y",
)

_ATTRIBUTE_FIELDS = {
    name: name.replace("-", "_") for name in ATTRIBUTE_NAMES
} | {
    name.replace("-", "_"): name.replace("-", "_") for name in ATTRIBUTE_NAMES
} | {
    "firstFunction": "first_function",
    "secondFunction": "second_function",
    "offsetX": "offset_x",
    "offsetY": "offset_y",
    "scaleX": "scale_x",
    "scaleY": "scale_y",
}


class SlotId(Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"


class SurfaceState(Enum):
    IDLE = "idle"
    REDRAWING = "redrawing"


@dataclass(frozen=True)
class ExpressionSlot:
    slot: SlotId
    text: str
    color: RGBA


SlotStatus = Literal["drawn", "empty", "error"]


@dataclass(frozen=True)
class SlotReport:
    slot: SlotId
    status: SlotStatus
    error: CompilationError | None = None
    subpaths: int = 0
    points: int = 0
    gap_columns: int = 0


@dataclass(frozen=True)
class RedrawReport:
    params: ViewParameters
    resized: bool
    slots: tuple[SlotReport, ...]
    elapsed_ns: int

    def slot(self, slot: SlotId) -> SlotReport:
        for report in self.slots:
            if report.slot is slot:
                return report
        raise KeyError(slot)


class FrameSink(Protocol):
    def submit_write_batch(self, batch: WriteBatch) -> Any: ...


class DrawingSurface:
    """RGBA pixel buffer; resizing always starts from a cleared buffer."""

    def __init__(self, width: int = 0, height: int = 0, background: RGBA = (255, 255, 255, 255)) -> None:
        self._background = background
        self._rgba = new_canvas(width, height, color=background)

    @property
    def width(self) -> int:
        return int(self._rgba.shape[1])

    @property
    def height(self) -> int:
        return int(self._rgba.shape[0])

    @property
    def rgba(self) -> np.ndarray:
        return self._rgba

    def resize(self, width: int, height: int) -> bool:
        if width < 0 or height < 0:
            raise ViewParameterError("surface width/height must be >= 0")
        changed = (width, height) != (self.width, self.height)
        if changed:
            self._rgba = new_canvas(width, height, color=self._background)
        else:
            self.clear()
        return changed

    def clear(self) -> None:
        fill(self._rgba, self._background)


@dataclass(frozen=True)
class _RawInputs:
    width: Any = None
    height: Any = None
    offset_x: Any = None
    offset_y: Any = None
    scale_x: Any = None
    scale_y: Any = None
    first_function: str = ""
    second_function: str = ""


class ViewSurface:
    """Owns the view parameters, both expression slots and the drawing surface.

    Every public mutator performs exactly one synchronous full redraw:
    grid, axes, the secondary curve and finally the primary curve on top.
    Width and height are preconditions; offsets and scales fall back to the
    configured defaults when missing or unusable.
    """

    def __init__(
        self,
        width: Any,
        height: Any,
        *,
        first_function: str = "",
        second_function: str = "",
        offset_x: Any = None,
        offset_y: Any = None,
        scale_x: Any = None,
        scale_y: Any = None,
        config: SurfaceConfig | None = None,
        compiler: Compiler = compile_expression,
        frame_sink: FrameSink | None = None,
    ) -> None:
        self.config = config if config is not None else SurfaceConfig()
        self.frame_sink = frame_sink
        self._raw = _RawInputs(
            width=width,
            height=height,
            offset_x=offset_x,
            offset_y=offset_y,
            scale_x=scale_x,
            scale_y=scale_y,
            first_function=_coerce_text(first_function),
            second_function=_coerce_text(second_function),
        )
        self._params = self._resolve(self._raw)
        self._state = SurfaceState.IDLE
        self._surface = DrawingSurface(background=self.config.background)
        self._plotter = FunctionPlotter(compiler, variable=self.config.variable)
        self._redraw_count = 0
        self._last_report: RedrawReport | None = None
        self.redraw()

    @property
    def state(self) -> SurfaceState:
        return self._state

    @property
    def params(self) -> ViewParameters:
        return self._params

    @property
    def surface(self) -> DrawingSurface:
        return self._surface

    @property
    def redraw_count(self) -> int:
        return self._redraw_count

    @property
    def last_report(self) -> RedrawReport | None:
        return self._last_report

    def slots(self) -> tuple[ExpressionSlot, ExpressionSlot]:
        return (
            ExpressionSlot(SlotId.PRIMARY, self._raw.first_function, PRIMARY_COLOR),
            ExpressionSlot(SlotId.SECONDARY, self._raw.second_function, SECONDARY_COLOR),
        )

    def set_view_parameters(self, **changes: Any) -> RedrawReport:
        unknown = set(changes) - {"width", "height", "offset_x", "offset_y", "scale_x", "scale_y"}
        if unknown:
            raise TypeError(f"unknown view parameter(s): {', '.join(sorted(unknown))}")
        return self._commit(replace(self._raw, **changes))

    def set_expression(self, slot: SlotId | str, text: str) -> RedrawReport:
        slot_id = SlotId(slot)
        key = "first_function" if slot_id is SlotId.PRIMARY else "second_function"
        return self._commit(replace(self._raw, **{key: _coerce_text(text)}))

    def set_attribute(self, name: str, value: Any) -> RedrawReport:
        return self.set_attributes({name: value})

    def set_attributes(self, values: Mapping[str, Any]) -> RedrawReport:
        changes: dict[str, Any] = {}
        for name, value in values.items():
            key = _ATTRIBUTE_FIELDS.get(name)
            if key is None:
                raise KeyError(f"unknown attribute: {name}")
            changes[key] = _coerce_text(value) if key.endswith("_function") else value
        return self._commit(replace(self._raw, **changes))

    def pan_by(self, dx: float, dy: float) -> RedrawReport:
        """Drag the view ``dx`` pixels right and ``dy`` pixels down."""
        return self._commit_params(panned(self._params, dx, -dy))

    def zoom_at(self, vx: float, vy: float, factor: float) -> RedrawReport:
        return self._commit_params(zoomed_about(self._params, vx, vy, factor))

    def redraw(self) -> RedrawReport:
        started = time.perf_counter_ns()
        params = self._params
        self._state = SurfaceState.REDRAWING
        try:
            resized = self._surface.resize(params.width, params.height)
            canvas = self._surface.rgba
            draw_grid(canvas, params)
            draw_axes(canvas, params)
            primary, secondary = self.slots()
            secondary_report = self._plot_slot(canvas, params, secondary)
            primary_report = self._plot_slot(canvas, params, primary)
        finally:
            self._state = SurfaceState.IDLE
        self._redraw_count += 1
        report = RedrawReport(
            params=params,
            resized=resized,
            slots=(primary_report, secondary_report),
            elapsed_ns=time.perf_counter_ns() - started,
        )
        self._last_report = report
        LOGGER.debug(
            "redraw #%d: size=%dx%d offset=(%.1f, %.1f) scale=(%g, %g) elapsed_ms=%.2f",
            self._redraw_count,
            params.width,
            params.height,
            params.offset_x,
            params.offset_y,
            params.scale_x,
            params.scale_y,
            report.elapsed_ns / 1e6,
        )
        if self.frame_sink is not None:
            self.frame_sink.submit_write_batch(self.compile_write_batch())
        return report

    def to_rgba(self) -> np.ndarray:
        return self._surface.rgba.copy()

    def compile_write_batch(self) -> WriteBatch:
        return compile_full_rewrite_batch(self._surface.rgba)

    def to_image(self) -> Image.Image:
        if self._surface.width == 0 or self._surface.height == 0:
            return Image.new("RGBA", (self._surface.width, self._surface.height))
        return Image.fromarray(self.to_rgba())

    def save_png(self, path: str | FilePath) -> FilePath:
        out = FilePath(path)
        self.to_image().save(out, format="PNG")
        return out

    def _plot_slot(self, canvas: np.ndarray, params: ViewParameters, slot: ExpressionSlot) -> SlotReport:
        if not slot.text.strip():
            return SlotReport(slot=slot.slot, status="empty")
        result = self._plotter.plot(canvas, params, slot.text, slot.color)
        if isinstance(result, CompilationError):
            return SlotReport(slot=slot.slot, status="error", error=result)
        return SlotReport(
            slot=slot.slot,
            status="drawn",
            subpaths=len(result.path.subpaths),
            points=result.path.point_count,
            gap_columns=result.gap_columns,
        )

    def _commit(self, raw: _RawInputs) -> RedrawReport:
        # Resolve first so a bad size leaves the current state untouched.
        params = self._resolve(raw)
        self._raw = raw
        self._params = params
        return self.redraw()

    def _commit_params(self, params: ViewParameters) -> RedrawReport:
        bias = self.config.pixel_bias
        raw = replace(
            self._raw,
            offset_x=params.offset_x - bias,
            offset_y=params.offset_y + bias,
            scale_x=params.scale_x,
            scale_y=params.scale_y,
        )
        return self._commit(raw)

    def _resolve(self, raw: _RawInputs) -> ViewParameters:
        cfg = self.config
        # The origin lands on a pixel centre: +bias on both viewport axes.
        return ViewParameters(
            offset_x=self._fallback(raw.offset_x, cfg.default_offset, "offset-x") + cfg.pixel_bias,
            offset_y=self._fallback(raw.offset_y, cfg.default_offset, "offset-y") - cfg.pixel_bias,
            scale_x=self._fallback(raw.scale_x, cfg.default_scale, "scale-x", positive=True),
            scale_y=self._fallback(raw.scale_y, cfg.default_scale, "scale-y", positive=True),
            width=_coerce_size(raw.width, "width"),
            height=_coerce_size(raw.height, "height"),
        )

    @staticmethod
    def _fallback(value: Any, default: float, label: str, *, positive: bool = False) -> float:
        number = _coerce_number(value)
        if number is None or (positive and number <= 0):
            if value is not None and value != "":
                LOGGER.warning("invalid %s=%r; using %g", label, value, default)
            return default
        return number


def _coerce_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if value == "":
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _coerce_size(value: Any, label: str) -> int:
    number = _coerce_number(value)
    if number is None:
        raise ViewParameterError(f"{label} is required and must be a number, got {value!r}")
    if number < 0:
        raise ViewParameterError(f"{label} must be >= 0, got {value!r}")
    return int(math.floor(number))


def _coerce_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)
