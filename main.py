from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from graphel import CompilationError, SlotId, SurfaceConfig, ViewSurface
from graphel.plotter import FunctionPlotter


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="graphel")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default="WARNING")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render one or two expressions to a PNG file.")
    _add_view_arguments(render)
    render.add_argument("--out", type=Path, required=True)

    sample = sub.add_parser("sample", help="Print the sampled path of the primary expression as JSON.")
    _add_view_arguments(sample)
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")
    surface = ViewSurface(
        args.width,
        args.height,
        first_function=args.first,
        second_function=args.second,
        offset_x=args.offset_x,
        offset_y=args.offset_y,
        scale_x=args.scale_x,
        scale_y=args.scale_y,
        config=SurfaceConfig.from_env(),
    )

    if args.command == "render":
        out = surface.save_png(args.out)
        report = surface.last_report or surface.redraw()
        for slot in (SlotId.PRIMARY, SlotId.SECONDARY):
            slot_report = report.slot(slot)
            if slot_report.error is not None:
                print(f"{slot.value}: {slot_report.error}")
        print(f"wrote {out} ({surface.params.width}x{surface.params.height})")
        return 0

    if args.command == "sample":
        plotter = FunctionPlotter(variable=surface.config.variable)
        fn = plotter.resolve(args.first)
        if isinstance(fn, CompilationError):
            print(json.dumps({"error": str(fn)}))
            return 1
        result = plotter.sample_path(surface.params, fn)
        payload = {
            "expression": args.first,
            "subpaths": [[list(pt) for pt in sub] for sub in result.path.subpaths],
            "gap_columns": result.gap_columns,
        }
        print(json.dumps(payload, indent=2))
        return 0

    raise RuntimeError(f"unsupported command: {args.command}")


def _add_view_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--first", default="sin(x)", help="Primary expression, drawn on top.")
    parser.add_argument("--second", default="", help="Optional secondary expression.")
    parser.add_argument("--width", type=int, default=640)
    parser.add_argument("--height", type=int, default=360)
    parser.add_argument("--offset-x", type=float, default=None, help="Pixels from the left edge to the origin.")
    parser.add_argument("--offset-y", type=float, default=None, help="Pixels from the bottom edge to the origin.")
    parser.add_argument("--scale-x", type=float, default=None, help="Pixels per world unit along x.")
    parser.add_argument("--scale-y", type=float, default=None, help="Pixels per world unit along y.")


if __name__ == "__main__":
    raise SystemExit(main())
