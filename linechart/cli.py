from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from linechart.adapters import read_points_csv
from linechart.api import DEFAULT_HEIGHT, DEFAULT_WIDTH, line_chart
from linechart.errors import PlotDataError
from linechart.style import ChartStyle


LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="linechart")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render a CSV of x,y points to a PNG or SVG line chart.")
    render.add_argument("input", type=Path)
    render.add_argument("-o", "--output", type=Path, required=True, help="Output path; `.svg` selects SVG, anything else PNG.")
    render.add_argument("--width", type=int, default=DEFAULT_WIDTH)
    render.add_argument("--height", type=int, default=DEFAULT_HEIGHT)
    render.add_argument("--title", default=None, help="Chart title.")
    render.add_argument("--x-title", default=None)
    render.add_argument("--y-title", default=None)
    render.add_argument("--x-ticks", type=int, default=5)
    render.add_argument("--y-ticks", type=int, default=6)
    render.add_argument("--line-width", type=float, default=1.0)
    render.add_argument("--font-size", type=float, default=10.0, help="Tick label font size; titles scale from it.")
    render.add_argument("--no-points", action="store_true", help="Do not draw point markers.")
    render.add_argument("--no-grid", action="store_true", help="Draw short tick marks instead of full gridlines.")
    render.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default="WARNING")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    if args.command == "render":
        return _render(args)
    raise RuntimeError(f"unsupported command: {args.command}")


def _render(args: argparse.Namespace) -> int:
    try:
        style = ChartStyle(
            line_width=args.line_width,
            label_font_size=args.font_size,
            x_tick_count=args.x_ticks,
            y_tick_count=args.y_ticks,
            chart_title=args.title,
            x_title=args.x_title,
            y_title=args.y_title,
            show_points=not args.no_points,
            show_inner_lines=not args.no_grid,
        )
        points = read_points_csv(args.input)
        backend = "svg" if args.output.suffix.lower() == ".svg" else "raster"
        chart = line_chart(args.width, args.height, backend=backend, style=style)
        chart.plot(points)
        chart.draw()
        chart.surface.save(args.output)
    except (PlotDataError, ValueError, OSError) as exc:
        LOGGER.error("render failed: %s", exc)
        return 2
    LOGGER.info("wrote %d points to %s", len(points), args.output)
    return 0
