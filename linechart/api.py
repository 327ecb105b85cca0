from __future__ import annotations

from dataclasses import replace
from typing import Any, Literal

from linechart.chart import LineChart
from linechart.raster import RasterSurface
from linechart.style import ChartStyle
from linechart.svg import SvgSurface
from linechart.transform import Bounds


DEFAULT_WIDTH = 640
DEFAULT_HEIGHT = 400


def line_chart(
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    *,
    backend: Literal["raster", "svg"] = "raster",
    style: ChartStyle | None = None,
    **style_overrides: Any,
) -> LineChart:
    if width <= 0 or height <= 0:
        raise ValueError("width and height must be > 0")
    resolved = style if style is not None else ChartStyle()
    if style_overrides:
        resolved = replace(resolved, **style_overrides)
    if backend == "raster":
        surface: RasterSurface | SvgSurface = RasterSurface(width, height, background=resolved.background)
    elif backend == "svg":
        surface = SvgSurface(width, height, background=resolved.background)
    else:
        raise ValueError(f"unknown backend: {backend}")
    return LineChart(surface, Bounds(width=width, height=height), resolved)
