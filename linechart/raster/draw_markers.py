from __future__ import annotations

import math

import numpy as np

from linechart.commands import RGBA
from linechart.raster.canvas import draw_hline


def draw_circles(dst: np.ndarray, xs: np.ndarray, ys: np.ndarray, color: RGBA, radius: float = 1.0) -> None:
    r = max(0.5, float(radius))
    for x, y in zip(xs.tolist(), ys.tolist(), strict=False):
        _fill_disc(dst, float(x), float(y), color=color, radius=r)


def _fill_disc(dst: np.ndarray, cx: float, cy: float, color: RGBA, radius: float) -> None:
    top = int(math.floor(cy - radius))
    bottom = int(math.ceil(cy + radius))
    for yy in range(top, bottom + 1):
        dy = (yy + 0.5) - cy
        if abs(dy) > radius:
            continue
        half = math.sqrt(radius * radius - dy * dy)
        x0 = int(math.ceil(cx - half - 0.5))
        x1 = int(math.floor(cx + half - 0.5))
        if x1 < x0:
            x0 = x1 = int(math.floor(cx))
        draw_hline(dst, x0, x1, yy, color)
