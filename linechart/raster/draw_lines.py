from __future__ import annotations

import numpy as np

from linechart.commands import RGBA
from linechart.raster.canvas import blend_pixels, draw_hline, draw_vline


def draw_polyline(dst: np.ndarray, xs: np.ndarray, ys: np.ndarray, color: RGBA, width: int = 1) -> None:
    if xs.size < 2:
        return
    runs = [_line_points(int(xs[i]), int(ys[i]), int(xs[i + 1]), int(ys[i + 1])) for i in range(xs.size - 1)]
    # Shared vertices are painted once, so translucent lines stay even.
    _stamp(
        dst,
        np.concatenate([px for px, _ in runs]),
        np.concatenate([py for _, py in runs]),
        color=color,
        width=width,
    )


def draw_segment(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: RGBA, width: int = 1) -> None:
    if width <= 1 and y0 == y1:
        draw_hline(dst, x0, x1, y0, color)
        return
    if width <= 1 and x0 == x1:
        draw_vline(dst, x0, y0, y1, color)
        return
    px, py = _line_points(x0, y0, x1, y1)
    _stamp(dst, px, py, color=color, width=width)


def _line_points(x0: int, y0: int, x1: int, y1: int) -> tuple[np.ndarray, np.ndarray]:
    n = max(abs(x1 - x0), abs(y1 - y0)) + 1
    px = np.rint(np.linspace(x0, x1, n)).astype(np.intp)
    py = np.rint(np.linspace(y0, y1, n)).astype(np.intp)
    return px, py


def _stamp(dst: np.ndarray, px: np.ndarray, py: np.ndarray, color: RGBA, width: int) -> None:
    radius = max(0, width // 2)
    if radius == 0:
        blend_pixels(dst, px, py, color)
        return
    offsets = np.arange(-radius, radius + 1)
    ox, oy = np.meshgrid(offsets, offsets)
    blend_pixels(
        dst,
        (px[:, None] + ox.ravel()[None, :]).ravel(),
        (py[:, None] + oy.ravel()[None, :]).ravel(),
        color,
    )
