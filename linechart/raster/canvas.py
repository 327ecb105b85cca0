from __future__ import annotations

import numpy as np

from linechart.commands import RGBA


def new_canvas(width: int, height: int, color: RGBA = (0, 0, 0, 255)) -> np.ndarray:
    canvas = np.empty((height, width, 4), dtype=np.uint8)
    canvas[:, :] = np.asarray(color, dtype=np.uint8)
    return canvas


def _blend_into(view: np.ndarray, color: RGBA) -> None:
    a = color[3] / 255.0
    inv = 1.0 - a
    rgb = np.asarray(color[0:3], dtype=np.float32)
    view[..., :3] = (rgb * a + view[..., :3].astype(np.float32) * inv).astype(np.uint8)
    view[..., 3] = np.maximum(view[..., 3], color[3])


def blend_pixels(dst: np.ndarray, xs: np.ndarray, ys: np.ndarray, color: RGBA) -> None:
    """Blend `color` once into each distinct in-bounds (x, y) pixel."""
    h, w = dst.shape[:2]
    keep = (xs >= 0) & (xs < w) & (ys >= 0) & (ys < h)
    if not np.any(keep):
        return
    flat = dst.reshape(-1, 4)
    idx = np.unique(ys[keep].astype(np.intp) * w + xs[keep].astype(np.intp))
    pixels = flat[idx]
    _blend_into(pixels, color)
    flat[idx] = pixels


def blend_coverage(dst: np.ndarray, x: int, y: int, coverage: np.ndarray, color: RGBA) -> None:
    """Composite `color` through an 8-bit coverage mask whose top-left sits at (x, y)."""
    h, w = coverage.shape
    x0, y0 = max(0, x), max(0, y)
    x1, y1 = min(dst.shape[1], x + w), min(dst.shape[0], y + h)
    if x1 <= x0 or y1 <= y0:
        return
    alpha = coverage[y0 - y : y1 - y, x0 - x : x1 - x, None].astype(np.float32) * (color[3] / (255.0 * 255.0))
    if not np.any(alpha > 0):
        return
    view = dst[y0:y1, x0:x1]
    rgb = np.asarray(color[0:3], dtype=np.float32)
    view[..., :3] = np.clip(rgb * alpha + view[..., :3].astype(np.float32) * (1.0 - alpha), 0, 255).astype(np.uint8)
    view[..., 3] = np.maximum(view[..., 3], np.rint(alpha[..., 0] * 255.0).astype(np.uint8))


def draw_hline(dst: np.ndarray, x0: int, x1: int, y: int, color: RGBA) -> None:
    if y < 0 or y >= dst.shape[0]:
        return
    xa = max(0, min(x0, x1))
    xb = min(dst.shape[1] - 1, max(x0, x1))
    if xa > xb:
        return
    _blend_into(dst[y, xa : xb + 1], color)


def draw_vline(dst: np.ndarray, x: int, y0: int, y1: int, color: RGBA) -> None:
    if x < 0 or x >= dst.shape[1]:
        return
    ya = max(0, min(y0, y1))
    yb = min(dst.shape[0] - 1, max(y0, y1))
    if ya > yb:
        return
    _blend_into(dst[ya : yb + 1, x], color)
