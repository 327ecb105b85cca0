from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path

import numpy as np
from PIL import Image

from linechart.commands import RGBA, DrawText, FillCircles, RenderBatch, StrokePolyline, StrokeSegments
from linechart.raster.canvas import new_canvas
from linechart.raster.draw_lines import draw_polyline, draw_segment
from linechart.raster.draw_markers import draw_circles
from linechart.raster.draw_text import DEFAULT_FONT_FAMILY, draw_text, text_size


LOGGER = logging.getLogger(__name__)


@dataclass
class DirtyState:
    dirty: bool = True
    passes: int = 0


class PillowTextMeasurer:
    """Text metrics from the same Pillow fonts the raster surface paints with."""

    def __init__(self, font_family: str = DEFAULT_FONT_FAMILY) -> None:
        self.font_family = font_family

    def measure_text(self, text: str, font_size: float) -> tuple[float, float]:
        w, h = text_size(text, font_family=self.font_family, font_size_px=font_size)
        return (float(w), float(h))


class RasterSurface(PillowTextMeasurer):
    """RGBA numpy canvas that repaints itself from each `RenderBatch`."""

    def __init__(
        self,
        width: int,
        height: int,
        *,
        background: RGBA = (0, 0, 0, 255),
        font_family: str = DEFAULT_FONT_FAMILY,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("width and height must be > 0")
        super().__init__(font_family=font_family)
        self.width = int(width)
        self.height = int(height)
        self.background = background
        self.state = DirtyState()
        self._canvas = new_canvas(self.width, self.height, color=background)

    @property
    def dirty(self) -> bool:
        return self.state.dirty

    def invalidate(self) -> None:
        self.state.dirty = True

    def draw_batch(self, batch: RenderBatch) -> None:
        canvas = new_canvas(self.width, self.height, color=self.background)
        for cmd in batch.commands:
            if isinstance(cmd, StrokeSegments):
                pen = _pen_width(cmd.width)
                for (x0, y0), (x1, y1) in cmd.segments:
                    draw_segment(canvas, _px(x0), _px(y0), _px(x1), _px(y1), color=cmd.color, width=pen)
            elif isinstance(cmd, StrokePolyline):
                xs, ys = _split(cmd.points)
                draw_polyline(canvas, np.rint(xs).astype(np.int32), np.rint(ys).astype(np.int32), cmd.color, width=_pen_width(cmd.width))
            elif isinstance(cmd, FillCircles):
                xs, ys = _split(cmd.centers)
                draw_circles(canvas, xs, ys, cmd.color, radius=cmd.radius)
            elif isinstance(cmd, DrawText):
                draw_text(
                    canvas,
                    _px(cmd.x),
                    _px(cmd.y),
                    cmd.text,
                    cmd.color,
                    font_family=self.font_family,
                    font_size_px=cmd.font_size,
                    rotate_deg=cmd.rotate_deg,
                )
            else:
                raise TypeError(f"unsupported draw command: {type(cmd)!r}")
        self._canvas = canvas
        self.state.dirty = False
        self.state.passes += 1
        LOGGER.debug("raster pass %d painted %d commands", self.state.passes, len(batch))

    def to_rgba(self) -> np.ndarray:
        return self._canvas.copy()

    def to_image(self) -> Image.Image:
        return Image.fromarray(self._canvas)

    def save(self, path: str | Path) -> None:
        self.to_image().save(Path(path), format="PNG")


def _px(value: float) -> int:
    return int(round(value))


def _pen_width(width: float) -> int:
    return max(1, int(round(width)))


def _split(points: tuple[tuple[float, float], ...]) -> tuple[np.ndarray, np.ndarray]:
    if not points:
        empty = np.zeros(0, dtype=np.float64)
        return empty, empty.copy()
    arr = np.asarray(points, dtype=np.float64)
    return arr[:, 0], arr[:, 1]
