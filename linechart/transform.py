from __future__ import annotations

from dataclasses import dataclass
import logging

import numpy as np

from linechart.commands import TextMeasurer
from linechart.errors import PlotDataError
from linechart.scales import AxisScale, format_ticks_for_axis
from linechart.style import CHART_TITLE_FONT_SCALE, TITLE_FONT_SCALE


LOGGER = logging.getLogger(__name__)

LABEL_GAP = 2.0


@dataclass(frozen=True)
class Bounds:
    width: float
    height: float
    x: float = 0.0
    y: float = 0.0

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("bounds width/height must be > 0")


@dataclass(frozen=True)
class PlotMargins:
    left: float
    right: float
    top: float
    bottom: float


@dataclass(frozen=True)
class ChartTransform:
    """Affine data -> surface map with the y axis flipped.

    `surface_x = x * sx + tx` and `surface_y = y * -sy + ty`.
    """

    sx: float
    tx: float
    sy: float
    ty: float
    bounds: Bounds
    margins: PlotMargins

    def apply(self, x: float, y: float) -> tuple[float, float]:
        return (x * self.sx + self.tx, y * -self.sy + self.ty)

    def apply_many(self, x: np.ndarray, y: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        return (x * self.sx + self.tx, y * -self.sy + self.ty)

    @property
    def plot_rect(self) -> tuple[float, float, float, float]:
        """(left, top, right, bottom) of the plotting area in surface units."""
        b = self.bounds
        m = self.margins
        return (b.x + m.left, b.y + m.top, b.x + b.width - m.right, b.y + b.height - m.bottom)


def measure_margins(
    x_scale: AxisScale,
    y_scale: AxisScale,
    *,
    measurer: TextMeasurer,
    x_title: str | None = None,
    y_title: str | None = None,
    chart_title: str | None = None,
    label_font_size: float = 10.0,
) -> PlotMargins:
    x_label_w, x_label_h = _largest_label(format_ticks_for_axis(x_scale), measurer, label_font_size)
    y_label_w, y_label_h = _largest_label(format_ticks_for_axis(y_scale), measurer, label_font_size)

    left = y_label_w + LABEL_GAP
    right = x_label_w / 2.0 + LABEL_GAP
    top = y_label_h / 2.0 + LABEL_GAP
    bottom = x_label_h + LABEL_GAP

    title_px = label_font_size * TITLE_FONT_SCALE
    if y_title:
        # Drawn a quarter turn rotated, so its height is the horizontal extent.
        _, h = measurer.measure_text(y_title, title_px)
        left += h + LABEL_GAP
    if x_title:
        _, h = measurer.measure_text(x_title, title_px)
        bottom += h + LABEL_GAP
    if chart_title:
        _, h = measurer.measure_text(chart_title, label_font_size * CHART_TITLE_FONT_SCALE)
        top += h + LABEL_GAP
    return PlotMargins(left=left, right=right, top=top, bottom=bottom)


def build_transform(
    bounds: Bounds,
    x_scale: AxisScale,
    y_scale: AxisScale,
    *,
    measurer: TextMeasurer,
    x_title: str | None = None,
    y_title: str | None = None,
    chart_title: str | None = None,
    label_font_size: float = 10.0,
) -> ChartTransform:
    margins = measure_margins(
        x_scale,
        y_scale,
        measurer=measurer,
        x_title=x_title,
        y_title=y_title,
        chart_title=chart_title,
        label_font_size=label_font_size,
    )
    plot_w = bounds.width - margins.left - margins.right
    plot_h = bounds.height - margins.top - margins.bottom
    if plot_w <= 0 or plot_h <= 0:
        raise PlotDataError(
            f"bounds {bounds.width}x{bounds.height} leave no room for the plot area after margins {margins}"
        )

    sx = plot_w / x_scale.span()
    sy = plot_h / y_scale.span()
    tx = bounds.x + margins.left - x_scale.scale_min * sx
    ty = bounds.y + bounds.height - margins.bottom + y_scale.scale_min * sy
    LOGGER.debug("transform sx=%g tx=%g sy=%g ty=%g margins=%s", sx, tx, sy, ty, margins)
    return ChartTransform(sx=sx, tx=tx, sy=sy, ty=ty, bounds=bounds, margins=margins)


def _largest_label(labels: list[str | None], measurer: TextMeasurer, font_size: float) -> tuple[float, float]:
    sizes = [measurer.measure_text(label, font_size) for label in labels if label is not None]
    width = max((w for w, _ in sizes), default=0.0)
    height = max((h for _, h in sizes), default=font_size)
    return (float(width), float(height))
