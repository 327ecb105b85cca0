from __future__ import annotations

import logging
import math
from typing import Any

import numpy as np

from linechart.adapters import normalize_points
from linechart.commands import (
    ChartSurface,
    DrawCommand,
    DrawText,
    FillCircles,
    Point,
    RenderBatch,
    StrokePolyline,
    StrokeSegments,
)
from linechart.errors import PlotDataError
from linechart.scales import AxisScale, compute_extent, compute_scale, format_ticks_for_axis
from linechart.series import SeriesData
from linechart.style import ChartStyle, LabelSkip
from linechart.transform import LABEL_GAP, Bounds, ChartTransform, build_transform


LOGGER = logging.getLogger(__name__)


def _contiguous_true_runs(mask: np.ndarray) -> list[tuple[int, int]]:
    idx = np.flatnonzero(mask)
    if idx.size == 0:
        return []
    runs: list[tuple[int, int]] = []
    start = int(idx[0])
    prev = int(idx[0])
    for v in idx[1:]:
        iv = int(v)
        if iv == prev + 1:
            prev = iv
            continue
        runs.append((start, prev + 1))
        start = iv
        prev = iv
    runs.append((start, prev + 1))
    return runs


def _skip_label(policy: LabelSkip, value: float, crossing: float, step: float) -> bool:
    if policy == "zero":
        return value == 0.0
    if policy == "axis_crossing":
        return math.isclose(value, crossing, rel_tol=0.0, abs_tol=step * 1e-9)
    return False


class LineChart:
    """Single-series line chart drawn onto a `ChartSurface`.

    The transform is derived the first time data is plotted and then kept:
    later `plot` calls project through it unchanged until `set_axis_range`
    or `reset_range` asks for a rescale.
    """

    def __init__(self, surface: ChartSurface, bounds: Bounds, style: ChartStyle | None = None) -> None:
        self._surface = surface
        self._bounds = bounds
        self._style = style if style is not None else ChartStyle()
        self._series = SeriesData.empty()
        self._x_scale: AxisScale | None = None
        self._y_scale: AxisScale | None = None
        self._transform: ChartTransform | None = None

    @property
    def surface(self) -> ChartSurface:
        return self._surface

    @property
    def bounds(self) -> Bounds:
        return self._bounds

    @property
    def style(self) -> ChartStyle:
        return self._style

    @property
    def series(self) -> SeriesData:
        return self._series

    @property
    def x_scale(self) -> AxisScale | None:
        return self._x_scale

    @property
    def y_scale(self) -> AxisScale | None:
        return self._y_scale

    @property
    def transform(self) -> ChartTransform | None:
        return self._transform

    @property
    def has_data(self) -> bool:
        return not self._series.is_empty

    def plot(self, points: Any) -> None:
        series = normalize_points(points)
        if series.is_empty:
            self._series = SeriesData.empty()
            LOGGER.debug("plot cleared series; transform kept")
            self._surface.invalidate()
            return
        if self._transform is None:
            self.set_axis_range(series)
        self._series = series
        self._surface.invalidate()

    def set_axis_range(self, points: Any) -> None:
        series = points if isinstance(points, SeriesData) else normalize_points(points)
        if series.is_empty:
            return
        limits = compute_extent(series.x, series.y, series.mask)
        x_scale = compute_scale(limits.xmin, limits.xmax, self._style.x_tick_count)
        y_scale = compute_scale(limits.ymin, limits.ymax, self._style.y_tick_count)
        transform = self._layout(x_scale, y_scale, self._style, self._bounds)
        LOGGER.debug(
            "axis range x=[%g, %g] (%d ticks) y=[%g, %g] (%d ticks)",
            x_scale.scale_min,
            x_scale.scale_max,
            x_scale.tick_count,
            y_scale.scale_min,
            y_scale.scale_max,
            y_scale.tick_count,
        )
        self._x_scale, self._y_scale, self._transform = x_scale, y_scale, transform
        self._surface.invalidate()

    def reset_range(self) -> None:
        self.set_axis_range(self._series)

    def build_transform(self, bounds: Bounds | None = None) -> ChartTransform:
        if self._x_scale is None or self._y_scale is None:
            raise PlotDataError("axis scales are not set; plot data or call set_axis_range first")
        bounds = self._bounds if bounds is None else bounds
        self._transform = self._layout(self._x_scale, self._y_scale, self._style, bounds)
        self._bounds = bounds
        self._surface.invalidate()
        return self._transform

    def set_bounds(self, bounds: Bounds) -> None:
        if self._x_scale is None or self._y_scale is None:
            self._bounds = bounds
            return
        self.build_transform(bounds)

    def set_style(self, style: ChartStyle) -> None:
        previous = self._style
        x_scale, y_scale, transform = self._x_scale, self._y_scale, self._transform
        if x_scale is not None and y_scale is not None:
            if (previous.x_tick_count, previous.y_tick_count) != (style.x_tick_count, style.y_tick_count):
                x_scale = compute_scale(x_scale.data_min, x_scale.data_max, style.x_tick_count)
                y_scale = compute_scale(y_scale.data_min, y_scale.data_max, style.y_tick_count)
            if previous.layout_key() != style.layout_key():
                transform = self._layout(x_scale, y_scale, style, self._bounds)
        self._style = style
        self._x_scale, self._y_scale, self._transform = x_scale, y_scale, transform
        self._surface.invalidate()

    def render(self, style: ChartStyle | None = None) -> RenderBatch:
        """Build the draw list for one pass.

        `style` may override paint-only fields; margins and ticks stay those
        of the stored style, so a different `layout_key()` is rejected.
        """
        t = self._transform
        x_scale = self._x_scale
        y_scale = self._y_scale
        if style is not None and style.layout_key() != self._style.layout_key():
            raise ValueError("render style changes titles, font size or tick counts; use set_style instead")
        if t is None or x_scale is None or y_scale is None:
            return RenderBatch()
        style = self._style if style is None else style

        commands: list[DrawCommand] = []
        commands.append(self._tick_lines(t, x_scale, y_scale, style))
        commands.append(self._axis_lines(t, x_scale, y_scale, style))
        commands.extend(self._tick_labels(t, x_scale, y_scale, style))
        commands.extend(self._titles(t, x_scale, y_scale, style))
        commands.extend(self._data_geometry(t, style))
        return RenderBatch(commands=tuple(commands))

    def draw(self) -> RenderBatch:
        batch = self.render()
        self._surface.draw_batch(batch)
        return batch

    def _layout(self, x_scale: AxisScale, y_scale: AxisScale, style: ChartStyle, bounds: Bounds) -> ChartTransform:
        return build_transform(
            bounds,
            x_scale,
            y_scale,
            measurer=self._surface,
            x_title=style.x_title,
            y_title=style.y_title,
            chart_title=style.chart_title,
            label_font_size=style.label_font_size,
        )

    def _tick_lines(self, t: ChartTransform, x_scale: AxisScale, y_scale: AxisScale, style: ChartStyle) -> StrokeSegments:
        segments: list[tuple[Point, Point]] = []
        x_axis_y = y_scale.axis_position()
        y_axis_x = x_scale.axis_position()
        for xv in x_scale.tick_values().tolist():
            if style.show_inner_lines:
                segments.append((t.apply(xv, y_scale.scale_min), t.apply(xv, y_scale.scale_max)))
            else:
                bx, by = t.apply(xv, x_axis_y)
                segments.append(((bx, by), (bx, by - style.tick_mark_length)))
        for yv in y_scale.tick_values().tolist():
            if style.show_inner_lines:
                segments.append((t.apply(x_scale.scale_min, yv), t.apply(x_scale.scale_max, yv)))
            else:
                bx, by = t.apply(y_axis_x, yv)
                segments.append(((bx, by), (bx + style.tick_mark_length, by)))
        return StrokeSegments(
            segments=tuple(segments),
            color=style.grid_color,
            width=style.axis_line_width / 2.0,
            role="grid" if style.show_inner_lines else "tick",
        )

    def _axis_lines(self, t: ChartTransform, x_scale: AxisScale, y_scale: AxisScale, style: ChartStyle) -> StrokeSegments:
        x_axis_y = y_scale.axis_position()
        y_axis_x = x_scale.axis_position()
        return StrokeSegments(
            segments=(
                (t.apply(x_scale.scale_min, x_axis_y), t.apply(x_scale.scale_max, x_axis_y)),
                (t.apply(y_axis_x, y_scale.scale_min), t.apply(y_axis_x, y_scale.scale_max)),
            ),
            color=style.axis_color,
            width=style.axis_line_width,
            role="axis",
        )

    def _tick_labels(self, t: ChartTransform, x_scale: AxisScale, y_scale: AxisScale, style: ChartStyle) -> list[DrawText]:
        out: list[DrawText] = []
        font = style.label_font_size
        y_axis_x = x_scale.axis_position()
        x_axis_y = y_scale.axis_position()

        for xv, label in zip(x_scale.tick_values().tolist(), format_ticks_for_axis(x_scale)):
            if label is None or _skip_label(style.x_label_skip, xv, y_axis_x, x_scale.step):
                continue
            w, _ = self._surface.measure_text(label, font)
            ax, ay = t.apply(xv, y_scale.scale_min)
            out.append(DrawText(text=label, x=ax - w / 2.0, y=ay + 1.0, font_size=font, color=style.axis_color))

        for yv, label in zip(y_scale.tick_values().tolist(), format_ticks_for_axis(y_scale)):
            if label is None or _skip_label(style.y_label_skip, yv, x_axis_y, y_scale.step):
                continue
            w, h = self._surface.measure_text(label, font)
            ax, ay = t.apply(x_scale.scale_min, yv)
            out.append(
                DrawText(text=label, x=ax - w - LABEL_GAP, y=ay - h / 2.0, font_size=font, color=style.axis_color)
            )
        return out

    def _titles(self, t: ChartTransform, x_scale: AxisScale, y_scale: AxisScale, style: ChartStyle) -> list[DrawText]:
        out: list[DrawText] = []
        b = t.bounds
        left, top, right, bottom = t.plot_rect
        mid_x = (left + right) / 2.0
        mid_y = (top + bottom) / 2.0
        if style.x_title:
            w, h = self._surface.measure_text(style.x_title, style.title_font_size)
            out.append(
                DrawText(
                    text=style.x_title,
                    x=mid_x - w / 2.0,
                    y=b.y + b.height - LABEL_GAP - h,
                    font_size=style.title_font_size,
                    color=style.axis_color,
                )
            )
        if style.y_title:
            w, _ = self._surface.measure_text(style.y_title, style.title_font_size)
            out.append(
                DrawText(
                    text=style.y_title,
                    x=b.x + LABEL_GAP / 2.0,
                    y=mid_y - w / 2.0,
                    font_size=style.title_font_size,
                    color=style.axis_color,
                    rotate_deg=90,
                )
            )
        if style.chart_title:
            w, _ = self._surface.measure_text(style.chart_title, style.chart_title_font_size)
            out.append(
                DrawText(
                    text=style.chart_title,
                    x=mid_x - w / 2.0,
                    y=b.y + LABEL_GAP / 2.0,
                    font_size=style.chart_title_font_size,
                    color=style.axis_color,
                )
            )
        return out

    def _data_geometry(self, t: ChartTransform, style: ChartStyle) -> list[DrawCommand]:
        series = self._series
        if series.is_empty:
            return []
        px, py = t.apply_many(series.x, series.y)
        out: list[DrawCommand] = []
        # Non-finite samples break the line instead of being bridged.
        for start, end in _contiguous_true_runs(series.mask):
            points = tuple(zip(px[start:end].tolist(), py[start:end].tolist()))
            out.append(StrokePolyline(points=points, color=style.line_color, width=style.line_width))
        if style.show_points:
            centers = tuple(zip(px[series.mask].tolist(), py[series.mask].tolist()))
            out.append(FillCircles(centers=centers, radius=style.marker_radius, color=style.circle_color))
        return out
