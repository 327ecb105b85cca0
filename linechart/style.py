from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from linechart.commands import RGBA
from linechart.errors import InvalidRange


LabelSkip = Literal["none", "zero", "axis_crossing"]
LABEL_SKIP_POLICIES = ("none", "zero", "axis_crossing")

TITLE_FONT_SCALE = 1.2
CHART_TITLE_FONT_SCALE = 1.5


def coerce_color(color: tuple[int, int, int] | tuple[int, int, int, int], alpha: float = 1.0) -> RGBA:
    if len(color) == 3:
        r, g, b = color
        a = int(max(0.0, min(1.0, alpha)) * 255)
        return (r, g, b, a)
    r, g, b, a = color
    out_a = int(max(0.0, min(1.0, alpha)) * a)
    return (r, g, b, out_a)


@dataclass(frozen=True)
class ChartStyle:
    line_color: RGBA = (0, 255, 0, 255)
    line_width: float = 1.0
    circle_color: RGBA = (0, 255, 0, 255)
    circle_size_multiplier: float = 3.0
    axis_color: RGBA = (255, 255, 255, 255)
    axis_line_width: float = 1.0
    show_inner_lines: bool = True
    show_points: bool = True
    label_font_size: float = 10.0
    x_tick_count: int = 5
    y_tick_count: int = 6
    x_title: str | None = None
    y_title: str | None = None
    chart_title: str | None = None
    tick_mark_length: float = 5.0
    x_label_skip: LabelSkip = "zero"
    y_label_skip: LabelSkip = "none"
    background: RGBA = (0, 0, 0, 255)

    def __post_init__(self) -> None:
        if self.line_width <= 0 or self.axis_line_width <= 0:
            raise ValueError("line widths must be > 0")
        if self.circle_size_multiplier < 0:
            raise ValueError("circle_size_multiplier must be >= 0")
        if self.label_font_size <= 0:
            raise ValueError("label_font_size must be > 0")
        if self.tick_mark_length < 0:
            raise ValueError("tick_mark_length must be >= 0")
        if self.x_tick_count < 2 or self.y_tick_count < 2:
            raise InvalidRange("tick counts must be >= 2")
        for name in ("x_label_skip", "y_label_skip"):
            if getattr(self, name) not in LABEL_SKIP_POLICIES:
                raise ValueError(f"{name} must be one of {LABEL_SKIP_POLICIES}")
        for name in ("line_color", "circle_color", "axis_color", "background"):
            color = getattr(self, name)
            if len(color) != 4 or any(not 0 <= int(c) <= 255 for c in color):
                raise ValueError(f"{name} must be an RGBA tuple of 0-255 ints")

    @property
    def title_font_size(self) -> float:
        return self.label_font_size * TITLE_FONT_SCALE

    @property
    def chart_title_font_size(self) -> float:
        return self.label_font_size * CHART_TITLE_FONT_SCALE

    @property
    def marker_radius(self) -> float:
        return self.line_width * self.circle_size_multiplier / 2.0

    @property
    def grid_color(self) -> RGBA:
        return coerce_color(self.axis_color, 0.5)

    def layout_key(self) -> tuple[object, ...]:
        """Fields that change margins or tick layout."""
        return (
            self.x_title,
            self.y_title,
            self.chart_title,
            self.label_font_size,
            self.x_tick_count,
            self.y_tick_count,
        )
