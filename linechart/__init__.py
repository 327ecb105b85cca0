from linechart.api import line_chart
from linechart.chart import LineChart
from linechart.commands import (
    ChartSurface,
    DrawText,
    FillCircles,
    RenderBatch,
    StrokePolyline,
    StrokeSegments,
    TextMeasurer,
)
from linechart.errors import AxisScaleError, DegenerateRange, InvalidRange, LabelFormatError, PlotDataError
from linechart.scales import AxisScale, compute_scale, format_tick
from linechart.style import ChartStyle
from linechart.transform import Bounds, ChartTransform, PlotMargins, build_transform

__all__ = [
    "AxisScale",
    "AxisScaleError",
    "Bounds",
    "ChartStyle",
    "ChartSurface",
    "ChartTransform",
    "DegenerateRange",
    "DrawText",
    "FillCircles",
    "InvalidRange",
    "LabelFormatError",
    "LineChart",
    "PlotDataError",
    "PlotMargins",
    "RenderBatch",
    "StrokePolyline",
    "StrokeSegments",
    "TextMeasurer",
    "build_transform",
    "compute_scale",
    "format_tick",
    "line_chart",
]
