from __future__ import annotations


class PlotDataError(ValueError):
    """Raised when chart input data or layout cannot be used."""


class AxisScaleError(PlotDataError):
    pass


class InvalidRange(AxisScaleError):
    """Tick count below two, or a reversed data extent."""


class DegenerateRange(AxisScaleError):
    """Zero-width or non-finite data extent; no step can be derived."""


class LabelFormatError(PlotDataError):
    pass
