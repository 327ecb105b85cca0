from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol, Union


RGBA = tuple[int, int, int, int]
Point = tuple[float, float]
SegmentRole = Literal["grid", "tick", "axis"]


@dataclass(frozen=True)
class StrokeSegments:
    """Independent straight segments stroked with one pen."""

    segments: tuple[tuple[Point, Point], ...]
    color: RGBA
    width: float
    role: SegmentRole = "grid"


@dataclass(frozen=True)
class StrokePolyline:
    points: tuple[Point, ...]
    color: RGBA
    width: float


@dataclass(frozen=True)
class FillCircles:
    centers: tuple[Point, ...]
    radius: float
    color: RGBA


@dataclass(frozen=True)
class DrawText:
    """Text whose (possibly rotated) bounding box has its top-left at `x`, `y`.

    `rotate_deg` is a counter-clockwise quarter turn multiple.
    """

    text: str
    x: float
    y: float
    font_size: float
    color: RGBA
    rotate_deg: int = 0


DrawCommand = Union[StrokeSegments, StrokePolyline, FillCircles, DrawText]


@dataclass(frozen=True)
class RenderBatch:
    """Draw list for a single pass; surfaces paint it in order."""

    commands: tuple[DrawCommand, ...] = ()

    def __len__(self) -> int:
        return len(self.commands)

    @property
    def is_empty(self) -> bool:
        return not self.commands

    def of_type(self, kind: type) -> tuple[DrawCommand, ...]:
        return tuple(cmd for cmd in self.commands if isinstance(cmd, kind))


class TextMeasurer(Protocol):
    def measure_text(self, text: str, font_size: float) -> tuple[float, float]:
        ...


class ChartSurface(TextMeasurer, Protocol):
    """Host surface: measures text, paints batches, and accepts repaint requests."""

    def draw_batch(self, batch: RenderBatch) -> None:
        ...

    def invalidate(self) -> None:
        ...
