from __future__ import annotations

from pathlib import Path
import xml.etree.ElementTree as ET

from linechart.commands import RGBA, DrawText, FillCircles, RenderBatch, StrokePolyline, StrokeSegments, TextMeasurer
from linechart.raster import PillowTextMeasurer


SVG_NS = "http://www.w3.org/2000/svg"


class SvgSurface:
    """Serializes each `RenderBatch` into a standalone SVG document."""

    def __init__(
        self,
        width: float,
        height: float,
        *,
        background: RGBA = (0, 0, 0, 255),
        measurer: TextMeasurer | None = None,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("width and height must be > 0")
        self.width = float(width)
        self.height = float(height)
        self.background = background
        self.dirty = True
        self._measurer = measurer if measurer is not None else PillowTextMeasurer()
        self._root = self._new_root()

    def measure_text(self, text: str, font_size: float) -> tuple[float, float]:
        return self._measurer.measure_text(text, font_size)

    def invalidate(self) -> None:
        self.dirty = True

    def draw_batch(self, batch: RenderBatch) -> None:
        root = self._new_root()
        for cmd in batch.commands:
            if isinstance(cmd, StrokeSegments):
                d = " ".join(f"M{_num(x0)} {_num(y0)} L{_num(x1)} {_num(y1)}" for (x0, y0), (x1, y1) in cmd.segments)
                ET.SubElement(
                    root,
                    "path",
                    {"class": cmd.role, "d": d, "fill": "none", "stroke-width": _num(cmd.width), **_paint("stroke", cmd.color)},
                )
            elif isinstance(cmd, StrokePolyline):
                ET.SubElement(
                    root,
                    "polyline",
                    {
                        "points": " ".join(f"{_num(x)},{_num(y)}" for x, y in cmd.points),
                        "fill": "none",
                        "stroke-width": _num(cmd.width),
                        "stroke-linejoin": "round",
                        **_paint("stroke", cmd.color),
                    },
                )
            elif isinstance(cmd, FillCircles):
                group = ET.SubElement(root, "g", {"class": "markers", **_paint("fill", cmd.color)})
                for cx, cy in cmd.centers:
                    ET.SubElement(group, "circle", {"cx": _num(cx), "cy": _num(cy), "r": _num(cmd.radius)})
            elif isinstance(cmd, DrawText):
                root.append(self._text_element(cmd))
            else:
                raise TypeError(f"unsupported draw command: {type(cmd)!r}")
        self._root = root
        self.dirty = False

    def to_markup(self) -> str:
        return ET.tostring(self._root, encoding="unicode")

    def save(self, path: str | Path) -> None:
        Path(path).write_text(self.to_markup(), encoding="utf-8")

    def _text_element(self, cmd: DrawText) -> ET.Element:
        attrs = {
            "font-size": _num(cmd.font_size),
            "font-family": "sans-serif",
            "dominant-baseline": "hanging",
            **_paint("fill", cmd.color),
        }
        turns = (cmd.rotate_deg // 90) % 4
        if turns == 0:
            attrs.update({"x": _num(cmd.x), "y": _num(cmd.y)})
        elif turns == 1:
            # Anchor at the bottom-left of the rotated box, then turn counter-clockwise.
            w, _ = self.measure_text(cmd.text, cmd.font_size)
            ax, ay = cmd.x, cmd.y + w
            attrs.update({"x": _num(ax), "y": _num(ay), "transform": f"rotate(-90 {_num(ax)} {_num(ay)})"})
        else:
            raise ValueError(f"unsupported text rotation for SVG output: {cmd.rotate_deg}")
        elem = ET.Element("text", attrs)
        elem.text = cmd.text
        return elem

    def _new_root(self) -> ET.Element:
        root = ET.Element(
            "svg",
            {
                "xmlns": SVG_NS,
                "width": _num(self.width),
                "height": _num(self.height),
                "viewBox": f"0 0 {_num(self.width)} {_num(self.height)}",
            },
        )
        ET.SubElement(
            root,
            "rect",
            {"x": "0", "y": "0", "width": _num(self.width), "height": _num(self.height), **_paint("fill", self.background)},
        )
        return root


def _paint(kind: str, color: RGBA) -> dict[str, str]:
    r, g, b, a = color
    out = {kind: f"rgb({r},{g},{b})"}
    if a != 255:
        out[f"{kind}-opacity"] = _num(a / 255.0)
    return out


def _num(value: float) -> str:
    out = f"{float(value):.3f}".rstrip("0").rstrip(".")
    return "0" if out in {"", "-0"} else out
