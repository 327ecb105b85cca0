from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import numpy as np

from linechart import ChartStyle, line_chart


def _sample_points() -> list[tuple[float, float]]:
    x = np.linspace(0.0, 48.0, 25, dtype=np.float64)
    y = 40.0 * np.sin(x * 0.18) + 0.9 * x - 6.0
    y[11] = np.nan
    return list(zip(x.tolist(), y.tolist()))


def main() -> None:
    out_dir = Path(__file__).resolve().parent / "out"
    out_dir.mkdir(parents=True, exist_ok=True)

    style = ChartStyle(
        chart_title="Static Line Chart",
        x_title="hour",
        y_title="load",
        line_width=2.0,
        label_font_size=12.0,
    )
    points = _sample_points()

    raster = line_chart(960, 540, style=style)
    raster.plot(points)
    raster.draw()
    png_path = out_dir / "static_line_chart.png"
    raster.surface.save(png_path)

    vector = line_chart(960, 540, backend="svg", style=replace(style, show_inner_lines=False))
    vector.plot(points)
    vector.draw()
    svg_path = out_dir / "static_line_chart.svg"
    vector.surface.save(svg_path)

    print(f"wrote {png_path}")
    print(f"wrote {svg_path}")


if __name__ == "__main__":
    main()
