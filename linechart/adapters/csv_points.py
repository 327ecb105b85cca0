from __future__ import annotations

import csv
from pathlib import Path

from linechart.errors import PlotDataError


def read_points_csv(path: str | Path) -> list[tuple[float, float]]:
    """Read (x, y) pairs from the first two columns; a non-numeric first row is a header."""
    points: list[tuple[float, float]] = []
    with Path(path).open(newline="", encoding="utf-8") as handle:
        for line_no, row in enumerate(csv.reader(handle), start=1):
            if not row or all(not cell.strip() for cell in row):
                continue
            if len(row) < 2:
                raise PlotDataError(f"{path}:{line_no}: expected at least 2 columns, got {len(row)}")
            try:
                points.append((float(row[0]), float(row[1])))
            except ValueError as exc:
                if line_no == 1 and not points:
                    continue
                raise PlotDataError(f"{path}:{line_no}: non-numeric value in {row[:2]!r}") from exc
    return points
