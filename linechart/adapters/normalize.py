from __future__ import annotations

from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import Any

import numpy as np

from linechart.errors import PlotDataError
from linechart.series import SeriesData


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]

try:
    import torch
except Exception:  # pragma: no cover - optional dependency
    torch = None  # type: ignore[assignment]


def normalize_points(points: Any, *, source_name: str | None = None) -> SeriesData:
    """Coerce (x, y) point input into float64 arrays with a finite-point mask.

    Accepts a sequence of pairs (or objects with `x`/`y` attributes), an
    (N, 2) ndarray or torch tensor, a mapping with `x`/`y` keys, or a pandas
    DataFrame. An empty input yields an empty series.
    """
    if points is None:
        raise PlotDataError("points input is required")

    x_arr, y_arr = _split_xy(points)
    if x_arr.shape != y_arr.shape:
        raise PlotDataError(f"x and y length mismatch: {x_arr.size} != {y_arr.size}")
    if x_arr.size == 0:
        return SeriesData.empty()

    mask = np.isfinite(x_arr) & np.isfinite(y_arr)
    if not np.any(mask):
        raise PlotDataError("series contains no finite points")
    return SeriesData(x=x_arr, y=y_arr, mask=mask, source_name=source_name)


def _split_xy(points: Any) -> tuple[np.ndarray, np.ndarray]:
    if pd is not None and isinstance(points, pd.DataFrame):
        return _split_dataframe(points)

    if isinstance(points, Mapping):
        if "x" not in points or "y" not in points:
            raise PlotDataError("point mapping must provide `x` and `y`")
        return _coerce_1d(points["x"], label="x"), _coerce_1d(points["y"], label="y")

    if torch is not None and isinstance(points, torch.Tensor):
        tensor = points.detach()
        if tensor.is_cuda:
            tensor = tensor.cpu()
        points = tensor.to(torch.float64).numpy()

    if isinstance(points, np.ndarray):
        if points.size == 0:
            empty = np.zeros(0, dtype=np.float64)
            return empty, empty.copy()
        if points.ndim != 2 or points.shape[1] != 2:
            raise PlotDataError(f"point array must have shape (N, 2), got {points.shape}")
        return _coerce_ndarray(points[:, 0], label="x"), _coerce_ndarray(points[:, 1], label="y")

    if isinstance(points, Sequence) and not isinstance(points, (str, bytes, bytearray)):
        xs = np.empty(len(points), dtype=np.float64)
        ys = np.empty(len(points), dtype=np.float64)
        for i, point in enumerate(points):
            raw_x, raw_y = _unpack_point(point, index=i)
            xs[i] = _coerce_scalar(raw_x, label="x", index=i)
            ys[i] = _coerce_scalar(raw_y, label="y", index=i)
        return xs, ys

    raise PlotDataError(f"unsupported points input type: {type(points)!r}")


def _split_dataframe(frame: Any) -> tuple[np.ndarray, np.ndarray]:
    if "x" in frame.columns and "y" in frame.columns:
        return _coerce_1d(frame["x"], label="x"), _coerce_1d(frame["y"], label="y")
    numeric_cols = [c for c in frame.columns if _is_numeric_dtype(frame[c])]
    if len(numeric_cols) != 2:
        raise PlotDataError("DataFrame input needs `x`/`y` columns or exactly two numeric columns")
    return _coerce_1d(frame[numeric_cols[0]], label="x"), _coerce_1d(frame[numeric_cols[1]], label="y")


def _unpack_point(point: Any, *, index: int) -> tuple[Any, Any]:
    if hasattr(point, "x") and hasattr(point, "y"):
        return point.x, point.y
    if isinstance(point, np.ndarray) and point.shape == (2,):
        return point[0], point[1]
    if isinstance(point, (str, bytes, bytearray)) or not isinstance(point, Sequence):
        raise PlotDataError(f"point at index {index} is not an (x, y) pair: {point!r}")
    if len(point) != 2:
        raise PlotDataError(f"point at index {index} must have 2 coordinates, got {len(point)}")
    return point[0], point[1]


def _is_numeric_dtype(series: Any) -> bool:
    if pd is None:
        return False
    try:
        return bool(pd.api.types.is_numeric_dtype(series))
    except Exception:
        return False


def _coerce_1d(value: Any, *, label: str) -> np.ndarray:
    if torch is not None and isinstance(value, torch.Tensor):
        tensor = value.detach()
        if tensor.ndim != 1:
            raise PlotDataError(f"{label} must be 1-D")
        if tensor.is_cuda:
            tensor = tensor.cpu()
        return tensor.to(torch.float64).numpy()

    if pd is not None and isinstance(value, pd.Series):
        return _coerce_ndarray(value.to_numpy(), label=label)

    if isinstance(value, np.ndarray):
        if value.ndim != 1:
            raise PlotDataError(f"{label} must be 1-D")
        return _coerce_ndarray(value, label=label)

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return _coerce_ndarray(np.asarray(value, dtype=object), label=label)

    raise PlotDataError(f"unsupported {label} input type: {type(value)!r}")


def _coerce_ndarray(arr: np.ndarray, *, label: str) -> np.ndarray:
    if arr.dtype.kind in {"i", "u", "f", "b"}:
        return arr.astype(np.float64, copy=False)

    out = np.empty(arr.shape[0], dtype=np.float64)
    for i, raw in enumerate(arr.tolist()):
        out[i] = _coerce_scalar(raw, label=label, index=i)
    return out


def _coerce_scalar(raw: Any, *, label: str, index: int) -> float:
    if raw is None:
        return np.nan
    if isinstance(raw, Decimal):
        return float(raw)
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise PlotDataError(f"{label} contains non-numeric value at index {index}: {raw!r}") from exc
