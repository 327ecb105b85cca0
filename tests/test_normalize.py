from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
import importlib.util
from pathlib import Path
import tempfile
import unittest

import numpy as np

from linechart.adapters import normalize_points, read_points_csv
from linechart.errors import PlotDataError


@dataclass
class Sample:
    x: float
    y: float


class NormalizePointsTests(unittest.TestCase):
    def test_sequence_of_pairs(self) -> None:
        series = normalize_points([(0, 1), (2, 3.5)])
        self.assertEqual(series.x.tolist(), [0.0, 2.0])
        self.assertEqual(series.y.tolist(), [1.0, 3.5])
        self.assertEqual(series.x.dtype, np.float64)
        self.assertTrue(bool(np.all(series.mask)))

    def test_objects_with_xy_attributes(self) -> None:
        series = normalize_points([Sample(1.0, 2.0), Sample(3.0, Decimal("4.5"))])
        self.assertEqual(series.y.tolist(), [2.0, 4.5])

    def test_point_array(self) -> None:
        series = normalize_points(np.asarray([[0, 10], [1, 11], [2, 12]], dtype=np.int64), source_name="ramp")
        self.assertEqual(series.x.tolist(), [0.0, 1.0, 2.0])
        self.assertEqual(series.source_name, "ramp")

    def test_mapping_of_columns(self) -> None:
        series = normalize_points({"x": [0, 1, 2], "y": np.asarray([5.0, 6.0, 7.0])})
        self.assertEqual(series.y.tolist(), [5.0, 6.0, 7.0])

    def test_empty_input_is_an_empty_series(self) -> None:
        self.assertTrue(normalize_points([]).is_empty)
        self.assertTrue(normalize_points(np.zeros((0, 2))).is_empty)

    def test_none_is_rejected(self) -> None:
        with self.assertRaises(PlotDataError):
            normalize_points(None)

    def test_non_finite_points_are_masked(self) -> None:
        series = normalize_points([(0.0, 1.0), (1.0, float("nan")), (2.0, None), (3.0, float("inf")), (4.0, 2.0)])
        self.assertEqual(series.mask.tolist(), [True, False, False, False, True])
        fx, fy = series.finite_xy()
        self.assertEqual(fx.tolist(), [0.0, 4.0])
        self.assertEqual(fy.tolist(), [1.0, 2.0])

    def test_all_non_finite_is_rejected(self) -> None:
        with self.assertRaises(PlotDataError):
            normalize_points([(float("nan"), 1.0), (2.0, float("inf"))])

    def test_bad_shapes_are_rejected(self) -> None:
        with self.assertRaises(PlotDataError):
            normalize_points(np.zeros((3, 3)))
        with self.assertRaises(PlotDataError):
            normalize_points([(1.0, 2.0, 3.0)])
        with self.assertRaises(PlotDataError):
            normalize_points({"x": [1, 2], "y": [1]})
        with self.assertRaises(PlotDataError):
            normalize_points("0,1")

    def test_non_numeric_value_is_rejected(self) -> None:
        with self.assertRaises(PlotDataError):
            normalize_points([(0.0, "high")])

    @unittest.skipIf(importlib.util.find_spec("pandas") is None, "pandas not installed")
    def test_dataframe_inputs(self) -> None:
        import pandas as pd

        named = normalize_points(pd.DataFrame({"y": [3.0, 4.0], "x": [1.0, 2.0]}))
        self.assertEqual(named.x.tolist(), [1.0, 2.0])
        self.assertEqual(named.y.tolist(), [3.0, 4.0])

        unnamed = normalize_points(pd.DataFrame({"t": [0, 1], "label": ["a", "b"], "v": [9.0, 8.0]}))
        self.assertEqual(unnamed.x.tolist(), [0.0, 1.0])
        self.assertEqual(unnamed.y.tolist(), [9.0, 8.0])

        with self.assertRaises(PlotDataError):
            normalize_points(pd.DataFrame({"a": [1.0], "b": [2.0], "c": [3.0]}))

    @unittest.skipIf(importlib.util.find_spec("torch") is None, "torch not installed")
    def test_tensor_inputs(self) -> None:
        import torch

        series = normalize_points(torch.tensor([[0.0, 1.0], [1.0, float("nan")]], dtype=torch.float32))
        self.assertEqual(series.x.tolist(), [0.0, 1.0])
        self.assertEqual(series.mask.tolist(), [True, False])

        columns = normalize_points({"x": torch.arange(3), "y": torch.ones(3)})
        self.assertEqual(columns.y.tolist(), [1.0, 1.0, 1.0])


class ReadPointsCsvTests(unittest.TestCase):
    def _write(self, text: str) -> Path:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        path = Path(tmp.name) / "points.csv"
        path.write_text(text, encoding="utf-8")
        return path

    def test_header_row_is_skipped(self) -> None:
        path = self._write("time,value\n0,1.5\n1,2.5\n\n2,-3\n")
        self.assertEqual(read_points_csv(path), [(0.0, 1.5), (1.0, 2.5), (2.0, -3.0)])

    def test_extra_columns_are_ignored(self) -> None:
        path = self._write("0,1,ignored\n1,2,ignored\n")
        self.assertEqual(read_points_csv(path), [(0.0, 1.0), (1.0, 2.0)])

    def test_non_numeric_body_row_fails(self) -> None:
        path = self._write("x,y\n0,1\nbad,2\n")
        with self.assertRaises(PlotDataError):
            read_points_csv(path)

    def test_single_column_fails(self) -> None:
        path = self._write("1\n2\n")
        with self.assertRaises(PlotDataError):
            read_points_csv(path)


if __name__ == "__main__":
    unittest.main()
