from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

import numpy as np
from PIL import Image

from linechart import line_chart
from linechart.commands import DrawText, FillCircles, RenderBatch, StrokePolyline, StrokeSegments
from linechart.raster import PillowTextMeasurer, RasterSurface, draw_circles, draw_segment, new_canvas, text_size


WHITE = (255, 255, 255, 255)
GREEN = (0, 255, 0, 255)


class RasterPrimitiveTests(unittest.TestCase):
    def test_new_canvas_fills_background(self) -> None:
        canvas = new_canvas(4, 3, color=(10, 20, 30, 255))
        self.assertEqual(canvas.shape, (3, 4, 4))
        self.assertEqual(canvas[2, 3].tolist(), [10, 20, 30, 255])

    def test_diagonal_segment_hits_both_endpoints(self) -> None:
        canvas = new_canvas(10, 10)
        draw_segment(canvas, 1, 1, 8, 6, color=WHITE)
        self.assertEqual(canvas[1, 1].tolist(), list(WHITE))
        self.assertEqual(canvas[6, 8].tolist(), list(WHITE))
        self.assertEqual(canvas[9, 0].tolist(), [0, 0, 0, 255])

    def test_half_alpha_blends_with_background(self) -> None:
        canvas = new_canvas(5, 5)
        draw_segment(canvas, 0, 2, 4, 2, color=(255, 255, 255, 127))
        value = int(canvas[2, 2, 0])
        self.assertGreater(value, 100)
        self.assertLess(value, 150)

    def test_circle_covers_its_center(self) -> None:
        canvas = new_canvas(20, 20)
        draw_circles(canvas, np.asarray([10.0]), np.asarray([10.0]), GREEN, radius=3.0)
        self.assertEqual(canvas[10, 10].tolist(), list(GREEN))
        self.assertEqual(canvas[10, 16].tolist(), [0, 0, 0, 255])

    def test_rotated_text_size_swaps_dimensions(self) -> None:
        w0, h0 = text_size("value", font_size_px=18.0)
        w1, h1 = text_size("value", font_size_px=18.0, rotate_deg=90)
        self.assertEqual((w0, h0), (h1, w1))

    def test_measurer_grows_with_text(self) -> None:
        measurer = PillowTextMeasurer()
        short_w, short_h = measurer.measure_text("1", 10.0)
        long_w, _ = measurer.measure_text("1000", 10.0)
        self.assertGreater(short_h, 0.0)
        self.assertGreater(long_w, short_w)


class RasterSurfaceTests(unittest.TestCase):
    def test_draw_batch_repaints_and_clears_dirty(self) -> None:
        surface = RasterSurface(40, 30)
        self.assertTrue(surface.dirty)
        batch = RenderBatch(
            commands=(
                StrokeSegments(segments=(((0.0, 15.0), (39.0, 15.0)),), color=WHITE, width=1.0, role="axis"),
                StrokePolyline(points=((0.0, 0.0), (10.0, 0.0), (10.0, 10.0)), color=GREEN, width=1.0),
                FillCircles(centers=((30.0, 5.0),), radius=2.0, color=GREEN),
                DrawText(text="8", x=20.0, y=18.0, font_size=10.0, color=WHITE),
            )
        )
        surface.draw_batch(batch)
        self.assertFalse(surface.dirty)
        self.assertEqual(surface.state.passes, 1)
        rgba = surface.to_rgba()
        self.assertEqual(rgba[15, 20].tolist(), list(WHITE))
        self.assertEqual(rgba[5, 10].tolist(), list(GREEN))
        self.assertEqual(rgba[5, 30].tolist(), list(GREEN))
        self.assertTrue(np.any(rgba[18:30, 20:30, 0] > 0))

        surface.invalidate()
        self.assertTrue(surface.dirty)
        surface.draw_batch(RenderBatch())
        self.assertEqual(int(surface.to_rgba()[:, :, :3].max()), 0)

    def test_unknown_command_is_rejected(self) -> None:
        surface = RasterSurface(10, 10)
        with self.assertRaises(TypeError):
            surface.draw_batch(RenderBatch(commands=("line",)))  # type: ignore[arg-type]

    def test_invalid_size_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            RasterSurface(0, 10)

    def test_save_writes_png(self) -> None:
        surface = RasterSurface(32, 16, background=(1, 2, 3, 255))
        surface.draw_batch(RenderBatch())
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "chart.png"
            surface.save(path)
            with Image.open(path) as image:
                self.assertEqual(image.size, (32, 16))
                self.assertEqual(image.mode, "RGBA")
                self.assertEqual(image.getpixel((0, 0)), (1, 2, 3, 255))

    def test_line_chart_paints_series_and_axes(self) -> None:
        chart = line_chart(320, 200)
        chart.plot([(0.0, 0.0), (20.0, 30.0), (40.0, 10.0), (80.0, 50.0)])
        chart.draw()
        rgba = chart.surface.to_rgba()
        green = (rgba[:, :, 0] == 0) & (rgba[:, :, 1] == 255) & (rgba[:, :, 2] == 0)
        white = np.all(rgba[:, :, :3] == 255, axis=2)
        self.assertGreater(int(green.sum()), 50)
        self.assertGreater(int(white.sum()), 50)
        x0, y0 = chart.transform.apply(0.0, 0.0)
        self.assertTrue(bool(green[int(round(y0)), int(round(x0))]))


if __name__ == "__main__":
    unittest.main()
