from __future__ import annotations

from pathlib import Path
import tempfile
import unittest
import xml.etree.ElementTree as ET

from PIL import Image

from linechart.cli import build_parser, main


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.tmp = Path(tmp.name)
        self.csv_path = self.tmp / "points.csv"
        self.csv_path.write_text("x,y\n0,0\n20,30\n40,10\n80,50\n", encoding="utf-8")

    def test_parser_defaults(self) -> None:
        args = build_parser().parse_args(["render", "in.csv", "-o", "out.png"])
        self.assertEqual(args.width, 640)
        self.assertEqual(args.height, 400)
        self.assertEqual(args.x_ticks, 5)
        self.assertEqual(args.y_ticks, 6)
        self.assertFalse(args.no_points)

    def test_render_png(self) -> None:
        out = self.tmp / "chart.png"
        code = main(["render", str(self.csv_path), "-o", str(out), "--width", "240", "--height", "160"])
        self.assertEqual(code, 0)
        with Image.open(out) as image:
            self.assertEqual(image.size, (240, 160))

    def test_svg_suffix_selects_svg_output(self) -> None:
        out = self.tmp / "chart.svg"
        code = main(["render", str(self.csv_path), "-o", str(out), "--title", "Demo", "--no-points"])
        self.assertEqual(code, 0)
        root = ET.parse(out).getroot()
        self.assertTrue(root.tag.endswith("svg"))
        self.assertEqual([el for el in root.iter() if el.tag.endswith("circle")], [])

    def test_bad_input_reports_error_and_writes_nothing(self) -> None:
        bad = self.tmp / "bad.csv"
        bad.write_text("x,y\n1,1\n1,1\n", encoding="utf-8")
        out = self.tmp / "chart.png"
        with self.assertLogs("linechart.cli", level="ERROR"):
            code = main(["render", str(bad), "-o", str(out)])
        self.assertEqual(code, 2)
        self.assertFalse(out.exists())

    def test_unwritable_output_reports_error(self) -> None:
        out = self.tmp / "no-such-dir" / "chart.png"
        with self.assertLogs("linechart.cli", level="ERROR"):
            code = main(["render", str(self.csv_path), "-o", str(out)])
        self.assertEqual(code, 2)
        self.assertFalse(out.exists())

    def test_missing_input_file_fails_cleanly(self) -> None:
        with self.assertLogs("linechart.cli", level="ERROR"):
            code = main(["render", str(self.tmp / "missing.csv"), "-o", str(self.tmp / "out.png")])
        self.assertEqual(code, 2)

    def test_tick_count_below_two_is_rejected(self) -> None:
        with self.assertLogs("linechart.cli", level="ERROR"):
            code = main(["render", str(self.csv_path), "-o", str(self.tmp / "out.png"), "--x-ticks", "1"])
        self.assertEqual(code, 2)


if __name__ == "__main__":
    unittest.main()
