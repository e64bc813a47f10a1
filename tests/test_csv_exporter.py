import tempfile
import unittest
from pathlib import Path

from trimtune.core.parser import parse_wide_text
from trimtune.exporters.csv_exporter import export_wide_csv, format_number


SOURCE = "\n".join(
    [
        "Input;Input;Tolerance;Correction",
        "Alpha;M;10;0",
        "Line;Nominal;Left;Right",
        "A1;1000;1005,5;995;B1;990;;989",
    ]
)


class CsvExporterTests(unittest.TestCase):
    def test_format_number(self):
        self.assertEqual(format_number(None), "")
        self.assertEqual(format_number(1000.0), "1000")
        self.assertEqual(format_number(1005.5), "1005.5")

    def test_export_keeps_delimiter_and_quotes(self):
        wide = parse_wide_text(SOURCE)
        wide.meta.input1 = "Alpha; M"
        wide.meta.input2 = 'Size "S"'
        with tempfile.TemporaryDirectory() as td:
            out = Path(td) / "out.csv"
            export_wide_csv(wide, out)
            lines = out.read_text().splitlines()

        self.assertEqual(lines[0], "Input;Input;Tolerance;Correction")
        self.assertEqual(lines[1], '"Alpha; M";"Size ""S""";10;0')
        self.assertEqual(lines[3], "A1;1000;1005.5;995;B1;990;;989;;;;;;;;")

    def test_export_reimports(self):
        wide = parse_wide_text(SOURCE)
        with tempfile.TemporaryDirectory() as td:
            out = Path(td) / "out.csv"
            export_wide_csv(wide, out)
            again = parse_wide_text(out.read_text())
        self.assertEqual(again.rows, wide.rows)
        self.assertEqual(again.delimiter, ";")

    def test_multiline_meta_survives_reimport(self):
        wide = parse_wide_text(SOURCE)
        wide.meta.input1 = "Alpha\nM"
        with tempfile.TemporaryDirectory() as td:
            out = Path(td) / "out.csv"
            export_wide_csv(wide, out)
            again = parse_wide_text(out.read_text())
        self.assertEqual(again.meta.input1, "Alpha\nM")
        self.assertEqual(again.meta.input2, "M")
        self.assertEqual(again.rows, wide.rows)


if __name__ == "__main__":
    unittest.main()
