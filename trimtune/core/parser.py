"""Wide-layout measurement CSV parser.

Layout:
  row 1   free headers; must mention input, tolerance and correction
  row 2   input1, input2, tolerance, correction
  row 3   block headers; must mention nominal
  row 4+  four 4-column blocks (A, B, C, D), each
          line label, nominal, measured left, measured right

The delimiter is whichever of comma, semicolon or tab occurs most often in
the first line. Numbers accept a decimal comma. Excel workbooks use the same
layout on their first sheet.
"""

import csv
from dataclasses import dataclass, field
import io
import logging
import math
import re

from trimtune.constants import LANES
from trimtune.core.models import LineBlock, MeasurementRow, SessionMeta

logger = logging.getLogger(__name__)


DELIMITERS = (",", ";", "\t")
BLOCK_WIDTH = 4
DATA_START_ROW = 3

INPUT_MARKERS = ("input", "eingabe")
TOLERANCE_MARKERS = ("tolerance", "toleranz")
CORRECTION_MARKERS = ("correction", "korrektur")
NOMINAL_MARKERS = ("nominal", "soll")

NUMBER_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


class FormatError(ValueError):
    """Raised when a file is not in the wide measurement layout."""


@dataclass
class WideImport:
    delimiter: str
    meta: SessionMeta
    rows: list[MeasurementRow]
    header_row: list[str] = field(default_factory=list)
    block_header_row: list[str] = field(default_factory=list)
    source_path: str = ""


def number(text):
    """Parse a number with decimal comma or dot; None when there is none."""
    if text is None:
        return None
    if isinstance(text, (int, float)) and not isinstance(text, bool):
        return text if math.isfinite(text) else None
    m = NUMBER_RE.match(str(text).strip().replace(",", ".", 1))
    if not m:
        return None
    value = float(m.group(0))
    return value if math.isfinite(value) else None


def sniff_delimiter(first_line):
    counts = {d: first_line.count(d) for d in DELIMITERS}
    best = max(DELIMITERS, key=lambda d: counts[d])
    return best if counts[best] > 0 else ","


def parse_delimited(text):
    """Split text into ``(delimiter, grid)``; blank rows are dropped.

    Quoted fields may span lines.
    """
    text = text.replace("\ufeff", "")
    first = next((line for line in text.splitlines() if line.strip()), None)
    if first is None:
        return ",", []
    delimiter = sniff_delimiter(first)
    grid = []
    for row in csv.reader(io.StringIO(text, newline=""), delimiter=delimiter):
        cells = [cell.strip() for cell in row]
        if len(cells) > 1 or any(cells):
            grid.append(cells)
    return delimiter, grid


def _row_text(grid, index):
    if index >= len(grid):
        return ""
    return " ".join(grid[index]).lower()


def _has_marker(text, markers):
    return any(m in text for m in markers)


def is_wide_format(grid):
    first = _row_text(grid, 0)
    third = _row_text(grid, 2)
    return (
        _has_marker(first, INPUT_MARKERS)
        and _has_marker(first, TOLERANCE_MARKERS)
        and _has_marker(first, CORRECTION_MARKERS)
        and _has_marker(third, NOMINAL_MARKERS)
    )


def _cell(row, index):
    return row[index] if index < len(row) else ""


def parse_meta(row):
    return SessionMeta(
        input1=_cell(row, 0),
        input2=_cell(row, 1),
        tolerance=number(_cell(row, 2)) or 0,
        correction=number(_cell(row, 3)) or 0,
    )


def parse_row(row):
    entry = MeasurementRow()
    for i, lane in enumerate(LANES):
        start = i * BLOCK_WIDTH
        label = _cell(row, start).strip()
        if not label:
            continue
        entry.blocks[lane] = LineBlock(
            line=label,
            nominal=number(_cell(row, start + 1)),
            meas_l=number(_cell(row, start + 2)),
            meas_r=number(_cell(row, start + 3)),
        )
    return entry


def parse_wide(grid, delimiter=","):
    if not is_wide_format(grid):
        raise FormatError("unrecognized file: expected the wide A/B/C/D measurement layout")

    meta = parse_meta(grid[1] if len(grid) > 1 else [])
    rows = []
    for raw in grid[DATA_START_ROW:]:
        entry = parse_row(raw)
        if entry.is_empty():
            continue
        rows.append(entry)

    logger.debug("parsed %d measurement rows (delimiter %r)", len(rows), delimiter)
    return WideImport(
        delimiter=delimiter,
        meta=meta,
        rows=rows,
        header_row=list(grid[0]),
        block_header_row=list(grid[2]),
    )


def parse_wide_text(text):
    delimiter, grid = parse_delimited(text)
    return parse_wide(grid, delimiter)


def load_wide_csv(path):
    with open(path, "r", encoding="utf-8-sig", newline="") as f:
        text = f.read()
    result = parse_wide_text(text)
    result.source_path = str(path)
    return result


def _sheet_cell(value):
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def workbook_grid(path):
    """First sheet of an Excel workbook as a grid of trimmed text cells."""
    from openpyxl import load_workbook

    wb = load_workbook(str(path), read_only=True, data_only=True)
    try:
        ws = wb.worksheets[0] if wb.worksheets else None
        rows = list(ws.iter_rows(values_only=True)) if ws is not None else []
    finally:
        wb.close()

    grid = []
    for values in rows:
        cells = [_sheet_cell(v) for v in values]
        if any(cells):
            grid.append(cells)
    return grid


def load_wide_xlsx(path):
    # workbooks carry no delimiter; re-exports are written comma separated
    result = parse_wide(workbook_grid(path), ",")
    result.source_path = str(path)
    return result


def load_wide(path):
    """Load a measurement file, choosing the reader by extension."""
    if str(path).lower().endswith((".xlsx", ".xlsm")):
        return load_wide_xlsx(path)
    return load_wide_csv(path)


def profile_name_from_meta(meta):
    combined = " ".join(f"{meta.input1 or ''} {meta.input2 or ''}".split())
    return combined or "Imported Wing"


def set_cell(rows, row_index, lane, field_name, value):
    """Return a copy of ``rows`` with one measurement replaced.

    ``field_name`` is one of ``nominal``, ``meas_l`` or ``meas_r``; an empty
    value clears the measurement. Rows without that block are left unchanged.
    """
    if field_name not in ("nominal", "meas_l", "meas_r"):
        raise ValueError(f"unknown measurement field: {field_name}")
    rows = list(rows)
    row = rows[row_index]
    block = row.block(lane)
    if block is None:
        return rows
    parsed = None if value is None or str(value).strip() == "" else number(value)
    blocks = dict(row.blocks)
    blocks[lane] = LineBlock(
        line=block.line,
        nominal=parsed if field_name == "nominal" else block.nominal,
        meas_l=parsed if field_name == "meas_l" else block.meas_l,
        meas_r=parsed if field_name == "meas_r" else block.meas_r,
    )
    rows[row_index] = MeasurementRow(blocks=blocks)
    return rows
