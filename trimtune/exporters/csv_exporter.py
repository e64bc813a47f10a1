"""Wide-layout measurement CSV exporter."""

import csv

from trimtune.constants import LANES


def format_number(value):
    if value is None:
        return ""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def meta_row(meta):
    return [
        meta.input1 or "",
        meta.input2 or "",
        format_number(meta.tolerance),
        format_number(meta.correction),
    ]


def block_cells(block):
    if block is None:
        return ["", "", "", ""]
    return [
        block.line,
        format_number(block.nominal),
        format_number(block.meas_l),
        format_number(block.meas_r),
    ]


def wide_rows(wide_import):
    yield list(wide_import.header_row)
    yield meta_row(wide_import.meta)
    yield list(wide_import.block_header_row)
    for row in wide_import.rows:
        cells = []
        for lane in LANES:
            cells.extend(block_cells(row.block(lane)))
        yield cells


def export_wide_csv(wide_import, outpath):
    with open(outpath, "w", newline="") as f:
        writer = csv.writer(
            f,
            delimiter=wide_import.delimiter,
            quoting=csv.QUOTE_MINIMAL,
            lineterminator="\n",
        )
        for cells in wide_rows(wide_import):
            writer.writerow(cells)
