"""Render a table's sparse cell map as a 2D array or CSV text."""

from __future__ import annotations

import csv
import io
import json
from collections.abc import Mapping

from jtf.schema.cells import CellValue

RowMap = Mapping[str, Mapping[str, CellValue]]


def table_to_array(rows: RowMap) -> list[list[CellValue]]:
    """Convert a row map into a rectangular list of rows.

    Rows run from 0 to the highest row key and every row is padded to the
    widest row in the table. Missing rows and cells are None.
    """

    if not rows:
        return []

    height = max(int(key) for key in rows) + 1
    width = max(
        (max(int(key) for key in row) + 1 for row in rows.values() if row),
        default=0,
    )

    array: list[list[CellValue]] = [[None] * width for _ in range(height)]
    for row_key, row in rows.items():
        y = int(row_key)
        for column_key, cell in row.items():
            array[y][int(column_key)] = cell
    return array


def table_to_csv(rows: RowMap) -> str:
    """Convert a row map into CSV text; every line ends with a newline."""

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    for row in table_to_array(rows):
        fields = [_csv_field(cell) for cell in row]
        if any(fields):
            writer.writerow(fields)
        else:
            # csv quotes a lone empty field; gap rows stay bare separators.
            buffer.write("," * (len(fields) - 1) + "\n")
    return buffer.getvalue()


def _csv_field(cell: CellValue) -> str:
    if cell is None:
        return ""
    if isinstance(cell, str):
        return cell
    # Numbers and booleans are written as their JSON literals.
    return json.dumps(cell)
