"""Table handle: an index into a document's table store."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from jtf.document.render import table_to_array, table_to_csv
from jtf.document.styles import CellStyles, resolve_cell_styles
from jtf.schema.cells import CellValue
from jtf.schema.validator import validate_label
from jtf.utils.errors import TableNotFoundError
from jtf.utils.indexes import parse_index

if TYPE_CHECKING:
    from jtf.document.document import Document


@dataclass
class Table:
    """One table of a document, addressed by its integer index.

    The handle holds no table data of its own; every read goes to the owning
    document's store, so handles never go stale after a write.
    Handles compare equal when they address the same table of the same document.
    """

    document: Document
    index: int

    @property
    def _source(self) -> dict[str, Any]:
        try:
            return self.document._tables[str(self.index)]
        except KeyError as exc:
            raise TableNotFoundError(self.index) from exc

    @property
    def label(self) -> str:
        return self._source["label"]

    @label.setter
    def label(self, value: str) -> None:
        validate_label(value, path=f"data.{self.index}.label")
        self._source["label"] = value
        self.document.touch()

    @property
    def style(self) -> list[dict[str, Any]]:
        return copy.deepcopy(self._source.get("style") or [])

    def set_style(self, rules: list[dict[str, Any]]) -> None:
        """Replace the table-scoped style rules."""

        self.document.validator.validate_style(rules, path=f"data.{self.index}.style")
        self._source["style"] = copy.deepcopy(rules)
        self.document.touch()

    @property
    def rows(self) -> dict[str, dict[str, CellValue]]:
        return copy.deepcopy(self._source["data"])

    def has_cell(self, x: int | str, y: int | str) -> bool:
        column = str(parse_index(x, "x-coordinate"))
        row = str(parse_index(y, "y-coordinate"))
        return column in self._source["data"].get(row, {})

    def get_cell(self, x: int | str, y: int | str) -> CellValue:
        """Return the cell at column x, row y, or None when it is not set."""

        column = str(parse_index(x, "x-coordinate"))
        row = str(parse_index(y, "y-coordinate"))
        return self._source["data"].get(row, {}).get(column)

    def set_cell(self, x: int | str, y: int | str, value: CellValue) -> None:
        """Set the cell at column x, row y after validating value."""

        column = str(parse_index(x, "x-coordinate"))
        row = str(parse_index(y, "y-coordinate"))
        self.document.validator.validate_cell(value, path=f"data.{self.index}.data.{row}.{column}")

        self._source["data"].setdefault(row, {})[column] = value
        self.document.touch()

    def get_cell_styles(self, x: int | str, y: int | str) -> CellStyles:
        """Resolve document rules, then this table's rules, for cell (x, y)."""

        column = parse_index(x, "x-coordinate")
        row = parse_index(y, "y-coordinate")
        rules = [*(self.document._source.get("style") or []), *(self._source.get("style") or [])]
        return resolve_cell_styles(rules, column, row)

    def to_array(self) -> list[list[CellValue]]:
        return table_to_array(self._source["data"])

    def to_csv(self) -> str:
        return table_to_csv(self._source["data"])
