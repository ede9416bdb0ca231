"""JTF document: the owning store for tables, styles and metadata."""

from __future__ import annotations

import copy
import json
import logging
from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from typing import Any

from jtf.document.styles import CellStyles
from jtf.document.table import Table
from jtf.schema.cells import CellValue
from jtf.schema.models import ValidationPolicy
from jtf.schema.validator import METADATA_KEYS, SchemaValidator, parse_timestamp
from jtf.utils.errors import SchemaError, TableNotFoundError
from jtf.utils.indexes import canonical_index, parse_index

logger = logging.getLogger("jtf.document")

_ONE_MILLISECOND = timedelta(milliseconds=1)


class Document:
    """A validated JTF document.

    The input is validated before anything is stored, then deep-copied so the
    document owns its data. Mutators validate the changed unit first and only
    write when it is accepted; each write refreshes ``updatedAt``.
    """

    def __init__(self, data: Mapping[str, Any], *, policy: ValidationPolicy | None = None) -> None:
        self.validator = SchemaValidator(policy)
        self.validator.validate_document(data)

        self._source: dict[str, Any] = {
            key: copy.deepcopy(value) for key, value in data.items() if value is not None
        }
        self._source["data"] = {
            canonical_index(key): _canonical_table(table)
            for key, table in self._source["data"].items()
        }

        now = _utc_now()
        self._source.setdefault("createdAt", _format_timestamp(now))
        self._source.setdefault("updatedAt", _format_timestamp(now))

        metadata = self._source.setdefault("metadata", {})
        if metadata.get("jtf") is None:
            logger.debug(
                'Document has no "jtf" version; recording "%s".', self.policy.current_version
            )
            metadata["jtf"] = self.policy.current_version

    @property
    def policy(self) -> ValidationPolicy:
        return self.validator.policy

    @property
    def _tables(self) -> dict[str, Any]:
        return self._source["data"]

    @property
    def created_at(self) -> str:
        return self._source["createdAt"]

    @property
    def updated_at(self) -> str:
        return self._source["updatedAt"]

    @property
    def metadata(self) -> dict[str, Any]:
        return copy.deepcopy(self._source["metadata"])

    @property
    def style(self) -> list[dict[str, Any]]:
        return copy.deepcopy(self._source.get("style") or [])

    def to_dict(self) -> dict[str, Any]:
        """Return a deep copy of the document in wire format."""

        return copy.deepcopy(self._source)

    def stringify(self, *, indent: int | None = None) -> str:
        """Serialise the whole document as JTF text."""

        separators = None if indent is not None else (",", ":")
        return json.dumps(self._source, ensure_ascii=False, indent=indent, separators=separators)

    def touch(self) -> None:
        """Refresh ``updatedAt``; the new value is always later than the old one."""

        now = _utc_now()
        now = now.replace(microsecond=now.microsecond // 1000 * 1000)
        previous = parse_timestamp(self.updated_at)
        if previous.tzinfo is None:
            previous = previous.replace(tzinfo=timezone.utc)
        if now <= previous:
            now = previous.astimezone(timezone.utc) + _ONE_MILLISECOND
        self._source["updatedAt"] = _format_timestamp(now)

    # Tables

    def table_indexes(self) -> list[int]:
        return sorted(int(key) for key in self._tables)

    @property
    def tables(self) -> list[Table]:
        return [Table(self, index) for index in self.table_indexes()]

    def table(self, index: int | str = 0) -> Table:
        """Return the handle for the table at index."""

        table_index = parse_index(index, "table")
        if str(table_index) not in self._tables:
            raise TableNotFoundError(table_index)
        return Table(self, table_index)

    def set_table(self, index: int | str, data: Mapping[str, Any]) -> Table:
        """Create or overwrite the table at index."""

        table_index = parse_index(index, "table")
        self.validator.validate_table(data, path=f"data.{table_index}")

        self._tables[str(table_index)] = _canonical_table(copy.deepcopy(dict(data)))
        logger.debug("Table %d written.", table_index)
        self.touch()
        return Table(self, table_index)

    def delete_table(self, index: int | str) -> None:
        table_index = parse_index(index, "table")
        if str(table_index) not in self._tables:
            raise TableNotFoundError(table_index)
        del self._tables[str(table_index)]
        self.touch()

    def get_cell(self, table: int | str, x: int | str, y: int | str) -> CellValue:
        return self.table(table).get_cell(x, y)

    def set_cell(self, table: int | str, x: int | str, y: int | str, value: CellValue) -> None:
        self.table(table).set_cell(x, y, value)

    def get_cell_styles(self, table: int | str, x: int | str, y: int | str) -> CellStyles:
        return self.table(table).get_cell_styles(x, y)

    def to_array(self, table: int | str = 0) -> list[list[CellValue]]:
        return self.table(table).to_array()

    def to_csv(self, table: int | str = 0) -> str:
        return self.table(table).to_csv()

    # Styles and metadata

    def set_style(self, rules: list[dict[str, Any]]) -> None:
        """Replace the document-scoped style rules."""

        self.validator.validate_style(rules, path="style")
        self._source["style"] = copy.deepcopy(rules)
        self.touch()

    def set_metadata(self, key: str, value: Any) -> None:
        """Set one metadata field; None removes it."""

        if key not in METADATA_KEYS:
            raise SchemaError(
                f'Invalid key "{key}" provided to metadata.',
                path=f"metadata.{key}",
                expected=", ".join(METADATA_KEYS),
                actual=key,
            )

        candidate = self.metadata
        if value is None:
            candidate.pop(key, None)
        else:
            candidate[key] = copy.deepcopy(value)
        self.validator.validate_metadata(candidate)

        self._source["metadata"] = candidate
        self.touch()

    def get_extra_processor_data(self, processor: str) -> dict[str, Any] | None:
        """Return the extra data stored for processor, without its ``processor`` key."""

        for entry in self._source["metadata"].get("extra") or []:
            if entry["processor"] == processor:
                data = {key: value for key, value in entry.items() if key != "processor"}
                return copy.deepcopy(data)
        return None

    def set_extra_processor_data(
        self, processor: str, data: Mapping[str, Any], extend: bool = False
    ) -> None:
        """Store extra data for processor.

        With ``extend`` the keys of data are merged into the existing entry;
        otherwise the entry is replaced.
        """

        if not isinstance(processor, str) or not processor:
            raise SchemaError(
                "Processor id must be a non-empty string.",
                path="metadata.extra",
                expected="non-empty string",
                actual=processor,
            )
        if not isinstance(data, Mapping):
            raise SchemaError(
                "Extra processor data must be a plain object.",
                path="metadata.extra",
                expected="object",
                actual=data,
            )

        extra = copy.deepcopy(self._source["metadata"].get("extra") or [])
        entry: dict[str, Any] = {"processor": processor}
        position = next(
            (i for i, item in enumerate(extra) if item["processor"] == processor), None
        )
        if extend and position is not None:
            entry = extra[position]
        entry.update(copy.deepcopy(dict(data)))
        entry["processor"] = processor

        if position is None:
            extra.append(entry)
        else:
            extra[position] = entry
        self.set_metadata("extra", extra)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _format_timestamp(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _canonical_table(table: dict[str, Any]) -> dict[str, Any]:
    # Stored row and column keys are always in str(int(key)) form.
    table["data"] = {
        canonical_index(row_key): {
            canonical_index(column_key): cell for column_key, cell in row.items()
        }
        for row_key, row in table["data"].items()
    }
    return table
