"""Schema validator for JTF documents.

The walk is depth-first and fails fast: the first violation raises SchemaError
and nothing else is inspected. Two conditions are advisory only and are
reported on the ``jtf.schema`` logger instead of raising:
- metadata without a ``jtf`` version
- metadata carrying ``extra`` processor data
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from jtf.formula.lexer import is_formula, validate_formula
from jtf.schema.cells import CellKind, classify_cell
from jtf.schema.models import VERSION_RE, ValidationPolicy
from jtf.schema.policy_loader import default_policy
from jtf.targeting.parser import validate_targeting_array
from jtf.utils.errors import SchemaError
from jtf.utils.indexes import is_valid_index

logger = logging.getLogger("jtf.schema")

DOCUMENT_KEYS = ("data", "metadata", "style", "createdAt", "updatedAt")
TABLE_KEYS = ("data", "label", "style")
METADATA_KEYS = ("author", "title", "jtf", "extra", "css")
STYLE_RULE_KEYS = ("type", "target", "data")
STYLE_TYPES = ("class", "style")


class SchemaValidator:
    """Validate JTF structures against one validation policy."""

    def __init__(self, policy: ValidationPolicy | None = None) -> None:
        self.policy = policy or default_policy()

    def validate_document(self, document: object) -> None:
        """Validate a whole JTF document."""

        document = _require_object(document, "document")
        _require_known_keys(document, DOCUMENT_KEYS, "document", "")

        if "data" not in document or document["data"] is None:
            raise SchemaError(
                "No data object provided to document.", path="data", expected="object"
            )
        self.validate_data(document["data"])

        if document.get("style") is not None:
            self.validate_style(document["style"], path="style")
        if document.get("metadata") is not None:
            self.validate_metadata(document["metadata"])

        for key in ("createdAt", "updatedAt"):
            if document.get(key) is not None:
                validate_timestamp(document[key], path=key)

    def validate_data(self, data: object, *, path: str = "data") -> None:
        """Validate a document's table map."""

        data = _require_object(data, path)
        _require_index_keys(data, path)
        for key, table in data.items():
            self.validate_table(table, path=f"{path}.{key}")

    def validate_table(self, table: object, *, path: str = "table") -> None:
        """Validate one table: label, row/column map and optional style."""

        table = _require_object(table, path)
        _require_known_keys(table, TABLE_KEYS, "table", path)

        validate_label(table.get("label"), path=f"{path}.label")

        data_path = f"{path}.data"
        data = table.get("data")
        data = _require_object(data, data_path)
        _require_index_keys(data, data_path)
        for row_key, row in data.items():
            self.validate_row(row, path=f"{data_path}.{row_key}")

        if table.get("style") is not None:
            self.validate_style(table["style"], path=f"{path}.style")

    def validate_row(self, row: object, *, path: str = "row") -> None:
        row = _require_object(row, path)
        _require_index_keys(row, path)
        for column_key, cell in row.items():
            self.validate_cell(cell, path=f"{path}.{column_key}")

    def validate_cell(self, cell: object, *, path: str = "cell") -> CellKind:
        """Validate a cell value and return its kind."""

        kind = classify_cell(cell, path=path)
        if self.policy.check_formulas and is_formula(cell):
            validate_formula(
                cell,  # type: ignore[arg-type]
                registered_only=self.policy.registered_functions_only,
                path=path,
            )
        return kind

    def validate_metadata(self, metadata: object, *, path: str = "metadata") -> None:
        """Validate document metadata and log advisories."""

        metadata = _require_object(metadata, path)
        _require_known_keys(metadata, METADATA_KEYS, "metadata", path)

        for key in ("author", "title"):
            value = metadata.get(key)
            if value is not None and not isinstance(value, str):
                raise SchemaError(
                    f'Expected type "string" for metadata "{key}" parameter. '
                    f'Got: "{_type_name(value)}".',
                    path=f"{path}.{key}",
                    expected="string",
                    actual=value,
                )

        version = metadata.get("jtf")
        if version is None:
            logger.warning(
                "A JTF syntax standard version was not provided in metadata. Document "
                'compatibility unknown. Configure a "jtf" version such as "%s" in document '
                "metadata to stop this message from appearing.",
                self.policy.current_version,
            )
        else:
            self.validate_version(version, path=f"{path}.jtf")

        if metadata.get("css") is not None:
            validate_css(metadata["css"], path=f"{path}.css")

        if metadata.get("extra") is not None:
            extra = metadata["extra"]
            validate_extra(extra, path=f"{path}.extra")
            count = len(extra)
            logger.info(
                "Extra data for %d processor%s was detected within JTF document. "
                "No action is required.",
                count,
                "" if count == 1 else "s",
            )

    def validate_version(self, version: object, *, path: str = "metadata.jtf") -> None:
        if not isinstance(version, str):
            raise SchemaError(
                f'Expected type "string" for metadata "jtf" parameter. '
                f'Got: "{_type_name(version)}".',
                path=path,
                expected="string",
                actual=version,
            )
        if not VERSION_RE.fullmatch(version):
            raise SchemaError(
                f'"jtf" parameter not in valid format. Expected format "v0.0.0", got: "{version}".',
                path=path,
                expected="v<major>(.<minor>)+",
                actual=version,
            )
        if version not in self.policy.supported_versions:
            raise SchemaError(
                f'Document indicated JTF syntax standard version "{version}" is not supported. '
                f"Supported versions: {_format_list(self.policy.supported_versions)}",
                path=path,
                expected=_format_list(self.policy.supported_versions),
                actual=version,
            )

    def validate_style(self, style: object, *, path: str = "style") -> None:
        """Validate a document- or table-scoped style array."""

        if not isinstance(style, list):
            raise SchemaError(
                f'Expected an array but received a value of type "{_type_name(style)}".',
                path=path,
                expected="array",
                actual=style,
            )
        for position, rule in enumerate(style):
            validate_style_rule(rule, path=f"{path}.{position}")


def validate_style_rule(rule: object, *, path: str = "style") -> None:
    rule = _require_object(rule, path)
    _require_known_keys(rule, STYLE_RULE_KEYS, "style definition", path)

    rule_type = rule.get("type")
    if rule_type not in STYLE_TYPES:
        raise SchemaError(
            f"Invalid style definition type provided. Must be one of: {_format_list(STYLE_TYPES)}",
            path=f"{path}.type",
            expected=" | ".join(STYLE_TYPES),
            actual=rule_type,
        )

    validate_targeting_array(rule.get("target"), path=f"{path}.target")

    data = rule.get("data")
    if not isinstance(data, str) or not data:
        raise SchemaError(
            'Style definition "data" value must be a non-empty string.',
            path=f"{path}.data",
            expected="non-empty string",
            actual=data,
        )


def validate_label(label: object, *, path: str = "label") -> None:
    if not isinstance(label, str) or not label:
        raise SchemaError(
            'Each table in the document must have a "label" string value.',
            path=path,
            expected="non-empty string",
            actual=label,
        )


def validate_css(css: object, *, path: str = "metadata.css") -> None:
    if isinstance(css, str):
        return
    if isinstance(css, list):
        for item in css:
            if not isinstance(item, str):
                raise SchemaError(
                    "Invalid CSS configuration provided to document metadata. "
                    "CSS array should contain only strings.",
                    path=path,
                    expected="array of strings",
                    actual=item,
                )
        return
    raise SchemaError(
        "Invalid CSS configuration provided to document metadata. Should be a single string, "
        "or an array of strings containing CSS data.",
        path=path,
        expected="string | array of strings",
        actual=css,
    )


def validate_extra(extra: object, *, path: str = "metadata.extra") -> None:
    if not isinstance(extra, list):
        raise SchemaError(
            'Invalid "extra" object provided to document metadata. Expected array.',
            path=path,
            expected="array",
            actual=extra,
        )
    for position, processor_data in enumerate(extra):
        entry_path = f"{path}.{position}"
        if not isinstance(processor_data, dict):
            raise SchemaError(
                'Invalid processor data provided to "extra" metadata configuration. Expected '
                f'plain object but received a value of type "{_type_name(processor_data)}".',
                path=entry_path,
                expected="object",
                actual=processor_data,
            )
        processor = processor_data.get("processor")
        if not isinstance(processor, str) or not processor:
            raise SchemaError(
                'Invalid processor data provided to "extra" metadata configuration. Expected a '
                '"processor" key with a string value.',
                path=f"{entry_path}.processor",
                expected="non-empty string",
                actual=processor,
            )


def validate_timestamp(value: object, *, path: str) -> datetime:
    """Validate an ISO-8601 timestamp string and return the parsed instant."""

    if not isinstance(value, str):
        raise SchemaError(
            f'"{path}" parameter expected to be of type string. Got "{_type_name(value)}".',
            path=path,
            expected="ISO-8601 string",
            actual=value,
        )
    try:
        return parse_timestamp(value)
    except ValueError as exc:
        raise SchemaError(
            f'Invalid date string provided to "{path}" parameter. An ISO 8601 conforming date '
            "string is required.",
            path=path,
            expected="ISO-8601 string",
            actual=value,
        ) from exc


def parse_timestamp(value: str) -> datetime:
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = f"{text[:-1]}+00:00"
    return datetime.fromisoformat(text)


def validate_document(document: object, policy: ValidationPolicy | None = None) -> None:
    """Validate a raw JTF document with policy (bundled default when omitted)."""

    SchemaValidator(policy).validate_document(document)


def validate_table(table: object, policy: ValidationPolicy | None = None) -> None:
    SchemaValidator(policy).validate_table(table)


def validate_cell(cell: object, policy: ValidationPolicy | None = None) -> CellKind:
    return SchemaValidator(policy).validate_cell(cell)


def validate_style(style: object, policy: ValidationPolicy | None = None) -> None:
    SchemaValidator(policy).validate_style(style)


def validate_metadata(metadata: object, policy: ValidationPolicy | None = None) -> None:
    SchemaValidator(policy).validate_metadata(metadata)


def _require_object(value: object, path: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise SchemaError(
            f'Expected a plain object at "{path}" but received a value of type '
            f'"{_type_name(value)}".',
            path=path,
            expected="object",
            actual=value,
        )
    return value


def _require_known_keys(value: dict, valid_keys: Iterable[str], owner: str, path: str) -> None:
    allowed = set(valid_keys)
    for key in value:
        if key not in allowed:
            raise SchemaError(
                f'Invalid key "{key}" provided to {owner}.',
                path=f"{path}.{key}" if path else str(key),
                expected=_format_list(valid_keys),
                actual=key,
            )


def _require_index_keys(value: dict, path: str) -> None:
    seen: dict[int, str] = {}
    for key in value:
        if not isinstance(key, str) or not is_valid_index(key):
            raise SchemaError(
                "Each object key-index must be a string containing a non-negative integer. "
                f'"{key}" is invalid.',
                path=f"{path}.{key}",
                expected="string matching ^[0-9]+$",
                actual=key,
            )
        previous = seen.setdefault(int(key), key)
        if previous != key:
            raise SchemaError(
                f'Key-index "{key}" refers to the same index as "{previous}".',
                path=f"{path}.{key}",
                expected="one key per index",
                actual=key,
            )


def _type_name(value: object) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, dict):
        return "object"
    if isinstance(value, list):
        return "array"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (int, float)):
        return "number"
    return type(value).__name__


def _format_list(items: Iterable[str]) -> str:
    return "[" + ", ".join(f'"{item}"' for item in items) + "]"
