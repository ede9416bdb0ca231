"""Closed set of cell value kinds."""

from __future__ import annotations

import math
from enum import Enum
from typing import Union

from jtf.utils.errors import SchemaError

CellValue = Union[str, int, float, bool, None]


class CellKind(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"


def classify_cell(value: object, *, path: str | None = None) -> CellKind:
    """Decode a raw JSON value into its cell kind or raise SchemaError."""

    if value is None:
        return CellKind.NULL
    if isinstance(value, bool):
        return CellKind.BOOLEAN
    if isinstance(value, str):
        return CellKind.STRING
    if isinstance(value, int):
        return CellKind.NUMBER
    if isinstance(value, float) and math.isfinite(value):
        return CellKind.NUMBER

    raise SchemaError(
        f'Cell data of invalid type "{_json_type_name(value)}" provided. '
        'Must be one of: ["string", "number", "boolean", null]',
        path=path,
        expected="string | number | boolean | null",
        actual=value,
    )


def _json_type_name(value: object) -> str:
    if isinstance(value, dict):
        return "object"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, float):
        return "non-finite number"
    return type(value).__name__
