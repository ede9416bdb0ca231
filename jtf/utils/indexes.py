"""Helpers for string-encoded integer keys and coordinates."""

from __future__ import annotations

import re

_INDEX_RE = re.compile(r"[0-9]+")


def is_valid_index(value: object) -> bool:
    """Return whether value is a non-negative integer or a digit-only string."""

    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return value >= 0
    if isinstance(value, str):
        return _INDEX_RE.fullmatch(value) is not None
    return False


def parse_index(value: object, name: str = "index") -> int:
    """Coerce a coordinate or table index to int, raising ValueError when invalid."""

    if not is_valid_index(value):
        raise ValueError(f'Provided {name} value "{value}" is not a valid non-negative integer.')
    return int(value)  # type: ignore[arg-type]


def column_letter(number: int) -> str:
    """Convert a 1-based column number to spreadsheet letters (1 -> A, 27 -> AA)."""

    if isinstance(number, bool) or not isinstance(number, int) or number < 0:
        raise ValueError(f"Invalid column number ({number}) provided.")

    letters = ""
    while number > 0:
        number, remainder = divmod(number - 1, 26)
        letters = chr(65 + remainder) + letters
    return letters


def canonical_index(key: int | str) -> str:
    """Return the canonical key form of an index ("007" -> "7")."""

    return str(parse_index(key, "key-index"))
