"""Custom exceptions for JTF processing."""

from __future__ import annotations

from typing import Any


class SchemaError(Exception):
    """Raised when a value does not conform to the JTF grammar."""

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        expected: str | None = None,
        actual: Any | None = None,
    ) -> None:
        super().__init__(message)
        self.path = path
        self.expected = expected
        self.actual = actual


class DocumentParseError(ValueError):
    """Raised when JTF text is not valid JSON."""

    def __init__(self, message: str, *, line: int | None = None, column: int | None = None) -> None:
        super().__init__(message)
        self.line = line
        self.column = column


class TableNotFoundError(LookupError):
    """Raised when a document has no table at the requested index."""

    def __init__(self, index: int) -> None:
        super().__init__(f"No table in document at index {index}.")
        self.index = index
