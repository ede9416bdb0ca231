"""Entry points for reading and writing JTF documents."""

from __future__ import annotations

import json
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from jtf.document.document import Document
from jtf.schema.models import ValidationPolicy
from jtf.utils.errors import DocumentParseError


def parse(
    data: str | bytes | Mapping[str, Any], *, policy: ValidationPolicy | None = None
) -> Document:
    """Parse JTF text (or an already decoded object), validate it and wrap it.

    Raises DocumentParseError for malformed JSON and SchemaError for a
    document that does not conform to the format.
    """

    if isinstance(data, (str, bytes, bytearray)):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as exc:
            raise DocumentParseError(
                f"Invalid JSON: {exc.msg} (line {exc.lineno}, column {exc.colno}).",
                line=exc.lineno,
                column=exc.colno,
            ) from exc

    return Document(data, policy=policy)  # type: ignore[arg-type]


def stringify(document: Document, *, indent: int | None = None) -> str:
    if not isinstance(document, Document):
        raise TypeError('Provided object is not of type "Document".')
    return document.stringify(indent=indent)


def load_document(path: Path, *, policy: ValidationPolicy | None = None) -> Document:
    """Read and parse a JTF file."""

    return parse(path.read_text(encoding="utf-8"), policy=policy)


def dump_document(path: Path, document: Document, *, indent: int | None = 2) -> None:
    """Write a document atomically using a temporary file + replace."""

    path.parent.mkdir(parents=True, exist_ok=True)
    fd, raw_tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f"{path.name}.", suffix=".tmp")
    os.close(fd)
    tmp_path = Path(raw_tmp_path)

    try:
        tmp_path.write_text(document.stringify(indent=indent), encoding="utf-8")
        tmp_path.replace(path)
    except Exception:
        if tmp_path.exists():
            tmp_path.unlink(missing_ok=True)
        raise
