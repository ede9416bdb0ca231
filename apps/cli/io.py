"""CLI I/O helpers for atomic output writing."""

from __future__ import annotations

import json
import tempfile
from pathlib import Path
from typing import Any


def write_text_atomic(path: Path, text: str) -> None:
    """Write text using a temporary file + replace."""

    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=path.parent,
            delete=False,
            prefix=f"{path.name}.",
            suffix=".tmp",
            newline="",
        ) as tmp:
            tmp_path = Path(tmp.name)
            tmp.write(text)
        tmp_path.replace(path)
    except Exception:
        if tmp_path is not None:
            tmp_path.unlink(missing_ok=True)
        raise


def write_json_atomic(path: Path, payload: dict[str, Any]) -> None:
    """Write a JSON report with stable key order."""

    write_text_atomic(
        path, json.dumps(payload, ensure_ascii=False, sort_keys=True, separators=(",", ":"))
    )


def build_error_payload(error: Exception, *, stage: str) -> dict[str, Any]:
    """Describe a failed run for JSON reports."""

    payload: dict[str, Any] = {
        "error_type": type(error).__name__,
        "error_message": str(error),
        "stage": stage,
    }
    path = getattr(error, "path", None)
    if path is not None:
        payload["path"] = path
    expected = getattr(error, "expected", None)
    if expected is not None:
        payload["expected"] = expected
    return payload
