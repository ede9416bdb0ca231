from __future__ import annotations

import json
from pathlib import Path

import pytest

from apps.cli.io import build_error_payload, write_json_atomic, write_text_atomic
from jtf.utils.errors import SchemaError


def test_write_text_atomic_creates_parent_and_replaces(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "table.csv"

    write_text_atomic(target, "A,\n")
    write_text_atomic(target, "B,\n")

    assert target.read_text(encoding="utf-8") == "B,\n"
    assert list(target.parent.glob("*.tmp")) == []


def test_write_text_atomic_removes_temp_file_when_replace_fails(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    target = tmp_path / "table.csv"

    def _fail(self: Path, other: Path) -> Path:
        raise OSError("disk full")

    monkeypatch.setattr(Path, "replace", _fail)

    with pytest.raises(OSError, match="disk full"):
        write_text_atomic(target, "A,\n")

    assert list(tmp_path.iterdir()) == []


def test_write_json_atomic_sorts_keys(tmp_path: Path) -> None:
    target = tmp_path / "report.json"

    write_json_atomic(target, {"valid": True, "path": "doc.jtf"})

    assert target.read_text(encoding="utf-8") == '{"path":"doc.jtf","valid":true}'
    assert json.loads(target.read_text(encoding="utf-8")) == {"path": "doc.jtf", "valid": True}


def test_build_error_payload_includes_schema_context() -> None:
    error = SchemaError("bad label", path="data.0.label", expected="non-empty string")

    payload = build_error_payload(error, stage="validate")

    assert payload == {
        "error_type": "SchemaError",
        "error_message": "bad label",
        "stage": "validate",
        "path": "data.0.label",
        "expected": "non-empty string",
    }
    assert build_error_payload(ValueError("boom"), stage="load_policy") == {
        "error_type": "ValueError",
        "error_message": "boom",
        "stage": "load_policy",
    }
