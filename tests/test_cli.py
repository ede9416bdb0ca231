from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from apps.cli.main import EXIT_ERROR, EXIT_OK, EXIT_PARSE, EXIT_SCHEMA, app

runner = CliRunner()


def _write_document(path: Path, **overrides: object) -> Path:
    payload: dict[str, object] = {
        "metadata": {
            "title": "Quarterly",
            "jtf": "v1.1.9",
            "extra": [{"processor": "jtf-core", "zoom": 2}],
        },
        "data": {
            "0": {
                "label": "First Table",
                "data": {"0": {"0": "A"}, "2": {"1": "B"}},
                "style": [{"type": "class", "target": [0, 0], "data": "bar"}],
            },
            "3": {"label": "Numbers", "data": {"0": {"0": 1, "1": 2}}},
        },
        "style": [
            {"type": "class", "target": [], "data": "foo"},
            {"type": "style", "target": [":1"], "data": "color: red"},
        ],
    }
    payload.update(overrides)
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_validate_reports_valid_document(tmp_path: Path) -> None:
    source = _write_document(tmp_path / "doc.jtf")

    result = runner.invoke(app, ["validate", str(source)])

    assert result.exit_code == EXIT_OK, result.output
    assert "INFO: valid JTF document (2 tables)" in result.output


def test_validate_schema_violation_exit_code(tmp_path: Path) -> None:
    source = _write_document(tmp_path / "doc.jtf", data={"0": {"data": {}}})

    result = runner.invoke(app, ["validate", str(source)])

    assert result.exit_code == EXIT_SCHEMA
    assert "ERROR: schema violation at data.0.label" in result.output


def test_validate_malformed_json_exit_code(tmp_path: Path) -> None:
    source = tmp_path / "broken.jtf"
    source.write_text('{"data": {"0": ', encoding="utf-8")

    result = runner.invoke(app, ["validate", str(source)])

    assert result.exit_code == EXIT_PARSE
    assert "ERROR: malformed JSON" in result.output


def test_validate_missing_policy_file(tmp_path: Path) -> None:
    source = _write_document(tmp_path / "doc.jtf")

    result = runner.invoke(
        app, ["validate", str(source), "--policy", str(tmp_path / "missing.yaml")]
    )

    assert result.exit_code == EXIT_ERROR
    assert "Policy file not found" in result.output


def test_validate_with_custom_policy(tmp_path: Path) -> None:
    policy = tmp_path / "policy.yaml"
    policy.write_text("supported_versions: [v2.0]\ncurrent_version: v2.0\n", encoding="utf-8")
    source = _write_document(tmp_path / "doc.jtf")

    result = runner.invoke(app, ["validate", str(source), "--policy", str(policy)])

    assert result.exit_code == EXIT_SCHEMA
    assert "metadata.jtf" in result.output


def test_validate_writes_reports(tmp_path: Path) -> None:
    good = _write_document(tmp_path / "good.jtf")
    bad = _write_document(tmp_path / "bad.jtf", style=[{"type": "class", "target": [-1]}])
    good_report = tmp_path / "reports" / "good.json"
    bad_report = tmp_path / "reports" / "bad.json"

    first = runner.invoke(app, ["validate", str(good), "--report", str(good_report)])
    second = runner.invoke(app, ["validate", str(bad), "--report", str(bad_report)])

    assert first.exit_code == EXIT_OK
    assert second.exit_code == EXIT_SCHEMA

    good_payload = json.loads(good_report.read_text(encoding="utf-8"))
    assert good_payload == {"path": str(good), "tables": [0, 3], "valid": True}

    bad_payload = json.loads(bad_report.read_text(encoding="utf-8"))
    assert bad_payload["valid"] is False
    assert bad_payload["error"]["error_type"] == "SchemaError"
    assert bad_payload["error"]["stage"] == "validate"
    assert bad_payload["error"]["path"] == "style.0.target.0"


def test_csv_to_stdout(tmp_path: Path) -> None:
    source = _write_document(tmp_path / "doc.jtf")

    result = runner.invoke(app, ["csv", str(source)])

    assert result.exit_code == EXIT_OK, result.output
    assert result.output == "A,\n,\n,B\n"


def test_csv_to_file_requires_force_to_overwrite(tmp_path: Path) -> None:
    source = _write_document(tmp_path / "doc.jtf")
    out = tmp_path / "out" / "numbers.csv"

    first = runner.invoke(app, ["csv", str(source), "--table", "3", "--out", str(out)])
    assert first.exit_code == EXIT_OK, first.output
    assert out.read_text(encoding="utf-8") == "1,2\n"

    out.write_text("stale", encoding="utf-8")
    second = runner.invoke(app, ["csv", str(source), "--table", "3", "--out", str(out)])
    assert second.exit_code == EXIT_ERROR
    assert "--force" in second.output
    assert out.read_text(encoding="utf-8") == "stale"

    third = runner.invoke(
        app, ["csv", str(source), "--table", "3", "--out", str(out), "--force"]
    )
    assert third.exit_code == EXIT_OK
    assert out.read_text(encoding="utf-8") == "1,2\n"


def test_csv_unknown_table(tmp_path: Path) -> None:
    source = _write_document(tmp_path / "doc.jtf")

    result = runner.invoke(app, ["csv", str(source), "--table", "1"])

    assert result.exit_code == EXIT_ERROR
    assert "No table in document at index 1." in result.output


def test_styles_prints_resolved_styles(tmp_path: Path) -> None:
    source = _write_document(tmp_path / "doc.jtf")

    result = runner.invoke(app, ["styles", str(source), "--x", "0", "--y", "0"])

    assert result.exit_code == EXIT_OK, result.output
    assert json.loads(result.output) == {"class": "foo bar", "style": "color: red;"}


def test_styles_for_unstyled_cell(tmp_path: Path) -> None:
    source = _write_document(tmp_path / "doc.jtf")

    result = runner.invoke(
        app, ["styles", str(source), "--table", "3", "--x", "4", "--y", "1"]
    )

    assert result.exit_code == EXIT_OK, result.output
    assert json.loads(result.output) == {"class": "foo", "style": ""}


def test_info_renders_summary(tmp_path: Path) -> None:
    source = _write_document(tmp_path / "doc.jtf")

    result = runner.invoke(app, ["info", str(source)])

    assert result.exit_code == EXIT_OK, result.output
    lines = result.output.splitlines()
    assert lines[0] == "document_summary:"
    assert "jtf=v1.1.9 title=Quarterly" in lines
    assert "author=-" in lines
    assert "extra: jtf-core" in lines
    assert "document_rules: class=1, style=1" in lines
    assert "tables: 2" in lines
    assert "  [0] 'First Table': rows=3 cols=2 cells=2 rules=class=1" in lines
    assert "  [3] 'Numbers': rows=1 cols=2 cells=2 rules=none" in lines
