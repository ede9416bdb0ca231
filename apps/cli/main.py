"""Typer CLI entrypoint for the JTF toolkit."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated

import typer

from apps.cli.format_human import render_document_summary
from apps.cli.io import build_error_payload, write_json_atomic, write_text_atomic
from jtf.document.document import Document
from jtf.document.loader import load_document
from jtf.schema.models import ValidationPolicy
from jtf.schema.policy_loader import load_policy
from jtf.utils.errors import DocumentParseError, SchemaError, TableNotFoundError

app = typer.Typer(help="JTF document toolkit", rich_markup_mode=None)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_SCHEMA = 2
EXIT_PARSE = 3

PathArgument = Annotated[Path, typer.Argument(exists=True, dir_okay=False, file_okay=True)]
PolicyOption = Annotated[
    Path | None,
    typer.Option("--policy", help="YAML validation policy (bundled policy when omitted)."),
]


@app.callback()
def cli_callback(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show advisory notices while validating.")
    ] = False,
) -> None:
    """Validate and inspect JTF documents."""

    logging.basicConfig(
        level=logging.INFO if verbose else logging.ERROR,
        format="%(levelname)s(%(name)s): %(message)s",
    )


@app.command("validate")
def validate_command(
    path: PathArgument,
    policy: PolicyOption = None,
    report: Annotated[
        Path | None,
        typer.Option("--report", help="Write a JSON report of the validation result."),
    ] = None,
) -> None:
    """Validate one JTF file and print success or failure."""

    payload: dict[str, object] = {"path": str(path), "valid": False}
    exit_code = EXIT_ERROR
    try:
        document = _load(path, policy)
    except _LoadFailed as failure:
        payload["error"] = build_error_payload(failure.error, stage=failure.stage)
        exit_code = failure.exit_code
    else:
        indexes = document.table_indexes()
        payload["valid"] = True
        payload["tables"] = indexes
        typer.echo(f"INFO: valid JTF document ({len(indexes)} tables)")
        exit_code = EXIT_OK

    if report is not None:
        try:
            write_json_atomic(report, payload)
        except OSError as exc:
            typer.echo(f"ERROR: report write failed: {exc}")
            exit_code = EXIT_ERROR

    raise typer.Exit(code=exit_code)


@app.command("csv")
def csv_command(
    path: PathArgument,
    table: Annotated[int, typer.Option("--table", min=0)] = 0,
    out: Annotated[Path | None, typer.Option("--out")] = None,
    force: Annotated[
        bool, typer.Option("--force", help="Overwrite the output when it already exists.")
    ] = False,
    policy: PolicyOption = None,
) -> None:
    """Export one table as CSV."""

    document = _load_or_exit(path, policy)
    try:
        text = document.to_csv(table)
    except TableNotFoundError as exc:
        typer.echo(f"ERROR: {exc}")
        raise typer.Exit(code=EXIT_ERROR) from exc

    if out is None:
        typer.echo(text, nl=False)
        raise typer.Exit(code=EXIT_OK)

    if out.exists() and not force:
        typer.echo(f"ERROR: {out} already exists; pass --force to overwrite.")
        raise typer.Exit(code=EXIT_ERROR)
    write_text_atomic(out, text)
    typer.echo(f"INFO: wrote table {table} to {out}")


@app.command("styles")
def styles_command(
    path: PathArgument,
    x: Annotated[int, typer.Option("--x", min=0)],
    y: Annotated[int, typer.Option("--y", min=0)],
    table: Annotated[int, typer.Option("--table", min=0)] = 0,
    policy: PolicyOption = None,
) -> None:
    """Print the classes and styles applied to one cell."""

    document = _load_or_exit(path, policy)
    try:
        styles = document.get_cell_styles(table, x, y)
    except TableNotFoundError as exc:
        typer.echo(f"ERROR: {exc}")
        raise typer.Exit(code=EXIT_ERROR) from exc
    typer.echo(json.dumps(styles.as_dict(), ensure_ascii=False))


@app.command("info")
def info_command(path: PathArgument, policy: PolicyOption = None) -> None:
    """Print a summary of a JTF document."""

    document = _load_or_exit(path, policy)
    typer.echo(render_document_summary(document))


class _LoadFailed(Exception):
    def __init__(self, error: Exception, *, stage: str, exit_code: int) -> None:
        super().__init__(str(error))
        self.error = error
        self.stage = stage
        self.exit_code = exit_code


def _load(path: Path, policy_path: Path | None) -> Document:
    stage = "load_policy"
    try:
        policy_model: ValidationPolicy | None = None
        if policy_path is not None:
            policy_model = load_policy(policy_path)
        stage = "load_document"
        return load_document(path, policy=policy_model)
    except SchemaError as exc:
        location = f" at {exc.path}" if exc.path else ""
        typer.echo(f"ERROR: schema violation{location}: {exc}")
        raise _LoadFailed(exc, stage="validate", exit_code=EXIT_SCHEMA) from exc
    except DocumentParseError as exc:
        typer.echo(f"ERROR: malformed JSON: {exc}")
        raise _LoadFailed(exc, stage="parse", exit_code=EXIT_PARSE) from exc
    except (OSError, ValueError) as exc:
        typer.echo(f"ERROR: {type(exc).__name__}: {exc}")
        raise _LoadFailed(exc, stage=stage, exit_code=EXIT_ERROR) from exc


def _load_or_exit(path: Path, policy_path: Path | None) -> Document:
    try:
        return _load(path, policy_path)
    except _LoadFailed as failure:
        raise typer.Exit(code=failure.exit_code) from failure


def main() -> None:
    """Console script entrypoint."""

    app()


if __name__ == "__main__":
    main()
