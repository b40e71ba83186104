from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from regoreport.cli._shared import resolve_use_color, stdout_color_allowed
from regoreport.cli.exit_codes import EXIT_DATAERR, EXIT_FAILED, EXIT_NOINPUT, EXIT_OK
from regoreport.core.config import DEFAULT_TEST_SUFFIX
from regoreport.core.pipeline import build_report, finish
from regoreport.core.types import Format
from regoreport.errors import RawOutputError
from regoreport.io import write_output
from regoreport.render.render import RenderOptions, render

_BOOL_FALSE = False


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=EXIT_NOINPUT) from exc


def render_cmd(
    tests_json: Annotated[
        Path,
        typer.Argument(help="Output of 'opa test --format=json'."),
    ],
    coverage_json: Annotated[
        Path | None,
        typer.Option("--coverage-json", help="Output of 'opa test --format=json --coverage'."),
    ] = None,
    test_file_postfix: Annotated[
        str,
        typer.Option("--test-file-postfix", help="Suffix that marks a test file."),
    ] = DEFAULT_TEST_SUFFIX,
    untested: Annotated[
        list[str] | None,
        typer.Option("--untested", help="Policy file without tests (repeatable)."),
    ] = None,
    format_: Annotated[
        Format,
        typer.Option("--format", case_sensitive=False, help="Output format."),
    ] = Format.MARKDOWN,
    output: Annotated[
        Path | None,
        typer.Option("--output", help="Write output to PATH (use '-' for stdout)."),
    ] = None,
    color: Annotated[
        bool,
        typer.Option("--color", help="Force color output"),
    ] = _BOOL_FALSE,
    no_color: Annotated[
        bool,
        typer.Option("--no-color", help="Disable color output"),
    ] = _BOOL_FALSE,
) -> None:
    """Render previously captured 'opa test' JSON without running OPA."""
    test_output = _read(tests_json)
    coverage_output = _read(coverage_json) if coverage_json is not None else None

    try:
        report = build_report(test_output, coverage_output, untested_files=untested or ())
    except RawOutputError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=EXIT_DATAERR) from exc

    options = RenderOptions(
        show_coverage=coverage_json is not None,
        test_suffix=test_file_postfix,
        color=resolve_use_color(color=color, no_color=no_color, color_allowed=stdout_color_allowed()),
    )
    outcome = finish(report, render(report.tests, report.coverage, fmt=format_, options=options))
    write_output(outcome.text, output)
    raise typer.Exit(code=EXIT_FAILED if outcome.failed else EXIT_OK)


def register(app: typer.Typer) -> None:
    app.command("render")(render_cmd)


__all__ = ["register"]
