from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated

import typer

from regoreport.cli._shared import resolve_use_color, stdout_color_allowed
from regoreport.cli.exit_codes import EXIT_CONFIG, EXIT_FAILED, EXIT_OK
from regoreport.core.pipeline import run
from regoreport.core.settings import (
    ENV_NO_TEST_FILES,
    ENV_PATH,
    ENV_REPORT_UNTESTED_FILES,
    ENV_RUN_COVERAGE_REPORT,
    ENV_TEST_FILE_POSTFIX,
    ENV_TEST_MODE,
    RunSettings,
    split_file_list,
)
from regoreport.core.types import CollectMode, Format
from regoreport.errors import ConfigurationError
from regoreport.io import annotate_failure, publish_outcome, write_output

_BOOL_FALSE = False


def run_cmd(
    path: Annotated[
        str,
        typer.Option("--path", envvar=ENV_PATH, help="Directory holding the policies and their tests."),
    ] = "",
    test_file_postfix: Annotated[
        str,
        typer.Option(
            "--test-file-postfix",
            envvar=ENV_TEST_FILE_POSTFIX,
            help="Suffix that marks a test file, e.g. '_test' for 'deny_test.rego'.",
        ),
    ] = "",
    test_mode: Annotated[
        CollectMode,
        typer.Option(
            "--test-mode",
            envvar=ENV_TEST_MODE,
            case_sensitive=False,
            help="Run OPA once over the directory or once per test file.",
        ),
    ] = CollectMode.FILE,
    coverage: Annotated[
        bool,
        typer.Option(
            "--coverage/--no-coverage",
            envvar=ENV_RUN_COVERAGE_REPORT,
            help="Also run OPA with --coverage and add a Coverage column.",
        ),
    ] = _BOOL_FALSE,
    report_untested: Annotated[
        bool,
        typer.Option(
            "--report-untested/--no-report-untested",
            envvar=ENV_REPORT_UNTESTED_FILES,
            help="Add a NO TESTS row for every file listed in --no-test-files.",
        ),
    ] = _BOOL_FALSE,
    no_test_files: Annotated[
        str,
        typer.Option(
            "--no-test-files",
            envvar=ENV_NO_TEST_FILES,
            help="Newline separated list of policy files without tests.",
        ),
    ] = "",
    format_: Annotated[
        Format,
        typer.Option("--format", case_sensitive=False, help="Output format."),
    ] = Format.MARKDOWN,
    output: Annotated[
        Path | None,
        typer.Option("--output", help="Write output to PATH (use '-' for stdout)."),
    ] = None,
    github_output: Annotated[
        Path | None,
        typer.Option(
            "--github-output",
            envvar="GITHUB_OUTPUT",
            help="Append parsed_results and tests_failed to this GitHub Actions output file.",
        ),
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
    """Run OPA tests and report the results."""
    try:
        settings = RunSettings(
            path=path,
            test_file_postfix=test_file_postfix,
            test_mode=test_mode,
            run_coverage_report=coverage,
            report_untested_files=report_untested,
            no_test_files=split_file_list(no_test_files),
        )
    except ConfigurationError as exc:
        annotate_failure(f"Action failed with error: {exc}")
        raise typer.Exit(code=EXIT_CONFIG) from exc

    use_color = resolve_use_color(color=color, no_color=no_color, color_allowed=stdout_color_allowed())
    outcome = run(settings, fmt=format_, color=use_color)

    publish_outcome(outcome, github_output)
    write_output(outcome.text, output)

    if outcome.failure is not None:
        annotate_failure(outcome.failure)
        raise typer.Exit(code=EXIT_FAILED)
    raise typer.Exit(code=EXIT_OK)


def run_from_env() -> int:
    """Run with settings taken only from the environment; return the exit code."""
    try:
        settings = RunSettings.from_env(os.environ)
    except ConfigurationError as exc:
        annotate_failure(f"Action failed with error: {exc}")
        return EXIT_CONFIG
    outcome = run(settings)
    github_output = os.environ.get("GITHUB_OUTPUT")
    if github_output:
        publish_outcome(outcome, Path(github_output))
    else:
        write_output(outcome.text, None)
    if outcome.failure is not None:
        annotate_failure(outcome.failure)
        return EXIT_FAILED
    return EXIT_OK


def register(app: typer.Typer) -> None:
    app.command("run")(run_cmd)


__all__ = ["register", "run_from_env"]
