from __future__ import annotations

from typing import Annotated

import typer
from typer.main import get_command

from regoreport import __version__
from regoreport.cli import render, run
from regoreport.cli._shared import configure_logging

_BOOL_FALSE = False


def create_app() -> typer.Typer:
    app = typer.Typer(help="Summarize OPA policy test results and coverage as a Markdown table.")

    @app.callback(invoke_without_command=True)
    def _root(
        ctx: typer.Context,
        *,
        version: Annotated[
            bool,
            typer.Option("--version", help="Show version and exit"),
        ] = _BOOL_FALSE,
        quiet: Annotated[
            bool,
            typer.Option("-q", "--quiet", help="Suppress INFO logs, emit only errors"),
        ] = _BOOL_FALSE,
        verbose: Annotated[
            bool,
            typer.Option("-v", "--verbose", help="Emit diagnostic logging"),
        ] = _BOOL_FALSE,
    ) -> None:
        if version:
            typer.echo(f"regoreport {__version__}")
            raise typer.Exit
        if ctx.invoked_subcommand is None:
            typer.echo(ctx.get_help())
            raise typer.Exit
        configure_logging(quiet=quiet, verbose=verbose)

    run.register(app)
    render.register(app)

    return app


def main() -> None:
    app = create_app()
    get_command(app)()


def action_main() -> None:
    """Entry point for the GitHub action: settings come from the environment."""
    configure_logging(quiet=False, verbose=False)
    raise SystemExit(run.run_from_env())


# Click-compatible object for tooling that imports it
cli = get_command(create_app())

__all__ = ["action_main", "cli", "create_app", "main"]
