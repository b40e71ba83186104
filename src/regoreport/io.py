"""Where rendered reports go: stdout, files and GitHub Actions outputs."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING
from uuid import uuid4

from regoreport._meta import logger

if TYPE_CHECKING:
    from pathlib import Path

    from regoreport.core.pipeline import Outcome

OUTPUT_PARSED_RESULTS = "parsed_results"
OUTPUT_TESTS_FAILED = "tests_failed"


def write_output(text: str, destination: Path | None) -> None:
    """Write output to stdout or a file (PATH or '-' for stdout)."""
    if destination is None or str(destination) == "-":
        print(text)
        return
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(text, encoding="utf-8")


def append_github_output(path: Path, key: str, value: str) -> None:
    """Append ``key`` to a ``$GITHUB_OUTPUT`` file using heredoc syntax.

    The delimiter is regenerated until it does not occur in *value*.
    """
    delimiter = f"REGOREPORT_{key.upper()}_{uuid4().hex}"
    while delimiter in value:
        delimiter = f"REGOREPORT_{key.upper()}_{uuid4().hex}"
    with path.open("a", encoding="utf-8") as fh:
        fh.write(f"{key}<<{delimiter}\n")
        fh.write(value)
        if not value.endswith("\n"):
            fh.write("\n")
        fh.write(f"{delimiter}\n")


def publish_outcome(outcome: Outcome, github_output: Path | None) -> None:
    """Expose the report and failure flag as step outputs."""
    if github_output is None:
        logger.debug("no GitHub output file configured; skipping step outputs")
        return
    append_github_output(github_output, OUTPUT_PARSED_RESULTS, outcome.text)
    append_github_output(github_output, OUTPUT_TESTS_FAILED, "true" if outcome.tests_failed else "false")


def annotate_failure(message: str) -> None:
    """Emit a workflow ``::error::`` annotation on stderr."""
    print(f"::error::{message}", file=sys.stderr)


__all__ = [
    "OUTPUT_PARSED_RESULTS",
    "OUTPUT_TESTS_FAILED",
    "annotate_failure",
    "append_github_output",
    "publish_outcome",
    "write_output",
]
