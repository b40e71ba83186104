from __future__ import annotations

import sys
from io import StringIO
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table
from rich.text import Text

from regoreport.core.config import NO_TEST_FILE_PLACEHOLDER, NOT_AVAILABLE
from regoreport.core.types import TestStatus
from regoreport.render.markdown import STATUS_LABELS, find_coverage

if TYPE_CHECKING:
    from collections.abc import Sequence

    from regoreport.core.model import ProcessedCoverageResult, ProcessedTestResult
    from regoreport.render.render import RenderOptions

_STATUS_STYLES: dict[TestStatus, str] = {
    TestStatus.PASS: "green",
    TestStatus.FAIL: "bold red",
    TestStatus.NO_TESTS: "yellow",
}


def _coverage_text(cov: ProcessedCoverageResult | None) -> str:
    if cov is None or cov.coverage is None:
        text = NOT_AVAILABLE
    else:
        text = f"{cov.coverage:.2f}%"
    if cov is not None and cov.not_covered_lines:
        text += f"\nuncovered: {cov.not_covered_lines}"
    return text


def _render_table(table: Table, *, color: bool) -> str:
    buf = StringIO()
    console = Console(
        file=buf,
        force_terminal=color,
        width=sys.maxsize,
        color_system="standard" if color else None,
        no_color=not color,
    )
    console.print(table)
    return buf.getvalue().rstrip()


def render_human(
    test_results: Sequence[ProcessedTestResult],
    coverage_results: Sequence[ProcessedCoverageResult],
    options: RenderOptions,
) -> str:
    """Render the report as a terminal table."""
    if not test_results:
        return ""

    table = Table(title="OPA Rego Policy Test Results", show_header=True, header_style="bold")
    table.add_column("File", justify="left")
    table.add_column("Status", justify="left")
    table.add_column("Passed", justify="right")
    table.add_column("Total", justify="right")
    if options.show_coverage:
        table.add_column("Coverage", justify="right")
    table.add_column("Details", justify="left")

    for result in test_results:
        status = TestStatus(result.status)
        row: list[str | Text] = [
            result.file,
            Text(STATUS_LABELS[status], style=_STATUS_STYLES[status]),
            str(result.passed),
            str(result.total),
        ]
        if options.show_coverage:
            cov = find_coverage(result.file, coverage_results, test_suffix=options.test_suffix)
            row.append(_coverage_text(cov))
        details = list(result.details) or [NO_TEST_FILE_PLACEHOLDER]
        row.append("\n".join(details))
        table.add_row(*row)

    return _render_table(table, color=options.color)


__all__ = ["render_human"]
