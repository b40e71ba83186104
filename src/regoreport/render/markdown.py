"""Markdown rendering of the test report, as posted in pull-request comments."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import TYPE_CHECKING

from regoreport.core.config import (
    DEFAULT_TEST_SUFFIX,
    FAIL_GLYPH,
    NO_TEST_FILE_PLACEHOLDER,
    NOT_AVAILABLE,
    PASS_GLYPH,
    POLICY_EXTENSION,
    REPORT_TITLE,
    WARNING_GLYPH,
)
from regoreport.core.types import TestStatus

if TYPE_CHECKING:
    from collections.abc import Sequence

    from regoreport.core.model import ProcessedCoverageResult, ProcessedTestResult

STATUS_LABELS: dict[TestStatus, str] = {
    TestStatus.PASS: f"{PASS_GLYPH} PASS",
    TestStatus.FAIL: f"{FAIL_GLYPH} FAIL",
    TestStatus.NO_TESTS: f"{WARNING_GLYPH} NO TESTS",
}


def _collapsible(summary: str, body: str) -> str:
    return f"<details><summary>{summary}</summary>{body}</details>"


def _parts(path: str) -> tuple[str, ...]:
    # PurePosixPath drops "." segments, so "./a/b" and "a/b" compare equal.
    return PurePosixPath(path).parts


def _coverage_candidates(test_file: str, test_suffix: str) -> list[tuple[str, ...]]:
    """Return the policy paths a test file's coverage may be reported under.

    The candidates mirror how per-file collection pairs files: the policy
    beside the test file first, then the one in the parent directory.
    ``tests/deny_test.rego`` gives ``tests/deny.rego`` and then ``deny.rego``.
    """
    path = PurePosixPath(test_file)
    marker = f"{test_suffix}{POLICY_EXTENSION}"
    name = path.name
    if name.endswith(marker):
        name = f"{name[: -len(marker)]}{POLICY_EXTENSION}"
    impl = path.with_name(name)
    candidates = [impl.parts]
    if impl.parent.parts:
        candidates.append((impl.parent.parent / name).parts)
    return candidates


def _path_matches(candidate: tuple[str, ...], covered: tuple[str, ...]) -> bool:
    """Return True when *covered* names *candidate* or a trailing part of it."""
    if not covered or len(covered) > len(candidate):
        return False
    return candidate[-len(covered) :] == covered


def find_coverage(
    test_file: str,
    coverage_results: Sequence[ProcessedCoverageResult],
    *,
    test_suffix: str = DEFAULT_TEST_SUFFIX,
) -> ProcessedCoverageResult | None:
    """Return the coverage entry for the policy exercised by *test_file*.

    An entry whose path equals a candidate wins, in candidate order. Failing
    that, the entry naming the longest trailing part of a candidate is used,
    so ``zeta/deny.rego`` beats a bare ``deny.rego``.
    """
    candidates = _coverage_candidates(test_file, test_suffix)
    keyed = [(_parts(cov.file), cov) for cov in coverage_results]

    for candidate in candidates:
        for parts, cov in keyed:
            if parts == candidate:
                return cov

    best: ProcessedCoverageResult | None = None
    best_len = 0
    for candidate in candidates:
        for parts, cov in keyed:
            if len(parts) > best_len and _path_matches(candidate, parts):
                best, best_len = cov, len(parts)
    return best


def format_coverage_cell(cov: ProcessedCoverageResult | None) -> str:
    if cov is None:
        return NOT_AVAILABLE
    cell = NOT_AVAILABLE if cov.coverage is None else f"{cov.coverage:.2f}%"
    if cov.not_covered_lines:
        cell += " " + _collapsible("Uncovered Lines", cov.not_covered_lines)
    return cell


def format_details_cell(result: ProcessedTestResult) -> str:
    details = list(result.details)
    if not details and result.status == TestStatus.NO_TESTS:
        details = [NO_TEST_FILE_PLACEHOLDER]
    return _collapsible("Show Details", "<br>".join(details))


def _header(*, show_coverage: bool) -> list[str]:
    columns = ["File", "Status", "Passed", "Total"]
    if show_coverage:
        columns.append("Coverage")
    columns.append("Details")
    return [
        "| " + " | ".join(columns) + " |",
        "|" + "|".join("-" * (len(c) + 2) for c in columns) + "|",
    ]


def format_results(
    test_results: Sequence[ProcessedTestResult],
    coverage_results: Sequence[ProcessedCoverageResult],
    *,
    show_coverage: bool,
    test_suffix: str = DEFAULT_TEST_SUFFIX,
) -> str:
    """Render processed results as a Markdown table.

    Rows keep the order of *test_results*. An empty string is returned when
    there are no test results; callers decide what to show instead.
    """
    if not test_results:
        return ""

    lines = [REPORT_TITLE, "", *_header(show_coverage=show_coverage)]
    for result in test_results:
        cells = [
            result.file,
            STATUS_LABELS[TestStatus(result.status)],
            str(result.passed),
            str(result.total),
        ]
        if show_coverage:
            cov = find_coverage(result.file, coverage_results, test_suffix=test_suffix)
            cells.append(format_coverage_cell(cov))
        cells.append(format_details_cell(result))
        lines.append("| " + " | ".join(cells) + " |")
    return "\n".join(lines)


__all__ = [
    "STATUS_LABELS",
    "find_coverage",
    "format_coverage_cell",
    "format_details_cell",
    "format_results",
]
