"""Turn raw OPA records into per-file report rows."""

from __future__ import annotations

import operator
from typing import TYPE_CHECKING

from more_itertools import map_reduce

from regoreport.core.config import FAIL_GLYPH, PASS_GLYPH
from regoreport.core.model import ProcessedCoverageResult, ProcessedTestResult
from regoreport.core.types import TestStatus

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from regoreport.core.model import RawCoverageEntry, RawTestRecord
    from regoreport.core.types import LineRange


def _detail(record: RawTestRecord) -> str:
    glyph = FAIL_GLYPH if record.fail else PASS_GLYPH
    return f"{glyph} {record.name}"


def _summarize(file: str, records: Sequence[RawTestRecord]) -> ProcessedTestResult:
    failed = any(r.fail for r in records)
    return ProcessedTestResult(
        file=file,
        status=TestStatus.FAIL if failed else TestStatus.PASS,
        passed=sum(1 for r in records if not r.fail),
        total=len(records),
        details=tuple(_detail(r) for r in records),
    )


def process_test_results(records: Iterable[RawTestRecord]) -> list[ProcessedTestResult]:
    """Group test records by file, keeping files in the order first seen.

    Empty input gives an empty list.
    """
    by_file = map_reduce(records, keyfunc=operator.attrgetter("file"))
    return [_summarize(file, grouped) for file, grouped in by_file.items()]


def format_line_range(start: int, end: int) -> str:
    """Render an inclusive row range as ``"7"`` or ``"7-9"``."""
    return str(start) if start == end else f"{start}-{end}"


def format_not_covered(sections: Iterable[LineRange]) -> str:
    """Compress not-covered sections into ``"3, 9, 10, 60-61"``.

    Ordering is by the numeric start of each section, so ``9`` precedes ``10``.
    """
    ordered = sorted(sections, key=operator.itemgetter(0))
    return ", ".join(format_line_range(start, end) for start, end in ordered)


def process_coverage_report(entries: Iterable[RawCoverageEntry]) -> list[ProcessedCoverageResult]:
    """Convert raw coverage entries, keeping the report's file order."""
    return [
        ProcessedCoverageResult(
            file=entry.file,
            coverage=entry.coverage,
            not_covered_lines=format_not_covered(entry.not_covered),
        )
        for entry in entries
    ]


def untested_results(files: Iterable[str]) -> list[ProcessedTestResult]:
    """Return ``NO TESTS`` rows for each non-blank entry of *files*."""
    return [ProcessedTestResult.untested(f.strip()) for f in files if f.strip()]


def any_failed(results: Iterable[ProcessedTestResult]) -> bool:
    return any(r.status == TestStatus.FAIL for r in results)


__all__ = [
    "any_failed",
    "format_line_range",
    "format_not_covered",
    "process_coverage_report",
    "process_test_results",
    "untested_results",
]
