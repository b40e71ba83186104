"""Core data model and processing for regoreport."""

from __future__ import annotations

from regoreport.core.model import (
    CollectedOutput,
    ProcessedCoverageResult,
    ProcessedTestResult,
    RawCoverageEntry,
    RawTestRecord,
)
from regoreport.core.process import (
    any_failed,
    format_not_covered,
    process_coverage_report,
    process_test_results,
)
from regoreport.core.types import CollectMode, Format, LineRange, TestStatus

__all__ = [
    "CollectMode",
    "CollectedOutput",
    "Format",
    "LineRange",
    "ProcessedCoverageResult",
    "ProcessedTestResult",
    "RawCoverageEntry",
    "RawTestRecord",
    "TestStatus",
    "any_failed",
    "format_not_covered",
    "process_coverage_report",
    "process_test_results",
]
