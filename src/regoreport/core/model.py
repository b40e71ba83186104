from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from regoreport.core.types import TestStatus

if TYPE_CHECKING:
    from regoreport.core.types import CoveragePercent, LineRange

# -----------------------------------------------------------------------------
# Raw records (what ``opa test --format=json`` emits)
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RawTestRecord:
    """One test case as reported by ``opa test --format=json``.

    ``duration`` is carried for completeness; nothing in the report uses it.
    """

    file: str
    name: str
    package: str = ""
    row: int = 0
    col: int = 0
    fail: bool = False
    duration: float = 0


@dataclass(frozen=True, slots=True)
class RawCoverageEntry:
    """Coverage for a single policy file (schema: ``files.<path>``).

    Notes
    -----
    - ``coverage`` is ``None`` when OPA did not compute a percentage. That is
      not the same as zero and is independent of ``not_covered``.
    - ``not_covered`` keeps OPA's order; sorting happens during normalization.
    """

    file: str
    coverage: CoveragePercent | None
    not_covered: tuple[LineRange, ...] = ()
    covered_lines: int | None = None
    not_covered_lines: int | None = None


# -----------------------------------------------------------------------------
# Processed results (what renderers consume)
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ProcessedTestResult:
    """All tests of one file, grouped and counted."""

    file: str
    status: TestStatus
    passed: int
    total: int
    details: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Validate that the counts are consistent."""
        if self.passed < 0 or self.total < 0:
            msg = "ProcessedTestResult.passed/total must be >= 0"
            raise ValueError(msg)
        if self.passed > self.total:
            msg = "ProcessedTestResult.passed must be <= total"
            raise ValueError(msg)

    @classmethod
    def untested(cls, file: str) -> ProcessedTestResult:
        """Return the synthetic entry for a policy file without a test file."""
        return cls(file=file, status=TestStatus.NO_TESTS, passed=0, total=0)


@dataclass(frozen=True, slots=True)
class ProcessedCoverageResult:
    """Coverage for one file with its not-covered rows compressed to a string.

    ``not_covered_lines`` looks like ``"9, 10, 60-61"`` and is empty only when
    the file has no not-covered sections.
    """

    file: str
    coverage: CoveragePercent | None
    not_covered_lines: str = ""


# -----------------------------------------------------------------------------
# Collector output
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CollectedOutput:
    """Raw output of one collection run.

    ``coverage_output`` and ``coverage_exit_code`` are ``None`` when coverage
    was not requested.
    """

    output: str
    error: str
    exit_code: int
    coverage_output: str | None = None
    coverage_exit_code: int | None = None


__all__ = [
    "CollectedOutput",
    "ProcessedCoverageResult",
    "ProcessedTestResult",
    "RawCoverageEntry",
    "RawTestRecord",
]
