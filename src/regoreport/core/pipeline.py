"""End-to-end orchestration: collect, normalize, render."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from regoreport._meta import logger
from regoreport.core.config import GENERIC_ERROR_MESSAGE, TESTS_FAILED_MESSAGE
from regoreport.core.process import (
    any_failed,
    process_coverage_report,
    process_test_results,
    untested_results,
)
from regoreport.core.types import Format
from regoreport.errors import RegoReportError
from regoreport.inputs.collect import collect
from regoreport.inputs.parse import load_coverage_entries, load_test_records
from regoreport.render.render import RenderOptions, render

if TYPE_CHECKING:
    from collections.abc import Iterable

    from regoreport.core.model import ProcessedCoverageResult, ProcessedTestResult
    from regoreport.core.settings import RunSettings


@dataclass(frozen=True, slots=True)
class Report:
    """Normalized results of one run."""

    tests: tuple[ProcessedTestResult, ...]
    coverage: tuple[ProcessedCoverageResult, ...] = ()

    @property
    def tests_failed(self) -> bool:
        return any_failed(self.tests)


@dataclass(frozen=True, slots=True)
class Outcome:
    """What the sink publishes: the document and whether the run failed."""

    text: str
    tests_failed: bool
    failure: str | None = None

    @property
    def failed(self) -> bool:
        return self.failure is not None


def build_report(
    test_output: str,
    coverage_output: str | None = None,
    *,
    untested_files: Iterable[str] = (),
) -> Report:
    """Normalize raw ``opa test`` JSON into a :class:`Report`.

    ``NO TESTS`` rows for *untested_files* follow the real results.
    Raises :class:`~regoreport.errors.RawOutputError` on malformed input.
    """
    tests = process_test_results(load_test_records(test_output))
    tests.extend(untested_results(untested_files))
    coverage = process_coverage_report(load_coverage_entries(coverage_output)) if coverage_output else []
    return Report(tests=tuple(tests), coverage=tuple(coverage))


def finish(report: Report, text: str) -> Outcome:
    """Apply the publishing rules to a rendered report."""
    if not text:
        logger.error("no test results to report")
        return Outcome(text=GENERIC_ERROR_MESSAGE, tests_failed=False, failure=GENERIC_ERROR_MESSAGE)
    if report.tests_failed:
        return Outcome(text=text, tests_failed=True, failure=TESTS_FAILED_MESSAGE)
    return Outcome(text=text, tests_failed=False)


def aborted(exc: Exception) -> Outcome:
    return Outcome(
        text=GENERIC_ERROR_MESSAGE,
        tests_failed=False,
        failure=f"Action failed with error: {exc}",
    )


def run(settings: RunSettings, *, fmt: str = Format.MARKDOWN, color: bool = False) -> Outcome:
    """Collect, normalize and render OPA results for *settings*.

    Per-file problems found while collecting are logged and do not stop the
    run. Anything that prevents building the report is turned into a failed
    :class:`Outcome` carrying the generic error text.
    """
    options = RenderOptions(
        show_coverage=settings.run_coverage_report,
        test_suffix=settings.test_file_postfix,
        color=color,
    )
    try:
        collected = collect(
            settings.test_mode,
            settings.path,
            settings.test_file_postfix,
            run_coverage=settings.run_coverage_report,
        )
        if collected.error:
            logger.warning("opa reported problems:\n%s", collected.error.rstrip())
        logger.info("opa exit code: %d", collected.exit_code)
        if collected.coverage_exit_code is not None:
            logger.info("opa coverage exit code: %d", collected.coverage_exit_code)

        report = build_report(
            collected.output,
            collected.coverage_output if settings.run_coverage_report else None,
            untested_files=settings.untested_files,
        )
        text = render(report.tests, report.coverage, fmt=fmt, options=options)
    except RegoReportError as exc:
        logger.error("%s", exc)  # noqa: TRY400
        return aborted(exc)
    except Exception as exc:
        logger.exception("unexpected failure")
        return aborted(exc)

    return finish(report, text)


__all__ = ["Outcome", "Report", "aborted", "build_report", "finish", "run"]
