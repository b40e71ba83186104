"""Run ``opa test`` and gather its raw output.

Two strategies share one signature (``path, test_suffix, run_coverage``):

* directory mode hands the whole tree to OPA in a single invocation (plus a
  second one for coverage);
* per-file mode pairs every test file with its policy file and runs OPA once
  per pair, merging the results. It is slower but does not depend on OPA
  guessing which policy belongs to which test.

Neither strategy raises on bad test output. Problems are collected as error
text and exit codes and handed back with whatever output could be gathered.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from regoreport._meta import logger
from regoreport.core.model import CollectedOutput
from regoreport.core.types import CollectMode
from regoreport.errors import RawOutputError
from regoreport.inputs import opa
from regoreport.inputs.discover import find_implementation_file, find_test_files
from regoreport.inputs.parse import parse_coverage_output, parse_test_output

if TYPE_CHECKING:
    from regoreport.inputs.parse import RawCoverageFiles, RawTestItem


class Collector(Protocol):
    def __call__(self, path: str, test_suffix: str, *, run_coverage: bool) -> CollectedOutput: ...


def collect_by_directory(path: str, test_suffix: str, *, run_coverage: bool) -> CollectedOutput:
    """Run OPA once over *path* (and once more for coverage when requested).

    ``test_suffix`` is unused: OPA discovers test files itself in this mode.
    """
    del test_suffix
    tests = opa.run_opa_test([path])
    error = tests.stderr

    if not run_coverage:
        logger.info("Coverage reporting skipped because coverage was not requested")
        logger.info("OPA test commands completed")
        return CollectedOutput(output=tests.stdout, error=error, exit_code=tests.returncode)

    coverage = opa.run_opa_test([path], coverage=True)
    if coverage.stderr:
        error += f"\nCoverage: {coverage.stderr}"
    logger.info("OPA test commands completed")
    return CollectedOutput(
        output=tests.stdout,
        error=error,
        exit_code=tests.returncode,
        coverage_output=coverage.stdout,
        coverage_exit_code=coverage.returncode,
    )


@dataclass(slots=True)
class _Accumulator:
    """Running state of a per-file collection."""

    run_coverage: bool
    records: list[RawTestItem] = field(default_factory=list)
    coverage_files: RawCoverageFiles = field(default_factory=dict)
    error: str = ""
    exit_code: int = 0
    coverage_exit_code: int = 0

    def record_error(self, message: str) -> None:
        logger.debug("%s", message.rstrip("\n"))
        self.error += message

    def fail(self, message: str) -> None:
        """Record a problem that makes both the test and coverage runs fail."""
        self.record_error(message)
        self.exit_code = 1
        if self.run_coverage:
            self.coverage_exit_code = 1

    def result(self) -> CollectedOutput:
        if not self.run_coverage:
            return CollectedOutput(output=json.dumps(self.records), error=self.error, exit_code=self.exit_code)
        return CollectedOutput(
            output=json.dumps(self.records),
            error=self.error,
            exit_code=self.exit_code,
            coverage_output=json.dumps({"files": self.coverage_files}),
            coverage_exit_code=self.coverage_exit_code,
        )


def _run_pair_tests(acc: _Accumulator, test_file: Path, impl_file: Path) -> None:
    proc = opa.run_opa_test([str(test_file), str(impl_file)])
    if proc.returncode:
        acc.exit_code = proc.returncode
    if proc.stderr:
        acc.record_error(proc.stderr)
    try:
        acc.records.extend(parse_test_output(proc.stdout, context=str(test_file)))
    except RawOutputError as exc:
        acc.record_error(f"Error parsing test results for {test_file}: {exc.reason}\n")
        acc.exit_code = 1


def _run_pair_coverage(acc: _Accumulator, test_file: Path, impl_file: Path) -> None:
    proc = opa.run_opa_test([str(test_file), str(impl_file)], coverage=True)
    acc.coverage_exit_code = max(acc.coverage_exit_code, proc.returncode)
    if proc.stderr:
        acc.record_error(f"Coverage error for {test_file}: {proc.stderr}")
    try:
        files = parse_coverage_output(proc.stdout, context=str(test_file))
    except RawOutputError as exc:
        acc.record_error(f"Error parsing coverage for {test_file}: {exc.reason}\n")
        acc.coverage_exit_code = 1
        return
    acc.coverage_files.update(files)


def collect_by_file(path: str, test_suffix: str, *, run_coverage: bool) -> CollectedOutput:
    """Run OPA once per test file, paired with its policy file."""
    acc = _Accumulator(run_coverage=run_coverage)
    base = Path(path)
    if not base.is_dir():
        acc.fail(f"Error: Test path not found: {path}\n")
        return acc.result()

    for test_file in find_test_files(base, test_suffix):
        impl_file = find_implementation_file(test_file, test_suffix)
        if impl_file is None:
            acc.fail(f"Error: Implementation file not found for test: {test_file}\n")
            continue

        logger.debug("pairing %s with %s", test_file, impl_file)
        _run_pair_tests(acc, test_file, impl_file)
        if run_coverage:
            _run_pair_coverage(acc, test_file, impl_file)

    return acc.result()


COLLECTORS: dict[CollectMode, Collector] = {
    CollectMode.DIRECTORY: collect_by_directory,
    CollectMode.FILE: collect_by_file,
}


def collect(mode: CollectMode, path: str, test_suffix: str, *, run_coverage: bool) -> CollectedOutput:
    """Gather raw OPA output using the strategy selected by *mode*."""
    logger.debug("collecting OPA results in %s mode from %s", mode.value, path)
    return COLLECTORS[mode](path, test_suffix, run_coverage=run_coverage)


__all__ = ["COLLECTORS", "Collector", "collect", "collect_by_directory", "collect_by_file"]
