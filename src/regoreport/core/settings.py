"""Run settings and how they are read from the action environment."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from regoreport.core.types import CollectMode
from regoreport.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping

# Environment variable names set by the GitHub action wrapper.
ENV_PATH = "path"
ENV_TEST_FILE_POSTFIX = "test_file_postfix"
ENV_TEST_MODE = "test_mode"
ENV_RUN_COVERAGE_REPORT = "run_coverage_report"
ENV_REPORT_UNTESTED_FILES = "report_untested_files"
ENV_NO_TEST_FILES = "no_test_files"


@dataclass(frozen=True, slots=True)
class RunSettings:
    """Everything one report run needs to know."""

    path: str
    test_file_postfix: str
    test_mode: CollectMode = CollectMode.FILE
    run_coverage_report: bool = False
    report_untested_files: bool = False
    no_test_files: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Reject settings that would make collection meaningless."""
        if not self.path or not self.test_file_postfix:
            msg = f"Both {ENV_PATH!r} and {ENV_TEST_FILE_POSTFIX!r} must be set."
            raise ConfigurationError(msg)

    @property
    def untested_files(self) -> tuple[str, ...]:
        """Files to list as ``NO TESTS``; empty unless reporting is enabled."""
        return self.no_test_files if self.report_untested_files else ()

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> RunSettings:
        """Build settings from the action's environment variables.

        Booleans are enabled only by the exact string ``"true"``. Any test mode
        other than ``"directory"`` selects per-file collection.
        """
        mode = CollectMode.DIRECTORY if environ.get(ENV_TEST_MODE) == "directory" else CollectMode.FILE
        return cls(
            path=environ.get(ENV_PATH, ""),
            test_file_postfix=environ.get(ENV_TEST_FILE_POSTFIX, ""),
            test_mode=mode,
            run_coverage_report=environ.get(ENV_RUN_COVERAGE_REPORT) == "true",
            report_untested_files=environ.get(ENV_REPORT_UNTESTED_FILES) == "true",
            no_test_files=split_file_list(environ.get(ENV_NO_TEST_FILES, "")),
        )


def split_file_list(text: str | None) -> tuple[str, ...]:
    """Split a newline separated file list, dropping blank entries."""
    if not text:
        return ()
    return tuple(line.strip() for line in text.splitlines() if line.strip())


__all__ = [
    "ENV_NO_TEST_FILES",
    "ENV_PATH",
    "ENV_REPORT_UNTESTED_FILES",
    "ENV_RUN_COVERAGE_REPORT",
    "ENV_TEST_FILE_POSTFIX",
    "ENV_TEST_MODE",
    "RunSettings",
    "split_file_list",
]
