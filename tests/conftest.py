from __future__ import annotations

import json
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from regoreport.core.model import ProcessedCoverageResult, ProcessedTestResult
from regoreport.core.types import TestStatus
from regoreport.inputs import opa
from regoreport.inputs.opa import CommandOutput

RawItem = dict[str, Any]


def make_test_item(file: str, name: str, *, fail: bool = False, row: int = 1) -> RawItem:
    """Build one element of ``opa test --format=json`` output."""
    item: RawItem = {
        "location": {"file": file, "row": row, "col": 1},
        "package": "data.spacelift",
        "name": name,
        "duration": 215_000,
    }
    if fail:
        item["fail"] = True
    return item


def make_section(start: int, end: int | None = None) -> dict[str, Any]:
    return {"start": {"row": start}, "end": {"row": start if end is None else end}}


def make_coverage_doc(files: dict[str, dict[str, Any]]) -> str:
    return json.dumps({"files": files})


@pytest.fixture
def opa_item() -> Callable[..., RawItem]:
    """Return the builder for one element of ``opa test --format=json`` output."""
    return make_test_item


@pytest.fixture
def coverage_section() -> Callable[..., dict[str, Any]]:
    """Return the builder for one ``{start: {row}, end: {row}}`` coverage section."""
    return make_section


@pytest.fixture
def coverage_doc() -> Callable[[dict[str, dict[str, Any]]], str]:
    """Return the builder for a whole ``opa test --coverage`` document."""
    return make_coverage_doc


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a Typer CLI runner for invoking the command-line interface."""
    return CliRunner()


@pytest.fixture
def sample_test_output() -> str:
    """Test output for a small policy repository with one failing test."""
    items = [
        make_test_item("tests/cancel-in-progress-runs_test.rego", "test_cancel_runs_allowed"),
        make_test_item("tests/cancel-in-progress-runs_test.rego", "test_cancel_runs_denied"),
        make_test_item("tests/drift-detection_test.rego", "test_drift_detection_schedule"),
        make_test_item(
            "tests/enforce-module-use-policy_test.rego", "test_deny_creation_of_controlled_resource_type"
        ),
        make_test_item(
            "tests/enforce-module-use-policy_test.rego", "test_deny_update_of_controlled_resource_type"
        ),
        make_test_item(
            "tests/enforce-module-use-policy_test.rego",
            "test_allow_deletion_of_controlled_resource_type",
            fail=True,
        ),
        make_test_item(
            "tests/enforce-module-use-policy_test.rego",
            "test_allow_creation_of_uncontrolled_resource_type",
        ),
        make_test_item("tests/readers-writers-admins-teams_test.rego", "test_reader_access"),
        make_test_item("tests/drift-detection_test.rego", "test_drift_detection_manual"),
    ]
    return json.dumps(items)


@pytest.fixture
def sample_coverage_output() -> str:
    """Coverage output covering every shape the normalizer distinguishes."""
    return make_coverage_doc(
        {
            "cancel-in-progress-runs.rego": {
                "covered": [make_section(3, 14)],
                "not_covered": [make_section(16)],
                "covered_lines": 5,
                "not_covered_lines": 1,
                "coverage": 83.33,
            },
            "enforce-module-use-policy.rego": {
                "not_covered": [
                    make_section(80),
                    make_section(37),
                    make_section(42),
                    make_section(46),
                    make_section(52),
                    make_section(54),
                    make_section(57),
                    make_section(60, 61),
                    make_section(64),
                    make_section(68),
                    make_section(78),
                ],
                "covered_lines": 11,
                "not_covered_lines": 12,
                "coverage": 47.826,
            },
            "readers-writers-admins-teams.rego": {
                "not_covered": [make_section(16), make_section(24), make_section(28)],
                "coverage": 83.33,
            },
            "drift-detection.rego": {
                "not_covered": [make_section(3), make_section(5), make_section(8), make_section(11)],
            },
            "tests/cancel-in-progress-runs_test.rego": {
                "covered": [make_section(1, 20)],
                "covered_lines": 20,
                "coverage": 100,
            },
        }
    )


@pytest.fixture
def processed_test_results() -> list[ProcessedTestResult]:
    def passing(file: str, *names: str) -> ProcessedTestResult:
        return ProcessedTestResult(
            file=file,
            status=TestStatus.PASS,
            passed=len(names),
            total=len(names),
            details=tuple(f"✅ {n}" for n in names),
        )

    return [
        passing("tests/ignore-changes-outside-root_test.rego", *(f"test{i}" for i in range(1, 13))),
        passing(
            "tests/readers-writers-admins-teams_test.rego",
            "test_reader_access",
            "test_writer_access",
        ),
        passing("tests/cancel-in-progress-runs_test.rego", "test_cancel_successful", "test_cancel_failure"),
        ProcessedTestResult(
            file="tests/enforce-module-use-policy_test.rego",
            status=TestStatus.FAIL,
            passed=1,
            total=2,
            details=("✅ test_valid_module_use", "❌ test_invalid_module_use"),
        ),
        ProcessedTestResult.untested("./examples/no_test_file.rego"),
    ]


@pytest.fixture
def processed_coverage_results() -> list[ProcessedCoverageResult]:
    return [
        ProcessedCoverageResult("tests/ignore-changes-outside-root.rego", 97.44, ""),
        ProcessedCoverageResult("tests/readers-writers-admins-teams.rego", 83.33, "16, 24, 28"),
        ProcessedCoverageResult("tests/cancel-in-progress-runs.rego", 83.33, "16"),
        ProcessedCoverageResult("tests/do-not-delete-stateful-resources.rego", 100.0, ""),
    ]


@dataclass(slots=True)
class FakeOpa:
    """Stand-in for :func:`regoreport.inputs.opa.run_opa_test`.

    Responses are keyed by ``(paths, coverage)``; unknown invocations print an
    empty JSON document for their kind.
    """

    responses: dict[tuple[tuple[str, ...], bool], CommandOutput] = field(default_factory=dict)
    calls: list[tuple[tuple[str, ...], bool]] = field(default_factory=list)

    def respond(
        self,
        paths: Sequence[str | Path],
        *,
        coverage: bool = False,
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> None:
        key = (tuple(str(p) for p in paths), coverage)
        self.responses[key] = CommandOutput(stdout=stdout, stderr=stderr, returncode=returncode)

    def __call__(self, paths: Sequence[str], *, coverage: bool = False) -> CommandOutput:
        key = (tuple(paths), coverage)
        self.calls.append(key)
        default = CommandOutput(stdout='{"files": {}}' if coverage else "[]", stderr="", returncode=0)
        return self.responses.get(key, default)


@pytest.fixture
def fake_opa(monkeypatch: pytest.MonkeyPatch) -> FakeOpa:
    fake = FakeOpa()
    monkeypatch.setattr(opa, "run_opa_test", fake)
    return fake


@pytest.fixture
def policy_tree(tmp_path: Path) -> Callable[[Sequence[str]], Path]:
    """Create empty files at the given relative paths below ``tmp_path/policies``."""

    def build(files: Sequence[str]) -> Path:
        root = tmp_path / "policies"
        root.mkdir(exist_ok=True)
        for rel in files:
            target = root / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text("package spacelift\n", encoding="utf-8")
        return root

    return build
