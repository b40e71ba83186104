"""Central configuration and constants for ``regoreport``."""

from __future__ import annotations

import json
from functools import cache
from importlib import resources

# Executable and flags used for every ``opa test`` invocation.
OPA_BINARY = "opa"
OPA_JSON_FLAG = "--format=json"
OPA_COVERAGE_FLAG = "--coverage"
# https://www.openpolicyagent.org/docs/latest/v0-compatibility/
OPA_V0_COMPATIBLE_FLAG = "--v0-compatible"

# Extension shared by policy and policy-test files.
POLICY_EXTENSION = ".rego"

# Suffix that marks a policy file as a test file when none is configured.
DEFAULT_TEST_SUFFIX = "_test"

# Default logging format used by the CLI entry point.
LOG_FORMAT = "%(levelname)s: %(message)s"

REPORT_TITLE = "# 🧪 OPA Rego Policy Test Results"

PASS_GLYPH = "✅"
FAIL_GLYPH = "❌"
WARNING_GLYPH = "⚠️"

NOT_AVAILABLE = "N/A"
NO_TEST_FILE_PLACEHOLDER = "No test file found"

GENERIC_ERROR_MESSAGE = (
    "⛔️⛔️ An unknown error has occurred in generating the results, either from tests failing "
    "or an error running OPA or an issue with GitHub actions. View the logs for more information. ⛔️⛔️"
)
TESTS_FAILED_MESSAGE = "One or more OPA tests failed"


_SCHEMA_FILES: dict[str, str] = {
    "tests": "test_results.schema.json",
    "coverage": "coverage_report.schema.json",
}


@cache
def get_schema(kind: str = "tests") -> dict[str, object]:
    """Load and cache the JSON schema describing raw ``opa test`` output."""
    try:
        filename = _SCHEMA_FILES[kind]
    except KeyError as exc:
        choices = ", ".join(sorted(_SCHEMA_FILES))
        msg = f"Unsupported schema kind: {kind!r}. Available kinds: {choices}"
        raise ValueError(msg) from exc
    return json.loads(resources.files("regoreport.data").joinpath(filename).read_text(encoding="utf-8"))


__all__ = [
    "DEFAULT_TEST_SUFFIX",
    "FAIL_GLYPH",
    "GENERIC_ERROR_MESSAGE",
    "LOG_FORMAT",
    "NOT_AVAILABLE",
    "NO_TEST_FILE_PLACEHOLDER",
    "OPA_BINARY",
    "OPA_COVERAGE_FLAG",
    "OPA_JSON_FLAG",
    "OPA_V0_COMPATIBLE_FLAG",
    "PASS_GLYPH",
    "POLICY_EXTENSION",
    "REPORT_TITLE",
    "TESTS_FAILED_MESSAGE",
    "WARNING_GLYPH",
    "get_schema",
]
