"""Thin wrapper around the ``opa`` executable."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from typing import TYPE_CHECKING

from regoreport._meta import logger
from regoreport.core.config import OPA_BINARY, OPA_COVERAGE_FLAG, OPA_JSON_FLAG, OPA_V0_COMPATIBLE_FLAG
from regoreport.errors import OpaInvocationError

if TYPE_CHECKING:
    from collections.abc import Sequence


@dataclass(frozen=True, slots=True)
class CommandOutput:
    """Captured result of one ``opa`` invocation."""

    stdout: str
    stderr: str
    returncode: int


def opa_test_args(paths: Sequence[str], *, coverage: bool = False) -> list[str]:
    """Return the ``opa test`` argv for *paths*."""
    args = [OPA_BINARY, "test", *paths, OPA_JSON_FLAG]
    if coverage:
        args.append(OPA_COVERAGE_FLAG)
    args.append(OPA_V0_COMPATIBLE_FLAG)
    return args


def run_opa_test(paths: Sequence[str], *, coverage: bool = False) -> CommandOutput:
    """Run ``opa test`` against *paths* and capture its output verbatim.

    A nonzero exit code is returned, not raised: OPA exits nonzero when a test
    fails and still prints its JSON report.
    """
    args = opa_test_args(paths, coverage=coverage)
    logger.debug("running %s", " ".join(args))
    try:
        proc = subprocess.run(args, text=True, capture_output=True, check=False)  # noqa: S603
    except OSError as exc:
        msg = f"failed to run {OPA_BINARY}: {exc}"
        raise OpaInvocationError(msg) from exc
    logger.debug("%s exited with %d", OPA_BINARY, proc.returncode)
    return CommandOutput(stdout=proc.stdout, stderr=proc.stderr, returncode=proc.returncode)


__all__ = ["CommandOutput", "opa_test_args", "run_opa_test"]
