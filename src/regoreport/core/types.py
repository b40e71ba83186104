"""Shared type aliases and enumerations used across regoreport."""

from __future__ import annotations

from enum import StrEnum
from typing import TypeAlias

# ---------------------------------------------------------------------------
# Common type aliases
# ---------------------------------------------------------------------------

LineRange: TypeAlias = tuple[int, int]
"""Inclusive ``(start, end)`` pair of source rows reported as not covered."""

CoveragePercent: TypeAlias = float
"""Percentage in the inclusive range ``0`` to ``100`` as reported by OPA."""


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class TestStatus(StrEnum):
    """Outcome of all tests grouped under one file."""

    __test__ = False

    PASS = "PASS"
    FAIL = "FAIL"
    NO_TESTS = "NO TESTS"


class CollectMode(StrEnum):
    """Strategies for running ``opa test``."""

    DIRECTORY = "directory"
    FILE = "file"


class Format(StrEnum):
    """Supported output formats."""

    MARKDOWN = "markdown"
    HUMAN = "human"


__all__ = [
    "CollectMode",
    "CoveragePercent",
    "Format",
    "LineRange",
    "TestStatus",
]
