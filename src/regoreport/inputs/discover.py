"""Locate policy test files and pair them with the policies they exercise."""

from __future__ import annotations

from glob import escape
from pathlib import Path

from regoreport._meta import logger
from regoreport.core.config import POLICY_EXTENSION


def suffix_pattern(test_suffix: str) -> str:
    """Return the glob pattern matching test files for *test_suffix*.

    The suffix is matched literally, so ``[v1]`` is not a character class.
    """
    return f"*{escape(test_suffix)}{POLICY_EXTENSION}"


def find_test_files(base_path: Path, test_suffix: str) -> list[Path]:
    """Return every test file beneath *base_path*, recursively and sorted."""
    pattern = suffix_pattern(test_suffix)
    found = sorted(p for p in base_path.rglob(pattern) if p.is_file())
    logger.debug("found %d test file(s) matching %s under %s", len(found), pattern, base_path)
    return found


def implementation_name(test_file: Path, test_suffix: str) -> str:
    """Return the policy file name a test file is expected to cover.

    ``deny_test.rego`` with suffix ``_test`` becomes ``deny.rego``.
    """
    marker = f"{test_suffix}{POLICY_EXTENSION}"
    name = test_file.name
    if name.endswith(marker):
        name = name[: -len(marker)]
    return f"{name}{POLICY_EXTENSION}"


def find_implementation_file(test_file: Path, test_suffix: str) -> Path | None:
    """Return the policy file paired with *test_file*, or ``None``.

    The test file's own directory is searched first, then its parent. Neither
    search descends into subdirectories, so an unrelated policy of the same
    name deeper in the tree is never picked up.
    """
    name = implementation_name(test_file, test_suffix)
    directory = test_file.parent
    for candidate_dir in (directory, directory.parent):
        candidate = candidate_dir / name
        if candidate.is_file():
            return candidate
    return None


__all__ = [
    "find_implementation_file",
    "find_test_files",
    "implementation_name",
    "suffix_pattern",
]
