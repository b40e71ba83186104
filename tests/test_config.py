"""Tests for configuration helpers and module side-effect behavior."""

from __future__ import annotations

import importlib
import logging
import sys
from typing import TYPE_CHECKING

import pytest

from regoreport.core import config

if TYPE_CHECKING:
    from _pytest.monkeypatch import MonkeyPatch


def test_get_schema_cached(monkeypatch: MonkeyPatch) -> None:
    """``get_schema`` should load each schema once and cache the result."""
    config.get_schema.cache_clear()
    calls = 0
    original = config.resources.files

    def tracking_files(package: str):
        nonlocal calls
        calls += 1
        return original(package)

    monkeypatch.setattr(config.resources, "files", tracking_files)

    schema1 = config.get_schema()
    schema2 = config.get_schema()
    coverage = config.get_schema("coverage")

    assert schema1 == schema2
    assert schema1["type"] == "array"
    assert coverage["type"] == "object"
    assert calls == 2
    config.get_schema.cache_clear()


def test_get_schema_unknown_kind() -> None:
    with pytest.raises(ValueError, match="Unsupported schema kind: 'xml'. Available kinds: coverage, tests"):
        config.get_schema("xml")


def test_import_has_no_side_effects(monkeypatch: MonkeyPatch) -> None:
    """Importing the package should not configure logging."""
    basic_called = False

    def fake_basic(*args, **kwargs):
        nonlocal basic_called
        basic_called = True

    monkeypatch.setattr(logging, "basicConfig", fake_basic)

    for name in [m for m in sys.modules if m == "regoreport" or m.startswith("regoreport.")]:
        monkeypatch.delitem(sys.modules, name)

    importlib.import_module("regoreport.cli")

    assert not basic_called


def test_report_text_constants() -> None:
    assert config.REPORT_TITLE == "# 🧪 OPA Rego Policy Test Results"
    assert config.GENERIC_ERROR_MESSAGE.startswith("⛔️⛔️ An unknown error has occurred")
    assert config.GENERIC_ERROR_MESSAGE.endswith("View the logs for more information. ⛔️⛔️")
