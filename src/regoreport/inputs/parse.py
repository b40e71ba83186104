"""Decode and validate the JSON printed by ``opa test``."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, cast

from jsonschema import validate
from jsonschema.exceptions import ValidationError

from regoreport.core.config import get_schema
from regoreport.core.model import RawCoverageEntry, RawTestRecord
from regoreport.errors import RawOutputError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from regoreport.core.types import LineRange

RawTestItem = dict[str, Any]
RawCoverageFiles = dict[str, dict[str, Any]]


def _load(text: str, *, kind: str, context: str) -> object:
    try:
        doc = json.loads(text)
    except json.JSONDecodeError as exc:
        raise RawOutputError(context, f"invalid JSON: {exc}") from exc
    try:
        validate(doc, get_schema(kind))
    except ValidationError as exc:
        raise RawOutputError(context, f"unexpected {kind} output: {exc.message}") from exc
    return doc


def parse_test_output(text: str, *, context: str = "opa test output") -> list[RawTestItem]:
    """Return the raw test items of an ``opa test --format=json`` document."""
    return cast("list[RawTestItem]", _load(text, kind="tests", context=context))


def parse_coverage_output(text: str, *, context: str = "opa coverage output") -> RawCoverageFiles:
    """Return the ``files`` map of an ``opa test --coverage`` document.

    A document without ``files`` yields an empty map.
    """
    doc = cast("dict[str, Any]", _load(text, kind="coverage", context=context))
    return cast("RawCoverageFiles", doc.get("files") or {})


def to_test_records(items: Iterable[Mapping[str, Any]]) -> list[RawTestRecord]:
    records: list[RawTestRecord] = []
    for item in items:
        location = item["location"]
        records.append(
            RawTestRecord(
                file=str(location["file"]),
                name=str(item["name"]),
                package=str(item.get("package", "")),
                row=int(location.get("row", 0)),
                col=int(location.get("col", 0)),
                fail=bool(item.get("fail", False)),
                duration=item.get("duration", 0),
            )
        )
    return records


def _sections(raw: Iterable[Mapping[str, Any]] | None) -> tuple[LineRange, ...]:
    return tuple((int(sec["start"]["row"]), int(sec["end"]["row"])) for sec in raw or ())


def to_coverage_entries(files: Mapping[str, Mapping[str, Any]]) -> list[RawCoverageEntry]:
    return [
        RawCoverageEntry(
            file=path,
            coverage=data.get("coverage"),
            not_covered=_sections(data.get("not_covered")),
            covered_lines=data.get("covered_lines"),
            not_covered_lines=data.get("not_covered_lines"),
        )
        for path, data in files.items()
    ]


def load_test_records(text: str) -> list[RawTestRecord]:
    """Parse ``opa test --format=json`` output into typed records."""
    return to_test_records(parse_test_output(text))


def load_coverage_entries(text: str) -> list[RawCoverageEntry]:
    """Parse ``opa test --format=json --coverage`` output into typed entries."""
    return to_coverage_entries(parse_coverage_output(text))


__all__ = [
    "RawCoverageFiles",
    "RawTestItem",
    "load_coverage_entries",
    "load_test_records",
    "parse_coverage_output",
    "parse_test_output",
    "to_coverage_entries",
    "to_test_records",
]
