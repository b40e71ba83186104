from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from regoreport.core.config import DEFAULT_TEST_SUFFIX
from regoreport.core.types import Format
from regoreport.render.human import render_human
from regoreport.render.markdown import format_results

if TYPE_CHECKING:
    from collections.abc import Sequence

    from regoreport.core.model import ProcessedCoverageResult, ProcessedTestResult


@dataclass(frozen=True, slots=True)
class RenderOptions:
    """Options that affect *presentation* only (not report content)."""

    show_coverage: bool = False
    test_suffix: str = DEFAULT_TEST_SUFFIX
    color: bool = False


def render(
    test_results: Sequence[ProcessedTestResult],
    coverage_results: Sequence[ProcessedCoverageResult],
    *,
    fmt: str,
    options: RenderOptions,
) -> str:
    """Render processed results to text.

    Parameters
    ----------
    test_results, coverage_results:
        Output of the normalizer.
    fmt:
        One of: "markdown", "human".
    options:
        Presentation options (coverage column, test suffix, color).
    """
    f = (fmt or "").strip().lower()

    if f == Format.MARKDOWN:
        return format_results(
            test_results,
            coverage_results,
            show_coverage=options.show_coverage,
            test_suffix=options.test_suffix,
        )
    if f == Format.HUMAN:
        return render_human(test_results, coverage_results, options)
    choices = ", ".join(x.value for x in Format)
    msg = f"Unsupported format: {fmt!r}. Expected one of: {choices}."
    raise ValueError(msg)


__all__ = ["RenderOptions", "render"]
