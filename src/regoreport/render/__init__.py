"""Output formatting for regoreport."""

from __future__ import annotations

from regoreport.render.human import render_human
from regoreport.render.markdown import format_results
from regoreport.render.render import RenderOptions, render

__all__ = ["RenderOptions", "format_results", "render", "render_human"]
