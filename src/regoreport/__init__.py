"""Summarize OPA policy test results and coverage as a pull-request table."""

from __future__ import annotations

from regoreport._meta import __version__, logger

__all__ = ["__version__", "logger"]
