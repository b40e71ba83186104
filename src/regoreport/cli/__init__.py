"""Command line interface for regoreport."""

from __future__ import annotations

from regoreport.cli.root import action_main, cli, create_app, main

__all__ = ["action_main", "cli", "create_app", "main"]
