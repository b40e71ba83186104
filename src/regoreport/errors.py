"""Centralised exception hierarchy for regoreport."""

from __future__ import annotations


class RegoReportError(Exception):
    """Base class for all custom regoreport exceptions."""


class ConfigurationError(RegoReportError):
    """Required run settings are missing or invalid."""


class RawOutputError(RegoReportError):
    """OPA output could not be decoded or does not match the expected schema."""

    def __init__(self, context: str, reason: str) -> None:
        super().__init__(f"{context}: {reason}")
        self.context = context
        self.reason = reason


class OpaInvocationError(RegoReportError):
    """The ``opa`` executable could not be launched."""


__all__ = [
    "ConfigurationError",
    "OpaInvocationError",
    "RawOutputError",
    "RegoReportError",
]
