"""
Tracelog exception hierarchy.

Construction failures are split by cause so callers can tell a usage mistake
from a broken deployment:

- ConfigurationError: the options themselves are wrong (e.g. unknown zone).
- DeploymentError: the environment cannot host the logger (directory or sink
  cannot be created/opened).

Both derive from LoggerBuildError, the single "the logger could not be built"
kind. Identifier failures live in their own branch.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class TracelogError(Exception):
    """Root of every error raised by tracelog."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}


# ================================
# Construction errors
# ================================


class LoggerBuildError(TracelogError):
    """A logger instance could not be constructed. There is no partial logger."""

    pass


class ConfigurationError(LoggerBuildError):
    """The supplied options cannot be turned into a working configuration."""

    pass


class TimeZoneNotFound(ConfigurationError):
    def __init__(self, *, time_zone: str, reason: Optional[str] = None) -> None:
        message = f"Unknown time zone '{time_zone}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, code="TIME_ZONE_NOT_FOUND", details={"time_zone": time_zone})


class DeploymentError(LoggerBuildError):
    """The host environment cannot provide a writable log destination."""

    pass


class DirectoryCreationError(DeploymentError):
    def __init__(self, *, directory: str, reason: str) -> None:
        super().__init__(
            f"Failed to create log directory '{directory}': {reason}",
            code="DIRECTORY_CREATION_FAILED",
            details={"directory": directory},
        )


class SinkOpenError(DeploymentError):
    def __init__(self, *, sink: str, reason: str) -> None:
        super().__init__(
            f"Failed to open log sink '{sink}': {reason}",
            code="SINK_OPEN_FAILED",
            details={"sink": sink},
        )


# ================================
# Identifier errors
# ================================


class IdentifierGenerationError(TracelogError):
    """The secure random source failed; no weaker identifier is substituted."""

    def __init__(self, *, reason: str) -> None:
        super().__init__(
            f"Failed to generate request id: {reason}",
            code="IDENTIFIER_GENERATION_FAILED",
        )
