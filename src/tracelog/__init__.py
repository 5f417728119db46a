"""
tracelog: opinionated structured logging with correlation identifiers.

Usage:
    from tracelog import LogOptions, build_logger, generate_request_id

    logger = build_logger("log/oauth", "", LogOptions(development=True, with_trace=True))
    logger.log("a full service", {"request": "a request"}, None)
"""

from .config import settings
from .exceptions import (
    ConfigurationError,
    DeploymentError,
    DirectoryCreationError,
    IdentifierGenerationError,
    LoggerBuildError,
    SinkOpenError,
    TimeZoneNotFound,
    TracelogError,
)
from .logging import LogFormat, Logger, LogOptions, SugaredLogger, build_logger, build_sugared_logger
from .request import RequestCounter, generate_request_id

__version__ = "0.1.0"

__all__ = [
    "settings",
    "build_logger",
    "build_sugared_logger",
    "Logger",
    "SugaredLogger",
    "LogFormat",
    "LogOptions",
    "RequestCounter",
    "generate_request_id",
    "TracelogError",
    "LoggerBuildError",
    "ConfigurationError",
    "TimeZoneNotFound",
    "DeploymentError",
    "DirectoryCreationError",
    "SinkOpenError",
    "IdentifierGenerationError",
]
