"""
Logger construction for services.

Builds leveled loggers that write to a dated log file plus optional extra
sinks, stamp records in a fixed time zone and carry trace-id / ref-id
correlation fields.

Library: structlog + orjson.
"""

from .core import build_logger, build_sugared_logger
from .logger import Logger, SugaredLogger
from .options import LogFormat, LogOptions

__all__ = [
    "build_logger",
    "build_sugared_logger",
    "Logger",
    "SugaredLogger",
    "LogFormat",
    "LogOptions",
]
