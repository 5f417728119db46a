"""
Core logging configuration and construction logic.

`build_logger` turns (directory, prefix, LogOptions) into a ready `Logger`:

1. resolve the time zone and the log directory (created if missing)
2. derive the dated file path
3. pick level, encoding and sampling from the development flag
4. compute the permanent trace-id / ref-id fields
5. open the file sink followed by every extra output, in order
6. wrap everything in a private structlog bound logger

Each logger owns its processors and sinks; the global structlog
configuration is never touched, so differently configured loggers coexist.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone, tzinfo
from typing import Any, List, Optional

import structlog
from structlog.processors import CallsiteParameter, CallsiteParameterAdder
from structlog.typing import EventDict, Processor, WrappedLogger

from ..config import LoggingSettings, settings
from ..request import RequestCounter
from .formatters import (
    CALLER_KEY,
    LEVEL_KEY,
    MESSAGE_KEY,
    TIME_KEY,
    ConsoleFormatter,
    JsonFormatter,
)
from .logger import Logger, SugaredLogger
from .options import Clock, LogFormat, LogOptions, injected_fields, make_log_file, resolve_time_zone
from .sampling import Sampler
from .sinks import SinkFanout, ensure_directory, open_sinks

# structlog method names -> level names used in records
_LEVEL_NAMES = {
    "debug": "debug",
    "info": "info",
    "warning": "warn",
    "warn": "warn",
    "error": "error",
    "exception": "error",
    "critical": "fatal",
    "fatal": "fatal",
}

_MIN_LEVELS = {"debug": logging.DEBUG, "info": logging.INFO}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# Structlog Processors
# =============================================================================


def add_level(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add the level name to the event."""
    event_dict[LEVEL_KEY] = _LEVEL_NAMES.get(method_name, method_name)
    return event_dict


def rename_event_key(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Rename structlog's 'event' to 'msg'."""
    if "event" in event_dict:
        event_dict[MESSAGE_KEY] = event_dict.pop("event")
    return event_dict


class ZonedTimeStamper:
    """Stamp records with the current time rendered in a fixed zone.

    The host's local zone is never consulted.
    """

    def __init__(self, tz: tzinfo, fmt: str, clock: Clock = utc_now, key: str = TIME_KEY) -> None:
        self._tz = tz
        self._fmt = fmt
        self._clock = clock
        self._key = key

    def now(self) -> str:
        return self._clock().astimezone(self._tz).strftime(self._fmt)

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict[self._key] = self.now()
        return event_dict


def add_caller(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Collapse callsite filename/lineno into a single 'file.py:line' value."""
    filename = event_dict.pop("filename", None)
    lineno = event_dict.pop("lineno", None)
    if filename is not None:
        event_dict[CALLER_KEY] = f"{filename}:{lineno}"
    return event_dict


def build_processors(
    options: LogOptions,
    stamper: ZonedTimeStamper,
    config: LoggingSettings,
) -> List[Processor]:
    processors: List[Processor] = [add_level, rename_event_key]

    if options.format is LogFormat.JSON:
        processors.append(
            Sampler(
                initial=config.sampling_initial,
                thereafter=config.sampling_thereafter,
                tick=config.sampling_tick,
            )
        )

    processors.append(stamper)

    if options.format is LogFormat.JSON:
        processors.append(
            CallsiteParameterAdder(
                parameters=[CallsiteParameter.FILENAME, CallsiteParameter.LINENO],
                additional_ignores=["tracelog.logging"],
            )
        )
        processors.append(add_caller)

    processors.append(structlog.processors.format_exc_info)
    processors.append(JsonFormatter() if options.format is LogFormat.JSON else ConsoleFormatter())
    return processors


# =============================================================================
# Construction
# =============================================================================


def build_logger(
    directory: str = "",
    prefix: str = "",
    options: Optional[LogOptions] = None,
    *,
    clock: Optional[Clock] = None,
    config: Optional[LoggingSettings] = None,
    counter: Optional[RequestCounter] = None,
) -> Logger:
    """
    Build a logger writing to ``<directory>/[<prefix>-]<YYYY-MM-DD>.log``.

    Args:
        directory: Log directory; empty uses ``settings.logging.directory``.
        prefix: Optional file name prefix.
        options: Behaviour switches; None means production defaults.
        clock: Returns the current aware datetime (default: UTC now).
        config: Settings override (default: the global settings).
        counter: Request counter for the trace-id (default: the process-wide one).

    Raises:
        TimeZoneNotFound: the configured zone cannot be resolved.
        DirectoryCreationError: the log directory cannot be created.
        SinkOpenError: a sink cannot be opened.
    """
    options = options or LogOptions()
    config = config or settings.logging
    clock = clock or utc_now

    tz = resolve_time_zone(options.time_zone, config)
    log_dir = ensure_directory(directory or config.directory)
    log_file = make_log_file(log_dir, prefix, clock().astimezone(tz), config)

    stamper = ZonedTimeStamper(tz, config.time_format, clock)
    fields: dict[str, Any] = injected_fields(options, counter)

    sinks = open_sinks([log_file, *options.output_paths])
    fanout = SinkFanout(sinks, timestamp=stamper.now)

    bound = structlog.wrap_logger(
        fanout,
        processors=build_processors(options, stamper, config),
        wrapper_class=structlog.make_filtering_bound_logger(_MIN_LEVELS[options.min_level]),
        context_class=dict,
        cache_logger_on_first_use=False,
    ).bind(**fields)

    return Logger(bound, fanout, output_file=log_file, time_zone=tz, options=options)


def build_sugared_logger(
    directory: str = "",
    prefix: str = "",
    options: Optional[LogOptions] = None,
    **kwargs: Any,
) -> SugaredLogger:
    """Shortcut for ``build_logger(...).sugar``."""
    return build_logger(directory, prefix, options, **kwargs).sugar


