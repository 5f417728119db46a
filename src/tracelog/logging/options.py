"""
Logger options and the pure derivations made from them.

Nothing here touches the filesystem: file path, time zone and permanent
fields are computed from `LogOptions` plus the current settings so they can
be checked in isolation before any sink is opened.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Literal, Optional, Tuple, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..config import LoggingSettings, settings
from ..exceptions import TimeZoneNotFound
from ..request import RequestCounter, generate_request_id

TRACE_ID_KEY = "trace-id"
REF_ID_KEY = "ref-id"

Clock = Callable[[], datetime]


class LogFormat(str, Enum):
    CONSOLE = "console"
    JSON = "json"


LevelName = Literal["debug", "info", "warn", "error", "fatal"]


@dataclass(frozen=True)
class LogOptions:
    """How a logger instance behaves.

    Attributes:
        development: console encoding at debug level when true, otherwise JSON
            at info level with sampling.
        time_zone: zone name or tzinfo for timestamps and the file date.
            None falls back to ``settings.logging.time_zone``.
        with_trace: attach a freshly generated ``trace-id`` to every record.
        ref_id: attach ``ref-id`` to every record; empty string means none.
        output_paths: extra sinks written after the log file, in order.
            ``stdout``/``stderr`` name the process streams, anything else is a
            file path. Duplicates are kept and written twice.
    """

    development: bool = False
    time_zone: Optional[Union[str, tzinfo]] = None
    with_trace: bool = False
    ref_id: str = ""
    output_paths: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # Accept any iterable of sink names but keep the instance hashable.
        object.__setattr__(self, "output_paths", tuple(self.output_paths))

    @property
    def format(self) -> LogFormat:
        return LogFormat.CONSOLE if self.development else LogFormat.JSON

    @property
    def min_level(self) -> LevelName:
        return "debug" if self.development else "info"


def resolve_time_zone(value: Optional[Union[str, tzinfo]], config: Optional[LoggingSettings] = None) -> tzinfo:
    """Turn a zone name (or None for the configured default) into a tzinfo."""
    if isinstance(value, tzinfo):
        return value
    name = value or (config or settings.logging).time_zone
    if not name:
        raise TimeZoneNotFound(time_zone="", reason="no time zone configured")
    try:
        return ZoneInfo(name)
    except ZoneInfoNotFoundError as exc:
        raise TimeZoneNotFound(time_zone=name) from exc
    except (ValueError, OSError) as exc:
        # Malformed keys, or names of tzdata directories such as "Asia".
        raise TimeZoneNotFound(time_zone=name, reason=str(exc)) from exc


def make_log_file(
    directory: Union[str, Path],
    prefix: str,
    now: datetime,
    config: Optional[LoggingSettings] = None,
) -> str:
    """Build ``<directory>/[<prefix>-]<date>.<ext>`` for the day in ``now``.

    ``now`` must already be in the logger's zone.
    """
    config = config or settings.logging
    filename = f"{now.strftime(config.file_date_format)}.{config.file_extension}"
    if prefix:
        filename = f"{prefix}-{filename}"
    return str(Path(directory) / filename)


def injected_fields(options: LogOptions, counter: Optional[RequestCounter] = None) -> Dict[str, Any]:
    """Permanent fields carried by every record of a logger built from ``options``.

    trace-id and ref-id are independent: either, both or neither may be set.
    The trace-id draws from ``counter``, or the process-wide one when None.
    """
    if options.ref_id:
        if options.with_trace:
            return {TRACE_ID_KEY: generate_request_id(counter), REF_ID_KEY: options.ref_id}
        return {REF_ID_KEY: options.ref_id}

    if options.with_trace:
        return {TRACE_ID_KEY: generate_request_id(counter)}

    return {}
