"""
Record encoders.

Both encoders are structlog renderers: they receive the processed event dict
and return the line written to every sink (without the trailing newline).
"""

from __future__ import annotations

from typing import Any

import orjson
from structlog.typing import EventDict, WrappedLogger

# Keys produced by the processor chain.
LEVEL_KEY = "level"
TIME_KEY = "ts"
NAME_KEY = "logger"
CALLER_KEY = "caller"
MESSAGE_KEY = "msg"
EXCEPTION_KEY = "exception"


def orjson_dumps(v: Any, *, default: Any = str) -> str:
    """Fast JSON serialization using orjson; unknown types fall back to str()."""
    return orjson.dumps(v, default=default, option=orjson.OPT_UTC_Z | orjson.OPT_NAIVE_UTC).decode()


class JsonFormatter:
    """One JSON object per record.

    Header keys come first in a fixed order, followed by permanent fields and
    then call fields in the order they were supplied.
    """

    HEADER_KEYS = (LEVEL_KEY, TIME_KEY, NAME_KEY, CALLER_KEY, MESSAGE_KEY)

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> str:
        ordered = {k: event_dict[k] for k in self.HEADER_KEYS if k in event_dict}
        for k, v in event_dict.items():
            if k not in ordered:
                ordered[k] = v
        return orjson_dumps(ordered)


class ConsoleFormatter:
    """Human-readable, tab-separated rendering for development.

    Columns: time, capitalised level, logger name (only when named), message,
    then the remaining fields as one JSON object. A formatted exception goes
    on the following lines.
    """

    SEPARATOR = "\t"
    EXCLUDED_KEYS = {LEVEL_KEY, TIME_KEY, NAME_KEY, CALLER_KEY, MESSAGE_KEY, EXCEPTION_KEY}

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> str:
        return self.format(event_dict)

    @classmethod
    def format(cls, event_dict: EventDict) -> str:
        columns = [str(event_dict.get(TIME_KEY, "")), str(event_dict.get(LEVEL_KEY, "")).upper()]

        name = event_dict.get(NAME_KEY)
        if name:
            columns.append(str(name))
        columns.append(str(event_dict.get(MESSAGE_KEY, "")))

        extras = {k: v for k, v in event_dict.items() if k not in cls.EXCLUDED_KEYS}
        if extras:
            columns.append(orjson_dumps(extras))

        line = cls.SEPARATOR.join(columns)
        exception = event_dict.get(EXCEPTION_KEY)
        if exception:
            line = f"{line}\n{exception}"
        return line
