"""
Logger handles returned by `build_logger`.

`Logger` is the structured API: a message plus keyword fields. `SugaredLogger`
is the loosely-typed one: print-style, %-template and alternating key/value
variants of every level.
"""

from __future__ import annotations

import sys
from datetime import tzinfo
from typing import AbstractSet, Any, Mapping, NoReturn, Optional, Tuple

from .formatters import CALLER_KEY, EXCEPTION_KEY, LEVEL_KEY, MESSAGE_KEY, NAME_KEY, TIME_KEY
from .options import LogOptions
from .sinks import SinkFanout

# Keys owned by the processor chain (structlog's "event" argument, the record
# header and the raw callsite parameters). Caller fields with these names are
# moved under FIELD_PREFIX instead of being overwritten.
RESERVED_KEYS = frozenset(
    {"event", LEVEL_KEY, TIME_KEY, NAME_KEY, CALLER_KEY, MESSAGE_KEY, EXCEPTION_KEY, "filename", "lineno"}
)
# As keyword fields these drive exception rendering; inside data they are data.
ENGINE_OPTION_KEYS = frozenset({"exc_info", "stack_info"})
DATA_RESERVED_KEYS = RESERVED_KEYS | ENGINE_OPTION_KEYS
FIELD_PREFIX = "fields."


def escape_fields(fields: Mapping[Any, Any], reserved: AbstractSet[str] = RESERVED_KEYS) -> dict[str, Any]:
    """Stringify keys and prefix the ones that clash with record keys."""
    escaped: dict[str, Any] = {}
    for key, value in fields.items():
        key = str(key)
        escaped[FIELD_PREFIX + key if key in reserved else key] = value
    return escaped


class Logger:
    """A configured logger bound to its sinks.

    The output file, time zone and permanent fields are fixed at construction;
    `with_fields` and `named` return children sharing the same sinks.
    """

    def __init__(
        self,
        bound: Any,
        fanout: SinkFanout,
        *,
        output_file: str,
        time_zone: tzinfo,
        options: LogOptions,
        name: str = "",
    ) -> None:
        self._bound = bound
        self._fanout = fanout
        self._output_file = output_file
        self._time_zone = time_zone
        self._options = options
        self._name = name
        self._sugar: Optional[SugaredLogger] = None

    # --- accessors ---

    @property
    def output_file(self) -> str:
        return self._output_file

    @property
    def time_zone(self) -> tzinfo:
        return self._time_zone

    @property
    def options(self) -> LogOptions:
        return self._options

    @property
    def name(self) -> str:
        return self._name

    @property
    def fanout(self) -> SinkFanout:
        return self._fanout

    # --- structured, leveled calls ---

    def debug(self, msg: str, /, **fields: Any) -> None:
        self._bound.debug(msg, **escape_fields(fields))

    def info(self, msg: str, /, **fields: Any) -> None:
        self._bound.info(msg, **escape_fields(fields))

    def warn(self, msg: str, /, **fields: Any) -> None:
        self._bound.warning(msg, **escape_fields(fields))

    warning = warn

    def error(self, msg: str, /, **fields: Any) -> None:
        self._bound.error(msg, **escape_fields(fields))

    def fatal(self, msg: str, /, **fields: Any) -> NoReturn:
        """Log at fatal level, flush every sink, then exit with status 1."""
        self._bound.critical(msg, **escape_fields(fields))
        self.sync()
        sys.exit(1)

    def fatalf(self, template: str, *args: Any) -> NoReturn:
        self.fatal(template % args if args else template)

    def log(
        self,
        msg: str,
        params: Optional[Mapping[Any, Any]] = None,
        err: Optional[BaseException | str] = None,
    ) -> None:
        """Single call site for both outcomes of an operation.

        With ``err`` the record is logged at error level and the error text
        replaces ``msg``; without it the record is logged at info level.
        ``params`` become fields either way.
        """
        fields = escape_fields(params, DATA_RESERVED_KEYS) if params else {}

        if err is not None:
            self._bound.error(_error_text(err), **fields)
        else:
            self._bound.info(msg, **fields)

    # --- children ---

    def with_fields(self, **fields: Any) -> Logger:
        """Child logger adding permanent fields."""
        return self._child(self._bound.bind(**escape_fields(fields, DATA_RESERVED_KEYS)), self._name)

    def named(self, name: str) -> Logger:
        """Child logger whose name is joined to this one with a dot."""
        if not name:
            return self
        full = f"{self._name}.{name}" if self._name else name
        return self._child(self._bound.bind(logger=full), full)

    def _child(self, bound: Any, name: str) -> Logger:
        return Logger(
            bound,
            self._fanout,
            output_file=self._output_file,
            time_zone=self._time_zone,
            options=self._options,
            name=name,
        )

    @property
    def sugar(self) -> SugaredLogger:
        if self._sugar is None:
            self._sugar = SugaredLogger(self)
        return self._sugar

    # --- lifecycle ---

    def sync(self) -> None:
        """Flush every sink."""
        self._fanout.sync()

    def close(self) -> None:
        """Flush and close file sinks. Shared by every child of this logger."""
        self._fanout.close()

    def __enter__(self) -> Logger:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Logger(output_file={self._output_file!r}, name={self._name!r})"


def _error_text(err: BaseException | str) -> str:
    if isinstance(err, BaseException):
        return str(err) or err.__class__.__name__
    return str(err)


def sprint(*args: Any) -> str:
    """Concatenate operands, adding a space between two non-string operands."""
    parts = []
    for i, arg in enumerate(args):
        if i and not isinstance(arg, str) and not isinstance(args[i - 1], str):
            parts.append(" ")
        parts.append(str(arg))
    return "".join(parts)


class SugaredLogger:
    """Loosely-typed wrapper around a `Logger`."""

    def __init__(self, logger: Logger) -> None:
        self._logger = logger

    def desugar(self) -> Logger:
        return self._logger

    def _sweeten(self, keys_and_values: Tuple[Any, ...]) -> dict[str, Any]:
        fields: dict[str, Any] = {}
        pairs = len(keys_and_values) // 2 * 2
        for i in range(0, pairs, 2):
            fields[str(keys_and_values[i])] = keys_and_values[i + 1]
        if pairs < len(keys_and_values):
            self._logger.error("Ignored key without a value.", ignored=keys_and_values[-1])
        return escape_fields(fields, DATA_RESERVED_KEYS)

    # print-style

    def debug(self, *args: Any) -> None:
        self._logger.debug(sprint(*args))

    def info(self, *args: Any) -> None:
        self._logger.info(sprint(*args))

    def warn(self, *args: Any) -> None:
        self._logger.warn(sprint(*args))

    def error(self, *args: Any) -> None:
        self._logger.error(sprint(*args))

    def fatal(self, *args: Any) -> NoReturn:
        self._logger.fatal(sprint(*args))

    # %-template

    def debugf(self, template: str, *args: Any) -> None:
        self._logger.debug(template % args if args else template)

    def infof(self, template: str, *args: Any) -> None:
        self._logger.info(template % args if args else template)

    def warnf(self, template: str, *args: Any) -> None:
        self._logger.warn(template % args if args else template)

    def errorf(self, template: str, *args: Any) -> None:
        self._logger.error(template % args if args else template)

    def fatalf(self, template: str, *args: Any) -> NoReturn:
        self._logger.fatalf(template, *args)

    # alternating keys and values

    def debugw(self, msg: str, *keys_and_values: Any) -> None:
        self._logger.debug(msg, **self._sweeten(keys_and_values))

    def infow(self, msg: str, *keys_and_values: Any) -> None:
        self._logger.info(msg, **self._sweeten(keys_and_values))

    def warnw(self, msg: str, *keys_and_values: Any) -> None:
        self._logger.warn(msg, **self._sweeten(keys_and_values))

    def errorw(self, msg: str, *keys_and_values: Any) -> None:
        self._logger.error(msg, **self._sweeten(keys_and_values))

    def fatalw(self, msg: str, *keys_and_values: Any) -> NoReturn:
        self._logger.fatal(msg, **self._sweeten(keys_and_values))

    # message / params / error

    def log(
        self,
        msg: str,
        params: Optional[Mapping[Any, Any]] = None,
        err: Optional[BaseException | str] = None,
    ) -> None:
        self._logger.log(msg, params, err)
