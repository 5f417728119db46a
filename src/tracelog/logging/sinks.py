"""
Log sink abstractions and concrete implementations.
"""

from __future__ import annotations

import sys
import threading
import weakref
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Callable, Iterable, List, Optional, Sequence

import structlog

from ..exceptions import DirectoryCreationError, SinkOpenError

STDOUT = "stdout"
STDERR = "stderr"

logger = structlog.get_logger(__name__)


def ensure_directory(directory: str | Path) -> Path:
    """Create ``directory`` and any missing parents; no-op when it exists."""
    path = Path(directory)
    if path.is_dir():
        return path
    try:
        path.mkdir(mode=0o777, parents=True, exist_ok=True)
    except OSError as exc:
        raise DirectoryCreationError(directory=str(path), reason=str(exc)) from exc
    logger.info("created log directory", path=str(path))
    return path


# =============================================================================
# Sink Abstraction (Strategy Pattern)
# =============================================================================


class BaseSink(ABC):
    """Abstract base class for log sinks."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._lock = threading.Lock()

    @abstractmethod
    def _stream(self) -> IO[str]:
        ...

    def write(self, line: str) -> None:
        """Write one encoded record and flush it."""
        with self._lock:
            stream = self._stream()
            stream.write(line + "\n")
            stream.flush()

    def flush(self) -> None:
        with self._lock:
            self._stream().flush()

    def close(self) -> None:
        """Release resources. Process streams are left open."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r})"


class StdioSink(BaseSink):
    """Process stream sink, looked up on every write so redirection is honoured."""

    def __init__(self, name: str = STDOUT) -> None:
        super().__init__(name)

    def _stream(self) -> IO[str]:
        return getattr(sys, self.name)


class FileSink(BaseSink):
    """Append-mode file sink."""

    def __init__(self, path: str | Path) -> None:
        super().__init__(str(path))
        try:
            self._file = open(path, "a", encoding="utf-8")
        except OSError as exc:
            raise SinkOpenError(sink=str(path), reason=str(exc)) from exc

    def _stream(self) -> IO[str]:
        return self._file

    def flush(self) -> None:
        with self._lock:
            if not self._file.closed:
                self._file.flush()

    def close(self) -> None:
        with self._lock:
            if not self._file.closed:
                self._file.flush()
                self._file.close()


def open_sink(token: str) -> BaseSink:
    """Resolve a sink token: ``stdout``/``stderr`` or a file path."""
    if token in (STDOUT, STDERR):
        return StdioSink(token)
    return FileSink(token)


def open_sinks(tokens: Iterable[str]) -> List[BaseSink]:
    """Open every token in order. Duplicates yield independent sinks."""
    sinks: List[BaseSink] = []
    try:
        for token in tokens:
            sinks.append(open_sink(token))
    except SinkOpenError:
        close_sinks(sinks)
        raise
    return sinks


def close_sinks(sinks: Sequence[BaseSink]) -> None:
    for sink in sinks:
        sink.close()


# =============================================================================
# Fan-out (the structlog wrapped logger)
# =============================================================================


class SinkFanout:
    """Writes every rendered record to all sinks.

    A failing sink never raises into the caller: the failure is reported on
    the error channel (the other sinks, standard error as last resort) and
    the remaining sinks still receive the record.
    """

    def __init__(self, sinks: Sequence[BaseSink], timestamp: Optional[Callable[[], str]] = None) -> None:
        self._sinks = tuple(sinks)
        self._timestamp = timestamp or (lambda: "")
        self._finalizer = weakref.finalize(self, close_sinks, self._sinks)

    @property
    def sinks(self) -> tuple[BaseSink, ...]:
        return self._sinks

    def msg(self, message: str) -> None:
        for sink in self._sinks:
            try:
                sink.write(message)
            except (OSError, ValueError) as exc:
                self._report(sink, exc)

    log = debug = info = warn = warning = msg
    fatal = failure = err = error = critical = exception = msg

    def _report(self, failed: BaseSink, exc: Exception) -> None:
        line = f"{self._timestamp()} write error: {failed.name}: {exc}".lstrip()
        reported = False
        for sink in self._sinks:
            if sink is failed:
                continue
            try:
                sink.write(line)
                reported = True
            except (OSError, ValueError):
                continue
        if not reported:
            sys.stderr.write(line + "\n")

    def sync(self) -> None:
        for sink in self._sinks:
            try:
                sink.flush()
            except (OSError, ValueError) as exc:
                self._report(sink, exc)

    def close(self) -> None:
        self._finalizer()

    @property
    def closed(self) -> bool:
        return not self._finalizer.alive
