"""
Request identifier generation.

A request id has the form ``<host>.<random>-<counter>``:

- host: the machine hostname, or ``localhost`` when it cannot be determined
- random: 10 base64 characters with ``+`` and ``/`` removed, drawn from the
  OS secure random source on every call
- counter: a process-wide counter, zero-padded to 6 digits

Uniqueness inside a process comes from the counter alone; the host and random
parts only make ids from different processes distinguishable.
"""

from __future__ import annotations

import base64
import secrets
import socket
import threading

from .exceptions import IdentifierGenerationError

FALLBACK_HOSTNAME = "localhost"
RANDOM_LENGTH = 10
RANDOM_BYTES = 12
COUNTER_WIDTH = 6


class RequestCounter:
    """Thread-safe monotonically increasing counter cell, starting at zero."""

    def __init__(self, start: int = 0) -> None:
        self._value = start
        self._lock = threading.Lock()

    def next(self) -> int:
        """Increment by one and return the new value."""
        with self._lock:
            self._value += 1
            return self._value

    @property
    def current(self) -> int:
        with self._lock:
            return self._value

    def reset(self, value: int = 0) -> None:
        with self._lock:
            self._value = value


# Process-wide counter shared by every caller that does not bring its own.
_default_counter = RequestCounter()


def _hostname() -> str:
    try:
        hostname = socket.gethostname()
    except OSError:
        return FALLBACK_HOSTNAME
    return hostname or FALLBACK_HOSTNAME


def _random_component() -> str:
    encoded = ""
    # Stripping '+' and '/' can leave fewer than 10 characters; draw again.
    while len(encoded) < RANDOM_LENGTH:
        try:
            raw = secrets.token_bytes(RANDOM_BYTES)
        except (OSError, NotImplementedError) as exc:
            raise IdentifierGenerationError(reason=str(exc) or exc.__class__.__name__) from exc
        encoded = base64.b64encode(raw).decode("ascii").replace("+", "").replace("/", "")
    return encoded[:RANDOM_LENGTH]


def generate_request_id(counter: RequestCounter | None = None) -> str:
    """Return a new identifier, unique within this process.

    Raises:
        IdentifierGenerationError: the secure random source is unavailable.
    """
    prefix = f"{_hostname()}.{_random_component()}"
    sequence = (counter if counter is not None else _default_counter).next()
    return f"{prefix}-{sequence:0{COUNTER_WIDTH}d}"
