"""
Burst sampling for production loggers.

Records are classified by (level, message). Within each tick the first
``initial`` records of a class pass; after that only every ``thereafter``-th
one does. Counters start over on the next tick.
"""

from __future__ import annotations

import threading
import time
from typing import Callable, Dict, Tuple

import structlog
from structlog.typing import EventDict, WrappedLogger

from .formatters import LEVEL_KEY, MESSAGE_KEY


class Sampler:
    """structlog processor dropping records above the per-tick burst."""

    def __init__(
        self,
        initial: int = 100,
        thereafter: int = 100,
        tick: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._initial = initial
        self._thereafter = thereafter
        self._tick = tick
        self._clock = clock
        self._lock = threading.Lock()
        self._window = -1
        self._counts: Dict[Tuple[str, str], int] = {}

    def _count(self, key: Tuple[str, str]) -> int:
        window = int(self._clock() // self._tick)
        with self._lock:
            if window != self._window:
                self._window = window
                self._counts.clear()
            n = self._counts.get(key, 0) + 1
            self._counts[key] = n
            return n

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        key = (str(event_dict.get(LEVEL_KEY, method_name)), str(event_dict.get(MESSAGE_KEY, "")))
        n = self._count(key)
        if n > self._initial and (n - self._initial) % self._thereafter != 0:
            raise structlog.DropEvent
        return event_dict
