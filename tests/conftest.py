import json
import typing as t
from datetime import datetime, timezone
from pathlib import Path

import pytest

from tracelog import request as request_module
from tracelog.logging import Logger, LogOptions, build_logger
from tracelog.request import RequestCounter

# 2024-03-05 03:04:05 UTC == 2024-03-05 10:04:05 in Asia/Jakarta
FIXED_NOW = datetime(2024, 3, 5, 3, 4, 5, tzinfo=timezone.utc)


@pytest.fixture
def fixed_clock() -> t.Callable[[], datetime]:
    return lambda: FIXED_NOW


@pytest.fixture(autouse=True)
def fresh_counter(monkeypatch) -> RequestCounter:
    """Give every test its own process-wide request counter."""
    counter = RequestCounter()
    monkeypatch.setattr(request_module, "_default_counter", counter)
    return counter


@pytest.fixture
def make_logger(tmp_path, fixed_clock):
    """
    Factory building loggers into tmp_path with the fixed clock.
    Every logger created through it is closed at teardown.
    """
    created: list[Logger] = []

    def _make(options: LogOptions | None = None, prefix: str = "", directory: str | Path | None = None) -> Logger:
        logger = build_logger(str(directory or tmp_path), prefix, options, clock=fixed_clock)
        created.append(logger)
        return logger

    yield _make

    for logger in created:
        logger.close()


def read_lines(path: str | Path) -> list[str]:
    return Path(path).read_text(encoding="utf-8").splitlines()


def read_records(path: str | Path) -> list[dict]:
    return [json.loads(line) for line in read_lines(path)]
