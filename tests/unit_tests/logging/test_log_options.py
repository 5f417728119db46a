"""
LogOptions and the derivations made from it: time zone, file path and
permanent correlation fields.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

from tracelog.config import LoggingSettings
from tracelog.exceptions import ConfigurationError, LoggerBuildError, TimeZoneNotFound
from tracelog.logging.options import (
    REF_ID_KEY,
    TRACE_ID_KEY,
    LogFormat,
    LogOptions,
    injected_fields,
    make_log_file,
    resolve_time_zone,
)
from tracelog.request import RequestCounter

TRACE_ID = re.compile(r"^.+\.[A-Za-z0-9]{10}-\d{6}$")


class TestLogOptions:
    def test_defaults_are_production(self) -> None:
        opt = LogOptions()
        assert opt.development is False
        assert opt.format is LogFormat.JSON
        assert opt.min_level == "info"
        assert opt.with_trace is False
        assert opt.ref_id == ""
        assert opt.output_paths == ()

    def test_development(self) -> None:
        opt = LogOptions(development=True)
        assert opt.format is LogFormat.CONSOLE
        assert opt.min_level == "debug"

    def test_output_paths_are_frozen_as_tuple(self) -> None:
        opt = LogOptions(output_paths=["stdout", "stdout"])
        assert opt.output_paths == ("stdout", "stdout")

    def test_is_immutable(self) -> None:
        opt = LogOptions()
        with pytest.raises(AttributeError):
            opt.development = True  # type: ignore[misc]


class TestResolveTimeZone:
    def test_default_zone(self) -> None:
        assert resolve_time_zone(None) == ZoneInfo("Asia/Jakarta")

    def test_named_zone(self) -> None:
        assert resolve_time_zone("America/New_York") == ZoneInfo("America/New_York")

    def test_tzinfo_passes_through(self) -> None:
        assert resolve_time_zone(timezone.utc) is timezone.utc

    def test_default_comes_from_settings(self) -> None:
        config = LoggingSettings(time_zone="Europe/Berlin")
        assert resolve_time_zone(None, config) == ZoneInfo("Europe/Berlin")

    def test_unknown_zone_is_configuration_error(self) -> None:
        with pytest.raises(TimeZoneNotFound) as exc_info:
            resolve_time_zone("Mars/Olympus_Mons")

        assert isinstance(exc_info.value, ConfigurationError)
        assert isinstance(exc_info.value, LoggerBuildError)
        assert exc_info.value.details == {"time_zone": "Mars/Olympus_Mons"}

    def test_region_directory_is_rejected(self) -> None:
        with pytest.raises(TimeZoneNotFound) as exc_info:
            resolve_time_zone("Asia")
        assert exc_info.value.code == "TIME_ZONE_NOT_FOUND"

    def test_empty_configured_zone_is_rejected(self) -> None:
        with pytest.raises(TimeZoneNotFound):
            resolve_time_zone(None, LoggingSettings(time_zone=""))


class TestMakeLogFile:
    NOW = datetime(2024, 3, 5, 9, 30)

    def test_without_prefix(self) -> None:
        assert make_log_file("d", "", self.NOW) == str(Path("d") / "2024-03-05.log")

    def test_with_prefix(self) -> None:
        assert make_log_file("d", "svc", self.NOW) == str(Path("d") / "svc-2024-03-05.log")

    def test_uses_configured_formats(self) -> None:
        config = LoggingSettings(file_date_format="%Y%m%d", file_extension="txt")
        assert make_log_file("d", "svc", self.NOW, config) == str(Path("d") / "svc-20240305.txt")


class TestInjectedFields:
    def test_neither(self) -> None:
        assert injected_fields(LogOptions()) == {}

    def test_trace_only(self) -> None:
        fields = injected_fields(LogOptions(with_trace=True))
        assert set(fields) == {TRACE_ID_KEY}
        assert TRACE_ID.match(fields[TRACE_ID_KEY])

    def test_ref_only(self) -> None:
        assert injected_fields(LogOptions(ref_id="X")) == {REF_ID_KEY: "X"}

    def test_both(self) -> None:
        fields = injected_fields(LogOptions(with_trace=True, ref_id="X"))
        assert fields[REF_ID_KEY] == "X"
        assert TRACE_ID.match(fields[TRACE_ID_KEY])

    def test_each_call_generates_a_new_trace_id(self) -> None:
        opt = LogOptions(with_trace=True)
        assert injected_fields(opt)[TRACE_ID_KEY] != injected_fields(opt)[TRACE_ID_KEY]

    def test_trace_id_draws_from_given_counter(self, fresh_counter) -> None:
        counter = RequestCounter(6)
        fields = injected_fields(LogOptions(with_trace=True), counter)

        assert fields[TRACE_ID_KEY].endswith("-000007")
        assert fresh_counter.current == 0
