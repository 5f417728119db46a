"""
Sampler unit tests with a controllable clock.
"""

from __future__ import annotations

import pytest
import structlog

from tracelog.logging.sampling import Sampler


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def _kept(sampler: Sampler, msg: str = "m", level: str = "info") -> bool:
    try:
        sampler(None, level, {"level": level, "msg": msg})
    except structlog.DropEvent:
        return False
    return True


class TestSampler:
    @pytest.fixture
    def clock(self) -> FakeClock:
        return FakeClock()

    def test_initial_then_every_nth(self, clock) -> None:
        sampler = Sampler(initial=2, thereafter=3, tick=1.0, clock=clock)
        kept = [_kept(sampler) for _ in range(8)]
        # n=1,2 pass; then n=5 and n=8 ((n - initial) % thereafter == 0)
        assert kept == [True, True, False, False, True, False, False, True]

    def test_default_policy(self, clock) -> None:
        sampler = Sampler(clock=clock)
        kept = [_kept(sampler) for _ in range(300)]
        assert sum(kept) == 102
        assert all(kept[:100])
        assert kept[199] and kept[299]

    def test_counts_reset_each_tick(self, clock) -> None:
        sampler = Sampler(initial=1, thereafter=100, tick=1.0, clock=clock)
        assert _kept(sampler)
        assert not _kept(sampler)

        clock.now = 1.5
        assert _kept(sampler)

    def test_classified_by_level_and_message(self, clock) -> None:
        sampler = Sampler(initial=1, thereafter=100, clock=clock)
        assert _kept(sampler, msg="a")
        assert _kept(sampler, msg="b")
        assert _kept(sampler, msg="a", level="error")
        assert not _kept(sampler, msg="a")
