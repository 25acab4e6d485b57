"""Unit tests for tracechain.core.outcome.

Covers the outcome thresholds, the random draw and the non-blocking latency
simulation.
"""

from __future__ import annotations

import asyncio
import time

import pytest

from conftest import FixedRandom
from tracechain.core.outcome import (
    CLIENT_ERROR_THRESHOLD,
    SERVER_ERROR_THRESHOLD,
    OutcomeKind,
    classify,
    draw_outcome,
    simulate_latency,
)


class TestClassify:
    """Tests for the pure outcome mapping."""

    @pytest.mark.parametrize("value", [0.0, 0.05, 0.0999])
    def test_below_first_threshold_is_server_error(self, value: float) -> None:
        assert classify(value) is OutcomeKind.SERVER_ERROR

    @pytest.mark.parametrize("value", [0.10, 0.15, 0.1999])
    def test_between_thresholds_is_client_error(self, value: float) -> None:
        assert classify(value) is OutcomeKind.CLIENT_ERROR

    @pytest.mark.parametrize("value", [0.20, 0.5, 0.9999])
    def test_above_second_threshold_is_success(self, value: float) -> None:
        assert classify(value) is OutcomeKind.SUCCESS

    def test_thresholds(self) -> None:
        assert SERVER_ERROR_THRESHOLD == 0.10
        assert CLIENT_ERROR_THRESHOLD == 0.20


class TestOutcomeKind:
    """Tests for OutcomeKind properties."""

    def test_status_codes(self) -> None:
        assert OutcomeKind.SUCCESS.status_code == 200
        assert OutcomeKind.CLIENT_ERROR.status_code == 400
        assert OutcomeKind.SERVER_ERROR.status_code == 500

    def test_is_error(self) -> None:
        assert not OutcomeKind.SUCCESS.is_error
        assert OutcomeKind.CLIENT_ERROR.is_error
        assert OutcomeKind.SERVER_ERROR.is_error


class TestDrawOutcome:
    """Tests for drawing from a random source."""

    def test_uses_given_source(self) -> None:
        assert draw_outcome(FixedRandom(0.01)) is OutcomeKind.SERVER_ERROR
        assert draw_outcome(FixedRandom(0.12)) is OutcomeKind.CLIENT_ERROR
        assert draw_outcome(FixedRandom(0.80)) is OutcomeKind.SUCCESS

    def test_default_source_returns_outcome(self) -> None:
        assert isinstance(draw_outcome(), OutcomeKind)

    def test_distribution_is_roughly_ten_ten_eighty(self) -> None:
        import random

        rng = random.Random(1234)
        draws = [draw_outcome(rng) for _ in range(20000)]
        server = draws.count(OutcomeKind.SERVER_ERROR) / len(draws)
        client = draws.count(OutcomeKind.CLIENT_ERROR) / len(draws)
        assert 0.08 < server < 0.12
        assert 0.08 < client < 0.12


class TestSimulateLatency:
    """Tests for the latency simulation."""

    def test_returns_drawn_delay(self) -> None:
        rng = FixedRandom(0.5)
        delay = asyncio.run(simulate_latency(0.0, 0.0, rng=rng))
        assert delay == 0.0
        assert rng.uniform_calls == [(0.0, 0.0)]

    def test_passes_window_to_source(self) -> None:
        rng = FixedRandom(0.5)
        asyncio.run(simulate_latency(0.001, 0.002, rng=rng))
        assert rng.uniform_calls == [(0.001, 0.002)]

    def test_default_source_stays_in_window(self) -> None:
        delay = asyncio.run(simulate_latency(0.001, 0.01))
        assert 0.001 <= delay <= 0.01

    def test_waits_do_not_block_each_other(self) -> None:
        """Concurrent waits overlap on the event loop."""
        async def run_both() -> None:
            await asyncio.gather(
                simulate_latency(0.2, 0.2, rng=FixedRandom(0.5)),
                simulate_latency(0.2, 0.2, rng=FixedRandom(0.5)),
            )

        started = time.perf_counter()
        asyncio.run(run_both())
        assert time.perf_counter() - started < 0.39
