"""Tests for the progress simulator.

Covers:
- Time-weighted, non-decreasing percentages that end at exactly 100
- Step labels reported in order, ``on_done`` exactly once
- Cancellation: no ``on_tick``/``on_done`` after ``cancel()`` returns
- One active run per phase; restarting supersedes the previous run
"""

from __future__ import annotations

import asyncio

import pytest

from uhi_analyzer.models.progress import ANALYSIS_STEPS, Phase, ProgressStep
from uhi_analyzer.simulation.simulator import (
    CancelHandle,
    CancellationToken,
    ProgressSimulator,
    SimulationError,
    _round_percent,
)


async def no_sleep(_seconds: float) -> None:
    await asyncio.sleep(0)


class _Recorder:
    def __init__(self) -> None:
        self.ticks: list[tuple[int, str, int]] = []
        self.done_calls = 0

    def on_tick(self, index: int, label: str, percent: int) -> None:
        self.ticks.append((index, label, percent))

    def on_done(self) -> None:
        self.done_calls += 1


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestConstruction:
    def test_tick_must_be_positive(self) -> None:
        with pytest.raises(SimulationError):
            ProgressSimulator(tick_ms=0)

    def test_empty_steps_rejected(self) -> None:
        with pytest.raises(SimulationError):
            ProgressSimulator(sleep=no_sleep).start([], lambda *_: None)

    def test_token(self) -> None:
        token = CancellationToken()
        assert token.cancelled is False
        token.cancel()
        assert token.cancelled is True


class TestRoundPercent:
    @pytest.mark.parametrize(
        ("elapsed", "total", "expected"),
        [(0, 100, 0), (1, 8, 13), (1, 3, 33), (2, 3, 67), (100, 100, 100), (120, 100, 100)],
    )
    def test_half_up(self, elapsed: int, total: int, expected: int) -> None:
        assert _round_percent(elapsed, total) == expected


# ---------------------------------------------------------------------------
# Completed runs
# ---------------------------------------------------------------------------


class TestCompletedRun:
    @pytest.mark.asyncio()
    async def test_analysis_run_reaches_100(self) -> None:
        rec = _Recorder()
        sim = ProgressSimulator(tick_ms=80, sleep=no_sleep)
        handle = sim.start(ANALYSIS_STEPS, rec.on_tick, rec.on_done)
        await handle.wait()

        percents = [p for _, _, p in rec.ticks]
        assert percents == sorted(percents)
        assert percents[-1] == 100
        assert rec.done_calls == 1
        assert handle.run.done is True
        assert handle.run.cancelled is False
        assert handle.finished is True

    @pytest.mark.asyncio()
    async def test_ticks_per_step(self) -> None:
        rec = _Recorder()
        sim = ProgressSimulator(tick_ms=80, sleep=no_sleep)
        await sim.start(ANALYSIS_STEPS, rec.on_tick, rec.on_done).wait()

        # ceil(duration / 80) ticks per step: 28, 23, 20, 25, 20, 20.
        counts = [sum(1 for i, _, _ in rec.ticks if i == idx) for idx in range(6)]
        assert counts == [28, 23, 20, 25, 20, 20]
        labels = [label for _, label, _ in rec.ticks]
        assert labels[0] == "Downloading MODIS temperature data..."
        assert labels[-1] == "Generating intervention recommendations..."

    @pytest.mark.asyncio()
    async def test_percent_is_time_weighted(self) -> None:
        rec = _Recorder()
        sim = ProgressSimulator(tick_ms=100, sleep=no_sleep)
        steps = [ProgressStep("long", 300), ProgressStep("short", 100)]
        await sim.start(steps, rec.on_tick, rec.on_done).wait()

        assert rec.ticks == [
            (0, "long", 25),
            (0, "long", 50),
            (0, "long", 75),
            (1, "short", 100),
        ]

    @pytest.mark.asyncio()
    async def test_short_step_still_ticks_once(self) -> None:
        rec = _Recorder()
        sim = ProgressSimulator(tick_ms=80, sleep=no_sleep)
        await sim.start([ProgressStep("blink", 10)], rec.on_tick, rec.on_done).wait()
        assert rec.ticks == [(0, "blink", 100)]
        assert rec.done_calls == 1

    @pytest.mark.asyncio()
    async def test_sleep_receives_tick_seconds(self) -> None:
        slept: list[float] = []

        async def _sleep(seconds: float) -> None:
            slept.append(seconds)

        sim = ProgressSimulator(tick_ms=80, sleep=_sleep)
        await sim.start([ProgressStep("a", 160)], lambda *_: None).wait()
        assert slept == [0.08, 0.08]

    @pytest.mark.asyncio()
    async def test_active_cleared_after_completion(self) -> None:
        sim = ProgressSimulator(sleep=no_sleep)
        handle = sim.start([ProgressStep("a", 80)], lambda *_: None, phase=Phase.GEOCODING)
        assert sim.active(Phase.GEOCODING) is handle
        await handle.wait()
        assert sim.active(Phase.GEOCODING) is None


# ---------------------------------------------------------------------------
# Cancellation
# ---------------------------------------------------------------------------


class TestCancellation:
    # First tick, last tick of step 0, first tick of step 1, penultimate tick, final tick.
    @pytest.mark.asyncio()
    @pytest.mark.parametrize("cancel_at", [1, 28, 29, 135, 136])
    async def test_cancel_from_tick_stops_emissions(self, cancel_at: int) -> None:
        rec = _Recorder()
        sim = ProgressSimulator(tick_ms=80, sleep=no_sleep)
        holder: list[CancelHandle] = []

        def on_tick(index: int, label: str, percent: int) -> None:
            rec.on_tick(index, label, percent)
            if len(rec.ticks) == cancel_at:
                holder[0].cancel()

        holder.append(sim.start(ANALYSIS_STEPS, on_tick, rec.on_done))
        await holder[0].wait()

        assert len(rec.ticks) == cancel_at
        assert rec.done_calls == 0
        assert sim.active(Phase.ANALYSIS) is None
        assert holder[0].cancelled is True
        assert holder[0].run.cancelled is True
        assert holder[0].run.done is False

    @pytest.mark.asyncio()
    async def test_cancel_before_first_tick(self) -> None:
        rec = _Recorder()
        sim = ProgressSimulator(sleep=no_sleep)
        handle = sim.start(ANALYSIS_STEPS, rec.on_tick, rec.on_done)
        sim.cancel(Phase.ANALYSIS)
        await handle.wait()
        assert rec.ticks == []
        assert rec.done_calls == 0
        assert sim.active(Phase.ANALYSIS) is None

    @pytest.mark.asyncio()
    async def test_direct_cancel_before_first_step_releases_phase(self) -> None:
        rec = _Recorder()
        sim = ProgressSimulator(sleep=no_sleep)
        handle = sim.start(ANALYSIS_STEPS, rec.on_tick, rec.on_done, phase=Phase.GEOCODING)
        handle.cancel()
        await asyncio.sleep(0)
        await asyncio.sleep(0)

        assert handle.finished is True
        assert sim.active(Phase.GEOCODING) is None
        assert rec.ticks == []
        assert rec.done_calls == 0

    @pytest.mark.asyncio()
    async def test_cancel_is_idempotent(self) -> None:
        sim = ProgressSimulator(sleep=no_sleep)
        handle = sim.start(ANALYSIS_STEPS, lambda *_: None)
        handle.cancel()
        handle.cancel()
        await handle.wait()
        assert handle.cancelled is True

    @pytest.mark.asyncio()
    async def test_restart_supersedes_previous_run(self) -> None:
        first = _Recorder()
        second = _Recorder()
        sim = ProgressSimulator(sleep=no_sleep)
        a = sim.start(ANALYSIS_STEPS, first.on_tick, first.on_done)
        b = sim.start([ProgressStep("again", 160)], second.on_tick, second.on_done)

        assert a.cancelled is True
        assert sim.active(Phase.ANALYSIS) is b
        await a.wait()
        await b.wait()

        assert first.ticks == []
        assert first.done_calls == 0
        assert [p for _, _, p in second.ticks] == [50, 100]
        assert second.done_calls == 1

    @pytest.mark.asyncio()
    async def test_phases_run_independently(self) -> None:
        geo = _Recorder()
        analysis = _Recorder()
        sim = ProgressSimulator(sleep=no_sleep)
        g = sim.start([ProgressStep("g", 160)], geo.on_tick, geo.on_done, phase=Phase.GEOCODING)
        a = sim.start([ProgressStep("a", 160)], analysis.on_tick, analysis.on_done)
        await g.wait()
        await a.wait()
        assert geo.done_calls == 1
        assert analysis.done_calls == 1

    @pytest.mark.asyncio()
    async def test_cancel_all(self) -> None:
        geo = _Recorder()
        analysis = _Recorder()
        sim = ProgressSimulator(sleep=no_sleep)
        g = sim.start(ANALYSIS_STEPS, geo.on_tick, geo.on_done, phase=Phase.GEOCODING)
        a = sim.start(ANALYSIS_STEPS, analysis.on_tick, analysis.on_done)
        sim.cancel_all()
        await g.wait()
        await a.wait()
        assert geo.ticks == []
        assert analysis.ticks == []
        assert sim.active(Phase.GEOCODING) is None
        assert sim.active(Phase.ANALYSIS) is None

    @pytest.mark.asyncio()
    async def test_callback_error_propagates_from_wait(self) -> None:
        sim = ProgressSimulator(sleep=no_sleep)

        def on_tick(index: int, label: str, percent: int) -> None:
            raise RuntimeError("boom")

        handle = sim.start([ProgressStep("a", 80)], on_tick)
        with pytest.raises(RuntimeError, match="boom"):
            await handle.wait()
        assert sim.active(Phase.ANALYSIS) is None
