"""Cancellable, time-weighted progress simulation.

Stands in for the real satellite-data analysis: walks an ordered list of
labeled steps, subdividing each step's planned duration into fixed ticks,
and reports the active step and an overall percentage that tracks
simulated elapsed time proportionally across uneven step durations.

Scheduling model
----------------
Single-threaded and cooperative: each run is one ``asyncio.Task`` that
suspends on ``sleep`` between ticks. Nothing runs in parallel.

Cancellation
------------
Every run owns an explicit ``CancellationToken``. The token is checked
after every suspension, immediately before each ``on_tick``/``on_done``
call, so a tick that was already scheduled when ``cancel()`` ran never
fires. At most one run is active per phase; starting a new run for a
phase cancels the previous one first.
"""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import replace
from typing import TYPE_CHECKING

from uhi_analyzer.core.constants import DEFAULT_TICK_MS
from uhi_analyzer.core.exceptions import ValidationError
from uhi_analyzer.models.progress import Phase, ProgressStep, SimulationRun

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

    TickCallback = Callable[[int, str, int], None]
    DoneCallback = Callable[[], None]
    SleepFn = Callable[[float], Awaitable[object]]

logger = logging.getLogger("uhi_analyzer.simulation.simulator")


class SimulationError(ValidationError):
    """Raised when a run cannot be started from the given steps."""

    default_stage = "simulation"
    default_code = "SIMULATION_INVALID"


# ---------------------------------------------------------------------------
# Cancellation primitives
# ---------------------------------------------------------------------------


class CancellationToken:
    """A one-way flag shared between a run and whoever may cancel it."""

    __slots__ = ("_cancelled",)

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class CancelHandle:
    """Caller-side handle for one simulation run.

    Attributes:
        phase: Phase key the run was started under.
        token: The run's cancellation token.
    """

    def __init__(
        self,
        phase: str,
        run: SimulationRun,
        on_release: Callable[[CancelHandle], None] | None = None,
    ) -> None:
        self.phase = phase
        self.token = CancellationToken()
        self._run = run
        self._task: asyncio.Task[None] | None = None
        self._on_release = on_release

    @property
    def run(self) -> SimulationRun:
        """Latest immutable snapshot of the run."""
        return self._run

    @property
    def cancelled(self) -> bool:
        return self.token.cancelled

    @property
    def finished(self) -> bool:
        """Whether the run completed, was cancelled, or failed."""
        return self._task is not None and self._task.done()

    def cancel(self) -> None:
        """Stop the run. No ``on_tick``/``on_done`` fires after this returns."""
        if self.token.cancelled:
            return
        self.token.cancel()
        self._run = replace(self._run, cancelled=True)
        if self._task is not None and not self._task.done():
            self._task.cancel()
        if self._on_release is not None:
            self._on_release(self)
        logger.debug(
            "Simulation cancelled | phase=%s | percent=%d | step=%d",
            self.phase,
            self._run.percent,
            self._run.current_index,
        )

    async def wait(self) -> None:
        """Wait until the run completes or is cancelled.

        Re-raises any exception raised by a callback.
        """
        if self._task is None:
            return
        try:
            await self._task
        except asyncio.CancelledError:
            if not self._task.cancelled():
                raise


# ---------------------------------------------------------------------------
# Simulator
# ---------------------------------------------------------------------------


def _round_percent(elapsed_ms: int, total_ms: int) -> int:
    """``round(100 * elapsed / total)`` with halves rounded up, clamped to 0-100."""
    value = math.floor(100.0 * elapsed_ms / total_ms + 0.5)
    return min(100, max(0, value))


def _phase_key(phase: Phase | str) -> str:
    return phase.value if isinstance(phase, Phase) else str(phase)


class ProgressSimulator:
    """Runs weighted step sequences on the running asyncio loop.

    Args:
        tick_ms: Fixed tick interval in milliseconds.
        sleep: Awaitable sleep used between ticks, in seconds. Tests inject a
            zero-delay coroutine.
    """

    def __init__(
        self,
        *,
        tick_ms: int = DEFAULT_TICK_MS,
        sleep: SleepFn | None = None,
    ) -> None:
        if tick_ms <= 0:
            msg = f"tick_ms must be > 0, got {tick_ms}"
            raise SimulationError(msg)
        self._tick_ms = tick_ms
        self._sleep: SleepFn = sleep or asyncio.sleep
        self._active: dict[str, CancelHandle] = {}

    @property
    def tick_ms(self) -> int:
        return self._tick_ms

    def active(self, phase: Phase | str) -> CancelHandle | None:
        """Return the in-flight run for *phase*, if any."""
        return self._active.get(_phase_key(phase))

    def start(
        self,
        steps: Sequence[ProgressStep],
        on_tick: TickCallback,
        on_done: DoneCallback | None = None,
        *,
        phase: Phase | str = Phase.ANALYSIS,
    ) -> CancelHandle:
        """Start a run and return its cancel handle.

        Must be called while an asyncio event loop is running.

        Raises:
            SimulationError: If *steps* is empty.
            RuntimeError: If no event loop is running.
        """
        if not steps:
            msg = "A simulation run needs at least one step"
            raise SimulationError(msg)

        key = _phase_key(phase)
        previous = self._active.get(key)
        if previous is not None:
            logger.info("Simulation restarted | phase=%s | superseded_percent=%d", key, previous.run.percent)
            previous.cancel()

        step_tuple = tuple(steps)
        total_ms = sum(s.duration_ms for s in step_tuple)
        handle = CancelHandle(
            key, SimulationRun(steps=step_tuple, total_ms=total_ms), self._release
        )

        loop = asyncio.get_running_loop()
        self._active[key] = handle
        handle._task = loop.create_task(
            self._drive(handle, on_tick, on_done), name=f"progress:{key}"
        )
        logger.info(
            "Simulation started | phase=%s | steps=%d | total_ms=%d | tick_ms=%d",
            key,
            len(step_tuple),
            total_ms,
            self._tick_ms,
        )
        return handle

    def cancel(self, phase: Phase | str) -> None:
        """Cancel the in-flight run for *phase*, if any."""
        handle = self._active.pop(_phase_key(phase), None)
        if handle is not None:
            handle.cancel()

    def _release(self, handle: CancelHandle) -> None:
        # A task cancelled before its first step never reaches its finally block.
        if self._active.get(handle.phase) is handle:
            del self._active[handle.phase]

    def cancel_all(self) -> None:
        """Cancel every in-flight run."""
        handles = list(self._active.values())
        self._active.clear()
        for handle in handles:
            handle.cancel()

    async def _drive(
        self,
        handle: CancelHandle,
        on_tick: TickCallback,
        on_done: DoneCallback | None,
    ) -> None:
        token = handle.token
        run = handle.run
        steps = run.steps
        total_ms = run.total_ms
        last_index = len(steps) - 1
        tick_s = self._tick_ms / 1000.0
        elapsed_ms = 0
        percent = 0

        try:
            for index, step in enumerate(steps):
                if token.cancelled:
                    return
                handle._run = replace(handle._run, current_index=index)
                ticks = math.ceil(step.duration_ms / self._tick_ms)

                for tick in range(ticks):
                    await self._sleep(tick_s)
                    if token.cancelled:
                        return
                    elapsed_ms += self._tick_ms
                    if index == last_index and tick == ticks - 1:
                        percent = 100
                    else:
                        percent = max(percent, _round_percent(elapsed_ms, total_ms))
                    handle._run = replace(
                        handle._run, elapsed_ms=elapsed_ms, percent=percent
                    )
                    on_tick(index, step.label, percent)

            if token.cancelled:
                return
            handle._run = replace(handle._run, done=True)
            logger.info("Simulation finished | phase=%s | elapsed_ms=%d", handle.phase, elapsed_ms)
            if on_done is not None:
                on_done()
        finally:
            self._release(handle)
