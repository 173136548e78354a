"""Typed models for the progress simulator.

- ``ProgressStep``: one labeled step with its planned wall-clock weight
- ``SimulationRun``: immutable snapshot of a run, replaced on every tick
- ``Phase``: workflow phases that own a step sequence
- ``steps_for_phase``: the fixed step table per phase
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from uhi_analyzer.models.location import ModelValidationError


@dataclass(frozen=True, slots=True)
class ProgressStep:
    """A labeled step of a simulated run.

    Attributes:
        label: Human-readable description shown while the step is active.
        duration_ms: Planned wall-clock weight in milliseconds (> 0).
    """

    label: str
    duration_ms: int

    def __post_init__(self) -> None:
        if isinstance(self.duration_ms, bool) or not isinstance(self.duration_ms, int):
            raise ModelValidationError(
                "ProgressStep", "duration_ms", self.duration_ms, "must be an integer"
            )
        if self.duration_ms <= 0:
            raise ModelValidationError(
                "ProgressStep", "duration_ms", self.duration_ms, "must be > 0"
            )


@dataclass(frozen=True, slots=True)
class SimulationRun:
    """Snapshot of a progress simulation.

    Attributes:
        steps: Ordered step sequence, fixed for the run.
        current_index: Index of the active step.
        elapsed_ms: Simulated time consumed so far.
        total_ms: Sum of all step durations.
        percent: Overall completion, 0-100, non-decreasing within a run.
        cancelled: Whether the run was cancelled.
        done: Whether the run completed every step.
    """

    steps: tuple[ProgressStep, ...] = field(default_factory=tuple)
    current_index: int = 0
    elapsed_ms: int = 0
    total_ms: int = 0
    percent: int = 0
    cancelled: bool = False
    done: bool = False

    @property
    def current_label(self) -> str:
        if not self.steps:
            return ""
        return self.steps[self.current_index].label


class Phase(enum.Enum):
    """Workflow phases that run a progress simulation."""

    GEOCODING = "geocoding"
    PRE_ANALYSIS = "pre-analysis"
    ANALYSIS = "analysis"


def steps_for_phase(phase: Phase, city_name: str = "") -> tuple[ProgressStep, ...]:
    """Return the fixed step sequence for *phase*.

    Args:
        phase: The workflow phase.
        city_name: Submitted query, interpolated into the geocoding labels.
    """
    if phase is Phase.GEOCODING:
        return (
            ProgressStep(f"Locating {city_name}...", 1800),
            ProgressStep("Confirming analysis boundaries...", 1200),
        )
    if phase is Phase.PRE_ANALYSIS:
        return (ProgressStep("Preparing datasets...", 1200),)
    return ANALYSIS_STEPS


ANALYSIS_STEPS: tuple[ProgressStep, ...] = (
    ProgressStep("Downloading MODIS temperature data...", 2200),
    ProgressStep("Processing vegetation indices...", 1800),
    ProgressStep("Calculating surface reflectivity...", 1600),
    ProgressStep("Identifying heat patterns...", 2000),
    ProgressStep("Validating statistical significance...", 1600),
    ProgressStep("Generating intervention recommendations...", 1600),
)
