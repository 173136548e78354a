"""Progress simulation standing in for the satellite-data analysis."""

from uhi_analyzer.simulation.simulator import (
    CancellationToken,
    CancelHandle,
    ProgressSimulator,
    SimulationError,
)

__all__ = [
    "CancelHandle",
    "CancellationToken",
    "ProgressSimulator",
    "SimulationError",
]
