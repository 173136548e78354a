"""Shared pytest fixtures for the UHI analyzer test suite."""

from __future__ import annotations

import asyncio

import pytest

from uhi_analyzer.core.config import WorkflowConfig
from uhi_analyzer.geocoding.fallback import FALLBACK_PLACES
from uhi_analyzer.geocoding.resolver import GeoResolver
from uhi_analyzer.models.boundary import BoundaryConfig
from uhi_analyzer.models.location import LocationResult
from uhi_analyzer.models.workflow import Notice
from uhi_analyzer.simulation.simulator import ProgressSimulator


async def no_sleep(_seconds: float) -> None:
    """Zero-delay stand-in for ``asyncio.sleep`` that still yields to the loop."""
    await asyncio.sleep(0)


# ---------------------------------------------------------------------------
# Model fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def paris_location() -> LocationResult:
    """Successful resolution of "Paris, France" from the fallback table."""
    return FALLBACK_PLACES["Paris, France"].to_location()


@pytest.fixture()
def paris_boundary() -> BoundaryConfig:
    """Default 25 km boundary centred on Paris, longitude first."""
    return BoundaryConfig(center=(2.3522, 48.8566), radius_km=25.0)


# ---------------------------------------------------------------------------
# Collaborator fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def config() -> WorkflowConfig:
    """Configuration without a lookup credential (fallback table active)."""
    return WorkflowConfig()


@pytest.fixture()
def resolver() -> GeoResolver:
    """Resolver backed by the fallback table only."""
    return GeoResolver()


@pytest.fixture()
def simulator() -> ProgressSimulator:
    """Simulator with zero-delay ticks."""
    return ProgressSimulator(tick_ms=80, sleep=no_sleep)


class RecordingNotifier:
    """Notifier that keeps every notice it receives."""

    def __init__(self) -> None:
        self.notices: list[Notice] = []

    def __call__(self, notice: Notice) -> None:
        self.notices.append(notice)


class RecordingMapView:
    """Map view that records every render call."""

    def __init__(self) -> None:
        self.renders: list[tuple[tuple[float, float], list[tuple[float, float]], bool]] = []

    def render(
        self,
        center: tuple[float, float],
        ring: list[tuple[float, float]],
        marker_draggable: bool,
    ) -> None:
        self.renders.append((center, ring, marker_draggable))


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def map_view() -> RecordingMapView:
    return RecordingMapView()
