"""Display formatting for place summaries.

Missing values render as an em dash placeholder so a summary row never
shows ``None``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uhi_analyzer.models.location import LocationResult
    from uhi_analyzer.models.progress import SimulationRun

PLACEHOLDER = "—"


def format_area(area_km2: float | None) -> str:
    """Format an area with thousands separators and up to three decimals.

    >>> format_area(2194)
    '2,194 km²'
    """
    if not area_km2:
        return PLACEHOLDER
    text = f"{area_km2:,.3f}".rstrip("0").rstrip(".")
    return f"{text} km²"


def format_population(population: int | None) -> str:
    """Format a population count in millions (``37.4M``)."""
    if not population:
        return PLACEHOLDER
    return f"{population / 1_000_000:.1f}M"


def format_coordinates(lat: float, lng: float) -> str:
    """Format a latitude/longitude pair to four decimals."""
    return f"{lat:.4f}, {lng:.4f}"


def describe_location(location: LocationResult) -> str:
    """One-line summary of a resolved place."""
    return (
        f"{location.official_name} | {format_coordinates(location.lat, location.lng)}"
        f" | area {format_area(location.area_km2)}"
        f" | population {format_population(location.population)}"
    )


def describe_progress(run: SimulationRun) -> str:
    """One-line progress summary, e.g. ``[ 42%] Analyzing heat patterns...``."""
    return f"[{run.percent:3d}%] {run.current_label}"
