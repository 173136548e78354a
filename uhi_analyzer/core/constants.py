"""Shared workflow constants.

Centralises the radius range, supported analysis years, simulator tick
interval and lookup service endpoint used across the boundary model,
the simulator, the resolver and the controller.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Analysis boundary
# ---------------------------------------------------------------------------

MIN_RADIUS_KM: float = 5.0
"""Smallest selectable analysis radius (inclusive)."""

MAX_RADIUS_KM: float = 50.0
"""Largest selectable analysis radius (inclusive)."""

DEFAULT_RADIUS_KM: float = 25.0
"""Radius applied when a boundary is first derived from a location."""

DEFAULT_POLYGON_STEPS: int = 128
"""Vertex count (excluding closure) of the rendered boundary circle."""

# ---------------------------------------------------------------------------
# Query form
# ---------------------------------------------------------------------------

MIN_QUERY_LENGTH: int = 3
QUERY_SEPARATOR: str = ","

MIN_ANALYSIS_YEAR: int = 2012
MAX_ANALYSIS_YEAR: int = 2024
DEFAULT_ANALYSIS_YEAR: int = 2023

SUPPORTED_YEARS: tuple[int, ...] = tuple(range(MAX_ANALYSIS_YEAR, MIN_ANALYSIS_YEAR - 1, -1))
"""Selectable years, newest first."""

# ---------------------------------------------------------------------------
# Progress simulation
# ---------------------------------------------------------------------------

DEFAULT_TICK_MS: int = 80

# ---------------------------------------------------------------------------
# Live lookup service (Mapbox Geocoding v5)
# ---------------------------------------------------------------------------

MAPBOX_PLACES_URL: str = "https://api.mapbox.com/geocoding/v5/mapbox.places"
MAPBOX_PLACE_TYPES: str = "place,locality,region"
DEFAULT_GEOCODING_TIMEOUT_S: float = 10.0
