"""Pure geometry over ``BoundaryConfig``.

Derives the circular analysis region from a resolved location, applies
user edits (slider, marker drag, reset) by returning new configs, and
computes the circle outline the map collaborator draws.

Geometry notes:
- The outline is a geodesic circle on the WGS 84 ellipsoid
  (``pyproj.Geod.fwd``), so it stays accurate at high latitudes where an
  equirectangular degree offset would distort badly.
- Rings are closed and counter-clockwise (checked with ``shapely``).
- Known precision limit: a ring that crosses the antimeridian is not
  unwrapped (longitudes jump between +180 and -180) and a ring that
  encloses a pole is not split. Both are unsupported.

No I/O.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from uhi_analyzer.core.constants import (
    DEFAULT_POLYGON_STEPS,
    DEFAULT_RADIUS_KM,
    MAX_RADIUS_KM,
    MIN_RADIUS_KM,
)
from uhi_analyzer.core.exceptions import PermanentError, ValidationError
from uhi_analyzer.models.boundary import BoundaryConfig
from uhi_analyzer.models.location import is_valid_coordinate

if TYPE_CHECKING:
    from uhi_analyzer.models.location import LocationResult

logger = logging.getLogger("uhi_analyzer.boundary.model")

METRES_PER_KM = 1_000.0
SQ_METRES_PER_SQ_KM = 1_000_000.0

# A ring needs at least a triangle.
MIN_POLYGON_STEPS = 3


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class BoundaryError(PermanentError):
    """Raised when a boundary cannot be derived or drawn."""

    default_stage = "boundary"
    default_code = "BOUNDARY_FAILED"


class InvalidRadiusError(ValidationError):
    """Raised when a radius is not a finite number."""

    default_stage = "boundary"
    default_code = "INVALID_RADIUS"


# ---------------------------------------------------------------------------
# Derivation and edits
# ---------------------------------------------------------------------------


def init_from_location(
    loc: LocationResult,
    default_radius_km: float = DEFAULT_RADIUS_KM,
) -> BoundaryConfig:
    """Derive a boundary centred on a successful location.

    Raises:
        BoundaryError: If *loc* is not a successful resolution.
    """
    if not loc.is_success:
        msg = f"Cannot derive a boundary from a {loc.status.value} location"
        raise BoundaryError(msg)
    return BoundaryConfig(center=(loc.lng, loc.lat), radius_km=clamp_radius(default_radius_km))


def clamp_radius(km: float) -> float:
    """Clamp *km* into the selectable radius range.

    Raises:
        InvalidRadiusError: If *km* is NaN or infinite.
    """
    value = float(km)
    if not math.isfinite(value):
        msg = f"Radius must be a finite number of kilometres, got {km!r}"
        raise InvalidRadiusError(msg)
    return min(MAX_RADIUS_KM, max(MIN_RADIUS_KM, value))


def set_radius(cfg: BoundaryConfig, km: float) -> BoundaryConfig:
    """Return *cfg* with its radius clamped into ``[5, 50]`` km.

    Raises:
        InvalidRadiusError: If *km* is NaN or infinite.
    """
    return BoundaryConfig(center=cfg.center, radius_km=clamp_radius(km))


def set_center(cfg: BoundaryConfig, lng_lat: tuple[float, float]) -> BoundaryConfig:
    """Return *cfg* recentred on *lng_lat*, or *cfg* itself if it is invalid."""
    lng, lat = lng_lat
    if not is_valid_coordinate(lat, lng):
        logger.warning("Center update ignored | center=%s | reason=invalid_coordinate", lng_lat)
        return cfg
    return BoundaryConfig(center=(float(lng), float(lat)), radius_km=cfg.radius_km)


def reset(
    original: LocationResult,
    default_radius_km: float = DEFAULT_RADIUS_KM,
) -> BoundaryConfig:
    """Restore the boundary derived from the originally resolved location."""
    return init_from_location(original, default_radius_km)


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------


def to_polygon(
    cfg: BoundaryConfig,
    steps: int = DEFAULT_POLYGON_STEPS,
) -> list[tuple[float, float]]:
    """Approximate the boundary circle as a closed ``(lng, lat)`` ring.

    Vertices are geodesic destinations from the center at evenly spaced
    azimuths, starting due north and sweeping counter-clockwise.

    Args:
        cfg: Boundary to draw.
        steps: Number of distinct vertices.

    Returns:
        ``steps + 1`` vertices; the first vertex is repeated as the last.

    Raises:
        BoundaryError: If *steps* is smaller than 3.
    """
    if steps < MIN_POLYGON_STEPS:
        msg = f"A boundary ring needs at least {MIN_POLYGON_STEPS} steps, got {steps}"
        raise BoundaryError(msg)

    from pyproj import Geod

    geod = Geod(ellps="WGS84")
    azimuths = [(-360.0 * i) / steps for i in range(steps)]
    lons, lats, _back = geod.fwd(
        [cfg.lng] * steps,
        [cfg.lat] * steps,
        azimuths,
        [cfg.radius_km * METRES_PER_KM] * steps,
    )
    ring = [(float(x), float(y)) for x, y in zip(lons, lats, strict=True)]

    from shapely.geometry import LinearRing

    if not LinearRing(ring).is_ccw:
        ring.reverse()

    ring.append(ring[0])
    return ring


def area_km2(cfg: BoundaryConfig, steps: int = DEFAULT_POLYGON_STEPS) -> float:
    """Geodesic area of the boundary ring in square kilometres."""
    from pyproj import Geod

    ring = to_polygon(cfg, steps)
    geod = Geod(ellps="WGS84")
    area_m2, _perimeter = geod.polygon_area_perimeter(
        [c[0] for c in ring], [c[1] for c in ring]
    )
    return abs(area_m2) / SQ_METRES_PER_SQ_KM


def to_geojson(cfg: BoundaryConfig, steps: int = DEFAULT_POLYGON_STEPS) -> dict[str, object]:
    """Return the boundary as a GeoJSON Feature for the map's circle source."""
    ring = to_polygon(cfg, steps)
    return {
        "type": "Feature",
        "properties": {"center": list(cfg.center), "radius_km": cfg.radius_km},
        "geometry": {
            "type": "Polygon",
            "coordinates": [[list(c) for c in ring]],
        },
    }
