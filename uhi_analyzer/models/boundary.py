"""Data model for the circular analysis boundary.

A ``BoundaryConfig`` is derived from a successful ``LocationResult`` and
then replaced wholesale on every user edit (drag, slider, reset). The
center is stored longitude-first to match GeoJSON and map consumers.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from uhi_analyzer.core.constants import MAX_RADIUS_KM, MIN_RADIUS_KM
from uhi_analyzer.models.location import ModelValidationError, is_valid_coordinate


@dataclass(frozen=True, slots=True)
class BoundaryConfig:
    """A circular analysis region.

    Attributes:
        center: Circle center as ``(lng, lat)`` in decimal degrees.
        radius_km: Radius in kilometres, within ``[5, 50]`` inclusive.
    """

    center: tuple[float, float]
    radius_km: float

    def __post_init__(self) -> None:
        lng, lat = self.center
        if not is_valid_coordinate(lat, lng):
            raise ModelValidationError(
                "BoundaryConfig",
                "center",
                self.center,
                "must be a finite (lng, lat) inside WGS 84 ranges",
            )
        if not math.isfinite(self.radius_km) or not (
            MIN_RADIUS_KM <= self.radius_km <= MAX_RADIUS_KM
        ):
            raise ModelValidationError(
                "BoundaryConfig",
                "radius_km",
                self.radius_km,
                f"must be between {MIN_RADIUS_KM:g} and {MAX_RADIUS_KM:g}",
            )

    @property
    def lng(self) -> float:
        return self.center[0]

    @property
    def lat(self) -> float:
        return self.center[1]

    def to_dict(self) -> dict[str, object]:
        return {"center": list(self.center), "radius_km": self.radius_km}
