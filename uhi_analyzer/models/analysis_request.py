"""Pydantic hand-off record for a confirmed analysis.

Built by the controller when the user confirms the boundary. It is the
single document the results view (and the analysis backend that the
progress simulation stands in for) receives: what was asked for, where,
and over which circle.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field

SCHEMA_VERSION = "uhi-analysis-request-v1"


class BoundaryGeometry(BaseModel):
    """GeoJSON Polygon for the analysis circle.

    Attributes:
        type: GeoJSON geometry type, always ``"Polygon"``.
        coordinates: ``[ring]`` where ring is a closed list of ``[lng, lat]``.
        center: Circle center as ``[lng, lat]``.
        radius_km: Circle radius in kilometres.
        area_km2: Geodesic area of the ring in square kilometres.
    """

    type: str = "Polygon"
    coordinates: list[list[list[float]]] = Field(default_factory=list)
    center: list[float] = Field(default_factory=list)
    radius_km: float = 0.0
    area_km2: float = 0.0


class PlaceSummary(BaseModel):
    """Resolved place as shown on the confirmation card."""

    official_name: str = ""
    coordinates: list[float] = Field(default_factory=list)
    bounding_box: list[float] | None = None
    area_km2: float | None = None
    population: int | None = None


class AnalysisRequest(BaseModel):
    """Top-level record handed to the results view."""

    schema_version: str = SCHEMA_VERSION
    query: str
    year: int
    place: PlaceSummary
    boundary: BoundaryGeometry
    requested_at: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
