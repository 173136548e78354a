"""Data model for a resolved place.

A ``LocationResult`` is the output of ``GeoResolver.resolve`` and the
seed for the analysis boundary. Coordinates follow the resolver's
canonical ``(lat, lng)`` ordering; the boundary model reorders them to
``(lng, lat)`` for map consumers.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass

from uhi_analyzer.core.exceptions import ValidationError

# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class ModelValidationError(ValueError, ValidationError):
    """Raised when a domain model is constructed with invalid field values.

    Attributes:
        model: Name of the model class that failed validation.
        field_name: The field that violated the invariant.
        value: The invalid value.
    """

    default_stage = "model_validation"
    default_code = "MODEL_VALIDATION_FAILED"

    def __init__(self, model: str, field_name: str, value: object, message: str) -> None:
        self.model = model
        self.field_name = field_name
        self.value = value
        formatted = f"{model}.{field_name}={value!r}: {message}"
        ValidationError.__init__(self, formatted)


def is_valid_coordinate(lat: float, lng: float) -> bool:
    """Return True when *lat*/*lng* are finite and inside WGS 84 ranges."""
    return (
        math.isfinite(lat)
        and math.isfinite(lng)
        and -90.0 <= lat <= 90.0
        and -180.0 <= lng <= 180.0
    )


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class LocationStatus(enum.Enum):
    """Outcome of a place resolution."""

    SUCCESS = "success"
    NOT_FOUND = "not_found"
    ERROR = "error"


# ---------------------------------------------------------------------------
# LocationResult
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class LocationResult:
    """Result of resolving a free-text place query.

    Attributes:
        status: Resolution outcome.
        coordinates: ``(lat, lng)`` in decimal degrees. Meaningful only when
            ``status`` is ``SUCCESS``.
        bounding_box: Optional ``(south, west, north, east)`` extent.
        official_name: Display name of the resolved place.
        area_km2: Optional urban area in square kilometres.
        population: Optional metropolitan population.
    """

    status: LocationStatus
    coordinates: tuple[float, float] = (0.0, 0.0)
    bounding_box: tuple[float, float, float, float] | None = None
    official_name: str = ""
    area_km2: float | None = None
    population: int | None = None

    def __post_init__(self) -> None:
        if self.status is LocationStatus.SUCCESS:
            lat, lng = self.coordinates
            if not is_valid_coordinate(lat, lng):
                raise ModelValidationError(
                    "LocationResult",
                    "coordinates",
                    self.coordinates,
                    "must be finite with lat in [-90, 90] and lng in [-180, 180]",
                )

    @classmethod
    def not_found(cls, official_name: str = "City not found") -> LocationResult:
        return cls(status=LocationStatus.NOT_FOUND, official_name=official_name)

    @classmethod
    def error(cls, official_name: str = "Error") -> LocationResult:
        return cls(status=LocationStatus.ERROR, official_name=official_name)

    @property
    def is_success(self) -> bool:
        return self.status is LocationStatus.SUCCESS

    @property
    def lat(self) -> float:
        return self.coordinates[0]

    @property
    def lng(self) -> float:
        return self.coordinates[1]

    def to_dict(self) -> dict[str, object]:
        """Serialise to a JSON-compatible dict."""
        return {
            "status": self.status.value,
            "coordinates": list(self.coordinates),
            "bounding_box": list(self.bounding_box) if self.bounding_box else None,
            "official_name": self.official_name,
            "area_km2": self.area_km2,
            "population": self.population,
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> LocationResult:
        """Deserialise from a dict produced by ``to_dict``.

        Raises:
            TypeError: If field values have unexpected types.
            ModelValidationError: If a success payload has invalid coordinates.
        """
        coords_raw = data.get("coordinates", [0.0, 0.0])
        if not isinstance(coords_raw, list | tuple):
            msg = f"coordinates must be a list, got {type(coords_raw).__name__}"
            raise TypeError(msg)

        bbox_raw = data.get("bounding_box")
        if bbox_raw is not None and not isinstance(bbox_raw, list | tuple):
            msg = f"bounding_box must be a list, got {type(bbox_raw).__name__}"
            raise TypeError(msg)

        area_raw = data.get("area_km2")
        population_raw = data.get("population")

        return cls(
            status=LocationStatus(str(data.get("status", LocationStatus.ERROR.value))),
            coordinates=(float(coords_raw[0]), float(coords_raw[1])),
            bounding_box=tuple(float(v) for v in bbox_raw) if bbox_raw else None,  # type: ignore[arg-type]
            official_name=str(data.get("official_name", "")),
            area_km2=float(area_raw) if area_raw is not None else None,  # type: ignore[arg-type]
            population=int(population_raw) if population_raw is not None else None,  # type: ignore[call-overload]
        )
