"""Built-in fallback table of well-known places.

Used when no live lookup credential is configured. Keys are matched
exactly and case-sensitively against the submitted query. Coordinates
are ``(lat, lng)`` and boxes ``(south, west, north, east)``, the same
canonical ordering as ``LocationResult``.
"""

from __future__ import annotations

from dataclasses import dataclass

from uhi_analyzer.models.location import LocationResult, LocationStatus


@dataclass(frozen=True, slots=True)
class FallbackPlace:
    """A place entry in the fallback table."""

    coordinates: tuple[float, float]
    bounding_box: tuple[float, float, float, float]
    area_km2: float
    population: int
    official_name: str

    def to_location(self) -> LocationResult:
        return LocationResult(
            status=LocationStatus.SUCCESS,
            coordinates=self.coordinates,
            bounding_box=self.bounding_box,
            official_name=self.official_name,
            area_km2=self.area_km2,
            population=self.population,
        )


FALLBACK_PLACES: dict[str, FallbackPlace] = {
    "Tokyo, Japan": FallbackPlace(
        coordinates=(35.6762, 139.6503),
        bounding_box=(35.5, 139.0, 35.8, 140.0),
        area_km2=2194,
        population=37_400_000,
        official_name="Tokyo Metropolis, Japan",
    ),
    "New York, NY": FallbackPlace(
        coordinates=(40.7128, -74.006),
        bounding_box=(40.5, -74.3, 40.9, -73.7),
        area_km2=1214,
        population=19_300_000,
        official_name="New York-Newark, NY-NJ-PA",
    ),
    "London, United Kingdom": FallbackPlace(
        coordinates=(51.5072, -0.1276),
        bounding_box=(51.3, -0.6, 51.7, 0.3),
        area_km2=1572,
        population=9_304_000,
        official_name="Greater London, UK",
    ),
    "Paris, France": FallbackPlace(
        coordinates=(48.8566, 2.3522),
        bounding_box=(48.7, 2.1, 49.0, 2.6),
        area_km2=105,
        population=11_020_000,
        official_name="Paris, Île-de-France",
    ),
    "Delhi, India": FallbackPlace(
        coordinates=(28.6139, 77.209),
        bounding_box=(28.4, 76.8, 28.9, 77.5),
        area_km2=1484,
        population=30_290_000,
        official_name="Delhi, National Capital Territory",
    ),
}
