"""Place resolution.

- LookupService: Abstract base class for live lookup adapters
- MapboxLookup: Mapbox Geocoding v5 adapter (httpx)
- FALLBACK_PLACES: Static table used when no credential is configured
- GeoResolver: Resolves ``(query, year)`` to a ``LocationResult``
- suggest: Typeahead over the major-city list
"""

from uhi_analyzer.geocoding.base import (
    LookupAuthError,
    LookupMatch,
    LookupParseError,
    LookupService,
    LookupServiceError,
    LookupTransportError,
)
from uhi_analyzer.geocoding.fallback import FALLBACK_PLACES, FallbackPlace
from uhi_analyzer.geocoding.mapbox import MapboxLookup
from uhi_analyzer.geocoding.resolver import GeoResolver
from uhi_analyzer.geocoding.suggestions import MAJOR_CITIES, suggest

__all__ = [
    "FALLBACK_PLACES",
    "MAJOR_CITIES",
    "FallbackPlace",
    "GeoResolver",
    "LookupAuthError",
    "LookupMatch",
    "LookupParseError",
    "LookupService",
    "LookupServiceError",
    "LookupTransportError",
    "MapboxLookup",
    "suggest",
]
