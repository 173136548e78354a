"""Mapbox Geocoding v5 adapter.

Concrete ``LookupService`` issuing a single forward-geocoding request
restricted to ``place,locality,region`` and limited to the top match.

Configuration:
    The access token is passed in explicitly; the adapter never reads
    ambient storage. ``transport`` lets tests substitute an
    ``httpx.MockTransport``.

References:
    Mapbox Geocoding API v5:
        https://docs.mapbox.com/api/search/geocoding-v5/
"""

from __future__ import annotations

import logging
import math
from typing import Any
from urllib.parse import quote

import httpx

from uhi_analyzer.core.constants import (
    DEFAULT_GEOCODING_TIMEOUT_S,
    MAPBOX_PLACE_TYPES,
    MAPBOX_PLACES_URL,
)
from uhi_analyzer.geocoding.base import (
    LookupAuthError,
    LookupMatch,
    LookupParseError,
    LookupService,
    LookupTransportError,
)

logger = logging.getLogger("uhi_analyzer.geocoding.mapbox")


class MapboxLookup(LookupService):
    """Mapbox places lookup over ``httpx.AsyncClient``."""

    name = "mapbox"

    def __init__(
        self,
        access_token: str,
        *,
        base_url: str = MAPBOX_PLACES_URL,
        timeout_s: float = DEFAULT_GEOCODING_TIMEOUT_S,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._access_token = access_token
        self._base_url = base_url.rstrip("/")
        self._timeout_s = timeout_s
        self._transport = transport

    async def search(self, query: str) -> LookupMatch | None:
        """Forward-geocode *query* and return the top match.

        Raises:
            LookupAuthError: On HTTP 401/403.
            LookupTransportError: On network errors, timeouts or other
                non-success statuses.
            LookupParseError: If the body is not the expected GeoJSON.
        """
        url = f"{self._base_url}/{quote(query, safe='')}.json"
        params = {
            "types": MAPBOX_PLACE_TYPES,
            "limit": "1",
            "access_token": self._access_token,
        }

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout_s, transport=self._transport
            ) as client:
                response = await client.get(url, params=params)
        except httpx.HTTPError as exc:
            msg = f"Lookup request failed: {exc.__class__.__name__}: {exc}"
            raise LookupTransportError(self.name, msg) from exc

        if response.status_code in (401, 403):
            msg = f"Access token rejected (HTTP {response.status_code})"
            raise LookupAuthError(self.name, msg)
        if response.status_code >= 400:
            msg = f"Unexpected HTTP {response.status_code} from lookup service"
            raise LookupTransportError(
                self.name, msg, retryable=response.status_code >= 500
            )

        try:
            payload = response.json()
        except ValueError as exc:
            msg = f"Response body is not JSON: {exc}"
            raise LookupParseError(self.name, msg) from exc

        return _parse_top_feature(payload, service=self.name)


# ---------------------------------------------------------------------------
# Module-level helpers
# ---------------------------------------------------------------------------


def _parse_top_feature(payload: Any, *, service: str) -> LookupMatch | None:
    """Extract the first GeoJSON feature as a ``LookupMatch``.

    Raises:
        LookupParseError: If the payload shape is unexpected.
    """
    if not isinstance(payload, dict):
        msg = f"Expected a JSON object, got {type(payload).__name__}"
        raise LookupParseError(service, msg)

    features = payload.get("features")
    if features is None:
        msg = "Response has no 'features' member"
        raise LookupParseError(service, msg)
    if not isinstance(features, list):
        msg = f"'features' must be a list, got {type(features).__name__}"
        raise LookupParseError(service, msg)
    if not features:
        return None

    feature = features[0]
    try:
        lng, lat = (float(v) for v in feature["center"])
        place_name = str(feature["place_name"])
        bbox_raw = feature.get("bbox")
        bbox = (
            tuple(float(v) for v in bbox_raw)  # type: ignore[misc]
            if bbox_raw is not None
            else None
        )
    except (KeyError, TypeError, ValueError) as exc:
        msg = f"Malformed feature: {exc.__class__.__name__}: {exc}"
        raise LookupParseError(service, msg) from exc

    if bbox is not None and len(bbox) != 4:
        msg = f"bbox must have 4 values, got {len(bbox)}"
        raise LookupParseError(service, msg)
    if bbox is not None and not all(math.isfinite(v) for v in bbox):
        msg = f"bbox values must be finite, got {bbox}"
        raise LookupParseError(service, msg)

    logger.debug("Lookup match | service=%s | name=%s | center=(%.4f, %.4f)", service, place_name, lng, lat)
    return LookupMatch(center=(lng, lat), place_name=place_name, bbox=bbox)  # type: ignore[arg-type]
