"""Tests for GeoResolver.

Covers:
- Fallback table: exact, case-sensitive lookups when no credential is set
- Empty queries are never looked up
- Live path: top match conversion to ``(lat, lng)`` and error absorption
- Timeouts are reported as ``ERROR`` results
"""

from __future__ import annotations

import asyncio
import math

import httpx
import pytest

from uhi_analyzer.core.config import ConfigValidationError, WorkflowConfig
from uhi_analyzer.geocoding.base import LookupMatch, LookupService, LookupTransportError
from uhi_analyzer.geocoding.mapbox import MapboxLookup
from uhi_analyzer.geocoding.resolver import GeoResolver
from uhi_analyzer.models.location import LocationStatus

PARIS_FEATURE = {
    "center": [2.3522, 48.8566],
    "place_name": "Paris, Île-de-France, France",
    "bbox": [2.2241, 48.8156, 2.4698, 48.9022],
}


class _StaticLookup(LookupService):
    name = "static"

    def __init__(self, match: LookupMatch | None = None, error: Exception | None = None) -> None:
        self.match = match
        self.error = error
        self.queries: list[str] = []

    async def search(self, query: str) -> LookupMatch | None:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return self.match


class _SlowLookup(LookupService):
    name = "slow"

    async def search(self, query: str) -> LookupMatch | None:
        await asyncio.sleep(5)
        return None


def _mapbox(handler) -> MapboxLookup:  # noqa: ANN001
    return MapboxLookup("pk.test", transport=httpx.MockTransport(handler))


# ---------------------------------------------------------------------------
# Fallback path
# ---------------------------------------------------------------------------


class TestFallbackResolution:
    @pytest.mark.asyncio()
    async def test_tokyo(self) -> None:
        result = await GeoResolver().resolve("Tokyo, Japan", 2023)
        assert result.status is LocationStatus.SUCCESS
        assert result.coordinates == (35.6762, 139.6503)
        assert result.official_name == "Tokyo Metropolis, Japan"
        assert result.area_km2 is not None
        assert result.population is not None

    @pytest.mark.asyncio()
    async def test_paris(self) -> None:
        result = await GeoResolver().resolve("Paris, France", 2023)
        assert result.coordinates == (48.8566, 2.3522)
        assert result.official_name == "Paris, Île-de-France"

    @pytest.mark.asyncio()
    async def test_unknown_city_not_found(self) -> None:
        result = await GeoResolver().resolve("Springfield, USA", 2023)
        assert result.status is LocationStatus.NOT_FOUND
        assert result.official_name == "City not found"

    @pytest.mark.asyncio()
    async def test_lookup_is_case_sensitive(self) -> None:
        result = await GeoResolver().resolve("tokyo, japan", 2023)
        assert result.status is LocationStatus.NOT_FOUND

    @pytest.mark.asyncio()
    @pytest.mark.parametrize("query", ["", "   ", "\t\n"])
    async def test_empty_query_not_found(self, query: str) -> None:
        result = await GeoResolver().resolve(query, 2023)
        assert result.status is LocationStatus.NOT_FOUND

    @pytest.mark.asyncio()
    async def test_year_does_not_change_result(self) -> None:
        resolver = GeoResolver()
        assert await resolver.resolve("Delhi, India", 2012) == await resolver.resolve(
            "Delhi, India", 2024
        )

    def test_no_credential_means_no_live_service(self) -> None:
        assert GeoResolver().has_live_service is False
        assert GeoResolver("").has_live_service is False

    @pytest.mark.asyncio()
    async def test_injected_lookup_ignored_without_credential(self) -> None:
        lookup = _StaticLookup(LookupMatch(center=(0.0, 0.0), place_name="Null Island"))
        resolver = GeoResolver(None, lookup=lookup)
        result = await resolver.resolve("Paris, France", 2023)
        assert result.official_name == "Paris, Île-de-France"
        assert lookup.queries == []


# ---------------------------------------------------------------------------
# Live path
# ---------------------------------------------------------------------------


class TestLiveResolution:
    def test_from_config_builds_mapbox(self) -> None:
        resolver = GeoResolver.from_config(WorkflowConfig(mapbox_access_token="pk.x"))
        assert resolver.has_live_service is True

    @pytest.mark.asyncio()
    async def test_top_match_converted(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"features": [PARIS_FEATURE]})

        resolver = GeoResolver("pk.test", lookup=_mapbox(handler))
        result = await resolver.resolve("Paris, France", 2023)

        assert result.status is LocationStatus.SUCCESS
        assert result.coordinates == (48.8566, 2.3522)
        assert result.bounding_box == (48.8156, 2.2241, 48.9022, 2.4698)
        assert result.official_name == "Paris, Île-de-France, France"
        assert result.area_km2 is None
        assert result.population is None

    @pytest.mark.asyncio()
    async def test_live_path_skips_fallback_table(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"features": []})

        resolver = GeoResolver("pk.test", lookup=_mapbox(handler))
        result = await resolver.resolve("Tokyo, Japan", 2023)
        assert result.status is LocationStatus.NOT_FOUND

    @pytest.mark.asyncio()
    async def test_non_finite_bbox_becomes_error_result(self) -> None:
        body = (
            b'{"features": [{"center": [2.3522, 48.8566], "place_name": "Paris",'
            b' "bbox": [1.0, NaN, 3.0, 2.0]}]}'
        )

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=body, headers={"content-type": "application/json"})

        resolver = GeoResolver("pk.test", lookup=_mapbox(handler))
        result = await resolver.resolve("Paris, France", 2023)
        assert result.status is LocationStatus.ERROR
        assert result.bounding_box is None

    @pytest.mark.asyncio()
    async def test_http_error_becomes_error_result(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503)

        resolver = GeoResolver("pk.test", lookup=_mapbox(handler))
        result = await resolver.resolve("Paris, France", 2023)
        assert result.status is LocationStatus.ERROR
        assert result.official_name == "Error"

    @pytest.mark.asyncio()
    async def test_network_error_becomes_error_result(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        resolver = GeoResolver("pk.test", lookup=_mapbox(handler))
        result = await resolver.resolve("Paris, France", 2023)
        assert result.status is LocationStatus.ERROR

    @pytest.mark.asyncio()
    async def test_lookup_error_absorbed(self) -> None:
        lookup = _StaticLookup(error=LookupTransportError("static", "down"))
        result = await GeoResolver("pk.test", lookup=lookup).resolve("Paris, France", 2023)
        assert result.status is LocationStatus.ERROR
        assert lookup.queries == ["Paris, France"]

    @pytest.mark.asyncio()
    async def test_out_of_range_match_is_error(self) -> None:
        lookup = _StaticLookup(LookupMatch(center=(2.35, 148.0), place_name="Swapped"))
        result = await GeoResolver("pk.test", lookup=lookup).resolve("Paris, France", 2023)
        assert result.status is LocationStatus.ERROR

    @pytest.mark.asyncio()
    async def test_timeout_becomes_error_result(self) -> None:
        resolver = GeoResolver("pk.test", lookup=_SlowLookup(), timeout_s=0.01)
        result = await resolver.resolve("Paris, France", 2023)
        assert result.status is LocationStatus.ERROR

    @pytest.mark.parametrize("timeout_s", [0.0, -1.0, math.nan, math.inf])
    def test_unbounded_timeout_rejected(self, timeout_s: float) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            GeoResolver("pk.test", lookup=_SlowLookup(), timeout_s=timeout_s)
        assert exc_info.value.key == "GEOCODING_TIMEOUT_S"

    @pytest.mark.asyncio()
    async def test_empty_query_skips_live_lookup(self) -> None:
        lookup = _StaticLookup()
        result = await GeoResolver("pk.test", lookup=lookup).resolve("  ", 2023)
        assert result.status is LocationStatus.NOT_FOUND
        assert lookup.queries == []
