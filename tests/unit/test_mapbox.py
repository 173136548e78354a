"""Tests for the Mapbox lookup adapter.

Uses ``httpx.MockTransport`` so no network access is needed.
"""

from __future__ import annotations

import httpx
import pytest

from uhi_analyzer.geocoding.base import (
    LookupAuthError,
    LookupMatch,
    LookupParseError,
    LookupTransportError,
)
from uhi_analyzer.geocoding.mapbox import MapboxLookup, _parse_top_feature


def _lookup(handler, token: str = "pk.test") -> MapboxLookup:  # noqa: ANN001
    return MapboxLookup(token, transport=httpx.MockTransport(handler))


class TestRequestShape:
    @pytest.mark.asyncio()
    async def test_url_and_params(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"features": []})

        assert await _lookup(handler).search("São Paulo, Brazil") is None

        request = seen[0]
        assert request.method == "GET"
        assert request.url.host == "api.mapbox.com"
        assert request.url.raw_path.startswith(
            b"/geocoding/v5/mapbox.places/S%C3%A3o%20Paulo%2C%20Brazil.json"
        )
        assert request.url.params["types"] == "place,locality,region"
        assert request.url.params["limit"] == "1"
        assert request.url.params["access_token"] == "pk.test"


class TestResponses:
    @pytest.mark.asyncio()
    async def test_top_feature(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json={
                    "features": [
                        {"center": [139.6917, 35.6895], "place_name": "Tokyo, Japan"},
                        {"center": [0.0, 0.0], "place_name": "Other"},
                    ]
                },
            )

        match = await _lookup(handler).search("Tokyo, Japan")
        assert match == LookupMatch(center=(139.6917, 35.6895), place_name="Tokyo, Japan")

    @pytest.mark.asyncio()
    @pytest.mark.parametrize("status", [401, 403])
    async def test_auth_failure(self, status: int) -> None:
        lookup = _lookup(lambda request: httpx.Response(status))
        with pytest.raises(LookupAuthError):
            await lookup.search("Paris, France")

    @pytest.mark.asyncio()
    async def test_server_error_retryable(self) -> None:
        lookup = _lookup(lambda request: httpx.Response(500))
        with pytest.raises(LookupTransportError) as exc_info:
            await lookup.search("Paris, France")
        assert exc_info.value.retryable is True

    @pytest.mark.asyncio()
    async def test_client_error_not_retryable(self) -> None:
        lookup = _lookup(lambda request: httpx.Response(422))
        with pytest.raises(LookupTransportError) as exc_info:
            await lookup.search("Paris, France")
        assert exc_info.value.retryable is False

    @pytest.mark.asyncio()
    async def test_non_json_body(self) -> None:
        lookup = _lookup(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(LookupParseError):
            await lookup.search("Paris, France")

    @pytest.mark.asyncio()
    async def test_transport_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(LookupTransportError):
            await _lookup(handler).search("Paris, France")


class TestParseTopFeature:
    def test_empty_features(self) -> None:
        assert _parse_top_feature({"features": []}, service="mapbox") is None

    @pytest.mark.parametrize(
        "payload",
        [
            [],
            {},
            {"features": "nope"},
            {"features": [{"place_name": "No center"}]},
            {"features": [{"center": [1.0], "place_name": "Short"}]},
            {"features": [{"center": [1.0, 2.0], "place_name": "x", "bbox": [1, 2, 3]}]},
            {"features": [{"center": [1.0, 2.0], "place_name": "x", "bbox": [1, float("nan"), 3, 2]}]},
            {"features": [{"center": [1.0, 2.0], "place_name": "x", "bbox": [1, 2, "inf", 4]}]},
        ],
    )
    def test_malformed(self, payload: object) -> None:
        with pytest.raises(LookupParseError):
            _parse_top_feature(payload, service="mapbox")

    def test_bbox_parsed(self) -> None:
        match = _parse_top_feature(
            {"features": [{"center": [1, 2], "place_name": "x", "bbox": [0, 1, 2, 3]}]},
            service="mapbox",
        )
        assert match is not None
        assert match.bbox == (0.0, 1.0, 2.0, 3.0)
