"""Place resolution: live lookup with a deterministic static fallback.

``GeoResolver.resolve`` maps a ``(query, year)`` pair to a
``LocationResult``. Behaviour is a pure function of its arguments and the
injected access credential:

- empty (after trimming) query: always ``NOT_FOUND``;
- credential present: one live lookup, top match only;
- credential absent: exact, case-sensitive key lookup in the fallback table.

Transport, parse and timeout failures on the live path are absorbed and
returned as ``ERROR`` results; they never propagate to the caller.
"""

from __future__ import annotations

import asyncio
import logging
import math
from typing import TYPE_CHECKING

from uhi_analyzer.core.config import ConfigValidationError
from uhi_analyzer.core.constants import DEFAULT_GEOCODING_TIMEOUT_S
from uhi_analyzer.geocoding.base import LookupServiceError
from uhi_analyzer.geocoding.fallback import FALLBACK_PLACES, FallbackPlace
from uhi_analyzer.geocoding.mapbox import MapboxLookup
from uhi_analyzer.models.location import (
    LocationResult,
    LocationStatus,
    is_valid_coordinate,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from uhi_analyzer.core.config import WorkflowConfig
    from uhi_analyzer.geocoding.base import LookupMatch, LookupService

logger = logging.getLogger("uhi_analyzer.geocoding.resolver")


class GeoResolver:
    """Resolve free-text place queries to ``LocationResult`` values.

    Args:
        access_token: Live lookup credential; ``None`` or empty selects the
            fallback table.
        lookup: Live lookup adapter. Built from *access_token* when omitted.
        fallback: Fallback table keyed by exact query text.
        timeout_s: Upper bound on one live lookup. Must be finite and positive.

    Raises:
        ConfigValidationError: If *timeout_s* is not a finite positive number.
    """

    def __init__(
        self,
        access_token: str | None = None,
        *,
        lookup: LookupService | None = None,
        fallback: Mapping[str, FallbackPlace] = FALLBACK_PLACES,
        timeout_s: float = DEFAULT_GEOCODING_TIMEOUT_S,
    ) -> None:
        if not math.isfinite(timeout_s) or timeout_s <= 0:
            raise ConfigValidationError(
                "GEOCODING_TIMEOUT_S", timeout_s, "must be a finite number > 0 (seconds)"
            )
        self._access_token = access_token or ""
        self._timeout_s = timeout_s
        self._fallback = fallback
        if lookup is None and self._access_token:
            lookup = MapboxLookup(self._access_token, timeout_s=timeout_s)
        self._lookup = lookup if self._access_token else None

    @classmethod
    def from_config(cls, config: WorkflowConfig) -> GeoResolver:
        return cls(config.mapbox_access_token, timeout_s=config.geocoding_timeout_s)

    @property
    def has_live_service(self) -> bool:
        """Whether resolution goes through the live lookup service."""
        return self._lookup is not None

    async def resolve(self, query: str, year: int) -> LocationResult:
        """Resolve *query* for analysis *year*.

        Args:
            query: Place text. Not format-checked here.
            year: Analysis year. Recorded in logs only.

        Returns:
            A ``LocationResult``; never raises for lookup failures.
        """
        if not query.strip():
            logger.info("Resolution skipped | reason=empty_query | year=%d", year)
            return LocationResult.not_found()

        if self._lookup is None:
            result = self._resolve_fallback(query)
            source = "fallback"
        else:
            result = await self._resolve_live(self._lookup, query)
            source = self._lookup.name

        logger.info(
            "Resolution finished | query=%s | year=%d | source=%s | status=%s | name=%s",
            query,
            year,
            source,
            result.status.value,
            result.official_name,
        )
        return result

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def _resolve_fallback(self, query: str) -> LocationResult:
        place = self._fallback.get(query)
        if place is None:
            return LocationResult.not_found()
        return place.to_location()

    async def _resolve_live(self, lookup: LookupService, query: str) -> LocationResult:
        try:
            match = await asyncio.wait_for(lookup.search(query), timeout=self._timeout_s)
        except TimeoutError:
            logger.warning(
                "Live lookup timed out | service=%s | query=%s | timeout=%.1fs",
                lookup.name,
                query,
                self._timeout_s,
            )
            return LocationResult.error()
        except LookupServiceError as exc:
            logger.warning(
                "Live lookup failed | service=%s | query=%s | error=%s",
                lookup.name,
                query,
                exc.to_error_dict(),
            )
            return LocationResult.error()

        if match is None:
            return LocationResult.not_found()
        return _match_to_location(match)


def _match_to_location(match: LookupMatch) -> LocationResult:
    """Convert a longitude-first service match into a ``LocationResult``.

    A match whose coordinates fall outside WGS 84 ranges is reported as an
    error so the success invariant of ``LocationResult`` always holds.
    """
    lng, lat = match.center
    if not is_valid_coordinate(lat, lng):
        logger.warning(
            "Live match rejected | name=%s | center=%s | reason=out_of_range",
            match.place_name,
            match.center,
        )
        return LocationResult.error()

    bounding_box = None
    if match.bbox is not None:
        min_lng, min_lat, max_lng, max_lat = match.bbox
        bounding_box = (min_lat, min_lng, max_lat, max_lng)

    return LocationResult(
        status=LocationStatus.SUCCESS,
        coordinates=(lat, lng),
        bounding_box=bounding_box,
        official_name=match.place_name,
    )
