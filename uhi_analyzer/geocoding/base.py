"""LookupService abstract base class.

Defines the contract every live place-lookup adapter must implement.
The resolver interacts exclusively with this interface; it never knows
which concrete service is behind it.

A lookup is one-shot: a free-text query restricted to place, locality
and region categories, returning at most one match in the service's
native representation (longitude-first). Converting to the canonical
``LocationResult`` ordering is the resolver's job.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass

from uhi_analyzer.core.exceptions import TransportError


@dataclass(frozen=True, slots=True)
class LookupMatch:
    """The top match returned by a lookup service.

    Attributes:
        center: Match coordinate as ``(lng, lat)``.
        place_name: Display name of the match.
        bbox: Optional extent as ``(min_lng, min_lat, max_lng, max_lat)``.
    """

    center: tuple[float, float]
    place_name: str
    bbox: tuple[float, float, float, float] | None = None


class LookupService(abc.ABC):
    """Abstract base class for live place-lookup adapters."""

    #: Short service identifier used in logs and errors.
    name: str = "lookup"

    @abc.abstractmethod
    async def search(self, query: str) -> LookupMatch | None:
        """Look up *query* and return the top match.

        Returns:
            The best ``LookupMatch``, or ``None`` when the service has no match.

        Raises:
            LookupServiceError: On transport, authentication or parse failures.
        """


# ---------------------------------------------------------------------------
# Lookup exceptions
# ---------------------------------------------------------------------------


class LookupServiceError(TransportError):
    """Base exception for lookup adapter errors.

    Attributes:
        service: Name of the service that raised the error.
        message: Human-readable error description.
    """

    default_stage = "geocoding"
    default_code = "LOOKUP_FAILED"

    def __init__(self, service: str, message: str, *, retryable: bool = True) -> None:
        self.service = service
        super().__init__(message, retryable=retryable)

    def __str__(self) -> str:
        return f"[{self.service}] {self.message}"


class LookupAuthError(LookupServiceError):
    """The service rejected the access credential."""

    default_code = "LOOKUP_AUTH_FAILED"

    def __init__(self, service: str, message: str) -> None:
        super().__init__(service, message, retryable=False)


class LookupTransportError(LookupServiceError):
    """Network failure, timeout or unexpected HTTP status."""

    default_code = "LOOKUP_TRANSPORT_FAILED"


class LookupParseError(LookupServiceError):
    """The service response did not have the expected shape."""

    default_code = "LOOKUP_PARSE_FAILED"

    def __init__(self, service: str, message: str) -> None:
        super().__init__(service, message, retryable=False)
