"""Workflow configuration loaded from environment variables.

All configuration values have sensible defaults. The live geocoding
credential is injected here (``MAPBOX_ACCESS_TOKEN``) and threaded into
the resolver explicitly; nothing downstream reads ambient storage.

Fail-fast validation:
    ``from_env()`` raises ``ConfigValidationError`` if any numeric value is
    out of its valid range.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass

from uhi_analyzer.core.constants import (
    DEFAULT_ANALYSIS_YEAR,
    DEFAULT_GEOCODING_TIMEOUT_S,
    DEFAULT_RADIUS_KM,
    DEFAULT_TICK_MS,
    MAX_ANALYSIS_YEAR,
    MAX_RADIUS_KM,
    MIN_ANALYSIS_YEAR,
    MIN_RADIUS_KM,
)
from uhi_analyzer.core.exceptions import ValidationError


class ConfigValidationError(ValidationError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        message: Human-readable description of the valid range.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class WorkflowConfig:
    """Immutable workflow configuration.

    Attributes:
        mapbox_access_token: Live geocoding credential. Empty activates the
            static fallback table.
        geocoding_timeout_s: Upper bound on one live lookup, in seconds.
        default_radius_km: Radius of a freshly derived boundary (5-50 km).
        progress_tick_ms: Simulator tick interval in milliseconds.
        default_year: Analysis year preselected in the form.
    """

    mapbox_access_token: str = ""
    geocoding_timeout_s: float = DEFAULT_GEOCODING_TIMEOUT_S
    default_radius_km: float = DEFAULT_RADIUS_KM
    progress_tick_ms: int = DEFAULT_TICK_MS
    default_year: int = DEFAULT_ANALYSIS_YEAR

    @property
    def has_live_geocoding(self) -> bool:
        """Whether a live lookup credential is configured."""
        return bool(self.mapbox_access_token)

    @classmethod
    def from_env(cls) -> WorkflowConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a numeric value is out of range.
            ValueError: If a numeric environment variable cannot be
                parsed (e.g. ``PROGRESS_TICK_MS=fast``).
        """
        config = cls(
            mapbox_access_token=os.getenv("MAPBOX_ACCESS_TOKEN", "").strip(),
            geocoding_timeout_s=float(os.getenv("GEOCODING_TIMEOUT_S", "10")),
            default_radius_km=float(os.getenv("DEFAULT_RADIUS_KM", "25")),
            progress_tick_ms=int(os.getenv("PROGRESS_TICK_MS", "80")),
            default_year=int(os.getenv("DEFAULT_ANALYSIS_YEAR", "2023")),
        )
        _validate(config)
        return config


def _validate(config: WorkflowConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    if not math.isfinite(config.geocoding_timeout_s) or config.geocoding_timeout_s <= 0:
        raise ConfigValidationError(
            "GEOCODING_TIMEOUT_S",
            config.geocoding_timeout_s,
            "must be a finite number > 0 (seconds)",
        )

    if not MIN_RADIUS_KM <= config.default_radius_km <= MAX_RADIUS_KM:
        raise ConfigValidationError(
            "DEFAULT_RADIUS_KM",
            config.default_radius_km,
            f"must be between {MIN_RADIUS_KM:g} and {MAX_RADIUS_KM:g} (kilometres)",
        )

    if config.progress_tick_ms <= 0:
        raise ConfigValidationError(
            "PROGRESS_TICK_MS",
            config.progress_tick_ms,
            "must be > 0 (milliseconds)",
        )

    if not MIN_ANALYSIS_YEAR <= config.default_year <= MAX_ANALYSIS_YEAR:
        raise ConfigValidationError(
            "DEFAULT_ANALYSIS_YEAR",
            config.default_year,
            f"must be between {MIN_ANALYSIS_YEAR} and {MAX_ANALYSIS_YEAR}",
        )
