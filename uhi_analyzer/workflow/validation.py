"""Local format check for submitted queries.

Runs before the ``FORM -> GEOCODING`` transition. Each failing rule is
reported separately so the user sees what to fix rather than a generic
rejection.
"""

from __future__ import annotations

from uhi_analyzer.core.constants import (
    MAX_ANALYSIS_YEAR,
    MIN_ANALYSIS_YEAR,
    MIN_QUERY_LENGTH,
    QUERY_SEPARATOR,
)
from uhi_analyzer.core.exceptions import ValidationError
from uhi_analyzer.models.workflow import Notice, NoticeKind

RULE_TOO_SHORT = "too_short"
RULE_MISSING_SEPARATOR = "missing_separator"
RULE_UNSUPPORTED_YEAR = "unsupported_year"

_NOTICES: dict[str, Notice] = {
    RULE_TOO_SHORT: Notice(
        NoticeKind.QUERY_TOO_SHORT,
        "Enter at least 3 characters",
        "Try typing the city name.",
    ),
    RULE_MISSING_SEPARATOR: Notice(
        NoticeKind.QUERY_MISSING_SEPARATOR,
        "Add a comma for clarity",
        "Use format: City, Country or City, State.",
    ),
    RULE_UNSUPPORTED_YEAR: Notice(
        NoticeKind.UNSUPPORTED_YEAR,
        "Choose a supported year",
        f"Analysis years run from {MIN_ANALYSIS_YEAR} to {MAX_ANALYSIS_YEAR}.",
    ),
}


class QueryValidationError(ValidationError):
    """A submitted query failed the local format check.

    Attributes:
        rule: Which rule failed (``too_short``, ``missing_separator``,
            ``unsupported_year``).
    """

    default_stage = "form"

    def __init__(self, rule: str, message: str) -> None:
        self.rule = rule
        super().__init__(message, code=f"QUERY_{rule.upper()}")

    @property
    def notice(self) -> Notice:
        """User-facing notice for the failed rule."""
        return _NOTICES[self.rule]


def check_query(query: str, year: int | None = None) -> str:
    """Validate *query* (and *year*, when given) and return the trimmed query.

    Raises:
        QueryValidationError: On the first failing rule, checked in order:
            length, separator, year.
    """
    trimmed = query.strip()
    if len(trimmed) < MIN_QUERY_LENGTH:
        msg = f"Query must have at least {MIN_QUERY_LENGTH} characters, got {len(trimmed)}"
        raise QueryValidationError(RULE_TOO_SHORT, msg)
    if QUERY_SEPARATOR not in trimmed:
        msg = f"Query must contain {QUERY_SEPARATOR!r} to disambiguate (City, Country)"
        raise QueryValidationError(RULE_MISSING_SEPARATOR, msg)
    if year is not None and not MIN_ANALYSIS_YEAR <= year <= MAX_ANALYSIS_YEAR:
        msg = f"Year {year} is outside {MIN_ANALYSIS_YEAR}-{MAX_ANALYSIS_YEAR}"
        raise QueryValidationError(RULE_UNSUPPORTED_YEAR, msg)
    return trimmed
