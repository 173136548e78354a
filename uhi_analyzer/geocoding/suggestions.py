"""Typeahead suggestions for the city query field."""

from __future__ import annotations

MAX_SUGGESTIONS = 8

MAJOR_CITIES: tuple[str, ...] = (
    "Tokyo, Japan",
    "New York, NY",
    "London, United Kingdom",
    "Paris, France",
    "Delhi, India",
    "Shanghai, China",
    "Sao Paulo, Brazil",
    "Mexico City, Mexico",
    "Cairo, Egypt",
    "Beijing, China",
    "Dhaka, Bangladesh",
    "Osaka, Japan",
    "Karachi, Pakistan",
    "Chongqing, China",
    "Istanbul, Turkey",
    "Buenos Aires, Argentina",
    "Lagos, Nigeria",
    "Kinshasa, DRC",
    "Moscow, Russia",
    "Jakarta, Indonesia",
    "Los Angeles, CA",
    "Chicago, IL",
    "Toronto, Canada",
    "Sydney, Australia",
    "Seoul, South Korea",
    "Hong Kong, China",
    "Singapore, Singapore",
    "Bangkok, Thailand",
)


def suggest(text: str, *, limit: int = MAX_SUGGESTIONS) -> list[str]:
    """Return major cities whose name contains *text*, case-insensitively.

    Empty input yields no suggestions. Order follows ``MAJOR_CITIES``.
    """
    if not text:
        return []
    needle = text.lower()
    return [city for city in MAJOR_CITIES if needle in city.lower()][:limit]
