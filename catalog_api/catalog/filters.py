"""Listing filter normalization.

``normalize_filter`` is the only place raw listing parameters are
converted. Query strings arrive untyped; everything that cannot be read
as the expected type is rejected instead of silently defaulted.
"""

import math
from dataclasses import dataclass
from typing import Any

from catalog_api.domain.exceptions import InvalidFilterError
from catalog_api.domain.value_objects import GeoPoint

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


@dataclass(frozen=True)
class ProductFilter:
    """Validated listing parameters.

    Attributes:
        page: Page number (1-indexed).
        limit: Items per page, within [1, MAX_LIMIT].
        location: Search origin, if a geo search was requested.
        keyword: Trimmed, non-empty search keyword, or ``None``.
    """

    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    location: GeoPoint | None = None
    keyword: str | None = None

    @property
    def has_location(self) -> bool:
        """Check if a geo search was requested."""
        return self.location is not None

    @property
    def has_keyword(self) -> bool:
        """Check if a keyword search was requested."""
        return self.keyword is not None


def _is_blank(raw: Any) -> bool:
    return raw is None or (isinstance(raw, str) and not raw.strip())


def _parse_int(parameter: str, raw: Any) -> int | None:
    """Read an integer paging value, ``None`` when absent."""
    if _is_blank(raw):
        return None
    if isinstance(raw, bool):
        raise InvalidFilterError(parameter, "must be an integer", raw)
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        if raw.is_integer():
            return int(raw)
        raise InvalidFilterError(parameter, "must be an integer", raw)
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError:
            raise InvalidFilterError(parameter, "must be an integer", raw) from None
    raise InvalidFilterError(parameter, "must be an integer", raw)


def _parse_coordinate(parameter: str, raw: Any, bound: float) -> float | None:
    """Read a coordinate in decimal degrees, ``None`` when absent."""
    if _is_blank(raw):
        return None
    if isinstance(raw, bool):
        raise InvalidFilterError(parameter, "must be a number", raw)
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        try:
            value = float(raw.strip())
        except ValueError:
            raise InvalidFilterError(parameter, "must be a number", raw) from None
    else:
        raise InvalidFilterError(parameter, "must be a number", raw)

    if not math.isfinite(value):
        raise InvalidFilterError(parameter, "must be a finite number", raw)
    if not -bound <= value <= bound:
        raise InvalidFilterError(parameter, f"must be within [-{bound:g}, {bound:g}]", raw)
    return value


def _normalize_keyword(raw: Any) -> str | None:
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise InvalidFilterError("keyword", "must be a string", raw)
    keyword = raw.strip()
    return keyword or None


def normalize_filter(
    page: Any = None,
    limit: Any = None,
    latitude: Any = None,
    longitude: Any = None,
    keyword: Any = None,
) -> ProductFilter:
    """Turn raw listing parameters into a ProductFilter.

    Paging values are forgiving: missing or non-positive pages become 1,
    missing or non-positive limits become the default and oversized
    limits are clamped. Geolocation is strict: both coordinates or
    neither, each within range.

    Args:
        page: Requested page.
        limit: Requested page size.
        latitude: Search origin latitude.
        longitude: Search origin longitude.
        keyword: Search keyword.

    Returns:
        Normalized filter.

    Raises:
        InvalidFilterError: If any parameter cannot be accepted.
    """
    parsed_page = _parse_int("page", page)
    parsed_limit = _parse_int("limit", limit)

    if parsed_page is None or parsed_page <= 0:
        parsed_page = DEFAULT_PAGE

    if parsed_limit is None or parsed_limit <= 0:
        parsed_limit = DEFAULT_LIMIT
    elif parsed_limit > MAX_LIMIT:
        parsed_limit = MAX_LIMIT

    lat = _parse_coordinate("latitude", latitude, 90.0)
    lon = _parse_coordinate("longitude", longitude, 180.0)

    if (lat is None) != (lon is None):
        missing = "longitude" if lon is None else "latitude"
        raise InvalidFilterError(
            missing,
            "latitude and longitude must be supplied together",
            {"latitude": latitude, "longitude": longitude},
        )

    location = GeoPoint(latitude=lat, longitude=lon) if lat is not None else None

    return ProductFilter(
        page=parsed_page,
        limit=parsed_limit,
        location=location,
        keyword=_normalize_keyword(keyword),
    )
