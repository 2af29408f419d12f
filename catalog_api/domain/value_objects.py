"""Value Objects for the domain layer.

Value objects are immutable objects that are defined by their attributes
rather than identity. They are interchangeable when their values are equal.
"""

import math
from dataclasses import dataclass
from typing import Self
from uuid import UUID, uuid4

from catalog_api.domain.base import ValueObject
from catalog_api.domain.exceptions import MalformedIdentifierError

# Mean Earth radius (IUGG).
EARTH_RADIUS_KM = 6371.0088

# Length of one degree of arc on the mean sphere.
KM_PER_DEGREE = math.pi * EARTH_RADIUS_KM / 180.0


# ============================================================================
# Typed Identifiers
# ============================================================================


@dataclass(frozen=True)
class ProductId(ValueObject):
    """Strongly-typed product identifier.

    The store addresses products by UUID; anything else is rejected
    at parse time.
    """

    value: UUID

    @classmethod
    def generate(cls) -> Self:
        """Generate a new product ID.

        Returns:
            New ProductId with random UUID.
        """
        return cls(value=uuid4())

    @classmethod
    def from_string(cls, value: str) -> Self:
        """Create ProductId from string representation.

        Args:
            value: String UUID representation.

        Returns:
            ProductId instance.

        Raises:
            MalformedIdentifierError: If value is not a UUID.
        """
        try:
            return cls(value=UUID(value))
        except (TypeError, ValueError, AttributeError) as e:
            raise MalformedIdentifierError(str(value)) from e

    def __str__(self) -> str:
        """Return string representation.

        Returns:
            UUID as string.
        """
        return str(self.value)


# ============================================================================
# Geolocation
# ============================================================================


@dataclass(frozen=True)
class GeoPoint(ValueObject):
    """A latitude/longitude pair in decimal degrees.

    Attributes:
        latitude: Degrees north, within [-90, 90].
        longitude: Degrees east, within [-180, 180].
    """

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        """Validate coordinate ranges."""
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"latitude {self.latitude} outside [-90, 90]")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"longitude {self.longitude} outside [-180, 180]")

    @property
    def longitude_scale(self) -> float:
        """Cosine of the latitude, used to shrink longitude deltas."""
        return math.cos(math.radians(self.latitude))

    def longitude_delta(self, other: "GeoPoint") -> float:
        """Longitude difference to another point, wrapped into [-180, 180]."""
        delta = other.longitude - self.longitude
        if delta > 180.0:
            return delta - 360.0
        if delta < -180.0:
            return delta + 360.0
        return delta

    def squared_degree_distance(self, other: "GeoPoint") -> float:
        """Squared equirectangular distance in degrees, from this point.

        Longitude differences take the short way across the antimeridian
        and are scaled by this point's latitude. Only comparisons and
        arithmetic are involved, so SQL backends evaluate the same formula.

        Args:
            other: Point to measure to.

        Returns:
            Squared distance in degrees of arc.
        """
        dlat = other.latitude - self.latitude
        dlon = self.longitude_delta(other) * self.longitude_scale
        return dlat * dlat + dlon * dlon

    def distance_km(self, other: "GeoPoint") -> float:
        """Approximate distance to another point in kilometres."""
        return math.sqrt(self.squared_degree_distance(other)) * KM_PER_DEGREE
