"""Tests for domain value objects."""

from dataclasses import FrozenInstanceError
from uuid import UUID

import pytest

from catalog_api.domain import (
    KM_PER_DEGREE,
    GeoPoint,
    MalformedIdentifierError,
    ProductId,
)


class TestProductId:
    """Tests for ProductId."""

    def test_generate_unique(self) -> None:
        """Generated IDs differ."""
        assert ProductId.generate() != ProductId.generate()

    def test_string_round_trip(self) -> None:
        """IDs parse back from their string form."""
        pid = ProductId.generate()
        assert ProductId.from_string(str(pid)) == pid
        assert isinstance(pid.value, UUID)

    def test_uppercase_accepted(self) -> None:
        """UUID parsing ignores case."""
        pid = ProductId.generate()
        assert ProductId.from_string(str(pid).upper()) == pid

    @pytest.mark.parametrize("value", ["", "abc", "123", "not-a-uuid-at-all", None])
    def test_malformed(self, value) -> None:
        """Non-UUID strings are rejected."""
        with pytest.raises(MalformedIdentifierError):
            ProductId.from_string(value)

    def test_immutable(self) -> None:
        """IDs cannot be reassigned."""
        pid = ProductId.generate()
        with pytest.raises(FrozenInstanceError):
            pid.value = UUID(int=0)


class TestGeoPoint:
    """Tests for GeoPoint."""

    @pytest.mark.parametrize(
        "latitude,longitude",
        [(-90.1, 0), (90.5, 0), (0, -180.1), (0, 181)],
    )
    def test_out_of_range(self, latitude: float, longitude: float) -> None:
        """Coordinates outside the valid ranges are rejected."""
        with pytest.raises(ValueError):
            GeoPoint(latitude=latitude, longitude=longitude)

    def test_boundaries(self) -> None:
        """Boundary coordinates are valid."""
        GeoPoint(latitude=90, longitude=-180)
        GeoPoint(latitude=-90, longitude=180)

    def test_zero_distance(self) -> None:
        """A point is zero distance from itself."""
        point = GeoPoint(latitude=52.52, longitude=13.405)
        assert point.distance_km(point) == 0

    def test_latitude_degree(self) -> None:
        """One degree of latitude is one degree of arc."""
        origin = GeoPoint(latitude=10, longitude=20)
        other = GeoPoint(latitude=11, longitude=20)
        assert origin.distance_km(other) == pytest.approx(KM_PER_DEGREE)
        assert KM_PER_DEGREE == pytest.approx(111.2, abs=0.1)

    def test_longitude_shrinks_with_latitude(self) -> None:
        """Longitude degrees are shorter away from the equator."""
        at_equator = GeoPoint(latitude=0, longitude=0).distance_km(GeoPoint(latitude=0, longitude=1))
        at_sixty = GeoPoint(latitude=60, longitude=0).distance_km(GeoPoint(latitude=60, longitude=1))
        assert at_sixty == pytest.approx(at_equator / 2, rel=1e-6)

    def test_city_distance(self) -> None:
        """Short distances are close to great-circle values."""
        berlin = GeoPoint(latitude=52.52, longitude=13.405)
        potsdam = GeoPoint(latitude=52.39, longitude=13.065)
        assert berlin.distance_km(potsdam) == pytest.approx(26.8, abs=1.0)

    def test_longitude_delta_wraps(self) -> None:
        """Longitude deltas take the short way around."""
        east = GeoPoint(latitude=0, longitude=179.5)
        west = GeoPoint(latitude=0, longitude=-179.5)
        assert east.longitude_delta(west) == pytest.approx(1.0)
        assert west.longitude_delta(east) == pytest.approx(-1.0)
        assert GeoPoint(latitude=0, longitude=10).longitude_delta(
            GeoPoint(latitude=0, longitude=-10)
        ) == pytest.approx(-20.0)

    def test_distance_across_antimeridian(self) -> None:
        """Points either side of the 180th meridian are close."""
        fiji_east = GeoPoint(latitude=-17.0, longitude=179.99)
        fiji_west = GeoPoint(latitude=-17.0, longitude=-179.99)
        assert fiji_west.distance_km(fiji_east) == pytest.approx(2.1, abs=0.1)
        assert fiji_east.distance_km(fiji_west) == pytest.approx(2.1, abs=0.1)

    def test_equality(self) -> None:
        """Points are compared by value."""
        assert GeoPoint(latitude=1, longitude=2) == GeoPoint(latitude=1.0, longitude=2.0)
