"""
Tests for great-circle distance helpers
"""

import pytest

from foodcart.location.distance import haversine_km, km_to_miles, round_distance
from foodcart.models import Coordinates


CAIRO = Coordinates(latitude=30.0444, longitude=31.2357)
GIZA = Coordinates(latitude=29.9773, longitude=31.1325)
MIAMI = Coordinates(latitude=25.7617, longitude=-80.1918)
LONDON = Coordinates(latitude=51.5074, longitude=-0.1278)


class TestHaversine:
    """Tests for haversine_km."""

    @pytest.mark.parametrize("a,b", [(CAIRO, GIZA), (MIAMI, LONDON), (LONDON, CAIRO)])
    def test_symmetric(self, a, b):
        assert haversine_km(a, b) == haversine_km(b, a)

    @pytest.mark.parametrize("point", [CAIRO, MIAMI, LONDON])
    def test_same_point_is_zero(self, point):
        assert haversine_km(point, point) == 0

    def test_known_distance(self):
        """Miami to London is roughly 7,120 km."""
        assert haversine_km(MIAMI, LONDON) == pytest.approx(7120, rel=0.01)

    def test_meridian_distance(self, km_north):
        """A point moved along a meridian is exactly that far away."""
        assert haversine_km(CAIRO, km_north(CAIRO, 5)) == pytest.approx(5, abs=1e-9)


class TestDistanceFormatting:
    """Tests for display helpers."""

    def test_round_distance(self):
        assert round_distance(12.3456) == 12.3

    def test_km_to_miles(self):
        assert km_to_miles(10) == 6.2
