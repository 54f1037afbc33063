"""Location package: distance math and the user's current position."""
from .distance import haversine_km, km_to_miles, round_distance
from .service import DEFAULT_LOCATION, LocationManager

__all__ = [
    "haversine_km",
    "km_to_miles",
    "round_distance",
    "DEFAULT_LOCATION",
    "LocationManager",
]
