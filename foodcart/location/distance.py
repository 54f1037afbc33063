"""Great-circle distance helpers."""
import math

from foodcart.models import Coordinates

# Mean Earth radius in kilometers
EARTH_RADIUS_KM = 6371

KM_TO_MILES = 0.621371


def haversine_km(a: Coordinates, b: Coordinates) -> float:
    """
    Great-circle distance between two points using the haversine formula.

    Both points must be present; callers handle missing locations.

    Returns:
        Distance in kilometers (unrounded)
    """
    lat1, lon1 = math.radians(a.latitude), math.radians(a.longitude)
    lat2, lon2 = math.radians(b.latitude), math.radians(b.longitude)

    dlat = lat2 - lat1
    dlon = lon2 - lon1
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))

    return EARTH_RADIUS_KM * c


def round_distance(km: float) -> float:
    """Round a distance to one decimal for display."""
    return round(km, 1)


def km_to_miles(km: float) -> float:
    return round(km * KM_TO_MILES, 1)
