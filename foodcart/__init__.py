"""
foodcart - cart state machine and delivery pricing for the food-ordering client

This package contains:
- cart: line items, reducer, pricing, persistence, controller
- location: haversine distance and the user's current position
- models: pydantic boundary records (Coordinates, Restaurant)
- db: Upstash Redis client for durable storage

Note: Imports are lazy so that pure helpers (pricing, reducer) can be
imported without touching storage configuration.
"""

__all__ = [
    "CartController",
    "CartPersistence",
    "LocationManager",
    "Coordinates",
    "Restaurant",
    "LineItem",
]


def __getattr__(name):
    """Lazy attribute access."""
    if name in ("CartController", "CartPersistence", "LineItem"):
        from foodcart import cart
        return getattr(cart, name)
    elif name == "LocationManager":
        from foodcart.location import LocationManager
        return LocationManager
    elif name in ("Coordinates", "Restaurant"):
        from foodcart import models
        return getattr(models, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
