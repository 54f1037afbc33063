"""User location holder with change notifications and persistence."""
import json
from typing import Any, Callable, List, Optional

from foodcart.db import RedisKeys, TTL
from foodcart.errors import (
    ERROR_INVALID_UNIT,
    ERROR_LOCATION_CLEAR_FAILED,
    ERROR_LOCATION_LISTENER_FAILED,
    ERROR_LOCATION_LOAD_FAILED,
    ERROR_LOCATION_SAVE_FAILED,
)
from foodcart.logging import get_logger
from foodcart.models import Coordinates

from .distance import haversine_km, km_to_miles, round_distance

logger = get_logger(__name__)

LocationListener = Callable[[Optional[Coordinates]], None]

DEFAULT_LOCATION = Coordinates(latitude=25.7617, longitude=-80.1918)
DEFAULT_ADDRESS = "Miami, FL"
CUSTOM_ADDRESS = "Custom Location"


class LocationManager:
    """
    Holds the user's current position and address label.

    Geocoding and permission prompts live outside this class: callers hand
    in coordinates they already resolved. Subscribers are called
    synchronously, in subscription order, whenever the coordinates change.

    Persistence is optional; pass an async Redis-like client to keep the last
    chosen location across sessions.
    """

    def __init__(self, redis: Any = None, key: Optional[str] = None):
        self._redis = redis
        self._key = key or RedisKeys.location_key()
        self._location: Optional[Coordinates] = None
        self._address = ""
        self._listeners: List[LocationListener] = []

    @property
    def location(self) -> Optional[Coordinates]:
        return self._location

    @property
    def address(self) -> str:
        return self._address

    @property
    def has_location(self) -> bool:
        return self._location is not None

    def subscribe(self, listener: LocationListener) -> Callable[[], None]:
        """Register a change listener; returns a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def load(self) -> bool:
        """Restore the saved location. Returns True if one was found."""
        if self._redis is None:
            return False
        try:
            raw = await self._redis.get(self._key)
            if not raw:
                return False
            data = json.loads(raw)
            coords = Coordinates.model_validate(data["location"])
            self._apply(coords, str(data.get("address") or ""))
            return True
        except Exception as e:
            logger.warning(f"{ERROR_LOCATION_LOAD_FAILED}: {e}")
            return False

    async def set_location(self, coords: Coordinates, address: str = CUSTOM_ADDRESS) -> None:
        """Set coordinates resolved elsewhere (GPS fix or geocoded address)."""
        self._apply(coords, address)
        await self._save()

    async def use_default_location(self) -> None:
        await self.set_location(DEFAULT_LOCATION, DEFAULT_ADDRESS)

    async def clear_location(self) -> None:
        self._apply(None, "")
        if self._redis is None:
            return
        try:
            await self._redis.delete(self._key)
        except Exception as e:
            logger.error(f"{ERROR_LOCATION_CLEAR_FAILED}: {e}")

    def get_distance_to(self, lat: float, lng: float, unit: str = "km") -> Optional[float]:
        """Distance from the current location, rounded to 0.1; None without a location."""
        if unit not in ("km", "miles"):
            raise ValueError(ERROR_INVALID_UNIT)
        if self._location is None:
            return None

        distance = round_distance(haversine_km(self._location, Coordinates(latitude=lat, longitude=lng)))
        return km_to_miles(distance) if unit == "miles" else distance

    def _apply(self, coords: Optional[Coordinates], address: str) -> None:
        changed = coords != self._location
        self._location = coords
        self._address = address
        if changed:
            self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._location)
            except Exception as e:
                logger.error(f"{ERROR_LOCATION_LISTENER_FAILED}: {e}", exc_info=True)

    async def _save(self) -> None:
        if self._redis is None or self._location is None:
            return
        payload = {
            "location": {"latitude": self._location.latitude, "longitude": self._location.longitude},
            "address": self._address,
        }
        try:
            await self._redis.set(self._key, json.dumps(payload), ex=TTL.LOCATION)
        except Exception as e:
            logger.error(f"{ERROR_LOCATION_SAVE_FAILED}: {e}")
