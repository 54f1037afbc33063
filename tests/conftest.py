"""Pytest configuration and fixtures"""
import asyncio
import math

import pytest

from foodcart.cart import LineItem
from foodcart.location import LocationManager
from foodcart.location.distance import EARTH_RADIUS_KM
from foodcart.models import Coordinates, Restaurant


class FakeRedis:
    """In-memory stand-in for the async Upstash client."""

    def __init__(self, data=None):
        self.data = dict(data or {})
        self.set_calls = []
        self.deleted = []

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value, ex=None):
        self.set_calls.append((key, value, ex))
        self.data[key] = value
        return True

    async def delete(self, key):
        self.deleted.append(key)
        return 1 if self.data.pop(key, None) is not None else 0


class SlowRedis(FakeRedis):
    """FakeRedis whose writes take ``delay`` seconds to land."""

    def __init__(self, delay=0.1):
        super().__init__()
        self.delay = delay
        self.started = 0
        self.done = 0

    async def set(self, key, value, ex=None):
        self.started += 1
        await asyncio.sleep(self.delay)
        await super().set(key, value, ex=ex)
        self.done += 1
        return True


def km_north(origin: Coordinates, km: float) -> Coordinates:
    """Point ``km`` kilometers due north of ``origin`` along its meridian."""
    return Coordinates(
        latitude=origin.latitude + math.degrees(km / EARTH_RADIUS_KM),
        longitude=origin.longitude,
    )


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def slow_redis():
    return SlowRedis(delay=0.1)


@pytest.fixture
def restaurant_location():
    return Coordinates(latitude=29.9725, longitude=30.9432)


@pytest.fixture
def restaurant(restaurant_location):
    """Sample restaurant record"""
    return Restaurant(
        id="rest-a",
        name="Pyramids Grill",
        image="https://img.example/rest-a.jpg",
        location=restaurant_location,
        estimated_delivery_time=25,
    )


@pytest.fixture
def other_restaurant(restaurant_location):
    return Restaurant(
        id="rest-b",
        name="Nile Noodles",
        location=km_north(restaurant_location, 1),
        estimated_delivery_time=30,
    )


@pytest.fixture
def user_5km(restaurant_location):
    return km_north(restaurant_location, 5)


@pytest.fixture
def user_nearby(restaurant_location):
    return km_north(restaurant_location, 1.5)


@pytest.fixture
def burger():
    return LineItem(id="burger", price=10, name="Burger", options={"size": "large", "sauce": "bbq"})


@pytest.fixture
def fries():
    return LineItem(id="fries", price="3.50", quantity=2, name="Fries")


@pytest.fixture
def location_manager():
    return LocationManager()


@pytest.fixture(name="km_north")
def km_north_fixture():
    return km_north
