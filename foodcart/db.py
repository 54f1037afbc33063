"""
Storage Module - Upstash Redis client

Provides a lazily created async Upstash Redis client used as the durable
key-value store for cart snapshots and the user's saved location.
"""

from typing import Optional

from upstash_redis.asyncio import Redis as AsyncRedis

from foodcart import config
from foodcart.errors import ERROR_STORAGE_NOT_CONFIGURED


_redis_client: Optional[AsyncRedis] = None


def get_redis() -> AsyncRedis:
    """
    Get async Upstash Redis client (singleton).

    Uses standard Upstash env var names:
    - UPSTASH_REDIS_REST_URL
    - UPSTASH_REDIS_REST_TOKEN
    """
    global _redis_client

    if _redis_client is None:
        if not config.UPSTASH_REDIS_REST_URL or not config.UPSTASH_REDIS_REST_TOKEN:
            raise ValueError(ERROR_STORAGE_NOT_CONFIGURED)
        _redis_client = AsyncRedis(
            url=config.UPSTASH_REDIS_REST_URL,
            token=config.UPSTASH_REDIS_REST_TOKEN,
        )

    return _redis_client


class RedisKeys:
    """Redis keys for persisted client state."""

    CART = "food_ordering:cart"  # food_ordering:cart[:{owner_id}]
    LOCATION = "food_ordering:location"  # food_ordering:location[:{owner_id}]

    @staticmethod
    def cart_key(owner_id: Optional[str] = None) -> str:
        if owner_id is None:
            return RedisKeys.CART
        return f"{RedisKeys.CART}:{owner_id}"

    @staticmethod
    def location_key(owner_id: Optional[str] = None) -> str:
        if owner_id is None:
            return RedisKeys.LOCATION
        return f"{RedisKeys.LOCATION}:{owner_id}"


class TTL:
    """Time-to-live constants for Redis keys (seconds)."""

    CART = config.CART_TTL_SECONDS
    LOCATION = None  # saved location never expires
