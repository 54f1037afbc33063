"""
Cart persistence - one-shot loader and debounced writer.

Snapshots are stored as JSON under a single key. Saves are coalesced: each
new state cancels the pending write and restarts the quiescence window, so
only the latest state of a burst reaches storage. Storage errors are logged
and swallowed; a failed save is retried by the next mutation.
"""
import asyncio
import json
from typing import Any, Optional, Set

from foodcart import config
from foodcart.db import RedisKeys, TTL, get_redis
from foodcart.errors import (
    ERROR_CART_CORRUPTED,
    ERROR_CART_LOAD_FAILED,
    ERROR_CART_SAVE_FAILED,
    ERROR_CART_SAVE_NO_LOOP,
    ERROR_CART_SCHEMA_UNSUPPORTED,
    ERROR_STORAGE_UNAVAILABLE,
)
from foodcart.logging import get_logger

from .models import CartState

logger = get_logger(__name__)

SCHEMA_VERSION = 1


class UnsupportedSnapshotError(ValueError):
    """Snapshot written by a newer schema than this build understands."""


def dump_snapshot(state: CartState) -> str:
    """Serialize a cart state with its schema version."""
    return json.dumps({"schema_version": SCHEMA_VERSION, **state.to_dict()})


def parse_snapshot(raw: str) -> CartState:
    """
    Parse a stored snapshot.

    Snapshots written before versioning have no schema_version and are read
    as version 1.

    Raises:
        UnsupportedSnapshotError: snapshot is from a newer schema
        ValueError, KeyError, TypeError, ArithmeticError: snapshot is corrupted
    """
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise TypeError("snapshot must be a JSON object")
    version = int(data.get("schema_version", 1))
    if version > SCHEMA_VERSION:
        raise UnsupportedSnapshotError(f"{ERROR_CART_SCHEMA_UNSUPPORTED}: {version}")
    return CartState.from_dict(data)


class CartPersistence:
    """
    Loads and saves cart snapshots through an async Redis-like client.

    Any object with async ``get``, ``set(key, value, ex=...)`` and ``delete``
    works; by default the Upstash client from foodcart.db is used.
    """

    def __init__(
        self,
        redis: Any = None,
        key: Optional[str] = None,
        debounce_seconds: Optional[float] = None,
        ttl: Optional[int] = TTL.CART,
    ):
        self._redis = redis  # Lazy initialization
        self.key = key or RedisKeys.cart_key()
        if debounce_seconds is None:
            debounce_seconds = config.CART_SAVE_DEBOUNCE_MS / 1000
        self.debounce_seconds = debounce_seconds
        self.ttl = ttl
        self._pending: Optional[asyncio.Task] = None
        self._pending_state: Optional[CartState] = None
        self._in_flight: Set[asyncio.Task] = set()

    @property
    def redis(self):
        """Get Redis client (lazy initialization)."""
        if self._redis is None:
            try:
                self._redis = get_redis()
            except ValueError as e:
                raise ValueError(f"{ERROR_STORAGE_UNAVAILABLE}: {e}")
        return self._redis

    @property
    def has_pending_save(self) -> bool:
        """True while a write is waiting out the window or still in flight."""
        return bool(self._in_flight) or (self._pending is not None and not self._pending.done())

    async def load(self) -> Optional[CartState]:
        """Read the stored snapshot; None when absent or unreadable."""
        try:
            raw = await self.redis.get(self.key)
        except Exception as e:
            logger.error(f"{ERROR_CART_LOAD_FAILED}: {e}")
            return None

        if not raw:
            return None

        try:
            return parse_snapshot(raw)
        except UnsupportedSnapshotError as e:
            # Left in place for the newer build that wrote it
            logger.warning(f"{ERROR_CART_LOAD_FAILED}: {e}")
            return None
        except (ValueError, KeyError, TypeError, ArithmeticError) as e:
            logger.warning(f"{ERROR_CART_CORRUPTED}: {e}")

        await self._discard()
        return None

    def schedule_save(self, state: CartState) -> None:
        """Write ``state`` after the debounce window, superseding any pending write."""
        if state.is_loading:
            # Never clobber the stored cart before it has been read
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(ERROR_CART_SAVE_NO_LOOP)
            return

        self.cancel()
        self._pending_state = state
        self._pending = loop.create_task(self._save_later(state))

    def cancel(self) -> None:
        """Drop the pending write, if any. A write already in flight still completes."""
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None
        self._pending_state = None

    async def flush(self) -> None:
        """Write the pending state now and wait for writes already in flight."""
        state = self._pending_state if self._pending is not None and not self._pending.done() else None
        self.cancel()
        if self._in_flight:
            await asyncio.gather(*self._in_flight)
        if state is not None:
            await self.save(state)

    async def save(self, state: CartState) -> bool:
        """Write a snapshot immediately. Returns False when the write failed."""
        try:
            await self.redis.set(self.key, dump_snapshot(state), ex=self.ttl)
            return True
        except Exception as e:
            logger.error(f"{ERROR_CART_SAVE_FAILED}: {e}")
            return False

    async def _save_later(self, state: CartState) -> None:
        await asyncio.sleep(self.debounce_seconds)
        # Past the window the write is no longer cancellable
        task = asyncio.current_task()
        self._pending = None
        self._pending_state = None
        self._in_flight.add(task)
        try:
            await self.save(state)
        finally:
            self._in_flight.discard(task)

    async def _discard(self) -> None:
        try:
            await self.redis.delete(self.key)
        except Exception as e:
            logger.error(f"{ERROR_CART_LOAD_FAILED}: {e}")
