"""Key-value store used for login challenges and sessions.

Two backends share one interface:

- ``MemoryStore``: process-local dict, the default for single-process deploys
  and tests.
- ``ValkeyStore``: Valkey/Redis via redis-py asyncio, for deploys that run more
  than one worker.

Values are JSON-serialized on the way in, so both backends compare and return
exactly the same shapes.
"""

from __future__ import annotations

import asyncio
import heapq
import json
import time
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Optional, Union
from urllib.parse import quote

from redis.asyncio import Redis

from stockresearch.core.config import Settings, get_settings
from stockresearch.core.exceptions import CacheError
from stockresearch.core.logging import get_logger

from .client import ValkeyConnection


logger = get_logger("cache.store")

# Key prefixes for namespacing
STORE_PREFIX = "stockresearch"
STORE_VERSION = "v1"

# Atomic check-and-delete
COMPARE_AND_DELETE_SCRIPT = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
else
    return 0
end
"""


def store_key(*parts: Union[str, int], prefix: str) -> str:
    """
    Build a namespaced key.

    Usage:
        store_key("bob@example.com", prefix="otp") -> "stockresearch:v1:otp:bob@example.com"
        store_key("a:b@example.com", prefix="otp") -> "stockresearch:v1:otp:a%3Ab@example.com"
    """
    # Percent-encoded: distinct parts always map to distinct keys
    sanitized = [quote(str(part), safe="@.+-_") for part in parts]
    return f"{STORE_PREFIX}:{STORE_VERSION}:{prefix}:{':'.join(sanitized)}"


def _serialize(value: Any) -> str:
    return json.dumps(value, default=str, sort_keys=True)


def _deserialize(value: str) -> Any:
    return json.loads(value)


class KeyValueStore(ABC):
    """Minimal keyed storage with per-key atomic operations."""

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Return the stored value or None."""

    @abstractmethod
    async def put(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """Store value under key, replacing any previous value."""

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete key. Returns True if something was removed."""

    @abstractmethod
    async def compare_and_delete(self, key: str, expected: Any) -> bool:
        """Delete key only if it still holds ``expected``."""

    async def healthcheck(self) -> bool:
        return True

    async def close(self) -> None:
        return None


class MemoryStore(KeyValueStore):
    """In-process store. TTLs are measured on a monotonic clock.

    Expired entries are dropped lazily on read and swept on every write, so
    keys that are never read again do not accumulate.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._data: dict[str, tuple[str, Optional[float]]] = {}
        # (deadline, key); stale pairs are skipped when popped
        self._deadlines: list[tuple[float, str]] = []

    def _live(self, key: str) -> Optional[str]:
        entry = self._data.get(key)
        if entry is None:
            return None
        raw, deadline = entry
        if deadline is not None and self._clock() >= deadline:
            del self._data[key]
            return None
        return raw

    def _sweep(self) -> None:
        now = self._clock()
        while self._deadlines and self._deadlines[0][0] <= now:
            deadline, key = heapq.heappop(self._deadlines)
            entry = self._data.get(key)
            if entry is not None and entry[1] == deadline:
                del self._data[key]

    async def get(self, key: str) -> Optional[Any]:
        raw = self._live(key)
        return None if raw is None else _deserialize(raw)

    async def put(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        self._sweep()
        deadline = self._clock() + ttl if ttl else None
        self._data[key] = (_serialize(value), deadline)
        if deadline is not None:
            heapq.heappush(self._deadlines, (deadline, key))

    async def delete(self, key: str) -> bool:
        present = self._live(key) is not None
        self._data.pop(key, None)
        return present

    async def compare_and_delete(self, key: str, expected: Any) -> bool:
        if self._live(key) != _serialize(expected):
            return False
        del self._data[key]
        return True

    def __len__(self) -> int:
        return sum(1 for key in list(self._data) if self._live(key) is not None)


class ValkeyStore(KeyValueStore):
    """Store backed by Valkey (Redis-compatible)."""

    def __init__(
        self,
        connection: Optional[ValkeyConnection] = None,
        client_factory: Optional[Callable[[], Awaitable[Redis]]] = None,
    ):
        self.connection = connection or ValkeyConnection.from_settings(get_settings())
        self._client_factory = client_factory or self.connection.client

    async def get(self, key: str) -> Optional[Any]:
        try:
            client = await self._client_factory()
            value = await client.get(key)
        except Exception as e:
            logger.error(f"Store get failed: {e}")
            raise CacheError() from e
        return None if value is None else _deserialize(value)

    async def put(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        try:
            client = await self._client_factory()
            await client.set(key, _serialize(value), ex=ttl)
        except Exception as e:
            logger.error(f"Store put failed: {e}")
            raise CacheError() from e

    async def delete(self, key: str) -> bool:
        try:
            client = await self._client_factory()
            return bool(await client.delete(key))
        except Exception as e:
            logger.error(f"Store delete failed: {e}")
            raise CacheError() from e

    async def compare_and_delete(self, key: str, expected: Any) -> bool:
        try:
            client = await self._client_factory()
            result = await client.eval(
                COMPARE_AND_DELETE_SCRIPT, 1, key, _serialize(expected)
            )
        except Exception as e:
            logger.error(f"Store compare-and-delete failed: {e}")
            raise CacheError() from e
        return bool(result)

    async def healthcheck(self) -> bool:
        try:
            client = await self._client_factory()
            return bool(await asyncio.wait_for(client.ping(), timeout=5.0))
        except Exception as e:
            logger.warning(f"Valkey healthcheck failed: {e}")
            return False

    async def close(self) -> None:
        await self.connection.close()


def create_store(settings: Settings) -> KeyValueStore:
    """Build the configured store backend."""
    if settings.store_backend == "valkey":
        logger.info("Using Valkey store", extra={"url": settings.valkey_url})
        return ValkeyStore(ValkeyConnection.from_settings(settings))
    logger.info("Using in-memory store")
    return MemoryStore()
