"""Valkey connection handling for the store."""

from __future__ import annotations

import asyncio

from redis.asyncio import ConnectionPool, Redis

from stockresearch.core.config import Settings
from stockresearch.core.logging import get_logger


logger = get_logger("cache.client")


class ValkeyConnection:
    """
    Lazily opened Valkey client.

    redis-py pools are bound to the event loop that created them, so one
    client is kept per running loop.
    """

    def __init__(self, url: str, max_connections: int = 10, timeout: float = 5.0):
        self.url = url
        self.max_connections = max_connections
        self.timeout = timeout
        self._clients: dict[int, Redis] = {}

    @classmethod
    def from_settings(cls, settings: Settings) -> ValkeyConnection:
        return cls(settings.valkey_url, max_connections=settings.valkey_max_connections)

    @staticmethod
    def _loop_id() -> int:
        try:
            return id(asyncio.get_running_loop())
        except RuntimeError:
            return 0

    async def client(self) -> Redis:
        loop_id = self._loop_id()
        if loop_id not in self._clients:
            pool = ConnectionPool.from_url(
                self.url,
                max_connections=self.max_connections,
                decode_responses=True,
                socket_timeout=self.timeout,
                socket_connect_timeout=self.timeout,
                retry_on_timeout=True,
                health_check_interval=30,
            )
            self._clients[loop_id] = Redis(connection_pool=pool)
            logger.info(
                "Valkey pool opened",
                extra={"loop_id": loop_id, "max_connections": self.max_connections},
            )
        return self._clients[loop_id]

    async def close(self) -> None:
        """Close this loop's client and its pool. No-op if never opened."""
        client = self._clients.pop(self._loop_id(), None)
        if client is None:
            return
        await client.aclose()
        await client.connection_pool.disconnect()
        logger.info("Valkey pool closed")
