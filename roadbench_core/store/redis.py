"""RoadBench Redis Adapter - Remote In-Memory Store.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from roadbench_core.store.backend import AdapterConfig, CacheAdapter

logger = logging.getLogger(__name__)


@dataclass
class RedisAdapterConfig(AdapterConfig):
    """Redis-specific configuration.

    Attributes:
        host: Redis host
        port: Redis port
        db: Redis database number
        password: Redis password
        socket_timeout: Socket timeout
        socket_connect_timeout: Connection timeout
        prefix: Key prefix; the storage root name is appended per trial
    """

    host: str = "localhost"
    port: int = 6379
    db: int = 0
    password: Optional[str] = None
    socket_timeout: float = 5.0
    socket_connect_timeout: float = 5.0
    prefix: str = "roadbench:"


class RedisAdapter(CacheAdapter):
    """Redis server used as a cache backend.

    Keys are namespaced with a trial-unique prefix and removed again on
    close. Opt-in only: a sweep includes it when named explicitly, since
    it needs a running server.
    """

    name = "redis"
    variant = "remote in-memory store"
    persistent = False
    default_enabled = False
    requires = ("redis",)
    config_class = RedisAdapterConfig

    def __init__(self, config: AdapterConfig):
        super().__init__(config)
        self._client: Optional[Any] = None
        self._pool: Optional[Any] = None
        base = getattr(config, "prefix", "roadbench:")
        self.key_prefix = f"{base}{self.config.storage_root.name}:"

    def _connect(self) -> Any:
        """Create the connection pool and client.

        Returns:
            Redis client
        """
        try:
            import redis
        except ImportError:
            raise ImportError("Redis package not installed. Run: pip install redis")

        self._pool = redis.ConnectionPool(
            host=getattr(self.config, "host", "localhost"),
            port=getattr(self.config, "port", 6379),
            db=getattr(self.config, "db", 0),
            password=getattr(self.config, "password", None),
            socket_timeout=getattr(self.config, "socket_timeout", 5.0),
            socket_connect_timeout=getattr(self.config, "socket_connect_timeout", 5.0),
            decode_responses=False,
        )
        return redis.Redis(connection_pool=self._pool)

    def _open(self) -> None:
        self._client = self._connect()
        self._client.ping()
        logger.info(f"Connected to Redis, key prefix {self.key_prefix}")

    def _make_key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    def _put(self, key: str, value: str) -> None:
        self._client.set(self._make_key(key), self._encode(value))

    def _get(self, key: str) -> Optional[str]:
        return self._decode(self._client.get(self._make_key(key)))

    def clear(self) -> int:
        """Delete every key under this adapter's prefix.

        Returns:
            Number deleted
        """
        count = 0
        cursor = 0
        pattern = f"{self.key_prefix}*"
        while True:
            cursor, keys = self._client.scan(cursor, match=pattern, count=1000)
            if keys:
                count += self._client.delete(*keys)
            if cursor == 0:
                break
        return count

    def _close(self) -> None:
        try:
            if self._client is not None:
                removed = self.clear()
                logger.debug(f"Removed {removed} keys under {self.key_prefix}")
        finally:
            if self._pool is not None:
                self._pool.disconnect()
            self._pool = None
            self._client = None


__all__ = ["RedisAdapter", "RedisAdapterConfig"]
