"""RoadBench Memory Adapter - In-Process Bounded Cache.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Optional

from roadbench_core.store.backend import AdapterConfig, CacheAdapter

logger = logging.getLogger(__name__)


class BoundedLRUCache:
    """Size-bounded map with least-recently-used eviction.

    Uses an OrderedDict for O(1) get, put and eviction. Thread-safe with
    RLock, like the concurrent in-process caches it stands in for.

    Example:
        cache = BoundedLRUCache(max_size=2)
        cache.put("a", "1")
        cache.put("b", "2")
        cache.get("a")
        cache.put("c", "3")   # evicts "b"
    """

    def __init__(self, max_size: int = 10000):
        """Initialize cache.

        Args:
            max_size: Maximum entries
        """
        if max_size < 1:
            raise ValueError(f"max_size must be positive, got {max_size}")
        self.max_size = max_size
        self._data: "OrderedDict[str, str]" = OrderedDict()
        self._lock = threading.RLock()
        self._evictions = 0

    def get(self, key: str) -> Optional[str]:
        """Get value and mark it most recently used.

        Args:
            key: Cache key

        Returns:
            Value or None
        """
        with self._lock:
            value = self._data.get(key)
            if value is not None:
                self._data.move_to_end(key)
            return value

    def put(self, key: str, value: str) -> None:
        """Store value, evicting the LRU entry when over capacity.

        Args:
            key: Cache key
            value: Value
        """
        with self._lock:
            self._data[key] = value
            self._data.move_to_end(key)
            if len(self._data) > self.max_size:
                self._data.popitem(last=False)
                self._evictions += 1

    def peek_lru(self) -> Optional[str]:
        """Peek at LRU key without evicting."""
        with self._lock:
            if not self._data:
                return None
            return next(iter(self._data))

    @property
    def evictions(self) -> int:
        return self._evictions

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"BoundedLRUCache(size={len(self._data)}, max={self.max_size})"


@dataclass
class MemoryAdapterConfig(AdapterConfig):
    """Memory adapter configuration.

    Attributes:
        max_size: Entry bound; defaults to twice the expected entry count
    """

    max_size: Optional[int] = None


class MemoryAdapter(CacheAdapter):
    """In-process bounded cache.

    Sized at twice the entry count so a populated trial never evicts.
    Nothing touches the filesystem.
    """

    name = "memory"
    variant = "in-process bounded cache"
    persistent = False
    config_class = MemoryAdapterConfig
    encodes_values = False

    def __init__(self, config: AdapterConfig):
        super().__init__(config)
        self._cache: Optional[BoundedLRUCache] = None

    def _open(self) -> None:
        max_size = getattr(self.config, "max_size", None) or max(self.config.entry_count * 2, 1)
        self._cache = BoundedLRUCache(max_size=max_size)

    def _put(self, key: str, value: str) -> None:
        self._cache.put(key, value)

    def _get(self, key: str) -> Optional[str]:
        return self._cache.get(key)

    def _close(self) -> None:
        if self._cache is not None:
            if self._cache.evictions:
                logger.debug(f"memory backend evicted {self._cache.evictions} entries")
            self._cache.clear()
            self._cache = None


__all__ = ["BoundedLRUCache", "MemoryAdapter", "MemoryAdapterConfig"]
