"""RoadBench DiskCache Adapter - SQLite-Indexed Disk Cache.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from roadbench_core.store.backend import AdapterConfig, CacheAdapter

logger = logging.getLogger(__name__)

DEFAULT_SIZE_LIMIT = 2 ** 30


@dataclass
class DiskCacheAdapterConfig(AdapterConfig):
    """DiskCache adapter configuration.

    Attributes:
        shards: Use a FanoutCache with this many shards when > 1
        statistics: Enable diskcache hit/miss statistics
    """

    shards: int = 1
    statistics: bool = False


class DiskCacheAdapter(CacheAdapter):
    """Embedded disk cache backed by the ``diskcache`` package.

    Eviction is disabled and the size limit is raised above the expected
    payload volume so a populated trial keeps every entry.
    """

    name = "diskcache"
    variant = "embedded local disk cache"
    requires = ("diskcache",)
    config_class = DiskCacheAdapterConfig
    encodes_values = False

    def __init__(self, config: AdapterConfig):
        super().__init__(config)
        self._cache: Optional[Any] = None

    def _open(self) -> None:
        try:
            import diskcache
        except ImportError:
            raise ImportError("diskcache package not installed. Run: pip install diskcache")

        settings = {
            "eviction_policy": "none",
            "size_limit": max(DEFAULT_SIZE_LIMIT, self.config.estimated_bytes * 2),
            "statistics": getattr(self.config, "statistics", False),
        }
        directory = str(self.config.storage_root / "diskcache")
        shards = getattr(self.config, "shards", 1)
        if shards > 1:
            self._cache = diskcache.FanoutCache(directory, shards=shards, **settings)
        else:
            self._cache = diskcache.Cache(directory, **settings)

    def _put(self, key: str, value: str) -> None:
        self._cache.set(key, value)

    def _get(self, key: str) -> Optional[str]:
        return self._cache.get(key)

    def _close(self) -> None:
        if self._cache is not None:
            self._cache.close()
            self._cache = None


__all__ = ["DiskCacheAdapter", "DiskCacheAdapterConfig"]
