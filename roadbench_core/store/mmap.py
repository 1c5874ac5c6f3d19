"""RoadBench LMDB Adapter - Memory-Mapped Map.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from roadbench_core.store.backend import AdapterConfig, CacheAdapter

logger = logging.getLogger(__name__)

PAGE_SIZE = 4096

# Bytes LMDB adds to every stored entry (node header)
NODE_OVERHEAD = 16

# Copies of the data the map must hold across back-to-back rewrites
MAP_COPIES = 6


@dataclass
class LMDBAdapterConfig(AdapterConfig):
    """LMDB adapter configuration.

    Attributes:
        min_map_size: Lower bound for the memory map size in bytes
        writemap: Write through the shared memory map
        sync: fsync on commit
    """

    min_map_size: int = 64 * 1024 * 1024
    writemap: bool = True
    sync: bool = True


class LMDBAdapter(CacheAdapter):
    """Memory-mapped, file-backed map on top of LMDB.

    Puts accumulate in one write transaction that ``commit()`` makes
    durable; gets issued while that transaction is open read through it,
    so the last write to a key is always visible.

    A failed put or get aborts the open transaction, so the handle stays
    usable for the next pass. A put that runs out of map space also
    doubles the map before the error propagates.
    """

    name = "lmdb"
    variant = "memory-mapped file-backed map"
    requires = ("lmdb",)
    config_class = LMDBAdapterConfig

    def __init__(self, config: AdapterConfig):
        super().__init__(config)
        self._lmdb: Optional[Any] = None
        self._env: Optional[Any] = None
        self._txn: Optional[Any] = None

    def map_size(self) -> int:
        """Map size sized from the trial's hints.

        Each entry is rounded up to whole pages plus one page for its
        share of the tree. A rewrite cannot reuse pages freed by the
        previous commit, so the map holds several copies of the data.
        The map is sparse, so unused headroom costs no disk.
        """
        entry_bytes = self.config.average_key_size + self.config.average_value_size + NODE_OVERHEAD
        pages = -(-entry_bytes // PAGE_SIZE) + 1
        estimate = self.config.entry_count * pages * PAGE_SIZE * MAP_COPIES
        return max(getattr(self.config, "min_map_size", 0), estimate)

    def _open(self) -> None:
        try:
            import lmdb
        except ImportError:
            raise ImportError("lmdb package not installed. Run: pip install lmdb")

        self._lmdb = lmdb
        path = self.config.storage_root / "lmdb"
        path.mkdir(parents=True, exist_ok=True)
        self._env = lmdb.open(
            str(path),
            map_size=self.map_size(),
            writemap=getattr(self.config, "writemap", True),
            sync=getattr(self.config, "sync", True),
            max_dbs=0,
        )

    def _put(self, key: str, value: str) -> None:
        if self._txn is None:
            self._txn = self._env.begin(write=True)
        try:
            self._txn.put(key.encode("utf-8"), self._encode(value))
        except Exception as e:
            self._abort()
            if isinstance(e, self._lmdb.MapFullError):
                self._grow_map()
            raise

    def _get(self, key: str) -> Optional[str]:
        if self._txn is not None:
            try:
                return self._decode(self._txn.get(key.encode("utf-8")))
            except Exception:
                self._abort()
                raise
        with self._env.begin() as txn:
            return self._decode(txn.get(key.encode("utf-8")))

    def _commit(self) -> None:
        if self._txn is not None:
            txn, self._txn = self._txn, None
            txn.commit()

    def _abort(self) -> None:
        """Discard the open write transaction, if any."""
        if self._txn is None:
            return
        txn, self._txn = self._txn, None
        try:
            txn.abort()
        except self._lmdb.Error as e:
            logger.debug(f"lmdb abort after failure: {e}")

    def _grow_map(self) -> None:
        current = self._env.info()["map_size"]
        self._env.set_mapsize(current * 2)
        logger.warning(f"lmdb map full at {current} bytes, grown to {current * 2}")

    def _close(self) -> None:
        if self._env is None:
            return
        try:
            self._commit()
        finally:
            self._abort()
            self._env.close()
            self._env = None

    def entry_count(self) -> int:
        """Number of committed entries."""
        return self._env.stat()["entries"]


__all__ = ["LMDBAdapter", "LMDBAdapterConfig"]
