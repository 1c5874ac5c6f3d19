"""RoadBench LevelDB Adapter - Log-Structured Store.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from roadbench_core.store.backend import AdapterConfig, CacheAdapter

logger = logging.getLogger(__name__)


@dataclass
class LevelDBAdapterConfig(AdapterConfig):
    """LevelDB adapter configuration.

    Attributes:
        write_buffer_size: Memtable size in bytes
        sync_commit: Force a synced marker write on commit
    """

    write_buffer_size: int = 4 * 1024 * 1024
    sync_commit: bool = True


class LevelDBAdapter(CacheAdapter):
    """Log-structured merge-tree store on LevelDB via ``plyvel``.

    Puts land in the write-ahead log and memtable unsynced; ``commit()``
    issues one synced write so everything before it is on disk.
    """

    name = "leveldb"
    variant = "log-structured store"
    requires = ("plyvel",)
    config_class = LevelDBAdapterConfig

    COMMIT_MARKER = b"\x00roadbench:commit"

    def __init__(self, config: AdapterConfig):
        super().__init__(config)
        self._db: Optional[Any] = None

    def _open(self) -> None:
        try:
            import plyvel
        except ImportError:
            raise ImportError("plyvel package not installed. Run: pip install plyvel")

        path = self.config.storage_root / "leveldb"
        self._db = plyvel.DB(
            str(path),
            create_if_missing=True,
            error_if_exists=True,
            write_buffer_size=getattr(self.config, "write_buffer_size", 4 * 1024 * 1024),
        )

    def _put(self, key: str, value: str) -> None:
        self._db.put(key.encode("utf-8"), self._encode(value))

    def _get(self, key: str) -> Optional[str]:
        return self._decode(self._db.get(key.encode("utf-8")))

    def _commit(self) -> None:
        if getattr(self.config, "sync_commit", True):
            self._db.put(self.COMMIT_MARKER, b"", sync=True)

    def _close(self) -> None:
        if self._db is not None:
            self._db.close()
            self._db = None


__all__ = ["LevelDBAdapter", "LevelDBAdapterConfig"]
