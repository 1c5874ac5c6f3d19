"""RoadBench DBM Adapter - Persisted Hash Map.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import dbm
import logging
from typing import Any, Optional

from roadbench_core.store.backend import AdapterConfig, CacheAdapter

logger = logging.getLogger(__name__)


class DBMAdapter(CacheAdapter):
    """Persisted hash map on the interpreter's ``dbm`` engine.

    The table lives outside the Python heap in whichever dbm flavour the
    interpreter provides (gdbm, ndbm, sqlite3 or dumb). ``commit()`` calls
    the engine's ``sync()`` where it has one.
    """

    name = "dbm"
    variant = "off-heap persisted hash map"

    def __init__(self, config: AdapterConfig):
        super().__init__(config)
        self._db: Optional[Any] = None

    def _open(self) -> None:
        path = self.config.storage_root / "cache"
        self._db = dbm.open(str(path), "n")
        logger.debug(f"dbm flavour {dbm.whichdb(str(path))} at {path}")

    def _put(self, key: str, value: str) -> None:
        self._db[key] = self._encode(value)

    def _get(self, key: str) -> Optional[str]:
        return self._decode(self._db.get(key))

    def _commit(self) -> None:
        sync = getattr(self._db, "sync", None)
        if sync is not None:
            sync()

    def _close(self) -> None:
        if self._db is not None:
            self._db.close()
            self._db = None


__all__ = ["DBMAdapter"]
