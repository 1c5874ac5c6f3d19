"""RoadBench File Adapter - Sharded Local Disk Cache.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import hashlib
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Set

from roadbench_core.store.backend import AdapterConfig, CacheAdapter

logger = logging.getLogger(__name__)


@dataclass
class FileAdapterConfig(AdapterConfig):
    """File adapter configuration.

    Attributes:
        hash_algorithm: hashlib algorithm naming the entry files
        shard_levels: Number of nested shard directories
        shard_width: Hex characters per shard directory name
        fsync: fsync every write before the rename
    """

    hash_algorithm: str = "sha256"
    shard_levels: int = 2
    shard_width: int = 2
    fsync: bool = False


class FileAdapter(CacheAdapter):
    """Embedded local disk cache, one file per entry.

    Each key is hashed; the leading hex characters of the digest select
    nested shard directories (two levels of two characters by default)
    and the full digest names the file. Writes go to a temp file that is
    renamed over the target, so a reader never sees a partial value.
    """

    name = "file"
    variant = "embedded local disk cache"
    config_class = FileAdapterConfig

    def __init__(self, config: AdapterConfig):
        super().__init__(config)
        self.base_path = Path(config.storage_root) / "entries"
        self._hash_algorithm = getattr(config, "hash_algorithm", "sha256")
        self._shard_levels = getattr(config, "shard_levels", 2)
        self._shard_width = getattr(config, "shard_width", 2)
        self._fsync = getattr(config, "fsync", False)
        self._known_dirs: Set[Path] = set()

    def _open(self) -> None:
        hashlib.new(self._hash_algorithm)
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _get_path(self, key: str) -> Path:
        """Get file path for key.

        Args:
            key: Cache key

        Returns:
            File path
        """
        digest = hashlib.new(self._hash_algorithm, key.encode("utf-8")).hexdigest()
        path = self.base_path
        for level in range(self._shard_levels):
            start = level * self._shard_width
            path = path / digest[start:start + self._shard_width]
        return path / digest

    def _put(self, key: str, value: str) -> None:
        path = self._get_path(key)
        shard_dir = path.parent
        if shard_dir not in self._known_dirs:
            shard_dir.mkdir(parents=True, exist_ok=True)
            self._known_dirs.add(shard_dir)

        temp_path = path.with_suffix(".tmp")
        try:
            with open(temp_path, "wb") as f:
                f.write(self._encode(value))
                if self._fsync:
                    f.flush()
                    os.fsync(f.fileno())
            os.replace(temp_path, path)
        except OSError:
            if temp_path.exists():
                temp_path.unlink()
            raise

    def _get(self, key: str) -> Optional[str]:
        try:
            with open(self._get_path(key), "rb") as f:
                return self._decode(f.read())
        except FileNotFoundError:
            return None

    def _close(self) -> None:
        self._known_dirs.clear()

    def disk_usage(self) -> int:
        """Get total bytes stored in entry files."""
        total = 0
        for root, _, files in os.walk(self.base_path):
            for name in files:
                total += os.path.getsize(os.path.join(root, name))
        return total

    def __repr__(self) -> str:
        return f"FileAdapter(path={self.base_path})"


__all__ = ["FileAdapter", "FileAdapterConfig"]
