"""Store module - Cache adapters for the benchmarked engines."""

from roadbench_core.store.backend import (
    AdapterConfig,
    CacheAdapter,
)
from roadbench_core.store.memory import BoundedLRUCache, MemoryAdapter, MemoryAdapterConfig
from roadbench_core.store.file import FileAdapter, FileAdapterConfig
from roadbench_core.store.disk import DiskCacheAdapter, DiskCacheAdapterConfig
from roadbench_core.store.mmap import LMDBAdapter, LMDBAdapterConfig
from roadbench_core.store.hashmap import DBMAdapter
from roadbench_core.store.lsm import LevelDBAdapter, LevelDBAdapterConfig
from roadbench_core.store.redis import RedisAdapter, RedisAdapterConfig
from roadbench_core.store.registry import (
    AdapterRegistry,
    get_registry,
    register_adapter,
    resolve_adapter,
)

__all__ = [
    "AdapterConfig",
    "CacheAdapter",
    "BoundedLRUCache",
    "MemoryAdapter",
    "MemoryAdapterConfig",
    "FileAdapter",
    "FileAdapterConfig",
    "DiskCacheAdapter",
    "DiskCacheAdapterConfig",
    "LMDBAdapter",
    "LMDBAdapterConfig",
    "DBMAdapter",
    "LevelDBAdapter",
    "LevelDBAdapterConfig",
    "RedisAdapter",
    "RedisAdapterConfig",
    "AdapterRegistry",
    "get_registry",
    "register_adapter",
    "resolve_adapter",
]
