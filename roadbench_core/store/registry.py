"""RoadBench Adapter Registry - Backend Lookup by Name.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Type, Union

from roadbench_core.store.backend import CacheAdapter
from roadbench_core.store.disk import DiskCacheAdapter
from roadbench_core.store.file import FileAdapter
from roadbench_core.store.hashmap import DBMAdapter
from roadbench_core.store.lsm import LevelDBAdapter
from roadbench_core.store.memory import MemoryAdapter
from roadbench_core.store.mmap import LMDBAdapter
from roadbench_core.store.redis import RedisAdapter

logger = logging.getLogger(__name__)

AdapterRef = Union[str, Type[CacheAdapter]]


class AdapterRegistry:
    """Registry of cache adapters keyed by ``CacheAdapter.name``."""

    def __init__(self):
        self._adapters: Dict[str, Type[CacheAdapter]] = {}

    def register(self, adapter_cls: Type[CacheAdapter]) -> Type[CacheAdapter]:
        """Register an adapter class. Usable as a class decorator.

        Args:
            adapter_cls: Adapter class

        Returns:
            The same class
        """
        if adapter_cls.name in self._adapters and self._adapters[adapter_cls.name] is not adapter_cls:
            logger.warning(f"Replacing adapter registered as {adapter_cls.name!r}")
        self._adapters[adapter_cls.name] = adapter_cls
        return adapter_cls

    def get(self, name: str) -> Type[CacheAdapter]:
        """Get adapter class by name.

        Raises:
            KeyError: If no adapter has that name
        """
        if name not in self._adapters:
            raise KeyError(f"Unknown backend: {name}")
        return self._adapters[name]

    def resolve(self, ref: AdapterRef) -> Type[CacheAdapter]:
        """Accept a registered name or an adapter class."""
        if isinstance(ref, str):
            return self.get(ref)
        return ref

    def list_names(self) -> List[str]:
        return list(self._adapters.keys())

    def available(self, include_opt_in: bool = False) -> List[str]:
        """Names of adapters whose libraries are importable.

        Args:
            include_opt_in: Also list adapters disabled by default

        Returns:
            Adapter names in registration order
        """
        names = []
        for name, adapter_cls in self._adapters.items():
            if not (adapter_cls.default_enabled or include_opt_in):
                continue
            if adapter_cls.is_available():
                names.append(name)
            else:
                logger.warning(f"Backend {name!r} unavailable: missing {', '.join(adapter_cls.requires)}")
        return names

    def __contains__(self, name: str) -> bool:
        return name in self._adapters


_registry = AdapterRegistry()
for _adapter_cls in (
    MemoryAdapter,
    FileAdapter,
    DiskCacheAdapter,
    LMDBAdapter,
    DBMAdapter,
    LevelDBAdapter,
    RedisAdapter,
):
    _registry.register(_adapter_cls)


def get_registry() -> AdapterRegistry:
    """Get the process-wide adapter registry."""
    return _registry


def register_adapter(adapter_cls: Type[CacheAdapter]) -> Type[CacheAdapter]:
    """Register an adapter with the process-wide registry."""
    return _registry.register(adapter_cls)


def resolve_adapter(ref: AdapterRef) -> Type[CacheAdapter]:
    """Resolve a backend name or class via the process-wide registry."""
    return _registry.resolve(ref)


__all__ = [
    "AdapterRegistry",
    "get_registry",
    "register_adapter",
    "resolve_adapter",
]
