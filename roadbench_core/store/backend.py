"""RoadBench Cache Adapter - Uniform Backend Contract.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import importlib.util
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, ClassVar, List, Optional, Tuple, Type

from roadbench_core.exceptions import (
    BackendOpenError,
    BackendOperationError,
    RoadBenchError,
)
from roadbench_core.profile.value_profile import ValueProfile
from roadbench_core.protocol.serializer import ValueCodec, get_codec

logger = logging.getLogger(__name__)

DEFAULT_CODEC = "utf8"


@dataclass
class AdapterConfig:
    """Configuration handed to an adapter at open time.

    Attributes:
        storage_root: Writable directory the backend must stay inside
        entry_count: Expected number of entries
        average_key_size: Average key length estimate
        average_value_size: Average value length estimate
        codec: Value codec for byte-oriented engines; engines that store
            str values natively (``memory``, ``diskcache``) accept only
            the default and reject any other codec at open
    """

    storage_root: Path
    entry_count: int = 1000
    average_key_size: int = 16
    average_value_size: int = 128
    codec: str = DEFAULT_CODEC

    def __post_init__(self) -> None:
        self.storage_root = Path(self.storage_root)

    @classmethod
    def for_trial(
        cls,
        storage_root: Path,
        entry_count: int,
        profile: ValueProfile,
        **options: Any,
    ) -> "AdapterConfig":
        """Derive sizing hints for one trial.

        Args:
            storage_root: Backend's private storage directory
            entry_count: Trial data size
            profile: Active value profile
            **options: Backend-specific config fields

        Returns:
            Config instance of this class
        """
        return cls(
            storage_root=storage_root,
            entry_count=entry_count,
            average_key_size=len(f"key_{max(entry_count - 1, 0)}"),
            average_value_size=profile.estimated_size,
            **options,
        )

    @property
    def estimated_bytes(self) -> int:
        """Expected raw payload volume of a fully populated backend."""
        return self.entry_count * (self.average_key_size + self.average_value_size)


class CacheAdapter(ABC):
    """Abstract adapter around one concrete cache engine.

    An opened adapter is the per-trial handle: it owns the engine
    instance and its storage. The workload driver and the trial
    orchestrator only talk to this interface, so a new backend is added
    by subclassing and registering it.

    Subclasses implement the ``_open``/``_put``/``_get``/``_close`` hooks
    and optionally ``_commit``. The public methods translate engine
    errors into BackendOpenError / BackendOperationError.

    Example:
        adapter = MemoryAdapter.open(AdapterConfig(storage_root=tmp))
        adapter.put("key_0", "value")
        adapter.get("key_0")   # "value"
        adapter.close()
    """

    name: ClassVar[str] = "adapter"
    variant: ClassVar[str] = ""
    persistent: ClassVar[bool] = True
    default_enabled: ClassVar[bool] = True
    requires: ClassVar[Tuple[str, ...]] = ()
    config_class: ClassVar[Type[AdapterConfig]] = AdapterConfig
    encodes_values: ClassVar[bool] = True

    def __init__(self, config: AdapterConfig):
        """Initialize adapter.

        Args:
            config: Adapter configuration

        Raises:
            ValueError: If a native-str engine is given a non-default codec
        """
        if not self.encodes_values and config.codec != DEFAULT_CODEC:
            raise ValueError(
                f"{self.name} stores str values natively, codec {config.codec!r} would be ignored"
            )
        self.config = config
        self._codec: ValueCodec = get_codec(config.codec)
        self._opened = False
        self._closed = False

    @classmethod
    def is_available(cls) -> bool:
        """Check whether the engine's libraries are importable."""
        return all(importlib.util.find_spec(module) is not None for module in cls.requires)

    @classmethod
    def open(cls, config: AdapterConfig) -> "CacheAdapter":
        """Create the engine instance under ``config.storage_root``.

        Args:
            config: Adapter configuration

        Returns:
            Opened adapter

        Raises:
            BackendOpenError: If the engine cannot be initialized
        """
        adapter = None
        try:
            adapter = cls(config)
            adapter._open()
        except RoadBenchError:
            if adapter is not None:
                adapter._release_partial()
            raise
        except Exception as e:
            logger.error(f"Failed to open {cls.name} at {config.storage_root}: {e}")
            if adapter is not None:
                adapter._release_partial()
            raise BackendOpenError(cls.name, str(e)) from e

        adapter._opened = True
        logger.info(f"Opened {cls.name} backend at {config.storage_root}")
        return adapter

    @property
    def closed(self) -> bool:
        return self._closed

    def put(self, key: str, value: str) -> None:
        """Store a value.

        Args:
            key: Cache key
            value: Value to store

        Raises:
            BackendOperationError: If the engine rejects the write
        """
        self._ensure_open("put", key)
        try:
            self._put(key, value)
        except RoadBenchError:
            raise
        except Exception as e:
            raise BackendOperationError(self.name, "put", str(e), key=key) from e

    def get(self, key: str) -> Optional[str]:
        """Read a value.

        Args:
            key: Cache key

        Returns:
            Stored value or None when absent

        Raises:
            BackendOperationError: If the engine fails the read
        """
        self._ensure_open("get", key)
        try:
            return self._get(key)
        except RoadBenchError:
            raise
        except Exception as e:
            raise BackendOperationError(self.name, "get", str(e), key=key) from e

    def commit(self) -> None:
        """Make pending writes durable.

        Raises:
            BackendOperationError: If the engine fails to commit
        """
        self._ensure_open("commit")
        try:
            self._commit()
        except RoadBenchError:
            raise
        except Exception as e:
            raise BackendOperationError(self.name, "commit", str(e)) from e

    def close(self) -> None:
        """Release the engine. Calling it again is a no-op."""
        if self._closed:
            return
        self._closed = True
        if self._opened:
            self._close()
            logger.info(f"Closed {self.name} backend")

    def storage_paths(self) -> List[Path]:
        """Paths to delete once the adapter is closed.

        Returns:
            Filesystem paths, empty for pure in-memory engines
        """
        if not self.persistent:
            return []
        return [self.config.storage_root]

    def _release_partial(self) -> None:
        """Best-effort ``_close`` after a failed ``_open``."""
        self._closed = True
        try:
            self._close()
        except Exception as e:
            logger.warning(f"Releasing half-opened {self.name} backend failed: {e}")

    def _ensure_open(self, operation: str, key: Optional[str] = None) -> None:
        if self._closed or not self._opened:
            raise BackendOperationError(self.name, operation, "adapter is not open", key=key)

    def _encode(self, value: str) -> bytes:
        return self._codec.encode(value)

    def _decode(self, data: Optional[bytes]) -> Optional[str]:
        if data is None:
            return None
        return self._codec.decode(data)

    @abstractmethod
    def _open(self) -> None:
        """Create the engine instance."""
        pass

    @abstractmethod
    def _put(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def _get(self, key: str) -> Optional[str]:
        pass

    def _commit(self) -> None:
        """Flush pending writes. Engines without transactions keep the no-op."""
        pass

    @abstractmethod
    def _close(self) -> None:
        pass

    def __enter__(self) -> "CacheAdapter":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else ("open" if self._opened else "new")
        return f"{self.__class__.__name__}(root={self.config.storage_root}, state={state})"


__all__ = ["AdapterConfig", "CacheAdapter"]
