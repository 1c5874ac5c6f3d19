"""RoadBench Workload Driver - Canonical Access Patterns.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, Optional

from roadbench_core.store.backend import CacheAdapter
from roadbench_core.workload.dataset import Dataset

logger = logging.getLogger(__name__)

# MIXED writes at every index divisible by this: 20% writes, 80% reads
MIXED_WRITE_INTERVAL = 5


class WorkloadKind(Enum):
    """Access patterns."""

    WRITE = "write"
    READ = "read"
    MIXED = "mixed"

    @classmethod
    def parse(cls, name: str) -> "WorkloadKind":
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown workload {name!r}, expected one of {[k.value for k in cls]}") from None


def is_write(kind: WorkloadKind, index: int) -> bool:
    """Whether the operation at ``index`` of a pass is a put."""
    if kind is WorkloadKind.WRITE:
        return True
    if kind is WorkloadKind.READ:
        return False
    return index % MIXED_WRITE_INTERVAL == 0


@dataclass(frozen=True)
class Operation:
    """One planned operation; ``value`` is None for reads."""

    index: int
    key: str
    value: Optional[str] = None

    @property
    def is_write(self) -> bool:
        return self.value is not None


def plan_operations(kind: WorkloadKind, dataset: Dataset) -> Iterator[Operation]:
    """Describe one pass as a sequence of operations, in index order.

    Args:
        kind: Access pattern
        dataset: Key/value source

    Yields:
        Operation records
    """
    for index, (key, value) in enumerate(dataset.items()):
        if is_write(kind, index):
            yield Operation(index, key, value)
        else:
            yield Operation(index, key)


@dataclass
class PassResult:
    """Counts observed during one pass.

    Attributes:
        kind: Access pattern
        backend: Adapter name
        operations: Total operations
        writes: Puts issued
        reads: Gets issued
        misses: Gets that found no value
        committed: Whether commit() ran at the end of the pass
    """

    kind: WorkloadKind
    backend: str
    operations: int = 0
    writes: int = 0
    reads: int = 0
    misses: int = 0
    committed: bool = False

    @property
    def hits(self) -> int:
        return self.reads - self.misses

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "backend": self.backend,
            "operations": self.operations,
            "writes": self.writes,
            "reads": self.reads,
            "hits": self.hits,
            "misses": self.misses,
            "committed": self.committed,
        }


class WorkloadDriver:
    """Runs exactly one pass of a workload against one adapter.

    Operations execute in strictly increasing index order. A miss is a
    counted outcome, not an error; adapter failures propagate without
    retry. Passes that write end with a single ``commit()``.

    The loops are specialized per pattern to keep per-operation overhead
    identical and small across backends; they follow ``plan_operations``
    exactly.

    Example:
        driver = WorkloadDriver()
        result = driver.run(adapter, dataset, WorkloadKind.MIXED)
        result.writes   # ceil(len(dataset) / 5)
    """

    def run(self, adapter: CacheAdapter, dataset: Dataset, kind: WorkloadKind) -> PassResult:
        """Execute one pass.

        Args:
            adapter: Opened adapter
            dataset: Key/value source
            kind: Access pattern

        Returns:
            PassResult with operation counts

        Raises:
            BackendOperationError: If a put/get/commit fails
        """
        result = PassResult(kind=kind, backend=adapter.name)

        if kind is WorkloadKind.WRITE:
            self._write_pass(adapter, dataset, result)
        elif kind is WorkloadKind.READ:
            self._read_pass(adapter, dataset, result)
        elif kind is WorkloadKind.MIXED:
            self._mixed_pass(adapter, dataset, result)
        else:
            raise ValueError(f"Unsupported workload: {kind}")

        if result.writes:
            adapter.commit()
            result.committed = True

        logger.debug(
            f"{kind.value} pass on {adapter.name}: {result.operations} ops, "
            f"{result.writes} writes, {result.misses} misses"
        )
        return result

    def _write_pass(self, adapter: CacheAdapter, dataset: Dataset, result: PassResult) -> None:
        put = adapter.put
        for key, value in dataset.items():
            put(key, value)
        result.writes = result.operations = len(dataset)

    def _read_pass(self, adapter: CacheAdapter, dataset: Dataset, result: PassResult) -> None:
        get = adapter.get
        misses = 0
        for key in dataset.keys:
            if get(key) is None:
                misses += 1
        result.reads = result.operations = len(dataset)
        result.misses = misses

    def _mixed_pass(self, adapter: CacheAdapter, dataset: Dataset, result: PassResult) -> None:
        put = adapter.put
        get = adapter.get
        writes = 0
        misses = 0
        for index, (key, value) in enumerate(dataset.items()):
            if index % MIXED_WRITE_INTERVAL == 0:
                put(key, value)
                writes += 1
            elif get(key) is None:
                misses += 1
        result.operations = len(dataset)
        result.writes = writes
        result.reads = len(dataset) - writes
        result.misses = misses


__all__ = [
    "MIXED_WRITE_INTERVAL",
    "Operation",
    "PassResult",
    "WorkloadDriver",
    "WorkloadKind",
    "is_write",
    "plan_operations",
]
