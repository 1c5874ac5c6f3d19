"""RoadBench Metrics Collector - Throughput Statistics.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


def calculate_percentile(values: List[float], percentile: float) -> float:
    """Calculate a percentile with linear interpolation.

    Args:
        values: Numeric values
        percentile: Percentile in [0, 100]

    Returns:
        Percentile value

    Raises:
        ValueError: If values is empty or percentile is out of range
    """
    if not values:
        raise ValueError("Cannot calculate percentile of empty list")
    if not 0 <= percentile <= 100:
        raise ValueError("Percentile must be between 0 and 100")

    ordered = sorted(values)
    index = (percentile / 100) * (len(ordered) - 1)
    lower = int(index)
    upper = lower + 1
    if upper >= len(ordered):
        return ordered[-1]

    fraction = index - lower
    return ordered[lower] * (1 - fraction) + ordered[upper] * fraction


@dataclass
class ThroughputStats:
    """Throughput summary over measured iterations.

    Attributes:
        iterations: Number of measured iterations
        operations: Operations summed over iterations
        elapsed_seconds: Wall time summed over iterations
        mean_ops: Mean operations per second
        median_ops: Median operations per second
        min_ops: Slowest iteration
        max_ops: Fastest iteration
        stddev_ops: Population standard deviation
    """

    iterations: int = 0
    operations: int = 0
    elapsed_seconds: float = 0.0
    mean_ops: float = 0.0
    median_ops: float = 0.0
    min_ops: float = 0.0
    max_ops: float = 0.0
    stddev_ops: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "iterations": self.iterations,
            "operations": self.operations,
            "elapsed_seconds": self.elapsed_seconds,
            "mean_ops_per_second": self.mean_ops,
            "median_ops_per_second": self.median_ops,
            "min_ops_per_second": self.min_ops,
            "max_ops_per_second": self.max_ops,
            "stddev_ops_per_second": self.stddev_ops,
        }


class ThroughputCollector:
    """Collects (operations, seconds) samples from measured iterations.

    Example:
        collector = ThroughputCollector()
        with collector.time(operations=10000):
            driver.run(adapter, dataset, WorkloadKind.READ)

        stats = collector.get_stats()
        print(f"{stats.mean_ops:,.0f} ops/s")
    """

    def __init__(self):
        self._samples: List[Tuple[int, float]] = []
        self._lock = threading.RLock()

    def record(self, operations: int, seconds: float) -> None:
        """Record one measured iteration.

        Args:
            operations: Operations performed
            seconds: Elapsed wall time
        """
        if seconds <= 0:
            # Clock resolution floor; avoid an infinite rate
            seconds = 1e-9
        with self._lock:
            self._samples.append((operations, seconds))

    def time(self, operations: int) -> "Timer":
        """Context manager recording one iteration of ``operations``."""
        return Timer(self, operations)

    def rates(self) -> List[float]:
        """Per-iteration operations per second."""
        with self._lock:
            return [ops / seconds for ops, seconds in self._samples]

    def get_stats(self) -> ThroughputStats:
        """Summarize recorded iterations.

        Returns:
            ThroughputStats, all zero when nothing was recorded
        """
        with self._lock:
            samples = list(self._samples)
        if not samples:
            return ThroughputStats()

        rates = [ops / seconds for ops, seconds in samples]
        mean = sum(rates) / len(rates)
        variance = sum((r - mean) ** 2 for r in rates) / len(rates)
        return ThroughputStats(
            iterations=len(samples),
            operations=sum(ops for ops, _ in samples),
            elapsed_seconds=sum(seconds for _, seconds in samples),
            mean_ops=mean,
            median_ops=calculate_percentile(rates, 50),
            min_ops=min(rates),
            max_ops=max(rates),
            stddev_ops=math.sqrt(variance),
        )

    def reset(self) -> None:
        with self._lock:
            self._samples.clear()

    def __len__(self) -> int:
        return len(self._samples)

    def __repr__(self) -> str:
        return f"ThroughputCollector(iterations={len(self._samples)})"


class Timer:
    """Context manager timing one iteration with ``time.perf_counter``."""

    def __init__(self, collector: ThroughputCollector, operations: int):
        self._collector = collector
        self._operations = operations
        self._start: float = 0.0
        self.elapsed: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.elapsed = time.perf_counter() - self._start
        # Failed iterations are not throughput samples
        if exc_type is None:
            self._collector.record(self._operations, self.elapsed)


__all__ = [
    "ThroughputCollector",
    "ThroughputStats",
    "Timer",
    "calculate_percentile",
]
