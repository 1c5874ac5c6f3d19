"""Metrics module - Throughput collection."""

from roadbench_core.metrics.collector import (
    ThroughputCollector,
    ThroughputStats,
    Timer,
    calculate_percentile,
)

__all__ = [
    "ThroughputCollector",
    "ThroughputStats",
    "Timer",
    "calculate_percentile",
]
