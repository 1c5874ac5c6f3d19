"""Workload module - Data sets and access patterns."""

from roadbench_core.workload.dataset import Dataset, ValueMode, make_key
from roadbench_core.workload.driver import (
    MIXED_WRITE_INTERVAL,
    Operation,
    PassResult,
    WorkloadDriver,
    WorkloadKind,
    is_write,
    plan_operations,
)

__all__ = [
    "Dataset",
    "ValueMode",
    "make_key",
    "MIXED_WRITE_INTERVAL",
    "Operation",
    "PassResult",
    "WorkloadDriver",
    "WorkloadKind",
    "is_write",
    "plan_operations",
]
