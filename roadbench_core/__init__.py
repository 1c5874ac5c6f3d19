"""RoadBench - Comparative Cache Benchmark Harness.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.

Drives interchangeable cache engines through identical, reproducible
workloads and reports their throughput:
- Deterministic payloads (LINES_<n> / BYTES_<n> value profiles)
- Bounded cyclic sample pools for limited-cardinality workloads
- WRITE, READ and MIXED (80/20) access patterns
- One adapter contract for in-memory, disk, mmap, hash-map and LSM engines
- Per-trial isolated storage with best-effort teardown

Architecture:
    ┌─────────────────────────────────────────────────────────────────┐
    │                        RoadBench Harness                        │
    ├─────────────────────────────────────────────────────────────────┤
    │  ┌─────────────┐  ┌─────────────┐  ┌─────────────┐             │
    │  │   Runner    │  │   Trial     │  │  Metrics    │   SWEEP     │
    │  │ warm/measure│  │ setup/tear  │  │ ops/second  │   LAYER     │
    │  └──────┬──────┘  └──────┬──────┘  └─────────────┘             │
    │         │                │                                      │
    │  ┌──────┴────────────────┴───────────────────────┐             │
    │  │              Workload Driver                   │             │
    │  │   ┌───────┐  ┌───────┐  ┌───────┐             │  WORKLOAD   │
    │  │   │ WRITE │  │ READ  │  │ MIXED │  Dataset    │  LAYER      │
    │  │   └───────┘  └───────┘  └───────┘  Profiles   │             │
    │  └──────────────────────┬────────────────────────┘             │
    │                         │                                       │
    │  ┌──────────────────────┴────────────────────────┐             │
    │  │              Cache Adapters                    │             │
    │  │  memory  file  diskcache  lmdb  dbm  leveldb   │   STORAGE   │
    │  │  redis (opt-in)                                │   LAYER     │
    │  └───────────────────────────────────────────────┘             │
    └─────────────────────────────────────────────────────────────────┘

Example Usage:
    from roadbench_core import Trial, ValueProfile, WorkloadKind

    # One sweep point, measured by hand
    with Trial(10000, ValueProfile.parse("BYTES_1024"), ["memory", "lmdb"]) as trial:
        result = trial.run("lmdb", WorkloadKind.MIXED)
        print(result.writes, result.reads)

    # Whole sweep with warmup and measured iterations
    from roadbench_core import SweepConfig, run_sweep

    results = run_sweep(SweepConfig(data_sizes=[1000, 10000], profiles=["LINES_10"]))
    for r in results:
        print(r.backend, r.workload.value, r.stats.mean_ops if r.ok else r.error)
"""

__version__ = "1.0.0"
__author__ = "BlackRoad OS"

from roadbench_core.exceptions import (
    RoadBenchError,
    InvalidSpecError,
    BackendError,
    BackendOpenError,
    BackendOperationError,
    CleanupError,
)
from roadbench_core.profile.value_profile import (
    ValueKind,
    ValueProfile,
    ValueGenerator,
)
from roadbench_core.protocol.serializer import (
    ValueCodec,
    Utf8Codec,
    PickleCodec,
    MsgPackCodec,
    get_codec,
)
from roadbench_core.store.backend import AdapterConfig, CacheAdapter
from roadbench_core.store.memory import MemoryAdapter
from roadbench_core.store.file import FileAdapter
from roadbench_core.store.disk import DiskCacheAdapter
from roadbench_core.store.mmap import LMDBAdapter
from roadbench_core.store.hashmap import DBMAdapter
from roadbench_core.store.lsm import LevelDBAdapter
from roadbench_core.store.redis import RedisAdapter
from roadbench_core.store.registry import (
    AdapterRegistry,
    get_registry,
    register_adapter,
)
from roadbench_core.workload.dataset import Dataset, ValueMode
from roadbench_core.workload.driver import (
    Operation,
    PassResult,
    WorkloadDriver,
    WorkloadKind,
    plan_operations,
)
from roadbench_core.trial.orchestrator import Trial, TrialState
from roadbench_core.metrics.collector import (
    ThroughputCollector,
    ThroughputStats,
)
from roadbench_core.runner import (
    BenchmarkResult,
    BenchmarkRunner,
    SweepConfig,
    run_sweep,
)

__all__ = [
    # Errors
    "RoadBenchError",
    "InvalidSpecError",
    "BackendError",
    "BackendOpenError",
    "BackendOperationError",
    "CleanupError",
    # Profiles
    "ValueKind",
    "ValueProfile",
    "ValueGenerator",
    # Codecs
    "ValueCodec",
    "Utf8Codec",
    "PickleCodec",
    "MsgPackCodec",
    "get_codec",
    # Adapters
    "AdapterConfig",
    "CacheAdapter",
    "MemoryAdapter",
    "FileAdapter",
    "DiskCacheAdapter",
    "LMDBAdapter",
    "DBMAdapter",
    "LevelDBAdapter",
    "RedisAdapter",
    "AdapterRegistry",
    "get_registry",
    "register_adapter",
    # Workload
    "Dataset",
    "ValueMode",
    "Operation",
    "PassResult",
    "WorkloadDriver",
    "WorkloadKind",
    "plan_operations",
    # Trial
    "Trial",
    "TrialState",
    # Metrics
    "ThroughputCollector",
    "ThroughputStats",
    # Runner
    "BenchmarkResult",
    "BenchmarkRunner",
    "SweepConfig",
    "run_sweep",
]
