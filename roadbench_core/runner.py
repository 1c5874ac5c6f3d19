"""RoadBench Runner - Parameter Sweep Execution.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from roadbench_core.exceptions import BackendError, BackendOperationError
from roadbench_core.metrics.collector import ThroughputCollector, ThroughputStats
from roadbench_core.profile.value_profile import MAX_SAMPLES, ValueProfile
from roadbench_core.store.registry import get_registry
from roadbench_core.trial.orchestrator import Trial
from roadbench_core.workload.dataset import ValueMode
from roadbench_core.workload.driver import WorkloadKind

logger = logging.getLogger(__name__)

DEFAULT_DATA_SIZES = (1000, 10000, 100000)
DEFAULT_PROFILES = ("LINES_10", "LINES_100", "LINES_1000", "BYTES_1024")


@dataclass
class SweepConfig:
    """Sweep configuration.

    Attributes:
        data_sizes: Entry counts to sweep
        profiles: Value profile specs to sweep
        workloads: Access patterns measured per backend
        backends: Backend names; None selects every available default backend
        warmup_iterations: Untimed passes before measuring
        measurement_iterations: Timed passes
        value_mode: UNIQUE or CYCLIC values
        max_unique_values: Sample pool size for CYCLIC mode
        temp_dir: Parent directory for trial storage
        adapter_options: Extra config fields per backend name
    """

    data_sizes: List[int] = field(default_factory=lambda: list(DEFAULT_DATA_SIZES))
    profiles: List[str] = field(default_factory=lambda: list(DEFAULT_PROFILES))
    workloads: List[Union[str, WorkloadKind]] = field(default_factory=lambda: list(WorkloadKind))
    backends: Optional[List[str]] = None
    warmup_iterations: int = 2
    measurement_iterations: int = 3
    value_mode: ValueMode = ValueMode.UNIQUE
    max_unique_values: int = MAX_SAMPLES
    temp_dir: Optional[str] = None
    adapter_options: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def validate(self) -> List[ValueProfile]:
        """Check the whole sweep before any trial starts.

        Returns:
            Parsed value profiles

        Raises:
            InvalidSpecError: If any profile spec is invalid
            ValueError: If sizes, iterations or workloads are invalid
        """
        profiles = [ValueProfile.parse(spec) for spec in self.profiles]
        if not profiles:
            raise ValueError("Sweep needs at least one value profile")
        if not self.data_sizes:
            raise ValueError("Sweep needs at least one data size")
        for size in self.data_sizes:
            if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
                raise ValueError(f"data size must be a positive integer, got {size!r}")
        if self.warmup_iterations < 0:
            raise ValueError("warmup_iterations must be >= 0")
        if self.measurement_iterations < 1:
            raise ValueError("measurement_iterations must be >= 1")
        self.workloads = [
            w if isinstance(w, WorkloadKind) else WorkloadKind.parse(w) for w in self.workloads
        ]
        return profiles

    def resolve_backends(self) -> List[str]:
        """Backend names to measure, in order."""
        registry = get_registry()
        if self.backends is None:
            return registry.available()
        for name in self.backends:
            registry.get(name)
        return list(self.backends)


@dataclass
class BenchmarkResult:
    """Outcome of one backend x workload at one sweep point.

    Attributes:
        backend: Backend name
        workload: Access pattern
        data_size: Entry count
        profile: Value profile spec
        stats: Throughput stats, None when the measurement failed
        error: Failure description, None on success
    """

    backend: str
    workload: WorkloadKind
    data_size: int
    profile: str
    stats: Optional[ThroughputStats] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "backend": self.backend,
            "workload": self.workload.value,
            "data_size": self.data_size,
            "profile": self.profile,
            "stats": self.stats.to_dict() if self.stats else None,
            "error": self.error,
        }


class BenchmarkRunner:
    """Runs a sweep of trials and measures every backend in each.

    For each data size x profile one Trial holds all backends. Each
    backend x workload gets warmup passes and timed passes, measured one
    backend at a time. A backend failing to open or populate is reported
    failed at that sweep point and the point is re-run without it; a
    failing measured pass fails only that backend x workload.

    Example:
        runner = BenchmarkRunner(SweepConfig(data_sizes=[1000], profiles=["LINES_10"]))
        for result in runner.run():
            print(result.backend, result.workload.value, result.stats.mean_ops)
    """

    def __init__(self, config: Optional[SweepConfig] = None):
        self.config = config or SweepConfig()

    def run(self) -> List[BenchmarkResult]:
        """Execute the whole sweep.

        Returns:
            One result per data size x profile x backend x workload

        Raises:
            InvalidSpecError: Before any trial, if a profile is invalid
        """
        profiles = self.config.validate()
        backends = self.config.resolve_backends()
        logger.info(
            f"Sweep: sizes={self.config.data_sizes} profiles={[p.spec for p in profiles]} "
            f"backends={backends} workloads={[w.value for w in self.config.workloads]}"
        )

        results: List[BenchmarkResult] = []
        for data_size in self.config.data_sizes:
            for profile in profiles:
                results.extend(self.run_point(data_size, profile, backends))

        failed = sum(1 for r in results if not r.ok)
        logger.info(f"Sweep finished: {len(results)} results, {failed} failed")
        return results

    def run_point(
        self,
        data_size: int,
        profile: ValueProfile,
        backends: List[str],
    ) -> List[BenchmarkResult]:
        """Measure every backend at one sweep point."""
        results: List[BenchmarkResult] = []
        remaining = list(backends)

        while remaining:
            trial = Trial(
                data_size,
                profile,
                remaining,
                temp_dir=self.config.temp_dir,
                value_mode=self.config.value_mode,
                max_unique_values=self.config.max_unique_values,
                adapter_options=self.config.adapter_options,
            )
            try:
                with trial:
                    for backend in remaining:
                        for kind in self.config.workloads:
                            results.append(self._measure(trial, backend, kind))
                break
            except BackendError as e:
                if e.backend not in remaining:
                    raise
                logger.error(
                    f"Backend {e.backend} failed setup at size={data_size} "
                    f"profile={profile.spec}: {e.message}"
                )
                results.extend(self._failed(e.backend, data_size, profile, str(e)))
                remaining.remove(e.backend)

        return results

    def _measure(self, trial: Trial, backend: str, kind: WorkloadKind) -> BenchmarkResult:
        result = BenchmarkResult(
            backend=backend,
            workload=kind,
            data_size=trial.data_size,
            profile=trial.profile.spec,
        )
        collector = ThroughputCollector()
        try:
            for _ in range(self.config.warmup_iterations):
                trial.run(backend, kind)
            for _ in range(self.config.measurement_iterations):
                with collector.time(operations=trial.data_size):
                    trial.run(backend, kind)
        except BackendOperationError as e:
            logger.error(f"Measurement failed for {backend} {kind.value}: {e.message}")
            result.error = str(e)
            return result

        result.stats = collector.get_stats()
        logger.info(
            f"{backend} {kind.value} size={trial.data_size} profile={trial.profile.spec}: "
            f"{result.stats.mean_ops:,.0f} ops/s (+/- {result.stats.stddev_ops:,.0f})"
        )
        return result

    def _failed(
        self,
        backend: str,
        data_size: int,
        profile: ValueProfile,
        error: str,
    ) -> List[BenchmarkResult]:
        return [
            BenchmarkResult(
                backend=backend,
                workload=kind,
                data_size=data_size,
                profile=profile.spec,
                error=error,
            )
            for kind in self.config.workloads
        ]


def run_sweep(config: Optional[SweepConfig] = None, **overrides: Any) -> List[BenchmarkResult]:
    """Run a sweep, building the config from keyword overrides if needed.

    Example:
        results = run_sweep(data_sizes=[1000], profiles=["BYTES_1024"], backends=["memory"])
    """
    if config is None:
        config = SweepConfig(**overrides)
    return BenchmarkRunner(config).run()


__all__ = [
    "BenchmarkResult",
    "BenchmarkRunner",
    "SweepConfig",
    "DEFAULT_DATA_SIZES",
    "DEFAULT_PROFILES",
    "run_sweep",
]
