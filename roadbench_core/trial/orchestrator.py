"""RoadBench Trial - Per-Sweep-Point Lifecycle.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from enum import Enum, auto
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from roadbench_core.exceptions import BackendOpenError, CleanupError
from roadbench_core.profile.value_profile import MAX_SAMPLES, ValueProfile
from roadbench_core.store.backend import CacheAdapter
from roadbench_core.store.registry import AdapterRef, resolve_adapter
from roadbench_core.workload.dataset import Dataset, ValueMode
from roadbench_core.workload.driver import PassResult, WorkloadDriver, WorkloadKind

logger = logging.getLogger(__name__)

TRIAL_PREFIX = "roadbench_"


class TrialState(Enum):
    """Trial lifecycle states."""

    INIT = auto()         # data built, backends being opened
    POPULATED = auto()    # every backend holds the full data set
    MEASURING = auto()    # measured passes running
    TEARDOWN = auto()     # handles closing, storage being removed
    DONE = auto()


class Trial:
    """One data size x value profile combination across a set of backends.

    Every backend gets a fresh storage directory under a trial-unique
    temp root, is populated with one WRITE pass, and is then available
    for measured passes one backend at a time. Teardown closes every
    handle and removes its storage independently: a failing close or
    delete is logged and recorded in ``cleanup_errors``, never raised.

    Example:
        with Trial(1000, "LINES_10", ["memory", "file"]) as trial:
            trial.run("file", WorkloadKind.READ)
        trial.state   # TrialState.DONE
    """

    def __init__(
        self,
        data_size: int,
        profile: Union[str, ValueProfile],
        adapters: Sequence[AdapterRef],
        temp_dir: Optional[Union[str, Path]] = None,
        value_mode: ValueMode = ValueMode.UNIQUE,
        max_unique_values: int = MAX_SAMPLES,
        adapter_options: Optional[Dict[str, Dict[str, Any]]] = None,
        driver: Optional[WorkloadDriver] = None,
    ):
        """Initialize trial.

        Args:
            data_size: Number of entries, positive
            profile: ValueProfile or its spec string
            adapters: Adapter classes or registered backend names
            temp_dir: Parent for the trial root; system temp by default
            value_mode: UNIQUE or CYCLIC values
            max_unique_values: Sample pool size for CYCLIC mode
            adapter_options: Extra config fields per backend name
            driver: Workload driver
        """
        if isinstance(data_size, bool) or not isinstance(data_size, int) or data_size <= 0:
            raise ValueError(f"data size must be a positive integer, got {data_size!r}")
        if isinstance(profile, str):
            profile = ValueProfile.parse(profile)

        self.data_size = data_size
        self.profile = profile
        self.adapter_classes = [resolve_adapter(ref) for ref in adapters]
        names = [cls.name for cls in self.adapter_classes]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate backends in trial: {names}")

        self.temp_dir = Path(temp_dir) if temp_dir is not None else None
        self.value_mode = value_mode
        self.max_unique_values = max_unique_values
        self.adapter_options = adapter_options or {}
        self.driver = driver or WorkloadDriver()

        self.state = TrialState.INIT
        self.dataset: Optional[Dataset] = None
        self.trial_root: Optional[Path] = None
        self.handles: Dict[str, CacheAdapter] = {}
        self.cleanup_errors: List[CleanupError] = []

    @property
    def backend_names(self) -> List[str]:
        return [cls.name for cls in self.adapter_classes]

    def setup(self) -> None:
        """INIT: build the data set and open every backend.

        Raises:
            BackendOpenError: If a backend cannot open; backends already
                opened are torn down first
        """
        if self.state is not TrialState.INIT or self.dataset is not None:
            raise RuntimeError(f"Trial already set up (state={self.state.name})")

        self.dataset = Dataset.build(
            self.data_size,
            self.profile,
            mode=self.value_mode,
            max_unique_values=self.max_unique_values,
        )

        if self.temp_dir is not None:
            self.temp_dir.mkdir(parents=True, exist_ok=True)
        self.trial_root = Path(tempfile.mkdtemp(prefix=TRIAL_PREFIX, dir=self.temp_dir))
        logger.info(
            f"Trial setup size={self.data_size} profile={self.profile.spec} "
            f"backends={self.backend_names} root={self.trial_root}"
        )

        try:
            for adapter_cls in self.adapter_classes:
                self.handles[adapter_cls.name] = self._open_backend(adapter_cls)
        except BaseException:
            self.teardown()
            raise

    def _open_backend(self, adapter_cls: type) -> CacheAdapter:
        try:
            root = Path(tempfile.mkdtemp(prefix=f"{adapter_cls.name}_", dir=self.trial_root))
            options = self.adapter_options.get(adapter_cls.name, {})
            config = adapter_cls.config_class.for_trial(root, self.data_size, self.profile, **options)
        except (OSError, TypeError) as e:
            raise BackendOpenError(adapter_cls.name, f"cannot prepare storage: {e}") from e
        return adapter_cls.open(config)

    def populate(self) -> None:
        """POPULATED: one WRITE pass (ending in a commit) per backend."""
        if self.state is not TrialState.INIT or self.dataset is None:
            raise RuntimeError(f"Cannot populate in state {self.state.name}")

        for name, adapter in self.handles.items():
            self.driver.run(adapter, self.dataset, WorkloadKind.WRITE)
            logger.debug(f"Populated {name} with {self.data_size} entries")

        self.state = TrialState.POPULATED

    def run(self, backend: str, kind: WorkloadKind) -> PassResult:
        """MEASURING: one pass of ``kind`` against one backend.

        Args:
            backend: Backend name
            kind: Access pattern

        Returns:
            PassResult

        Raises:
            BackendOperationError: If the backend fails mid-pass
        """
        if self.state not in (TrialState.POPULATED, TrialState.MEASURING):
            raise RuntimeError(f"Cannot measure in state {self.state.name}")
        self.state = TrialState.MEASURING
        return self.driver.run(self.adapter(backend), self.dataset, kind)

    def adapter(self, backend: str) -> CacheAdapter:
        """Get the opened handle for a backend."""
        if backend not in self.handles:
            raise KeyError(f"Backend {backend!r} is not open in this trial")
        return self.handles[backend]

    def teardown(self) -> None:
        """TEARDOWN -> DONE: close handles and remove storage, best effort.

        Safe to call more than once and from any state.
        """
        if self.state is TrialState.DONE:
            return
        self.state = TrialState.TEARDOWN

        for name, adapter in reversed(list(self.handles.items())):
            self._release(name, adapter)
        self.handles.clear()

        if self.trial_root is not None:
            self._remove_path("trial", self.trial_root)

        self.state = TrialState.DONE
        if self.cleanup_errors:
            logger.warning(f"Trial teardown finished with {len(self.cleanup_errors)} cleanup errors")
        else:
            logger.info(f"Trial teardown complete, removed {self.trial_root}")

    def _release(self, name: str, adapter: CacheAdapter) -> None:
        try:
            adapter.close()
        except Exception as e:
            self._record_cleanup(CleanupError(name, f"close failed: {e}"))

        try:
            paths = adapter.storage_paths()
        except Exception as e:
            self._record_cleanup(CleanupError(name, f"cannot list storage paths: {e}"))
            return

        for path in paths:
            self._remove_path(name, Path(path))

    def _remove_path(self, name: str, path: Path) -> None:
        try:
            if not os.path.lexists(path):
                return
            if path.is_dir() and not path.is_symlink():
                shutil.rmtree(path)
            else:
                path.unlink()
        except OSError as e:
            self._record_cleanup(CleanupError(name, f"cannot delete {path}: {e}", path=str(path)))

    def _record_cleanup(self, error: CleanupError) -> None:
        logger.warning(f"Cleanup failure ignored: {error.message}")
        self.cleanup_errors.append(error)

    def __enter__(self) -> "Trial":
        self.setup()
        try:
            self.populate()
        except BaseException:
            self.teardown()
            raise
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.teardown()

    def __repr__(self) -> str:
        return (
            f"Trial(size={self.data_size}, profile={self.profile.spec}, "
            f"backends={self.backend_names}, state={self.state.name})"
        )


__all__ = ["Trial", "TrialState", "TRIAL_PREFIX"]
