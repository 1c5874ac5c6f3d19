"""RoadBench Dataset - Per-Trial Key/Value Source.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterator, Optional, Tuple

from roadbench_core.profile.value_profile import MAX_SAMPLES, ValueGenerator, ValueProfile

logger = logging.getLogger(__name__)

KEY_PREFIX = "key_"


class ValueMode(Enum):
    """How values are assigned to keys."""

    UNIQUE = "unique"    # profile.value_for_index(i), one distinct string per key
    CYCLIC = "cyclic"    # generator.value_at(i), bounded sample pool


def make_key(index: int) -> str:
    return f"{KEY_PREFIX}{index}"


class Dataset:
    """Read-only key/value source for one trial.

    Keys are ``key_0`` .. ``key_{N-1}``; value content comes only from
    the profile, so every backend in a trial sees byte-identical input.
    Both sequences are materialized up front and shared by reference.

    Example:
        data = Dataset.build(1000, ValueProfile.parse("LINES_10"))
        data.key(7)     # "key_7"
        data.value(7)   # profile.value_for_index(7)
    """

    def __init__(
        self,
        profile: ValueProfile,
        keys: Tuple[str, ...],
        values: Tuple[str, ...],
        mode: ValueMode = ValueMode.UNIQUE,
        generator: Optional[ValueGenerator] = None,
    ):
        if len(keys) != len(values):
            raise ValueError(f"{len(keys)} keys but {len(values)} values")
        self.profile = profile
        self.mode = mode
        self.generator = generator
        self._keys = keys
        self._values = values

    @classmethod
    def build(
        cls,
        size: int,
        profile: ValueProfile,
        mode: ValueMode = ValueMode.UNIQUE,
        max_unique_values: int = MAX_SAMPLES,
    ) -> "Dataset":
        """Generate the key/value source for a trial.

        Args:
            size: Number of entries, positive
            profile: Value profile
            mode: UNIQUE for per-entry values, CYCLIC for the sample pool
            max_unique_values: Pool size for CYCLIC mode

        Returns:
            Dataset instance
        """
        if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
            raise ValueError(f"data size must be a positive integer, got {size!r}")

        keys = tuple(make_key(i) for i in range(size))
        generator = None
        if mode is ValueMode.CYCLIC:
            generator = profile.create_generator(max_unique_values)
            values = tuple(generator.value_at(i) for i in range(size))
        else:
            values = tuple(profile.value_for_index(i) for i in range(size))

        logger.debug(f"Built dataset size={size} profile={profile.spec} mode={mode.value}")
        return cls(profile, keys, values, mode=mode, generator=generator)

    @property
    def keys(self) -> Tuple[str, ...]:
        return self._keys

    @property
    def values(self) -> Tuple[str, ...]:
        return self._values

    @property
    def size(self) -> int:
        return len(self._keys)

    def key(self, index: int) -> str:
        return self._keys[index]

    def value(self, index: int) -> str:
        return self._values[index]

    def items(self) -> Iterator[Tuple[str, str]]:
        return zip(self._keys, self._values)

    def __len__(self) -> int:
        return len(self._keys)

    def __repr__(self) -> str:
        return f"Dataset(size={self.size}, profile={self.profile.spec}, mode={self.mode.value})"


__all__ = ["Dataset", "ValueMode", "KEY_PREFIX", "make_key"]
