"""RoadBench Value Profile - Deterministic Payload Generation.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Tuple

from roadbench_core.exceptions import InvalidSpecError

logger = logging.getLogger(__name__)

LINE_TEMPLATE = "benchmark-value-line-%04d :: lorem ipsum data"
FILLER_CHAR = "x"

# Covers the per-entry suffix appended by value_for_index
SUFFIX_ALLOWANCE = 24

MAX_SAMPLES = 256

_SPEC_PATTERN = re.compile(r"([A-Z]+)_(.*)", re.IGNORECASE | re.ASCII)
_AMOUNT_PATTERN = re.compile(r"-?[0-9]+", re.ASCII)


class ValueKind(Enum):
    """Payload shapes."""

    LINES = "LINES"
    BYTES = "BYTES"


def _build_line_payload(line_count: int) -> str:
    return "".join(f"{LINE_TEMPLATE % i}\n" for i in range(line_count))


def _build_byte_payload(size: int) -> str:
    return FILLER_CHAR * size


_BUILDERS = {
    ValueKind.LINES: _build_line_payload,
    ValueKind.BYTES: _build_byte_payload,
}


def build_base_value(kind: ValueKind, amount: int) -> str:
    """Build the deterministic base payload for a shape.

    Args:
        kind: Payload shape
        amount: Line count (LINES) or character count (BYTES)

    Returns:
        Payload string
    """
    return _BUILDERS[kind](amount)


@dataclass(frozen=True)
class ValueProfile:
    """Identifies a payload shape and derives its deterministic content.

    Two profiles with the same kind and amount compare equal and produce
    identical payloads.

    Attributes:
        kind: Payload shape
        amount: Line count or byte count, positive
        base_value: Generated payload (derived)

    Example:
        profile = ValueProfile.parse("LINES_10")
        profile.base_value.count("\\n")   # 10
        profile.value_for_index(3)        # base_value + "::entry-3"
    """

    kind: ValueKind
    amount: int
    base_value: str = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.kind, ValueKind):
            raise InvalidSpecError(self.kind, "unknown payload kind")
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise InvalidSpecError(self.amount, "amount must be an integer")
        if self.amount <= 0:
            raise InvalidSpecError(self.amount, "amount must be positive")
        object.__setattr__(self, "base_value", build_base_value(self.kind, self.amount))

    @classmethod
    def parse(cls, spec: str) -> "ValueProfile":
        """Parse a ``LINES_<n>`` or ``BYTES_<n>`` specification.

        Matching is case-insensitive over ASCII letters; the amount must be
        ASCII digits.

        Args:
            spec: Profile specification

        Returns:
            ValueProfile instance

        Raises:
            InvalidSpecError: If the string is empty, malformed, uses an
                unknown prefix, or the amount is non-numeric or non-positive
        """
        if not isinstance(spec, str) or not spec.strip():
            raise InvalidSpecError(spec, "specification is empty")

        match = _SPEC_PATTERN.fullmatch(spec.strip())
        if match is None:
            raise InvalidSpecError(spec, "expected <KIND>_<amount>")

        prefix, raw_amount = match.groups()
        prefix = prefix.upper()
        try:
            kind = ValueKind(prefix)
        except ValueError:
            raise InvalidSpecError(spec, f"unknown prefix {prefix!r}") from None

        if not raw_amount:
            raise InvalidSpecError(spec, "missing amount")
        if not _AMOUNT_PATTERN.fullmatch(raw_amount):
            raise InvalidSpecError(spec, f"amount {raw_amount!r} is not numeric")

        amount = int(raw_amount)
        if amount <= 0:
            raise InvalidSpecError(spec, "amount must be positive")

        return cls(kind, amount)

    @classmethod
    def for_lines(cls, line_count: int) -> "ValueProfile":
        """Profile of ``line_count`` template lines."""
        return cls(ValueKind.LINES, line_count)

    @classmethod
    def for_bytes(cls, size: int) -> "ValueProfile":
        """Profile of ``size`` filler characters."""
        return cls(ValueKind.BYTES, size)

    @property
    def estimated_size(self) -> int:
        """Sizing hint for backends that pre-allocate storage."""
        return len(self.base_value) + SUFFIX_ALLOWANCE

    @property
    def spec(self) -> str:
        """Canonical specification string, e.g. ``LINES_10``."""
        return f"{self.kind.value}_{self.amount}"

    def value_for_index(self, index: int) -> str:
        """Get a value unique to one entry.

        Args:
            index: Entry index

        Returns:
            base_value with a per-entry suffix
        """
        return f"{self.base_value}::entry-{index}"

    def create_generator(self, max_unique_values: int = MAX_SAMPLES) -> "ValueGenerator":
        """Create a bounded, cyclic pool of sample values.

        Args:
            max_unique_values: Requested pool size, clamped to [1, 256]

        Returns:
            ValueGenerator instance
        """
        count = max(1, min(int(max_unique_values), MAX_SAMPLES))
        samples = tuple(f"{self.base_value}::sample-{i}" for i in range(count))
        logger.debug(f"Created {count} samples for {self.spec}")
        return ValueGenerator(self, samples)

    def __str__(self) -> str:
        return self.spec


class ValueGenerator:
    """Cyclic pool of sample values derived from a profile.

    ``value_at(i)`` returns ``samples[i % count]``, so lookups of the same
    index modulo ``count`` always yield the same sample.

    Example:
        gen = ValueProfile.for_bytes(8).create_generator(4)
        gen.value_at(1) == gen.value_at(5)   # True
    """

    def __init__(self, profile: ValueProfile, samples: Tuple[str, ...]):
        if not samples:
            raise ValueError("ValueGenerator requires at least one sample")
        self.profile = profile
        self._samples = samples

    @property
    def samples(self) -> Tuple[str, ...]:
        return self._samples

    @property
    def count(self) -> int:
        return len(self._samples)

    def value_at(self, index: int) -> str:
        """Get the sample for an index.

        Args:
            index: Non-negative index

        Returns:
            Sample value

        Raises:
            ValueError: If index is negative
        """
        if index < 0:
            raise ValueError(f"index must be non-negative, got {index}")
        return self._samples[index % len(self._samples)]

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[str]:
        return iter(self._samples)

    def __repr__(self) -> str:
        return f"ValueGenerator(profile={self.profile.spec}, count={self.count})"


__all__ = [
    "ValueKind",
    "ValueProfile",
    "ValueGenerator",
    "LINE_TEMPLATE",
    "FILLER_CHAR",
    "MAX_SAMPLES",
    "build_base_value",
]
