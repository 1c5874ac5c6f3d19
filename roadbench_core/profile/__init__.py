"""Profile module - Deterministic value payloads."""

from roadbench_core.profile.value_profile import (
    MAX_SAMPLES,
    ValueGenerator,
    ValueKind,
    ValueProfile,
)

__all__ = [
    "MAX_SAMPLES",
    "ValueGenerator",
    "ValueKind",
    "ValueProfile",
]
