"""RoadBench Exceptions - Harness Error Hierarchy.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.

Error taxonomy:
    InvalidSpecError       malformed value-profile specification (parse time)
    BackendOpenError       an adapter could not initialize its storage
    BackendOperationError  put/get/commit failed during a pass
    CleanupError           close/delete failed during teardown (never raised
                           out of teardown, only recorded)
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class RoadBenchError(Exception):
    """Base exception for all harness errors.

    Attributes:
        message: Human-readable error description
        context: Additional context for debugging
    """

    def __init__(
        self,
        message: str,
        *,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __repr__(self) -> str:
        ctx_str = f", context={self.context}" if self.context else ""
        return f"{self.__class__.__name__}({self.message!r}{ctx_str})"


class InvalidSpecError(RoadBenchError, ValueError):
    """Raised for an empty, malformed or out-of-range value-profile spec.

    Attributes:
        spec: The rejected specification
    """

    def __init__(self, spec: Any, reason: str) -> None:
        self.spec = spec
        self.reason = reason
        super().__init__(
            f"Invalid value profile {spec!r}: {reason}",
            context={"spec": spec},
        )


class BackendError(RoadBenchError):
    """Base for errors attributable to a single backend.

    Attributes:
        backend: Name of the failing backend
    """

    def __init__(
        self,
        backend: str,
        message: str,
        *,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.backend = backend
        ctx = {"backend": backend}
        ctx.update(context or {})
        super().__init__(f"[{backend}] {message}", context=ctx)


class BackendOpenError(BackendError):
    """Raised when an adapter cannot open its storage."""


class BackendOperationError(BackendError):
    """Raised when put/get/commit fails mid-pass.

    Attributes:
        operation: Failing operation name
        key: Key involved, if any
    """

    def __init__(
        self,
        backend: str,
        operation: str,
        message: str,
        *,
        key: Optional[str] = None,
    ) -> None:
        self.operation = operation
        self.key = key
        context: Dict[str, Any] = {"operation": operation}
        if key is not None:
            context["key"] = key
        super().__init__(backend, f"{operation} failed: {message}", context=context)


class CleanupError(BackendError):
    """Records a failed close or delete during teardown.

    Attributes:
        path: Storage path that could not be removed, if any
    """

    def __init__(self, backend: str, message: str, *, path: Optional[str] = None) -> None:
        self.path = path
        context = {"path": path} if path is not None else None
        super().__init__(backend, message, context=context)


__all__ = [
    "RoadBenchError",
    "InvalidSpecError",
    "BackendError",
    "BackendOpenError",
    "BackendOperationError",
    "CleanupError",
]
