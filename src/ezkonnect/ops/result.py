"""
Operation result envelope.

Provides :class:`OperationResult` — a typed success/failure envelope
that every operation function returns.  Failures carry a
machine-readable code that the API layer maps to an HTTP status, plus
the human-readable message that ends up in ``{"error": ...}``.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from ezkonnect.core.errors import (
    DecodeError,
    ErrorCategory,
    EzkonnectError,
    categorize_error,
)

T = TypeVar("T")

# Error codes understood by ezkonnect.api.middleware.errors
VALIDATION_FAILED = "VALIDATION_FAILED"
DECODE_FAILED = "DECODE_FAILED"
CLUSTER_ERROR = "CLUSTER_ERROR"
CONFIRMATION_TIMEOUT = "CONFIRMATION_TIMEOUT"
INTERNAL = "INTERNAL"

_CATEGORY_TO_CODE: dict[ErrorCategory, str] = {
    ErrorCategory.VALIDATION: VALIDATION_FAILED,
    ErrorCategory.CLUSTER: CLUSTER_ERROR,
    ErrorCategory.TIMEOUT: CONFIRMATION_TIMEOUT,
}


@dataclass(frozen=True, slots=True)
class OperationError:
    """Structured error detail for failed operations.

    Attributes:
        code: Machine-readable code (``VALIDATION_FAILED``, ``CLUSTER_ERROR``, …).
        message: Human-readable description of the error.
        category: Optional :class:`ErrorCategory` for routing.
        details: Extra key/value context (item index, resource name, …).
    """

    code: str
    message: str
    category: ErrorCategory | None = None
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class OperationResult(Generic[T]):
    """Envelope returned by every operation function.

    Factory methods :meth:`ok`, :meth:`fail` and :meth:`from_error`
    should be used instead of the constructor directly.
    """

    success: bool
    data: T | None = None
    error: OperationError | None = None
    elapsed_ms: float = 0.0

    @classmethod
    def ok(
        cls,
        data: T,
        *,
        elapsed_ms: float = 0.0,
    ) -> OperationResult[T]:
        """Create a successful result."""
        return cls(success=True, data=data, elapsed_ms=elapsed_ms)

    @classmethod
    def fail(
        cls,
        code: str,
        message: str,
        *,
        category: ErrorCategory | None = None,
        details: dict[str, Any] | None = None,
        elapsed_ms: float = 0.0,
    ) -> OperationResult[T]:
        """Create a failed result."""
        return cls(
            success=False,
            error=OperationError(code=code, message=message, category=category, details=details or {}),
            elapsed_ms=elapsed_ms,
        )

    @classmethod
    def from_error(cls, exc: Exception, *, elapsed_ms: float = 0.0) -> OperationResult[T]:
        """Create a failed result from a raised exception."""
        category = categorize_error(exc)
        if isinstance(exc, DecodeError):
            code = DECODE_FAILED
        else:
            code = _CATEGORY_TO_CODE.get(category, INTERNAL)
        details = exc.to_dict() if isinstance(exc, EzkonnectError) else {}
        return cls.fail(code, str(exc), category=category, details=details, elapsed_ms=elapsed_ms)


# ------------------------------------------------------------------ #
# Timing helper
# ------------------------------------------------------------------ #


class _Timer:
    """Minimal stopwatch for timing operations."""

    __slots__ = ("_start",)

    def __init__(self) -> None:
        self._start = time.perf_counter()

    @property
    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self._start) * 1000


def start_timer() -> _Timer:
    """Return a lightweight timer.  Use ``timer.elapsed_ms`` when done."""
    return _Timer()
