"""
Structured error types for ezkonnect.

Every failure the service can report is an :class:`EzkonnectError`
subclass carrying a category, the human-readable message, optional
structured context and the chained underlying exception.  The API layer
maps categories to HTTP status codes; nothing here knows about HTTP.

Manifesto:
    - **Typed Error Hierarchy:** One class per failure the caller can act on
    - **Explicit Categories:** Category decides the status code, not the message
    - **Error Chaining:** Kubernetes ``ApiException`` objects are kept as ``cause``
    - **No Retries:** Errors are surfaced, never retried behind the caller's back

Architecture:
    ::

        EzkonnectError (category, context, cause)
        ├── ValidationError          (VALIDATION)  → 400
        │   └── DecodeError          (VALIDATION)  → 400
        ├── ClusterAccessError       (CLUSTER)     → 500
        │   └── ClusterConfigError   (CLUSTER)     → 500
        └── ConfirmationTimeoutError (TIMEOUT)     → 500

Examples:
    >>> error = ValidationError("Invalid input", field="controller_kind", value="job")
    >>> error.category
    <ErrorCategory.VALIDATION: 'VALIDATION'>
    >>> error.to_dict()["field"]
    'controller_kind'

Tags:
    error-handling, exception-hierarchy, error-context, ezkonnect

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories used for routing errors to status codes."""

    VALIDATION = "VALIDATION"
    CLUSTER = "CLUSTER"
    TIMEOUT = "TIMEOUT"
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """Structured metadata attached to an error.

    Attributes:
        resource: Kind of the Kubernetes object involved (``deployment``, ...)
        namespace: Namespace of the object
        name: Name of the object
        metadata: Free-form extra fields
    """

    resource: str | None = None
    namespace: str | None = None
    name: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for key in ("resource", "namespace", "name"):
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class EzkonnectError(Exception):
    """
    Base exception for all ezkonnect errors.

    Subclasses set ``default_category``; callers may override it per
    instance.  ``cause`` is chained as ``__cause__`` so tracebacks keep
    the original Kubernetes client error.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> EzkonnectError:
        """
        Add context to this error (fluent API).

        Usage:
            raise ClusterAccessError("Error getting resource").with_context(
                resource="deployment", namespace="default", name="api"
            )
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(EzkonnectError):
    """
    Request validation error.

    Raised before any cluster write happens; the whole batch is rejected.
    """

    default_category = ErrorCategory.VALIDATION

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        index: int | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value
        self.index = index

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        if self.value is not None:
            result["value"] = repr(self.value)
        if self.index is not None:
            result["index"] = self.index
        return result


class DecodeError(ValidationError):
    """Malformed request body (not JSON, wrong shape, missing fields)."""

    pass


# =============================================================================
# CLUSTER ERRORS
# =============================================================================


class ClusterAccessError(EzkonnectError):
    """
    Kubernetes API failure: list, get, update or watch.

    The batch is aborted at the failing item.  Mutations already applied
    to earlier items stay applied.
    """

    default_category = ErrorCategory.CLUSTER

    @property
    def status(self) -> int | None:
        """HTTP status of the underlying ``ApiException``, if any."""
        return getattr(self.cause, "status", None)


class ClusterConfigError(ClusterAccessError):
    """Neither a kubeconfig file nor in-cluster credentials could be loaded."""

    pass


# =============================================================================
# CONFIRMATION ERRORS
# =============================================================================


class ConfirmationTimeoutError(EzkonnectError):
    """
    The custom resource did not change before the request deadline.

    The workload mutation for the timed-out item is not rolled back.
    """

    default_category = ErrorCategory.TIMEOUT

    def __init__(self, name: str, timeout_seconds: float | None = None, **kwargs: Any):
        super().__init__(f"Timeout while updating the instrumentation status: {name}", **kwargs)
        self.name = name
        self.timeout_seconds = timeout_seconds


def categorize_error(error: Exception) -> ErrorCategory:
    """Return the category of any exception, ``INTERNAL`` for foreign ones."""
    if isinstance(error, EzkonnectError):
        return error.category
    return ErrorCategory.INTERNAL


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "EzkonnectError",
    "ValidationError",
    "DecodeError",
    "ClusterAccessError",
    "ClusterConfigError",
    "ConfirmationTimeoutError",
    "categorize_error",
]
