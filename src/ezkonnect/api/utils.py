"""
Shared API router utilities.

- ``_dc()`` — convert a dataclass (or dict) to a plain dict
- ``_handle_error()`` — convert a failed ``OperationResult`` to an error response
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from fastapi.responses import JSONResponse

from ezkonnect.api.middleware.errors import error_response, status_for_error_code
from ezkonnect.ops.result import OperationResult


def _dc(obj: Any) -> dict[str, Any]:
    """Convert a dataclass (or dict) to a plain dict."""
    if hasattr(obj, "__dataclass_fields__"):
        return asdict(obj)
    return obj if isinstance(obj, dict) else {}


def _handle_error(result: OperationResult) -> JSONResponse:
    """Convert a failed ``OperationResult`` into an error response.

    The error code picks the status; the message becomes ``error``.
    """
    code = result.error.code if result.error else "INTERNAL"
    return error_response(
        status=status_for_error_code(code),
        message=result.error.message if result.error else "Operation failed",
    )
