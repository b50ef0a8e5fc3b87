"""
Error handling — maps errors of every origin to ``{"error": ...}`` bodies.

Status mapping:
    VALIDATION_FAILED, DECODE_FAILED   → 400
    CLUSTER_ERROR                      → 500
    CONFIRMATION_TIMEOUT               → 500
    anything else                      → 500
"""

from __future__ import annotations

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ezkonnect.api.schemas.common import ErrorBody
from ezkonnect.core.errors import DecodeError, EzkonnectError
from ezkonnect.core.logging import get_logger
from ezkonnect.ops import result as codes
from ezkonnect.ops.result import OperationResult

logger = get_logger(__name__)

# ── Error code → HTTP status mapping ─────────────────────────────────────

ERROR_CODE_TO_STATUS: dict[str, int] = {
    codes.VALIDATION_FAILED: 400,
    codes.DECODE_FAILED: 400,
    codes.CLUSTER_ERROR: 500,
    codes.CONFIRMATION_TIMEOUT: 500,
    codes.INTERNAL: 500,
}


def status_for_error_code(code: str) -> int:
    """Resolve an ops error code to HTTP status, defaulting to 500."""
    return ERROR_CODE_TO_STATUS.get(code, 500)


def error_response(*, status: int, message: str) -> JSONResponse:
    """Build the JSON error response."""
    return JSONResponse(status_code=status, content=ErrorBody(error=message).model_dump())


async def ezkonnect_error_handler(request: Request, exc: EzkonnectError) -> JSONResponse:
    """Errors raised outside an operation (e.g. while building cluster clients)."""
    result = OperationResult.from_error(exc)
    logger.error("request_failed", path=request.url.path, **exc.to_dict())
    return error_response(status=status_for_error_code(result.error.code), message=exc.message)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request body → 400."""
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}" for err in exc.errors()
    )
    error = DecodeError(f"Error decoding JSON body {problems}")
    logger.warning("request_decode_failed", path=request.url.path, detail=problems)
    return error_response(status=400, message=error.message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Routing errors (404, 405) keep their status but use the error envelope."""
    response = error_response(status=exc.status_code, message=str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions — returns 500."""
    logger.exception("unhandled_exception", path=request.url.path)
    return error_response(
        status=500,
        message=str(exc) if request.app.state.settings.debug else "An unexpected error occurred.",
    )
