"""
Common API schemas — the error envelope.

Every non-2xx response, whatever produced it (validation, cluster
access, confirmation timeout, routing), has the same body::

    {"error": "Invalid input: controller_kind 'job' of item 0 is not one of [...]"}
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ErrorBody(BaseModel):
    """Error envelope for all 4xx/5xx responses."""

    error: str = Field(description="Human-readable error message")
