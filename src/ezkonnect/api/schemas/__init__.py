"""Pydantic schemas for request bodies, responses and error envelopes."""

from ezkonnect.api.schemas.common import ErrorBody
from ezkonnect.api.schemas.domains import (
    AnnotationResultSchema,
    LogsAnnotationItem,
    ProjectedRecordSchema,
    TracesAnnotationItem,
)

__all__ = [
    "ErrorBody",
    "AnnotationResultSchema",
    "LogsAnnotationItem",
    "ProjectedRecordSchema",
    "TracesAnnotationItem",
]
