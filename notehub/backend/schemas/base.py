"""
Response Envelopes.

Every REST response is wrapped:

    {"success": true,  "data": ...,  "metadata": {"request_id": ..., "timestamp": ...}}
    {"success": false, "error": {"code", "message", "details"}, "metadata": {...}}

The request id defaults to the one bound for the current request by
RequestContextMiddleware, so endpoints only supply ``data``.
"""

from datetime import datetime
from typing import Any, Generic, TypeVar

import structlog
from pydantic import BaseModel, ConfigDict, Field

from notehub.backend.core.utils import utc_now

DataT = TypeVar("DataT")


def current_request_id() -> str | None:
    return structlog.contextvars.get_contextvars().get("request_id")


class ResponseMetadata(BaseModel):
    timestamp: datetime = Field(default_factory=utc_now)
    request_id: str | None = Field(default_factory=current_request_id)


class ErrorDetail(BaseModel):
    """Stable machine-readable code plus a message meant for people."""

    code: str
    message: str
    details: dict[str, Any] | None = None


class _Envelope(BaseModel):
    success: bool
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)


class ApiResponse(_Envelope, Generic[DataT]):
    success: bool = True
    data: DataT | None = None

    model_config = ConfigDict(from_attributes=True)


class ErrorResponse(_Envelope):
    success: bool = False
    error: ErrorDetail
