"""
Shared error handling for the Client Queries service.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel, Field

from opentelemetry import trace


class ErrorResponse(BaseModel):
    """Standard error response format."""

    trace_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class ServiceException(Exception):
    """Base exception for Client Queries services."""

    http_status = 500

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        trace_id = None
        current_span = trace.get_current_span()
        if current_span and current_span.is_recording():
            span_context = current_span.get_span_context()
            if span_context.trace_id != 0:
                trace_id = f"{span_context.trace_id:032x}"

        return ErrorResponse(
            trace_id=trace_id,
            code=self.code,
            message=self.message,
            details=self.details
        )


class CacheError(ServiceException):
    """The cache tier could not answer or could not be written."""

    http_status = 503

    def __init__(self, message: str = "Cache error", details: Optional[Dict[str, Any]] = None):
        super().__init__("CACHE_ERROR", message, details)


class DurableStoreError(ServiceException):
    """The authoritative store could not answer."""

    http_status = 503

    def __init__(self, message: str = "Durable store error", details: Optional[Dict[str, Any]] = None):
        super().__init__("DURABLE_STORE_ERROR", message, details)
