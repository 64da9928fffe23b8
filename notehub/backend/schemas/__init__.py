# Request and response schemas; the envelopes are shared by every endpoint.
from notehub.backend.schemas.base import ApiResponse, ErrorResponse

__all__ = ["ApiResponse", "ErrorResponse"]
