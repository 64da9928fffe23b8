"""
Custom Exceptions.

Services raise these; the exception handlers turn them into error
envelopes. Each class fixes a stable ``code`` that clients can switch on;
the HTTP status lives with the handlers (EXCEPTION_STATUS_MAP).

    raise DuplicateError(f"The course '{name}' already exists.")
    raise ValidationError("Note references missing documents", details={"course": "..."})
"""

from typing import Any


class ApplicationError(Exception):
    """Base exception for all application errors."""

    code = "SYS_INTERNAL_ERROR"
    default_message = "An unexpected error occurred"

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
        code: str | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.details = details or {}
        if code is not None:
            self.code = code
        super().__init__(self.message)


class NotFoundError(ApplicationError):
    code = "RES_NOT_FOUND"
    default_message = "Resource not found"


class ValidationError(ApplicationError):
    """A precondition failed before anything was written."""

    code = "VAL_VALIDATION_ERROR"
    default_message = "Validation failed"


class DuplicateError(ValidationError):
    """A course, profile or account with that name already exists."""

    code = "VAL_DUPLICATE"
    default_message = "Resource already exists"


class ResourceInUseError(ValidationError):
    """The resource is still referenced, e.g. a course that notes point to."""

    code = "VAL_RESOURCE_IN_USE"
    default_message = "Resource still in use"


class AuthenticationError(ApplicationError):
    code = "AUTH_UNAUTHORIZED"
    default_message = "Authentication required"


class AuthorizationError(ApplicationError):
    code = "AUTHZ_FORBIDDEN"
    default_message = "Permission denied"


class DatabaseError(ApplicationError):
    code = "SYS_DATABASE_ERROR"
    default_message = "Database error"
