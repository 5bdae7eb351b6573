"""
FitGroup Backend — Custom Exception Hierarchy
=============================================

What:  Defines application-specific exceptions for different error scenarios.
Why:   Services raise typed errors; the transport boundary (main.py) maps each
       type to an HTTP status code and a JSON body with a `message` field.
How:   Each exception class carries a message and optional context dict.
Who:   Raised by services; caught by global handlers.
When:  During request processing when a request fails definitively.

Exception Hierarchy:
    FitGroupError (base)
    ├── ValidationError          → 400 Bad Request (422 when semantic)
    ├── AuthorizationError       → 401 Unauthorized (password mismatch)
    ├── ForbiddenError           → 403 Forbidden (caller lacks standing)
    ├── NotFoundError            → 404 Not Found
    ├── ConflictError            → 400 Bad Request (uniqueness violation)
    └── InternalError            → 500 Internal Server Error
        └── FileStorageError     → 500 Internal Server Error

No exception in this hierarchy is retried anywhere. Every operation succeeds
or fails definitively within one request.
"""

from typing import Any, Dict, Optional


class FitGroupError(Exception):
    """
    Base exception for all FitGroup application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged; returned only for validation errors)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(FitGroupError):
    """
    Raised when client input fails validation.

    HTTP: 400 for malformed/out-of-range input. Pass `status_code=422` for
    input that is well-formed but semantically unacceptable.

    Example response:
        {
            "error": "validation_error",
            "message": "Invalid period. Use 'weekly' or 'monthly'.",
            "details": {"field": "period"}
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        status_code: int = 400,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field
        self.status_code = status_code


class AuthorizationError(FitGroupError):
    """
    Raised when a supplied password does not match the stored credential.

    HTTP: 401 Unauthorized
    """

    def __init__(
        self,
        message: str = "Wrong password",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForbiddenError(FitGroupError):
    """
    Raised when the caller has no standing for the operation.

    When:  A non-participant posts a record; the owner tries to leave.
    HTTP:  403 Forbidden
    """

    def __init__(
        self,
        message: str = "You are not allowed to perform this action",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(FitGroupError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing rows; services convert that into
    NotFoundError so the handler can answer 404.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"{resource.capitalize()} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=message, context=ctx)


class ConflictError(FitGroupError):
    """
    Raised when a write would violate a uniqueness rule.

    When:  Joining a group with a nickname already used in that group.
    HTTP:  400 Bad Request
    """

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InternalError(FitGroupError):
    """
    Raised when the store or another internal component fails unexpectedly.

    The message returned to the client is always generic; details are
    logged server-side only.
    """

    def __init__(
        self,
        message: str = "An internal error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class FileStorageError(InternalError):
    """
    Raised when file system operations fail.

    When:  Disk full, permission denied, directory not writable, I/O error.
    HTTP:  500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
