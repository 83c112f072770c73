"""
Periferia Social Backend — Custom Exception Hierarchy
======================================================

What:  Defines the application's typed failures, each carrying an HTTP status.
Why:   Services raise one of these instead of building responses; the global
       handler in main.py is the sole translator from failure to HTTP.
How:   Each exception class carries a message and optional context dict.
       The message is returned to the client; the context is logged only.
Who:   Raised by services and dependencies; caught by global handlers.

Exception Hierarchy:
    PeriferiaError (base)            → status_code on the class
    ├── ValidationError              → 400 Bad Request (client can fix)
    ├── AuthenticationError          → 401 Unauthorized
    ├── PermissionDeniedError        → 403 Forbidden
    ├── NotFoundError                → 404 Not Found
    └── DatabaseError                → 500 Internal Server Error

Response envelope:
    {"message": "<exc.message>"}
"""

from typing import Any, Dict, Optional


class PeriferiaError(Exception):
    """
    Base exception for all Periferia Social application errors.

    Attributes:
        status_code: HTTP status the global handler responds with
        message:     User-facing error description (safe to return in API response)
        context:     Additional debug info (logged but NOT returned to client)
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(PeriferiaError):
    """
    Raised when client input is missing, invalid, or conflicts with stored data.

    When:    Missing login fields, blank post message, wrong current password,
             duplicate like, duplicate email/alias.
    HTTP:    400 Bad Request
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class AuthenticationError(PeriferiaError):
    """
    Raised when the caller cannot be authenticated.

    When:    Missing/malformed/expired bearer token, or bad login credentials.
    HTTP:    401 Unauthorized

    Login failures use one message for "unknown email" and "wrong password"
    so the response does not reveal which accounts exist.
    """

    status_code = 401

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PermissionDeniedError(PeriferiaError):
    """
    Raised when an authenticated user acts on a resource they do not own.

    HTTP:    403 Forbidden
    """

    status_code = 403

    def __init__(
        self,
        message: str = "You do not have permission to perform this action",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(PeriferiaError):
    """
    Raised when a requested resource does not exist.

    What:    SQLAlchemy returns None for missing rows; services convert that
             None into this exception so the handler can answer 404.
    HTTP:    404 Not Found
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=message, context=ctx)
        self.resource = resource


class DatabaseError(PeriferiaError):
    """
    Raised when database operations fail unexpectedly.

    Security Note:
        The message returned to the client is always generic. Constraint names,
        SQL text and driver errors go to the context and are logged server-side.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
