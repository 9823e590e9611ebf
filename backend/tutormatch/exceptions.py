"""
TutorMatch Backend: Custom Exception Hierarchy
================================================

What:  Application-specific exceptions for the different error scenarios.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services and dependencies; caught by global handlers.

Exception Hierarchy:
    TutorMatchError (base)
    ├── ValidationError              → 400 Bad Request (client can fix)
    ├── AuthenticationRequiredError  → 303 See Other (redirect to login page)
    ├── FileStorageError             → 500 Internal Server Error
    └── DatabaseError                → 500 Internal Server Error

    Transient infrastructure failures (database unreachable, disk errors) are
    always 5xx with a generic message. Bad input (unknown category, unknown
    course, undecodable image) is always 4xx with a user-facing message.
"""

from typing import Any, Dict, Optional


class TutorMatchError(Exception):
    """
    Base exception for all TutorMatch application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned for 5xx errors)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(TutorMatchError):
    """
    Raised when client input fails a business rule.

    When:    Unknown category or course, bad upload type/size, image that
             cannot be decoded.
    HTTP:    400 Bad Request

    Schema-level problems (e.g. `page=0`) are rejected earlier by FastAPI
    with its own 422 response.

    Example response:
        {
            "error": "validation_error",
            "message": "Unknown category 'XYZ'.",
            "details": {"field": "category", "category": "XYZ"}
        }
    """

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


class AuthenticationRequiredError(TutorMatchError):
    """
    Raised by the login gate when the session has no authenticated user.

    HTTP:    303 See Other, Location = login page
    """

    def __init__(
        self,
        login_url: str = "/login",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message="Please log in to continue.", context=context)
        self.login_url = login_url


class FileStorageError(TutorMatchError):
    """
    Raised when file system operations fail.

    When:    Disk full, permission denied, directory not writable, I/O error.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(TutorMatchError):
    """
    Raised when database operations fail unexpectedly.

    When:    Connection lost mid-query, constraint violation, deadlock, etc.
    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic.
        Detailed error info (SQL query, constraint name, etc.) is logged
        server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
