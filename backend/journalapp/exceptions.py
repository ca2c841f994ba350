"""
JournalApp — Custom Exception Hierarchy
=========================================

What:  Defines application-specific exceptions for different error scenarios.
Why:   Callers branch on the error *type* (a tagged variant) instead of
       inspecting free-form message strings in error payloads.
How:   Each exception class carries a message and optional context dict.
       On the server, global exception handlers (registered in main.py) catch
       these and return structured JSON error responses. On the client, the
       API client maps HTTP responses back onto the same classes.
Who:   Raised by services, the auth dependency, and the client API layer.

Exception Hierarchy:
    JournalAppError (base)
    ├── ValidationError          → 400 Bad Request (user-correctable, never retried)
    ├── AuthError                → 401 Unauthorized (force re-login, never retried)
    ├── NotFoundError            → 404 Not Found (surfaced, never retried)
    ├── NetworkError             → client-side only (transient, retried with backoff)
    ├── DatabaseError            → 500 Internal Server Error
    └── RateLimitExceededError   → 429 Too Many Requests
"""

from typing import Any, Dict, Mapping, Optional


class JournalAppError(Exception):
    """
    Base exception for all JournalApp application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client
                  unless the handler decides it is safe)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(JournalAppError):
    """
    Raised when input fails validation.

    What:    The user sent data that can be corrected (empty title, bad date).
    HTTP:    400 Bad Request

    `violations` maps field name → reason so the client can render inline,
    field-level messages.

    Example response:
        {
            "error": "validation_error",
            "message": "Title is required",
            "details": {"violations": {"title": "Title is required"}}
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        violations: Optional[Mapping[str, str]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        self.violations: Dict[str, str] = dict(violations or {})
        if field and field not in self.violations:
            self.violations[field] = message
        if field:
            ctx["field"] = field
        if self.violations:
            ctx["violations"] = self.violations
        super().__init__(message=message, context=ctx)
        self.field = field


class AuthError(JournalAppError):
    """
    Raised when the bearer credential is missing, malformed, or expired.

    HTTP:    401 Unauthorized
    Client:  Treated uniformly as "session expired" — the cached credential
             is cleared and the user is sent back to the login flow.
    """

    def __init__(
        self,
        message: str = "Session expired. Please log in again.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(JournalAppError):
    """
    Raised when a requested resource does not exist or is not owned by the caller.

    HTTP:    404 Not Found

    Entries owned by another account are reported exactly like missing ones
    so ids of other users cannot be probed.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class NetworkError(JournalAppError):
    """
    Raised by the client when the service could not be reached.

    What:    Connection failure, timeout, or a 5xx answer from the server.
    Retry:   Transient — the draft reconciler retries with exponential backoff.
    """

    def __init__(
        self,
        message: str = "Could not reach the journal service",
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if status_code is not None:
            ctx["status_code"] = status_code
        super().__init__(message=message, context=ctx)
        self.status_code = status_code


class DatabaseError(JournalAppError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic. Detailed error
        info is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(JournalAppError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP:    429 Too Many Requests
    """

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
