"""
SkateMap Backend: Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for the different error scenarios.
How:   Each exception carries a user-facing message and an optional context
       dict. Global exception handlers (registered in main.py) turn them
       into structured JSON error responses with the right HTTP status.
Who:   Raised by services and middleware; caught by global handlers.

Exception Hierarchy:
    SkateMapError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── NotFoundError            → 404 Not Found
    ├── PlacesServiceError       → 503 Service Unavailable (retry later)
    ├── CircuitBreakerOpenError  → 503 Service Unavailable (circuit open)
    ├── DatabaseError            → 500 Internal Server Error
    └── RateLimitExceededError   → 429 Too Many Requests

The `message` of every exception is the single string the map screen
shows in its error banner, so it must read well to an end user.
"""

from typing import Any, Dict, Optional


class SkateMapError(Exception):
    """
    Base exception for all SkateMap application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged; only some handlers return it)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(SkateMapError):
    """
    Raised when client input fails a business rule.

    When:    Blank spot name, rating outside 1-5, malformed query values.
    HTTP:    400 Bad Request

    Schema-level problems (wrong types, missing fields) are still answered
    by FastAPI's own 422 handler; this class covers the rules services
    enforce themselves.

    Example response:
        {
            "error": "validation_error",
            "message": "Name is required",
            "details": {"field": "name"}
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


class NotFoundError(SkateMapError):
    """
    Raised when a requested resource does not exist.

    When:    GET/DELETE /api/spots/{id} or review calls with an unknown spot id.
    HTTP:    404 Not Found

    SQLAlchemy returns None for missing rows; services convert that None
    into this exception so routes stay free of status-code logic.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource.capitalize()} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class PlacesServiceError(SkateMapError):
    """
    Raised when the nearby-places provider (Overpass) fails.

    When:    Non-2xx answer, unreadable JSON, or transport failure after
             tenacity retries are exhausted.
    HTTP:    503 Service Unavailable

    Attributes:
        retry_after: Suggested seconds before the client retries (optional)
    """

    def __init__(
        self,
        message: str = "Failed to load nearby places.",
        retry_after: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if retry_after:
            ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after


class CircuitBreakerOpenError(SkateMapError):
    """
    Raised when the Overpass circuit breaker is OPEN.

    When:    After cb_failure_threshold consecutive failed Overpass calls.
    HTTP:    503 Service Unavailable

    State machine:
        CLOSED (normal) → failures increment counter
        → After N failures → OPEN (reject all calls for the recovery window)
        → After the window → HALF-OPEN (allow one test call)
        → Test succeeds → CLOSED; test fails → OPEN again
    """

    def __init__(
        self,
        recovery_time: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Nearby search is temporarily unavailable due to repeated failures. "
            f"Try again in about {recovery_time} seconds."
        )
        ctx = context or {}
        ctx["recovery_time"] = recovery_time
        super().__init__(message=message, context=ctx)
        self.recovery_time = recovery_time


class DatabaseError(SkateMapError):
    """
    Raised when database operations fail unexpectedly.

    When:    Connection lost mid-query, constraint violation, deadlock, etc.
    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic. SQL, constraint
        names and driver errors are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(SkateMapError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    When:    After rate_limit_requests within rate_limit_window seconds.
    HTTP:    429 Too Many Requests (with a Retry-After header)
    """

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Too many requests. Please wait {retry_after} seconds before retrying."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
