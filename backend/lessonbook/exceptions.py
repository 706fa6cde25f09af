"""
LessonBook Backend — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for the failure taxonomy of the API.
How:   Each exception carries a client-safe message and an optional context
       dict. Global exception handlers (registered in main.py) turn them into
       `{"error": message}` JSON responses with the matching status code.
Who:   Raised by the collection resolver, services and validators.

Exception Hierarchy:
    LessonBookError (base)
    ├── ValidationError   → 400 Bad Request (malformed id, empty or invalid body)
    ├── NotFoundError     → 404 Not Found (collection, document, file)
    └── DatabaseError     → 500 Internal Server Error (store unreachable or failed)
"""

from typing import Any, Dict, Optional

# Body of every 500 response; driver and traceback details are only logged
INTERNAL_ERROR_MESSAGE = "An internal error occurred."


class LessonBookError(Exception):
    """
    Base exception for all LessonBook application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(LessonBookError):
    """
    Raised when client input fails validation.

    When:    Malformed document id, empty body, client-supplied `_id`,
             lesson or order payload missing required fields.
    HTTP:    400 Bad Request
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


class NotFoundError(LessonBookError):
    """
    Raised when a requested resource does not exist.

    When:    Unknown collection name, no document with the given id, empty
             collection on the generic listing routes, missing image file.
    HTTP:    404 Not Found

    The message always names the missing entity. Callers that need a
    specific wording (e.g. empty listings) pass `message` directly.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if message is None:
            message = f"The requested {resource} was not found"
            if resource_id:
                message = f'{resource.capitalize()} "{resource_id}" was not found.'
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(LessonBookError):
    """
    Raised when a storage operation fails unexpectedly.

    When:    Server selection timeout, network error, write failure.
    HTTP:    500 Internal Server Error

    The response body is always the generic internal-error message; the
    driver error is logged server-side from `context`.
    """

    def __init__(
        self,
        message: str = INTERNAL_ERROR_MESSAGE,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
