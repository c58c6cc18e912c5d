"""
Notes API — Custom Exception Hierarchy
=======================================

What:  Application-specific exceptions for the failure classes a request
       can end in.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return `{"error": ...}` JSON bodies with the matching status code.
Who:   Raised by the document store client; caught by global handlers.

Exception Hierarchy:
    NotesAPIError (base)
    ├── MalformedIdError         → 400 {"error": "malformatted id"}
    ├── DocumentValidationError  → 400 {"error": <validation message>}
    └── DatabaseError            → 500 {"error": "internal server error"}

A well-formed id that matches no document is not an exception: the store
returns None and the route answers 404 with an empty body.
"""

from typing import Any, Dict, List, Optional, Tuple


class NotesAPIError(Exception):
    """
    Base exception for all Notes API errors.

    Attributes:
        message:  Description of the failure
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


class MalformedIdError(NotesAPIError):
    """
    Raised when an identifier does not follow the store's id syntax.

    What:    The value could never name a document (wrong length, non-hex).
    When:    GET/PUT/DELETE /api/notes/{id} with e.g. "not-a-valid-id".
    HTTP:    400 Bad Request with the fixed message "malformatted id".

    Distinct from "not found": a syntactically valid id that names no
    document is a normal outcome, answered with 404.
    """

    def __init__(
        self,
        value: Any = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["value"] = value
        super().__init__(
            message=f"Cast to ObjectId failed for value \"{value}\"",
            context=ctx,
        )
        self.value = value


class DocumentValidationError(NotesAPIError):
    """
    Raised when a note document fails store-level validation.

    What:    One or more document paths broke a schema rule
             (required, minimum length).
    HTTP:    400 Bad Request; the message is returned verbatim.

    The message follows the document store's wording, e.g.
        Note validation failed: content: Path `content` (`abc`) is shorter
        than the minimum allowed length (5).
    """

    def __init__(
        self,
        errors: List[Tuple[str, str]],
        prefix: str = "Note validation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.errors = errors
        details = ", ".join(f"{path}: {reason}" for path, reason in errors)
        ctx = context or {}
        ctx["paths"] = [path for path, _ in errors]
        super().__init__(message=f"{prefix}: {details}", context=ctx)


class DatabaseError(NotesAPIError):
    """
    Raised when a store operation fails unexpectedly.

    What:    A query, insert, update or delete failed in the backend.
    When:    Connection lost, table missing, driver error.
    HTTP:    500 Internal Server Error

    The client only ever sees a generic message. The original error type is
    kept in `context` and logged server-side.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
