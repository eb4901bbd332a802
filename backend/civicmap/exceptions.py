"""
CivicMap Backend — Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for every failure the read path can hit.
How:   Each exception carries a message and a context dict. Global exception
       handlers (registered in main.py) turn them into structured JSON error
       responses with the matching HTTP status code.
Who:   Raised by the database layer, record mappers and services.

Exception Hierarchy:
    CivicMapError (base)
    ├── NotFoundError               → 404 Not Found (welcome file absent)
    ├── FileStorageError            → 500 (welcome file unreadable)
    ├── StoreConnectionError        → 500 per request, fatal at startup
    └── RecordMappingError          → 500 (stored document breaks the contract)
        ├── MissingFieldError       → mandatory field absent
        ├── TypeMismatchError       → field present but of the wrong type
        └── GeometryError           → polygon ring data missing or empty

Every fault aborts the whole operation; nothing is retried or downgraded to a
partial response.
"""

from typing import Any, Dict, Optional


class CivicMapError(Exception):
    """
    Base exception for all CivicMap application errors.

    Attributes:
        message:  Human-readable error description (returned in the API response)
        context:  Fault detail (collection, field, driver message, ...)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class NotFoundError(CivicMapError):
    """
    Raised when a requested resource does not exist.

    When:    GET /welcome and the welcome file is missing on disk.
    HTTP:    404 Not Found, the only non-500 failure of this API.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class FileStorageError(CivicMapError):
    """
    Raised when a file exists but cannot be read.

    When:    Permission denied, the path is a directory, I/O error, bad encoding.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "File read operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StoreConnectionError(CivicMapError):
    """
    Raised when the document store is unreachable or rejects the query.

    When:    Server selection timeout, network error, authentication failure.
    HTTP:    500 per request. At startup the lifespan lets it propagate, which
             stops the process.
    """

    def __init__(
        self,
        message: str = "The document store is unavailable",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RecordMappingError(CivicMapError):
    """
    Base for faults raised while turning a stored document into an API value.

    A mapping fault means the stored data breaks the response contract; it is a
    server-side data-integrity problem, never the client's.
    """

    def __init__(
        self,
        message: str,
        collection: str,
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["collection"] = collection
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.collection = collection
        self.field = field


class MissingFieldError(RecordMappingError):
    """A mandatory field is absent from a stored document."""

    def __init__(self, collection: str, field: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"Document in '{collection}' is missing required field '{field}'",
            collection=collection,
            field=field,
            context=context,
        )


class TypeMismatchError(RecordMappingError):
    """
    A field is present but cannot be read as its declared type.

    Example response details:
        {"collection": "locations", "field": "latitude",
         "expected": "number", "actual": "str"}
    """

    def __init__(
        self,
        collection: str,
        field: str,
        expected: str,
        actual: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["expected"] = expected
        ctx["actual"] = actual
        super().__init__(
            message=(
                f"Field '{field}' in '{collection}' has type '{actual}', expected {expected}"
            ),
            collection=collection,
            field=field,
            context=ctx,
        )
        self.expected = expected
        self.actual = actual


class GeometryError(RecordMappingError):
    """
    Polygon ring data is missing or empty.

    When:    `location` absent/null, `location.coordinates` empty, or the outer
             ring `location.coordinates[0]` empty.
    """

    def __init__(
        self,
        collection: str,
        reason: str,
        field: str = "location",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["reason"] = reason
        super().__init__(
            message=f"Invalid polygon geometry in '{collection}': {reason}",
            collection=collection,
            field=field,
            context=ctx,
        )
