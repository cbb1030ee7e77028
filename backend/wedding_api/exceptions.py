"""
Wedding Gallery Backend — Custom Exception Hierarchy
=====================================================

What:  Application-specific exceptions for the two failure families the
       service knows about: bad client input and failing upstream services.
How:   Each exception carries a user-facing message and an optional context
       dict. Global handlers (registered in main.py) turn them into JSON
       responses of the form {"error": <message>, "request_id": <id>}.
Who:   Raised by services and stores; caught by the global handlers.

Exception Hierarchy:
    WeddingAPIError (base)
    ├── ValidationError            → 400 Bad Request
    │   └── NoFileProvidedError    → 400 "No file uploaded"
    └── UpstreamError              → 500 Internal Server Error
        ├── UploadFailedError      → media host rejected an upload
        ├── FetchFailedError       → media host search failed
        └── StoreUnavailableError  → durable blessing store unreachable

Upstream errors are terminal for the request. The underlying cause is
logged server-side from `context`; only `message` reaches the client.
"""

from typing import Any, Dict, Optional


class WeddingAPIError(Exception):
    """
    Base exception for all application errors.

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


class ValidationError(WeddingAPIError):
    """
    Raised when client input fails a presence check.

    HTTP:    400 Bad Request
    When:    Missing blessing name/message.
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


class NoFileProvidedError(ValidationError):
    """
    Raised when an upload request carries no file content.

    Checked before the media host is contacted, so no remote call is made.
    """

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="No file uploaded", field="file", context=context)


class UpstreamError(WeddingAPIError):
    """
    Raised when the media host or the durable store fails.

    HTTP:    500 Internal Server Error
    No distinction is made between transient and permanent failures.
    """


class UploadFailedError(UpstreamError):
    """Media host rejected or errored on an image upload."""

    def __init__(
        self,
        message: str = "Failed to upload image",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class FetchFailedError(UpstreamError):
    """
    Media host search failed.

    An empty search result is NOT a failure; only query/transport errors are.
    """

    def __init__(
        self,
        message: str = "Failed to fetch images",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StoreUnavailableError(UpstreamError):
    """
    The durable blessing store could not be reached or written.

    The in-memory store never raises this.
    """

    def __init__(
        self,
        message: str = "Blessing store is unavailable",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
