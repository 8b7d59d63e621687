"""Exception hierarchy for content, URL, and archive failures

All exceptions inherit from FreeDocsError so callers can catch one type.
"""
from typing import Optional


class FreeDocsError(Exception):
    """Base exception for freedocs errors.

    Attributes:
        message: Human-readable error description.
        url: Optional URL the error relates to.
    """

    def __init__(self, message: str, url: Optional[str] = None) -> None:
        self.message = message
        self.url = url
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format the error message, optionally including the URL."""
        if self.url:
            return f"{self.message} (url: {self.url})"
        return self.message


class ContentError(FreeDocsError):
    """Raised when upstream content is empty or not a string."""
    pass


class InvalidUrlError(FreeDocsError):
    """Raised when a URL is not a Google Docs URL or fails the safety check."""
    pass


class ArchiveError(FreeDocsError):
    """Raised when no archive service could provide a snapshot or content.

    Attributes:
        errors: Per-service error messages, in the order services were tried.
    """

    def __init__(self, message: str, url: Optional[str] = None, errors: Optional[list[str]] = None) -> None:
        self.errors = errors or []
        super().__init__(message, url)


class RateLimitedError(ArchiveError):
    """Raised when a service answers 429 or reports a rate limit."""
    pass


class CircuitOpenError(ArchiveError):
    """Raised when a service's circuit breaker is open."""

    def __init__(self, service: str) -> None:
        self.service = service
        super().__init__(f"Circuit breaker is open for {service}")


def error_for_status(status: int, url: Optional[str] = None) -> FreeDocsError:
    """Convert an HTTP status from an archive service into a specific exception."""
    if status == 429:
        return RateLimitedError("Rate limited by archive service", url)
    if status == 404:
        return ArchiveError("Document not found or not accessible", url)
    if status == 403:
        return ArchiveError("Access denied; the document may be private", url)
    return ArchiveError(f"Archive request failed (HTTP {status})", url)
