"""Unit tests for errors.py"""

import pytest

from freedocs.errors import (
    ArchiveError,
    CircuitOpenError,
    ContentError,
    FreeDocsError,
    InvalidUrlError,
    RateLimitedError,
    error_for_status,
)


def test_message_includes_url():
    err = InvalidUrlError("Not a Google Docs URL", "https://e.com")
    assert str(err) == "Not a Google Docs URL (url: https://e.com)"
    assert err.message == "Not a Google Docs URL"
    assert err.url == "https://e.com"


def test_message_without_url():
    assert str(ContentError("No content received")) == "No content received"


@pytest.mark.parametrize("cls", [ContentError, InvalidUrlError, ArchiveError, RateLimitedError])
def test_hierarchy(cls):
    """Every error can be caught as FreeDocsError."""
    assert issubclass(cls, FreeDocsError)


def test_archive_error_keeps_service_errors():
    err = ArchiveError("All archive services failed", errors=["a: x", "b: y"])
    assert err.errors == ["a: x", "b: y"]
    assert ArchiveError("x").errors == []


def test_circuit_open_error():
    err = CircuitOpenError("direct")
    assert isinstance(err, ArchiveError)
    assert err.service == "direct"


@pytest.mark.parametrize("status,cls,text", [
    (429, RateLimitedError, "Rate limited"),
    (404, ArchiveError, "not found"),
    (403, ArchiveError, "private"),
    (502, ArchiveError, "HTTP 502"),
])
def test_error_for_status(status, cls, text):
    err = error_for_status(status, "https://e.com")
    assert type(err) is cls
    assert text in err.message
    assert err.url == "https://e.com"
