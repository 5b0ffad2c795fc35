"""Custom exceptions for the marineboard pipeline."""

from __future__ import annotations


class MarineBoardError(Exception):
    """Base exception for all marineboard errors."""


class SourceUnavailable(MarineBoardError):
    """Raised when an upstream source cannot be reached."""


class SourceTimeout(SourceUnavailable):
    """Raised when a request to an upstream source times out."""


class UpstreamHTTPError(SourceUnavailable):
    """Raised when an upstream returns an error response (4xx/5xx)."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"HTTP {status_code}: {message}")


class MalformedResponse(MarineBoardError):
    """Raised when an upstream response does not match the expected schema."""


class MalformedReport(MalformedResponse):
    """Raised when a tabular text report has no recognizable header line."""


class EmptyResult(MarineBoardError):
    """Raised when a well-formed response contains no usable data."""


class CacheWriteConflict(MarineBoardError):
    """Raised when a conditional write loses against a concurrent writer."""
