"""Error taxonomy for the acquisition pipeline."""

from __future__ import annotations


class MigrationMapError(Exception):
    """Base class for every error raised by the pipeline."""


class NetworkError(MigrationMapError):
    """Transport-level failure while talking to a remote source."""

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url


class HttpStatusError(NetworkError):
    """The remote source answered with a non-success status code."""

    def __init__(self, status: int, url: str | None = None):
        super().__init__(f"HTTP error: {status}", url=url)
        self.status = status


class ContentTypeError(MigrationMapError):
    """The response body is not JSON."""

    def __init__(self, content_type: str | None, url: str | None = None):
        super().__init__(f"Expected application/json, got {content_type or 'no content-type'}")
        self.content_type = content_type
        self.url = url


class DecodeShapeError(MigrationMapError):
    """A payload lacks the dimension/value structure the decoder expects."""
