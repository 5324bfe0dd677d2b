"""Error types raised by format detection and episode intake."""

from __future__ import annotations


class DetectionError(Exception):
    """Base class for failures surfaced by the detection layer."""


class ValidationError(DetectionError, ValueError):
    """Input was missing or malformed (HTTP 400 at the boundary)."""


class NetworkError(DetectionError):
    """The remote host could not be reached or dropped the connection."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class HeadersTimeoutError(DetectionError, TimeoutError):
    """No response headers arrived within the allowed time."""

    def __init__(self, message: str, timeout: float | None = None):
        super().__init__(message)
        self.timeout = timeout
