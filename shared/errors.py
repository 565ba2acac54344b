"""
Shared error handling for the Game Platform Gateway.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel


def utc_timestamp(moment: Optional[datetime] = None) -> str:
    """Format a UTC instant as ISO-8601 with millisecond precision and a Z suffix."""
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ErrorResponse(BaseModel):
    """Standard error envelope."""

    success: bool = False
    error: str
    code: str
    details: Any = None
    timestamp: str


class SuccessResponse(BaseModel):
    """Standard success envelope."""

    success: bool = True
    message: str = "Success"
    data: Any = None
    timestamp: str


class PlatformApiException(Exception):
    """Base exception for the gateway service."""

    status_code = 500

    def __init__(self, code: str, message: str, details: Any = None, status_code: Optional[int] = None):
        self.code = code
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            error=self.message,
            code=self.code,
            details=self.details,
            timestamp=utc_timestamp(),
        )


class AuthenticationError(PlatformApiException):
    """Missing or wrong API key."""

    status_code = 401

    def __init__(self, message: str = "Invalid or missing API key", details: Any = None):
        super().__init__("INVALID_API_KEY", message, details)


class ValidationError(PlatformApiException):
    """Validation-related errors."""

    status_code = 400

    def __init__(self, message: str = "Validation failed", details: Any = None):
        super().__init__("VALIDATION_ERROR", message, details)


class NotFoundError(PlatformApiException):
    """Unknown route."""

    status_code = 404

    def __init__(self, message: str = "Endpoint not found", details: Any = None):
        super().__init__("ENDPOINT_NOT_FOUND", message, details)


class RateLimitError(PlatformApiException):
    """Rate limiting errors."""

    status_code = 429

    def __init__(self, message: str = "Too many requests from this IP, please try again later.", details: Any = None):
        super().__init__("RATE_LIMIT_EXCEEDED", message, details)


class UpstreamFetchError(PlatformApiException):
    """Base class for failures talking to the upstream platform."""

    status_code = 502

    def __init__(self, code: str, message: str, url: Optional[str] = None, details: Any = None):
        self.url = url
        payload = {"url": url} if url else {}
        if isinstance(details, dict):
            payload.update(details)
        super().__init__(code, message, payload or None)


class UpstreamUnreachable(UpstreamFetchError):
    """Connection could not be established or the request never completed."""

    def __init__(self, url: Optional[str] = None, reason: str = ""):
        message = "Failed to connect to upstream API"
        if reason:
            message = f"{message}: {reason}"
        super().__init__("UPSTREAM_UNREACHABLE", message, url)


class UpstreamTimeout(UpstreamFetchError):
    """No response within the fixed bound."""

    status_code = 504

    def __init__(self, url: Optional[str] = None, timeout: Optional[float] = None):
        message = "Upstream API timed out"
        if timeout is not None:
            message = f"{message} after {timeout:g}s"
        super().__init__("UPSTREAM_TIMEOUT", message, url, {"timeout_seconds": timeout})


class UpstreamError(UpstreamFetchError):
    """Upstream answered with a non-success status."""

    def __init__(self, status_code: int, url: Optional[str] = None, reason: str = ""):
        self.upstream_status = status_code
        message = f"Upstream API error: {status_code}"
        if reason:
            message = f"{message} - {reason}"
        super().__init__("UPSTREAM_ERROR", message, url, {"upstream_status": status_code})


class MalformedResponse(UpstreamFetchError):
    """Response body could not be decoded."""

    def __init__(self, url: Optional[str] = None, reason: str = ""):
        message = "Upstream API returned an undecodable body"
        if reason:
            message = f"{message}: {reason}"
        super().__init__("MALFORMED_RESPONSE", message, url)
