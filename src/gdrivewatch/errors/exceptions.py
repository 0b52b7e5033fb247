"""Exception hierarchy and HTTP error mapping for gdrivewatch."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


class GDriveWatchError(Exception):
    """
    Base exception for gdrivewatch.

    Attributes:
        details: Optional structured information (e.g., HTTP status, reason).
        cause: Optional original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}
        self.cause = cause


class InvalidReferenceError(GDriveWatchError):
    """Raised when a folder URL/id cannot be parsed into a usable identifier."""


class InvalidStateError(GDriveWatchError):
    """Raised when a folder is not in a state that allows the request."""


class DetailFetchFailure(GDriveWatchError):
    """Raised when revision metadata for a file cannot be fetched."""


class SourceError(GDriveWatchError):
    """Base class for failures of remote Drive calls."""


class TransientSourceError(SourceError):
    """Remote call failed for a recoverable reason; the caller may retry."""


class FatalSourceError(SourceError):
    """Remote call failed for a non-recoverable reason."""


class RateLimitError(TransientSourceError):
    """Raised when rate-limited (HTTP 429, or 403 with a quota reason)."""


class NetworkError(TransientSourceError):
    """Raised when network/timeout issues prevent the request."""


class ServerError(TransientSourceError):
    """Raised for HTTP 5xx responses."""


class InvalidArgumentError(FatalSourceError):
    """Raised when request arguments are invalid (HTTP 400, unknown 4xx)."""


class AuthError(FatalSourceError):
    """Raised when credentials are missing or cannot be refreshed (HTTP 401)."""


class PermissionError(FatalSourceError):
    """Raised when access is denied (HTTP 403 non-quota)."""


class NotFoundError(FatalSourceError):
    """Raised when a Drive resource is not found (HTTP 404)."""


@dataclass(frozen=True)
class HttpErrorInfo:
    """Lightweight HTTP error information for mapping to gdrivewatch exceptions."""

    status_code: int
    reason: str | None = None
    message: str | None = None
    details: dict[str, Any] | None = None


_QUOTA_REASON_KEYWORDS: tuple[str, ...] = (
    "quota",
    "rateLimitExceeded",
    "userRateLimitExceeded",
    "dailyLimitExceeded",
    "usageLimits",
)


def _is_quota_reason(reason: str | None) -> bool:
    if not reason:
        return False
    return any(key.lower() in reason.lower() for key in _QUOTA_REASON_KEYWORDS)


def map_http_error(
    info: HttpErrorInfo,
    *,
    cause: Optional[BaseException] = None,
) -> SourceError:
    """
    Map an HTTP error to a gdrivewatch source error.

    Policy:
        - 401 -> AuthError
        - 403 -> PermissionError (default), but RateLimitError if quota-related
        - 404 -> NotFoundError
        - 429 -> RateLimitError
        - 5xx -> ServerError
        - 400 and any other status -> InvalidArgumentError
    """
    details: dict[str, Any] = {
        "status_code": info.status_code,
        "reason": info.reason,
    }
    if info.details:
        details.update(info.details)

    message = info.message or f"HTTP error {info.status_code}"

    if info.status_code == 401:
        return AuthError(message, details=details, cause=cause)
    if info.status_code == 403:
        if _is_quota_reason(info.reason):
            return RateLimitError(message, details=details, cause=cause)
        return PermissionError(message, details=details, cause=cause)
    if info.status_code == 404:
        return NotFoundError(message, details=details, cause=cause)
    if info.status_code == 429:
        return RateLimitError(message, details=details, cause=cause)
    if 500 <= info.status_code <= 599:
        return ServerError(message, details=details, cause=cause)

    return InvalidArgumentError(message, details=details, cause=cause)


def is_transient(exc: BaseException) -> bool:
    """Return True if retrying the failed call may succeed."""
    return isinstance(exc, TransientSourceError)
