"""Public error exports for gdrivewatch."""

from __future__ import annotations

from .exceptions import (
    AuthError,
    DetailFetchFailure,
    FatalSourceError,
    GDriveWatchError,
    HttpErrorInfo,
    InvalidArgumentError,
    InvalidReferenceError,
    InvalidStateError,
    NetworkError,
    NotFoundError,
    PermissionError,
    RateLimitError,
    ServerError,
    SourceError,
    TransientSourceError,
    is_transient,
    map_http_error,
)

__all__ = [
    "GDriveWatchError",
    "InvalidReferenceError",
    "InvalidStateError",
    "DetailFetchFailure",
    "SourceError",
    "TransientSourceError",
    "FatalSourceError",
    "RateLimitError",
    "NetworkError",
    "ServerError",
    "InvalidArgumentError",
    "AuthError",
    "PermissionError",
    "NotFoundError",
    "HttpErrorInfo",
    "map_http_error",
    "is_transient",
]
