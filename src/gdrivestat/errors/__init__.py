"""Public error exports for gdrivestat."""

from __future__ import annotations

from .aggregate import AggregatedError
from .exceptions import (
    AmbiguousPathError,
    ApiError,
    AuthError,
    ConflictError,
    GDriveStatError,
    HttpErrorInfo,
    InvalidArgumentError,
    InvalidStateError,
    NetworkError,
    NotFoundError,
    PageStreamError,
    PermissionError,
    PermissionFetchError,
    QuotaExceededError,
    RateLimitError,
    ResolutionError,
    SubtreeError,
    map_http_error,
)

__all__ = [
    "GDriveStatError",
    "AuthError",
    "PermissionError",
    "InvalidArgumentError",
    "InvalidStateError",
    "ResolutionError",
    "NotFoundError",
    "AmbiguousPathError",
    "ConflictError",
    "RateLimitError",
    "QuotaExceededError",
    "NetworkError",
    "ApiError",
    "PermissionFetchError",
    "PageStreamError",
    "SubtreeError",
    "AggregatedError",
    "HttpErrorInfo",
    "map_http_error",
]
