"""gdrivestat public API."""

from __future__ import annotations

from gdrivestat.auth import AuthInfo, OAuthClient
from gdrivestat.errors import (
    AggregatedError,
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
from gdrivestat.inspector import GoogleDriveStat
from gdrivestat.models import (
    DepthBudget,
    DriveObject,
    Labels,
    PermissionEntry,
    ReportOptions,
    StatSummary,
)
from gdrivestat.stat import PageStream, ReportFormatter, StatEngine, StreamSink

__all__ = [
    # High-level
    "GoogleDriveStat",
    "StatEngine",
    "ReportFormatter",
    "PageStream",
    "StreamSink",
    # Auth
    "AuthInfo",
    "OAuthClient",
    # Models
    "DriveObject",
    "Labels",
    "PermissionEntry",
    "DepthBudget",
    "ReportOptions",
    "StatSummary",
    # Errors
    "GDriveStatError",
    "InvalidStateError",
    "AuthError",
    "PermissionError",
    "InvalidArgumentError",
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
