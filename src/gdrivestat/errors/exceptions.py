"""Exception hierarchy and HTTP error mapping for gdrivestat."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


class GDriveStatError(Exception):
    """
    Base exception for gdrivestat.

    Attributes:
        details: Optional structured information (e.g., HTTP status, reason).
        cause: Optional original exception that triggered this error.
        status_code: Process exit status used when this error ends a command.
        severity: Rank used to pick the retained status of an AggregatedError.
    """

    status_code: int = 1
    severity: int = 0

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


class InvalidStateError(GDriveStatError):
    """Raised when an object is used in an invalid state (e.g., a stream reused)."""


class InvalidArgumentError(GDriveStatError):
    """Raised when request arguments are invalid (HTTP 400, etc.)."""

    status_code = 2
    severity = 10


class ResolutionError(GDriveStatError):
    """Raised when a source path or id cannot be mapped to a Drive item."""

    status_code = 3
    severity = 20


class NotFoundError(ResolutionError):
    """Raised when a Drive resource is not found (HTTP 404)."""


class AmbiguousPathError(ResolutionError):
    """Raised when a path segment matches more than one Drive item."""


class ConflictError(GDriveStatError):
    """Raised when a conflict occurs (HTTP 409/412)."""

    status_code = 4
    severity = 20


class ApiError(GDriveStatError):
    """Raised for unclassified API errors (5xx, unknown 4xx, etc.)."""

    status_code = 5
    severity = 30


class NetworkError(GDriveStatError):
    """Raised when network/timeout issues prevent the request."""

    status_code = 6
    severity = 40


class RateLimitError(GDriveStatError):
    """Raised when rate-limited (HTTP 429)."""

    status_code = 7
    severity = 50


class QuotaExceededError(GDriveStatError):
    """Raised when quota is exceeded (HTTP 403 with quota-related reason)."""

    status_code = 8
    severity = 60


class PermissionError(GDriveStatError):
    """Raised when access is denied (HTTP 403 non-quota)."""

    status_code = 9
    severity = 70


class AuthError(GDriveStatError):
    """Raised when OAuth authentication/refresh fails."""

    status_code = 10
    severity = 80


class _WrappingError(GDriveStatError):
    """Error raised on behalf of another error; reports the cause's status."""

    @property  # type: ignore[override]
    def status_code(self) -> int:
        return _status_of(self.cause, GDriveStatError.status_code)

    @property  # type: ignore[override]
    def severity(self) -> int:
        return _severity_of(self.cause)


class PermissionFetchError(_WrappingError):
    """Raised when the permission list of a Drive item cannot be fetched."""


class PageStreamError(_WrappingError):
    """Raised when listing the children of a folder fails mid-stream."""


class SubtreeError(_WrappingError):
    """Records a failure that happened below the first level of a traversal."""


def _status_of(exc: Optional[BaseException], default: int) -> int:
    if isinstance(exc, GDriveStatError):
        return exc.status_code
    return default


def _severity_of(exc: Optional[BaseException]) -> int:
    if isinstance(exc, GDriveStatError):
        return exc.severity
    return GDriveStatError.severity


@dataclass(frozen=True)
class HttpErrorInfo:
    """Lightweight HTTP error information for mapping to gdrivestat exceptions."""

    status_code: int
    reason: str | None = None
    message: str | None = None
    details: dict[str, Any] | None = None


_QUOTA_REASON_KEYWORDS: tuple[str, ...] = (
    "quota",
    "dailyLimitExceeded",
    "usageLimits",
    "storageQuotaExceeded",
)

_RATE_REASON_KEYWORDS: tuple[str, ...] = (
    "rateLimitExceeded",
    "userRateLimitExceeded",
)


def _reason_matches(reason: str | None, keywords: tuple[str, ...]) -> bool:
    if not reason:
        return False
    return any(key.lower() in reason.lower() for key in keywords)


def map_http_error(
    info: HttpErrorInfo,
    *,
    cause: Optional[BaseException] = None,
) -> GDriveStatError:
    """
    Map an HTTP error to a gdrivestat exception.

    Policy:
        - 401 -> AuthError
        - 403 -> PermissionError (default), RateLimitError for per-user rate
          limits, QuotaExceededError if quota-related
        - 404 -> NotFoundError
        - 409/412 -> ConflictError
        - 429 -> RateLimitError
        - 400 -> InvalidArgumentError
        - 5xx -> ApiError
        - otherwise -> ApiError
    """
    details: dict[str, Any] = {
        "status_code": info.status_code,
        "reason": info.reason,
    }
    if info.details:
        details.update(info.details)

    message = info.message or f"HTTP error {info.status_code}"

    if info.status_code == 400:
        return InvalidArgumentError(message, details=details, cause=cause)
    if info.status_code == 401:
        return AuthError(message, details=details, cause=cause)
    if info.status_code == 403:
        # Drive reports per-user rate limiting as 403 rateLimitExceeded.
        if _reason_matches(info.reason, _RATE_REASON_KEYWORDS):
            return RateLimitError(message, details=details, cause=cause)
        if _reason_matches(info.reason, _QUOTA_REASON_KEYWORDS):
            return QuotaExceededError(message, details=details, cause=cause)
        return PermissionError(message, details=details, cause=cause)
    if info.status_code == 404:
        return NotFoundError(message, details=details, cause=cause)
    if info.status_code in (409, 412):
        return ConflictError(message, details=details, cause=cause)
    if info.status_code == 429:
        return RateLimitError(message, details=details, cause=cause)
    if 500 <= info.status_code <= 599:
        return ApiError(message, details=details, cause=cause)

    return ApiError(message, details=details, cause=cause)
