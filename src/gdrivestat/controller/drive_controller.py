"""Google Drive API controller (internal use only)."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional, Sequence, TypeVar

from gdrivestat.auth import AuthInfo, OAuthClient
from gdrivestat.errors import (
    AmbiguousPathError,
    ApiError,
    HttpErrorInfo,
    InvalidArgumentError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    map_http_error,
)
from gdrivestat.models import DriveObject, Labels, PermissionEntry
from gdrivestat.stat.page_stream import PageStream
from gdrivestat.util.mime import has_binary_content, is_folder
from gdrivestat.util.time import parse_rfc3339_or_none

from .fields import FILE_FIELDS, LABEL_KEYS, LIST_FIELDS, PERMISSION_LIST_FIELDS

T = TypeVar("T")

logger = logging.getLogger(__name__)

ROOT_ALIASES: frozenset[str] = frozenset({"", "/"})


@dataclass(frozen=True)
class _RetryPolicy:
    max_retries: int = 3
    initial_delay_sec: float = 1.0


class GoogleDriveController:
    """
    Read-only Drive API controller (internal only).

    Notes:
        - The Drive `service` object is NOT exposed.
        - `supports_all_drives` is applied to all requests consistently.
        - Nothing here mutates Drive state.
    """

    DEFAULT_SCOPES: tuple[str, ...] = ("https://www.googleapis.com/auth/drive.readonly",)
    DEFAULT_PAGE_SIZE: int = 100

    def __init__(
        self,
        auth_info: AuthInfo,
        *,
        scopes: Optional[Sequence[str]] = None,
        supports_all_drives: bool = True,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self._supports_all_drives = supports_all_drives
        self._retry_policy = _RetryPolicy()
        self._page_size = _validate_page_size(page_size)

        use_scopes = list(scopes) if scopes is not None else list(self.DEFAULT_SCOPES)
        client = OAuthClient(auth_info)
        self._service = client.build_drive_service(use_scopes, ensure_valid=True)

    @classmethod
    def from_service(
        cls,
        service: Any,
        *,
        supports_all_drives: bool = True,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> "GoogleDriveController":
        """Create controller from a pre-built Drive service (useful for tests)."""
        obj = cls.__new__(cls)
        obj._supports_all_drives = supports_all_drives
        obj._retry_policy = _RetryPolicy()
        obj._page_size = _validate_page_size(page_size)
        obj._service = service
        return obj

    # ----------------------------
    # Resolution
    # ----------------------------
    def find_by_id(self, file_id: str) -> DriveObject:
        if not file_id:
            raise InvalidArgumentError("file_id must be a non-empty string")
        req = self._service.files().get(
            fileId=file_id,
            fields=FILE_FIELDS,
            **self._common_get_kwargs(),
        )
        data = self._execute(req.execute)
        return _file_dict_to_drive_object(data)

    def find_by_path(self, path: str) -> DriveObject:
        """
        Resolve a slash-separated path, starting at the Drive root.

        Raises:
            NotFoundError: if a segment does not exist.
            AmbiguousPathError: if a segment names more than one item.
        """
        current = self.find_by_id("root")
        if path.strip() in ROOT_ALIASES:
            return current

        walked = ""
        for segment in _split_path(path):
            walked = f"{walked}/{segment}"
            if not current.is_dir:
                raise NotFoundError(
                    f"{walked}: parent is not a folder",
                    details={"path": path, "segment": segment},
                )

            q = (
                f"name = '{_escape_query_value(segment)}' "
                f"and '{current.id}' in parents and trashed=false"
            )
            matches = [obj for page in self._iter_query_pages(q) for obj in page]
            if not matches:
                raise NotFoundError(
                    f"{walked}: no such file or folder",
                    details={"path": path, "segment": segment},
                )
            if len(matches) > 1:
                raise AmbiguousPathError(
                    f"{walked}: {len(matches)} items share this name",
                    details={"path": path, "ids": [m.id for m in matches]},
                )
            current = matches[0]

        return current

    # ----------------------------
    # Listing
    # ----------------------------
    def list_children(self, parent_id: str, *, include_hidden: bool = False) -> PageStream:
        """Open a stream of parent_id's children (trashed items excluded)."""
        return PageStream(self.iter_child_pages, parent_id, include_hidden=include_hidden)

    def iter_child_pages(
        self,
        parent_id: str,
        include_hidden: bool = False,
    ) -> Iterator[list[DriveObject]]:
        """
        Yield parent_id's children one API page at a time.

        Names starting with "." are dropped unless include_hidden is set.
        """
        q = f"'{_escape_query_value(parent_id)}' in parents and trashed=false"
        for page in self._iter_query_pages(q):
            if include_hidden:
                yield page
            else:
                yield [obj for obj in page if not obj.name.startswith(".")]

    def list_permissions(self, file_id: str) -> list[PermissionEntry]:
        perms: list[PermissionEntry] = []
        page_token: Optional[str] = None

        while True:
            req = self._service.permissions().list(
                fileId=file_id,
                fields=PERMISSION_LIST_FIELDS,
                pageToken=page_token,
                **self._common_get_kwargs(),
            )
            data = self._execute(req.execute)
            for p in data.get("permissions", []) or []:
                perms.append(_permission_dict_to_entry(p))

            page_token = data.get("nextPageToken")
            if not page_token:
                break

        return perms

    # ----------------------------
    # Internals
    # ----------------------------
    def _common_get_kwargs(self) -> dict[str, Any]:
        if not self._supports_all_drives:
            return {}
        return {"supportsAllDrives": True}

    def _common_list_kwargs(self) -> dict[str, Any]:
        if not self._supports_all_drives:
            return {}
        return {"supportsAllDrives": True, "includeItemsFromAllDrives": True}

    def _iter_query_pages(self, q: str) -> Iterator[list[DriveObject]]:
        page_token: Optional[str] = None

        while True:
            req = self._service.files().list(
                q=q,
                fields=LIST_FIELDS,
                pageSize=self._page_size,
                pageToken=page_token,
                **self._common_list_kwargs(),
            )
            data = self._execute(req.execute)
            yield [_file_dict_to_drive_object(f) for f in data.get("files", []) or []]

            page_token = data.get("nextPageToken")
            if not page_token:
                break

    def _execute(self, func: Callable[[], T]) -> T:
        delay = self._retry_policy.initial_delay_sec
        for attempt in range(self._retry_policy.max_retries + 1):
            try:
                return func()
            except Exception as exc:
                mapped = self._map_exception(exc)
                if self._should_retry(mapped) and attempt < self._retry_policy.max_retries:
                    logger.debug(
                        "retrying Drive request in %.1fs after %s (attempt %d/%d)",
                        delay,
                        mapped.__class__.__name__,
                        attempt + 1,
                        self._retry_policy.max_retries,
                    )
                    time.sleep(delay)
                    delay *= 2
                    continue
                raise mapped from exc

        raise ApiError("Unexpected retry loop termination")

    def _should_retry(self, exc: Exception) -> bool:
        if isinstance(exc, RateLimitError):
            return True
        if isinstance(exc, NetworkError):
            return True
        if isinstance(exc, ApiError):
            status_code = getattr(exc, "details", {}).get("status_code")
            return isinstance(status_code, int) and 500 <= status_code <= 599
        return False

    def _map_exception(self, exc: Exception) -> Exception:
        from googleapiclient.errors import HttpError

        if isinstance(exc, HttpError):
            info = _http_error_to_info(exc)
            return map_http_error(info, cause=exc)

        if isinstance(exc, (OSError, TimeoutError)):
            return NetworkError("Network error", cause=exc)

        return ApiError("Drive API error", cause=exc)


def _validate_page_size(page_size: int) -> int:
    if not isinstance(page_size, int) or not 1 <= page_size <= 1000:
        raise InvalidArgumentError(
            "page_size must be an int between 1 and 1000",
            details={"page_size": page_size},
        )
    return page_size


def _split_path(path: str) -> list[str]:
    return [seg for seg in path.split("/") if seg and seg != "."]


def _escape_query_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace("'", "\\'")


def _as_int(value: Any) -> int:
    # Drive returns int64 fields as decimal strings.
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return 0


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _file_dict_to_drive_object(data: dict[str, Any]) -> DriveObject:
    mime_type = _as_str(data.get("mimeType"))
    dir_flag = is_folder(mime_type)

    owners = data.get("owners") or []
    owner_names = tuple(
        _as_str(o.get("displayName")) for o in owners if isinstance(o, dict)
    )
    last_modifying_user = data.get("lastModifyingUser") or {}
    capabilities = data.get("capabilities") or {}

    labels = None
    if any(key in data for key in LABEL_KEYS):
        labels = Labels(
            starred=bool(data.get("starred", False)),
            viewed=bool(data.get("viewedByMe", False)),
            trashed=bool(data.get("trashed", False)),
            restricted=bool(data.get("copyRequiresWriterPermission", False)),
        )

    return DriveObject(
        id=_as_str(data.get("id")),
        name=_as_str(data.get("name")),
        mime_type=mime_type,
        is_dir=dir_flag,
        size=_as_int(data.get("size")),
        quota_bytes_used=_as_int(data.get("quotaBytesUsed")),
        version=_as_int(data.get("version")),
        md5_checksum=_as_str(data.get("md5Checksum")) if has_binary_content(mime_type) else "",
        modified_time=parse_rfc3339_or_none(data.get("modifiedTime")),
        last_viewed_by_me_time=parse_rfc3339_or_none(data.get("viewedByMeTime")),
        shared=bool(data.get("shared", False)),
        owner_names=owner_names,
        last_modifying_username=_as_str(last_modifying_user.get("displayName")),
        description=_as_str(data.get("description")),
        original_filename=_as_str(data.get("originalFilename")),
        copyable=bool(capabilities.get("canCopy", False)),
        labels=labels,
    )


def _permission_dict_to_entry(data: dict[str, Any]) -> PermissionEntry:
    return PermissionEntry(
        name=_as_str(data.get("displayName")),
        email_address=_as_str(data.get("emailAddress")),
        role=_as_str(data.get("role")),
        type=_as_str(data.get("type")),
    )


def _http_error_to_info(exc: Any) -> HttpErrorInfo:
    status_code = getattr(getattr(exc, "resp", None), "status", None)
    reason = getattr(getattr(exc, "resp", None), "reason", None)

    message = None
    details: dict[str, Any] = {}

    content = getattr(exc, "content", None)
    if isinstance(content, (bytes, bytearray)):
        try:
            payload = json.loads(content.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            payload = None
        err = payload.get("error", {}) if isinstance(payload, dict) else {}
        if isinstance(err, dict):
            message = err.get("message") or None
            errors = err.get("errors") or []
            if errors and isinstance(errors, list) and isinstance(errors[0], dict):
                details["domain"] = errors[0].get("domain")
                details["reason_detail"] = errors[0].get("reason")
                if isinstance(errors[0].get("reason"), str):
                    reason = errors[0]["reason"]

    if not isinstance(status_code, int):
        status_code = 0

    return HttpErrorInfo(
        status_code=status_code,
        reason=reason if isinstance(reason, str) else None,
        message=message,
        details=details or None,
    )
