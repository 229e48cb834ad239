"""Rendering of Drive items and their permissions."""

from __future__ import annotations

from typing import Sequence

from gdrivestat.models import DriveObject, PermissionEntry
from gdrivestat.util.time import format_timestamp
from gdrivestat.util.units import pretty_bytes

from .sink import LogSink

CSV_HEADER: str = "File Name, Type, Name, Email, Role, AccountType\n"


def _flag(value: bool) -> str:
    return "true" if value else "false"


_QUOTE_ESCAPES: dict[str, str] = {
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
    "\\": "\\\\",
    '"': '\\"',
}


def _quote(value: str) -> str:
    """Double-quote `value` with backslash escapes for unprintable characters."""
    out = []
    for ch in value:
        code = ord(ch)
        if ch in _QUOTE_ESCAPES:
            out.append(_QUOTE_ESCAPES[ch])
        elif ch.isprintable():
            out.append(ch)
        elif code < 0x80:
            out.append("\\x%02x" % code)
        elif code < 0x10000:
            out.append("\\u%04x" % code)
        else:
            out.append("\\U%08x" % code)
    return '"' + "".join(out) + '"'


def strip_leading_separator(path: str) -> str:
    return path[1:] if path.startswith("/") else path


def file_stat_rows(obj: DriveObject) -> list[tuple[str, str]]:
    """
    Ordered (label, value) rows describing `obj` in the verbose report.

    Folders get no Md5Checksum/Copyable rows; the label flags appear only
    when Drive reported them.
    """
    rows: list[tuple[str, str]] = [
        ("Filename", obj.name),
        ("FileId", obj.id),
        ("Bytes", str(obj.size)),
        ("Size", pretty_bytes(obj.size)),
        ("QuotaBytesUsed", str(obj.quota_bytes_used)),
        ("DirType", obj.dir_type),
        ("VersionNumber", str(obj.version)),
        ("MimeType", obj.mime_type),
        ("ModTime", format_timestamp(obj.modified_time)),
        ("LastViewedByMe", format_timestamp(obj.last_viewed_by_me_time)),
        ("Shared", _flag(obj.shared)),
        ("Owners", " & ".join(obj.owner_names)),
        ("LastModifyingUsername", obj.last_modifying_username),
    ]

    if obj.description:
        rows.append(("Description", _quote(obj.description)))

    if obj.name != obj.original_filename:
        rows.append(("OriginalFilename", obj.original_filename))

    if not obj.is_dir:
        rows.append(("Md5Checksum", obj.md5_checksum))
        rows.append(("Copyable", _flag(obj.copyable)))

    if obj.labels is not None:
        rows.extend(
            [
                ("Starred", _flag(obj.labels.starred)),
                ("Viewed", _flag(obj.labels.viewed)),
                ("Trashed", _flag(obj.labels.trashed)),
                ("ViewersCanDownload", _flag(obj.labels.restricted)),
            ]
        )

    return rows


def permission_rows(perm: PermissionEntry) -> list[tuple[str, str]]:
    return [("Role", perm.role), ("AccountType", perm.type)]


class ReportFormatter:
    """
    Writes report entries to a LogSink.

    The CSV header is written once per formatter, before the first CSV row
    group; create one formatter per invocation.
    """

    def __init__(self, logf: LogSink) -> None:
        self._logf = logf
        self._csv_header_emitted = False

    @property
    def csv_header_emitted(self) -> bool:
        return self._csv_header_emitted

    def checksum_line(self, path: str, obj: DriveObject) -> None:
        if not obj.md5_checksum:
            return
        self._logf("%32s  %s\n", obj.md5_checksum, strip_leading_separator(path))

    def csv_rows(self, obj: DriveObject, permissions: Sequence[PermissionEntry]) -> None:
        if not self._csv_header_emitted:
            self._logf(CSV_HEADER)
            self._csv_header_emitted = True

        for perm in permissions:
            self._logf(
                "%-60s,%-10s,%-25s,%-25s\t\t",
                obj.name,
                obj.dir_type,
                perm.name,
                perm.email_address,
            )
            for _, value in permission_rows(perm):
                self._logf(",%-25s", value)
            self._logf("\n")

    def file_stat(self, path: str, obj: DriveObject) -> None:
        self._logf("\n\033[92m%s\033[00m\n", path)
        for label, value in file_stat_rows(obj):
            self._logf("%-25s %-30s\n", label, value)

    def permissions(self, permissions: Sequence[PermissionEntry]) -> None:
        for perm in permissions:
            self._logf("\n*\nName: %s <%s>\n", perm.name, perm.email_address)
            for label, value in permission_rows(perm):
                self._logf("%-20s %-30s\n", label, value)
            self._logf("*\n")
