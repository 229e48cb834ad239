"""Recursive stat traversal over a Drive tree."""

from __future__ import annotations

import logging
import posixpath
import re
from typing import Any, Callable, Iterable, Optional

from gdrivestat.errors import (
    AggregatedError,
    GDriveStatError,
    PermissionFetchError,
    SubtreeError,
)
from gdrivestat.models import DepthBudget, DriveObject, PermissionEntry, ReportOptions, StatSummary

from .formatter import ReportFormatter
from .sink import LogSink, StreamSink

logger = logging.getLogger(__name__)

Resolver = Callable[[str], DriveObject]

_REPEATED_SEPARATORS = re.compile(r"/{2,}")


def join_display_path(parent: str, name: str) -> str:
    """Join a child name onto its parent's display path and normalize it."""
    joined = _REPEATED_SEPARATORS.sub("/", f"{parent}/{name}")
    return posixpath.normpath(joined)


def sort_for_checksums(children: Iterable[DriveObject]) -> list[DriveObject]:
    """
    Order children by checksum, then name.

    Items without a checksum ("" , e.g. folders) sort before any hashed item.
    """
    return sorted(children, key=lambda c: (c.md5_checksum, c.name))


class StatEngine:
    """
    Walks Drive items and renders them through a ReportFormatter.

    `remote` is any object providing:
        - find_by_path(path) -> DriveObject
        - find_by_id(file_id) -> DriveObject
        - list_children(parent_id, *, include_hidden) -> PageStream
        - list_permissions(file_id) -> list[PermissionEntry]

    Children are visited one after another. A failure below the first level
    is logged and kept in `subtree_errors`; it does not stop the siblings.
    """

    def __init__(
        self,
        remote: Any,
        options: ReportOptions,
        logf: Optional[LogSink] = None,
    ) -> None:
        self._remote = remote
        self._options = options
        self._logf = logf if logf is not None else StreamSink()
        self._begin_invocation()

    @property
    def options(self) -> ReportOptions:
        return self._options

    @property
    def formatter(self) -> ReportFormatter:
        return self._formatter

    # ----------------------------
    # Entry points
    # ----------------------------
    def stat_by_path(self, sources: Iterable[str]) -> StatSummary:
        return self._stat_sources("stat", self._remote.find_by_path, sources)

    def stat_by_id(self, sources: Iterable[str]) -> StatSummary:
        return self._stat_sources("statById", self._remote.find_by_id, sources)

    def stat(self, path: str, obj: DriveObject, depth: DepthBudget | int) -> None:
        """
        Render `obj`, then its descendants within `depth`.

        Raises:
            PermissionFetchError: verbose mode only, after the metadata block
                of `obj` was written; its children are not visited.
            PageStreamError: listing `obj`'s children failed.
        """
        if not isinstance(depth, DepthBudget):
            depth = DepthBudget.from_int(depth)

        self._render(path, obj)

        if depth.exhausted or not obj.is_dir:
            return

        child_depth = depth.descend()
        with self._remote.list_children(
            obj.id, include_hidden=self._options.include_hidden
        ) as stream:
            children = stream.collect()

        if self._options.checksum_only:
            children = sort_for_checksums(children)

        for child in children:
            child_path = join_display_path(path, child.name)
            try:
                self.stat(child_path, child, child_depth)
            except GDriveStatError as exc:
                logger.warning("stat %s failed: %s", child_path, exc)
                self.subtree_errors.append(
                    SubtreeError(
                        f"{child_path}: {exc}",
                        details={"path": child_path, "file_id": child.id},
                        cause=exc,
                    )
                )

    # ----------------------------
    # Internals
    # ----------------------------
    def _begin_invocation(self) -> None:
        self._formatter = ReportFormatter(self._logf)
        self.subtree_errors: list[SubtreeError] = []
        self.objects_rendered = 0

    def _stat_sources(
        self,
        fname: str,
        resolve: Resolver,
        sources: Iterable[str],
    ) -> StatSummary:
        self._begin_invocation()
        failures = AggregatedError()
        summary = StatSummary()

        for src in sources:
            try:
                obj = resolve(src)
            except GDriveStatError as exc:
                failures.add(f"{fname}: {src} err: {exc}", exc)
                continue

            label = src
            if self._options.checksum_only:
                # ids are reported by name
                label = obj.name
                # a root folder is listed without a leading label
                if obj.is_dir and self._options.root_path_is_trivial:
                    label = ""

            try:
                self.stat(label, obj, self._options.depth)
            except GDriveStatError as exc:
                failures.add(f"{fname}: {label} err: {exc}", exc)
                continue

            summary.sources.append(src)

        summary.objects_rendered = self.objects_rendered
        summary.subtree_errors = list(self.subtree_errors)
        if summary.subtree_errors:
            logger.info(
                "%s: %d failure(s) below the requested sources",
                fname,
                len(summary.subtree_errors),
            )

        failures.details["summary"] = summary
        failures.raise_if_any()
        return summary

    def _render(self, path: str, obj: DriveObject) -> None:
        self.objects_rendered += 1

        if self._options.checksum_only:
            self._formatter.checksum_line(path, obj)
            return

        perms: list[PermissionEntry] = []
        perm_err: Optional[GDriveStatError] = None
        try:
            perms = list(self._remote.list_permissions(obj.id))
        except GDriveStatError as exc:
            perm_err = exc

        if self._options.csv:
            if perm_err is not None:
                logger.warning("permissions of %s unavailable: %s", path or obj.name, perm_err)
            self._formatter.csv_rows(obj, perms)
            return

        self._formatter.file_stat(path, obj)
        if perm_err is not None:
            raise PermissionFetchError(
                f"listing permissions of {obj.id} failed: {perm_err}",
                details={"file_id": obj.id},
                cause=perm_err,
            ) from perm_err

        self._formatter.permissions(perms)
