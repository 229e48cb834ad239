"""GoogleDriveStat: resolves Drive sources and reports on their subtrees."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from gdrivestat.auth import AuthInfo
from gdrivestat.controller import ROOT_ALIASES, GoogleDriveController
from gdrivestat.models import ReportOptions, StatSummary
from gdrivestat.stat import LogSink, StatEngine


class GoogleDriveStat:
    """
    High-level, read-only entry point.

    Each call is one invocation: it gets a fresh engine, so the CSV header
    and the collected subtree errors never leak from one call to the next.

    Policy:
        - Every source is attempted; failures are combined into one
          AggregatedError raised after the last source.
        - Failures below the first level are reported in
          StatSummary.subtree_errors and do not fail the call.
    """

    def __init__(
        self,
        auth_info: AuthInfo,
        *,
        scopes: Optional[Sequence[str]] = None,
        supports_all_drives: bool = True,
        page_size: int = GoogleDriveController.DEFAULT_PAGE_SIZE,
    ) -> None:
        self._controller = GoogleDriveController(
            auth_info,
            scopes=scopes,
            supports_all_drives=supports_all_drives,
            page_size=page_size,
        )

    @classmethod
    def from_controller(cls, controller: GoogleDriveController) -> "GoogleDriveStat":
        """Create with an injected controller (useful for tests)."""
        obj = cls.__new__(cls)
        obj._controller = controller
        return obj

    def stat(
        self,
        paths: Iterable[str],
        options: Optional[ReportOptions] = None,
        *,
        logf: Optional[LogSink] = None,
    ) -> StatSummary:
        """Report on Drive items given by slash-separated paths."""
        return self._engine(options, logf).stat_by_path(paths)

    def stat_by_id(
        self,
        file_ids: Iterable[str],
        options: Optional[ReportOptions] = None,
        *,
        logf: Optional[LogSink] = None,
    ) -> StatSummary:
        """Report on Drive items given by file id."""
        return self._engine(options, logf).stat_by_id(file_ids)

    def md5sum(
        self,
        paths: Iterable[str],
        *,
        depth: int = -1,
        include_hidden: bool = False,
        logf: Optional[LogSink] = None,
    ) -> StatSummary:
        """
        Print "<md5>  <path>" for every file under `paths`.

        With no paths, or only the root, everything in the Drive is listed
        without a leading folder label.
        """
        sources = list(paths) or ["/"]
        options = ReportOptions(
            checksum_only=True,
            depth=depth,
            include_hidden=include_hidden,
            root_path_is_trivial=all(p.strip() in ROOT_ALIASES for p in sources),
        )
        return self._engine(options, logf).stat_by_path(sources)

    def _engine(self, options: Optional[ReportOptions], logf: Optional[LogSink]) -> StatEngine:
        return StatEngine(self._controller, options or ReportOptions(), logf)
