"""Stat traversal and report rendering."""

from __future__ import annotations

from .engine import StatEngine, join_display_path, sort_for_checksums
from .formatter import CSV_HEADER, ReportFormatter, file_stat_rows
from .page_stream import PageStream
from .sink import LogSink, StreamSink

__all__ = [
    "StatEngine",
    "join_display_path",
    "sort_for_checksums",
    "ReportFormatter",
    "file_stat_rows",
    "CSV_HEADER",
    "PageStream",
    "LogSink",
    "StreamSink",
]
