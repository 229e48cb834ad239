"""Public model exports for gdrivestat."""

from __future__ import annotations

from .drive_object import DriveObject, Labels
from .options import DepthBudget, ReportOptions
from .permission import PermissionEntry
from .results import StatSummary

__all__ = [
    "DriveObject",
    "Labels",
    "PermissionEntry",
    "DepthBudget",
    "ReportOptions",
    "StatSummary",
]
