"""Internal controller exports for gdrivestat."""

from __future__ import annotations

from .drive_controller import ROOT_ALIASES, GoogleDriveController

__all__ = ["GoogleDriveController", "ROOT_ALIASES"]
