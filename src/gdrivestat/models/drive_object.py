"""Data model for Drive items."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(slots=True, frozen=True)
class Labels:
    """Flags Drive attaches to an item."""

    starred: bool = False
    viewed: bool = False
    trashed: bool = False
    restricted: bool = False


@dataclass(slots=True, frozen=True)
class DriveObject:
    """
    Represents a Drive item as reported by the stat command.

    Notes:
        - Folders never carry an md5_checksum; it is "" for them and for any
          item whose content hash Drive does not expose (Google Docs, etc.).
        - `copyable` is only meaningful for non-folders.
        - `labels` is None when the backend response carried none of the flags.
    """

    id: str
    name: str
    mime_type: str
    is_dir: bool = False

    size: int = 0
    quota_bytes_used: int = 0
    version: int = 0
    md5_checksum: str = ""
    modified_time: Optional[datetime] = None
    last_viewed_by_me_time: Optional[datetime] = None
    shared: bool = False
    owner_names: tuple[str, ...] = field(default_factory=tuple)
    last_modifying_username: str = ""
    description: str = ""
    original_filename: str = ""
    copyable: bool = False
    labels: Optional[Labels] = None

    @property
    def dir_type(self) -> str:
        return "folder" if self.is_dir else "file"
