"""Data model for Drive access-control entries."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class PermissionEntry:
    """
    One access-control entry of a Drive item.

    `role` is one of owner/organizer/fileOrganizer/writer/commenter/reader and
    `type` one of user/group/domain/anyone, as Drive reports them.
    """

    name: str
    email_address: str
    role: str
    type: str
