"""Field definitions for Google Drive API responses."""

from __future__ import annotations

FILE_FIELDS: str = (
    "id,"
    "name,"
    "mimeType,"
    "size,"
    "quotaBytesUsed,"
    "version,"
    "md5Checksum,"
    "modifiedTime,"
    "viewedByMeTime,"
    "viewedByMe,"
    "shared,"
    "starred,"
    "trashed,"
    "copyRequiresWriterPermission,"
    "owners(displayName),"
    "lastModifyingUser(displayName),"
    "description,"
    "originalFilename,"
    "capabilities(canCopy)"
)

LIST_FIELDS: str = f"nextPageToken,files({FILE_FIELDS})"

PERMISSION_FIELDS: str = "id,displayName,emailAddress,role,type"

PERMISSION_LIST_FIELDS: str = f"nextPageToken,permissions({PERMISSION_FIELDS})"

# Flags that make up DriveObject.labels; labels are None if none is present.
LABEL_KEYS: tuple[str, ...] = (
    "starred",
    "viewedByMe",
    "trashed",
    "copyRequiresWriterPermission",
)
