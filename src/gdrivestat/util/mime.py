from __future__ import annotations

FOLDER_MIME: str = "application/vnd.google-apps.folder"

GOOGLE_APP_MIMES: set[str] = {
    "application/vnd.google-apps.document",
    "application/vnd.google-apps.spreadsheet",
    "application/vnd.google-apps.presentation",
    "application/vnd.google-apps.drawing",
    "application/vnd.google-apps.form",
    "application/vnd.google-apps.script",
    "application/vnd.google-apps.site",
    "application/vnd.google-apps.shortcut",
}


def is_folder(mime_type: str) -> bool:
    return mime_type == FOLDER_MIME


def is_google_app(mime_type: str) -> bool:
    """
    Returns True if the MIME type is a Google 'apps' type.

    Google apps items are stored by Drive itself and carry no md5Checksum.
    """
    if mime_type in GOOGLE_APP_MIMES:
        return True
    return mime_type.startswith("application/vnd.google-apps.")


def has_binary_content(mime_type: str) -> bool:
    """Folders and Google apps items have no binary content (and no checksum)."""
    return not (is_folder(mime_type) or is_google_app(mime_type))
