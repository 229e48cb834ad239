from .mime import FOLDER_MIME, GOOGLE_APP_MIMES, has_binary_content, is_folder, is_google_app
from .time import (
    format_timestamp,
    normalize_dt,
    parse_rfc3339,
    parse_rfc3339_or_none,
    to_rfc3339,
)
from .units import pretty_bytes

__all__ = [
    "FOLDER_MIME",
    "GOOGLE_APP_MIMES",
    "is_folder",
    "is_google_app",
    "has_binary_content",
    "parse_rfc3339",
    "parse_rfc3339_or_none",
    "to_rfc3339",
    "format_timestamp",
    "normalize_dt",
    "pretty_bytes",
]
