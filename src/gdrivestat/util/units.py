from __future__ import annotations

_UNITS: tuple[str, ...] = ("B", "KB", "MB", "GB", "TB", "PB", "EB")


def pretty_bytes(n: int) -> str:
    """Render a byte count with a binary (1024-based) unit, e.g. "1.50 KB"."""
    size = float(n)
    for unit in _UNITS:
        if abs(size) < 1024.0 or unit == _UNITS[-1]:
            return f"{size:.2f} {unit}"
        size /= 1024.0
    return f"{size:.2f} {_UNITS[-1]}"
