"""Composite error for multi-source commands."""

from __future__ import annotations

from typing import Optional

from .exceptions import GDriveStatError


class AggregatedError(GDriveStatError):
    """
    Combines the failures of independent sources into one error.

    Every message is kept in the order it was added; ``str()`` joins them with
    newlines. ``status_code`` is the status of the most severe error added so
    far. Among errors of equal severity the later one wins.
    """

    def __init__(self) -> None:
        super().__init__("")
        self.messages: list[str] = []
        self.errors: list[BaseException] = []
        self._status_code = GDriveStatError.status_code
        self._severity: Optional[int] = None

    def __str__(self) -> str:
        return "\n".join(self.messages)

    def __bool__(self) -> bool:
        return bool(self.messages)

    def __len__(self) -> int:
        return len(self.messages)

    @property  # type: ignore[override]
    def status_code(self) -> int:
        return self._status_code

    @property  # type: ignore[override]
    def severity(self) -> int:
        if self._severity is None:
            return GDriveStatError.severity
        return self._severity

    def add(self, message: str, error: Optional[BaseException] = None) -> None:
        """Record one failure message and, if given, the error behind it."""
        self.messages.append(message.rstrip("\n"))
        self.args = (str(self),)
        if error is None:
            return

        self.errors.append(error)
        if isinstance(error, GDriveStatError):
            severity, status_code = error.severity, error.status_code
        else:
            severity, status_code = GDriveStatError.severity, GDriveStatError.status_code

        if self._severity is None or severity >= self._severity:
            self._severity = severity
            self._status_code = status_code

    def raise_if_any(self) -> None:
        """Raise this error if at least one failure was recorded."""
        if self.messages:
            raise self
