"""Output sinks for rendered reports."""

from __future__ import annotations

import sys
from typing import Any, Callable, Optional, TextIO

# A LogSink takes a %-style format string and its arguments.
LogSink = Callable[..., None]


class StreamSink:
    """
    LogSink writing to a text stream (stdout unless given).

    Each call appends `fmt % args` to the stream; nothing is buffered or
    reordered here.
    """

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream

    def __call__(self, fmt: str, *args: Any) -> None:
        stream = self._stream if self._stream is not None else sys.stdout
        stream.write(fmt % args if args else fmt)
