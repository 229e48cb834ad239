"""Background-fetched stream of a folder's children."""

from __future__ import annotations

import logging
import queue
import threading
from typing import Any, Callable, Iterable, Iterator, Optional, Sequence

from gdrivestat.errors import InvalidStateError, PageStreamError
from gdrivestat.models import DriveObject

logger = logging.getLogger(__name__)

PageProducer = Callable[[str, bool], Iterable[Sequence[DriveObject]]]

_PAGE = "page"
_FAILURE = "failure"
_END = "end"


class PageStream:
    """
    Children of one folder, fetched page by page on a background thread.

    The producer hands whole pages to the consumer through a queue holding at
    most one page, so at most one page fetch is in flight while the consumer
    works on the previous one. Every queue message is tagged: a page, a
    failure, or the end of the stream.

    Iterating yields DriveObjects in backend order. A producer failure is
    raised as PageStreamError. Leaving the stream early (break, error,
    close(), or the end of a `with` block) signals the producer to stop;
    it notices between pages and while waiting to hand a page over.

    A stream can be consumed once.
    """

    def __init__(
        self,
        producer: PageProducer,
        parent_id: str,
        *,
        include_hidden: bool = False,
        poll_interval_sec: float = 0.05,
    ) -> None:
        self.parent_id = parent_id
        self.include_hidden = include_hidden
        self._producer = producer
        self._poll_interval_sec = poll_interval_sec
        self._queue: queue.Queue[tuple[str, Any]] = queue.Queue(maxsize=1)
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._consumed = False
        self._finished = False

    def __enter__(self) -> PageStream:
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __iter__(self) -> Iterator[DriveObject]:
        if self._consumed:
            raise InvalidStateError(
                "PageStream was already consumed",
                details={"parent_id": self.parent_id},
            )
        self._consumed = True
        self.start()
        return self._drain()

    @property
    def closed(self) -> bool:
        return self._stop.is_set()

    @property
    def producer_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the producer thread. Calling it again is a no-op."""
        if self._thread is not None:
            return
        if self._stop.is_set():
            raise InvalidStateError(
                "PageStream is closed",
                details={"parent_id": self.parent_id},
            )
        self._thread = threading.Thread(
            target=self._produce,
            name=f"gdrivestat-pages-{self.parent_id}",
            daemon=True,
        )
        self._thread.start()

    def collect(self) -> list[DriveObject]:
        """Drain the whole stream and return the children in backend order."""
        return list(self)

    def close(self, *, wait: bool = False) -> None:
        """
        Ask the producer to stop.

        With wait=True, block until the producer thread has exited; this can
        take as long as one page fetch.
        """
        self._stop.set()
        if wait and self._thread is not None:
            self._thread.join()

    # ----------------------------
    # Internals
    # ----------------------------
    def _drain(self) -> Iterator[DriveObject]:
        try:
            while True:
                tag, payload = self._queue.get()
                if tag == _END:
                    self._finished = True
                    return
                if tag == _FAILURE:
                    raise PageStreamError(
                        f"listing children of {self.parent_id} failed: {payload}",
                        details={"parent_id": self.parent_id},
                        cause=payload,
                    ) from payload
                yield from payload
        finally:
            if not self._finished:
                logger.debug("page stream for %s abandoned before its end", self.parent_id)
            self.close()

    def _produce(self) -> None:
        # The thread always ends with an end or a failure message.
        try:
            self._feed()
        except BaseException as exc:
            logger.debug("listing children of %s failed: %r", self.parent_id, exc)
            self._put((_FAILURE, exc))
            return

        self._put((_END, None))

    def _feed(self) -> None:
        pages = iter(self._producer(self.parent_id, self.include_hidden))
        try:
            for page in pages:
                if self._stop.is_set():
                    return
                if not self._put((_PAGE, list(page))):
                    return
        finally:
            close = getattr(pages, "close", None)
            if close is not None:
                close()

    def _put(self, item: tuple[str, Any]) -> bool:
        while not self._stop.is_set():
            try:
                self._queue.put(item, timeout=self._poll_interval_sec)
                return True
            except queue.Full:
                continue
        return False
