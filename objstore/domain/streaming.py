"""Lazy delivery of listing results from a producer thread.

A listing runs in its own daemon thread and hands entries to the caller
through a one-slot queue, so the producer never runs more than one item ahead
of the consumer. The producer always finishes the stream with an end marker,
and a consumer that stops reading (``close()``, leaving a ``with`` block, or
dropping the stream) makes the producer stop at its next hand-off.
"""

from __future__ import annotations

import logging
import queue
import threading
import weakref
from dataclasses import dataclass
from typing import Callable, Generic, Iterable, Iterator, TypeVar

from objstore.infra.storage.client import ListPage, StorageError

T = TypeVar("T")

logger = logging.getLogger("objstore.listing")

DIRECTORY_DELIMITER = "/"

_POLL_SECONDS = 0.1
_END = object()


@dataclass(frozen=True, slots=True)
class StreamedItem(Generic[T]):
    """A single stream entry: either a result or the error that ended the stream."""

    data: T | None = None
    error: Exception | None = None

    def __post_init__(self) -> None:
        if (self.data is None) == (self.error is None):
            raise ValueError("StreamedItem needs exactly one of data or error")


Emit = Callable[[StreamedItem[T]], bool]
Producer = Callable[[Emit], None]


class _Channel:
    def __init__(self) -> None:
        self.queue: queue.Queue[object] = queue.Queue(maxsize=1)
        self.closed = threading.Event()

    def offer(self, item: object) -> bool:
        """Block until the consumer takes room for ``item``; False once closed."""
        while not self.closed.is_set():
            try:
                self.queue.put(item, timeout=_POLL_SECONDS)
                return True
            except queue.Full:
                continue
        return False


def _run(channel: _Channel, produce: Producer) -> None:
    try:
        produce(channel.offer)
    except Exception as exc:
        logger.exception("stream_producer_failed error=%s", exc)
        channel.offer(StreamedItem(error=exc))
    finally:
        channel.offer(_END)


class ItemStream(Generic[T]):
    """Iterator over StreamedItem values produced by a background thread."""

    def __init__(self, produce: Producer, *, name: str = "objstore-stream") -> None:
        self._channel = _Channel()
        self._finished = False
        self._thread = threading.Thread(
            target=_run, args=(self._channel, produce), name=name, daemon=True
        )
        # The thread only references the channel, so an abandoned stream
        # can be collected and its finalizer releases the producer.
        self._finalizer = weakref.finalize(self, self._channel.closed.set)
        self._thread.start()

    def __iter__(self) -> "ItemStream[T]":
        return self

    def __next__(self) -> StreamedItem[T]:
        while not self._finished:
            if self._channel.closed.is_set():
                self._finished = True
                break
            try:
                item = self._channel.queue.get(timeout=_POLL_SECONDS)
            except queue.Empty:
                continue
            if item is _END:
                self.close()
                break
            return item  # type: ignore[return-value]
        raise StopIteration

    def __enter__(self) -> "ItemStream[T]":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._finished

    def close(self) -> None:
        """Stop consuming; the producer exits at its next hand-off.

        A consumer waiting in ``next()`` on another thread gets StopIteration.
        """
        self._finished = True
        self._finalizer()

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the producer thread; True when it has exited."""
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def values(self) -> Iterator[T]:
        """Yield bare results, raising the stream's error item if one arrives."""
        for item in self:
            if item.error is not None:
                raise item.error
            yield item.data  # type: ignore[misc]


def enumerate_pages(
    fetch_page: Callable[[str, str], ListPage[T]],
    *,
    recursive: bool,
    key: Callable[[T], str],
    name: str = "objstore-list",
) -> ItemStream[T]:
    """Stream the entries of a marker-based paginated listing.

    ``fetch_page(marker, delimiter)`` returns one page. Without ``recursive``
    a single page is fetched with the directory delimiter, whatever its
    ``is_truncated`` says. With ``recursive`` pages are fetched until one is
    not truncated, each continuing after the previous page's last key.
    A failed fetch becomes the final item of the stream.
    """

    def produce(emit: Emit) -> None:
        delimiter = "" if recursive else DIRECTORY_DELIMITER
        marker = ""
        while True:
            try:
                page = fetch_page(marker, delimiter)
            except Exception as exc:
                logger.warning("list_page_failed marker=%s error=%s", marker, exc)
                emit(StreamedItem(error=exc))
                return

            for entry in page.items:
                if not emit(StreamedItem(data=entry)):
                    return

            if not recursive or not page.is_truncated:
                return
            marker = key(page.items[-1]) if page.items else page.next_marker
            if not marker:
                emit(
                    StreamedItem(
                        error=StorageError(
                            "Truncated listing page carried no continuation marker"
                        )
                    )
                )
                return

    return ItemStream(produce, name=name)


def stream_items(
    fetch_all: Callable[[], Iterable[T]],
    *,
    name: str = "objstore-list",
) -> ItemStream[T]:
    """Stream the result of a single, unpaginated listing call."""

    def produce(emit: Emit) -> None:
        try:
            entries = list(fetch_all())
        except Exception as exc:
            logger.warning("list_failed error=%s", exc)
            emit(StreamedItem(error=exc))
            return

        for entry in entries:
            if not emit(StreamedItem(data=entry)):
                return

    return ItemStream(produce, name=name)
