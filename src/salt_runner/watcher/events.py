"""Debounced file-change event source.

A background thread runs :func:`watchfiles.watch` over a directory tree and
feeds a queue. The single consumer iterates the source and receives either a
:class:`ChangeBatch` (one coalesced burst of changes) or a :class:`WatchError`.
Watch errors do not end the stream: the watch is re-entered after the
debounce interval. Only :meth:`DebouncedEventSource.close` ends iteration.
"""

import logging
import queue
import threading
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol, Union

import watchfiles

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangeBatch:
    """Coalesced changes delivered after one debounce interval.

    Attributes:
        changes: Pairs of (change kind, path), e.g. ("modified", Path(...)).

    """

    changes: frozenset[tuple[str, Path]]

    @classmethod
    def from_watchfiles(cls, changes: set[tuple[watchfiles.Change, str]]) -> "ChangeBatch":
        return cls(frozenset((change.name, Path(path)) for change, path in changes))

    def __len__(self) -> int:
        return len(self.changes)


@dataclass(frozen=True)
class WatchError:
    """Failure reported by the underlying watcher."""

    error: Exception


WatchEvent = Union[ChangeBatch, WatchError]


class EventSource(Protocol):
    """Anything the supervisor can consume events from."""

    def __iter__(self) -> Iterator[WatchEvent]: ...

    def close(self) -> None: ...


class _Closed:
    """Queue sentinel marking the end of the stream."""


_CLOSED = _Closed()


class DebouncedEventSource:
    """Recursive, debounced watch of one directory.

    Args:
        path: Directory to watch, recursively.
        debounce_secs: Changes within this interval are delivered as one batch.
        watch: Watch generator factory, :func:`watchfiles.watch` by default.

    """

    def __init__(
        self,
        path: Path,
        debounce_secs: float,
        watch: Callable[..., Any] = watchfiles.watch,
    ) -> None:
        self.path = path
        self.debounce_secs = debounce_secs
        self._watch = watch
        self._queue: queue.Queue[WatchEvent | _Closed] = queue.Queue()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        """Start the collection thread. Called implicitly by iteration."""
        if self._thread is not None:
            return
        logger.info("Starting to watch: %s", self.path)
        self._thread = threading.Thread(
            target=self._collect, name=f"salt-watch-{self.path.name}", daemon=True
        )
        self._thread.start()

    def close(self) -> None:
        """Stop watching and end iteration."""
        self._stop.set()
        self._queue.put(_CLOSED)

    def __iter__(self) -> Iterator[WatchEvent]:
        self.start()
        while True:
            item = self._queue.get()
            if isinstance(item, _Closed):
                return
            yield item

    def __enter__(self) -> "DebouncedEventSource":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _collect(self) -> None:
        debounce_ms = max(1, int(self.debounce_secs * 1000))
        try:
            while not self._stop.is_set():
                try:
                    for changes in self._watch(
                        self.path,
                        debounce=debounce_ms,
                        recursive=True,
                        stop_event=self._stop,
                        raise_interrupt=False,
                    ):
                        self._queue.put(ChangeBatch.from_watchfiles(changes))
                except Exception as e:
                    logger.debug("Watcher for %s failed: %s", self.path, e)
                    self._queue.put(WatchError(e))
                    self._stop.wait(self.debounce_secs)
        finally:
            self._queue.put(_CLOSED)
