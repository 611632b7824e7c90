"""File-change supervision for ``salt watch``.

Public API:
    DebouncedEventSource: Background watchfiles thread feeding a queue
    WatchSupervisor: Kill-and-respawn loop over an event source
    ChangeBatch, WatchError: Events delivered by the source
"""

from salt_runner.watcher.events import (
    ChangeBatch,
    DebouncedEventSource,
    EventSource,
    WatchError,
    WatchEvent,
)
from salt_runner.watcher.supervisor import WatchSupervisor

__all__ = [
    "ChangeBatch",
    "DebouncedEventSource",
    "EventSource",
    "WatchError",
    "WatchEvent",
    "WatchSupervisor",
]
