"""Watch the config directory with watchdog.

The observer thread only translates and enqueues events. They reach the
:class:`~stratum.reload.ReloadDispatcher` when the owning thread calls
:meth:`ConfigWatcher.poll`, which keeps every manager call on that one
thread and preserves arrival order.
"""

from __future__ import annotations

import logging
import os
import pathlib
import queue
from typing import TYPE_CHECKING

import watchdog.events
import watchdog.observers

from stratum.events import FsEvent

if TYPE_CHECKING:
    from stratum.reload import ReloadDispatcher

logger = logging.getLogger("stratum.watcher")


def translate_event(event: watchdog.events.FileSystemEvent) -> FsEvent:
    """Map a watchdog event onto an :class:`FsEvent`."""
    path = pathlib.Path(os.fsdecode(event.src_path))
    if event.is_directory:
        return FsEvent.other(path)
    if isinstance(event, watchdog.events.FileCreatedEvent):
        return FsEvent.created(path)
    if isinstance(event, watchdog.events.FileModifiedEvent):
        return FsEvent.modified(path)
    return FsEvent.other(path)


class _QueueingHandler(watchdog.events.FileSystemEventHandler):
    def __init__(self, events: queue.Queue[FsEvent]) -> None:
        super().__init__()
        self._events = events

    def on_any_event(self, event: watchdog.events.FileSystemEvent) -> None:
        self._events.put(translate_event(event))


class ConfigWatcher:
    """Feed filesystem changes in a directory to a reload dispatcher."""

    def __init__(self, dispatcher: ReloadDispatcher) -> None:
        self.dispatcher = dispatcher
        self.events: queue.Queue[FsEvent] = queue.Queue()
        self._observer: watchdog.observers.Observer | None = None

    @property
    def running(self) -> bool:
        return self._observer is not None

    def start(self, path: str | pathlib.Path) -> None:
        if self._observer is not None:
            raise RuntimeError("watcher already started")
        observer = watchdog.observers.Observer()
        observer.schedule(_QueueingHandler(self.events), str(path), recursive=False)
        observer.daemon = True
        observer.start()
        self._observer = observer
        logger.info("Watching %s for config changes", path)

    def stop(self) -> None:
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join()
        self._observer = None

    def poll(self, timeout: float | None = None) -> int:
        """Dispatch queued events on the calling thread.

        Blocks up to *timeout* seconds for the first event (``None``
        means don't wait), then drains whatever else is queued.
        Returns the number of config layers replaced.
        """
        pending: list[FsEvent] = []
        try:
            if timeout is None:
                pending.append(self.events.get_nowait())
            else:
                pending.append(self.events.get(timeout=timeout))
            while True:
                pending.append(self.events.get_nowait())
        except queue.Empty:
            pass
        return self.dispatcher.handle_all(pending)

    def __enter__(self) -> ConfigWatcher:
        return self

    def __exit__(self, *exc: object) -> None:
        self.stop()
