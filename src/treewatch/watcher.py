"""Polling loop that feeds successive snapshots through the differ."""
from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import List, Optional

from .differ import (
    AnyEventCallback,
    DeleteCallback,
    EntryCallback,
    Handlers,
    diff,
    dispatch,
)
from .events import FileEvent
from .scanner import PathLike, Snapshot, scan

logger = logging.getLogger(__name__)


@dataclass
class WatcherStats:
    """Counters emitted by the watcher for observability."""

    cycles: int = 0
    events_emitted: int = 0


class Watcher:
    """Polls a directory tree and dispatches change events to handlers.

    Setters return the watcher so registration can be chained::

        Watcher.create("/data").set_poll_interval(0.5).on_file_added(print).run()
    """

    def __init__(
        self,
        root_path: PathLike,
        *,
        poll_interval: float = 1.0,
        handlers: Optional[Handlers] = None,
        max_depth: Optional[int] = None,
        follow_symlinks: bool = True,
    ):
        self._root_path = Path(root_path)
        self._poll_interval = _validate_interval(poll_interval)
        self._handlers = handlers if handlers is not None else Handlers()
        self._max_depth = max_depth
        self._follow_symlinks = follow_symlinks
        self._stop_event = threading.Event()
        self._snapshot: Optional[Snapshot] = None
        self._stats = WatcherStats()

    @classmethod
    def create(cls, root_path: PathLike) -> "Watcher":
        return cls(root_path)

    @property
    def root_path(self) -> Path:
        return self._root_path

    @property
    def poll_interval(self) -> float:
        return self._poll_interval

    @property
    def handlers(self) -> Handlers:
        return self._handlers

    @property
    def stats(self) -> WatcherStats:
        return self._stats

    @property
    def snapshot(self) -> Snapshot:
        if self._snapshot is None:
            return MappingProxyType({})
        return self._snapshot

    def set_poll_interval(self, seconds: float) -> "Watcher":
        self._poll_interval = _validate_interval(seconds)
        return self

    def on_file_added(self, callback: EntryCallback) -> "Watcher":
        self._handlers.file_added = callback
        return self

    def on_file_changed(self, callback: EntryCallback) -> "Watcher":
        self._handlers.file_changed = callback
        return self

    def on_file_deleted(self, callback: DeleteCallback) -> "Watcher":
        self._handlers.file_deleted = callback
        return self

    def on_directory_added(self, callback: EntryCallback) -> "Watcher":
        self._handlers.directory_added = callback
        return self

    def on_directory_changed(self, callback: EntryCallback) -> "Watcher":
        self._handlers.directory_changed = callback
        return self

    def on_directory_deleted(self, callback: DeleteCallback) -> "Watcher":
        self._handlers.directory_deleted = callback
        return self

    def on_any_event(self, callback: AnyEventCallback) -> "Watcher":
        self._handlers.any_event = callback
        return self

    def prime(self) -> Snapshot:
        """Take the baseline snapshot without emitting events."""

        self._snapshot = self._scan()
        logger.debug("Primed %s with %s entries", self._root_path, len(self._snapshot))
        return self._snapshot

    def poll_once(self) -> List[FileEvent]:
        """Scan once, dispatch the differences and keep the new snapshot."""

        previous = self._snapshot if self._snapshot is not None else self.prime()
        new_snapshot = self._scan()
        events = diff(previous, new_snapshot)
        self._snapshot = new_snapshot
        self._stats.cycles += 1
        self._stats.events_emitted += len(events)
        dispatch(events, self._handlers)
        return events

    def run(self, max_cycles: Optional[int] = None) -> None:
        """Run the polling loop until stopped or ``max_cycles`` is reached."""

        logger.info(
            "Starting watcher for %s (poll interval %.3fs)",
            self._root_path,
            self._poll_interval,
        )
        if self._handlers.is_empty():
            logger.warning("No handlers registered for %s; events will be discarded", self._root_path)
        try:
            self.prime()
            cycles = 0
            cycle_started = time.monotonic()
            while not self._stop_event.is_set():
                if max_cycles is not None and cycles >= max_cycles:
                    break
                self._wait_until_next_cycle(cycle_started)
                if self._stop_event.is_set():
                    break
                cycle_started = time.monotonic()
                self.poll_once()
                cycles += 1
        except KeyboardInterrupt:
            logger.info("Watcher interrupted by user")
        finally:
            logger.info(
                "Watcher stopped after %s cycles, %s events",
                self._stats.cycles,
                self._stats.events_emitted,
            )

    def stop(self) -> None:
        """Signal the watcher to stop at the next opportunity.

        The signal is sticky: a stop requested before :meth:`run` starts
        keeps that run from polling at all.
        """

        self._stop_event.set()

    def _wait_until_next_cycle(self, started_at: float) -> None:
        elapsed = time.monotonic() - started_at
        remaining = max(self._poll_interval - elapsed, 0.0)
        if remaining > 0:
            self._stop_event.wait(remaining)

    def _scan(self) -> Snapshot:
        return scan(
            self._root_path,
            max_depth=self._max_depth,
            follow_symlinks=self._follow_symlinks,
        )


def _validate_interval(seconds: float) -> float:
    value = float(seconds)
    if value <= 0:
        raise ValueError("poll interval must be positive")
    return value
