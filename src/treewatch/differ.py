"""Snapshot comparison and event dispatch."""
from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional

from .events import EventType, FileEvent
from .scanner import Entry, Snapshot

logger = logging.getLogger(__name__)

EntryCallback = Callable[[Path, Entry], Any]
DeleteCallback = Callable[[Path], Any]
AnyEventCallback = Callable[[EventType, Path, Entry], Any]


@dataclass
class Handlers:
    """Optional callbacks, one per event type plus a catch-all."""

    file_added: Optional[EntryCallback] = None
    file_changed: Optional[EntryCallback] = None
    file_deleted: Optional[DeleteCallback] = None
    directory_added: Optional[EntryCallback] = None
    directory_changed: Optional[EntryCallback] = None
    directory_deleted: Optional[DeleteCallback] = None
    any_event: Optional[AnyEventCallback] = None

    def for_type(self, event_type: EventType) -> Optional[Callable[..., Any]]:
        return getattr(self, event_type.value)

    def is_empty(self) -> bool:
        return all(getattr(self, item.name) is None for item in fields(self))


def diff(previous: Snapshot, current: Snapshot) -> List[FileEvent]:
    """Return the events that turn ``previous`` into ``current``.

    Additions and changes come first in ``current`` order, then deletions
    in ``previous`` order. Only ``mtime`` marks an existing path as
    changed.
    """

    events: List[FileEvent] = []

    for path, entry in current.items():
        old_entry = previous.get(path)
        if old_entry is None:
            events.append(FileEvent(EventType.for_entry("added", entry), path, entry))
        elif old_entry.mtime != entry.mtime:
            events.append(FileEvent(EventType.for_entry("changed", entry), path, entry))

    for path, entry in previous.items():
        if path not in current:
            events.append(FileEvent(EventType.for_entry("deleted", entry), path, entry))

    return events


def dispatch(events: Iterable[FileEvent], handlers: Handlers) -> int:
    """Invoke ``handlers`` for each event in order; returns the event count.

    Exceptions raised by a handler propagate to the caller.
    """

    count = 0
    for event in events:
        count += 1
        logger.debug("Dispatching %s for %s", event.event_type.value, event.path)
        callback = handlers.for_type(event.event_type)
        if callback is not None:
            if event.event_type in _DELETE_TYPES:
                callback(event.path)
            else:
                callback(event.path, event.entry)
        if handlers.any_event is not None:
            handlers.any_event(event.event_type, event.path, event.entry)
    return count


_DELETE_TYPES = frozenset({EventType.FILE_DELETED, EventType.DIRECTORY_DELETED})
