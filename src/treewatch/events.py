"""Event models shared across watcher components."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .scanner import Entry


class EventType(str, Enum):
    """Types of filesystem changes emitted by the differ."""

    FILE_ADDED = "file_added"
    FILE_CHANGED = "file_changed"
    FILE_DELETED = "file_deleted"
    DIRECTORY_ADDED = "directory_added"
    DIRECTORY_CHANGED = "directory_changed"
    DIRECTORY_DELETED = "directory_deleted"

    @property
    def is_directory(self) -> bool:
        return self.value.startswith("directory_")

    @classmethod
    def for_entry(cls, action: str, entry: "Entry") -> "EventType":
        """Pick the file or directory member for ``action`` (added/changed/deleted)."""

        prefix = "directory" if entry.is_dir else "file"
        return cls(f"{prefix}_{action}")


@dataclass(frozen=True)
class FileEvent:
    """A single change observed between two snapshots."""

    event_type: EventType
    path: Path
    entry: "Entry"
