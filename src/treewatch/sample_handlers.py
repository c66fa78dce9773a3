"""Example handlers that can be referenced from configuration."""
from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, TextIO

from .events import EventType
from .scanner import Entry

logger = logging.getLogger(__name__)


def print_event(
    event_type: EventType,
    path: Path,
    entry: Entry,
    *,
    stream: Optional[TextIO] = None,
) -> None:
    """Print one line per event with the entry's modification time."""

    out = stream if stream is not None else sys.stdout
    out.write(f"Event `{event_type.value}`: {path}    @ {_format_mtime(entry.mtime)}\n")
    out.flush()


def log_event(
    event_type: EventType,
    path: Path,
    entry: Entry,
    *,
    level: str = "INFO",
    message: str = "Filesystem event detected",
) -> None:
    """Log any event; bind as the ``any`` handler."""

    log_level = getattr(logging, str(level).upper(), logging.INFO)
    logger.log(log_level, "%s: %s", message, describe_event(event_type, path, entry))


def log_path(
    path: Path,
    entry: Optional[Entry] = None,
    *,
    label: str = "Changed",
    level: str = "INFO",
) -> None:
    """Log a typed event; works for added/changed and deleted handlers alike."""

    log_level = getattr(logging, str(level).upper(), logging.INFO)
    if entry is None:
        logger.log(log_level, "%s: %s", label, path)
        return
    logger.log(log_level, "%s: %s    @ %s", label, path, _format_mtime(entry.mtime))


def describe_event(event_type: EventType, path: Path, entry: Entry) -> str:
    details = [f"type={event_type.value}", f"path={path}", f"depth={entry.depth}"]
    if not entry.is_dir:
        details.append(f"size={entry.size}")
    details.append(f"mtime={_format_mtime(entry.mtime)}")
    if entry.is_link:
        details.append("link=yes")
    return ", ".join(details)


def _format_mtime(mtime: float) -> str:
    return datetime.fromtimestamp(mtime, tz=timezone.utc).isoformat(timespec="seconds")
