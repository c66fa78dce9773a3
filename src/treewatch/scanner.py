"""Recursive directory scanning into flat path -> metadata snapshots."""
from __future__ import annotations

import logging
import os
import stat as stat_module
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Set, Tuple, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


class TraversalError(Exception):
    """Raised when a directory in the watched tree cannot be listed."""

    def __init__(self, path: Path, message: str):
        super().__init__(f"{message}: {path}")
        self.path = path


@dataclass(frozen=True)
class Entry:
    """Observed state of one filesystem node at scan time."""

    path: Path
    is_dir: bool
    is_link: bool
    mtime: float
    atime: float
    size: int
    depth: int
    mode: int = 0

    @property
    def is_file(self) -> bool:
        return not self.is_dir and not self.is_link

    @property
    def kind(self) -> str:
        # Links that do not resolve to a directory route as files.
        return "directory" if self.is_dir else "file"


Snapshot = Mapping[Path, Entry]

_DirKey = Tuple[int, int]


class _Listing:
    """One directory being listed, with its identity on the ancestor chain."""

    def __init__(self, directory: Path, depth: int, key: _DirKey):
        try:
            self.iterator: Iterator[os.DirEntry] = os.scandir(directory)
        except OSError as exc:
            raise TraversalError(directory, "Failed to open directory") from exc
        self.directory = directory
        self.depth = depth
        self.key = key

    def next_entry(self) -> Optional[os.DirEntry]:
        try:
            return next(self.iterator, None)
        except OSError as exc:
            raise TraversalError(self.directory, "Failed to read directory") from exc

    def close(self) -> None:
        self.iterator.close()  # type: ignore[attr-defined]


def scan(
    root_path: PathLike,
    *,
    max_depth: Optional[int] = None,
    follow_symlinks: bool = True,
) -> Snapshot:
    """Walk ``root_path`` depth-first and return a read-only snapshot.

    Keys are absolute paths in traversal order; the root itself is not
    recorded and its direct children sit at depth 0. A directory's
    subtree is recorded before its later siblings. Entries that vanish
    between listing and stat are left out. A directory that cannot be
    listed raises :class:`TraversalError`.
    """

    root = Path(os.path.abspath(os.fspath(root_path)))
    results: Dict[Path, Entry] = {}

    try:
        root_stat = os.stat(root)
    except OSError as exc:
        raise TraversalError(root, "Failed to open directory") from exc

    root_key = (root_stat.st_dev, root_stat.st_ino)
    stack: List[_Listing] = [_Listing(root, 0, root_key)]
    ancestors: Set[_DirKey] = {root_key}
    try:
        while stack:
            listing = stack[-1]
            dir_entry = listing.next_entry()
            if dir_entry is None:
                listing.close()
                stack.pop()
                ancestors.discard(listing.key)
                continue

            stated = _stat_entry(listing.directory / dir_entry.name, dir_entry, listing.depth, follow_symlinks)
            if stated is None:
                continue
            entry, key = stated
            results[entry.path] = entry

            if not entry.is_dir:
                continue
            if max_depth is not None and entry.depth >= max_depth:
                continue

            if key in ancestors:
                logger.warning("Not descending into %s: it links back to an ancestor directory", entry.path)
                continue

            stack.append(_Listing(entry.path, entry.depth + 1, key))
            ancestors.add(key)
    finally:
        for listing in stack:
            listing.close()

    return MappingProxyType(results)


def _stat_entry(
    path: Path, dir_entry: os.DirEntry, depth: int, follow_symlinks: bool
) -> Optional[Tuple[Entry, _DirKey]]:
    try:
        st = os.stat(path) if follow_symlinks else os.lstat(path)
        is_link = dir_entry.is_symlink()
    except OSError as exc:
        logger.debug("Skipping %s: %s", path, exc)
        return None

    entry = Entry(
        path=path,
        is_dir=stat_module.S_ISDIR(st.st_mode),
        is_link=is_link,
        mtime=st.st_mtime,
        atime=st.st_atime,
        size=st.st_size,
        depth=depth,
        mode=st.st_mode,
    )
    return entry, (st.st_dev, st.st_ino)
