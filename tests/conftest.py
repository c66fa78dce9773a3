"""Shared fixtures for treewatch tests."""

import os
from pathlib import Path

import pytest

from treewatch.scanner import Entry


T1 = 1_600_000_000.0
T2 = 1_600_000_100.0


def make_entry(path, *, is_dir=False, mtime=T1, atime=None, size=0, depth=0, is_link=False):
    return Entry(
        path=Path(path),
        is_dir=is_dir,
        is_link=is_link,
        mtime=mtime,
        atime=mtime if atime is None else atime,
        size=size,
        depth=depth,
    )


def snapshot_of(*entries):
    return {entry.path: entry for entry in entries}


@pytest.fixture
def sample_tree(tmp_path):
    """root/a.txt (mtime T1) and root/b/c.txt (mtime T2)."""

    root = tmp_path / "root"
    root.mkdir()
    a_file = root / "a.txt"
    a_file.write_text("alpha")
    b_dir = root / "b"
    b_dir.mkdir()
    c_file = b_dir / "c.txt"
    c_file.write_text("gamma")
    os.utime(a_file, (T1, T1))
    os.utime(c_file, (T2, T2))
    return root
