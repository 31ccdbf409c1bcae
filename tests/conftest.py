"""
Shared fixtures for the refolder tests.
"""

import errno
import os
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set

import pytest


class FakeFileSystem:
    """
    In-memory stand-in for refolder.utils.LocalFileSystem.

    Failures are injected per operation; every mutating call is recorded
    in `calls` so tests can check the order of operations.
    """

    def __init__(self, files: Optional[Dict[str, bytes]] = None, dirs: Iterable[str] = ()):
        self.files: Dict[str, bytes] = dict(files or {})
        self.dirs: Set[str] = set(dirs)
        self.calls: List[tuple] = []
        self.rename_error: Optional[OSError] = None
        self.copy_error: Optional[OSError] = None
        self.short_copy = False
        self.fail_remove: Set[str] = set()

    def exists(self, path):
        return path in self.files or path in self.dirs

    def is_dir(self, path):
        return path in self.dirs

    def size(self, path):
        if path not in self.files:
            raise FileNotFoundError(errno.ENOENT, "No such file", path)
        return len(self.files[path])

    def listdir(self, path):
        entries = list(self.files) + list(self.dirs)
        return sorted(os.path.basename(p) for p in entries if os.path.dirname(p) == path)

    def makedirs(self, path):
        self.calls.append(("makedirs", path))
        self.dirs.add(path)

    def rename(self, src, dest):
        self.calls.append(("rename", src, dest))
        if self.rename_error is not None:
            raise self.rename_error
        if src not in self.files:
            raise FileNotFoundError(errno.ENOENT, "No such file", src)
        self.files[dest] = self.files.pop(src)

    def copy(self, src, dest):
        self.calls.append(("copy", src, dest))
        if self.copy_error is not None:
            raise self.copy_error
        data = self.files[src]
        self.files[dest] = data[:-1] if self.short_copy else data

    def remove(self, path):
        self.calls.append(("remove", path))
        if path in self.fail_remove:
            raise PermissionError(errno.EACCES, "Permission denied", path)
        if path not in self.files:
            raise FileNotFoundError(errno.ENOENT, "No such file", path)
        del self.files[path]

    def rmdir(self, path):
        self.calls.append(("rmdir", path))
        self.dirs.discard(path)


@pytest.fixture
def fake_fs():
    """An empty FakeFileSystem."""
    return FakeFileSystem()


def make_files(base: Path, names: Iterable[str], content: str = "data") -> List[Path]:
    """
    Create files (and their parent folders) under base.

    Args:
        base: Directory to create files in
        names: Relative file paths, e.g. "file1.txt" or "sub/file2.txt"
        content: Text written to every file

    Returns:
        The created paths
    """
    created = []
    for name in names:
        path = base / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        created.append(path)
    return created


def twelve_files() -> List[str]:
    return [f"file{i}.txt" for i in range(1, 13)]
