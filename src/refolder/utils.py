"""
Filesystem utilities for moving files safely.

This module provides:
- normalize_path(): Normalize paths to absolute form
- FileSystem: The filesystem capability used by the executor
- LocalFileSystem: FileSystem backed by the real disk
- MoveState: States of a single file move
- safe_move(): Rename with a verified copy+delete fallback
"""

import logging
import os
import shutil
from enum import Enum
from pathlib import Path
from typing import List, Optional, Protocol, Tuple, Union

logger = logging.getLogger(__name__)


def normalize_path(path: Union[str, Path]) -> str:
    """
    Normalize a path to absolute form.

    Symlinks are resolved so that the same directory always yields the
    same candidate paths.

    Args:
        path: A file path as string or Path object

    Returns:
        Normalized absolute path as string
    """
    try:
        return str(Path(path).resolve())
    except (OSError, ValueError):
        # If resolve fails, do basic normalization
        return os.path.abspath(os.path.normpath(str(path)))


class FileSystem(Protocol):
    """Operations the executor and safe_move perform on the filesystem."""

    def exists(self, path: str) -> bool: ...
    def is_dir(self, path: str) -> bool: ...
    def size(self, path: str) -> int: ...
    def listdir(self, path: str) -> List[str]: ...
    def makedirs(self, path: str) -> None: ...
    def rename(self, src: str, dest: str) -> None: ...
    def copy(self, src: str, dest: str) -> None: ...
    def remove(self, path: str) -> None: ...
    def rmdir(self, path: str) -> None: ...


class LocalFileSystem:
    """
    Thin wrapper over os/shutil calls used by the executor.

    Tests substitute an in-memory FileSystem to drive the move state
    machine without touching the disk.
    """

    def exists(self, path: str) -> bool:
        return os.path.lexists(path)

    def is_dir(self, path: str) -> bool:
        return os.path.isdir(path)

    def size(self, path: str) -> int:
        return os.stat(path).st_size

    def listdir(self, path: str) -> List[str]:
        return os.listdir(path)

    def makedirs(self, path: str) -> None:
        os.makedirs(path, exist_ok=True)

    def rename(self, src: str, dest: str) -> None:
        os.rename(src, dest)

    def copy(self, src: str, dest: str) -> None:
        shutil.copy2(src, dest)

    def remove(self, path: str) -> None:
        os.remove(path)

    def rmdir(self, path: str) -> None:
        os.rmdir(path)


class MoveState(Enum):
    """
    States of a single file move.

    PLANNED -> RENAMED                                  (atomic rename)
    PLANNED -> COPYING -> COPIED -> SOURCE_REMOVED      (copy fallback)
    PLANNED -> COPYING -> COPY_FAILED                   (source untouched)
    PLANNED -> COPYING -> COPIED                        (duplicate left behind)

    When the source cannot be removed after a verified copy, the copy is
    rolled back (COPY_FAILED). COPIED is final only if the rollback fails
    too, leaving the file at both paths.
    """
    PLANNED = "planned"
    RENAMED = "renamed"
    COPYING = "copying"
    COPIED = "copied"
    SOURCE_REMOVED = "source_removed"
    COPY_FAILED = "copy_failed"

    @property
    def succeeded(self) -> bool:
        return self in (MoveState.RENAMED, MoveState.SOURCE_REMOVED)


def safe_move(
    src: str,
    dest: str,
    fs: Optional[FileSystem] = None
) -> Tuple[MoveState, str]:
    """
    Move a single file, falling back to copy+delete when rename fails.

    The source is only deleted after the copy exists at the destination
    with the same size as the source.

    Args:
        src: Source file path
        dest: Destination file path (must not exist)
        fs: Filesystem capability, LocalFileSystem() by default

    Returns:
        Tuple of (final state, message). The move succeeded when
        state.succeeded is True. COPIED means the file now exists at both
        paths; the message names the duplicate.

    Raises:
        Nothing - all errors are caught and returned in the message
    """
    fs = fs or LocalFileSystem()

    try:
        fs.rename(src, dest)
        return (MoveState.RENAMED, "Moved successfully")
    except OSError as e:
        rename_error = _format_os_error(e)
        logger.warning(f"Rename failed for {src}, attempting copy+delete: {rename_error}")

    # COPYING
    try:
        fs.copy(src, dest)
        copied_ok = fs.exists(dest) and fs.size(dest) == fs.size(src)
    except OSError as e:
        _cleanup_partial_copy(dest, fs)
        return (
            MoveState.COPY_FAILED,
            f"Rename failed ({rename_error}); copy failed: {_format_os_error(e)}"
        )

    if not copied_ok:
        _cleanup_partial_copy(dest, fs)
        return (
            MoveState.COPY_FAILED,
            f"Rename failed ({rename_error}); copy verification failed"
        )

    try:
        fs.remove(src)
    except OSError as e:
        remove_error = _format_os_error(e)
        try:
            fs.remove(dest)
        except OSError as rollback_e:
            logger.error(f"Duplicate left at {dest}: {_format_os_error(rollback_e)}")
            return (
                MoveState.COPIED,
                f"Could not remove source ({remove_error}); "
                f"duplicate copy left at {dest}"
            )
        return (
            MoveState.COPY_FAILED,
            f"Could not remove source ({remove_error}); copy rolled back"
        )

    logger.info(f"Moved via copy+delete fallback: {src}")
    return (MoveState.SOURCE_REMOVED, "Moved successfully (via copy+delete)")


def _cleanup_partial_copy(dest: str, fs: FileSystem) -> None:
    """Attempt to clean up a partial copy on failure."""
    try:
        if fs.exists(dest):
            fs.remove(dest)
            logger.debug(f"Cleaned up partial copy at {dest}")
    except OSError as e:
        logger.warning(f"Could not clean up partial copy at {dest}: {e}")


def _format_os_error(e: OSError) -> str:
    """
    Format an OS error with its Windows error code if available.

    Args:
        e: The exception to format

    Returns:
        Formatted error string
    """
    error_code = getattr(e, "winerror", None)
    if error_code is not None:
        return f"[WinError {error_code}] {e}"
    return f"{type(e).__name__}: {e}"
