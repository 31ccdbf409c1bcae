"""
Candidate discovery for redistribution.

This module is responsible for:
- Validating the root directory
- Scanning it (optionally recursively) with os.scandir
- Recognizing output folders of a previous run and dissolving their files
  back into the candidate pool
- Matching fresh files against the glob pattern
- Returning candidates in a stable order that an identical rerun preserves
"""

import fnmatch
import logging
import os
from pathlib import Path
from typing import Callable, Dict, List, Union

from .errors import DiscoveryError
from .naming import parse_folder_index
from .types import Candidate, DiscoveryResult, ExistingGroup, RefolderConfig
from .utils import normalize_path

logger = logging.getLogger(__name__)

Matcher = Callable[[str, str], bool]


def matches_pattern(name: str, pattern: str) -> bool:
    """
    Case-insensitive shell-style match of a filename against a glob.

    Examples:
        >>> matches_pattern("Report.TXT", "*.txt")
        True
        >>> matches_pattern("image.png", "*.txt")
        False
    """
    return fnmatch.fnmatchcase(name.lower(), pattern.lower())


def validate_root(root: Union[str, Path]) -> str:
    """
    Check the root directory and return its normalized absolute path.

    Raises:
        DiscoveryError: If the path does not exist or is not a directory
    """
    path = Path(root)
    if not path.exists():
        raise DiscoveryError(f"Path '{root}' does not exist")
    if not path.is_dir():
        raise DiscoveryError(f"Path '{root}' is not a directory")
    return normalize_path(path)


def _list_entries(directory: str) -> List[os.DirEntry]:
    with os.scandir(directory) as it:
        return sorted(it, key=lambda e: e.name)


def _dissolve_group(entry: os.DirEntry, index: int) -> ExistingGroup:
    """Enumerate the direct files of a prior output folder."""
    group = ExistingGroup(name=entry.name, path=entry.path, index=index)

    try:
        children = _list_entries(entry.path)
    except OSError as e:
        logger.warning(f"Cannot read output folder {entry.path}: {e}")
        return group

    for child in children:
        if child.is_file():
            group.files.append(child.path)
        else:
            group.other_entries += 1
            logger.debug(f"Leaving non-file entry in place: {child.path}")

    return group


def discover(
    config: RefolderConfig,
    matcher: Matcher = matches_pattern
) -> DiscoveryResult:
    """
    Collect every file that takes part in the redistribution.

    Top-level folders named like output folders of the active scheme are
    always entered, regardless of the recursive flag, and all of their
    direct files become candidates. Other files become candidates only if
    they match the pattern. Other subdirectories are entered only when
    recursive is set. Files listed in config.exclude_paths (the log file
    and report of this run) are never candidates.

    Args:
        config: Run configuration (root, pattern, recursive, prefix, suffix)
        matcher: Predicate (filename, pattern) -> bool

    Returns:
        DiscoveryResult with candidates (dissolved files by folder index,
        then fresh files, each by path) and dissolved groups

    Raises:
        DiscoveryError: If the root is missing, not a directory or unreadable
    """
    root = validate_root(config.root)
    logger.info(f"Scanning {root} for '{config.pattern}'"
                f"{' (recursive)' if config.recursive else ''}")

    try:
        top_entries = _list_entries(root)
    except OSError as e:
        raise DiscoveryError(f"Cannot read directory '{root}': {e}") from e

    excluded = {normalize_path(p) for p in config.exclude_paths}
    found: Dict[str, Candidate] = {}
    groups: List[ExistingGroup] = []
    pending = [top_entries]

    while pending:
        entries = pending.pop()
        for entry in entries:
            if entry.is_dir(follow_symlinks=False):
                index = None
                if os.path.dirname(entry.path) == root:
                    index = parse_folder_index(
                        entry.name, config.prefix, config.suffix
                    )

                if index is not None:
                    group = _dissolve_group(entry, index)
                    groups.append(group)
                    for file_path in group.files:
                        if file_path in excluded:
                            continue
                        found[file_path] = Candidate(
                            path=file_path,
                            name=os.path.basename(file_path),
                            group=group.name,
                        )
                    logger.debug(
                        f"Dissolving {group.name}: {len(group.files)} files"
                    )
                elif config.recursive:
                    try:
                        pending.append(_list_entries(entry.path))
                    except OSError as e:
                        logger.warning(f"Skipping unreadable directory {entry.path}: {e}")
                else:
                    logger.debug(f"Ignoring subdirectory: {entry.path}")

            elif entry.is_file():
                if entry.path in found:
                    continue
                if entry.path in excluded:
                    logger.debug(f"Excluding tool output file: {entry.path}")
                    continue
                if matcher(entry.name, config.pattern):
                    found[entry.path] = Candidate(path=entry.path, name=entry.name)
                else:
                    logger.debug(f"Not matching: {entry.path}")

    groups.sort(key=lambda g: g.index)
    group_index = {g.name: g.index for g in groups}

    # Dissolved files first, in folder index order (group-2 before group-10)
    def order(c: Candidate):
        if c.from_group:
            return (0, group_index[c.group], c.path)
        return (1, 0, c.path)

    candidates = sorted(found.values(), key=order)

    result = DiscoveryResult(candidates=candidates, groups=groups)
    logger.info(
        f"Found {len(candidates)} candidates "
        f"({result.fresh_count} fresh, {result.dissolved_count} from "
        f"{len(groups)} existing folders)"
    )
    return result
