"""
Folder naming for target subfolders.

This module is responsible for:
- Turning a 0-based folder index into a name (group-1, group-a, group)
- Recognizing names produced by the active scheme (for dissolving old runs)
- Rejecting prefixes and schemes that cannot produce usable, unique names
"""

import logging
import os
import re
from typing import Optional

from .errors import InvalidConfig
from .types import SuffixStyle

logger = logging.getLogger(__name__)

SEPARATOR = "-"

_NUMBER_SUFFIX = re.compile(r"[1-9][0-9]*")
_LETTER_SUFFIX = re.compile(r"[a-z]+")


def index_to_letters(index: int) -> str:
    """
    Convert a 0-based index to a bijective base-26 letter suffix.

    Examples:
        >>> index_to_letters(0)
        'a'
        >>> index_to_letters(25)
        'z'
        >>> index_to_letters(26)
        'aa'
    """
    if index < 0:
        raise ValueError(f"Index must be non-negative, got {index}")

    n = index + 1
    letters = []
    while n > 0:
        n, rem = divmod(n - 1, 26)
        letters.append(chr(ord("a") + rem))
    return "".join(reversed(letters))


def letters_to_index(letters: str) -> int:
    """Inverse of index_to_letters."""
    n = 0
    for ch in letters:
        n = n * 26 + (ord(ch) - ord("a") + 1)
    return n - 1


def validate_prefix(prefix: str) -> None:
    """
    Check that a prefix can be used as a directory name.

    Raises:
        InvalidConfig: If the prefix is empty, is "." or "..", or contains
                       a path separator
    """
    if not prefix or not prefix.strip():
        raise InvalidConfig("Prefix must not be empty")

    separators = {"/", os.sep}
    if os.altsep:
        separators.add(os.altsep)
    if any(sep in prefix for sep in separators):
        raise InvalidConfig(f"Prefix '{prefix}' must not contain path separators")

    if prefix in (".", ".."):
        raise InvalidConfig(f"Prefix '{prefix}' is not a valid folder name")


def validate_naming(prefix: str, suffix: SuffixStyle, count: int) -> None:
    """
    Validate that `count` folders can be named without collisions.

    Raises:
        InvalidConfig: On a bad prefix, a non-positive count, or the
                       'none' scheme with more than one folder
    """
    validate_prefix(prefix)

    if count < 1:
        raise InvalidConfig("subfolders must be greater than zero")

    if suffix == SuffixStyle.NONE and count > 1:
        raise InvalidConfig(
            f"Suffix 'none' cannot name {count} folders: every folder would "
            f"be called '{prefix}'. Use numbers or letters"
        )


def folder_name(index: int, prefix: str, suffix: SuffixStyle) -> str:
    """
    Build the folder name for a 0-based index.

    Args:
        index: 0-based folder index
        prefix: Folder name prefix
        suffix: Naming scheme

    Returns:
        The folder name, e.g. "group-1", "group-a" or "group"
    """
    if suffix == SuffixStyle.NUMBERS:
        return f"{prefix}{SEPARATOR}{index + 1}"
    if suffix == SuffixStyle.LETTERS:
        return f"{prefix}{SEPARATOR}{index_to_letters(index)}"
    if index != 0:
        raise InvalidConfig(f"Suffix 'none' cannot name folder #{index + 1}")
    return prefix


def parse_folder_index(
    name: str,
    prefix: str,
    suffix: SuffixStyle
) -> Optional[int]:
    """
    Recognize a folder name produced by folder_name().

    Only names the active scheme would generate are recognized, so
    "group-01" or "group-A" are not output folders under any scheme.

    Returns:
        The 0-based index, or None if the name is not an output folder
    """
    if suffix == SuffixStyle.NONE:
        return 0 if name == prefix else None

    head = prefix + SEPARATOR
    if not name.startswith(head):
        return None
    tail = name[len(head):]

    if suffix == SuffixStyle.NUMBERS:
        if _NUMBER_SUFFIX.fullmatch(tail):
            return int(tail) - 1
        return None

    if _LETTER_SUFFIX.fullmatch(tail):
        return letters_to_index(tail)
    return None
