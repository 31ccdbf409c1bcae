"""
Balanced partitioning of candidates into target folders.

The first M mod N folders receive one extra file. Candidates are sliced
contiguously in discovery order, so the same input always yields the same
plan.
"""

import logging
import os
from typing import List, Optional, Sequence, TypeVar

from .errors import InvalidConfig
from .naming import folder_name, validate_naming
from .types import Candidate, ExistingGroup, Plan, RefolderConfig, TargetFolder
from .utils import normalize_path

logger = logging.getLogger(__name__)

T = TypeVar("T")


def partition(items: Sequence[T], n: int) -> List[List[T]]:
    """
    Split items into n contiguous chunks whose sizes differ by at most one.

    Examples:
        >>> partition([1, 2, 3, 4, 5], 3)
        [[1, 2], [3, 4], [5]]
        >>> partition([1], 3)
        [[1], [], []]

    Raises:
        InvalidConfig: If n is less than one
    """
    if n < 1:
        raise InvalidConfig("subfolders must be greater than zero")

    base, rem = divmod(len(items), n)
    chunks: List[List[T]] = []
    start = 0
    for i in range(n):
        take = base + 1 if i < rem else base
        chunks.append(list(items[start:start + take]))
        start += take
    return chunks


def build_plan(
    candidates: Sequence[Candidate],
    config: RefolderConfig,
    dissolved: Optional[List[ExistingGroup]] = None
) -> Plan:
    """
    Assign candidates to config.subfolders target folders under the root.

    Args:
        candidates: Candidates in stable discovery order
        config: Run configuration (root, subfolders, prefix, suffix)
        dissolved: Existing output folders found during discovery

    Returns:
        Plan with exactly config.subfolders folders

    Raises:
        InvalidConfig: On a zero folder count or a naming collision
    """
    validate_naming(config.prefix, config.suffix, config.subfolders)
    root = normalize_path(config.root)

    folders = []
    for index, chunk in enumerate(partition(candidates, config.subfolders)):
        name = folder_name(index, config.prefix, config.suffix)
        folders.append(
            TargetFolder(
                index=index,
                name=name,
                path=os.path.join(root, name),
                candidates=chunk,
            )
        )

    plan = Plan(folders=folders, dissolved=list(dissolved or []))
    logger.info(
        f"Planned {plan.total_files} files into {len(folders)} folders "
        f"(sizes {min(plan.sizes)}-{max(plan.sizes)})"
    )
    return plan
