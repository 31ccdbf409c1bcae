"""
Type definitions and data classes for the refolder application.

This module defines:
- SuffixStyle: Enum for the folder naming scheme (numbers, letters, none)
- RefolderConfig: Immutable run configuration threaded through every stage
- Candidate: A file eligible for redistribution
- ExistingGroup: A prior output folder that gets dissolved on redo
- DiscoveryResult: Everything the discovery pass found
- TargetFolder / Plan: The balanced assignment of candidates to folders
- Action / ExecutionResult: Per-action outcomes of a run
- ReportStatus / ReportEntry: Rows for the optional CSV/XLSX report
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from .errors import InvalidConfig


class SuffixStyle(Enum):
    """Naming scheme appended to the folder prefix."""
    NUMBERS = "numbers"  # group-1, group-2, ...
    LETTERS = "letters"  # group-a, group-b, ..., group-aa
    NONE = "none"        # bare prefix, only valid for a single folder

    @classmethod
    def from_string(cls, value: str) -> "SuffixStyle":
        """Parse a suffix style name, case-insensitively."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise InvalidConfig(
                f"Unknown suffix style '{value}'. Use numbers|letters|none"
            ) from None


@dataclass(frozen=True)
class RefolderConfig:
    """
    Configuration for a single refolder run.

    Attributes:
        root: Directory whose files are redistributed
        pattern: Glob pattern selecting fresh candidate files
        subfolders: Number of target folders (N >= 1)
        prefix: Folder name prefix
        suffix: Folder naming scheme
        recursive: Descend into unrelated subdirectories
        dry_run: Print planned actions without touching the filesystem
        force: Overwrite existing destination files
        fail_fast: Stop at the first failed move
        exclude_paths: Files never treated as candidates (log file, report)
    """
    root: str
    subfolders: int
    pattern: str = "*"
    prefix: str = "group"
    suffix: SuffixStyle = SuffixStyle.NUMBERS
    recursive: bool = False
    dry_run: bool = False
    force: bool = False
    fail_fast: bool = False
    exclude_paths: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Candidate:
    """
    A file eligible for redistribution.

    Attributes:
        path: Absolute path to the file (identity)
        name: The file's basename
        group: Name of the dissolved output folder it came from, if any
    """
    path: str
    name: str
    group: Optional[str] = None

    @property
    def from_group(self) -> bool:
        return self.group is not None


@dataclass
class ExistingGroup:
    """A recognized output folder from a previous run."""
    name: str
    path: str
    index: int
    files: List[str] = field(default_factory=list)
    other_entries: int = 0  # subdirectories and other non-file entries


@dataclass
class DiscoveryResult:
    """Output of the discovery pass."""
    candidates: List[Candidate]
    groups: List[ExistingGroup]

    @property
    def highest_index(self) -> int:
        """Highest 0-based index among existing groups, -1 if none."""
        return max((g.index for g in self.groups), default=-1)

    @property
    def fresh_count(self) -> int:
        return sum(1 for c in self.candidates if not c.from_group)

    @property
    def dissolved_count(self) -> int:
        return sum(1 for c in self.candidates if c.from_group)


@dataclass
class TargetFolder:
    """One destination folder of the plan with its assigned candidates."""
    index: int
    name: str
    path: str
    candidates: List[Candidate] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.candidates)


@dataclass
class Plan:
    """Ordered sequence of target folders covering every candidate once."""
    folders: List[TargetFolder]
    dissolved: List[ExistingGroup] = field(default_factory=list)

    @property
    def sizes(self) -> List[int]:
        return [len(f) for f in self.folders]

    @property
    def total_files(self) -> int:
        return sum(self.sizes)


class ActionKind(Enum):
    """Kind of filesystem action performed by the executor."""
    CREATE_FOLDER = "create_folder"
    MOVE = "move"
    REMOVE_FOLDER = "remove_folder"


class ActionStatus(Enum):
    """Terminal state of an action."""
    PRINTED = "printed"      # Dry run, nothing touched
    SUCCEEDED = "succeeded"  # Performed
    SKIPPED = "skipped"      # Nothing to do (file already in place)
    FAILED = "failed"        # Attempted and failed


@dataclass
class Action:
    """Outcome of one planned action."""
    kind: ActionKind
    status: ActionStatus
    source: Optional[str]
    dest: Optional[str]
    message: str = ""


@dataclass
class ExecutionResult:
    """All actions of a run plus the aggregate counts used for reporting."""
    dry_run: bool
    folder_count: int
    file_count: int
    actions: List[Action] = field(default_factory=list)
    aborted: bool = False

    def _count(self, kind: ActionKind, status: ActionStatus) -> int:
        return sum(
            1 for a in self.actions if a.kind == kind and a.status == status
        )

    @property
    def moved(self) -> int:
        return self._count(ActionKind.MOVE, ActionStatus.SUCCEEDED)

    @property
    def planned(self) -> int:
        return self._count(ActionKind.MOVE, ActionStatus.PRINTED)

    @property
    def skipped(self) -> int:
        return self._count(ActionKind.MOVE, ActionStatus.SKIPPED)

    @property
    def failed(self) -> int:
        return sum(1 for a in self.actions if a.status == ActionStatus.FAILED)

    @property
    def ok(self) -> bool:
        return self.failed == 0 and not self.aborted


class ReportStatus(Enum):
    """Status values for the report file (human-readable)."""
    CREATED = "CREATED"
    MOVED = "MOVED"
    REMOVED = "REMOVED"
    IN_PLACE = "IN_PLACE"
    DRYRUN = "DRYRUN"
    FAILED = "FAILED"

    @classmethod
    def from_action(cls, action: Action) -> "ReportStatus":
        """Convert an Action to its report status."""
        if action.status == ActionStatus.PRINTED:
            return cls.DRYRUN
        if action.status == ActionStatus.SKIPPED:
            return cls.IN_PLACE
        if action.status == ActionStatus.FAILED:
            return cls.FAILED

        mapping = {
            ActionKind.CREATE_FOLDER: cls.CREATED,
            ActionKind.MOVE: cls.MOVED,
            ActionKind.REMOVE_FOLDER: cls.REMOVED,
        }
        return mapping[action.kind]


@dataclass
class ReportEntry:
    """Entry for the report file."""
    timestamp: str
    action: str
    status: str
    source_path: str
    dest_path: str
    message: str
