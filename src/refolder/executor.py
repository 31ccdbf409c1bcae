"""
Plan execution: folder creation and file moves.

This module is responsible for:
- Checking every target folder before anything is touched (preflight)
- Creating target folders, replacing blocking files only with --force
- Moving files with the rename / verified copy fallback of utils.safe_move
- Guarding existing destination files unless --force is given
- Printing the same ordered action lines in dry-run and real runs
- Recording per-action outcomes; a failed move does not stop the run
  unless fail_fast is set
- Removing prior output folders left empty by a redo
"""

import logging
import os
from typing import Callable, Optional, Set

from .errors import DestinationConflict, DestinationExists, MoveFailed, RefolderError
from .types import (
    Action,
    ActionKind,
    ActionStatus,
    Candidate,
    ExecutionResult,
    Plan,
    RefolderConfig,
    TargetFolder,
)
from .utils import FileSystem, LocalFileSystem, safe_move

logger = logging.getLogger(__name__)

Emitter = Callable[[str], None]


class Executor:
    """
    Applies a Plan to the filesystem, or previews it in dry-run mode.

    In dry-run mode only read-only filesystem calls (exists, is_dir) are
    made, and every action is reported with a "Would ..." line in the same
    order the real run would perform it.
    """

    def __init__(
        self,
        config: RefolderConfig,
        fs: Optional[FileSystem] = None,
        emit: Optional[Emitter] = None
    ):
        """
        Initialize the executor.

        Args:
            config: Run configuration (dry_run, force, fail_fast)
            fs: Filesystem capability, LocalFileSystem() by default
            emit: Callable receiving each user-facing action line
        """
        self.config = config
        self.fs = fs or LocalFileSystem()
        self.emit = emit or print

    def preflight(self, plan: Plan) -> None:
        """
        Verify that every target folder can be created.

        Raises:
            DestinationConflict: If a target folder path is occupied by a
                non-directory and force is not set, or if that file is
                itself being redistributed
        """
        candidate_paths: Set[str] = {
            c.path for folder in plan.folders for c in folder.candidates
        }

        for folder in plan.folders:
            if not self.fs.exists(folder.path) or self.fs.is_dir(folder.path):
                continue

            if folder.path in candidate_paths:
                raise DestinationConflict(
                    f"Destination path {folder.path} is one of the files being "
                    f"redistributed; rename it or choose another prefix"
                )
            if not self.config.force:
                raise DestinationConflict(
                    f"Destination path {folder.path} exists and is not a "
                    f"directory (use --force to replace it)"
                )
            logger.warning(f"Will replace file with folder: {folder.path}")

    def execute(self, plan: Plan) -> ExecutionResult:
        """
        Run (or preview) every action of the plan in order.

        Args:
            plan: The plan produced by build_plan()

        Returns:
            ExecutionResult with one Action per folder creation, move and
            folder removal
        """
        result = ExecutionResult(
            dry_run=self.config.dry_run,
            folder_count=len(plan.folders),
            file_count=plan.total_files,
        )
        total = plan.total_files
        processed = 0

        logger.info(
            f"{'Previewing' if self.config.dry_run else 'Executing'} "
            f"{total} moves into {len(plan.folders)} folders"
        )

        for folder in plan.folders:
            folder_ready = self._prepare_folder(folder, result)

            for candidate in folder.candidates:
                dest = os.path.join(folder.path, candidate.name)
                if folder_ready:
                    action = self._move(candidate, dest)
                else:
                    action = self._fail(
                        candidate.path, dest,
                        f"Target folder {folder.path} is not available"
                    )
                result.actions.append(action)

                processed += 1
                if processed % 100 == 0:
                    logger.info(f"Processed {processed}/{total} files...")

                if action.status == ActionStatus.FAILED and self.config.fail_fast:
                    logger.error("Stopping at first failure (--fail-fast)")
                    result.aborted = True
                    return result

        self._remove_emptied(plan, result)

        logger.info(
            f"Completed: {result.moved} moved, {result.skipped} in place, "
            f"{result.failed} failed"
        )
        return result

    def _prepare_folder(self, folder: TargetFolder, result: ExecutionResult) -> bool:
        """Create the target folder if needed. Returns False if unavailable."""
        path = folder.path
        if self.fs.is_dir(path):
            return True

        if self.config.dry_run:
            self.emit(f"Would create folder: {path}")
            result.actions.append(
                Action(ActionKind.CREATE_FOLDER, ActionStatus.PRINTED, None, path)
            )
            return True

        try:
            if self.fs.exists(path):
                # preflight() only lets this through with force
                logger.warning(f"Removing file blocking folder creation: {path}")
                self.fs.remove(path)
            self.fs.makedirs(path)
        except OSError as e:
            message = f"Failed to create directory {path}: {e}"
            logger.error(message)
            self.emit(f"Failed: {path} ({message})")
            result.actions.append(
                Action(ActionKind.CREATE_FOLDER, ActionStatus.FAILED, None, path, message)
            )
            return False

        logger.info(f"Created folder: {path}")
        self.emit(f"Created folder: {path}")
        result.actions.append(
            Action(ActionKind.CREATE_FOLDER, ActionStatus.SUCCEEDED, None, path)
        )
        return True

    def _move(self, candidate: Candidate, dest: str) -> Action:
        src = candidate.path

        if src == dest:
            self.emit(f"Already in place: {src}")
            return Action(
                ActionKind.MOVE, ActionStatus.SKIPPED, src, dest, "Already in place"
            )

        if self.config.dry_run:
            self.emit(f"Would move: {src} -> {dest}")
            return Action(
                ActionKind.MOVE, ActionStatus.PRINTED, src, dest, f"Would move to {dest}"
            )

        try:
            message = self._transfer(src, dest)
        except RefolderError as e:
            return self._fail(src, dest, str(e))

        self.emit(f"Moved: {src} -> {dest}")
        return Action(ActionKind.MOVE, ActionStatus.SUCCEEDED, src, dest, message)

    def _transfer(self, src: str, dest: str) -> str:
        """
        Move one file, applying the overwrite policy.

        Raises:
            DestinationExists: If dest exists and force is not set
            MoveFailed: If the existing dest cannot be replaced or both the
                        rename and the copy fallback fail
        """
        if self.fs.exists(dest):
            if not self.config.force:
                raise DestinationExists(
                    f"Destination file {dest} already exists "
                    f"(use --force to overwrite)"
                )
            if self.fs.is_dir(dest):
                raise MoveFailed(f"Destination {dest} is a directory")
            try:
                logger.warning(f"Overwriting existing destination: {dest}")
                self.fs.remove(dest)
            except OSError as e:
                raise MoveFailed(
                    f"Failed removing existing destination file {dest}: {e}"
                ) from e

        logger.info(f"Moving: {src} -> {dest}")
        state, message = safe_move(src, dest, self.fs)
        if not state.succeeded:
            raise MoveFailed(message)
        return message

    def _fail(self, src: str, dest: str, message: str) -> Action:
        logger.error(f"Failed to move {src}: {message}")
        self.emit(f"Failed: {src} -> {dest} ({message})")
        return Action(ActionKind.MOVE, ActionStatus.FAILED, src, dest, message)

    def _remove_emptied(self, plan: Plan, result: ExecutionResult) -> None:
        """Remove dissolved output folders that are not targets and are now empty."""
        targets = {folder.path for folder in plan.folders}

        for group in plan.dissolved:
            if group.path in targets:
                continue

            if self.config.dry_run:
                if group.other_entries == 0:
                    self.emit(f"Would remove empty folder: {group.path}")
                    result.actions.append(
                        Action(ActionKind.REMOVE_FOLDER, ActionStatus.PRINTED, group.path, None)
                    )
                continue

            try:
                if not self.fs.is_dir(group.path) or self.fs.listdir(group.path):
                    logger.info(f"Keeping non-empty folder: {group.path}")
                    continue
                self.fs.rmdir(group.path)
            except OSError as e:
                logger.warning(f"Could not remove folder {group.path}: {e}")
                continue

            self.emit(f"Removed empty folder: {group.path}")
            result.actions.append(
                Action(ActionKind.REMOVE_FOLDER, ActionStatus.SUCCEEDED, group.path, None)
            )
