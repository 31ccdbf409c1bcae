"""
Command-line interface for refolder.

Usage:
    refolder PATH --subfolders N [--matching GLOB] [--prefix PREFIX]
             [--suffix numbers|letters|none] [--recursive] [--dry-run]
             [--force] [--fail-fast] [--report FILE] [--verbose]

Exit codes:
    0  all actions succeeded (including a dry run)
    1  one or more file moves failed
    2  fatal error before anything was touched (bad path, bad options,
       blocked target folder)
"""

import argparse
import logging
import sys
from typing import Callable, List, Optional

from . import __version__
from .discovery import discover
from .distributor import build_plan
from .errors import InvalidConfig, RefolderError
from .executor import Executor
from .naming import validate_naming
from .report import format_summary, render_tree, write_report
from .types import ExecutionResult, RefolderConfig, SuffixStyle
from .utils import FileSystem, normalize_path

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED_MOVES = 1
EXIT_FATAL = 2

NOTHING_TO_DO = "No files matched pattern. Nothing to do."


def setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    """
    Configure logging for the application.

    Log records go to stderr (and optionally a file); stdout is reserved
    for action lines and the summary.

    Args:
        verbose: If True, set log level to DEBUG, otherwise WARNING
        log_file: Optional path to also write log records to
    """
    level = logging.DEBUG if verbose else logging.WARNING
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="refolder",
        description="Move matching files into equally-sized subfolders.",
        epilog=(
            "Files already inside output folders of an earlier run "
            "(PREFIX-1, PREFIX-2, ...) are collected again, so running with "
            "a different --subfolders count redistributes them."
        ),
    )

    parser.add_argument(
        "path",
        help="Directory to search",
    )
    parser.add_argument(
        "-m", "--matching",
        default="*",
        metavar="GLOB",
        help='Glob pattern for matching files (shell-style, default: "*")',
    )
    parser.add_argument(
        "-s", "--subfolders",
        type=int,
        required=True,
        metavar="N",
        help="Number of subfolders to split into",
    )
    parser.add_argument(
        "-p", "--prefix",
        default="group",
        help='Prefix for created subfolders (default: "group")',
    )
    parser.add_argument(
        "--suffix",
        default=SuffixStyle.NUMBERS.value,
        choices=[style.value for style in SuffixStyle],
        help="Suffix style (default: numbers)",
    )
    parser.add_argument(
        "-r", "--recursive",
        action="store_true",
        help="Recurse into subdirectories",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print actions without performing them",
    )
    parser.add_argument(
        "-f", "--force",
        action="store_true",
        help="Overwrite existing files/folders in destination",
    )
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Stop at the first failed move instead of continuing",
    )
    parser.add_argument(
        "--report",
        metavar="FILE",
        help="Write a per-action report (.csv, or .xlsx for a workbook)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )
    parser.add_argument(
        "--log-file",
        metavar="FILE",
        help="Also write log records to FILE",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser


def build_config(args: argparse.Namespace) -> RefolderConfig:
    """
    Build and validate the run configuration from parsed arguments.

    Raises:
        InvalidConfig: On a zero folder count, a bad prefix, or the 'none'
                       suffix with more than one folder
    """
    config = RefolderConfig(
        root=args.path,
        pattern=args.matching,
        subfolders=args.subfolders,
        prefix=args.prefix,
        suffix=SuffixStyle.from_string(args.suffix),
        recursive=args.recursive,
        dry_run=args.dry_run,
        force=args.force,
        fail_fast=args.fail_fast,
        exclude_paths=tuple(
            normalize_path(p) for p in (args.log_file, args.report) if p
        ),
    )
    if not config.pattern:
        raise InvalidConfig("Pattern must not be empty")
    validate_naming(config.prefix, config.suffix, config.subfolders)
    return config


def run(
    config: RefolderConfig,
    emit: Callable[[str], None] = print,
    fs: Optional[FileSystem] = None
) -> Optional[ExecutionResult]:
    """
    Discover, plan and execute (or preview) one redistribution.

    All fatal checks run before the first filesystem mutation.

    Args:
        config: Validated run configuration
        emit: Callable receiving each line of user-facing output
        fs: Filesystem capability for the executor (tests)

    Returns:
        The ExecutionResult, or None if no files matched

    Raises:
        DiscoveryError, InvalidConfig, DestinationConflict
    """
    validate_naming(config.prefix, config.suffix, config.subfolders)

    discovery = discover(config)
    if not discovery.candidates:
        emit(NOTHING_TO_DO)
        return None

    plan = build_plan(discovery.candidates, config, discovery.groups)

    executor = Executor(config, fs=fs, emit=emit)
    executor.preflight(plan)
    result = executor.execute(plan)

    if config.dry_run:
        emit("")
        emit(render_tree(plan))
    emit("")
    emit(format_summary(result))
    return result


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose, args.log_file)
    logger.debug(f"refolder {__version__} arguments: {vars(args)}")

    try:
        config = build_config(args)
        result = run(config)
    except RefolderError as e:
        logger.debug("Fatal error", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FATAL

    if result is None:
        return EXIT_OK

    if args.report:
        try:
            report_path = write_report(result, args.report)
        except OSError as e:
            print(f"Error: could not write report {args.report}: {e}", file=sys.stderr)
            return EXIT_FAILED_MOVES
        print(f"Report written to {report_path}")

    if not result.ok:
        print(
            f"{result.failed} action(s) failed; see messages above",
            file=sys.stderr,
        )
        return EXIT_FAILED_MOVES

    return EXIT_OK
