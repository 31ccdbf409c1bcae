"""
Reporting for refolder runs.

This module is responsible for:
- Rendering the summary block (folder/file totals and mode)
- Rendering the dry-run tree preview of the planned layout
- Writing a per-action report as CSV, or as XLSX using openpyxl
"""

import csv
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import List, Union

import openpyxl

from .types import ExecutionResult, Plan, ReportEntry, ReportStatus

logger = logging.getLogger(__name__)

REPORT_COLUMNS = ["timestamp", "action", "status", "source_path", "dest_path", "message"]


def format_summary(result: ExecutionResult) -> str:
    """
    Get the human-readable summary block printed at the end of a run.

    Args:
        result: The ExecutionResult returned by the executor

    Returns:
        Formatted summary string
    """
    lines = [
        "Summary:",
        f"  Total folders: {result.folder_count}",
        f"  Total files:   {result.file_count}",
    ]

    if result.dry_run:
        lines.append("  Mode:          dry-run (no changes made)")
        return "\n".join(lines)

    lines.append("  Mode:          applied")
    lines.append(f"  Moved:         {result.moved}")
    lines.append(f"  Skipped:       {result.skipped}")
    lines.append(f"  Failed:        {result.failed}")
    if result.aborted:
        lines.append("  Stopped early after the first failure")
    return "\n".join(lines)


def render_tree(plan: Plan) -> str:
    """Render the planned layout as a tree, folders in plan order."""
    lines = ["."]
    last_folder = len(plan.folders) - 1

    for i, folder in enumerate(plan.folders):
        is_last_folder = i == last_folder
        lines.append(("└── " if is_last_folder else "├── ") + folder.name)

        indent = "    " if is_last_folder else "│   "
        names = sorted(c.name for c in folder.candidates)
        for j, name in enumerate(names):
            branch = "└── " if j == len(names) - 1 else "├── "
            lines.append(indent + branch + name)

    return "\n".join(lines)


def build_report_entries(result: ExecutionResult) -> List[ReportEntry]:
    """Convert every action of a run into a report row."""
    timestamp = datetime.now().isoformat(timespec="seconds")
    entries = []
    for action in result.actions:
        entries.append(
            ReportEntry(
                timestamp=timestamp,
                action=action.kind.value,
                status=ReportStatus.from_action(action).value,
                source_path=action.source or "",
                dest_path=action.dest or "",
                message=action.message,
            )
        )
    return entries


def write_report(result: ExecutionResult, report_path: Union[str, Path]) -> Path:
    """
    Write the per-action report.

    The format is chosen from the file extension: ".xlsx" writes a
    workbook with openpyxl, anything else writes CSV.

    Args:
        result: The ExecutionResult to report
        report_path: Destination file

    Returns:
        Path of the written report

    Raises:
        OSError: If the report cannot be written
    """
    path = Path(report_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    entries = build_report_entries(result)
    rows = [[getattr(e, col) for col in REPORT_COLUMNS] for e in entries]

    if path.suffix.lower() == ".xlsx":
        _write_xlsx(path, rows)
    else:
        with path.open("w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(REPORT_COLUMNS)
            writer.writerows(rows)

    logger.info(f"Wrote report with {len(rows)} rows to {os.fspath(path)}")
    return path


def _write_xlsx(path: Path, rows: List[list]) -> None:
    workbook = openpyxl.Workbook()
    try:
        worksheet = workbook.active
        worksheet.title = "Actions"
        worksheet.append(REPORT_COLUMNS)
        for row in rows:
            worksheet.append(row)
        workbook.save(path)
    finally:
        workbook.close()
