"""
Unit tests for summaries, tree previews and report files.
"""

import csv

import openpyxl

from refolder.report import (
    REPORT_COLUMNS,
    build_report_entries,
    format_summary,
    render_tree,
    write_report,
)
from refolder.types import (
    Action,
    ActionKind,
    ActionStatus,
    Candidate,
    ExecutionResult,
    Plan,
    ReportStatus,
    TargetFolder,
)


def sample_result(dry_run=False) -> ExecutionResult:
    result = ExecutionResult(dry_run=dry_run, folder_count=2, file_count=3)
    result.actions = [
        Action(ActionKind.CREATE_FOLDER, ActionStatus.SUCCEEDED, None, "/r/group-1"),
        Action(ActionKind.MOVE, ActionStatus.SUCCEEDED, "/r/a.txt", "/r/group-1/a.txt", "Moved successfully"),
        Action(ActionKind.MOVE, ActionStatus.SKIPPED, "/r/group-2/b.txt", "/r/group-2/b.txt", "Already in place"),
        Action(ActionKind.MOVE, ActionStatus.FAILED, "/r/c.txt", "/r/group-2/c.txt", "Destination file exists"),
    ]
    return result


class TestFormatSummary:
    """Tests for the summary block."""

    def test_dry_run(self):
        result = ExecutionResult(dry_run=True, folder_count=4, file_count=12)

        assert format_summary(result) == (
            "Summary:\n"
            "  Total folders: 4\n"
            "  Total files:   12\n"
            "  Mode:          dry-run (no changes made)"
        )

    def test_applied(self):
        summary = format_summary(sample_result())

        assert "  Mode:          applied" in summary
        assert "  Moved:         1" in summary
        assert "  Skipped:       1" in summary
        assert "  Failed:        1" in summary
        assert "Stopped early" not in summary

    def test_aborted(self):
        result = sample_result()
        result.aborted = True
        assert "Stopped early" in format_summary(result)


class TestRenderTree:
    def test_two_folders(self):
        plan = Plan(folders=[
            TargetFolder(0, "group-1", "/r/group-1", [
                Candidate("/r/b.txt", "b.txt"), Candidate("/r/a.txt", "a.txt"),
            ]),
            TargetFolder(1, "group-2", "/r/group-2", [Candidate("/r/c.txt", "c.txt")]),
        ])

        assert render_tree(plan) == "\n".join([
            ".",
            "├── group-1",
            "│   ├── a.txt",
            "│   └── b.txt",
            "└── group-2",
            "    └── c.txt",
        ])

    def test_empty_folder(self):
        plan = Plan(folders=[TargetFolder(0, "group-1", "/r/group-1", [])])
        assert render_tree(plan) == ".\n└── group-1"


class TestReportStatus:
    """Tests for action to report status mapping."""

    def test_mapping(self):
        statuses = [ReportStatus.from_action(a) for a in sample_result().actions]
        assert statuses == [
            ReportStatus.CREATED,
            ReportStatus.MOVED,
            ReportStatus.IN_PLACE,
            ReportStatus.FAILED,
        ]

    def test_dry_run_actions(self):
        action = Action(ActionKind.MOVE, ActionStatus.PRINTED, "/a", "/b")
        assert ReportStatus.from_action(action) == ReportStatus.DRYRUN

    def test_removed_folder(self):
        action = Action(ActionKind.REMOVE_FOLDER, ActionStatus.SUCCEEDED, "/r/group-4", None)
        assert ReportStatus.from_action(action) == ReportStatus.REMOVED


class TestWriteReport:
    """Tests for report files."""

    def test_entries(self):
        entries = build_report_entries(sample_result())
        assert len(entries) == 4
        assert entries[0].source_path == ""
        assert entries[0].dest_path == "/r/group-1"
        assert entries[3].status == "FAILED"

    def test_csv(self, tmp_path):
        path = write_report(sample_result(), tmp_path / "out" / "report.csv")

        with path.open(newline="", encoding="utf-8") as f:
            rows = list(csv.DictReader(f))

        assert list(rows[0].keys()) == REPORT_COLUMNS
        assert [r["status"] for r in rows] == ["CREATED", "MOVED", "IN_PLACE", "FAILED"]
        assert rows[1]["source_path"] == "/r/a.txt"
        assert rows[3]["message"] == "Destination file exists"

    def test_xlsx(self, tmp_path):
        path = write_report(sample_result(), tmp_path / "report.xlsx")

        workbook = openpyxl.load_workbook(path, read_only=True)
        try:
            rows = list(workbook["Actions"].iter_rows(values_only=True))
        finally:
            workbook.close()

        assert list(rows[0]) == REPORT_COLUMNS
        assert len(rows) == 5
        assert rows[2][2] == "MOVED"
        assert rows[2][4] == "/r/group-1/a.txt"
