"""
Unit tests for the run report writer.
"""

import csv
import tempfile
from pathlib import Path

import openpyxl

from alias_sorter.report import REPORT_COLUMNS, build_report_entries, write_report
from alias_sorter.types import AmbiguousFile, MoveResult, MoveStatus


def sample_results():
    return [
        MoveResult("tv", "/src/tv.mkv", "/dst/TV/tv.mkv", MoveStatus.MOVED, "Moved successfully"),
        MoveResult("tv", "/src/x tv.mkv", "/dst/TV/x tv (1).mkv", MoveStatus.WOULD_MOVE_RENAMED, "Would move"),
        MoveResult("movies", "/src/movies.mkv", None, MoveStatus.SKIPPED_MISSING, "Source gone"),
    ]


def sample_ambiguous():
    return [AmbiguousFile("/src/star wars.mkv", ("star wars", "wars"))]


class TestBuildReportEntries:
    """Tests for build_report_entries function."""

    def test_statuses_mapped(self):
        entries = build_report_entries(sample_results(), sample_ambiguous(), "T")

        assert [e.status for e in entries] == [
            "MOVED", "WOULD_MOVE_RENAMED", "SKIPPED_MISSING", "AMBIGUOUS"
        ]
        assert all(e.timestamp == "T" for e in entries)

    def test_missing_dest_is_blank(self):
        entries = build_report_entries(sample_results(), [], "T")
        assert entries[2].dest_path == ""

    def test_ambiguous_lists_aliases(self):
        entries = build_report_entries([], sample_ambiguous(), "T")

        assert len(entries) == 1
        assert entries[0].alias == "star wars, wars"
        assert entries[0].source_path == "/src/star wars.mkv"


class TestWriteReport:
    """Tests for write_report function."""

    def test_csv_report(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "report.csv"

            count = write_report(sample_results(), sample_ambiguous(), path)

            with open(path, newline="", encoding="utf-8") as f:
                rows = list(csv.DictReader(f))

            assert count == 4
            assert list(rows[0].keys()) == REPORT_COLUMNS
            assert rows[0]["status"] == "MOVED"
            assert rows[0]["dest_path"] == "/dst/TV/tv.mkv"
            assert rows[3]["status"] == "AMBIGUOUS"

    def test_unknown_suffix_writes_csv(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "report.txt"

            write_report(sample_results(), [], path)

            assert path.read_text(encoding="utf-8").startswith(",".join(REPORT_COLUMNS))

    def test_xlsx_report(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "report.xlsx"

            count = write_report(sample_results(), sample_ambiguous(), path)

            workbook = openpyxl.load_workbook(path, read_only=True)
            try:
                rows = list(workbook.active.iter_rows(values_only=True))
            finally:
                workbook.close()

            assert count == 4
            assert list(rows[0]) == REPORT_COLUMNS
            assert rows[1][2] == "MOVED"
            assert rows[4][1] == "star wars, wars"

    def test_empty_run(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "report.csv"

            assert write_report([], [], path) == 0

            lines = path.read_text(encoding="utf-8").splitlines()
            assert lines == [",".join(REPORT_COLUMNS)]
