"""
Report writer for a sorting run.

This module is responsible for:
- Turning move results and ambiguous files into report rows
- Writing the rows as CSV, or as an XLSX workbook using openpyxl
- Choosing the format from the report file's extension
"""

import csv
import logging
from dataclasses import astuple, fields
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Union

import openpyxl
from openpyxl.styles import Font

from .types import AmbiguousFile, MoveResult, ReportEntry

logger = logging.getLogger(__name__)

REPORT_COLUMNS = [f.name for f in fields(ReportEntry)]

# Status label for files left alone because several aliases matched
AMBIGUOUS = "AMBIGUOUS"


def build_report_entries(
    results: Iterable[MoveResult],
    ambiguous: Iterable[AmbiguousFile] = (),
    timestamp: str = None
) -> List[ReportEntry]:
    """
    Build report rows for one run.

    Args:
        results: Move results, one row each
        ambiguous: Files left untouched because several aliases matched
        timestamp: Timestamp for every row (defaults to now)

    Returns:
        List of ReportEntry rows: moves first, then ambiguous files
    """
    timestamp = timestamp or datetime.now().isoformat(timespec="seconds")

    entries = [
        ReportEntry(
            timestamp=timestamp,
            alias=result.alias,
            status=result.status.value,
            source_path=result.source_path,
            dest_path=result.dest_path or "",
            message=result.message,
        )
        for result in results
    ]

    for item in ambiguous:
        entries.append(ReportEntry(
            timestamp=timestamp,
            alias=", ".join(item.aliases),
            status=AMBIGUOUS,
            source_path=item.source_path,
            dest_path="",
            message="Matched multiple aliases, not moved",
        ))

    return entries


def write_csv_report(entries: List[ReportEntry], path: Union[str, Path]) -> None:
    """Write report rows to a CSV file with a header row."""
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(REPORT_COLUMNS)
        for entry in entries:
            writer.writerow(astuple(entry))


def write_xlsx_report(entries: List[ReportEntry], path: Union[str, Path]) -> None:
    """Write report rows to the first sheet of a new XLSX workbook."""
    workbook = openpyxl.Workbook()
    try:
        worksheet = workbook.active
        worksheet.title = "Report"

        worksheet.append(REPORT_COLUMNS)
        for cell in worksheet[1]:
            cell.font = Font(bold=True)
        worksheet.freeze_panes = "A2"

        for entry in entries:
            worksheet.append(list(astuple(entry)))

        workbook.save(path)
    finally:
        workbook.close()


def write_report(
    results: Iterable[MoveResult],
    ambiguous: Iterable[AmbiguousFile],
    path: Union[str, Path]
) -> int:
    """
    Write a run report, as XLSX if path ends in .xlsx and CSV otherwise.

    Args:
        results: Move results from the apply phase
        ambiguous: Ambiguous files from the matcher
        path: Output file; its parent directory must exist

    Returns:
        Number of rows written (excluding the header)

    Raises:
        OSError: If the file cannot be written
    """
    path = Path(path)
    entries = build_report_entries(results, ambiguous)

    if path.suffix.lower() == ".xlsx":
        write_xlsx_report(entries, path)
    else:
        write_csv_report(entries, path)

    logger.info(f"Wrote {len(entries)} report rows to {path}")
    return len(entries)
