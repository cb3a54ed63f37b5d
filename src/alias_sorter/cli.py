"""
Command-line interface for the alias sorter.

Usage:
    alias-sort -t TARGET [-Y] [--report PATH] [--workers N] [-v] PATH [PATH ...]

Without -Y nothing is moved; the planned moves are only printed.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .aliases import generate_aliases
from .matcher import search_candidates
from .mover import FileMover
from .report import write_report
from .types import DuplicateAliasError, MoveResult, MoveStatus
from .utils import normalize_path

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(verbose: bool = False) -> None:
    """Configure root logging to stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def positive_int(value: str) -> int:
    """argparse type for integers >= 1."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1: {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="alias-sort",
        description=(
            "Sort loose files into the subfolders of a target directory. "
            "Each subfolder name (split on commas) is an alias; a file whose "
            "name contains exactly one alias as whole words is moved into "
            "that subfolder."
        ),
    )
    parser.add_argument(
        "-t", "--target",
        required=True,
        type=Path,
        help="Target directory for sorted files",
    )
    parser.add_argument(
        "-Y", "--move-files",
        action="store_true",
        help="Move files? If enabled, files are actually moved",
    )
    parser.add_argument(
        "--report",
        type=Path,
        help="Write a report of the run (.xlsx for a workbook, otherwise CSV)",
    )
    parser.add_argument(
        "--workers",
        type=positive_int,
        default=None,
        help="Threads used to test aliases per file (1 disables threading)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "paths",
        nargs="*",
        type=Path,
        help="Path(s) to scan for files to be sorted",
    )
    return parser


def validate_paths(target: Path, paths: List[Path]) -> Optional[str]:
    """
    Check the target and source paths.

    Returns:
        An error message, or None if all paths are usable directories
    """
    if not target.is_dir():
        return f"not a directory: {target}"

    if not paths:
        return "no directories given to be scanned"

    for path in paths:
        if not path.is_dir():
            return f"not a directory: {path}"

    return None


def print_result(result: MoveResult) -> None:
    """Print one line for a processed candidate."""
    if result.status in (MoveStatus.MOVED, MoveStatus.MOVED_RENAMED):
        print(f"Moved {result.source_path} -> {result.dest_path}")
    elif result.status in (MoveStatus.WOULD_MOVE, MoveStatus.WOULD_MOVE_RENAMED):
        print(f"Would move {result.source_path} -> {result.dest_path}")
    else:
        print(
            f"Failed to move {result.source_path} -> {result.dest_path}: "
            f"{result.message}",
            file=sys.stderr,
        )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the sorter.

    Returns:
        Process exit code (0 on success, 1 on a fatal error)
    """
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    error = validate_paths(args.target, args.paths)
    if error:
        print(error, file=sys.stderr)
        return 1

    target = normalize_path(args.target)
    sources = [normalize_path(p) for p in args.paths]

    print(f"Using {target} as sorting target directory")

    try:
        aliases = generate_aliases(target)
    except (OSError, DuplicateAliasError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if not aliases:
        print(f"target directory {target} is empty?", file=sys.stderr)
        return 1

    print("Finding matches...")

    try:
        matches = search_candidates(aliases, sources, max_workers=args.workers)
    except (OSError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    mover = FileMover(aliases, dry_run=not args.move_files)

    results: List[MoveResult] = []
    if matches.candidates:
        print("Matches:")
        results = mover.move_all(matches.candidates, progress_callback=print_result)

    if matches.ambiguous:
        print("Multiple matches (not moved):")
        for item in matches.ambiguous:
            print(f"{item.source_path} ({', '.join(item.aliases)})")

    print(mover.get_summary())
    if matches.ambiguous:
        print(f"  Ambiguous (not moved): {len(matches.ambiguous)}")

    if args.report:
        try:
            write_report(results, matches.ambiguous, args.report)
        except OSError as e:
            print(f"error: could not write report: {e}", file=sys.stderr)
            return 1
        print(f"Report written to {args.report}")

    return 0
