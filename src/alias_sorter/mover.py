"""
File mover for relocating matched files into their alias folders.

This module is responsible for:
- Naming destinations without collisions (" (1)", " (2)", etc. suffixes)
- Supporting dry-run mode (no actual moves)
- Skipping files that vanished or whose destination got taken
- Catching and recording errors (permissions, cross-device, etc.)
- Logging all operations
- Returning detailed results for reporting
"""

import logging
import os
import re
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Set, Union

from .types import Candidate, MoveResult, MoveStatus
from .utils import safe_move

logger = logging.getLogger(__name__)

# Trailing " (N)" on a file stem, e.g. "example file (1)"
SUFFIX_RE = re.compile(r" \((\d+)\)$")


def bump_suffix(stem: str) -> str:
    """
    Return stem with its " (N)" suffix incremented, or " (1)" appended.

    Examples:
        >>> bump_suffix("report")
        'report (1)'
        >>> bump_suffix("report (9)")
        'report (10)'
    """
    match = SUFFIX_RE.search(stem)
    if match is None:
        return f"{stem} (1)"

    number = int(match.group(1))
    return f"{stem[:match.start()]} ({number + 1})"


def rename_destination(
    source_path: Union[str, Path],
    target_dir: Union[str, Path],
    claimed: Optional[Set[str]] = None
) -> str:
    """
    Compute a destination for source_path inside target_dir that is free.

    Starts with the source's own name. While that path exists (or was
    claimed earlier in this run), the " (N)" suffix before the extension
    is added or incremented. Every attempt checks the filesystem again, so
    pre-existing gaps such as "a.txt", "a (1).txt", "a (5).txt" are handled.

    A file without an extension is suffixed at the end of its name
    ("README" -> "README (1)").

    Args:
        source_path: The file that will be moved
        target_dir: The folder it will be moved into
        claimed: Optional set of destination paths already reserved in this
                 run (for keeping dry-run previews consistent)

    Returns:
        The full destination path, free at the time of computation

    Raises:
        NotADirectoryError: If target_dir is not a directory
        ValueError: If source_path has no file name
    """
    target_dir = Path(target_dir)
    claimed = claimed or set()

    if not target_dir.is_dir():
        raise NotADirectoryError(f"Destination is not a directory: {target_dir}")

    name = Path(source_path).name
    if not name:
        raise ValueError(f"Source path has no file name: {source_path}")

    extension = Path(name).suffix
    stem = name[:len(name) - len(extension)]

    candidate = str(target_dir / name)
    while os.path.lexists(candidate) or candidate in claimed:
        stem = bump_suffix(stem)
        candidate = str(target_dir / f"{stem}{extension}")

    return candidate


def move_file(
    src_path: Union[str, Path],
    dest_path: Union[str, Path],
    dry_run: bool = False
) -> MoveResult:
    """
    Move a single file from source to destination.

    Handles:
    - Missing source (skips with SKIPPED_MISSING status)
    - Destination taken, permission errors and other OS errors (ERROR)
    - Cross-device moves (via safe_move copy+delete)

    Args:
        src_path: Source file path
        dest_path: Destination file path
        dry_run: If True, simulate the move without performing it

    Returns:
        MoveResult with status and details
    """
    src_path = Path(src_path)
    dest_path = Path(dest_path)

    if not os.path.lexists(src_path):
        logger.info(f"Source missing (already moved?): {src_path}")
        return MoveResult(
            alias="",  # Will be set by caller
            source_path=str(src_path),
            dest_path=None,
            status=MoveStatus.SKIPPED_MISSING,
            message="Source file no longer exists (may have been moved already)"
        )

    if src_path.is_dir():
        logger.error(f"Source is a directory: {src_path}")
        return MoveResult(
            alias="",
            source_path=str(src_path),
            dest_path=None,
            status=MoveStatus.ERROR,
            message="Source path is a directory"
        )

    if dry_run:
        if os.path.lexists(dest_path):
            ok, message = False, f"Destination already exists: {dest_path}"
        else:
            logger.info(f"[DRY RUN] {src_path} -> {dest_path}")
            ok, message = True, f"Would move to {dest_path}"
        success = MoveStatus.WOULD_MOVE
    else:
        logger.info(f"Moving: {src_path} -> {dest_path}")
        ok, message = safe_move(src_path, dest_path)
        success = MoveStatus.MOVED

    if not ok:
        logger.error(f"Failed to move {src_path}: {message}")

    return MoveResult(
        alias="",
        source_path=str(src_path),
        dest_path=str(dest_path),
        status=success if ok else MoveStatus.ERROR,
        message=message
    )


class FileMover:
    """
    Moves candidates into the folders their aliases point at.

    Candidates are handled one at a time, in order; each destination is
    named only after the previous move finished, so two files never race
    for the same free suffix.
    """

    def __init__(
        self,
        aliases: Mapping[str, str],
        dry_run: bool = False
    ):
        """
        Initialize the mover.

        Args:
            aliases: Alias table (alias -> destination folder)
            dry_run: If True, simulate moves without actually performing them
        """
        self.aliases = aliases
        self.dry_run = dry_run

        # Destinations handed out during this run. On disk in commit mode,
        # but dry runs need them to preview the same names.
        self._claimed: Set[str] = set()

        self._stats: Dict[MoveStatus, int] = {status: 0 for status in MoveStatus}

    def move_candidate(self, candidate: Candidate) -> MoveResult:
        """
        Name a destination for a candidate and move it there.

        Args:
            candidate: The file and the alias it matched

        Returns:
            MoveResult describing the outcome of the operation
        """
        target_dir = self.aliases[candidate.alias]
        file_name = os.path.basename(candidate.source_path)

        try:
            dest_path = rename_destination(
                candidate.source_path, target_dir, self._claimed
            )
        except (NotADirectoryError, ValueError) as e:
            logger.error(f"Cannot name destination for {candidate.source_path}: {e}")
            result = MoveResult(
                alias=candidate.alias,
                source_path=candidate.source_path,
                dest_path=None,
                status=MoveStatus.ERROR,
                message=str(e)
            )
            self._stats[result.status] += 1
            return result

        result = move_file(candidate.source_path, dest_path, self.dry_run)
        result.alias = candidate.alias

        if result.status in (MoveStatus.MOVED, MoveStatus.WOULD_MOVE):
            self._claimed.add(dest_path)

            dest_name = os.path.basename(dest_path)
            if dest_name != file_name:
                result.status = result.status.renamed()
                result.message += f" (renamed from {file_name} to {dest_name})"

        self._stats[result.status] += 1
        return result

    def move_all(
        self,
        candidates: List[Candidate],
        progress_callback=None
    ) -> List[MoveResult]:
        """
        Move all candidates, continuing past individual failures.

        Args:
            candidates: Candidates to process, in order
            progress_callback: Optional callable(result) called after each file

        Returns:
            List of MoveResult objects describing each operation
        """
        results: List[MoveResult] = []
        total = len(candidates)

        logger.info(f"Processing {total} candidates...")

        for i, candidate in enumerate(candidates):
            result = self.move_candidate(candidate)
            results.append(result)

            if progress_callback:
                progress_callback(result)

            if (i + 1) % 100 == 0:
                logger.info(f"Processed {i + 1}/{total} files...")

        logger.info(f"Completed processing {total} files")
        return results

    def get_stats(self) -> Dict[str, int]:
        """
        Get statistics about move operations.

        Returns:
            Dictionary mapping status names to counts
        """
        return {status.value: count for status, count in self._stats.items()}

    def get_summary(self) -> str:
        """
        Get a human-readable summary of move operations.

        Returns:
            Formatted summary string, e.g.
            "Summary (3 candidates):\n  Moved: 2, 1 renamed\n  Failed: 1"
        """
        counts = self._stats
        if self.dry_run:
            label, plain, renamed = "Would move", MoveStatus.WOULD_MOVE, MoveStatus.WOULD_MOVE_RENAMED
        else:
            label, plain, renamed = "Moved", MoveStatus.MOVED, MoveStatus.MOVED_RENAMED

        lines = [
            f"Summary ({sum(counts.values())} candidates):",
            f"  {label}: {counts[plain] + counts[renamed]}, {counts[renamed]} renamed",
        ]
        if counts[MoveStatus.SKIPPED_MISSING]:
            lines.append(f"  Source gone: {counts[MoveStatus.SKIPPED_MISSING]}")
        if counts[MoveStatus.ERROR]:
            lines.append(f"  Failed: {counts[MoveStatus.ERROR]}")

        return "\n".join(lines)
