"""
Type definitions and data classes for the alias sorter.

This module defines:
- DuplicateAliasError: Raised when two folders claim the same alias
- Candidate: A file matched to exactly one alias
- AmbiguousFile: A file matched to more than one alias
- MatchResult: Output of the candidate matcher
- MoveResult: Data class representing the result of a move operation
- MoveStatus: Enum for move outcomes, also used as report labels
- ReportEntry: Data class for report rows
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class DuplicateAliasError(ValueError):
    """Two subfolders of the target directory derive the same alias."""

    def __init__(self, alias: str, existing: str, duplicate: str):
        self.alias = alias
        self.existing = existing
        self.duplicate = duplicate
        super().__init__(
            f"Alias '{alias}' is claimed by both '{existing}' and '{duplicate}'"
        )


@dataclass(frozen=True)
class Candidate:
    """
    A loose file bound to exactly one alias.

    Attributes:
        source_path: Full path of the file to move
        alias: The alias whose folder the file belongs in
    """
    source_path: str
    alias: str


@dataclass(frozen=True)
class AmbiguousFile:
    """A file that matched several aliases and is left for a human."""
    source_path: str
    aliases: Tuple[str, ...] = ()


@dataclass
class MatchResult:
    """Candidates and ambiguous files found by the matcher."""
    candidates: List[Candidate] = field(default_factory=list)
    ambiguous: List[AmbiguousFile] = field(default_factory=list)


class MoveStatus(Enum):
    """Outcome for one candidate. Values are the labels used in reports."""
    MOVED = "MOVED"
    MOVED_RENAMED = "MOVED_RENAMED"            # Got a " (N)" suffix
    WOULD_MOVE = "WOULD_MOVE"                  # Dry run
    WOULD_MOVE_RENAMED = "WOULD_MOVE_RENAMED"
    SKIPPED_MISSING = "SKIPPED_MISSING"        # Source vanished before the move
    ERROR = "ERROR"

    def renamed(self) -> "MoveStatus":
        """The suffixed variant of a successful status."""
        return {
            MoveStatus.MOVED: MoveStatus.MOVED_RENAMED,
            MoveStatus.WOULD_MOVE: MoveStatus.WOULD_MOVE_RENAMED,
        }.get(self, self)


@dataclass
class MoveResult:
    """Result of a move operation."""
    alias: str
    source_path: str
    dest_path: Optional[str]
    status: MoveStatus
    message: str


@dataclass
class ReportEntry:
    """Entry for the run report."""
    timestamp: str
    alias: str
    status: str
    source_path: str
    dest_path: str
    message: str
