"""
Candidate matcher for pairing loose files with aliases.

This module is responsible for:
- Listing loose files directly inside each source directory (non-recursive)
- Normalizing file names into lowercase, space-separated words
- Testing each name against every alias on word boundaries
- Fanning alias tests for a single file out over a thread pool
- Separating unambiguous matches from files that hit several aliases
"""

import logging
import os
import re
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterator, List, Mapping, Optional, Sequence, Set, Union

from .aliases import sort_aliases
from .types import AmbiguousFile, Candidate, MatchResult

logger = logging.getLogger(__name__)

# Characters trimmed from both ends of a file stem
TRIM_CHARS = "_.- "

# Separators between words
_DELIMITERS = re.compile(r"[\s_\-]+")

def default_workers() -> int:
    """Worker count used when none is given (same rule as ThreadPoolExecutor)."""
    return min(32, (os.cpu_count() or 1) + 4)


def _is_cased(char: str) -> bool:
    return char.islower() or char.isupper()


def _is_boundary(prev: str, char: str, following: str) -> bool:
    """True if a new word starts at char (camelCase, HTMLFile, Part2, 2Part)."""
    if prev.islower() and char.isupper():
        return True
    if prev.isupper() and char.isupper() and following.islower():
        return True
    if _is_cased(prev) and char.isdigit():
        return True
    return prev.isdigit() and _is_cased(char)


def split_words(chunk: str) -> List[str]:
    """Split a delimiter-free chunk at case and letter/digit changes."""
    words = []
    start = 0
    for i in range(1, len(chunk)):
        following = chunk[i + 1] if i + 1 < len(chunk) else ""
        if _is_boundary(chunk[i - 1], chunk[i], following):
            words.append(chunk[start:i])
            start = i
    if start < len(chunk):
        words.append(chunk[start:])
    return words


def to_lower_words(text: str) -> str:
    """
    Split text into words and join them lowercased with single spaces.

    Case tests use str.islower/isupper, so any cased alphabet splits.

    Examples:
        >>> to_lower_words("My Movie_Name-2020")
        'my movie name 2020'
        >>> to_lower_words("starWarsHTMLEdition")
        'star wars html edition'
        >>> to_lower_words("KesäKuvat2020")
        'kesä kuvat 2020'
    """
    words: List[str] = []
    for chunk in _DELIMITERS.split(text):
        words.extend(split_words(chunk))
    return " ".join(words).lower()


def normalize_filename(file_name: str) -> str:
    """
    Build the matching surface for a file name.

    The extension is dropped, separator characters are trimmed from both
    ends, remaining dots become spaces, and the result is split into
    lowercase words.

    Args:
        file_name: A file's base name (e.g. "My.Movie_Name-2020.mkv")

    Returns:
        Normalized name (e.g. "my movie name 2020"); may be empty
    """
    stem = Path(file_name).stem
    stem = stem.strip(TRIM_CHARS)
    stem = stem.replace(".", " ")
    return to_lower_words(stem)


def iter_source_files(source_dir: Union[str, Path]) -> Iterator[str]:
    """
    Yield paths of the non-directory entries directly inside source_dir.

    Entries are yielded in name order. A missing or non-directory source
    yields nothing.
    """
    source = Path(source_dir)
    if not source.is_dir():
        logger.debug(f"Skipping source that is not a directory: {source}")
        return

    with os.scandir(source) as it:
        entries = sorted(it, key=lambda entry: entry.name)

    for entry in entries:
        if entry.is_dir():
            logger.debug(f"Skipping nested directory: {entry.path}")
            continue
        yield entry.path


class AliasMatcher:
    """
    Tests normalized names against a fixed set of aliases.

    Patterns are compiled once, longest alias first. When more than one
    worker is allowed, the aliases for a single name are split across a
    thread pool and hits are merged into a lock-protected set; the result
    is identical to sequential evaluation.
    """

    def __init__(
        self,
        aliases: Mapping[str, str],
        max_workers: Optional[int] = None
    ):
        self.aliases = sort_aliases(aliases)

        self._patterns = {
            alias: re.compile(rf"\b{re.escape(alias)}\b")
            for alias in self.aliases
        }

        if max_workers is None:
            max_workers = default_workers()
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.max_workers = min(max_workers, max(len(self.aliases), 1))

        self._executor: Optional[ThreadPoolExecutor] = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def close(self) -> None:
        """Shut down the worker pool, if one was started."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def _pool(self) -> Optional[ThreadPoolExecutor]:
        if self.max_workers <= 1:
            return None
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.max_workers,
                thread_name_prefix="alias-match"
            )
        return self._executor

    def match(self, normalized: str) -> List[str]:
        """
        Return every alias that matches normalized as a whole word.

        Hits are returned in alias order (longest first).
        """
        if not normalized:
            return []

        pool = self._pool()
        if pool is None:
            return [
                alias for alias in self.aliases
                if self._patterns[alias].search(normalized)
            ]

        hits = set()
        lock = threading.Lock()

        def _test(chunk: List[str]) -> None:
            for alias in chunk:
                if self._patterns[alias].search(normalized):
                    with lock:
                        hits.add(alias)

        chunks = [self.aliases[i::self.max_workers] for i in range(self.max_workers)]
        futures = [pool.submit(_test, chunk) for chunk in chunks if chunk]
        for future in futures:
            # Re-raises anything a worker hit
            future.result()

        return [alias for alias in self.aliases if alias in hits]


def search_candidates(
    aliases: Mapping[str, str],
    sources: Sequence[Union[str, Path]],
    max_workers: Optional[int] = None
) -> MatchResult:
    """
    Find loose files in sources that belong to exactly one alias.

    A directory listed more than once (also as "dir/." or through a
    symlink) is scanned once, so every file yields at most one result.

    Args:
        aliases: Alias table (alias -> destination folder)
        sources: Source directories, scanned in the given order
        max_workers: Bound on threads testing aliases for one file
                     (1 disables the pool)

    Returns:
        MatchResult with candidates (single hit) and ambiguous files
        (several hits). Files with no hit are left out of both.

    Raises:
        ValueError: If sources is empty
    """
    if not sources:
        raise ValueError("No source directories given")

    result = MatchResult()
    seen_sources: Set[str] = set()
    scanned = 0
    ignored = 0

    with AliasMatcher(aliases, max_workers=max_workers) as matcher:
        logger.debug(
            f"Matching against {len(matcher.aliases)} aliases "
            f"with {matcher.max_workers} worker(s)"
        )

        for source in sources:
            real_source = os.path.realpath(source)
            if real_source in seen_sources:
                logger.info(f"Source listed more than once, skipping: {source}")
                continue
            seen_sources.add(real_source)

            for path in iter_source_files(source):
                scanned += 1
                normalized = normalize_filename(os.path.basename(path))

                if not normalized:
                    logger.debug(f"Empty name after normalizing, skipping: {path}")
                    ignored += 1
                    continue

                hits = matcher.match(normalized)

                if not hits:
                    ignored += 1
                    continue

                if len(hits) > 1:
                    logger.info(f"Multiple aliases {hits} match {path}")
                    result.ambiguous.append(AmbiguousFile(path, tuple(hits)))
                    continue

                logger.debug(f"'{normalized}' matches alias '{hits[0]}': {path}")
                result.candidates.append(Candidate(path, hits[0]))

    logger.info(
        f"Scanned {scanned} files: {len(result.candidates)} matched, "
        f"{len(result.ambiguous)} ambiguous, {ignored} without a match"
    )

    return result
