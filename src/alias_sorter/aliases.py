"""
Alias table builder.

This module is responsible for:
- Reading the immediate subfolders of the target directory
- Deriving lowercase alias keys from each subfolder name
- Splitting comma-separated folder names into several aliases
- Rejecting aliases claimed by more than one folder
- Ordering aliases longest-first for matching
"""

import logging
import os
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Mapping, Union

from .types import DuplicateAliasError

logger = logging.getLogger(__name__)


def split_aliases(folder_name: str) -> List[str]:
    """
    Derive the alias keys for a single folder name.

    The name is lowercased. A name containing commas yields one alias per
    trimmed segment; empty segments are dropped.

    Examples:
        >>> split_aliases("Movies, Films")
        ['movies', 'films']
        >>> split_aliases("Star Wars")
        ['star wars']
    """
    name = folder_name.lower()
    if "," not in name:
        name = name.strip()
        return [name] if name else []

    aliases = []
    for segment in name.split(","):
        segment = segment.strip()
        if not segment:
            logger.warning(f"Ignoring empty alias in folder name '{folder_name}'")
            continue
        aliases.append(segment)
    return aliases


def generate_aliases(target_dir: Union[str, Path]) -> Mapping[str, str]:
    """
    Build the alias table for a target directory.

    Every immediate subfolder of target_dir contributes one or more aliases
    (see split_aliases), each mapping to the subfolder's full path. Files
    directly under target_dir are ignored.

    Args:
        target_dir: Directory whose subfolders define the aliases

    Returns:
        Read-only mapping of alias -> destination folder path. May be empty.

    Raises:
        FileNotFoundError: If target_dir doesn't exist
        NotADirectoryError: If target_dir is not a directory
        DuplicateAliasError: If two folders (or one folder's comma list)
                             produce the same alias
    """
    root = Path(target_dir)

    if not root.exists():
        raise FileNotFoundError(f"Target directory not found: {root}")

    if not root.is_dir():
        raise NotADirectoryError(f"Target path is not a directory: {root}")

    entries: Dict[str, str] = {}

    with os.scandir(root) as it:
        folders = sorted(
            (entry for entry in it if entry.is_dir()),
            key=lambda entry: entry.name
        )

    for entry in folders:
        for alias in split_aliases(entry.name):
            if alias in entries:
                raise DuplicateAliasError(alias, entries[alias], entry.path)
            entries[alias] = entry.path
            logger.debug(f"Alias '{alias}' -> {entry.path}")

    logger.info(f"Loaded {len(entries)} aliases from {len(folders)} folders in {root}")

    return MappingProxyType(entries)


def sort_aliases(aliases: Mapping[str, str]) -> List[str]:
    """
    Return alias keys ordered longest first.

    Equal-length aliases are ordered alphabetically so output is stable
    between runs.
    """
    return sorted(aliases, key=lambda alias: (-len(alias), alias))
