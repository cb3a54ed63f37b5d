"""
Path utilities for the alias sorter.

This module provides:
- normalize_path(): Normalize paths to absolute form
- safe_move(): No-overwrite file move with a fallback for cross-device moves
"""

import errno
import logging
import os
import shutil
from pathlib import Path
from typing import Tuple, Union

logger = logging.getLogger(__name__)

# Filesystems or policies that refuse hard links
_NO_HARDLINK_ERRNOS = {errno.EPERM, errno.EMLINK, errno.ENOTSUP, errno.EOPNOTSUPP}


def normalize_path(path: Union[str, Path]) -> str:
    """
    Normalize a path to absolute form.

    Args:
        path: A file path as string or Path object

    Returns:
        Normalized absolute path as string
    """
    path_str = os.path.expanduser(str(path))

    try:
        return str(Path(path_str).resolve())
    except (OSError, RuntimeError):
        # If resolve fails (e.g. symlink loop), do basic normalization
        return os.path.abspath(os.path.normpath(path_str))


def safe_move(
    src: Union[str, Path],
    dest: Union[str, Path]
) -> Tuple[bool, str]:
    """
    Move a single file without ever replacing an existing destination.

    This function:
    - Hard-links src to dest, then unlinks src. os.link fails if dest
      exists, so a file created at dest after it was named is kept
    - Uses os.rename for symlinks and on filesystems without hard links
    - Falls back to shutil.move (copy + delete) across devices
    - Converts OS errors into a message instead of raising

    Args:
        src: Source file path
        dest: Destination file path

    Returns:
        Tuple of (success: bool, message: str)
    """
    src_str = str(src)
    dest_str = str(dest)

    if os.path.lexists(dest_str):
        return (False, f"Destination already exists: {dest_str}")

    if os.path.islink(src_str):
        # os.link would link the symlink's target; rename moves the link
        return _rename(src_str, dest_str)

    try:
        os.link(src_str, dest_str)

    except FileExistsError:
        return (False, f"Destination already exists: {dest_str}")

    except OSError as e:
        if e.errno == errno.EXDEV:
            return _copy_and_delete(src_str, dest_str)
        if e.errno in _NO_HARDLINK_ERRNOS:
            logger.debug(f"Hard link not possible ({e}), renaming instead")
            return _rename(src_str, dest_str)
        return (False, _format_os_error(e))

    try:
        os.unlink(src_str)
    except OSError as e:
        _remove_link(dest_str)
        return (False, f"Could not remove source after linking: {_format_os_error(e)}")

    return (True, "Moved successfully")


def _rename(src: str, dest: str) -> Tuple[bool, str]:
    """Move with os.rename, using copy+delete across devices."""
    try:
        os.rename(src, dest)
        return (True, "Moved successfully")

    except OSError as e:
        if e.errno == errno.EXDEV:
            return _copy_and_delete(src, dest)
        return (False, _format_os_error(e))


def _copy_and_delete(src: str, dest: str) -> Tuple[bool, str]:
    """Fall back to shutil.move when src and dest are on different devices."""
    logger.info(f"Cross-device move detected, using copy+delete: {src}")

    try:
        shutil.move(src, dest)
        return (True, "Moved successfully (via copy+delete)")

    except (shutil.Error, OSError) as e:
        _cleanup_partial_copy(src, dest)
        return (False, f"Copy+delete fallback failed: {_format_os_error(e)}")


def _remove_link(dest: str) -> None:
    """Drop the extra name created by os.link when the source can't be removed."""
    try:
        os.unlink(dest)
    except OSError as e:
        logger.warning(f"Could not remove link at {dest}: {e}")


def _cleanup_partial_copy(src: str, dest: str) -> None:
    """Remove a partial copy left by a failed cross-device move."""
    if not os.path.exists(src):
        # Source already gone: dest is the only copy, keep it
        return

    try:
        if os.path.lexists(dest):
            os.remove(dest)
            logger.debug(f"Cleaned up partial copy at {dest}")
    except OSError as e:
        logger.warning(f"Could not clean up partial copy at {dest}: {e}")


def _format_os_error(e: Exception) -> str:
    """
    Format an OS error with a readable name for common causes.

    Args:
        e: The exception to format

    Returns:
        Formatted error string
    """
    code = getattr(e, "errno", None)

    if isinstance(e, PermissionError):
        return f"Permission denied: {e}"
    if code == errno.ENAMETOOLONG:
        return f"Path too long: {e}"
    if code == errno.ENOENT:
        return f"File not found: {e}"
    if code == errno.EBUSY:
        return f"File is locked or in use: {e}"
    if code == errno.ENOSPC:
        return f"No space left on device: {e}"

    return f"{type(e).__name__}: {e}"
