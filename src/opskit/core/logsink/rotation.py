from __future__ import annotations

"""
Log Rotation and Retention.

Decides when the active log must be archived, derives archive names from the
active file's last write time, renames it out of the way and prunes archives
beyond the retention count (oldest first by modification time).
"""

import logging
import os
import re
from datetime import datetime
from enum import Enum
from typing import List, Optional, Pattern, Tuple

from opskit.domain.constants import ARCHIVE_TIMESTAMP_FMT, ARCHIVE_TIMESTAMP_REGEX
from opskit.domain.errors import RotationFailedError
from opskit.infra.fs import list_files_by_mtime

logger = logging.getLogger(__name__)


class RotationReason(Enum):
    """Why the active file is being archived."""
    SIZE = "size"
    INIT = "init"

# -----------------------------------------------------------------------------
# DECISION
# -----------------------------------------------------------------------------

def check_rotation(
        current_size_mb: float,
        max_size_mb: float,
        *,
        first_write: bool,
        create_new_on_init: bool,
        file_exists: bool = True,
) -> Optional[RotationReason]:
    """
    Determine whether the active file must be rotated before appending.

    A size breach wins over the first-write rule so that the rotation is
    announced in the log.

    Args:
        current_size_mb: Size of the active file (0 when absent).
        max_size_mb: Size threshold. 0 disables size-based rotation.
        first_write: True when the sink has not written yet in this process.
        create_new_on_init: Force an archive on the first write.
        file_exists: Whether there is an active file to archive at all.

    Returns:
        Optional[RotationReason]: The reason, or None when no rotation is due.
    """
    if not file_exists:
        return None
    if max_size_mb > 0 and current_size_mb > max_size_mb:
        return RotationReason.SIZE
    if first_write and create_new_on_init:
        return RotationReason.INIT
    return None

# -----------------------------------------------------------------------------
# NAMING
# -----------------------------------------------------------------------------

def split_log_name(file_name: str) -> Tuple[str, str]:
    """Split 'app.log' into ('app', '.log')."""
    base, ext = os.path.splitext(os.path.basename(file_name))
    return base, ext


def build_archive_name(file_name: str, last_write: datetime, counter: int = 0) -> str:
    """
    Compose '{base}_{yyyy-MM-dd-HH-mm-ss}{ext}'.

    A non-zero counter adds a '_N' suffix to avoid clobbering an archive
    created within the same second.
    """
    base, ext = split_log_name(file_name)
    stamp = last_write.strftime(ARCHIVE_TIMESTAMP_FMT)
    suffix = f"_{counter}" if counter else ""
    return f"{base}_{stamp}{suffix}{ext}"


def archive_pattern(file_name: str) -> Pattern[str]:
    """Regex matching every archive name derived from an active file name."""
    base, ext = split_log_name(file_name)
    return re.compile(
        rf"^{re.escape(base)}_{ARCHIVE_TIMESTAMP_REGEX}(?:_\d+)?{re.escape(ext)}$"
    )


def next_archive_path(active_path: str) -> str:
    """
    Derive a free archive path for the active file from its last write time.

    Raises:
        RotationFailedError: If the active file cannot be inspected.
    """
    directory = os.path.dirname(active_path)
    file_name = os.path.basename(active_path)
    try:
        last_write = datetime.fromtimestamp(os.path.getmtime(active_path))
    except OSError as e:
        raise RotationFailedError(f"Cannot read last write time of '{active_path}': {e}") from e

    counter = 0
    candidate = os.path.join(directory, build_archive_name(file_name, last_write))
    while os.path.exists(candidate):
        counter += 1
        candidate = os.path.join(directory, build_archive_name(file_name, last_write, counter))
    return candidate

# -----------------------------------------------------------------------------
# FILE OPERATIONS
# -----------------------------------------------------------------------------

def archive_active_file(active_path: str, archive_path: str) -> None:
    """
    Rename the active log to its archive name.

    Raises:
        RotationFailedError: If the rename fails.
    """
    try:
        os.rename(active_path, archive_path)
    except OSError as e:
        raise RotationFailedError(
            f"Failed to rename '{active_path}' to '{archive_path}': {e}"
        ) from e
    logger.debug(f"Archived log file to {archive_path}")


def find_archives(directory: str, file_name: str) -> List[str]:
    """
    List the archives of an active log file, oldest first.

    Args:
        directory: Directory holding the active file.
        file_name: Active file name (with extension).

    Returns:
        List[str]: Absolute archive paths sorted by modification time.
    """
    pattern = archive_pattern(file_name)
    try:
        names = [n for n in os.listdir(directory) if pattern.match(n)]
    except OSError as e:
        raise RotationFailedError(f"Cannot list archives in '{directory}': {e}") from e
    return list_files_by_mtime(directory, names)


def prune_archives(directory: str, file_name: str, max_history: int) -> List[str]:
    """
    Delete the oldest archives so that at most max_history remain.

    Every surplus archive is attempted even if an earlier delete fails.

    Returns:
        List[str]: Paths that were removed.

    Raises:
        RotationFailedError: If any surplus archive could not be deleted.
    """
    archives = find_archives(directory, file_name)
    keep = max(0, int(max_history))
    surplus = archives[:len(archives) - keep] if len(archives) > keep else []

    removed: List[str] = []
    failures: List[str] = []
    for path in surplus:
        try:
            os.remove(path)
            removed.append(path)
        except OSError as e:
            failures.append(f"{path}: {e}")

    if removed:
        logger.debug(f"Pruned {len(removed)} archived log file(s) of {file_name}")
    if failures:
        raise RotationFailedError("Failed to prune archives: " + "; ".join(failures))
    return removed
