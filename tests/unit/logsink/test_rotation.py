from __future__ import annotations

"""
Unit tests for Log Rotation and Retention.

Verifies:
1. Rotation decision rules (size threshold, first-write rule, disabled size).
2. Archive naming and the archive matching pattern.
3. Oldest-first pruning by modification time.
"""

import os
import time
from datetime import datetime
from pathlib import Path

import pytest

from opskit.core.logsink.rotation import (
    RotationReason,
    archive_active_file,
    archive_pattern,
    build_archive_name,
    check_rotation,
    find_archives,
    next_archive_path,
    prune_archives,
)
from opskit.domain.errors import RotationFailedError

# -----------------------------------------------------------------------------
# DECISION TESTS
# -----------------------------------------------------------------------------

def test_size_breach_triggers_rotation() -> None:
    """TC-01: A file larger than the threshold is rotated."""
    reason = check_rotation(1.0, 0.5, first_write=False, create_new_on_init=False)
    assert reason is RotationReason.SIZE


def test_size_at_threshold_does_not_rotate() -> None:
    """TC-02: Only a size strictly above the threshold rotates."""
    assert check_rotation(0.5, 0.5, first_write=False, create_new_on_init=False) is None


def test_zero_threshold_disables_size_rotation() -> None:
    """TC-03: max size 0 never rotates on size."""
    assert check_rotation(500.0, 0, first_write=False, create_new_on_init=False) is None


def test_first_write_with_create_new() -> None:
    """TC-04: The first write of a sink archives an existing file on request."""
    assert check_rotation(0.1, 10, first_write=True, create_new_on_init=True) is RotationReason.INIT
    assert check_rotation(0.1, 10, first_write=False, create_new_on_init=True) is None
    assert check_rotation(0.1, 10, first_write=True, create_new_on_init=False) is None


def test_size_reason_wins_over_init() -> None:
    """TC-05: A size breach on the first write is reported as a size rotation."""
    assert check_rotation(2.0, 1.0, first_write=True, create_new_on_init=True) is RotationReason.SIZE


def test_missing_file_never_rotates() -> None:
    """TC-06: Nothing to archive when the active file does not exist."""
    assert check_rotation(0, 1, first_write=True, create_new_on_init=True, file_exists=False) is None

# -----------------------------------------------------------------------------
# NAMING TESTS
# -----------------------------------------------------------------------------

def test_build_archive_name() -> None:
    """TC-07: '{base}_{yyyy-MM-dd-HH-mm-ss}{ext}' with an optional counter."""
    ts = datetime(2024, 1, 2, 3, 4, 5)
    assert build_archive_name("app.log", ts) == "app_2024-01-02-03-04-05.log"
    assert build_archive_name("app.log", ts, counter=2) == "app_2024-01-02-03-04-05_2.log"


def test_archive_pattern_is_anchored() -> None:
    """TC-08: Only archives of the exact base name match."""
    pattern = archive_pattern("app.log")
    assert pattern.match("app_2024-01-02-03-04-05.log")
    assert pattern.match("app_2024-01-02-03-04-05_1.log")
    assert not pattern.match("app.log")
    assert not pattern.match("app_other.log")
    assert not pattern.match("app_2024-01-02-03-04-05.txt")
    assert not pattern.match("myapp_2024-01-02-03-04-05.log")


def test_next_archive_path_avoids_collisions(tmp_path: Path) -> None:
    """TC-09: An existing archive with the same stamp gets a numeric suffix."""
    active = tmp_path / "app.log"
    active.write_text("x", encoding="utf-8")
    stamp = datetime(2023, 6, 1, 12, 0, 0)
    os.utime(active, (stamp.timestamp(), stamp.timestamp()))

    first = next_archive_path(str(active))
    assert os.path.basename(first) == "app_2023-06-01-12-00-00.log"

    Path(first).write_text("old", encoding="utf-8")
    second = next_archive_path(str(active))
    assert os.path.basename(second) == "app_2023-06-01-12-00-00_1.log"


def test_archive_active_file_failure(tmp_path: Path) -> None:
    """TC-10: A failed rename surfaces as RotationFailedError."""
    with pytest.raises(RotationFailedError):
        archive_active_file(str(tmp_path / "missing.log"), str(tmp_path / "archive.log"))

# -----------------------------------------------------------------------------
# RETENTION TESTS
# -----------------------------------------------------------------------------

def _make_archive(directory: Path, name: str, mtime: float) -> Path:
    path = directory / name
    path.write_text(name, encoding="utf-8")
    os.utime(path, (mtime, mtime))
    return path


def test_prune_keeps_most_recent_by_mtime(tmp_path: Path) -> None:
    """TC-11: Surplus archives are removed oldest first by modification time."""
    now = time.time()
    # Name order deliberately disagrees with mtime order
    a = _make_archive(tmp_path, "app_2024-01-01-00-00-05.log", now - 500)
    b = _make_archive(tmp_path, "app_2024-01-01-00-00-04.log", now - 100)
    c = _make_archive(tmp_path, "app_2024-01-01-00-00-03.log", now - 400)
    d = _make_archive(tmp_path, "app_2024-01-01-00-00-02.log", now - 50)
    unrelated = _make_archive(tmp_path, "app_other.log", now - 1000)
    active = _make_archive(tmp_path, "app.log", now - 2000)

    removed = prune_archives(str(tmp_path), "app.log", 2)

    assert sorted(removed) == sorted([str(a), str(c)])
    assert b.exists() and d.exists()
    assert unrelated.exists() and active.exists()
    assert find_archives(str(tmp_path), "app.log") == [str(b), str(d)]


def test_prune_zero_history_removes_all(tmp_path: Path) -> None:
    """TC-12: max_history 0 keeps no archives."""
    _make_archive(tmp_path, "app_2024-01-01-00-00-00.log", time.time())
    prune_archives(str(tmp_path), "app.log", 0)
    assert find_archives(str(tmp_path), "app.log") == []


def test_prune_within_limit_is_noop(tmp_path: Path) -> None:
    """TC-13: Nothing is removed when the archive count is within the limit."""
    _make_archive(tmp_path, "app_2024-01-01-00-00-00.log", time.time())
    assert prune_archives(str(tmp_path), "app.log", 5) == []
