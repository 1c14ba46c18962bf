from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides cross-platform path manipulation, directory synchronization, and 
file metadata helpers used by the log sink. Acts as an abstraction over the 
'os' module to ensure uniform behavior across Windows and Unix-like systems.
"""

import os
from typing import List, Optional, Tuple

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "opskit"
UNIX_APP_DIR_NAME = ".opskit"
LOG_DIR_ENV_VAR = "OPSKIT_LOG_DIR"
DEFAULT_LOG_SUBDIR = "logs"
BYTES_PER_MB = 1024 * 1024

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Automatically creates the hierarchy if it does not exist.
    Standards:
    - Windows: %LOCALAPPDATA%/opskit
    - Linux/Mac: ~/.opskit

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = ""

    # Windows specific resolution
    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    # Posix fallback (Linux/Mac)
    if not path:
        home = os.path.expanduser("~")
        path = os.path.join(home, UNIX_APP_DIR_NAME)

    # Idempotent directory creation
    try:
        os.makedirs(path, exist_ok=True)
    except OSError:
        pass

    return os.path.abspath(path)


def get_default_log_dir() -> str:
    """
    Resolve the directory used when no log directory is configured.

    The OPSKIT_LOG_DIR environment variable takes precedence over the
    user data directory.

    Returns:
        str: Absolute path of the default log directory (not created).
    """
    override = os.environ.get(LOG_DIR_ENV_VAR, "").strip()
    if override:
        return normalize_path(override, fallback=".")
    return os.path.join(get_user_data_dir(), DEFAULT_LOG_SUBDIR)


def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a directory path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)


def normalize_log_file_name(file_name: Optional[str], default_ext: str = ".log") -> str:
    """
    Ensure a log file name carries an extension.

    An empty name is returned unchanged (logging disabled).
    """
    name = (file_name or "").strip()
    if not name:
        return ""
    _, ext = os.path.splitext(name)
    if not ext:
        name = f"{name}{default_ext}"
    return name

# -----------------------------------------------------------------------------
# FILESYSTEM OPERATIONS API
# -----------------------------------------------------------------------------

def safe_mkdir(path: str) -> Tuple[bool, Optional[str]]:
    """
    Attempt to recursively create a directory structure safely.

    Args:
        path: Target directory path.

    Returns:
        Tuple[bool, Optional[str]]: (Success flag, Error message if applicable).
    """
    try:
        os.makedirs(path, exist_ok=True)
        return True, None
    except OSError as e:
        return False, str(e)


def get_file_size_mb(path: str) -> float:
    """Return the size of a file in megabytes, or 0.0 when it does not exist."""
    try:
        return os.path.getsize(path) / BYTES_PER_MB
    except OSError:
        return 0.0


def list_files_by_mtime(directory: str, names: List[str]) -> List[str]:
    """
    Sort file names found in a directory by last modification time.

    Args:
        directory: Directory holding the files.
        names: Candidate file names (relative to directory).

    Returns:
        List[str]: Absolute paths ordered oldest first. Files that vanish
                   while being inspected are skipped.
    """
    stamped: List[Tuple[float, str]] = []
    for n in names:
        full = os.path.join(directory, n)
        try:
            stamped.append((os.path.getmtime(full), full))
        except OSError:
            continue
    stamped.sort()
    return [p for _, p in stamped]
