from __future__ import annotations

"""
Domain Constants and Static Data Structures.

Provides centralized access to the log line templates, severity naming,
archive naming patterns and default sink limits shared by the formatting,
rotation and interface layers.
"""

from typing import Dict

APP_VERSION = "1.0.0"

# -----------------------------------------------------------------------------
# SEVERITY & FORMAT IDENTIFIERS
# -----------------------------------------------------------------------------
SEVERITY_NAMES: Dict[int, str] = {
    0: "Success",
    1: "Info",
    2: "Warning",
    3: "Error",
}

FORMAT_STRUCTURED = "Structured"
FORMAT_LEGACY = "Legacy"

# -----------------------------------------------------------------------------
# LINE TEMPLATES
# -----------------------------------------------------------------------------
STRUCTURED_TEMPLATE = (
    '<![LOG[{message}]LOG]!>'
    '<time="{time}{bias}" date="{date}" component="{component}" '
    'context="{context}" type="{severity}" thread="{thread}" file="{file}">'
)
LEGACY_TEMPLATE = "[{date} {time}] {source_segment}[{severity_name}] :: {message}"

# strftime equivalents of MM-dd-yyyy / HH:mm:ss (milliseconds appended separately)
DATE_FMT = "%m-%d-%Y"
TIME_FMT = "%H:%M:%S"

# -----------------------------------------------------------------------------
# FILE NAMING & LIMITS
# -----------------------------------------------------------------------------
DEFAULT_LOG_EXTENSION = ".log"
DEFAULT_LOG_FILE_NAME = "opskit.log"
ARCHIVE_TIMESTAMP_FMT = "%Y-%m-%d-%H-%M-%S"
ARCHIVE_TIMESTAMP_REGEX = r"\d{4}(?:-\d{2}){5}"

DEFAULT_MAX_HISTORY = 5
DEFAULT_MAX_FILE_SIZE_MB = 10.0

# -----------------------------------------------------------------------------
# ROTATION ANNOUNCEMENTS
# -----------------------------------------------------------------------------
ROTATION_WARNING_MSG = "Maximum log file size [{size} MB] reached. Rename log file to [{archive}]."
ROTATION_INFO_MSG = (
    "Previous log file was renamed to [{archive}] because maximum log file size "
    "of [{size} MB] was reached."
)
