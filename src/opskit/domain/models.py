from __future__ import annotations

"""
Log Sink Domain Data Models.

Defines the severity and format enumerations, the ephemeral per-call
LogRecord, and the immutable SinkConfig that drives the rotating log sink.
"""

import os
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional, Union

from opskit.domain.constants import (
    DEFAULT_LOG_FILE_NAME,
    DEFAULT_MAX_FILE_SIZE_MB,
    DEFAULT_MAX_HISTORY,
    FORMAT_LEGACY,
    FORMAT_STRUCTURED,
    SEVERITY_NAMES,
)
from opskit.infra.fs import get_default_log_dir, normalize_log_file_name, normalize_path

# -----------------------------------------------------------------------------
# ENUMERATIONS
# -----------------------------------------------------------------------------

class LogSeverity(IntEnum):
    """Numeric record severity, as written in the Structured `type` field."""
    SUCCESS = 0
    INFO = 1
    WARNING = 2
    ERROR = 3

    @property
    def label(self) -> str:
        """Human readable name used by the Legacy format."""
        return SEVERITY_NAMES[int(self)]


class LogFormat(str, Enum):
    """Textual encoding of a log line."""
    STRUCTURED = FORMAT_STRUCTURED
    LEGACY = FORMAT_LEGACY

    @classmethod
    def parse(cls, value: Union[str, "LogFormat"]) -> "LogFormat":
        """
        Resolve a format from its name, case-insensitively.

        Raises:
            ValueError: If the name matches no known format.
        """
        if isinstance(value, LogFormat):
            return value
        key = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        raise ValueError(f"Unknown log format: {value!r}")

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class LogRecord:
    """
    A single message submitted to the sink.

    Attributes:
        message: Text of the record. Must not be empty after trimming.
        severity: One of LogSeverity (plain ints are validated by the sink).
        source: Component that produced the record. Falls back to the
                sink's default source when omitted.
        debug: Debug-class records are skipped unless debug logging is on.
    """
    message: str
    severity: Union[LogSeverity, int] = LogSeverity.INFO
    source: Optional[str] = None
    debug: bool = False


@dataclass(frozen=True)
class SinkConfig:
    """
    Immutable configuration of a rotating log sink.

    Attributes:
        directory: Target directory. Empty resolves to the default log dir.
        file_name: Active log file name. '.log' is appended when it has no
                   extension; an empty name disables file output.
        log_format: Encoding written to the file.
        max_file_size_mb: Size threshold for rotation (0 disables it).
        max_history: Number of archived files retained.
        create_new_on_init: Archive any existing file on the sink's first write.
        mirror_to_console: Echo each record to the console sink.
        echo_input: Return the submitted messages from the write call.
        suppress_errors: Swallow filesystem failures instead of raising.
        show_errors: Report swallowed failures on the console.
        log_debug_messages: Process debug-class records.
        default_source: Source used by records that carry none.
        script_name: Value of the Structured 'file' field.
        context: Value of the Structured 'context' field (current user).
    """
    directory: str = ""
    file_name: str = DEFAULT_LOG_FILE_NAME
    log_format: LogFormat = LogFormat.STRUCTURED

    max_file_size_mb: float = DEFAULT_MAX_FILE_SIZE_MB
    max_history: int = DEFAULT_MAX_HISTORY
    create_new_on_init: bool = False

    mirror_to_console: bool = False
    echo_input: bool = False
    suppress_errors: bool = True
    show_errors: bool = True
    log_debug_messages: bool = False

    default_source: Optional[str] = None
    script_name: Optional[str] = None
    context: Optional[str] = None

    @property
    def resolved_file_name(self) -> str:
        return normalize_log_file_name(self.file_name)

    @property
    def resolved_directory(self) -> str:
        if not (self.directory or "").strip():
            return get_default_log_dir()
        return normalize_path(self.directory, fallback=".")

    @property
    def logging_enabled(self) -> bool:
        return bool(self.resolved_file_name)

    @property
    def target_path(self) -> str:
        """Absolute path of the active log file."""
        return os.path.join(self.resolved_directory, self.resolved_file_name)
