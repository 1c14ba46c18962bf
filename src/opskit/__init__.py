from __future__ import annotations

"""
opskit: operations utilities.

A rotating, dual-format log writer plus a password generator and an
orchestration job waiter.
"""

from opskit.core.logsink import (
    BoundLogWriter,
    LogSinkHandler,
    RotatingLogSink,
    write_log,
)
from opskit.domain.constants import APP_VERSION
from opskit.domain.errors import (
    AppendFailedError,
    DirectoryUnavailableError,
    InvalidRecordError,
    LogWriterError,
    RotationFailedError,
)
from opskit.domain.models import LogFormat, LogRecord, LogSeverity, SinkConfig

__version__ = APP_VERSION

__all__ = [
    "AppendFailedError",
    "BoundLogWriter",
    "DirectoryUnavailableError",
    "InvalidRecordError",
    "LogFormat",
    "LogRecord",
    "LogSeverity",
    "LogSinkHandler",
    "LogWriterError",
    "RotatingLogSink",
    "RotationFailedError",
    "SinkConfig",
    "write_log",
]
