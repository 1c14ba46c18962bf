from __future__ import annotations

"""
Standard Library Logging Bridge.

Routes records emitted through the 'logging' module into a RotatingLogSink so
that existing code using module loggers lands in the same rotating file.
"""

import logging
import threading
from typing import Optional

from opskit.core.logsink.sink import RotatingLogSink
from opskit.domain.models import LogSeverity


def map_level(levelno: int) -> LogSeverity:
    """Translate a 'logging' level number to a sink severity."""
    if levelno >= logging.ERROR:
        return LogSeverity.ERROR
    if levelno >= logging.WARNING:
        return LogSeverity.WARNING
    return LogSeverity.INFO


class LogSinkHandler(logging.Handler):
    """
    Handler that forwards formatted messages to a rotating log sink.

    DEBUG records are sent as debug-class records, so they only reach the
    file when the sink has debug logging enabled. Records produced while the
    handler is already emitting on the same thread (the sink's own
    diagnostics) are dropped.
    """

    def __init__(self, sink: RotatingLogSink, level: int = logging.NOTSET, source: Optional[str] = None):
        super().__init__(level)
        self.sink = sink
        self.source = source
        self._local = threading.local()

    def emit(self, record: logging.LogRecord) -> None:
        if getattr(self._local, "emitting", False):
            return
        self._local.emitting = True
        try:
            message = self.format(record)
            if not message.strip():
                return
            self.sink.write(
                message,
                map_level(record.levelno),
                self.source or record.name,
                debug=record.levelno < logging.INFO,
            )
        except Exception:
            self.handleError(record)
        finally:
            self._local.emitting = False
