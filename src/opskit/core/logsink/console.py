from __future__ import annotations

"""
Console Mirror Sinks.

Two interchangeable implementations of the console capability: one that
colors lines by severity for interactive terminals, and one that writes plain
text so redirected output still captures every line. The choice is made once
when the log sink is constructed.
"""

import os
import sys
from abc import ABC, abstractmethod
from typing import Dict, Optional, TextIO

from opskit.domain.models import LogSeverity

_ANSI_RESET = "\033[0m"
_ANSI_COLORS: Dict[LogSeverity, str] = {
    LogSeverity.ERROR: "\033[31m",
    LogSeverity.WARNING: "\033[33m",
    LogSeverity.SUCCESS: "\033[32m",
}


class ConsoleSink(ABC):
    """Destination for mirrored log lines and swallowed error reports."""

    def __init__(self, stream: Optional[TextIO] = None, err_stream: Optional[TextIO] = None):
        # Streams are resolved on use so that redirection after construction is honored
        self._stream = stream
        self._err_stream = err_stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    @property
    def err_stream(self) -> TextIO:
        return self._err_stream if self._err_stream is not None else sys.stderr

    @abstractmethod
    def emit(self, line: str, severity: LogSeverity) -> None:
        """Write one mirrored log line."""

    def report_error(self, text: str) -> None:
        """Report a suppressed sink failure."""
        self.err_stream.write(f"{text}\n")
        self.err_stream.flush()


class ColorConsoleSink(ConsoleSink):
    """ANSI-colored output: Error red, Warning yellow, Success green, Info plain."""

    def emit(self, line: str, severity: LogSeverity) -> None:
        color = _ANSI_COLORS.get(LogSeverity(severity))
        text = f"{color}{line}{_ANSI_RESET}" if color else line
        self.stream.write(f"{text}\n")
        self.stream.flush()


class PlainConsoleSink(ConsoleSink):
    """Uncolored output for pipes, files and terminals without color support."""

    def emit(self, line: str, severity: LogSeverity) -> None:
        self.stream.write(f"{line}\n")
        self.stream.flush()


def supports_color(stream: TextIO) -> bool:
    """True when the stream is an interactive terminal and NO_COLOR is unset."""
    if os.environ.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    try:
        return bool(isatty and isatty())
    except ValueError:
        # Closed stream
        return False


def default_console(stream: Optional[TextIO] = None) -> ConsoleSink:
    """Select the console implementation for the given (or current) stdout."""
    probe = stream if stream is not None else sys.stdout
    if supports_color(probe):
        return ColorConsoleSink(stream)
    return PlainConsoleSink(stream)
