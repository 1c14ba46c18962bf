from __future__ import annotations

"""
Log Line Rendering.

Produces the two textual encodings of a record: the CMTrace-compatible
Structured line and the bracketed Legacy line. Both are always computed from
the same timestamp so the caller can pick either (file) or both (file plus
console mirror) without re-reading the clock.
"""

import getpass
import os
import sys
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from opskit.domain.constants import (
    DATE_FMT,
    LEGACY_TEMPLATE,
    STRUCTURED_TEMPLATE,
    TIME_FMT,
)
from opskit.domain.models import LogFormat, LogSeverity

# -----------------------------------------------------------------------------
# DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class RenderedRecord:
    """Both encodings of one record."""
    structured: str
    legacy: str

    def select(self, log_format: LogFormat) -> str:
        if log_format is LogFormat.LEGACY:
            return self.legacy
        return self.structured

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def local_now() -> datetime:
    """Current local time carrying its UTC offset."""
    return datetime.now().astimezone()


def utc_bias_minutes(ts: datetime) -> int:
    """
    Offset of a timestamp from UTC in whole minutes.

    Naive timestamps are treated as UTC.
    """
    offset = ts.utcoffset()
    if offset is None:
        return 0
    return int(offset.total_seconds() // 60)


def format_time_ms(ts: datetime) -> str:
    """HH:MM:SS.fff"""
    return f"{ts.strftime(TIME_FMT)}.{ts.microsecond // 1000:03d}"


def single_line(message: str) -> str:
    """
    Collapse embedded line breaks so a record always occupies one line.

    Each CR, LF or CRLF sequence becomes a single space.
    """
    return message.replace("\r\n", " ").replace("\r", " ").replace("\n", " ")


def render_structured(
        message: str,
        severity: LogSeverity,
        ts: datetime,
        *,
        source: Optional[str] = None,
        context: Optional[str] = None,
        thread: Optional[int] = None,
        script_name: Optional[str] = None,
) -> str:
    """
    Render a record as a single CMTrace line.

    Line breaks inside the message are collapsed to spaces.

    Args:
        message: Record text.
        severity: Record severity, written as its number.
        ts: Timestamp of the record (local, with offset).
        source: Component name. Empty when absent.
        context: User context. Defaults to the current user.
        thread: Thread field. Defaults to the current process id.
        script_name: File field. Defaults to the running script's basename.

    Returns:
        str: The formatted line without terminator.
    """
    return STRUCTURED_TEMPLATE.format(
        message=single_line(message),
        time=format_time_ms(ts),
        bias=f"{utc_bias_minutes(ts):+d}",
        date=ts.strftime(DATE_FMT),
        component=source or "",
        context=context if context is not None else current_user(),
        severity=int(severity),
        thread=thread if thread is not None else os.getpid(),
        file=script_name if script_name is not None else current_script_name(),
    )


def render_legacy(
        message: str,
        severity: LogSeverity,
        ts: datetime,
        *,
        source: Optional[str] = None,
) -> str:
    """
    Render a record as '[date time] [source] [Severity] :: message'.

    The source segment is omitted entirely when no source is given.
    """
    source_segment = f"[{source}] " if source else ""
    return LEGACY_TEMPLATE.format(
        date=ts.strftime(DATE_FMT),
        time=format_time_ms(ts),
        source_segment=source_segment,
        severity_name=LogSeverity(severity).label,
        message=single_line(message),
    )


def render_record(
        message: str,
        severity: LogSeverity,
        ts: datetime,
        *,
        source: Optional[str] = None,
        context: Optional[str] = None,
        thread: Optional[int] = None,
        script_name: Optional[str] = None,
) -> RenderedRecord:
    """Render both encodings of a record from a single timestamp."""
    return RenderedRecord(
        structured=render_structured(
            message,
            severity,
            ts,
            source=source,
            context=context,
            thread=thread,
            script_name=script_name,
        ),
        legacy=render_legacy(message, severity, ts, source=source),
    )

# -----------------------------------------------------------------------------
# ENVIRONMENT HELPERS
# -----------------------------------------------------------------------------

def current_user() -> str:
    """Name of the user running the process, or 'unknown'."""
    try:
        return getpass.getuser()
    except (KeyError, OSError, ImportError):
        return "unknown"


def current_script_name() -> str:
    """Basename of the running script."""
    argv0 = sys.argv[0] if sys.argv and sys.argv[0] else ""
    if not argv0:
        return "python"
    return os.path.basename(argv0)
