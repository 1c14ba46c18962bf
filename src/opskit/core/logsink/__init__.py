from __future__ import annotations

from .bridge import LogSinkHandler, map_level
from .console import ColorConsoleSink, ConsoleSink, PlainConsoleSink, default_console
from .formatting import RenderedRecord, render_legacy, render_record, render_structured
from .sink import (
    BoundLogWriter,
    RotatingLogSink,
    get_shared_sink,
    reset_shared_sinks,
    write_log,
)

__all__ = [
    "BoundLogWriter",
    "ColorConsoleSink",
    "ConsoleSink",
    "LogSinkHandler",
    "PlainConsoleSink",
    "RenderedRecord",
    "RotatingLogSink",
    "default_console",
    "get_shared_sink",
    "map_level",
    "render_legacy",
    "render_record",
    "render_structured",
    "reset_shared_sinks",
    "write_log",
]
