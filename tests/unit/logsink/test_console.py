from __future__ import annotations

"""
Unit tests for Console Mirror Sinks.

Verifies severity coloring, plain output for redirected streams and the
selection logic between both implementations.
"""

import io

import pytest

from opskit.core.logsink.console import (
    ColorConsoleSink,
    PlainConsoleSink,
    default_console,
    supports_color,
)
from opskit.domain.models import LogSeverity


class _TtyStream(io.StringIO):
    def isatty(self) -> bool:
        return True


@pytest.mark.parametrize("severity, code", [
    (LogSeverity.ERROR, "\033[31m"),
    (LogSeverity.WARNING, "\033[33m"),
    (LogSeverity.SUCCESS, "\033[32m"),
])
def test_color_console_colors_by_severity(severity: LogSeverity, code: str) -> None:
    """TC-01: Error red, Warning yellow, Success green."""
    stream = io.StringIO()
    ColorConsoleSink(stream).emit("line", severity)
    assert stream.getvalue() == f"{code}line\033[0m\n"


def test_color_console_leaves_info_uncolored() -> None:
    """TC-02: Info lines are written as-is."""
    stream = io.StringIO()
    ColorConsoleSink(stream).emit("line", LogSeverity.INFO)
    assert stream.getvalue() == "line\n"


def test_plain_console_never_colors() -> None:
    """TC-03: Plain output contains no escape sequences."""
    stream = io.StringIO()
    PlainConsoleSink(stream).emit("boom", LogSeverity.ERROR)
    assert stream.getvalue() == "boom\n"


def test_report_error_goes_to_error_stream() -> None:
    """TC-04: Suppressed failures are reported on the error stream only."""
    out, err = io.StringIO(), io.StringIO()
    PlainConsoleSink(out, err).report_error("disk full")
    assert out.getvalue() == ""
    assert err.getvalue() == "disk full\n"


def test_default_console_selection(monkeypatch: pytest.MonkeyPatch) -> None:
    """TC-05: Terminals get colors, redirected streams and NO_COLOR do not."""
    monkeypatch.delenv("NO_COLOR", raising=False)
    assert isinstance(default_console(_TtyStream()), ColorConsoleSink)
    assert isinstance(default_console(io.StringIO()), PlainConsoleSink)

    monkeypatch.setenv("NO_COLOR", "1")
    assert not supports_color(_TtyStream())
    assert isinstance(default_console(_TtyStream()), PlainConsoleSink)


def test_plain_console_follows_redirected_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    """TC-06: Without an explicit stream the current sys.stdout is used."""
    PlainConsoleSink().emit("captured", LogSeverity.INFO)
    assert capsys.readouterr().out == "captured\n"
