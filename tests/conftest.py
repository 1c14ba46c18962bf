from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures for deterministic clocks, console capture and sink
   configuration used across unit and integration tests.
"""

import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Iterator, List, Tuple

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from opskit.core.logsink.console import ConsoleSink  # noqa: E402
from opskit.core.logsink.sink import reset_shared_sinks  # noqa: E402
from opskit.domain.models import LogFormat, LogSeverity, SinkConfig  # noqa: E402

FIXED_TS = datetime(2024, 3, 5, 14, 7, 9, 123456, tzinfo=timezone(timedelta(hours=1)))


class RecordingConsole(ConsoleSink):
    """Console sink that keeps everything in memory."""

    def __init__(self) -> None:
        super().__init__()
        self.lines: List[Tuple[str, LogSeverity]] = []
        self.errors: List[str] = []

    def emit(self, line: str, severity: LogSeverity) -> None:
        self.lines.append((line, LogSeverity(severity)))

    def report_error(self, text: str) -> None:
        self.errors.append(text)


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def fresh_shared_sinks() -> Iterator[None]:
    """Give every test fresh process-wide sink state."""
    reset_shared_sinks()
    yield
    reset_shared_sinks()


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """Clock returning 2024-03-05 14:07:09.123456 at UTC+01:00."""
    return lambda: FIXED_TS


@pytest.fixture
def recording_console() -> RecordingConsole:
    return RecordingConsole()


@pytest.fixture
def log_dir(tmp_path: Path) -> Path:
    """Not-yet-existing directory for log output."""
    return tmp_path / "logs"


@pytest.fixture
def legacy_config(log_dir: Path) -> SinkConfig:
    """
    Legacy-format sink configuration with size rotation disabled.

    Returns:
        SinkConfig: Configuration targeting '<tmp>/logs/app.log'.
    """
    return SinkConfig(
        directory=str(log_dir),
        file_name="app",
        log_format=LogFormat.LEGACY,
        max_file_size_mb=0,
        script_name="tests.py",
        context="tester",
    )
