from __future__ import annotations

"""
End-to-End (E2E) CLI Tests.

Verifies the application's external behavior by invoking the entry point
script via subprocess. These tests validate argument parsing, exit codes,
stream output (stdout/stderr), and file system side effects (log files).
"""

import json
import os
import subprocess
import sys
from pathlib import Path
from typing import List

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
SRC_DIR = PROJECT_ROOT / "src"
ENTRY_POINT = SRC_DIR / "opskit" / "main.py"


def run_cli(args: List[str], home: Path) -> subprocess.CompletedProcess[str]:
    """
    Helper to execute the CLI in a separate process.

    Injects the 'src' directory into PYTHONPATH and points HOME at a
    temporary directory so no user configuration leaks into the run.

    Args:
        args: List of command line arguments (excluding 'python' and script path).
        home: Directory used as the user's home.

    Returns:
        subprocess.CompletedProcess: The result object containing returncode, stdout, and stderr.
    """
    env = os.environ.copy()
    env["PYTHONPATH"] = str(SRC_DIR) + os.pathsep + env.get("PYTHONPATH", "")
    env["HOME"] = str(home)
    env["LOCALAPPDATA"] = str(home)
    env["NO_COLOR"] = "1"
    env.pop("OPSKIT_LOG_DIR", None)

    cmd = [sys.executable, str(ENTRY_POINT)] + args

    return subprocess.run(
        cmd,
        env=env,
        capture_output=True,
        text=True,
        encoding="utf-8"
    )


@pytest.fixture
def home(tmp_path: Path) -> Path:
    path = tmp_path / "home"
    path.mkdir()
    return path


# -----------------------------------------------------------------------------
# WRITE COMMAND
# -----------------------------------------------------------------------------

def test_write_legacy_file(tmp_path: Path, home: Path) -> None:
    """TC-01: Messages land in the configured file in Legacy format."""
    log_dir = tmp_path / "logs"
    result = run_cli(
        [
            "write", "first", "second",
            "--use-defaults",
            "--dir", str(log_dir),
            "--file", "deploy",
            "--log-type", "Legacy",
            "--source", "Deploy",
            "-s", "3",
        ],
        home,
    )

    assert result.returncode == 0, result.stderr
    lines = (log_dir / "deploy.log").read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    assert lines[0].endswith("[Deploy] [Error] :: first")
    assert lines[1].endswith("[Deploy] [Error] :: second")


def test_write_structured_default_format(tmp_path: Path, home: Path) -> None:
    """TC-02: The default format is the structured CMTrace line."""
    log_dir = tmp_path / "logs"
    result = run_cli(["write", "hello", "--use-defaults", "--dir", str(log_dir)], home)

    assert result.returncode == 0, result.stderr
    content = (log_dir / "opskit.log").read_text(encoding="utf-8")
    assert content.startswith("<![LOG[hello]LOG]!><time=\"")
    assert 'type="1"' in content


def test_pass_thru_echoes_messages(tmp_path: Path, home: Path) -> None:
    """TC-03: --pass-thru prints each message back on stdout."""
    result = run_cli(
        ["write", "a", "b", "--use-defaults", "--dir", str(tmp_path / "logs"), "--pass-thru"],
        home,
    )

    assert result.returncode == 0, result.stderr
    assert result.stdout.splitlines() == ["a", "b"]


def test_write_host_mirrors_to_console(tmp_path: Path, home: Path) -> None:
    """TC-04: --write-host prints the Legacy rendition."""
    result = run_cli(
        ["write", "shown", "--use-defaults", "--dir", str(tmp_path / "logs"), "--write-host"],
        home,
    )

    assert result.returncode == 0, result.stderr
    assert "[Info] :: shown" in result.stdout


def test_empty_message_is_usage_error(tmp_path: Path, home: Path) -> None:
    """TC-05: An empty message is rejected with exit code 2 and nothing is written."""
    log_dir = tmp_path / "logs"
    result = run_cli(["write", "   ", "--use-defaults", "--dir", str(log_dir)], home)

    assert result.returncode == 2
    assert "ERROR" in result.stderr
    assert not (log_dir / "opskit.log").exists()


def test_debug_message_skipped_without_log_debug(tmp_path: Path, home: Path) -> None:
    """TC-06: Debug messages are only written when --log-debug is given."""
    log_dir = tmp_path / "logs"
    skipped = run_cli(
        ["write", "trace", "--use-defaults", "--dir", str(log_dir), "--debug-message"],
        home,
    )
    assert skipped.returncode == 0, skipped.stderr
    assert not (log_dir / "opskit.log").exists()

    written = run_cli(
        ["write", "trace", "--use-defaults", "--dir", str(log_dir), "--debug-message", "--log-debug"],
        home,
    )
    assert written.returncode == 0, written.stderr
    assert "<![LOG[trace]LOG]!>" in (log_dir / "opskit.log").read_text(encoding="utf-8")


def test_dump_config(tmp_path: Path, home: Path) -> None:
    """TC-07: --dump-config prints the resolved configuration as JSON."""
    result = run_cli(
        [
            "write", "ignored",
            "--use-defaults",
            "--dir", str(tmp_path / "logs"),
            "--max-history", "3",
            "--log-type", "Legacy",
            "--dump-config",
        ],
        home,
    )

    assert result.returncode == 0, result.stderr
    data = json.loads(result.stdout)
    assert data["max_history"] == 3
    assert data["log_format"] == "Legacy"
    assert data["directory"] == str(tmp_path / "logs")
    assert not (tmp_path / "logs").exists()


def test_invalid_severity_rejected_by_parser(tmp_path: Path, home: Path) -> None:
    """TC-08: Unknown severities fail during argument parsing."""
    result = run_cli(["write", "x", "--use-defaults", "-s", "7"], home)
    assert result.returncode == 2
    assert "invalid choice" in result.stderr

# -----------------------------------------------------------------------------
# PASSWORD COMMAND
# -----------------------------------------------------------------------------

def test_password_generation(home: Path) -> None:
    """TC-09: The requested number of passwords with the requested length."""
    result = run_cli(["password", "-l", "24", "-n", "3"], home)

    assert result.returncode == 0, result.stderr
    passwords = result.stdout.splitlines()
    assert len(passwords) == 3
    assert all(len(p) == 24 for p in passwords)


def test_password_without_character_classes(home: Path) -> None:
    """TC-10: Disabling every class is a usage error."""
    result = run_cli(
        ["password", "--no-upper", "--no-lower", "--no-digits", "--no-special"],
        home,
    )
    assert result.returncode == 2
    assert "ERROR" in result.stderr
