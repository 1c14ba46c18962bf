from __future__ import annotations

"""
Unit tests for persistent sink configuration.
"""

import json
from pathlib import Path

from opskit.domain.config import get_default_config, load_config, save_config


def test_load_missing_file_returns_defaults(tmp_path: Path) -> None:
    """TC-01: No file yields the built-in defaults."""
    assert load_config(str(tmp_path / "none.json")) == get_default_config()


def test_save_then_load_merges_over_defaults(tmp_path: Path) -> None:
    """TC-02: Persisted keys override defaults; unknown keys are dropped."""
    path = tmp_path / "cfg" / "config.json"
    assert save_config({"max_history": 9, "log_format": "Legacy"}, str(path))

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["version"]

    path.write_text(json.dumps({"max_history": 9, "bogus": 1}), encoding="utf-8")
    loaded = load_config(str(path))
    assert loaded["max_history"] == 9
    assert loaded["file_name"] == get_default_config()["file_name"]
    assert "bogus" not in loaded


def test_corrupt_file_returns_defaults(tmp_path: Path) -> None:
    """TC-03: Invalid JSON or a non-object payload falls back to defaults."""
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    assert load_config(str(broken)) == get_default_config()

    listed = tmp_path / "list.json"
    listed.write_text("[1, 2]", encoding="utf-8")
    assert load_config(str(listed)) == get_default_config()
