from __future__ import annotations

"""
Configuration Domain Management.

Handles persistent storage of the default sink settings as JSON in the user
data directory. Missing or corrupt files fall back to built-in defaults so a
logging call never fails because of its own configuration file.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from opskit.domain.constants import (
    DEFAULT_LOG_FILE_NAME,
    DEFAULT_MAX_FILE_SIZE_MB,
    DEFAULT_MAX_HISTORY,
    FORMAT_STRUCTURED,
)
from opskit.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
CONFIG_FILE_NAME = "config.json"
CURRENT_CONFIG_VERSION = "1.0.0"


def get_config_path() -> str:
    """Absolute path of the persistent configuration file."""
    return os.path.join(get_user_data_dir(), CONFIG_FILE_NAME)


def get_default_config() -> Dict[str, Any]:
    """
    Generate the default sink configuration.

    Keys mirror the fields of SinkConfig so the dictionary can be handed to
    the validator unchanged.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # Target
        "directory": "",
        "file_name": DEFAULT_LOG_FILE_NAME,
        "log_format": FORMAT_STRUCTURED,

        # Rotation & Retention
        "max_file_size_mb": DEFAULT_MAX_FILE_SIZE_MB,
        "max_history": DEFAULT_MAX_HISTORY,
        "create_new_on_init": False,

        # Output behavior
        "mirror_to_console": False,
        "echo_input": False,
        "log_debug_messages": False,

        # Error policy
        "suppress_errors": True,
        "show_errors": True,

        # Record metadata
        "default_source": None,
        "script_name": None,
        "context": None,
    }

# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the persisted configuration merged over the defaults.

    Args:
        path: Explicit configuration file. Defaults to the user data dir.

    Returns:
        Dict[str, Any]: The merged configuration, or defaults on failure.
    """
    config = get_default_config()
    config_path = path or get_config_path()

    if not os.path.exists(config_path):
        logger.debug(f"Config file not found at {config_path}. Returning defaults.")
        return config

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config: {e}. Using defaults.")
        return config

    if not isinstance(data, dict):
        logger.warning("Corrupted config file. Resetting to defaults.")
        return config

    # Unknown keys are dropped to keep the schema closed
    for key in config:
        if key in data:
            config[key] = data[key]
    return config


def save_config(config: Dict[str, Any], path: Optional[str] = None) -> bool:
    """
    Persist the configuration to disk.

    Args:
        config: The configuration dictionary to save.
        path: Explicit destination. Defaults to the user data dir.

    Returns:
        bool: True when the file was written.
    """
    config_path = path or get_config_path()
    payload = dict(config)
    payload["version"] = CURRENT_CONFIG_VERSION
    try:
        parent = os.path.dirname(os.path.abspath(config_path))
        os.makedirs(parent, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=4)
        logger.debug(f"Configuration saved to {config_path}")
        return True
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")
        return False
