from __future__ import annotations

"""
Sink Configuration Validation Service.

Acts as the gatekeeper between untrusted configuration sources (JSON file,
CLI overrides) and the immutable SinkConfig. Handles type coercion, enum
resolution and range checks, collecting warnings instead of failing unless
strict mode is requested.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from opskit.domain.config import get_default_config
from opskit.domain.models import LogFormat, SinkConfig

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_sink_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[SinkConfig, List[str]]:
    """
    Validate and normalize a raw configuration dictionary into a SinkConfig.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raise on type or range violations instead of coercing.

    Returns:
        Tuple[SinkConfig, List[str]]: The sink configuration and the warnings
                                      produced while normalizing it.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    # 1. Base Type Validation
    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        config = {}

    merged: Dict[str, Any] = dict(defaults)
    merged.update({k: v for k, v in config.items() if k in defaults})

    unknown = sorted(k for k in config if k not in defaults and k != "version")
    if unknown:
        warnings.append(f"Unknown configuration keys ignored: {', '.join(unknown)}.")

    # 2. Schema Definition (Declarative mapping)
    bool_fields = [
        "create_new_on_init", "mirror_to_console", "echo_input",
        "log_debug_messages", "suppress_errors", "show_errors",
    ]
    optional_str_fields = ["default_source", "script_name", "context"]

    # 3. Field Processing & Normalization
    directory = _as_str(merged.get("directory"), "", "directory", warnings, strict)

    # An explicit empty file name disables file output and must survive
    raw_name = merged.get("file_name")
    if isinstance(raw_name, str) and not raw_name.strip():
        file_name = ""
    else:
        file_name = _as_str(raw_name, defaults["file_name"], "file_name", warnings, strict)

    bools = {
        field: _as_bool(merged.get(field), defaults[field], field, warnings, strict)
        for field in bool_fields
    }
    optionals = {
        field: _as_optional_str(merged.get(field), field, warnings, strict)
        for field in optional_str_fields
    }

    log_format = _as_format(merged.get("log_format"), warnings, strict)
    max_size = _as_non_negative(
        merged.get("max_file_size_mb"), defaults["max_file_size_mb"],
        "max_file_size_mb", float, warnings, strict,
    )
    max_history = _as_non_negative(
        merged.get("max_history"), defaults["max_history"],
        "max_history", int, warnings, strict,
    )

    for w in warnings:
        logger.debug(f"Config normalization: {w}")

    cfg = SinkConfig(
        directory=directory,
        file_name=file_name,
        log_format=log_format,
        max_file_size_mb=max_size,
        max_history=max_history,
        **bools,
        **optionals,
    )
    return cfg, warnings


def sink_config_to_dict(cfg: SinkConfig) -> Dict[str, Any]:
    """Serialize a SinkConfig into JSON-compatible values."""
    data = get_default_config()
    for key in data:
        value = getattr(cfg, key)
        data[key] = value.value if isinstance(value, LogFormat) else value
    return data


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if v else fallback

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_optional_str(value: Any, field: str, warnings: List[str], strict: bool) -> Optional[str]:
    """Accept None or a non-empty string."""
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip() or None

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Ignored.")
    return None


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Coerce various input types into native booleans."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict:
        # Support numeric coercion (0/1)
        if isinstance(value, (int, float)) and value in (0, 1):
            warnings.append(f"Field '{field}' converted from number {value} to bool.")
            return bool(value)
        # Support string coercion (human-friendly keywords)
        if isinstance(value, str):
            s = value.strip().lower()
            if s in ("true", "1", "yes", "y", "on"):
                warnings.append(f"Field '{field}' converted from '{value}' to True.")
                return True
            if s in ("false", "0", "no", "n", "off"):
                warnings.append(f"Field '{field}' converted from '{value}' to False.")
                return False

    msg = f"Invalid field '{field}': expected bool, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_format(value: Any, warnings: List[str], strict: bool) -> LogFormat:
    """Resolve a log format name, falling back to Structured."""
    if value is None:
        return LogFormat.STRUCTURED
    try:
        return LogFormat.parse(value)
    except ValueError as e:
        if strict:
            raise
        warnings.append(f"{e}. Using {LogFormat.STRUCTURED.value}.")
        return LogFormat.STRUCTURED


def _as_non_negative(
        value: Any,
        fallback: Any,
        field: str,
        kind: type,
        warnings: List[str],
        strict: bool,
) -> Any:
    """Coerce a numeric field and reject negative values."""
    if value is None:
        return kind(fallback)
    if isinstance(value, bool):
        number = None
    else:
        try:
            number = kind(value)
        except (TypeError, ValueError):
            number = None

    if number is None:
        msg = f"Invalid field '{field}': expected {kind.__name__}, received {value!r}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using fallback.")
        return kind(fallback)

    if number < 0:
        msg = f"Invalid field '{field}': must not be negative ({number})."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Using fallback.")
        return kind(fallback)
    return number
