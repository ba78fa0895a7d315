"""Configuration utilities for ariakernel.

Settings are read from ``settings.yaml`` in the config directory and merged
over the defaults, so a partial file only overrides what it names.

Usage:
    from ariakernel.config.settings import load_settings

    settings = load_settings()
    kernel_history_limit = settings.history_limit
"""

import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from .constants import (
    ARIAKERNEL_CONFIG_DIR,
    DRAG_THRESHOLD_PX,
    ENV_VAR_DEFINITIONS,
    HISTORY_LIMIT,
    PERSIST_DEBOUNCE_MS,
    TRANSACTION_LOG_LIMIT,
    TYPEAHEAD_TIMEOUT_MS,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KernelSettings:
    """Tunable kernel settings."""

    history_limit: int = HISTORY_LIMIT
    transaction_log_limit: int = TRANSACTION_LOG_LIMIT
    drag_threshold_px: int = DRAG_THRESHOLD_PX
    typeahead_timeout_ms: int = TYPEAHEAD_TIMEOUT_MS
    persist_debounce_ms: int = PERSIST_DEBOUNCE_MS
    log_level: str = "WARNING"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def get_config_dir() -> Path:
    """Get the config directory, respecting ARIAKERNEL_CONFIG_DIR."""
    override = os.environ.get("ARIAKERNEL_CONFIG_DIR")
    if override:
        return Path(override)
    return ARIAKERNEL_CONFIG_DIR


def get_settings_path() -> Path:
    return get_config_dir() / "settings.yaml"


def validate_env_var(name: str, value: Optional[str]) -> Tuple[bool, Optional[str]]:
    """Validate a single environment variable value.

    Args:
        name: The environment variable name.
        value: The current value (or None if not set).

    Returns:
        Tuple of (is_valid, error_message).
    """
    if name not in ENV_VAR_DEFINITIONS:
        return True, None

    valid_values = ENV_VAR_DEFINITIONS[name].get("valid_values")
    if value is None or valid_values is None:
        return True, None

    if value.upper() not in [v.upper() for v in valid_values]:
        return False, f"Invalid value '{value}' for {name}. Valid values: {valid_values}"

    return True, None


def validate_all_env_vars() -> List[str]:
    """Validate all ariakernel environment variables.

    Returns:
        List of error messages (empty if all valid).
    """
    errors = []
    for name in ENV_VAR_DEFINITIONS:
        is_valid, error = validate_env_var(name, os.environ.get(name))
        if not is_valid:
            errors.append(error)
    return errors


def load_settings(path: Optional[Path] = None) -> KernelSettings:
    """
    Load kernel settings from YAML, falling back to defaults.

    Unknown keys are ignored with a warning. An unreadable or malformed file
    yields the defaults. ARIAKERNEL_LOG_LEVEL, when valid, wins over the file.

    Args:
        path: Settings file to read (defaults to settings.yaml in the config dir)

    Returns:
        KernelSettings instance
    """
    path = path or get_settings_path()
    loaded: Dict[str, Any] = {}

    if path.exists():
        try:
            with open(path) as f:
                loaded = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load settings from {path}: {e}")
            loaded = {}

    if not isinstance(loaded, dict):
        logger.warning(f"Settings file {path} is not a mapping, using defaults")
        loaded = {}

    known = {f.name for f in fields(KernelSettings)}
    for key in list(loaded):
        if key not in known:
            logger.warning(f"Unknown setting '{key}' in {path}, skipping")
            loaded.pop(key)

    env_level = os.environ.get("ARIAKERNEL_LOG_LEVEL")
    is_valid, error = validate_env_var("ARIAKERNEL_LOG_LEVEL", env_level)
    if env_level and is_valid:
        loaded["log_level"] = env_level.upper()
    elif error:
        logger.warning(error)

    return KernelSettings(**{**KernelSettings().to_dict(), **loaded})
