"""
Keybinding configuration loader.

Loads user keybinding customizations from keybindings.yaml in the config
directory and applies them on top of the OS defaults.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ..config.constants import GLOBAL_SCOPE
from ..config.settings import get_config_dir
from ..exceptions import ConfigurationError
from ..input.keys import parse_key
from .registry import KeybindingEntry, Keymap, When

logger = logging.getLogger(__name__)

USER_SOURCE = "user"

# Example config content for new users
EXAMPLE_CONFIG = """# ariakernel keybinding configuration
#
# Format:
#   overrides:
#     - key: "ctrl+z"                 # The chord to bind
#       command: "OS_UNDO"            # Command type to dispatch
#       scope: "global"               # "global" or a zone id
#       when: "navigating"            # always | navigating | editing
#       args: {}                      # Optional command payload
#
# To see all bindings, run: ariakernel keybindings --list
#
# Example: vim-style navigation in every zone
# overrides:
#   - key: "j"
#     command: "OS_NAVIGATE"
#     args: {direction: "down"}
#     when: "navigating"
#   - key: "k"
#     command: "OS_NAVIGATE"
#     args: {direction: "up"}
#     when: "navigating"

overrides: []
"""


def get_config_path() -> Path:
    """Get the path to the keybindings config file."""
    return get_config_dir() / "keybindings.yaml"


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load keybinding configuration from YAML file.

    Returns:
        Dictionary with configuration, or {"overrides": []} if the file is
        missing or unreadable
    """
    config_path = config_path or get_config_path()

    if not config_path.exists():
        return {"overrides": []}

    try:
        with open(config_path) as f:
            config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Failed to load keybindings config: {e}")
        return {"overrides": []}

    if not isinstance(config, dict):
        return {"overrides": []}

    return config


def save_example_config(config_path: Optional[Path] = None) -> bool:
    """
    Save example config file if it doesn't exist.

    Returns:
        True if file was created, False if it already exists or failed
    """
    config_path = config_path or get_config_path()

    if config_path.exists():
        return False

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(EXAMPLE_CONFIG)
        logger.info(f"Created example keybindings config at {config_path}")
        return True
    except OSError as e:
        logger.error(f"Failed to create keybindings config: {e}")
        return False


def _parse_when(value: Optional[str]) -> When:
    if value is None:
        return When.ALWAYS
    for when in When:
        if when.value == str(value).lower():
            return when
    raise ConfigurationError(f"Unknown mode '{value}'", setting="when")


def _parse_scope(value: Optional[str]) -> str:
    if value is None or str(value).lower() == "global":
        return GLOBAL_SCOPE
    return str(value)


def parse_overrides(config: Dict[str, Any]) -> List[KeybindingEntry]:
    """
    Parse override entries from config into KeybindingEntry objects.

    Malformed entries are logged and skipped.
    """
    entries = []
    overrides = config.get("overrides") or []

    for override in overrides:
        try:
            entry = KeybindingEntry(
                key=parse_key(str(override["key"])),
                command=str(override["command"]),
                args=dict(override.get("args") or {}),
                scope=_parse_scope(override.get("scope")),
                when=_parse_when(override.get("when")),
                command_scope=_parse_scope(override.get("command_scope")),
                source=USER_SOURCE,
                description=override.get("description", "User override"),
            )
            entries.append(entry)
        except KeyError as e:
            logger.warning(f"Missing required field {e} in override, skipping")
        except (ConfigurationError, TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Failed to parse override: {e}")

    return entries


class KeybindingConfig:
    """
    Manages keybinding configuration loading and application.

    Usage:
        config = KeybindingConfig()
        config.load()
        config.apply(keymap)
    """

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = config_path or get_config_path()
        self.config: Dict[str, Any] = {}
        self.overrides: List[KeybindingEntry] = []

    def load(self) -> None:
        """Load configuration from file."""
        self.config = load_config(self.config_path)
        self.overrides = parse_overrides(self.config)

    def get_overrides(self) -> List[KeybindingEntry]:
        return self.overrides

    def apply(self, keymap: Keymap) -> int:
        """Apply loaded overrides to ``keymap``. Returns how many were applied."""
        applied = 0
        for entry in self.overrides:
            if keymap.override(entry):
                applied += 1
        if applied:
            logger.info(f"Applied {applied} keybinding override(s) from {self.config_path}")
        return applied

    def create_example(self) -> bool:
        return save_example_config(self.config_path)
