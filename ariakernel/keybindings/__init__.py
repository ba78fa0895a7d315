"""
Keybinding system for ariakernel.

Provides:
- Keymap: scoped keybinding registry with conflict detection
- OS default bindings
- User overrides from keybindings.yaml
"""

from .defaults import os_default_bindings, register_os_defaults
from .registry import (
    ConflictReport,
    ConflictSeverity,
    ConflictType,
    KeybindingEntry,
    Keymap,
    When,
)

__all__ = [
    "ConflictReport",
    "ConflictSeverity",
    "ConflictType",
    "KeybindingEntry",
    "Keymap",
    "When",
    "os_default_bindings",
    "register_os_defaults",
]
