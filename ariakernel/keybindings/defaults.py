"""Default OS keybindings."""

from typing import List

from ..os_commands import types as t
from .registry import KeybindingEntry, Keymap, When

OS_SOURCE = "os"


def _nav(key: str, command: str, description: str, **args) -> KeybindingEntry:
    return KeybindingEntry(
        key=key,
        command=command,
        args=args,
        when=When.NAVIGATING,
        source=OS_SOURCE,
        description=description,
    )


def _edit(key: str, command: str, description: str) -> KeybindingEntry:
    return KeybindingEntry(
        key=key, command=command, when=When.EDITING, source=OS_SOURCE, description=description
    )


def os_default_bindings() -> List[KeybindingEntry]:
    """The built-in keyboard map shared by every zone."""
    return [
        _nav("ArrowDown", t.OS_NAVIGATE, "Next item", direction="down"),
        _nav("ArrowUp", t.OS_NAVIGATE, "Previous item", direction="up"),
        _nav("ArrowLeft", t.OS_NAVIGATE, "Item to the left", direction="left"),
        _nav("ArrowRight", t.OS_NAVIGATE, "Item to the right", direction="right"),
        _nav("Home", t.OS_NAVIGATE, "First item", direction="home"),
        _nav("End", t.OS_NAVIGATE, "Last item", direction="end"),
        _nav("Shift+ArrowDown", t.OS_NAVIGATE, "Extend selection down", direction="down", select="range"),
        _nav("Shift+ArrowUp", t.OS_NAVIGATE, "Extend selection up", direction="up", select="range"),
        _nav("PageUp", t.OS_VALUE_CHANGE, "Large increment", action="increment_large"),
        _nav("PageDown", t.OS_VALUE_CHANGE, "Large decrement", action="decrement_large"),
        _nav("Tab", t.OS_TAB, "Next tab stop", direction="forward"),
        _nav("Shift+Tab", t.OS_TAB, "Previous tab stop", direction="backward"),
        _nav("Enter", t.OS_ACTIVATE, "Activate item"),
        _nav("Escape", t.OS_ESCAPE, "Dismiss or clear selection"),
        _nav("Space", t.OS_SELECT, "Toggle selection", mode="toggle"),
        _nav("Meta+A", t.OS_SELECT_ALL, "Select all"),
        _nav("Backspace", t.OS_DELETE, "Delete"),
        _nav("Delete", t.OS_DELETE, "Delete"),
        _nav("Meta+C", t.OS_COPY, "Copy"),
        _nav("Meta+X", t.OS_CUT, "Cut"),
        _nav("Meta+V", t.OS_PASTE, "Paste"),
        _nav("Meta+ArrowUp", t.OS_MOVE_UP, "Move item up"),
        _nav("Meta+ArrowDown", t.OS_MOVE_DOWN, "Move item down"),
        _nav("Meta+Z", t.OS_UNDO, "Undo"),
        _nav("Meta+Shift+Z", t.OS_REDO, "Redo"),
        _nav("F2", t.OS_FIELD_START_EDIT, "Edit item"),
        _edit("Enter", t.OS_FIELD_COMMIT, "Commit edit"),
        _edit("Escape", t.OS_FIELD_CANCEL, "Cancel edit"),
    ]


def register_os_defaults(keymap: Keymap) -> Keymap:
    keymap.register_many(os_default_bindings())
    return keymap
