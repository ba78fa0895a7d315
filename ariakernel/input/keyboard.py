"""
Keyboard classification and resolution.

``classify_keyboard`` decides who owns a key press (kernel, focused text
field, or nobody). ``resolve_keyboard`` turns a sensed key press into an
action. Both are pure functions over a ``KeyboardInput`` snapshot.

Usage:
    resolution = resolve_keyboard(KeyboardInput(canonical_key="ArrowDown", key="ArrowDown"), keymap)
    if resolution.action is KeyboardAction.DISPATCH:
        for command in resolution.commands:
            kernel.dispatch(command, meta=resolution.meta)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from ..kernel.commands import Command
from ..keybindings.registry import Keymap
from ..os_commands.types import OS_CHECK
from .keys import CARET_KEYS, is_printable

# Item roles that Space toggles directly
SPACE_CHECK_ROLES = frozenset({"checkbox", "switch"})


class KeyClass(Enum):
    COMMAND = "command"  # kernel resolves it
    FIELD = "field"  # the focused text field consumes it
    PASSTHRU = "passthru"  # guarded, nobody in the kernel looks at it


class KeyboardAction(Enum):
    IGNORE = "ignore"
    CHECK = "check"
    DISPATCH = "dispatch"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class KeyboardInput:
    """Sensed key press plus the context flags resolution depends on."""

    canonical_key: str
    key: str
    is_editing: bool = False
    is_field_active: bool = False
    is_composing: bool = False
    is_default_prevented: bool = False
    is_inspector: bool = False
    is_combobox: bool = False
    focused_item_role: Optional[str] = None
    focused_item_id: Optional[str] = None
    active_zone_id: Optional[str] = None
    zone_path: Tuple[str, ...] = ()
    active_zone_has_check: bool = False
    active_zone_focused_item_id: Optional[str] = None
    element_id: Optional[str] = None


@dataclass(frozen=True)
class KeyboardResolution:
    action: KeyboardAction
    commands: Tuple[Command, ...] = ()
    target_id: Optional[str] = None
    meta: Optional[Dict[str, Any]] = None

    @property
    def handled(self) -> bool:
        """True when the host should prevent the default key behavior."""
        return self.action in (KeyboardAction.CHECK, KeyboardAction.DISPATCH)


IGNORE = KeyboardResolution(KeyboardAction.IGNORE)
FALLBACK = KeyboardResolution(KeyboardAction.FALLBACK)


def is_guarded(event: KeyboardInput) -> bool:
    """Guards in precedence order: IME, prevented, inspector, combobox."""
    return (
        event.is_composing
        or event.is_default_prevented
        or event.is_inspector
        or event.is_combobox
    )


def classify_keyboard(event: KeyboardInput) -> KeyClass:
    if is_guarded(event):
        return KeyClass.PASSTHRU
    if event.is_field_active:
        modifiers, _, bare = event.canonical_key.rpartition("+")
        if event.canonical_key == "+":
            modifiers, bare = "", "+"
        if modifiers in ("", "Shift") and (is_printable(event.key) or bare in CARET_KEYS):
            return KeyClass.FIELD
    return KeyClass.COMMAND


def _check_target(event: KeyboardInput) -> Optional[str]:
    if event.canonical_key != "Space" or event.is_editing:
        return None
    if event.focused_item_role in SPACE_CHECK_ROLES and event.focused_item_id:
        return event.focused_item_id
    if event.active_zone_has_check and event.active_zone_focused_item_id:
        return event.active_zone_focused_item_id
    return None


def resolve_keyboard(event: KeyboardInput, keymap: Keymap) -> KeyboardResolution:
    """
    Resolve a key press.

    Returns:
        IGNORE for guarded events, CHECK for Space on a checkable target,
        DISPATCH for a keybinding match, FALLBACK otherwise
    """
    if is_guarded(event):
        return IGNORE

    target = _check_target(event)
    if target is not None:
        return KeyboardResolution(
            KeyboardAction.CHECK,
            commands=(Command(OS_CHECK, {"target_id": target}),),
            target_id=target,
        )

    entry = keymap.resolve(event.canonical_key, event.zone_path, event.is_editing)
    if entry is None:
        return FALLBACK

    return KeyboardResolution(
        KeyboardAction.DISPATCH,
        commands=(entry.to_command(),),
        meta={
            "type": "KEYBOARD",
            "key": event.key,
            "code": event.canonical_key,
            "element_id": event.element_id,
        },
    )
