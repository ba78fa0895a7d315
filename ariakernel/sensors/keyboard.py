"""
Keyboard sensor.

Turns raw key events into kernel dispatches. The sensor snapshots the
kernel state a key press is resolved against (active zone, its path, the
focused item, editing), runs classification and resolution, and dispatches
the outcome. Printable keys nobody bound fall through to typeahead.

Usage:
    sensor = KeyboardSensor(kernel)
    resolution = sensor.handle(RawKeyEvent("ArrowDown"))
    if resolution.handled:
        ...  # prevent the host's default
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..input.keyboard import (
    FALLBACK,
    KeyboardAction,
    KeyboardInput,
    KeyboardResolution,
    KeyClass,
    classify_keyboard,
    resolve_keyboard,
)
from ..input.keys import canonical_key
from ..kernel.commands import Command
from ..kernel.core import DispatchStatus, Kernel
from ..keybindings.defaults import register_os_defaults
from ..keybindings.registry import Keymap
from ..navigation.typeahead import is_typeahead_char
from ..os_commands.types import OS_TYPEAHEAD
from ..roles import child_role

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawKeyEvent:
    """A key press as the host reports it."""

    key: str
    shift: bool = False
    ctrl: bool = False
    alt: bool = False
    meta: bool = False
    is_composing: bool = False
    default_prevented: bool = False
    target_id: Optional[str] = None
    target_role: Optional[str] = None  # role of the focused element, if the host knows it
    is_field: bool = False  # focused element is an editable text field
    is_inspector: bool = False
    is_combobox: bool = False


class KeyboardSensor:
    """Feeds key presses into a kernel."""

    def __init__(self, kernel: Kernel, keymap: Optional[Keymap] = None):
        self.kernel = kernel
        self.keymap = keymap if keymap is not None else register_os_defaults(Keymap())
        self.composing = False

    def composition_start(self) -> None:
        self.composing = True

    def composition_end(self) -> None:
        self.composing = False

    def sense(self, event: RawKeyEvent) -> KeyboardInput:
        """Snapshot of everything resolution needs for ``event``."""
        state = self.kernel.get_state()
        zones = self.kernel.zones
        zone_id = state.focus.active_zone_id
        entry = zones.get(zone_id)
        zone = state.focus.zone(zone_id)

        focused_role = event.target_role
        if focused_role is None and entry is not None and zone.focused_item_id is not None:
            focused_role = child_role(entry.role)

        has_check = entry is not None and (
            entry.config.check.mode != "none" or entry.capabilities.on_check is not None
        )

        return KeyboardInput(
            canonical_key=canonical_key(
                event.key, shift=event.shift, ctrl=event.ctrl, alt=event.alt, meta=event.meta
            ),
            key=event.key,
            is_editing=zone.editing_item_id is not None,
            is_field_active=event.is_field,
            is_composing=event.is_composing or self.composing,
            is_default_prevented=event.default_prevented,
            is_inspector=event.is_inspector,
            is_combobox=event.is_combobox,
            focused_item_role=focused_role,
            focused_item_id=zone.focused_item_id,
            active_zone_id=zone_id,
            zone_path=tuple(zones.zone_path(zone_id)),
            active_zone_has_check=has_check,
            active_zone_focused_item_id=zone.focused_item_id,
            element_id=event.target_id,
        )

    def handle(self, event: RawKeyEvent) -> KeyboardResolution:
        snapshot = self.sense(event)
        if classify_keyboard(snapshot) is KeyClass.FIELD:
            return FALLBACK

        resolution = resolve_keyboard(snapshot, self.keymap)
        if resolution.action in (KeyboardAction.CHECK, KeyboardAction.DISPATCH):
            for command in resolution.commands:
                self.kernel.dispatch(command, meta=resolution.meta)
            return resolution

        if resolution.action is KeyboardAction.FALLBACK:
            return self._typeahead(event, snapshot) or resolution
        return resolution

    def _typeahead(self, event: RawKeyEvent, snapshot: KeyboardInput) -> Optional[KeyboardResolution]:
        if event.ctrl or event.meta or event.alt or snapshot.is_editing or event.is_field:
            return None
        entry = self.kernel.zones.get(snapshot.active_zone_id)
        if entry is None or not entry.config.navigate.typeahead or not is_typeahead_char(event.key):
            return None

        command = Command(OS_TYPEAHEAD, {"zone_id": entry.zone_id, "char": event.key})
        result = self.kernel.dispatch(command)
        if result.status is not DispatchStatus.HANDLED:
            return None
        return KeyboardResolution(KeyboardAction.DISPATCH, commands=(command,))
