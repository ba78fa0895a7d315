"""
Textual adapter.

Translates Textual key, mouse and focus events into sensor calls so a
Textual app can run its widgets on the kernel.

Usage:
    class ListScreen(Screen):
        def on_mount(self) -> None:
            self.bridge = TextualBridge(kernel, focus_element=self.focus_item)

        def on_key(self, event: events.Key) -> None:
            self.bridge.on_key(event)
"""

import logging
from typing import Optional

from textual import events

from ..input.gesture import PointerDown, PointerMove, PointerUp
from ..input.keys import MODIFIER_ALIASES
from ..kernel.core import Kernel
from ..keybindings.registry import Keymap
from .focus import FocusElement, FocusSensor
from .keyboard import KeyboardSensor, RawKeyEvent
from .pointer import PointerSensor

logger = logging.getLogger(__name__)

# Textual numbers mouse buttons from 1, the recognizer from 0
TEXTUAL_BUTTON_OFFSET = 1


def key_event_from_textual(
    event: events.Key,
    target_id: Optional[str] = None,
    is_field: bool = False,
) -> RawKeyEvent:
    """Split a Textual key name like ``ctrl+shift+z`` into a RawKeyEvent."""
    name = event.key
    if name == "backtab":
        return RawKeyEvent("Tab", shift=True, target_id=target_id, is_field=is_field)

    parts = name.split("+")
    flags = {"shift": False, "ctrl": False, "alt": False, "meta": False}
    for raw in parts[:-1]:
        modifier = MODIFIER_ALIASES.get(raw.lower())
        if modifier is not None:
            flags[modifier.lower()] = True

    key = parts[-1] or "+"
    plain = not (flags["ctrl"] or flags["alt"] or flags["meta"])
    if plain and event.is_printable and event.character and len(event.character) == 1:
        key = event.character
        flags["shift"] = False

    return RawKeyEvent(key, target_id=target_id, is_field=is_field, **flags)


class TextualBridge:
    """Keyboard, pointer and focus sensors wired to Textual events."""

    def __init__(
        self,
        kernel: Kernel,
        keymap: Optional[Keymap] = None,
        focus_element: Optional[FocusElement] = None,
    ):
        self.kernel = kernel
        self.keyboard = KeyboardSensor(kernel, keymap)
        self.pointer = PointerSensor(kernel)
        self.focus = FocusSensor(kernel, focus_element)

    def on_key(self, event: events.Key, target_id: Optional[str] = None, is_field: bool = False) -> bool:
        """Resolve a key press. Stops the event when the kernel handled it."""
        resolution = self.keyboard.handle(key_event_from_textual(event, target_id, is_field))
        if resolution.handled:
            event.prevent_default()
            event.stop()
        return resolution.handled

    def on_mouse_down(
        self,
        event: events.MouseDown,
        item_id: Optional[str],
        zone_id: Optional[str],
        has_drag_handle: bool = False,
    ) -> None:
        self.pointer.down(
            PointerDown(
                button=event.button - TEXTUAL_BUTTON_OFFSET,
                x=event.screen_x,
                y=event.screen_y,
                item_id=item_id,
                zone_id=zone_id,
                has_drag_handle=has_drag_handle,
            ),
            shift=event.shift,
            meta=event.meta,
            ctrl=event.ctrl,
        )

    def on_mouse_move(self, event: events.MouseMove) -> None:
        self.pointer.move(PointerMove(event.screen_x, event.screen_y))

    def on_mouse_up(self, event: events.MouseUp, over_item_id: Optional[str] = None) -> None:
        self.pointer.up(PointerUp(event.screen_x, event.screen_y, over_item_id))

    def on_focus(self, zone_id: str, item_id: str) -> bool:
        return self.focus.focus_in(zone_id, item_id)
