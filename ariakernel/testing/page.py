"""
Headless page.

A kernel with the OS command set, the sensors, a static viewport and an
in-memory clipboard, driven the way a user drives a real UI: press keys,
click items, read ARIA attributes back.

Usage:
    page = OsPage()
    page.goto("list", role="listbox", items=["a", "b", "c"])
    page.press("ArrowDown")
    assert page.focused_item_id() == "b"
    assert page.attrs("b")["aria-selected"] is True
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from ..aria import element_attributes
from ..clipboard import ClipboardStore, MemoryClipboard, install_clipboard_effect
from ..config.settings import KernelSettings
from ..geometry import Rect, StaticViewport
from ..input.gesture import PointerDown, PointerMove, PointerUp
from ..input.keyboard import KeyboardResolution
from ..input.keys import MODIFIER_ALIASES
from ..kernel.commands import Command
from ..kernel.core import DispatchResult
from ..keybindings.registry import Keymap
from ..os_commands import create_os_kernel, set_items
from ..sensors.focus import FocusSensor
from ..sensors.keyboard import KeyboardSensor, RawKeyEvent
from ..sensors.pointer import PointerSensor
from ..state import ZoneState, set_active_zone, update_zone
from ..zones.registry import ZoneEntry, ZoneRegistry

logger = logging.getLogger(__name__)

_FIRST = object()


class OsPage:
    """Simulated page for driving the kernel in tests."""

    def __init__(self, settings: Optional[KernelSettings] = None, keymap: Optional[Keymap] = None):
        self.zones = ZoneRegistry()
        self.viewport = StaticViewport()
        self.kernel = create_os_kernel(self.zones, self.viewport, settings)
        self.system_clipboard = MemoryClipboard()
        self.clipboard: ClipboardStore = install_clipboard_effect(self.kernel, self.system_clipboard)
        self.focus_sensor = FocusSensor(self.kernel)
        self.keyboard = KeyboardSensor(self.kernel, keymap)
        self.pointer = PointerSensor(self.kernel)

    # =========================================================================
    # Setup
    # =========================================================================

    def mount(
        self,
        zone_id: str,
        role: Optional[str] = None,
        items: Sequence[str] = (),
        parent_id: Optional[str] = None,
        config: Optional[Dict[str, Dict[str, Any]]] = None,
        **capabilities: Any,
    ) -> ZoneEntry:
        """Register a zone without focusing it."""
        entry = ZoneEntry.create(
            zone_id, role=role, items=items, parent_id=parent_id, overrides=config, **capabilities
        )
        return self.zones.register(zone_id, entry)

    def goto(
        self,
        zone_id: str,
        role: Optional[str] = None,
        items: Sequence[str] = (),
        focused_item_id: Any = _FIRST,
        parent_id: Optional[str] = None,
        config: Optional[Dict[str, Dict[str, Any]]] = None,
        **capabilities: Any,
    ) -> ZoneEntry:
        """
        Register a zone and make it active.

        Focus starts on the first item unless ``focused_item_id`` says
        otherwise (None for no focus). Zones whose selection follows focus
        start with that item selected.
        """
        entry = self.mount(zone_id, role, items, parent_id, config, **capabilities)
        live = self.zones.get_items(zone_id)
        focused = (live[0] if live else None) if focused_item_id is _FIRST else focused_item_id

        state = self.kernel.get_state()
        if focused is not None:
            changes: Dict[str, Any] = {"focused_item_id": focused, "last_focused_id": focused}
            if focused in live:
                changes["last_focused_index"] = live.index(focused)
            if entry.config.select.follow_focus and entry.config.select.mode != "none":
                changes["selection"] = (focused,)
                changes["selection_anchor"] = focused
            state = update_zone(state, zone_id, **changes)
        self.kernel.set_state(set_active_zone(state, zone_id))
        return entry

    def set_items(self, items: Sequence[str], zone_id: Optional[str] = None) -> None:
        set_items(self.kernel, self._zone_id(zone_id), items)

    def set_rects(self, rects: Dict[str, Rect]) -> None:
        for item_id, rect in rects.items():
            self.viewport.set_item_rect(item_id, rect)

    def set_zone_rect(self, zone_id: str, rect: Rect) -> None:
        self.viewport.set_zone_rect(zone_id, rect)

    def set_grid(
        self,
        cols: int,
        item_width: float = 100,
        item_height: float = 40,
        gap: float = 0,
        zone_id: Optional[str] = None,
    ) -> None:
        """Lay the zone's items out in a grid, row by row."""
        for index, item_id in enumerate(self.zones.get_items(self._zone_id(zone_id))):
            col, row = index % cols, index // cols
            rect = Rect(col * (item_width + gap), row * (item_height + gap), item_width, item_height)
            self.viewport.set_item_rect(item_id, rect)

    def set_disabled(self, item_id: str, disabled: bool = True, zone_id: Optional[str] = None) -> None:
        self.zones.set_disabled(self._zone_id(zone_id, item_id), item_id, disabled)

    def set_value(self, item_id: str, value: float, zone_id: Optional[str] = None) -> None:
        zone_id = self._zone_id(zone_id, item_id)
        zone = self.zone(zone_id)
        state = update_zone(self.kernel.get_state(), zone_id, values={**zone.values, item_id: value})
        self.kernel.set_state(state)

    # =========================================================================
    # Input
    # =========================================================================

    def press(self, key: str, **flags: Any) -> KeyboardResolution:
        """Press a chord like ``"ArrowDown"``, ``"Shift+Tab"``, ``"Meta+Z"`` or ``"a"``."""
        parts = ["+"] if key == "+" else key.split("+")
        modifiers = {"shift": False, "ctrl": False, "alt": False, "meta": False}
        for raw in parts[:-1]:
            modifiers[MODIFIER_ALIASES[raw.lower()].lower()] = True
        name = " " if parts[-1] == "Space" else parts[-1]
        return self.keyboard.handle(RawKeyEvent(name, **modifiers, **flags))

    def type(self, text: str) -> None:
        for char in text:
            self.press(char)

    def _center(self, item_id: Optional[str]):
        rect = self.viewport.item_rect(item_id) if item_id else None
        return (rect.center_x, rect.center_y) if rect else (0.0, 0.0)

    def click(
        self,
        item_id: str,
        zone_id: Optional[str] = None,
        shift: bool = False,
        meta: bool = False,
        ctrl: bool = False,
    ) -> None:
        zone_id = zone_id or self.zones.zone_of_item(item_id)
        x, y = self._center(item_id)
        self.pointer.down(PointerDown(0, x, y, item_id, zone_id), shift=shift, meta=meta, ctrl=ctrl)
        self.pointer.up(PointerUp(x, y, item_id))

    def click_outside(self) -> None:
        self.pointer.down(PointerDown(0, -1, -1))
        self.pointer.up(PointerUp(-1, -1))

    def drag(self, item_id: str, over_id: Optional[str], zone_id: Optional[str] = None) -> None:
        zone_id = zone_id or self.zones.zone_of_item(item_id)
        x, y = self._center(item_id)
        distance = self.pointer.threshold + 1
        self.pointer.down(PointerDown(0, x, y, item_id, zone_id, has_drag_handle=True))
        self.pointer.move(PointerMove(x + distance, y + distance))
        self.pointer.up(PointerUp(x + distance, y + distance, over_id))

    def focus_in(self, zone_id: str, item_id: str) -> bool:
        return self.focus_sensor.focus_in(zone_id, item_id)

    def dispatch(self, command: Command, meta: Optional[Dict[str, Any]] = None) -> DispatchResult:
        return self.kernel.dispatch(command, meta=meta)

    # =========================================================================
    # Reading
    # =========================================================================

    def _zone_id(self, zone_id: Optional[str], item_id: Optional[str] = None) -> Optional[str]:
        if zone_id is not None:
            return zone_id
        if item_id is not None:
            owner = self.zones.zone_of_item(item_id)
            if owner is not None:
                return owner
        return self.active_zone_id()

    def active_zone_id(self) -> Optional[str]:
        return self.kernel.get_state().focus.active_zone_id

    def zone(self, zone_id: Optional[str] = None) -> ZoneState:
        return self.kernel.get_state().focus.zone(self._zone_id(zone_id))

    def focused_item_id(self, zone_id: Optional[str] = None) -> Optional[str]:
        return self.zone(zone_id).focused_item_id

    def selection(self, zone_id: Optional[str] = None) -> List[str]:
        return list(self.zone(zone_id).selection)

    def expanded(self, zone_id: Optional[str] = None) -> List[str]:
        return sorted(self.zone(zone_id).expanded_items)

    def value(self, item_id: str, zone_id: Optional[str] = None) -> Optional[float]:
        return self.zone(self._zone_id(zone_id, item_id)).values.get(item_id)

    def attrs(self, element_id: str) -> Dict[str, Any]:
        return element_attributes(self.kernel.get_state(), self.zones, element_id)

    def cleanup(self) -> None:
        self.zones.dispose()
        self.kernel.reset()
