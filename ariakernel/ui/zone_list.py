#!/usr/bin/env python3
"""
Textual list widget whose focus and selection live in the kernel.

The widget renders one row per item and restyles the rows from the
projected ARIA attributes after every state change. Keys and clicks go
through TextualBridge, so the widget itself has no navigation logic.
"""

import logging
from typing import Any, Dict, Optional

from textual import events
from textual.app import App, ComposeResult
from textual.containers import VerticalScroll
from textual.css.query import NoMatches
from textual.widgets import Footer, Header, Static

from ..aria import element_attributes
from ..clipboard import CLIPBOARD_EFFECT, TextualClipboard, install_clipboard_effect
from ..kernel.core import DispatchContext, Kernel
from ..os_commands import create_os_kernel, mount_zone, unmount_zone
from ..sensors.textual_bridge import TextualBridge
from ..zones.registry import ZoneEntry

logger = logging.getLogger(__name__)


class ItemRow(Static):
    """One item of a ZoneList."""

    def __init__(self, owner: "ZoneList", item_id: str, label: str):
        super().__init__(label, id=f"item-{item_id}", markup=False)
        self.owner = owner
        self.item_id = item_id
        self.label = label

    def on_mouse_down(self, event: events.MouseDown) -> None:
        self.owner.bridge.on_mouse_down(event, self.item_id, self.owner.zone_id)

    def on_mouse_up(self, event: events.MouseUp) -> None:
        self.owner.bridge.on_mouse_up(event, self.item_id)


class ZoneList(VerticalScroll, can_focus=True):
    """A focusable zone of rows (listbox, menu, radiogroup, ...)."""

    DEFAULT_CSS = """
    ZoneList {
        height: auto;
        max-height: 20;
        border: round $primary;
    }

    ZoneList > ItemRow {
        padding: 0 1;
    }

    ZoneList > ItemRow.-focused {
        background: $accent;
    }

    ZoneList > ItemRow.-selected {
        text-style: bold;
    }
    """

    def __init__(
        self,
        kernel: Kernel,
        zone_id: str,
        labels: Dict[str, str],
        role: str = "listbox",
        bridge: Optional[TextualBridge] = None,
        capabilities: Optional[Dict[str, Any]] = None,
        **kwargs,
    ):
        super().__init__(id=zone_id, **kwargs)
        self.kernel = kernel
        self.zone_id = zone_id
        self.labels = dict(labels)
        self.role = role
        self.bridge = bridge or TextualBridge(kernel)
        self.capabilities = capabilities or {}
        self._unsubscribe = None

    def compose(self) -> ComposeResult:
        for item_id, label in self.labels.items():
            yield ItemRow(self, item_id, label)

    def on_mount(self) -> None:
        entry = ZoneEntry.create(
            self.zone_id,
            role=self.role,
            items=list(self.labels),
            get_label=self.labels.get,
            **self.capabilities,
        )
        first = next(iter(self.labels), None)
        mount_zone(self.kernel, entry, initial_focus=first)
        self._unsubscribe = self.kernel.subscribe(self.refresh_rows)
        self.refresh_rows()

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
        unmount_zone(self.kernel, self.zone_id)

    def on_key(self, event: events.Key) -> None:
        self.bridge.on_key(event, target_id=self.zone_id)

    def row(self, item_id: str) -> Optional[ItemRow]:
        try:
            return self.query_one(f"#item-{item_id}", ItemRow)
        except NoMatches:
            return None

    def refresh_rows(self) -> None:
        state = self.kernel.get_state()
        for row in self.query(ItemRow):
            attrs = element_attributes(state, self.kernel.zones, row.item_id)
            selected = bool(attrs.get("aria-selected") or attrs.get("aria-checked"))
            row.set_class(bool(attrs.get("data-focused")), "-focused")
            row.set_class(selected, "-selected")
            row.update(f"{'●' if selected else '○'} {row.label}")


class KernelDemoApp(App):
    """A single kernel-driven list, for trying role presets interactively."""

    TITLE = "ariakernel"

    def __init__(self, labels: Optional[Dict[str, str]] = None, role: str = "listbox"):
        super().__init__()
        self.labels = labels or {name.lower(): name for name in ("Apple", "Banana", "Cherry", "Date")}
        self.role = role
        self.kernel = create_os_kernel()
        self.bridge = TextualBridge(self.kernel, focus_element=self._focus_item)
        self.clipboard_store = install_clipboard_effect(self.kernel, TextualClipboard(self))
        self.copy_command = self.kernel.define_command("DEMO_COPY", self._copy, log=False)

    def compose(self) -> ComposeResult:
        yield Header()
        yield ZoneList(
            self.kernel,
            "demo",
            self.labels,
            role=self.role,
            bridge=self.bridge,
            capabilities={"on_copy": lambda cursor: self.copy_command(ids=list(cursor.targets))},
        )
        yield Static(id="status")
        yield Footer()

    def on_mount(self) -> None:
        self.sub_title = self.role
        self.query_one(ZoneList).focus()
        self.kernel.subscribe(self._update_status)
        self._update_status()

    def _copy(self, ctx: DispatchContext, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        labels = [self.labels[item_id] for item_id in payload.get("ids", ()) if item_id in self.labels]
        if not labels:
            return None
        return {CLIPBOARD_EFFECT: {"items": labels, "source": "demo", "text": "\n".join(labels)}}

    def _focus_item(self, zone_id: str, item_id: str) -> None:
        row = self.query_one(ZoneList).row(item_id)
        if row is not None:
            row.scroll_visible()

    def _update_status(self) -> None:
        zone = self.kernel.get_state().focus.zone("demo")
        selected = ", ".join(zone.selection) or "-"
        self.query_one("#status", Static).update(f"focused: {zone.focused_item_id}  selected: {selected}")
