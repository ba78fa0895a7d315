"""
List collections.

``ListCollection`` binds a zone to a list of ``{"id": ...}`` records stored
at ``app.data[key]``. It defines the remove, move, copy, cut, paste and
duplicate commands in the app's scope and produces the zone capabilities
that route the OS commands to them, so Delete, Meta+C, Meta+ArrowUp and
friends work on the list without further wiring.

Usage:
    todo = register_app(kernel, "todo", data={"items": ({"id": "a", "text": "Milk"},)})
    store = install_clipboard_effect(kernel)
    todos = ListCollection(todo, "items", "todo-list", store, to_text=lambda i: i["text"])

    mount_zone(kernel, ZoneEntry.create("todo-list", role="listbox", **todos.capabilities()))
"""

import logging
import secrets
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .clipboard import CLIPBOARD_EFFECT, COPY, CUT, ClipboardStore, CollectionNode, find_accepting_collection
from .kernel.app import AppHandle
from .kernel.commands import Command
from .os_commands.types import OS_FOCUS
from .state import AppState
from .zones.registry import ZoneCursor

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


def _default_text(item: Record) -> str:
    return str(item.get("label") or item.get("text") or item.get("id", ""))


def _default_id() -> str:
    return secrets.token_hex(4)


class ListCollection:
    """Ordered records at ``app.data[key]`` edited through scoped commands."""

    def __init__(
        self,
        app: AppHandle,
        key: str,
        zone_id: str,
        clipboard: ClipboardStore,
        parent_id: Optional[str] = None,
        accept: Optional[Callable[[Any], Optional[Record]]] = None,
        to_text: Callable[[Record], str] = _default_text,
        generate_id: Callable[[], str] = _default_id,
    ):
        self.app = app
        self.key = key
        self.zone_id = zone_id
        self.clipboard = clipboard
        self.parent_id = parent_id
        self.accept = accept
        self.to_text = to_text
        self.generate_id = generate_id

        prefix = zone_id.upper().replace("-", "_")
        self.remove = app.command(f"{prefix}_REMOVE", self._remove)
        self.move_up = app.command(f"{prefix}_MOVE_UP", lambda a, p: self._move(a, p, -1))
        self.move_down = app.command(f"{prefix}_MOVE_DOWN", lambda a, p: self._move(a, p, 1))
        self.copy = app.command(f"{prefix}_COPY", self._copy, log=False)
        self.cut = app.command(f"{prefix}_CUT", self._cut)
        self.paste = app.command(f"{prefix}_PASTE", self._paste)
        self.duplicate = app.command(f"{prefix}_DUPLICATE", self._duplicate)
        clipboard.add_collection(self)

    # =========================================================================
    # Reading
    # =========================================================================

    def records(self, app: Optional[AppState] = None) -> Tuple[Record, ...]:
        app = app if app is not None else self.app.state
        data = app.data or {}
        return tuple(data.get(self.key, ()))

    def ids(self) -> List[str]:
        return [item["id"] for item in self.records()]

    def contains(self, item_id: str) -> bool:
        return item_id in self.ids()

    def node(self) -> CollectionNode:
        """This collection as a paste-bubbling node."""
        return CollectionNode(self.zone_id, self.parent_id, self.accept_payload, self.contains)

    def accept_payload(self, payload: Any) -> Optional[Record]:
        if isinstance(payload, dict) and payload.get("_source") == self.zone_id:
            return {k: v for k, v in payload.items() if k != "_source"}
        if self.accept is None:
            return None
        return self.accept(payload)

    # =========================================================================
    # Capabilities
    # =========================================================================

    def capabilities(self) -> Dict[str, Any]:
        """Keyword arguments for ``ZoneEntry.create``."""
        return {
            "on_delete": lambda cursor: self.remove(ids=list(cursor.targets)),
            "on_move_up": lambda cursor: self.move_up(id=cursor.focus_id),
            "on_move_down": lambda cursor: self.move_down(id=cursor.focus_id),
            "on_copy": lambda cursor: self.copy(ids=list(cursor.targets)),
            "on_cut": lambda cursor: self.cut(ids=list(cursor.targets)),
            "on_paste": self.paste_at,
            "get_items": self.ids,
            "get_label": self._label,
            "on_undo": self.app.undo_command(),
            "on_redo": self.app.redo_command(),
        }

    def paste_at(self, cursor: ZoneCursor) -> List[Command]:
        """
        Paste commands for the clipboard at ``cursor``.

        Each clipboard item goes to this collection if it accepts the item,
        otherwise to the nearest ancestor collection that does. An ancestor
        inserts after its own focused item.
        """
        entry = self.clipboard.read()
        if entry is None or not entry.items:
            return []

        nodes = self.clipboard.collection_nodes()
        accepted: Dict[str, List[Record]] = {}
        for item in entry.items:
            target = find_accepting_collection(cursor.focus_id, item, nodes, start_id=self.zone_id)
            if target is not None:
                accepted.setdefault(target.collection_id, []).append(target.data)
        if not accepted:
            logger.debug(f"{self.zone_id} and its ancestors rejected paste from {entry.source}")

        commands = []
        for collection_id, records in accepted.items():
            collection = self.clipboard.collection(collection_id)
            if collection is self:
                commands.append(self.paste(after_id=cursor.focus_id, items=records))
            else:
                logger.debug(f"Paste from {self.zone_id} bubbled to {collection_id}")
                commands.append(collection.paste(after_id=collection.anchor_id(), items=records))
        return commands

    def anchor_id(self) -> Optional[str]:
        """Item a bubbled paste lands after: the zone's focused item, else the end."""
        zone = self.app.kernel.get_state().focus.zone(self.zone_id)
        anchor = zone.focused_item_id or zone.last_focused_id
        return anchor if self.contains(anchor) else None

    def _label(self, item_id: str) -> str:
        for item in self.records():
            if item["id"] == item_id:
                return self.to_text(item)
        return item_id

    # =========================================================================
    # Commands
    # =========================================================================

    def _write(self, app: AppState, records: Sequence[Record]) -> AppState:
        return replace(app, data={**(app.data or {}), self.key: tuple(records)})

    def _remove(self, app: AppState, payload: Dict[str, Any]) -> Optional[AppState]:
        ids = set(payload.get("ids", ()))
        records = self.records(app)
        kept = [item for item in records if item["id"] not in ids]
        if len(kept) == len(records):
            return None
        return self._write(app, kept)

    def _move(self, app: AppState, payload: Dict[str, Any], delta: int) -> Optional[AppState]:
        records = list(self.records(app))
        ids = [item["id"] for item in records]
        item_id = payload.get("id")
        if item_id not in ids:
            return None
        index = ids.index(item_id)
        other = index + delta
        if other < 0 or other >= len(records):
            return None
        records[index], records[other] = records[other], records[index]
        return self._write(app, records)

    def _clipboard(self, items: Sequence[Record], mode: str) -> Dict[str, Any]:
        return {
            "items": [{**item, "_source": self.zone_id} for item in items],
            "source": self.zone_id,
            "mode": mode,
            "text": "\n".join(self.to_text(item) for item in items),
        }

    def _selected(self, app: AppState, payload: Dict[str, Any]) -> List[Record]:
        ids = set(payload.get("ids", ()))
        return [item for item in self.records(app) if item["id"] in ids]

    def _copy(self, app: AppState, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        items = self._selected(app, payload)
        if not items:
            return None
        return {CLIPBOARD_EFFECT: self._clipboard(items, COPY)}

    def _cut(self, app: AppState, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        items = self._selected(app, payload)
        if not items:
            return None
        return {"state": self._remove(app, payload), CLIPBOARD_EFFECT: self._clipboard(items, CUT)}

    def _insert_after(self, app: AppState, after_id: Optional[str], new: Sequence[Record]) -> AppState:
        records = list(self.records(app))
        ids = [item["id"] for item in records]
        index = ids.index(after_id) + 1 if after_id in ids else len(records)
        records[index:index] = new
        return self._write(app, records)

    def _paste(self, app: AppState, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        payload = payload or {}
        accepted = payload.get("items")
        if accepted is None:
            entry = self.clipboard.read()
            if entry is None or not entry.items:
                return None
            accepted = [self.accept_payload(item) for item in entry.items]
            accepted = [item for item in accepted if item is not None]
            if not accepted:
                logger.debug(f"{self.zone_id} rejected paste from {entry.source}")
        if not accepted:
            return None

        clones = [{**item, "id": self.generate_id()} for item in accepted]
        return {
            "state": self._insert_after(app, payload.get("after_id"), clones),
            "dispatch": [Command(OS_FOCUS, {"zone_id": self.zone_id, "item_id": clones[0]["id"]})],
        }

    def _duplicate(self, app: AppState, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        item_id = payload.get("id")
        original = next((item for item in self.records(app) if item["id"] == item_id), None)
        if original is None:
            return None
        clone = {**original, "id": self.generate_id()}
        return {
            "state": self._insert_after(app, item_id, [clone]),
            "dispatch": [Command(OS_FOCUS, {"zone_id": self.zone_id, "item_id": clone["id"]})],
        }
