"""
Structured clipboard.

Copy and cut put structured items into a ``ClipboardStore`` and a plain-text
rendering onto the system clipboard. Paste reads the structured items back
and finds the collection that accepts them, bubbling from the collection
holding the focused item up to the root.

Usage:
    store = install_clipboard_effect(kernel, MemoryClipboard())

    # a handler returns {"clipboard": {"items": [...], "source": "list", "mode": "copy"}}

    target = find_accepting_collection("card-1", store.read().items[0], nodes)
    if target is None:
        ...  # rejected
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Tuple

logger = logging.getLogger(__name__)

CLIPBOARD_EFFECT = "clipboard"
COPY = "copy"
CUT = "cut"


@dataclass(frozen=True)
class ClipboardEntry:
    items: Tuple[Any, ...]
    source: Optional[str] = None
    mode: str = COPY
    text: str = ""


class ClipboardStore:
    """Holds the last copied or cut items."""

    def __init__(self) -> None:
        self._entry: Optional[ClipboardEntry] = None
        self._collections: Dict[str, Any] = {}

    def write(
        self,
        items: Sequence[Any],
        source: Optional[str] = None,
        mode: str = COPY,
        text: str = "",
    ) -> ClipboardEntry:
        self._entry = ClipboardEntry(tuple(items), source, mode, text)
        return self._entry

    def read(self) -> Optional[ClipboardEntry]:
        return self._entry

    def clear(self) -> None:
        self._entry = None

    @property
    def is_empty(self) -> bool:
        return self._entry is None or not self._entry.items

    def add_collection(self, collection: Any) -> None:
        """Register a paste destination (anything with ``zone_id`` and ``node()``)."""
        self._collections[collection.zone_id] = collection

    def remove_collection(self, zone_id: str) -> None:
        self._collections.pop(zone_id, None)

    def collection(self, zone_id: str) -> Optional[Any]:
        return self._collections.get(zone_id)

    def collection_nodes(self) -> List["CollectionNode"]:
        return [collection.node() for collection in self._collections.values()]


class SystemClipboard(Protocol):
    def write_text(self, text: str) -> None:
        ...


class MemoryClipboard:
    """System clipboard stand-in that keeps every write."""

    def __init__(self) -> None:
        self.writes: List[str] = []

    @property
    def text(self) -> str:
        return self.writes[-1] if self.writes else ""

    def write_text(self, text: str) -> None:
        self.writes.append(text)


class TextualClipboard:
    """Writes through a Textual app (OSC 52 on supporting terminals)."""

    def __init__(self, app):
        self.app = app

    def write_text(self, text: str) -> None:
        self.app.copy_to_clipboard(text)


def install_clipboard_effect(
    kernel,
    system: Optional[SystemClipboard] = None,
    store: Optional[ClipboardStore] = None,
) -> ClipboardStore:
    """
    Define the ``clipboard`` effect on ``kernel``.

    The effect value is a mapping with ``items`` and optionally ``source``,
    ``mode`` and ``text``. Text is also written to ``system`` when given.

    Returns:
        The store the effect writes to
    """
    store = store if store is not None else ClipboardStore()

    def write(value: Dict[str, Any]) -> None:
        entry = store.write(
            value.get("items", ()),
            source=value.get("source"),
            mode=value.get("mode", COPY),
            text=value.get("text", ""),
        )
        logger.debug(f"Clipboard {entry.mode}: {len(entry.items)} item(s) from {entry.source}")
        if system is not None and entry.text:
            system.write_text(entry.text)

    kernel.define_effect(CLIPBOARD_EFFECT, write)
    return store


# =============================================================================
# Paste bubbling
# =============================================================================


@dataclass(frozen=True)
class CollectionNode:
    """A paste destination in the collection tree."""

    id: str
    parent_id: Optional[str]
    # payload -> accepted (possibly transformed) payload, or None to reject
    accept: Callable[[Any], Any]
    contains_item: Callable[[str], bool]


@dataclass(frozen=True)
class PasteTarget:
    collection_id: str
    data: Any


def find_accepting_collection(
    focused_id: Optional[str],
    payload: Any,
    collections: Sequence[CollectionNode],
    start_id: Optional[str] = None,
) -> Optional[PasteTarget]:
    """
    Collection that takes ``payload`` when pasting at ``focused_id``.

    Starts at the collection containing the focused item (``start_id``, then
    the root, when no collection contains it) and walks parent links until
    one accepts.

    Returns:
        The accepting collection and the accepted data, or None if every
        collection on the way rejected the payload
    """
    if not collections:
        return None

    by_id = {node.id: node for node in collections}
    start = None
    if focused_id is not None:
        start = next((n for n in collections if n.contains_item(focused_id)), None)
    if start is None and start_id is not None:
        start = by_id.get(start_id)
    if start is None:
        start = next((n for n in collections if n.parent_id is None), None)

    seen = set()
    node = start
    while node is not None and node.id not in seen:
        seen.add(node.id)
        accepted = node.accept(payload)
        if accepted is not None:
            return PasteTarget(node.id, accepted)
        node = by_id.get(node.parent_id) if node.parent_id is not None else None

    logger.debug(f"Paste at {focused_id} rejected by every collection")
    return None
