"""
Zone registry.

A zone is a registered, focusable container implementing one ARIA
interaction pattern. The registry maps zone ids to their metadata: the
role-resolved config, the ordered item ids, the element handle, the parent
zone, and the optional interaction capabilities.

The registry is a plain object with an explicit lifecycle. Create one per
kernel; tests create as many as they like.

Usage:
    registry = ZoneRegistry()
    registry.register("list", ZoneEntry.create("list", role="listbox", items=["a", "b"]))

    entry = registry.get("list")
    items = registry.get_items("list")

    registry.dispose()
"""

import logging
from dataclasses import dataclass, field, fields, replace
from typing import Any, Callable, Dict, List, Optional, Sequence, Set, Tuple, Union

from ..exceptions import DuplicateZoneError
from ..kernel.commands import Command
from ..roles import ZoneConfig, resolve_role

logger = logging.getLogger(__name__)

CommandResult = Union[Command, Sequence[Command], None]


@dataclass(frozen=True)
class ZoneCursor:
    """Target of an interaction command, handed to a capability exactly once.

    ``selection`` is empty when nothing is selected; callbacks then treat
    ``focus_id`` as an implicit single-item selection.
    """

    focus_id: str
    selection: Tuple[str, ...] = ()
    anchor: Optional[str] = None
    is_expandable: bool = False
    is_disabled: bool = False

    @property
    def targets(self) -> Tuple[str, ...]:
        """Ids the operation applies to: the selection, else the focused item."""
        return self.selection or (self.focus_id,)


@dataclass(frozen=True)
class ZoneCapabilities:
    """Optional per-zone interaction callbacks and item providers."""

    # Cursor callbacks: (cursor) -> command | [commands] | None
    on_delete: Optional[Callable[[ZoneCursor], CommandResult]] = None
    on_copy: Optional[Callable[[ZoneCursor], CommandResult]] = None
    on_cut: Optional[Callable[[ZoneCursor], CommandResult]] = None
    on_paste: Optional[Callable[[ZoneCursor], CommandResult]] = None
    on_move_up: Optional[Callable[[ZoneCursor], CommandResult]] = None
    on_move_down: Optional[Callable[[ZoneCursor], CommandResult]] = None
    on_check: Optional[Callable[[ZoneCursor], CommandResult]] = None
    on_action: Optional[Callable[[ZoneCursor], CommandResult]] = None
    on_commit: Optional[Callable[[ZoneCursor], CommandResult]] = None
    # Drop: (cursor, over_item_id) -> commands
    on_drop: Optional[Callable[[ZoneCursor, Optional[str]], CommandResult]] = None

    # Static commands
    on_undo: Optional[Command] = None
    on_redo: Optional[Command] = None
    on_dismiss: Optional[Command] = None

    # Item providers
    get_items: Optional[Callable[[], Sequence[str]]] = None
    item_filter: Optional[Callable[[Sequence[str]], Sequence[str]]] = None
    get_label: Optional[Callable[[str], str]] = None
    is_expandable: Optional[Callable[[str], bool]] = None

    def has(self, name: str) -> bool:
        return getattr(self, name, None) is not None

    def names(self) -> List[str]:
        """Names of the capabilities that are present."""
        return [f.name for f in fields(self) if getattr(self, f.name) is not None]


@dataclass(frozen=True)
class ZoneEntry:
    """Metadata of one registered zone."""

    zone_id: str
    config: ZoneConfig = field(default_factory=ZoneConfig)
    role: Optional[str] = None
    parent_id: Optional[str] = None
    items: Tuple[str, ...] = ()
    element: Any = None
    capabilities: ZoneCapabilities = field(default_factory=ZoneCapabilities)

    @classmethod
    def create(
        cls,
        zone_id: str,
        role: Optional[str] = None,
        items: Sequence[str] = (),
        parent_id: Optional[str] = None,
        element: Any = None,
        overrides: Optional[Dict[str, Dict[str, Any]]] = None,
        **capabilities: Any,
    ) -> "ZoneEntry":
        """Build an entry, resolving the role preset and wrapping capabilities."""
        return cls(
            zone_id=zone_id,
            config=resolve_role(role, overrides),
            role=role,
            parent_id=parent_id,
            items=tuple(items),
            element=element,
            capabilities=ZoneCapabilities(**capabilities),
        )

    def is_expandable(self, item_id: str) -> bool:
        if self.capabilities.is_expandable is not None:
            return bool(self.capabilities.is_expandable(item_id))
        return self.config.expand.mode == "all"


class ZoneRegistry:
    """Map of zone id to ZoneEntry, plus per-zone disabled items."""

    def __init__(self) -> None:
        self._entries: Dict[str, ZoneEntry] = {}
        self._disabled: Dict[str, Set[str]] = {}

    def register(self, zone_id: str, entry: ZoneEntry) -> ZoneEntry:
        """
        Register (or replace) a zone.

        Raises:
            DuplicateZoneError: the id is mounted by a different element
        """
        existing = self._entries.get(zone_id)
        if (
            existing is not None
            and existing.element is not None
            and entry.element is not None
            and existing.element is not entry.element
        ):
            raise DuplicateZoneError(zone_id=zone_id)

        if entry.zone_id != zone_id:
            entry = replace(entry, zone_id=zone_id)

        self._entries[zone_id] = entry
        logger.debug(f"Registered zone {zone_id} (role={entry.role}, items={len(entry.items)})")
        return entry

    def unregister(self, zone_id: str) -> None:
        self._entries.pop(zone_id, None)
        self._disabled.pop(zone_id, None)

    def get(self, zone_id: Optional[str]) -> Optional[ZoneEntry]:
        if zone_id is None:
            return None
        return self._entries.get(zone_id)

    def has(self, zone_id: str) -> bool:
        return zone_id in self._entries

    def keys(self) -> List[str]:
        return list(self._entries.keys())

    def ordered_keys(self) -> List[str]:
        """Zone ids in registration order."""
        return self.keys()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, zone_id: object) -> bool:
        return zone_id in self._entries

    def children(self, parent_id: Optional[str]) -> List[str]:
        return [zid for zid, e in self._entries.items() if e.parent_id == parent_id]

    def ancestors(self, zone_id: str) -> List[str]:
        """Parent chain of ``zone_id``, nearest first. Unknown parents end the chain."""
        chain: List[str] = []
        entry = self._entries.get(zone_id)
        while entry is not None and entry.parent_id is not None:
            parent_id = entry.parent_id
            if parent_id not in self._entries or parent_id in chain or parent_id == zone_id:
                break
            chain.append(parent_id)
            entry = self._entries[parent_id]
        return chain

    def zone_path(self, zone_id: Optional[str]) -> List[str]:
        """``zone_id`` followed by its ancestors."""
        if zone_id is None or zone_id not in self._entries:
            return []
        return [zone_id] + self.ancestors(zone_id)

    def root_of(self, zone_id: str) -> str:
        path = self.zone_path(zone_id)
        return path[-1] if path else zone_id

    def set_items(self, zone_id: str, items: Sequence[str]) -> None:
        entry = self._entries.get(zone_id)
        if entry is None:
            return
        self._entries[zone_id] = replace(entry, items=tuple(items))

    def get_items(self, zone_id: Optional[str]) -> Tuple[str, ...]:
        """Live item ids of a zone, after the zone's item provider and filter."""
        entry = self.get(zone_id)
        if entry is None:
            return ()
        caps = entry.capabilities
        items: Sequence[str] = caps.get_items() if caps.get_items is not None else entry.items
        if caps.item_filter is not None:
            items = caps.item_filter(items)
        return tuple(items)

    def zone_of_item(self, item_id: str) -> Optional[str]:
        for zone_id in self._entries:
            if item_id in self.get_items(zone_id):
                return zone_id
        return None

    def set_disabled(self, zone_id: str, item_id: str, disabled: bool = True) -> None:
        bucket = self._disabled.setdefault(zone_id, set())
        if disabled:
            bucket.add(item_id)
        else:
            bucket.discard(item_id)

    def is_disabled(self, zone_id: str, item_id: str) -> bool:
        return item_id in self._disabled.get(zone_id, ())

    def disabled_items(self, zone_id: str) -> Set[str]:
        return set(self._disabled.get(zone_id, ()))

    def dispose(self) -> None:
        """Drop every zone. The registry can be reused afterwards."""
        self._entries.clear()
        self._disabled.clear()
