"""
Immutable kernel state.

The kernel owns a single ``KernelState`` value. Every change produces a new
value through the update helpers below; nothing is mutated in place, which
lets history detect data changes with an identity check.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple


@dataclass(frozen=True)
class ZoneState:
    """Focus, selection and ephemeral interaction state of one zone."""

    focused_item_id: Optional[str] = None
    last_focused_id: Optional[str] = None
    last_focused_index: Optional[int] = None
    selection: Tuple[str, ...] = ()
    selection_anchor: Optional[str] = None
    expanded_items: FrozenSet[str] = frozenset()
    editing_item_id: Optional[str] = None
    sticky_x: Optional[float] = None
    sticky_y: Optional[float] = None
    values: Mapping[str, float] = field(default_factory=dict)
    typeahead_query: str = ""
    typeahead_at: Optional[float] = None
    # (zone_id, item_id) focused before this zone took focus, for restore_focus
    return_focus: Optional[Tuple[str, Optional[str]]] = None


@dataclass(frozen=True)
class FocusState:
    active_zone_id: Optional[str] = None
    zones: Mapping[str, ZoneState] = field(default_factory=dict)

    def zone(self, zone_id: Optional[str]) -> ZoneState:
        """State of ``zone_id``, or a blank state when the zone is unknown."""
        if zone_id is None:
            return ZoneState()
        return self.zones.get(zone_id) or ZoneState()


@dataclass(frozen=True)
class HistoryEntry:
    """One undoable step."""

    command: Dict[str, Any]  # {"type": ..., "payload": ...}
    timestamp: float
    snapshot: "AppState"
    focused_item_id: Optional[str] = None
    active_zone_id: Optional[str] = None
    group_id: Optional[str] = None


@dataclass(frozen=True)
class HistoryState:
    past: Tuple[HistoryEntry, ...] = ()
    future: Tuple[HistoryEntry, ...] = ()

    @property
    def can_undo(self) -> bool:
        return bool(self.past)

    @property
    def can_redo(self) -> bool:
        return bool(self.future)


@dataclass(frozen=True)
class AppState:
    """Application slice: domain data, UI data, and its undo history."""

    data: Any = None
    ui: Any = None
    history: HistoryState = field(default_factory=HistoryState)

    def without_history(self) -> "AppState":
        return AppState(data=self.data, ui=self.ui)


@dataclass(frozen=True)
class KernelState:
    focus: FocusState = field(default_factory=FocusState)
    apps: Mapping[str, AppState] = field(default_factory=dict)


# =============================================================================
# Update helpers
# =============================================================================


def update_zone(state: KernelState, zone_id: str, **changes: Any) -> KernelState:
    """Return ``state`` with ``changes`` applied to one zone's state."""
    zones = dict(state.focus.zones)
    zones[zone_id] = replace(state.focus.zone(zone_id), **changes)
    return replace(state, focus=replace(state.focus, zones=zones))


def set_zone_state(state: KernelState, zone_id: str, zone_state: ZoneState) -> KernelState:
    zones = dict(state.focus.zones)
    zones[zone_id] = zone_state
    return replace(state, focus=replace(state.focus, zones=zones))


def remove_zone_state(state: KernelState, zone_id: str) -> KernelState:
    if zone_id not in state.focus.zones:
        return state
    zones = {k: v for k, v in state.focus.zones.items() if k != zone_id}
    active = None if state.focus.active_zone_id == zone_id else state.focus.active_zone_id
    return replace(state, focus=FocusState(active_zone_id=active, zones=zones))


def set_active_zone(state: KernelState, zone_id: Optional[str]) -> KernelState:
    if state.focus.active_zone_id == zone_id:
        return state
    return replace(state, focus=replace(state.focus, active_zone_id=zone_id))


def get_app(state: KernelState, app_id: str) -> AppState:
    return state.apps.get(app_id) or AppState()


def set_app(state: KernelState, app_id: str, app_state: AppState) -> KernelState:
    apps = dict(state.apps)
    apps[app_id] = app_state
    return replace(state, apps=apps)
