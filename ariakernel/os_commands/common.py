"""Helpers shared by the OS command handlers."""

from typing import Any, Dict, Optional, Sequence, Tuple

from ..kernel.commands import Command
from ..kernel.core import DispatchContext
from ..state import KernelState, set_active_zone, set_zone_state, update_zone
from ..zones.registry import ZoneCursor, ZoneEntry
from ..zones.resolve import resolve_item_id, resolve_selection
from ..zones.selection import follow_focus

FOCUS_EFFECT = "focus"


def payload_get(payload: Any, key: str, default: Any = None) -> Any:
    if isinstance(payload, dict):
        return payload.get(key, default)
    return default


def target_zone(ctx: DispatchContext, payload: Any) -> Tuple[Optional[str], Optional[ZoneEntry]]:
    """Zone named in the payload, else the active zone."""
    zone_id = payload_get(payload, "zone_id") or ctx.state.focus.active_zone_id
    return zone_id, ctx.zones.get(zone_id)


def focused_item(ctx: DispatchContext, zone_id: str, items: Optional[Sequence[str]] = None) -> Optional[str]:
    """The zone's focused item, reconciled against its live items."""
    zone = ctx.state.focus.zone(zone_id)
    if items is None:
        items = ctx.zones.get_items(zone_id)
    if not items:
        return zone.focused_item_id
    return resolve_item_id(zone.focused_item_id, items, zone.last_focused_index)


def build_cursor(ctx: DispatchContext, zone_id: str, focus_id: Optional[str] = None) -> Optional[ZoneCursor]:
    """Cursor over the zone's focused item and live selection, or None without focus."""
    entry = ctx.zones.get(zone_id)
    if entry is None:
        return None
    items = ctx.zones.get_items(zone_id)
    focus_id = focus_id or focused_item(ctx, zone_id, items)
    if focus_id is None:
        return None
    zone = ctx.state.focus.zone(zone_id)
    selection = resolve_selection(zone.selection, items) if items else zone.selection
    anchor = zone.selection_anchor if zone.selection_anchor in selection else None
    return ZoneCursor(
        focus_id=focus_id,
        selection=tuple(selection),
        anchor=anchor,
        is_expandable=entry.is_expandable(focus_id),
        is_disabled=ctx.zones.is_disabled(zone_id, focus_id),
    )


def as_commands(result: Any) -> Tuple[Command, ...]:
    """Normalize a capability's return value (command, list of commands, None)."""
    if result is None:
        return ()
    if isinstance(result, Command):
        return (result,)
    return tuple(c for c in result if c is not None)


def dispatch_effects(result: Any) -> Dict[str, Any]:
    commands = as_commands(result)
    return {"dispatch": list(commands)} if commands else {}


def apply_focus(
    state: KernelState,
    entry: ZoneEntry,
    item_id: Optional[str],
    items: Sequence[str] = (),
    follow: bool = True,
    **changes: Any,
) -> KernelState:
    """Focus ``item_id`` in ``entry``'s zone and make that zone active."""
    zone_id = entry.zone_id
    if item_id is not None:
        changes.setdefault("focused_item_id", item_id)
        changes["last_focused_id"] = item_id
        if item_id in items:
            changes["last_focused_index"] = list(items).index(item_id)
    state = update_zone(state, zone_id, **changes)
    if item_id is not None and follow:
        zone = state.focus.zone(zone_id)
        followed = follow_focus(zone, item_id, entry.config.select)
        if followed is not zone:
            state = set_zone_state(state, zone_id, followed)
    return set_active_zone(state, zone_id)


def focus_effects(entry: ZoneEntry, state: KernelState, item_id: Optional[str]) -> Dict[str, Any]:
    """State effect plus the host focus effect (skipped for virtual focus)."""
    effects: Dict[str, Any] = {"state": state}
    if item_id is not None and not entry.config.project.virtual_focus:
        effects[FOCUS_EFFECT] = {"zone_id": entry.zone_id, "item_id": item_id}
    return effects


def set_expanded(state: KernelState, zone_id: str, item_id: str, expanded: bool) -> KernelState:
    current = state.focus.zone(zone_id).expanded_items
    if (item_id in current) == expanded:
        return state
    items = current | {item_id} if expanded else current - {item_id}
    return update_zone(state, zone_id, expanded_items=frozenset(items))
