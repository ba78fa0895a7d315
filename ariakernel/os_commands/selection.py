"""
Selection commands.

OS_SELECT applies the zone's selection policy (single, multiple, none) to a
target item. The OS_SELECTION_* commands edit the selection directly and
ignore the policy; apps and tests use them to set up or sync selection.
"""

from typing import Any, Dict, Optional

from ..kernel.commands import Command
from ..kernel.core import DispatchContext, Kernel
from ..state import ZoneState, set_zone_state
from ..zones.registry import ZoneEntry
from ..zones.selection import (
    select_add,
    select_all,
    select_clear,
    select_range,
    select_remove,
    select_set,
    select_toggle,
)
from .common import focused_item, payload_get, target_zone
from .types import (
    OS_ACTIVATE,
    OS_DESELECT_ALL,
    OS_SELECT,
    OS_SELECT_ALL,
    SELECTION_ADD,
    SELECTION_CLEAR,
    SELECTION_REMOVE,
    SELECTION_SET,
    SELECTION_TOGGLE,
)

REPLACE = "replace"
TOGGLE = "toggle"
RANGE = "range"
ADD = "add"


def _commit(ctx: DispatchContext, zone_id: str, zone: ZoneState) -> Dict[str, Any]:
    if zone is ctx.state.focus.zone(zone_id):
        return {}
    return {"state": set_zone_state(ctx.state, zone_id, zone)}


def apply_select(zone: ZoneState, entry: ZoneEntry, items, target_id: str, mode: str) -> ZoneState:
    """Selection after selecting ``target_id`` with ``mode`` under the zone's policy."""
    config = entry.config.select

    if config.mode == "multiple":
        if mode == TOGGLE:
            toggled = select_toggle(zone, target_id)
            if config.disallow_empty and not toggled.selection:
                return zone
            return toggled
        if mode == ADD:
            return select_add(zone, target_id)
        if mode == RANGE:
            return select_range(zone, list(items) or [target_id], target_id)
        return select_set(zone, [target_id], items)

    # single, and explicit selection in "none" zones
    if mode == TOGGLE and target_id in zone.selection:
        return zone if config.disallow_empty else select_clear(zone)
    if zone.selection == (target_id,):
        return zone
    return select_set(zone, [target_id], items)


def select_handler(ctx: DispatchContext, payload: Any) -> Optional[Dict[str, Any]]:
    zone_id, entry = target_zone(ctx, payload)
    if entry is None:
        return None

    items = ctx.zones.get_items(zone_id)
    target = payload_get(payload, "target_id") or focused_item(ctx, zone_id, items)
    if target is None or (items and target not in items):
        return None
    if ctx.zones.is_disabled(zone_id, target):
        return {}

    if entry.config.select.mode == "none" and entry.config.activate.mode == "automatic":
        return {"dispatch": [Command(OS_ACTIVATE, {"zone_id": zone_id, "item_id": target})]}

    zone = ctx.state.focus.zone(zone_id)
    mode = payload_get(payload, "mode", REPLACE)
    return _commit(ctx, zone_id, apply_select(zone, entry, items, target, mode))


def select_all_handler(ctx: DispatchContext, payload: Any) -> Optional[Dict[str, Any]]:
    zone_id, entry = target_zone(ctx, payload)
    if entry is None:
        return None
    if entry.config.select.mode != "multiple":
        return {}
    zone = ctx.state.focus.zone(zone_id)
    return _commit(ctx, zone_id, select_all(zone, ctx.zones.get_items(zone_id)))


def deselect_all_handler(ctx: DispatchContext, payload: Any) -> Optional[Dict[str, Any]]:
    zone_id, entry = target_zone(ctx, payload)
    if entry is None:
        return None
    if entry.config.select.disallow_empty:
        return {}
    return _commit(ctx, zone_id, select_clear(ctx.state.focus.zone(zone_id)))


# =============================================================================
# Raw selection edits
# =============================================================================


def _raw(update):
    def handler(ctx: DispatchContext, payload: Any) -> Optional[Dict[str, Any]]:
        zone_id, entry = target_zone(ctx, payload)
        if entry is None:
            return None
        items = ctx.zones.get_items(zone_id)
        zone = update(ctx.state.focus.zone(zone_id), payload, items)
        if zone is None:
            return {}
        return _commit(ctx, zone_id, zone)

    return handler


def _live(item_id: Optional[str], items) -> bool:
    return item_id is not None and (not items or item_id in items)


def _set(zone: ZoneState, payload: Any, items) -> ZoneState:
    return select_set(zone, payload_get(payload, "ids", ()), items)


def _add(zone: ZoneState, payload: Any, items) -> Optional[ZoneState]:
    item_id = payload_get(payload, "item_id")
    return select_add(zone, item_id) if _live(item_id, items) else None


def _remove(zone: ZoneState, payload: Any, items) -> Optional[ZoneState]:
    item_id = payload_get(payload, "item_id")
    return select_remove(zone, item_id) if item_id is not None else None


def _toggle(zone: ZoneState, payload: Any, items) -> Optional[ZoneState]:
    item_id = payload_get(payload, "item_id")
    if item_id in zone.selection:
        return select_remove(zone, item_id)
    return select_add(zone, item_id) if _live(item_id, items) else None


def _clear(zone: ZoneState, payload: Any, items) -> ZoneState:
    return select_clear(zone)


def install(kernel: Kernel) -> None:
    kernel.define_command(OS_SELECT, select_handler)
    kernel.define_command(OS_SELECT_ALL, select_all_handler)
    kernel.define_command(OS_DESELECT_ALL, deselect_all_handler)
    kernel.define_command(SELECTION_SET, _raw(_set))
    kernel.define_command(SELECTION_ADD, _raw(_add))
    kernel.define_command(SELECTION_REMOVE, _raw(_remove))
    kernel.define_command(SELECTION_TOGGLE, _raw(_toggle))
    kernel.define_command(SELECTION_CLEAR, _raw(_clear))
