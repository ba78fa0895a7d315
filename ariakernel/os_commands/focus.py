"""
Focus commands and zone lifecycle.

OS_FOCUS moves focus to an item (or just activates a zone), OS_SYNC_FOCUS
records focus the host moved on its own, and OS_RECOVER re-homes focus
after the focused item disappeared.
"""

import logging
from typing import Any, Dict, Optional, Sequence

from ..kernel.commands import Command
from ..kernel.core import DispatchContext, Kernel
from ..navigation.recovery import find_recovery_target
from ..navigation.roving import resolve_entry
from ..state import remove_zone_state, set_active_zone, update_zone
from ..zones.registry import ZoneEntry
from .common import apply_focus, focus_effects, payload_get, target_zone
from .types import OS_FOCUS, OS_RECOVER, OS_SYNC_FOCUS

logger = logging.getLogger(__name__)


def focus_handler(ctx: DispatchContext, payload: Any) -> Optional[Dict[str, Any]]:
    zone_id, entry = target_zone(ctx, payload)
    if entry is None:
        return None

    item_id = payload_get(payload, "item_id")
    state = ctx.state
    previous_zone = state.focus.active_zone_id

    if entry.config.tab.restore_focus and previous_zone not in (None, zone_id):
        returning = (previous_zone, state.focus.zone(previous_zone).focused_item_id)
        state = update_zone(state, zone_id, return_focus=returning)

    if item_id is None:
        return {"state": set_active_zone(state, zone_id)}

    items = ctx.zones.get_items(zone_id)
    if items and item_id not in items:
        logger.debug(f"OS_FOCUS ignored: {item_id} is not an item of {zone_id}")
        return None

    state = apply_focus(
        state,
        entry,
        item_id,
        items,
        follow=payload_get(payload, "follow_focus", True),
        sticky_x=None,
        sticky_y=None,
    )
    return focus_effects(entry, state, item_id)


def sync_focus_handler(ctx: DispatchContext, payload: Any) -> Optional[Dict[str, Any]]:
    """Host focus already moved; record it without focusing again."""
    zone_id, entry = target_zone(ctx, payload)
    item_id = payload_get(payload, "item_id")
    if entry is None or item_id is None:
        return None
    if ctx.state.focus.active_zone_id == zone_id and ctx.state.focus.zone(zone_id).focused_item_id == item_id:
        return {}
    items = ctx.zones.get_items(zone_id)
    return {"state": apply_focus(ctx.state, entry, item_id, items, follow=False)}


def recover_handler(ctx: DispatchContext, payload: Any) -> Optional[Dict[str, Any]]:
    zone_id, entry = target_zone(ctx, payload)
    if entry is None:
        return None

    zone = ctx.state.focus.zone(zone_id)
    items = ctx.zones.get_items(zone_id)
    if not items or zone.focused_item_id is None or zone.focused_item_id in items:
        return {}

    result = find_recovery_target(items, zone.last_focused_index, entry.config.navigate.recovery)
    if result.target_id is None:
        return {}

    logger.debug(f"Recovered focus in {zone_id}: {zone.focused_item_id} -> {result.target_id} ({result.reason})")
    state = apply_focus(ctx.state, entry, result.target_id, items, follow=False)
    if ctx.state.focus.active_zone_id != zone_id:
        state = set_active_zone(state, ctx.state.focus.active_zone_id)
        return {"state": state}
    return focus_effects(entry, state, result.target_id)


# =============================================================================
# Zone lifecycle
# =============================================================================


def mount_zone(kernel: Kernel, entry: ZoneEntry, initial_focus: Optional[str] = None) -> ZoneEntry:
    """
    Register a zone and apply its auto-focus policy.

    Zones with ``project.auto_focus`` (menus, dialogs) take focus on mount at
    their entry item, remembering where focus came from when the zone
    restores focus on close.
    """
    entry = kernel.zones.register(entry.zone_id, entry)

    if initial_focus is not None:
        kernel.dispatch(Command(OS_FOCUS, {"zone_id": entry.zone_id, "item_id": initial_focus}))
    elif entry.config.project.auto_focus:
        items = kernel.zones.get_items(entry.zone_id)
        zone = kernel.get_state().focus.zone(entry.zone_id)
        target = resolve_entry(items, entry.config.navigate.entry, zone.last_focused_id, zone.selection)
        kernel.dispatch(Command(OS_FOCUS, {"zone_id": entry.zone_id, "item_id": target}))

    return entry


def restore_target(kernel: Kernel, zone_id: str):
    """(zone_id, item_id) a closing zone hands focus back to, if any."""
    entry = kernel.zones.get(zone_id)
    if entry is None or not entry.config.tab.restore_focus:
        return None
    return kernel.get_state().focus.zone(zone_id).return_focus


def unmount_zone(kernel: Kernel, zone_id: str, keep_state: bool = False) -> None:
    """Unregister a zone, handing focus back when it restores focus."""
    returning = restore_target(kernel, zone_id)
    kernel.zones.unregister(zone_id)

    state = kernel.get_state()
    if not keep_state:
        state = remove_zone_state(state, zone_id)
    elif state.focus.active_zone_id == zone_id:
        state = set_active_zone(state, None)
    if state is not kernel.get_state():
        kernel.set_state(state)

    if returning is not None and kernel.zones.has(returning[0]):
        kernel.dispatch(Command(OS_FOCUS, {"zone_id": returning[0], "item_id": returning[1]}))


def set_items(kernel: Kernel, zone_id: str, items: Sequence[str]) -> None:
    """Update a zone's items and recover focus if the focused item left."""
    kernel.zones.set_items(zone_id, items)
    zone = kernel.get_state().focus.zone(zone_id)
    if zone.focused_item_id is not None and zone.focused_item_id not in items:
        kernel.dispatch(Command(OS_RECOVER, {"zone_id": zone_id}))


def install(kernel: Kernel) -> None:
    kernel.define_command(OS_FOCUS, focus_handler)
    kernel.define_command(OS_SYNC_FOCUS, sync_focus_handler)
    kernel.define_command(OS_RECOVER, recover_handler)


__all__ = ["mount_zone", "unmount_zone", "set_items", "restore_target", "install"]
