"""
Interaction commands.

Each command builds one ZoneCursor from the focused item and the live
selection, hands it to the zone's capability exactly once, and dispatches
whatever commands the capability returns. Selection is left alone: a
delete or cut never clears it, the app decides.
"""

import logging
from typing import Any, Callable, Dict, Optional

from ..kernel.commands import Command
from ..kernel.core import DispatchContext, Kernel
from ..state import set_active_zone, update_zone
from .common import build_cursor, dispatch_effects, focused_item, payload_get, set_expanded, target_zone
from .selection import TOGGLE, apply_select
from .types import (
    OS_ACTIVATE,
    OS_CHECK,
    OS_COPY,
    OS_CUT,
    OS_DELETE,
    OS_DRAG_END,
    OS_ESCAPE,
    OS_EXPAND,
    OS_FOCUS,
    OS_MOVE_DOWN,
    OS_MOVE_UP,
    OS_PASTE,
    OS_REDO,
    OS_UNDO,
)

logger = logging.getLogger(__name__)


def _cursor_command(capability: str) -> Callable[[DispatchContext, Any], Optional[Dict[str, Any]]]:
    """Handler invoking ``capability`` with the zone cursor."""

    def handler(ctx: DispatchContext, payload: Any) -> Optional[Dict[str, Any]]:
        zone_id, entry = target_zone(ctx, payload)
        if entry is None:
            return None
        callback = getattr(entry.capabilities, capability)
        if callback is None:
            return None
        cursor = build_cursor(ctx, zone_id, payload_get(payload, "item_id"))
        if cursor is None:
            return {}
        return dispatch_effects(callback(cursor))

    handler.__name__ = f"{capability}_handler"
    return handler


def activate_handler(ctx: DispatchContext, payload: Any) -> Optional[Dict[str, Any]]:
    zone_id, entry = target_zone(ctx, payload)
    if entry is None:
        return None
    cursor = build_cursor(ctx, zone_id, payload_get(payload, "item_id"))
    if cursor is None:
        return None
    if cursor.is_disabled:
        return {}

    if entry.capabilities.on_action is not None:
        return dispatch_effects(entry.capabilities.on_action(cursor))
    if cursor.is_expandable:
        expanded = cursor.focus_id in ctx.state.focus.zone(zone_id).expanded_items
        return {"state": set_expanded(ctx.state, zone_id, cursor.focus_id, not expanded)}
    return None


def check_handler(ctx: DispatchContext, payload: Any) -> Optional[Dict[str, Any]]:
    zone_id, entry = target_zone(ctx, payload)
    if entry is None:
        return None
    items = ctx.zones.get_items(zone_id)
    target = payload_get(payload, "target_id") or focused_item(ctx, zone_id, items)
    if target is None:
        return None

    if entry.capabilities.on_check is not None:
        cursor = build_cursor(ctx, zone_id, target)
        return dispatch_effects(entry.capabilities.on_check(cursor))

    if entry.config.check.mode == "none":
        return None
    if ctx.zones.is_disabled(zone_id, target):
        return {}
    zone = ctx.state.focus.zone(zone_id)
    updated = apply_select(zone, entry, items, target, TOGGLE)
    if updated is zone:
        return {}
    return {"state": update_zone(ctx.state, zone_id, selection=updated.selection, selection_anchor=updated.selection_anchor)}


def expand_handler(ctx: DispatchContext, payload: Any) -> Optional[Dict[str, Any]]:
    zone_id, entry = target_zone(ctx, payload)
    if entry is None:
        return None
    item_id = payload_get(payload, "item_id") or focused_item(ctx, zone_id)
    if item_id is None or not entry.is_expandable(item_id):
        return {}

    action = payload_get(payload, "action", "toggle")
    is_open = item_id in ctx.state.focus.zone(zone_id).expanded_items
    if action == "expand":
        expanded = True
    elif action == "collapse":
        expanded = False
    else:
        expanded = not is_open
    state = set_expanded(ctx.state, zone_id, item_id, expanded)
    return {"state": state} if state is not ctx.state else {}


def escape_handler(ctx: DispatchContext, payload: Any) -> Optional[Dict[str, Any]]:
    zone_id, entry = target_zone(ctx, payload)
    if entry is None:
        return None
    zone = ctx.state.focus.zone(zone_id)

    if zone.editing_item_id is not None:
        return {"state": update_zone(ctx.state, zone_id, editing_item_id=None)}

    behavior = entry.config.dismiss.escape
    if payload_get(payload, "reason") == "outside_click":
        behavior = entry.config.dismiss.outside_click
    if behavior == "close":
        commands = []
        if entry.capabilities.on_dismiss is not None:
            commands.append(entry.capabilities.on_dismiss)
        state = update_zone(ctx.state, zone_id, return_focus=None)
        returning = zone.return_focus if entry.config.tab.restore_focus else None
        if returning is not None and ctx.zones.has(returning[0]):
            commands.append(Command(OS_FOCUS, {"zone_id": returning[0], "item_id": returning[1]}))
        else:
            state = set_active_zone(state, None)
        logger.debug(f"Dismissed zone {zone_id}")
        return {"state": state, "dispatch": commands}

    if behavior == "deselect":
        if not zone.selection or entry.config.select.disallow_empty:
            return {}
        return {"state": update_zone(ctx.state, zone_id, selection=(), selection_anchor=None)}

    return None


def _history_command(capability: str) -> Callable[[DispatchContext, Any], Optional[Dict[str, Any]]]:
    """Dispatch the nearest zone's undo/redo command."""

    def handler(ctx: DispatchContext, payload: Any) -> Optional[Dict[str, Any]]:
        zone_id, _ = target_zone(ctx, payload)
        for candidate in ctx.zones.zone_path(zone_id):
            entry = ctx.zones.get(candidate)
            command = getattr(entry.capabilities, capability) if entry is not None else None
            if command is not None:
                return {"dispatch": [command]}
        return None

    return handler


def drag_end_handler(ctx: DispatchContext, payload: Any) -> Optional[Dict[str, Any]]:
    zone_id, entry = target_zone(ctx, payload)
    if entry is None or entry.capabilities.on_drop is None:
        return None
    cursor = build_cursor(ctx, zone_id, payload_get(payload, "item_id"))
    if cursor is None:
        return {}
    return dispatch_effects(entry.capabilities.on_drop(cursor, payload_get(payload, "over_id")))


def install(kernel: Kernel) -> None:
    kernel.define_command(OS_ACTIVATE, activate_handler)
    kernel.define_command(OS_CHECK, check_handler)
    kernel.define_command(OS_EXPAND, expand_handler)
    kernel.define_command(OS_ESCAPE, escape_handler)
    kernel.define_command(OS_DELETE, _cursor_command("on_delete"))
    kernel.define_command(OS_COPY, _cursor_command("on_copy"))
    kernel.define_command(OS_CUT, _cursor_command("on_cut"))
    kernel.define_command(OS_PASTE, _cursor_command("on_paste"))
    kernel.define_command(OS_MOVE_UP, _cursor_command("on_move_up"))
    kernel.define_command(OS_MOVE_DOWN, _cursor_command("on_move_down"))
    kernel.define_command(OS_UNDO, _history_command("on_undo"))
    kernel.define_command(OS_REDO, _history_command("on_redo"))
    kernel.define_command(OS_DRAG_END, drag_end_handler)


