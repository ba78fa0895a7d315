"""Inline field editing: start, commit, cancel."""

from typing import Any, Dict, Optional

from ..kernel.core import DispatchContext, Kernel
from ..state import update_zone
from .common import build_cursor, dispatch_effects, focused_item, payload_get, target_zone
from .types import OS_FIELD_CANCEL, OS_FIELD_COMMIT, OS_FIELD_START_EDIT


def start_edit_handler(ctx: DispatchContext, payload: Any) -> Optional[Dict[str, Any]]:
    zone_id, entry = target_zone(ctx, payload)
    if entry is None:
        return None
    item_id = payload_get(payload, "item_id") or focused_item(ctx, zone_id)
    if item_id is None or ctx.zones.is_disabled(zone_id, item_id):
        return {}
    return {"state": update_zone(ctx.state, zone_id, editing_item_id=item_id)}


def commit_handler(ctx: DispatchContext, payload: Any) -> Optional[Dict[str, Any]]:
    zone_id, entry = target_zone(ctx, payload)
    if entry is None:
        return None
    editing = ctx.state.focus.zone(zone_id).editing_item_id
    if editing is None:
        return None

    effects: Dict[str, Any] = {"state": update_zone(ctx.state, zone_id, editing_item_id=None)}
    if entry.capabilities.on_commit is not None:
        cursor = build_cursor(ctx, zone_id, editing)
        if cursor is not None:
            effects.update(dispatch_effects(entry.capabilities.on_commit(cursor)))
    return effects


def cancel_handler(ctx: DispatchContext, payload: Any) -> Optional[Dict[str, Any]]:
    zone_id, entry = target_zone(ctx, payload)
    if entry is None or ctx.state.focus.zone(zone_id).editing_item_id is None:
        return None
    return {"state": update_zone(ctx.state, zone_id, editing_item_id=None)}


def install(kernel: Kernel) -> None:
    kernel.define_command(OS_FIELD_START_EDIT, start_edit_handler)
    kernel.define_command(OS_FIELD_COMMIT, commit_handler)
    kernel.define_command(OS_FIELD_CANCEL, cancel_handler)
