"""
Navigation commands: OS_NAVIGATE, OS_TAB, OS_TYPEAHEAD.

OS_NAVIGATE resolves the move with the zone's strategy. A seamless zone
that cannot move any further hands focus to the sibling zone in that
direction. Sliders turn arrows into value changes and trees turn
Left/Right into collapse/expand.
"""

import logging
import time
from typing import Any, Dict, Optional, Tuple

from ..kernel.core import DispatchContext, Kernel
from ..navigation.roving import is_orthogonal, resolve_entry
from ..navigation.seamless import find_entry_item, find_sibling_zone
from ..navigation.strategies import needs_geometry, resolve_with_strategy, strategy_name
from ..navigation.tab import FORWARD, resolve_tab
from ..navigation.typeahead import find_typeahead_match, is_typeahead_char, next_query
from ..navigation.types import ARROWS, DOWN, END, HOME, LEFT, RIGHT, NavigationContext, NavigationResult
from ..roles import VERTICAL
from ..state import ZoneState, set_active_zone
from ..zones.registry import ZoneEntry
from ..zones.selection import select_range
from .common import apply_focus, focus_effects, focused_item, payload_get, set_expanded, target_zone
from .types import OS_NAVIGATE, OS_TAB, OS_TYPEAHEAD
from .value import DIRECTION_ACTIONS, change_value

logger = logging.getLogger(__name__)


def _arrow_expand(
    ctx: DispatchContext,
    entry: ZoneEntry,
    zone: ZoneState,
    current: str,
    direction: str,
) -> Tuple[Optional[Dict[str, Any]], str]:
    """
    Tree-style Left/Right.

    Right expands a collapsed node; on an open node of a vertical tree it
    moves down. Left collapses an open node and otherwise holds in a
    vertical tree.
    """
    if direction not in (LEFT, RIGHT):
        return None, direction

    vertical = entry.config.navigate.orientation == VERTICAL
    expanded = current in zone.expanded_items

    if direction == RIGHT:
        if entry.is_expandable(current) and not expanded:
            return {"state": set_expanded(ctx.state, entry.zone_id, current, True)}, direction
        if vertical:
            return None, DOWN
        return None, direction

    if expanded:
        return {"state": set_expanded(ctx.state, entry.zone_id, current, False)}, direction
    if vertical:
        return {}, direction
    return None, direction


def _seamless_handoff(
    ctx: DispatchContext,
    zone_id: str,
    direction: str,
    current: Optional[str],
) -> Optional[Dict[str, Any]]:
    sibling = find_sibling_zone(zone_id, direction, ctx.zones, ctx.viewport)
    if sibling is None:
        return None
    target = find_entry_item(sibling, direction, current, ctx.zones, ctx.viewport)
    if target is None:
        return None

    logger.debug(f"Seamless handoff {zone_id} -> {sibling} ({direction}) at {target}")
    entry = ctx.zones.get(sibling)
    state = apply_focus(
        ctx.state,
        entry,
        target,
        ctx.zones.get_items(sibling),
        sticky_x=None,
        sticky_y=None,
    )
    return focus_effects(entry, state, target)


def _move(
    ctx: DispatchContext,
    entry: ZoneEntry,
    items,
    result: NavigationResult,
    extend: bool,
) -> Dict[str, Any]:
    zone = ctx.state.focus.zone(entry.zone_id)
    target = result.target_id
    changes: Dict[str, Any] = {"sticky_x": result.sticky_x, "sticky_y": result.sticky_y}

    if extend and entry.config.select.mode == "multiple":
        ranged = select_range(zone, list(items), target)
        changes["selection"] = ranged.selection
        changes["selection_anchor"] = ranged.selection_anchor
        state = apply_focus(ctx.state, entry, target, items, follow=False, **changes)
    else:
        state = apply_focus(ctx.state, entry, target, items, **changes)

    return focus_effects(entry, state, target)


def navigate_handler(ctx: DispatchContext, payload: Any) -> Optional[Dict[str, Any]]:
    zone_id, entry = target_zone(ctx, payload)
    direction = payload_get(payload, "direction")
    if entry is None or direction is None:
        return None

    config = entry.config
    items = ctx.zones.get_items(zone_id)
    zone = ctx.state.focus.zone(zone_id)
    current = focused_item(ctx, zone_id, items)
    extend = payload_get(payload, "select") == "range"

    if config.value is not None and direction in DIRECTION_ACTIONS:
        item_id = current or (items[0] if items else None)
        if item_id is not None:
            return change_value(ctx, zone_id, item_id, DIRECTION_ACTIONS[direction])

    if config.navigate.arrow_expand and current is not None:
        effects, direction = _arrow_expand(ctx, entry, zone, current, direction)
        if effects is not None:
            return effects

    if not items:
        if config.navigate.seamless and direction in ARROWS:
            return _seamless_handoff(ctx, zone_id, direction, current) or {}
        return {}

    if current is None:
        if direction == HOME:
            target = items[0]
        elif direction == END:
            target = items[-1]
        else:
            target = resolve_entry(items, config.navigate.entry, zone.last_focused_id, zone.selection)
        return _move(ctx, entry, items, NavigationResult(target), extend)

    name = strategy_name(config.navigate)
    if not needs_geometry(name) and is_orthogonal(direction, config.navigate.orientation):
        result = NavigationResult(current)
    else:
        context = NavigationContext(
            loop=config.navigate.loop,
            viewport=ctx.viewport,
            sticky_x=zone.sticky_x,
            sticky_y=zone.sticky_y,
        )
        result = resolve_with_strategy(name, current, direction, items, context)

    if result.target_id in (None, current):
        if config.navigate.seamless and direction in ARROWS:
            handoff = _seamless_handoff(ctx, zone_id, direction, current)
            if handoff is not None:
                return handoff
        if ctx.state.focus.active_zone_id != zone_id:
            return {"state": set_active_zone(ctx.state, zone_id)}
        return {}

    return _move(ctx, entry, items, result, extend)


def tab_handler(ctx: DispatchContext, payload: Any) -> Optional[Dict[str, Any]]:
    zone_id, entry = target_zone(ctx, payload)
    if entry is None:
        return None

    direction = payload_get(payload, "direction", FORWARD)
    target = resolve_tab(ctx.state.focus, zone_id, direction, ctx.zones, ctx.viewport)
    if target is None:
        return None

    target_zone_id, item_id = target
    target_entry = ctx.zones.get(target_zone_id)
    state = apply_focus(
        ctx.state,
        target_entry,
        item_id,
        ctx.zones.get_items(target_zone_id),
        follow=False,
        sticky_x=None,
        sticky_y=None,
    )
    return focus_effects(target_entry, state, item_id)


def typeahead_handler(ctx: DispatchContext, payload: Any) -> Optional[Dict[str, Any]]:
    zone_id, entry = target_zone(ctx, payload)
    char = payload_get(payload, "char", "")
    if entry is None or not entry.config.navigate.typeahead or not is_typeahead_char(char):
        return None

    items = ctx.zones.get_items(zone_id)
    zone = ctx.state.focus.zone(zone_id)
    now = payload_get(payload, "now")
    if now is None:
        now = ctx.meta.get("now", time.monotonic())

    query = next_query(zone.typeahead_query, zone.typeahead_at, char, now, ctx.settings.typeahead_timeout_ms)
    get_label = entry.capabilities.get_label or (lambda item_id: item_id)
    match = find_typeahead_match(items, get_label, focused_item(ctx, zone_id, items), query)

    if match is None:
        return {"state": apply_focus(ctx.state, entry, None, items, typeahead_query=query, typeahead_at=now)}

    state = apply_focus(ctx.state, entry, match, items, typeahead_query=query, typeahead_at=now)
    return focus_effects(entry, state, match)


def install(kernel: Kernel) -> None:
    kernel.define_command(OS_NAVIGATE, navigate_handler)
    kernel.define_command(OS_TAB, tab_handler)
    kernel.define_command(OS_TYPEAHEAD, typeahead_handler)
