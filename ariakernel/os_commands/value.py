"""Slider value changes (OS_VALUE_CHANGE)."""

from typing import Any, Dict, Optional

from ..kernel.core import DispatchContext, Kernel
from ..navigation.types import DOWN, END, HOME, LEFT, RIGHT, UP
from ..roles import ValueConfig
from ..state import update_zone
from .common import focused_item, payload_get, target_zone
from .types import OS_VALUE_CHANGE

INCREMENT = "increment"
DECREMENT = "decrement"
INCREMENT_LARGE = "increment_large"
DECREMENT_LARGE = "decrement_large"
SET_MIN = "min"
SET_MAX = "max"
SET = "set"

# Arrow keys on a slider change its value instead of moving focus
DIRECTION_ACTIONS = {
    UP: INCREMENT,
    RIGHT: INCREMENT,
    DOWN: DECREMENT,
    LEFT: DECREMENT,
    HOME: SET_MIN,
    END: SET_MAX,
}


def clamp(value: float, config: ValueConfig) -> float:
    return max(config.min, min(config.max, value))


def next_value(current: float, action: str, config: ValueConfig, value: Optional[float] = None) -> float:
    if action == INCREMENT:
        return clamp(current + config.step, config)
    if action == DECREMENT:
        return clamp(current - config.step, config)
    if action == INCREMENT_LARGE:
        return clamp(current + config.large_step, config)
    if action == DECREMENT_LARGE:
        return clamp(current - config.large_step, config)
    if action == SET_MIN:
        return config.min
    if action == SET_MAX:
        return config.max
    if action == SET and value is not None:
        return clamp(float(value), config)
    return current


def change_value(
    ctx: DispatchContext,
    zone_id: str,
    item_id: str,
    action: str,
    value: Optional[float] = None,
) -> Dict[str, Any]:
    entry = ctx.zones.get(zone_id)
    config = entry.config.value
    zone = ctx.state.focus.zone(zone_id)
    current = zone.values.get(item_id, config.min)
    updated = next_value(current, action, config, value)
    if updated == current and item_id in zone.values:
        return {}
    values = {**zone.values, item_id: updated}
    return {"state": update_zone(ctx.state, zone_id, values=values)}


def value_change_handler(ctx: DispatchContext, payload: Any) -> Optional[Dict[str, Any]]:
    zone_id, entry = target_zone(ctx, payload)
    if entry is None or entry.config.value is None:
        return None
    item_id = payload_get(payload, "item_id") or focused_item(ctx, zone_id)
    if item_id is None:
        items = ctx.zones.get_items(zone_id)
        item_id = items[0] if items else None
    if item_id is None:
        return None
    return change_value(ctx, zone_id, item_id, payload_get(payload, "action", INCREMENT), payload_get(payload, "value"))


def install(kernel: Kernel) -> None:
    kernel.define_command(OS_VALUE_CHANGE, value_change_handler)
