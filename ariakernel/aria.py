"""
ARIA attribute projection.

Computes the attributes a renderer puts on zone containers and items from
the zone's config and state. Attributes that do not apply are left out
rather than set to None, so the result can be spread onto a widget as is.

Usage:
    attrs = item_attributes(entry, state.focus.zone("list"), "a", is_active=True)
    assert attrs["tabIndex"] == 0
"""

from typing import Any, Dict, Sequence

from .roles import BOTH, CHECKED_ROLES, child_role
from .state import KernelState, ZoneState
from .zones.registry import ZoneEntry, ZoneRegistry

Attributes = Dict[str, Any]


def zone_attributes(entry: ZoneEntry, zone: ZoneState, is_active: bool) -> Attributes:
    config = entry.config
    attrs: Attributes = {
        "role": entry.role or "group",
        "tabIndex": -1,
        "data-zone-id": entry.zone_id,
        "data-orientation": config.navigate.orientation,
    }
    if config.navigate.orientation != BOTH:
        attrs["aria-orientation"] = config.navigate.orientation
    if config.select.mode == "multiple":
        attrs["aria-multiselectable"] = True
    if is_active:
        attrs["data-active"] = True
    if config.project.virtual_focus:
        attrs["tabIndex"] = 0
        if zone.focused_item_id is not None:
            attrs["aria-activedescendant"] = zone.focused_item_id
    return attrs


def _tab_stop(zone: ZoneState, items: Sequence[str]):
    """Item carrying tabIndex 0: the focused one, else the last focused, else the first."""
    for candidate in (zone.focused_item_id, zone.last_focused_id):
        if candidate is not None and (not items or candidate in items):
            return candidate
    return items[0] if items else None


def item_attributes(
    entry: ZoneEntry,
    zone: ZoneState,
    item_id: str,
    is_active: bool,
    items: Sequence[str] = (),
    is_disabled: bool = False,
) -> Attributes:
    """
    Attributes of one item.

    Args:
        entry: Zone the item belongs to
        zone: State of that zone
        item_id: The item
        is_active: Whether the zone is the active zone
        items: Live items of the zone, used to pick the roving tab stop
        is_disabled: Whether the item is disabled
    """
    config = entry.config
    role = child_role(entry.role)
    is_focused = zone.focused_item_id == item_id
    is_selected = item_id in zone.selection
    is_expanded = item_id in zone.expanded_items

    attrs: Attributes = {
        "role": role,
        "data-item-id": item_id,
        "tabIndex": 0 if _tab_stop(zone, items) == item_id else -1,
    }
    if config.project.virtual_focus:
        attrs["tabIndex"] = -1
    if is_focused and is_active:
        attrs["data-focused"] = True
    elif is_focused:
        attrs["data-anchor"] = True
    if is_selected:
        attrs["data-selected"] = True

    uses_checked = config.check.mode == "check" or role in CHECKED_ROLES
    if uses_checked:
        attrs["aria-checked"] = is_selected
    elif config.select.mode != "none":
        attrs["aria-selected"] = is_selected
    elif is_focused and is_active:
        attrs["aria-current"] = "true"

    if entry.is_expandable(item_id):
        attrs["aria-expanded"] = is_expanded
    if is_disabled:
        attrs["aria-disabled"] = True

    if config.value is not None:
        attrs["aria-valuenow"] = zone.values.get(item_id, config.value.min)
        attrs["aria-valuemin"] = config.value.min
        attrs["aria-valuemax"] = config.value.max

    return attrs


def element_attributes(state: KernelState, zones: ZoneRegistry, element_id: str) -> Attributes:
    """Attributes of a zone container or item, looked up by id. Empty when unknown."""
    active = state.focus.active_zone_id
    entry = zones.get(element_id)
    if entry is not None:
        return zone_attributes(entry, state.focus.zone(element_id), active == element_id)

    zone_id = zones.zone_of_item(element_id)
    if zone_id is None:
        return {}
    return item_attributes(
        zones.get(zone_id),
        state.focus.zone(zone_id),
        element_id,
        active == zone_id,
        items=zones.get_items(zone_id),
        is_disabled=zones.is_disabled(zone_id, element_id),
    )
