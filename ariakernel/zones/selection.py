"""
Selection updates on ZoneState.

Pure functions returning a new ZoneState. The selection is an ordered set;
the anchor is always None or a member of the selection.
"""

from dataclasses import replace
from typing import Iterable, Optional, Sequence

from ..roles import SelectConfig
from ..state import ZoneState


def _dedupe(ids: Iterable[str]) -> tuple:
    seen = set()
    ordered = []
    for item_id in ids:
        if item_id not in seen:
            seen.add(item_id)
            ordered.append(item_id)
    return tuple(ordered)


def select_set(zone: ZoneState, ids: Sequence[str], items: Optional[Sequence[str]] = None) -> ZoneState:
    """Replace the selection. The anchor becomes the last id, or None."""
    selection = _dedupe(ids)
    if items:
        live = set(items)
        selection = tuple(i for i in selection if i in live)
    anchor = selection[-1] if selection else None
    return replace(zone, selection=selection, selection_anchor=anchor)


def select_add(zone: ZoneState, item_id: str) -> ZoneState:
    selection = zone.selection if item_id in zone.selection else zone.selection + (item_id,)
    return replace(zone, selection=selection, selection_anchor=item_id)


def select_remove(zone: ZoneState, item_id: str) -> ZoneState:
    if item_id not in zone.selection:
        return zone
    selection = tuple(i for i in zone.selection if i != item_id)
    anchor = None if zone.selection_anchor == item_id else zone.selection_anchor
    return replace(zone, selection=selection, selection_anchor=anchor)


def select_toggle(zone: ZoneState, item_id: str) -> ZoneState:
    if item_id in zone.selection:
        return select_remove(zone, item_id)
    return select_add(zone, item_id)


def select_clear(zone: ZoneState) -> ZoneState:
    if not zone.selection and zone.selection_anchor is None:
        return zone
    return replace(zone, selection=(), selection_anchor=None)


def select_range(zone: ZoneState, items: Sequence[str], target_id: str) -> ZoneState:
    """Select every item between the anchor and ``target_id`` inclusive.

    The anchor stays put; without one, the focused item (or the target)
    becomes the anchor.
    """
    if target_id not in items:
        return zone
    anchor = zone.selection_anchor or zone.focused_item_id
    if anchor not in items:
        anchor = target_id
    start, end = sorted((items.index(anchor), items.index(target_id)))
    return replace(zone, selection=tuple(items[start:end + 1]), selection_anchor=anchor)


def select_all(zone: ZoneState, items: Sequence[str]) -> ZoneState:
    if not items:
        return zone
    anchor = zone.selection_anchor if zone.selection_anchor in items else items[0]
    return replace(zone, selection=tuple(items), selection_anchor=anchor)


def follow_focus(zone: ZoneState, item_id: str, config: SelectConfig) -> ZoneState:
    """Move the selection with focus when the zone asks for it."""
    if not config.follow_focus or config.mode == "none":
        return zone
    return replace(zone, selection=(item_id,), selection_anchor=item_id)
