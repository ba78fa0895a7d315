"""
Tab sequence.

Tab and Shift+Tab walk a depth-first sequence of (zone id, item id) pairs.
A zone's ``tab.behavior`` picks the policy:

- loop / trap: cycle inside the nearest looping ancestor (or the zone itself)
- escape: leave the zone from its boundary item onto the adjacent item of the
  whole document sequence
- flow: walk the document sequence without wrapping
- native: the kernel does not handle Tab

Usage:
    target = resolve_tab(kernel_state.focus, "toolbar", FORWARD, registry, viewport)
    if target is not None:
        zone_id, item_id = target
"""

import logging
from typing import List, Optional, Sequence, Tuple

from ..geometry import Rect, Viewport, sort_reading_order
from ..state import FocusState
from ..zones.registry import ZoneRegistry

logger = logging.getLogger(__name__)

FORWARD = "forward"
BACKWARD = "backward"

LOOPING = ("loop", "trap")

TabStop = Tuple[str, str]  # (zone_id, item_id)


def _ordered_children(zone_id: str, zones: ZoneRegistry, viewport: Optional[Viewport]) -> List[str]:
    children = [c for c in zones.children(zone_id) if c != zone_id]
    if viewport is None:
        return children
    rects = [(c, viewport.zone_rect(c)) for c in children]
    if any(rect is None for _, rect in rects):
        return children
    return sort_reading_order(rects)


def build_sequence(
    zone_id: str,
    zones: ZoneRegistry,
    viewport: Optional[Viewport] = None,
    _seen: Optional[set] = None,
) -> List[TabStop]:
    """
    Depth-first tab stops of ``zone_id`` and its descendants.

    When every item and child zone has a rectangle, items and child zones
    are interleaved in reading order. Otherwise the zone's own items come
    first in registered order, followed by the child zones.
    """
    seen = _seen if _seen is not None else set()
    if zone_id in seen or not zones.has(zone_id):
        return []
    seen.add(zone_id)

    items = zones.get_items(zone_id)
    children = _ordered_children(zone_id, zones, viewport)

    if viewport is not None and children and items:
        placed: List[Tuple[str, Rect]] = []
        complete = True
        for item_id in items:
            rect = viewport.item_rect(item_id)
            if rect is None:
                complete = False
                break
            placed.append((f"item:{item_id}", rect))
        if complete:
            for child in children:
                rect = viewport.zone_rect(child)
                if rect is None:
                    complete = False
                    break
                placed.append((f"zone:{child}", rect))
        if complete:
            sequence: List[TabStop] = []
            for key in sort_reading_order(placed):
                kind, _, ident = key.partition(":")
                if kind == "item":
                    sequence.append((zone_id, ident))
                else:
                    sequence.extend(build_sequence(ident, zones, viewport, seen))
            return sequence

    sequence = [(zone_id, item_id) for item_id in items]
    for child in children:
        sequence.extend(build_sequence(child, zones, viewport, seen))
    return sequence


def document_sequence(zones: ZoneRegistry, viewport: Optional[Viewport] = None) -> List[TabStop]:
    """Tab stops of every root zone in order, root zones in reading order when placed."""
    roots = [z for z in zones.keys() if zones.get(z).parent_id is None or not zones.has(zones.get(z).parent_id)]
    if viewport is not None:
        rects = [(z, viewport.zone_rect(z)) for z in roots]
        if all(rect is not None for _, rect in rects):
            roots = sort_reading_order(rects)
    seen: set = set()
    sequence: List[TabStop] = []
    for root in roots:
        sequence.extend(build_sequence(root, zones, viewport, seen))
    return sequence


def _step(
    sequence: Sequence[TabStop],
    current: Optional[str],
    backward: bool,
    wrap: bool,
    zones: ZoneRegistry,
    skip_disabled: bool,
) -> Optional[TabStop]:
    if not sequence:
        return None

    delta = -1 if backward else 1
    ids = [item_id for _, item_id in sequence]
    index = ids.index(current) if current in ids else -1
    position = (len(sequence) - 1 if backward else 0) if index == -1 else index + delta

    for _ in range(len(sequence)):
        if wrap:
            position %= len(sequence)
        if position < 0 or position >= len(sequence):
            return None
        zone_id, item_id = sequence[position]
        if not (skip_disabled and zones.is_disabled(zone_id, item_id)):
            return sequence[position]
        position += delta
    return None


def _restore_redirect(
    target: TabStop,
    from_zone_id: str,
    focus: FocusState,
    zones: ZoneRegistry,
    viewport: Optional[Viewport],
) -> TabStop:
    """Send focus to the remembered item of a zone entered with entry=restore."""
    zone_id, _ = target
    entry = zones.get(zone_id)
    if zone_id == from_zone_id or entry is None or entry.config.navigate.entry != "restore":
        return target
    last = focus.zone(zone_id).last_focused_id
    if last and (zone_id, last) in build_sequence(zone_id, zones, viewport):
        return (zone_id, last)
    return target


def _loop_root(zone_id: str, zones: ZoneRegistry) -> str:
    for candidate in zones.zone_path(zone_id):
        entry = zones.get(candidate)
        if entry is not None and entry.config.tab.behavior in LOOPING:
            return candidate
    return zone_id


def resolve_tab(
    focus: FocusState,
    zone_id: str,
    direction: str,
    zones: ZoneRegistry,
    viewport: Optional[Viewport] = None,
) -> Optional[TabStop]:
    """
    Next tab stop from the focused item of ``zone_id``.

    Returns:
        (zone_id, item_id) to focus, or None to let the host handle Tab
        (native behavior, end of the document, or an unknown zone)
    """
    entry = zones.get(zone_id)
    if entry is None:
        return None

    behavior = entry.config.tab.behavior
    backward = direction == BACKWARD
    skip = entry.config.tab.skip_disabled
    current = focus.zone(zone_id).focused_item_id

    if behavior in LOOPING:
        sequence = build_sequence(_loop_root(zone_id, zones), zones, viewport)
        return _step(sequence, current, backward, True, zones, skip)

    if behavior == "escape":
        local = build_sequence(zone_id, zones, viewport)
        if not local:
            return None
        document = document_sequence(zones, viewport)
        exit_point = local[0] if backward else local[-1]
        if exit_point not in document:
            return None
        index = document.index(exit_point) + (-1 if backward else 1)
        if index < 0 or index >= len(document):
            return None
        return _restore_redirect(document[index], zone_id, focus, zones, viewport)

    if behavior == "flow":
        document = document_sequence(zones, viewport)
        target = _step(document, current, backward, False, zones, skip)
        if target is None:
            return None
        return _restore_redirect(target, zone_id, focus, zones, viewport)

    if behavior != "native":
        logger.warning(f"Unknown tab behavior '{behavior}' on zone {zone_id}")
    return None
