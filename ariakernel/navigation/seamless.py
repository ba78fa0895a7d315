"""
Seamless cross-zone transitions.

When a seamless zone cannot move any further in a direction, navigation
continues into the nearest sibling zone (same parent) in that direction, at
the item closest to where the user crossed over.
"""

from functools import cmp_to_key
from typing import List, Optional, Tuple

from ..config.constants import SEAMLESS_EDGE_SLOP_PX, SEAMLESS_ENTRY_TOLERANCE_PX
from ..geometry import Rect, Viewport, compare_reading_order
from ..zones.registry import ZoneRegistry
from .types import DOWN, LEFT, RIGHT, UP


def _gap(current: Rect, rect: Rect, direction: str) -> Tuple[bool, float]:
    """(is the rect beyond our edge, distance from our edge to it)."""
    if direction == RIGHT:
        return rect.left > current.right - SEAMLESS_EDGE_SLOP_PX, rect.left - current.right
    if direction == LEFT:
        return rect.right < current.left + SEAMLESS_EDGE_SLOP_PX, current.left - rect.right
    if direction == DOWN:
        return rect.top > current.bottom - SEAMLESS_EDGE_SLOP_PX, rect.top - current.bottom
    if direction == UP:
        return rect.bottom < current.top + SEAMLESS_EDGE_SLOP_PX, current.top - rect.bottom
    return False, 0


def _perpendicular(current: Rect, rect: Rect, direction: str) -> float:
    if direction in (LEFT, RIGHT):
        return abs(rect.center_y - current.center_y)
    return abs(rect.center_x - current.center_x)


def find_sibling_zone(
    zone_id: str,
    direction: str,
    zones: ZoneRegistry,
    viewport: Viewport,
) -> Optional[str]:
    """
    Nearest sibling zone lying beyond ``zone_id``'s edge in ``direction``.

    Falls back to reading order for up/down when no sibling is strictly
    beyond the edge, which happens with stacked columns whose edges do not
    line up.
    """
    entry = zones.get(zone_id)
    if entry is None:
        return None

    siblings = [z for z in zones.children(entry.parent_id) if z != zone_id]
    if not siblings:
        return None

    current = viewport.zone_rect(zone_id)
    if current is None:
        return None

    best: Optional[str] = None
    best_score = (float("inf"), float("inf"))
    for sibling in siblings:
        rect = viewport.zone_rect(sibling)
        if rect is None:
            continue
        valid, gap = _gap(current, rect, direction)
        score = (gap, _perpendicular(current, rect, direction))
        if valid and score < best_score:
            best, best_score = sibling, score

    if best is None and direction in (UP, DOWN):
        placed: List[Tuple[str, Rect]] = [(zone_id, current)]
        placed += [(s, viewport.zone_rect(s)) for s in siblings if viewport.zone_rect(s) is not None]
        placed.sort(key=cmp_to_key(lambda a, b: compare_reading_order(a[1], b[1])))
        ordered = [zid for zid, _ in placed]
        index = ordered.index(zone_id)
        if direction == DOWN and index < len(ordered) - 1:
            best = ordered[index + 1]
        elif direction == UP and index > 0:
            best = ordered[index - 1]

    return best


def find_entry_item(
    zone_id: str,
    direction: str,
    source_item_id: Optional[str],
    zones: ZoneRegistry,
    viewport: Viewport,
) -> Optional[str]:
    """
    Item to land on when entering ``zone_id`` while moving in ``direction``.

    Only items within the tolerance band of the entry edge are considered
    (the top edge when moving down, the right edge when moving left, ...);
    among them the one whose cross-axis center is closest to the source
    item's wins.
    """
    items = zones.get_items(zone_id)
    if not items:
        return None

    forward = direction in (RIGHT, DOWN)
    fallback = items[0] if forward else items[-1]
    source = viewport.item_rect(source_item_id) if source_item_id else None
    if source is None:
        return fallback

    rects = [(item_id, viewport.item_rect(item_id)) for item_id in items]
    rects = [(item_id, rect) for item_id, rect in rects if rect is not None]
    if not rects:
        return items[0]

    tolerance = SEAMLESS_ENTRY_TOLERANCE_PX
    if direction == UP:
        edge = max(r.bottom for _, r in rects)
        candidates = [(i, r) for i, r in rects if r.bottom >= edge - tolerance]
    elif direction == DOWN:
        edge = min(r.top for _, r in rects)
        candidates = [(i, r) for i, r in rects if r.top <= edge + tolerance]
    elif direction == LEFT:
        edge = max(r.right for _, r in rects)
        candidates = [(i, r) for i, r in rects if r.right >= edge - tolerance]
    else:
        edge = min(r.left for _, r in rects)
        candidates = [(i, r) for i, r in rects if r.left <= edge + tolerance]

    horizontal = direction in (LEFT, RIGHT)
    match = source.center_y if horizontal else source.center_x

    best_id, best_distance = None, float("inf")
    for item_id, rect in candidates or rects:
        coord = rect.center_y if horizontal else rect.center_x
        distance = abs(coord - match)
        if distance < best_distance:
            best_id, best_distance = item_id, distance

    return best_id or items[0]
