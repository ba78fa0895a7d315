"""
Corner navigation for 2-D layouts with nested containers.

Only items lying strictly on the requested side qualify. Containers are
filtered out: a candidate whose rectangle wraps another candidate (or the
current item) is never a target, so moves land on children rather than on
the group around them. The nearest candidate along the move axis wins and
the cross-axis offset breaks ties. With nothing to move to, focus holds.
"""

from typing import List, Optional, Sequence, Tuple

from ..geometry import Rect
from .types import DOWN, END, HOME, LEFT, NavigationContext, NavigationResult, RIGHT, UP


def is_on_side(current: Rect, candidate: Rect, direction: str) -> bool:
    if direction == RIGHT:
        return candidate.left >= current.right
    if direction == LEFT:
        return candidate.right <= current.left
    if direction == DOWN:
        return candidate.top >= current.bottom
    if direction == UP:
        return candidate.bottom <= current.top
    return False


def axis_distance(current: Rect, candidate: Rect, direction: str) -> float:
    if direction == RIGHT:
        return candidate.left - current.right
    if direction == LEFT:
        return current.left - candidate.right
    if direction == DOWN:
        return candidate.top - current.bottom
    return current.top - candidate.bottom


def cross_offset(current: Rect, candidate: Rect, direction: str) -> float:
    if direction in (LEFT, RIGHT):
        return abs(candidate.center_y - current.center_y)
    return abs(candidate.center_x - current.center_x)


def filter_containers(
    current: Rect, candidates: Sequence[Tuple[str, Rect]]
) -> List[Tuple[str, Rect]]:
    """Drop candidates that wrap the current item or another candidate."""
    kept = []
    for item_id, rect in candidates:
        if rect.contains(current):
            continue
        wraps_other = any(
            other_id != item_id and rect.contains(other) and rect != other
            for other_id, other in candidates
        )
        if not wraps_other:
            kept.append((item_id, rect))
    return kept


def resolve_corner(
    current_id: Optional[str],
    direction: str,
    items: Sequence[str],
    context: NavigationContext = NavigationContext(),
) -> NavigationResult:
    if not items:
        return NavigationResult(None)
    if current_id is None:
        return NavigationResult(items[0])
    if direction == HOME:
        return NavigationResult(items[0])
    if direction == END:
        return NavigationResult(items[-1])

    viewport = context.viewport
    current = viewport.item_rect(current_id) if viewport is not None else None
    if current is None or len(items) <= 1:
        return NavigationResult(current_id)

    sided = []
    for item_id in items:
        if item_id == current_id:
            continue
        rect = viewport.item_rect(item_id)
        if rect is not None and is_on_side(current, rect, direction):
            sided.append((item_id, rect))

    candidates = filter_containers(current, sided)
    if not candidates:
        return NavigationResult(current_id)

    order = {item_id: index for index, item_id in enumerate(items)}
    best_id, _ = min(
        candidates,
        key=lambda c: (
            axis_distance(current, c[1], direction),
            cross_offset(current, c[1], direction),
            order[c[0]],
        ),
    )
    return NavigationResult(best_id)
