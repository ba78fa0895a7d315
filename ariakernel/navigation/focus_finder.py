"""
Spatial navigation, after Android's FocusFinder.

A candidate inside the source's "beam" (overlapping on the cross axis) beats
one outside it; otherwise candidates are ranked by a weighted distance that
punishes distance along the move axis 13 times harder than the cross-axis
offset. The weight is tuned; tests depend on the exact value.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from ..config.constants import FOCUS_FINDER_MAJOR_WEIGHT
from ..geometry import Rect
from .types import DOWN, END, HOME, LEFT, NavigationContext, NavigationResult, RIGHT, UP


@dataclass(frozen=True)
class FocusCandidate:
    item_id: str
    rect: Rect


def is_candidate(src: Rect, dest: Rect, direction: str) -> bool:
    """Is ``dest`` at least partially in ``direction`` of ``src``."""
    if direction == LEFT:
        return (src.right > dest.right or src.left >= dest.right) and src.left > dest.left
    if direction == RIGHT:
        return (src.left < dest.left or src.right <= dest.left) and src.right < dest.right
    if direction == UP:
        return (src.bottom > dest.bottom or src.top >= dest.bottom) and src.top > dest.top
    if direction == DOWN:
        return (src.top < dest.top or src.bottom <= dest.top) and src.bottom < dest.bottom
    return False


def beams_overlap(direction: str, rect1: Rect, rect2: Rect) -> bool:
    if direction in (LEFT, RIGHT):
        return rect2.bottom > rect1.top and rect2.top < rect1.bottom
    return rect2.right > rect1.left and rect2.left < rect1.right


def is_to_direction_of(direction: str, src: Rect, dest: Rect) -> bool:
    if direction == LEFT:
        return src.left >= dest.right
    if direction == RIGHT:
        return src.right <= dest.left
    if direction == UP:
        return src.top >= dest.bottom
    return src.bottom <= dest.top


def major_axis_distance(direction: str, source: Rect, dest: Rect) -> float:
    """Edge to near edge along the move axis, never negative."""
    if direction == LEFT:
        raw = source.left - dest.right
    elif direction == RIGHT:
        raw = dest.left - source.right
    elif direction == UP:
        raw = source.top - dest.bottom
    else:
        raw = dest.top - source.bottom
    return max(0, raw)


def major_axis_distance_to_far_edge(direction: str, source: Rect, dest: Rect) -> float:
    """Edge to far edge along the move axis, at least 1."""
    if direction == LEFT:
        raw = source.left - dest.left
    elif direction == RIGHT:
        raw = dest.right - source.right
    elif direction == UP:
        raw = source.top - dest.top
    else:
        raw = dest.bottom - source.bottom
    return max(1, raw)


def minor_axis_distance(direction: str, source: Rect, dest: Rect) -> float:
    """Center to center on the cross axis."""
    if direction in (LEFT, RIGHT):
        return abs(source.center_y - dest.center_y)
    return abs(source.center_x - dest.center_x)


def weighted_distance(major: float, minor: float) -> float:
    return FOCUS_FINDER_MAJOR_WEIGHT * major * major + minor * minor


def beam_beats(direction: str, source: Rect, rect1: Rect, rect2: Rect) -> bool:
    """Does ``rect1`` win over ``rect2`` by being exclusively in the source beam."""
    rect1_in_beam = beams_overlap(direction, source, rect1)
    rect2_in_beam = beams_overlap(direction, source, rect2)

    if rect2_in_beam or not rect1_in_beam:
        return False

    if not is_to_direction_of(direction, source, rect2):
        return True

    # Horizontally, being in the beam always wins
    if direction in (LEFT, RIGHT):
        return True

    return major_axis_distance(direction, source, rect1) < major_axis_distance_to_far_edge(
        direction, source, rect2
    )


def is_better_candidate(direction: str, source: Rect, rect1: Rect, rect2: Rect) -> bool:
    if not is_candidate(source, rect1, direction):
        return False
    if not is_candidate(source, rect2, direction):
        return True
    if beam_beats(direction, source, rect1, rect2):
        return True
    if beam_beats(direction, source, rect2, rect1):
        return False
    return weighted_distance(
        major_axis_distance(direction, source, rect1),
        minor_axis_distance(direction, source, rect1),
    ) < weighted_distance(
        major_axis_distance(direction, source, rect2),
        minor_axis_distance(direction, source, rect2),
    )


def find_best_candidate(
    source: Rect,
    direction: str,
    candidates: Sequence[FocusCandidate],
    exclude_id: Optional[str] = None,
) -> Optional[FocusCandidate]:
    """Best candidate in ``direction`` of ``source``, or None."""
    # Start from an impossible rect just behind the source
    if direction == LEFT:
        best_rect = source.offset(source.width + 1, 0)
    elif direction == RIGHT:
        best_rect = source.offset(-(source.width + 1), 0)
    elif direction == UP:
        best_rect = source.offset(0, source.height + 1)
    else:
        best_rect = source.offset(0, -(source.height + 1))

    best = None
    for candidate in candidates:
        if candidate.item_id == exclude_id:
            continue
        if is_better_candidate(direction, source, candidate.rect, best_rect):
            best_rect = candidate.rect
            best = candidate
    return best


def resolve_spatial(
    current_id: Optional[str],
    direction: str,
    items: Sequence[str],
    context: NavigationContext = NavigationContext(),
) -> NavigationResult:
    """
    2-D navigation over item rectangles.

    Vertical moves keep the horizontal anchor (``sticky_x``) and horizontal
    moves keep the vertical anchor (``sticky_y``), so a straight run of
    presses does not drift across uneven rows.
    """
    if current_id is None:
        return NavigationResult(None)

    viewport = context.viewport
    current_rect = viewport.item_rect(current_id) if viewport is not None else None
    if current_rect is None:
        return NavigationResult(current_id)

    candidates = []
    for item_id in items:
        if item_id == current_id:
            continue
        rect = viewport.item_rect(item_id)
        if rect is not None:
            candidates.append(FocusCandidate(item_id, rect))

    if not candidates:
        return NavigationResult(current_id)
    if direction == HOME:
        return NavigationResult(items[0] if items else current_id)
    if direction == END:
        return NavigationResult(items[-1] if items else current_id)

    best = find_best_candidate(current_rect, direction, candidates)
    if best is None:
        return NavigationResult(current_id, context.sticky_x, context.sticky_y)

    anchor_x = context.sticky_x if context.sticky_x is not None else current_rect.center_x
    anchor_y = context.sticky_y if context.sticky_y is not None else current_rect.center_y
    return NavigationResult(
        best.item_id,
        sticky_x=anchor_x if direction in (UP, DOWN) else None,
        sticky_y=anchor_y if direction in (LEFT, RIGHT) else None,
    )
