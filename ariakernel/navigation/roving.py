"""
Roving (1-D) navigation.

Moves one position through an ordered item list. At either end the move
wraps when the zone loops and holds otherwise.
"""

from typing import Optional, Sequence

from .types import (
    DOWN,
    END,
    HOME,
    HORIZONTAL_DIRECTIONS,
    NavigationContext,
    NavigationResult,
    RIGHT,
    VERTICAL_DIRECTIONS,
)


def resolve_linear(
    current_id: Optional[str],
    direction: str,
    items: Sequence[str],
    context: NavigationContext = NavigationContext(),
) -> NavigationResult:
    if not items:
        return NavigationResult(None)
    if current_id is None or current_id not in items:
        return NavigationResult(items[0])
    if direction == HOME:
        return NavigationResult(items[0])
    if direction == END:
        return NavigationResult(items[-1])

    delta = 1 if direction in (DOWN, RIGHT) else -1
    index = items.index(current_id) + delta

    if index < 0:
        index = len(items) - 1 if context.loop else 0
    elif index >= len(items):
        index = 0 if context.loop else len(items) - 1

    return NavigationResult(items[index])


def is_orthogonal(direction: str, orientation: str) -> bool:
    """True when ``direction`` runs across a 1-D zone's orientation."""
    if orientation == "vertical":
        return direction in HORIZONTAL_DIRECTIONS
    if orientation == "horizontal":
        return direction in VERTICAL_DIRECTIONS
    return False


def resolve_entry(
    items: Sequence[str],
    entry: str = "first",
    last_focused_id: Optional[str] = None,
    selection: Sequence[str] = (),
) -> Optional[str]:
    """Item a zone is entered at when nothing in it is focused yet."""
    if not items:
        return None
    if entry == "last":
        return items[-1]
    if entry == "restore" and last_focused_id in items:
        return last_focused_id
    if entry == "selected":
        for item_id in selection:
            if item_id in items:
                return item_id
    return items[0]
