"""
Lazy id resolution.

Stored focus and selection ids are never patched when items disappear.
Readers reconcile them against the live item list instead, so restoring a
deleted item (undo) makes the stored id valid again with no recovery step.
"""

from typing import Optional, Sequence, Tuple


def resolve_item_id(
    stored_id: Optional[str],
    items: Sequence[str],
    last_index_hint: Optional[int] = None,
) -> Optional[str]:
    """
    Reconcile a possibly-stale item id with the live items.

    Args:
        stored_id: Id remembered in state
        items: Current ordered item ids
        last_index_hint: Index the stored id had when it was last valid

    Returns:
        ``stored_id`` if still present; otherwise the item now at the hinted
        index (clamped to the last item), or the first item without a hint.
        None when ``stored_id`` is None or there are no items.
    """
    if stored_id is None or not items:
        return None
    if stored_id in items:
        return stored_id
    if last_index_hint is None:
        return items[0]
    index = min(max(last_index_hint, 0), len(items) - 1)
    return items[index]


def resolve_selection(selection: Sequence[str], items: Sequence[str]) -> Tuple[str, ...]:
    """Selection ids still present in ``items``, in their original order."""
    live = set(items)
    return tuple(item_id for item_id in selection if item_id in live)
