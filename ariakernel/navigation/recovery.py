"""
Focus recovery after the focused item disappears.

The zone remembers the index its focused item had. When that item is gone,
focus moves to the item now at that index (policy "next") or the one
before it (policy "prev"), falling back to the other side at the ends.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

NEXT = "next"
PREV = "prev"


@dataclass(frozen=True)
class RecoveryResult:
    target_id: Optional[str]
    reason: str  # sibling-next | sibling-prev | zone-default | none


def find_recovery_target(
    items: Sequence[str],
    removed_index: Optional[int],
    policy: str = NEXT,
) -> RecoveryResult:
    """
    Pick the item to focus once the item at ``removed_index`` is gone.

    Args:
        items: Zone items after the removal
        removed_index: Index the removed item had, None when unknown
        policy: "next" or "prev"
    """
    if not items:
        return RecoveryResult(None, "none")
    if removed_index is None or removed_index < 0:
        return RecoveryResult(items[0], "zone-default")

    next_index = removed_index if removed_index < len(items) else None
    prev_index = removed_index - 1 if 0 < removed_index <= len(items) else None

    order = (prev_index, next_index) if policy == PREV else (next_index, prev_index)
    for index in order:
        if index is not None:
            reason = "sibling-next" if index == next_index else "sibling-prev"
            return RecoveryResult(items[index], reason)

    return RecoveryResult(items[-1], "sibling-prev")
