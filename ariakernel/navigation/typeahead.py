"""
Typeahead: jump to the item whose label starts with the typed characters.

The query buffer lives in zone state (``typeahead_query``/``typeahead_at``)
so these functions stay pure. Characters typed within the timeout extend
the query; a pause starts a new one.
"""

from typing import Callable, Optional, Sequence

from ..config.constants import TYPEAHEAD_TIMEOUT_MS


def is_typeahead_char(char: str) -> bool:
    """Single printable, non-blank character."""
    return len(char) == 1 and char.isprintable() and not char.isspace()


def next_query(
    query: str,
    last_at: Optional[float],
    char: str,
    now: float,
    timeout_ms: int = TYPEAHEAD_TIMEOUT_MS,
) -> str:
    """Query after typing ``char`` at ``now`` (seconds)."""
    if last_at is None or (now - last_at) * 1000 > timeout_ms:
        return char
    return query + char


def find_typeahead_match(
    items: Sequence[str],
    get_label: Callable[[str], str],
    current_id: Optional[str],
    query: str,
) -> Optional[str]:
    """
    First item after ``current_id`` whose label starts with ``query``.

    Matching is case-insensitive and wraps around the list. A query made of
    one repeated character ("bbb") cycles through items starting with that
    character. A longer query may keep the current item when it still matches.
    """
    if not items or not query:
        return None

    needle = query.lower()
    if len(set(needle)) == 1:
        needle = needle[0]

    start = 0
    if current_id in items:
        start = items.index(current_id)
        if len(needle) == 1:
            start += 1

    for offset in range(len(items)):
        item_id = items[(start + offset) % len(items)]
        label = get_label(item_id) or ""
        if label.lower().startswith(needle):
            return item_id
    return None
