"""Zone registry, selection and lazy id resolution."""

from .registry import ZoneCapabilities, ZoneCursor, ZoneEntry, ZoneRegistry
from .resolve import resolve_item_id, resolve_selection

__all__ = [
    "ZoneCapabilities",
    "ZoneCursor",
    "ZoneEntry",
    "ZoneRegistry",
    "resolve_item_id",
    "resolve_selection",
]
