"""Layout helpers shared by the navigation tests."""

from ariakernel.geometry import Rect
from ariakernel.zones.registry import ZoneEntry


def grid_rects(item_ids, cols, width=100, height=40, gap=0, left=0, top=0):
    """Rects laying ``item_ids`` out row by row."""
    rects = {}
    for index, item_id in enumerate(item_ids):
        col, row = index % cols, index // cols
        rects[item_id] = Rect(left + col * (width + gap), top + row * (height + gap), width, height)
    return rects


def make_entry(zone_id, role=None, items=(), **kwargs):
    """ZoneEntry for ``zone_id``; extra keywords go to ZoneEntry.create."""
    return ZoneEntry.create(zone_id, role=role, items=items, **kwargs)
