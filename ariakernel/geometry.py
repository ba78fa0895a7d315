"""
Geometry primitives and the viewport query interface.

Navigation algorithms never touch a real UI tree. They ask a ``Viewport``
for item and zone rectangles, so they stay pure and testable.

Usage:
    viewport = StaticViewport()
    viewport.set_item_rect("a", Rect(0, 0, 100, 40))
    rect = viewport.item_rect("a")
"""

from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import Dict, Iterable, List, Optional, Protocol, Tuple, runtime_checkable

from .config.constants import VISUAL_ROW_TOLERANCE_PX


@dataclass(frozen=True)
class Rect:
    """Axis-aligned bounding rectangle in screen coordinates."""

    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def center_x(self) -> float:
        return self.left + self.width / 2

    @property
    def center_y(self) -> float:
        return self.top + self.height / 2

    @classmethod
    def from_edges(cls, left: float, top: float, right: float, bottom: float) -> "Rect":
        return cls(left, top, right - left, bottom - top)

    def offset(self, dx: float, dy: float) -> "Rect":
        return Rect(self.left + dx, self.top + dy, self.width, self.height)

    def contains(self, other: "Rect") -> bool:
        """True when ``other`` lies entirely inside this rectangle."""
        return (
            self.left <= other.left
            and self.top <= other.top
            and self.right >= other.right
            and self.bottom >= other.bottom
        )


@runtime_checkable
class Viewport(Protocol):
    """Geometry source for navigation. Returns None for unknown ids."""

    def item_rect(self, item_id: str) -> Optional[Rect]:
        ...

    def zone_rect(self, zone_id: str) -> Optional[Rect]:
        ...


@dataclass
class StaticViewport:
    """In-memory viewport fed by the host (or by tests)."""

    items: Dict[str, Rect] = field(default_factory=dict)
    zones: Dict[str, Rect] = field(default_factory=dict)

    def item_rect(self, item_id: str) -> Optional[Rect]:
        return self.items.get(item_id)

    def zone_rect(self, zone_id: str) -> Optional[Rect]:
        return self.zones.get(zone_id)

    def set_item_rect(self, item_id: str, rect: Rect) -> None:
        self.items[item_id] = rect

    def set_zone_rect(self, zone_id: str, rect: Rect) -> None:
        self.zones[zone_id] = rect

    def remove(self, element_id: str) -> None:
        self.items.pop(element_id, None)
        self.zones.pop(element_id, None)


def compare_reading_order(a: Rect, b: Rect, tolerance: float = VISUAL_ROW_TOLERANCE_PX) -> int:
    """Top-to-bottom, then left-to-right. Tops within ``tolerance`` share a row."""
    if abs(a.top - b.top) > tolerance:
        return -1 if a.top < b.top else 1
    if a.left != b.left:
        return -1 if a.left < b.left else 1
    return 0


def sort_reading_order(entries: Iterable[Tuple[str, Rect]]) -> List[str]:
    """Sort (id, rect) pairs in visual reading order and return the ids."""
    ordered = sorted(entries, key=cmp_to_key(lambda a, b: compare_reading_order(a[1], b[1])))
    return [entry_id for entry_id, _ in ordered]
