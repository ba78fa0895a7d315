"""Tests for seamless cross-zone navigation."""

from ariakernel.geometry import Rect
from ariakernel.navigation.seamless import find_entry_item, find_sibling_zone
from helpers import make_entry


def side_by_side(registry, viewport, parent_id=None):
    registry.register("left", make_entry("left", "builderBlock", ["l1", "l2"], parent_id=parent_id))
    registry.register("right", make_entry("right", "builderBlock", ["r1", "r2", "r3"], parent_id=parent_id))
    viewport.set_zone_rect("left", Rect(0, 0, 200, 200))
    viewport.set_zone_rect("right", Rect(210, 0, 200, 200))
    viewport.set_item_rect("l1", Rect(0, 0, 100, 40))
    viewport.set_item_rect("l2", Rect(0, 50, 100, 40))
    viewport.set_item_rect("r1", Rect(210, 0, 100, 40))
    viewport.set_item_rect("r2", Rect(210, 50, 100, 40))
    viewport.set_item_rect("r3", Rect(310, 0, 100, 40))


class TestFindSiblingZone:
    """Tests for find_sibling_zone."""

    def test_sibling_beyond_edge(self, registry, viewport):
        side_by_side(registry, viewport)
        assert find_sibling_zone("left", "right", registry, viewport) == "right"
        assert find_sibling_zone("right", "left", registry, viewport) == "left"

    def test_nothing_beyond_edge(self, registry, viewport):
        side_by_side(registry, viewport)
        assert find_sibling_zone("left", "left", registry, viewport) is None
        assert find_sibling_zone("left", "up", registry, viewport) is None

    def test_vertical_falls_back_to_reading_order(self, registry, viewport):
        side_by_side(registry, viewport)
        assert find_sibling_zone("left", "down", registry, viewport) == "right"
        assert find_sibling_zone("right", "up", registry, viewport) == "left"

    def test_nearest_sibling_wins(self, registry, viewport):
        side_by_side(registry, viewport, parent_id="page")
        registry.register("page", make_entry("page", "application"))
        registry.register("far", make_entry("far", "builderBlock", ["f1"], parent_id="page"))
        viewport.set_zone_rect("far", Rect(600, 0, 200, 200))
        assert find_sibling_zone("left", "right", registry, viewport) == "right"

    def test_only_siblings_are_considered(self, registry, viewport):
        side_by_side(registry, viewport)
        registry.register("inner", make_entry("inner", "builderBlock", ["i1"], parent_id="right"))
        viewport.set_zone_rect("inner", Rect(220, 10, 50, 50))
        assert find_sibling_zone("left", "right", registry, viewport) == "right"

    def test_missing_geometry(self, registry, viewport):
        registry.register("left", make_entry("left", "builderBlock", ["l1"]))
        registry.register("right", make_entry("right", "builderBlock", ["r1"]))
        assert find_sibling_zone("left", "right", registry, viewport) is None


class TestFindEntryItem:
    """Tests for find_entry_item."""

    def test_lands_on_aligned_item_at_entry_edge(self, registry, viewport):
        side_by_side(registry, viewport)
        assert find_entry_item("right", "right", "l2", registry, viewport) == "r2"
        assert find_entry_item("right", "right", "l1", registry, viewport) == "r1"

    def test_entering_backwards_uses_far_edge(self, registry, viewport):
        side_by_side(registry, viewport)
        assert find_entry_item("right", "left", "l1", registry, viewport) == "r3"

    def test_without_source_geometry(self, registry, viewport):
        side_by_side(registry, viewport)
        assert find_entry_item("right", "right", None, registry, viewport) == "r1"
        assert find_entry_item("right", "left", "unknown", registry, viewport) == "r3"

    def test_empty_zone(self, registry, viewport):
        registry.register("empty", make_entry("empty", "builderBlock"))
        assert find_entry_item("empty", "down", "l1", registry, viewport) is None
