"""Tests for the pure navigation resolvers."""

import logging

import pytest

from ariakernel.geometry import Rect, StaticViewport
from ariakernel.navigation.corner import filter_containers, resolve_corner
from ariakernel.navigation.focus_finder import resolve_spatial, weighted_distance
from ariakernel.navigation.recovery import find_recovery_target
from ariakernel.navigation.roving import is_orthogonal, resolve_entry, resolve_linear
from ariakernel.navigation.strategies import STRATEGIES, needs_geometry, resolve_with_strategy, strategy_name
from ariakernel.navigation.typeahead import find_typeahead_match, is_typeahead_char, next_query
from ariakernel.navigation.types import NavigationContext
from ariakernel.roles import NavigateConfig
from helpers import grid_rects

ITEMS = ["a", "b", "c"]


def viewport_with(rects):
    viewport = StaticViewport()
    for item_id, rect in rects.items():
        viewport.set_item_rect(item_id, rect)
    return viewport


class TestResolveLinear:
    """Tests for 1-D roving navigation."""

    @pytest.mark.parametrize(
        "current,direction,loop,expected",
        [
            ("a", "down", False, "b"),
            ("b", "up", False, "a"),
            ("c", "down", False, "c"),
            ("a", "up", False, "a"),
            ("c", "down", True, "a"),
            ("a", "up", True, "c"),
            ("a", "right", False, "b"),
            ("c", "left", False, "b"),
            ("b", "home", False, "a"),
            ("b", "end", False, "c"),
        ],
    )
    def test_moves(self, current, direction, loop, expected):
        result = resolve_linear(current, direction, ITEMS, NavigationContext(loop=loop))
        assert result.target_id == expected

    def test_unknown_current_starts_at_first(self):
        assert resolve_linear("gone", "down", ITEMS).target_id == "a"
        assert resolve_linear(None, "up", ITEMS).target_id == "a"

    def test_empty_items(self):
        assert resolve_linear("a", "down", []).target_id is None

    def test_is_orthogonal(self):
        assert is_orthogonal("left", "vertical")
        assert is_orthogonal("down", "horizontal")
        assert not is_orthogonal("down", "vertical")
        assert not is_orthogonal("left", "both")


class TestResolveEntry:
    """Tests for resolve_entry."""

    def test_first_and_last(self):
        assert resolve_entry(ITEMS, "first") == "a"
        assert resolve_entry(ITEMS, "last") == "c"

    def test_restore(self):
        assert resolve_entry(ITEMS, "restore", last_focused_id="b") == "b"
        assert resolve_entry(ITEMS, "restore", last_focused_id="gone") == "a"

    def test_selected(self):
        assert resolve_entry(ITEMS, "selected", selection=("gone", "c")) == "c"
        assert resolve_entry(ITEMS, "selected") == "a"

    def test_no_items(self):
        assert resolve_entry([], "first") is None


class TestResolveSpatial:
    """Tests for FocusFinder-style 2-D navigation."""

    GRID = list("abcdefghi")

    def context(self, rects, **kwargs):
        return NavigationContext(viewport=viewport_with(rects), **kwargs)

    def test_grid_moves(self):
        ctx = self.context(grid_rects(self.GRID, cols=3))
        assert resolve_spatial("e", "down", self.GRID, ctx).target_id == "h"
        assert resolve_spatial("e", "up", self.GRID, ctx).target_id == "b"
        assert resolve_spatial("e", "left", self.GRID, ctx).target_id == "d"
        assert resolve_spatial("e", "right", self.GRID, ctx).target_id == "f"

    def test_edge_holds(self):
        ctx = self.context(grid_rects(self.GRID, cols=3))
        assert resolve_spatial("c", "right", self.GRID, ctx).target_id == "c"
        assert resolve_spatial("b", "up", self.GRID, ctx).target_id == "b"

    def test_home_end(self):
        ctx = self.context(grid_rects(self.GRID, cols=3))
        assert resolve_spatial("e", "home", self.GRID, ctx).target_id == "a"
        assert resolve_spatial("e", "end", self.GRID, ctx).target_id == "i"

    def test_beam_beats_closer_diagonal(self):
        rects = {
            "src": Rect(0, 0, 100, 40),
            "far": Rect(0, 80, 100, 40),
            "diagonal": Rect(110, 45, 100, 40),
        }
        ctx = self.context(rects)
        assert resolve_spatial("src", "down", list(rects), ctx).target_id == "far"

    def test_vertical_move_keeps_sticky_x(self):
        rects = {
            "wide": Rect(0, 0, 300, 40),
            "x": Rect(0, 40, 100, 40),
            "y": Rect(100, 40, 100, 40),
            "z": Rect(200, 40, 100, 40),
        }
        ctx = self.context(rects)
        result = resolve_spatial("z", "up", list(rects), ctx)
        assert result.target_id == "wide"
        assert result.sticky_x == 250
        assert result.sticky_y is None

        carried = self.context(rects, sticky_x=250)
        assert resolve_spatial("wide", "down", list(rects), carried).sticky_x == 250

    def test_horizontal_move_keeps_sticky_y(self):
        ctx = self.context(grid_rects(self.GRID, cols=3))
        result = resolve_spatial("d", "right", self.GRID, ctx)
        assert result.sticky_y == 60
        assert result.sticky_x is None

    def test_missing_geometry_holds(self):
        assert resolve_spatial("a", "down", ITEMS, NavigationContext()).target_id == "a"

    def test_weighted_distance(self):
        assert weighted_distance(1, 0) == 13
        assert weighted_distance(0, 3) == 9


class TestResolveCorner:
    """Tests for corner navigation with nested containers."""

    RECTS = {
        "a": Rect(0, 10, 50, 50),
        "group": Rect(200, 0, 200, 200),
        "c1": Rect(210, 10, 50, 50),
        "c2": Rect(210, 100, 50, 50),
    }

    def context(self):
        return NavigationContext(viewport=viewport_with(self.RECTS))

    def test_lands_on_child_not_container(self):
        result = resolve_corner("a", "right", list(self.RECTS), self.context())
        assert result.target_id == "c1"

    def test_only_items_strictly_on_side(self):
        result = resolve_corner("c1", "down", list(self.RECTS), self.context())
        assert result.target_id == "c2"

    def test_nothing_on_side_holds(self):
        assert resolve_corner("a", "left", list(self.RECTS), self.context()).target_id == "a"

    def test_cross_offset_breaks_ties(self):
        rects = {
            "src": Rect(0, 100, 50, 50),
            "high": Rect(100, 0, 50, 50),
            "level": Rect(100, 110, 50, 50),
        }
        ctx = NavigationContext(viewport=viewport_with(rects))
        assert resolve_corner("src", "right", list(rects), ctx).target_id == "level"

    def test_filter_containers_drops_wrapper_of_current(self):
        current = Rect(10, 10, 10, 10)
        kept = filter_containers(current, [("outer", Rect(0, 0, 100, 100)), ("x", Rect(50, 50, 10, 10))])
        assert [item_id for item_id, _ in kept] == ["x"]

    def test_no_focus_enters_first(self):
        assert resolve_corner(None, "down", ITEMS, self.context()).target_id == "a"


class TestRecovery:
    """Tests for find_recovery_target."""

    def test_next_policy_takes_item_at_same_index(self):
        result = find_recovery_target(["a", "c"], 1)
        assert (result.target_id, result.reason) == ("c", "sibling-next")

    def test_removing_last_item_goes_back(self):
        result = find_recovery_target(["a", "b"], 2)
        assert (result.target_id, result.reason) == ("b", "sibling-prev")

    def test_prev_policy(self):
        result = find_recovery_target(["a", "c"], 1, policy="prev")
        assert (result.target_id, result.reason) == ("a", "sibling-prev")

    def test_prev_policy_at_start_goes_forward(self):
        result = find_recovery_target(["b", "c"], 0, policy="prev")
        assert (result.target_id, result.reason) == ("b", "sibling-next")

    def test_unknown_index(self):
        result = find_recovery_target(["a", "b"], None)
        assert (result.target_id, result.reason) == ("a", "zone-default")

    def test_empty_zone(self):
        result = find_recovery_target([], 0)
        assert (result.target_id, result.reason) == (None, "none")


class TestTypeahead:
    """Tests for the typeahead helpers."""

    FRUIT = {"apple": "Apple", "banana": "Banana", "blueberry": "Blueberry", "cherry": "Cherry"}

    def match(self, current, query):
        return find_typeahead_match(list(self.FRUIT), self.FRUIT.get, current, query)

    def test_prefix_match_is_case_insensitive(self):
        assert self.match("apple", "c") == "cherry"
        assert self.match("apple", "CH") == "cherry"

    def test_single_char_cycles(self):
        assert self.match("apple", "b") == "banana"
        assert self.match("banana", "b") == "blueberry"
        assert self.match("blueberry", "b") == "banana"

    def test_repeated_char_cycles_like_single(self):
        assert self.match("banana", "bbb") == "blueberry"

    def test_longer_query_keeps_current_match(self):
        assert self.match("blueberry", "bl") == "blueberry"

    def test_no_match(self):
        assert self.match("apple", "z") is None
        assert self.match("apple", "") is None

    def test_next_query_within_timeout(self):
        assert next_query("b", 10.0, "l", 10.2) == "bl"

    def test_next_query_after_timeout(self):
        assert next_query("b", 10.0, "c", 10.6) == "c"
        assert next_query("", None, "c", 10.0) == "c"
        assert next_query("b", 10.0, "c", 10.2, timeout_ms=100) == "c"

    def test_is_typeahead_char(self):
        assert is_typeahead_char("a")
        assert is_typeahead_char("7")
        assert not is_typeahead_char(" ")
        assert not is_typeahead_char("ab")


class TestStrategies:
    """Tests for the strategy table."""

    def test_known_strategies(self):
        assert set(STRATEGIES) >= {"linear", "vertical", "horizontal", "spatial", "both", "corner"}
        assert needs_geometry("corner")
        assert not needs_geometry("vertical")

    def test_strategy_name(self):
        assert strategy_name(NavigateConfig()) == "vertical"
        assert strategy_name(NavigateConfig(strategy="corner")) == "corner"

    def test_unknown_strategy_holds(self, caplog):
        with caplog.at_level(logging.WARNING, logger="ariakernel"):
            result = resolve_with_strategy("zigzag", "b", "down", ITEMS)
        assert result.target_id == "b"
        assert "zigzag" in caplog.text
