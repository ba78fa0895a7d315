"""Tests for the pointer gesture recognizer and click resolution."""

from ariakernel.input.gesture import (
    IDLE,
    GestureOutcome,
    GesturePhase,
    PointerDown,
    PointerMove,
    PointerUp,
    pointer_down,
    pointer_move,
    pointer_up,
)
from ariakernel.input.mouse import ClickInput, resolve_click, resolve_select_mode
from ariakernel.os_commands.types import OS_ACTIVATE, OS_FOCUS, OS_SELECT
from ariakernel.zones.registry import ZoneEntry


class TestGestureRecognizer:
    """Tests for pointer_down / pointer_move / pointer_up."""

    def test_press_then_release_is_click(self):
        state = pointer_down(IDLE, PointerDown(0, 10, 10, "a", "list"))
        assert state.phase is GesturePhase.PENDING
        result = pointer_up(state, PointerUp(10, 10))
        assert result.outcome is GestureOutcome.CLICK
        assert (result.item_id, result.zone_id) == ("a", "list")
        assert result.state == IDLE

    def test_secondary_button_is_ignored(self):
        state = pointer_down(IDLE, PointerDown(2, 10, 10, "a", "list"))
        assert state == IDLE
        assert pointer_up(state, PointerUp(10, 10)).outcome is GestureOutcome.NONE

    def test_press_outside_any_zone_is_ignored(self):
        assert pointer_down(IDLE, PointerDown(0, 10, 10)) == IDLE

    def test_small_jitter_stays_a_click(self):
        state = pointer_down(IDLE, PointerDown(0, 10, 10, "a", "list", has_drag_handle=True))
        state = pointer_move(state, PointerMove(13, 14))
        assert state.phase is GesturePhase.PENDING
        assert pointer_up(state, PointerUp(13, 14)).outcome is GestureOutcome.CLICK

    def test_move_past_threshold_on_handle_drags(self):
        state = pointer_down(IDLE, PointerDown(0, 10, 10, "a", "list", has_drag_handle=True))
        state = pointer_move(state, PointerMove(10, 30))
        assert state.phase is GesturePhase.DRAG
        result = pointer_up(state, PointerUp(10, 30, over_item_id="c"))
        assert result.outcome is GestureOutcome.DRAG_END
        assert result.item_id == "a"
        assert result.over_item_id == "c"

    def test_move_without_handle_never_drags(self):
        state = pointer_down(IDLE, PointerDown(0, 10, 10, "a", "list"))
        state = pointer_move(state, PointerMove(200, 200))
        assert state.phase is GesturePhase.PENDING

    def test_custom_threshold(self):
        state = pointer_down(IDLE, PointerDown(0, 0, 0, "a", "list", has_drag_handle=True))
        assert pointer_move(state, PointerMove(8, 0), threshold=10).phase is GesturePhase.PENDING
        assert pointer_move(state, PointerMove(11, 0), threshold=10).phase is GesturePhase.DRAG


class TestResolveClick:
    """Tests for resolve_click."""

    def test_select_mode_from_modifiers(self):
        assert resolve_select_mode() == "replace"
        assert resolve_select_mode(shift=True) == "range"
        assert resolve_select_mode(meta=True) == "toggle"
        assert resolve_select_mode(ctrl=True) == "toggle"
        assert resolve_select_mode(shift=True, meta=True) == "range"

    def test_click_in_listbox_focuses_then_selects(self):
        entry = ZoneEntry.create("list", role="listbox", items=["a", "b"])
        focus, select = resolve_click(ClickInput("b", "list"), entry)
        assert focus.type == OS_FOCUS
        assert focus.payload == {"zone_id": "list", "item_id": "b", "follow_focus": False}
        assert select.type == OS_SELECT
        assert select.payload == {"zone_id": "list", "target_id": "b", "mode": "replace"}

    def test_click_in_toolbar_only_focuses(self):
        entry = ZoneEntry.create("bar", role="toolbar", items=["bold"])
        commands = resolve_click(ClickInput("bold", "bar"), entry)
        assert [c.type for c in commands] == [OS_FOCUS]

    def test_click_in_tree_also_activates(self):
        entry = ZoneEntry.create("tree", role="tree", items=["root"])
        commands = resolve_click(ClickInput("root", "tree", meta=True), entry)
        assert [c.type for c in commands] == [OS_FOCUS, OS_SELECT, OS_ACTIVATE]
        assert commands[1].payload["mode"] == "toggle"

    def test_click_on_zone_background(self):
        (focus,) = resolve_click(ClickInput(None, "list"), None)
        assert focus.payload == {"zone_id": "list", "item_id": None}

    def test_click_outside_zones(self):
        assert resolve_click(ClickInput("a", None), None) == ()
