"""Tests for app slices, undo history and transactions."""

from dataclasses import replace

import pytest

from ariakernel.exceptions import TransactionError
from ariakernel.kernel.app import register_app
from ariakernel.kernel.commands import Command, CommandFactory
from ariakernel.kernel.core import DispatchStatus
from ariakernel.kernel.history import HistoryMiddleware, redo_app_state, undo_app_state
from ariakernel.os_commands import mount_zone
from ariakernel.os_commands.types import OS_FOCUS, OS_NAVIGATE
from ariakernel.state import AppState
from ariakernel.zones.registry import ZoneEntry


def item_ids(app):
    return [item["id"] for item in app.data["items"]]


def remove_item(app, payload):
    items = tuple(item for item in app.data["items"] if item["id"] != payload["id"])
    return replace(app, data={**app.data, "items": items})


def rename_item(app, payload):
    items = tuple(
        {**item, "text": payload["text"]} if item["id"] == payload["id"] else item
        for item in app.data["items"]
    )
    return replace(app, data={**app.data, "items": items})


REMOVE = CommandFactory("TODO_REMOVE", "todo")
RENAME = CommandFactory("TODO_RENAME", "todo")


@pytest.fixture
def todo(kernel, todo_app):
    todo_app.command(REMOVE.type, remove_item)
    todo_app.command(RENAME.type, rename_item)
    return todo_app


class TestAppCommands:
    """Tests for app-scoped commands."""

    def test_handler_receives_slice(self, kernel, todo):
        result = kernel.dispatch(REMOVE(id="b"))
        assert result.status is DispatchStatus.HANDLED
        assert result.handler_scope == "todo"
        assert item_ids(todo.state) == ["a", "c"]

    def test_unchanged_slice_is_noop(self, kernel, todo):
        todo.command("TODO_TOUCH", lambda app, payload: app)
        assert kernel.dispatch(Command("TODO_TOUCH", scope="todo")).status is DispatchStatus.NOOP

    def test_none_bubbles_to_os(self, kernel, todo):
        mount_zone(kernel, ZoneEntry.create("todos", role="listbox", items=["a", "b"]), initial_focus="a")
        todo.command(OS_NAVIGATE, lambda app, payload: None)
        result = kernel.dispatch(Command(OS_NAVIGATE, {"direction": "down"}, scope="todo"))
        assert result.handler_scope == "GLOBAL"
        assert kernel.get_state().focus.zone("todos").focused_item_id == "b"

    def test_dict_result_carries_extra_effects(self, kernel, todo):
        seen = []
        kernel.define_effect("toast", seen.append)
        todo.command("TODO_SAY", lambda app, payload: {"toast": payload["text"]})
        kernel.dispatch(Command("TODO_SAY", {"text": "saved"}, scope="todo"))
        assert seen == ["saved"]

    def test_set_state_reset_and_dispose(self, kernel, todo):
        todo.set_state(lambda app: replace(app, ui={"filter": "done"}))
        assert todo.state.ui == {"filter": "done"}
        todo.reset()
        assert todo.state.ui is None
        todo.dispose()
        assert "todo" not in kernel.get_state().apps


class TestUndoRedo:
    """Tests for undo/redo through the app handle."""

    def test_undo_and_redo(self, kernel, todo):
        kernel.dispatch(REMOVE(id="a"))
        kernel.dispatch(REMOVE(id="b"))
        assert item_ids(todo.state) == ["c"]

        kernel.dispatch(todo.undo_command())
        assert item_ids(todo.state) == ["b", "c"]
        kernel.dispatch(todo.undo_command())
        assert item_ids(todo.state) == ["a", "b", "c"]
        assert not todo.state.history.can_undo

        kernel.dispatch(todo.redo_command())
        assert item_ids(todo.state) == ["b", "c"]
        assert todo.state.history.can_redo

    def test_new_change_clears_redo(self, kernel, todo):
        kernel.dispatch(REMOVE(id="a"))
        kernel.dispatch(todo.undo_command())
        kernel.dispatch(RENAME(id="b", text="Rye"))
        assert not todo.state.history.can_redo

    def test_empty_undo_is_noop(self, kernel, todo):
        assert kernel.dispatch(todo.undo_command()).status is DispatchStatus.NOOP

    def test_unlogged_commands_skip_history(self, kernel, todo):
        quiet = todo.command("TODO_QUIET", remove_item, log=False)
        kernel.dispatch(quiet(id="a"))
        assert item_ids(todo.state) == ["b", "c"]
        assert not todo.state.history.can_undo

    def test_focus_only_commands_skip_history(self, kernel, todo):
        mount_zone(kernel, ZoneEntry.create("todos", role="listbox", items=["a", "b", "c"]))
        kernel.dispatch(Command(OS_FOCUS, {"zone_id": "todos", "item_id": "b"}, scope="todo"))
        assert not todo.state.history.can_undo

    def test_undo_restores_focus(self, kernel, todo):
        mount_zone(
            kernel,
            ZoneEntry.create("todos", role="listbox", get_items=lambda: item_ids(todo.state)),
            initial_focus="b",
        )
        kernel.dispatch(REMOVE(id="b"))
        kernel.dispatch(Command(OS_FOCUS, {"zone_id": "todos", "item_id": "c"}))
        assert kernel.get_state().focus.zone("todos").focused_item_id == "c"

        kernel.dispatch(todo.undo_command())
        assert item_ids(todo.state) == ["a", "b", "c"]
        assert kernel.get_state().focus.zone("todos").focused_item_id == "b"

    def test_history_limit(self, kernel, todo):
        todo.history.limit = 2
        for text in ("one", "two", "three"):
            kernel.dispatch(RENAME(id="a", text=text))
        assert len(todo.state.history.past) == 2


class TestTransactions:
    """Tests for grouped undo steps."""

    def test_group_undoes_in_one_step(self, kernel, todo):
        with todo.transaction() as group_id:
            kernel.dispatch(REMOVE(id="a"))
            kernel.dispatch(REMOVE(id="b"))
        assert group_id.startswith("txn-")
        assert [e.group_id for e in todo.state.history.past] == [group_id, group_id]

        kernel.dispatch(todo.undo_command())
        assert item_ids(todo.state) == ["a", "b", "c"]
        assert len(todo.state.history.future) == 1

        kernel.dispatch(todo.redo_command())
        assert item_ids(todo.state) == ["c"]

    def test_nested_transactions_share_group(self, todo):
        with todo.transaction() as outer:
            with todo.transaction() as inner:
                assert inner == outer
            assert todo.history.in_transaction
        assert not todo.history.in_transaction

    def test_end_without_begin(self, todo):
        with pytest.raises(TransactionError):
            todo.end_transaction()

    def test_no_history_app(self, kernel):
        plain = register_app(kernel, "plain", data={}, history=False)
        with pytest.raises(TransactionError):
            plain.begin_transaction()


class TestHistoryFunctions:
    """Tests for the pure undo/redo helpers."""

    def test_middleware_id_and_scope(self):
        middleware = HistoryMiddleware("todo").middleware()
        assert (middleware.id, middleware.scope) == ("history:todo", "todo")

    def test_undo_nothing(self):
        app = AppState(data={"n": 1})
        assert undo_app_state(app) == (app, None)
        assert redo_app_state(app) == (app, None)
