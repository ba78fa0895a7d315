"""Tests for the keymap registry, OS defaults and user overrides."""

import pytest
import yaml

from ariakernel.config.constants import GLOBAL_SCOPE
from ariakernel.keybindings import (
    ConflictSeverity,
    ConflictType,
    KeybindingEntry,
    Keymap,
    When,
    os_default_bindings,
)
from ariakernel.keybindings.config import (
    EXAMPLE_CONFIG,
    KeybindingConfig,
    get_config_path,
    load_config,
    parse_overrides,
    save_example_config,
)
from ariakernel.os_commands import types as t


class TestKeymapResolve:
    """Tests for scope-aware lookup."""

    def test_os_defaults(self, keymap):
        assert keymap.resolve("ArrowDown").command == t.OS_NAVIGATE
        assert keymap.resolve("Meta+Z").command == t.OS_UNDO
        assert keymap.resolve("Meta+Shift+Z").command == t.OS_REDO
        assert keymap.resolve("Shift+ArrowDown").args == {"direction": "down", "select": "range"}
        assert keymap.resolve("F2").command == t.OS_FIELD_START_EDIT

    def test_editing_mode(self, keymap):
        assert keymap.resolve("Enter", is_editing=False).command == t.OS_ACTIVATE
        assert keymap.resolve("Enter", is_editing=True).command == t.OS_FIELD_COMMIT
        assert keymap.resolve("Escape", is_editing=True).command == t.OS_FIELD_CANCEL
        assert keymap.resolve("ArrowDown", is_editing=True) is None

    def test_ctrl_falls_back_to_meta(self, keymap):
        assert keymap.resolve("Ctrl+Z").command == t.OS_UNDO
        assert keymap.resolve("Ctrl+Shift+Z").command == t.OS_REDO

    def test_nearest_scope_wins(self, keymap):
        keymap.register(KeybindingEntry(key="Enter", command="OUTER", scope="page"))
        keymap.register(KeybindingEntry(key="Enter", command="INNER", scope="list"))
        assert keymap.resolve("Enter", ["list", "page"]).command == "INNER"
        assert keymap.resolve("Enter", ["other", "page"]).command == "OUTER"
        assert keymap.resolve("Enter", []).command == t.OS_ACTIVATE

    def test_latest_binding_wins_within_scope(self):
        keymap = Keymap()
        keymap.register(KeybindingEntry(key="X", command="FIRST"))
        keymap.register(KeybindingEntry(key="X", command="SECOND"))
        assert keymap.resolve("X").command == "SECOND"

    def test_to_command_carries_payload_and_scope(self):
        entry = KeybindingEntry(key="X", command="TODO_REMOVE", args={"n": 1}, command_scope="todo")
        command = entry.to_command()
        assert (command.type, command.payload, command.scope) == ("TODO_REMOVE", {"n": 1}, "todo")
        assert KeybindingEntry(key="Y", command="PING").to_command().payload is None


class TestKeymapRegistry:
    """Tests for register / unregister / override."""

    def test_register_is_idempotent(self):
        keymap = Keymap()
        entry = KeybindingEntry(key="X", command="PING")
        keymap.register(entry)
        keymap.register(KeybindingEntry(key="X", command="PING"))
        assert len(keymap.bindings) == 1

    def test_unregister_scope(self, keymap):
        keymap.register(KeybindingEntry(key="Delete", command="ROW_DELETE", scope="grid"))
        keymap.unregister_scope("grid")
        assert "grid" not in keymap.by_scope
        assert keymap.resolve("Delete", ["grid"]).command == t.OS_DELETE

    def test_override_replaces_same_scope(self, keymap):
        applied = keymap.override(
            KeybindingEntry(key="Meta+Z", command="MY_UNDO", when=When.NAVIGATING, source="user")
        )
        assert applied
        assert keymap.resolve("Meta+Z").command == "MY_UNDO"
        assert [b.command for b in keymap.by_key["Meta+Z"]] == ["MY_UNDO"]

    def test_override_refused_when_locked(self):
        keymap = Keymap()
        keymap.register(KeybindingEntry(key="Escape", command="CLOSE", allow_override=False))
        assert not keymap.override(KeybindingEntry(key="Escape", command="OTHER"))
        assert keymap.resolve("Escape").command == "CLOSE"

    def test_get_bindings_for_scope(self, keymap):
        keymap.register(KeybindingEntry(key="X", command="ZONE_ONLY", scope="list"))
        own = keymap.get_bindings_for_scope("list", include_global=False)
        assert [b.command for b in own] == ["ZONE_ONLY"]
        assert len(keymap.get_bindings_for_scope("list")) == len(own) + len(keymap.by_scope[GLOBAL_SCOPE])


class TestConflictDetection:
    """Tests for detect_conflicts."""

    def test_defaults_have_no_conflicts(self, keymap):
        assert keymap.detect_conflicts() == []
        assert not keymap.has_critical_conflicts()

    def test_same_scope_conflict_is_critical(self, keymap):
        keymap.register(KeybindingEntry(key="ArrowDown", command="SCROLL", when=When.NAVIGATING))
        conflicts = keymap.detect_conflicts()
        assert len(conflicts) == 1
        assert conflicts[0].conflict_type is ConflictType.SAME_SCOPE
        assert conflicts[0].severity is ConflictSeverity.CRITICAL
        assert keymap.has_critical_conflicts()

    def test_zone_shadowing_is_info(self, keymap):
        keymap.register(KeybindingEntry(key="Enter", command="SUBMIT", scope="form"))
        conflicts = keymap.detect_conflicts()
        assert {c.conflict_type for c in conflicts} == {ConflictType.SCOPE_OVERRIDE}
        assert all(c.severity is ConflictSeverity.INFO for c in conflicts)

    def test_disjoint_modes_do_not_conflict(self):
        keymap = Keymap()
        keymap.register(KeybindingEntry(key="Enter", command="A", when=When.NAVIGATING))
        keymap.register(KeybindingEntry(key="Enter", command="B", when=When.EDITING))
        assert keymap.detect_conflicts() == []

    def test_sibling_zones_do_not_conflict(self):
        keymap = Keymap()
        keymap.register(KeybindingEntry(key="X", command="A", scope="left"))
        keymap.register(KeybindingEntry(key="X", command="B", scope="right"))
        assert keymap.detect_conflicts() == []

    def test_critical_sorted_first(self, keymap):
        keymap.register(KeybindingEntry(key="Enter", command="SUBMIT", scope="form"))
        keymap.register(KeybindingEntry(key="Home", command="GO_HOME", when=When.NAVIGATING))
        conflicts = keymap.detect_conflicts()
        assert conflicts[0].severity is ConflictSeverity.CRITICAL
        assert "GO_HOME" in conflicts[0].to_string()

    def test_to_dict_summary(self, keymap):
        data = keymap.to_dict()
        assert data["summary"]["total_bindings"] == len(os_default_bindings())
        assert data["summary"]["scopes"] == 1


class TestKeybindingConfig:
    """Tests for keybindings.yaml loading."""

    def test_config_path_follows_config_dir(self, isolated_config_dir):
        assert get_config_path() == isolated_config_dir / "keybindings.yaml"

    def test_missing_file(self, tmp_path):
        assert load_config(tmp_path / "nope.yaml") == {"overrides": []}

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "keybindings.yaml"
        path.write_text("overrides: [unclosed")
        assert load_config(path) == {"overrides": []}

    def test_example_config_parses(self, tmp_path):
        path = tmp_path / "keybindings.yaml"
        assert save_example_config(path)
        assert not save_example_config(path)
        assert path.read_text() == EXAMPLE_CONFIG
        assert yaml.safe_load(EXAMPLE_CONFIG) == {"overrides": []}

    def test_parse_overrides(self):
        entries = parse_overrides({
            "overrides": [
                {"key": "j", "command": "OS_NAVIGATE", "args": {"direction": "down"}, "when": "navigating"},
                {"key": "ctrl+d", "command": "ROW_DELETE", "scope": "grid"},
            ]
        })
        assert [e.key for e in entries] == ["J", "Ctrl+D"]
        assert entries[0].when is When.NAVIGATING
        assert entries[0].args == {"direction": "down"}
        assert entries[0].source == "user"
        assert entries[1].scope == "grid"
        assert entries[1].when is When.ALWAYS

    @pytest.mark.parametrize(
        "override",
        [
            {"command": "OS_UNDO"},
            {"key": "hyper+z", "command": "OS_UNDO"},
            {"key": "z", "command": "OS_UNDO", "when": "sometimes"},
        ],
    )
    def test_malformed_overrides_are_skipped(self, override):
        assert parse_overrides({"overrides": [override]}) == []

    def test_apply_from_file(self, tmp_path, keymap):
        path = tmp_path / "keybindings.yaml"
        path.write_text(yaml.safe_dump({
            "overrides": [
                {"key": "j", "command": "OS_NAVIGATE", "args": {"direction": "down"}, "when": "navigating"},
                {"key": "meta+z", "command": "APP_UNDO", "when": "navigating"},
            ]
        }))
        config = KeybindingConfig(path)
        config.load()
        assert config.apply(keymap) == 2
        assert keymap.resolve("J").args == {"direction": "down"}
        assert keymap.resolve("Meta+Z").command == "APP_UNDO"
