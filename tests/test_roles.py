"""Tests for role presets and config resolution."""

from ariakernel.roles import (
    BOTH,
    CHECKED_ROLES,
    ROLE_PRESETS,
    ZoneConfig,
    child_role,
    resolve_role,
)


class TestResolveRole:
    """Tests for resolve_role."""

    def test_unknown_role_gives_defaults(self):
        assert resolve_role("no-such-role") == ZoneConfig()
        assert resolve_role(None) == ZoneConfig()

    def test_listbox_preset(self):
        config = resolve_role("listbox")
        assert config.navigate.orientation == "vertical"
        assert config.navigate.typeahead is True
        assert config.select.mode == "single"
        assert config.select.follow_focus is True
        assert config.tab.behavior == "escape"

    def test_overrides_merge_key_by_key(self):
        config = resolve_role("listbox", {"navigate": {"loop": True}})
        assert config.navigate.loop is True
        # untouched keys keep the preset value
        assert config.navigate.typeahead is True
        assert config.select.mode == "single"

    def test_overrides_without_role(self):
        config = resolve_role(None, {"select": {"mode": "multiple"}})
        assert config.select.mode == "multiple"
        assert config.navigate == ZoneConfig().navigate

    def test_value_section_only_for_value_roles(self):
        assert resolve_role("listbox").value is None
        slider = resolve_role("slider").value
        assert (slider.min, slider.max, slider.step, slider.large_step) == (0, 100, 1, 10)

    def test_value_override_on_plain_zone(self):
        config = resolve_role(None, {"value": {"max": 5}})
        assert config.value.max == 5
        assert config.value.min == 0

    def test_grid_is_two_dimensional_multi_select(self):
        config = resolve_role("grid")
        assert config.navigate.orientation == BOTH
        assert config.select.mode == "multiple"
        assert config.select.range is True

    def test_dialog_traps_and_restores(self):
        config = resolve_role("dialog")
        assert config.tab.behavior == "trap"
        assert config.tab.restore_focus is True
        assert config.dismiss.escape == "close"
        assert config.project.auto_focus is True

    def test_alertdialog_ignores_outside_click(self):
        assert resolve_role("alertdialog").dismiss.outside_click == "none"
        assert resolve_role("dialog").dismiss.outside_click == "close"

    def test_every_preset_resolves(self):
        for role in ROLE_PRESETS:
            assert isinstance(resolve_role(role), ZoneConfig)

    def test_to_dict_is_plain(self):
        data = resolve_role("menu").to_dict()
        assert data["navigate"]["loop"] is True
        assert data["value"] is None


class TestChildRole:
    """Tests for child_role."""

    def test_known_roles(self):
        assert child_role("listbox") == "option"
        assert child_role("menu") == "menuitem"
        assert child_role("radiogroup") == "radio"
        assert child_role("tree") == "treeitem"
        assert child_role("grid") == "gridcell"

    def test_fallback_is_option(self):
        assert child_role(None) == "option"
        assert child_role("application") == "option"

    def test_radio_is_a_checked_role(self):
        assert child_role("radiogroup") in CHECKED_ROLES
        assert child_role("listbox") not in CHECKED_ROLES
