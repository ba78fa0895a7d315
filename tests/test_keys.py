"""Tests for key normalization."""

import pytest

from ariakernel.exceptions import ConfigurationError
from ariakernel.input.keys import canonical_key, is_printable, normalize_key_name, parse_key, swap_platform_modifier


class TestCanonicalKey:
    """Tests for canonical_key."""

    def test_plain_keys(self):
        assert canonical_key("ArrowDown") == "ArrowDown"
        assert canonical_key("a") == "A"
        assert canonical_key(" ") == "Space"
        assert canonical_key("Enter") == "Enter"

    def test_modifier_order(self):
        assert canonical_key("z", shift=True, meta=True) == "Meta+Shift+Z"
        assert canonical_key("z", alt=True, ctrl=True) == "Ctrl+Alt+Z"

    def test_shift_folded_into_punctuation(self):
        assert canonical_key("?", shift=True) == "?"
        assert canonical_key("Tab", shift=True) == "Shift+Tab"

    def test_shift_space_keeps_shift(self):
        assert canonical_key(" ", shift=True) == "Shift+Space"

    def test_aliases(self):
        assert normalize_key_name("down") == "ArrowDown"
        assert normalize_key_name("esc") == "Escape"
        assert normalize_key_name("f2") == "F2"
        assert normalize_key_name("pageup") == "PageUp"


class TestParseKey:
    """Tests for parse_key."""

    def test_parses_human_chords(self):
        assert parse_key("ctrl+shift+z") == "Ctrl+Shift+Z"
        assert parse_key("Meta+Shift+Z") == "Meta+Shift+Z"
        assert parse_key("cmd+a") == "Meta+A"
        assert parse_key("down") == "ArrowDown"

    def test_textual_names(self):
        assert parse_key("shift+tab") == "Shift+Tab"
        assert parse_key("backtab") == "Shift+Tab"

    def test_plus_key(self):
        assert parse_key("+") == "+"

    def test_unknown_modifier_raises(self):
        with pytest.raises(ConfigurationError, match="Unknown modifier"):
            parse_key("hyper+a")

    def test_empty_raises(self):
        with pytest.raises(ConfigurationError):
            parse_key("   ")


class TestHelpers:
    """Tests for is_printable and swap_platform_modifier."""

    def test_is_printable(self):
        assert is_printable("a")
        assert is_printable(" ")
        assert not is_printable("Enter")
        assert not is_printable("\t")

    def test_swap_platform_modifier(self):
        assert swap_platform_modifier("Ctrl+Z") == "Meta+Z"
        assert swap_platform_modifier("Meta+Shift+Z") == "Ctrl+Shift+Z"
        assert swap_platform_modifier("Meta+Ctrl+Z") == "Meta+Ctrl+Z"
        assert swap_platform_modifier("ArrowDown") == "ArrowDown"
