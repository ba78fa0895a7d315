"""
Key normalization.

Every key event and every configured binding is reduced to one canonical
string, e.g. ``"ArrowDown"``, ``"Shift+Tab"``, ``"Meta+Shift+Z"``, ``"Space"``.
Modifiers always appear in the order Meta, Ctrl, Alt, Shift and single letters
are upper-case.

Usage:
    canonical_key("z", meta=True, shift=True)   # "Meta+Shift+Z"
    parse_key("ctrl+shift+z")                   # "Ctrl+Shift+Z"
    parse_key("down")                           # "ArrowDown"
"""

from typing import Dict, List

from ..exceptions import ConfigurationError

MODIFIER_ORDER = ("Meta", "Ctrl", "Alt", "Shift")

MODIFIER_ALIASES: Dict[str, str] = {
    "meta": "Meta",
    "cmd": "Meta",
    "command": "Meta",
    "super": "Meta",
    "ctrl": "Ctrl",
    "control": "Ctrl",
    "alt": "Alt",
    "option": "Alt",
    "shift": "Shift",
}

KEY_ALIASES: Dict[str, str] = {
    "up": "ArrowUp",
    "arrowup": "ArrowUp",
    "down": "ArrowDown",
    "arrowdown": "ArrowDown",
    "left": "ArrowLeft",
    "arrowleft": "ArrowLeft",
    "right": "ArrowRight",
    "arrowright": "ArrowRight",
    "home": "Home",
    "end": "End",
    "pageup": "PageUp",
    "pagedown": "PageDown",
    " ": "Space",
    "space": "Space",
    "spacebar": "Space",
    "enter": "Enter",
    "return": "Enter",
    "esc": "Escape",
    "escape": "Escape",
    "tab": "Tab",
    "backspace": "Backspace",
    "delete": "Delete",
    "del": "Delete",
    "insert": "Insert",
}

# Keys a focused text field consumes itself
CARET_KEYS = frozenset(
    {"Space", "Backspace", "Delete", "ArrowLeft", "ArrowRight", "Home", "End"}
)


def normalize_key_name(key: str) -> str:
    """Canonical name of a bare key (no modifiers)."""
    if len(key) == 1:
        return "Space" if key == " " else key.upper() if key.isalpha() else key
    lowered = key.lower()
    if lowered in KEY_ALIASES:
        return KEY_ALIASES[lowered]
    if lowered.startswith("f") and lowered[1:].isdigit():
        return lowered.upper()
    return key[0].upper() + key[1:]


def is_printable(key: str) -> bool:
    """True for a single visible character (what a text field would insert)."""
    return len(key) == 1 and key.isprintable()


def canonical_key(
    key: str,
    *,
    shift: bool = False,
    ctrl: bool = False,
    alt: bool = False,
    meta: bool = False,
) -> str:
    """Build the canonical key string for a key plus modifier flags."""
    name = normalize_key_name(key)
    # Shift is already folded into punctuation like "?" or "!"
    if shift and len(key) == 1 and not key.isalpha() and key != " ":
        shift = False
    flags = {"Meta": meta, "Ctrl": ctrl, "Alt": alt, "Shift": shift}
    parts: List[str] = [mod for mod in MODIFIER_ORDER if flags[mod]]
    parts.append(name)
    return "+".join(parts)


def parse_key(text: str) -> str:
    """
    Parse a human-written chord into its canonical form.

    Accepts ``ctrl+z``, ``Meta+Shift+Z``, Textual key names such as
    ``shift+tab`` or ``down``, and ``backtab``.

    Raises:
        ConfigurationError: an unknown modifier or an empty chord
    """
    text = text.strip()
    if not text:
        raise ConfigurationError("Empty key binding", setting="key")
    if text.lower() == "backtab":
        return "Shift+Tab"
    if text == "+":
        return "+"

    parts = text.split("+")
    key = parts[-1] or "+"
    flags = {"shift": False, "ctrl": False, "alt": False, "meta": False}
    for raw in parts[:-1]:
        modifier = MODIFIER_ALIASES.get(raw.strip().lower())
        if modifier is None:
            raise ConfigurationError(f"Unknown modifier '{raw}' in '{text}'", setting="key")
        flags[modifier.lower()] = True
    return canonical_key(key, **flags)


def swap_platform_modifier(key: str) -> str:
    """Swap Ctrl and Meta in a canonical chord; other chords come back unchanged."""
    parts = key.split("+")
    modifiers, name = parts[:-1], parts[-1]
    if "Ctrl" in modifiers and "Meta" not in modifiers:
        modifiers = ["Meta" if m == "Ctrl" else m for m in modifiers]
    elif "Meta" in modifiers and "Ctrl" not in modifiers:
        modifiers = ["Ctrl" if m == "Meta" else m for m in modifiers]
    else:
        return key
    ordered = [m for m in MODIFIER_ORDER if m in modifiers]
    return "+".join(ordered + [name])
