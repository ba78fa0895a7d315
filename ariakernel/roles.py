"""
ARIA role presets.

Each supported role maps to a partial zone configuration. ``resolve_role``
layers the defaults, the role preset, and caller overrides section by section,
so a zone only needs to state how it differs from its role.

Usage:
    config = resolve_role("listbox", {"select": {"mode": "multiple"}})
    assert config.navigate.typeahead
    assert config.select.mode == "multiple"
"""

from dataclasses import asdict, dataclass, field, replace
from typing import Any, Dict, Optional

# Orientation values
VERTICAL = "vertical"
HORIZONTAL = "horizontal"
BOTH = "both"


@dataclass(frozen=True)
class NavigateConfig:
    orientation: str = VERTICAL
    loop: bool = False
    seamless: bool = False
    typeahead: bool = False
    entry: str = "first"  # first | last | restore | selected
    recovery: str = "next"  # next | prev
    arrow_expand: bool = False
    strategy: Optional[str] = None  # explicit strategy name, else derived from orientation


@dataclass(frozen=True)
class SelectConfig:
    mode: str = "none"  # none | single | multiple
    follow_focus: bool = False
    disallow_empty: bool = False
    range: bool = False
    toggle: bool = False


@dataclass(frozen=True)
class ActivateConfig:
    mode: str = "manual"  # manual | automatic
    on_click: bool = False


@dataclass(frozen=True)
class DismissConfig:
    escape: str = "none"  # close | deselect | none
    outside_click: str = "none"  # close | none


@dataclass(frozen=True)
class TabConfig:
    behavior: str = "escape"  # loop | escape | flow | trap | native
    restore_focus: bool = False
    skip_disabled: bool = True


@dataclass(frozen=True)
class ProjectConfig:
    virtual_focus: bool = False
    auto_focus: bool = False


@dataclass(frozen=True)
class ExpandConfig:
    mode: str = "none"  # none | all | explicit


@dataclass(frozen=True)
class CheckConfig:
    mode: str = "none"  # none | select | check


@dataclass(frozen=True)
class ValueConfig:
    min: float = 0
    max: float = 100
    step: float = 1
    large_step: float = 10


@dataclass(frozen=True)
class ZoneConfig:
    """Role-resolved behavior of a zone."""

    navigate: NavigateConfig = field(default_factory=NavigateConfig)
    select: SelectConfig = field(default_factory=SelectConfig)
    activate: ActivateConfig = field(default_factory=ActivateConfig)
    dismiss: DismissConfig = field(default_factory=DismissConfig)
    tab: TabConfig = field(default_factory=TabConfig)
    project: ProjectConfig = field(default_factory=ProjectConfig)
    expand: ExpandConfig = field(default_factory=ExpandConfig)
    check: CheckConfig = field(default_factory=CheckConfig)
    value: Optional[ValueConfig] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


SECTIONS = {
    "navigate": NavigateConfig,
    "select": SelectConfig,
    "activate": ActivateConfig,
    "dismiss": DismissConfig,
    "tab": TabConfig,
    "project": ProjectConfig,
    "expand": ExpandConfig,
    "check": CheckConfig,
    "value": ValueConfig,
}

_GRID = {
    "navigate": {"orientation": BOTH, "loop": False},
    "select": {"mode": "multiple", "range": True, "toggle": True, "follow_focus": False},
    "check": {"mode": "select"},
    "tab": {"behavior": "escape"},
}

_DIALOG = {
    "navigate": {"orientation": VERTICAL, "loop": False},
    "tab": {"behavior": "trap", "restore_focus": True},
    "dismiss": {"escape": "close", "outside_click": "close"},
    "project": {"auto_focus": True},
}

ROLE_PRESETS: Dict[str, Dict[str, Dict[str, Any]]] = {
    "group": {},
    "listbox": {
        "navigate": {"orientation": VERTICAL, "loop": False, "typeahead": True, "entry": "selected"},
        "select": {"mode": "single", "follow_focus": True},
        "check": {"mode": "select"},
        "tab": {"behavior": "escape"},
    },
    "menu": {
        "navigate": {"orientation": VERTICAL, "loop": True, "entry": "first"},
        "select": {"mode": "none"},
        "activate": {"mode": "automatic"},
        "dismiss": {"escape": "close"},
        "tab": {"behavior": "trap"},
        "project": {"auto_focus": True},
    },
    "menubar": {
        "navigate": {"orientation": HORIZONTAL, "loop": True, "entry": "restore"},
        "select": {"mode": "none"},
        "activate": {"mode": "automatic"},
        "tab": {"behavior": "escape"},
    },
    "radiogroup": {
        "navigate": {"orientation": VERTICAL, "loop": True, "entry": "selected"},
        "select": {"mode": "single", "follow_focus": True, "disallow_empty": True},
        "check": {"mode": "check"},
        "tab": {"behavior": "escape"},
    },
    "tablist": {
        "navigate": {"orientation": HORIZONTAL, "loop": True, "entry": "selected"},
        "select": {"mode": "single", "follow_focus": True, "disallow_empty": True},
        "check": {"mode": "select"},
        "activate": {"mode": "automatic"},
        "tab": {"behavior": "escape"},
    },
    "toolbar": {
        "navigate": {"orientation": HORIZONTAL, "loop": True, "entry": "restore"},
        "select": {"mode": "none"},
        "tab": {"behavior": "escape"},
    },
    "grid": _GRID,
    "treegrid": {
        **_GRID,
        "navigate": {**_GRID["navigate"], "arrow_expand": True},
        "activate": {"mode": "manual"},
        "expand": {"mode": "explicit"},
    },
    "tree": {
        "navigate": {
            "orientation": VERTICAL,
            "loop": False,
            "typeahead": True,
            "arrow_expand": True,
            "entry": "selected",
        },
        "select": {"mode": "single", "follow_focus": True},
        "check": {"mode": "select"},
        "activate": {"mode": "manual", "on_click": True},
        "expand": {"mode": "explicit"},
        "tab": {"behavior": "escape"},
    },
    "dialog": _DIALOG,
    "alertdialog": {**_DIALOG, "dismiss": {"escape": "close", "outside_click": "none"}},
    "combobox": {
        "navigate": {"orientation": VERTICAL, "loop": False, "typeahead": False},
        "select": {"mode": "single", "follow_focus": True},
        "dismiss": {"escape": "close"},
        "project": {"virtual_focus": True},
        "tab": {"behavior": "escape"},
    },
    "feed": {
        "navigate": {"orientation": VERTICAL, "loop": False},
        "tab": {"behavior": "escape"},
    },
    "accordion": {
        "navigate": {"orientation": VERTICAL, "loop": False},
        "activate": {"mode": "manual", "on_click": True},
        "expand": {"mode": "all"},
        "tab": {"behavior": "native"},
    },
    "disclosure": {
        "activate": {"mode": "manual"},
        "expand": {"mode": "all"},
        "tab": {"behavior": "flow"},
    },
    # Non-ARIA roles used by composite layouts
    "application": {
        "navigate": {"orientation": BOTH, "seamless": True},
        "tab": {"behavior": "flow"},
    },
    "builderBlock": {
        "navigate": {"orientation": BOTH, "seamless": True},
        "tab": {"behavior": "flow"},
    },
    "textbox": {"tab": {"behavior": "flow"}},
    "slider": {
        "navigate": {"orientation": VERTICAL, "loop": False},
        "select": {"mode": "none"},
        "tab": {"behavior": "escape"},
        "value": {"min": 0, "max": 100, "step": 1, "large_step": 10},
    },
}

# Role given to items of a zone, keyed by zone role
CHILD_ROLES: Dict[str, str] = {
    "listbox": "option",
    "menu": "menuitem",
    "menubar": "menuitem",
    "radiogroup": "radio",
    "tablist": "tab",
    "toolbar": "button",
    "grid": "gridcell",
    "treegrid": "gridcell",
    "tree": "treeitem",
    "combobox": "option",
    "feed": "article",
    "accordion": "button",
    "slider": "slider",
}

DEFAULT_CHILD_ROLE = "option"

# Item roles whose state is projected as aria-checked instead of aria-selected
CHECKED_ROLES = frozenset({"radio", "menuitemradio", "menuitemcheckbox", "checkbox", "switch"})


def child_role(zone_role: Optional[str]) -> str:
    """Role carried by the items of a zone with ``zone_role``."""
    if zone_role is None:
        return DEFAULT_CHILD_ROLE
    return CHILD_ROLES.get(zone_role, DEFAULT_CHILD_ROLE)


def resolve_role(
    role: Optional[str] = None,
    overrides: Optional[Dict[str, Dict[str, Any]]] = None,
) -> ZoneConfig:
    """
    Build a zone configuration from defaults, a role preset, and overrides.

    Unknown roles resolve to the defaults. Each section is merged key by key
    in the order defaults, preset, overrides.

    Args:
        role: ARIA role name (e.g. "listbox", "grid")
        overrides: Per-section overrides, e.g. {"navigate": {"loop": True}}

    Returns:
        Resolved ZoneConfig
    """
    preset = ROLE_PRESETS.get(role or "", {})
    overrides = overrides or {}
    config = ZoneConfig()

    for section, section_type in SECTIONS.items():
        merged = {**preset.get(section, {}), **overrides.get(section, {})}
        if not merged:
            continue
        current = getattr(config, section)
        if current is None:
            current = section_type()
        config = replace(config, **{section: replace(current, **merged)})

    return config
