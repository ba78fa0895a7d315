"""
Keymap: scoped keybinding registry with conflict detection.

Bindings map a canonical key to a command type, optionally scoped to a zone
and to an editing mode. Lookup walks the active zone, its ancestors, then the
global scope, so a zone binding shadows a global one for the same key.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Set

from ..config.constants import GLOBAL_SCOPE
from ..input.keys import swap_platform_modifier
from ..kernel.commands import Command

logger = logging.getLogger(__name__)


class When(Enum):
    """Editing mode a binding is active in."""

    ALWAYS = "always"
    NAVIGATING = "navigating"
    EDITING = "editing"

    def active(self, is_editing: bool) -> bool:
        if self is When.ALWAYS:
            return True
        return is_editing if self is When.EDITING else not is_editing

    def overlaps(self, other: "When") -> bool:
        return self is When.ALWAYS or other is When.ALWAYS or self is other


class ConflictType(Enum):
    """Types of keybinding conflicts."""

    SAME_SCOPE = "same_scope"  # Two bindings for same key in the same scope
    SCOPE_OVERRIDE = "scope_override"  # Zone binding shadows a global one


class ConflictSeverity(Enum):
    """Severity levels for conflicts."""

    CRITICAL = "critical"  # Ambiguous, the later binding silently wins
    INFO = "info"  # Intentional override


@dataclass
class KeybindingEntry:
    """Represents a single keybinding in the keymap."""

    key: str  # canonical, e.g. "Meta+Shift+Z"
    command: str  # command type, e.g. "OS_REDO"
    args: Dict[str, Any] = field(default_factory=dict)  # command payload
    scope: str = GLOBAL_SCOPE  # zone id or GLOBAL_SCOPE
    when: When = When.ALWAYS
    command_scope: str = GLOBAL_SCOPE  # scope the command handler is defined in
    source: str = "app"  # who registered it: "os", "user", an app id
    description: str = ""
    allow_override: bool = True

    def __hash__(self):
        return hash((self.key, self.command, self.scope, self.when.value, self.source))

    def __eq__(self, other):
        if not isinstance(other, KeybindingEntry):
            return False
        return (
            self.key == other.key
            and self.command == other.command
            and self.args == other.args
            and self.scope == other.scope
            and self.when == other.when
            and self.source == other.source
        )

    def to_command(self) -> Command:
        return Command(self.command, dict(self.args) or None, self.command_scope)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "key": self.key,
            "command": self.command,
            "args": self.args,
            "scope": self.scope,
            "when": self.when.value,
            "source": self.source,
            "description": self.description,
        }


@dataclass
class ConflictReport:
    """Describes a keybinding conflict."""

    key: str
    binding1: KeybindingEntry
    binding2: KeybindingEntry
    conflict_type: ConflictType
    severity: ConflictSeverity = ConflictSeverity.CRITICAL

    def to_string(self) -> str:
        """Format conflict for logging/display."""
        return (
            f"[{self.severity.value.upper()}] Key '{self.key}' conflict:\n"
            f"  {self.binding1.source}: {self.binding1.command} ({self.binding1.scope})\n"
            f"  {self.binding2.source}: {self.binding2.command} ({self.binding2.scope})\n"
            f"  Type: {self.conflict_type.value}"
        )

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "severity": self.severity.value,
            "type": self.conflict_type.value,
            "binding1": self.binding1.to_dict(),
            "binding2": self.binding2.to_dict(),
        }


@dataclass
class Keymap:
    """
    Keybinding registry with scope-aware lookup and conflict detection.

    Usage:
        keymap = Keymap()
        keymap.register(KeybindingEntry(key="ArrowDown", command="OS_NAVIGATE",
                                        args={"direction": "down"},
                                        when=When.NAVIGATING, source="os"))

        entry = keymap.resolve("ArrowDown", zone_path=["list"], is_editing=False)
        conflicts = keymap.detect_conflicts()
    """

    bindings: List[KeybindingEntry] = field(default_factory=list)
    by_scope: Dict[str, List[KeybindingEntry]] = field(default_factory=dict)
    by_key: Dict[str, List[KeybindingEntry]] = field(default_factory=dict)
    conflicts: List[ConflictReport] = field(default_factory=list)

    def register(self, entry: KeybindingEntry) -> None:
        if entry in self.bindings:
            return

        self.bindings.append(entry)
        self.by_scope.setdefault(entry.scope, []).append(entry)
        self.by_key.setdefault(entry.key, []).append(entry)

    def register_many(self, entries: Sequence[KeybindingEntry]) -> None:
        for entry in entries:
            self.register(entry)

    def unregister(self, entry: KeybindingEntry) -> None:
        if entry not in self.bindings:
            return
        self.bindings.remove(entry)
        self.by_scope[entry.scope].remove(entry)
        self.by_key[entry.key].remove(entry)
        if not self.by_scope[entry.scope]:
            del self.by_scope[entry.scope]
        if not self.by_key[entry.key]:
            del self.by_key[entry.key]

    def unregister_scope(self, scope: str) -> None:
        """Drop every binding of a zone (on zone unmount)."""
        for entry in list(self.by_scope.get(scope, [])):
            self.unregister(entry)

    def override(self, entry: KeybindingEntry) -> bool:
        """
        Replace bindings of the same key, scope and overlapping mode.

        Bindings registered with ``allow_override=False`` are kept and the
        override is refused.

        Returns:
            True if the override was applied
        """
        shadowed = [
            b for b in self.by_key.get(entry.key, [])
            if b.scope == entry.scope and b.when.overlaps(entry.when)
        ]
        locked = [b for b in shadowed if not b.allow_override]
        if locked:
            logger.warning(f"Binding for '{entry.key}' cannot be overridden ({locked[0].command})")
            return False
        for binding in shadowed:
            self.unregister(binding)
        self.register(entry)
        return True

    def resolve(
        self,
        key: str,
        zone_path: Sequence[str] = (),
        is_editing: bool = False,
    ) -> Optional[KeybindingEntry]:
        """
        Find the binding for ``key``.

        Scopes are searched from the active zone outwards, ending at the
        global scope. Within a scope the most recently registered binding
        wins. A Ctrl chord with no binding falls back to the Meta chord and
        vice versa.
        """
        found = self._lookup(key, zone_path, is_editing)
        if found is None:
            swapped = swap_platform_modifier(key)
            if swapped != key:
                found = self._lookup(swapped, zone_path, is_editing)
        return found

    def _lookup(
        self, key: str, zone_path: Sequence[str], is_editing: bool
    ) -> Optional[KeybindingEntry]:
        candidates = self.by_key.get(key)
        if not candidates:
            return None
        for scope in list(zone_path) + [GLOBAL_SCOPE]:
            for entry in reversed(candidates):
                if entry.scope == scope and entry.when.active(is_editing):
                    return entry
        return None

    def get_bindings_for_scope(
        self, scope: str, include_global: bool = True
    ) -> List[KeybindingEntry]:
        bindings = list(self.by_scope.get(scope, []))
        if include_global and scope != GLOBAL_SCOPE:
            bindings.extend(self.by_scope.get(GLOBAL_SCOPE, []))
        return bindings

    def get_all_keys(self) -> Set[str]:
        return set(self.by_key.keys())

    def detect_conflicts(self) -> List[ConflictReport]:
        """
        Detect all keybinding conflicts.

        Returns:
            List of conflict reports, critical first
        """
        self.conflicts = []

        for key, bindings in self.by_key.items():
            if len(bindings) < 2:
                continue
            for i, binding1 in enumerate(bindings):
                for binding2 in bindings[i + 1:]:
                    conflict = self._check_conflict(key, binding1, binding2)
                    if conflict:
                        self.conflicts.append(conflict)

        severity_order = {ConflictSeverity.CRITICAL: 0, ConflictSeverity.INFO: 1}
        self.conflicts.sort(key=lambda c: severity_order[c.severity])

        for conflict in self.conflicts:
            if conflict.severity is ConflictSeverity.CRITICAL:
                logger.warning(conflict.to_string())

        return self.conflicts

    def _check_conflict(
        self, key: str, binding1: KeybindingEntry, binding2: KeybindingEntry
    ) -> Optional[ConflictReport]:
        if not binding1.when.overlaps(binding2.when):
            return None

        if binding1.scope == binding2.scope:
            if binding1.command == binding2.command and binding1.args == binding2.args:
                return None
            return ConflictReport(
                key=key,
                binding1=binding1,
                binding2=binding2,
                conflict_type=ConflictType.SAME_SCOPE,
                severity=ConflictSeverity.CRITICAL,
            )

        if GLOBAL_SCOPE in (binding1.scope, binding2.scope):
            return ConflictReport(
                key=key,
                binding1=binding1,
                binding2=binding2,
                conflict_type=ConflictType.SCOPE_OVERRIDE,
                severity=ConflictSeverity.INFO,
            )

        # Two different zones never see the same key press
        return None

    def get_conflicts_by_severity(self, severity: ConflictSeverity) -> List[ConflictReport]:
        return [c for c in self.conflicts if c.severity == severity]

    def has_critical_conflicts(self) -> bool:
        return any(c.severity == ConflictSeverity.CRITICAL for c in self.conflicts)

    def summary(self) -> str:
        lines = [
            "Keymap Summary:",
            f"  Total bindings: {len(self.bindings)}",
            f"  Unique keys: {len(self.by_key)}",
            f"  Scopes: {len(self.by_scope)}",
            f"  Conflicts: {len(self.conflicts)}",
        ]
        if self.conflicts:
            critical = len(self.get_conflicts_by_severity(ConflictSeverity.CRITICAL))
            info = len(self.get_conflicts_by_severity(ConflictSeverity.INFO))
            lines.append(f"    Critical: {critical}")
            lines.append(f"    Info: {info}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            "bindings": [b.to_dict() for b in self.bindings],
            "conflicts": [c.to_dict() for c in self.conflicts],
            "summary": {
                "total_bindings": len(self.bindings),
                "unique_keys": len(self.by_key),
                "scopes": len(self.by_scope),
                "conflicts": len(self.conflicts),
            },
        }
