"""
Centralized constants for ariakernel.

Navigation and input thresholds are empirically tuned. Behavior of the
navigation algorithms depends on the exact figures, so they live here as
named values instead of being re-derived at call sites.
"""

from pathlib import Path

# =============================================================================
# PATHS
# =============================================================================

ARIAKERNEL_CONFIG_DIR = Path.home() / ".config" / "ariakernel"

# =============================================================================
# SCOPES
# =============================================================================

GLOBAL_SCOPE = "GLOBAL"  # Root of every command bubble path

# =============================================================================
# POINTER INPUT (pixels)
# =============================================================================

DRAG_THRESHOLD_PX = 5  # Movement past this on either axis may start a drag
PRIMARY_BUTTON = 0  # DOM numbering: 0 primary, 1 middle, 2 secondary

# =============================================================================
# SPATIAL NAVIGATION (pixels unless noted)
# =============================================================================

FOCUS_FINDER_MAJOR_WEIGHT = 13  # Weight of major-axis distance squared
SEAMLESS_EDGE_SLOP_PX = 2  # Overlap allowed when a sibling zone touches our edge
VISUAL_ROW_TOLERANCE_PX = 4  # Tops closer than this count as the same row
SEAMLESS_ENTRY_TOLERANCE_PX = 50  # Band at the entry edge of a zone

# =============================================================================
# HISTORY & DISPATCH
# =============================================================================

HISTORY_LIMIT = 50  # Max undo entries per app, oldest evicted
TRANSACTION_LOG_LIMIT = 200  # Max dispatch records kept for inspection

# =============================================================================
# TIMING (milliseconds)
# =============================================================================

TYPEAHEAD_TIMEOUT_MS = 500  # Query buffer resets after this much idle time
PERSIST_DEBOUNCE_MS = 300  # Default persistence debounce window

# =============================================================================
# ENVIRONMENT VARIABLES
# =============================================================================

ENV_VAR_DEFINITIONS = {
    "ARIAKERNEL_CONFIG_DIR": {
        "description": "Directory holding settings.yaml and keybindings.yaml",
        "default": None,
        "valid_values": None,
    },
    "ARIAKERNEL_LOG_LEVEL": {
        "description": "Log level for the ariakernel logger",
        "default": "WARNING",
        "valid_values": ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
    },
}
