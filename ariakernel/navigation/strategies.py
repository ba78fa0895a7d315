"""
Navigation strategy table.

Maps a strategy (or orientation) name to the function resolving a move.
Unknown names hold focus where it is.
"""

import logging
from typing import Callable, Dict, Optional, Sequence

from ..roles import NavigateConfig
from .corner import resolve_corner
from .focus_finder import resolve_spatial
from .roving import resolve_linear
from .types import NavigationContext, NavigationResult

logger = logging.getLogger(__name__)

Strategy = Callable[[Optional[str], str, Sequence[str], NavigationContext], NavigationResult]

STRATEGIES: Dict[str, Strategy] = {
    "linear": resolve_linear,
    "horizontal": resolve_linear,
    "vertical": resolve_linear,
    "spatial": resolve_spatial,
    "both": resolve_spatial,
    "corner": resolve_corner,
}

# Strategies that read item rectangles
GEOMETRIC = frozenset({"spatial", "both", "corner"})


def strategy_name(config: NavigateConfig) -> str:
    return config.strategy or config.orientation


def needs_geometry(name: str) -> bool:
    return name in GEOMETRIC


def resolve_with_strategy(
    name: str,
    current_id: Optional[str],
    direction: str,
    items: Sequence[str],
    context: NavigationContext = NavigationContext(),
) -> NavigationResult:
    strategy = STRATEGIES.get(name)
    if strategy is None:
        logger.warning(f"Unknown navigation strategy '{name}', holding focus")
        return NavigationResult(current_id)
    return strategy(current_id, direction, items, context)
