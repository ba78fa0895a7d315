"""Shared navigation types."""

from dataclasses import dataclass
from typing import Optional

from ..geometry import Viewport

UP = "up"
DOWN = "down"
LEFT = "left"
RIGHT = "right"
HOME = "home"
END = "end"

ARROWS = (UP, DOWN, LEFT, RIGHT)
VERTICAL_DIRECTIONS = (UP, DOWN)
HORIZONTAL_DIRECTIONS = (LEFT, RIGHT)


@dataclass(frozen=True)
class NavigationResult:
    target_id: Optional[str]
    sticky_x: Optional[float] = None
    sticky_y: Optional[float] = None


@dataclass(frozen=True)
class NavigationContext:
    """Everything a strategy may need besides ids and direction."""

    loop: bool = False
    viewport: Optional[Viewport] = None
    sticky_x: Optional[float] = None
    sticky_y: Optional[float] = None
