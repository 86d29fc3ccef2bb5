"""
Responsive breakpoints.

The active breakpoint is derived purely from the viewport width and
decides the minimum column width of each component kind.
"""

from enum import Enum
from typing import Dict

from ..grid.abstraction import ComponentKind, GRID_COLUMNS


class Breakpoint(Enum):
    """Viewport regime, named after the device class it targets."""
    NARROW = "mobile"
    MEDIUM = "tablet"
    WIDE = "desktop"


NARROW_MAX_WIDTH = 768
MEDIUM_MAX_WIDTH = 1024

# Minimum width in columns per breakpoint and kind
MIN_COLUMNS: Dict[Breakpoint, Dict[ComponentKind, int]] = {
    Breakpoint.NARROW: {
        ComponentKind.PRIMARY: GRID_COLUMNS,        # full width
        ComponentKind.SECONDARY: GRID_COLUMNS // 2,  # half width
    },
    Breakpoint.MEDIUM: {
        ComponentKind.PRIMARY: 4,
        ComponentKind.SECONDARY: 2,
    },
    Breakpoint.WIDE: {
        ComponentKind.PRIMARY: 1,
        ComponentKind.SECONDARY: 1,
    },
}


def classify_viewport(width: float,
                      narrow_max_width: float = NARROW_MAX_WIDTH,
                      medium_max_width: float = MEDIUM_MAX_WIDTH) -> Breakpoint:
    """Map a viewport width in pixels to a breakpoint."""
    if width < narrow_max_width:
        return Breakpoint.NARROW
    if width < medium_max_width:
        return Breakpoint.MEDIUM
    return Breakpoint.WIDE


def min_columns_for(kind: ComponentKind, breakpoint: Breakpoint) -> int:
    """Minimum width in columns of a component kind at a breakpoint."""
    return MIN_COLUMNS[breakpoint][kind]
