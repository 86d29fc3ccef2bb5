"""
Grid <-> pixel conversion.

Cells are laid out left to right with a fixed gutter between them; the
canvas padding is split so that the first cell starts at `origin`:

    cell_width = (canvas_width - padding - 11 * gutter) / 12
    x = col * cell_width + col * gutter + origin
    width = w * cell_width + (w - 1) * gutter

Rows use a fixed cell height with the same gutter.
"""

import math
from dataclasses import dataclass
from typing import Tuple

from ..grid.abstraction import GRID_COLUMNS


@dataclass(frozen=True)
class PixelBox:
    """Axis-aligned box in canvas pixels."""
    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    def contains(self, x: float, y: float) -> bool:
        return self.left <= x <= self.right and self.top <= y <= self.bottom


@dataclass(frozen=True)
class GridMetrics:
    """Pixel geometry of the grid for a given canvas width."""
    canvas_width: float = 1200.0
    gutter: float = 8.0
    padding: float = 30.0
    origin: float = 15.0
    cell_height: float = 50.0

    @property
    def cell_width(self) -> float:
        available = self.canvas_width - self.padding
        return max(0.0, (available - (GRID_COLUMNS - 1) * self.gutter) / GRID_COLUMNS)

    @property
    def pitch_x(self) -> float:
        """Distance between the left edges of adjacent columns."""
        return self.cell_width + self.gutter

    @property
    def pitch_y(self) -> float:
        return self.cell_height + self.gutter

    def to_pixels(self, col: float, row: float, width: float, height: float) -> PixelBox:
        """Box for a (possibly fractional) grid rect."""
        return PixelBox(
            left=col * self.cell_width + col * self.gutter + self.origin,
            top=row * self.cell_height + row * self.gutter + self.origin,
            width=width * self.cell_width + (width - 1) * self.gutter,
            height=height * self.cell_height + (height - 1) * self.gutter,
        )

    def grid_x(self, x: float) -> float:
        """Pixel x to a real-valued column coordinate."""
        if self.pitch_x <= 0:
            return 0.0
        return (x - self.origin) / self.pitch_x

    def grid_y(self, y: float) -> float:
        return (y - self.origin) / self.pitch_y

    def cell_at(self, x: float, y: float) -> Tuple[int, int]:
        """Cell under a pixel, clamped to the grid columns and row 0."""
        col = int(math.floor(self.grid_x(x)))
        row = int(math.floor(self.grid_y(y)))
        return max(0, min(GRID_COLUMNS - 1, col)), max(0, row)

    def nearest_column_line(self, x: float) -> int:
        """Grid line closest to a pixel x. Line k sits in the gutter before column k."""
        line = int(math.floor(self.grid_x(x + self.gutter / 2) + 0.5))
        return max(0, min(GRID_COLUMNS, line))

    def nearest_row_line(self, y: float) -> int:
        line = int(math.floor(self.grid_y(y + self.gutter / 2) + 0.5))
        return max(0, line)

    def canvas_height(self, rows: int) -> float:
        """Height needed to show `rows` rows, including padding."""
        if rows <= 0:
            return self.padding
        return rows * self.cell_height + (rows - 1) * self.gutter + self.padding
