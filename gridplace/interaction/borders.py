"""
Shared-border detection and border dragging.

Two components share a border when one's edge lies exactly on the
other's opposite edge and their extents genuinely intersect along that
edge (touching corners do not count). Border handles are a projection of
the current arrangement: they are recomputed from scratch whenever the
arrangement changes and never edited in place.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from ..grid.abstraction import Component, GridRect
from ..placement.solver import ranges_overlap


class BorderOrientation(Enum):
    """Orientation of the shared border line.

    VERTICAL borders separate left/right neighbors and are dragged
    sideways; HORIZONTAL borders separate top/bottom neighbors and are
    dragged up and down.
    """
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


@dataclass(frozen=True)
class BorderHandle:
    """A draggable shared border between two components."""
    first_id: str    # left (vertical) or top (horizontal) component
    second_id: str   # right (vertical) or bottom (horizontal) component
    orientation: BorderOrientation
    line: int        # grid line of the border: column or row index
    span_start: int  # shared extent along the border, half-open
    span_end: int

    @property
    def key(self) -> str:
        """Stable identifier, used by input plumbing to refer to a handle."""
        return f"{self.orientation.value}:{self.first_id}:{self.second_id}"

    @property
    def span(self) -> int:
        return self.span_end - self.span_start


def horizontally_adjacent(a: GridRect, b: GridRect) -> bool:
    """Side by side, sharing a vertical border over a real row range."""
    touching = a.col + a.width == b.col or b.col + b.width == a.col
    return touching and ranges_overlap(a.row, a.row + a.height, b.row, b.row + b.height)


def vertically_adjacent(a: GridRect, b: GridRect) -> bool:
    """Stacked, sharing a horizontal border over a real column range."""
    touching = a.row + a.height == b.row or b.row + b.height == a.row
    return touching and ranges_overlap(a.col, a.col + a.width, b.col, b.col + b.width)


def _vertical_handle(a: Component, b: Component) -> BorderHandle:
    left, right = (a, b) if a.rect.col + a.rect.width == b.rect.col else (b, a)
    return BorderHandle(
        first_id=left.id,
        second_id=right.id,
        orientation=BorderOrientation.VERTICAL,
        line=left.rect.col + left.rect.width,
        span_start=max(left.rect.row, right.rect.row),
        span_end=min(left.rect.row + left.rect.height, right.rect.row + right.rect.height),
    )


def _horizontal_handle(a: Component, b: Component) -> BorderHandle:
    top, bottom = (a, b) if a.rect.row + a.rect.height == b.rect.row else (b, a)
    return BorderHandle(
        first_id=top.id,
        second_id=bottom.id,
        orientation=BorderOrientation.HORIZONTAL,
        line=top.rect.row + top.rect.height,
        span_start=max(top.rect.col, bottom.rect.col),
        span_end=min(top.rect.col + top.rect.width, bottom.rect.col + bottom.rect.width),
    )


def compute_border_handles(components: Sequence[Component]) -> List[BorderHandle]:
    """All border handles for an arrangement, pairs in collection order."""
    handles = []
    for i, a in enumerate(components):
        for b in components[i + 1:]:
            if horizontally_adjacent(a.rect, b.rect):
                handles.append(_vertical_handle(a, b))
            if vertically_adjacent(a.rect, b.rect):
                handles.append(_horizontal_handle(a, b))
    return handles


def find_handle(handles: Sequence[BorderHandle], key: str) -> Optional[BorderHandle]:
    return next((h for h in handles if h.key == key), None)


def border_limits(first: GridRect, second: GridRect,
                  orientation: BorderOrientation,
                  min_first: int = 1, min_second: int = 1) -> Tuple[int, int]:
    """Range of legal border lines keeping each side at its minimum size."""
    if orientation == BorderOrientation.VERTICAL:
        return first.col + min_first, second.col + second.width - min_second
    return first.row + min_first, second.row + second.height - min_second


def drag_border(first: GridRect, second: GridRect,
                orientation: BorderOrientation,
                position: int,
                min_first: int = 1, min_second: int = 1) -> Tuple[GridRect, GridRect]:
    """
    Move the shared border to `position`, resizing both sides.

    The position is clamped so each component keeps its minimum size
    (one column or row unless given). The outer edges of both components
    stay put. When the pair is too small to honor both minimums the
    border does not move.

    Returns:
        (new first rect, new second rect)
    """
    low, high = border_limits(first, second, orientation, min_first, min_second)
    if low > high:
        return first, second
    line = max(low, min(high, position))

    if orientation == BorderOrientation.VERTICAL:
        second_right = second.col + second.width
        return (
            GridRect(first.col, first.row, line - first.col, first.height),
            GridRect(line, second.row, second_right - line, second.height),
        )

    second_bottom = second.row + second.height
    return (
        GridRect(first.col, first.row, first.width, line - first.row),
        GridRect(second.col, line, second.width, second_bottom - line),
    )
