"""
Interaction session state.

An InteractionSession exists from pointer-down to pointer-up and holds
everything the state machine needs between events: which component(s)
are active, the pointer anchor, the raw and snapped targets, the
smoothed display rect and the latest preview.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from ..grid.abstraction import GridRect, GRID_COLUMNS
from ..placement.collision import CollisionMode, ResolutionResult
from .borders import BorderHandle
from .smoothing import SmoothedRect, SnapAxis


class InteractionState(Enum):
    """States of the interaction state machine."""
    IDLE = "idle"
    DRAGGING = "dragging"
    RESIZING = "resizing"
    BORDER_DRAGGING = "border_dragging"


class ResizeDirection(Enum):
    """The eight resize affordances of a component."""
    N = "north"
    S = "south"
    E = "east"
    W = "west"
    NE = "northeast"
    NW = "northwest"
    SE = "southeast"
    SW = "southwest"

    @property
    def north(self) -> bool:
        return self in (ResizeDirection.N, ResizeDirection.NE, ResizeDirection.NW)

    @property
    def south(self) -> bool:
        return self in (ResizeDirection.S, ResizeDirection.SE, ResizeDirection.SW)

    @property
    def east(self) -> bool:
        return self in (ResizeDirection.E, ResizeDirection.NE, ResizeDirection.SE)

    @property
    def west(self) -> bool:
        return self in (ResizeDirection.W, ResizeDirection.NW, ResizeDirection.SW)

    @classmethod
    def parse(cls, value: str) -> "ResizeDirection":
        """Accept either the short name ("NE") or the long one ("northeast")."""
        text = value.strip()
        for direction in cls:
            if text.upper() == direction.name or text.lower() == direction.value:
                return direction
        raise ValueError(f"Unknown resize direction: {value}")


def resize_rect(start: GridRect, dx: float, dy: float,
                direction: ResizeDirection, min_width: int,
                min_height: int = 1) -> GridRect:
    """
    Rect after dragging a resize affordance by (dx, dy) cells.

    Edges not named by `direction` stay fixed. Growing toward the west or
    north moves the origin; the opposite edge never moves. The result is
    clamped to the grid and to the minimum size; when the minimum does not
    fit against the fixed edge, the rect is pushed back inside the grid.
    """
    min_width = min(min_width, GRID_COLUMNS)
    col, row, width, height = start.col, start.row, start.width, start.height
    right = start.col + start.width
    bottom = start.row + start.height

    if direction.east:
        col = min(col, GRID_COLUMNS - min_width)
        width = max(min_width, min(GRID_COLUMNS - col, width + dx))
    elif direction.west:
        right = max(right, min_width)
        col = max(0, min(right - min_width, col + dx))
        width = right - col

    if direction.south:
        height = max(min_height, height + dy)
    elif direction.north:
        row = max(0, min(bottom - min_height, row + dy))
        height = bottom - row

    return GridRect(col, row, width, height)


@dataclass
class InteractionSession:
    """Ephemeral state of the single active interaction."""
    state: InteractionState
    component_ids: List[str]
    start_rect: GridRect
    pointer_start: Tuple[float, float]
    mode: CollisionMode = CollisionMode.REFLOW

    # Dragging: pointer offset inside the component box, in pixels
    anchor: Tuple[float, float] = (0.0, 0.0)

    # Resizing
    direction: Optional[ResizeDirection] = None
    min_width: int = 1

    # Border dragging
    handle: Optional[BorderHandle] = None

    # Snap axes: (col, row) for drags, (dx, dy) deltas for resizes
    snap_x: Optional[SnapAxis] = None
    snap_y: Optional[SnapAxis] = None
    ghost_x: Optional[SnapAxis] = None
    ghost_y: Optional[SnapAxis] = None

    target: Optional[GridRect] = None
    ghost: Optional[GridRect] = None
    ghost_colliding: bool = False
    smoothed: Optional[SmoothedRect] = None
    preview: Optional[ResolutionResult] = None
    previewed_target: Optional[GridRect] = None
    ticks: int = 0
    moves: int = 0

    @property
    def component_id(self) -> str:
        """The active component (the first side for border drags)."""
        return self.component_ids[0]

    @property
    def raw(self) -> Tuple[float, float]:
        if self.snap_x is None or self.snap_y is None:
            return (0.0, 0.0)
        return (self.snap_x.raw, self.snap_y.raw)

    @classmethod
    def for_pointer(cls, state: InteractionState, component_id: str,
                    start_rect: GridRect, pointer: Tuple[float, float],
                    snap_origin: Tuple[int, int],
                    snap_threshold: float, ghost_threshold: float,
                    **kwargs) -> "InteractionSession":
        """Session for a drag or resize, with snap axes seeded at `snap_origin`."""
        sx, sy = snap_origin
        return cls(
            state=state,
            component_ids=[component_id],
            start_rect=start_rect,
            pointer_start=pointer,
            snap_x=SnapAxis(sx, snap_threshold),
            snap_y=SnapAxis(sy, snap_threshold),
            ghost_x=SnapAxis(sx, ghost_threshold),
            ghost_y=SnapAxis(sy, ghost_threshold),
            target=start_rect,
            ghost=start_rect,
            smoothed=SmoothedRect.from_rect(start_rect),
            **kwargs,
        )
