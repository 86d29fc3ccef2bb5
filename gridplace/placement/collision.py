"""
Collision Resolution Policies

Decides what happens when the component being moved or resized would
overlap others. Exactly one mode is active at a time:

- REFLOW: repack the whole arrangement with first fit
- COLLISION_RESIZE: keep the active rect and reshape each overlapped
  neighbor with a fixed, ordered heuristic
- PLAIN: move the active component as-is; on commit, relocate it to its
  first-fit slot if it ended up overlapping something

The mode is passed explicitly into every preview and commit call.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Sequence

from ..grid.abstraction import Component, GridRect, GRID_COLUMNS
from .breakpoints import Breakpoint
from .solver import (
    DEFAULT_MAX_SEARCH_ROWS,
    find_slot,
    has_collisions,
    overlaps,
    reflow,
    replace_rect,
)

logger = logging.getLogger(__name__)


class CollisionMode(Enum):
    """Globally active collision resolution policy."""
    REFLOW = "reflow"
    COLLISION_RESIZE = "collision_resize"
    PLAIN = "plain"

    @classmethod
    def from_toggles(cls, reflow_enabled: bool,
                     collision_resize_enabled: bool) -> "CollisionMode":
        """Map the two UI toggles onto a mode. Collision resize wins."""
        if collision_resize_enabled:
            return cls.COLLISION_RESIZE
        if reflow_enabled:
            return cls.REFLOW
        return cls.PLAIN


@dataclass
class ResolutionResult:
    """Outcome of applying a policy to a tentative rect."""
    mode: CollisionMode
    components: List[Component]
    reshaped: List[str] = field(default_factory=list)  # neighbors shrunk (collision resize)
    absorbed: List[str] = field(default_factory=list)  # neighbors forced to 1x1
    relocated: bool = False  # active component moved by first fit (plain mode)

    def rect_of(self, component_id: str) -> GridRect:
        for comp in self.components:
            if comp.id == component_id:
                return comp.rect
        raise KeyError(component_id)


def _shrink_neighbor(active: GridRect, neighbor: GridRect) -> GridRect:
    """Reshape one overlapping neighbor; the first applicable option wins."""
    active_right = active.col + active.width
    active_bottom = active.row + active.height

    # Option 1: neighbor starts left of the active rect, cut its right side
    if neighbor.col < active.col:
        new_width = active.col - neighbor.col
        if new_width >= 1:
            return GridRect(neighbor.col, neighbor.row, new_width, neighbor.height)

    # Option 2: neighbor extends past the right edge, cut its left side
    neighbor_right = neighbor.col + neighbor.width
    if neighbor_right > active_right:
        new_col = active_right
        new_width = neighbor_right - new_col
        if new_width >= 1 and new_col < GRID_COLUMNS:
            return GridRect(new_col, neighbor.row, new_width, neighbor.height)

    # Option 3: neighbor starts above, cut its bottom
    if neighbor.row < active.row:
        new_height = active.row - neighbor.row
        if new_height >= 1:
            return GridRect(neighbor.col, neighbor.row, neighbor.width, new_height)

    # Option 4: neighbor extends below, cut its top
    neighbor_bottom = neighbor.row + neighbor.height
    if neighbor_bottom > active_bottom:
        new_row = active_bottom
        new_height = neighbor_bottom - new_row
        if new_height >= 1:
            return GridRect(neighbor.col, new_row, neighbor.width, new_height)

    # Fallback: absorb the neighbor as a 1x1 at its origin
    return GridRect(neighbor.col, neighbor.row, 1, 1)


def resize_overlapping(components: Sequence[Component], active_id: str) -> ResolutionResult:
    """
    Reshape every component overlapping the active one.

    Each neighbor is handled independently against the active rect, in
    collection order. This is not a general rectangle subtraction; the
    option order is asymmetric on purpose and neighbors reshaped here
    may still overlap each other.
    """
    active = next(c for c in components if c.id == active_id)
    result = ResolutionResult(mode=CollisionMode.COLLISION_RESIZE, components=[])

    for comp in components:
        if comp.id == active_id or not overlaps(active.rect, comp.rect):
            result.components.append(comp)
            continue

        new_rect = _shrink_neighbor(active.rect, comp.rect)
        if new_rect.width == 1 and new_rect.height == 1 and overlaps(active.rect, new_rect):
            result.absorbed.append(comp.id)
        else:
            result.reshaped.append(comp.id)
        result.components.append(comp.with_rect(new_rect))

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Collision resize: %s %s -> %s",
                         comp.id, comp.rect.as_tuple(), new_rect.as_tuple())

    return result


def preview_arrangement(components: Sequence[Component], active_id: str,
                        rect: GridRect, mode: CollisionMode,
                        breakpoint: Breakpoint = Breakpoint.WIDE,
                        max_rows: int = DEFAULT_MAX_SEARCH_ROWS) -> ResolutionResult:
    """
    Hypothetical arrangement with the active component at `rect`.

    Computed from `components` without mutating anything; the caller
    renders it and keeps the authoritative arrangement untouched until
    the interaction commits.
    """
    tentative = replace_rect(components, active_id, rect)

    if mode == CollisionMode.REFLOW:
        return ResolutionResult(mode=mode, components=reflow(tentative, breakpoint, max_rows))
    if mode == CollisionMode.COLLISION_RESIZE:
        return resize_overlapping(tentative, active_id)
    return ResolutionResult(mode=mode, components=tentative)


def commit_arrangement(components: Sequence[Component], active_id: str,
                       rect: GridRect, mode: CollisionMode,
                       breakpoint: Breakpoint = Breakpoint.WIDE,
                       max_rows: int = DEFAULT_MAX_SEARCH_ROWS) -> ResolutionResult:
    """
    Final arrangement after releasing the active component at `rect`.

    Same as the preview, except that in PLAIN mode an overlapping result
    is corrected by relocating the active component to its first-fit slot.
    """
    result = preview_arrangement(components, active_id, rect, mode, breakpoint, max_rows)

    if mode == CollisionMode.PLAIN and has_collisions(result.components, active_id):
        active = next(c for c in result.components if c.id == active_id)
        others = [c for c in result.components if c.id != active_id]
        relocated = find_slot(active, others, breakpoint, max_rows)
        logger.warning(
            "Plain mode: %s at %s overlaps, relocated to %s",
            active_id, rect.as_tuple(), relocated.rect.as_tuple(),
        )
        result.components = replace_rect(result.components, active_id, relocated.rect)
        result.relocated = True

    return result
