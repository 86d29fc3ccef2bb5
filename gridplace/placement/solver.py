"""
Placement Solver

First-fit placement on the 12-column grid:

1. Overlap test - half-open intervals on both axes, touching edges are free
2. Availability - bounds check, then overlap against every other component
3. First fit - row-major scan, top to bottom then left to right
4. Reflow - sort by (row, col) and re-place everything with first fit

All functions are pure: they take an arrangement and return a new one,
never mutating their inputs. Previews and commits share the same code.
"""

import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from ..grid.abstraction import Component, GridRect, GRID_COLUMNS
from .breakpoints import Breakpoint, min_columns_for

logger = logging.getLogger(__name__)

DEFAULT_MAX_SEARCH_ROWS = 100


def ranges_overlap(start1: float, end1: float, start2: float, end2: float) -> bool:
    """Check if two half-open ranges share a non-empty interval."""
    return max(start1, start2) < min(end1, end2)


def overlaps(a: GridRect, b: GridRect) -> bool:
    """Check if two rects overlap.

    Rects that merely touch (e.g. ``a.col + a.width == b.col``) do not
    overlap.
    """
    return (ranges_overlap(a.col, a.col + a.width, b.col, b.col + b.width) and
            ranges_overlap(a.row, a.row + a.height, b.row, b.row + b.height))


def is_available(rect: GridRect, placed: Iterable[Component],
                 exclude_id: Optional[str] = None) -> bool:
    """Check if a rect is inside the grid and free of other components.

    Args:
        rect: Candidate rect
        placed: Components already on the grid
        exclude_id: Optional component to ignore (usually the one moving)
    """
    if rect.col < 0 or rect.row < 0 or rect.col + rect.width > GRID_COLUMNS:
        return False

    for comp in placed:
        if exclude_id is not None and comp.id == exclude_id:
            continue
        if overlaps(rect, comp.rect):
            return False
    return True


def clamp_to_minimum(component: Component, breakpoint: Breakpoint) -> Component:
    """Grow a component's width up to the breakpoint minimum."""
    min_cols = min_columns_for(component.kind, breakpoint)
    if component.rect.width >= min_cols:
        return component
    return component.with_rect(
        GridRect(component.rect.col, component.rect.row, min_cols, component.rect.height)
    )


def find_slot(component: Component, placed: Sequence[Component],
              breakpoint: Breakpoint = Breakpoint.WIDE,
              max_rows: int = DEFAULT_MAX_SEARCH_ROWS) -> Component:
    """
    Place a component in the first free slot.

    The width is clamped up to the breakpoint minimum first; the returned
    component carries the clamped width. Rows are scanned from 0 and, in
    each row, columns from 0 to ``12 - width``; the first available
    (col, row) wins.

    The scan normally stops at ``max_rows``. If nothing fits by then it
    continues down to the first row below every placed component, which
    is always free, so the search terminates for any input.

    Args:
        component: Component to place (its current col/row are ignored)
        placed: Components already on the grid, excluding `component`
        breakpoint: Active breakpoint for the minimum width
        max_rows: Practical bound on the row scan

    Returns:
        Copy of `component` at its first-fit position
    """
    comp = clamp_to_minimum(component, breakpoint)
    width = min(comp.rect.width, GRID_COLUMNS)
    height = comp.rect.height
    others = [c for c in placed if c.id != comp.id]

    lowest_free_row = max((c.rect.row + c.rect.height for c in others), default=0)
    last_row = max(max_rows - 1, lowest_free_row)

    for row in range(0, last_row + 1):
        if row == max_rows:
            logger.warning(
                "First-fit for %s exceeded %d rows, continuing to row %d",
                comp.id, max_rows, lowest_free_row,
            )
        for col in range(0, GRID_COLUMNS - width + 1):
            candidate = GridRect(col, row, width, height)
            if is_available(candidate, others):
                return comp.with_rect(candidate)

    # Unreachable: lowest_free_row always fits at col 0
    return comp.with_rect(GridRect(0, lowest_free_row, width, height))


def sort_by_position(components: Sequence[Component]) -> List[Component]:
    """Sort top to bottom, then left to right. Ties keep collection order."""
    return sorted(components, key=lambda c: (c.rect.row, c.rect.col))


def reflow(components: Sequence[Component],
           breakpoint: Breakpoint = Breakpoint.WIDE,
           max_rows: int = DEFAULT_MAX_SEARCH_ROWS) -> List[Component]:
    """
    Repack every component with first fit.

    Components are sorted by (row, col), then placed one by one against
    those already placed. The result is in placement order, which becomes
    the new collection order.
    """
    placed: List[Component] = []
    for comp in sort_by_position(components):
        placed.append(find_slot(comp, placed, breakpoint, max_rows))

    if logger.isEnabledFor(logging.DEBUG):
        moved = sum(1 for before, after in zip(sort_by_position(components), placed)
                    if before.rect != after.rect)
        logger.debug("Reflow: components=%d moved=%d", len(placed), moved)

    return placed


def colliding_with(components: Sequence[Component], active_id: str) -> List[Component]:
    """Components that overlap the active component, in collection order."""
    active = next((c for c in components if c.id == active_id), None)
    if active is None:
        return []
    return [c for c in components
            if c.id != active_id and overlaps(active.rect, c.rect)]


def has_collisions(components: Sequence[Component], active_id: str) -> bool:
    return bool(colliding_with(components, active_id))


def find_collisions(components: Sequence[Component]) -> List[Tuple[str, str]]:
    """All overlapping pairs, as (earlier id, later id) in collection order."""
    pairs = []
    for i, a in enumerate(components):
        for b in components[i + 1:]:
            if overlaps(a.rect, b.rect):
                pairs.append((a.id, b.id))
    return pairs


def replace_rect(components: Sequence[Component], component_id: str,
                 rect: GridRect) -> List[Component]:
    """Copy of the arrangement with one component's rect swapped."""
    return [c.with_rect(rect) if c.id == component_id else c for c in components]
