"""
Responsive Constraint Manager

Tracks the active breakpoint and keeps a master (Wide) layout so that a
trip through Medium/Narrow and back restores the desktop arrangement
exactly.

Transitions (previous -> current):
- Wide -> non-Wide: snapshot master, enforce minimums, reflow
- non-Wide -> Wide: restore rects from master by id, no reflow
- non-Wide -> other non-Wide: enforce minimums, reflow
"""

import logging
from dataclasses import replace
from typing import List, Optional, Sequence

from ..grid.abstraction import Component, GridRect, GRID_COLUMNS
from .breakpoints import (
    Breakpoint,
    MEDIUM_MAX_WIDTH,
    NARROW_MAX_WIDTH,
    classify_viewport,
    min_columns_for,
)
from .solver import DEFAULT_MAX_SEARCH_ROWS, reflow

logger = logging.getLogger(__name__)


def enforce_minimums(components: Sequence[Component],
                     breakpoint: Breakpoint) -> List[Component]:
    """Grow under-sized components, shifting left if they cross column 12."""
    result = []
    for comp in components:
        min_cols = min_columns_for(comp.kind, breakpoint)
        rect = comp.rect
        if rect.width < min_cols:
            col = rect.col
            if col + min_cols > GRID_COLUMNS:
                col = max(0, GRID_COLUMNS - min_cols)
            rect = GridRect(col, rect.row, min_cols, rect.height)
        result.append(comp.with_rect(rect) if rect != comp.rect else comp)
    return result


class ResponsiveManager:
    """
    Breakpoint state plus the cached master layout.

    The master layout is only rewritten when leaving Wide, when a commit
    happens while Wide, and on import. Drags and resizes at a non-Wide
    breakpoint never touch it.
    """

    def __init__(self, breakpoint: Breakpoint = Breakpoint.WIDE,
                 narrow_max_width: float = NARROW_MAX_WIDTH,
                 medium_max_width: float = MEDIUM_MAX_WIDTH,
                 max_search_rows: int = DEFAULT_MAX_SEARCH_ROWS):
        self.breakpoint = breakpoint
        self.narrow_max_width = narrow_max_width
        self.medium_max_width = medium_max_width
        self.max_search_rows = max_search_rows
        self._master: List[Component] = []
        self._has_master = False

    @property
    def is_wide(self) -> bool:
        return self.breakpoint == Breakpoint.WIDE

    @property
    def has_master(self) -> bool:
        """True once a master layout has been captured (it may be empty)."""
        return self._has_master

    @property
    def master_layout(self) -> List[Component]:
        """Copy of the master layout."""
        return [replace(c) for c in self._master]

    def classify(self, viewport_width: float) -> Breakpoint:
        return classify_viewport(viewport_width, self.narrow_max_width, self.medium_max_width)

    def save_master(self, components: Sequence[Component]):
        """Replace the master layout with a snapshot of `components`."""
        self._master = [replace(c) for c in components]
        self._has_master = True

    def refresh_master(self, components: Sequence[Component]) -> bool:
        """Snapshot `components` as master, but only while Wide."""
        if not self.is_wide:
            return False
        self.save_master(components)
        return True

    def forget(self, component_id: str):
        """Drop a component from the master layout."""
        self._master = [c for c in self._master if c.id != component_id]

    def restore_master(self, components: Sequence[Component]) -> List[Component]:
        """
        Reapply master rects by id.

        Components found in the master take its rect and its order;
        components missing from the master keep their rect and follow
        in their current order.
        """
        if not self._master:
            return list(components)
        current = {c.id: c for c in components}
        restored = [current[m.id].with_rect(m.rect) for m in self._master if m.id in current]
        saved_ids = {m.id for m in self._master}
        restored.extend(c for c in components if c.id not in saved_ids)
        return restored

    def constrain(self, components: Sequence[Component]) -> List[Component]:
        """Enforce the active breakpoint's minimums and repack."""
        grown = enforce_minimums(components, self.breakpoint)
        return reflow(grown, self.breakpoint, self.max_search_rows)

    def on_viewport_resize(self, viewport_width: float,
                           components: Sequence[Component]) -> Optional[List[Component]]:
        """
        Reclassify the viewport and run the transition, if any.

        Returns:
            New arrangement when the breakpoint changed, else None
        """
        previous = self.breakpoint
        current = self.classify(viewport_width)
        if current == previous:
            return None

        self.breakpoint = current
        logger.info("Breakpoint %s -> %s (viewport %.0fpx)",
                    previous.value, current.value, viewport_width)
        return self.transition(previous, components)

    def transition(self, previous: Breakpoint,
                   components: Sequence[Component]) -> List[Component]:
        """Arrangement after moving from `previous` to the current breakpoint."""
        current = self.breakpoint

        if current == Breakpoint.WIDE and previous != Breakpoint.WIDE:
            logger.debug("Restoring master layout (%d components)", len(self._master))
            return self.restore_master(components)

        if previous == Breakpoint.WIDE and current != Breakpoint.WIDE:
            self.save_master(components)

        return self.constrain(components)
