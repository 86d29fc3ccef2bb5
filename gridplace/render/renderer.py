"""
Renderer contract.

The engine pushes every visual change through a Renderer. The base class
accepts all updates and does nothing, so hosts only override the hooks
they care about. Components are referred to by id only; a renderer never
owns component lifecycle.
"""

import logging
from typing import Dict, List, Optional, Sequence

from ..interaction.borders import BorderHandle, BorderOrientation
from .metrics import GridMetrics, PixelBox

logger = logging.getLogger(__name__)


class Renderer:
    """No-op renderer. Subclass and override to draw."""

    def update(self, component_id: str, col: float, row: float,
               width: float, height: float):
        """Reposition/resize the box of a component (grid units, may be fractional)."""

    def remove(self, component_id: str):
        """Drop the box of a component that left the grid."""

    def show_ghost(self, col: int, row: int, width: int, height: int, colliding: bool):
        """Show the raw, unsmoothed target outline."""

    def hide_ghost(self):
        """Remove the ghost outline."""

    def set_active(self, component_id: Optional[str], state: Optional[str]):
        """Flag a component as being dragged/resized, or clear the flag (None)."""

    def set_border_handles(self, handles: Sequence[BorderHandle]):
        """Replace all border affordances."""

    def set_metrics(self, metrics: GridMetrics):
        """Canvas geometry changed."""


class PixelRenderer(Renderer):
    """
    Renderer that converts everything to pixel boxes and keeps them.

    Useful as a base for real drawing backends and as a probe in tests.
    """

    def __init__(self, metrics: Optional[GridMetrics] = None):
        self.metrics = metrics or GridMetrics()
        self.grid_rects: Dict[str, tuple] = {}
        self.boxes: Dict[str, PixelBox] = {}
        self.ghost: Optional[PixelBox] = None
        self.ghost_colliding = False
        self.active_id: Optional[str] = None
        self.active_state: Optional[str] = None
        self.handles: List[BorderHandle] = []
        self.handle_boxes: Dict[str, PixelBox] = {}
        self.update_count = 0

    def update(self, component_id, col, row, width, height):
        self.grid_rects[component_id] = (col, row, width, height)
        self.boxes[component_id] = self.metrics.to_pixels(col, row, width, height)
        self.update_count += 1

    def remove(self, component_id):
        self.grid_rects.pop(component_id, None)
        self.boxes.pop(component_id, None)

    def show_ghost(self, col, row, width, height, colliding):
        self.ghost = self.metrics.to_pixels(col, row, width, height)
        self.ghost_colliding = colliding

    def hide_ghost(self):
        self.ghost = None
        self.ghost_colliding = False

    def set_active(self, component_id, state):
        self.active_id = component_id
        self.active_state = state

    def set_border_handles(self, handles):
        self.handles = list(handles)
        self.handle_boxes = {h.key: self.handle_box(h) for h in self.handles}

    def set_metrics(self, metrics):
        self.metrics = metrics
        for component_id, rect in self.grid_rects.items():
            self.boxes[component_id] = metrics.to_pixels(*rect)
        self.handle_boxes = {h.key: self.handle_box(h) for h in self.handles}
        logger.debug("Canvas resized: width=%.1f cell=%.2f",
                     metrics.canvas_width, metrics.cell_width)

    def handle_box(self, handle: BorderHandle) -> PixelBox:
        """Hit area of a border handle: one gutter wide, centered on the gutter."""
        m = self.metrics
        span = handle.span_end - handle.span_start
        if handle.orientation == BorderOrientation.VERTICAL:
            x = handle.line * m.cell_width + handle.line * m.gutter - m.gutter + m.origin
            y = handle.span_start * m.cell_height + handle.span_start * m.gutter + m.origin
            return PixelBox(x, y, m.gutter, span * m.cell_height + (span - 1) * m.gutter)

        x = handle.span_start * m.cell_width + handle.span_start * m.gutter + m.origin
        y = handle.line * m.cell_height + handle.line * m.gutter - m.gutter + m.origin
        return PixelBox(x, y, span * m.cell_width + (span - 1) * m.gutter, m.gutter)
