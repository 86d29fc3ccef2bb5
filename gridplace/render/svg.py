"""
SVG snapshot of an arrangement.

Draws the column guides, every component box with its id and kind, and
optionally the ghost outline and the border handles. Output is a single
self-contained SVG document.
"""

import logging
from typing import Optional, Sequence

from ..grid.abstraction import Component, ComponentKind, GridRect, GRID_COLUMNS
from ..interaction.borders import BorderHandle, BorderOrientation
from .metrics import GridMetrics

logger = logging.getLogger(__name__)

KIND_COLORS = {
    ComponentKind.PRIMARY: "#3498db",
    ComponentKind.SECONDARY: "#2ecc71",
}
GHOST_COLOR = "#f39c12"
GHOST_COLLIDING_COLOR = "#e74c3c"
HANDLE_COLOR = "#9b59b6"


def _escape(text: str) -> str:
    return (text.replace("&", "&amp;").replace("<", "&lt;")
            .replace(">", "&gt;").replace('"', "&quot;"))


def render_svg(components: Sequence[Component],
               metrics: Optional[GridMetrics] = None,
               ghost: Optional[GridRect] = None,
               ghost_colliding: bool = False,
               handles: Sequence[BorderHandle] = ()) -> str:
    """
    Render components to an SVG string.

    Args:
        components: Arrangement to draw, in collection order
        metrics: Canvas geometry (defaults to a 1200px canvas)
        ghost: Optional target outline drawn on top
        ghost_colliding: Draw the ghost in the collision color
        handles: Border handles to draw in the gutters

    Returns:
        SVG document as a string
    """
    metrics = metrics or GridMetrics()
    rows = max((c.rect.row + c.rect.height for c in components), default=0)
    width = metrics.canvas_width
    height = metrics.canvas_height(max(rows, 1))

    svg_parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" '
        f'width="{width:.0f}" height="{height:.0f}" '
        f'viewBox="0 0 {width:.0f} {height:.0f}">'
    ]

    # Background
    svg_parts.append('<rect width="100%" height="100%" fill="#f5f6fa"/>')

    # Column guides
    for col in range(GRID_COLUMNS):
        guide = metrics.to_pixels(col, 0, 1, max(rows, 1))
        svg_parts.append(
            f'<rect x="{guide.left:.1f}" y="{guide.top:.1f}" '
            f'width="{guide.width:.1f}" height="{guide.height:.1f}" '
            f'fill="#ecf0f1" class="grid-column"/>'
        )

    # Components
    for comp in components:
        box = metrics.to_pixels(*comp.rect.as_tuple())
        color = KIND_COLORS.get(comp.kind, "#95a5a6")
        svg_parts.append(
            f'<g class="component" data-id="{_escape(comp.id)}">'
            f'<rect x="{box.left:.1f}" y="{box.top:.1f}" '
            f'width="{box.width:.1f}" height="{box.height:.1f}" '
            f'rx="4" fill="{color}" fill-opacity="0.85" stroke="#2c3e50" stroke-width="1"/>'
            f'<text x="{box.left + 6:.1f}" y="{box.top + 16:.1f}" '
            f'font-family="sans-serif" font-size="12" fill="#ffffff">'
            f'{_escape(comp.id)} ({comp.kind.value})</text>'
            f'</g>'
        )

    # Border handles
    for handle in handles:
        svg_parts.append(_handle_svg(handle, metrics))

    # Ghost outline
    if ghost is not None:
        box = metrics.to_pixels(*ghost.as_tuple())
        color = GHOST_COLLIDING_COLOR if ghost_colliding else GHOST_COLOR
        svg_parts.append(
            f'<rect x="{box.left:.1f}" y="{box.top:.1f}" '
            f'width="{box.width:.1f}" height="{box.height:.1f}" '
            f'fill="none" stroke="{color}" stroke-width="2" '
            f'stroke-dasharray="6,4" class="ghost"/>'
        )

    svg_parts.append('</svg>')

    logger.debug("Rendered SVG: components=%d rows=%d", len(components), rows)
    return '\n'.join(svg_parts)


def _handle_svg(handle: BorderHandle, metrics: GridMetrics) -> str:
    """Line through the middle of the gutter on the shared border."""
    if handle.orientation == BorderOrientation.VERTICAL:
        x = metrics.origin + handle.line * metrics.pitch_x - metrics.gutter / 2
        y1 = metrics.origin + handle.span_start * metrics.pitch_y
        y2 = metrics.origin + handle.span_end * metrics.pitch_y - metrics.gutter
        x1 = x2 = x
    else:
        y = metrics.origin + handle.line * metrics.pitch_y - metrics.gutter / 2
        x1 = metrics.origin + handle.span_start * metrics.pitch_x
        x2 = metrics.origin + handle.span_end * metrics.pitch_x - metrics.gutter
        y1 = y2 = y
    return (
        f'<line x1="{x1:.1f}" y1="{y1:.1f}" x2="{x2:.1f}" y2="{y2:.1f}" '
        f'stroke="{HANDLE_COLOR}" stroke-width="3" class="border-handle" '
        f'data-key="{_escape(handle.key)}"/>'
    )
