"""Renderer contract, grid/pixel metrics and SVG snapshots."""

from .metrics import GridMetrics, PixelBox
from .renderer import Renderer, PixelRenderer
from .svg import render_svg

__all__ = [
    "GridMetrics",
    "PixelBox",
    "Renderer",
    "PixelRenderer",
    "render_svg",
]
