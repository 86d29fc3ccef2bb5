"""Placement engine: first-fit solver, collision policies and breakpoints."""

from .breakpoints import Breakpoint, classify_viewport, min_columns_for
from .solver import (
    overlaps,
    is_available,
    find_slot,
    reflow,
    find_collisions,
)
from .collision import (
    CollisionMode,
    ResolutionResult,
    resize_overlapping,
    preview_arrangement,
    commit_arrangement,
)
from .responsive import ResponsiveManager, enforce_minimums

__all__ = [
    "Breakpoint",
    "classify_viewport",
    "min_columns_for",
    "overlaps",
    "is_available",
    "find_slot",
    "reflow",
    "find_collisions",
    "CollisionMode",
    "ResolutionResult",
    "resize_overlapping",
    "preview_arrangement",
    "commit_arrangement",
    "ResponsiveManager",
    "enforce_minimums",
]
