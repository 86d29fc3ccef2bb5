"""
GridPlace - 12-column grid layout engine

Places dashboard-style components on a fixed-width, unbounded-height
grid: first-fit auto-placement, reflow, collision resolution, responsive
breakpoints with a master layout, and smoothed drag/resize/border-drag
interactions.
"""

__version__ = "0.1.0"
__author__ = "GridPlace Team"

from .grid.abstraction import Component, ComponentKind, GridModel, GridRect
from .grid.layout_file import LayoutDocument, LayoutValidationError
from .placement.breakpoints import Breakpoint
from .placement.collision import CollisionMode
from .config import EngineConfig, load_engine_config
from .api.engine import LayoutEngine

__all__ = [
    "Component",
    "ComponentKind",
    "GridModel",
    "GridRect",
    "LayoutDocument",
    "LayoutValidationError",
    "Breakpoint",
    "CollisionMode",
    "EngineConfig",
    "load_engine_config",
    "LayoutEngine",
]
