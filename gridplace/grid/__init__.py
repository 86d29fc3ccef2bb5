"""Grid model and layout documents."""

from .abstraction import (
    GRID_COLUMNS,
    Component,
    ComponentKind,
    GridModel,
    GridRect,
    default_size,
)
from .layout_file import (
    ComponentState,
    LayoutDocument,
    LayoutValidationError,
    read_layout_file,
    write_layout_file,
)

__all__ = [
    "GRID_COLUMNS",
    "Component",
    "ComponentKind",
    "GridModel",
    "GridRect",
    "default_size",
    "ComponentState",
    "LayoutDocument",
    "LayoutValidationError",
    "read_layout_file",
    "write_layout_file",
]
