"""
Grid Abstraction Layer

Defines the coordinate system shared by the placement solver, the
interaction state machine and the persistence layer: a fixed span of
12 columns, unbounded rows, integer-addressed cells.

Components are kept in an ordered collection. Order matters because
first-fit placement and export iterate in collection order.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple


GRID_COLUMNS = 12


class ComponentKind(Enum):
    """Kind of a placed component. Values are the serialized `type` names."""
    PRIMARY = "chart"
    SECONDARY = "kpi"


# Default (width, height) in cells for newly added components
DEFAULT_SIZES: Dict[ComponentKind, Tuple[int, int]] = {
    ComponentKind.PRIMARY: (6, 6),
    ComponentKind.SECONDARY: (2, 3),
}


def default_size(kind: ComponentKind) -> Tuple[int, int]:
    """Get the default (width, height) for a component kind."""
    return DEFAULT_SIZES[kind]


@dataclass(frozen=True)
class GridRect:
    """A rectangle on the grid, in cells.

    Committed rects hold integers. The interaction layer works with real
    numbers while a pointer is down and rounds before committing.
    """
    col: int
    row: int
    width: int
    height: int

    @property
    def right(self) -> int:
        """Column index one past the right edge."""
        return self.col + self.width

    @property
    def bottom(self) -> int:
        """Row index one past the bottom edge."""
        return self.row + self.height

    def moved_to(self, col: int, row: int) -> "GridRect":
        return replace(self, col=col, row=row)

    def resized_to(self, width: int, height: int) -> "GridRect":
        return replace(self, width=width, height=height)

    def in_bounds(self) -> bool:
        """Check the column span and origin against the grid."""
        return (self.col >= 0 and self.row >= 0 and
                self.width >= 1 and self.height >= 1 and
                self.col + self.width <= GRID_COLUMNS)

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return (self.col, self.row, self.width, self.height)

    def to_dict(self) -> Dict[str, int]:
        return {
            "col": self.col,
            "row": self.row,
            "width": self.width,
            "height": self.height,
        }


@dataclass
class Component:
    """A placed component.

    The grid model owns the component; renderers only ever refer to it
    by `id`.
    """
    id: str
    kind: ComponentKind
    rect: GridRect = field(default=GridRect(0, 0, 1, 1))

    @classmethod
    def with_default_size(cls, component_id: str, kind: ComponentKind) -> "Component":
        """Create a component at the origin with its kind's default size."""
        width, height = default_size(kind)
        return cls(id=component_id, kind=kind, rect=GridRect(0, 0, width, height))

    def with_rect(self, rect: GridRect) -> "Component":
        """Return a copy of this component with a different rect."""
        return replace(self, rect=rect)


class GridModel:
    """
    Authoritative, ordered component collection.

    No operation here validates geometry; callers (solver, policies,
    responsive manager) hand in arrangements that are already legal.
    Adding appends, removing compacts, and replacing the arrangement
    adopts the order of the replacement.
    """

    def __init__(self, components: Optional[List[Component]] = None):
        self._components: Dict[str, Component] = {}
        for comp in components or []:
            self.add(comp)

    def __len__(self) -> int:
        return len(self._components)

    def __iter__(self) -> Iterator[Component]:
        return iter(list(self._components.values()))

    def __contains__(self, component_id: str) -> bool:
        return component_id in self._components

    @property
    def components(self) -> List[Component]:
        """Components in collection order."""
        return list(self._components.values())

    @property
    def ids(self) -> List[str]:
        return list(self._components.keys())

    def add(self, component: Component):
        """Append a component to the collection."""
        self._components[component.id] = component

    def get(self, component_id: str) -> Optional[Component]:
        return self._components.get(component_id)

    def remove(self, component_id: str) -> Optional[Component]:
        """Remove and return a component."""
        return self._components.pop(component_id, None)

    def clear(self):
        self._components.clear()

    def rect_of(self, component_id: str) -> GridRect:
        return self._components[component_id].rect

    def set_rect(self, component_id: str, rect: GridRect):
        comp = self._components[component_id]
        self._components[component_id] = comp.with_rect(rect)

    def snapshot(self) -> List[Component]:
        """Detached copy of the arrangement (components are re-created)."""
        return [replace(c) for c in self._components.values()]

    def replace_all(self, components: List[Component]):
        """Adopt a new arrangement, including its order."""
        self._components = {c.id: replace(c) for c in components}

    def rects(self) -> Dict[str, GridRect]:
        """Mapping of id to rect, in collection order."""
        return {cid: c.rect for cid, c in self._components.items()}
