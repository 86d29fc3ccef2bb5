"""
Shared test fixtures for GridPlace tests.

Provides reusable components, arrangements and a fully wired engine
with a recording renderer and a manually driven ticker.
"""

import pytest
from typing import List

from gridplace.api.engine import LayoutEngine
from gridplace.config import EngineConfig
from gridplace.grid.abstraction import Component, ComponentKind, GridRect
from gridplace.interaction.ticker import ManualTicker
from gridplace.render.renderer import PixelRenderer


def _make_component(component_id: str, col: int, row: int, width: int, height: int,
                   kind: ComponentKind = ComponentKind.PRIMARY) -> Component:
    """Build a component at an explicit rect."""
    return Component(id=component_id, kind=kind, rect=GridRect(col, row, width, height))


def _layout_dict(components: List[Component]) -> dict:
    """Serialized layout document for a list of components."""
    return {
        "components": [
            {"id": c.id, "type": c.kind.value, "position": c.rect.to_dict()}
            for c in components
        ],
        "version": "1.0.0",
        "lastModified": "2026-01-14T10:30:00Z",
    }


@pytest.fixture
def side_by_side() -> List[Component]:
    """A 6x6 chart with a 6x3 kpi to its right, sharing column line 6."""
    return [
        _make_component("A", 0, 0, 6, 6),
        _make_component("B", 6, 0, 6, 3, ComponentKind.SECONDARY),
    ]


@pytest.fixture
def dashboard() -> List[Component]:
    """A small desktop arrangement with both kinds."""
    return [
        _make_component("1", 0, 0, 6, 6),
        _make_component("2", 6, 0, 2, 3, ComponentKind.SECONDARY),
        _make_component("3", 8, 0, 2, 3, ComponentKind.SECONDARY),
        _make_component("4", 6, 3, 6, 4),
    ]


@pytest.fixture
def renderer() -> PixelRenderer:
    return PixelRenderer()


@pytest.fixture
def ticker() -> ManualTicker:
    return ManualTicker()


@pytest.fixture
def engine(renderer, ticker) -> LayoutEngine:
    """Engine at the desktop breakpoint on a 1200px canvas, reflow mode."""
    return LayoutEngine(EngineConfig(), renderer=renderer, ticker=ticker)


@pytest.fixture
def plain_engine(engine) -> LayoutEngine:
    """Engine with neither reflow nor collision resize enabled."""
    engine.set_collision_mode("plain")
    return engine


@pytest.fixture
def make_component():
    """Factory: make_component(id, col, row, width, height, kind=PRIMARY)."""
    return _make_component


@pytest.fixture
def layout_dict():
    """Factory: layout_dict(components) -> serialized layout document."""
    return _layout_dict
