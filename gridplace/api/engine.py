"""
Layout Engine

Single entry point that wires the grid model, placement solver, collision
policies, responsive manager and interaction state machine together.

Hosts talk to it in three ways:
- Programmatic edits: add/remove/move/resize/reflow, mode toggles
- Pointer events in canvas pixels: begin_*, pointer_move, pointer_up
- Viewport notifications: notify_viewport_resize

Every visual change is pushed to the configured Renderer.
"""

import logging
from dataclasses import replace
from typing import List, Optional, Union

from ..config import EngineConfig
from ..grid.abstraction import Component, ComponentKind, GridModel, GridRect, GRID_COLUMNS
from ..grid.layout_file import LayoutDocument
from ..interaction.borders import BorderHandle, compute_border_handles, find_handle
from ..interaction.controller import InteractionController
from ..interaction.session import InteractionState
from ..interaction.ticker import ManualTicker, Ticker
from ..placement.breakpoints import Breakpoint, min_columns_for
from ..placement.collision import CollisionMode, ResolutionResult, commit_arrangement
from ..placement.responsive import ResponsiveManager
from ..placement.solver import find_slot, reflow
from ..render.metrics import GridMetrics
from ..render.renderer import Renderer

logger = logging.getLogger(__name__)


class LayoutEngine:
    """
    Grid layout engine.

    Owns the authoritative component collection and the master layout.
    All geometry conflicts are resolved silently; only malformed imports
    and unknown ids in programmatic calls raise.
    """

    def __init__(self, config: Optional[EngineConfig] = None,
                 renderer: Optional[Renderer] = None,
                 ticker: Optional[Ticker] = None,
                 canvas_width: float = 1200.0,
                 breakpoint: Breakpoint = Breakpoint.WIDE):
        """
        Args:
            config: Engine configuration (defaults if omitted)
            renderer: Receives every visual update (no-op if omitted)
            ticker: Animation ticker for drags and resizes (manual if omitted)
            canvas_width: Current canvas width in pixels
            breakpoint: Breakpoint the engine starts at
        """
        self.config = replace(config) if config is not None else EngineConfig()
        self.model = GridModel()
        self.renderer = renderer or Renderer()
        self.ticker = ticker or ManualTicker()
        self.canvas_width = canvas_width
        self.responsive = ResponsiveManager(
            breakpoint=breakpoint,
            narrow_max_width=self.config.narrow_max_width,
            medium_max_width=self.config.medium_max_width,
            max_search_rows=self.config.max_search_rows,
        )

        mode = self.config.collision_mode
        self._reflow_enabled = mode == CollisionMode.REFLOW
        self._collision_resize_enabled = mode == CollisionMode.COLLISION_RESIZE

        self._next_id = 1
        self._border_handles: List[BorderHandle] = []

        self.controller = InteractionController(
            self.model,
            renderer=self.renderer,
            ticker=self.ticker,
            get_metrics=lambda: self.metrics,
            get_breakpoint=lambda: self.responsive.breakpoint,
            get_mode=lambda: self.config.collision_mode,
            damping=self.config.damping,
            snap_threshold=self.config.snap_threshold,
            ghost_snap_threshold=self.config.ghost_snap_threshold,
            max_search_rows=self.config.max_search_rows,
            on_commit=self._on_commit,
            on_border_moved=self._on_border_moved,
            on_border_released=self._on_border_released,
        )
        self.renderer.set_metrics(self.metrics)

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def metrics(self) -> GridMetrics:
        return self.config.render.metrics(self.canvas_width)

    @property
    def components(self) -> List[Component]:
        """Current arrangement, in collection order."""
        return self.model.components

    @property
    def current_breakpoint(self) -> Breakpoint:
        return self.responsive.breakpoint

    @property
    def collision_mode(self) -> CollisionMode:
        return self.config.collision_mode

    @property
    def state(self) -> InteractionState:
        return self.controller.state

    @property
    def border_handles(self) -> List[BorderHandle]:
        return list(self._border_handles)

    def get_component(self, component_id: str) -> Component:
        component = self.model.get(component_id)
        if component is None:
            raise KeyError(component_id)
        return component

    def get_master_layout(self) -> List[Component]:
        """Copy of the cached Wide arrangement."""
        return self.responsive.master_layout

    # -------------------------------------------------------------------------
    # Collision mode
    # -------------------------------------------------------------------------

    def set_collision_mode(self, mode: Union[CollisionMode, str]):
        """Select the collision policy used by previews and commits."""
        mode = CollisionMode(mode)
        if mode == CollisionMode.REFLOW:
            self._reflow_enabled, self._collision_resize_enabled = True, False
        elif mode == CollisionMode.COLLISION_RESIZE:
            self._collision_resize_enabled = True
        else:
            self._reflow_enabled, self._collision_resize_enabled = False, False
        self._apply_toggles()

    def set_reflow_enabled(self, enabled: bool):
        self._reflow_enabled = enabled
        self._apply_toggles()

    def set_collision_resize_enabled(self, enabled: bool):
        self._collision_resize_enabled = enabled
        self._apply_toggles()

    def _apply_toggles(self):
        mode = CollisionMode.from_toggles(self._reflow_enabled, self._collision_resize_enabled)
        if mode != self.config.collision_mode:
            logger.info("Collision mode: %s -> %s", self.config.collision_mode.value, mode.value)
        self.config.collision_mode = mode

    # -------------------------------------------------------------------------
    # Programmatic edits
    # -------------------------------------------------------------------------

    def add_component(self, kind: Union[ComponentKind, str]) -> Component:
        """
        Create a component with its kind's default size at its first-fit slot.

        Returns:
            The placed component
        """
        kind = ComponentKind(kind)
        component_id = str(self._next_id)
        self._next_id += 1

        component = find_slot(
            Component.with_default_size(component_id, kind),
            self.model.components,
            self.responsive.breakpoint,
            self.config.max_search_rows,
        )
        self.model.add(component)
        self.renderer.update(component.id, *component.rect.as_tuple())
        logger.info("Added %s %s at %s", kind.value, component_id, component.rect.as_tuple())

        self._arrangement_committed()
        return component

    def remove_component(self, component_id: str) -> Component:
        """
        Remove a component.

        Raises:
            KeyError: if the id is unknown
        """
        if component_id not in self.model:
            raise KeyError(component_id)
        session = self.controller.session
        if session is not None and component_id in session.component_ids:
            self.controller.cancel()

        component = self.model.remove(component_id)
        self.renderer.remove(component_id)
        if not self.responsive.is_wide:
            self.responsive.forget(component_id)
        logger.info("Removed %s", component_id)

        self._arrangement_committed()
        return component

    def reflow(self) -> List[Component]:
        """Repack every component with first fit."""
        arranged = reflow(self.model.components, self.responsive.breakpoint,
                          self.config.max_search_rows)
        self._replace_arrangement(arranged)
        logger.info("Reflowed %d components", len(arranged))
        self._arrangement_committed()
        return self.model.components

    def move_component(self, component_id: str, col: int, row: int) -> ResolutionResult:
        """
        Move a component and apply the active collision policy.

        The target is clamped to the grid first.
        """
        rect = self.get_component(component_id).rect
        col = max(0, min(GRID_COLUMNS - rect.width, int(col)))
        row = max(0, int(row))
        return self._commit(component_id, rect.moved_to(col, row))

    def resize_component(self, component_id: str, width: int, height: int,
                         col: Optional[int] = None,
                         row: Optional[int] = None) -> ResolutionResult:
        """
        Resize (and optionally move) a component, then apply the active policy.

        Width is clamped between the breakpoint minimum and the right edge
        of the grid; height is at least 1.
        """
        component = self.get_component(component_id)
        rect = component.rect
        col = rect.col if col is None else max(0, min(GRID_COLUMNS - 1, int(col)))
        row = rect.row if row is None else max(0, int(row))

        min_width = min_columns_for(component.kind, self.responsive.breakpoint)
        col = min(col, GRID_COLUMNS - min_width)
        width = max(min_width, min(GRID_COLUMNS - col, int(width)))
        height = max(1, int(height))
        return self._commit(component_id, GridRect(col, row, width, height))

    def _commit(self, component_id: str, rect: GridRect) -> ResolutionResult:
        if not self.controller.is_idle:
            raise RuntimeError(
                f"Cannot edit {component_id} while a {self.controller.state.value} "
                f"interaction is in progress"
            )
        result = commit_arrangement(
            self.model.components, component_id, rect, self.config.collision_mode,
            self.responsive.breakpoint, self.config.max_search_rows,
        )
        self._replace_arrangement(result.components)
        logger.info("Committed %s at %s (%s)", component_id,
                    result.rect_of(component_id).as_tuple(), result.mode.value)
        self._on_commit(result)
        return result

    # -------------------------------------------------------------------------
    # Viewport
    # -------------------------------------------------------------------------

    def notify_viewport_resize(self, viewport_width: float,
                               canvas_width: Optional[float] = None) -> Breakpoint:
        """
        Tell the engine the viewport (and optionally the canvas) changed size.

        Returns:
            The active breakpoint after the notification
        """
        if canvas_width is not None and canvas_width != self.canvas_width:
            self.canvas_width = canvas_width
            self.renderer.set_metrics(self.metrics)

        if self.responsive.classify(viewport_width) == self.responsive.breakpoint:
            return self.responsive.breakpoint

        self.controller.cancel()
        arranged = self.responsive.on_viewport_resize(viewport_width, self.model.components)
        self._replace_arrangement(arranged)
        self._regenerate_border_handles()
        return self.responsive.breakpoint

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def export_layout(self) -> LayoutDocument:
        """
        Snapshot of the Wide arrangement.

        Away from Wide this is the master layout, so exporting on a small
        screen never saves the squeezed arrangement.
        """
        if self.responsive.is_wide or not self.responsive.has_master:
            components = self.model.components
        else:
            components = self.responsive.master_layout
        document = LayoutDocument.from_components(components)
        logger.info("Exported layout: %d components (%s)",
                    len(document.components), self.responsive.breakpoint.value)
        return document

    def import_layout(self, data: Union[LayoutDocument, dict]) -> LayoutDocument:
        """
        Replace the arrangement with a layout document.

        The document becomes the new master layout. Away from Wide, the
        breakpoint minimums are enforced on the live arrangement afterwards.

        Raises:
            LayoutValidationError: if the document is malformed; nothing
                is changed in that case
        """
        document = data if isinstance(data, LayoutDocument) else LayoutDocument.from_dict(data)

        self.controller.cancel()
        for component_id in self.model.ids:
            self.renderer.remove(component_id)

        components = document.to_components()
        self.model.replace_all(components)
        self._next_id = document.next_id()
        self.responsive.save_master(components)

        if not self.responsive.is_wide:
            self.model.replace_all(self.responsive.constrain(components))

        self._render_all()
        self._regenerate_border_handles()
        logger.info("Imported layout: %d components, version %s",
                    len(components), document.version)
        return document

    # -------------------------------------------------------------------------
    # Pointer events
    # -------------------------------------------------------------------------

    def begin_drag(self, component_id: str, x: float, y: float) -> bool:
        return self.controller.begin_drag(component_id, x, y)

    def begin_resize(self, component_id: str, direction, x: float, y: float) -> bool:
        return self.controller.begin_resize(component_id, direction, x, y)

    def begin_border_drag(self, handle_key: str, x: float, y: float) -> bool:
        """Pointer-down on the border handle with the given key."""
        handle = find_handle(self._border_handles, handle_key)
        if handle is None:
            logger.warning("Ignoring pointer-down on unknown border handle: %s", handle_key)
            return False
        return self.controller.begin_border_drag(handle, x, y)

    def pointer_move(self, x: float, y: float):
        self.controller.pointer_move(x, y)

    def pointer_up(self, x: Optional[float] = None,
                   y: Optional[float] = None) -> Optional[ResolutionResult]:
        return self.controller.pointer_up(x, y)

    def tick(self):
        """Advance the animation one step (hosts driving their own frame loop)."""
        self.controller.tick()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _replace_arrangement(self, components: List[Component]):
        self.model.replace_all(components)
        self._render_all()

    def _render_all(self):
        for component in self.model.components:
            self.renderer.update(component.id, *component.rect.as_tuple())

    def _regenerate_border_handles(self):
        self._border_handles = compute_border_handles(self.model.components)
        self.renderer.set_border_handles(self._border_handles)

    def _arrangement_committed(self):
        if self.responsive.refresh_master(self.model.components):
            logger.debug("Master layout refreshed (%d components)", len(self.model))
        self._regenerate_border_handles()

    def _on_commit(self, result: ResolutionResult):
        if result.absorbed:
            logger.info("Collision resize absorbed %s", result.absorbed)
        self._arrangement_committed()

    def _on_border_moved(self, handle: BorderHandle):
        self._regenerate_border_handles()

    def _on_border_released(self, handle: BorderHandle):
        logger.info("Border %s released at line %s", handle.key, self._line_of(handle))
        self._arrangement_committed()

    def _line_of(self, handle: BorderHandle) -> Optional[int]:
        current = find_handle(self._border_handles, handle.key)
        return current.line if current is not None else None
