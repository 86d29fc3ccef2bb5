"""
Interaction State Machine

Drives drag, free resize and shared-border drag from pointer events:

    Idle --pointer-down on body-----> Dragging --pointer-up--> Idle
    Idle --pointer-down on corner/edge--> Resizing --pointer-up--> Idle
    Idle --pointer-down on border---> BorderDragging --pointer-up--> Idle

Dragging and Resizing keep three views of the target:

1. Ghost - the raw pointer cell with a tight snap tolerance, drawn at once
   and flagged when it would collide with anything
2. Snap target - moves only past the snap threshold; previews are
   computed against it and the release commits it
3. Smoothed rect - what the renderer shows for the active component,
   pulled toward the snap target on every animation tick

Previews are pure: the grid model stays untouched until pointer-up.
Border drags are the exception and resize both sides on every move.
"""

import logging
from typing import Callable, Optional

from ..grid.abstraction import GridModel, GRID_COLUMNS
from ..placement.breakpoints import Breakpoint, min_columns_for
from ..placement.collision import (
    CollisionMode,
    ResolutionResult,
    commit_arrangement,
    preview_arrangement,
)
from ..placement.solver import DEFAULT_MAX_SEARCH_ROWS, is_available
from ..render.metrics import GridMetrics
from ..render.renderer import Renderer
from .borders import BorderHandle, BorderOrientation, drag_border
from .session import (
    InteractionSession,
    InteractionState,
    ResizeDirection,
    resize_rect,
)
from .ticker import ManualTicker, Ticker

logger = logging.getLogger(__name__)


class InteractionController:
    """
    Owns the single interaction session.

    The controller reads and (on release) writes the grid model; anything
    that depends on the committed arrangement, such as the master layout
    or border handles, is left to the `on_commit` and `on_border_moved`
    callbacks.
    """

    def __init__(self, model: GridModel,
                 renderer: Optional[Renderer] = None,
                 ticker: Optional[Ticker] = None,
                 get_metrics: Optional[Callable[[], GridMetrics]] = None,
                 get_breakpoint: Optional[Callable[[], Breakpoint]] = None,
                 get_mode: Optional[Callable[[], CollisionMode]] = None,
                 damping: float = 0.12,
                 snap_threshold: float = 0.6,
                 ghost_snap_threshold: float = 0.5,
                 max_search_rows: int = DEFAULT_MAX_SEARCH_ROWS,
                 on_commit: Optional[Callable[[ResolutionResult], None]] = None,
                 on_border_moved: Optional[Callable[[BorderHandle], None]] = None,
                 on_border_released: Optional[Callable[[BorderHandle], None]] = None):
        self.model = model
        self.renderer = renderer or Renderer()
        self.ticker = ticker or ManualTicker()
        self.get_metrics = get_metrics or GridMetrics
        self.get_breakpoint = get_breakpoint or (lambda: Breakpoint.WIDE)
        self.get_mode = get_mode or (lambda: CollisionMode.REFLOW)
        self.damping = damping
        self.snap_threshold = snap_threshold
        self.ghost_snap_threshold = ghost_snap_threshold
        self.max_search_rows = max_search_rows
        self.on_commit = on_commit
        self.on_border_moved = on_border_moved
        self.on_border_released = on_border_released
        self.session: Optional[InteractionSession] = None

    @property
    def state(self) -> InteractionState:
        if self.session is None:
            return InteractionState.IDLE
        return self.session.state

    @property
    def is_idle(self) -> bool:
        return self.session is None

    # -------------------------------------------------------------------------
    # Pointer-down
    # -------------------------------------------------------------------------

    def _can_start(self, component_ids) -> bool:
        if self.session is not None:
            logger.warning("Ignoring pointer-down on %s: %s already in progress",
                           "/".join(component_ids), self.session.state.value)
            return False
        missing = [cid for cid in component_ids if cid not in self.model]
        if missing:
            logger.warning("Ignoring pointer-down on unknown component(s): %s", missing)
            return False
        return True

    def begin_drag(self, component_id: str, x: float, y: float) -> bool:
        """
        Pointer-down on a component body.

        Args:
            component_id: Component under the pointer
            x, y: Pointer position in canvas pixels

        Returns:
            True if a drag session started
        """
        if not self._can_start([component_id]):
            return False

        rect = self.model.rect_of(component_id)
        box = self.get_metrics().to_pixels(*rect.as_tuple())
        self.session = InteractionSession.for_pointer(
            InteractionState.DRAGGING, component_id, rect, (x, y),
            snap_origin=(rect.col, rect.row),
            snap_threshold=self.snap_threshold,
            ghost_threshold=self.ghost_snap_threshold,
            mode=self.get_mode(),
            anchor=(x - box.left, y - box.top),
        )
        self._enter()
        return True

    def begin_resize(self, component_id: str, direction, x: float, y: float) -> bool:
        """
        Pointer-down on one of the eight resize affordances.

        `direction` is a ResizeDirection or its name ("SE", "southeast").
        """
        if not self._can_start([component_id]):
            return False
        if not isinstance(direction, ResizeDirection):
            direction = ResizeDirection.parse(direction)

        component = self.model.get(component_id)
        rect = component.rect
        self.session = InteractionSession.for_pointer(
            InteractionState.RESIZING, component_id, rect, (x, y),
            snap_origin=(0, 0),
            snap_threshold=self.snap_threshold,
            ghost_threshold=self.ghost_snap_threshold,
            mode=self.get_mode(),
            direction=direction,
            min_width=min(min_columns_for(component.kind, self.get_breakpoint()),
                          GRID_COLUMNS),
        )
        self._enter()
        return True

    def begin_border_drag(self, handle: BorderHandle, x: float, y: float) -> bool:
        """Pointer-down on the border affordance between two components."""
        if not self._can_start([handle.first_id, handle.second_id]):
            return False

        self.session = InteractionSession(
            state=InteractionState.BORDER_DRAGGING,
            component_ids=[handle.first_id, handle.second_id],
            start_rect=self.model.rect_of(handle.first_id),
            pointer_start=(x, y),
            handle=handle,
        )
        self.renderer.set_active(handle.first_id, InteractionState.BORDER_DRAGGING.value)
        logger.debug("Border drag started: %s", handle.key)
        return True

    def _enter(self):
        session = self.session
        self.renderer.set_active(session.component_id, session.state.value)
        self.renderer.show_ghost(*session.start_rect.as_tuple(), False)
        self.ticker.start(self.tick)
        logger.debug("%s started: %s at %s", session.state.value,
                     session.component_id, session.start_rect.as_tuple())

    # -------------------------------------------------------------------------
    # Pointer-move
    # -------------------------------------------------------------------------

    def pointer_move(self, x: float, y: float):
        """Pointer moved to (x, y) canvas pixels. No-op while idle."""
        session = self.session
        if session is None:
            return

        session.moves += 1
        if session.state == InteractionState.BORDER_DRAGGING:
            self._move_border(x, y)
            return

        metrics = self.get_metrics()
        if session.state == InteractionState.DRAGGING:
            self._move_drag(metrics, x, y)
        else:
            self._move_resize(metrics, x, y)

        session.ghost_colliding = not is_available(
            session.ghost, self.model.components, exclude_id=session.component_id
        )
        self.renderer.show_ghost(*session.ghost.as_tuple(), session.ghost_colliding)

        if session.target != session.previewed_target:
            self._preview()

    def _move_drag(self, metrics: GridMetrics, x: float, y: float):
        session = self.session
        start = session.start_rect
        anchor_x, anchor_y = session.anchor

        raw_col = metrics.grid_x(x - anchor_x)
        raw_row = metrics.grid_y(y - anchor_y)
        raw_col = max(0.0, min(float(GRID_COLUMNS - start.width), raw_col))
        raw_row = max(0.0, raw_row)

        session.snap_x.update(raw_col)
        session.snap_y.update(raw_row)
        session.ghost_x.update(raw_col)
        session.ghost_y.update(raw_row)

        session.target = start.moved_to(session.snap_x.value, session.snap_y.value)
        session.ghost = start.moved_to(session.ghost_x.value, session.ghost_y.value)

    def _move_resize(self, metrics: GridMetrics, x: float, y: float):
        session = self.session
        x0, y0 = session.pointer_start
        dx = (x - x0) / metrics.pitch_x if metrics.pitch_x > 0 else 0.0
        dy = (y - y0) / metrics.pitch_y

        session.snap_x.update(dx)
        session.snap_y.update(dy)
        session.ghost_x.update(dx)
        session.ghost_y.update(dy)

        session.target = resize_rect(session.start_rect, session.snap_x.value,
                                     session.snap_y.value, session.direction,
                                     session.min_width)
        session.ghost = resize_rect(session.start_rect, session.ghost_x.value,
                                    session.ghost_y.value, session.direction,
                                    session.min_width)

    def _preview(self):
        session = self.session
        preview = preview_arrangement(
            self.model.components, session.component_id, session.target,
            session.mode, self.get_breakpoint(), self.max_search_rows,
        )
        session.preview = preview
        session.previewed_target = session.target

        for comp in preview.components:
            if comp.id != session.component_id:
                self.renderer.update(comp.id, *comp.rect.as_tuple())

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Preview %s: %s -> %s (reshaped=%s)", session.mode.value,
                         session.component_id, session.target.as_tuple(), preview.reshaped)

    def _move_border(self, x: float, y: float):
        session = self.session
        handle = session.handle
        metrics = self.get_metrics()

        if handle.orientation == BorderOrientation.VERTICAL:
            position = metrics.nearest_column_line(x)
        else:
            position = metrics.nearest_row_line(y)

        first = self.model.rect_of(handle.first_id)
        second = self.model.rect_of(handle.second_id)
        min_first = min_second = 1
        if handle.orientation == BorderOrientation.VERTICAL:
            current = self.get_breakpoint()
            min_first = min_columns_for(self.model.get(handle.first_id).kind, current)
            min_second = min_columns_for(self.model.get(handle.second_id).kind, current)

        new_first, new_second = drag_border(first, second, handle.orientation, position,
                                            min_first, min_second)
        if (new_first, new_second) == (first, second):
            return

        self.model.set_rect(handle.first_id, new_first)
        self.model.set_rect(handle.second_id, new_second)
        self.renderer.update(handle.first_id, *new_first.as_tuple())
        self.renderer.update(handle.second_id, *new_second.as_tuple())

        if self.on_border_moved is not None:
            self.on_border_moved(handle)

    # -------------------------------------------------------------------------
    # Animation tick
    # -------------------------------------------------------------------------

    def tick(self):
        """Advance the smoothed rect one step toward the snap target."""
        session = self.session
        if session is None or session.smoothed is None:
            return
        session.smoothed.step(session.target, self.damping)
        session.ticks += 1
        self.renderer.update(session.component_id, *session.smoothed.as_tuple())

    # -------------------------------------------------------------------------
    # Pointer-up
    # -------------------------------------------------------------------------

    def pointer_up(self, x: Optional[float] = None,
                   y: Optional[float] = None) -> Optional[ResolutionResult]:
        """
        Release the pointer and commit.

        When a final position is given it is fed through pointer_move
        first. Returns the applied resolution for drags and resizes, None
        for border drags and while idle.
        """
        session = self.session
        if session is None:
            return None
        if x is not None and y is not None:
            self.pointer_move(x, y)

        self.ticker.stop()
        self.session = None
        self.renderer.hide_ghost()
        self.renderer.set_active(None, None)

        if session.state == InteractionState.BORDER_DRAGGING:
            logger.debug("Border drag released: %s", session.handle.key)
            if self.on_border_released is not None:
                self.on_border_released(session.handle)
            return None

        result = commit_arrangement(
            self.model.components, session.component_id, session.target,
            session.mode, self.get_breakpoint(), self.max_search_rows,
        )
        self.model.replace_all(result.components)
        for comp in result.components:
            self.renderer.update(comp.id, *comp.rect.as_tuple())

        logger.info("Committed %s of %s: %s -> %s (%s)", session.state.value,
                    session.component_id, session.start_rect.as_tuple(),
                    result.rect_of(session.component_id).as_tuple(), session.mode.value)

        if self.on_commit is not None:
            self.on_commit(result)
        return result

    def cancel(self):
        """
        Drop the active session without committing.

        Used when the arrangement is replaced underneath an interaction
        (import, removal of an active component). Renders the model as is.
        """
        session = self.session
        if session is None:
            return
        self.ticker.stop()
        self.session = None
        self.renderer.hide_ghost()
        self.renderer.set_active(None, None)
        for comp in self.model.components:
            self.renderer.update(comp.id, *comp.rect.as_tuple())
        logger.debug("Cancelled %s of %s", session.state.value, session.component_id)
