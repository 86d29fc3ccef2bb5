"""
Tests for the LayoutEngine facade.

Tests programmatic edits, collision modes, breakpoint transitions,
master layout bookkeeping and import/export.
"""

import pytest

from gridplace.api.engine import LayoutEngine
from gridplace.config import EngineConfig
from gridplace.grid.abstraction import ComponentKind, GridRect
from gridplace.grid.layout_file import LayoutValidationError
from gridplace.interaction.session import InteractionState
from gridplace.placement.breakpoints import Breakpoint, min_columns_for
from gridplace.placement.collision import CollisionMode
from gridplace.placement.solver import find_collisions


def arrangement(engine):
    return [(c.id, c.kind, c.rect) for c in engine.components]


class TestAddRemove:
    """Test adding and removing components."""

    def test_first_fit_on_add(self, engine):
        """Default charts land at (0,0), (6,0), (0,6)."""
        placed = [engine.add_component(ComponentKind.PRIMARY) for _ in range(3)]

        assert [c.id for c in placed] == ["1", "2", "3"]
        assert [c.rect for c in placed] == [
            GridRect(0, 0, 6, 6),
            GridRect(6, 0, 6, 6),
            GridRect(0, 6, 6, 6),
        ]

    def test_kind_by_name(self, engine):
        kpi = engine.add_component("kpi")
        assert kpi.kind == ComponentKind.SECONDARY
        assert kpi.rect == GridRect(0, 0, 2, 3)

    def test_add_renders(self, engine, renderer):
        engine.add_component("chart")
        assert "1" in renderer.boxes

    def test_add_at_narrow_uses_minimum(self, engine):
        engine.notify_viewport_resize(500)
        kpi = engine.add_component("kpi")
        assert kpi.rect.width == 6

    def test_remove(self, engine, renderer):
        engine.add_component("chart")
        engine.add_component("kpi")
        removed = engine.remove_component("1")

        assert removed.id == "1"
        assert [c.id for c in engine.components] == ["2"]
        assert "1" not in renderer.boxes

    def test_remove_unknown(self, engine):
        with pytest.raises(KeyError):
            engine.remove_component("42")

    def test_ids_not_reused(self, engine):
        engine.add_component("chart")
        engine.remove_component("1")
        assert engine.add_component("chart").id == "2"


class TestCollisionModes:
    """Test the mode toggles."""

    def test_default_is_reflow(self, engine):
        assert engine.collision_mode == CollisionMode.REFLOW

    def test_toggles(self, engine):
        engine.set_collision_resize_enabled(True)
        assert engine.collision_mode == CollisionMode.COLLISION_RESIZE

        engine.set_collision_resize_enabled(False)
        assert engine.collision_mode == CollisionMode.REFLOW

        engine.set_reflow_enabled(False)
        assert engine.collision_mode == CollisionMode.PLAIN

    def test_set_collision_mode(self, engine):
        engine.set_collision_mode(CollisionMode.PLAIN)
        assert engine.collision_mode == CollisionMode.PLAIN
        engine.set_collision_mode("collision_resize")
        assert engine.collision_mode == CollisionMode.COLLISION_RESIZE
        engine.set_collision_mode("reflow")
        assert engine.collision_mode == CollisionMode.REFLOW


class TestProgrammaticCommits:
    """Test move/resize/reflow through the active policy."""

    def test_plain_move_relocates_on_overlap(self, plain_engine):
        plain_engine.add_component("chart")
        plain_engine.add_component("chart")

        result = plain_engine.move_component("2", 3, 0)

        assert result.relocated
        assert plain_engine.get_component("2").rect == GridRect(6, 0, 6, 6)
        assert find_collisions(plain_engine.components) == []

    def test_plain_move_to_free_space(self, plain_engine):
        plain_engine.add_component("chart")
        plain_engine.move_component("1", 4, 10)
        assert plain_engine.get_component("1").rect == GridRect(4, 10, 6, 6)

    def test_move_is_clamped_to_grid(self, plain_engine):
        plain_engine.add_component("chart")
        plain_engine.move_component("1", 11, -3)
        assert plain_engine.get_component("1").rect == GridRect(6, 0, 6, 6)

    def test_reflow_move_never_overlaps(self, engine):
        for kind in ("chart", "kpi", "kpi", "chart"):
            engine.add_component(kind)

        engine.move_component("4", 1, 0)
        assert find_collisions(engine.components) == []

    def test_collision_resize_absorbs_contained(self, engine, layout_dict, make_component):
        """A 2x2 moved over a 1x1 leaves the 1x1 as a 1x1 at its origin."""
        engine.import_layout(layout_dict([
            make_component("1", 4, 4, 2, 2),
            make_component("2", 0, 0, 1, 1, ComponentKind.SECONDARY),
        ]))
        engine.set_collision_mode("collision_resize")

        result = engine.move_component("1", 0, 0)

        assert result.absorbed == ["2"]
        assert engine.get_component("2").rect == GridRect(0, 0, 1, 1)
        assert engine.get_component("1").rect == GridRect(0, 0, 2, 2)

    def test_resize_clamped(self, plain_engine):
        plain_engine.add_component("chart")
        plain_engine.add_component("chart")
        plain_engine.resize_component("2", 10, 0)
        assert plain_engine.get_component("2").rect == GridRect(6, 0, 6, 1)

    def test_resize_respects_breakpoint_minimum(self, engine):
        engine.add_component("chart")
        engine.notify_viewport_resize(900)
        engine.resize_component("1", 1, 2)
        assert engine.get_component("1").rect.width == \
            min_columns_for(ComponentKind.PRIMARY, Breakpoint.MEDIUM)

    def test_resize_unknown(self, engine):
        with pytest.raises(KeyError):
            engine.resize_component("9", 2, 2)

    def test_edit_during_interaction_rejected(self, engine):
        engine.add_component("chart")
        engine.begin_drag("1", 50, 50)
        with pytest.raises(RuntimeError):
            engine.move_component("1", 6, 0)

    def test_reflow(self, plain_engine):
        plain_engine.add_component("chart")
        plain_engine.add_component("kpi")
        plain_engine.move_component("1", 0, 20)

        plain_engine.reflow()
        assert [(c.id, c.rect) for c in plain_engine.components] == [
            ("2", GridRect(0, 0, 2, 3)),
            ("1", GridRect(2, 0, 6, 6)),
        ]


class TestBreakpoints:
    """Test viewport notifications and the master layout."""

    @pytest.fixture
    def populated(self, engine):
        for kind in ("chart", "kpi", "kpi", "chart", "kpi"):
            engine.add_component(kind)
        return engine

    def test_breakpoint_round_trip(self, populated):
        desktop = arrangement(populated)

        assert populated.notify_viewport_resize(500) == Breakpoint.NARROW
        for c in populated.components:
            assert c.rect.width >= min_columns_for(c.kind, Breakpoint.NARROW)
        assert find_collisions(populated.components) == []

        assert populated.notify_viewport_resize(1440) == Breakpoint.WIDE
        assert arrangement(populated) == desktop

    def test_master_untouched_by_edits_at_narrow(self, populated):
        desktop = arrangement(populated)
        populated.notify_viewport_resize(500)
        populated.move_component("2", 0, 30)

        assert [(c.id, c.kind, c.rect) for c in populated.get_master_layout()] == desktop
        populated.notify_viewport_resize(1440)
        assert arrangement(populated) == desktop

    def test_master_refreshed_by_commit_at_wide(self, populated):
        populated.set_collision_mode("plain")
        populated.move_component("5", 0, 30)
        master = {c.id: c.rect for c in populated.get_master_layout()}
        assert master["5"] == GridRect(0, 30, 2, 3)

    def test_remove_at_narrow_drops_from_master(self, populated):
        populated.notify_viewport_resize(500)
        populated.remove_component("3")
        assert "3" not in [c.id for c in populated.get_master_layout()]

        populated.notify_viewport_resize(1440)
        assert "3" not in [c.id for c in populated.components]

    def test_canvas_width_updates_metrics(self, engine, renderer):
        engine.notify_viewport_resize(1300, canvas_width=900)
        assert engine.metrics.canvas_width == 900
        assert renderer.metrics.canvas_width == 900

    def test_border_handles_follow_arrangement(self, engine):
        engine.add_component("chart")
        assert engine.border_handles == []
        engine.add_component("chart")
        assert [h.key for h in engine.border_handles] == ["vertical:1:2"]


class TestImportExport:
    """Test layout documents in and out of the engine."""

    def test_round_trip(self, engine):
        for kind in ("chart", "kpi", "chart"):
            engine.add_component(kind)
        before = arrangement(engine)

        engine.import_layout(engine.export_layout().to_dict())
        assert arrangement(engine) == before

    def test_export_at_narrow_is_master(self, engine):
        for kind in ("chart", "kpi", "kpi"):
            engine.add_component(kind)
        desktop = arrangement(engine)

        engine.notify_viewport_resize(500)
        exported = engine.export_layout()
        assert [(s.id, s.kind, s.rect) for s in exported.components] == desktop

    def test_import_replaces_and_sets_next_id(self, engine, layout_dict, make_component):
        engine.add_component("chart")
        engine.import_layout(layout_dict([
            make_component("3", 0, 0, 4, 4),
            make_component("10", 4, 0, 4, 4),
            make_component("header", 8, 0, 4, 1, ComponentKind.SECONDARY),
        ]))

        assert [c.id for c in engine.components] == ["3", "10", "header"]
        assert engine.add_component("kpi").id == "11"
        assert [c.id for c in engine.get_master_layout()][:3] == ["3", "10", "header"]

    def test_invalid_import_leaves_model(self, engine):
        engine.add_component("chart")
        before = arrangement(engine)

        with pytest.raises(LayoutValidationError):
            engine.import_layout({"components": [{"id": "1", "type": "table",
                                                  "position": {}}]})
        with pytest.raises(LayoutValidationError):
            engine.import_layout({"version": "1.0.0"})

        assert arrangement(engine) == before

    def test_import_at_narrow_constrains_live_only(self, engine, layout_dict, make_component):
        engine.notify_viewport_resize(500)
        document = layout_dict([
            make_component("1", 0, 0, 6, 6),
            make_component("2", 6, 0, 6, 6),
        ])
        engine.import_layout(document)

        assert all(c.rect.width == 12 for c in engine.components)
        assert [c.rect for c in engine.get_master_layout()] == \
            [GridRect(0, 0, 6, 6), GridRect(6, 0, 6, 6)]

    def test_import_cancels_interaction(self, engine, layout_dict, make_component):
        engine.add_component("chart")
        engine.begin_drag("1", 50, 50)
        engine.import_layout(layout_dict([make_component("7", 0, 0, 2, 2)]))

        assert engine.state == InteractionState.IDLE
        assert not engine.ticker.running


class TestDefaults:
    """Test engine construction."""

    def test_defaults(self):
        engine = LayoutEngine()
        assert engine.current_breakpoint == Breakpoint.WIDE
        assert engine.state == InteractionState.IDLE
        assert engine.components == []

    def test_mode_changes_do_not_touch_callers_config(self):
        config = EngineConfig()
        engine = LayoutEngine(config)

        engine.set_collision_mode("plain")
        assert engine.collision_mode == CollisionMode.PLAIN
        assert config.collision_mode == CollisionMode.REFLOW

    def test_engines_sharing_a_config_are_independent(self):
        config = EngineConfig()
        first, second = LayoutEngine(config), LayoutEngine(config)

        first.set_collision_resize_enabled(True)
        assert second.collision_mode == CollisionMode.REFLOW
