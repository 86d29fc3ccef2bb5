"""
Tests for the collision resolution policies.
"""

import logging

import pytest

from gridplace.grid.abstraction import Component, ComponentKind, GridRect
from gridplace.placement.collision import (
    CollisionMode,
    _shrink_neighbor,
    commit_arrangement,
    preview_arrangement,
    resize_overlapping,
)
from gridplace.placement.solver import find_collisions


def comp(component_id, col, row, width, height, kind=ComponentKind.PRIMARY):
    return Component(component_id, kind, GridRect(col, row, width, height))


class TestCollisionMode:
    """Test mapping of the two toggles onto one mode."""

    @pytest.mark.parametrize("reflow_on,resize_on,expected", [
        (True, False, CollisionMode.REFLOW),
        (False, True, CollisionMode.COLLISION_RESIZE),
        (True, True, CollisionMode.COLLISION_RESIZE),
        (False, False, CollisionMode.PLAIN),
    ])
    def test_from_toggles(self, reflow_on, resize_on, expected):
        assert CollisionMode.from_toggles(reflow_on, resize_on) == expected


class TestShrinkNeighbor:
    """Test the ordered reshape heuristic, one option at a time."""

    def test_option_cut_right_side(self):
        """Neighbor starting left keeps its left part."""
        result = _shrink_neighbor(GridRect(4, 0, 4, 2), GridRect(2, 0, 4, 2))
        assert result == GridRect(2, 0, 2, 2)

    def test_option_cut_left_side(self):
        """Neighbor sticking out right keeps its right part."""
        result = _shrink_neighbor(GridRect(4, 0, 4, 2), GridRect(6, 0, 4, 2))
        assert result == GridRect(8, 0, 2, 2)

    def test_option_cut_bottom(self):
        result = _shrink_neighbor(GridRect(4, 2, 4, 2), GridRect(4, 0, 4, 4))
        assert result == GridRect(4, 0, 4, 2)

    def test_option_cut_top(self):
        result = _shrink_neighbor(GridRect(4, 2, 4, 2), GridRect(4, 3, 4, 4))
        assert result == GridRect(4, 4, 4, 3)

    def test_horizontal_options_win_over_vertical(self):
        """A neighbor starting left and above is cut on the right, not the bottom."""
        result = _shrink_neighbor(GridRect(4, 4, 4, 4), GridRect(2, 2, 4, 4))
        assert result == GridRect(2, 2, 2, 4)

    def test_fallback_absorbs_contained_neighbor(self):
        result = _shrink_neighbor(GridRect(0, 0, 2, 2), GridRect(0, 0, 1, 1))
        assert result == GridRect(0, 0, 1, 1)


class TestResizeOverlapping:
    """Test collision resize over a whole arrangement."""

    def test_contained_neighbor_is_absorbed_not_removed(self):
        """A 2x2 moved over a 1x1 leaves the 1x1 in place."""
        components = [
            comp("X", 0, 0, 2, 2),
            comp("N", 0, 0, 1, 1, ComponentKind.SECONDARY),
        ]
        result = resize_overlapping(components, "X")

        assert [c.id for c in result.components] == ["X", "N"]
        assert result.rect_of("N") == GridRect(0, 0, 1, 1)
        assert result.absorbed == ["N"]
        assert result.reshaped == []

    def test_active_rect_is_kept(self):
        components = [comp("A", 0, 0, 6, 6), comp("B", 3, 0, 6, 6)]
        result = resize_overlapping(components, "B")

        assert result.rect_of("B") == GridRect(3, 0, 6, 6)
        assert result.rect_of("A") == GridRect(0, 0, 3, 6)
        assert result.reshaped == ["A"]

    def test_non_overlapping_untouched(self):
        components = [comp("A", 0, 0, 2, 2), comp("B", 6, 6, 2, 2)]
        result = resize_overlapping(components, "A")
        assert result.rect_of("B") == GridRect(6, 6, 2, 2)
        assert result.reshaped == [] and result.absorbed == []


class TestPreviewArrangement:
    """Test that previews are pure."""

    def test_preview_does_not_mutate(self):
        components = [comp("A", 0, 0, 6, 6), comp("B", 6, 0, 6, 6)]
        before = [(c.id, c.rect) for c in components]

        for mode in CollisionMode:
            preview_arrangement(components, "A", GridRect(3, 0, 6, 6), mode)

        assert [(c.id, c.rect) for c in components] == before

    def test_reflow_preview_has_no_overlaps(self):
        components = [comp("A", 0, 0, 6, 6), comp("B", 6, 0, 6, 6)]
        result = preview_arrangement(components, "A", GridRect(6, 1, 6, 6),
                                     CollisionMode.REFLOW)

        assert result.rect_of("B") == GridRect(0, 0, 6, 6)
        assert result.rect_of("A") == GridRect(6, 0, 6, 6)
        assert find_collisions(result.components) == []

    def test_plain_preview_allows_overlap(self):
        components = [comp("A", 0, 0, 6, 6), comp("B", 6, 0, 6, 6)]
        result = preview_arrangement(components, "A", GridRect(3, 0, 6, 6),
                                     CollisionMode.PLAIN)
        assert result.rect_of("A") == GridRect(3, 0, 6, 6)
        assert find_collisions(result.components) == [("A", "B")]


class TestCommitArrangement:
    """Test commits under each policy."""

    def test_plain_relocates_on_overlap(self, caplog):
        components = [comp("A", 0, 0, 6, 6), comp("B", 6, 0, 6, 6)]
        with caplog.at_level(logging.WARNING, logger="gridplace.placement.collision"):
            result = commit_arrangement(components, "B", GridRect(2, 0, 6, 6),
                                        CollisionMode.PLAIN)

        assert result.relocated is True
        assert result.rect_of("B") == GridRect(6, 0, 6, 6)
        assert find_collisions(result.components) == []
        assert "relocated" in caplog.text

    def test_plain_keeps_free_target(self):
        components = [comp("A", 0, 0, 6, 6), comp("B", 6, 0, 6, 6)]
        result = commit_arrangement(components, "B", GridRect(0, 6, 6, 6),
                                    CollisionMode.PLAIN)

        assert result.relocated is False
        assert result.rect_of("B") == GridRect(0, 6, 6, 6)
        assert result.rect_of("A") == GridRect(0, 0, 6, 6)

    def test_reflow_commit_has_no_overlaps(self):
        components = [comp("A", 0, 0, 6, 6), comp("B", 6, 0, 6, 6), comp("C", 0, 6, 4, 2)]
        result = commit_arrangement(components, "C", GridRect(3, 2, 4, 2),
                                    CollisionMode.REFLOW)
        assert find_collisions(result.components) == []

    def test_collision_resize_commit_matches_preview(self):
        components = [comp("A", 0, 0, 6, 6), comp("B", 6, 0, 6, 6)]
        target = GridRect(4, 0, 4, 3)
        preview = preview_arrangement(components, "A", target, CollisionMode.COLLISION_RESIZE)
        commit = commit_arrangement(components, "A", target, CollisionMode.COLLISION_RESIZE)

        assert [(c.id, c.rect) for c in preview.components] == \
            [(c.id, c.rect) for c in commit.components]
        assert commit.rect_of("B") == GridRect(8, 0, 4, 6)
