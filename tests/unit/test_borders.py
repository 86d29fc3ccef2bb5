"""
Tests for shared-border detection and border dragging.
"""

from gridplace.grid.abstraction import ComponentKind, GridRect
from gridplace.interaction.borders import (
    BorderOrientation,
    compute_border_handles,
    drag_border,
    find_handle,
    horizontally_adjacent,
    vertically_adjacent,
)


class TestAdjacency:
    """Test adjacency predicates."""

    def test_side_by_side(self):
        assert horizontally_adjacent(GridRect(0, 0, 6, 6), GridRect(6, 0, 6, 3))

    def test_touching_corner_is_not_adjacent(self):
        assert not horizontally_adjacent(GridRect(0, 0, 6, 3), GridRect(6, 3, 6, 3))
        assert not vertically_adjacent(GridRect(0, 0, 6, 3), GridRect(6, 3, 6, 3))

    def test_gap_is_not_adjacent(self):
        assert not horizontally_adjacent(GridRect(0, 0, 5, 6), GridRect(6, 0, 6, 6))

    def test_stacked(self):
        assert vertically_adjacent(GridRect(0, 0, 6, 3), GridRect(2, 3, 6, 2))


class TestComputeBorderHandles:
    """Test the handle projection."""

    def test_vertical_handle_between_neighbors(self, side_by_side):
        handles = compute_border_handles(side_by_side)

        assert len(handles) == 1
        handle = handles[0]
        assert handle.orientation == BorderOrientation.VERTICAL
        assert (handle.first_id, handle.second_id) == ("A", "B")
        assert handle.line == 6
        assert (handle.span_start, handle.span_end) == (0, 3)
        assert handle.key == "vertical:A:B"

    def test_left_component_is_first_regardless_of_order(self, side_by_side):
        handles = compute_border_handles(list(reversed(side_by_side)))
        assert (handles[0].first_id, handles[0].second_id) == ("A", "B")

    def test_horizontal_handle(self, make_component):
        components = [
            make_component("T", 0, 0, 6, 3),
            make_component("U", 2, 3, 6, 2, ComponentKind.SECONDARY),
        ]
        handles = compute_border_handles(components)

        assert len(handles) == 1
        assert handles[0].key == "horizontal:T:U"
        assert handles[0].line == 3
        assert handles[0].span == 4

    def test_no_handles_for_isolated(self, make_component):
        components = [make_component("A", 0, 0, 2, 2), make_component("B", 5, 5, 2, 2)]
        assert compute_border_handles(components) == []

    def test_find_handle(self, dashboard):
        handles = compute_border_handles(dashboard)
        key = handles[0].key
        assert find_handle(handles, key) is handles[0]
        assert find_handle(handles, "vertical:nope:none") is None


class TestDragBorder:
    """Test border drag math."""

    def test_drag_to_column_five(self):
        """A 6x6 and a 6x3 neighbor: dragging the border to 5 resizes both."""
        a, b = drag_border(GridRect(0, 0, 6, 6), GridRect(6, 0, 6, 3),
                           BorderOrientation.VERTICAL, 5)
        assert a == GridRect(0, 0, 5, 6)
        assert b == GridRect(5, 0, 7, 3)

    def test_clamped_to_keep_one_column(self):
        a, b = drag_border(GridRect(0, 0, 6, 6), GridRect(6, 0, 6, 3),
                           BorderOrientation.VERTICAL, 0)
        assert a.width == 1
        assert b == GridRect(1, 0, 11, 3)

        a, b = drag_border(GridRect(0, 0, 6, 6), GridRect(6, 0, 6, 3),
                           BorderOrientation.VERTICAL, 20)
        assert a.width == 11
        assert b == GridRect(11, 0, 1, 3)

    def test_horizontal_drag(self):
        a, b = drag_border(GridRect(0, 0, 6, 3), GridRect(2, 3, 6, 2),
                           BorderOrientation.HORIZONTAL, 4)
        assert a == GridRect(0, 0, 6, 4)
        assert b == GridRect(2, 4, 6, 1)

    def test_outer_edges_fixed(self):
        first, second = GridRect(2, 0, 3, 4), GridRect(5, 1, 4, 2)
        a, b = drag_border(first, second, BorderOrientation.VERTICAL, 7)
        assert a.col == first.col
        assert b.right == second.right

    def test_clamped_to_side_minimums(self):
        """Charts at tablet width keep four columns on each side."""
        a, b = drag_border(GridRect(0, 0, 6, 6), GridRect(6, 0, 6, 6),
                           BorderOrientation.VERTICAL, 11, 4, 4)
        assert a == GridRect(0, 0, 8, 6)
        assert b == GridRect(8, 0, 4, 6)

        a, b = drag_border(GridRect(0, 0, 6, 6), GridRect(6, 0, 6, 6),
                           BorderOrientation.VERTICAL, 1, 4, 4)
        assert a == GridRect(0, 0, 4, 6)
        assert b == GridRect(4, 0, 8, 6)

    def test_pair_too_small_for_minimums_stays(self):
        first, second = GridRect(0, 0, 3, 2), GridRect(3, 0, 3, 2)
        assert drag_border(first, second, BorderOrientation.VERTICAL, 2, 4, 4) == \
            (first, second)
