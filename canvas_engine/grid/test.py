"""Unit and property tests for grid arithmetic."""

import pytest
from hypothesis import given
from hypothesis import strategies as st
from pydantic import ValidationError

from .lib import CanvasRect, GridSize, clamp_to_grid, contains, minimum_bounds, overlaps

coords = st.integers(min_value=0, max_value=30)
spans = st.integers(min_value=1, max_value=30)
rects = st.builds(CanvasRect, x=coords, y=coords, width=spans, height=spans)
grids = st.builds(GridSize, cols=spans, rows=spans)


def rect(x: int, y: int, w: int, h: int) -> CanvasRect:
    return CanvasRect(x=x, y=y, width=w, height=h)


class TestCanvasRect:
    """Tests for CanvasRect field invariants."""

    @pytest.mark.unit
    def test_edges(self):
        """Right and bottom are the exclusive far edges."""
        r = rect(2, 3, 4, 5)
        assert r.right == 6
        assert r.bottom == 8

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "fields",
        [
            {"x": -1, "y": 0, "width": 1, "height": 1},
            {"x": 0, "y": -1, "width": 1, "height": 1},
            {"x": 0, "y": 0, "width": 0, "height": 1},
            {"x": 0, "y": 0, "width": 1, "height": 0},
        ],
    )
    def test_rejects_invalid_fields(self, fields):
        """Negative origins and empty spans are rejected."""
        with pytest.raises(ValidationError):
            CanvasRect(**fields)

    @pytest.mark.unit
    def test_is_frozen(self):
        """Rects are immutable values."""
        r = rect(0, 0, 1, 1)
        with pytest.raises(ValidationError):
            r.x = 3


class TestContains:
    """Tests for contains."""

    @pytest.mark.unit
    def test_full_grid_fits(self):
        """A rect covering the whole grid fits."""
        assert contains(GridSize(cols=12, rows=8), rect(0, 0, 12, 8))

    @pytest.mark.unit
    def test_one_column_too_wide(self):
        """A rect one column past the edge does not fit."""
        assert not contains(GridSize(cols=12, rows=8), rect(9, 0, 4, 1))

    @pytest.mark.unit
    def test_one_row_too_tall(self):
        assert not contains(GridSize(cols=12, rows=8), rect(0, 7, 1, 2))

    @pytest.mark.unit
    @given(grid=grids, r=rects)
    def test_matches_corner_characterization(self, grid, r):
        """contains holds iff both corners lie in [0, cols] x [0, rows]."""
        corners_inside = all(
            0 <= cx <= grid.cols and 0 <= cy <= grid.rows
            for cx, cy in ((r.x, r.y), (r.x + r.width, r.y + r.height))
        )
        assert contains(grid, r) == corners_inside


class TestOverlaps:
    """Tests for overlaps."""

    @pytest.mark.unit
    def test_shared_cell(self):
        assert overlaps(rect(0, 0, 4, 1), rect(3, 0, 4, 1))

    @pytest.mark.unit
    def test_vertical_adjacency_is_not_overlap(self):
        assert not overlaps(rect(0, 0, 4, 1), rect(0, 1, 4, 1))

    @pytest.mark.unit
    def test_containment_is_overlap(self):
        assert overlaps(rect(0, 0, 10, 10), rect(2, 2, 1, 1))

    @pytest.mark.unit
    @given(r1=rects, r2=rects)
    def test_symmetric(self, r1, r2):
        assert overlaps(r1, r2) == overlaps(r2, r1)

    @pytest.mark.unit
    @given(x=coords, y=coords, w1=spans, w2=spans, h=spans)
    def test_edge_adjacent_never_overlaps(self, x, y, w1, w2, h):
        left = rect(x, y, w1, h)
        right = rect(x + w1, y, w2, h)
        assert not overlaps(left, right)


class TestMinimumBounds:
    """Tests for minimum_bounds."""

    @pytest.mark.unit
    def test_empty_floor(self):
        assert minimum_bounds([]) == GridSize(cols=2, rows=2)

    @pytest.mark.unit
    def test_furthest_edges(self):
        bounds = minimum_bounds([rect(0, 0, 12, 1), rect(2, 5, 3, 3)])
        assert bounds == GridSize(cols=12, rows=8)

    @pytest.mark.unit
    def test_accepts_generator(self):
        assert minimum_bounds(r for r in [rect(1, 1, 1, 1)]) == GridSize(cols=2, rows=2)

    @pytest.mark.unit
    @given(rs=st.lists(rects, min_size=1, max_size=8))
    def test_result_contains_every_rect(self, rs):
        bounds = minimum_bounds(rs)
        assert all(contains(bounds, r) for r in rs)


class TestClampToGrid:
    """Tests for clamp_to_grid."""

    @pytest.mark.unit
    def test_fitting_rect_is_unchanged(self):
        r = rect(1, 1, 2, 2)
        assert clamp_to_grid(r, GridSize(cols=4, rows=4)) is r

    @pytest.mark.unit
    def test_wide_rect_is_shrunk_and_shifted(self):
        clamped = clamp_to_grid(rect(8, 0, 12, 1), GridSize(cols=4, rows=8))
        assert clamped == rect(0, 0, 4, 1)

    @pytest.mark.unit
    def test_origin_pulled_back(self):
        clamped = clamp_to_grid(rect(10, 6, 4, 3), GridSize(cols=12, rows=8))
        assert clamped == rect(8, 5, 4, 3)

    @pytest.mark.unit
    @given(r=rects, grid=grids)
    def test_result_always_fits(self, r, grid):
        assert contains(grid, clamp_to_grid(r, grid))
