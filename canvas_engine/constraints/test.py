"""Tests for the grid resize constraint calculator."""

import pytest

from canvas_engine.grid import CanvasRect, GridSize

from .lib import (
    affected_component_ids,
    can_resize,
    is_out_of_bounds,
    minimum_grid_size,
    out_of_bounds_components,
    suggest_compaction,
)


class TestCanResize:
    """Tests for can_resize."""

    @pytest.mark.unit
    def test_shrink_below_occupants_is_unsafe(self, full_grid_schema):
        """Shrinking to 10 columns clips every rect past column 10."""
        check = can_resize(full_grid_schema, "desktop", 10, 8)
        assert not check
        assert check.minimum_required == GridSize(cols=12, rows=8)
        assert affected_component_ids(check) == ["A", "C"]
        assert check.affected[1].rect == CanvasRect(x=9, y=7, width=3, height=1)
        assert "'A'" in check.reason

    @pytest.mark.unit
    def test_row_shrink_lists_bottom_occupants(self, full_grid_schema):
        check = can_resize(full_grid_schema, "desktop", 12, 6)
        assert affected_component_ids(check) == ["C"]

    @pytest.mark.unit
    def test_shrink_to_minimum_is_safe(self, desktop_schema):
        check = can_resize(desktop_schema, "desktop", 4, 1)
        assert check
        assert check.affected == ()
        assert check.minimum_required == GridSize(cols=4, rows=1)

    @pytest.mark.unit
    def test_growing_is_always_safe(self, full_grid_schema):
        """Growing both axes never fails."""
        full_grid_schema.components[1].placements["desktop"] = CanvasRect(
            x=20, y=0, width=2, height=1
        )
        assert can_resize(full_grid_schema, "desktop", 13, 9)

    @pytest.mark.unit
    def test_empty_grid_floor(self, mobile_desktop_schema):
        """An empty grid still needs 2x2."""
        mobile_desktop_schema.components = []
        mobile_desktop_schema.layouts["mobile"].components = []
        assert can_resize(mobile_desktop_schema, "mobile", 2, 2)
        check = can_resize(mobile_desktop_schema, "mobile", 1, 2)
        assert not check
        assert check.affected == ()

    @pytest.mark.unit
    def test_inherited_occupants_count(self, mobile_desktop_schema):
        check = can_resize(mobile_desktop_schema, "desktop", 3, 8)
        assert affected_component_ids(check) == ["c1"]

    @pytest.mark.unit
    def test_unknown_breakpoint(self, desktop_schema):
        check = can_resize(desktop_schema, "tv", 4, 4)
        assert not check
        assert "Unknown breakpoint" in check.reason

    @pytest.mark.unit
    def test_zero_size(self, desktop_schema):
        assert not can_resize(desktop_schema, "desktop", 0, 8)


class TestSuggestCompaction:
    """Tests for suggest_compaction."""

    @pytest.mark.unit
    def test_reducible_space(self, desktop_schema):
        suggestion = suggest_compaction(desktop_schema, "desktop")
        assert suggestion.reducible_cols == 8
        assert suggestion.reducible_rows == 7
        assert suggestion

    @pytest.mark.unit
    def test_full_grid_not_reducible(self, full_grid_schema):
        suggestion = suggest_compaction(full_grid_schema, "desktop")
        assert (suggestion.reducible_cols, suggestion.reducible_rows) == (0, 0)
        assert not suggestion

    @pytest.mark.unit
    def test_clamped_at_zero(self, desktop_schema):
        desktop_schema.components[0].placements["desktop"] = CanvasRect(
            x=10, y=0, width=4, height=1
        )
        suggestion = suggest_compaction(desktop_schema, "desktop")
        assert suggestion.reducible_cols == 0
        assert suggestion.minimum_required == GridSize(cols=14, rows=1)


class TestBoundsQueries:
    """Tests for minimum size and out-of-bounds queries."""

    @pytest.mark.unit
    def test_minimum_grid_size(self, full_grid_schema):
        assert minimum_grid_size(full_grid_schema, "desktop") == GridSize(cols=12, rows=8)

    @pytest.mark.unit
    def test_out_of_bounds(self, desktop_schema):
        desktop_schema.components[0].placements["desktop"] = CanvasRect(
            x=10, y=0, width=4, height=1
        )
        assert is_out_of_bounds(desktop_schema, "desktop", "A")
        assert not is_out_of_bounds(desktop_schema, "desktop", "B")
        assert out_of_bounds_components(desktop_schema, "desktop") == ["A"]
        assert out_of_bounds_components(desktop_schema, "tv") == []
