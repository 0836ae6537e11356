"""Unit tests for the export surface."""

import pytest

from canvas_engine.grid import CanvasRect
from canvas_engine.schema import ComponentLink

from .lib import (
    ExportBlockedError,
    analyze_grid_complexity,
    export_schema,
    format_occupancy,
    grid_positions,
    group_by_row,
    sort_by_canvas_position,
)


def rect(x: int, y: int, w: int, h: int) -> CanvasRect:
    return CanvasRect(x=x, y=y, width=w, height=h)


@pytest.fixture
def dashboard(full_grid_schema):
    """Desktop grid with a sidebar beside the main area."""
    full_grid_schema.components[2].placements["desktop"] = rect(3, 1, 9, 6)
    full_grid_schema.components[1].placements["desktop"] = rect(0, 7, 12, 1)
    sidebar = full_grid_schema.components[2].model_copy(
        update={"id": "S", "name": "Sidebar", "placements": {"desktop": rect(0, 1, 3, 6)}}
    )
    full_grid_schema.components.append(sidebar)
    full_grid_schema.layouts["desktop"].components.append("S")
    return full_grid_schema


class TestExportSchema:
    """Tests for export_schema."""

    @pytest.mark.unit
    def test_exports_normalized_camel_case(self, mobile_desktop_schema):
        """Export carries inherited placements and camelCase keys."""
        data = export_schema(mobile_desktop_schema)
        assert data["schemaVersion"] == "2.0"
        assert data["components"][0]["placements"]["desktop"] == {
            "x": 0,
            "y": 0,
            "width": 4,
            "height": 1,
        }
        assert data["layouts"]["desktop"]["components"] == ["c1"]
        assert data["linkGroups"] == []

    @pytest.mark.unit
    def test_link_groups_attached(self, page_schema):
        page_schema.links = [ComponentLink(a="c3", b="c1")]
        assert export_schema(page_schema)["linkGroups"] == [["c1", "c3"]]

    @pytest.mark.unit
    def test_dangling_ids_block_export(self, page_schema):
        """Any unresolved id stops export entirely."""
        page_schema.layouts["tablet"].components.append("ghost")
        with pytest.raises(ExportBlockedError) as excinfo:
            export_schema(page_schema)
        assert len(excinfo.value.errors) == 1
        assert "ghost" in str(excinfo.value)


class TestGridPositions:
    """Tests for CSS grid line mapping."""

    @pytest.mark.unit
    def test_one_based_lines(self, dashboard):
        layout = grid_positions(dashboard, "desktop")
        assert (layout.grid_cols, layout.grid_rows) == (12, 8)
        areas = {p.component_id: p.grid_area for p in layout.positions}
        assert areas["A"] == "1 / 1 / 2 / 13"
        assert areas["S"] == "2 / 1 / 8 / 4"
        assert areas["D"] == "2 / 4 / 8 / 13"

    @pytest.mark.unit
    def test_reading_order(self, dashboard):
        positions = grid_positions(dashboard, "desktop").positions
        assert [p.component_id for p in positions] == ["A", "S", "D", "C"]
        sidebar = positions[1]
        assert sidebar.grid_column == "1 / 4"
        assert sidebar.grid_row == "2 / 8"
        assert sidebar.name == "Sidebar"

    @pytest.mark.unit
    def test_unknown_breakpoint(self, dashboard):
        with pytest.raises(ValueError):
            grid_positions(dashboard, "tv")


class TestReadingOrder:
    """Tests for sort and row grouping helpers."""

    @pytest.mark.unit
    def test_sort_by_canvas_position(self, dashboard):
        order = sort_by_canvas_position(["C", "ghost", "D", "S", "A"], dashboard, "desktop")
        assert order == ["A", "S", "D", "C", "ghost"]

    @pytest.mark.unit
    def test_group_by_row(self, dashboard):
        assert group_by_row(dashboard, "desktop") == [["A"], ["S", "D"], ["C"]]


class TestAnalyzeGridComplexity:
    """Tests for analyze_grid_complexity."""

    @pytest.mark.unit
    def test_stack_prefers_flexbox(self, page_schema):
        result = analyze_grid_complexity(page_schema, "mobile")
        assert result.total_components == 3
        assert result.max_components_per_row == 1
        assert not result.has_side_by_side
        assert result.recommended_implementation == "flexbox"

    @pytest.mark.unit
    def test_side_by_side_prefers_grid(self, dashboard):
        result = analyze_grid_complexity(dashboard, "desktop")
        assert result.max_components_per_row == 2
        assert result.has_side_by_side
        assert not result.has_overlap
        assert result.recommended_implementation == "grid"

    @pytest.mark.unit
    def test_empty(self, mobile_desktop_schema):
        mobile_desktop_schema.components = []
        result = analyze_grid_complexity(mobile_desktop_schema, "mobile")
        assert result.total_components == 0
        assert result.recommended_implementation == "flexbox"


class TestFormatOccupancy:
    """Tests for the text occupancy map."""

    @pytest.mark.unit
    def test_map(self, page_schema):
        text = format_occupancy(page_schema, "mobile")
        lines = text.splitlines()
        assert len(lines) == 8
        assert lines[0] == "c1 c1 c1 c1"
        assert lines[1] == "c2 c2 c2 c2"
        assert lines[7] == "c3 c3 c3 c3"

    @pytest.mark.unit
    def test_empty_cells_and_overlap(self, desktop_schema):
        desktop_schema.components[1].placements["desktop"] = rect(3, 0, 2, 1)
        lines = format_occupancy(desktop_schema, "desktop").splitlines()
        assert lines[0].split() == ["A", "A", "A", "*", "B", ".", ".", ".", ".", ".", ".", "."]
        assert lines[1].split() == ["."] * 12
