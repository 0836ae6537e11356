"""Unit tests for the layout editor."""

import pytest

from canvas_engine.grid import CanvasRect
from canvas_engine.placement import RejectionReason
from canvas_engine.schema import LayoutRole, LayoutStructure, PositioningType, SemanticTag
from canvas_engine.validation import validate_references, validate_schema

from .lib import EditorError, LayoutEditor


def rect(x: int, y: int, w: int, h: int) -> CanvasRect:
    return CanvasRect(x=x, y=y, width=w, height=h)


@pytest.fixture
def editor(page_schema) -> LayoutEditor:
    """Editor over the normalized header/main/footer page."""
    return LayoutEditor(page_schema)


class TestConstruction:
    """Tests for editor construction and selection state."""

    @pytest.mark.unit
    def test_defaults(self):
        editor = LayoutEditor()
        assert editor.current_breakpoint == "mobile"
        assert [bp.name for bp in editor.schema.breakpoints] == ["mobile", "tablet", "desktop"]
        assert editor.selected_component_id is None

    @pytest.mark.unit
    def test_schema_is_normalized(self, editor):
        """Mobile placements cascade into tablet and desktop on load."""
        assert editor.schema.layouts["desktop"].components == ["c1", "c2", "c3"]

    @pytest.mark.unit
    def test_unknown_breakpoint(self, page_schema):
        with pytest.raises(EditorError):
            LayoutEditor(page_schema, current_breakpoint="tv")

    @pytest.mark.unit
    def test_select_unknown_component(self, editor):
        with pytest.raises(EditorError):
            editor.select_component("ghost")


class TestComponents:
    """Tests for component mutations."""

    @pytest.mark.unit
    def test_add_without_rect(self):
        editor = LayoutEditor()
        component_id = editor.add_component(SemanticTag.NAV)
        assert component_id == "c1"
        assert editor.schema.members("mobile") == ["c1"]
        assert editor.schema.get_component("c1").placements == {}
        assert editor.selected_component_id == "c1"

    @pytest.mark.unit
    def test_add_with_drop_cascades(self):
        """A drop at mobile is inherited by later breakpoints."""
        editor = LayoutEditor()
        component_id = editor.add_component("header", rect(0, 0, 4, 1))
        component = editor.schema.get_component(component_id)
        assert component.placements == {
            "mobile": rect(0, 0, 4, 1),
            "tablet": rect(0, 0, 4, 1),
            "desktop": rect(0, 0, 4, 1),
        }

    @pytest.mark.unit
    def test_add_cascade_may_overlap_later_breakpoint(self):
        """Only the current breakpoint is checked; inherited rects may overlap."""
        editor = LayoutEditor(current_breakpoint="desktop")
        assert editor.add_component(SemanticTag.HEADER, rect(0, 0, 4, 1)) == "c1"
        editor.set_current_breakpoint("mobile")
        assert editor.add_component(SemanticTag.DIV, rect(0, 0, 4, 1)) == "c2"
        assert editor.schema.get_component("c2").placements["desktop"] == rect(0, 0, 4, 1)
        warnings = validate_schema(editor.schema).warnings
        assert "overlap" in [issue.code for issue in warnings]

    @pytest.mark.unit
    def test_add_drop_is_clamped(self):
        editor = LayoutEditor()
        component_id = editor.add_component(SemanticTag.MAIN, rect(3, 7, 4, 3))
        assert editor.schema.get_component(component_id).placements["mobile"] == rect(0, 5, 4, 3)

    @pytest.mark.unit
    def test_add_drop_collision_refused(self, editor):
        before = editor.export_schema()
        assert editor.add_component(SemanticTag.ASIDE, rect(0, 0, 2, 2)) is None
        assert editor.schema == before

    @pytest.mark.unit
    def test_add_from_props(self):
        editor = LayoutEditor()
        component_id = editor.add_component({"name": "Promo", "semantic_role": "section", "id": "x"})
        component = editor.schema.get_component(component_id)
        assert component_id == "c1"
        assert component.name == "Promo"
        assert component.semantic_role == SemanticTag.SECTION

    @pytest.mark.unit
    def test_update_component(self, editor):
        updated = editor.update_component("c1", positioning_strategy={"type": "sticky", "top": 0})
        assert updated.positioning_strategy.type == PositioningType.STICKY
        assert editor.schema.get_component("c1").positioning_strategy.top == 0

    @pytest.mark.unit
    def test_update_rejects_placements(self, editor):
        with pytest.raises(EditorError):
            editor.update_component("c1", placements={})

    @pytest.mark.unit
    def test_move_accepted(self, editor):
        editor.set_current_breakpoint("desktop")
        result = editor.move_component("c3", 8, 7)
        assert result
        assert editor.schema.get_component("c3").placements["desktop"] == rect(8, 7, 4, 1)
        assert editor.schema.get_component("c3").placements["mobile"] == rect(0, 7, 4, 1)

    @pytest.mark.unit
    def test_move_rejected_leaves_schema(self, editor):
        before = editor.export_schema()
        result = editor.move_component("c3", 0, 6)
        assert result.reason == RejectionReason.COLLISION
        assert result.colliding_id == "c2"
        assert editor.schema == before

    @pytest.mark.unit
    def test_resize_accepted(self, editor):
        editor.set_current_breakpoint("desktop")
        assert editor.resize_component("c1", 12, 1)
        assert editor.schema.get_component("c1").placements["desktop"] == rect(0, 0, 12, 1)

    @pytest.mark.unit
    def test_resize_out_of_bounds(self, editor):
        result = editor.resize_component("c1", 5, 1)
        assert result.reason == RejectionReason.OUT_OF_BOUNDS

    @pytest.mark.unit
    def test_place_component(self, editor):
        editor.set_current_breakpoint("tablet")
        assert editor.place_component("c1", rect(4, 0, 4, 1))
        placements = editor.schema.get_component("c1").placements
        assert placements["tablet"] == rect(4, 0, 4, 1)
        # Desktop already holds the rect inherited when the schema was loaded.
        assert placements["desktop"] == rect(0, 0, 4, 1)

    @pytest.mark.unit
    def test_unknown_component_raises(self, editor):
        with pytest.raises(EditorError):
            editor.move_component("ghost", 0, 0)

    @pytest.mark.unit
    def test_duplicate(self, editor):
        new_id = editor.duplicate_component("c2")
        copy = editor.schema.get_component(new_id)
        assert new_id == "c4"
        assert copy.name == "Main Copy"
        assert copy.semantic_role == SemanticTag.MAIN
        assert copy.placements == {}
        assert editor.schema.members("mobile")[-1] == "c4"

    @pytest.mark.unit
    def test_delete_purges_every_reference(self, editor):
        editor.set_role(LayoutRole.HEADER, "c1", "desktop")
        editor.add_link("c1", "c2")
        editor.select_component("c1")
        editor.delete_component("c1")

        schema = editor.schema
        assert schema.get_component("c1") is None
        assert all("c1" not in layout.components for layout in schema.layouts.values())
        assert schema.layouts["desktop"].roles == {}
        assert schema.links == []
        assert editor.selected_component_id is None
        assert validate_references(schema) == []


class TestBreakpoints:
    """Tests for breakpoint management."""

    @pytest.mark.unit
    def test_add_breakpoint_inherits(self, editor):
        assert editor.add_breakpoint("wide", 1440, 16, 10)
        assert [bp.name for bp in editor.schema.breakpoints][-1] == "wide"
        assert editor.schema.get_component("c2").placements["wide"] == rect(0, 1, 4, 6)

    @pytest.mark.unit
    def test_add_breakpoint_kept_sorted(self, editor):
        editor.add_breakpoint("phablet", 480)
        names = [bp.name for bp in editor.schema.breakpoints]
        assert names == ["mobile", "phablet", "tablet", "desktop"]
        assert editor.schema.get_breakpoint("phablet").grid_cols == 6

    @pytest.mark.unit
    def test_add_duplicate_name_refused(self, editor):
        assert not editor.add_breakpoint("tablet", 900)

    @pytest.mark.unit
    def test_add_outside_limits_refused(self, editor, monkeypatch):
        monkeypatch.delenv("CANVAS_MAX_GRID_COLS", raising=False)
        assert not editor.add_breakpoint("huge", 3000, 30, 8)

    @pytest.mark.unit
    def test_rename_moves_keyed_data(self, editor):
        editor.set_current_breakpoint("tablet")
        editor.set_structure(LayoutStructure.HORIZONTAL)
        assert editor.update_breakpoint("tablet", new_name="medium")
        schema = editor.schema
        assert "tablet" not in schema.layouts
        assert schema.layouts["medium"].structure == LayoutStructure.HORIZONTAL
        assert "medium" in schema.get_component("c1").placements
        assert "tablet" not in schema.get_component("c1").placements
        assert editor.current_breakpoint == "medium"

    @pytest.mark.unit
    def test_rename_to_existing_refused(self, editor):
        assert not editor.update_breakpoint("tablet", new_name="desktop")

    @pytest.mark.unit
    def test_min_width_change_resorts(self, editor):
        editor.update_breakpoint("tablet", min_width=2000)
        assert [bp.name for bp in editor.schema.breakpoints] == ["mobile", "desktop", "tablet"]

    @pytest.mark.unit
    def test_resize_grid_unsafe(self, editor):
        editor.set_current_breakpoint("desktop")
        editor.resize_component("c1", 12, 1)
        check = editor.resize_grid("desktop", 10, 8)
        assert not check
        assert [a.component_id for a in check.affected] == ["c1"]
        assert editor.schema.get_breakpoint("desktop").grid_cols == 12

    @pytest.mark.unit
    def test_resize_grid_safe(self, editor):
        assert editor.resize_grid("desktop", 6, 8)
        assert editor.schema.get_breakpoint("desktop").grid_cols == 6

    @pytest.mark.unit
    def test_resize_grid_limits(self, editor, monkeypatch):
        monkeypatch.setenv("CANVAS_MIN_GRID_SIZE", "4")
        check = editor.resize_grid("desktop", 12, 3)
        assert not check
        assert "between 4" in check.reason

    @pytest.mark.unit
    def test_delete_breakpoint(self, editor):
        editor.set_current_breakpoint("tablet")
        assert editor.delete_breakpoint("tablet")
        assert "tablet" not in editor.schema.layouts
        assert "tablet" not in editor.schema.get_component("c1").placements
        assert editor.current_breakpoint == "mobile"

    @pytest.mark.unit
    def test_delete_last_breakpoint_refused(self, editor):
        editor.delete_breakpoint("tablet")
        editor.delete_breakpoint("desktop")
        assert not editor.delete_breakpoint("mobile")
        assert [bp.name for bp in editor.schema.breakpoints] == ["mobile"]


class TestLayoutConfig:
    """Tests for order, structure and roles."""

    @pytest.mark.unit
    def test_reorder(self, editor):
        editor.reorder_components(["c3", "c2", "c1"])
        assert editor.schema.members("mobile") == ["c3", "c2", "c1"]

    @pytest.mark.unit
    def test_reorder_requires_permutation(self, editor):
        with pytest.raises(EditorError):
            editor.reorder_components(["c1", "c2"])

    @pytest.mark.unit
    def test_roles(self, editor):
        editor.set_role("main", "c2")
        assert editor.schema.layouts["mobile"].roles == {LayoutRole.MAIN: "c2"}
        editor.clear_role(LayoutRole.MAIN)
        assert editor.schema.layouts["mobile"].roles == {}

    @pytest.mark.unit
    def test_add_component_to_layout(self, editor):
        """An unplaced component joins another breakpoint's layout once."""
        copy_id = editor.duplicate_component("c1")
        assert copy_id not in editor.schema.members("desktop")
        assert editor.add_component_to_layout(copy_id, "desktop")
        assert editor.schema.members("desktop")[-1] == copy_id
        assert not editor.add_component_to_layout(copy_id, "desktop")
        assert editor.schema.members("desktop").count(copy_id) == 1

    @pytest.mark.unit
    def test_add_component_to_layout_unknown_ids(self, editor):
        with pytest.raises(EditorError):
            editor.add_component_to_layout("ghost")
        with pytest.raises(EditorError):
            editor.add_component_to_layout("c1", "watch")

    @pytest.mark.unit
    def test_role_requires_member(self, editor):
        editor.duplicate_component("c1")
        with pytest.raises(EditorError):
            editor.set_role(LayoutRole.HEADER, "c4", "desktop")


class TestLinks:
    """Tests for link editing through the editor."""

    @pytest.mark.unit
    def test_link_replacement(self, editor):
        assert editor.add_link("c1", "c2")
        assert editor.add_link("c2", "c3")
        groups = editor.link_groups()
        assert groups["c2"] == frozenset({"c2", "c3"})
        assert groups["c1"] == frozenset({"c1"})

    @pytest.mark.unit
    def test_ignored_gestures(self, editor):
        assert not editor.add_link("c1", "c1")
        assert not editor.add_link("c1", "ghost")
        assert not editor.remove_link("c1", "c2")


class TestImportExport:
    """Tests for snapshot import and export."""

    @pytest.mark.unit
    def test_export_is_a_copy(self, editor):
        exported = editor.export_schema()
        exported.components.clear()
        assert len(editor.schema.components) == 3

    @pytest.mark.unit
    def test_snapshot_unchanged_by_later_edits(self, editor):
        """Mutations swap in a new snapshot instead of editing the old one."""
        before = editor.schema
        dumped = before.model_dump()
        editor.move_component("c1", 0, 0, "desktop")
        editor.add_link("c1", "c2")
        editor.delete_component("c3")
        assert editor.schema is not before
        assert before.model_dump() == dumped

    @pytest.mark.unit
    def test_json_round_trip(self, editor):
        restored = LayoutEditor.from_json(editor.to_json())
        assert restored.schema == editor.schema

    @pytest.mark.unit
    def test_import_resets_current_breakpoint(self, editor):
        editor.set_current_breakpoint("desktop")
        editor.import_schema(
            {
                "breakpoints": [{"name": "only", "minWidth": 0, "gridCols": 6, "gridRows": 6}],
                "layouts": {"only": {}},
            }
        )
        assert editor.current_breakpoint == "only"

    @pytest.mark.unit
    def test_reset(self, editor):
        editor.reset_schema()
        assert editor.schema.components == []
