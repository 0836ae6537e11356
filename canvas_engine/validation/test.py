"""Unit tests for validation module."""

import pytest

from canvas_engine.grid import CanvasRect
from canvas_engine.normalize import normalize
from canvas_engine.schema import (
    ComponentLink,
    LayoutRole,
    LayoutStructure,
    Positioning,
    PositioningType,
    ResponsiveOverride,
    create_empty_schema,
)

from .lib import (
    ValidationResult,
    format_validation_result,
    validate_references,
    validate_schema,
)


@pytest.fixture
def clean_schema(page_schema):
    """Normalized page schema with no errors or warnings."""
    page_schema.components[0].positioning_strategy = Positioning(type=PositioningType.STICKY, top=0)
    return normalize(page_schema)


def codes(issues) -> list[str]:
    return [issue.code for issue in issues]


class TestValidateReferences:
    """Tests for validate_references."""

    @pytest.mark.unit
    def test_clean_schema(self, clean_schema):
        """A normalized schema with live ids has no reference errors."""
        assert validate_references(clean_schema) == []

    @pytest.mark.unit
    def test_unknown_layout_member(self, clean_schema):
        """Layout members must be live components."""
        clean_schema.layouts["tablet"].components.append("ghost")
        errors = validate_references(clean_schema)
        assert len(errors) == 1
        assert errors[0].error_type == "unknown_component"
        assert errors[0].breakpoint == "tablet"
        assert errors[0].component_id == "ghost"

    @pytest.mark.unit
    def test_role_must_be_member(self, clean_schema):
        """Role targets must belong to the same layout."""
        clean_schema.layouts["desktop"].components.remove("c2")
        clean_schema.layouts["desktop"].roles[LayoutRole.MAIN] = "c2"
        errors = validate_references(clean_schema)
        assert [e.error_type for e in errors] == ["role_not_member"]
        assert "main" in errors[0].message

    @pytest.mark.unit
    def test_unknown_link_endpoint(self, clean_schema):
        """Links may only join live components."""
        clean_schema.links.append(ComponentLink(a="c1", b="gone"))
        errors = validate_references(clean_schema)
        assert [e.error_type for e in errors] == ["unknown_link_endpoint"]
        assert errors[0].component_id == "gone"


class TestValidateSchema:
    """Tests for validate_schema errors and warnings."""

    @pytest.mark.unit
    def test_clean_schema(self, clean_schema):
        """Clean schema has neither errors nor warnings."""
        result = validate_schema(clean_schema)
        assert result
        assert result.errors == []
        assert result.warnings == []

    @pytest.mark.unit
    def test_reference_errors_are_errors(self, clean_schema):
        clean_schema.layouts["mobile"].components.append("ghost")
        result = validate_schema(clean_schema)
        assert not result.valid
        assert codes(result.errors) == ["unknown_component"]
        assert result.errors[0].field == "layouts.mobile"

    @pytest.mark.unit
    def test_structural_errors(self, clean_schema):
        """Structural invariants broken after construction are reported."""
        clean_schema.components.append(clean_schema.components[0].model_copy())
        clean_schema.layouts.pop("tablet")
        result = validate_schema(clean_schema)
        assert "duplicate_component" in codes(result.errors)
        assert "missing_layout" in codes(result.errors)

    @pytest.mark.unit
    def test_unnormalized_schema_warns_about_empty_layouts(self, page_schema):
        result = validate_schema(page_schema)
        assert result.valid
        assert codes(result.warnings).count("empty_layout") == 2

    @pytest.mark.unit
    def test_unsorted_breakpoints(self, clean_schema):
        clean_schema.breakpoints.reverse()
        assert "unsorted_breakpoints" in codes(validate_schema(clean_schema).warnings)

    @pytest.mark.unit
    def test_sidebar_structure_without_roles(self, clean_schema):
        layout = clean_schema.layouts["desktop"]
        layout.structure = LayoutStructure.SIDEBAR_MAIN
        layout.roles[LayoutRole.MAIN] = "c2"
        warnings = validate_schema(clean_schema).warnings
        assert codes(warnings) == ["missing_roles"]
        assert "sidebar" in warnings[0].message

    @pytest.mark.unit
    def test_out_of_bounds_and_overlap(self, clean_schema):
        """Spatial problems in explicit placements are warnings."""
        clean_schema.components[1].placements["desktop"] = CanvasRect(x=2, y=0, width=12, height=2)
        warnings = validate_schema(clean_schema).warnings
        assert "out_of_bounds" in codes(warnings)
        overlap = next(w for w in warnings if w.code == "overlap")
        assert "'c1'" in overlap.message and "'c2'" in overlap.message

    @pytest.mark.unit
    def test_dom_order_differs_from_canvas(self, clean_schema):
        clean_schema.layouts["mobile"].components = ["c3", "c1", "c2"]
        warnings = validate_schema(clean_schema).warnings
        assert codes(warnings) == ["dom_order"]
        assert "c1, c2, c3" in warnings[0].message

    @pytest.mark.unit
    def test_placed_component_outside_layouts(self, page_schema):
        for layout in page_schema.layouts.values():
            layout.components = [cid for cid in layout.components if cid != "c3"]
        warnings = validate_schema(page_schema).warnings
        assert "not_in_layout" in codes(warnings)

    @pytest.mark.unit
    def test_unknown_breakpoint_keys(self, clean_schema):
        clean_schema.components[2].responsive_overrides["tv"] = ResponsiveOverride(hidden=True)
        warnings = validate_schema(clean_schema).warnings
        assert codes(warnings) == ["unknown_breakpoint"]
        assert warnings[0].field == "components.c3.responsiveOverrides.tv"

    @pytest.mark.unit
    def test_semantic_advice(self, page_schema):
        """A static header draws a semantic hint."""
        warnings = validate_schema(normalize(page_schema)).warnings
        assert codes(warnings) == ["semantic"]
        assert warnings[0].component_id == "c1"

    @pytest.mark.unit
    def test_empty_schema_is_clean(self):
        result = validate_schema(create_empty_schema())
        assert result.valid
        assert result.warnings == []


class TestFormatValidationResult:
    """Tests for the plain-text report."""

    @pytest.mark.unit
    def test_valid(self):
        assert format_validation_result(ValidationResult()) == "Schema is valid"

    @pytest.mark.unit
    def test_errors_and_warnings(self, page_schema):
        page_schema.layouts["mobile"].components.append("ghost")
        report = format_validation_result(validate_schema(page_schema))
        lines = report.splitlines()
        assert lines[0] == "Schema has 1 error(s) (3 warnings)"
        assert lines[1].startswith("  error [unknown_component]")
        assert all(line.startswith("  warning [") for line in lines[2:])
