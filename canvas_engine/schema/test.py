"""Unit tests for the schema model and factories."""

import pytest
from pydantic import ValidationError

from canvas_engine.grid import CanvasRect, GridSize

from .lib import (
    Breakpoint,
    Component,
    ComponentLink,
    LayoutConfig,
    LayoutRole,
    LayoutType,
    PositioningType,
    Schema,
    SemanticTag,
    check_structure,
    clone_schema,
    create_empty_schema,
    create_schema_with_breakpoint,
    default_component,
    generate_component_id,
    make_breakpoint,
)


def bp(name: str, min_width: int, cols: int = 12, rows: int = 8) -> Breakpoint:
    return Breakpoint(name=name, min_width=min_width, grid_cols=cols, grid_rows=rows)


class TestBreakpoint:
    """Tests for Breakpoint field invariants."""

    @pytest.mark.unit
    def test_grid_property(self):
        """Breakpoint exposes its grid as a GridSize."""
        assert bp("desktop", 1024).grid == GridSize(cols=12, rows=8)

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "fields",
        [
            {"name": "", "min_width": 0, "grid_cols": 4, "grid_rows": 4},
            {"name": "x", "min_width": -1, "grid_cols": 4, "grid_rows": 4},
            {"name": "x", "min_width": 0, "grid_cols": 0, "grid_rows": 4},
            {"name": "x", "min_width": 0, "grid_cols": 4, "grid_rows": 0},
        ],
    )
    def test_rejects_invalid_fields(self, fields):
        with pytest.raises(ValidationError):
            Breakpoint(**fields)

    @pytest.mark.unit
    def test_accepts_camel_case(self):
        """JSON field names are accepted."""
        parsed = Breakpoint.model_validate(
            {"name": "tablet", "minWidth": 768, "gridCols": 8, "gridRows": 6}
        )
        assert parsed.min_width == 768
        assert parsed.grid == GridSize(cols=8, rows=6)


class TestComponentLink:
    """Tests for ComponentLink."""

    @pytest.mark.unit
    def test_self_link_rejected(self):
        """A component cannot link to itself."""
        with pytest.raises(ValidationError):
            ComponentLink(a="c1", b="c1")

    @pytest.mark.unit
    def test_key_is_unordered(self):
        assert ComponentLink(a="c1", b="c2").key == ComponentLink(a="c2", b="c1").key

    @pytest.mark.unit
    def test_touches(self):
        link = ComponentLink(a="c1", b="c2")
        assert link.touches("c1")
        assert link.touches("c2")
        assert not link.touches("c3")


class TestSchemaStructure:
    """Tests for structural invariants enforced at construction."""

    @pytest.mark.unit
    def test_valid_schema(self):
        """Matching layouts and unique ids pass."""
        schema = Schema(
            components=[Component(id="A", name="Header")],
            breakpoints=[bp("mobile", 0, 4), bp("desktop", 1024)],
            layouts={"mobile": LayoutConfig(), "desktop": LayoutConfig()},
        )
        assert schema.schema_version == "2.0"
        assert check_structure(schema) == []

    @pytest.mark.unit
    def test_requires_a_breakpoint(self):
        """An empty breakpoint list is rejected."""
        with pytest.raises(ValidationError, match="at least one breakpoint"):
            Schema()

    @pytest.mark.unit
    def test_duplicate_breakpoint_names(self):
        with pytest.raises(ValidationError, match="Duplicate breakpoint"):
            Schema(
                breakpoints=[bp("mobile", 0), bp("mobile", 10)],
                layouts={"mobile": LayoutConfig()},
            )

    @pytest.mark.unit
    def test_duplicate_component_ids(self):
        with pytest.raises(ValidationError, match="Duplicate component"):
            Schema(
                components=[Component(id="A", name="One"), Component(id="A", name="Two")],
                breakpoints=[bp("mobile", 0)],
                layouts={"mobile": LayoutConfig()},
            )

    @pytest.mark.unit
    def test_layouts_must_match_breakpoints(self):
        """Layouts and breakpoints must have the same names."""
        with pytest.raises(ValidationError, match="has no layout"):
            Schema(breakpoints=[bp("mobile", 0)], layouts={})
        with pytest.raises(ValidationError, match="no matching breakpoint"):
            Schema(
                breakpoints=[bp("mobile", 0)],
                layouts={"mobile": LayoutConfig(), "tv": LayoutConfig()},
            )

    @pytest.mark.unit
    def test_check_structure_after_mutation(self):
        schema = create_empty_schema()
        schema.layouts.pop("tablet")
        codes = [issue.code for issue in check_structure(schema)]
        assert codes == ["missing_layout"]


class TestSchemaAccessors:
    """Tests for Schema lookup helpers."""

    @pytest.mark.unit
    def test_ordered_breakpoints_is_stable(self):
        schema = Schema(
            breakpoints=[bp("desktop", 1024), bp("a", 0), bp("b", 0)],
            layouts={"desktop": LayoutConfig(), "a": LayoutConfig(), "b": LayoutConfig()},
        )
        assert [b.name for b in schema.ordered_breakpoints()] == ["a", "b", "desktop"]

    @pytest.mark.unit
    def test_lookups(self):
        schema = create_empty_schema()
        schema.components.append(Component(id="c1", name="Header"))
        schema.layouts["mobile"].components.append("c1")
        assert schema.get_component("c1").name == "Header"
        assert schema.get_component("missing") is None
        assert schema.get_breakpoint("tablet").min_width == 768
        assert schema.get_breakpoint("tv") is None
        assert schema.members("mobile") == ["c1"]
        assert schema.members("tv") == []


class TestSerialization:
    """Tests for the camelCase JSON shape."""

    @pytest.mark.unit
    def test_round_trip_by_alias(self):
        """Schemas survive a camelCase JSON round trip."""
        schema = create_empty_schema()
        schema.components.append(
            Component(
                id="c1",
                name="Sidebar",
                semantic_role=SemanticTag.NAV,
                placements={"mobile": CanvasRect(x=0, y=0, width=4, height=2)},
            )
        )
        schema.layouts["mobile"].components.append("c1")
        schema.layouts["mobile"].roles[LayoutRole.SIDEBAR] = "c1"

        data = schema.model_dump(mode="json", by_alias=True, exclude_none=True)
        assert data["schemaVersion"] == "2.0"
        assert data["breakpoints"][1]["minWidth"] == 768
        assert data["components"][0]["semanticRole"] == "nav"
        assert data["layouts"]["mobile"]["roles"] == {"sidebar": "c1"}

        restored = Schema.model_validate(data)
        assert restored == schema

    @pytest.mark.unit
    def test_clone_is_independent(self):
        schema = create_empty_schema()
        copy = clone_schema(schema)
        copy.layouts["mobile"].components.append("c9")
        assert schema.layouts["mobile"].components == []


class TestFactories:
    """Tests for default schemas, breakpoints and components."""

    @pytest.mark.unit
    def test_empty_schema_defaults(self):
        schema = create_empty_schema()
        summary = [(b.name, b.min_width, b.grid_cols, b.grid_rows) for b in schema.breakpoints]
        assert summary == [
            ("mobile", 0, 4, 8),
            ("tablet", 768, 8, 8),
            ("desktop", 1024, 12, 8),
        ]
        assert set(schema.layouts) == {"mobile", "tablet", "desktop"}
        assert schema.components == []
        assert schema.links == []

    @pytest.mark.unit
    def test_single_breakpoint_schema(self):
        schema = create_schema_with_breakpoint("tablet")
        assert [b.name for b in schema.breakpoints] == ["tablet"]
        assert list(schema.layouts) == ["tablet"]

    @pytest.mark.unit
    def test_custom_breakpoint_grid(self):
        custom = make_breakpoint("wide", min_width=1600)
        assert custom.name == "wide"
        assert custom.grid == GridSize(cols=6, rows=8)
        assert custom.min_width == 1600

    @pytest.mark.unit
    def test_generate_component_id(self):
        """Ids continue from the largest generated number."""
        assert generate_component_id([]) == "c1"
        components = [
            Component(id="c2", name="A"),
            Component(id="hero", name="B"),
            Component(id="c10", name="C"),
        ]
        assert generate_component_id(components) == "c11"

    @pytest.mark.unit
    def test_default_header(self):
        header = default_component(SemanticTag.HEADER, "c1")
        assert header.name == "Header"
        assert header.positioning_strategy.type == PositioningType.STICKY
        assert header.internal_layout.type == LayoutType.CONTAINER
        assert header.placements == {}

    @pytest.mark.unit
    def test_default_components_do_not_share_state(self):
        """Defaults are copied per component."""
        first = default_component(SemanticTag.NAV, "c1")
        second = default_component(SemanticTag.NAV, "c2")
        first.internal_layout.flex.gap = "3rem"
        assert second.internal_layout.flex.gap == "1rem"

    @pytest.mark.unit
    @pytest.mark.parametrize("tag", list(SemanticTag))
    def test_every_tag_has_defaults(self, tag):
        component = default_component(tag, "c1")
        assert component.semantic_role == tag
        assert component.name
