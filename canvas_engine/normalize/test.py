"""Tests for the breakpoint inheritance normalizer."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from canvas_engine.grid import CanvasRect, contains
from canvas_engine.schema import (
    Breakpoint,
    Component,
    LayoutConfig,
    ResponsiveOverride,
    Schema,
    create_empty_schema,
)

from .lib import effective_placement, normalize, occupants


def rect(x: int, y: int, w: int, h: int) -> CanvasRect:
    return CanvasRect(x=x, y=y, width=w, height=h)


@st.composite
def schemas(draw) -> Schema:
    """Structurally valid schemas with random partial placements."""
    count = draw(st.integers(min_value=1, max_value=4))
    breakpoints = [
        Breakpoint(
            name=f"bp{i}",
            min_width=draw(st.integers(min_value=0, max_value=2000)),
            grid_cols=draw(st.integers(min_value=1, max_value=12)),
            grid_rows=draw(st.integers(min_value=1, max_value=8)),
        )
        for i in range(count)
    ]
    layouts = {bp.name: LayoutConfig() for bp in breakpoints}
    components = []
    for i in range(draw(st.integers(min_value=0, max_value=5))):
        placements = {}
        for bp in breakpoints:
            if draw(st.booleans()):
                w = draw(st.integers(min_value=1, max_value=bp.grid_cols))
                h = draw(st.integers(min_value=1, max_value=bp.grid_rows))
                placements[bp.name] = rect(
                    draw(st.integers(min_value=0, max_value=bp.grid_cols - w)),
                    draw(st.integers(min_value=0, max_value=bp.grid_rows - h)),
                    w,
                    h,
                )
                if draw(st.booleans()):
                    layouts[bp.name].components.append(f"c{i}")
        components.append(Component(id=f"c{i}", name=f"Part{i}", placements=placements))
    return Schema(components=components, breakpoints=breakpoints, layouts=layouts)


class TestCascade:
    """Tests for the mobile to desktop inheritance cascade."""

    @pytest.mark.unit
    def test_inherits_from_mobile(self, mobile_desktop_schema):
        """Desktop inherits the mobile rect and membership."""
        result = normalize(mobile_desktop_schema)
        c1 = result.get_component("c1")
        assert c1.placements["desktop"] == rect(0, 0, 4, 1)
        assert result.layouts["desktop"].components == ["c1"]

    @pytest.mark.unit
    def test_input_is_not_mutated(self, mobile_desktop_schema):
        """normalize returns a new schema."""
        normalize(mobile_desktop_schema)
        assert "desktop" not in mobile_desktop_schema.components[0].placements
        assert mobile_desktop_schema.layouts["desktop"].components == []

    @pytest.mark.unit
    def test_explicit_placement_kept(self, mobile_desktop_schema):
        mobile_desktop_schema.components[0].placements["desktop"] = rect(2, 3, 6, 2)
        result = normalize(mobile_desktop_schema)
        assert result.get_component("c1").placements["desktop"] == rect(2, 3, 6, 2)
        assert "c1" in result.layouts["desktop"].components

    @pytest.mark.unit
    def test_nearest_earlier_breakpoint_wins(self, page_schema):
        page_schema.components[0].placements["tablet"] = rect(1, 0, 6, 1)
        result = normalize(page_schema)
        assert result.get_component("c1").placements["desktop"] == rect(1, 0, 6, 1)

    @pytest.mark.unit
    def test_no_earlier_placement_stays_absent(self, mobile_desktop_schema):
        """Without an earlier rect a component stays absent."""
        mobile_desktop_schema.components[0].placements = {"desktop": rect(0, 0, 2, 2)}
        mobile_desktop_schema.layouts["mobile"].components = []
        result = normalize(mobile_desktop_schema)
        c1 = result.get_component("c1")
        assert "mobile" not in c1.placements
        assert result.layouts["mobile"].components == []
        assert result.layouts["desktop"].components == ["c1"]

    @pytest.mark.unit
    def test_membership_appended_after_existing(self, page_schema):
        page_schema.layouts["tablet"].components = ["c3"]
        result = normalize(page_schema)
        assert result.layouts["tablet"].components == ["c3", "c1", "c2"]

    @pytest.mark.unit
    def test_order_follows_min_width_not_list_order(self):
        """Cascade order comes from min_width."""
        schema = Schema(
            components=[
                Component(id="c1", name="Nav", placements={"small": rect(0, 0, 2, 2)}),
            ],
            breakpoints=[
                Breakpoint(name="large", min_width=1200, grid_cols=12, grid_rows=8),
                Breakpoint(name="small", min_width=0, grid_cols=4, grid_rows=8),
            ],
            layouts={"large": LayoutConfig(), "small": LayoutConfig(components=["c1"])},
        )
        result = normalize(schema)
        assert result.get_component("c1").placements["large"] == rect(0, 0, 2, 2)


class TestClamping:
    """Tests for inherited rectangles that do not fit a smaller grid."""

    @pytest.mark.unit
    def test_clamps_into_smaller_later_grid(self):
        """Inherited rects shrink and shift into a smaller grid."""
        schema = Schema(
            components=[
                Component(id="c1", name="Hero", placements={"wide": rect(8, 6, 6, 4)}),
            ],
            breakpoints=[
                Breakpoint(name="wide", min_width=0, grid_cols=16, grid_rows=10),
                Breakpoint(name="narrow", min_width=800, grid_cols=4, grid_rows=8),
            ],
            layouts={"wide": LayoutConfig(components=["c1"]), "narrow": LayoutConfig()},
        )
        inherited = normalize(schema).get_component("c1").placements["narrow"]
        assert inherited == rect(0, 4, 4, 4)

    @pytest.mark.unit
    def test_explicit_out_of_bounds_left_alone(self, mobile_desktop_schema):
        mobile_desktop_schema.components[0].placements["mobile"] = rect(2, 0, 4, 1)
        result = normalize(mobile_desktop_schema)
        assert result.get_component("c1").placements["mobile"] == rect(2, 0, 4, 1)


class TestPurge:
    """Tests for removal of data keyed by deleted breakpoints."""

    @pytest.mark.unit
    def test_drops_unknown_breakpoint_keys(self, mobile_desktop_schema):
        c1 = mobile_desktop_schema.components[0]
        c1.placements["tablet"] = rect(0, 0, 1, 1)
        c1.responsive_overrides["tablet"] = ResponsiveOverride(hidden=True)
        c1.responsive_overrides["mobile"] = ResponsiveOverride(order_override=2)
        result = normalize(mobile_desktop_schema).get_component("c1")
        assert "tablet" not in result.placements
        assert set(result.responsive_overrides) == {"mobile"}


class TestIdempotence:
    """Property tests for normalize."""

    @pytest.mark.unit
    @given(schemas())
    def test_idempotent(self, schema):
        """A second normalize changes nothing."""
        once = normalize(schema)
        assert normalize(once) == once

    @pytest.mark.unit
    @given(schemas())
    def test_inherited_placements_fit(self, schema):
        result = normalize(schema)
        for component in result.components:
            original = schema.get_component(component.id)
            for bp in result.breakpoints:
                placed = component.placements.get(bp.name)
                if placed is not None and bp.name not in original.placements:
                    assert contains(bp.grid, placed)

    @pytest.mark.unit
    @given(schemas())
    def test_placed_components_are_members(self, schema):
        result = normalize(schema)
        for component in result.components:
            for name in component.placements:
                assert component.id in result.layouts[name].components


class TestEffectivePlacement:
    """Tests for lazy effective placement lookup."""

    @pytest.mark.unit
    def test_matches_normalized(self, page_schema):
        normalized = normalize(page_schema)
        for component in page_schema.components:
            for bp in page_schema.breakpoints:
                assert effective_placement(page_schema, component.id, bp.name) == (
                    normalized.get_component(component.id).placements.get(bp.name)
                )

    @pytest.mark.unit
    def test_unknown_ids(self, page_schema):
        assert effective_placement(page_schema, "nope", "mobile") is None
        assert effective_placement(page_schema, "c1", "tv") is None


class TestOccupants:
    """Tests for occupants."""

    @pytest.mark.unit
    def test_members_with_rects(self, desktop_schema):
        assert occupants(desktop_schema, "desktop") == {"A": rect(0, 0, 4, 1)}

    @pytest.mark.unit
    def test_includes_inherited(self, mobile_desktop_schema):
        assert occupants(mobile_desktop_schema, "desktop") == {"c1": rect(0, 0, 4, 1)}

    @pytest.mark.unit
    def test_layout_order_first(self, page_schema):
        page_schema.layouts["mobile"].components = ["c3", "c1", "c2"]
        assert list(occupants(page_schema, "mobile")) == ["c3", "c1", "c2"]

    @pytest.mark.unit
    def test_unknown_breakpoint(self):
        assert occupants(create_empty_schema(), "tv") == {}
