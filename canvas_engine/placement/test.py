"""Tests for the placement validator."""

import pytest

from canvas_engine.grid import CanvasRect

from .lib import (
    PlacementResult,
    RejectionReason,
    propose_drop,
    propose_move,
    propose_resize,
    try_place,
)


def rect(x: int, y: int, w: int, h: int) -> CanvasRect:
    return CanvasRect(x=x, y=y, width=w, height=h)


class TestTryPlace:
    """Tests for try_place against a 12x8 grid occupied by A."""

    @pytest.mark.unit
    def test_edge_adjacent_is_accepted(self, desktop_schema):
        """Sharing an edge is not a collision."""
        result = try_place(desktop_schema, "desktop", "B", rect(4, 0, 4, 1))
        assert result
        assert result.accepted
        assert result.reason is None
        assert result.rect == rect(4, 0, 4, 1)

    @pytest.mark.unit
    def test_one_column_overlap_collides(self, desktop_schema):
        """A one-column overlap names the occupant."""
        result = try_place(desktop_schema, "desktop", "B", rect(3, 0, 4, 1))
        assert not result
        assert result.reason == RejectionReason.COLLISION
        assert result.colliding_id == "A"

    @pytest.mark.unit
    def test_out_of_bounds(self, desktop_schema):
        result = try_place(desktop_schema, "desktop", "B", rect(10, 0, 4, 1))
        assert result.reason == RejectionReason.OUT_OF_BOUNDS
        assert result.colliding_id is None

    @pytest.mark.unit
    def test_bounds_checked_before_collision(self, desktop_schema):
        result = try_place(desktop_schema, "desktop", "B", rect(0, 7, 4, 2))
        assert result.reason == RejectionReason.OUT_OF_BOUNDS

    @pytest.mark.unit
    def test_own_rect_is_ignored(self, desktop_schema):
        """A component never collides with itself."""
        assert try_place(desktop_schema, "desktop", "A", rect(1, 0, 4, 1))

    @pytest.mark.unit
    def test_unknown_breakpoint(self, desktop_schema):
        result = try_place(desktop_schema, "tv", "B", rect(0, 0, 1, 1))
        assert result.reason == RejectionReason.UNKNOWN_BREAKPOINT

    @pytest.mark.unit
    def test_unknown_component(self, desktop_schema):
        result = try_place(desktop_schema, "desktop", "Z", rect(6, 6, 1, 1))
        assert result.reason == RejectionReason.UNKNOWN_COMPONENT

    @pytest.mark.unit
    def test_collides_with_inherited_placement(self, mobile_desktop_schema):
        """Inherited rects count as occupants."""
        mobile_desktop_schema.components.append(
            mobile_desktop_schema.components[0].model_copy(update={"id": "c2", "placements": {}})
        )
        result = try_place(mobile_desktop_schema, "desktop", "c2", rect(2, 0, 2, 2))
        assert result.reason == RejectionReason.COLLISION
        assert result.colliding_id == "c1"

    @pytest.mark.unit
    def test_does_not_mutate(self, desktop_schema):
        before = desktop_schema.model_copy(deep=True)
        try_place(desktop_schema, "desktop", "B", rect(4, 0, 4, 1))
        assert desktop_schema == before


class TestProposals:
    """Tests for move, resize and drop call shapes."""

    @pytest.mark.unit
    def test_move_keeps_size(self, desktop_schema):
        result = propose_move(desktop_schema, "desktop", "A", 8, 7)
        assert result
        assert result.rect == rect(8, 7, 4, 1)

    @pytest.mark.unit
    def test_move_off_grid(self, desktop_schema):
        assert propose_move(desktop_schema, "desktop", "A", 9, 0).reason == (
            RejectionReason.OUT_OF_BOUNDS
        )
        negative = propose_move(desktop_schema, "desktop", "A", -1, 0)
        assert negative.reason == RejectionReason.OUT_OF_BOUNDS
        assert negative.rect is None

    @pytest.mark.unit
    def test_move_unplaced_component(self, desktop_schema):
        result = propose_move(desktop_schema, "desktop", "B", 0, 4)
        assert result.reason == RejectionReason.NOT_PLACED

    @pytest.mark.unit
    def test_resize_keeps_position(self, desktop_schema):
        result = propose_resize(desktop_schema, "desktop", "A", 12, 2)
        assert result.rect == rect(0, 0, 12, 2)
        assert result

    @pytest.mark.unit
    def test_resize_into_neighbour(self, full_grid_schema):
        result = propose_resize(full_grid_schema, "desktop", "D", 10, 6)
        assert result.reason == RejectionReason.COLLISION
        assert result.colliding_id == "C"

    @pytest.mark.unit
    def test_resize_below_one_cell(self, desktop_schema):
        result = propose_resize(desktop_schema, "desktop", "A", 0, 1)
        assert result.reason == RejectionReason.OUT_OF_BOUNDS

    @pytest.mark.unit
    def test_drop_uses_default_size(self, desktop_schema, monkeypatch):
        monkeypatch.delenv("CANVAS_DROP_WIDTH", raising=False)
        monkeypatch.delenv("CANVAS_DROP_HEIGHT", raising=False)
        result = propose_drop(desktop_schema, "desktop", "B", 0, 2)
        assert result.rect == rect(0, 2, 4, 3)
        assert result

    @pytest.mark.unit
    def test_drop_near_edge_is_clamped(self, desktop_schema):
        """Drops past the edge are pulled back inside."""
        result = propose_drop(desktop_schema, "desktop", "B", 11, 7, width=4, height=3)
        assert result.rect == rect(8, 5, 4, 3)
        assert result

    @pytest.mark.unit
    def test_drop_respects_configured_size(self, desktop_schema, monkeypatch):
        monkeypatch.setenv("CANVAS_DROP_WIDTH", "2")
        monkeypatch.setenv("CANVAS_DROP_HEIGHT", "2")
        result = propose_drop(desktop_schema, "desktop", "B", 5, 5)
        assert result.rect == rect(5, 5, 2, 2)

    @pytest.mark.unit
    def test_drop_onto_occupant(self, desktop_schema):
        result = propose_drop(desktop_schema, "desktop", "B", 2, 0, width=2, height=1)
        assert result.reason == RejectionReason.COLLISION


class TestPlacementResult:
    """Tests for PlacementResult helpers."""

    @pytest.mark.unit
    def test_truthiness(self):
        assert PlacementResult.accept(rect(0, 0, 1, 1))
        assert not PlacementResult.reject(RejectionReason.COLLISION, "hit")
