"""Placement validator for move, resize and insert-at-drop proposals.

Every check is advisory: nothing here mutates the schema or raises on a
rejected proposal. Callers inspect the returned PlacementResult and commit
the rectangle themselves.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from canvas_engine.config import get_drop_size
from canvas_engine.grid import CanvasRect, clamp_to_grid, contains, overlaps
from canvas_engine.normalize import effective_placement, occupants
from canvas_engine.schema import Schema

logger = logging.getLogger(__name__)


class RejectionReason(str, Enum):
    """Why a placement proposal was rejected.

    - OUT_OF_BOUNDS: Rectangle leaves the breakpoint's grid
    - COLLISION: Rectangle overlaps another occupant
    - UNKNOWN_BREAKPOINT: No breakpoint with that name
    - UNKNOWN_COMPONENT: No component with that id
    - NOT_PLACED: Move or resize of a component absent at the breakpoint
    """

    OUT_OF_BOUNDS = "out_of_bounds"
    COLLISION = "collision"
    UNKNOWN_BREAKPOINT = "unknown_breakpoint"
    UNKNOWN_COMPONENT = "unknown_component"
    NOT_PLACED = "not_placed"


@dataclass(frozen=True)
class PlacementResult:
    """Outcome of a placement proposal.

    Attributes:
        accepted: Whether the rectangle may be committed.
        rect: The proposed rectangle (after clamping, for drops). None when
            the proposal could not be expressed as a valid rectangle.
        reason: Rejection classification, None when accepted.
        colliding_id: Occupant hit by a COLLISION rejection.
        message: Human-readable explanation.
    """

    accepted: bool
    rect: CanvasRect | None = None
    reason: RejectionReason | None = None
    colliding_id: str | None = None
    message: str = ""

    def __bool__(self) -> bool:
        return self.accepted

    @classmethod
    def accept(cls, rect: CanvasRect) -> "PlacementResult":
        return cls(accepted=True, rect=rect)

    @classmethod
    def reject(
        cls,
        reason: RejectionReason,
        message: str,
        rect: CanvasRect | None = None,
        colliding_id: str | None = None,
    ) -> "PlacementResult":
        logger.debug(f"Placement rejected ({reason.value}): {message}")
        return cls(
            accepted=False,
            rect=rect,
            reason=reason,
            colliding_id=colliding_id,
            message=message,
        )


def try_place(
    schema: Schema, breakpoint: str, component_id: str, rect: CanvasRect
) -> PlacementResult:
    """Decide whether a component may occupy a rectangle at a breakpoint.

    The rectangle must lie inside the breakpoint's grid and must not
    overlap the effective placement of any other occupant. Rectangles that
    only share an edge do not overlap.

    Args:
        schema: Current schema (normalized or not).
        breakpoint: Breakpoint name.
        component_id: Component being placed; its own current rectangle is
            ignored.
        rect: Proposed rectangle.

    Returns:
        PlacementResult, truthy when accepted.
    """
    bp = schema.get_breakpoint(breakpoint)
    if bp is None:
        return PlacementResult.reject(
            RejectionReason.UNKNOWN_BREAKPOINT, f"Unknown breakpoint '{breakpoint}'", rect
        )
    if schema.get_component(component_id) is None:
        return PlacementResult.reject(
            RejectionReason.UNKNOWN_COMPONENT, f"Unknown component '{component_id}'", rect
        )
    if not contains(bp.grid, rect):
        return PlacementResult.reject(
            RejectionReason.OUT_OF_BOUNDS,
            f"{rect} exceeds the {bp.grid} grid of '{breakpoint}'",
            rect,
        )

    for other_id, other_rect in occupants(schema, breakpoint).items():
        if other_id == component_id:
            continue
        if overlaps(rect, other_rect):
            return PlacementResult.reject(
                RejectionReason.COLLISION,
                f"{rect} overlaps '{other_id}' at {other_rect}",
                rect,
                colliding_id=other_id,
            )

    return PlacementResult.accept(rect)


def _current(schema: Schema, breakpoint: str, component_id: str) -> PlacementResult | CanvasRect:
    """Current effective rect, or the rejection explaining why there is none."""
    if schema.get_breakpoint(breakpoint) is None:
        return PlacementResult.reject(
            RejectionReason.UNKNOWN_BREAKPOINT, f"Unknown breakpoint '{breakpoint}'"
        )
    if schema.get_component(component_id) is None:
        return PlacementResult.reject(
            RejectionReason.UNKNOWN_COMPONENT, f"Unknown component '{component_id}'"
        )
    current = effective_placement(schema, component_id, breakpoint)
    if current is None:
        return PlacementResult.reject(
            RejectionReason.NOT_PLACED,
            f"Component '{component_id}' has no placement at '{breakpoint}'",
        )
    return current


def propose_move(
    schema: Schema, breakpoint: str, component_id: str, x: int, y: int
) -> PlacementResult:
    """Check moving a component to (x, y), keeping its width and height."""
    current = _current(schema, breakpoint, component_id)
    if isinstance(current, PlacementResult):
        return current
    if x < 0 or y < 0:
        return PlacementResult.reject(
            RejectionReason.OUT_OF_BOUNDS, f"Position ({x}, {y}) is off the grid"
        )
    rect = current.model_copy(update={"x": x, "y": y})
    return try_place(schema, breakpoint, component_id, rect)


def propose_resize(
    schema: Schema, breakpoint: str, component_id: str, width: int, height: int
) -> PlacementResult:
    """Check resizing a component to width x height, keeping its position."""
    current = _current(schema, breakpoint, component_id)
    if isinstance(current, PlacementResult):
        return current
    if width < 1 or height < 1:
        return PlacementResult.reject(
            RejectionReason.OUT_OF_BOUNDS, f"Size {width}x{height} is below one cell"
        )
    rect = current.model_copy(update={"width": width, "height": height})
    return try_place(schema, breakpoint, component_id, rect)


def propose_drop(
    schema: Schema,
    breakpoint: str,
    component_id: str,
    x: int,
    y: int,
    width: int | None = None,
    height: int | None = None,
) -> PlacementResult:
    """Check inserting a component at a drop point.

    The rectangle defaults to the configured drop size and is clamped into
    the grid first, so a drop near an edge becomes a valid in-bounds
    rectangle instead of an OUT_OF_BOUNDS rejection.
    """
    bp = schema.get_breakpoint(breakpoint)
    if bp is None:
        return PlacementResult.reject(
            RejectionReason.UNKNOWN_BREAKPOINT, f"Unknown breakpoint '{breakpoint}'"
        )
    default_width, default_height = get_drop_size()
    rect = CanvasRect(
        x=max(0, x),
        y=max(0, y),
        width=max(1, default_width if width is None else width),
        height=max(1, default_height if height is None else height),
    )
    return try_place(schema, breakpoint, component_id, clamp_to_grid(rect, bp.grid))
