"""Grid resize constraint calculator.

Answers whether a breakpoint's grid can shrink without clipping any
component occupying it, and by how much it could shrink to fit.
"""

import logging
from dataclasses import dataclass, field

from canvas_engine.grid import CanvasRect, GridSize, contains, minimum_bounds
from canvas_engine.normalize import effective_placement, occupants
from canvas_engine.schema import Schema

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AffectedComponent:
    """An occupant that would be clipped by a proposed grid size."""

    component_id: str
    rect: CanvasRect


@dataclass(frozen=True)
class ResizeCheck:
    """Outcome of a proposed grid resize.

    Attributes:
        safe: Whether the new size keeps every occupant inside the grid.
        minimum_required: Smallest grid holding every occupant.
        affected: Occupants that would leave the proposed grid.
        reason: Explanation when unsafe.
    """

    safe: bool
    minimum_required: GridSize
    affected: tuple[AffectedComponent, ...] = field(default_factory=tuple)
    reason: str = ""

    def __bool__(self) -> bool:
        return self.safe


@dataclass(frozen=True)
class CompactionSuggestion:
    """How far a grid could shrink while still holding its occupants."""

    reducible_cols: int
    reducible_rows: int
    minimum_required: GridSize

    def __bool__(self) -> bool:
        return self.reducible_cols > 0 or self.reducible_rows > 0


def minimum_grid_size(schema: Schema, breakpoint: str) -> GridSize:
    """Smallest grid containing every occupant of a breakpoint."""
    return minimum_bounds(occupants(schema, breakpoint).values())


def can_resize(schema: Schema, breakpoint: str, new_cols: int, new_rows: int) -> ResizeCheck:
    """Check whether a breakpoint's grid may change to new_cols x new_rows.

    Growing on both axes is always safe. Otherwise the new size must be at
    least the minimum bounds of the breakpoint's occupants.

    Args:
        schema: Current schema.
        breakpoint: Breakpoint name.
        new_cols: Proposed column count.
        new_rows: Proposed row count.

    Returns:
        ResizeCheck, truthy when safe.
    """
    bp = schema.get_breakpoint(breakpoint)
    rects = occupants(schema, breakpoint)
    minimum = minimum_bounds(rects.values())

    if bp is None:
        return ResizeCheck(False, minimum, reason=f"Unknown breakpoint '{breakpoint}'")
    if new_cols < 1 or new_rows < 1:
        return ResizeCheck(False, minimum, reason="Grid must have at least one column and row")
    if new_cols >= bp.grid_cols and new_rows >= bp.grid_rows:
        return ResizeCheck(True, minimum)
    if new_cols >= minimum.cols and new_rows >= minimum.rows:
        return ResizeCheck(True, minimum)

    proposed = GridSize(cols=new_cols, rows=new_rows)
    affected = tuple(
        AffectedComponent(component_id, rect)
        for component_id, rect in rects.items()
        if not contains(proposed, rect)
    )
    reason = f"{proposed} is smaller than the required {minimum}"
    if affected:
        reason += "; move " + ", ".join(f"'{a.component_id}'" for a in affected) + " first"
    logger.debug("Unsafe resize of '%s': %s", breakpoint, reason)
    return ResizeCheck(False, minimum, affected, reason)


def suggest_compaction(schema: Schema, breakpoint: str) -> CompactionSuggestion:
    """Report how many columns and rows could be removed without clipping.

    Unknown breakpoints report nothing reducible.
    """
    minimum = minimum_grid_size(schema, breakpoint)
    bp = schema.get_breakpoint(breakpoint)
    if bp is None:
        return CompactionSuggestion(0, 0, minimum)
    return CompactionSuggestion(
        reducible_cols=max(0, bp.grid_cols - minimum.cols),
        reducible_rows=max(0, bp.grid_rows - minimum.rows),
        minimum_required=minimum,
    )


def is_out_of_bounds(schema: Schema, breakpoint: str, component_id: str) -> bool:
    """Whether a component's effective rect leaves its breakpoint's grid."""
    bp = schema.get_breakpoint(breakpoint)
    rect = effective_placement(schema, component_id, breakpoint)
    if bp is None or rect is None:
        return False
    return not contains(bp.grid, rect)


def out_of_bounds_components(schema: Schema, breakpoint: str) -> list[str]:
    """Occupants of a breakpoint that do not fit its current grid."""
    bp = schema.get_breakpoint(breakpoint)
    if bp is None:
        return []
    return [cid for cid, rect in occupants(schema, breakpoint).items() if not contains(bp.grid, rect)]


def affected_component_ids(check: ResizeCheck) -> list[str]:
    return [a.component_id for a in check.affected]
