"""Export surface for downstream description generators.

Generators read a schema through this module: ``export_schema`` refuses any
schema with dangling ids, and the helpers below turn each breakpoint's
effective rectangles into CSS grid lines, reading order, row groupings and
a text occupancy map.
"""

import logging
from dataclasses import dataclass, field
from itertools import combinations
from typing import Any, Literal

from canvas_engine.grid import CanvasRect
from canvas_engine.links import linked_groups
from canvas_engine.normalize import effective_placement, normalize, occupants
from canvas_engine.schema import Schema
from canvas_engine.validation import SchemaReferenceError, validate_references

logger = logging.getLogger(__name__)


class ExportBlockedError(Exception):
    """Raised when a schema with unresolved ids is exported."""

    def __init__(self, errors: list[SchemaReferenceError]):
        self.errors = errors
        details = "; ".join(error.message for error in errors)
        super().__init__(f"Export blocked by {len(errors)} reference error(s): {details}")


def export_schema(schema: Schema) -> dict[str, Any]:
    """Normalize and serialize a schema for description generation.

    Args:
        schema: Schema to export.

    Returns:
        camelCase JSON-compatible dict with a ``linkGroups`` entry listing
        every group of two or more linked components.

    Raises:
        ExportBlockedError: If any id in the schema does not resolve.
    """
    normalized = normalize(schema)
    errors = validate_references(normalized)
    if errors:
        logger.debug(f"Export blocked: {len(errors)} reference error(s)")
        raise ExportBlockedError(errors)

    data = normalized.model_dump(mode="json", by_alias=True, exclude_none=True)
    data["linkGroups"] = [sorted(group) for group in linked_groups(normalized.links)]
    return data


# =============================================================================
# CSS Grid Mapping
# =============================================================================


@dataclass
class GridPosition:
    """A component's rectangle expressed as 1-based CSS grid lines.

    Attributes:
        component_id: Component id.
        name: Component name.
        rect: Effective rectangle on the canvas grid.
        grid_area: ``"row-start / col-start / row-end / col-end"``.
        grid_column: ``"col-start / col-end"``.
        grid_row: ``"row-start / row-end"``.
    """

    component_id: str
    name: str
    rect: CanvasRect
    grid_area: str
    grid_column: str
    grid_row: str


@dataclass
class VisualLayout:
    """CSS grid description of one breakpoint."""

    breakpoint: str
    grid_cols: int
    grid_rows: int
    positions: list[GridPosition] = field(default_factory=list)


def _require_breakpoint(schema: Schema, breakpoint: str):
    bp = schema.get_breakpoint(breakpoint)
    if bp is None:
        raise ValueError(f"Unknown breakpoint '{breakpoint}'")
    return bp


def grid_positions(schema: Schema, breakpoint: str) -> VisualLayout:
    """Map every occupant of a breakpoint to CSS grid lines.

    Positions are sorted by canvas reading order (top to bottom, then left
    to right).

    Example:
        A header spanning the first row of a 12-column grid has
        ``grid_area == "1 / 1 / 2 / 13"``.

    Raises:
        ValueError: If the breakpoint is unknown.
    """
    bp = _require_breakpoint(schema, breakpoint)
    rects = occupants(schema, breakpoint)
    layout = VisualLayout(breakpoint=bp.name, grid_cols=bp.grid_cols, grid_rows=bp.grid_rows)

    for component_id in sort_by_canvas_position(list(rects), schema, breakpoint):
        rect = rects[component_id]
        col_start, col_end = rect.x + 1, rect.right + 1
        row_start, row_end = rect.y + 1, rect.bottom + 1
        layout.positions.append(
            GridPosition(
                component_id=component_id,
                name=schema.get_component(component_id).name,
                rect=rect,
                grid_area=f"{row_start} / {col_start} / {row_end} / {col_end}",
                grid_column=f"{col_start} / {col_end}",
                grid_row=f"{row_start} / {row_end}",
            )
        )
    return layout


# =============================================================================
# Reading Order
# =============================================================================


def sort_by_canvas_position(
    component_ids: list[str], schema: Schema, breakpoint: str
) -> list[str]:
    """Sort ids by their rectangle's y, then x, at a breakpoint.

    Ids without a rectangle there keep their relative order at the end.
    """
    placed: list[tuple[int, int, int, str]] = []
    unplaced: list[str] = []
    for index, component_id in enumerate(component_ids):
        rect = effective_placement(schema, component_id, breakpoint)
        if rect is None:
            unplaced.append(component_id)
        else:
            placed.append((rect.y, rect.x, index, component_id))
    return [cid for *_, cid in sorted(placed)] + unplaced


def group_by_row(schema: Schema, breakpoint: str) -> list[list[str]]:
    """Occupants grouped by starting row, top to bottom, each row left to right."""
    rects = occupants(schema, breakpoint)
    rows: dict[int, list[str]] = {}
    for component_id in sort_by_canvas_position(list(rects), schema, breakpoint):
        rows.setdefault(rects[component_id].y, []).append(component_id)
    return [rows[y] for y in sorted(rows)]


# =============================================================================
# Complexity Analysis
# =============================================================================


@dataclass
class GridComplexity:
    """Summary of how two-dimensional a breakpoint's arrangement is.

    Attributes:
        total_components: Number of occupants.
        max_components_per_row: Most occupants sharing any grid row.
        has_side_by_side: Whether any row holds two or more occupants.
        has_overlap: Whether two occupants sharing a row overlap on x.
        recommended_implementation: ``grid`` for 2D arrangements,
            ``flexbox`` for a plain stack.
    """

    total_components: int
    max_components_per_row: int
    has_side_by_side: bool
    has_overlap: bool
    recommended_implementation: Literal["flexbox", "grid"]


def analyze_grid_complexity(schema: Schema, breakpoint: str) -> GridComplexity:
    """Analyze a breakpoint's occupants to recommend grid or flexbox."""
    rects = occupants(schema, breakpoint)
    if not rects:
        return GridComplexity(0, 0, False, False, "flexbox")

    rows: dict[int, list[CanvasRect]] = {}
    for rect in rects.values():
        for y in range(rect.y, rect.bottom):
            rows.setdefault(y, []).append(rect)

    max_per_row = max(len(row) for row in rows.values())
    has_side_by_side = max_per_row > 1
    has_overlap = any(
        r1.x < r2.right and r2.x < r1.right
        for row in rows.values()
        for r1, r2 in combinations(row, 2)
    )
    return GridComplexity(
        total_components=len(rects),
        max_components_per_row=max_per_row,
        has_side_by_side=has_side_by_side,
        has_overlap=has_overlap,
        recommended_implementation="grid" if has_side_by_side or has_overlap else "flexbox",
    )


# =============================================================================
# Occupancy Map
# =============================================================================


def format_occupancy(schema: Schema, breakpoint: str, empty: str = ".") -> str:
    """Format a breakpoint's grid as a text map of which component fills each cell.

    Example output (4x3 grid, header c1 over main c2):
        c1 c1 c1 c1
        c2 c2 .  .
        c2 c2 .  .

    Overlapping cells show ``*``. Cells of rectangles outside the grid are
    not drawn.

    Raises:
        ValueError: If the breakpoint is unknown.
    """
    bp = _require_breakpoint(schema, breakpoint)
    cells: list[list[str]] = [[empty] * bp.grid_cols for _ in range(bp.grid_rows)]

    for component_id, rect in occupants(schema, breakpoint).items():
        for y in range(rect.y, min(rect.bottom, bp.grid_rows)):
            for x in range(rect.x, min(rect.right, bp.grid_cols)):
                cells[y][x] = component_id if cells[y][x] == empty else "*"

    width = max(len(cell) for row in cells for cell in row)
    return "\n".join(
        " ".join(cell.ljust(width) for cell in row).rstrip() for row in cells
    )
