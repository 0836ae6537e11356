"""Gated schema export and read-only layout views.

Example usage:
    >>> from canvas_engine.export import export_schema, grid_positions
    >>> data = export_schema(schema)  # raises ExportBlockedError on dangling ids
    >>> [p.grid_area for p in grid_positions(schema, "desktop").positions]
"""

from .lib import (
    ExportBlockedError,
    GridComplexity,
    GridPosition,
    VisualLayout,
    analyze_grid_complexity,
    export_schema,
    format_occupancy,
    grid_positions,
    group_by_row,
    sort_by_canvas_position,
)

__all__ = [
    "ExportBlockedError",
    "export_schema",
    "GridPosition",
    "VisualLayout",
    "grid_positions",
    "sort_by_canvas_position",
    "group_by_row",
    "GridComplexity",
    "analyze_grid_complexity",
    "format_occupancy",
]
