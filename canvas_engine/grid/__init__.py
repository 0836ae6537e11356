"""Grid arithmetic: containment, overlap and bounding of grid rectangles."""

from .lib import (
    EMPTY_GRID_FLOOR,
    CanvasRect,
    GridSize,
    clamp_to_grid,
    contains,
    minimum_bounds,
    overlaps,
)

__all__ = [
    "CanvasRect",
    "GridSize",
    "EMPTY_GRID_FLOOR",
    "contains",
    "overlaps",
    "minimum_bounds",
    "clamp_to_grid",
]
