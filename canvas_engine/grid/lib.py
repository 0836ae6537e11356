"""Grid arithmetic over axis-aligned integer rectangles.

Every function here is pure. Rectangles are half-open on their far
edges: a rectangle at ``x`` with ``width`` covers columns ``x`` through
``x + width - 1``, so two rectangles that merely share an edge do not
overlap.
"""

from dataclasses import dataclass
from typing import Annotated, Iterable

from pydantic import BaseModel, ConfigDict, Field

# Floor returned for an empty canvas so it still renders a usable grid
EMPTY_GRID_FLOOR = 2


class CanvasRect(BaseModel):
    """Grid-aligned rectangle for one breakpoint.

    Attributes:
        x: Starting column (0-based).
        y: Starting row (0-based).
        width: Column span.
        height: Row span.
    """

    x: Annotated[int, Field(ge=0)]
    y: Annotated[int, Field(ge=0)]
    width: Annotated[int, Field(ge=1)]
    height: Annotated[int, Field(ge=1)]

    model_config = ConfigDict(frozen=True)

    @property
    def right(self) -> int:
        """Exclusive right edge column."""
        return self.x + self.width

    @property
    def bottom(self) -> int:
        """Exclusive bottom edge row."""
        return self.y + self.height

    def __str__(self) -> str:
        return f"({self.x}, {self.y}) {self.width}x{self.height}"


@dataclass(frozen=True)
class GridSize:
    """Addressable cols x rows space of one breakpoint."""

    cols: int
    rows: int

    def __str__(self) -> str:
        return f"{self.cols}x{self.rows}"


def contains(grid: GridSize, rect: CanvasRect) -> bool:
    """Check that a rectangle lies fully inside the grid.

    Args:
        grid: Grid to test against.
        rect: Rectangle to test.

    Returns:
        True if every cell of ``rect`` is addressable in ``grid``.
    """
    return (
        rect.x >= 0
        and rect.y >= 0
        and rect.x + rect.width <= grid.cols
        and rect.y + rect.height <= grid.rows
    )


def overlaps(r1: CanvasRect, r2: CanvasRect) -> bool:
    """Check whether two rectangles share at least one cell.

    Edge-adjacent rectangles (``r1.x + r1.width == r2.x``) do not overlap.
    """
    return (
        r1.x < r2.x + r2.width
        and r1.x + r1.width > r2.x
        and r1.y < r2.y + r2.height
        and r1.y + r1.height > r2.y
    )


def minimum_bounds(rects: Iterable[CanvasRect]) -> GridSize:
    """Compute the smallest grid holding every rectangle.

    Args:
        rects: Rectangles to bound.

    Returns:
        GridSize of the furthest right/bottom edges, or a 2x2 floor when
        no rectangles are given.

    Example:
        >>> minimum_bounds([CanvasRect(x=0, y=7, width=12, height=1)])
        GridSize(cols=12, rows=8)
    """
    rect_list = list(rects)
    if not rect_list:
        return GridSize(cols=EMPTY_GRID_FLOOR, rows=EMPTY_GRID_FLOOR)

    return GridSize(
        cols=max(r.x + r.width for r in rect_list),
        rows=max(r.y + r.height for r in rect_list),
    )


def clamp_to_grid(rect: CanvasRect, grid: GridSize) -> CanvasRect:
    """Shrink and shift a rectangle until it fits the grid.

    Size is capped first, then the origin is pulled back so the far
    edges land inside the grid. A rectangle that already fits is
    returned unchanged.
    """
    width = min(rect.width, grid.cols)
    height = min(rect.height, grid.rows)
    x = max(0, min(rect.x, grid.cols - width))
    y = max(0, min(rect.y, grid.rows - height))

    if (x, y, width, height) == (rect.x, rect.y, rect.width, rect.height):
        return rect
    return CanvasRect(x=x, y=y, width=width, height=height)


__all__ = [
    "CanvasRect",
    "GridSize",
    "EMPTY_GRID_FLOOR",
    "contains",
    "overlaps",
    "minimum_bounds",
    "clamp_to_grid",
]
