"""Placement validation for move, resize and drop proposals.

Example usage:
    >>> from canvas_engine.placement import try_place
    >>> result = try_place(schema, "desktop", "c2", rect)
    >>> if not result:
    ...     print(result.reason, result.colliding_id)
"""

from .lib import (
    PlacementResult,
    RejectionReason,
    propose_drop,
    propose_move,
    propose_resize,
    try_place,
)

__all__ = [
    "PlacementResult",
    "RejectionReason",
    "try_place",
    "propose_move",
    "propose_resize",
    "propose_drop",
]
