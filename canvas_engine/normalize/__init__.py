"""Breakpoint inheritance normalizer.

Example usage:
    >>> from canvas_engine.normalize import normalize, effective_placement
    >>> normalized = normalize(schema)
    >>> effective_placement(normalized, "c1", "desktop")
"""

from .lib import effective_placement, normalize, occupants

__all__ = [
    "normalize",
    "effective_placement",
    "occupants",
]
