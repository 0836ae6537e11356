"""Grid resize constraints and shrink-to-fit suggestions.

Example usage:
    >>> from canvas_engine.constraints import can_resize
    >>> check = can_resize(schema, "desktop", new_cols=10, new_rows=8)
    >>> if not check:
    ...     print(check.minimum_required, [a.component_id for a in check.affected])
"""

from .lib import (
    AffectedComponent,
    CompactionSuggestion,
    ResizeCheck,
    affected_component_ids,
    can_resize,
    is_out_of_bounds,
    minimum_grid_size,
    out_of_bounds_components,
    suggest_compaction,
)

__all__ = [
    "AffectedComponent",
    "ResizeCheck",
    "CompactionSuggestion",
    "can_resize",
    "suggest_compaction",
    "minimum_grid_size",
    "is_out_of_bounds",
    "out_of_bounds_components",
    "affected_component_ids",
]
