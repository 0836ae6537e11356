"""Breakpoint inheritance normalizer.

Breakpoints are walked in ascending min_width order. A component keeps its
explicit placement where it has one; elsewhere it inherits the rectangle of
the nearest earlier breakpoint, clamped into the current grid. A component
with no earlier placement is simply absent at that breakpoint.
"""

import logging
from collections.abc import Iterator

from canvas_engine.grid import CanvasRect, clamp_to_grid
from canvas_engine.schema import Breakpoint, Component, Schema, clone_schema

logger = logging.getLogger(__name__)


def _cascade(
    component: Component, ordered: list[Breakpoint]
) -> Iterator[tuple[Breakpoint, CanvasRect | None, bool]]:
    """Yield (breakpoint, effective rect, is_explicit) in cascade order."""
    previous: CanvasRect | None = None
    for breakpoint in ordered:
        explicit = component.placements.get(breakpoint.name)
        if explicit is not None:
            previous = explicit
            yield breakpoint, explicit, True
        elif previous is not None:
            previous = clamp_to_grid(previous, breakpoint.grid)
            yield breakpoint, previous, False
        else:
            yield breakpoint, None, False


def normalize(schema: Schema) -> Schema:
    """Resolve every component's placement and membership at every breakpoint.

    The input is not modified. The result is idempotent under a second
    call, and normalization never fails on a structurally valid schema.

    Besides the cascade itself, placement and override entries keyed by a
    breakpoint name that no longer exists are dropped.

    Args:
        schema: Schema to normalize.

    Returns:
        New normalized schema.
    """
    result = clone_schema(schema)
    ordered = result.ordered_breakpoints()
    known = {bp.name for bp in ordered}

    for component in result.components:
        stale = [name for name in component.placements if name not in known]
        stale += [name for name in component.responsive_overrides if name not in known]
        for name in stale:
            component.placements.pop(name, None)
            component.responsive_overrides.pop(name, None)
        if stale:
            logger.debug("Purged stale breakpoint data %s from '%s'", stale, component.id)

        for breakpoint, rect, explicit in _cascade(component, ordered):
            if rect is None:
                continue
            if not explicit:
                component.placements[breakpoint.name] = rect
                logger.debug(
                    "Component '%s' inherits %s at '%s'", component.id, rect, breakpoint.name
                )
            members = result.layouts[breakpoint.name].components
            if component.id not in members:
                members.append(component.id)

    return result


def effective_placement(
    schema: Schema, component_id: str, breakpoint: str
) -> CanvasRect | None:
    """Explicit-or-inherited rectangle of a component at a breakpoint.

    Computed lazily with the same cascade as ``normalize``, so the schema
    does not need to be normalized first.

    Returns:
        The rectangle, or None if the component or breakpoint is unknown or
        the component has no placement at or before that breakpoint.
    """
    component = schema.get_component(component_id)
    if component is None:
        return None
    for bp, rect, _ in _cascade(component, schema.ordered_breakpoints()):
        if bp.name == breakpoint:
            return rect
    return None


def occupants(schema: Schema, breakpoint: str) -> dict[str, CanvasRect]:
    """Components occupying a breakpoint, mapped to their effective rects.

    Members come first in layout order; components that normalization would
    add follow in schema order.
    """
    if schema.get_breakpoint(breakpoint) is None:
        return {}
    candidates = schema.members(breakpoint) + schema.component_ids()
    found: dict[str, CanvasRect] = {}
    for component_id in candidates:
        if component_id in found:
            continue
        rect = effective_placement(schema, component_id, breakpoint)
        if rect is not None:
            found[component_id] = rect
    return found
