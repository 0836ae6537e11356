"""Schema model: components, breakpoints, layouts and links.

Example usage:
    >>> from canvas_engine.schema import create_empty_schema, default_component
    >>> schema = create_empty_schema()
    >>> [bp.name for bp in schema.ordered_breakpoints()]
    ['mobile', 'tablet', 'desktop']
"""

from .lib import (
    DEFAULT_GRID_CONFIG,
    DEFAULT_MIN_WIDTH,
    SCHEMA_VERSION,
    Breakpoint,
    Component,
    ComponentLink,
    ContainerConfig,
    FlexConfig,
    GridConfig,
    InternalLayout,
    LayoutConfig,
    LayoutRole,
    LayoutStructure,
    LayoutType,
    Positioning,
    PositioningType,
    ResponsiveOverride,
    Schema,
    SemanticTag,
    StructuralIssue,
    Styling,
    check_structure,
    clone_schema,
    create_empty_schema,
    create_schema_with_breakpoint,
    default_component,
    generate_component_id,
    make_breakpoint,
)

__all__ = [
    "SCHEMA_VERSION",
    # Vocabularies
    "SemanticTag",
    "PositioningType",
    "LayoutType",
    "LayoutStructure",
    "LayoutRole",
    # Component properties
    "Positioning",
    "FlexConfig",
    "GridConfig",
    "ContainerConfig",
    "InternalLayout",
    "Styling",
    "ResponsiveOverride",
    # Entity graph
    "Component",
    "Breakpoint",
    "LayoutConfig",
    "ComponentLink",
    "Schema",
    # Invariants
    "StructuralIssue",
    "check_structure",
    # Factories
    "DEFAULT_GRID_CONFIG",
    "DEFAULT_MIN_WIDTH",
    "make_breakpoint",
    "create_empty_schema",
    "create_schema_with_breakpoint",
    "generate_component_id",
    "default_component",
    "clone_schema",
]
