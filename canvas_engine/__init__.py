"""responsive-canvas: multi-breakpoint grid layout engine."""

from canvas_engine.constraints import ResizeCheck, can_resize, suggest_compaction
from canvas_engine.editor import EditorError, LayoutEditor
from canvas_engine.export import ExportBlockedError, export_schema
from canvas_engine.grid import CanvasRect, GridSize, contains, minimum_bounds, overlaps
from canvas_engine.links import add_link, groups_of, remove_link
from canvas_engine.normalize import effective_placement, normalize
from canvas_engine.placement import PlacementResult, RejectionReason, try_place
from canvas_engine.schema import (
    Breakpoint,
    Component,
    ComponentLink,
    LayoutConfig,
    Schema,
)
from canvas_engine.validation import SchemaReferenceError, validate_references

__all__ = [
    # Grid arithmetic
    "CanvasRect",
    "GridSize",
    "contains",
    "overlaps",
    "minimum_bounds",
    # Schema
    "Schema",
    "Breakpoint",
    "Component",
    "ComponentLink",
    "LayoutConfig",
    # Engine
    "normalize",
    "effective_placement",
    "try_place",
    "PlacementResult",
    "RejectionReason",
    "can_resize",
    "suggest_compaction",
    "ResizeCheck",
    "add_link",
    "remove_link",
    "groups_of",
    # Validation and export
    "validate_references",
    "SchemaReferenceError",
    "export_schema",
    "ExportBlockedError",
    # Editor
    "LayoutEditor",
    "EditorError",
]
