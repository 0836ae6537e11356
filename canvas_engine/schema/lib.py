"""Authoritative schema module for responsive canvas layouts.

This module is the single source of truth for the layout entity graph:
components, breakpoints, per-breakpoint layout configs and cross-breakpoint
component links. It provides:
- Pydantic models with field-level invariants
- A structural invariant checker for schemas mutated after construction
- Factories for default breakpoints, schemas and components

Models carry no layout behavior. Inheritance, placement and resize rules
live in the normalize, placement and constraints modules.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from canvas_engine.grid import CanvasRect, GridSize

SCHEMA_VERSION = "2.0"


class _CamelModel(BaseModel):
    """Base model serializing to the camelCase JSON shape of the store."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Component Vocabularies
# =============================================================================


class SemanticTag(str, Enum):
    """HTML5 element a component renders as."""

    HEADER = "header"
    NAV = "nav"
    MAIN = "main"
    ASIDE = "aside"
    FOOTER = "footer"
    SECTION = "section"
    ARTICLE = "article"
    DIV = "div"
    FORM = "form"


class PositioningType(str, Enum):
    """CSS positioning strategy.

    - STATIC: Normal document flow (default)
    - FIXED: Pinned to the viewport
    - STICKY: Pinned once scrolled to its offset
    - ABSOLUTE: Positioned against the nearest positioned ancestor
    - RELATIVE: Offset from its own flow position
    """

    STATIC = "static"
    FIXED = "fixed"
    STICKY = "sticky"
    ABSOLUTE = "absolute"
    RELATIVE = "relative"


class LayoutType(str, Enum):
    """Internal layout a component applies to its own children."""

    FLEX = "flex"
    GRID = "grid"
    CONTAINER = "container"
    NONE = "none"


class LayoutStructure(str, Enum):
    """Page-level arrangement of a breakpoint's components."""

    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"
    SIDEBAR_MAIN = "sidebar-main"
    SIDEBAR_MAIN_SIDEBAR = "sidebar-main-sidebar"
    CUSTOM = "custom"


class LayoutRole(str, Enum):
    """Special roles a layout may assign to one of its members."""

    HEADER = "header"
    SIDEBAR = "sidebar"
    MAIN = "main"
    FOOTER = "footer"


# =============================================================================
# Component Properties
# =============================================================================


class Positioning(_CamelModel):
    """Positioning strategy with optional offsets."""

    type: PositioningType = PositioningType.STATIC
    top: int | str | None = None
    right: int | str | None = None
    bottom: int | str | None = None
    left: int | str | None = None
    z_index: int | None = None

    def has_offsets(self) -> bool:
        return any(
            v is not None
            for v in (self.top, self.right, self.bottom, self.left, self.z_index)
        )


class FlexConfig(_CamelModel):
    direction: Literal["row", "column", "row-reverse", "column-reverse"] | None = None
    justify: Literal["start", "end", "center", "between", "around", "evenly"] | None = None
    items: Literal["start", "end", "center", "baseline", "stretch"] | None = None
    wrap: Literal["wrap", "nowrap", "wrap-reverse"] | None = None
    gap: int | str | None = None


class GridConfig(_CamelModel):
    cols: int | str | None = None
    rows: int | str | None = None
    gap: int | str | None = None
    auto_flow: Literal["row", "column", "row dense", "column dense"] | None = None


class ContainerConfig(_CamelModel):
    max_width: Literal["sm", "md", "lg", "xl", "2xl", "7xl", "full"] | None = None
    padding: int | str | None = None
    centered: bool = True


class InternalLayout(_CamelModel):
    """Layout a component applies to its own content."""

    type: LayoutType = LayoutType.NONE
    flex: FlexConfig | None = None
    grid: GridConfig | None = None
    container: ContainerConfig | None = None


class Styling(_CamelModel):
    """Visual properties kept separate from layout."""

    width: int | str | None = None
    height: int | str | None = None
    background: str | None = None
    border: str | None = None
    shadow: str | None = None
    class_name: str | None = None


class ResponsiveOverride(_CamelModel):
    """Per-breakpoint behavior override for one component."""

    hidden: bool | None = None
    width_override: str | None = None
    order_override: int | None = None


# =============================================================================
# Entity Graph
# =============================================================================


class Component(_CamelModel):
    """A page component positioned independently at each breakpoint.

    Attributes:
        id: Unique identifier (``c<N>`` when generated).
        name: Component name, PascalCase by convention.
        semantic_role: HTML5 element the component renders as.
        positioning_strategy: CSS positioning and offsets.
        internal_layout: Layout applied to the component's children.
        styling: Optional visual properties.
        responsive_overrides: Breakpoint name to behavior override.
        placements: Breakpoint name to grid rectangle. Missing entries are
            resolved by the normalizer.
        props: Free-form props passed through to code generation.
    """

    id: Annotated[str, Field(min_length=1)]
    name: str
    semantic_role: SemanticTag = SemanticTag.DIV
    positioning_strategy: Positioning = Field(default_factory=Positioning)
    internal_layout: InternalLayout = Field(default_factory=InternalLayout)
    styling: Styling | None = None
    responsive_overrides: dict[str, ResponsiveOverride] = Field(default_factory=dict)
    placements: dict[str, CanvasRect] = Field(default_factory=dict)
    props: dict[str, Any] = Field(default_factory=dict)


class Breakpoint(_CamelModel):
    """Named viewport tier with its own addressable grid."""

    name: Annotated[str, Field(min_length=1)]
    min_width: Annotated[int, Field(ge=0)]
    grid_cols: Annotated[int, Field(ge=1)]
    grid_rows: Annotated[int, Field(ge=1)]

    model_config = ConfigDict(frozen=True)

    @property
    def grid(self) -> GridSize:
        return GridSize(cols=self.grid_cols, rows=self.grid_rows)


class LayoutConfig(_CamelModel):
    """Membership, document order and roles for one breakpoint.

    Attributes:
        structure: Page-level arrangement.
        components: Member component ids in document order.
        roles: Role to member component id.
    """

    structure: LayoutStructure = LayoutStructure.VERTICAL
    components: list[str] = Field(default_factory=list)
    roles: dict[LayoutRole, str] = Field(default_factory=dict)


class ComponentLink(_CamelModel):
    """Unordered pair marking two components as the same logical component."""

    a: Annotated[str, Field(min_length=1)]
    b: Annotated[str, Field(min_length=1)]

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _distinct_endpoints(self) -> "ComponentLink":
        if self.a == self.b:
            raise ValueError(f"Component '{self.a}' cannot be linked to itself")
        return self

    @property
    def key(self) -> frozenset[str]:
        """Order-independent identity of the pair."""
        return frozenset((self.a, self.b))

    def touches(self, component_id: str) -> bool:
        return component_id in (self.a, self.b)


class Schema(_CamelModel):
    """Root layout document.

    ``layouts`` holds exactly one entry per breakpoint; both are always
    replaced together.
    """

    schema_version: Literal["2.0"] = SCHEMA_VERSION
    components: list[Component] = Field(default_factory=list)
    breakpoints: list[Breakpoint] = Field(default_factory=list)
    layouts: dict[str, LayoutConfig] = Field(default_factory=dict)
    links: list[ComponentLink] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_structure(self) -> "Schema":
        issues = check_structure(self)
        if issues:
            raise ValueError("; ".join(issue.message for issue in issues))
        return self

    def ordered_breakpoints(self) -> list[Breakpoint]:
        """Breakpoints by ascending min_width (stable for ties)."""
        return sorted(self.breakpoints, key=lambda bp: bp.min_width)

    def get_breakpoint(self, name: str) -> Breakpoint | None:
        return next((bp for bp in self.breakpoints if bp.name == name), None)

    def get_component(self, component_id: str) -> Component | None:
        return next((c for c in self.components if c.id == component_id), None)

    def component_ids(self) -> list[str]:
        return [c.id for c in self.components]

    def members(self, breakpoint: str) -> list[str]:
        """Member ids of a breakpoint's layout (empty if unknown)."""
        layout = self.layouts.get(breakpoint)
        return list(layout.components) if layout else []


# =============================================================================
# Structural Invariants
# =============================================================================


@dataclass(frozen=True)
class StructuralIssue:
    """A violated structural invariant.

    Attributes:
        code: Machine-readable classification.
        message: Human-readable description.
    """

    code: str
    message: str


def check_structure(schema: Schema) -> list[StructuralIssue]:
    """Check the structural invariants of a schema.

    Checks for:
    - At least one breakpoint
    - Unique breakpoint names and component ids
    - ``layouts`` keyed by exactly the breakpoint names

    Reference integrity (dangling ids) is not structural; see
    ``canvas_engine.validation.validate_references``.

    Args:
        schema: Schema to check.

    Returns:
        List of StructuralIssue. Empty list if structurally valid.
    """
    issues: list[StructuralIssue] = []

    if not schema.breakpoints:
        issues.append(
            StructuralIssue("no_breakpoints", "Schema must have at least one breakpoint")
        )

    names = [bp.name for bp in schema.breakpoints]
    for name in _duplicates(names):
        issues.append(
            StructuralIssue("duplicate_breakpoint", f"Duplicate breakpoint name '{name}'")
        )

    for component_id in _duplicates(schema.component_ids()):
        issues.append(
            StructuralIssue(
                "duplicate_component", f"Duplicate component id '{component_id}'"
            )
        )

    for name in names:
        if name not in schema.layouts:
            issues.append(
                StructuralIssue("missing_layout", f"Breakpoint '{name}' has no layout")
            )
    for name in schema.layouts:
        if name not in names:
            issues.append(
                StructuralIssue(
                    "orphan_layout", f"Layout '{name}' has no matching breakpoint"
                )
            )

    return issues


def _duplicates(values: list[str]) -> list[str]:
    seen: set[str] = set()
    dupes: list[str] = []
    for value in values:
        if value in seen and value not in dupes:
            dupes.append(value)
        seen.add(value)
    return dupes


# =============================================================================
# Factories
# =============================================================================

DEFAULT_GRID_CONFIG: dict[str, GridSize] = {
    "mobile": GridSize(cols=4, rows=8),
    "tablet": GridSize(cols=8, rows=8),
    "desktop": GridSize(cols=12, rows=8),
    "custom": GridSize(cols=6, rows=8),
}

DEFAULT_MIN_WIDTH: dict[str, int] = {
    "mobile": 0,
    "tablet": 768,
    "desktop": 1024,
}


def make_breakpoint(kind: str, name: str | None = None, min_width: int | None = None) -> Breakpoint:
    """Create a breakpoint with the default grid for its kind.

    Unknown kinds get the ``custom`` grid and a min_width of 0 unless one
    is given.
    """
    grid = DEFAULT_GRID_CONFIG.get(kind, DEFAULT_GRID_CONFIG["custom"])
    return Breakpoint(
        name=name or kind,
        min_width=DEFAULT_MIN_WIDTH.get(kind, 0) if min_width is None else min_width,
        grid_cols=grid.cols,
        grid_rows=grid.rows,
    )


def create_empty_schema() -> Schema:
    """Create an empty schema with mobile, tablet and desktop breakpoints."""
    breakpoints = [make_breakpoint(kind) for kind in ("mobile", "tablet", "desktop")]
    return Schema(
        breakpoints=breakpoints,
        layouts={bp.name: LayoutConfig() for bp in breakpoints},
    )


def create_schema_with_breakpoint(kind: Literal["mobile", "tablet", "desktop"]) -> Schema:
    """Create an empty schema holding a single breakpoint."""
    breakpoint = make_breakpoint(kind)
    return Schema(breakpoints=[breakpoint], layouts={breakpoint.name: LayoutConfig()})


_GENERATED_ID = re.compile(r"^c(\d+)$")


def generate_component_id(components: list[Component]) -> str:
    """Generate the next ``c<N>`` id.

    Args:
        components: Existing components.

    Returns:
        ``c`` followed by one more than the largest generated number in use.
    """
    highest = 0
    for component in components:
        match = _GENERATED_ID.match(component.id)
        if match:
            highest = max(highest, int(match.group(1)))
    return f"c{highest + 1}"


_DEFAULT_PROPERTIES: dict[SemanticTag, dict[str, Any]] = {
    SemanticTag.HEADER: {
        "name": "Header",
        "positioning_strategy": Positioning(type=PositioningType.STICKY, top=0, z_index=50),
        "internal_layout": InternalLayout(
            type=LayoutType.CONTAINER,
            container=ContainerConfig(max_width="full", padding="1rem"),
        ),
        "styling": Styling(background="white", border="b", shadow="sm"),
    },
    SemanticTag.NAV: {
        "name": "Sidebar",
        "positioning_strategy": Positioning(
            type=PositioningType.STICKY, top="4rem", z_index=40
        ),
        "internal_layout": InternalLayout(
            type=LayoutType.FLEX, flex=FlexConfig(direction="column", gap="1rem")
        ),
        "styling": Styling(width="16rem", background="gray-50", border="r"),
    },
    SemanticTag.MAIN: {
        "name": "Main",
        "internal_layout": InternalLayout(
            type=LayoutType.CONTAINER,
            container=ContainerConfig(max_width="7xl", padding="2rem"),
        ),
        "styling": Styling(class_name="flex-1"),
    },
    SemanticTag.ASIDE: {
        "name": "Aside",
        "internal_layout": InternalLayout(
            type=LayoutType.FLEX, flex=FlexConfig(direction="column", gap="1rem")
        ),
        "styling": Styling(width="16rem", background="gray-50"),
    },
    SemanticTag.FOOTER: {
        "name": "Footer",
        "internal_layout": InternalLayout(
            type=LayoutType.CONTAINER,
            container=ContainerConfig(max_width="full", padding="2rem"),
        ),
        "styling": Styling(background="gray-100", border="t"),
    },
    SemanticTag.SECTION: {
        "name": "Section",
        "internal_layout": InternalLayout(
            type=LayoutType.CONTAINER,
            container=ContainerConfig(max_width="7xl", padding="2rem"),
        ),
    },
    SemanticTag.ARTICLE: {
        "name": "Article",
        "internal_layout": InternalLayout(
            type=LayoutType.FLEX, flex=FlexConfig(direction="column", gap="1rem")
        ),
    },
    SemanticTag.DIV: {
        "name": "Container",
        "internal_layout": InternalLayout(
            type=LayoutType.FLEX, flex=FlexConfig(direction="column")
        ),
    },
    SemanticTag.FORM: {
        "name": "Form",
        "internal_layout": InternalLayout(
            type=LayoutType.FLEX, flex=FlexConfig(direction="column", gap="1.5rem")
        ),
        "styling": Styling(class_name="max-w-md p-6 bg-white rounded-lg shadow"),
    },
}


def default_component(tag: SemanticTag, component_id: str) -> Component:
    """Create a component with the default properties for a semantic tag.

    Args:
        tag: Semantic tag of the new component.
        component_id: Id to assign.

    Returns:
        Component without placements.
    """
    properties = {
        key: value.model_copy(deep=True) if isinstance(value, BaseModel) else value
        for key, value in _DEFAULT_PROPERTIES[SemanticTag(tag)].items()
    }
    return Component(id=component_id, semantic_role=SemanticTag(tag), **properties)


def clone_schema(schema: Schema) -> Schema:
    """Deep copy a schema without re-running validation."""
    return schema.model_copy(deep=True)


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
