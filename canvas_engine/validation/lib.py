"""Schema reference checks and full schema validation.

``validate_references`` is the hard gate run before a schema is exported:
any SchemaReferenceError must block export. ``validate_schema`` adds
structural errors and advisory warnings for editors and the CLI.
"""

from dataclasses import dataclass, field
from itertools import combinations

from canvas_engine.grid import contains, overlaps
from canvas_engine.normalize import occupants
from canvas_engine.schema import (
    Component,
    LayoutRole,
    LayoutStructure,
    LayoutType,
    PositioningType,
    Schema,
    SemanticTag,
    check_structure,
)


@dataclass
class SchemaReferenceError:
    """A schema id that does not resolve.

    Attributes:
        error_type: Category of the error.
        message: Human-readable error description.
        breakpoint: Layout the reference was found in, if any.
        component_id: The unresolved or misplaced id.
    """

    error_type: str
    message: str
    breakpoint: str | None = None
    component_id: str | None = None


@dataclass
class ValidationIssue:
    """A validation error or warning.

    Attributes:
        code: Machine-readable classification.
        message: Human-readable description.
        field: Dotted path of the offending field, if any.
        component_id: Component concerned, if any.
    """

    code: str
    message: str
    field: str | None = None
    component_id: str | None = None


@dataclass
class ValidationResult:
    """Errors and warnings from validate_schema."""

    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def __bool__(self) -> bool:
        return self.valid


def validate_references(schema: Schema) -> list[SchemaReferenceError]:
    """Find every id in the schema that does not resolve.

    Performs the following checks:
        - Every layout member is a live component
        - Every role target is a member of its layout
        - Every link endpoint is a live component

    Args:
        schema: Schema to check.

    Returns:
        list[SchemaReferenceError]: Errors found (empty if every id resolves).

    Example:
        >>> errors = validate_references(schema)
        >>> if errors:
        ...     raise ExportBlockedError(errors)
    """
    errors: list[SchemaReferenceError] = []
    live = set(schema.component_ids())

    for name, layout in schema.layouts.items():
        for component_id in layout.components:
            if component_id not in live:
                errors.append(
                    SchemaReferenceError(
                        error_type="unknown_component",
                        message=f"Layout '{name}' references unknown component '{component_id}'",
                        breakpoint=name,
                        component_id=component_id,
                    )
                )
        for role, component_id in layout.roles.items():
            if component_id not in layout.components:
                errors.append(
                    SchemaReferenceError(
                        error_type="role_not_member",
                        message=(
                            f"Role '{LayoutRole(role).value}' in layout '{name}' names "
                            f"'{component_id}', which is not a member"
                        ),
                        breakpoint=name,
                        component_id=component_id,
                    )
                )

    for link in schema.links:
        for endpoint in (link.a, link.b):
            if endpoint not in live:
                errors.append(
                    SchemaReferenceError(
                        error_type="unknown_link_endpoint",
                        message=f"Link {link.a} <-> {link.b} names unknown component '{endpoint}'",
                        component_id=endpoint,
                    )
                )

    return errors


def validate_schema(schema: Schema) -> ValidationResult:
    """Validate a schema for structural errors and layout warnings.

    Errors (export is blocked):
        - Structural invariants (duplicate ids or names, layouts not matching
          breakpoints, no breakpoints)
        - Every validate_references finding

    Warnings (advisory):
        - Breakpoints not listed by ascending min_width
        - Empty layouts, sidebar structures missing their roles
        - Placements outside their grid, overlapping occupants
        - Document order differing from canvas order
        - Placed components that belong to no layout
        - Data keyed by unknown breakpoints
        - Semantic tag advice

    Args:
        schema: Schema to validate (normalized or not).

    Returns:
        ValidationResult with errors and warnings.
    """
    result = ValidationResult()

    for issue in check_structure(schema):
        result.errors.append(ValidationIssue(issue.code, issue.message))
    for ref in validate_references(schema):
        layout_field = f"layouts.{ref.breakpoint}" if ref.breakpoint else "links"
        result.errors.append(
            ValidationIssue(ref.error_type, ref.message, layout_field, ref.component_id)
        )

    result.warnings.extend(_breakpoint_warnings(schema))
    result.warnings.extend(_layout_warnings(schema))
    result.warnings.extend(_spatial_warnings(schema))
    result.warnings.extend(_component_warnings(schema))
    return result


def _breakpoint_warnings(schema: Schema) -> list[ValidationIssue]:
    widths = [bp.min_width for bp in schema.breakpoints]
    if widths != sorted(widths):
        return [
            ValidationIssue(
                "unsorted_breakpoints",
                "Breakpoints are not listed by ascending minWidth",
                "breakpoints",
            )
        ]
    return []


def _layout_warnings(schema: Schema) -> list[ValidationIssue]:
    warnings: list[ValidationIssue] = []
    for name, layout in schema.layouts.items():
        if schema.components and not layout.components:
            warnings.append(
                ValidationIssue("empty_layout", f"Layout '{name}' has no components", f"layouts.{name}")
            )
        if layout.structure in (LayoutStructure.SIDEBAR_MAIN, LayoutStructure.SIDEBAR_MAIN_SIDEBAR):
            missing = [
                role.value
                for role in (LayoutRole.SIDEBAR, LayoutRole.MAIN)
                if role not in layout.roles
            ]
            if missing:
                warnings.append(
                    ValidationIssue(
                        "missing_roles",
                        f"Layout '{name}' uses {layout.structure.value} without "
                        f"{' and '.join(missing)} role",
                        f"layouts.{name}.roles",
                    )
                )
    return warnings


def _spatial_warnings(schema: Schema) -> list[ValidationIssue]:
    warnings: list[ValidationIssue] = []
    for bp in schema.ordered_breakpoints():
        rects = occupants(schema, bp.name)

        for component_id, rect in rects.items():
            if not contains(bp.grid, rect):
                warnings.append(
                    ValidationIssue(
                        "out_of_bounds",
                        f"'{component_id}' at {rect} exceeds the {bp.grid} grid of '{bp.name}'",
                        f"components.{component_id}.placements.{bp.name}",
                        component_id,
                    )
                )

        for (first, r1), (second, r2) in combinations(rects.items(), 2):
            if overlaps(r1, r2):
                warnings.append(
                    ValidationIssue(
                        "overlap",
                        f"'{first}' and '{second}' overlap at '{bp.name}'",
                        f"layouts.{bp.name}",
                        first,
                    )
                )

        dom_order = [cid for cid in schema.members(bp.name) if cid in rects]
        canvas_order = sorted(dom_order, key=lambda cid: (rects[cid].y, rects[cid].x))
        if dom_order != canvas_order:
            warnings.append(
                ValidationIssue(
                    "dom_order",
                    f"Document order of '{bp.name}' differs from canvas order "
                    f"({', '.join(canvas_order)})",
                    f"layouts.{bp.name}.components",
                )
            )
    return warnings


def _component_warnings(schema: Schema) -> list[ValidationIssue]:
    warnings: list[ValidationIssue] = []
    known = {bp.name for bp in schema.breakpoints}
    members = {cid for layout in schema.layouts.values() for cid in layout.components}

    for component in schema.components:
        if component.placements and component.id not in members:
            warnings.append(
                ValidationIssue(
                    "not_in_layout",
                    f"'{component.id}' is placed but belongs to no layout",
                    f"components.{component.id}",
                    component.id,
                )
            )

        for kind, keys in (
            ("placements", component.placements),
            ("responsiveOverrides", component.responsive_overrides),
        ):
            for name in keys:
                if name not in known:
                    warnings.append(
                        ValidationIssue(
                            "unknown_breakpoint",
                            f"'{component.id}' has {kind} for unknown breakpoint '{name}'",
                            f"components.{component.id}.{kind}.{name}",
                            component.id,
                        )
                    )

        advice = _semantic_advice(component)
        if advice:
            warnings.append(
                ValidationIssue("semantic", advice, f"components.{component.id}", component.id)
            )

    return warnings


def _semantic_advice(component: Component) -> str | None:
    tag = component.semantic_role
    strategy = component.positioning_strategy.type
    if tag == SemanticTag.HEADER and strategy not in (PositioningType.FIXED, PositioningType.STICKY):
        return f"Header '{component.id}' is usually fixed or sticky"
    if tag == SemanticTag.FOOTER and strategy != PositioningType.STATIC:
        return f"Footer '{component.id}' is usually static"
    if tag == SemanticTag.NAV and component.internal_layout.type != LayoutType.FLEX:
        return f"Nav '{component.id}' usually lays out its links with flex"
    return None


def format_validation_result(result: ValidationResult) -> str:
    """Render a validation result as a plain-text report.

    Example:
        >>> print(format_validation_result(validate_schema(schema)))
        Schema is valid (1 warning)
          warning [dom_order] Document order of 'mobile' differs ...
    """
    if result.valid:
        headline = "Schema is valid"
    else:
        headline = f"Schema has {len(result.errors)} error(s)"
    if result.warnings:
        plural = "" if len(result.warnings) == 1 else "s"
        headline += f" ({len(result.warnings)} warning{plural})"

    lines = [headline]
    for label, issues in (("error", result.errors), ("warning", result.warnings)):
        for issue in issues:
            lines.append(f"  {label} [{issue.code}] {issue.message}")
    return "\n".join(lines)
