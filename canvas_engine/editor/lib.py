"""Layout editor for responsive canvas schemas.

Owns one schema snapshot and applies every mutation the same way: copy the
snapshot, change the copy, normalize it and swap it in. Placement and grid
checks run before the copy is committed, so a refused gesture leaves the
snapshot untouched.
"""

import logging
from typing import Any

from canvas_engine.config import get_grid_limits
from canvas_engine.constraints import ResizeCheck, can_resize, minimum_grid_size
from canvas_engine.grid import CanvasRect
from canvas_engine.links import add_link, groups_of, purge_links, remove_link
from canvas_engine.normalize import normalize
from canvas_engine.placement import (
    PlacementResult,
    propose_drop,
    propose_move,
    propose_resize,
    try_place,
)
from canvas_engine.schema import (
    DEFAULT_GRID_CONFIG,
    Breakpoint,
    Component,
    LayoutConfig,
    LayoutRole,
    LayoutStructure,
    Schema,
    SemanticTag,
    clone_schema,
    create_empty_schema,
    default_component,
    generate_component_id,
)

logger = logging.getLogger(__name__)


class EditorError(ValueError):
    """Editor called with ids or arguments that cannot apply to the schema."""


class LayoutEditor:
    """Single owner of a live layout schema.

    Provides a high-level interface for:
    - Component insertion, movement, resizing, duplication and deletion
    - Breakpoint management and grid resizing
    - Layout order, structure and roles
    - Cross-breakpoint links

    User gestures that the layout rules refuse (collisions, unsafe grid
    shrinks, deleting the last breakpoint) return a falsy result. Ids that
    do not exist raise EditorError.

    Every mutation builds a new normalized snapshot and swaps it in. A
    snapshot read from ``schema`` is never changed by the editor afterwards;
    callers must not modify it either.

    Example:
        >>> editor = LayoutEditor()
        >>> header = editor.add_component(SemanticTag.HEADER, CanvasRect(x=0, y=0, width=4, height=1))
        >>> editor.set_current_breakpoint("desktop")
        >>> editor.resize_component(header, width=12, height=1)
    """

    def __init__(
        self,
        schema: Schema | None = None,
        current_breakpoint: str | None = None,
    ):
        """Initialize the editor.

        Args:
            schema: Starting schema. Defaults to an empty mobile, tablet and
                desktop schema.
            current_breakpoint: Active breakpoint. Defaults to the one with
                the smallest min_width.
        """
        self._schema = normalize(schema if schema is not None else create_empty_schema())
        self._current_breakpoint = self._schema.ordered_breakpoints()[0].name
        self._selected_component_id: str | None = None
        if current_breakpoint is not None:
            self.set_current_breakpoint(current_breakpoint)

    @property
    def schema(self) -> Schema:
        """Current snapshot. Treat as read-only; use export_schema for a copy."""
        return self._schema

    @property
    def current_breakpoint(self) -> str:
        return self._current_breakpoint

    @property
    def selected_component_id(self) -> str | None:
        return self._selected_component_id

    def set_current_breakpoint(self, name: str) -> None:
        self._require_breakpoint(self._schema, name)
        self._current_breakpoint = name

    def select_component(self, component_id: str | None) -> None:
        if component_id is not None:
            self._require_component(self._schema, component_id)
        self._selected_component_id = component_id

    # =========================================================================
    # Internal Helpers
    # =========================================================================

    def _draft(self) -> Schema:
        return clone_schema(self._schema)

    def _commit(self, draft: Schema) -> None:
        self._schema = normalize(draft)

    def _resolve(self, breakpoint: str | None) -> str:
        name = breakpoint or self._current_breakpoint
        self._require_breakpoint(self._schema, name)
        return name

    @staticmethod
    def _require_breakpoint(schema: Schema, name: str) -> Breakpoint:
        bp = schema.get_breakpoint(name)
        if bp is None:
            raise EditorError(f"Unknown breakpoint '{name}'")
        return bp

    @staticmethod
    def _require_component(schema: Schema, component_id: str) -> Component:
        component = schema.get_component(component_id)
        if component is None:
            raise EditorError(f"Unknown component '{component_id}'")
        return component

    def _write_placement(self, result: PlacementResult, component_id: str, breakpoint: str) -> None:
        draft = self._draft()
        self._require_component(draft, component_id).placements[breakpoint] = result.rect
        self._commit(draft)

    # =========================================================================
    # Components
    # =========================================================================

    def add_component(
        self,
        tag_or_props: SemanticTag | str | dict[str, Any] = SemanticTag.DIV,
        rect: CanvasRect | None = None,
    ) -> str | None:
        """Insert a new component at the current breakpoint.

        Args:
            tag_or_props: Semantic tag for a default component, or a dict of
                component fields (snake_case) applied over the defaults of
                its ``semantic_role``.
            rect: Drop rectangle. Clamped into the grid and checked for
                collisions. Without one the component joins the layout
                unplaced.

        Returns:
            The new component id, or None if the drop was rejected.
        """
        draft = self._draft()
        component_id = generate_component_id(draft.components)

        if isinstance(tag_or_props, dict):
            props = dict(tag_or_props)
            props.pop("id", None)
            props.pop("placements", None)
            base = default_component(props.get("semantic_role", SemanticTag.DIV), component_id)
            component = Component.model_validate({**base.model_dump(), **props})
        else:
            component = default_component(SemanticTag(tag_or_props), component_id)

        draft.components.append(component)
        breakpoint = self._current_breakpoint

        if rect is not None:
            result = propose_drop(
                draft, breakpoint, component_id, rect.x, rect.y, rect.width, rect.height
            )
            if not result:
                logger.info(f"Drop of new {component.semantic_role.value} refused: {result.message}")
                return None
            component.placements[breakpoint] = result.rect

        draft.layouts[breakpoint].components.append(component_id)
        self._commit(draft)
        self._selected_component_id = component_id
        logger.debug(f"Added component {component_id} at '{breakpoint}'")
        return component_id

    def update_component(self, component_id: str, **changes: Any) -> Component:
        """Edit component properties other than id and placements.

        Raises:
            EditorError: If the component is unknown or a change targets id
                or placements.
        """
        forbidden = {"id", "placements"} & set(changes)
        if forbidden:
            raise EditorError(f"Cannot update {', '.join(sorted(forbidden))} directly")

        draft = self._draft()
        current = self._require_component(draft, component_id)
        updated = Component.model_validate({**current.model_dump(), **changes})
        index = draft.components.index(current)
        draft.components[index] = updated
        self._commit(draft)
        return updated

    def place_component(
        self, component_id: str, rect: CanvasRect, breakpoint: str | None = None
    ) -> PlacementResult:
        """Set a component's rectangle at a breakpoint if the placement is accepted."""
        name = self._resolve(breakpoint)
        self._require_component(self._schema, component_id)
        result = try_place(self._schema, name, component_id, rect)
        if result:
            self._write_placement(result, component_id, name)
        return result

    def move_component(
        self, component_id: str, x: int, y: int, breakpoint: str | None = None
    ) -> PlacementResult:
        """Move a component, keeping its size, if the new position is accepted."""
        name = self._resolve(breakpoint)
        self._require_component(self._schema, component_id)
        result = propose_move(self._schema, name, component_id, x, y)
        if result:
            self._write_placement(result, component_id, name)
        return result

    def resize_component(
        self, component_id: str, width: int, height: int, breakpoint: str | None = None
    ) -> PlacementResult:
        """Resize a component, keeping its origin, if the new size is accepted."""
        name = self._resolve(breakpoint)
        self._require_component(self._schema, component_id)
        result = propose_resize(self._schema, name, component_id, width, height)
        if result:
            self._write_placement(result, component_id, name)
        return result

    def duplicate_component(self, component_id: str) -> str:
        """Copy a component's properties under a new id.

        The copy is named ``"<name> Copy"`` and joins the current
        breakpoint's layout without a placement.

        Returns:
            The new component id.
        """
        draft = self._draft()
        source = self._require_component(draft, component_id)
        new_id = generate_component_id(draft.components)
        copy = source.model_copy(
            deep=True,
            update={"id": new_id, "name": f"{source.name} Copy", "placements": {}},
        )
        draft.components.append(copy)
        draft.layouts[self._current_breakpoint].components.append(new_id)
        self._commit(draft)
        self._selected_component_id = new_id
        return new_id

    def delete_component(self, component_id: str) -> None:
        """Delete a component and every layout member, role and link naming it."""
        draft = self._draft()
        self._require_component(draft, component_id)
        draft.components = [c for c in draft.components if c.id != component_id]
        for layout in draft.layouts.values():
            layout.components = [cid for cid in layout.components if cid != component_id]
            layout.roles = {
                role: cid for role, cid in layout.roles.items() if cid != component_id
            }
        draft.links = purge_links(draft.links, component_id)
        self._commit(draft)
        if self._selected_component_id == component_id:
            self._selected_component_id = None
        logger.debug(f"Deleted component {component_id}")

    # =========================================================================
    # Breakpoints
    # =========================================================================

    def add_breakpoint(
        self,
        name: str,
        min_width: int,
        grid_cols: int | None = None,
        grid_rows: int | None = None,
    ) -> bool:
        """Add a breakpoint; components inherit into it from earlier ones.

        The grid defaults to the standard size for ``name`` when it is one
        of mobile, tablet or desktop, otherwise to the custom size.

        Returns:
            True if added, False if the name exists or the grid is outside
            the configured limits.
        """
        if self._schema.get_breakpoint(name) is not None:
            logger.warning(f"Breakpoint '{name}' already exists")
            return False

        default = DEFAULT_GRID_CONFIG.get(name, DEFAULT_GRID_CONFIG["custom"])
        cols = default.cols if grid_cols is None else grid_cols
        rows = default.rows if grid_rows is None else grid_rows
        limits = get_grid_limits()
        if not limits.allows(cols, rows):
            logger.warning(f"Grid {cols}x{rows} for '{name}' is outside the allowed limits")
            return False

        draft = self._draft()
        draft.breakpoints.append(
            Breakpoint(name=name, min_width=min_width, grid_cols=cols, grid_rows=rows)
        )
        draft.breakpoints.sort(key=lambda bp: bp.min_width)
        draft.layouts[name] = LayoutConfig()
        self._commit(draft)
        return True

    def update_breakpoint(
        self,
        name: str,
        new_name: str | None = None,
        min_width: int | None = None,
    ) -> bool:
        """Rename a breakpoint or change its min_width.

        A rename moves the layout and every placement and override keyed
        by the old name. Grid size changes go through resize_grid.

        Returns:
            True if applied, False if new_name is already taken.
        """
        draft = self._draft()
        bp = self._require_breakpoint(draft, name)
        target = new_name or name

        if target != name and draft.get_breakpoint(target) is not None:
            logger.warning(f"Cannot rename '{name}': breakpoint '{target}' already exists")
            return False

        update: dict[str, Any] = {"name": target}
        if min_width is not None:
            update["min_width"] = min_width
        replacement = Breakpoint.model_validate({**bp.model_dump(), **update})
        draft.breakpoints = sorted(
            (replacement if b is bp else b for b in draft.breakpoints),
            key=lambda b: b.min_width,
        )

        if target != name:
            draft.layouts = {
                (target if key == name else key): layout for key, layout in draft.layouts.items()
            }
            for component in draft.components:
                if name in component.placements:
                    component.placements[target] = component.placements.pop(name)
                if name in component.responsive_overrides:
                    component.responsive_overrides[target] = component.responsive_overrides.pop(name)
            if self._current_breakpoint == name:
                self._current_breakpoint = target

        self._commit(draft)
        return True

    def resize_grid(self, name: str, grid_cols: int, grid_rows: int) -> ResizeCheck:
        """Change a breakpoint's grid size if no occupant would be clipped.

        Returns:
            The ResizeCheck; the grid is only changed when it is truthy.
        """
        bp = self._require_breakpoint(self._schema, name)
        limits = get_grid_limits()
        if not limits.allows(grid_cols, grid_rows):
            return ResizeCheck(
                False,
                minimum_grid_size(self._schema, name),
                reason=(
                    f"Grid must be between {limits.min_size} and "
                    f"{limits.max_cols}x{limits.max_rows}"
                ),
            )

        check = can_resize(self._schema, name, grid_cols, grid_rows)
        if not check:
            return check

        draft = self._draft()
        replacement = bp.model_copy(update={"grid_cols": grid_cols, "grid_rows": grid_rows})
        draft.breakpoints = [replacement if b.name == name else b for b in draft.breakpoints]
        self._commit(draft)
        return check

    def delete_breakpoint(self, name: str) -> bool:
        """Delete a breakpoint and every placement and override keyed by it.

        Returns:
            True if deleted, False if it is the last breakpoint.
        """
        self._require_breakpoint(self._schema, name)
        if len(self._schema.breakpoints) == 1:
            logger.warning(f"Refusing to delete '{name}': the last breakpoint")
            return False

        draft = self._draft()
        draft.breakpoints = [bp for bp in draft.breakpoints if bp.name != name]
        draft.layouts.pop(name, None)
        self._commit(draft)
        if self._current_breakpoint == name:
            self._current_breakpoint = self._schema.ordered_breakpoints()[0].name
        return True

    # =========================================================================
    # Layout Config
    # =========================================================================

    def reorder_components(self, order: list[str], breakpoint: str | None = None) -> None:
        """Set the document order of a breakpoint's members.

        Raises:
            EditorError: If order is not a permutation of the current members.
        """
        name = self._resolve(breakpoint)
        if sorted(order) != sorted(self._schema.members(name)):
            raise EditorError(f"Order must be a permutation of the members of '{name}'")
        draft = self._draft()
        draft.layouts[name].components = list(order)
        self._commit(draft)

    def add_component_to_layout(self, component_id: str, breakpoint: str | None = None) -> bool:
        """Append a component to a breakpoint's layout.

        Returns:
            True if the component joined the layout, False if it was already
            a member.

        Raises:
            EditorError: If the component or breakpoint is unknown.
        """
        name = self._resolve(breakpoint)
        self._require_component(self._schema, component_id)
        if component_id in self._schema.members(name):
            return False
        draft = self._draft()
        draft.layouts[name].components.append(component_id)
        self._commit(draft)
        logger.debug(f"Added {component_id} to the layout of '{name}'")
        return True

    def set_structure(self, structure: LayoutStructure | str, breakpoint: str | None = None) -> None:
        name = self._resolve(breakpoint)
        draft = self._draft()
        draft.layouts[name].structure = LayoutStructure(structure)
        self._commit(draft)

    def set_role(
        self, role: LayoutRole | str, component_id: str, breakpoint: str | None = None
    ) -> None:
        """Assign a layout role to a member of the breakpoint's layout."""
        name = self._resolve(breakpoint)
        if component_id not in self._schema.members(name):
            raise EditorError(f"'{component_id}' is not a member of '{name}'")
        draft = self._draft()
        draft.layouts[name].roles[LayoutRole(role)] = component_id
        self._commit(draft)

    def clear_role(self, role: LayoutRole | str, breakpoint: str | None = None) -> None:
        name = self._resolve(breakpoint)
        draft = self._draft()
        draft.layouts[name].roles.pop(LayoutRole(role), None)
        self._commit(draft)

    # =========================================================================
    # Links
    # =========================================================================

    def add_link(self, a: str, b: str) -> bool:
        """Link two components, replacing their existing links.

        Returns:
            True if the links changed, False for an ignored gesture.
        """
        links = add_link(self._schema.links, a, b, self._schema.component_ids())
        if links == self._schema.links:
            return False
        draft = self._draft()
        draft.links = links
        self._commit(draft)
        return True

    def remove_link(self, a: str, b: str) -> bool:
        links = remove_link(self._schema.links, a, b)
        if links == self._schema.links:
            return False
        draft = self._draft()
        draft.links = links
        self._commit(draft)
        return True

    def link_groups(self) -> dict[str, frozenset[str]]:
        return groups_of(self._schema.component_ids(), self._schema.links)

    # =========================================================================
    # Import / Export
    # =========================================================================

    def import_schema(self, schema: Schema | dict[str, Any]) -> None:
        """Replace the snapshot with a validated, normalized schema.

        Raises:
            pydantic.ValidationError: If a dict does not describe a valid schema.
        """
        if isinstance(schema, dict):
            schema = Schema.model_validate(schema)
        self._schema = normalize(schema)
        if self._schema.get_breakpoint(self._current_breakpoint) is None:
            self._current_breakpoint = self._schema.ordered_breakpoints()[0].name
        self._selected_component_id = None

    def export_schema(self) -> Schema:
        return clone_schema(self._schema)

    def reset_schema(self) -> None:
        self.import_schema(create_empty_schema())

    def to_json(self, indent: int | None = 2) -> str:
        return self._schema.model_dump_json(by_alias=True, indent=indent, exclude_none=True)

    @classmethod
    def from_json(cls, text: str) -> "LayoutEditor":
        return cls(Schema.model_validate_json(text))
