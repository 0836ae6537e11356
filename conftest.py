"""Root pytest configuration and fixtures.

This module provides:
- Environment setup (loads .env)
- Shared schema fixtures for unit tests
- Schema file fixtures for CLI integration tests
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from dotenv import load_dotenv

from canvas_engine.grid import CanvasRect
from canvas_engine.schema import (
    Breakpoint,
    Component,
    LayoutConfig,
    Schema,
    SemanticTag,
    create_empty_schema,
)

# Load environment variables from .env file
load_dotenv()


# =============================================================================
# Helpers
# =============================================================================


def _rect(x: int, y: int, width: int, height: int) -> CanvasRect:
    return CanvasRect(x=x, y=y, width=width, height=height)


def _single_breakpoint(name: str, cols: int, rows: int, min_width: int = 0) -> Schema:
    return Schema(
        breakpoints=[Breakpoint(name=name, min_width=min_width, grid_cols=cols, grid_rows=rows)],
        layouts={name: LayoutConfig()},
    )


# =============================================================================
# Schema Fixtures
# =============================================================================


@pytest.fixture
def mobile_desktop_schema() -> Schema:
    """Mobile (4x8) and desktop (12x8) with c1 placed only at mobile.

    Returns:
        Un-normalized schema; c1 is a member of mobile only.
    """
    breakpoints = [
        Breakpoint(name="mobile", min_width=0, grid_cols=4, grid_rows=8),
        Breakpoint(name="desktop", min_width=1024, grid_cols=12, grid_rows=8),
    ]
    return Schema(
        components=[
            Component(id="c1", name="Header", placements={"mobile": _rect(0, 0, 4, 1)}),
        ],
        breakpoints=breakpoints,
        layouts={
            "mobile": LayoutConfig(components=["c1"]),
            "desktop": LayoutConfig(),
        },
    )


@pytest.fixture
def desktop_schema() -> Schema:
    """Single 12x8 desktop grid with A placed at the top-left and B unplaced."""
    schema = _single_breakpoint("desktop", 12, 8, min_width=1024)
    schema.components = [
        Component(id="A", name="Header", placements={"desktop": _rect(0, 0, 4, 1)}),
        Component(id="B", name="Main"),
    ]
    schema.layouts["desktop"].components = ["A"]
    return schema


@pytest.fixture
def full_grid_schema() -> Schema:
    """12x8 desktop grid whose occupants need the whole grid.

    A spans the top row; C sits in the bottom-right corner; D is well
    inside columns 0-9.
    """
    schema = _single_breakpoint("desktop", 12, 8, min_width=1024)
    schema.components = [
        Component(id="A", name="Header", placements={"desktop": _rect(0, 0, 12, 1)}),
        Component(id="C", name="Footer", placements={"desktop": _rect(9, 7, 3, 1)}),
        Component(id="D", name="Main", placements={"desktop": _rect(0, 2, 6, 3)}),
    ]
    schema.layouts["desktop"].components = ["A", "C", "D"]
    return schema


@pytest.fixture
def page_schema() -> Schema:
    """Default three-breakpoint schema with header, main and footer at mobile."""
    schema = create_empty_schema()
    schema.components = [
        Component(
            id="c1",
            name="Header",
            semantic_role=SemanticTag.HEADER,
            placements={"mobile": _rect(0, 0, 4, 1)},
        ),
        Component(
            id="c2",
            name="Main",
            semantic_role=SemanticTag.MAIN,
            placements={"mobile": _rect(0, 1, 4, 6)},
        ),
        Component(
            id="c3",
            name="Footer",
            semantic_role=SemanticTag.FOOTER,
            placements={"mobile": _rect(0, 7, 4, 1)},
        ),
    ]
    schema.layouts["mobile"].components = ["c1", "c2", "c3"]
    return schema


# =============================================================================
# File Fixtures
# =============================================================================


@pytest.fixture
def schema_file(tmp_path: Path, page_schema: Schema) -> Path:
    """Write ``page_schema`` to a JSON file in a temp directory."""
    path = tmp_path / "canvas.json"
    path.write_text(json.dumps(page_schema.model_dump(mode="json", by_alias=True), indent=2))
    return path
