"""Centralized environment configuration management for canvas_engine.

Provides a unified interface for all environment variables with:
- Single `get_environment()` function for all configuration
- Type-safe enum with metadata (default, type, description)
- Consistent resolution: override > environment > default

Example:
    >>> from canvas_engine.config import EnvVar, get_environment
    >>>
    >>> # Get values with automatic type conversion
    >>> max_cols = get_environment(EnvVar.CANVAS_MAX_GRID_COLS)  # Returns int
    >>>
    >>> # Override at runtime
    >>> max_cols = get_environment(EnvVar.CANVAS_MAX_GRID_COLS, override=48)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, overload

# =============================================================================
# Environment Variable Configuration
# =============================================================================


@dataclass(frozen=True)
class EnvConfig:
    """Metadata for an environment variable.

    Attributes:
        name: Environment variable name (e.g., "CANVAS_LOG_LEVEL").
        default: Default value if not set in environment.
        var_type: Python type for value conversion (str, int, bool, Path).
        description: Human-readable description.
        category: Grouping category for documentation.
    """

    name: str
    default: Any
    var_type: type
    description: str = ""
    category: str = "general"


class EnvVar(Enum):
    """All environment variables used by canvas_engine.

    Each member contains an EnvConfig with name, default, type, and description.
    Use with `get_environment()` for type-safe access.

    Categories:
        - logging: Log output configuration
        - grid: Grid size limits and drop defaults
        - io: Schema file locations
    """

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    CANVAS_LOG_LEVEL = EnvConfig(
        name="CANVAS_LOG_LEVEL",
        default="INFO",
        var_type=str,
        description="Log level for the CLI (DEBUG, INFO, WARNING, ERROR)",
        category="logging",
    )

    # -------------------------------------------------------------------------
    # Grid Limits
    # -------------------------------------------------------------------------
    CANVAS_MIN_GRID_SIZE = EnvConfig(
        name="CANVAS_MIN_GRID_SIZE",
        default=2,
        var_type=int,
        description="Smallest column/row count the editor accepts",
        category="grid",
    )
    CANVAS_MAX_GRID_COLS = EnvConfig(
        name="CANVAS_MAX_GRID_COLS",
        default=24,
        var_type=int,
        description="Largest column count the editor accepts",
        category="grid",
    )
    CANVAS_MAX_GRID_ROWS = EnvConfig(
        name="CANVAS_MAX_GRID_ROWS",
        default=24,
        var_type=int,
        description="Largest row count the editor accepts",
        category="grid",
    )
    CANVAS_DROP_WIDTH = EnvConfig(
        name="CANVAS_DROP_WIDTH",
        default=4,
        var_type=int,
        description="Column span given to a component dropped onto the canvas",
        category="grid",
    )
    CANVAS_DROP_HEIGHT = EnvConfig(
        name="CANVAS_DROP_HEIGHT",
        default=3,
        var_type=int,
        description="Row span given to a component dropped onto the canvas",
        category="grid",
    )

    # -------------------------------------------------------------------------
    # Schema Files
    # -------------------------------------------------------------------------
    CANVAS_SCHEMA_PATH = EnvConfig(
        name="CANVAS_SCHEMA_PATH",
        default=None,  # Computed from cwd
        var_type=Path,
        description="Schema JSON file used by CLI commands",
        category="io",
    )


DEFAULT_SCHEMA_FILENAME = "canvas.json"


@dataclass(frozen=True)
class GridLimits:
    """Inclusive bounds on a breakpoint's grid size."""

    min_size: int
    max_cols: int
    max_rows: int

    def allows(self, cols: int, rows: int) -> bool:
        """Check whether a cols x rows grid is inside the limits."""
        return (
            self.min_size <= cols <= self.max_cols
            and self.min_size <= rows <= self.max_rows
        )


# =============================================================================
# Type Conversion Helpers
# =============================================================================


def _parse_bool(value: str) -> bool | None:
    """Parse string to boolean.

    Recognizes: true/false, 1/0, yes/no (case-insensitive).
    Returns None for unrecognized values.
    """
    normalized = value.lower().strip()
    if normalized in ("true", "1", "yes"):
        return True
    if normalized in ("false", "0", "no"):
        return False
    return None


def _convert_value(value: str | None, var_type: type, default: Any) -> Any:
    """Convert string value to target type.

    Args:
        value: Raw string value from environment (or None).
        var_type: Target Python type.
        default: Default value if conversion fails or value is None.

    Returns:
        Converted value or default.
    """
    if value is None:
        return default

    if var_type is str:
        return value

    if var_type is int:
        try:
            return int(value)
        except ValueError:
            return default

    if var_type is bool:
        result = _parse_bool(value)
        return result if result is not None else default

    if var_type is Path:
        return Path(value)

    # Unknown type, return as-is
    return value


# =============================================================================
# Main Interface
# =============================================================================


@overload
def get_environment(env_var: EnvVar, override: int) -> int: ...
@overload
def get_environment(env_var: EnvVar, override: str) -> str: ...
@overload
def get_environment(env_var: EnvVar, override: bool) -> bool: ...
@overload
def get_environment(env_var: EnvVar, override: Path) -> Path: ...
@overload
def get_environment(env_var: EnvVar, override: None = None) -> Any: ...


def get_environment(env_var: EnvVar, override: Any = None) -> Any:
    """Get environment variable value with type conversion.

    Resolution priority:
        1. Explicit override parameter (highest)
        2. Environment variable value
        3. Default from EnvConfig (lowest)

    Args:
        env_var: Environment variable enum member.
        override: Optional override value (bypasses env lookup).

    Returns:
        Value converted to the appropriate type (str, int, bool, or Path).

    Example:
        >>> get_environment(EnvVar.CANVAS_DROP_WIDTH)
        4
        >>> get_environment(EnvVar.CANVAS_DROP_WIDTH, override=6)
        6
    """
    config: EnvConfig = env_var.value

    if override is not None:
        return override

    raw_value = os.environ.get(config.name)
    return _convert_value(raw_value, config.var_type, config.default)


def get_environment_info(env_var: EnvVar) -> EnvConfig:
    """Get metadata for an environment variable.

    Args:
        env_var: Environment variable enum member.

    Returns:
        EnvConfig with name, default, type, and description.
    """
    return env_var.value


# =============================================================================
# Convenience Functions
# =============================================================================


def get_grid_limits() -> GridLimits:
    """Get the grid size limits enforced by the editor."""
    return GridLimits(
        min_size=get_environment(EnvVar.CANVAS_MIN_GRID_SIZE),
        max_cols=get_environment(EnvVar.CANVAS_MAX_GRID_COLS),
        max_rows=get_environment(EnvVar.CANVAS_MAX_GRID_ROWS),
    )


def get_drop_size() -> tuple[int, int]:
    """Get the (width, height) span for components dropped onto the canvas."""
    return (
        get_environment(EnvVar.CANVAS_DROP_WIDTH),
        get_environment(EnvVar.CANVAS_DROP_HEIGHT),
    )


def get_schema_path(override: Path | str | None = None) -> Path:
    """Get the schema file path.

    Resolution: override > CANVAS_SCHEMA_PATH > {cwd}/canvas.json
    """
    if override is not None:
        return Path(override)

    env_path = get_environment(EnvVar.CANVAS_SCHEMA_PATH)
    if env_path:
        return env_path

    return Path.cwd() / DEFAULT_SCHEMA_FILENAME


def list_environment_variables(category: str | None = None) -> list[EnvVar]:
    """List all environment variables, optionally filtered by category.

    Args:
        category: Filter by category (logging, grid, io).
                 None returns all variables.

    Returns:
        List of EnvVar enum members.
    """
    if category is None:
        return list(EnvVar)

    return [var for var in EnvVar if var.value.category == category]


__all__ = [
    # Core types
    "EnvConfig",
    "EnvVar",
    "GridLimits",
    # Main interface
    "get_environment",
    "get_environment_info",
    # Convenience functions
    "get_grid_limits",
    "get_drop_size",
    "get_schema_path",
    # Introspection
    "list_environment_variables",
]
