"""Centralized configuration management for canvas_engine.

Provides unified access to all configuration via the `get_environment()` function.

Example:
    >>> from canvas_engine.config import EnvVar, get_environment
    >>>
    >>> width = get_environment(EnvVar.CANVAS_DROP_WIDTH)  # Returns int: 4
    >>> limits = get_grid_limits()
    >>> limits.allows(12, 8)
    True

Environment Variable Categories:
    logging: CLI log level
    grid: Grid size limits and drop defaults
    io: Schema file locations
"""

from .lib import (
    # Core types
    EnvConfig,
    EnvVar,
    GridLimits,
    # Main interface
    get_drop_size,
    get_environment,
    get_environment_info,
    get_grid_limits,
    get_schema_path,
    # Introspection
    list_environment_variables,
)

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
