"""Layout editor owning the live schema.

Example usage:
    >>> from canvas_engine.editor import LayoutEditor
    >>> editor = LayoutEditor()
    >>> editor.add_breakpoint("wide", min_width=1440, grid_cols=16)
    True
"""

from .lib import EditorError, LayoutEditor

__all__ = [
    "EditorError",
    "LayoutEditor",
]
