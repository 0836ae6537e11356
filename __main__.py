"""CLI entry point for responsive-canvas.

This module acts as the central entry point for the project's CLI tools.
Every layout command reads a schema JSON file (``--path``, falling back to
CANVAS_SCHEMA_PATH, then ./canvas.json) and exits non-zero when the
requested change is rejected or the schema has errors.
"""

import argparse
import json
import subprocess
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from canvas_engine.config import (
    EnvVar,
    get_environment,
    get_grid_limits,
    get_schema_path,
)
from canvas_engine.constraints import affected_component_ids, suggest_compaction
from canvas_engine.core import get_logger, setup_logging
from canvas_engine.editor import EditorError, LayoutEditor
from canvas_engine.export import (
    ExportBlockedError,
    analyze_grid_complexity,
    export_schema,
    format_occupancy,
    grid_positions,
)
from canvas_engine.grid import CanvasRect
from canvas_engine.normalize import normalize
from canvas_engine.placement import RejectionReason
from canvas_engine.schema import (
    Schema,
    create_empty_schema,
    create_schema_with_breakpoint,
)
from canvas_engine.validation import format_validation_result, validate_schema

# Load environment variables from .env file
load_dotenv()

logger = get_logger("cli")


# =============================================================================
# Schema File Helpers
# =============================================================================


def _path_parent() -> argparse.ArgumentParser:
    """Parent parser holding the shared --path option."""
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "--path",
        "-p",
        type=Path,
        default=None,
        help="Schema file (default: CANVAS_SCHEMA_PATH or ./canvas.json)",
    )
    return parent


def _load_schema(path: Path | None) -> tuple[Schema, Path]:
    resolved = get_schema_path(path)
    return Schema.model_validate_json(resolved.read_text(encoding="utf-8")), resolved


def _save_schema(schema: Schema, path: Path) -> None:
    path.write_text(
        schema.model_dump_json(by_alias=True, indent=2, exclude_none=True) + "\n",
        encoding="utf-8",
    )
    logger.info(f"Schema saved to {path}")


def _run(handler, args: argparse.Namespace) -> int:
    """Run a command handler, reporting unreadable schemas and editor misuse."""
    try:
        return handler(args)
    except FileNotFoundError as e:
        logger.error(f"Schema file not found: {e.filename}")
        return 1
    except ValidationError as e:
        logger.error(f"Invalid schema: {e}")
        return 1
    except EditorError as e:
        logger.error(str(e))
        return 1


# =============================================================================
# Schema Commands
# =============================================================================


def cmd_new(args: argparse.Namespace) -> int:
    """Create a new empty schema file."""
    path = get_schema_path(args.path)
    if path.exists() and not args.force:
        logger.error(f"{path} already exists (use --force to overwrite)")
        return 1

    if args.breakpoint:
        schema = create_schema_with_breakpoint(args.breakpoint)
    else:
        schema = create_empty_schema()
    _save_schema(schema, path)
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Validate a schema file and print the report."""
    schema, _ = _load_schema(args.path)
    result = validate_schema(schema)

    if args.json:
        payload = {
            "valid": result.valid,
            "errors": [vars(issue) for issue in result.errors],
            "warnings": [vars(issue) for issue in result.warnings],
        }
        print(json.dumps(payload, indent=2))
    else:
        print(format_validation_result(result))

    if result.valid and args.strict and result.warnings:
        return 1
    return 0 if result.valid else 1


def cmd_normalize(args: argparse.Namespace) -> int:
    """Normalize a schema file in place (or into --output)."""
    schema, path = _load_schema(args.path)
    _save_schema(normalize(schema), args.output or path)
    return 0


def cmd_export(args: argparse.Namespace) -> int:
    """Export a schema for description generation."""
    schema, _ = _load_schema(args.path)
    try:
        data = export_schema(schema)
    except ExportBlockedError as e:
        logger.error(str(e))
        return 1

    text = json.dumps(data, indent=2)
    if args.output:
        args.output.write_text(text + "\n", encoding="utf-8")
        logger.info(f"Export saved to {args.output}")
    else:
        print(text)
    return 0


# =============================================================================
# Layout Commands
# =============================================================================


def cmd_place(args: argparse.Namespace) -> int:
    """Place a component at a breakpoint if the rectangle is accepted."""
    schema, path = _load_schema(args.path)
    editor = LayoutEditor(schema)
    if min(args.x, args.y) < 0 or min(args.width, args.height) < 1:
        print(
            f"Rejected ({RejectionReason.OUT_OF_BOUNDS.value}): "
            f"({args.x}, {args.y}, {args.width}x{args.height}) is outside the grid"
        )
        return 1
    rect = CanvasRect(x=args.x, y=args.y, width=args.width, height=args.height)
    result = editor.place_component(args.component, rect, args.breakpoint)

    if not result:
        print(f"Rejected ({result.reason.value}): {result.message}")
        return 1

    breakpoint = args.breakpoint or editor.current_breakpoint
    print(f"Placed {args.component} at {result.rect} on '{breakpoint}'")
    if not args.dry_run:
        _save_schema(editor.schema, path)
    return 0


def cmd_resize(args: argparse.Namespace) -> int:
    """Resize a breakpoint's grid if no component would be clipped."""
    schema, path = _load_schema(args.path)
    editor = LayoutEditor(schema)
    check = editor.resize_grid(args.breakpoint, args.cols, args.rows)

    if not check:
        print(f"Unsafe: {check.reason}")
        print(f"Minimum required: {check.minimum_required}")
        for component_id in affected_component_ids(check):
            print(f"  {component_id}")
        return 1

    print(f"Resized '{args.breakpoint}' to {args.cols}x{args.rows}")
    if not args.dry_run:
        _save_schema(editor.schema, path)
    return 0


def cmd_compact(args: argparse.Namespace) -> int:
    """Report (and optionally apply) shrink-to-fit for a breakpoint."""
    schema, path = _load_schema(args.path)
    editor = LayoutEditor(schema)
    bp = editor.schema.get_breakpoint(args.breakpoint)
    if bp is None:
        logger.error(f"Unknown breakpoint '{args.breakpoint}'")
        return 1

    suggestion = suggest_compaction(editor.schema, args.breakpoint)
    print(
        f"'{bp.name}' is {bp.grid}; minimum {suggestion.minimum_required}; "
        f"reducible by {suggestion.reducible_cols} col(s), {suggestion.reducible_rows} row(s)"
    )
    if not args.apply or not suggestion:
        return 0

    minimum = suggestion.minimum_required
    floor = get_grid_limits().min_size
    check = editor.resize_grid(
        args.breakpoint,
        max(minimum.cols, floor),
        max(minimum.rows, floor),
    )
    if not check:
        print(f"Cannot compact: {check.reason}")
        return 1
    _save_schema(editor.schema, path)
    return 0


def cmd_groups(args: argparse.Namespace) -> int:
    """Print component link groups."""
    schema, _ = _load_schema(args.path)
    groups = LayoutEditor(schema).link_groups()
    seen: set[frozenset[str]] = set()
    for component_id in schema.component_ids():
        group = groups[component_id]
        if group in seen or (len(group) < 2 and not args.all):
            continue
        seen.add(group)
        print(", ".join(sorted(group)))
    return 0


def cmd_grid(args: argparse.Namespace) -> int:
    """Print a breakpoint's occupancy map and CSS grid lines."""
    schema, _ = _load_schema(args.path)
    schema = normalize(schema)
    if schema.get_breakpoint(args.breakpoint) is None:
        logger.error(f"Unknown breakpoint '{args.breakpoint}'")
        return 1

    print(format_occupancy(schema, args.breakpoint))
    if args.css:
        layout = grid_positions(schema, args.breakpoint)
        print()
        for position in layout.positions:
            print(f"{position.component_id}: grid-area {position.grid_area}")
        complexity = analyze_grid_complexity(schema, args.breakpoint)
        print(f"recommended: {complexity.recommended_implementation}")
    return 0


def handle_layout_command(command: str, argv: list[str]) -> int:
    """Parse arguments for a schema or layout command and run it."""
    parent = _path_parent()
    parser = argparse.ArgumentParser(prog=f"python . {command}", parents=[parent])

    if command == "new":
        parser.description = "Create an empty schema file"
        parser.add_argument(
            "--breakpoint",
            "-b",
            choices=["mobile", "tablet", "desktop"],
            default=None,
            help="Start with a single breakpoint (default: all three)",
        )
        parser.add_argument("--force", action="store_true", help="Overwrite an existing file")
        parser.set_defaults(func=cmd_new)
    elif command == "validate":
        parser.description = "Validate a schema file"
        parser.add_argument("--json", action="store_true", help="Print the result as JSON")
        parser.add_argument("--strict", action="store_true", help="Fail on warnings too")
        parser.set_defaults(func=cmd_validate)
    elif command == "normalize":
        parser.description = "Resolve breakpoint inheritance and save"
        parser.add_argument("--output", "-o", type=Path, default=None, help="Output file")
        parser.set_defaults(func=cmd_normalize)
    elif command == "export":
        parser.description = "Export a reference-checked schema"
        parser.add_argument(
            "--output",
            "-o",
            type=Path,
            default=None,
            help="Output file path (prints to stdout if not specified)",
        )
        parser.set_defaults(func=cmd_export)
    elif command == "place":
        parser.description = "Place a component on a breakpoint's grid"
        parser.add_argument("component", help="Component id")
        for name in ("x", "y", "width", "height"):
            parser.add_argument(name, type=int)
        parser.add_argument("--breakpoint", "-b", default=None, help="Breakpoint (default: smallest)")
        parser.add_argument("--dry-run", action="store_true", help="Check without saving")
        parser.set_defaults(func=cmd_place)
    elif command == "resize":
        parser.description = "Resize a breakpoint's grid"
        parser.add_argument("breakpoint", help="Breakpoint name")
        parser.add_argument("cols", type=int)
        parser.add_argument("rows", type=int)
        parser.add_argument("--dry-run", action="store_true", help="Check without saving")
        parser.set_defaults(func=cmd_resize)
    elif command == "compact":
        parser.description = "Report how far a grid could shrink"
        parser.add_argument("breakpoint", help="Breakpoint name")
        parser.add_argument("--apply", action="store_true", help="Shrink the grid to fit")
        parser.set_defaults(func=cmd_compact)
    elif command == "groups":
        parser.description = "List component link groups"
        parser.add_argument("--all", action="store_true", help="Include unlinked components")
        parser.set_defaults(func=cmd_groups)
    elif command == "grid":
        parser.description = "Show a breakpoint's occupancy map"
        parser.add_argument("breakpoint", help="Breakpoint name")
        parser.add_argument("--css", action="store_true", help="Also print CSS grid areas")
        parser.set_defaults(func=cmd_grid)

    args = parser.parse_args(argv)
    return _run(args.func, args)


# =============================================================================
# Dev Commands
# =============================================================================


def cmd_test(extra_args: list[str]) -> int:
    """Run pytest with provided arguments and test tier options.

    Usage:
        python . dev test                # Run all tests
        python . dev test --unit         # Run only unit tests
        python . dev test --integration  # Run CLI and file tests
        python . dev test -k "collision" # Run tests matching pattern
    """
    tier_markers = {
        "--unit": ["-m", "unit"],
        "--integration": ["-m", "integration"],
        "--all": [],
    }

    pytest_args: list[str] = []
    remaining_args: list[str] = []

    for arg in extra_args:
        if arg in tier_markers:
            pytest_args.extend(tier_markers[arg])
        else:
            remaining_args.append(arg)

    cmd = [sys.executable, "-m", "pytest", *pytest_args, *remaining_args]
    logger.info(f"Running: {' '.join(cmd)}")

    try:
        return subprocess.call(cmd)
    except KeyboardInterrupt:
        return 130


def handle_dev_command(argv: list[str]) -> int:
    """Handle development workflow commands.

    Usage:
        python . dev test [args]       # Run pytest
    """
    if not argv:
        print("Development workflow commands")
        print("\nUsage: python . dev {command} [args]")
        print("\nCommands:")
        print("  test       Run pytest with tier options")
        print("\nExamples:")
        print("  python . dev test --unit           # Fast unit tests")
        print("  python . dev test --integration    # CLI tests")
        return 1

    subcommand = argv[0]
    subargs = argv[1:]

    dev_commands = {
        "test": lambda: cmd_test(subargs),
    }

    if subcommand in dev_commands:
        return dev_commands[subcommand]()

    logger.error(f"Unknown dev command: {subcommand}")
    return handle_dev_command([])


# =============================================================================
# Main
# =============================================================================

LAYOUT_COMMANDS = (
    "new",
    "validate",
    "normalize",
    "export",
    "place",
    "resize",
    "compact",
    "groups",
    "grid",
)


def show_help() -> None:
    """Display CLI help message."""
    print("Usage: python . {command} [args]")
    print("\n=== Schema ===")
    print("  new        Create an empty schema file")
    print("  validate   Check references, structure and layout warnings")
    print("  normalize  Resolve breakpoint inheritance and save")
    print("  export     Export a reference-checked schema as JSON")
    print("\n=== Layout ===")
    print("  place      Place a component (collision and bounds checked)")
    print("  resize     Resize a breakpoint's grid (shrink checked)")
    print("  compact    Report or apply shrink-to-fit")
    print("  groups     List component link groups")
    print("  grid       Show a breakpoint's occupancy map")
    print("\n=== Development ===")
    print("  dev        Development workflows (test)")
    print("\nExamples:")
    print("  python . new")
    print("  python . place c1 0 0 4 1 -b mobile")
    print("  python . resize desktop 10 8")
    print("  python . grid desktop --css")
    print("  python . export -o layout.json")


def main() -> int:
    """Main entry point for the CLI."""
    if len(sys.argv) < 2:
        show_help()
        return 1

    command = sys.argv[1]
    rest_args = sys.argv[2:]

    if command in ("-h", "--help"):
        show_help()
        return 0

    if command == "dev":
        setup_logging(get_environment(EnvVar.CANVAS_LOG_LEVEL))
        return handle_dev_command(rest_args)

    if command in LAYOUT_COMMANDS:
        setup_logging(get_environment(EnvVar.CANVAS_LOG_LEVEL))
        return handle_layout_command(command, rest_args)

    logger.error(f"Unknown command: {command}")
    show_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
