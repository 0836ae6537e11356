"""Tests for the layout CLI commands."""

import json
import subprocess
import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[2]


def run_cli(*args: str) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, ".", *args],
        capture_output=True,
        text=True,
        cwd=REPO_ROOT,
        timeout=60,
    )


def read_schema(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


@pytest.mark.integration
def test_help_lists_commands():
    """Help output names every layout command."""
    result = run_cli("--help")
    assert result.returncode == 0
    for command in ("new", "validate", "place", "resize", "compact", "groups", "export", "grid"):
        assert f"  {command}" in result.stdout


@pytest.mark.integration
def test_unknown_command_fails():
    result = run_cli("frobnicate")
    assert result.returncode == 1


@pytest.mark.integration
def test_new_creates_default_schema(tmp_path):
    """new writes an empty three-breakpoint schema and refuses to overwrite."""
    path = tmp_path / "canvas.json"
    assert run_cli("new", "-p", str(path)).returncode == 0
    data = read_schema(path)
    assert [bp["name"] for bp in data["breakpoints"]] == ["mobile", "tablet", "desktop"]
    assert data["breakpoints"][2]["gridCols"] == 12

    assert run_cli("new", "-p", str(path)).returncode == 1
    assert run_cli("new", "-p", str(path), "--force", "-b", "tablet").returncode == 0
    assert [bp["name"] for bp in read_schema(path)["breakpoints"]] == ["tablet"]


@pytest.mark.integration
def test_missing_schema_file(tmp_path):
    result = run_cli("validate", "-p", str(tmp_path / "missing.json"))
    assert result.returncode == 1
    assert "not found" in result.stderr


@pytest.mark.integration
def test_validate_reports(schema_file):
    """validate passes a clean schema and fails on dangling ids."""
    result = run_cli("validate", "-p", str(schema_file))
    assert result.returncode == 0
    assert result.stdout.startswith("Schema is valid")

    data = read_schema(schema_file)
    data["layouts"]["tablet"]["components"].append("ghost")
    schema_file.write_text(json.dumps(data), encoding="utf-8")

    result = run_cli("validate", "-p", str(schema_file), "--json")
    assert result.returncode == 1
    payload = json.loads(result.stdout)
    assert payload["valid"] is False
    assert payload["errors"][0]["code"] == "unknown_component"


@pytest.mark.integration
def test_normalize_writes_inherited_placements(schema_file):
    assert run_cli("normalize", "-p", str(schema_file)).returncode == 0
    data = read_schema(schema_file)
    assert data["layouts"]["desktop"]["components"] == ["c1", "c2", "c3"]
    assert data["components"][0]["placements"]["desktop"] == {
        "x": 0,
        "y": 0,
        "width": 4,
        "height": 1,
    }


@pytest.mark.integration
def test_place_accepted_and_saved(schema_file):
    result = run_cli("place", "c1", "4", "0", "4", "1", "-b", "tablet", "-p", str(schema_file))
    assert result.returncode == 0
    placements = read_schema(schema_file)["components"][0]["placements"]
    assert placements["tablet"] == {"x": 4, "y": 0, "width": 4, "height": 1}


@pytest.mark.integration
def test_place_collision_rejected(schema_file):
    """A colliding placement exits non-zero and leaves the file alone."""
    before = schema_file.read_text(encoding="utf-8")
    result = run_cli("place", "c3", "0", "6", "4", "1", "-b", "mobile", "-p", str(schema_file))
    assert result.returncode == 1
    assert "Rejected (collision)" in result.stdout
    assert schema_file.read_text(encoding="utf-8") == before


@pytest.mark.integration
def test_place_negative_origin_rejected(schema_file):
    """A negative coordinate is an out-of-bounds rejection, not a schema error."""
    before = schema_file.read_text(encoding="utf-8")
    result = run_cli("place", "c1", "-1", "0", "4", "1", "-b", "mobile", "-p", str(schema_file))
    assert result.returncode == 1
    assert "Rejected (out_of_bounds)" in result.stdout
    assert "Invalid schema" not in result.stderr
    assert schema_file.read_text(encoding="utf-8") == before


@pytest.mark.integration
def test_resize_unsafe_lists_components(schema_file):
    result = run_cli("resize", "mobile", "3", "8", "-p", str(schema_file))
    assert result.returncode == 1
    assert "Unsafe" in result.stdout
    assert "  c1" in result.stdout


@pytest.mark.integration
def test_compact_apply(schema_file):
    result = run_cli("compact", "desktop", "--apply", "-p", str(schema_file))
    assert result.returncode == 0
    assert "reducible by 8 col(s), 0 row(s)" in result.stdout
    desktop = read_schema(schema_file)["breakpoints"][2]
    assert (desktop["gridCols"], desktop["gridRows"]) == (4, 8)


@pytest.mark.integration
def test_export_and_grid(schema_file, tmp_path):
    out = tmp_path / "export.json"
    assert run_cli("export", "-p", str(schema_file), "-o", str(out)).returncode == 0
    exported = read_schema(out)
    assert exported["schemaVersion"] == "2.0"
    assert exported["linkGroups"] == []

    result = run_cli("grid", "mobile", "--css", "-p", str(schema_file))
    assert result.returncode == 0
    assert result.stdout.splitlines()[0] == "c1 c1 c1 c1"
    assert "c1: grid-area 1 / 1 / 2 / 5" in result.stdout
    assert "recommended: flexbox" in result.stdout


@pytest.mark.integration
def test_groups(schema_file):
    data = read_schema(schema_file)
    data["links"] = [{"a": "c1", "b": "c3"}]
    schema_file.write_text(json.dumps(data), encoding="utf-8")
    result = run_cli("groups", "-p", str(schema_file))
    assert result.returncode == 0
    assert result.stdout.strip() == "c1, c3"
