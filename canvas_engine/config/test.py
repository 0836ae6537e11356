"""Tests for configuration management."""

from pathlib import Path

import pytest

from .lib import (
    EnvConfig,
    EnvVar,
    GridLimits,
    get_drop_size,
    get_environment,
    get_environment_info,
    get_grid_limits,
    get_schema_path,
    list_environment_variables,
)

# =============================================================================
# Tests for get_environment (main interface)
# =============================================================================


class TestGetEnvironment:
    """Tests for the unified get_environment interface."""

    @pytest.mark.unit
    def test_returns_default_when_not_set(self, monkeypatch):
        """Returns default value when env var is not set."""
        monkeypatch.delenv("CANVAS_MAX_GRID_COLS", raising=False)
        assert get_environment(EnvVar.CANVAS_MAX_GRID_COLS) == 24

    @pytest.mark.unit
    def test_override_takes_priority(self, monkeypatch):
        """Override parameter takes highest priority."""
        monkeypatch.setenv("CANVAS_DROP_WIDTH", "9")
        assert get_environment(EnvVar.CANVAS_DROP_WIDTH, override=2) == 2

    @pytest.mark.unit
    def test_env_var_overrides_default(self, monkeypatch):
        """Environment variable overrides default value."""
        monkeypatch.setenv("CANVAS_DROP_HEIGHT", "5")
        result = get_environment(EnvVar.CANVAS_DROP_HEIGHT)
        assert result == 5
        assert isinstance(result, int)

    @pytest.mark.unit
    def test_invalid_int_falls_back_to_default(self, monkeypatch):
        """Unparseable integers fall back to the default."""
        monkeypatch.setenv("CANVAS_MIN_GRID_SIZE", "two")
        assert get_environment(EnvVar.CANVAS_MIN_GRID_SIZE) == 2

    @pytest.mark.unit
    def test_path_type_conversion(self, monkeypatch, tmp_path):
        """Path variables are converted to Path objects."""
        monkeypatch.setenv("CANVAS_SCHEMA_PATH", str(tmp_path / "s.json"))
        result = get_environment(EnvVar.CANVAS_SCHEMA_PATH)
        assert isinstance(result, Path)
        assert result.name == "s.json"

    @pytest.mark.unit
    def test_string_type(self, monkeypatch):
        """String type returns as-is."""
        monkeypatch.setenv("CANVAS_LOG_LEVEL", "DEBUG")
        assert get_environment(EnvVar.CANVAS_LOG_LEVEL) == "DEBUG"


class TestEnvironmentInfo:
    """Tests for metadata and introspection."""

    @pytest.mark.unit
    def test_info_returns_config(self):
        info = get_environment_info(EnvVar.CANVAS_DROP_WIDTH)
        assert isinstance(info, EnvConfig)
        assert info.name == "CANVAS_DROP_WIDTH"
        assert info.var_type is int

    @pytest.mark.unit
    def test_all_members_have_descriptions(self):
        for var in EnvVar:
            assert var.value.description, f"{var.name} missing description"

    @pytest.mark.unit
    def test_member_names_match_env_names(self):
        for var in EnvVar:
            assert var.name == var.value.name

    @pytest.mark.unit
    def test_list_by_category(self):
        grid_vars = list_environment_variables("grid")
        assert EnvVar.CANVAS_MAX_GRID_ROWS in grid_vars
        assert EnvVar.CANVAS_LOG_LEVEL not in grid_vars

    @pytest.mark.unit
    def test_list_all(self):
        assert len(list_environment_variables()) == len(EnvVar)


class TestConvenienceFunctions:
    """Tests for grid limits, drop size and schema path helpers."""

    @pytest.mark.unit
    def test_grid_limits_defaults(self, monkeypatch):
        for name in ("CANVAS_MIN_GRID_SIZE", "CANVAS_MAX_GRID_COLS", "CANVAS_MAX_GRID_ROWS"):
            monkeypatch.delenv(name, raising=False)
        assert get_grid_limits() == GridLimits(min_size=2, max_cols=24, max_rows=24)

    @pytest.mark.unit
    def test_grid_limits_allows(self):
        limits = GridLimits(min_size=2, max_cols=24, max_rows=12)
        assert limits.allows(2, 2)
        assert limits.allows(24, 12)
        assert not limits.allows(1, 8)
        assert not limits.allows(12, 13)

    @pytest.mark.unit
    def test_drop_size_from_env(self, monkeypatch):
        monkeypatch.setenv("CANVAS_DROP_WIDTH", "6")
        monkeypatch.delenv("CANVAS_DROP_HEIGHT", raising=False)
        assert get_drop_size() == (6, 3)

    @pytest.mark.unit
    def test_schema_path_override(self):
        assert get_schema_path("layouts/page.json") == Path("layouts/page.json")

    @pytest.mark.unit
    def test_schema_path_defaults_to_cwd(self, monkeypatch, tmp_path):
        monkeypatch.delenv("CANVAS_SCHEMA_PATH", raising=False)
        monkeypatch.chdir(tmp_path)
        assert get_schema_path() == tmp_path / "canvas.json"
