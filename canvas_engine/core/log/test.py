"""Tests for the logging micro API."""

import io
import logging

import pytest

from .lib import DEFAULT_LOGGER_NAME, get_logger, parse_level, setup_logging


class TestGetLogger:
    """Tests for get_logger."""

    @pytest.mark.unit
    def test_default_name(self):
        """Unnamed loggers share the package logger."""
        assert get_logger().name == DEFAULT_LOGGER_NAME

    @pytest.mark.unit
    def test_named_logger(self):
        """Named loggers keep their name."""
        assert get_logger("cli").name == "cli"


class TestParseLevel:
    """Tests for parse_level."""

    @pytest.mark.unit
    def test_numeric_passthrough(self):
        assert parse_level(logging.DEBUG) == logging.DEBUG

    @pytest.mark.unit
    def test_name_is_case_insensitive(self):
        assert parse_level("warning") == logging.WARNING
        assert parse_level(" Debug ") == logging.DEBUG

    @pytest.mark.unit
    def test_unknown_name_falls_back_to_info(self):
        assert parse_level("chatty") == logging.INFO


class TestSetupLogging:
    """Tests for setup_logging."""

    @pytest.mark.unit
    def test_writes_to_stream(self, monkeypatch):
        """Configured root handler writes formatted records to the stream."""
        root = logging.getLogger()
        monkeypatch.setattr(root, "handlers", [])
        stream = io.StringIO()

        setup_logging("INFO", stream=stream)
        get_logger("canvas-test").info("hello grid")

        assert "canvas-test - INFO - hello grid" in stream.getvalue()
