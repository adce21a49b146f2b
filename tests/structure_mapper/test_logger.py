"""Tests for the structure mapper logger."""

import logging

import pytest

from structure_mapper.logger import get_logger, resolve_level, set_log_level


class TestResolveLevel:

    def test_known_levels(self):
        """Test level names resolve case-insensitively."""
        assert resolve_level("debug") == logging.DEBUG
        assert resolve_level("WARNING") == logging.WARNING

    def test_unknown_level(self):
        """Test an unknown level name raises ValueError."""
        with pytest.raises(ValueError):
            resolve_level("chatty")


class TestStructureMapperLogger:
    """Test the shared logger instance."""

    def setup_method(self):
        """Set up test fixtures."""
        self.logger = get_logger()
        self.previous_level = self.logger.logger.level

    def teardown_method(self):
        self.logger.logger.setLevel(self.previous_level)

    def test_single_shared_instance(self):
        """Test get_logger returns a single shared instance."""
        assert get_logger() is self.logger
        assert self.logger.logger.name == "structure_mapper"

    def test_set_log_level(self):
        """Test changing the log level."""
        set_log_level("error")
        assert self.logger.logger.level == logging.ERROR

    def test_timed_records_metrics(self):
        """Test timing an operation into a metrics dictionary."""
        metrics = {}
        with self.logger.timed("parse_files", metrics):
            pass
        assert set(metrics) == {"parse_files"}
        assert metrics["parse_files"] >= 0

    def test_timed_records_on_error(self):
        """Test timing is recorded when the block raises."""
        metrics = {}
        with pytest.raises(RuntimeError):
            with self.logger.timed("build_relationships", metrics):
                raise RuntimeError("boom")
        assert "build_relationships" in metrics
