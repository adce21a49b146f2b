"""Tests for structure mapper configuration."""

import json

import pytest

from structure_mapper.config import CallResolution, StructureMapperConfig, UsageAcceptance

ENV_VARS = (
    "STRUCTURE_MAPPER_LOG_LEVEL",
    "STRUCTURE_MAPPER_MAX_WORKERS",
    "STRUCTURE_MAPPER_CALL_RESOLUTION",
    "STRUCTURE_MAPPER_USAGE_ACCEPTANCE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestStructureMapperConfig:
    """Test the configuration class."""

    def test_default_config_creation(self):
        """Test creating config with default values."""
        config = StructureMapperConfig()

        assert config.method_annotation_window == 500
        assert config.field_annotation_window == 200
        assert config.context_radius == 2
        assert config.class_usage_limit == 5
        assert config.common_parameter_count == 3
        assert config.call_resolution is CallResolution.FIRST_MATCH
        assert config.usage_acceptance is UsageAcceptance.PERMISSIVE
        assert config.max_workers == 1
        assert config.log_level == "INFO"
        assert config.java_file_suffix == ".java"

    def test_custom_config_creation(self):
        """Test creating config with custom values."""
        config = StructureMapperConfig(context_radius=4, call_resolution="unique_match", log_level="debug")

        assert config.context_radius == 4
        assert config.call_resolution is CallResolution.UNIQUE_MATCH
        assert config.log_level == "DEBUG"
        # Other values should remain default
        assert config.class_usage_limit == 5

    def test_invalid_values(self):
        """Test invalid values are rejected."""
        with pytest.raises(ValueError):
            StructureMapperConfig(call_resolution="best_guess")
        with pytest.raises(ValueError):
            StructureMapperConfig(max_workers=0)
        with pytest.raises(ValueError):
            StructureMapperConfig(context_radius=-1)
        with pytest.raises(ValueError):
            StructureMapperConfig(log_level="loud")

    def test_config_to_dict(self):
        """Test converting config to dictionary."""
        config_dict = StructureMapperConfig(usage_acceptance=UsageAcceptance.STRICT).to_dict()

        assert len(config_dict) == 10  # All config fields
        assert config_dict["usage_acceptance"] == "strict"
        assert config_dict["call_resolution"] == "first_match"

    def test_dict_round_trip(self):
        """Test rebuilding config from its dictionary form."""
        config = StructureMapperConfig(class_usage_limit=7, usage_acceptance="strict")
        assert StructureMapperConfig.from_dict(config.to_dict()) == config

    def test_from_file(self, tmp_path):
        """Test loading config from a JSON file."""
        path = tmp_path / "mapper.json"
        path.write_text(json.dumps({"max_workers": 3, "context_radius": 1}), encoding="utf-8")

        config = StructureMapperConfig.from_file(path)
        assert config.max_workers == 3
        assert config.context_radius == 1

    def test_from_dict_rejects_unknown_keys(self):
        """Test unknown option names are rejected."""
        with pytest.raises(TypeError):
            StructureMapperConfig.from_dict({"no_such_option": 1})


class TestEnvironmentOverrides:
    """Test environment variables taking precedence over constructor values."""

    def test_overrides(self, monkeypatch):
        """Test environment variables override constructor values."""
        monkeypatch.setenv("STRUCTURE_MAPPER_LOG_LEVEL", "warning")
        monkeypatch.setenv("STRUCTURE_MAPPER_MAX_WORKERS", "8")
        monkeypatch.setenv("STRUCTURE_MAPPER_CALL_RESOLUTION", "unique_match")
        monkeypatch.setenv("STRUCTURE_MAPPER_USAGE_ACCEPTANCE", "strict")

        config = StructureMapperConfig(max_workers=2)
        assert config.log_level == "WARNING"
        assert config.max_workers == 8
        assert config.call_resolution is CallResolution.UNIQUE_MATCH
        assert config.usage_acceptance is UsageAcceptance.STRICT

    def test_invalid_override(self, monkeypatch):
        """Test an invalid environment value is rejected."""
        monkeypatch.setenv("STRUCTURE_MAPPER_USAGE_ACCEPTANCE", "lenient")
        with pytest.raises(ValueError):
            StructureMapperConfig()
