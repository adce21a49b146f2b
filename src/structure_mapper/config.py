"""Configuration settings for the structure mapper."""

import json
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Union

from .logger import resolve_level


class CallResolution(Enum):
    """Policy for resolving a called name to a target class."""
    FIRST_MATCH = "first_match"  # first other class in parse order declaring the name
    UNIQUE_MATCH = "unique_match"  # only when exactly one other class declares it


class UsageAcceptance(Enum):
    """Policy for accepting a line as a call to the target method."""
    PERMISSIVE = "permissive"  # class name, "this." or any member access
    STRICT = "strict"  # class name, instance name or "this." qualifier


@dataclass
class StructureMapperConfig:
    """Configuration class for scanning, relationship building and usage mining."""

    # Annotation scanning windows (characters before a declaration)
    method_annotation_window: int = 500
    field_annotation_window: int = 200

    # Usage mining settings
    context_radius: int = 2
    class_usage_limit: int = 5
    common_parameter_count: int = 3

    # Heuristic policies
    call_resolution: CallResolution = CallResolution.FIRST_MATCH
    usage_acceptance: UsageAcceptance = UsageAcceptance.PERMISSIVE

    # Scan settings
    max_workers: int = 1
    log_level: str = "INFO"
    java_file_suffix: str = ".java"

    def __post_init__(self):
        """Coerce enum fields and apply environment overrides."""
        env_log_level = os.getenv("STRUCTURE_MAPPER_LOG_LEVEL")
        env_max_workers = os.getenv("STRUCTURE_MAPPER_MAX_WORKERS")
        env_call_resolution = os.getenv("STRUCTURE_MAPPER_CALL_RESOLUTION")
        env_usage_acceptance = os.getenv("STRUCTURE_MAPPER_USAGE_ACCEPTANCE")

        if env_log_level:
            self.log_level = env_log_level
        if env_max_workers:
            self.max_workers = int(env_max_workers)
        if env_call_resolution:
            self.call_resolution = env_call_resolution
        if env_usage_acceptance:
            self.usage_acceptance = env_usage_acceptance

        self.call_resolution = CallResolution(self.call_resolution)
        self.usage_acceptance = UsageAcceptance(self.usage_acceptance)
        self.log_level = self.log_level.upper()
        resolve_level(self.log_level)

        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if self.context_radius < 0:
            raise ValueError("context_radius must not be negative")

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "method_annotation_window": self.method_annotation_window,
            "field_annotation_window": self.field_annotation_window,
            "context_radius": self.context_radius,
            "class_usage_limit": self.class_usage_limit,
            "common_parameter_count": self.common_parameter_count,
            "call_resolution": self.call_resolution.value,
            "usage_acceptance": self.usage_acceptance.value,
            "max_workers": self.max_workers,
            "log_level": self.log_level,
            "java_file_suffix": self.java_file_suffix,
        }

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "StructureMapperConfig":
        """Create configuration from dictionary."""
        return cls(**config_dict)

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "StructureMapperConfig":
        """Load configuration from a JSON file."""
        with open(config_path, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))
