"""Structure mapper: heuristic class, relationship and usage extraction for Java codebases."""

from .models import (
    Parameter,
    FieldModel,
    MethodModel,
    Endpoint,
    RolePattern,
    InjectionDescriptor,
    ClassModel,
    RelationshipKind,
    TargetKind,
    Relationship,
    UsageExample,
    MethodUsageStats,
    SyntheticExample,
    ProjectStructureModel,
)
from .config import StructureMapperConfig, CallResolution, UsageAcceptance
from .path_utils import sanitize_file_path
from .unit_parser import UnitParser
from .role_classifier import FrameworkRoleClassifier, combine_paths
from .relationship_builder import RelationshipGraphBuilder
from .usage_miner import UsageMiner
from .synthetic_examples import SyntheticExampleGenerator
from .architecture import summarize_architecture
from .project_scanner import ProjectScanner

__all__ = [
    "Parameter",
    "FieldModel",
    "MethodModel",
    "Endpoint",
    "RolePattern",
    "InjectionDescriptor",
    "ClassModel",
    "RelationshipKind",
    "TargetKind",
    "Relationship",
    "UsageExample",
    "MethodUsageStats",
    "SyntheticExample",
    "ProjectStructureModel",
    "StructureMapperConfig",
    "CallResolution",
    "UsageAcceptance",
    "sanitize_file_path",
    "UnitParser",
    "FrameworkRoleClassifier",
    "combine_paths",
    "RelationshipGraphBuilder",
    "UsageMiner",
    "SyntheticExampleGenerator",
    "summarize_architecture",
    "ProjectScanner",
]
