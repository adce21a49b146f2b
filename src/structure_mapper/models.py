"""Core data models for the structure mapper."""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Set


@dataclass
class Parameter:
    """A method parameter as (type, name), derived by a rough split."""
    type: str
    name: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "name": self.name}


@dataclass
class Endpoint:
    """An HTTP operation derived from mapping annotations."""
    http_method: str
    path: str
    produces: Optional[str] = None
    consumes: Optional[str] = None
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "http_method": self.http_method,
            "path": self.path,
            "produces": self.produces,
            "consumes": self.consumes,
            "description": self.description,
        }


@dataclass
class FieldModel:
    """A field declared in a class body."""
    name: str
    type: str
    visibility: str = "package"
    is_static: bool = False
    annotations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "visibility": self.visibility,
            "is_static": self.is_static,
            "annotations": list(self.annotations),
        }


@dataclass
class MethodModel:
    """A method (or constructor) recognized by its signature."""
    name: str
    return_type: str
    parameters: List[Parameter] = field(default_factory=list)
    annotations: List[str] = field(default_factory=list)
    visibility: str = "package"
    is_static: bool = False
    calls: Set[str] = field(default_factory=set)  # raw, unresolved
    endpoint: Optional[Endpoint] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "return_type": self.return_type,
            "parameters": [p.to_dict() for p in self.parameters],
            "annotations": list(self.annotations),
            "visibility": self.visibility,
            "is_static": self.is_static,
            "calls": sorted(self.calls),
            "endpoint": self.endpoint.to_dict() if self.endpoint else None,
        }


@dataclass
class RolePattern:
    """An architectural role recognized from a class annotation."""
    type: str  # CONTROLLER, REST_CONTROLLER, SERVICE, ...
    annotation: str
    description: str
    layer: str  # PRESENTATION, BUSINESS, DATA, CONFIGURATION, COMPONENT

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "annotation": self.annotation,
            "description": self.description,
            "layer": self.layer,
        }


@dataclass
class InjectionDescriptor:
    """A field populated by a dependency-injection container."""
    field_name: str
    field_type: str
    injection_type: str  # only "field" is detected
    annotation: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "field_name": self.field_name,
            "field_type": self.field_type,
            "injection_type": self.injection_type,
            "annotation": self.annotation,
        }


@dataclass
class ClassModel:
    """Structural record for the single top-level class recognized in one file."""
    name: str
    file_path: str
    package: str = ""
    imports: List[str] = field(default_factory=list)
    annotations: List[str] = field(default_factory=list)
    extends: Optional[str] = None
    implements: List[str] = field(default_factory=list)
    fields: List[FieldModel] = field(default_factory=list)
    methods: List[MethodModel] = field(default_factory=list)
    dependencies: Set[str] = field(default_factory=set)
    is_controller: bool = False
    endpoints: List[Endpoint] = field(default_factory=list)
    role_patterns: List[RolePattern] = field(default_factory=list)
    injections: List[InjectionDescriptor] = field(default_factory=list)

    @property
    def qualified_name(self) -> str:
        return f"{self.package}.{self.name}" if self.package else self.name

    def declares_method(self, method_name: str) -> bool:
        return any(method.name == method_name for method in self.methods)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "file_path": self.file_path,
            "package": self.package,
            "imports": list(self.imports),
            "annotations": list(self.annotations),
            "extends": self.extends,
            "implements": list(self.implements),
            "fields": [f.to_dict() for f in self.fields],
            "methods": [m.to_dict() for m in self.methods],
            "dependencies": sorted(self.dependencies),
            "is_controller": self.is_controller,
            "endpoints": [e.to_dict() for e in self.endpoints],
            "role_patterns": [p.to_dict() for p in self.role_patterns],
            "injections": [i.to_dict() for i in self.injections],
        }


class RelationshipKind(Enum):
    """Kinds of directed edges between classes."""
    EXTENDS = "extends"
    IMPLEMENTS = "implements"
    CALLS = "calls"
    INJECTS = "injects"


class TargetKind(Enum):
    """Whether a relationship target is one of the parsed classes."""
    INTERNAL = "internal"
    EXTERNAL = "external"


@dataclass
class Relationship:
    """A typed edge from a parsed class to a class or type name."""
    source: str
    target: str
    kind: RelationshipKind
    method: Optional[str] = None  # originating method for calls-edges
    target_kind: TargetKind = TargetKind.EXTERNAL

    @property
    def is_resolved(self) -> bool:
        return self.target_kind is TargetKind.INTERNAL

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from": self.source,
            "to": self.target,
            "type": self.kind.value,
            "method": self.method,
            "target_kind": self.target_kind.value,
        }


@dataclass
class UsageExample:
    """A literal call-site or instantiation mined from another file."""
    source_file: str
    source_class: str
    method_name: str  # "class_usage" for class-usage matches
    line_number: int  # 1-based
    code_snippet: str
    context: str
    parameters: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source_file": self.source_file,
            "source_class": self.source_class,
            "method_name": self.method_name,
            "line_number": self.line_number,
            "code_snippet": self.code_snippet,
            "context": self.context,
            "parameters": list(self.parameters),
        }


@dataclass
class MethodUsageStats:
    """Aggregate usage statistics for a (class, method) pair."""
    usage_count: int
    common_parameters: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "usage_count": self.usage_count,
            "common_parameters": list(self.common_parameters),
        }


@dataclass
class SyntheticExample:
    """A template-generated example used when no real usage exists."""
    method_name: str
    code_snippet: str
    description: str
    context: str
    parameters: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "method_name": self.method_name,
            "code_snippet": self.code_snippet,
            "description": self.description,
            "context": self.context,
            "parameters": list(self.parameters),
        }


@dataclass
class ProjectStructureModel:
    """The complete output of one scan: parsed classes plus relationships."""
    classes: List[ClassModel] = field(default_factory=list)
    relationships: List[Relationship] = field(default_factory=list)

    def find_class(self, name: str) -> Optional[ClassModel]:
        for class_model in self.classes:
            if class_model.name == name:
                return class_model
        return None

    def relationships_of_kind(self, kind: RelationshipKind) -> List[Relationship]:
        return [r for r in self.relationships if r.kind is kind]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "classes": [c.to_dict() for c in self.classes],
            "relationships": [r.to_dict() for r in self.relationships],
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)
