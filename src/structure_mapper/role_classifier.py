"""Framework role classification from annotations already extracted by the parser."""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from .models import Endpoint, FieldModel, InjectionDescriptor, MethodModel, RolePattern

PRESENTATION = "PRESENTATION"
BUSINESS = "BUSINESS"
DATA = "DATA"
CONFIGURATION = "CONFIGURATION"
COMPONENT = "COMPONENT"

CONTROLLER_ANNOTATIONS = ("Controller", "RestController")
INJECTION_ANNOTATIONS = ("Autowired", "Inject", "Resource")
QUALIFIER_ANNOTATIONS = ("Qualifier",)
BASE_MAPPING_ANNOTATION = "RequestMapping"

# Mapping annotation -> fixed HTTP verb; None means "GET unless method= says otherwise"
MAPPING_ANNOTATIONS: Dict[str, Optional[str]] = {
    "RequestMapping": None,
    "GetMapping": "GET",
    "PostMapping": "POST",
    "PutMapping": "PUT",
    "DeleteMapping": "DELETE",
    "PatchMapping": "PATCH",
}

# Annotation -> (pattern type, description, layer)
ROLE_PATTERNS: Dict[str, Tuple[str, str, str]] = {
    "RestController": ("REST_CONTROLLER", "REST controller exposing HTTP endpoints that return response bodies", PRESENTATION),
    "Controller": ("CONTROLLER", "MVC controller handling web requests", PRESENTATION),
    "Service": ("SERVICE", "Service component holding business logic", BUSINESS),
    "Repository": ("REPOSITORY", "Repository component providing data access", DATA),
    "Entity": ("ENTITY", "Persistent entity mapped to a database table", DATA),
    "Configuration": ("CONFIGURATION", "Configuration class declaring managed beans", CONFIGURATION),
    "Component": ("COMPONENT", "Generic managed component", COMPONENT),
}

_ANNOTATION_NAME = re.compile(r"@\s*([\w.]+)")
_NAMED_PATH = re.compile(r"\b(?:value|path)\s*=\s*\{?\s*[\"']([^\"']+)[\"']")
_ANY_POSITIONAL_PATH = re.compile(r"\(\s*\{?\s*[\"']([^\"']+)[\"']")
_REQUEST_METHOD = re.compile(r"\bmethod\s*=\s*\{?\s*(?:RequestMethod\.)?(\w+)")
_PRODUCES = re.compile(r"\bproduces\s*=\s*(?:\{?\s*[\"']([^\"']+)[\"']|([\w.]+))")
_CONSUMES = re.compile(r"\bconsumes\s*=\s*(?:\{?\s*[\"']([^\"']+)[\"']|([\w.]+))")


def annotation_name(annotation: str) -> str:
    """Simple name of an annotation: ``@org.x.GetMapping("/a")`` -> ``GetMapping``."""
    match = _ANNOTATION_NAME.search(annotation)
    if not match:
        return ""
    return match.group(1).rsplit(".", 1)[-1]


def combine_paths(base_path: Optional[str], method_path: Optional[str]) -> str:
    """
    Join a class-level base mapping with a method-level path.

    A single trailing slash is stripped from the base and a leading slash is
    enforced on the method path. If either side is empty the other is used,
    and ``/`` is returned when both are empty.
    """
    if not base_path and not method_path:
        return "/"
    if not base_path:
        return method_path or "/"
    if not method_path:
        return base_path

    clean_base = base_path[:-1] if base_path.endswith("/") else base_path
    clean_method = method_path if method_path.startswith("/") else f"/{method_path}"
    return clean_base + clean_method


def _attribute(pattern: re.Pattern, annotation: str) -> Optional[str]:
    match = pattern.search(annotation)
    if not match:
        return None
    return match.group(1) or match.group(2)


@dataclass
class RoleClassification:
    """Role output for one class."""
    is_controller: bool = False
    base_path: Optional[str] = None
    method_endpoints: List[Optional[Endpoint]] = field(default_factory=list)  # aligned with methods
    endpoints: List[Endpoint] = field(default_factory=list)
    role_patterns: List[RolePattern] = field(default_factory=list)
    injections: List[InjectionDescriptor] = field(default_factory=list)


class FrameworkRoleClassifier:
    """
    Derives framework roles, base mappings and HTTP endpoints from annotations.

    The classifier is a pure function of the annotations, methods and fields the
    parser extracted. Only field-level injection is detected; constructor and
    setter injection are not.
    """

    def classify(self, class_annotations: Sequence[str], methods: Sequence[MethodModel],
                 fields: Sequence[FieldModel]) -> RoleClassification:
        """
        Classify one class.

        Args:
            class_annotations: Class-level annotations in source order
            methods: Methods of the class, in declaration order
            fields: Fields of the class

        Returns:
            RoleClassification whose ``method_endpoints`` is aligned with ``methods``
        """
        is_controller = self.is_controller(class_annotations)
        base_path = self.extract_base_mapping(class_annotations)

        method_endpoints = []
        endpoints = []
        for method in methods:
            endpoint = self.extract_endpoint(method, base_path)
            method_endpoints.append(endpoint)
            if endpoint is not None and is_controller:
                endpoints.append(endpoint)

        return RoleClassification(
            is_controller=is_controller,
            base_path=base_path,
            method_endpoints=method_endpoints,
            endpoints=endpoints,
            role_patterns=self.role_patterns(class_annotations),
            injections=self.injection_descriptors(fields),
        )

    def is_controller(self, class_annotations: Sequence[str]) -> bool:
        return any(annotation_name(a) in CONTROLLER_ANNOTATIONS for a in class_annotations)

    def extract_base_mapping(self, class_annotations: Sequence[str]) -> Optional[str]:
        """Path of the first class-level mapping annotation, if it names one."""
        for annotation in class_annotations:
            if annotation_name(annotation) == BASE_MAPPING_ANNOTATION:
                return self._extract_path(annotation, BASE_MAPPING_ANNOTATION)
        return None

    def extract_endpoint(self, method: MethodModel, base_path: Optional[str] = None) -> Optional[Endpoint]:
        """Endpoint for a method carrying a mapping annotation, else None."""
        for annotation in method.annotations:
            mapping = annotation_name(annotation)
            if mapping not in MAPPING_ANNOTATIONS:
                continue

            http_method = MAPPING_ANNOTATIONS[mapping]
            if http_method is None:
                explicit = _REQUEST_METHOD.search(annotation)
                http_method = explicit.group(1).upper() if explicit else "GET"

            method_path = self._extract_path(annotation, mapping) or f"/{method.name}"
            return Endpoint(
                http_method=http_method,
                path=combine_paths(base_path, method_path),
                produces=_attribute(_PRODUCES, annotation),
                consumes=_attribute(_CONSUMES, annotation),
                description=f"{method.name}() - {method.return_type}",
            )
        return None

    def role_patterns(self, class_annotations: Sequence[str]) -> List[RolePattern]:
        patterns = []
        seen = set()
        for annotation in class_annotations:
            name = annotation_name(annotation)
            if name not in ROLE_PATTERNS or name in seen:
                continue
            seen.add(name)
            pattern_type, description, layer = ROLE_PATTERNS[name]
            patterns.append(RolePattern(
                type=pattern_type,
                annotation=annotation,
                description=description,
                layer=layer,
            ))
        return patterns

    def injection_descriptors(self, fields: Sequence[FieldModel]) -> List[InjectionDescriptor]:
        """One descriptor per field carrying an injection or qualifier annotation."""
        markers = INJECTION_ANNOTATIONS + QUALIFIER_ANNOTATIONS
        descriptors = []
        for field_model in fields:
            for annotation in field_model.annotations:
                if annotation_name(annotation) in markers:
                    descriptors.append(InjectionDescriptor(
                        field_name=field_model.name,
                        field_type=field_model.type,
                        injection_type="field",
                        annotation=annotation,
                    ))
                    break
        return descriptors

    def _extract_path(self, annotation: str, mapping: str) -> Optional[str]:
        # named attribute, then annotation-specific positional, then any positional literal
        match = _NAMED_PATH.search(annotation)
        if match:
            return match.group(1)
        specific = re.search(rf"@{mapping}\s*\(\s*\{{?\s*[\"']([^\"']+)[\"']", annotation)
        if specific:
            return specific.group(1)
        match = _ANY_POSITIONAL_PATH.search(annotation)
        if match:
            return match.group(1)
        return None
