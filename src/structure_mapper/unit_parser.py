"""Heuristic parser turning one Java source file into a ClassModel."""

import re
from dataclasses import replace
from typing import Callable, List, Optional, Sequence, Set, Tuple

from .config import StructureMapperConfig
from .logger import get_logger
from .models import ClassModel, FieldModel, MethodModel, Parameter
from .path_utils import read_file_safely, sanitize_file_path
from .role_classifier import FrameworkRoleClassifier

PRIMITIVE_TYPES = frozenset({
    "byte", "short", "int", "long", "float", "double", "boolean", "char", "void",
    "Byte", "Short", "Integer", "Long", "Float", "Double", "Boolean", "Character", "Void",
})

FRAMEWORK_MARKERS = (
    "Autowired", "Inject", "Resource", "Service", "Repository",
    "Component", "Controller", "RestController",
)

CALL_KEYWORDS = frozenset({"if", "for", "while", "switch"})

# Tokens that make a signature or declaration match a statement instead
STATEMENT_KEYWORDS = frozenset({
    "if", "else", "for", "while", "do", "switch", "case", "try", "catch", "finally",
    "return", "throw", "new", "synchronized", "assert", "package", "import", "goto",
    "super", "this", "class", "interface", "enum", "extends", "implements", "yield",
})

VISIBILITY_MODIFIERS = frozenset({"public", "private", "protected"})

_PACKAGE = re.compile(r"\bpackage\s+([\w.]+)\s*;")
_IMPORT = re.compile(r"\bimport\s+((?:static\s+)?[\w.]+(?:\.\*)?)\s*;")
_CLASS = re.compile(
    r"(?:\b(?:public|abstract|final)\s+)*\bclass\s+(\w+)(?:\s*<[^>{]*>)?"
    r"(?:\s+extends\s+([\w.]+)(?:\s*<[^>{]*>)?)?"
    r"(?:\s+implements\s+([\w\s,.<>]+))?"
)
_ANNOTATION_RUN = r"(?:@[\w.]+(?:\([^)]*\))?\s*)*"
# a declaration never starts inside a word or an annotation name
_DECLARATION_START = r"(?<![\w@.])"
_METHOD = re.compile(
    _ANNOTATION_RUN
    + r"(?P<signature>" + _DECLARATION_START + r"(?:(?P<visibility>public|private|protected)\s+)?"
    r"(?:(?P<static>static)\s+)?(?:final\s+)?(?:(?:abstract|synchronized|native|default|strictfp)\s+)*"
    r"(?P<return_type>\w+(?:<[^>]+>)?|\w+\[\])\s+(?P<name>\w+)\s*\((?P<params>[^)]*)\)"
    r"\s*(?:throws\s+[\w\s,.]+)?\s*)\{"
)
_FIELD = re.compile(
    _ANNOTATION_RUN
    + r"(?P<declaration>" + _DECLARATION_START + r"(?:(?P<visibility>public|private|protected)\s+)?"
    r"(?:(?P<static>static)\s+)?(?:final\s+)?(?:(?:transient|volatile)\s+)*"
    r"(?P<type>\w+(?:<[^>]+>)?(?:\[\])?|\w+\[\])\s+(?P<name>\w+)(?:\s*=\s*[^;]+)?;)"
)
_ANNOTATION_TOKEN_PATTERN = r"@[\w.]+(?:\s*\((?:[^()\"']|\"[^\"]*\"|'[^']*'|\([^()]*\))*\))?"
_ANNOTATION_TOKEN = re.compile(_ANNOTATION_TOKEN_PATTERN)
_TRAILING_ANNOTATIONS = re.compile(r"(?:" + _ANNOTATION_TOKEN_PATTERN + r"\s*)+$")
_CALL = re.compile(r"\b(\w+)\s*\(")
_FIELD_INJECTION = re.compile(
    r"@(?:Autowired|Inject|Resource)\b\s*(?:(?:private|public|protected)\s+)?(?:final\s+)?(\w+)"
)
# constructor without modifiers: ``Name(args) {``
_BARE_CONSTRUCTOR = re.compile(
    _DECLARATION_START + r"(?P<name>\w+)\s*\((?P<params>[^)]*)\)\s*(?:throws\s+[\w\s,.]+)?\s*\{"
)
_NEW_BEFORE = re.compile(r"\bnew\s*$")
_STRING_LITERAL = re.compile(r"\"(?:\\.|[^\"\\])*\"|'(?:\\.|[^'\\])*'")
_TYPE_NAME = re.compile(r"[A-Za-z_]\w*")
_GENERIC_ARGS = re.compile(r"<[^<>]*>")

Span = Tuple[int, int]


def _is_comment(stripped_line: str) -> bool:
    return stripped_line.startswith(("//", "/*", "*"))


def _in_comment_line(content: str, position: int) -> bool:
    """True if ``position`` sits after a line-comment marker or on a comment line."""
    line_start = content.rfind("\n", 0, position) + 1
    # "//" inside a string literal, e.g. a URL in an annotation, is not a comment
    prefix = _STRING_LITERAL.sub('""', content[line_start:position])
    return "//" in prefix or prefix.strip().startswith(("/*", "*"))


def _split_annotations(line: str) -> List[str]:
    tokens = _ANNOTATION_TOKEN.findall(line)
    return [t.strip() for t in tokens] if tokens else [line]


def _type_names(type_text: str) -> List[str]:
    """Identifiers in a type token, primitives excluded: ``List<User>`` -> List, User."""
    return [name for name in _TYPE_NAME.findall(type_text) if name not in PRIMITIVE_TYPES]


class UnitParser:
    """
    Parses one Java source file with line- and window-bounded patterns.

    A parse call yields at most one ClassModel: the first ``class`` declaration
    in the file. Interfaces, enums and nested types are not units. Comments and
    string literals are not tokenized, so brace counting and pattern matching
    can be fooled by pathological input.
    """

    def __init__(self, config: Optional[StructureMapperConfig] = None,
                 loader: Callable[[str], Optional[str]] = read_file_safely,
                 classifier: Optional[FrameworkRoleClassifier] = None):
        self.config = config or StructureMapperConfig()
        self.loader = loader
        self.classifier = classifier or FrameworkRoleClassifier()
        self.logger = get_logger()

    def parse_file(self, file_path: str) -> Optional[ClassModel]:
        """
        Read and parse one file. Never raises.

        Returns:
            ClassModel, or None when the file is unreadable, has no class
            declaration, or parsing failed unexpectedly
        """
        sanitized_path = sanitize_file_path(file_path)
        try:
            content = self.loader(sanitized_path)
            if content is None:
                return None
            class_model = self.parse_source(sanitized_path, content)
        except Exception as e:
            self.logger.error(f"Error parsing {sanitized_path}: {e}")
            return None

        if class_model is None:
            self.logger.debug(f"No class declaration found in {sanitized_path}")
        return class_model

    def parse_source(self, file_path: str, content: str) -> Optional[ClassModel]:
        """
        Parse file text into a ClassModel.

        Args:
            file_path: Path recorded on the model
            content: Full file text

        Returns:
            ClassModel for the first class declaration, or None if there is none
        """
        class_match = self.find_class_declaration(content)
        if class_match is None:
            return None

        imports = self.extract_imports(content)
        annotations = self.collect_annotations_before(content, class_match.start())
        methods, body_spans = self._extract_methods_with_spans(content, class_match.group(1))
        fields = self.extract_fields(content, body_spans)

        classification = self.classifier.classify(annotations, methods, fields)
        methods = [
            replace(method, endpoint=endpoint)
            for method, endpoint in zip(methods, classification.method_endpoints)
        ]

        return ClassModel(
            name=class_match.group(1),
            file_path=file_path,
            package=self.extract_package(content),
            imports=imports,
            annotations=annotations,
            extends=class_match.group(2),
            implements=self._split_type_list(class_match.group(3)),
            fields=fields,
            methods=methods,
            dependencies=self.extract_dependencies(content, imports, fields, methods),
            is_controller=classification.is_controller,
            endpoints=classification.endpoints,
            role_patterns=classification.role_patterns,
            injections=classification.injections,
        )

    def extract_package(self, content: str) -> str:
        match = _PACKAGE.search(content)
        return match.group(1) if match else ""

    def extract_imports(self, content: str) -> List[str]:
        """Import specifiers in source order, keeping ``static`` and ``.*`` forms."""
        return [re.sub(r"\s+", " ", m.group(1)) for m in _IMPORT.finditer(content)]

    def find_class_declaration(self, content: str) -> Optional[re.Match]:
        for match in _CLASS.finditer(content):
            if _in_comment_line(content, match.start()):
                continue
            if match.group(1) in STATEMENT_KEYWORDS:
                continue
            return match
        return None

    def collect_annotations_before(self, content: str, position: int,
                                   window: Optional[int] = None) -> List[str]:
        """
        Collect annotations on the lines directly above ``position``.

        Lines are walked in reverse: annotation lines are accepted, blank and
        comment lines are skipped, and the first other line stops the scan.
        The text before ``position`` on its own line counts as the first line
        walked. ``window`` bounds how many characters are examined.
        """
        start = 0 if window is None else max(0, position - window)
        lines = content[start:position].split("\n")

        # same-line prefix: only a trailing run of annotations belongs to the declaration
        head = lines.pop()
        annotations: List[str] = []
        trailing = _TRAILING_ANNOTATIONS.search(head)
        if trailing:
            annotations = _split_annotations(trailing.group(0).strip())
            head = head[:trailing.start()]
        if head.strip() and not _is_comment(head.strip()):
            return annotations

        for line in reversed(lines):
            stripped = line.strip()
            if stripped.startswith("@"):
                annotations[:0] = _split_annotations(stripped)
            elif not stripped or _is_comment(stripped):
                continue
            else:
                break
        return annotations

    def extract_methods(self, content: str, class_name: Optional[str] = None) -> List[MethodModel]:
        methods, _ = self._extract_methods_with_spans(content, class_name)
        return methods

    def _extract_methods_with_spans(self, content: str,
                                    class_name: Optional[str] = None) -> Tuple[List[MethodModel], List[Span]]:
        found = []  # (signature start, method, body span)
        for match in _METHOD.finditer(content):
            name = match.group("name")
            return_type = match.group("return_type")
            if name in STATEMENT_KEYWORDS or return_type in STATEMENT_KEYWORDS:
                continue
            signature_start = match.start("signature")
            if _in_comment_line(content, signature_start):
                continue

            visibility = match.group("visibility") or "package"
            if return_type in VISIBILITY_MODIFIERS:
                # constructor: the modifier was taken for the return type
                visibility, return_type = return_type, ""

            method, span = self._method_at(
                content, match, signature_start, name, return_type, visibility, bool(match.group("static"))
            )
            found.append((signature_start, method, span))

        if class_name:
            found.extend(self._extract_bare_constructors(content, class_name, found))
        found.sort(key=lambda item: item[0])
        return [method for _, method, _ in found], [span for _, _, span in found]

    def _extract_bare_constructors(self, content: str, class_name: str,
                                   found: Sequence[Tuple[int, MethodModel, Span]]):
        """Package-private constructors, which have neither modifier nor return type."""
        occupied = [(start, span[1]) for start, _, span in found]
        constructors = []
        for match in _BARE_CONSTRUCTOR.finditer(content):
            start = match.start()
            if match.group("name") != class_name:
                continue
            if any(begin <= start <= end for begin, end in occupied):
                continue
            if _in_comment_line(content, start) or _NEW_BEFORE.search(content[max(0, start - 20):start]):
                continue
            method, span = self._method_at(content, match, start, class_name, "", "package", False)
            constructors.append((start, method, span))
            occupied.append((start, span[1]))
        return constructors

    def _method_at(self, content: str, match: re.Match, signature_start: int, name: str,
                   return_type: str, visibility: str, is_static: bool) -> Tuple[MethodModel, Span]:
        open_brace = match.end() - 1
        close_brace = self.find_block_end(content, open_brace)
        method = MethodModel(
            name=name,
            return_type=return_type,
            parameters=self.parse_parameters(match.group("params")),
            annotations=self.collect_annotations_before(
                content, signature_start, self.config.method_annotation_window
            ),
            visibility=visibility,
            is_static=is_static,
            calls=self.extract_calls(content[open_brace + 1:close_brace]),
        )
        return method, (open_brace, close_brace)

    def find_block_end(self, content: str, open_brace: int) -> int:
        """
        Index of the brace closing the block opened at ``open_brace``.

        Plain depth counting; braces inside strings or comments are counted
        too. Returns ``len(content)`` if the block never closes.
        """
        depth = 0
        for index in range(open_brace, len(content)):
            char = content[index]
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return index
        return len(content)

    def extract_calls(self, body: str) -> Set[str]:
        return {name for name in _CALL.findall(body) if name not in CALL_KEYWORDS}

    def parse_parameters(self, parameters_text: str) -> List[Parameter]:
        """Split on commas and take the last two tokens of each fragment as (type, name)."""
        if not parameters_text.strip():
            return []

        parameters = []
        for fragment in parameters_text.split(","):
            parts = fragment.split()
            if not parts:
                continue
            param_type = parts[-2] if len(parts) >= 2 else "Object"
            parameters.append(Parameter(type=param_type, name=parts[-1]))
        return parameters

    def extract_fields(self, content: str, body_spans: Sequence[Span] = ()) -> List[FieldModel]:
        """Field declarations outside method bodies, with their own annotations."""
        fields = []
        for match in _FIELD.finditer(content):
            declaration_start = match.start("declaration")
            if any(start < declaration_start < end for start, end in body_spans):
                continue
            field_type = match.group("type")
            name = match.group("name")
            if field_type in STATEMENT_KEYWORDS or name in STATEMENT_KEYWORDS:
                continue
            if _in_comment_line(content, declaration_start):
                continue

            fields.append(FieldModel(
                name=name,
                type=field_type,
                visibility=match.group("visibility") or "package",
                is_static=bool(match.group("static")),
                annotations=self.collect_annotations_before(
                    content, declaration_start, self.config.field_annotation_window
                ),
            ))
        return fields

    def extract_dependencies(self, content: str, imports: Sequence[str],
                             fields: Sequence[FieldModel], methods: Sequence[MethodModel]) -> Set[str]:
        """
        Noisy superset of the type names this class depends on.

        Union of framework markers present in the file, types following an
        injection annotation, field, parameter and return types, and explicit
        single-type imports (simple and dotted form).
        """
        dependencies: Set[str] = set()

        for marker in FRAMEWORK_MARKERS:
            if re.search(rf"@{marker}\b", content):
                dependencies.add(marker)

        for injected_type in _FIELD_INJECTION.findall(content):
            if injected_type not in PRIMITIVE_TYPES:
                dependencies.add(injected_type)

        for field_model in fields:
            dependencies.update(_type_names(field_model.type))

        for method in methods:
            for parameter in method.parameters:
                dependencies.update(_type_names(parameter.type))
            dependencies.update(_type_names(method.return_type))

        for specifier in imports:
            if specifier.startswith("static ") or specifier.endswith(".*"):
                continue
            dependencies.add(specifier)
            dependencies.add(specifier.rsplit(".", 1)[-1])

        return dependencies

    def _split_type_list(self, type_list: Optional[str]) -> List[str]:
        if not type_list:
            return []
        previous = None
        while previous != type_list:
            previous, type_list = type_list, _GENERIC_ARGS.sub("", type_list)
        return [name.strip() for name in type_list.split(",") if name.strip()]
