"""Mining literal usage examples of a class or method from project sources."""

import re
from collections import Counter
from typing import Callable, Iterator, List, Optional, Tuple

from .config import StructureMapperConfig, UsageAcceptance
from .logger import get_logger
from .models import ClassModel, MethodUsageStats, ProjectStructureModel, UsageExample
from .path_utils import read_file_safely

CLASS_USAGE_TAG = "class_usage"


class UsageMiner:
    """
    Finds how a class or method is used elsewhere by re-reading source text.

    Mining is independent of relationship building: it reads every candidate
    file afresh and never mutates the structure model. Files that cannot be
    read are skipped.
    """

    def __init__(self, config: Optional[StructureMapperConfig] = None,
                 loader: Callable[[str], Optional[str]] = read_file_safely):
        self.config = config or StructureMapperConfig()
        self.loader = loader
        self.logger = get_logger()

    def find_method_usages(self, class_name: str, method_name: str,
                           structure: ProjectStructureModel) -> List[UsageExample]:
        """
        Call sites of ``class_name.method_name`` in other classes.

        Returns:
            Examples ordered by descending argument count, stable on ties
        """
        call_pattern = re.compile(rf"\b(\w+\.)?{re.escape(method_name)}\s*\(([^)]*)\)")
        examples = []

        for source_class, lines in self._candidate_sources(class_name, structure):
            for index, line in enumerate(lines):
                for match in call_pattern.finditer(line):
                    if not self.is_likely_target_call(line, class_name, method_name):
                        continue
                    examples.append(self._example(
                        source_class, lines, index, method_name,
                        self.extract_parameters(match.group(2) or ""),
                    ))

        self.logger.debug(f"Found {len(examples)} usages of {class_name}.{method_name}")
        return sorted(examples, key=lambda example: -len(example.parameters))

    def find_class_usage_patterns(self, class_name: str,
                                  structure: ProjectStructureModel) -> List[UsageExample]:
        """
        Lines that inject, declare, construct or assign ``class_name``.

        Patterns are tried in priority order per line and the first match wins.
        Results keep file-then-line order and are truncated to the configured limit.
        """
        name = re.escape(class_name)
        patterns = [
            re.compile(rf"@(?:Autowired|Inject|Resource)\s+(?:(?:private|protected|public)\s+)?(?:final\s+)?{name}\b"),
            re.compile(rf"\b(?:private|protected|public)\s+(?:static\s+)?(?:final\s+)?{name}\b(?:<[^>]*>)?\s+\w+"),
            re.compile(rf"\bnew\s+{name}\s*(?:<[^>]*>)?\s*\("),
            re.compile(rf"\b{name}\b(?:<[^>]*>)?\s+\w+\s*="),
        ]
        examples = []

        for source_class, lines in self._candidate_sources(class_name, structure):
            for index, line in enumerate(lines):
                if any(pattern.search(line) for pattern in patterns):
                    examples.append(self._example(source_class, lines, index, CLASS_USAGE_TAG, []))

        self.logger.debug(f"Found {len(examples)} class usages of {class_name}")
        return examples[:self.config.class_usage_limit]

    def get_method_usage_stats(self, class_name: str, method_name: str,
                               structure: ProjectStructureModel) -> MethodUsageStats:
        """Usage count plus the most frequent argument tokens, ties in first-seen order."""
        examples = self.find_method_usages(class_name, method_name, structure)

        frequency = Counter()
        for example in examples:
            frequency.update(example.parameters)

        common = [param for param, _ in frequency.most_common(self.config.common_parameter_count)]
        return MethodUsageStats(usage_count=len(examples), common_parameters=common)

    def is_likely_target_call(self, line: str, class_name: str, method_name: str) -> bool:
        """
        Acceptance rule for a candidate line.

        PERMISSIVE accepts any line mentioning the method together with the
        class name, ``this.`` or any member access. STRICT requires the call to
        be qualified by the class name, its lower-camel instance name or ``this``.
        """
        lower_line = line.lower()
        if method_name.lower() not in lower_line:
            return False

        if self.config.usage_acceptance is UsageAcceptance.PERMISSIVE:
            return (
                class_name.lower() in lower_line
                or "this." in lower_line
                or "." in lower_line
            )

        qualifiers = {class_name, class_name[:1].lower() + class_name[1:], "this"}
        qualified = rf"\b(\w+)\s*\.\s*{re.escape(method_name)}\s*\("
        return any(m.group(1) in qualifiers for m in re.finditer(qualified, line))

    def extract_context(self, lines: List[str], current_index: int) -> str:
        """Lines around a match, the matched one marked with an arrow."""
        radius = self.config.context_radius
        start = max(0, current_index - radius)
        end = min(len(lines) - 1, current_index + radius)

        context_lines = []
        for i in range(start, end + 1):
            prefix = "→ " if i == current_index else "  "
            context_lines.append(prefix + lines[i].strip())
        return "\n".join(context_lines)

    def extract_parameters(self, parameters_text: str) -> List[str]:
        return [param.strip() for param in parameters_text.split(",") if param.strip()]

    def _candidate_sources(self, class_name: str,
                           structure: ProjectStructureModel) -> Iterator[Tuple[ClassModel, List[str]]]:
        for source_class in structure.classes:
            if source_class.name == class_name:
                continue
            try:
                content = self.loader(source_class.file_path)
            except Exception as e:
                self.logger.warning(f"Skipping {source_class.file_path} for usage mining: {e}")
                continue
            if content is None:
                continue
            yield source_class, content.split("\n")

    def _example(self, source_class: ClassModel, lines: List[str], index: int,
                 method_name: str, parameters: List[str]) -> UsageExample:
        return UsageExample(
            source_file=source_class.file_path,
            source_class=source_class.name,
            method_name=method_name,
            line_number=index + 1,
            code_snippet=lines[index].strip(),
            context=self.extract_context(lines, index),
            parameters=parameters,
        )
