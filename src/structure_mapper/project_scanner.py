"""Scan orchestration: per-file parsing, then relationship building, plus usage queries."""

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional, Sequence

import networkx as nx

from .architecture import summarize_architecture
from .config import StructureMapperConfig
from .logger import get_logger
from .models import (
    ClassModel,
    MethodUsageStats,
    ProjectStructureModel,
    UsageExample,
)
from .path_utils import read_file_safely
from .relationship_builder import RelationshipGraphBuilder
from .synthetic_examples import SyntheticExampleGenerator
from .unit_parser import UnitParser
from .usage_miner import UsageMiner


class ProjectScanner:
    """
    Builds a ProjectStructureModel from a list of source files.

    Each file is parsed independently; a file that cannot be read or parsed is
    logged and left out. Relationship building starts only after every file
    has been parsed. Usage queries run against the last scan's model.
    """

    def __init__(self, config: Optional[StructureMapperConfig] = None,
                 loader: Callable[[str], Optional[str]] = read_file_safely):
        """Initialize the scanner and its components."""
        self.config = config or StructureMapperConfig()
        self.logger = get_logger()
        self.parser = UnitParser(self.config, loader=loader)
        self.relationship_builder = RelationshipGraphBuilder(self.config)
        self.usage_miner = UsageMiner(self.config, loader=loader)
        self.example_generator = SyntheticExampleGenerator()
        self.structure = ProjectStructureModel()
        self._performance_metrics: Dict[str, float] = {}

    def get_performance_metrics(self) -> Dict[str, float]:
        """Get performance metrics for all operations."""
        return self._performance_metrics.copy()

    def scan(self, file_paths: Sequence[str]) -> ProjectStructureModel:
        """
        Parse every file, then build relationships over the complete class set.

        Args:
            file_paths: Source files in the order they should be parsed

        Returns:
            A fresh ProjectStructureModel; empty if no file yields a class
        """
        self.logger.info(f"Starting scan of {len(file_paths)} files")
        metrics = self._performance_metrics

        with self.logger.timed("scan", metrics):
            with self.logger.timed("parse_files", metrics):
                classes = self.parse_files(file_paths)
            with self.logger.timed("build_relationships", metrics):
                relationships = self.relationship_builder.build(classes)
            self.structure = ProjectStructureModel(classes=classes, relationships=relationships)

        self.logger.info(f"Scan completed: {len(classes)} classes, {len(relationships)} "
                         f"relationships in {metrics['scan']:.3f}s")
        return self.structure

    def parse_files(self, file_paths: Sequence[str]) -> List[ClassModel]:
        """Parse files in input order, sequentially or on a thread pool."""
        if self.config.max_workers > 1 and len(file_paths) > 1:
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                results = list(executor.map(self.parser.parse_file, file_paths))
        else:
            results = [self.parser.parse_file(path) for path in file_paths]

        classes = [class_model for class_model in results if class_model is not None]
        skipped = len(file_paths) - len(classes)
        if skipped:
            self.logger.debug(f"{skipped} files produced no class model")
        return classes

    def get_graph(self) -> nx.MultiDiGraph:
        """Relationship graph of the last scan."""
        return self.relationship_builder.to_graph(self.structure)

    def find_method_usages(self, class_name: str, method_name: str) -> List[UsageExample]:
        return self.usage_miner.find_method_usages(class_name, method_name, self.structure)

    def find_class_usage_patterns(self, class_name: str) -> List[UsageExample]:
        return self.usage_miner.find_class_usage_patterns(class_name, self.structure)

    def get_method_usage_stats(self, class_name: str, method_name: str) -> MethodUsageStats:
        return self.usage_miner.get_method_usage_stats(class_name, method_name, self.structure)

    def collect_method_examples(self, class_name: str, method_name: str) -> Dict[str, Any]:
        """
        Real usages of a method, or synthetic ones when none are found.

        Returns:
            Dictionary with ``real`` and ``synthetic`` example lists
        """
        real = self.find_method_usages(class_name, method_name)
        synthetic = []

        class_model = self.structure.find_class(class_name)
        if not real and class_model is not None:
            for method in class_model.methods:
                if method.name == method_name:
                    synthetic = self.example_generator.generate_method_examples(
                        class_model, method, class_model.role_patterns
                    )
                    break

        self.logger.debug(f"{class_name}.{method_name}: {len(real)} real, "
                          f"{len(synthetic)} synthetic examples")
        return {"real": real, "synthetic": synthetic}

    def collect_class_examples(self, class_name: str) -> Dict[str, Any]:
        """Real class usages, or a synthetic injection/constructor example."""
        real = self.find_class_usage_patterns(class_name)
        synthetic = []

        class_model = self.structure.find_class(class_name)
        if not real and class_model is not None:
            synthetic = self.example_generator.generate_class_usage_examples(
                class_model, class_model.role_patterns
            )
        return {"real": real, "synthetic": synthetic}

    def summarize(self) -> Dict[str, Any]:
        return summarize_architecture(self.structure)
