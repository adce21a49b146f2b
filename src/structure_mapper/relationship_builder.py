"""Cross-class relationship assembly over a complete set of parsed classes."""

from typing import List, Optional, Sequence

import networkx as nx

from .config import CallResolution, StructureMapperConfig
from .models import (
    ClassModel,
    ProjectStructureModel,
    Relationship,
    RelationshipKind,
    TargetKind,
)


class RelationshipGraphBuilder:
    """
    Builds extends, implements, calls and injects edges between classes.

    This is the second pass of a scan and must only run once every file has
    been parsed: call targets are resolved against the complete class list.
    Edges are not deduplicated; repeated edges are a coarse weight signal.
    """

    def __init__(self, config: Optional[StructureMapperConfig] = None):
        self.config = config or StructureMapperConfig()

    def build(self, classes: Sequence[ClassModel]) -> List[Relationship]:
        """
        Emit relationships for every class, in class order.

        Args:
            classes: All parsed classes, in parse order

        Returns:
            Relationships; targets not among ``classes`` are kept as external
        """
        known_names = {class_model.name for class_model in classes}
        relationships = []

        def target_kind(name: str) -> TargetKind:
            return TargetKind.INTERNAL if name in known_names else TargetKind.EXTERNAL

        for class_model in classes:
            if class_model.extends:
                relationships.append(Relationship(
                    source=class_model.name,
                    target=class_model.extends,
                    kind=RelationshipKind.EXTENDS,
                    target_kind=target_kind(class_model.extends),
                ))

            for interface in class_model.implements:
                relationships.append(Relationship(
                    source=class_model.name,
                    target=interface,
                    kind=RelationshipKind.IMPLEMENTS,
                    target_kind=target_kind(interface),
                ))

            for method in class_model.methods:
                for called_name in sorted(method.calls):
                    target = self.resolve_call_target(classes, class_model, called_name)
                    if target is None:
                        continue
                    relationships.append(Relationship(
                        source=class_model.name,
                        target=target.name,
                        kind=RelationshipKind.CALLS,
                        method=method.name,
                        target_kind=TargetKind.INTERNAL,
                    ))

            for injection in class_model.injections:
                relationships.append(Relationship(
                    source=class_model.name,
                    target=injection.field_type,
                    kind=RelationshipKind.INJECTS,
                    target_kind=target_kind(injection.field_type),
                ))

        return relationships

    def resolve_call_target(self, classes: Sequence[ClassModel], source: ClassModel,
                            called_name: str) -> Optional[ClassModel]:
        """
        Find the class a called name most likely belongs to.

        FIRST_MATCH picks the first other class, in parse order, declaring a
        method with that name; overloads and duplicate names across classes are
        not disambiguated. UNIQUE_MATCH resolves only when exactly one other
        class declares it.
        """
        candidates = (
            c for c in classes
            if c is not source and c.name != source.name and c.declares_method(called_name)
        )
        if self.config.call_resolution is CallResolution.FIRST_MATCH:
            return next(candidates, None)

        matches = list(candidates)
        return matches[0] if len(matches) == 1 else None

    def to_graph(self, structure: ProjectStructureModel) -> nx.MultiDiGraph:
        """
        Relationship graph with one node per class or external type name.

        Node and edge attributes hold primitive values only, so the graph can
        be written with ``networkx.write_graphml``.
        """
        graph = nx.MultiDiGraph()

        for class_model in structure.classes:
            graph.add_node(
                class_model.name,
                type="class",
                package=class_model.package,
                file_path=class_model.file_path,
                is_controller=class_model.is_controller,
                roles=",".join(p.type for p in class_model.role_patterns),
            )

        for relationship in structure.relationships:
            if not graph.has_node(relationship.target):
                graph.add_node(relationship.target, type="external")
            graph.add_edge(
                relationship.source,
                relationship.target,
                type=relationship.kind.value,
                method=relationship.method or "",
                resolved=relationship.is_resolved,
            )

        return graph
