"""Layer grouping of a scanned project for downstream visualization."""

from collections import Counter
from typing import Any, Dict, List

from .models import ClassModel, ProjectStructureModel, RelationshipKind


def _group_for(class_model: ClassModel) -> str:
    types = {pattern.type for pattern in class_model.role_patterns}
    if types & {"CONTROLLER", "REST_CONTROLLER"}:
        return "controllers"
    if "SERVICE" in types:
        return "services"
    if "REPOSITORY" in types:
        return "repositories"
    if "ENTITY" in types:
        return "entities"
    if types:
        return "components"
    # unannotated: data holders have more fields than methods
    if len(class_model.fields) > len(class_model.methods):
        return "entities"
    return "components"


def summarize_architecture(structure: ProjectStructureModel) -> Dict[str, Any]:
    """
    Group classes by architectural role.

    Returns:
        Dictionary with ``layers`` (group -> class names), ``layer_distribution``
        (role-pattern layer -> count) and ``stats``
    """
    layers: Dict[str, List[str]] = {
        "controllers": [],
        "services": [],
        "repositories": [],
        "entities": [],
        "components": [],
    }
    layer_distribution = Counter()

    for class_model in structure.classes:
        layers[_group_for(class_model)].append(class_model.name)
        for pattern in class_model.role_patterns:
            layer_distribution[pattern.layer] += 1

    relationship_counts = {kind.value: 0 for kind in RelationshipKind}
    for relationship in structure.relationships:
        relationship_counts[relationship.kind.value] += 1

    stats = {"total_classes": len(structure.classes)}
    stats.update({group: len(names) for group, names in layers.items()})
    stats["relationships"] = len(structure.relationships)
    stats["relationships_by_kind"] = relationship_counts
    stats["endpoints"] = sum(len(c.endpoints) for c in structure.classes)

    return {
        "layers": layers,
        "layer_distribution": dict(layer_distribution),
        "stats": stats,
    }
