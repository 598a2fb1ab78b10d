"""Block analysis on top of the block and leaf pipelines.

- analyze_block: block classification + matching block schema + the leaf
  classification of every component inside the subtree
- block_statistics: block counts, average confidence and complexity over
  whole trees
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..context import ClassificationContext, ensure_context
from ..leaf.pipeline import default_classifier
from ..models import BlockClassification, Classification, ComponentType, DesignNode
from ..settings import EngineConfig
from ..signals import iter_descendants
from .pipeline import default_block_classifier
from .schemas import BlockSchema, get_block_schema

logger = logging.getLogger(__name__)


@dataclass
class BlockAnalysis:
    """Everything known about one subtree at block level."""
    node: DesignNode
    classification: Optional[BlockClassification]
    schema: Optional[BlockSchema]
    components: List[Tuple[DesignNode, Classification]] = field(default_factory=list)

    @property
    def is_block(self) -> bool:
        return self.classification is not None

    def summary(self) -> str:
        """One-paragraph human-readable description."""
        if self.classification is None:
            types = ", ".join(c.type.value for _, c in self.components) or "none"
            return (
                f"Not a block. Detected {len(self.components)} component(s): {types}"
            )
        c = self.classification
        lines = [
            f"Classified as: {c.block_type} ({c.category.value})",
            f"Confidence: {c.confidence * 100:.1f}%",
            f"Sub-type: {c.sub_type.value}",
            f"Schema available: {'yes (' + self.schema.block_type + ')' if self.schema else 'no'}",
            "Composition: " + (
                ", ".join(f"{e.component_type.value} x{e.count}" for e in c.composed_of) or "none"
            ),
        ]
        layout = c.layout_pattern
        columns = f" ({layout.columns} columns)" if layout.columns else ""
        lines.append(f"Layout: {layout.type}{columns}, {layout.complexity}")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "node": self.node.id or self.node.name,
            "is_block": self.is_block,
            "classification": self.classification.to_dict() if self.classification else None,
            "schema": self.schema.block_type if self.schema else None,
            "components": [
                {"node": n.id or n.name, **c.to_dict()} for n, c in self.components
            ],
        }


def analyze_block(
    node: DesignNode,
    config: Optional[EngineConfig] = None,
    context: Optional[ClassificationContext] = None,
) -> BlockAnalysis:
    ctx = ensure_context(context, config)
    classification = default_block_classifier().classify(node, ctx)
    schema = None
    if classification is not None:
        schema = get_block_schema(classification.category, classification.sub_type)

    classifier = default_classifier()
    components = []
    for descendant, _ in iter_descendants(node, ctx.config.max_depth):
        result = classifier.classify(descendant, ctx)
        if result.type != ComponentType.CONTAINER:
            components.append((descendant, result))

    return BlockAnalysis(
        node=node,
        classification=classification,
        schema=schema,
        components=components,
    )


# =====================================================================
# Statistics
# =====================================================================

@dataclass
class BlockStatistics:
    total_nodes: int = 0
    total_blocks: int = 0
    blocks_by_category: Dict[str, int] = field(default_factory=dict)
    blocks_by_sub_type: Dict[str, int] = field(default_factory=dict)
    average_confidence: float = 0.0
    average_complexity: float = 0.0

    @property
    def detection_rate(self) -> float:
        return self.total_blocks / self.total_nodes if self.total_nodes else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_nodes": self.total_nodes,
            "total_blocks": self.total_blocks,
            "blocks_by_category": dict(self.blocks_by_category),
            "blocks_by_sub_type": dict(self.blocks_by_sub_type),
            "average_confidence": round(self.average_confidence, 4),
            "average_complexity": round(self.average_complexity, 2),
            "detection_rate": round(self.detection_rate, 4),
        }


def block_statistics(
    roots: Iterable[DesignNode],
    config: Optional[EngineConfig] = None,
    context: Optional[ClassificationContext] = None,
) -> BlockStatistics:
    """Classify every node of every tree as a block and aggregate."""
    ctx = ensure_context(context, config)
    classifier = default_block_classifier()
    stats = BlockStatistics()
    confidence_sum = 0.0
    complexity_sum = 0

    for root in roots:
        nodes = [root] + [n for n, _ in iter_descendants(root, ctx.config.max_depth)]
        for node in nodes:
            stats.total_nodes += 1
            result = classifier.classify(node, ctx)
            if result is None:
                continue
            stats.total_blocks += 1
            confidence_sum += result.confidence
            complexity_sum += result.characteristics.estimated_complexity
            category = result.category.value
            sub_type = result.sub_type.value
            stats.blocks_by_category[category] = stats.blocks_by_category.get(category, 0) + 1
            stats.blocks_by_sub_type[sub_type] = stats.blocks_by_sub_type.get(sub_type, 0) + 1

    if stats.total_blocks:
        stats.average_confidence = confidence_sum / stats.total_blocks
        stats.average_complexity = complexity_sum / stats.total_blocks
    logger.info(
        "Block statistics: %d blocks in %d nodes (avg confidence %.2f)",
        stats.total_blocks, stats.total_nodes, stats.average_confidence,
    )
    return stats
