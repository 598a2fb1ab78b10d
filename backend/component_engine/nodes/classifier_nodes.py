"""Workflow nodes running the engine over a raw Figma design tree.

- component_classifier: leaf type of every node, slot decomposition of
  every composite (Card, Dialog, Tabs, ...)
- block_classifier: page-section analysis of every block-like subtree,
  plus aggregate statistics
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Dict, List, Tuple

from ..blocks.integration import analyze_block, block_statistics
from ..context import ClassificationContext
from ..integrations.figma_loader import node_from_figma
from ..leaf.pipeline import default_classifier
from ..logging_config import get_engine_logger
from ..models import DesignNode
from ..settings import DEFAULT_CONFIG, EngineConfig, build_config
from ..signals import iter_descendants
from ..slots.decomposer import map_component
from ..slots.schema import get_default_schemas
from .registry import BaseNodeImpl, register_node_type

logger = logging.getLogger(__name__)

_DESIGN_INPUT = {
    "type": "object",
    "description": "Raw Figma node (REST or plugin export shape)",
}
_ENGINE_INPUT = {
    "type": "object",
    "description": "EngineConfig overrides, e.g. {\"leaf_threshold\": 0.5}",
}


def _engine_config(overrides: Dict[str, Any]) -> EngineConfig:
    if not overrides:
        return DEFAULT_CONFIG
    return build_config(**overrides)


def _walk(root: DesignNode, max_depth: int) -> List[DesignNode]:
    return [root] + [node for node, _ in iter_descendants(root, max_depth)]


class _DesignNodeImpl(BaseNodeImpl):
    """Shared input handling: raw design dict + engine overrides."""

    def load_design(self, inputs: Dict[str, Any]) -> Tuple[DesignNode, ClassificationContext]:
        # handlers are attached on first run, never at import
        get_engine_logger()
        design = self.resolve(inputs, "design")
        if not isinstance(design, dict):
            raise ValueError(f"{self.node_type} [{self.node_id}]: 'design' must be a Figma node dict")
        config = _engine_config(self.resolve(inputs, "engine", {}) or {})
        root = node_from_figma(design, config=config)
        return root, ClassificationContext(config)


@register_node_type(
    node_type="component_classifier",
    display_name="Component Classifier",
    description=(
        "Labels every node of a design tree with a component type and maps "
        "composite components onto their slots."
    ),
    category="analysis",
    input_schema={
        "type": "object",
        "properties": {
            "design": _DESIGN_INPUT,
            "engine": _ENGINE_INPUT,
            "decompose": {"type": "boolean", "default": True},
        },
    },
    output_schema={
        "type": "object",
        "properties": {
            "classifications": {"type": "object", "description": "node id -> classification"},
            "mappings": {"type": "array", "description": "Slot mappings of composites"},
            "type_counts": {"type": "object"},
            "depth_limited": {"type": "boolean"},
        },
    },
    icon="shapes",
    color="#0EA5E9",
)
class ComponentClassifierNode(_DesignNodeImpl):

    async def execute(self, inputs: Dict[str, Any]) -> Dict[str, Any]:
        root, ctx = self.load_design(inputs)
        decompose_composites = bool(self.resolve(inputs, "decompose", True))
        classifier = default_classifier()
        schemas = get_default_schemas()

        classifications = classifier.classify_tree(root, ctx)
        mappings = []
        if decompose_composites:
            for node in _walk(root, ctx.config.max_depth):
                component_type = classifier.classify(node, ctx).type
                if component_type not in schemas:
                    continue
                result = map_component(node, component_type, ctx, schemas=schemas)
                mappings.append({"node": node.id or node.name, **result.to_dict()})

        type_counts = Counter(c.type.value for c in classifications.values())
        logger.info(
            "ComponentClassifierNode [%s]: %d nodes, %d composites mapped",
            self.node_id, len(classifications), len(mappings),
        )
        return {
            "classifications": {k: c.to_dict() for k, c in classifications.items()},
            "mappings": mappings,
            "type_counts": dict(type_counts),
            "depth_limited": ctx.depth_limited,
        }


@register_node_type(
    node_type="block_classifier",
    display_name="Block Classifier",
    description=(
        "Finds page sections (hero, pricing, login, footer, ...) in a design "
        "tree and reports their composition and layout."
    ),
    category="analysis",
    input_schema={
        "type": "object",
        "properties": {
            "design": _DESIGN_INPUT,
            "engine": _ENGINE_INPUT,
        },
    },
    output_schema={
        "type": "object",
        "properties": {
            "blocks": {"type": "array", "description": "Block analyses, document order"},
            "statistics": {"type": "object"},
        },
    },
    icon="layout-template",
    color="#F59E0B",
)
class BlockClassifierNode(_DesignNodeImpl):

    async def execute(self, inputs: Dict[str, Any]) -> Dict[str, Any]:
        root, ctx = self.load_design(inputs)

        blocks = []
        for node in _walk(root, ctx.config.max_depth):
            analysis = analyze_block(node, context=ctx)
            if analysis.is_block:
                blocks.append(analysis.to_dict())

        stats = block_statistics([root], context=ctx)
        logger.info(
            "BlockClassifierNode [%s]: %d blocks found",
            self.node_id, stats.total_blocks,
        )
        return {"blocks": blocks, "statistics": stats.to_dict()}
