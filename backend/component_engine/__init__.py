"""Component classification engine for design-tree exports.

Subpackages:
- leaf: Ordered per-type scorers that label a single node (Button, Card, ...)
- slots: Declarative slot schemas and the recursive slot decomposer
- blocks: Layout/composition analysis and page-section (block) classification
- integrations: Normalisers that turn raw design exports into DesignNode trees
- nodes: Workflow node adapters exposing the engine through the node registry
"""

from .models import (
    BlockCategory,
    BlockClassification,
    BlockSubType,
    Classification,
    ComponentType,
    DesignNode,
    NodeKind,
    SemanticMappingResult,
    SlotMapping,
)
from .settings import EngineConfig

__all__ = [
    "BlockCategory",
    "BlockClassification",
    "BlockSubType",
    "Classification",
    "ComponentType",
    "DesignNode",
    "EngineConfig",
    "NodeKind",
    "SemanticMappingResult",
    "SlotMapping",
]

__version__ = "0.4.0"
