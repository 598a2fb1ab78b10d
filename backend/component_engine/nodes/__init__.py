"""Workflow node adapters: registry plus the engine's node types."""

# Import node modules to auto-register node types
from . import classifier_nodes  # noqa: F401 - registers component_classifier, block_classifier

from .registry import (
    NODE_CLASSES,
    NODE_REGISTRY,
    BaseNodeImpl,
    EngineNode,
    NodeDefinition,
    create_node,
    get_node_definition,
    is_node_type_registered,
    list_node_types,
    list_node_types_by_category,
    register_node_type,
)

__all__ = [
    "NODE_CLASSES",
    "NODE_REGISTRY",
    "BaseNodeImpl",
    "EngineNode",
    "NodeDefinition",
    "create_node",
    "get_node_definition",
    "is_node_type_registered",
    "list_node_types",
    "list_node_types_by_category",
    "register_node_type",
]
